"""
Configuration management for decolower.
"""
import copy
import json
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator

from decolower.core.error_handling import ConfigurationError, InvalidConfigurationError
from decolower.models.enums import EmitForm

logger = logging.getLogger(__name__)

_DEFAULTS: Dict[str, Dict[str, Any]] = {
    'emission': {
        'form': EmitForm.CLASS_BASED.value,
        'indent_size': 2,
        'temp_prefix': '_',
    },
    'parsing': {
        'default_language': 'javascript',
    },
    'logging': {
        'level': 'WARNING',
    },
}


class EmitOptions(BaseModel):
    """Validated emission settings"""
    form: EmitForm = EmitForm.CLASS_BASED
    indent_size: int = 2
    temp_prefix: str = '_'

    @field_validator('indent_size')
    @classmethod
    def _positive_indent(cls, value: int) -> int:
        if value < 1:
            raise ValueError('indent_size must be at least 1')
        return value

    @field_validator('temp_prefix')
    @classmethod
    def _identifier_prefix(cls, value: str) -> str:
        if not value or not (value.replace('_', 'a').replace('$', 'a')).isidentifier():
            raise ValueError('temp_prefix must start a valid identifier')
        return value

    @property
    def indent(self) -> str:
        return ' ' * self.indent_size


class Configuration:
    """Configuration manager for decolower."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Configuration, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Initialize the configuration with defaults."""
        self._config = copy.deepcopy(_DEFAULTS)

    def reset(self) -> None:
        self._initialize()

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        try:
            return self._config[section][key]
        except KeyError:
            return default

    def set(self, section: str, key: str, value: Any):
        """Set a configuration value."""
        if section not in self._config:
            self._config[section] = {}
        self._config[section][key] = value

    def update(self, values: Dict[str, Dict[str, Any]]) -> None:
        """Merge a nested mapping of sections into the configuration."""
        for section, entries in values.items():
            if not isinstance(entries, dict):
                raise InvalidConfigurationError(section, entries, 'sections must be objects')
            for key, value in entries.items():
                self.set(section, key, value)

    def load_file(self, path: str) -> None:
        """Load a JSON configuration file and merge it over the current values."""
        try:
            with open(path, 'r', encoding='utf-8') as fh:
                data = json.load(fh)
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {e}", path=path) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Configuration file is not valid JSON: {e}", path=path) from e
        if not isinstance(data, dict):
            raise InvalidConfigurationError('<root>', type(data).__name__, 'expected a JSON object')
        logger.debug(f'Loaded configuration from {path}')
        self.update(data)

    def emit_options(self, form: Optional[str] = None) -> EmitOptions:
        """
        Build validated emission options, optionally overriding the form.

        Raises:
            InvalidConfigurationError: If a setting in the emission section is invalid
        """
        settings = dict(self._config.get('emission', {}))
        if form is not None:
            settings['form'] = form
        try:
            return EmitOptions(**settings)
        except ValueError as e:
            raise InvalidConfigurationError('emission', settings, str(e)) from e

# Initialize configuration
config = Configuration()
