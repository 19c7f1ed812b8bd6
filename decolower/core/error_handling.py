"""
Error handling for decolower.

This module provides the exception hierarchy used throughout the engine.
Every exception carries a context dictionary that is appended to its string
form, so a failure can be traced back to the declaration, decorator and
source location that produced it.
"""
import logging
from typing import Any, Optional, Tuple

logger = logging.getLogger('decolower')


class DecoLowerError(Exception):
    """Base class for all decolower exceptions.

    All exceptions specific to decolower inherit from this class to allow
    for consistent error handling and identification.
    """
    def __init__(self, message: str, **kwargs):
        self.message = message
        self.context = kwargs.get('context', {})

        for key, value in kwargs.items():
            if key != 'context' and value is not None:
                self.context[key] = value

        super().__init__(message)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        context_str = ', '.join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} [Context: {context_str}]"

# ===== Configuration Errors =====

class ConfigurationError(DecoLowerError):
    """Exception raised for issues with configuration settings."""
    pass

class InvalidConfigurationError(ConfigurationError):
    """Exception raised when a configuration setting has an invalid value."""
    def __init__(self, setting: str, value: Any, reason: str, **kwargs):
        message = f"Invalid configuration setting '{setting}': {value}. Reason: {reason}"
        super().__init__(message, setting=setting, value=value, reason=reason, **kwargs)
        self.setting = setting

# ===== Parsing Errors =====

class ParsingError(DecoLowerError):
    """Exception raised when source code cannot be parsed."""
    def __init__(self, message: str, code_snippet: Optional[str] = None,
                 position: Optional[Tuple[int, int]] = None, **kwargs):
        super().__init__(message, code_snippet=code_snippet, position=position, **kwargs)
        self.code_snippet = code_snippet
        self.position = position

class SourceSyntaxError(ParsingError):
    """Exception raised for syntax errors in the source code being parsed."""
    def __init__(self, message: str, language: str, code_snippet: Optional[str] = None,
                 line: Optional[int] = None, column: Optional[int] = None, **kwargs):
        position = (line, column) if line is not None and column is not None else None
        super().__init__(message, code_snippet=code_snippet, position=position,
                         language=language, **kwargs)
        self.language = language
        self.line = line
        self.column = column

class UnsupportedLanguageError(DecoLowerError):
    """Exception raised when an operation is attempted with an unsupported language."""
    def __init__(self, language: str, operation: Optional[str] = None, **kwargs):
        message = f"Unsupported language: '{language}'"
        if operation:
            message += f" for operation: {operation}"
        super().__init__(message, language=language, operation=operation, **kwargs)
        self.language = language

# ===== Desugaring Errors =====

class ClassificationError(DecoLowerError):
    """Exception raised when a decorator list is attached to an ineligible declaration.

    Classification errors are fatal for the declaration: nothing is emitted
    for it.
    """
    def __init__(self, message: str, location: Optional[Any] = None, **kwargs):
        super().__init__(message, location=location, **kwargs)
        self.location = location

class ChainError(DecoLowerError):
    """Exception raised when a decorator invocation fails during chain evaluation."""
    def __init__(self, message: str, decorator: Optional[str] = None, key: Optional[Any] = None,
                 location: Optional[Any] = None, **kwargs):
        super().__init__(message, decorator=decorator, key=key, location=location, **kwargs)
        self.decorator = decorator
        self.key = key
        self.location = location

class ContractViolationError(ChainError):
    """Exception raised when a decorator returns a value of the wrong shape."""
    def __init__(self, returned: Any, expected: str, **kwargs):
        message = f"Decorator returned {type(returned).__name__} {returned!r}; expected {expected}"
        super().__init__(message, **kwargs)
        self.returned = returned

class ResolutionError(DecoLowerError):
    """Exception raised when a decorator or key expression cannot be resolved to a value."""
    def __init__(self, expression: str, reason: str, **kwargs):
        message = f"Cannot resolve '{expression}': {reason}"
        super().__init__(message, expression=expression, **kwargs)
        self.expression = expression

class EmissionError(DecoLowerError):
    """Exception raised when a declaration cannot be rendered in the chosen emission form."""
    def __init__(self, message: str, form: Optional[str] = None, location: Optional[Any] = None, **kwargs):
        super().__init__(message, form=form, location=location, **kwargs)
        self.form = form
        self.location = location

class DefinePropertyError(DecoLowerError):
    """Exception raised when a define-property call is rejected by the target object."""
    def __init__(self, key: Any, reason: str, **kwargs):
        message = f"Cannot redefine property '{key}': {reason}"
        super().__init__(message, key=key, reason=reason, **kwargs)
        self.key = key
