"""
Emitters for the supported output forms.
"""
from typing import Optional

from decolower.core.config import EmitOptions
from decolower.core.emitters.base import EMITTERS, BaseEmitter, emitter
from decolower.core.emitters.class_based import ClassBasedEmitter
from decolower.core.emitters.constructor_function import ConstructorFunctionEmitter
from decolower.core.error_handling import InvalidConfigurationError
from decolower.core.scope import TempScope


def get_emitter(options: Optional[EmitOptions] = None) -> BaseEmitter:
    """
    Create the emitter for ``options.form``.

    Raises:
        InvalidConfigurationError: If no emitter handles the form
    """
    options = options or EmitOptions()
    cls = EMITTERS.get(options.form)
    if cls is None:
        raise InvalidConfigurationError('emission.form', options.form, f'choose one of {[f.value for f in EMITTERS]}')
    return cls(options)


__all__ = ['BaseEmitter', 'TempScope', 'ClassBasedEmitter', 'ConstructorFunctionEmitter', 'EMITTERS', 'emitter',
           'get_emitter']
