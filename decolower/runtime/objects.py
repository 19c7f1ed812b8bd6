"""
A small object model with JavaScript property semantics.

Properties are stored as PropertyDescriptor records and written only via
``define_property``, which makes every installation the engine performs
observable through ``define_log``.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from decolower.core.error_handling import DefinePropertyError
from decolower.models.descriptor import PropertyDescriptor
from decolower.models.enums import DescriptorKind

logger = logging.getLogger(__name__)


def to_property_key(key: Any) -> Any:
    """Normalize a realized key the way property-key conversion does: numbers become strings."""
    if isinstance(key, bool):
        return str(key).lower()
    if isinstance(key, int):
        return str(key)
    if isinstance(key, float):
        return str(int(key)) if key.is_integer() else repr(key)
    return key


class JSObject:
    """An object whose own properties are descriptors."""

    def __init__(self, proto: Optional['JSObject'] = None, label: Optional[str] = None):
        self.proto = proto
        self.label = label
        self._properties: Dict[Any, PropertyDescriptor] = {}
        self.define_log: List[Any] = []

    def define_property(self, key: Any, descriptor: PropertyDescriptor) -> None:
        """
        Create or update an own property.

        Fields the descriptor does not set explicitly keep the existing
        property's values; on a new property they default to false. An
        existing non-configurable property may not change shape or
        enumerability, nor become writable again.

        Raises:
            DefinePropertyError: If the existing property refuses the change
        """
        key = to_property_key(key)
        existing = self._properties.get(key)
        if existing is not None and not existing.configurable:
            self._check_non_configurable(key, existing, descriptor)
        self.define_log.append(key)
        merged = descriptor.merged_onto(existing)
        self._properties[key] = merged
        logger.debug(f'define_property({self.label or "object"}, {key!r}) -> {merged.kind.value}')

    def get_own_property_descriptor(self, key: Any) -> Optional[PropertyDescriptor]:
        """Return a copy of the own descriptor for ``key``, or None."""
        descriptor = self._properties.get(to_property_key(key))
        return descriptor.model_copy() if descriptor is not None else None

    def has_own_property(self, key: Any) -> bool:
        return to_property_key(key) in self._properties

    def own_keys(self) -> List[Any]:
        return list(self._properties)

    def keys(self) -> List[Any]:
        """Own enumerable keys in insertion order."""
        return [k for k, d in self._properties.items() if d.enumerable]

    def get(self, key: Any, receiver: Optional['JSObject'] = None) -> Any:
        """Read a property through the prototype chain, invoking getters with ``receiver``."""
        key = to_property_key(key)
        holder: Optional[JSObject] = self
        while holder is not None:
            descriptor = holder._properties.get(key)
            if descriptor is not None:
                if descriptor.kind == DescriptorKind.ACCESSOR:
                    if descriptor.getter is None:
                        return None
                    return descriptor.getter(receiver if receiver is not None else self)
                return descriptor.value
            holder = holder.proto
        return None

    @staticmethod
    def _check_non_configurable(key: Any, existing: PropertyDescriptor, incoming: PropertyDescriptor) -> None:
        explicit = incoming.model_fields_set
        if 'configurable' in explicit and incoming.configurable:
            raise DefinePropertyError(key, 'property is not configurable')
        if 'enumerable' in explicit and incoming.enumerable != existing.enumerable:
            raise DefinePropertyError(key, 'cannot change enumerability')
        if incoming.is_generic:
            return
        if incoming.kind != existing.kind:
            raise DefinePropertyError(key, 'cannot change between data and accessor')
        if existing.is_data and not existing.writable:
            if ('writable' in explicit and incoming.writable) or \
                    ('value' in explicit and incoming.value is not existing.value):
                raise DefinePropertyError(key, 'property is read-only')
        if existing.is_accessor:
            if ('getter' in explicit and incoming.getter is not existing.getter) or \
                    ('setter' in explicit and incoming.setter is not existing.setter):
                raise DefinePropertyError(key, 'cannot replace accessor functions')

    def __repr__(self) -> str:
        return f'<JSObject {self.label or ""} {self.own_keys()!r}>'


class JSFunction(JSObject):
    """A callable object with a ``prototype`` property object, like a constructor function."""

    def __init__(self, name: str = '', implementation: Optional[Callable] = None, source: Any = None,
                 parent: Optional['JSFunction'] = None):
        super().__init__(proto=parent, label=name)
        self.name = name
        self.implementation = implementation
        self.source = source
        self.prototype = JSObject(
            proto=parent.prototype if parent is not None else None,
            label=f'{name}.prototype',
        )
        self.prototype.define_property('constructor', PropertyDescriptor(
            kind=DescriptorKind.DATA, value=self, writable=True, enumerable=False, configurable=True,
        ))

    def __call__(self, *args, **kwargs):
        if self.implementation is None:
            return None
        return self.implementation(*args, **kwargs)

    def __repr__(self) -> str:
        return f'<JSFunction {self.name}>'


class SourceValue:
    """Opaque stand-in for an expression the runtime does not evaluate (e.g. a field initializer)."""

    def __init__(self, text: str):
        self.text = text

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, SourceValue) and other.text == self.text

    def __hash__(self) -> int:
        return hash(self.text)

    def __repr__(self) -> str:
        return f'SourceValue({self.text!r})'
