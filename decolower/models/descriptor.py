"""
Property descriptor model.

A descriptor is the installation record for one property: either a data
descriptor (value, writable) or an accessor descriptor (getter and/or
setter), plus the enumerable and configurable attributes.
"""
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, model_validator

from .enums import DescriptorKind

DATA_FIELDS = ('value', 'writable')
ACCESSOR_FIELDS = ('get', 'set')
SHAPE_FIELDS = {'kind', 'value', 'writable', 'getter', 'setter'}


class PropertyDescriptor(BaseModel):
    """Installation record for one property"""
    kind: DescriptorKind = DescriptorKind.DATA
    value: Any = None
    getter: Any = None
    setter: Any = None
    enumerable: bool = False
    configurable: bool = False
    writable: Optional[bool] = None
    model_config = {'arbitrary_types_allowed': True, 'validate_assignment': True}

    @model_validator(mode='after')
    def _check_shape(self) -> 'PropertyDescriptor':
        if self.kind == DescriptorKind.ACCESSOR:
            if self.value is not None or self.writable is not None:
                raise ValueError('accessor descriptors cannot carry value or writable')
            if self.getter is None and self.setter is None:
                raise ValueError('accessor descriptors need a getter or a setter')
        elif self.getter is not None or self.setter is not None:
            raise ValueError('data descriptors cannot carry getter or setter')
        return self

    @property
    def is_accessor(self) -> bool:
        return self.kind == DescriptorKind.ACCESSOR

    @property
    def is_data(self) -> bool:
        return self.kind == DescriptorKind.DATA

    @property
    def is_generic(self) -> bool:
        """True when only enumerable/configurable were given, so the shape comes from the existing property."""
        return not self.model_fields_set & SHAPE_FIELDS

    @classmethod
    def from_mapping(cls, fields: Mapping[str, Any]) -> 'PropertyDescriptor':
        """
        Build a descriptor from a mapping that uses the define-property field
        names (``value``, ``writable``, ``get``, ``set``, ``enumerable``,
        ``configurable``). Only the fields present in the mapping are set, so
        ``model_fields_set`` tells ``merged_onto`` which ones to take over.

        Raises:
            ValueError: If the mapping mixes data and accessor fields
        """
        has_accessor = any(name in fields for name in ACCESSOR_FIELDS + ('getter', 'setter'))
        has_data = any(name in fields for name in DATA_FIELDS)
        if has_accessor and has_data:
            raise ValueError('descriptor mixes data and accessor fields')
        present: Dict[str, Any] = {
            name: bool(fields[name]) for name in ('enumerable', 'configurable') if name in fields
        }
        if has_accessor:
            for name, aliases in (('getter', ('get', 'getter')), ('setter', ('set', 'setter'))):
                for alias in aliases:
                    if alias in fields:
                        part = fields[alias]
                        if part is not None and not callable(part):
                            raise ValueError(f'accessor function is not callable: {part!r}')
                        present[name] = part
                        break
            return cls(kind=DescriptorKind.ACCESSOR, **present)
        if has_data:
            if 'value' in fields:
                present['value'] = fields['value']
            if 'writable' in fields:
                present['writable'] = bool(fields['writable'])
            return cls(kind=DescriptorKind.DATA, **present)
        return cls(**present)

    def merged_onto(self, existing: Optional['PropertyDescriptor'] = None) -> 'PropertyDescriptor':
        """
        The complete descriptor a define-property call with this (possibly
        partial) descriptor leaves behind. Fields that were not set explicitly
        keep the existing property's values, or default to false when there is
        no existing property or its shape changes.
        """
        explicit = self.model_fields_set
        if self.is_generic:
            kind = existing.kind if existing is not None else DescriptorKind.DATA
        else:
            kind = self.kind
        same_shape = existing if existing is not None and existing.kind == kind else None
        fields: Dict[str, Any] = {'kind': kind}
        for name in ('enumerable', 'configurable'):
            if name in explicit:
                fields[name] = getattr(self, name)
            else:
                fields[name] = getattr(existing, name) if existing is not None else False
        for name in ('getter', 'setter') if kind == DescriptorKind.ACCESSOR else ('value', 'writable'):
            if name in explicit:
                fields[name] = getattr(self, name)
            elif same_shape is not None:
                fields[name] = getattr(same_shape, name)
        if kind == DescriptorKind.DATA:
            fields['writable'] = bool(fields.get('writable'))
        return PropertyDescriptor(**fields)

    def as_dict(self) -> Dict[str, Any]:
        """Return the descriptor using define-property field names."""
        if self.is_accessor:
            fields: Dict[str, Any] = {}
            if self.getter is not None:
                fields['get'] = self.getter
            if self.setter is not None:
                fields['set'] = self.setter
        else:
            fields = {'value': self.value, 'writable': bool(self.writable)}
        fields['enumerable'] = self.enumerable
        fields['configurable'] = self.configurable
        return fields
