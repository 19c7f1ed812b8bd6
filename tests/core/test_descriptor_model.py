import pytest

from decolower.core.descriptors import (
    accessor_descriptor,
    carry_forward,
    coerce_descriptor,
    descriptor_for_members,
    method_descriptor,
)
from decolower.core.error_handling import ClassificationError, ContractViolationError
from decolower.core.outcome import KEEP, Keep, Replace, outcome_of
from decolower.models.descriptor import PropertyDescriptor
from decolower.models.enums import DescriptorKind, MemberKind
from decolower.models.syntax import MemberNode, PropertyKeyNode


def _member(kind, name='value'):
    return MemberNode(kind=kind, key=PropertyKeyNode(text=name), source=f'{name}() {{}}')


def test_method_defaults():
    descriptor = method_descriptor(len)
    assert descriptor.kind == DescriptorKind.DATA
    assert descriptor.value is len
    assert descriptor.enumerable is False
    assert descriptor.configurable is True
    assert descriptor.writable is True


def test_accessor_defaults_keep_missing_slot_empty():
    descriptor = accessor_descriptor(getter=len)
    assert descriptor.is_accessor
    assert descriptor.getter is len
    assert descriptor.setter is None
    assert descriptor.enumerable is True
    assert descriptor.configurable is True
    assert descriptor.writable is None


def test_accessor_needs_a_function():
    with pytest.raises(ValueError):
        accessor_descriptor()


def test_descriptor_cannot_mix_shapes():
    with pytest.raises(ValueError):
        PropertyDescriptor(kind=DescriptorKind.ACCESSOR, getter=len, value=1)
    with pytest.raises(ValueError):
        PropertyDescriptor(kind=DescriptorKind.DATA, setter=len)


def test_from_mapping_records_present_fields_only():
    descriptor = PropertyDescriptor.from_mapping({'value': 3})
    assert descriptor.is_data
    assert descriptor.value == 3
    assert descriptor.model_fields_set == {'kind', 'value'}
    assert not descriptor.is_generic
    generic = PropertyDescriptor.from_mapping({'enumerable': 1})
    assert generic.is_generic
    assert generic.model_fields_set == {'enumerable'}
    assert generic.enumerable is True


def test_merged_onto_nothing_defaults_missing_attributes_to_false():
    descriptor = PropertyDescriptor.from_mapping({'value': 3}).merged_onto(None)
    assert descriptor.value == 3
    assert descriptor.writable is False
    assert descriptor.enumerable is False
    assert descriptor.configurable is False


def test_accessor_mapping_needs_a_function():
    with pytest.raises(ValueError):
        PropertyDescriptor.from_mapping({'get': None})
    with pytest.raises(ValueError):
        PropertyDescriptor(kind=DescriptorKind.ACCESSOR, enumerable=True)


def test_from_mapping_accessor_and_errors():
    descriptor = PropertyDescriptor.from_mapping({'get': len, 'enumerable': True})
    assert descriptor.is_accessor and descriptor.getter is len and descriptor.enumerable
    with pytest.raises(ValueError):
        PropertyDescriptor.from_mapping({'get': len, 'value': 1})
    with pytest.raises(ValueError):
        PropertyDescriptor.from_mapping({'set': 'not callable'})


def test_as_dict_uses_define_property_names():
    assert accessor_descriptor(setter=len).as_dict() == {'set': len, 'enumerable': True, 'configurable': True}
    assert method_descriptor(len).as_dict() == {
        'value': len, 'writable': True, 'enumerable': False, 'configurable': True,
    }


def test_descriptor_for_accessor_pair():
    getter = _member(MemberKind.GETTER)
    setter = _member(MemberKind.SETTER)
    descriptor = descriptor_for_members([getter, setter])
    assert descriptor.getter is getter
    assert descriptor.setter is setter
    assert descriptor.enumerable is True


def test_descriptor_for_method_uses_supplied_function():
    method = _member(MemberKind.METHOD)
    descriptor = descriptor_for_members([method], {id(method): len})
    assert descriptor.value is len


def test_descriptor_for_members_rejects_method_and_getter():
    with pytest.raises(ClassificationError):
        descriptor_for_members([_member(MemberKind.METHOD), _member(MemberKind.GETTER)])


def test_outcome_of_treats_none_as_keep():
    assert outcome_of(None) is KEEP
    assert isinstance(outcome_of(None), Keep)
    assert outcome_of(0) == Replace(0)


def test_carry_forward_keep_and_replace():
    current = method_descriptor(len)
    assert carry_forward(current, KEEP) is current
    replaced = carry_forward(current, Replace({'value': 1, 'writable': True}))
    assert replaced.value == 1 and replaced.writable is True and replaced.configurable is False


def test_coerce_descriptor_rejects_other_values():
    with pytest.raises(ContractViolationError) as exc_info:
        coerce_descriptor(42, decorator='bad')
    assert exc_info.value.decorator == 'bad'
    with pytest.raises(ContractViolationError):
        coerce_descriptor({'get': len, 'value': 2})
