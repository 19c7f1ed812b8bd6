import pytest

from decolower.core.descriptors import accessor_descriptor, method_descriptor
from decolower.core.error_handling import DefinePropertyError
from decolower.models.descriptor import PropertyDescriptor
from decolower.runtime.objects import JSFunction, JSObject, to_property_key


def test_property_keys_are_normalized():
    assert to_property_key(1) == '1'
    assert to_property_key(1.0) == '1'
    assert to_property_key(True) == 'true'
    assert to_property_key('name') == 'name'


def test_function_prototype_points_back():
    Base = JSFunction('Base')
    Derived = JSFunction('Derived', parent=Base)
    assert Base.prototype.get('constructor') is Base
    assert Derived.proto is Base
    assert Derived.prototype.proto is Base.prototype
    assert Base.prototype.define_log == ['constructor']


def test_get_walks_prototype_chain_and_calls_getters():
    base = JSObject()
    base.define_property('greeting', accessor_descriptor(getter=lambda this: f'hi from {this.label}'))
    child = JSObject(proto=base, label='child')
    assert child.get('greeting') == 'hi from child'
    assert child.get('missing') is None
    assert not child.has_own_property('greeting')


def test_keys_lists_enumerable_properties_only():
    obj = JSObject()
    obj.define_property('hidden', method_descriptor(len))
    obj.define_property('shown', accessor_descriptor(getter=len))
    assert obj.own_keys() == ['hidden', 'shown']
    assert obj.keys() == ['shown']


def test_descriptors_are_copied():
    obj = JSObject()
    descriptor = method_descriptor(len)
    obj.define_property('m', descriptor)
    descriptor.writable = False
    copy = obj.get_own_property_descriptor('m')
    assert copy.writable is True
    copy.enumerable = True
    assert obj.get_own_property_descriptor('m').enumerable is False


def test_non_configurable_properties_refuse_changes():
    obj = JSObject()
    frozen = PropertyDescriptor(value=1, writable=False, enumerable=False, configurable=False)
    obj.define_property('x', frozen)
    with pytest.raises(DefinePropertyError):
        obj.define_property('x', PropertyDescriptor(value=2, writable=False, enumerable=False, configurable=False))
    with pytest.raises(DefinePropertyError):
        obj.define_property('x', method_descriptor(len))
    obj.define_property('x', frozen)
    assert obj.define_log == ['x', 'x']


def test_partial_descriptor_keeps_existing_attributes():
    obj = JSObject()
    obj.define_property('m', method_descriptor(len))
    obj.define_property('m', PropertyDescriptor.from_mapping({'value': 1}))
    descriptor = obj.get_own_property_descriptor('m')
    assert descriptor.value == 1
    assert descriptor.writable is True
    assert descriptor.enumerable is False
    assert descriptor.configurable is True


def test_partial_descriptor_on_new_property_defaults_to_false():
    obj = JSObject()
    obj.define_property('x', PropertyDescriptor.from_mapping({'value': 3}))
    descriptor = obj.get_own_property_descriptor('x')
    assert descriptor.value == 3
    assert descriptor.writable is False
    assert descriptor.enumerable is False
    assert descriptor.configurable is False


def test_generic_descriptor_keeps_shape_and_functions():
    obj = JSObject()
    obj.define_property('a', accessor_descriptor(getter=len, setter=repr))
    obj.define_property('a', PropertyDescriptor.from_mapping({'enumerable': False}))
    descriptor = obj.get_own_property_descriptor('a')
    assert descriptor.is_accessor
    assert descriptor.getter is len and descriptor.setter is repr
    assert descriptor.enumerable is False
    assert descriptor.configurable is True


def test_shape_change_keeps_attributes_but_not_slots():
    obj = JSObject()
    obj.define_property('a', accessor_descriptor(getter=len))
    obj.define_property('a', PropertyDescriptor.from_mapping({'value': 5}))
    descriptor = obj.get_own_property_descriptor('a')
    assert descriptor.is_data
    assert descriptor.value == 5
    assert descriptor.writable is False
    assert descriptor.enumerable is True
    assert descriptor.configurable is True


def test_non_configurable_property_accepts_unchanged_partial_descriptor():
    obj = JSObject()
    obj.define_property('x', PropertyDescriptor(value=1, writable=False, enumerable=True, configurable=False))
    obj.define_property('x', PropertyDescriptor.from_mapping({'enumerable': True}))
    with pytest.raises(DefinePropertyError):
        obj.define_property('x', PropertyDescriptor.from_mapping({'writable': True}))
    assert obj.get_own_property_descriptor('x').value == 1
