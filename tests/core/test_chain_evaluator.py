import logging

import pytest

from decolower.core.chain import ChainPlan, DecoratorChainEvaluator
from decolower.core.descriptors import method_descriptor
from decolower.core.error_handling import ChainError, ContractViolationError
from decolower.models.descriptor import PropertyDescriptor
from decolower.runtime.objects import JSFunction, JSObject

logger = logging.getLogger(__name__)


@pytest.fixture
def evaluator():
    return DecoratorChainEvaluator()


@pytest.fixture
def target():
    obj = JSObject(label='Target.prototype')
    obj.define_property('method', method_descriptor(len))
    return obj


def _recorder(calls, name, returns=None):
    def decorator(target, key, descriptor):
        calls.append(name)
        return returns
    decorator.__name__ = name
    return decorator


def test_plan_orders():
    plan = ChainPlan.for_decorators(['a', 'b', 'c'])
    assert [s.decorator for s in plan.evaluation_order] == ['a', 'b', 'c']
    assert [s.decorator for s in plan.application_order] == ['c', 'b', 'a']
    assert [s.position for s in plan.application_order] == [2, 1, 0]


def test_decorators_apply_innermost_first(evaluator, target):
    calls = []
    decorators = [_recorder(calls, 'a'), _recorder(calls, 'b'), _recorder(calls, 'c')]
    result = evaluator.evaluate_member(target, 'method', decorators, target.get_own_property_descriptor('method'))
    assert calls == ['c', 'b', 'a']
    assert [i.label for i in result.invocations] == ['c', 'b', 'a']


def test_outer_decorator_sees_inner_replacement(evaluator, target):
    seen = []
    replacement = PropertyDescriptor(value='inner', writable=False, enumerable=True, configurable=True)

    def inner(target, key, descriptor):
        return replacement

    def outer(target, key, descriptor):
        seen.append(descriptor.value)

    result = evaluator.evaluate_member(target, 'method', [outer, inner], target.get_own_property_descriptor('method'))
    assert seen == ['inner']
    assert result.replaced is True
    assert result.value is replacement


def test_keep_does_not_install(evaluator, target):
    def mutate(target, key, descriptor):
        descriptor.enumerable = True

    before = list(target.define_log)
    result = evaluator.evaluate_member(target, 'method', [mutate], target.get_own_property_descriptor('method'))
    assert result.replaced is False
    assert evaluator.install(target, 'method', result) is False
    assert target.define_log == before
    assert target.get_own_property_descriptor('method').enumerable is False


def test_replacement_is_installed_once(evaluator, target):
    def readonly(target, key, descriptor):
        descriptor.writable = False
        return descriptor

    result = evaluator.evaluate_member(target, 'method', [readonly], target.get_own_property_descriptor('method'))
    assert evaluator.install(target, 'method', result) is True
    assert target.define_log == ['method', 'method']
    assert target.get_own_property_descriptor('method').writable is False


def test_mapping_return_replaces_chain_descriptor_and_merges_on_install(evaluator, target):
    def plain(target, key, descriptor):
        return {'value': 1}

    result = evaluator.evaluate_member(target, 'method', [plain], target.get_own_property_descriptor('method'))
    assert result.value.value == 1
    assert result.value.model_fields_set == {'kind', 'value'}
    assert evaluator.install(target, 'method', result) is True
    installed = target.get_own_property_descriptor('method')
    assert installed.value == 1
    assert installed.writable is True
    assert installed.enumerable is False
    assert installed.configurable is True


def test_non_descriptor_return_is_a_contract_violation(evaluator, target):
    def bad(target, key, descriptor):
        return 42

    with pytest.raises(ContractViolationError) as exc_info:
        evaluator.evaluate_member(target, 'method', [bad], target.get_own_property_descriptor('method'),
                                  labels=['bad'])
    assert exc_info.value.decorator == 'bad'
    assert exc_info.value.key == 'method'


def test_decorator_exception_becomes_chain_error(evaluator, target):
    def explode(target, key, descriptor):
        raise RuntimeError('boom')

    with pytest.raises(ChainError) as exc_info:
        evaluator.evaluate_member(target, 'method', [explode], target.get_own_property_descriptor('method'))
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert 'boom' in str(exc_info.value)


def test_non_callable_decorator(evaluator, target):
    with pytest.raises(ChainError):
        evaluator.evaluate_member(target, 'method', ['nope'], target.get_own_property_descriptor('method'))


def test_class_chain_keeps_or_replaces(evaluator):
    original = JSFunction('Foo')
    replacement = JSFunction('Wrapped')
    calls = []

    def keep(cls):
        calls.append(('keep', cls))

    def wrap(cls):
        calls.append(('wrap', cls))
        return replacement

    result = evaluator.evaluate_class(original, [keep, wrap])
    logger.debug(f'class chain calls: {calls}')
    assert calls == [('wrap', original), ('keep', replacement)]
    assert result.value is replacement
    assert result.replaced is True


def test_class_chain_without_return_keeps_binding(evaluator):
    original = JSFunction('Foo')
    result = evaluator.evaluate_class(original, [lambda cls: None])
    assert result.value is original
    assert result.replaced is False


def test_class_chain_rejects_non_constructor(evaluator):
    with pytest.raises(ContractViolationError):
        evaluator.evaluate_class(JSFunction('Foo'), [lambda cls: 5])
