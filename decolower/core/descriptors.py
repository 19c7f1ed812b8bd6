"""
Descriptor Model.

Builds the default descriptor implied by bare (undecorated) syntax and
implements the rule that threads a descriptor through a decorator chain.
"""
import logging
from typing import Any, Iterable, Optional

from decolower.core.error_handling import ClassificationError, ContractViolationError
from decolower.core.outcome import Keep, Outcome, Replace
from decolower.models.descriptor import PropertyDescriptor
from decolower.models.enums import DescriptorKind, MemberKind
from decolower.models.syntax import MemberNode

logger = logging.getLogger(__name__)


def method_descriptor(function: Any) -> PropertyDescriptor:
    """Default descriptor for a method: non-enumerable, configurable, writable."""
    return PropertyDescriptor(
        kind=DescriptorKind.DATA,
        value=function,
        enumerable=False,
        configurable=True,
        writable=True,
    )


def accessor_descriptor(getter: Any = None, setter: Any = None) -> PropertyDescriptor:
    """Default descriptor for a get/set pair: enumerable and configurable."""
    if getter is None and setter is None:
        raise ValueError('an accessor descriptor needs a getter or a setter')
    return PropertyDescriptor(
        kind=DescriptorKind.ACCESSOR,
        getter=getter,
        setter=setter,
        enumerable=True,
        configurable=True,
    )


def descriptor_for_members(members: Iterable[MemberNode], functions: Optional[dict] = None) -> PropertyDescriptor:
    """
    Build the default descriptor for the member(s) that share one key.

    Args:
        members: A single method, or the getter and/or setter of one key
        functions: Optional mapping of ``id(member)`` to the function value
            realizing it; the member node itself stands in when absent

    Returns:
        The default descriptor

    Raises:
        ClassificationError: If the members do not form a method or accessor pair
    """
    functions = functions or {}
    members = list(members)
    methods = [m for m in members if m.kind == MemberKind.METHOD]
    getters = [m for m in members if m.kind == MemberKind.GETTER]
    setters = [m for m in members if m.kind == MemberKind.SETTER]
    if methods and (getters or setters) or len(methods) > 1 or len(getters) > 1 or len(setters) > 1:
        raise ClassificationError(
            'Members sharing a key must be one method or one get/set pair',
            location=members[0].range if members else None,
        )
    if methods:
        method = methods[0]
        return method_descriptor(functions.get(id(method), method))
    if not getters and not setters:
        raise ClassificationError('No method or accessor to describe')
    getter = functions.get(id(getters[0]), getters[0]) if getters else None
    setter = functions.get(id(setters[0]), setters[0]) if setters else None
    return accessor_descriptor(getter, setter)


def coerce_descriptor(returned: Any, **context) -> PropertyDescriptor:
    """
    Check a decorator's non-absent return value against the descriptor contract.

    A returned ``PropertyDescriptor`` is taken as-is, even when it is the same
    object the decorator was handed and mutated. Mappings are read with
    define-property field names.

    Raises:
        ContractViolationError: If the value is not descriptor-shaped
    """
    if isinstance(returned, PropertyDescriptor):
        return returned
    if isinstance(returned, dict):
        try:
            return PropertyDescriptor.from_mapping(returned)
        except ValueError as e:
            raise ContractViolationError(returned, f'a valid descriptor ({e})', **context) from e
    raise ContractViolationError(returned, 'a property descriptor or nothing', **context)


def carry_forward(current: PropertyDescriptor, outcome: Outcome, **context) -> PropertyDescriptor:
    """
    Apply the merge rule: Keep carries ``current`` unchanged, Replace
    substitutes the returned descriptor in full.
    """
    if isinstance(outcome, Keep):
        return current
    if isinstance(outcome, Replace):
        return coerce_descriptor(outcome.value, **context)
    raise TypeError(f'Unknown outcome: {outcome!r}')
