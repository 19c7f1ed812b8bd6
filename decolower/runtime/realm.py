"""
Runtime interpreter for classified declarations.

A Realm executes what the emitted code would do, but against the Python
object model: it builds the undecorated class or object with the default
descriptors, captures computed keys once, resolves each unit's decorators in
source order, evaluates the chain and installs the result when a decorator
replaced it.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from decolower.core.chain import ChainResult, DecoratorChainEvaluator
from decolower.core.classifier import DeclarationClassifier
from decolower.core.descriptors import accessor_descriptor, method_descriptor
from decolower.core.error_handling import DecoLowerError, ResolutionError
from decolower.core.error_utilities import ErrorCollection
from decolower.models.descriptor import PropertyDescriptor
from decolower.models.enums import DecorationLevel, DescriptorKind, MemberKind, TargetKind
from decolower.models.syntax import ClassDeclaration, MemberNode, ObjectLiteral
from decolower.models.unit import DecorationUnit
from decolower.runtime.objects import JSFunction, JSObject, SourceValue
from decolower.runtime.resolver import NamespaceResolver

logger = logging.getLogger(__name__)


@dataclass
class Realization:
    """Outcome of running one declaration"""
    value: Any
    units: List[DecorationUnit] = field(default_factory=list)
    results: List[Tuple[DecorationUnit, ChainResult]] = field(default_factory=list)

    def result_for(self, key: Any) -> Optional[ChainResult]:
        for unit, result in self.results:
            if unit.key is not None and (unit.key.name == key or unit.key.snapshot == key):
                return result
        return None


class Realm:
    """Runs classified declarations against live Python decorators."""

    def __init__(self, resolver: Union[NamespaceResolver, Dict[str, Any]],
                 evaluator: Optional[DecoratorChainEvaluator] = None,
                 classifier: Optional[DeclarationClassifier] = None):
        if not isinstance(resolver, NamespaceResolver):
            resolver = NamespaceResolver(resolver)
        self.resolver = resolver
        self.evaluator = evaluator or DecoratorChainEvaluator()
        self.classifier = classifier or DeclarationClassifier()

    def realize_class(self, declaration: ClassDeclaration) -> Realization:
        """
        Build the class described by ``declaration`` and run its decorators.

        Returns:
            Realization whose value is the final bound class

        Raises:
            ClassificationError: If the declaration has ineligible decorators
            ChainError: If a decorator fails
            ResolutionError: If a decorator or key expression cannot be resolved
        """
        units = self.classifier.classify_class(declaration)
        parent = None
        if declaration.heritage:
            parent = self.resolver.evaluate(declaration.heritage)
            if not isinstance(parent, JSFunction):
                raise ResolutionError(declaration.heritage, 'heritage is not a constructor')
        constructor = JSFunction(declaration.binding_name, source=declaration.constructor, parent=parent)
        keys = self._realize_keys(declaration.members, units)
        self._install_members(declaration.members, keys, constructor.prototype, constructor)

        realization = Realization(value=constructor, units=units)
        for unit in units:
            if unit.level == DecorationLevel.CLASS:
                decorators = self._resolve_all(unit)
                result = self.evaluator.evaluate_class(
                    constructor, decorators, labels=[d.text for d in unit.decorators], location=unit.range
                )
                realization.value = result.value
            else:
                target = constructor if unit.target.kind == TargetKind.CONSTRUCTOR else constructor.prototype
                result = self._run_member_unit(unit, target, keys)
            realization.results.append((unit, result))
        logger.debug(f'Realized class {declaration.binding_name} with {len(units)} units')
        return realization

    def realize_object(self, literal: ObjectLiteral) -> Realization:
        """Build the object described by ``literal`` and run its member decorators."""
        units = self.classifier.classify_object(literal, '_obj')
        obj = JSObject(label='_obj')
        keys = self._realize_keys(literal.members, units)
        self._install_members(literal.members, keys, obj, None)
        realization = Realization(value=obj, units=units)
        for unit in units:
            realization.results.append((unit, self._run_member_unit(unit, obj, keys)))
        return realization

    def realize_all(self, declarations: Sequence[Union[ClassDeclaration, ObjectLiteral]]
                    ) -> Tuple[List[Realization], ErrorCollection]:
        """
        Realize independent declarations; a failure in one never affects the others.
        """
        errors = ErrorCollection()
        realizations = []
        for declaration in declarations:
            try:
                if isinstance(declaration, ClassDeclaration):
                    realizations.append(self.realize_class(declaration))
                else:
                    realizations.append(self.realize_object(declaration))
            except DecoLowerError as e:
                errors.add(e, getattr(declaration, 'name', None) or declaration.kind.value, 'realize')
        return realizations, errors

    def _run_member_unit(self, unit: DecorationUnit, target: JSObject, keys: Dict[int, Any]) -> ChainResult:
        key = keys[id(unit.members[0])]
        decorators = self._resolve_all(unit)
        initial = target.get_own_property_descriptor(key)
        result = self.evaluator.evaluate_member(
            target, key, decorators, initial, labels=[d.text for d in unit.decorators], location=unit.range
        )
        self.evaluator.install(target, key, result)
        return result

    def _resolve_all(self, unit: DecorationUnit) -> List[Any]:
        return [self.resolver.resolve(d) for d in unit.decorators]

    def _realize_keys(self, members: Sequence[MemberNode], units: Sequence[DecorationUnit]) -> Dict[int, Any]:
        """Evaluate every member key once, in source order; computed accessor pairs share one snapshot."""
        shared: Dict[int, int] = {}
        for unit in units:
            if unit.key is not None and unit.key.computed:
                for member in unit.members[1:]:
                    shared[id(member)] = id(unit.members[0])
        keys: Dict[int, Any] = {}
        for member in members:
            if member.key is None:
                continue
            if id(member) in shared:
                keys[id(member)] = keys[shared[id(member)]]
            elif member.key.computed:
                keys[id(member)] = self.resolver.evaluate(member.key.text)
            else:
                keys[id(member)] = member.key.static_name
        return keys

    def _install_members(self, members: Sequence[MemberNode], keys: Dict[int, Any],
                         home: JSObject, constructor: Optional[JSFunction]) -> None:
        """Create the properties bare syntax would create, using the default descriptors."""
        for member in members:
            if member.key is None or member.kind in (MemberKind.CONSTRUCTOR, MemberKind.COMMENT, MemberKind.OTHER):
                continue
            if member.kind == MemberKind.FIELD and not member.is_static:
                continue
            target = constructor if (member.is_static and constructor is not None) else home
            key = keys[id(member)]
            if member.kind == MemberKind.METHOD:
                target.define_property(key, method_descriptor(JSFunction(str(key), source=member)))
            elif member.is_accessor:
                function = JSFunction(str(key), source=member)
                existing = target.get_own_property_descriptor(key)
                if existing is not None and existing.kind == DescriptorKind.ACCESSOR:
                    if member.kind == MemberKind.GETTER:
                        existing.getter = function
                    else:
                        existing.setter = function
                    target.define_property(key, existing)
                elif member.kind == MemberKind.GETTER:
                    target.define_property(key, accessor_descriptor(getter=function))
                else:
                    target.define_property(key, accessor_descriptor(setter=function))
            else:
                value = SourceValue(member.value) if member.value is not None else None
                target.define_property(key, PropertyDescriptor(
                    kind=DescriptorKind.DATA, value=value, writable=True, enumerable=True, configurable=True,
                ))
