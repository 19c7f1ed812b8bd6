"""
Base emitter for lowered declarations.

Both emission forms share the decorator application sequence: decorator
expressions are evaluated into temporaries in source order, the initial
descriptor is rebuilt from what bare syntax installed, each decorator is
applied innermost-first and the descriptor is redefined only when a
decorator returned something. The forms differ only in how the undecorated
declaration itself is written.
"""
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple, Type, Union

from decolower.core.chain import ChainPlan
from decolower.core.config import EmitOptions
from decolower.core.formatting import BraceFormatter
from decolower.core.scope import TempScope
from decolower.models.descriptor import PropertyDescriptor
from decolower.models.enums import DecorationLevel, EmitForm, MemberKind
from decolower.models.syntax import ClassDeclaration, MemberNode, ObjectLiteral
from decolower.models.unit import DecorationUnit

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r'^[A-Za-z_$][\w$]*$')

EMITTERS: Dict[EmitForm, Type['BaseEmitter']] = {}

# id(member) -> (snapshot name, whether this member assigns it)
SnapshotPlan = Dict[int, Tuple[str, bool]]


class BaseEmitter(ABC):
    """Renders a classified declaration as decorator-free source."""
    FORM: EmitForm = None

    def __init__(self, options: EmitOptions):
        self.options = options
        self.formatter = BraceFormatter(options.indent_size)

    def emit(self, declaration: Union[ClassDeclaration, ObjectLiteral], units: Sequence[DecorationUnit],
             scope: Optional[TempScope] = None) -> str:
        """Render ``declaration``; ``scope`` must be the one its units were classified with."""
        scope = scope or TempScope(self.options.temp_prefix)
        if isinstance(declaration, ClassDeclaration):
            return self.emit_class(declaration, units, scope)
        return self.emit_object(declaration, units, scope)

    def emit_class(self, declaration: ClassDeclaration, units: Sequence[DecorationUnit], scope: TempScope) -> str:
        """
        Render a class as an immediately invoked function that defines the
        undecorated class, applies every unit and returns the final binding.

        Declarations become a binding statement (keeping ``export``), class
        expressions stay expressions.
        """
        binding = declaration.name or scope.reserve('class')
        self._declare_snapshots(units, scope)
        statements = self.class_definition(declaration, units, scope, binding)
        for unit in units:
            statements.extend(self.unit_statements(unit, scope))
        statements.append(f'return {binding};')
        expression = self.wrap(self._with_declarations(statements, scope))
        logger.debug(f'Emitted class {binding} ({self.FORM.value}, {len(units)} units)')
        if declaration.is_expression:
            return expression
        statement = f'let {binding} = {expression};'
        if declaration.export == 'default':
            return f'{statement}\nexport default {binding};'
        if declaration.export:
            return f'export {statement}'
        return statement

    def emit_object(self, literal: ObjectLiteral, units: Sequence[DecorationUnit], scope: TempScope) -> str:
        """Render an object literal as an expression that builds and decorates it."""
        binding = scope.shared('obj')
        self._declare_snapshots(units, scope)
        statements = self.object_definition(literal, units, scope, binding)
        for unit in units:
            statements.extend(self.unit_statements(unit, scope))
        statements.append(f'return {binding};')
        return self.wrap(self._with_declarations(statements, scope))

    @abstractmethod
    def class_definition(self, declaration: ClassDeclaration, units: Sequence[DecorationUnit],
                         scope: TempScope, binding: str) -> List[str]:
        """Statements that create the undecorated class under ``binding``."""

    @abstractmethod
    def object_definition(self, literal: ObjectLiteral, units: Sequence[DecorationUnit], scope: TempScope,
                          binding: str) -> List[str]:
        """Statements that create the undecorated object under ``binding``."""

    @abstractmethod
    def wrap(self, statements: List[str]) -> str:
        """Wrap statements in an immediately invoked function expression."""

    def unit_statements(self, unit: DecorationUnit, scope: TempScope) -> List[str]:
        if not unit.decorators:
            return []
        plan = ChainPlan.for_decorators([scope.fresh('dec') for _ in unit.decorators])
        statements = [f'{step.decorator} = {unit.decorators[step.position].text};' for step in plan.evaluation_order]
        result = scope.shared('res')
        if unit.level == DecorationLevel.CLASS:
            binding = unit.target.binding
            for step in plan.application_order:
                statements.append(f'if (({result} = {step.decorator}({binding})) !== void 0) {binding} = {result};')
            return statements

        target = unit.target.expression
        key = self.key_expression(unit)
        source = scope.shared('src')
        descriptor = scope.shared('desc')
        changed = scope.shared('changed')
        statements.append(f'{source} = Object.getOwnPropertyDescriptor({target}, {key});')
        statements.append(f'{descriptor} = {self.descriptor_literal(unit.initial_descriptor, source)};')
        statements.append(f'{changed} = false;')
        for step in plan.application_order:
            statements.append(
                f'if (({result} = {step.decorator}({target}, {key}, {descriptor})) !== void 0) '
                f'{{ {descriptor} = {result}; {changed} = true; }}'
            )
        statements.append(f'if ({changed}) Object.defineProperty({target}, {key}, {descriptor});')
        return statements

    @staticmethod
    def key_expression(unit: DecorationUnit) -> str:
        if unit.key.computed:
            return unit.key.snapshot
        return json.dumps(unit.key.name)

    @staticmethod
    def descriptor_literal(descriptor: PropertyDescriptor, source: str) -> str:
        """The initial descriptor: attributes from the defaults, functions from the installed property."""
        parts = []
        if descriptor.is_accessor:
            if descriptor.getter is not None:
                parts.append(f'get: {source}.get')
            if descriptor.setter is not None:
                parts.append(f'set: {source}.set')
        else:
            parts.append(f'value: {source}.value')
        parts.append(f'enumerable: {_js_bool(descriptor.enumerable)}')
        parts.append(f'configurable: {_js_bool(descriptor.configurable)}')
        if descriptor.is_data:
            parts.append(f'writable: {_js_bool(descriptor.writable)}')
        return '{ ' + ', '.join(parts) + ' }'

    @staticmethod
    def snapshot_plan(units: Sequence[DecorationUnit]) -> SnapshotPlan:
        """The first member of a computed-key unit assigns the snapshot, the rest reuse it."""
        plan: SnapshotPlan = {}
        for unit in units:
            if unit.key is not None and unit.key.computed:
                for index, member in enumerate(unit.members):
                    plan[id(member)] = (unit.key.snapshot, index == 0)
        return plan

    @staticmethod
    def static_key(member: MemberNode) -> str:
        return json.dumps(member.key.static_name)

    @staticmethod
    def is_identifier(name: str) -> bool:
        return bool(_IDENTIFIER_RE.match(name))

    @staticmethod
    def needs_terminator(member: MemberNode) -> bool:
        return member.kind in (MemberKind.FIELD, MemberKind.OTHER) and not member.source.rstrip().endswith((';', ','))

    @staticmethod
    def _declare_snapshots(units: Sequence[DecorationUnit], scope: TempScope) -> None:
        for unit in units:
            if unit.key is not None and unit.key.computed:
                scope.declare(unit.key.snapshot)

    @staticmethod
    def _with_declarations(statements: List[str], scope: TempScope) -> List[str]:
        if not scope.declared:
            return statements
        return [f'var {", ".join(scope.declared)};'] + statements


def emitter(cls: Type[BaseEmitter]) -> Type[BaseEmitter]:
    """Register an emitter class for its FORM."""
    if cls.FORM in EMITTERS:
        logger.warning(f'Emitter for {cls.FORM.value} already registered; overwriting with {cls.__name__}')
    EMITTERS[cls.FORM] = cls
    return cls


def _js_bool(value) -> str:
    return 'true' if value else 'false'
