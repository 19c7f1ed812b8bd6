"""
Constructor-function emission.

Rewrites a class as a plain constructor function whose methods and
accessors are installed one define-property call at a time, with the
attributes class syntax would give them. Object literals are rebuilt from
an empty object the same way. Only classes whose members translate without
class-only semantics are accepted: ``super`` references, private names and
explicit constructors of derived classes raise EmissionError.
"""
import logging
from typing import List, Sequence

from decolower.core.emitters.base import BaseEmitter, SnapshotPlan, emitter
from decolower.core.error_handling import EmissionError
from decolower.core.scope import TempScope
from decolower.models.enums import EmitForm, MemberKind
from decolower.models.syntax import ClassDeclaration, MemberNode, ObjectLiteral
from decolower.models.unit import DecorationUnit

logger = logging.getLogger(__name__)


@emitter
class ConstructorFunctionEmitter(BaseEmitter):
    FORM = EmitForm.CONSTRUCTOR_FUNCTION

    def class_definition(self, declaration: ClassDeclaration, units: Sequence[DecorationUnit],
                         scope: TempScope, name: str) -> List[str]:
        self._check_translatable(declaration.members)
        parent = None
        if declaration.heritage:
            if declaration.constructor is not None:
                raise EmissionError(
                    f"Class '{name}' extends another class and declares its own constructor",
                    form=self.FORM.value, location=declaration.constructor.range,
                )
            parent = scope.shared('super')

        plan = self.snapshot_plan(units)
        instance_fields: List[str] = []
        definitions: List[str] = []
        static_elements: List[str] = []
        for member in declaration.members:
            if member.kind == MemberKind.COMMENT:
                definitions.append(self.formatter.rebase(member.source))
            elif member.kind == MemberKind.FIELD:
                key = self._field_key(member, scope, definitions)
                value = self.formatter.rebase(member.value) if member.value is not None else 'void 0'
                if member.is_static:
                    static_elements.append(self._data_property(name, key, value))
                else:
                    instance_fields.append(f'this{self._accessor_suffix(member, key)} = {value};')
            elif member.kind == MemberKind.STATIC_BLOCK:
                static_elements.append(f'(function () {self.formatter.rebase(member.body)}).call({name});')
            elif member.is_function:
                target = name if member.is_static else f'{name}.prototype'
                definitions.append(self._function_property(target, self._member_key(member, plan), member, False))
            elif member.kind == MemberKind.OTHER:
                logger.debug(f"Dropping type-only member '{member.display_name}' from {name}")

        statements = []
        if parent:
            statements.append(f'{parent} = {declaration.heritage};')
        statements.append(self._constructor(declaration, name, parent, instance_fields, scope))
        if parent:
            statements.append(
                f'{name}.prototype = Object.create({parent}.prototype, '
                f'{{ constructor: {{ value: {name}, writable: true, configurable: true }} }});'
            )
            statements.append(f'Object.setPrototypeOf({name}, {parent});')
        return statements + definitions + static_elements

    def object_definition(self, literal: ObjectLiteral, units: Sequence[DecorationUnit], scope: TempScope,
                          binding: str) -> List[str]:
        self._check_translatable(literal.members)
        plan = self.snapshot_plan(units)
        statements = [f'{binding} = {{}};']
        for member in literal.members:
            if member.kind == MemberKind.COMMENT:
                statements.append(self.formatter.rebase(member.source))
            elif member.kind == MemberKind.SPREAD:
                statements.append(f'Object.assign({binding}, {self.formatter.rebase(member.value)});')
            elif member.kind in (MemberKind.PROPERTY, MemberKind.SHORTHAND):
                value = self.formatter.rebase(member.value)
                if member.kind == MemberKind.PROPERTY and not member.key.computed and member.key.static_name == '__proto__':
                    statements.append(f'Object.setPrototypeOf({binding}, {value});')
                else:
                    statements.append(self._data_property(binding, self._member_key(member, plan), value))
            elif member.is_function:
                statements.append(self._function_property(binding, self._member_key(member, plan), member, True))
            else:
                logger.debug(f"Skipping unsupported object literal entry '{member.source}'")
        return statements

    def wrap(self, statements: List[str]) -> str:
        return f'(function () {{\n{self.formatter.indent_lines(statements)}\n}}).call(this)'

    def _check_translatable(self, members: Sequence[MemberNode]) -> None:
        for member in members:
            if member.key is not None and member.key.private:
                raise EmissionError(
                    f"Private member '{member.key.text}' has no constructor-function equivalent",
                    form=self.FORM.value, location=member.range,
                )
            if member.uses_super:
                raise EmissionError(
                    f"'super' in '{member.display_name}' has no constructor-function equivalent",
                    form=self.FORM.value, location=member.range,
                )

    def _constructor(self, declaration: ClassDeclaration, name: str, parent, instance_fields: List[str],
                     scope: TempScope) -> str:
        """
        The constructor function. A derived class builds its instance with
        Reflect.construct so native class parents can be extended, then runs
        its field initializers on that instance and returns it.
        """
        constructor = declaration.constructor
        params = constructor.signature.lstrip('?!').strip() if constructor is not None else '()'
        statements = []
        if parent and constructor is None:
            instance = scope.reserve('this')
            statements.append(f'var {instance} = Reflect.construct({parent}, arguments, new.target || {name});')
            if instance_fields:
                statements.append(self.formatter.block('(function ()', instance_fields) + f').call({instance});')
            statements.append(f'return {instance};')
            return self.formatter.block(f'function {name}{params}', statements)
        statements.extend(instance_fields)
        if constructor is not None:
            body = self.formatter.block_body(constructor.body)
            if body:
                statements.append(body)
        return self.formatter.block(f'function {name}{params}', statements)

    def _function_property(self, target: str, key: str, member: MemberNode, enumerable: bool) -> str:
        function = self._function_expression(member)
        attributes = f'enumerable: {"true" if enumerable else "false"}, configurable: true'
        if member.kind == MemberKind.GETTER:
            fields = f'get: {function}, {attributes}'
        elif member.kind == MemberKind.SETTER:
            fields = f'set: {function}, {attributes}'
        else:
            fields = f'value: {function}, {attributes}, writable: true'
        return f'Object.defineProperty({target}, {key}, {{ {fields} }});'

    def _function_expression(self, member: MemberNode) -> str:
        prefix = 'async ' if member.is_async else ''
        star = '*' if member.is_generator else ''
        signature = member.signature.lstrip('?!').strip()
        return f'{prefix}function{star} {signature} {self.formatter.rebase(member.body)}'

    @staticmethod
    def _data_property(target: str, key: str, value: str) -> str:
        return (f'Object.defineProperty({target}, {key}, '
                f'{{ value: {value}, enumerable: true, configurable: true, writable: true }});')

    def _member_key(self, member: MemberNode, plan: SnapshotPlan) -> str:
        if id(member) in plan:
            snapshot, assigns = plan[id(member)]
            return f'{snapshot} = ({member.key.text})' if assigns else snapshot
        if member.key.computed:
            return f'({member.key.text})'
        return self.static_key(member)

    def _field_key(self, member: MemberNode, scope: TempScope, definitions: List[str]) -> str:
        """Computed field keys are evaluated once, in member order, at definition time."""
        if not member.key.computed:
            return self.static_key(member)
        temp = scope.fresh('field')
        definitions.append(f'{temp} = ({member.key.text});')
        return temp

    def _accessor_suffix(self, member: MemberNode, key: str) -> str:
        if not member.key.computed and self.is_identifier(member.key.static_name):
            return f'.{member.key.static_name}'
        return f'[{key}]'
