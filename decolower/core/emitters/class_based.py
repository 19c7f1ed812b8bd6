"""
Class-based emission: keeps the class (or object literal) syntax and
applies decorators after the definition.

A class with class-level decorators is written as an anonymous class
expression assigned to a ``let``: code inside the body then refers to the
rebindable name instead of the class's own immutable inner name, so it sees
the class a decorator substituted.
"""
import logging
import re
from typing import List, Sequence

from decolower.core.emitters.base import BaseEmitter, SnapshotPlan, emitter
from decolower.core.scope import TempScope
from decolower.models.enums import EmitForm, MemberKind
from decolower.models.syntax import ClassDeclaration, MemberNode, ObjectLiteral
from decolower.models.unit import DecorationUnit

logger = logging.getLogger(__name__)

_CLASS_KEYWORD_RE = re.compile(r'\bclass\b')
_ABSTRACT_RE = re.compile(r'^abstract\s+')


@emitter
class ClassBasedEmitter(BaseEmitter):
    FORM = EmitForm.CLASS_BASED

    def class_definition(self, declaration: ClassDeclaration, units: Sequence[DecorationUnit],
                         scope: TempScope, binding: str) -> List[str]:
        header = declaration.header or 'class'
        plan = self.snapshot_plan(units)
        entries = []
        for member in declaration.members:
            text = self.member_text(member, plan)
            if self.needs_terminator(member):
                text += ';'
            entries.append(text)

        if declaration.decorators:
            if declaration.name is not None:
                header = re.sub(rf'\bclass\s+{re.escape(declaration.name)}(?![\w$])', 'class', header, count=1)
            header = _ABSTRACT_RE.sub('', header)
            logger.debug(f'Class {binding} is rebindable; defining it as an expression')
            return [self.formatter.block(f'let {binding} = {header}', entries) + ';']
        if declaration.name is None:
            header = _CLASS_KEYWORD_RE.sub(f'class {binding}', header, count=1)
        return [self.formatter.block(header, entries)]

    def object_definition(self, literal: ObjectLiteral, units: Sequence[DecorationUnit], scope: TempScope,
                          binding: str) -> List[str]:
        plan = self.snapshot_plan(units)
        entries = []
        for member in literal.members:
            text = self.member_text(member, plan)
            entries.append(text if member.kind == MemberKind.COMMENT else f'{text},')
        return [self.formatter.block(f'{binding} =', entries) + ';']

    def wrap(self, statements: List[str]) -> str:
        return f'(() => {{\n{self.formatter.indent_lines(statements)}\n}})()'

    def member_text(self, member: MemberNode, plan: SnapshotPlan) -> str:
        """Member source without decorators; computed keys of decorated members capture their snapshot."""
        source = member.source
        if id(member) in plan:
            snapshot, assigns = plan[id(member)]
            key = f'[{snapshot} = {member.key.text}]' if assigns else f'[{snapshot}]'
            source = member.source_with_key(key)
        return self.formatter.rebase(source)
