"""
Syntax models consumed by the desugaring engine.

These are the normalized shapes the front end produces for every class or
object literal that may carry decorators. They hold source text fragments
rather than parser nodes, so the classifier and emitters never depend on a
particular parser.
"""
import json
import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from .enums import DeclarationKind, MemberKind
from .range import SourceRange

logger = logging.getLogger(__name__)


class DecoratorExpression(BaseModel):
    """One `@expression` as written in source"""
    text: str
    callee: Optional[str] = None
    arguments: List[str] = Field(default_factory=list)
    is_call: bool = False
    range: Optional[SourceRange] = None

    def __str__(self) -> str:
        return f'@{self.text}'


class PropertyKeyNode(BaseModel):
    """A property name as written: identifier, literal, private name or computed expression"""
    text: str
    computed: bool = False
    private: bool = False
    literal: Optional[str] = None

    @property
    def static_name(self) -> Optional[str]:
        """The property name when it is known without evaluating anything."""
        if self.computed:
            return None
        if self.literal == 'string':
            return _unquote(self.text)
        if self.literal == 'number':
            return _canonical_number(self.text)
        return self.text

    @property
    def identity(self) -> Tuple[str, str]:
        """Key used to pair accessors; computed keys pair only on identical text."""
        if self.computed:
            return ('computed', self.text.strip())
        if self.private:
            return ('private', self.text)
        return ('name', self.static_name)


class MemberNode(BaseModel):
    """One entry of a class body or object literal"""
    kind: MemberKind
    key: Optional[PropertyKeyNode] = None
    is_static: bool = False
    is_async: bool = False
    is_generator: bool = False
    signature: str = '()'
    body: Optional[str] = None
    value: Optional[str] = None
    source: str = ''
    key_span: Optional[Tuple[int, int]] = None
    decorators: List[DecoratorExpression] = Field(default_factory=list)
    uses_super: bool = False
    range: Optional[SourceRange] = None

    @property
    def is_function(self) -> bool:
        return self.kind in (MemberKind.METHOD, MemberKind.GETTER, MemberKind.SETTER)

    @property
    def is_accessor(self) -> bool:
        return self.kind in (MemberKind.GETTER, MemberKind.SETTER)

    @property
    def display_name(self) -> str:
        if self.key is None:
            return self.kind.value
        return f'[{self.key.text}]' if self.key.computed else self.key.text

    def source_with_key(self, replacement: str) -> str:
        """Return the member source with its key text swapped for ``replacement``."""
        if self.key_span is None:
            return self.source
        start, end = self.key_span
        return self.source[:start] + replacement + self.source[end:]


class ClassDeclaration(BaseModel):
    """A class declaration or class expression"""
    name: Optional[str] = None
    heritage: Optional[str] = None
    header: Optional[str] = None
    members: List[MemberNode] = Field(default_factory=list)
    decorators: List[DecoratorExpression] = Field(default_factory=list)
    is_expression: bool = False
    export: Optional[str] = None
    range: Optional[SourceRange] = None

    @property
    def kind(self) -> DeclarationKind:
        return DeclarationKind.CLASS

    @property
    def binding_name(self) -> str:
        return self.name or '_class'

    @property
    def constructor(self) -> Optional[MemberNode]:
        for member in self.members:
            if member.kind == MemberKind.CONSTRUCTOR:
                return member
        return None

    @property
    def has_decorators(self) -> bool:
        return bool(self.decorators) or any(m.decorators for m in self.members)


class ObjectLiteral(BaseModel):
    """An object literal expression"""
    members: List[MemberNode] = Field(default_factory=list)
    range: Optional[SourceRange] = None

    @property
    def kind(self) -> DeclarationKind:
        return DeclarationKind.OBJECT_LITERAL

    @property
    def has_decorators(self) -> bool:
        return any(m.decorators for m in self.members)


def _unquote(text: str) -> str:
    body = text[1:-1]
    if text[:1] == "'":
        body = body.replace('\\\'', '\'').replace('"', '\\"')
    try:
        return json.loads(f'"{body}"')
    except ValueError:
        logger.debug(f'Could not decode string key {text!r}; using raw text')
        return body


def _canonical_number(text: str) -> str:
    cleaned = text.replace('_', '')
    try:
        if cleaned.lower().startswith(('0x', '0o', '0b')):
            return str(int(cleaned, 0))
        number = float(cleaned)
    except ValueError:
        return text
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return repr(number)
