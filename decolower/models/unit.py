"""
Decoration units: one classified declaration site plus its decorator list.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from .descriptor import PropertyDescriptor
from .enums import DecorationLevel, TargetKind
from .range import SourceRange
from .syntax import DecoratorExpression, MemberNode


class TargetRef(BaseModel):
    """Reference to the object a unit writes to"""
    kind: TargetKind
    binding: str

    @property
    def expression(self) -> str:
        if self.kind == TargetKind.PROTOTYPE:
            return f'{self.binding}.prototype'
        return self.binding


class PropertyKey(BaseModel):
    """A property key: a static name, or a computed expression captured once into a snapshot"""
    name: Optional[str] = None
    expression: Optional[str] = None
    snapshot: Optional[str] = None

    @property
    def computed(self) -> bool:
        return self.expression is not None

    def __str__(self) -> str:
        return f'[{self.expression}]' if self.computed else str(self.name)


class DecorationUnit(BaseModel):
    """One syntactic site eligible for decoration"""
    level: DecorationLevel
    target: TargetRef
    key: Optional[PropertyKey] = None
    decorators: List[DecoratorExpression] = Field(default_factory=list)
    initial_descriptor: Optional[PropertyDescriptor] = None
    members: List[MemberNode] = Field(default_factory=list)
    range: Optional[SourceRange] = None
    model_config = {'arbitrary_types_allowed': True}

    @model_validator(mode='after')
    def _check_level(self) -> 'DecorationUnit':
        if self.level == DecorationLevel.CLASS:
            if self.key is not None or self.initial_descriptor is not None:
                raise ValueError('class-level units carry neither key nor descriptor')
        elif self.key is None or self.initial_descriptor is None:
            raise ValueError('member-level units need a key and an initial descriptor')
        return self

    @property
    def is_static(self) -> bool:
        return self.target.kind == TargetKind.CONSTRUCTOR

    def describe(self) -> str:
        if self.level == DecorationLevel.CLASS:
            return f'class {self.target.binding}'
        return f'{self.target.expression}[{self.key}]'
