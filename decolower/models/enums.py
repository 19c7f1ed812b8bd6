"""
Core enumerations for the decolower desugaring engine.
"""
from enum import Enum


class DescriptorKind(str, Enum):
    """Shape of a property descriptor"""
    DATA = 'data'
    ACCESSOR = 'accessor'


class DecorationLevel(str, Enum):
    """Whether a decorator list applies to a whole class or to one member"""
    CLASS = 'class'
    MEMBER = 'member'


class MemberKind(str, Enum):
    """Syntactic kinds of class body and object literal entries"""
    METHOD = 'method'
    GETTER = 'getter'
    SETTER = 'setter'
    CONSTRUCTOR = 'constructor'
    FIELD = 'field'
    STATIC_BLOCK = 'static_block'
    PROPERTY = 'property'
    SHORTHAND = 'shorthand'
    SPREAD = 'spread'
    COMMENT = 'comment'
    OTHER = 'other'


class TargetKind(str, Enum):
    """Which object a decoration unit writes to"""
    PROTOTYPE = 'prototype'
    CONSTRUCTOR = 'constructor'
    OBJECT_LITERAL = 'object_literal'
    CLASS = 'class'


class DeclarationKind(str, Enum):
    CLASS = 'class'
    OBJECT_LITERAL = 'object_literal'


class EmitForm(str, Enum):
    """Surface syntax the emitter renders to"""
    CLASS_BASED = 'classBased'
    CONSTRUCTOR_FUNCTION = 'constructorFunction'
