"""
Declaration Classifier.

Walks a class or object literal and normalizes every decorated site into a
DecorationUnit: which object it writes to, under which key, with which
decorators, starting from which default descriptor.
"""
import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple, Union

from decolower.core.descriptors import descriptor_for_members
from decolower.core.error_handling import ClassificationError
from decolower.core.scope import TempScope
from decolower.models.enums import DecorationLevel, MemberKind, TargetKind
from decolower.models.syntax import ClassDeclaration, MemberNode, ObjectLiteral
from decolower.models.unit import DecorationUnit, PropertyKey, TargetRef

logger = logging.getLogger(__name__)

INELIGIBLE_KINDS = {
    MemberKind.FIELD: 'class fields',
    MemberKind.PROPERTY: "'key: value' data properties",
    MemberKind.SHORTHAND: 'shorthand properties',
    MemberKind.SPREAD: 'spread elements',
    MemberKind.CONSTRUCTOR: 'constructors',
    MemberKind.STATIC_BLOCK: 'static blocks',
    MemberKind.COMMENT: 'comments',
    MemberKind.OTHER: 'this kind of member',
}


class DeclarationClassifier:
    """Turns syntax models into decoration units."""

    def __init__(self, temp_prefix: str = '_'):
        self.temp_prefix = temp_prefix

    def classify(self, declaration: Union[ClassDeclaration, ObjectLiteral],
                 scope: Optional[TempScope] = None) -> List[DecorationUnit]:
        """Classify either declaration kind; names come from ``scope`` so an emitter sharing it agrees on them."""
        scope = scope or TempScope(self.temp_prefix)
        if isinstance(declaration, ClassDeclaration):
            return self.classify_class(declaration, scope)
        return self.classify_object(declaration, scope.shared('obj'), scope)

    def classify_class(self, declaration: ClassDeclaration, scope: Optional[TempScope] = None) -> List[DecorationUnit]:
        """
        Classify a class declaration or expression.

        Member units come first, in source order, followed by the class-level
        unit when the class itself is decorated.

        Raises:
            ClassificationError: If a decorator sits on an ineligible member
        """
        scope = scope or TempScope(self.temp_prefix)
        binding = declaration.name or scope.reserve('class')
        units = self._member_units(declaration.members, binding, True, scope)
        if declaration.decorators:
            units.append(DecorationUnit(
                level=DecorationLevel.CLASS,
                target=TargetRef(kind=TargetKind.CLASS, binding=binding),
                decorators=list(declaration.decorators),
                range=declaration.range,
            ))
        logger.debug(f'Classified class {binding}: {len(units)} units')
        return units

    def classify_object(self, literal: ObjectLiteral, binding: str,
                        scope: Optional[TempScope] = None) -> List[DecorationUnit]:
        """
        Classify an object literal. Literals only ever produce member units.

        Raises:
            ClassificationError: If a decorator sits on an ineligible member
        """
        units = self._member_units(literal.members, binding, False, scope or TempScope(self.temp_prefix))
        logger.debug(f'Classified object literal {binding}: {len(units)} units')
        return units

    def _member_units(self, members: List[MemberNode], binding: str, is_class: bool,
                      scope: TempScope) -> List[DecorationUnit]:
        for member in members:
            if member.decorators:
                self._check_eligible(member)

        groups: 'OrderedDict[Tuple, List[MemberNode]]' = OrderedDict()
        for member in members:
            if member.is_function and member.key is not None:
                groups.setdefault((member.is_static and is_class, member.key.identity), []).append(member)

        units: List[Tuple[int, DecorationUnit]] = []
        positions: Dict[int, int] = {id(m): i for i, m in enumerate(members)}
        for (is_static, _), group in groups.items():
            decorated = [m for m in group if m.decorators]
            if not decorated:
                continue
            if len(decorated) > 1:
                raise ClassificationError(
                    f"Decorators cannot be applied to more than one definition of '{decorated[0].display_name}'",
                    location=decorated[1].range,
                )
            owner = decorated[0]
            key_node = owner.key
            if key_node.computed:
                key = PropertyKey(expression=key_node.text, snapshot=scope.fresh('key'))
            else:
                key = PropertyKey(name=key_node.static_name)
            if is_class:
                target = TargetRef(kind=TargetKind.CONSTRUCTOR if is_static else TargetKind.PROTOTYPE, binding=binding)
            else:
                target = TargetRef(kind=TargetKind.OBJECT_LITERAL, binding=binding)
            unit = DecorationUnit(
                level=DecorationLevel.MEMBER,
                target=target,
                key=key,
                decorators=list(owner.decorators),
                initial_descriptor=descriptor_for_members(group),
                members=group,
                range=owner.range,
            )
            units.append((positions[id(owner)], unit))
            logger.debug(f'Unit {unit.describe()} with {len(unit.decorators)} decorators')
        return [unit for _, unit in sorted(units, key=lambda pair: pair[0])]

    @staticmethod
    def _check_eligible(member: MemberNode) -> None:
        if member.kind in INELIGIBLE_KINDS:
            raise ClassificationError(
                f"Decorators cannot be applied to {INELIGIBLE_KINDS[member.kind]} ('{member.display_name}'); "
                f"only methods, accessors and classes can be decorated",
                location=member.range,
            )
        if member.key is not None and member.key.private:
            raise ClassificationError(
                f"Decorators cannot be applied to private member '{member.key.text}'",
                location=member.range,
            )
