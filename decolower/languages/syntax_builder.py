"""
Builds syntax models from tree-sitter nodes.

Handles both grammar layouts: the JavaScript grammar nests member decorators
inside ``method_definition``/``field_definition``, while the TypeScript
grammar places method decorators as siblings in ``class_body``. Every
decorator node turned into a DecoratorExpression is recorded, so stray
decorators can be reported afterwards.
"""
import logging
from typing import Callable, List, Optional, Set

from tree_sitter import Node

from decolower.core.engine.ast_handler import ASTHandler
from decolower.core.error_handling import ClassificationError
from decolower.models.enums import MemberKind
from decolower.models.syntax import (
    ClassDeclaration,
    DecoratorExpression,
    MemberNode,
    ObjectLiteral,
    PropertyKeyNode,
)

logger = logging.getLogger(__name__)

CLASS_NODE_TYPES = ('class_declaration', 'class', 'abstract_class_declaration')
OBJECT_NODE_TYPES = ('object',)
FIELD_NODE_TYPES = ('field_definition', 'public_field_definition')
# super inside these belongs to another home object
_SUPER_SCOPES = ('class_body', 'method_definition')

TextOf = Callable[[int, int], str]


class SyntaxBuilder:
    """Turns class and object literal nodes into syntax models."""

    def __init__(self, ast_handler: ASTHandler, code_bytes: bytes, text_of: Optional[TextOf] = None):
        """
        Args:
            ast_handler: Handler the tree was parsed with
            code_bytes: Source the tree was parsed from
            text_of: Returns the text for a byte range; the desugarer passes a
                function that substitutes already-lowered nested sites
        """
        self.ast_handler = ast_handler
        self.code_bytes = code_bytes
        self.text_of = text_of or (lambda start, end: code_bytes[start:end].decode('utf8'))
        self.consumed: Set[int] = set()

    @staticmethod
    def export_of(node: Node) -> Optional[Node]:
        parent = node.parent
        if node.type in CLASS_NODE_TYPES and parent is not None and parent.type == 'export_statement':
            return parent
        return None

    def site_node(self, node: Node) -> Node:
        """The node whose text a lowered declaration replaces."""
        return self.export_of(node) or node

    def is_site(self, node: Node) -> bool:
        """True for classes and object literals that carry at least one decorator."""
        if node.type in CLASS_NODE_TYPES:
            return self._class_has_decorators(node)
        if node.type in OBJECT_NODE_TYPES:
            return any(_decorator_children(child) for child in node.named_children)
        return False

    def build(self, node: Node):
        if node.type in CLASS_NODE_TYPES:
            return self.build_class(node)
        return self.build_object(node)

    def build_class(self, node: Node) -> ClassDeclaration:
        export = self.export_of(node)
        decorator_nodes = _decorator_children(export) if export is not None else []
        decorator_nodes += _decorator_children(node)
        name_node = node.child_by_field_name('name')
        body = node.child_by_field_name('body')
        export_kind = None
        if export is not None:
            export_kind = 'default' if any(c.type == 'default' for c in export.children) else 'named'
        declaration = ClassDeclaration(
            name=self._text(name_node) if name_node is not None else None,
            heritage=self._heritage(node),
            header=self.text_of(_first_plain_child(node).start_byte, body.start_byte).rstrip(),
            members=self._class_members(body),
            decorators=[self._decorator(d) for d in decorator_nodes],
            is_expression=node.type == 'class' and export is None,
            export=export_kind,
            range=self.ast_handler.get_node_range(export or node),
        )
        logger.debug(f'Built class {declaration.binding_name} with {len(declaration.members)} members')
        return declaration

    def build_object(self, node: Node) -> ObjectLiteral:
        members = [self._member(child, [], in_class=False) for child in node.named_children]
        return ObjectLiteral(members=members, range=self.ast_handler.get_node_range(node))

    def unconsumed_decorators(self, root: Node) -> List[Node]:
        """Decorator nodes that no built declaration claimed."""
        return [n for n in self.ast_handler.walk(root) if n.type == 'decorator' and n.id not in self.consumed]

    def _class_has_decorators(self, node: Node) -> bool:
        export = self.export_of(node)
        if _decorator_children(node) or (export is not None and _decorator_children(export)):
            return True
        body = node.child_by_field_name('body')
        if body is None:
            return False
        return any(child.type == 'decorator' or _decorator_children(child) for child in body.named_children)

    def _class_members(self, body: Node) -> List[MemberNode]:
        members: List[MemberNode] = []
        pending: List[Node] = []
        for child in body.named_children:
            if child.type == 'decorator':
                pending.append(child)
                continue
            if child.type == 'comment':
                members.append(self._member(child, [], in_class=True))
                continue
            members.append(self._member(child, pending, in_class=True))
            pending = []
        if pending:
            raise ClassificationError(
                'Decorator is not followed by a class member', location=self.ast_handler.get_node_range(pending[0])
            )
        return members

    def _member(self, node: Node, preceding: List[Node], in_class: bool) -> MemberNode:
        decorators = [self._decorator(d) for d in list(preceding) + _decorator_children(node)]
        start_node = _first_plain_child(node)
        fields = {}
        key_node = None
        kind = MemberKind.OTHER
        if node.type == 'method_definition':
            key_node = node.child_by_field_name('name')
            body = node.child_by_field_name('body')
            modifiers = _modifiers(node, key_node)
            kind = MemberKind.METHOD
            if 'get' in modifiers or 'static get' in modifiers:
                kind = MemberKind.GETTER
            elif 'set' in modifiers:
                kind = MemberKind.SETTER
            fields.update(
                is_static=bool(modifiers & {'static', 'static get'}),
                is_async='async' in modifiers,
                is_generator='*' in modifiers,
                signature=self.text_of(key_node.end_byte, body.start_byte).strip(),
                body=self._text(body),
            )
            if in_class and kind == MemberKind.METHOD and not fields['is_static'] and self._is_constructor_key(key_node):
                kind = MemberKind.CONSTRUCTOR
        elif node.type in FIELD_NODE_TYPES:
            kind = MemberKind.FIELD
            key_node = node.child_by_field_name('property')
            if key_node is None:
                key_node = node.child_by_field_name('name')
            value = node.child_by_field_name('value')
            fields.update(
                is_static=any(c.type == 'static' for c in node.children),
                value=self._text(value) if value is not None else None,
            )
        elif node.type == 'class_static_block':
            kind = MemberKind.STATIC_BLOCK
            body = node.child_by_field_name('body')
            fields.update(is_static=True, body=self._text(body) if body is not None else '{}')
        elif node.type == 'pair':
            kind = MemberKind.PROPERTY
            key_node = node.child_by_field_name('key')
            fields['value'] = self._text(node.child_by_field_name('value'))
        elif node.type == 'shorthand_property_identifier':
            kind = MemberKind.SHORTHAND
            fields['value'] = self._text(node)
        elif node.type == 'spread_element':
            kind = MemberKind.SPREAD
            argument = next((c for c in node.named_children if c.type != 'comment'), None)
            fields['value'] = self._text(argument) if argument is not None else ''
        elif node.type == 'comment':
            kind = MemberKind.COMMENT

        start, end = start_node.start_byte, node.end_byte
        key = None
        if kind == MemberKind.SHORTHAND:
            key = PropertyKeyNode(text=self._text(node))
            source = self.text_of(start, end)
        elif key_node is not None:
            key = self._key(key_node)
            head = self.text_of(start, key_node.start_byte)
            key_text = self.text_of(key_node.start_byte, key_node.end_byte)
            source = head + key_text + self.text_of(key_node.end_byte, end)
            fields['key_span'] = (len(head), len(head) + len(key_text))
        else:
            source = self.text_of(start, end)

        return MemberNode(
            kind=kind,
            key=key,
            source=source,
            decorators=decorators,
            uses_super=kind != MemberKind.COMMENT and _uses_super(node),
            range=self.ast_handler.get_node_range(node, start_node=start_node),
            **fields,
        )

    def _key(self, node: Node) -> PropertyKeyNode:
        if node.type == 'computed_property_name':
            inner = next((c for c in node.named_children if c.type != 'comment'), None)
            return PropertyKeyNode(text=self._text(inner) if inner is not None else '', computed=True)
        literal = node.type if node.type in ('string', 'number') else None
        return PropertyKeyNode(
            text=self._text(node),
            private=node.type == 'private_property_identifier',
            literal=literal,
        )

    def _heritage(self, node: Node) -> Optional[str]:
        for child in node.children:
            if child.type != 'class_heritage':
                continue
            named = [c for c in child.named_children if c.type != 'comment']
            extends = next((c for c in named if c.type == 'extends_clause'), None)
            if extends is not None:
                value = extends.child_by_field_name('value')
                return self._text(value) if value is not None else None
            if any(c.type == 'implements_clause' for c in named):
                return None
            return self._text(named[0]) if named else None
        return None

    def _decorator(self, node: Node) -> DecoratorExpression:
        self.consumed.add(node.id)
        expression = next((c for c in node.named_children if c.type != 'comment'), None)
        location = self.ast_handler.get_node_range(node)
        if expression is None:
            return DecoratorExpression(text=self._text(node).lstrip('@').strip(), range=location)
        text = self._text(expression)
        callee = None
        arguments: List[str] = []
        is_call = False
        if expression.type in ('identifier', 'member_expression'):
            callee = ''.join(text.split())
        elif expression.type == 'call_expression':
            function = expression.child_by_field_name('function')
            args = expression.child_by_field_name('arguments')
            if function is not None and function.type in ('identifier', 'member_expression'):
                callee = ''.join(self._text(function).split())
                is_call = True
                if args is not None:
                    arguments = [self._text(a) for a in args.named_children if a.type != 'comment']
        return DecoratorExpression(text=text, callee=callee, arguments=arguments, is_call=is_call, range=location)

    def _is_constructor_key(self, key_node: Node) -> bool:
        if key_node.type == 'property_identifier':
            return self._text(key_node) == 'constructor'
        if key_node.type == 'string':
            return self._text(key_node)[1:-1] == 'constructor'
        return False

    def _text(self, node: Node) -> str:
        return self.text_of(node.start_byte, node.end_byte)


def _decorator_children(node: Node) -> List[Node]:
    return [child for child in node.children if child.type == 'decorator']


def _first_plain_child(node: Node) -> Node:
    """First child that is neither a decorator nor a comment; the node itself for leaves."""
    for child in node.children:
        if child.type not in ('decorator', 'comment'):
            return child
    return node


def _modifiers(node: Node, name_node: Node) -> Set[str]:
    modifiers = set()
    for child in node.children:
        if child.start_byte >= name_node.start_byte:
            break
        if child.type in ('static', 'static get', 'async', 'get', 'set', '*'):
            modifiers.add(child.type)
    return modifiers


def _uses_super(node: Node) -> bool:
    stack = list(node.children)
    while stack:
        current = stack.pop()
        if current.type == 'super':
            return True
        if current.type in _SUPER_SCOPES:
            continue
        stack.extend(current.children)
    return False
