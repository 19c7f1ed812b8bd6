"""
Source-to-source desugaring pipeline.

Finds every class and object literal carrying decorators, lowers the
innermost ones first and splices each lowered declaration over the text it
came from. Source outside those declarations is returned byte for byte.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple, Union

from tree_sitter import Node

from decolower.core.classifier import DeclarationClassifier
from decolower.core.config import EmitOptions
from decolower.core.emitters import get_emitter
from decolower.core.engine.ast_handler import ASTHandler
from decolower.core.error_handling import ClassificationError
from decolower.core.scope import TempScope
from decolower.languages.syntax_builder import SyntaxBuilder
from decolower.models.syntax import ClassDeclaration, ObjectLiteral
from decolower.models.unit import DecorationUnit

logger = logging.getLogger(__name__)

Declaration = Union[ClassDeclaration, ObjectLiteral]


@dataclass
class Site:
    """A decorated declaration found in source, with its classified units"""
    declaration: Declaration
    units: List[DecorationUnit] = field(default_factory=list)


class SpliceBuffer:
    """Source bytes plus the replacement text of already-lowered ranges."""

    def __init__(self, code_bytes: bytes):
        self.code_bytes = code_bytes
        self.replacements: Dict[Tuple[int, int], str] = {}

    def replace(self, start: int, end: int, text: str) -> None:
        self.replacements[(start, end)] = text

    def text(self, start: int, end: int) -> str:
        """Text of ``[start, end)`` with the outermost replacements inside it applied."""
        parts = []
        position = start
        for r_start, r_end in sorted(self.replacements, key=lambda r: (r[0], -r[1])):
            if r_start < position or r_end > end:
                continue
            parts.append(self.code_bytes[position:r_start].decode('utf8'))
            parts.append(self.replacements[(r_start, r_end)])
            position = r_end
        parts.append(self.code_bytes[position:end].decode('utf8'))
        return ''.join(parts)


class Desugarer:
    """Rewrites decorated JavaScript/TypeScript into decorator-free source."""

    def __init__(self, language_code: str = 'javascript', options: Optional[EmitOptions] = None):
        self.language_code = language_code
        self.options = options or EmitOptions()
        self.ast_handler = ASTHandler(language_code)
        self.classifier = DeclarationClassifier(self.options.temp_prefix)
        self.emitter = get_emitter(self.options)

    def desugar(self, code: str) -> str:
        """
        Lower every decorated declaration in ``code``.

        Raises:
            SourceSyntaxError: If the source does not parse
            ClassificationError: If a decorator is attached to something that cannot be decorated
            EmissionError: If a declaration cannot be written in the configured form
        """
        root, code_bytes = self._parse(code)
        buffer = SpliceBuffer(code_bytes)
        builder = SyntaxBuilder(self.ast_handler, code_bytes, buffer.text)
        taken = self.identifiers(root, code_bytes)
        lowered = 0
        for node in self.ast_handler.walk_post_order(root):
            if not builder.is_site(node):
                continue
            site = builder.site_node(node)
            declaration = builder.build(node)
            scope = TempScope(self.options.temp_prefix, taken)
            units = self.classifier.classify(declaration, scope)
            rendered = self.emitter.emit(declaration, units, scope)
            indent = _line_indentation(code_bytes, site.start_byte)
            buffer.replace(site.start_byte, site.end_byte, self.emitter.formatter.continue_at(rendered, indent))
            lowered += 1
        self._check_consumed(builder, root)
        logger.debug(f'Lowered {lowered} declarations ({self.options.form.value})')
        if not lowered:
            return code
        return buffer.text(0, len(code_bytes))

    def sites(self, code: str) -> List[Site]:
        """Decorated declarations in source order, classified but not emitted."""
        root, code_bytes = self._parse(code)
        builder = SyntaxBuilder(self.ast_handler, code_bytes)
        taken = self.identifiers(root, code_bytes)
        found = []
        for node in self.ast_handler.walk(root):
            if builder.is_site(node):
                declaration = builder.build(node)
                scope = TempScope(self.options.temp_prefix, taken)
                found.append(Site(declaration, self.classifier.classify(declaration, scope)))
        self._check_consumed(builder, root)
        return found

    def identifiers(self, root: Node, code_bytes: bytes) -> Set[str]:
        """Every identifier spelled in the source; generated temporaries avoid these names."""
        return {
            self.ast_handler.get_node_text(node, code_bytes)
            for node in self.ast_handler.walk(root)
            if node.type.endswith('identifier')
        }

    def _parse(self, code: str) -> Tuple[Node, bytes]:
        root, _ = self.ast_handler.parse(code)
        if root.has_error:
            bad = self.ast_handler.find_error(root)
            if bad is not None and any(n.type in ('decorator', '@') for n in self.ast_handler.walk(bad)):
                raise ClassificationError(
                    'Decorators are only supported on classes, class members and object literal methods',
                    location=self.ast_handler.get_node_range(bad),
                )
        return self.ast_handler.parse_checked(code)

    def _check_consumed(self, builder: SyntaxBuilder, root: Node) -> None:
        stray = builder.unconsumed_decorators(root)
        if stray:
            raise ClassificationError(
                'Decorators are only supported on classes, class members and object literal methods',
                location=self.ast_handler.get_node_range(stray[0]),
            )


def _line_indentation(code_bytes: bytes, offset: int) -> str:
    line_start = code_bytes.rfind(b'\n', 0, offset) + 1
    line = code_bytes[line_start:offset].decode('utf8')
    return line[:len(line) - len(line.lstrip())]
