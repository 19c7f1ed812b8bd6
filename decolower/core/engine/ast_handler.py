"""
AST Handler for decolower providing a unified interface for tree-sitter operations.
"""
import hashlib
import logging
from functools import lru_cache
from typing import Iterator, Optional, Tuple

from tree_sitter import Node

from decolower.core.engine.languages import get_language, get_parser
from decolower.core.error_handling import SourceSyntaxError
from decolower.models.range import SourceRange

logger = logging.getLogger(__name__)


class ASTHandler:
    """
    Handles Abstract Syntax Tree operations using tree-sitter.
    Provides a unified interface for parsing and navigating syntax trees.
    """

    def __init__(self, language_code: str):
        """
        Initialize the AST handler.

        Args:
            language_code: Language code ('javascript', 'typescript' or 'tsx')
        """
        self.language_code = language_code
        self.language = get_language(language_code)
        self.parser = get_parser(language_code)

    @lru_cache(maxsize=128)
    def _parse_cached(self, code_hash: str, code: str) -> Tuple[Node, bytes]:
        """Internal cached parse implementation."""
        code_bytes = code.encode('utf8')
        tree = self.parser.parse(code_bytes)
        return (tree.root_node, code_bytes)

    def parse(self, code: str) -> Tuple[Node, bytes]:
        """
        Parse source code into an AST. Results are cached using an LRU cache
        keyed by the SHA1 hash of ``code``.

        Args:
            code: Source code as string

        Returns:
            Tuple of (root_node, code_bytes)
        """
        code_hash = hashlib.sha1(code.encode('utf8')).hexdigest()
        return self._parse_cached(code_hash, code)

    def parse_checked(self, code: str) -> Tuple[Node, bytes]:
        """
        Parse source code and reject it when tree-sitter had to recover from errors.

        Raises:
            SourceSyntaxError: If the tree contains ERROR or missing nodes
        """
        root, code_bytes = self.parse(code)
        if root.has_error:
            bad = self.find_error(root)
            line, column = (bad.start_point[0] + 1, bad.start_point[1] + 1) if bad is not None else (None, None)
            snippet = self.get_node_text(bad, code_bytes)[:80] if bad is not None else None
            raise SourceSyntaxError(
                'Source does not parse', language=self.language_code, code_snippet=snippet, line=line, column=column
            )
        return root, code_bytes

    def get_node_text(self, node: Node, code_bytes: bytes) -> str:
        """
        Get the text content of a node.

        Args:
            node: Tree-sitter node
            code_bytes: Source code as bytes

        Returns:
            String content of the node
        """
        return code_bytes[node.start_byte:node.end_byte].decode('utf8')

    def get_node_range(self, node: Node, start_node: Optional[Node] = None) -> SourceRange:
        """
        Get the source range of a node, optionally starting at another node.

        Args:
            node: Tree-sitter node
            start_node: Node whose start should be used instead of ``node``'s

        Returns:
            SourceRange with 1-based lines and 0-based columns
        """
        first = start_node or node
        return SourceRange(
            start_line=first.start_point[0] + 1,
            end_line=node.end_point[0] + 1,
            start_column=first.start_point[1],
            end_column=node.end_point[1],
            start_byte=first.start_byte,
            end_byte=node.end_byte,
        )

    def find_error(self, root: Node) -> Optional[Node]:
        """Return the first ERROR or missing node in document order."""
        for node in self.walk(root):
            if node.type == 'ERROR' or node.is_missing:
                return node
        return None

    @staticmethod
    def walk(root: Node) -> Iterator[Node]:
        """Pre-order traversal without recursion."""
        stack = [root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @staticmethod
    def walk_post_order(root: Node) -> Iterator[Node]:
        """Post-order traversal: children before their parent, siblings in source order."""
        stack = [(root, False)]
        while stack:
            node, visited = stack.pop()
            if visited:
                yield node
                continue
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))
