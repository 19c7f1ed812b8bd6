"""
Base formatter class for decolower.
"""
import re
import textwrap
from typing import Iterable


class BaseFormatter:
    """Base class for code formatters."""

    def __init__(self, indent_size: int = 2):
        """
        Initialize the formatter.

        Args:
            indent_size: Number of spaces per indentation level
        """
        self.indent_size = indent_size
        self.indent_string = ' ' * indent_size

    def get_indentation(self, line: str) -> str:
        """
        Get the indentation from a line.

        Args:
            line: Line to analyze

        Returns:
            Indentation string
        """
        match = re.match('^(\\s*)', line)
        return match.group(1) if match else ''

    def dedent(self, code: str) -> str:
        """Remove common leading whitespace from all lines."""
        return textwrap.dedent(code)

    def apply_indentation(self, code: str, base_indent: str) -> str:
        """
        Prefix every non-blank line with ``base_indent``, keeping relative indentation.

        Args:
            code: Code to indent
            base_indent: Base indentation to apply

        Returns:
            Indented code
        """
        result = []
        for line in code.splitlines():
            result.append(base_indent + line if line.strip() else '')
        return '\n'.join(result)

    def indent_lines(self, statements: Iterable[str], levels: int = 1) -> str:
        """Join statements on separate lines, each indented by ``levels``."""
        base_indent = self.indent_string * levels
        return '\n'.join(self.apply_indentation(statement, base_indent) for statement in statements)
