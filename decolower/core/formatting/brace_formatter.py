from .formatter import BaseFormatter


class BraceFormatter(BaseFormatter):
    """Formatter for brace-based languages."""

    def shift(self, code: str, column: int) -> str:
        """
        Remove up to ``column`` leading whitespace characters from every line after the first.
        """
        lines = code.split('\n')
        shifted = [lines[0]]
        for line in lines[1:]:
            indent = len(self.get_indentation(line))
            shifted.append(line[min(indent, column):])
        return '\n'.join(shifted)

    def rebase(self, code: str) -> str:
        """
        Make a fragment cut out of a larger file relative to its first line.

        Continuation lines of a fragment still carry the indentation they had
        in the file. The last line of a braced fragment (its closing brace)
        sits at the indentation of the line the fragment starts on, so that
        indentation is removed from every continuation line.
        """
        lines = code.split('\n')
        if len(lines) == 1:
            return code
        return self.shift(code, len(self.get_indentation(lines[-1])))

    def block_body(self, block: str) -> str:
        """Return the statements inside ``{ ... }`` dedented to column zero."""
        inner = self.rebase(block).strip()
        if inner.startswith('{') and inner.endswith('}'):
            inner = inner[1:-1]
        return self.dedent(inner.strip('\n')).strip()

    def block(self, header: str, entries: list) -> str:
        """Render ``header { entries }`` with one indented entry per line."""
        if not entries:
            return f'{header} {{}}'
        return f'{header} {{\n{self.indent_lines(entries)}\n}}'

    def continue_at(self, code: str, indent: str) -> str:
        """Indent every line after the first by ``indent``, for splicing text back at a given line indentation."""
        lines = code.split('\n')
        return '\n'.join([lines[0]] + [indent + line if line.strip() else line for line in lines[1:]])
