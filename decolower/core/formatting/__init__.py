from .brace_formatter import BraceFormatter
from .formatter import BaseFormatter

__all__ = ['BaseFormatter', 'BraceFormatter']
