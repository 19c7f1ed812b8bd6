from typing import Optional

from pydantic import BaseModel


class SourceRange(BaseModel):
    """Represents a range in source code (1-based lines, 0-based columns)"""
    start_line: int
    end_line: int
    start_column: Optional[int] = None
    end_column: Optional[int] = None
    start_byte: Optional[int] = None
    end_byte: Optional[int] = None

    def __str__(self) -> str:
        if self.start_column is None:
            return f'line {self.start_line}'
        return f'line {self.start_line}, column {self.start_column + 1}'
