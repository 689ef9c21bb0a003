"""
Citation value objects.

A CharPosition is a (line, column) pair; a SourceCitation is a file path
with an optional start and end position, as produced by the scanners that
feed a report.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

# path:line[:col][-line[:col]]
_CITATION_RE = re.compile(
    r'^(?P<path>.+?):(?P<start_line>\d+)(?::(?P<start_col>\d+))?'
    r'(?:-(?P<end_line>\d+)(?::(?P<end_col>\d+))?)?$'
)


@dataclass(frozen=True)
class CharPosition:
    """A line/column position in a text file (both 1-based)."""
    line: int
    column: int = 1

    @classmethod
    def parse(cls, text: str) -> 'CharPosition':
        """Parse ``"12"`` or ``"12:4"``."""
        line, _, column = text.strip().partition(':')
        try:
            return cls(int(line), int(column) if column else 1)
        except ValueError:
            raise ValueError(f"Invalid position '{text}', expected LINE or LINE:COLUMN") from None

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceCitation:
    """A reference to a file and, optionally, a range of text in it."""
    file_path: str
    start: Optional[CharPosition] = None
    end: Optional[CharPosition] = None

    @property
    def lines(self) -> Tuple[Optional[int], Optional[int]]:
        return (
            self.start.line if self.start else None,
            self.end.line if self.end else None,
        )

    @classmethod
    def parse(cls, text: str) -> 'SourceCitation':
        """
        Parse a citation written as ``path[:line[:col][-line[:col]]]``.

        A bare path without a position is accepted as-is.
        """
        text = text.strip()
        match = _CITATION_RE.match(text)
        if not match:
            return cls(text)

        start = CharPosition(int(match['start_line']), int(match['start_col'] or 1))
        end = None
        if match['end_line']:
            end = CharPosition(int(match['end_line']), int(match['end_col'] or 1))
        return cls(match['path'], start, end)
