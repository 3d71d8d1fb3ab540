"""
Source Span

Character offsets a token occupies in the raw input line.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceSpan:
    """
    Half-open range ``[start, end)`` of character offsets in the source text.

    - Offsets index the original, unpadded input
    - Immutable (frozen) for hashability
    - ``column`` is 1-based, for ``input:line:column`` arrows
    """
    start: int
    end: int
    line: int = 1

    @property
    def column(self) -> int:
        return self.start + 1

    @property
    def offsets(self) -> range:
        return range(self.start, self.end)

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        """Format as line:column"""
        return f"{self.line}:{self.column}"
