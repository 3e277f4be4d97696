"""Split raw OBO text into logical lines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterator

__all__ = ["TERM_HEADER", "LogicalLines", "is_stanza_header"]

TERM_HEADER: Final[str] = "[Term]"


def is_stanza_header(line: str) -> bool:
    """Return True for bracketed stanza headers such as ``[Term]`` or ``[Typedef]``."""
    return len(line) > 2 and line[0] == "[" and line[-1] == "]"


@dataclass(frozen=True, slots=True)
class LogicalLines:
    """Lazy, restartable view of ``text`` as right-trimmed lines.

    Each iteration starts again from the top of the text. Trailing carriage
    returns and whitespace are removed; leading whitespace is kept. Blank
    lines are yielded as empty strings.
    """

    text: str

    def __iter__(self) -> Iterator[str]:
        text = self.text
        start = 0
        end = len(text)
        while start < end:
            newline = text.find("\n", start)
            if newline == -1:
                yield text[start:].rstrip()
                return
            yield text[start:newline].rstrip()
            start = newline + 1

    def numbered(self) -> Iterator[tuple[int, str]]:
        """Yield ``(line_number, line)`` pairs with 1-based numbering."""
        return enumerate(self, start=1)
