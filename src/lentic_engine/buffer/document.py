"""Line storage backing every engine buffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence


def split_lines(text: str) -> List[str]:
    """Split ``text`` on newlines, keeping a final empty line for a trailing ``\\n``.

    ``"\\n".join(split_lines(text)) == text`` holds for every input.
    """

    return text.split("\n")


def join_lines(lines: Iterable[str]) -> str:
    return "\n".join(lines)


@dataclass(slots=True)
class BufferDocument:
    """Versioned list-of-lines text model.

    Documents are never edited in place; ``replace`` hands back a new
    document with a bumped version so a reader holding a snapshot never sees
    a half-written state.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(_lines=split_lines(text), version=0)

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    def replace(self, *, lines: Iterable[str]) -> "BufferDocument":
        """Return a new document holding ``lines`` with the version bumped."""

        return BufferDocument(_lines=list(lines), version=self.version + 1)

    @property
    def text(self) -> str:
        return join_lines(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]


__all__ = ["BufferDocument", "join_lines", "split_lines"]
