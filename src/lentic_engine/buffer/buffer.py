"""In-memory buffer implementing the ``TextContainer`` boundary."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Optional, Sequence

from lentic_engine.runtime import telemetry

from .document import BufferDocument


@dataclass(slots=True)
class BufferView:
    name: str
    version: int
    text: str


@dataclass(slots=True)
class BufferDelta:
    name: str
    version: int
    text: str
    label: str
    line_count: int


class Buffer:
    """Named, optionally file-backed text buffer.

    The engine never patches a buffer incrementally: content changes only
    through ``replace_text``, which swaps the whole document at once.
    """

    def __init__(
        self,
        *,
        name: str = "default",
        path: Optional[str] = None,
        document: Optional[BufferDocument] = None,
    ) -> None:
        self.name = name
        self.path = path
        self.document = document or BufferDocument()

    @classmethod
    def from_text(
        cls, text: str, *, name: str = "default", path: Optional[str] = None
    ) -> "Buffer":
        return cls(name=name, path=path, document=BufferDocument.from_text(text))

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def lines(self) -> Sequence[str]:
        return self.document.snapshot()

    @property
    def version(self) -> int:
        return self.document.version

    def snapshot(self) -> BufferView:
        return BufferView(name=self.name, version=self.version, text=self.text)

    def replace_text(self, text: str, *, label: str = "replace_text") -> BufferDelta:
        with Transaction(self, label):
            updated = BufferDocument.from_text(text)
            self.document = self.document.replace(lines=updated.snapshot())

        return BufferDelta(
            name=self.name,
            version=self.document.version,
            text=text,
            label=label,
            line_count=self.document.line_count,
        )

    def __repr__(self) -> str:
        return (
            f"Buffer(name={self.name!r}, path={self.path!r}, "
            f"version={self.version})"
        )


class Transaction(AbstractContextManager["Transaction"]):
    """Telemetry span wrapped around a single buffer replacement."""

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component="buffer",
            metadata={"buffer": self.buffer.name, "version": self.buffer.version},
        )
        self._span_cm.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "BufferDelta", "BufferView", "Transaction"]
