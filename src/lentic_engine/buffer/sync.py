"""Boundary types for the text containers a host hands to the engine."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from .buffer import BufferDelta


@runtime_checkable
class TextContainer(Protocol):
    """Anything the engine may read from (``this``) or write into (``that``).

    Hosts that already own an editor buffer implement this instead of
    copying text into a :class:`~lentic_engine.buffer.Buffer`.
    """

    name: str
    path: Optional[str]

    @property
    def text(self) -> str:
        """Full current content."""
        ...

    def replace_text(self, text: str, *, label: str) -> BufferDelta:
        """Swap the whole content for ``text`` in a single step."""
        ...


def container_label(container: TextContainer) -> str:
    """Human-facing identifier: the backing path when known, else the name."""

    return getattr(container, "path", None) or container.name


__all__ = ["TextContainer", "container_label"]
