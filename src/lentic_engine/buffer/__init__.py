"""Buffer abstractions the engine reads from and writes into."""

from .buffer import Buffer, BufferDelta, BufferView, Transaction
from .document import BufferDocument, join_lines, split_lines
from .sync import TextContainer, container_label

__all__ = [
    "Buffer",
    "BufferDelta",
    "BufferDocument",
    "BufferView",
    "TextContainer",
    "Transaction",
    "container_label",
    "join_lines",
    "split_lines",
]
