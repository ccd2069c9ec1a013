"""Keep a document and its source code as two regenerable views of one text."""

__all__ = [
    "blocks",
    "buffer",
    "config",
    "link",
    "runtime",
]

__version__ = "0.1.0"
