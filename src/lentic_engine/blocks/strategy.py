"""Block transform strategies toggling a comment prefix on prose lines."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional, Protocol, Sequence, Tuple, Type

from lentic_engine.buffer.document import join_lines, split_lines
from lentic_engine.runtime import telemetry

from .regions import Partition, RegionKind, classify


class ConfigurationError(ValueError):
    """Raised eagerly when a strategy or configuration is missing a setting."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class BlockDirection(str, Enum):
    """Which representation the ``this`` buffer holds.

    ``UNCOMMENTED``: ``this`` is the documentation form; cloning comments out
    prose. ``COMMENTED``: ``this`` is the source form; cloning strips the
    comment prefix from prose.
    """

    UNCOMMENTED = "uncommented"
    COMMENTED = "commented"

    def inverted(self) -> "BlockDirection":
        if self is BlockDirection.UNCOMMENTED:
            return BlockDirection.COMMENTED
        return BlockDirection.UNCOMMENTED


@dataclass(frozen=True, slots=True)
class BlockResult:
    lines: Tuple[str, ...]
    partition: Partition

    @property
    def text(self) -> str:
        return join_lines(self.lines)


class Strategy(Protocol):
    """Shared surface of block strategies and overlays."""

    direction: BlockDirection
    comment: str
    region_start: str
    region_end: str
    case_sensitive: bool

    def rewrite_line(self, line: str, kind: RegionKind) -> str: ...

    def apply(self, lines: Sequence[str]) -> BlockResult: ...

    def transform(self, text: str) -> str: ...

    def invert(self) -> "Strategy": ...


def transform_text(strategy: Strategy, text: str) -> str:
    """Run ``strategy`` over ``text``.

    A final newline terminates the last line rather than opening an empty
    one, so it is carried over as-is instead of being commented.
    """

    lines = split_lines(text)
    terminated = lines[-1] == ""
    if terminated:
        lines.pop()
    output = strategy.apply(lines).lines
    return join_lines(output + ("",) if terminated else output)


def _require_pattern(value: str, field: str) -> None:
    if not value:
        raise ConfigurationError(f"{field} cannot be empty", field=field)
    try:
        re.compile(value)
    except re.error as exc:
        raise ConfigurationError(
            f"{field} is not a valid regular expression: {exc}", field=field
        ) from exc


@dataclass(frozen=True, slots=True)
class BlockStrategy(ABC):
    """Rewrite prose body lines; copy code and delimiter lines verbatim."""

    comment: str
    region_start: str
    region_end: str
    case_sensitive: bool = False

    direction: ClassVar[BlockDirection]

    def __post_init__(self) -> None:
        if not self.comment:
            raise ConfigurationError(
                "comment prefix cannot be empty", field="comment"
            )
        _require_pattern(self.region_start, "region_start")
        _require_pattern(self.region_end, "region_end")

    @abstractmethod
    def rewrite_line(self, line: str, kind: RegionKind) -> str:
        """Rewrite one non-delimiter line of the given region kind."""

    def partition(self, lines: Sequence[str]) -> Partition:
        return classify(
            lines,
            self.region_start,
            self.region_end,
            case_sensitive=self.case_sensitive,
        )

    def apply(self, lines: Sequence[str]) -> BlockResult:
        with telemetry.span(
            "blocks::transform",
            component="blocks",
            metadata={"direction": self.direction.value, "lines": len(lines)},
        ) as handle:
            partition = self.partition(lines)
            output = tuple(
                line if delimiter else self.rewrite_line(line, kind)
                for line, (_, kind, delimiter) in zip(lines, partition.iter_lines())
            )
            handle.add_metadata("malformed", len(partition.errors))
            return BlockResult(lines=output, partition=partition)

    def transform(self, text: str) -> str:
        return transform_text(self, text)

    def invert(self) -> "BlockStrategy":
        counterpart = _COUNTERPARTS[self.direction.inverted()]
        return counterpart(
            comment=self.comment,
            region_start=self.region_start,
            region_end=self.region_end,
            case_sensitive=self.case_sensitive,
        )


@dataclass(frozen=True, slots=True)
class UncommentedBlock(BlockStrategy):
    """Documentation form to source form: comment every prose line."""

    direction: ClassVar[BlockDirection] = BlockDirection.UNCOMMENTED

    def rewrite_line(self, line: str, kind: RegionKind) -> str:
        if kind is RegionKind.CODE:
            return line
        # Empty lines are commented as well so stripping restores them.
        return self.comment + line


@dataclass(frozen=True, slots=True)
class CommentedBlock(BlockStrategy):
    """Source form to documentation form: strip one comment prefix."""

    direction: ClassVar[BlockDirection] = BlockDirection.COMMENTED

    def rewrite_line(self, line: str, kind: RegionKind) -> str:
        if kind is RegionKind.CODE or not line.startswith(self.comment):
            return line
        return line[len(self.comment) :]


_COUNTERPARTS: Dict[BlockDirection, Type[BlockStrategy]] = {
    BlockDirection.UNCOMMENTED: UncommentedBlock,
    BlockDirection.COMMENTED: CommentedBlock,
}


def block_strategy(
    direction: BlockDirection | str,
    *,
    comment: str,
    region_start: str,
    region_end: str,
    case_sensitive: bool = False,
) -> BlockStrategy:
    """Build the block strategy selected by ``direction``."""

    try:
        key = BlockDirection(direction)
    except ValueError as exc:
        raise ConfigurationError(
            f"Unknown direction '{direction}'", field="direction"
        ) from exc
    return _COUNTERPARTS[key](
        comment=comment,
        region_start=region_start,
        region_end=region_end,
        case_sensitive=case_sensitive,
    )


__all__ = [
    "BlockDirection",
    "BlockResult",
    "BlockStrategy",
    "CommentedBlock",
    "ConfigurationError",
    "Strategy",
    "UncommentedBlock",
    "block_strategy",
    "transform_text",
]
