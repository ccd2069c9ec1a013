"""Delimiter scanning that splits a buffer into prose and code regions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Pattern, Sequence, Tuple, Union

from lentic_engine.runtime import telemetry

MarkerPattern = Union[str, Pattern[str]]


class RegionKind(str, Enum):
    PROSE = "prose"
    CODE = "code"

    def flipped(self) -> "RegionKind":
        return RegionKind.CODE if self is RegionKind.PROSE else RegionKind.PROSE


class MalformedRegionError(RuntimeError):
    """Unbalanced region delimiters.

    ``classify`` records these on the partition instead of raising; the scan
    always carries on with the region kind implied by the last delimiter it
    accepted.
    """

    def __init__(self, message: str, *, line: int, reason: str) -> None:
        super().__init__(message)
        self.line = line
        self.reason = reason


@dataclass(frozen=True, slots=True)
class Region:
    """Half-open line range ``[start, stop)`` of a single kind.

    ``delimiter`` is the index of the marker line closing the region (always
    ``stop - 1``), or ``None`` for the trailing region of the buffer.
    """

    kind: RegionKind
    start: int
    stop: int
    delimiter: Optional[int] = None

    def __len__(self) -> int:
        return self.stop - self.start

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start <= index < self.stop

    @property
    def body(self) -> range:
        end = self.delimiter if self.delimiter is not None else self.stop
        return range(self.start, end)

    def lines(self, source: Sequence[str]) -> Sequence[str]:
        return source[self.start : self.stop]


@dataclass(frozen=True, slots=True)
class Partition:
    regions: Tuple[Region, ...]
    errors: Tuple[MalformedRegionError, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def line_count(self) -> int:
        return self.regions[-1].stop if self.regions else 0

    def region_at(self, index: int) -> Region:
        for region in self.regions:
            if index in region:
                return region
        raise IndexError(f"Line {index} is outside the partition")

    def kind_at(self, index: int) -> RegionKind:
        return self.region_at(index).kind

    def is_delimiter(self, index: int) -> bool:
        return self.region_at(index).delimiter == index

    def iter_lines(self) -> Iterator[Tuple[int, RegionKind, bool]]:
        """Yield ``(index, kind, is_delimiter)`` for every line in order."""

        for region in self.regions:
            for index in range(region.start, region.stop):
                yield index, region.kind, index == region.delimiter


def compile_marker(pattern: MarkerPattern, *, case_sensitive: bool) -> Pattern[str]:
    """Anchor ``pattern`` at line start, after optional horizontal whitespace."""

    if isinstance(pattern, re.Pattern):
        pattern = pattern.pattern
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(rf"^[ \t]*(?:{pattern})", flags)


def classify(
    lines: Sequence[str],
    region_start: MarkerPattern,
    region_end: MarkerPattern,
    *,
    case_sensitive: bool = False,
) -> Partition:
    """Partition ``lines`` into alternating prose/code regions.

    Scanning starts in prose. A line matching ``region_start`` closes the
    prose region and code begins on the next line; a line matching
    ``region_end`` closes the code region. Delimiter lines belong to the
    region they close.
    """

    opener = compile_marker(region_start, case_sensitive=case_sensitive)
    closer = compile_marker(region_end, case_sensitive=case_sensitive)

    with telemetry.span(
        "regions::classify",
        component="regions",
        metadata={"classify_lines": len(lines), "case_sensitive": case_sensitive},
    ) as handle:
        regions: list[Region] = []
        errors: list[MalformedRegionError] = []
        kind = RegionKind.PROSE
        start = 0
        last_opener: Optional[int] = None

        for index, line in enumerate(lines):
            expected, unexpected = (
                (opener, closer) if kind is RegionKind.PROSE else (closer, opener)
            )
            if expected.match(line):
                regions.append(Region(kind, start, index + 1, delimiter=index))
                if kind is RegionKind.PROSE:
                    last_opener = index
                kind = kind.flipped()
                start = index + 1
            elif unexpected.match(line):
                errors.append(_stray_marker(index, kind))

        regions.append(Region(kind, start, len(lines)))
        if kind is RegionKind.CODE and last_opener is not None:
            errors.append(
                MalformedRegionError(
                    f"Code region opened on line {last_opener + 1} is never "
                    "closed; treating the rest of the buffer as code",
                    line=last_opener,
                    reason="unterminated",
                )
            )

        handle.add_metadata("regions", len(regions))
        for error in errors:
            handle.add_metadata("malformed", error.reason)
            telemetry.record_event(
                "regions.malformed",
                level="warning",
                data={"line": error.line, "reason": error.reason},
            )

        return Partition(regions=tuple(regions), errors=tuple(errors))


def _stray_marker(index: int, kind: RegionKind) -> MalformedRegionError:
    if kind is RegionKind.PROSE:
        return MalformedRegionError(
            f"Line {index + 1} closes a code region that was never opened",
            line=index,
            reason="stray_end",
        )
    return MalformedRegionError(
        f"Line {index + 1} opens a code region inside another one",
        line=index,
        reason="nested_start",
    )


__all__ = [
    "MalformedRegionError",
    "MarkerPattern",
    "Partition",
    "Region",
    "RegionKind",
    "classify",
    "compile_marker",
]
