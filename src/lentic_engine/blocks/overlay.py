"""Line-anchored substitutions layered over a base block strategy.

Rules are written against the commented (source-side) spelling of a line,
e.g. ``;; * Foo`` <-> ``;;; Foo:``. Going from documentation to source the
rules run on the already-commented output; going back they run on the
source line and the base strategy then strips the comment prefix, so the
documentation side reads ``* Foo``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence, Tuple

from lentic_engine.runtime import telemetry

from .regions import RegionKind
from .strategy import (
    BlockDirection,
    BlockResult,
    BlockStrategy,
    ConfigurationError,
    transform_text,
)

SUMMARY_MARKER = "# # "
HEADER_MARKER = "* "


def _template(literal: str) -> str:
    return literal.replace("\\", "\\\\")


@dataclass(frozen=True, slots=True)
class LineRule:
    """Pair of mutually inverse single-line substitutions."""

    name: str
    forward: Pattern[str]
    forward_replacement: str
    backward: Pattern[str]
    backward_replacement: str
    first_line_only: bool = False

    def apply(self, line: str, direction: BlockDirection) -> Optional[str]:
        """Return the rewritten line, or ``None`` when the rule does not match."""

        if direction is BlockDirection.UNCOMMENTED:
            pattern, replacement = self.forward, self.forward_replacement
        else:
            pattern, replacement = self.backward, self.backward_replacement
        rewritten, count = pattern.subn(replacement, line, count=1)
        return rewritten if count else None

    def applies_to(self, index: int) -> bool:
        return index == 0 or not self.first_line_only


def summary_rule(comment: str, summary: str = ";;; ") -> LineRule:
    """``<comment># # text`` on the first line <-> ``<summary>text``."""

    if not summary:
        raise ConfigurationError("summary marker cannot be empty", field="summary")
    commented = comment + SUMMARY_MARKER
    return LineRule(
        name="summary",
        forward=re.compile("^" + re.escape(commented)),
        forward_replacement=_template(summary),
        backward=re.compile("^" + re.escape(summary)),
        backward_replacement=_template(commented),
        first_line_only=True,
    )


def header_rule(comment: str, header: str = ";;; ") -> LineRule:
    """``<comment>* Word`` <-> ``<header>Word:`` for single-word headers."""

    if not header:
        raise ConfigurationError("header marker cannot be empty", field="header")
    return LineRule(
        name="header",
        forward=re.compile("^" + re.escape(comment + HEADER_MARKER) + r"(\w+)$"),
        forward_replacement=_template(header) + r"\g<1>:",
        backward=re.compile("^" + re.escape(header) + r"(\w+):$"),
        backward_replacement=_template(comment + HEADER_MARKER) + r"\g<1>",
    )


def orgel_rules(
    comment: str, *, summary: str = ";;; ", header: str = ";;; "
) -> Tuple[LineRule, ...]:
    return (summary_rule(comment, summary), header_rule(comment, header))


@dataclass(frozen=True, slots=True)
class Overlay:
    """A base strategy followed by ordered line rules on prose lines."""

    base: BlockStrategy
    rules: Tuple[LineRule, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.base, BlockStrategy):
            raise ConfigurationError(
                "overlay requires a block strategy", field="base"
            )
        object.__setattr__(self, "rules", tuple(self.rules))

    @property
    def direction(self) -> BlockDirection:
        return self.base.direction

    @property
    def comment(self) -> str:
        return self.base.comment

    @property
    def region_start(self) -> str:
        return self.base.region_start

    @property
    def region_end(self) -> str:
        return self.base.region_end

    @property
    def case_sensitive(self) -> bool:
        return self.base.case_sensitive

    def rewrite_line(self, line: str, kind: RegionKind) -> str:
        return self.base.rewrite_line(line, kind)

    def apply(self, lines: Sequence[str]) -> BlockResult:
        result = self.base.apply(lines)
        with telemetry.span(
            "overlay::apply",
            component="overlay",
            metadata={
                "direction": self.direction.value,
                "rules": ",".join(rule.name for rule in self.rules),
            },
        ) as handle:
            output = list(result.lines)
            rewritten = 0
            for index, kind, delimiter in result.partition.iter_lines():
                if delimiter or kind is RegionKind.CODE:
                    continue
                line = self._rewrite(index, lines[index], output[index])
                if line is not None:
                    output[index] = line
                    rewritten += 1
            handle.add_metadata("rewritten", rewritten)
            return BlockResult(lines=tuple(output), partition=result.partition)

    def _rewrite(self, index: int, source: str, produced: str) -> Optional[str]:
        forward = self.direction is BlockDirection.UNCOMMENTED
        current = produced if forward else source
        matched = False
        for rule in self.rules:
            if not rule.applies_to(index):
                continue
            candidate = rule.apply(current, self.direction)
            if candidate is not None:
                current = candidate
                matched = True
        if not matched:
            return None
        if forward:
            return current
        return self.base.rewrite_line(current, RegionKind.PROSE)

    def transform(self, text: str) -> str:
        return transform_text(self, text)

    def invert(self) -> "Overlay":
        return Overlay(base=self.base.invert(), rules=self.rules)


__all__ = [
    "HEADER_MARKER",
    "LineRule",
    "Overlay",
    "SUMMARY_MARKER",
    "header_rule",
    "orgel_rules",
    "summary_rule",
]
