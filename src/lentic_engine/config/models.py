"""Named, immutable initializers for link configurations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, MutableMapping, Optional

from lentic_engine.blocks import (
    BlockDirection,
    ConfigurationError,
    Overlay,
    Strategy,
    block_strategy,
    orgel_rules,
)
from lentic_engine.buffer import TextContainer
from lentic_engine.link import Configuration, make_configuration


def _normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    seen: MutableMapping[str, None] = {}
    for tag in tags:
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return tuple(seen)


def _shape(spec: "ConfigurationSpec") -> tuple[object, ...]:
    return (
        spec.comment,
        spec.region_start,
        spec.region_end,
        spec.case_sensitive,
        spec.overlay,
    )


@dataclass(frozen=True, slots=True)
class ConfigurationSpec:
    """Everything needed to build a :class:`Configuration` except the buffers.

    ``extension`` is the conventional suffix of the linked file. It is
    metadata for the host deciding which file to pair with; the engine never
    derives paths from it.
    """

    name: str
    direction: BlockDirection
    comment: str
    region_start: str
    region_end: str
    case_sensitive: bool = False
    overlay: bool = False
    summary: str = ";;; "
    header: str = ";;; "
    extension: Optional[str] = None
    inverse: Optional[str] = None
    description: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("spec name cannot be empty", field="name")
        if self.extension is not None and not self.extension.startswith("."):
            raise ConfigurationError(
                f"Spec '{self.name}': extension must start with '.'",
                field="extension",
            )
        if self.inverse == self.name:
            raise ConfigurationError(
                f"Spec '{self.name}' cannot be its own inverse", field="inverse"
            )
        try:
            direction = BlockDirection(self.direction)
        except ValueError as exc:
            raise ConfigurationError(
                f"Spec '{self.name}': unknown direction '{self.direction}'",
                field="direction",
            ) from exc
        object.__setattr__(self, "direction", direction)
        object.__setattr__(self, "tags", _normalize_tags(self.tags))
        # Validates comment, markers and overlay markers up front.
        self.build_strategy()

    def build_strategy(self) -> Strategy:
        strategy: Strategy = block_strategy(
            self.direction,
            comment=self.comment,
            region_start=self.region_start,
            region_end=self.region_end,
            case_sensitive=self.case_sensitive,
        )
        if self.overlay:
            strategy = Overlay(
                base=strategy,
                rules=orgel_rules(
                    self.comment, summary=self.summary, header=self.header
                ),
            )
        return strategy

    def is_inverse_of(self, other: "ConfigurationSpec") -> bool:
        """Structural opposites: flipped direction, everything else equal."""

        if self.direction is not other.direction.inverted():
            return False
        if self.overlay and (self.summary, self.header) != (
            other.summary,
            other.header,
        ):
            return False
        return _shape(self) == _shape(other)

    def initialize(
        self,
        this: TextContainer,
        linked_path: Optional[str] = None,
        *,
        that: Optional[TextContainer] = None,
    ) -> Configuration:
        return make_configuration(
            self.name,
            this,
            linked_path,
            direction=self.direction,
            comment=self.comment,
            region_start=self.region_start,
            region_end=self.region_end,
            case_sensitive=self.case_sensitive,
            overlay=self.overlay,
            summary=self.summary,
            header=self.header,
            that=that,
            inverse_name=self.inverse,
        )


__all__ = ["ConfigurationError", "ConfigurationSpec"]
