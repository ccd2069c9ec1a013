"""Configurations pairing a ``this`` buffer with the ``that`` it regenerates."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from lentic_engine.blocks import (
    BlockDirection,
    ConfigurationError,
    Overlay,
    Strategy,
    block_strategy,
    orgel_rules,
)
from lentic_engine.buffer import Buffer, TextContainer


@dataclass(frozen=True)
class Configuration:
    """Link between two text containers plus the strategy cloning between them.

    A configuration is built once per buffer pairing and holds no state
    between calls: every clone is a function of ``this.text`` and the
    strategy alone.
    """

    name: str
    this: TextContainer
    strategy: Strategy
    linked_path: Optional[str] = None
    that: Optional[TextContainer] = field(default=None)
    inverse_name: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("configuration name cannot be empty", field="name")
        if not isinstance(self.this, TextContainer):
            raise ConfigurationError(
                f"'{self.name}': this must be a text container", field="this"
            )
        if self.that is None:
            if not self.linked_path:
                raise ConfigurationError(
                    f"'{self.name}': either linked_path or that is required",
                    field="linked_path",
                )
            object.__setattr__(self, "that", _linked_buffer(self.linked_path))
        elif not isinstance(self.that, TextContainer):
            raise ConfigurationError(
                f"'{self.name}': that must be a text container", field="that"
            )
        if self.that is self.this:
            raise ConfigurationError(
                f"'{self.name}': this and that must be distinct buffers", field="that"
            )

    @property
    def direction(self) -> BlockDirection:
        return self.strategy.direction

    @property
    def target(self) -> TextContainer:
        assert self.that is not None
        return self.that


def _linked_buffer(linked_path: str) -> Buffer:
    return Buffer(name=os.path.basename(linked_path) or linked_path, path=linked_path)


def make_configuration(
    name: str,
    this: TextContainer,
    linked_path: Optional[str] = None,
    *,
    direction: BlockDirection | str,
    comment: str,
    region_start: str,
    region_end: str,
    case_sensitive: bool = False,
    overlay: bool = False,
    summary: str = ";;; ",
    header: str = ";;; ",
    that: Optional[TextContainer] = None,
    inverse_name: Optional[str] = None,
) -> Configuration:
    """Build a configuration for any direction, with or without the overlay."""

    strategy: Strategy = block_strategy(
        direction,
        comment=comment,
        region_start=region_start,
        region_end=region_end,
        case_sensitive=case_sensitive,
    )
    if overlay:
        strategy = Overlay(
            base=strategy,
            rules=orgel_rules(comment, summary=summary, header=header),
        )
    return Configuration(
        name=name,
        this=this,
        strategy=strategy,
        linked_path=linked_path,
        that=that,
        inverse_name=inverse_name,
    )


def make_uncommented_block_configuration(
    name: str,
    this: TextContainer,
    linked_path: Optional[str] = None,
    *,
    comment: str,
    region_start: str,
    region_end: str,
    case_sensitive: bool = False,
    that: Optional[TextContainer] = None,
) -> Configuration:
    """``this`` holds documentation; ``that`` receives commented source."""

    return make_configuration(
        name,
        this,
        linked_path,
        direction=BlockDirection.UNCOMMENTED,
        comment=comment,
        region_start=region_start,
        region_end=region_end,
        case_sensitive=case_sensitive,
        that=that,
    )


def make_commented_block_configuration(
    name: str,
    this: TextContainer,
    linked_path: Optional[str] = None,
    *,
    comment: str,
    region_start: str,
    region_end: str,
    case_sensitive: bool = False,
    that: Optional[TextContainer] = None,
) -> Configuration:
    """``this`` holds commented source; ``that`` receives documentation."""

    return make_configuration(
        name,
        this,
        linked_path,
        direction=BlockDirection.COMMENTED,
        comment=comment,
        region_start=region_start,
        region_end=region_end,
        case_sensitive=case_sensitive,
        that=that,
    )


def make_org_to_orgel_configuration(
    name: str,
    this: TextContainer,
    linked_path: Optional[str] = None,
    *,
    comment: str,
    region_start: str,
    region_end: str,
    case_sensitive: bool = False,
    summary: str = ";;; ",
    header: str = ";;; ",
    that: Optional[TextContainer] = None,
) -> Configuration:
    """Uncommented block plus summary-line and header rules."""

    return make_configuration(
        name,
        this,
        linked_path,
        direction=BlockDirection.UNCOMMENTED,
        comment=comment,
        region_start=region_start,
        region_end=region_end,
        case_sensitive=case_sensitive,
        overlay=True,
        summary=summary,
        header=header,
        that=that,
    )


def make_orgel_to_org_configuration(
    name: str,
    this: TextContainer,
    linked_path: Optional[str] = None,
    *,
    comment: str,
    region_start: str,
    region_end: str,
    case_sensitive: bool = False,
    summary: str = ";;; ",
    header: str = ";;; ",
    that: Optional[TextContainer] = None,
) -> Configuration:
    """Commented block plus the inverse summary-line and header rules."""

    return make_configuration(
        name,
        this,
        linked_path,
        direction=BlockDirection.COMMENTED,
        comment=comment,
        region_start=region_start,
        region_end=region_end,
        case_sensitive=case_sensitive,
        overlay=True,
        summary=summary,
        header=header,
        that=that,
    )


__all__ = [
    "Configuration",
    "make_commented_block_configuration",
    "make_configuration",
    "make_org_to_orgel_configuration",
    "make_orgel_to_org_configuration",
    "make_uncommented_block_configuration",
]
