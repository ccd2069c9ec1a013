"""Forward transform, clone into ``that``, inversion, and round-trip checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from lentic_engine.blocks import Overlay
from lentic_engine.buffer import BufferDelta, container_label, split_lines
from lentic_engine.runtime import telemetry

from .configuration import Configuration


class CloneError(RuntimeError):
    """Raised when a configuration fails to regenerate its ``that`` buffer."""

    def __init__(self, message: str, *, configuration: str, buffer: str) -> None:
        super().__init__(message)
        self.configuration = configuration
        self.buffer = buffer


def transform(configuration: Configuration) -> str:
    """Return the text ``that`` should hold for the current ``this``."""

    return configuration.strategy.transform(configuration.this.text)


def clone(configuration: Configuration) -> BufferDelta:
    """Regenerate ``that`` from ``this`` and replace it wholesale.

    The new text is computed completely before ``that`` is touched, so a
    failure leaves the destination exactly as it was.
    """

    source = container_label(configuration.this)
    target = configuration.target
    with telemetry.span(
        "link::clone",
        component="link",
        metadata={
            "configuration": configuration.name,
            "this": source,
            "that": container_label(target),
        },
    ) as handle:
        try:
            text = transform(configuration)
        except Exception as exc:
            handle.add_metadata("error", type(exc).__name__)
            raise CloneError(
                f"Configuration '{configuration.name}' failed to transform "
                f"buffer '{source}': {exc}",
                configuration=configuration.name,
                buffer=source,
            ) from exc

        delta = target.replace_text(text, label=f"clone:{configuration.name}")

    telemetry.record_event(
        "link.clone",
        level="debug",
        data={"configuration": configuration.name, "lines": text.count("\n") + 1},
    )
    return delta


def invert(
    configuration: Configuration, *, name: Optional[str] = None
) -> Configuration:
    """Configuration for edits flowing from ``that`` back into ``this``."""

    inverted = Configuration(
        name=name or configuration.inverse_name or f"{configuration.name}:inverse",
        this=configuration.target,
        that=configuration.this,
        strategy=configuration.strategy.invert(),
        linked_path=container_label(configuration.this),
        inverse_name=configuration.name,
    )
    telemetry.record_event(
        "link.invert",
        level="debug",
        data={"configuration": configuration.name, "inverse": inverted.name},
    )
    return inverted


@dataclass(frozen=True, slots=True)
class RoundTripReport:
    configuration: str
    differences: Tuple[int, ...]
    ignored: Tuple[int, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.differences


def check_round_trip(configuration: Configuration) -> RoundTripReport:
    """Transform ``this`` forward and back, reporting lines that changed.

    The summary line is excluded when the strategy carries a first-line rule
    since it only re-syncs on the next full conversion.
    """

    strategy = configuration.strategy
    text = configuration.this.text
    original = split_lines(text)
    restored = split_lines(strategy.invert().transform(strategy.transform(text)))

    ignored: Tuple[int, ...] = ()
    if isinstance(strategy, Overlay):
        if any(rule.first_line_only for rule in strategy.rules):
            ignored = (0,)

    differences = tuple(
        index
        for index, (before, after) in enumerate(zip(original, restored))
        if before != after and index not in ignored
    )
    if len(original) != len(restored):
        differences += (min(len(original), len(restored)),)
    return RoundTripReport(
        configuration=configuration.name, differences=differences, ignored=ignored
    )


__all__ = [
    "CloneError",
    "RoundTripReport",
    "check_round_trip",
    "clone",
    "invert",
    "transform",
]
