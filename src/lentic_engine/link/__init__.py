"""Links between a ``this`` buffer and the ``that`` buffer cloned from it."""

from .configuration import (
    Configuration,
    make_commented_block_configuration,
    make_configuration,
    make_org_to_orgel_configuration,
    make_orgel_to_org_configuration,
    make_uncommented_block_configuration,
)
from .engine import (
    CloneError,
    RoundTripReport,
    check_round_trip,
    clone,
    invert,
    transform,
)

__all__ = [
    "CloneError",
    "Configuration",
    "RoundTripReport",
    "check_round_trip",
    "clone",
    "invert",
    "make_commented_block_configuration",
    "make_configuration",
    "make_org_to_orgel_configuration",
    "make_orgel_to_org_configuration",
    "make_uncommented_block_configuration",
    "transform",
]
