"""Region matching and the block transform strategies built on it."""

from .overlay import LineRule, Overlay, header_rule, orgel_rules, summary_rule
from .regions import MalformedRegionError, Partition, Region, RegionKind, classify
from .strategy import (
    BlockDirection,
    BlockResult,
    BlockStrategy,
    CommentedBlock,
    ConfigurationError,
    Strategy,
    UncommentedBlock,
    block_strategy,
)

__all__ = [
    "BlockDirection",
    "BlockResult",
    "BlockStrategy",
    "CommentedBlock",
    "ConfigurationError",
    "LineRule",
    "MalformedRegionError",
    "Overlay",
    "Partition",
    "Region",
    "RegionKind",
    "Strategy",
    "UncommentedBlock",
    "block_strategy",
    "classify",
    "header_rule",
    "orgel_rules",
    "summary_rule",
]
