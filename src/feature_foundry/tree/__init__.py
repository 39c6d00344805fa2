"""``cargo tree`` invocation and output parsing.

This package provides:
- CargoTreeRunner: runs ``cargo tree`` once per target platform
- ITreeRunner: the runner protocol, for substituting canned output in tests
- parse_tree_line / filter_tree_lines: line-level parsing of the tree output
"""

from __future__ import annotations

from .lines import (
    DEDUPE_MARKER,
    FEATURE_DELIMITER,
    TREE_LINE_FORMAT,
    TreeLine,
    filter_tree_lines,
    is_informative_line,
    parse_tree_line,
)
from .runner import (
    DEFAULT_CARGO_BIN,
    CargoTreeRunner,
    ITreeRunner,
    build_tree_args,
    resolve_cargo_bin,
)

__all__ = [
    # Constants
    "DEDUPE_MARKER",
    "DEFAULT_CARGO_BIN",
    "FEATURE_DELIMITER",
    "TREE_LINE_FORMAT",
    # Protocol and implementations
    "CargoTreeRunner",
    "ITreeRunner",
    # Parsing
    "TreeLine",
    "filter_tree_lines",
    "is_informative_line",
    "parse_tree_line",
    # Functions
    "build_tree_args",
    "resolve_cargo_bin",
]
