"""Parsing of ``cargo tree`` output lines.

The runner asks ``cargo tree`` to print every graph node as::

    <name> v<version>|<feature>,<feature>,...|

This module turns those lines into :class:`TreeLine` records and drops the
lines that carry no feature information.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from feature_foundry.errors import LineFormatError
from feature_foundry.version import SemanticVersion

# Delimiter wrapping the comma-separated feature list
FEATURE_DELIMITER = "|"

# Suffix cargo tree appends to nodes already printed elsewhere in the graph
DEDUPE_MARKER = "(*)"

# Suffix of a node with no enabled features
EMPTY_FEATURES_SUFFIX = FEATURE_DELIMITER * 2

TREE_LINE_FORMAT = "{p}" + FEATURE_DELIMITER + "{f}" + FEATURE_DELIMITER


@dataclass(frozen=True)
class TreeLine:
    """One parsed ``cargo tree`` node.

    Attributes:
        name: Package name.
        version: Package version.
        features: Features enabled on the node.
    """

    name: str
    version: SemanticVersion
    features: frozenset[str]


def parse_tree_line(line: str) -> TreeLine:
    """Parse a single ``cargo tree`` line.

    Args:
        line: Text of the form ``"<name> <version-token>|<features>|"``.

    Returns:
        TreeLine with the package name, version and feature set.

    Raises:
        LineFormatError: If the line has no space or no delimiter.
        VersionParseError: If the version token is not a semantic version.

    Example:
        >>> parse_tree_line("demo v1.2.3|alpha,beta|").features == {"alpha", "beta"}
        True
    """
    space = line.find(" ")
    delimiter = line.find(FEATURE_DELIMITER)
    if space < 0 or delimiter < 0:
        raise LineFormatError(line)

    package, blob = line[:delimiter], line[delimiter:]
    features = frozenset(
        token for token in blob.replace(FEATURE_DELIMITER, "").split(",") if token
    )

    name, remainder = package[:space], package[space:]
    remainder = remainder.lstrip(" v")
    version_end = remainder.find(" ")
    if version_end < 0:
        version_end = len(remainder)
    version = SemanticVersion.parse(remainder[:version_end])

    return TreeLine(name=name.strip(), version=version, features=features)


def is_informative_line(line: str) -> bool:
    """Return False for empty lines, dedupe markers and featureless nodes."""
    return not (line.endswith(DEDUPE_MARKER) or line.endswith(EMPTY_FEATURES_SUFFIX) or not line)


def filter_tree_lines(lines: Iterable[str]) -> list[str]:
    """Drop uninformative lines and deduplicate the rest.

    The same node text recurs when a package is reachable through several
    paths. Returned lines are sorted so downstream folding sees a stable order.
    """
    return sorted({line for line in lines if is_informative_line(line)})


__all__ = [
    "DEDUPE_MARKER",
    "EMPTY_FEATURES_SUFFIX",
    "FEATURE_DELIMITER",
    "TREE_LINE_FORMAT",
    "TreeLine",
    "filter_tree_lines",
    "is_informative_line",
    "parse_tree_line",
]
