"""Per-platform package feature maps.

Turns the raw dependency-tree lines of one platform into a
``package id -> features`` mapping: uninformative lines are filtered, the
rest are parsed, resolved against the catalog and folded together.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from itertools import groupby
from operator import itemgetter

from .catalog import PackageCatalog
from .tree.lines import filter_tree_lines, parse_tree_line
from .tree.runner import ITreeRunner

logger = logging.getLogger(__name__)


def resolve_tree_lines(lines: Iterable[str], catalog: PackageCatalog) -> list[tuple[str, frozenset[str]]]:
    """Parse and resolve every informative line into ``(package id, features)``.

    Raises:
        LineFormatError: If a line is malformed.
        VersionParseError: If a version token is invalid.
        PackageLookupError: If a parsed package is not in the catalog.
    """
    resolved: list[tuple[str, frozenset[str]]] = []
    for line in filter_tree_lines(lines):
        parsed = parse_tree_line(line)
        package_id = catalog.find_package_id(parsed.name, parsed.version)
        resolved.append((package_id, parsed.features))
    return resolved


def build_package_feature_map(lines: Iterable[str], catalog: PackageCatalog) -> dict[str, frozenset[str]]:
    """Build the ``package id -> features`` mapping for one platform's tree output.

    A package reached through several graph edges may be reported more than
    once, possibly with different features. Reports for the same package are
    unioned; divergent reports are logged as a warning.
    """
    resolved = sorted(resolve_tree_lines(lines, catalog), key=itemgetter(0))
    package_map: dict[str, frozenset[str]] = {}
    for package_id, entries in groupby(resolved, key=itemgetter(0)):
        reports = [features for _, features in entries]
        if len(set(reports)) > 1:
            logger.warning(
                "Package %s reported with divergent features: %s",
                package_id,
                "; ".join(",".join(sorted(report)) for report in sorted(set(reports), key=sorted)),
            )
        package_map[package_id] = frozenset().union(*reports)
    return package_map


def collect_platform_features(
    triple: str,
    runner: ITreeRunner,
    catalog: PackageCatalog,
) -> dict[str, frozenset[str]]:
    """Run the dependency tree for ``triple`` and build its feature map."""
    logger.info("Running cargo tree for %s", triple)
    lines = runner.tree_lines(triple)
    package_map = build_package_feature_map(lines, catalog)
    logger.debug("%s: %d lines, %d packages with features", triple, len(lines), len(package_map))
    return package_map


__all__ = [
    "build_package_feature_map",
    "collect_platform_features",
    "resolve_tree_lines",
]
