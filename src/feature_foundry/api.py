"""Per-platform feature analysis entry point.

:func:`get_per_platform_features` runs ``cargo tree`` once per configured
platform, transposes the results to a per-package view and consolidates each
package's features. Any failure aborts the whole analysis; no partial result
is ever returned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from .catalog import PackageCatalog
from .features import Features, consolidate_all, transpose_platform_features
from .per_platform import collect_platform_features
from .settings import FeatureSettings
from .tree.runner import CargoTreeRunner, ITreeRunner, resolve_cargo_bin

logger = logging.getLogger(__name__)


def build_tree_runner(settings: FeatureSettings, manifest_dir: Path) -> CargoTreeRunner:
    """Create the ``cargo tree`` runner described by ``settings``."""
    return CargoTreeRunner(
        manifest_dir=manifest_dir,
        cargo_bin=settings.cargo_bin or resolve_cargo_bin(),
        timeout_sec=settings.timeout_sec,
    )


def collect_all_platforms(
    triples: Iterable[str],
    runner: ITreeRunner,
    catalog: PackageCatalog,
    *,
    max_workers: int = 1,
) -> dict[str, dict[str, frozenset[str]]]:
    """Collect ``platform -> package id -> features`` for every triple.

    Platforms are independent, so with ``max_workers > 1`` they run
    concurrently. The first failure cancels runs that have not started and
    is re-raised once running ones finish.
    """
    ordered = sorted(set(triples))
    if max_workers <= 1 or len(ordered) <= 1:
        return {triple: collect_platform_features(triple, runner, catalog) for triple in ordered}

    results: dict[str, dict[str, frozenset[str]]] = {}
    with ThreadPoolExecutor(max_workers=min(max_workers, len(ordered))) as executor:
        future_to_triple = {
            executor.submit(collect_platform_features, triple, runner, catalog): triple
            for triple in ordered
        }
        for future in as_completed(future_to_triple):
            triple = future_to_triple[future]
            try:
                results[triple] = future.result()
            except Exception:
                logger.error("Feature analysis failed for %s", triple)
                for pending in future_to_triple:
                    pending.cancel()
                raise
    return results


def get_per_platform_features(
    settings: FeatureSettings,
    catalog: PackageCatalog,
    *,
    runner: ITreeRunner | None = None,
    manifest_dir: Path | None = None,
    max_workers: int | None = None,
) -> dict[str, Features]:
    """Analyze features per platform and consolidate them per package.

    Args:
        settings: Settings naming the target platforms.
        catalog: Package catalog used to resolve tree output to package ids.
        runner: Tree runner. Defaults to a :class:`CargoTreeRunner` in
            ``manifest_dir``.
        manifest_dir: Workspace directory for the default runner. Defaults to
            the current directory.
        max_workers: Platforms analyzed concurrently. Defaults to ``settings.jobs``.

    Returns:
        Mapping of package id to consolidated Features for every package
        reported with features on at least one platform.

    Raises:
        TreeCommandError: If ``cargo tree`` fails on any platform.
        TreeOutputDecodeError: If any platform's output is not valid text.
        LineFormatError: If any tree line is malformed.
        VersionParseError: If any version token is invalid.
        PackageLookupError: If any reported package is missing from ``catalog``.
    """
    triples = settings.target_triples()
    if not triples:
        logger.warning("No target platforms configured; skipping per-platform feature analysis")
        return {}

    if runner is None:
        runner = build_tree_runner(settings, manifest_dir or Path.cwd())
    workers = max_workers if max_workers is not None else settings.jobs

    platform_map = collect_all_platforms(triples, runner, catalog, max_workers=workers)
    features = consolidate_all(transpose_platform_features(platform_map))
    logger.info("Consolidated features for %d packages across %d platforms", len(features), len(triples))
    return features


__all__ = [
    "build_tree_runner",
    "collect_all_platforms",
    "get_per_platform_features",
]
