"""Feature Foundry: per-platform cargo feature consolidation for build-file generation.

A dependency graph resolved separately per target platform enables different
optional features on each platform. This package runs ``cargo tree`` once per
platform, determines which features every package uses where, and compresses
that into a set of features common to all platforms plus groups of features
tied to identical platform subsets, so generated build rules never repeat a
feature list verbatim per platform.

Public API
----------
- :func:`get_per_platform_features` - Analyze and consolidate features for all configured platforms
- :func:`consolidate_features` - Consolidate one package's ``platform -> features`` mapping
- :func:`transpose_platform_features` - Invert ``platform -> package`` into ``package -> platform``
- :func:`parse_tree_line` - Parse one ``cargo tree`` output line
- :func:`load_catalog` - Load the package catalog from ``cargo metadata`` JSON
- :func:`load_settings` - Load target platform settings

Example
-------
>>> from pathlib import Path
>>> from feature_foundry import get_per_platform_features, load_catalog, load_settings
>>> settings = load_settings(Path("Cargo.toml"))
>>> catalog = load_catalog(Path("metadata.json"))
>>> features = get_per_platform_features(settings, catalog, manifest_dir=Path("."))
"""

from __future__ import annotations

from feature_foundry.api import get_per_platform_features
from feature_foundry.catalog import CatalogPackage, PackageCatalog, load_catalog
from feature_foundry.errors import (
    CatalogLoadError,
    FeatureFoundryError,
    LineFormatError,
    PackageLookupError,
    SettingsLoadError,
    TreeCommandError,
    TreeCommandTimeoutError,
    TreeOutputDecodeError,
    VersionParseError,
)
from feature_foundry.features import (
    Features,
    TargetedFeatures,
    consolidate_features,
    transpose_platform_features,
)
from feature_foundry.settings import FeatureSettings, load_settings
from feature_foundry.tree import CargoTreeRunner, ITreeRunner, parse_tree_line
from feature_foundry.version import SemanticVersion

__all__ = [
    # Core API functions
    "get_per_platform_features",
    "consolidate_features",
    "transpose_platform_features",
    "parse_tree_line",
    "load_catalog",
    "load_settings",
    # Core types
    "CatalogPackage",
    "CargoTreeRunner",
    "FeatureSettings",
    "Features",
    "ITreeRunner",
    "PackageCatalog",
    "SemanticVersion",
    "TargetedFeatures",
    # Errors
    "CatalogLoadError",
    "FeatureFoundryError",
    "LineFormatError",
    "PackageLookupError",
    "SettingsLoadError",
    "TreeCommandError",
    "TreeCommandTimeoutError",
    "TreeOutputDecodeError",
    "VersionParseError",
]
