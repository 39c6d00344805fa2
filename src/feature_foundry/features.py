"""Transposition and consolidation of per-platform package features.

The runner produces ``platform -> package -> features``. Build rules are
emitted per package, so the data is first transposed to
``package -> platform -> features`` and then consolidated into:

- ``features``: the features enabled on every platform that reported the
  package, stated once.
- ``targeted_features``: groups of the remaining features, one group per
  distinct set of enabling platforms.

All output sequences are explicitly sorted; nothing depends on dict or set
iteration order.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

PlatformFeatures = Mapping[str, frozenset[str]]


class _FeaturesBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TargetedFeatures(_FeaturesBase):
    """Features enabled on exactly one non-universal set of platforms.

    Attributes:
        platforms: Sorted, unique platform triples enabling the features.
        features: Sorted, unique feature names.
    """

    platforms: tuple[str, ...]
    features: tuple[str, ...]

    @field_validator("platforms", "features")
    @classmethod
    def _sorted_unique(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(sorted(set(value)))


class Features(_FeaturesBase):
    """Consolidated features of one package across all analyzed platforms.

    Attributes:
        features: Sorted features enabled on every reporting platform.
        targeted_features: Platform-specific groups, most platforms first.
    """

    features: tuple[str, ...] = ()
    targeted_features: tuple[TargetedFeatures, ...] = ()

    @field_validator("features")
    @classmethod
    def _sorted_unique(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(sorted(set(value)))

    @classmethod
    def empty(cls) -> Features:
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert to the serialized ``{features, targeted_features}`` shape."""
        return {
            "features": list(self.features),
            "targeted_features": [
                {"platforms": list(group.platforms), "features": list(group.features)}
                for group in self.targeted_features
            ],
        }


def transpose_platform_features(
    triples: Mapping[str, Mapping[str, frozenset[str]]],
) -> dict[str, dict[str, frozenset[str]]]:
    """Invert ``platform -> package -> features`` into ``package -> platform -> features``.

    A package missing from a platform's mapping is not a dependency under that
    platform; the platform is simply absent from the package's inner mapping.
    """
    packages: dict[str, dict[str, frozenset[str]]] = {}
    for triple, package_features in triples.items():
        for package_id, features in package_features.items():
            packages.setdefault(package_id, {})[triple] = frozenset(features)
    return packages


def _group_sort_key(group: TargetedFeatures) -> tuple[int, tuple[str, ...]]:
    # Platform tuples are distinct across groups, so this key is total.
    return (len(group.platforms), group.platforms)


def consolidate_features(platform_features: PlatformFeatures) -> Features:
    """Consolidate one package's per-platform feature sets.

    Args:
        platform_features: Mapping of platform triple to the features enabled
            on that platform. Must contain at least one platform.

    Returns:
        Features whose ``features`` are common to every platform and whose
        ``targeted_features`` group the rest by exact enabling-platform set.
        Groups are ordered by platform count and then first platform, with the
        whole order reversed: larger groups first, and among equal sizes the
        lexicographically largest platform list first.

    Raises:
        ValueError: If ``platform_features`` is empty.

    Example:
        >>> result = consolidate_features({
        ...     "linux": frozenset({"shared", "onlyLinux"}),
        ...     "windows": frozenset({"shared", "onlyWindows"}),
        ... })
        >>> result.features
        ('shared',)
        >>> [group.platforms for group in result.targeted_features]
        [('windows',), ('linux',)]
    """
    if not platform_features:
        raise ValueError("consolidate_features requires at least one platform")

    common = frozenset.intersection(*(frozenset(fs) for fs in platform_features.values()))

    enablers: dict[str, set[str]] = {}
    for platform, features in platform_features.items():
        for feature in features:
            if feature not in common:
                enablers.setdefault(feature, set()).add(platform)

    grouped: dict[tuple[str, ...], list[str]] = {}
    for feature, platforms in enablers.items():
        grouped.setdefault(tuple(sorted(platforms)), []).append(feature)

    groups = sorted(
        (
            TargetedFeatures(platforms=platforms, features=tuple(sorted(features)))
            for platforms, features in grouped.items()
        ),
        key=_group_sort_key,
    )
    groups.reverse()

    return Features(features=tuple(sorted(common)), targeted_features=tuple(groups))


def consolidate_all(
    packages: Mapping[str, PlatformFeatures],
) -> dict[str, Features]:
    """Consolidate every package of a transposed view."""
    return {package_id: consolidate_features(platforms) for package_id, platforms in packages.items()}


__all__ = [
    "Features",
    "PlatformFeatures",
    "TargetedFeatures",
    "consolidate_all",
    "consolidate_features",
    "transpose_platform_features",
]
