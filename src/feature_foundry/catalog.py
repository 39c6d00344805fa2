"""Package catalog and (name, version) resolution.

The catalog is the package list of a ``cargo metadata --format-version 1``
document. It is consumed here, never built: every package ``cargo tree``
reports must already be present, and a miss is a fatal inconsistency.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import CatalogLoadError, PackageLookupError, VersionParseError
from .version import SemanticVersion


@dataclass(frozen=True)
class CatalogPackage:
    """A package known to the catalog.

    Attributes:
        id: Opaque package identity, used as the output key.
        name: Package name.
        version: Package version.
    """

    id: str
    name: str
    version: SemanticVersion


class PackageCatalog:
    """Immutable collection of packages with exact (name, version) lookup."""

    def __init__(self, packages: Iterable[CatalogPackage]) -> None:
        self._packages = tuple(packages)
        index: dict[tuple[str, SemanticVersion], str] = {}
        for package in self._packages:
            # First match wins, mirroring a linear search of the package list.
            index.setdefault((package.name, package.version), package.id)
        self._index = index

    def __iter__(self) -> Iterator[CatalogPackage]:
        return iter(self._packages)

    def __len__(self) -> int:
        return len(self._packages)

    def find_package_id(self, name: str, version: SemanticVersion) -> str:
        """Return the identity of the package matching ``name`` and ``version``.

        Raises:
            PackageLookupError: If no package matches exactly.
        """
        try:
            return self._index[(name, version)]
        except KeyError:
            raise PackageLookupError(name, version) from None


def catalog_from_metadata(payload: Mapping[str, Any]) -> PackageCatalog:
    """Build a catalog from a parsed ``cargo metadata`` document.

    Raises:
        CatalogLoadError: If the document is not shaped like cargo metadata.
    """
    packages = payload.get("packages")
    if not isinstance(packages, list):
        raise CatalogLoadError("cargo metadata must contain a 'packages' list")

    entries: list[CatalogPackage] = []
    for index, raw in enumerate(packages):
        if not isinstance(raw, Mapping):
            raise CatalogLoadError(f"packages[{index}] must be an object")
        package_id = raw.get("id")
        name = raw.get("name")
        version = raw.get("version")
        if not isinstance(package_id, str) or not package_id:
            raise CatalogLoadError(f"packages[{index}].id must be a non-empty string")
        if not isinstance(name, str) or not name:
            raise CatalogLoadError(f"packages[{index}].name must be a non-empty string")
        if not isinstance(version, str):
            raise CatalogLoadError(f"packages[{index}].version must be a string")
        try:
            parsed = SemanticVersion.parse(version)
        except VersionParseError as exc:
            raise CatalogLoadError(f"packages[{index}].version: {exc}") from exc
        entries.append(CatalogPackage(id=package_id, name=name, version=parsed))
    return PackageCatalog(entries)


def load_catalog(path: Path | str) -> PackageCatalog:
    """Load a catalog from a ``cargo metadata`` JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        CatalogLoadError: If the file cannot be read as UTF-8 text or is not
            valid cargo metadata JSON.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"cargo metadata file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogLoadError(f"Failed to read {path}: {exc}") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise CatalogLoadError("cargo metadata must be a JSON object")
    return catalog_from_metadata(payload)


__all__ = [
    "CatalogPackage",
    "PackageCatalog",
    "catalog_from_metadata",
    "load_catalog",
]
