"""Tests for the package catalog and (name, version) resolution."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from feature_foundry.catalog import (
    CatalogPackage,
    PackageCatalog,
    catalog_from_metadata,
    load_catalog,
)
from feature_foundry.errors import CatalogLoadError, PackageLookupError
from feature_foundry.version import SemanticVersion


def test_find_package_id_exact_match(catalog: PackageCatalog, package_id) -> None:
    found = catalog.find_package_id("serde", SemanticVersion.parse("1.0.130"))
    assert found == package_id("serde", "1.0.130")


def test_find_package_id_version_mismatch(catalog: PackageCatalog) -> None:
    with pytest.raises(PackageLookupError) as exc_info:
        catalog.find_package_id("serde", SemanticVersion.parse("1.0.131"))

    assert exc_info.value.name == "serde"
    assert exc_info.value.version == SemanticVersion.parse("1.0.131")
    assert "serde 1.0.131" in str(exc_info.value)


def test_find_package_id_unknown_name(catalog: PackageCatalog) -> None:
    with pytest.raises(LookupError):
        catalog.find_package_id("tokio", SemanticVersion.parse("1.0.0"))


def test_same_name_different_versions() -> None:
    catalog = PackageCatalog(
        [
            CatalogPackage(id="rand-0.7", name="rand", version=SemanticVersion.parse("0.7.3")),
            CatalogPackage(id="rand-0.8", name="rand", version=SemanticVersion.parse("0.8.4")),
        ]
    )

    assert catalog.find_package_id("rand", SemanticVersion.parse("0.7.3")) == "rand-0.7"
    assert catalog.find_package_id("rand", SemanticVersion.parse("0.8.4")) == "rand-0.8"
    assert len(catalog) == 2


def test_first_duplicate_wins() -> None:
    catalog = PackageCatalog(
        [
            CatalogPackage(id="first", name="dup", version=SemanticVersion(1, 0, 0)),
            CatalogPackage(id="second", name="dup", version=SemanticVersion(1, 0, 0)),
        ]
    )
    assert catalog.find_package_id("dup", SemanticVersion(1, 0, 0)) == "first"


def test_catalog_from_metadata() -> None:
    catalog = catalog_from_metadata(
        {
            "packages": [
                {"id": "a 1.0.0 (path+file:///a)", "name": "a", "version": "1.0.0", "features": {}},
            ],
            "workspace_members": ["a 1.0.0 (path+file:///a)"],
        }
    )
    assert [package.name for package in catalog] == ["a"]


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"packages": {}},
        {"packages": ["not-an-object"]},
        {"packages": [{"name": "a", "version": "1.0.0"}]},
        {"packages": [{"id": "a", "version": "1.0.0"}]},
        {"packages": [{"id": "a", "name": "a", "version": 1}]},
        {"packages": [{"id": "a", "name": "a", "version": "one"}]},
    ],
)
def test_catalog_from_metadata_rejects_malformed(payload: dict) -> None:
    with pytest.raises(CatalogLoadError):
        catalog_from_metadata(payload)


def test_load_catalog(metadata_file: Path, catalog: PackageCatalog) -> None:
    loaded = load_catalog(metadata_file)
    assert list(loaded) == list(catalog)


def test_load_catalog_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_catalog(tmp_path / "missing.json")


def test_load_catalog_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "metadata.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogLoadError):
        load_catalog(path)


def test_load_catalog_non_object(tmp_path: Path) -> None:
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps([1, 2]), encoding="utf-8")
    with pytest.raises(CatalogLoadError):
        load_catalog(path)


def test_load_catalog_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "metadata.json"
    path.write_bytes(b'{"packages": ["\xff"]}')
    with pytest.raises(CatalogLoadError, match="Failed to read"):
        load_catalog(path)


def test_load_catalog_directory(tmp_path: Path) -> None:
    with pytest.raises(CatalogLoadError, match="Failed to read"):
        load_catalog(tmp_path)
