# SPDX-License-Identifier: MIT
"""Pytest configuration and shared fixtures for test suite.

This module provides:
- Deterministic test environment setup
- A small package catalog matching the canned tree output
- A fake tree runner returning canned lines per platform
"""
from __future__ import annotations

import json
import os
from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest

from feature_foundry.catalog import CatalogPackage, PackageCatalog
from feature_foundry.version import SemanticVersion


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).resolve().parent
ROOT_DIR = TESTS_DIR.parent

LINUX = "x86_64-unknown-linux-gnu"
WINDOWS = "x86_64-pc-windows-msvc"
MACOS = "aarch64-apple-darwin"


# ---------------------------------------------------------------------------
# Environment Setup
# ---------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest environment for determinism.

    Sets environment variables to ensure reproducible test execution.
    """
    deterministic_env = {
        "LC_ALL": "C",
        "LANG": "C",
        "TZ": "UTC",
    }
    for key, value in deterministic_env.items():
        os.environ.setdefault(key, value)


# ---------------------------------------------------------------------------
# Fixtures: Catalog
# ---------------------------------------------------------------------------


def _package(name: str, version: str) -> CatalogPackage:
    return CatalogPackage(
        id=f"{name} {version} (registry+https://github.com/rust-lang/crates.io-index)",
        name=name,
        version=SemanticVersion.parse(version),
    )


@pytest.fixture
def catalog() -> PackageCatalog:
    """Catalog covering the packages printed by the canned tree output."""
    return PackageCatalog(
        [
            _package("demo", "0.1.0"),
            _package("serde", "1.0.130"),
            _package("libc", "0.2.103"),
            _package("winapi", "0.3.9"),
            _package("log", "0.4.14"),
        ]
    )


@pytest.fixture
def package_id():
    """Return the catalog id for a (name, version) pair."""

    def _id(name: str, version: str) -> str:
        return _package(name, version).id

    return _id


@pytest.fixture
def metadata_file(tmp_path: Path, catalog: PackageCatalog) -> Path:
    """Write the catalog as a cargo metadata JSON document."""
    payload = {
        "packages": [
            {"id": package.id, "name": package.name, "version": str(package.version)}
            for package in catalog
        ],
        "version": 1,
    }
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Fixtures: Fake Runners
# ---------------------------------------------------------------------------


@pytest.fixture
def canned_tree_output() -> dict[str, list[str]]:
    """cargo tree output per platform, including noise lines to be filtered."""
    return {
        LINUX: [
            "demo v0.1.0 (/workspace)|default|",
            "serde v1.0.130|default,derive,std|",
            "libc v0.2.103|default,std,extra_traits|",
            "log v0.4.14||",
            "serde v1.0.130|default,derive,std| (*)",
            "",
        ],
        WINDOWS: [
            "demo v0.1.0 (/workspace)|default|",
            "serde v1.0.130|default,std|",
            "winapi v0.3.9|fileapi,winbase|",
            "winapi v0.3.9|fileapi,winbase|",
        ],
        MACOS: [
            "demo v0.1.0 (/workspace)|default|",
            "serde v1.0.130|default,derive,std|",
            "libc v0.2.103|default,std|",
        ],
    }


@pytest.fixture
def fake_tree_runner():
    """Fixture providing a configurable fake tree runner.

    Usage:
        def test_something(fake_tree_runner):
            runner = fake_tree_runner({"linux": ["demo v0.1.0|a|"]})
            lines = runner.tree_lines("linux")
    """

    class FakeTreeRunner:
        def __init__(
            self,
            outputs: Mapping[str, Sequence[str]],
            *,
            failures: Mapping[str, Exception] | None = None,
        ) -> None:
            self.outputs = dict(outputs)
            self.failures = dict(failures or {})
            self.calls: list[str] = []

        def tree_lines(self, triple: str) -> list[str]:
            self.calls.append(triple)
            if triple in self.failures:
                raise self.failures[triple]
            return list(self.outputs.get(triple, []))

    return FakeTreeRunner
