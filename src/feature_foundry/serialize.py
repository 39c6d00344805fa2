"""Canonical JSON serialization of consolidated features.

Downstream build-file generation diffs its outputs, so serialized features
must be byte-stable for unchanged inputs.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .features import Features


def canonical_json_dumps(data: Any) -> str:
    """Serialize JSON with sorted keys and compact separators."""
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def features_to_payload(features: Mapping[str, Features]) -> dict[str, dict[str, Any]]:
    """Convert a ``package id -> Features`` mapping to plain JSON data."""
    return {package_id: features[package_id].to_dict() for package_id in sorted(features)}


def write_features(path: Path, features: Mapping[str, Features]) -> None:
    """Write consolidated features as canonical JSON."""
    text = canonical_json_dumps(features_to_payload(features))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{text}\n", encoding="utf-8")


__all__ = [
    "canonical_json_dumps",
    "features_to_payload",
    "write_features",
]
