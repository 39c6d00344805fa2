"""Settings for per-platform feature analysis.

Settings name the target platforms to analyze and how ``cargo tree`` is
invoked. They load from YAML, JSON, or TOML. A ``Cargo.toml`` contributes its
``[package.metadata.raze]`` (or ``[workspace.metadata.raze]``) table; keys in
that table unrelated to feature analysis are ignored.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .errors import SettingsLoadError

_CARGO_MANIFEST_NAME = "Cargo.toml"
_RAZE_TABLE_PATHS = (("package", "metadata", "raze"), ("workspace", "metadata", "raze"))


class FeatureSettings(BaseModel):
    """Feature analysis settings.

    Attributes:
        target: Primary target platform triple.
        targets: Additional target platform triples.
        cargo_bin: Cargo binary override. None uses ``$CARGO`` or ``cargo``.
        timeout_sec: Optional timeout per ``cargo tree`` run.
        jobs: Number of platforms analyzed concurrently.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target: str | None = Field(default=None, min_length=1)
    targets: list[Annotated[str, Field(min_length=1)]] | None = None
    cargo_bin: str | None = Field(default=None, min_length=1)
    timeout_sec: float | None = Field(default=None, gt=0)
    jobs: int = Field(default=1, ge=1)

    def target_triples(self) -> frozenset[str]:
        """Return the configured platform set.

        Order and repetition in the configuration are irrelevant; only set
        membership matters.
        """
        triples: set[str] = set()
        if self.target:
            triples.add(self.target)
        if self.targets:
            triples.update(self.targets)
        return frozenset(triples)


_FIELD_NAMES = frozenset(FeatureSettings.model_fields)


def _raze_table(document: dict[str, Any]) -> dict[str, Any]:
    for keys in _RAZE_TABLE_PATHS:
        node: Any = document
        for key in keys:
            node = node.get(key) if isinstance(node, dict) else None
        if isinstance(node, dict):
            return {key: value for key, value in node.items() if key in _FIELD_NAMES}
    return {}


def load_settings_from_dict(data: dict[str, Any]) -> FeatureSettings:
    """Validate settings from a dictionary.

    Raises:
        pydantic.ValidationError: If the data fails validation.
    """
    return FeatureSettings.model_validate(data)


def load_settings(path: Path | str) -> FeatureSettings:
    """Load settings from a YAML, JSON, or TOML file.

    Args:
        path: Settings file. A file named ``Cargo.toml`` is read for its raze
            metadata table.

    Raises:
        FileNotFoundError: If the file does not exist.
        SettingsLoadError: If the file cannot be read, cannot be parsed, or has
            an unsupported type.
        pydantic.ValidationError: If the settings fail validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SettingsLoadError(f"Failed to read {path}: {exc}") from exc

    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        elif suffix == ".json":
            data = json.loads(text)
        elif suffix == ".toml":
            data = tomllib.loads(text)
            if path.name == _CARGO_MANIFEST_NAME:
                data = _raze_table(data)
        else:
            raise SettingsLoadError(f"Unsupported file extension: {suffix}. Use .yaml, .yml, .json, or .toml")
    except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise SettingsLoadError(f"Failed to parse {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsLoadError(f"Settings file must contain a mapping, got {type(data).__name__}")

    return load_settings_from_dict(data)


__all__ = [
    "FeatureSettings",
    "load_settings",
    "load_settings_from_dict",
]
