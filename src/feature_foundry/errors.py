"""Error taxonomy for per-platform feature analysis.

Every error raised by this package derives from :class:`FeatureFoundryError`.
None of them is retryable: each one aborts the whole per-platform analysis and
propagates to the caller of :func:`feature_foundry.api.get_per_platform_features`.

- :class:`TreeCommandError` - ``cargo tree`` could not be launched or exited non-zero
- :class:`TreeOutputDecodeError` - ``cargo tree`` output is not valid UTF-8
- :class:`LineFormatError` - a tree line lacks the space/delimiter structure
- :class:`VersionParseError` - a version token is not a semantic version
- :class:`PackageLookupError` - a parsed (name, version) is missing from the catalog
"""

from __future__ import annotations


class FeatureFoundryError(Exception):
    """Base exception for feature analysis errors."""


class TreeCommandError(FeatureFoundryError):
    """Raised when the dependency-tree command fails to launch or exits non-zero."""

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
        command: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.command = command or []


class TreeCommandTimeoutError(TreeCommandError):
    """Raised when the dependency-tree command exceeds an explicit timeout."""

    def __init__(
        self,
        timeout_sec: float,
        command: list[str] | None = None,
    ) -> None:
        super().__init__(
            f"cargo tree timed out after {timeout_sec} seconds",
            returncode=None,
            command=command,
        )
        self.timeout_sec = timeout_sec


class TreeOutputDecodeError(FeatureFoundryError):
    """Raised when the dependency-tree output is not valid UTF-8 text."""


class LineFormatError(FeatureFoundryError, ValueError):
    """Raised when a tree line lacks the required space or delimiter."""

    def __init__(self, line: str) -> None:
        super().__init__(f"Failed to process cargo tree line: {line!r}")
        self.line = line


class VersionParseError(FeatureFoundryError, ValueError):
    """Raised when a version token is not a valid semantic version."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid semantic version: {text!r}")
        self.text = text


class PackageLookupError(FeatureFoundryError, LookupError):
    """Raised when a (name, version) pair has no match in the package catalog.

    This signals that the catalog and the dependency-tree output disagree,
    which is always fatal.
    """

    def __init__(self, name: str, version: object) -> None:
        super().__init__(f"Failed to find package: {name} {version}")
        self.name = name
        self.version = version


class CatalogLoadError(FeatureFoundryError):
    """Raised when a package catalog document cannot be loaded."""


class SettingsLoadError(FeatureFoundryError):
    """Raised when a settings file cannot be loaded."""


__all__ = [
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
