"""Semantic version values for package catalog lookups.

Versions follow the SemVer 2.0.0 grammar (``MAJOR.MINOR.PATCH[-PRE][+BUILD]``).
Equality compares every component, including build metadata, so a catalog
lookup only matches the exact version ``cargo tree`` printed. Ordering follows
SemVer precedence with build metadata as a final tie-break.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

from .errors import VersionParseError

_NUMERIC = r"0|[1-9][0-9]*"
_PRE_IDENT = rf"(?:{_NUMERIC}|[0-9]*[A-Za-z-][0-9A-Za-z-]*)"
_BUILD_IDENT = r"[0-9A-Za-z-]+"

_SEMVER_RE = re.compile(
    rf"^(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<pre>{_PRE_IDENT}(?:\.{_PRE_IDENT})*))?"
    rf"(?:\+(?P<build>{_BUILD_IDENT}(?:\.{_BUILD_IDENT})*))?$"
)


def _identifier_key(identifier: str) -> tuple[int, int, str]:
    # Numeric identifiers sort before alphanumeric ones.
    if identifier.isascii() and identifier.isdigit():
        return (0, int(identifier), "")
    return (1, 0, identifier)


@total_ordering
@dataclass(frozen=True)
class SemanticVersion:
    """An immutable semantic version.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        pre: Dot-separated pre-release identifiers (empty for a release).
        build: Dot-separated build metadata identifiers.
    """

    major: int
    minor: int
    patch: int
    pre: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse a version string.

        Raises:
            VersionParseError: If ``text`` is not a valid semantic version.
        """
        match = _SEMVER_RE.fullmatch(text)
        if match is None:
            raise VersionParseError(text)
        pre = match.group("pre")
        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            pre=tuple(pre.split(".")) if pre else (),
            build=tuple(build.split(".")) if build else (),
        )

    def _precedence_key(self) -> tuple:
        # A release outranks any pre-release of the same core version.
        pre_key = (1,) if not self.pre else (0, tuple(_identifier_key(i) for i in self.pre))
        return (self.major, self.minor, self.patch, pre_key, self.build)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence_key() < other._precedence_key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += "-" + ".".join(self.pre)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


__all__ = ["SemanticVersion"]
