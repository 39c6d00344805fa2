"""``cargo tree`` runner for per-platform feature discovery.

``cargo metadata`` does not report which features are enabled per target
platform, so the runner asks ``cargo tree`` for one platform at a time with a
print format that exposes each node's active features.

The runner never mutates lockfiles or fetches metadata (``--frozen``) and does
not retry: a failed invocation raises and aborts the whole analysis.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from feature_foundry.errors import (
    TreeCommandError,
    TreeCommandTimeoutError,
    TreeOutputDecodeError,
)

from .lines import TREE_LINE_FORMAT

logger = logging.getLogger(__name__)

# Environment variable cargo sets for subprocesses it spawns
_ENV_CARGO = "CARGO"
DEFAULT_CARGO_BIN = "cargo"


def resolve_cargo_bin() -> str:
    """Return the cargo binary to invoke.

    Honors the ``CARGO`` environment variable so the runner uses the same
    toolchain when launched from a cargo subcommand.
    """
    return os.environ.get(_ENV_CARGO) or DEFAULT_CARGO_BIN


def build_tree_args(triple: str) -> list[str]:
    """Build the ``cargo tree`` arguments for one target platform.

    Example:
        >>> build_tree_args("x86_64-unknown-linux-gnu")[:3]
        ['tree', '--prefix=none', '--frozen']
    """
    return [
        "tree",
        "--prefix=none",
        "--frozen",
        f"--target={triple}",
        f"--format={TREE_LINE_FORMAT}",
    ]


@runtime_checkable
class ITreeRunner(Protocol):
    """Protocol for dependency-tree runners.

    Implementations return the raw output lines for one platform. Tests
    substitute canned line sequences through this seam.
    """

    def tree_lines(self, triple: str) -> list[str]:
        """Return the raw dependency-tree lines for ``triple``.

        Raises:
            TreeCommandError: If the tree command fails.
            TreeOutputDecodeError: If the output is not valid text.
        """
        ...


@dataclass(frozen=True)
class CargoTreeRunner:
    """Runs ``cargo tree`` in a workspace directory.

    Attributes:
        manifest_dir: Directory holding the workspace ``Cargo.toml``.
        cargo_bin: Cargo binary. Defaults to ``$CARGO`` or ``cargo``.
        timeout_sec: Optional timeout per invocation. None waits forever.
    """

    manifest_dir: Path
    cargo_bin: str = field(default_factory=resolve_cargo_bin)
    timeout_sec: float | None = None

    def build_command(self, triple: str) -> list[str]:
        return [self.cargo_bin, *build_tree_args(triple)]

    def run(self, triple: str) -> subprocess.CompletedProcess[bytes]:
        """Execute ``cargo tree`` for ``triple`` and return the completed process.

        Raises:
            TreeCommandError: If cargo cannot be launched or exits non-zero.
            TreeCommandTimeoutError: If ``timeout_sec`` elapses.
        """
        cmd = self.build_command(triple)
        logger.debug("Running %s in %s", " ".join(cmd), self.manifest_dir)
        try:
            proc = subprocess.run(
                cmd,
                cwd=self.manifest_dir,
                capture_output=True,
                check=False,
                timeout=self.timeout_sec,
            )
        except subprocess.TimeoutExpired as exc:
            raise TreeCommandTimeoutError(self.timeout_sec or 0.0, command=cmd) from exc
        except OSError as exc:
            raise TreeCommandError(f"Failed to launch {cmd[0]}: {exc}", command=cmd) from exc

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace")
            message_lines = [line.strip() for line in stderr.splitlines() if line.strip()]
            message = message_lines[0] if message_lines else f"exit code {proc.returncode}"
            raise TreeCommandError(
                f"cargo tree failed for {triple}: {message}",
                returncode=proc.returncode,
                stdout=proc.stdout.decode("utf-8", errors="replace"),
                stderr=stderr,
                command=cmd,
            )
        return proc

    def tree_lines(self, triple: str) -> list[str]:
        """Run ``cargo tree`` for ``triple`` and return its output lines.

        Raises:
            TreeCommandError: If cargo cannot be launched or exits non-zero.
            TreeOutputDecodeError: If stdout is not valid UTF-8.
        """
        proc = self.run(triple)
        try:
            text = proc.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TreeOutputDecodeError(f"cargo tree output for {triple} is not valid UTF-8: {exc}") from exc
        return text.splitlines()


__all__ = [
    "DEFAULT_CARGO_BIN",
    "CargoTreeRunner",
    "ITreeRunner",
    "build_tree_args",
    "resolve_cargo_bin",
]
