"""Command-line interface for per-platform feature analysis.

Commands:
    consolidate: Run cargo tree per platform and emit consolidated features.
    triples: Print the configured target platform set.
    parse-line: Parse a single cargo tree line (debugging aid).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .api import get_per_platform_features
from .catalog import load_catalog
from .errors import FeatureFoundryError
from .serialize import canonical_json_dumps, features_to_payload, write_features
from .settings import FeatureSettings, load_settings, load_settings_from_dict
from .tree.lines import parse_tree_line

logger = logging.getLogger(__name__)

__version__ = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the feature-foundry CLI."""
    # Shared settings arguments
    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument("--settings", type=Path, help="Settings file (YAML, JSON, TOML or Cargo.toml)")
    shared.add_argument("--target", default=None, help="Primary target platform triple")
    shared.add_argument("--targets", nargs="+", default=None, help="Additional target platform triples")

    parser = argparse.ArgumentParser(
        prog="feature-foundry",
        description="Consolidate per-platform cargo features for build-file generation",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    consolidate = subparsers.add_parser(
        "consolidate",
        help="Analyze features per platform and emit consolidated JSON",
        parents=[shared],
    )
    consolidate.add_argument(
        "--metadata",
        type=Path,
        required=True,
        help="cargo metadata --format-version 1 JSON file",
    )
    consolidate.add_argument("--manifest-dir", type=Path, default=Path("."), help="Workspace directory")
    consolidate.add_argument("--cargo-bin", default=None, help="Cargo binary (default: $CARGO or cargo)")
    consolidate.add_argument("--jobs", type=int, default=None, help="Platforms analyzed concurrently")
    consolidate.add_argument("--timeout", type=float, default=None, help="Timeout per cargo tree run in seconds")
    consolidate.add_argument("--out", type=Path, default=None, help="Output file (default: stdout)")

    subparsers.add_parser("triples", help="Print the configured target platforms", parents=[shared])

    parse_line = subparsers.add_parser("parse-line", help="Parse one cargo tree output line")
    parse_line.add_argument("line", help="Line of the form '<name> v<version>|<features>|'")

    return parser


def _resolve_settings(args: argparse.Namespace) -> FeatureSettings:
    data: dict[str, Any] = {}
    if args.settings is not None:
        data = load_settings(args.settings).model_dump(exclude_none=True)

    overrides = {
        "target": args.target,
        "targets": args.targets,
        "cargo_bin": getattr(args, "cargo_bin", None),
        "jobs": getattr(args, "jobs", None),
        "timeout_sec": getattr(args, "timeout", None),
    }
    data.update({key: value for key, value in overrides.items() if value is not None})
    return load_settings_from_dict(data)


def _run_consolidate(args: argparse.Namespace) -> int:
    settings = _resolve_settings(args)
    catalog = load_catalog(args.metadata)
    features = get_per_platform_features(settings, catalog, manifest_dir=args.manifest_dir)

    if args.out:
        write_features(args.out, features)
        sys.stderr.write(f"Features written to: {args.out}\n")
        return 0

    sys.stdout.write(canonical_json_dumps(features_to_payload(features)) + "\n")
    return 0


def _run_triples(args: argparse.Namespace) -> int:
    settings = _resolve_settings(args)
    sys.stdout.write(canonical_json_dumps(sorted(settings.target_triples())) + "\n")
    return 0


def _run_parse_line(args: argparse.Namespace) -> int:
    parsed = parse_tree_line(args.line)
    payload = {
        "name": parsed.name,
        "version": str(parsed.version),
        "features": sorted(parsed.features),
    }
    sys.stdout.write(canonical_json_dumps(payload) + "\n")
    return 0


_COMMANDS = {
    "consolidate": _run_consolidate,
    "triples": _run_triples,
    "parse-line": _run_parse_line,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the feature-foundry CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = logging.WARNING
    if args.verbose == 1:
        log_level = logging.INFO
    elif args.verbose >= 2:
        log_level = logging.DEBUG
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    try:
        return _COMMANDS[args.command](args)
    except ValidationError as exc:
        sys.stderr.write(f"Invalid settings: {exc}\n")
        return 2
    except (FeatureFoundryError, FileNotFoundError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
