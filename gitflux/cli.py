"""gitflux CLI — derive versions from git branch and tag names.

Usage:
    gitflux version [--json]
    gitflux write-version [--output <path>]
    gitflux compat [--since <X.Y.Z>] [--json]
    gitflux explain [--since <X.Y.Z>]
    gitflux parse <semver>
    gitflux classify <ref> [<ref> ...]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from gitflux import __version__
from gitflux.core.config import GitFluxConfig

EXIT_OK = 0
EXIT_NO_VERSION = 1
EXIT_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitflux",
        description="gitflux: derive release versions from git branch and tag names",
        epilog="Branches: develop-X.Y.Z, topic-X.Y.Z-name. Tags: release-X.Y.Z, release-X.Y.Z-alpha.N.",
    )
    parser.add_argument("--version", action="version", version=f"gitflux {__version__}")
    parser.add_argument("--repo", "-C", type=str, default=None, help="Path to the git working tree")
    parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Log more detail (repeat for debug)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- version ---
    version_parser = subparsers.add_parser("version", help="Print the derived version")
    version_parser.add_argument("--json", action="store_true", help="Print the full derivation as JSON")

    # --- write-version ---
    write_parser = subparsers.add_parser("write-version", help="Write the derived version to a file")
    write_parser.add_argument(
        "--output", "-o", type=str, default=None, help="Version file path (default: target/VERSION)"
    )

    # --- compat ---
    compat_parser = subparsers.add_parser(
        "compat", help="Print the compatibility requirement against the prior release"
    )
    compat_parser.add_argument(
        "--since", type=str, default=None, help="Version in which this artifact first appeared"
    )
    compat_parser.add_argument("--json", action="store_true", help="Print the decision as JSON")

    # --- explain ---
    explain_parser = subparsers.add_parser("explain", help="Show how the version was derived")
    explain_parser.add_argument(
        "--since", type=str, default=None, help="Version in which this artifact first appeared"
    )

    # --- parse ---
    parse_parser = subparsers.add_parser("parse", help="Parse a semantic version string")
    parse_parser.add_argument("semver", type=str, help="Version string to parse")

    # --- classify ---
    classify_parser = subparsers.add_parser("classify", help="Classify branch or tag names")
    classify_parser.add_argument("refs", nargs="+", help="Branch or tag names")

    return parser


def configure_logging(verbosity: int, default_level: str) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(logging, default_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def _load_config(args: argparse.Namespace) -> GitFluxConfig:
    config = GitFluxConfig.from_env()
    if args.repo:
        config.repo_dir = Path(args.repo)
    return config


def cmd_version(args: argparse.Namespace) -> int:
    """Print the derived version."""
    from gitflux.derive import VersionDeriver

    derivation = VersionDeriver(_load_config(args)).derive()
    if args.json:
        print(derivation.to_json())
    else:
        print(derivation.version)
    return EXIT_OK


def cmd_write_version(args: argparse.Namespace) -> int:
    """Write the derived version to the version file."""
    from gitflux.derive import VersionDeriver
    from gitflux.git import write_version_file

    config = _load_config(args)
    derivation = VersionDeriver(config).derive()
    out = Path(args.output) if args.output else config.version_path
    write_version_file(derivation.version, out)
    print(f"Wrote {derivation.version} to {out}")
    return EXIT_OK


def cmd_compat(args: argparse.Namespace) -> int:
    """Print the compatibility requirement."""
    from gitflux.derive import VersionDeriver

    derivation = VersionDeriver(_load_config(args)).derive(since=args.since)
    decision = derivation.decision

    if args.json:
        print(json.dumps(decision.to_dict(), indent=2))
        return EXIT_OK

    if decision.required:
        print(f"{derivation.version} must be {decision.level.label} with {decision.against}")
    else:
        print(f"{derivation.version} has no compatibility guarantees: {decision.reason}")
    return EXIT_OK


def cmd_explain(args: argparse.Namespace) -> int:
    """Render a report of the derivation."""
    from gitflux.derive import VersionDeriver
    from gitflux.report import DerivationReport

    derivation = VersionDeriver(_load_config(args)).derive(since=args.since)
    DerivationReport(derivation).print()
    return EXIT_OK


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse a version string and show its parts, or where it went wrong."""
    from gitflux.semver import ParseFailure, parse_semver

    result = parse_semver(args.semver)
    if isinstance(result, ParseFailure):
        print(f"Invalid semver: {result.message}", file=sys.stderr)
        print(f"  {args.semver}", file=sys.stderr)
        print(f"  {' ' * result.offset}^", file=sys.stderr)
        return EXIT_NO_VERSION

    print(f"version:    {result}")
    print(f"major:      {result.major}")
    print(f"minor:      {result.minor}")
    print(f"patch:      {result.patch}")
    print(f"prerelease: {result.prerelease or '-'}")
    print(f"build:      {result.build or '-'}")
    return EXIT_OK


def cmd_classify(args: argparse.Namespace) -> int:
    """Classify each name as a flux branch or tag."""
    from gitflux.refs import parse_flux_ref

    status = EXIT_OK
    for name in args.refs:
        ref = parse_flux_ref(name)
        if ref is None:
            print(f"{name}: not a flux ref")
            status = EXIT_NO_VERSION
            continue
        print(
            f"{name}: {ref.kind.value} version={ref.version} "
            f"target={ref.target_release_version}"
        )
    return status


def main(argv: list[str] | None = None) -> int:
    from gitflux.core.types import GitFluxError
    from gitflux.derive.selection import NoEligibleRefError

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    dispatch = {
        "version": cmd_version,
        "write-version": cmd_write_version,
        "compat": cmd_compat,
        "explain": cmd_explain,
        "parse": cmd_parse,
        "classify": cmd_classify,
    }

    try:
        configure_logging(args.verbose, _load_config(args).log_level)
        return dispatch[args.command](args)
    except NoEligibleRefError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_NO_VERSION
    except GitFluxError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
