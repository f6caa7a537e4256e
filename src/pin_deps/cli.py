"""Command-line entry point for pin-deps."""

from __future__ import annotations

import argparse
import logging
import sys
from logging.handlers import QueueListener
from pathlib import Path

from pin_deps.config_loader import (
    ConfigError,
    PinDepsConfig,
    apply_cli_overrides,
    load_config,
)
from pin_deps.engine import ResolutionIntegrityError, RunResult, run_pin_deps
from pin_deps.project import (
    LockfileError,
    Project,
    ProjectError,
    load_project,
    load_resolved_graph,
)
from pin_deps.reporting import (
    Report,
    configure_report_logging,
    shutdown_listeners,
)
from pin_deps.schemas import RunSummary
from pin_deps.settings import PinDepsSettings, get_settings

__all__ = ["FATAL_ERRORS", "build_parser", "main"]

logger = logging.getLogger(__name__)

FATAL_ERRORS: tuple[type[Exception], ...] = (
    ResolutionIntegrityError,
    LockfileError,
    ProjectError,
    ConfigError,
)

_DESCRIPTION = """\
Pin dependencies to their currently resolved versions.

Rewrites the semver ranges declared in every workspace manifest to the exact
version recorded in the lockfile. The lockfile itself is never modified.
"""

_EXAMPLES = """\
examples:
  Pin every dependency with a semver range to its resolved version:
    $ pin-deps

  Dry run, report what would change without writing any file:
    $ pin-deps --dry

  Also pin dependencies with reference next:canary:
    $ pin-deps --also next:canary

  Also pin any dependency with range canary (literal, not a pattern):
    $ pin-deps --also :canary

  Only pin next:canary or material-ui/core:latest:
    $ pin-deps --only next:canary --only material-ui/core:latest

  Only pin in workspaces matching a name, cwd or relative cwd:
    $ pin-deps --workspace acmeco/design --workspace acmeco/auth

  Ignore devDependencies (pin only regular dependencies):
    $ pin-deps --ignore-dev

  Pin only devDependencies in acmeco/design or acmeco/components:
    $ pin-deps --only-dev --workspace acmeco/design --workspace acmeco/components

  Print the resolution of one dependency in one workspace:
    $ pin-deps --dry --workspace @acmeco/design --only next:canary

  Print verbose logs, including already pinned dependencies:
    $ pin-deps --verbose
"""


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser of the ``pin-deps`` command."""

    parser = argparse.ArgumentParser(
        prog="pin-deps",
        description=_DESCRIPTION,
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--dry",
        action="store_true",
        help="Print the changes without writing any manifest.",
    )
    parser.add_argument(
        "--only-dev",
        action="store_true",
        help="Pin devDependencies only. Takes precedence over --ignore-dev.",
    )
    parser.add_argument(
        "--ignore-dev",
        action="store_true",
        help="Leave devDependencies untouched.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Report skipped, omitted and already pinned dependencies.",
    )
    parser.add_argument(
        "--only",
        action="append",
        default=[],
        metavar="REF",
        help="Only pin dependencies matching REF (repeatable).",
    )
    parser.add_argument(
        "--also",
        action="append",
        default=[],
        metavar="REF",
        help="Also pin dependencies matching REF even when skipped (repeatable).",
    )
    parser.add_argument(
        "--workspace",
        action="append",
        default=[],
        metavar="REF",
        dest="workspaces",
        help="Only pin in workspaces matching REF: cwd, relative cwd or name "
        "(repeatable).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Emit one JSON object per line instead of text.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output (the default when stdout is not a terminal).",
    )
    parser.add_argument(
        "--cwd",
        default=None,
        help="Directory to run from (defaults to the current directory).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a pin-deps configuration file.",
    )
    parser.add_argument(
        "--lockfile",
        default=None,
        help="Lockfile name relative to the project root (default: yarn.lock). "
        "Also used to locate the root.",
    )
    return parser


def _resolve_config(
    args: argparse.Namespace, settings: PinDepsSettings, root: Path
) -> PinDepsConfig:
    config = load_config(args.config, settings=settings, root=root)
    return apply_cli_overrides(
        config,
        only=args.only,
        also=args.also,
        workspaces=args.workspaces,
        only_dev=args.only_dev,
        ignore_dev=args.ignore_dev,
        verbose=args.verbose,
        json_output=args.json_output,
        no_color=args.no_color or not sys.stdout.isatty(),
        dry=args.dry,
        lockfile=args.lockfile,
    )


def _run(project: Project, config: PinDepsConfig) -> int:
    """Execute one pinning run with logging already configured."""

    report = Report(
        verbose=config.output.verbose,
        color=config.output.color and not config.output.json,
        emit_json=config.output.json,
    )
    graph = load_resolved_graph(project.root / config.lockfile)
    result: RunResult = run_pin_deps(
        project,
        graph,
        config.filters.to_filters(),
        dry_run=config.dry,
        report=report,
    )

    summary = RunSummary(
        dry_run=config.dry,
        planned=len(result.plan),
        pinned=result.applied.pinned,
        saved=[str(path) for path in result.applied.saved],
        warnings=len(report.warnings),
    )
    report.json("summary", summary.model_dump(mode="json"))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the ``pin-deps`` command.

    Returns:
        ``0`` when the run completes, whatever was pinned; ``1`` when it is
        aborted by a fatal error or invalid arguments.
    """

    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        exit_code = int(exc.code) if isinstance(exc.code, int) else 1
        return 0 if exit_code == 0 else 1

    settings = get_settings()
    listeners: list[QueueListener] = []
    try:
        cwd = Path(args.cwd) if args.cwd else Path.cwd()
        lockfile_name = args.lockfile or settings.lockfile
        project = load_project(cwd, lockfile_name=lockfile_name)
        config = _resolve_config(args, settings, project.root)
        if config.lockfile != lockfile_name:
            # The config file named another lockfile; the root may move with it.
            project = load_project(cwd, lockfile_name=config.lockfile)
        listeners.append(
            configure_report_logging(
                json_output=config.output.json,
                color=config.output.color,
                level=settings.numeric_log_level,
            )
        )
        return _run(project, config)
    except FATAL_ERRORS as exc:
        if listeners:
            logger.error("%s", exc)
        print(f"pin-deps: {exc}", file=sys.stderr)
        return 1
    finally:
        shutdown_listeners(listeners)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
