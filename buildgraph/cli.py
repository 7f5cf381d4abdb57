"""Command line entry point: ``buildgraph clean``."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import SettingsError

from buildgraph.application.event_handlers import register_event_handlers
from buildgraph.config import Settings, get_settings
from buildgraph.domain.errors import CyclicDependency, DomainError
from buildgraph.domain.events import DomainEventPublisher
from buildgraph.infrastructure.declaration_loader import load_declarations
from buildgraph.services.orchestrator import Orchestrator

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PARTIAL_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="buildgraph",
        description="Manage the shared build output tree of a multi-project build.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    clean = subparsers.add_parser("clean", help="Delete everything under the output root.")
    clean.add_argument("--root", help="Output root (overrides BUILDGRAPH_OUTPUT_ROOT).")
    clean.add_argument("--projects", help="Project declaration file (overrides BUILDGRAPH_PROJECTS_FILE).")
    clean.add_argument("--primary", help="Project every other project is evaluated after.")
    clean.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be removed without deleting.",
    )
    return parser.parse_args(argv)


def _settings_from(args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.root:
        overrides["OUTPUT_ROOT"] = args.root
    if args.projects:
        overrides["PROJECTS_FILE"] = args.projects
    return get_settings(**overrides)


def run_clean(args: argparse.Namespace, settings: Settings) -> int:
    publisher = DomainEventPublisher()
    register_event_handlers(publisher)

    try:
        declared = load_declarations(settings.projects_file())
        orchestrator = Orchestrator.from_settings(
            settings,
            declared.declarations,
            primary=args.primary or declared.primary,
            dry_run=args.dry_run,
            publisher=publisher,
        )
    except CyclicDependency as exc:
        print(f"error: {exc}", file=sys.stderr)
        print(f"cycle members: {', '.join(exc.members)}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except DomainError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    result = orchestrator.clean()
    for link in result.warnings:
        print(f"warning: left link in place: {link.path} -> {link.target}", file=sys.stderr)

    if result.ok:
        LOGGER.info("Removed %d entries under %s", result.removed, result.root)
        return EXIT_OK

    print(f"failed to remove {len(result.failures)} entries:", file=sys.stderr)
    for failure in result.failures:
        print(f"  {failure.path}: {failure.reason}", file=sys.stderr)
    return EXIT_PARTIAL_FAILURE


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = _settings_from(args)
        logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(levelname)s: %(message)s")
    except (SettingsError, PydanticValidationError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.command == "clean":
        return run_clean(args, settings)
    return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
