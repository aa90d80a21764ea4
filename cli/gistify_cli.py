"""CLI entry point: sync files matching a pattern to GitHub Gists."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from gistify.config import ENV_FILE, Settings, SyncConfig
from gistify.exceptions import GistifyError
from gistify.filesystem.file_set import find_files
from gistify.logging_setup import configure_logging
from gistify.remote.github import GistClient
from gistify.services.reconcile_service import OutcomeEntry, Reconciler, format_outcome

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gistify",
        description="Create or update one GitHub gist per local file matching <pattern>",
    )
    parser.add_argument("pattern", help="Regular expression matched against file paths")
    parser.add_argument(
        "--public",
        action="store_true",
        default=None,
        help="Sets visibility to public (default: private)",
    )
    parser.add_argument("--dir", "-d", default=".", help="Directory to search (default: current)")
    parser.add_argument("--store", help="Metadata file (default: .gistify)")
    parser.add_argument("--api-url", help="GitHub API base URL")
    parser.add_argument("--debug", action="store_true", default=None, help="Verbose logging")
    return parser


def _load_settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.store:
        overrides["store_path"] = Path(args.store)
    if args.api_url:
        overrides["api_url"] = args.api_url
    if args.debug is not None:
        overrides["debug"] = args.debug
    return Settings(**overrides)  # type: ignore[arg-type]


def _print_outcome(entry: OutcomeEntry) -> None:
    line = format_outcome(entry)
    if line is not None:
        print(line)


def run(args: argparse.Namespace, settings: Settings) -> None:
    """Run one sync.  Raises GistifyError on any fatal condition."""
    config = SyncConfig.from_settings(settings, public=args.public)

    # The env file may hold the token
    files = find_files(args.dir, args.pattern, exclude=[config.store_path, ENV_FILE])
    print(f"Files to be processed: {len(files)}")

    with GistClient(config.credential, settings.api_url, settings.timeout) as client:
        reconciler = Reconciler(config, client)
        prior = reconciler.load()
        login = client.current_user()
        logger.debug("Authenticated as %s", login)
        reconciler.run(files, prior=prior, on_outcome=_print_outcome)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _load_settings(args)
    except ValidationError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 1
    configure_logging(settings.debug)

    try:
        run(args, settings)
    except GistifyError as exc:
        logger.debug("Run aborted", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
