"""CLI entry point for running searches against a configured search engine."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point for searchsync."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from searchsync.config.settings import Settings
    from searchsync.observability.logging import setup_logging

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    # Apply CLI overrides
    if args.url:
        settings.connection = {**settings.connection, "url": args.url}
    if args.prefix is not None:
        settings.connection = {**settings.connection, "prefix": args.prefix}
    if args.log_level:
        settings.observability.log_level = args.log_level

    setup_logging(settings.observability)

    from searchsync.exceptions import SearchSyncError

    try:
        options = _load_options(args.options)
        result = asyncio.run(_run(args, settings, options))
    except (SearchSyncError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result.model_dump(), indent=2, ensure_ascii=False))


async def _run(args: argparse.Namespace, settings: Any, options: dict[str, Any]) -> Any:
    from searchsync.core.sync import SearchSync

    sync = SearchSync(settings=settings)
    if args.command == "search":
        return await sync.for_collection(args.collection).search(options)
    if args.command == "aggregate":
        return await sync.for_collection(args.collection).aggregate(options)
    collections = [c.strip() for c in args.collections.split(",") if c.strip()] if args.collections else None
    return await sync.search_collections(options, collections)


def _load_options(raw: str | None) -> dict[str, Any]:
    """Parse ``--options``: inline JSON, or ``@path`` to a JSON file."""
    if not raw:
        return {}
    text = Path(raw[1:]).read_text(encoding="utf-8") if raw.startswith("@") else raw
    options = json.loads(text)
    if not isinstance(options, dict):
        raise ValueError(f"Options must be a JSON object, got {type(options).__name__}")
    return options


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="searchsync",
        description="searchsync — query a search engine mirror of a document store",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="Search engine URL, e.g. http://localhost:9200 (overrides config)",
    )
    parser.add_argument(
        "--prefix",
        type=str,
        default=None,
        help="Index name prefix (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"searchsync {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    options_help = "Option set as inline JSON or @path/to/options.json"

    search = subparsers.add_parser("search", help="Search one collection")
    search.add_argument("--collection", required=True, help="Collection name")
    search.add_argument("--options", "-o", default=None, help=options_help)

    aggregate = subparsers.add_parser("aggregate", help="Group-by count on one collection")
    aggregate.add_argument("--collection", required=True, help="Collection name")
    aggregate.add_argument("--options", "-o", default=None, help=options_help)

    search_all = subparsers.add_parser("search-all", help="Search several collections")
    search_all.add_argument("--collections", default=None, help="Comma-separated collection names (default: all)")
    search_all.add_argument("--options", "-o", default=None, help=options_help)

    return parser


def _get_version() -> str:
    """Get the package version."""
    try:
        from searchsync import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()
