import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .client import ImdbClient
from .config import ImdbConfig
from .exceptions import ImdbError

logger = logging.getLogger(__name__)


def _connect() -> ImdbClient:
    return ImdbClient.connect(ImdbConfig.from_env())


def _write_output(payload: Any, output: str | None) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote {output}")
    else:
        print(text)


def cmd_whoami(args: argparse.Namespace) -> None:
    with _connect() as client:
        _write_output(
            {"user_id": client.user_id, "watchlist_id": client.watchlist_id},
            args.output,
        )


def cmd_watchlist(args: argparse.Namespace) -> None:
    with _connect() as client:
        _write_output(client.watchlist_get().to_dict(), args.output)


def cmd_ratings(args: argparse.Namespace) -> None:
    with _connect() as client:
        ratings = client.ratings_get()
        _write_output([item.to_dict() for item in ratings], args.output)


def cmd_list(args: argparse.Namespace) -> None:
    with _connect() as client:
        _write_output(client.list_items_get(args.list_id).to_dict(), args.output)


def cmd_lists(args: argparse.Namespace) -> None:
    with _connect() as client:
        pairs = client.lists_scrape(progress=not args.no_progress)
    if args.list_id:
        wanted = set(args.list_id)
        pairs = [p for p in pairs if p.collection.list_id in wanted]
        missing = wanted - {p.collection.list_id for p in pairs}
        for list_id in sorted(missing):
            logger.warning(f"List {list_id} was not found among the user's lists")
    _write_output([pair.to_dict() for pair in pairs], args.output)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Export IMDb watchlist, ratings and lists as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--output", "-o", help="Write JSON to this file instead of stdout")
    subparsers = parser.add_subparsers(dest="command", required=True)

    whoami_parser = subparsers.add_parser("whoami", help="Show the detected user id and watchlist id")
    whoami_parser.set_defaults(func=cmd_whoami)

    watchlist_parser = subparsers.add_parser("watchlist", help="Export the watchlist")
    watchlist_parser.set_defaults(func=cmd_watchlist)

    ratings_parser = subparsers.add_parser("ratings", help="Export all ratings")
    ratings_parser.set_defaults(func=cmd_ratings)

    list_parser = subparsers.add_parser("list", help="Export a single list by id")
    list_parser.add_argument("list_id", help="IMDb list id (ls...)")
    list_parser.set_defaults(func=cmd_list)

    lists_parser = subparsers.add_parser("lists", help="Discover and export every list the user owns")
    lists_parser.add_argument("--list-id", action="append", metavar="ID",
                              help="Only output these list ids (repeatable)")
    lists_parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    lists_parser.set_defaults(func=cmd_lists)

    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        args.func(args)
    except ImdbError as exc:
        logger.error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
