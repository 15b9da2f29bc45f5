"""Command line entry point: python -m timeline_walker HOST"""

import argparse
import sys
from datetime import UTC, datetime
from itertools import islice

from .config import Config
from .exceptions import TimelineError
from .logging_config import create_execution_logger, setup_structured_logging
from .models import Bound
from .render import format_status_json, format_status_text
from .source import open_feed


def _bound(value: str) -> Bound:
    try:
        return Bound.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timeline-walker",
        description="Print the public timeline of a Mastodon-compatible server.",
    )
    parser.add_argument(
        "host",
        nargs="?",
        help="server host name (defaults to $TIMELINE_HOST)",
    )
    parser.add_argument(
        "--federated",
        action="store_true",
        help="include statuses from other servers",
    )
    parser.add_argument(
        "--newest", type=_bound, default=Bound.none(), help="status id or timestamp"
    )
    parser.add_argument(
        "--oldest", type=_bound, default=Bound.none(), help="status id or timestamp"
    )
    parser.add_argument("--limit", type=int, default=None, help="stop after N statuses")
    parser.add_argument("--format", choices=("json", "text"), default="json")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config()
    except ValueError as e:
        parser.error(str(e))

    setup_structured_logging(config.log_level)

    host = args.host or config.host
    if not host:
        parser.error("a host is required (argument or TIMELINE_HOST)")
    if args.limit is not None and args.limit < 0:
        parser.error("--limit must not be negative")

    execution_id = f"cli_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    logger = create_execution_logger("main", execution_id)
    logger.log_execution_start(host=host)

    source = open_feed(host, config=config.get_client_config(), execution_id=execution_id)
    render = format_status_json if args.format == "json" else format_status_text

    emitted = 0
    try:
        timeline = source.iterate(
            local=not args.federated, newest=args.newest, oldest=args.oldest
        )
        for status in islice(timeline, args.limit):
            print(render(status), flush=True)
            emitted += 1
    except TimelineError as e:
        logger.error(f"Failed to read timeline of {host}: {e}", host=host, error=str(e))
        logger.log_execution_end(success=False, statuses_emitted=emitted)
        return 1
    finally:
        source.close()

    logger.log_metrics(
        {"statuses_emitted": emitted, "requests_made": source.requests_made}
    )
    logger.log_execution_end(success=True, statuses_emitted=emitted)
    return 0


if __name__ == "__main__":
    sys.exit(main())
