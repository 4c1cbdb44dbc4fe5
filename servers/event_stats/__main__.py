"""
Command line entry point for the event fetchers.

Prints the fetched events as a JSON array on stdout; logs go to stderr.

Run with:
    python -m servers.event_stats connpass search python
    python -m servers.event_stats connpass fetch 312 --ym 201907
    python -m servers.event_stats doorkeeper fetch rubykaigi --since 2019-01-01
    python -m servers.event_stats facebook fetch 123456789 --debug
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import Optional

import httpx
import structlog
from dateutil import parser as date_parser

from .config import ClientConfig
from .errors import EventStatsError
from .models import EventRecord
from .sources import ConnpassEvents, DoorkeeperEvents, FacebookEvents

logger = structlog.get_logger()


class EventStatsRunner:
    """Dispatch CLI actions to the service facades."""

    def __init__(self, config: ClientConfig):
        self.config = config
        self.sources = {
            "connpass": ConnpassEvents,
            "doorkeeper": DoorkeeperEvents,
            "facebook": FacebookEvents,
        }

    def search(self, service: str, keyword: str) -> list[EventRecord]:
        with self.sources[service](self.config) as source:
            return source.search(keyword)

    def fetch(
        self,
        service: str,
        scope_id: str,
        since_at: Optional[datetime] = None,
        until_at: Optional[datetime] = None,
        yyyymm: Optional[str] = None,
    ) -> list[EventRecord]:
        with self.sources[service](self.config) as source:
            if service == "connpass":
                return source.fetch_events(int(scope_id), yyyymm)
            return source.fetch_events(scope_id, since_at, until_at)


def configure_logging(debug: bool) -> None:
    """Send structlog output to stderr at INFO, or DEBUG with --debug."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m servers.event_stats",
        description="Fetch complete event listings from connpass, Doorkeeper or Facebook.",
    )
    parser.add_argument("service", choices=["connpass", "doorkeeper", "facebook"])
    parser.add_argument("--debug", action="store_true", help="log every request and response")

    actions = parser.add_subparsers(dest="action", required=True)

    search = actions.add_parser("search", help="single-page keyword search")
    search.add_argument("keyword")

    fetch = actions.add_parser("fetch", help="every event of a series or group")
    fetch.add_argument("scope_id", help="connpass series id or group id")
    fetch.add_argument("--since", help="window start (any date format)")
    fetch.add_argument("--until", help="window end (any date format)")
    fetch.add_argument("--ym", help="connpass month filter, YYYYMM")

    return parser


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    return date_parser.parse(value) if value else None


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.action == "fetch":
        if args.service == "connpass" and (args.since or args.until):
            parser.error("connpass takes --ym, not --since/--until")
        if args.service != "connpass" and args.ym:
            parser.error("--ym is only supported for connpass")

    configure_logging(args.debug)
    config = ClientConfig.from_env()
    if args.debug:
        config = config.model_copy(update={"debug": True})

    runner = EventStatsRunner(config)
    try:
        if args.action == "search":
            events = runner.search(args.service, args.keyword)
        else:
            events = runner.fetch(
                args.service,
                args.scope_id,
                since_at=_parse_date(args.since),
                until_at=_parse_date(args.until),
                yyyymm=args.ym,
            )
    except (EventStatsError, httpx.HTTPError, ValueError) as e:
        logger.error("fetch_failed", service=args.service, action=args.action, error=str(e))
        return 1

    print(json.dumps(events, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
