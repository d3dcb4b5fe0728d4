"""Command-line interface for the Navigator API."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import Any

from .client import EonClient
from .const import ENV_CLIENT_ID, ENV_CLIENT_SECRET
from .errors import EonError
from .models import Resolution

_LOGGER = logging.getLogger(__name__)

Handler = Callable[[EonClient, argparse.Namespace], Awaitable[Any]]


def _parse_date(value: str) -> datetime:
    """Parse date string in YYYY-MM-DD format as UTC midnight."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=UTC)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format: YYYY-MM-DD"
        ) from exc


async def _installations(client: EonClient, args: argparse.Namespace) -> Any:
    return await client.get_installations(args.filter)


async def _series(client: EonClient, args: argparse.Namespace) -> Any:
    return await client.get_measurement_series()


async def _measurements(client: EonClient, args: argparse.Namespace) -> Any:
    return await client.get_measurements(
        args.series_id,
        args.resolution,
        from_date=args.from_date,
        to_date=args.to_date,
        include_missing=args.include_missing,
    )


async def _costs(client: EonClient, args: argparse.Namespace) -> Any:
    return await client.get_costs(
        args.installation_id, from_date=args.from_date, to_date=args.to_date
    )


async def _alive(client: EonClient, args: argparse.Namespace) -> Any:
    return {"alive": await client.is_alive()}


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="eon-navigator",
        description="Access E.ON Energy Navigator installations, measurements and costs.",
    )
    parser.add_argument(
        "--client-id", help=f"Navigator API client ID (env: {ENV_CLIENT_ID})"
    )
    parser.add_argument(
        "--client-secret",
        help=f"Navigator API client secret (env: {ENV_CLIENT_SECRET})",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    installations = subparsers.add_parser(
        "installations", help="List installations with metadata"
    )
    installations.add_argument(
        "--filter",
        action="append",
        metavar="ID",
        help="Only return this installation (repeatable)",
    )
    installations.set_defaults(handler=_installations)

    series = subparsers.add_parser(
        "series", help="List measurement series of all installations"
    )
    series.set_defaults(handler=_series)

    measurements = subparsers.add_parser(
        "measurements",
        help="Get measurement values for a series",
        description=(
            "quarter needs --from/--to (max 3 months), hour needs --from/--to "
            "(max 1 year); day and month accept an open range."
        ),
    )
    measurements.add_argument("series_id", type=int, help="Measurement series ID")
    measurements.add_argument(
        "--resolution",
        choices=[r.value for r in Resolution],
        default=Resolution.HOUR.value,
        help="Resolution (default: hour)",
    )
    measurements.add_argument(
        "--from", dest="from_date", type=_parse_date, help="Start date YYYY-MM-DD"
    )
    measurements.add_argument(
        "--to", dest="to_date", type=_parse_date, help="End date YYYY-MM-DD"
    )
    measurements.add_argument(
        "--include-missing", action="store_true", help="Fill in missing values"
    )
    measurements.set_defaults(handler=_measurements)

    costs = subparsers.add_parser(
        "costs",
        help="Get cost data for an installation",
        description="Whole months are considered for the time range.",
    )
    costs.add_argument("installation_id", help="Installation ID")
    costs.add_argument(
        "--from", dest="from_date", type=_parse_date, help="Start date YYYY-MM-DD"
    )
    costs.add_argument(
        "--to", dest="to_date", type=_parse_date, help="End date YYYY-MM-DD"
    )
    costs.set_defaults(handler=_costs)

    alive = subparsers.add_parser("alive", help="Check that the API is reachable")
    alive.set_defaults(handler=_alive)

    return parser


def to_jsonable(result: Any) -> Any:
    """Convert a client result to plain JSON data."""
    if isinstance(result, list):
        return [to_jsonable(item) for item in result]
    if hasattr(result, "to_dict"):
        return result.to_dict()
    return result


async def run(client: EonClient, handler: Handler, args: argparse.Namespace) -> Any:
    """Run one command handler with an open client."""
    async with client:
        return await handler(client, args)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the eon-navigator command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        client = EonClient(args.client_id, args.client_secret)
    except ValueError as err:
        print(f"error: {err}", file=sys.stderr)
        return 2

    try:
        result = asyncio.run(run(client, args.handler, args))
    except EonError as err:
        _LOGGER.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {err}", file=sys.stderr)
        return 1

    print(json.dumps(to_jsonable(result), indent=2))
    return 0
