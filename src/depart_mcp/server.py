import argparse
import asyncio
import logging
from datetime import UTC, datetime

from pydantic import BaseModel

from depart_mcp.app import mcp
from depart_mcp.tools import estimate_tools, places_tools  # noqa: F401  (registers tools)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    providers_configured: bool


@mcp.tool()
def health() -> HealthResponse:
    """Check if the departure planner MCP server is running and healthy.

    Returns the server status, version, current timestamp, and whether the
    provider API key is configured.
    """
    from depart_mcp import __version__
    from depart_mcp.data.config import get_provider_config

    return HealthResponse(
        status="ok",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
        providers_configured=get_provider_config().is_configured,
    )


async def run_estimate(args: argparse.Namespace) -> None:
    """Run a full estimate from CLI arguments and print the JSON response."""
    from depart_mcp.services.estimate_service import estimate_departure

    fields = {
        "airport": args.airport,
        "arrivalDate": args.date,
        "arrivalTime": args.time,
        "transportMode": args.mode,
        "fromAddressText": args.origin,
        "selectedPlaceId": args.place_id,
        "cabBufferMinutes": args.cab_buffer,
        "useWeatherApi": args.weather is None,
        "weatherCondition": args.weather,
    }
    response = await estimate_departure(fields)
    print(response.model_dump_json(indent=2, exclude_none=True))


async def run_preview(args: argparse.Namespace) -> None:
    """Run a weather preview from CLI arguments and print the JSON response."""
    from depart_mcp.services.estimate_service import preview_weather

    fields = {"airport": args.airport, "arrivalDate": args.date, "arrivalTime": args.time}
    response = await preview_weather(fields)
    print(response.model_dump_json(indent=2, exclude_none=True))


def _add_arrival_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--airport",
        required=True,
        choices=["JFK", "LGA", "EWR"],
        help="Destination airport",
    )
    parser.add_argument("--date", required=True, help="Arrival date, MM-DD-YYYY")
    parser.add_argument("--time", required=True, help='Arrival time, "15:00" or "3:00 PM"')
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="depart-mcp",
        description="Airport Departure Planner MCP Server",
    )
    subparsers = parser.add_subparsers(dest="command")

    # estimate command
    estimate_parser = subparsers.add_parser(
        "estimate",
        help="Estimate when to leave for the airport",
    )
    _add_arrival_arguments(estimate_parser)
    estimate_parser.add_argument("--from", dest="origin", help="Origin street address")
    estimate_parser.add_argument("--place-id", help="Origin place ID (preferred over --from)")
    estimate_parser.add_argument(
        "--mode",
        default="self",
        choices=["self", "cab"],
        help="Transport mode (default: self)",
    )
    estimate_parser.add_argument(
        "--cab-buffer",
        type=int,
        default=0,
        help="Minutes to wait for a cab (default: 0)",
    )
    estimate_parser.add_argument(
        "--weather",
        help='Manual weather category, e.g. "Heavy rain" (default: use the forecast)',
    )

    # preview command
    preview_parser = subparsers.add_parser(
        "preview",
        help="Preview the forecast weather delay at the airport",
    )
    _add_arrival_arguments(preview_parser)

    args = parser.parse_args()

    if args.command in ("estimate", "preview"):
        # Configure logging
        log_level = logging.DEBUG if args.verbose else logging.INFO
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        runner = run_estimate if args.command == "estimate" else run_preview
        asyncio.run(runner(args))
    else:
        # Default: run MCP server
        mcp.run()


if __name__ == "__main__":
    main()
