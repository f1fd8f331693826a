import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import get_settings
from .errors import SkycastError
from .formatting import error_message, format_weather_message
from .models import Location
from .service import WeatherService

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="skycast", description="Current weather for a place.")
    parser.add_argument("query", nargs="*", help="place name, e.g. London")
    parser.add_argument("--lat", type=float, help="latitude (use with --lon instead of a place name)")
    parser.add_argument("--lon", type=float, help="longitude")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")
    return args


async def run(args: argparse.Namespace, service: WeatherService) -> int:
    try:
        if args.lat is not None and args.lon is not None:
            weather = await service.get_weather(args.lat, args.lon)
            location = Location(lat=weather.location.lat, lon=weather.location.lon,
                                label=f"{weather.location.lat}, {weather.location.lon}")
        else:
            location, weather = await service.weather_for(" ".join(args.query))
    except SkycastError as e:
        logger.info("Lookup failed: %r", e)
        print(error_message(e), file=sys.stderr)
        return 1
    print(format_weather_message(location, weather))
    return 0


async def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)
    async with WeatherService(settings) as service:
        return await run(args, service)


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
