#!/usr/bin/env python3
"""
Plot a summer or winter extreme-temperature calendar for a BoM station.

Downloads (or reads) BoM daily temperature archives, cleans them into a
dataset, builds the season calendar grid and saves it as a PNG.

Usage:
    python scripts/plot_station_calendar.py --url "<BoM zip URL>" --season Summer
    python scripts/plot_station_calendar.py --archive data/IDCJAC0010_086071_1800.zip \\
        --season Summer --start-year 1990 --end-year 2020 --thresholds 35 40 45
    python scripts/plot_station_calendar.py --archive max.zip --archive min.zip \\
        --season Winter --type Minimum --list-locations
"""

import argparse
import logging
import re
import sys
from pathlib import Path

import requests

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from analysis.calendar_graph import (
    CalendarGraphError,
    build_calendar_graph,
    build_dataset,
    list_locations,
)
from src.config import get_settings
from src.weather.bom_climate import BomArchiveError, BomClimateClient, read_station_file
from visualizations.calendar_plot import plot_calendar_grid

logger = logging.getLogger(__name__)


def output_filename(location: str, season: str) -> str:
    """PNG name for a station and season, safe to use as a single path component."""
    slug = re.sub(r"[^a-z0-9-]+", "_", f"{location}_{season}".lower()).strip("_")
    return f"{slug}.png"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Plot an extreme temperature calendar for a BoM station")
    parser.add_argument("--url", action="append", default=[], help="BoM daily archive URL (repeatable)")
    parser.add_argument("--archive", action="append", default=[], help="Local BoM zip archive (repeatable)")
    parser.add_argument("--season", type=str, default="Summer", help="Summer or Winter")
    parser.add_argument("--start-year", type=int, help="First year to plot")
    parser.add_argument("--end-year", type=int, help="Last year to plot")
    parser.add_argument("--thresholds", type=float, nargs=3, help="Three ascending thresholds")
    parser.add_argument("--location", type=str, help="Station name (default: last in sorted order)")
    parser.add_argument("--type", dest="series_type", type=str, help="Maximum or Minimum")
    parser.add_argument("--precision", type=int, help="Decimal places for legend labels")
    parser.add_argument("--output", type=str, help="Output PNG path")
    parser.add_argument("--list-locations", action="store_true", help="Print available stations and exit")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.url and not args.archive:
        logger.error("Provide at least one --url or --archive")
        return 2

    try:
        rows = [read_station_file(path) for path in args.archive]
        if args.url:
            rows.extend(BomClimateClient().fetch_stations(args.url))
        dataset = build_dataset(rows)
    except (BomArchiveError, CalendarGraphError, requests.RequestException) as e:
        logger.error(f"Could not load station data: {e}")
        return 1

    if args.list_locations:
        for location in list_locations(dataset):
            print(location)
        return 0

    try:
        grid = build_calendar_graph(
            dataset,
            args.season,
            start_year=args.start_year,
            end_year=args.end_year,
            thresholds=args.thresholds,
            location=args.location,
            series_type=args.series_type,
            precision=args.precision,
        )
    except CalendarGraphError as e:
        logger.error(f"Could not build calendar graph: {e}")
        return 1

    output = Path(args.output) if args.output else (
        settings.data_path / output_filename(grid.location, grid.season)
    )
    plot_calendar_grid(grid, save_path=output, dpi=settings.output_dpi)
    return 0


if __name__ == "__main__":
    sys.exit(main())
