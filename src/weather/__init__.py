"""Weather data clients module."""

from src.weather.bom_climate import (
    BomArchiveError,
    BomClimateClient,
    read_station_archive,
    read_station_file,
)

__all__ = [
    "BomClimateClient",
    "BomArchiveError",
    "read_station_archive",
    "read_station_file",
]
