"""
Bureau of Meteorology (BoM) climate data client.

Downloads a station's zipped daily temperature archive from Climate Data
Online and extracts it in memory into RawStationRows.

A BoM daily archive holds:
    IDCJAC0010_086071_1800_Data.csv   (product, station number, Year,
                                       Month, Day, "Maximum temperature
                                       (Degree C)", accumulation, Quality)
    IDCJAC0010_086071_1800_Note.txt   (free text, includes station name)

Product IDCJAC0010 is daily maximum temperature, IDCJAC0011 daily minimum.
Download URLs are copied from the Climate Data Online page of a station
("All years of data" link); they carry a per-request token, so they are
not built here.
"""

import io
import logging
import re
import time
import zipfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

import pandas as pd
import requests

from analysis.calendar_graph.dataset import find_temperature_column
from analysis.calendar_graph.datastructures import RawStationRows
from analysis.calendar_graph.errors import SchemaError
from src.config import get_settings
from src.utils.retry import bom_retry

logger = logging.getLogger(__name__)

PRODUCT_TYPES = {
    "IDCJAC0010": "Maximum",
    "IDCJAC0011": "Minimum",
}

PRODUCT_CODE_COL = "Product code"
STATION_NUMBER_COL = "Bureau of Meteorology station number"

STATION_NAME_PATTERN = re.compile(r"station\s+name\s*:\s*(?P<name>.+)", re.IGNORECASE)


class BomArchiveError(Exception):
    """Raised when a downloaded archive has no usable daily data."""
    pass


def _series_type(frame: pd.DataFrame, temp_col: str) -> str:
    name = temp_col.lower()
    if "maximum" in name:
        return "Maximum"
    if "minimum" in name:
        return "Minimum"

    if PRODUCT_CODE_COL in frame.columns:
        codes = frame[PRODUCT_CODE_COL].dropna().astype(str).str.strip().unique()
        for code in codes:
            if code in PRODUCT_TYPES:
                return PRODUCT_TYPES[code]

    raise BomArchiveError(f"cannot tell maximum from minimum for column {temp_col!r}")


def _station_name(archive: zipfile.ZipFile, frame: pd.DataFrame) -> str:
    for member in archive.namelist():
        if not member.lower().endswith(".txt"):
            continue
        text = archive.read(member).decode("utf-8", errors="replace")
        for line in text.splitlines():
            match = STATION_NAME_PATTERN.search(line)
            if match:
                return match.group("name").strip()

    if STATION_NUMBER_COL in frame.columns:
        numbers = frame[STATION_NUMBER_COL].dropna()
        if not numbers.empty:
            return f"Station {int(numbers.iloc[0]):06d}"

    raise BomArchiveError("archive has no station name or station number")


def read_station_archive(content: bytes, source: str = "") -> RawStationRows:
    """Extract daily rows from a BoM zip archive held in memory.

    Args:
        content: Raw bytes of the zip file
        source: URL or path, kept for logging

    Returns:
        RawStationRows with the CSV's Year/Month/Day/temperature columns

    Raises:
        BomArchiveError: Not a zip, no CSV, or no recognisable temperature
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(content))
    except zipfile.BadZipFile as e:
        raise BomArchiveError(f"{source or 'archive'} is not a zip file") from e

    with archive:
        csv_members = [m for m in archive.namelist() if m.lower().endswith(".csv")]
        if not csv_members:
            raise BomArchiveError(f"{source or 'archive'} contains no CSV file")
        if len(csv_members) > 1:
            logger.warning(f"Archive has {len(csv_members)} CSV files, using {csv_members[0]}")

        with archive.open(csv_members[0]) as handle:
            frame = pd.read_csv(handle)
        frame.columns = [str(c).strip() for c in frame.columns]

        try:
            temp_col = find_temperature_column(frame)
        except SchemaError as e:
            raise BomArchiveError(f"{csv_members[0]}: {e}") from e

        series_type = _series_type(frame, temp_col)
        location = _station_name(archive, frame)

    logger.info(f"Read {len(frame)} {series_type.lower()} rows for {location}")
    return RawStationRows(
        location=location,
        series_type=series_type,
        frame=frame,
        source=source,
    )


def read_station_file(path: Union[str, Path]) -> RawStationRows:
    """Read a BoM zip archive from disk."""
    path = Path(path)
    return read_station_archive(path.read_bytes(), source=str(path))


class BomClimateClient:
    """Client for BoM Climate Data Online daily archives.

    No API key needed; archives are plain HTTP downloads.
    """

    # Be polite - 1 request per second
    REQUEST_DELAY = 1.0

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": settings.bom_user_agent})
        self.timeout = timeout if timeout is not None else settings.bom_request_timeout
        self._last_request = 0.0

    def _rate_limit(self):
        """Apply rate limiting between requests."""
        elapsed = time.time() - self._last_request
        if elapsed < self.REQUEST_DELAY:
            time.sleep(self.REQUEST_DELAY - elapsed)
        self._last_request = time.time()

    @bom_retry
    def download_archive(self, url: str) -> bytes:
        """Download a station archive and return its bytes."""
        self._rate_limit()

        logger.info(f"Downloading BoM archive: {url}")
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()

        return response.content

    def fetch_station(self, url: str) -> RawStationRows:
        """Download and extract one station archive."""
        content = self.download_archive(url)
        return read_station_archive(content, source=url)

    def fetch_stations(self, urls: Iterable[str]) -> List[RawStationRows]:
        """Download several archives, failing on the first bad one."""
        return [self.fetch_station(url) for url in urls]
