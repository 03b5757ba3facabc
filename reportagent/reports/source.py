"""
Report data sources.

A CleaningDataSource turns a datetime range into CleaningRecords. Two
implementations are provided: an in-memory one (tests, demos) and one backed
by a JSON file that is re-read on every query.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

import aiofiles
from pydantic import TypeAdapter, ValidationError

from reportagent.reports.models import CleaningRecord

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(list[CleaningRecord])


class DataSourceError(Exception):
    """The underlying record store could not be read or parsed."""


class CleaningDataSource(ABC):
    """Abstract base class for cleaning record lookups."""

    @abstractmethod
    async def find_by_start_time_between(
        self, start: datetime, end: datetime
    ) -> list[CleaningRecord]:
        """
        Return records whose start_time lies in ``[start, end]``, both inclusive,
        ordered by start_time.

        Raises:
            DataSourceError: If the store cannot be read
        """


def _select(records: Iterable[CleaningRecord], start: datetime, end: datetime) -> list[CleaningRecord]:
    matched = [r for r in records if start <= r.start_time <= end]
    matched.sort(key=lambda r: (r.start_time, r.cleaning_id))
    return matched


class InMemoryCleaningDataSource(CleaningDataSource):
    """Serves records from a list held in memory."""

    def __init__(self, records: Iterable[CleaningRecord] = ()):
        self._records = list(records)

    async def find_by_start_time_between(
        self, start: datetime, end: datetime
    ) -> list[CleaningRecord]:
        return _select(self._records, start, end)


class JsonFileCleaningDataSource(CleaningDataSource):
    """
    Serves records from a JSON array file.

    File format::

        [
          {"cleaningId": 1, "startTime": "2024-01-02T09:00:00",
           "endTime": "2024-01-02T10:30:00", "location": "Lobby",
           "duration": 90, "areaCleaned": 120.5, "waterUsage": 14.0,
           "powerUsage": 1.2}
        ]

    A missing file means "no data yet" and yields an empty result.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    async def _load(self) -> list[CleaningRecord]:
        if not self._path.exists():
            logger.warning(f"Cleaning data file not found: {self._path}")
            return []

        try:
            async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except OSError as e:
            raise DataSourceError(f"Failed to read {self._path}: {e}") from e

        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise DataSourceError(f"Invalid JSON in {self._path}: {e}") from e

        if not isinstance(data, list):
            raise DataSourceError(f"Expected a JSON array in {self._path}")

        try:
            return _records_adapter.validate_python(data)
        except ValidationError as e:
            raise DataSourceError(f"Invalid cleaning record in {self._path}: {e}") from e

    async def find_by_start_time_between(
        self, start: datetime, end: datetime
    ) -> list[CleaningRecord]:
        records = await self._load()
        matched = _select(records, start, end)
        logger.debug(f"{len(matched)}/{len(records)} records between {start} and {end}")
        return matched
