"""
Cleaning report lookups with date-range defaulting.
"""

from collections.abc import Callable
from datetime import date, datetime, time, timedelta

from reportagent.reports.models import CleaningRecord
from reportagent.reports.source import CleaningDataSource


class CleaningReportService:
    """
    Turns optional ISO calendar dates into a datetime window and queries the source.

    Absent or empty dates default to ``[today - window_days, today]``; a default
    start never falls after an explicit end date. The start date begins at
    midnight and the end date runs through the last instant of its day, so both
    calendar days are inclusive.

    Args:
        source: Where records come from
        window_days: Days before today used when no start date is given
        today: Clock returning the current date (injectable for tests)
    """

    def __init__(
        self,
        source: CleaningDataSource,
        window_days: int = 7,
        today: Callable[[], date] = date.today,
    ):
        self._source = source
        self._window_days = window_days
        self._today = today

    def resolve_window(
        self, start_date: str | None, end_date: str | None
    ) -> tuple[datetime, datetime]:
        """
        Compute the inclusive datetime window for a request.

        Raises:
            ValueError: If a date is not in YYYY-MM-DD form, or an explicit startDate
                falls after the endDate
        """
        today = self._today()
        end_day = _parse_date(end_date, "endDate") or today
        start_day = _parse_date(start_date, "startDate")
        if start_day is None:
            start_day = min(today - timedelta(days=self._window_days), end_day)

        if end_day < start_day:
            raise ValueError(f"endDate {end_day} is before startDate {start_day}")

        return datetime.combine(start_day, time.min), datetime.combine(end_day, time.max)

    async def get_cleaning_report(
        self, start_date: str | None = None, end_date: str | None = None
    ) -> list[CleaningRecord]:
        start, end = self.resolve_window(start_date, end_date)
        return await self._source.find_by_start_time_between(start, end)


def _parse_date(value: str | None, field: str) -> date | None:
    if value is None or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError as e:
        raise ValueError(f"{field} must be a YYYY-MM-DD date, got {value!r}") from e
