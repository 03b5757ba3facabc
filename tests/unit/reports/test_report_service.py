"""
Unit tests for CleaningReportService date-range handling.

The clock is injected, so "today" is fixed at 2024-03-15 throughout.
"""

from datetime import date, datetime, time, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from reportagent.reports.models import CleaningRecord
from reportagent.reports.service import CleaningReportService
from reportagent.reports.source import InMemoryCleaningDataSource

TODAY = date(2024, 3, 15)


def _record(cleaning_id: int, start: datetime) -> CleaningRecord:
    return CleaningRecord(cleaning_id=cleaning_id, start_time=start)


@pytest.fixture
def boundary_records():
    """Records just inside and just outside the default 7-day window."""
    window_start = TODAY - timedelta(days=7)
    return [
        _record(1, datetime.combine(window_start - timedelta(days=1), time(23, 59, 59))),  # out
        _record(2, datetime.combine(window_start, time.min)),                               # in
        _record(3, datetime.combine(TODAY, time(12, 0))),                                    # in
        _record(4, datetime.combine(TODAY, time(23, 59, 59))),                               # in
        _record(5, datetime.combine(TODAY + timedelta(days=1), time.min)),                   # out
    ]


@pytest.fixture
def service(boundary_records):
    return CleaningReportService(InMemoryCleaningDataSource(boundary_records), today=lambda: TODAY)


class TestResolveWindow:

    def test_defaults_to_seven_days_ending_today(self, service):
        start, end = service.resolve_window(None, None)
        assert start == datetime(2024, 3, 8, 0, 0)
        assert end == datetime.combine(date(2024, 3, 15), time.max)

    def test_empty_strings_are_treated_as_absent(self, service):
        assert service.resolve_window("", "  ") == service.resolve_window(None, None)

    def test_explicit_dates(self, service):
        start, end = service.resolve_window("2024-01-01", "2024-01-07")
        assert start == datetime(2024, 1, 1)
        assert end == datetime(2024, 1, 7, 23, 59, 59, 999999)

    def test_only_end_given_keeps_default_start(self, service):
        start, _ = service.resolve_window(None, "2024-03-20")
        assert start == datetime(2024, 3, 8)

    def test_only_end_before_default_start_collapses_to_that_day(self, service):
        start, end = service.resolve_window(None, "2024-01-07")
        assert start == datetime(2024, 1, 7)
        assert end == datetime(2024, 1, 7, 23, 59, 59, 999999)

    def test_blank_start_with_early_end_is_not_reversed(self, service):
        start, _ = service.resolve_window("", "2024-01-07")
        assert start == datetime(2024, 1, 7)

    def test_custom_window_days(self):
        svc = CleaningReportService(InMemoryCleaningDataSource(), window_days=30, today=lambda: TODAY)
        start, _ = svc.resolve_window(None, None)
        assert start == datetime(2024, 2, 14)

    def test_malformed_date_raises(self, service):
        with pytest.raises(ValueError, match="startDate"):
            service.resolve_window("15/03/2024", None)

    @pytest.mark.parametrize("value", ["20240315", "2024-W11-5", "2024-03-15T00:00"])
    def test_only_dashed_calendar_dates_accepted(self, service, value):
        with pytest.raises(ValueError, match="endDate"):
            service.resolve_window(None, value)

    def test_reversed_window_raises(self, service):
        with pytest.raises(ValueError, match="before"):
            service.resolve_window("2024-03-10", "2024-03-01")


class TestGetCleaningReport:

    @pytest.mark.asyncio
    async def test_default_window_returns_exactly_records_inside(self, service):
        records = await service.get_cleaning_report()
        assert [r.cleaning_id for r in records] == [2, 3, 4]

    @pytest.mark.asyncio
    async def test_end_date_is_inclusive_through_end_of_day(self, service):
        records = await service.get_cleaning_report("2024-03-15", "2024-03-15")
        assert [r.cleaning_id for r in records] == [3, 4]

    @pytest.mark.asyncio
    async def test_end_date_before_default_window_returns_empty(self, service):
        assert await service.get_cleaning_report(None, "2024-01-07") == []

    @pytest.mark.asyncio
    async def test_empty_result_is_valid(self, service):
        assert await service.get_cleaning_report("2020-01-01", "2020-01-31") == []

    @pytest.mark.asyncio
    async def test_queries_source_with_resolved_window(self):
        source = MagicMock()
        source.find_by_start_time_between = AsyncMock(return_value=[])
        svc = CleaningReportService(source, today=lambda: TODAY)

        await svc.get_cleaning_report("2024-01-01", "2024-01-07")

        source.find_by_start_time_between.assert_awaited_once_with(
            datetime(2024, 1, 1), datetime(2024, 1, 7, 23, 59, 59, 999999)
        )
