"""
Report Data Layer.

Cleaning records, the sources that serve them, and the service that applies
the default reporting window before querying a source.
"""

from reportagent.reports.models import CleaningRecord
from reportagent.reports.service import CleaningReportService
from reportagent.reports.source import (
    CleaningDataSource,
    DataSourceError,
    InMemoryCleaningDataSource,
    JsonFileCleaningDataSource,
)

__all__ = [
    "CleaningRecord",
    "CleaningReportService",
    "CleaningDataSource",
    "DataSourceError",
    "InMemoryCleaningDataSource",
    "JsonFileCleaningDataSource",
]
