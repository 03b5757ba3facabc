"""
Cleaning report tool.

Lets the model fetch cleaning records for a date range and then write a
markdown report from them on the second turn.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter

from reportagent.reports.models import CleaningRecord
from reportagent.reports.service import CleaningReportService
from reportagent.tools.base import (
    SerializationError,
    Tool,
    ToolDescriptor,
    ToolExecutionError,
    ToolParameter,
)

GET_CLEANING_REPORT = "get_cleaning_report"

REPORT_PROMPT_TEMPLATE = """\
Please write a report for the request below.

Report rules:
1. Use markdown: headings, line breaks and indented lists so the report is easy to read.
2. Summarize the cleaning activity using only the data provided.

Original request:
{original_prompt}
"""

REPORT_SYSTEM_DIRECTIVE = "You are an expert in data analysis and reporting."

_records_adapter = TypeAdapter(list[CleaningRecord])


class CleaningReportTool(Tool):
    """Fetches cleaning records between two ISO dates as a JSON array."""

    def __init__(self, service: CleaningReportService):
        self._service = service

    @property
    def name(self) -> str:
        return GET_CLEANING_REPORT

    def descriptor(self) -> ToolDescriptor:
        return ToolDescriptor(
            name=GET_CLEANING_REPORT,
            description="Fetch cleaning data recorded during the given period.",
            parameters=(
                ToolParameter(
                    name="startDate",
                    type="string",
                    description="Start date (YYYY-MM-DD)",
                    required=True,
                ),
                ToolParameter(
                    name="endDate",
                    type="string",
                    description="End date (YYYY-MM-DD), inclusive",
                    required=True,
                ),
            ),
        )

    async def execute(self, arguments: Mapping[str, Any]) -> str:
        start_date = _optional_str(arguments, "startDate")
        end_date = _optional_str(arguments, "endDate")

        try:
            records = await self._service.get_cleaning_report(start_date, end_date)
        except Exception as e:
            raise ToolExecutionError(
                f"{GET_CLEANING_REPORT} failed: {e}",
                tool_name=GET_CLEANING_REPORT,
                arguments=arguments,
                cause=e,
            ) from e

        try:
            return _records_adapter.dump_json(records, by_alias=True).decode("utf-8")
        except Exception as e:
            raise SerializationError(
                f"Could not serialize {len(records)} cleaning records: {e}",
                tool_name=GET_CLEANING_REPORT,
                arguments=arguments,
                cause=e,
            ) from e

    def result_prompt(self, original_prompt: str) -> str:
        return REPORT_PROMPT_TEMPLATE.format(original_prompt=original_prompt)

    def system_directive(self) -> str:
        return REPORT_SYSTEM_DIRECTIVE


def _optional_str(arguments: Mapping[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ToolExecutionError(
            f"{key} must be a string, got {type(value).__name__}",
            tool_name=GET_CLEANING_REPORT,
            arguments=arguments,
        )
    return value
