"""
Integration tests for the full request loop.

Real components throughout (settings -> AgentComponents -> JSON file source ->
CleaningReportService -> CleaningReportTool -> ToolRegistry -> orchestrator ->
LiteLLMModelClient); only the LiteLLM API call is mocked. These catch wiring
bugs that unit tests with hand-built doubles miss: argument names, the JSON
payload shape and the message sequence sent on the second turn.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from reportagent.components import AgentComponents
from reportagent.config.settings import DataSettings, LLMSettings, Settings
from reportagent.llm.models import ModelUnavailableError

MODEL = "gemini/gemini-2.5-flash"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_text_response(text: str) -> MagicMock:
    """Build a mock LiteLLM text-only response."""
    choice = MagicMock()
    choice.message.content = text
    choice.message.tool_calls = None

    response = MagicMock()
    response.choices = [choice]
    response.model = MODEL
    response.usage.prompt_tokens = 200
    response.usage.completion_tokens = 100
    return response


def _make_tool_call_response(tool_name: str, arguments: dict) -> MagicMock:
    """Build a mock LiteLLM response that requests one tool call."""
    tool_call = MagicMock()
    tool_call.id = "call_report_1"
    tool_call.function.name = tool_name
    tool_call.function.arguments = json.dumps(arguments)

    choice = MagicMock()
    choice.message.content = None
    choice.message.tool_calls = [tool_call]

    response = MagicMock()
    response.choices = [choice]
    response.model = MODEL
    response.usage.prompt_tokens = 150
    response.usage.completion_tokens = 20
    return response


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "cleaning_data.json"
    path.write_text(json.dumps([
        {"cleaningId": 1, "startTime": "2024-01-02T09:00:00", "endTime": "2024-01-02T10:30:00",
         "location": "Lobby", "duration": 90, "areaCleaned": 120.5, "waterUsage": 8.0, "powerUsage": 1.2},
        {"cleaningId": 2, "startTime": "2024-01-07T23:30:00", "location": "Kitchen", "duration": 20},
        {"cleaningId": 3, "startTime": "2024-01-08T00:00:00", "location": "Hall"},
    ]), encoding="utf-8")
    return path


@pytest.fixture
def orchestrator(data_file):
    settings = Settings(
        llm=LLMSettings(model=MODEL, api_key="test-key"),
        data=DataSettings(cleaning_data_path=str(data_file)),
    )
    return AgentComponents(settings).create_orchestrator()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestCleaningReportFlow:

    @pytest.mark.asyncio
    async def test_full_two_turn_exchange(self, orchestrator):
        responses = [
            _make_tool_call_response(
                "get_cleaning_report", {"startDate": "2024-01-01", "endDate": "2024-01-07"}
            ),
            _make_text_response("# Weekly Cleaning Report\n- Lobby\n- Kitchen"),
        ]
        with patch("reportagent.llm.client.acompletion", side_effect=responses) as mock_call:
            result = await orchestrator.generate_response("show last week's cleaning report")

        assert result.text == "# Weekly Cleaning Report\n- Lobby\n- Kitchen"
        assert result.tool_call.status == "executed"
        assert mock_call.call_count == 2

        payload = json.loads(result.tool_call.result)
        assert [r["cleaningId"] for r in payload] == [1, 2]
        assert payload[0]["areaCleaned"] == 120.5

        first_kwargs = mock_call.call_args_list[0].kwargs
        assert first_kwargs["tools"][0]["function"]["name"] == "get_cleaning_report"
        assert first_kwargs["messages"] == [
            {"role": "user", "content": "show last week's cleaning report"},
        ]

        messages = mock_call.call_args_list[1].kwargs["messages"]
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "tool"]
        assert messages[0]["content"] == "You are an expert in data analysis and reporting."
        assert "show last week's cleaning report" in messages[1]["content"]
        assert messages[2]["tool_calls"][0]["id"] == "call_report_1"
        assert messages[3]["tool_call_id"] == "call_report_1"
        assert json.loads(messages[3]["content"]) == {"result": result.tool_call.result}

    @pytest.mark.asyncio
    async def test_empty_range_still_reaches_turn_two(self, orchestrator):
        responses = [
            _make_tool_call_response(
                "get_cleaning_report", {"startDate": "2023-06-01", "endDate": "2023-06-07"}
            ),
            _make_text_response("No cleaning runs were recorded."),
        ]
        with patch("reportagent.llm.client.acompletion", side_effect=responses) as mock_call:
            result = await orchestrator.generate_response("show the cleaning report for early June 2023")

        assert result.tool_call.result == "[]"
        tool_message = mock_call.call_args_list[1].kwargs["messages"][-1]
        assert json.loads(tool_message["content"]) == {"result": "[]"}

    @pytest.mark.asyncio
    async def test_bad_date_degrades_to_first_answer(self, orchestrator):
        response = _make_tool_call_response("get_cleaning_report", {"startDate": "last week"})
        response.choices[0].message.content = "I could not read that date range."

        with patch("reportagent.llm.client.acompletion", return_value=response) as mock_call:
            result = await orchestrator.generate_response("report from last week")

        assert result.text == "I could not read that date range."
        assert result.tool_call.status == "failed"
        assert mock_call.call_count == 1

    @pytest.mark.asyncio
    async def test_plain_question_never_touches_data(self, orchestrator):
        with patch(
            "reportagent.llm.client.acompletion",
            return_value=_make_text_response("Hello!"),
        ) as mock_call:
            result = await orchestrator.generate_response("hi")

        assert result.text == "Hello!"
        assert result.tool_call is None
        assert mock_call.call_count == 1

    @pytest.mark.asyncio
    async def test_second_turn_failure_is_tagged(self, orchestrator):
        responses = [
            _make_tool_call_response("get_cleaning_report", {"startDate": "2024-01-01", "endDate": "2024-01-07"}),
            Exception("503 Service Unavailable"),
        ]
        with patch("reportagent.llm.client.acompletion", side_effect=responses):
            with pytest.raises(ModelUnavailableError) as exc_info:
                await orchestrator.generate_response("show last week's cleaning report")

        assert exc_info.value.phase == 2
