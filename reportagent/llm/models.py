"""
Data models for the LLM layer.

Provider-neutral value types exchanged between the orchestrator, the config
builder and the model client:
- SafetySetting / GenerationConfig: per-call generation configuration
- FunctionCall / FunctionResponse / Part / Content / Candidate / ModelResponse:
  the request and response structure of one model turn
- TokenUsage, ToolCall, ConversationTurn, AgentResponse: what a request produced
- LLMError / ModelUnavailableError: failures talking to the model
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from reportagent.tools.base import ToolDescriptor


class LLMError(Exception):
    """Base error for failures in the LLM layer."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class ModelUnavailableError(LLMError):
    """
    Transport, auth or quota failure talking to the model.

    ``phase`` is the turn (1 or 2) that failed, filled in by the orchestrator.
    """

    def __init__(self, message: str, cause: Exception | None = None, phase: int | None = None):
        super().__init__(message, cause=cause)
        self.phase = phase


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class SafetySetting(BaseModel):
    """A (harm category, block threshold) pair."""

    category: str
    threshold: str

    model_config = ConfigDict(frozen=True)


class GenerationConfig(BaseModel):
    """
    Configuration for one model call.

    Frozen: a tuned variant is derived with ``model_copy(update=...)`` (see
    ModelConfigBuilder.tuned_with) and never changes the config it came from.
    ``tools`` is None rather than empty when no tools are offered.
    """

    safety_settings: tuple[SafetySetting, ...] = ()
    max_output_tokens: int = Field(default=1024, gt=0)
    candidate_count: int = Field(default=1, ge=1)
    thinking_budget: int = Field(default=0, ge=0)
    temperature: float | None = None
    tools: tuple[ToolDescriptor, ...] | None = None
    system_directive: str | None = None

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Turn content
# ---------------------------------------------------------------------------


class FunctionCall(BaseModel):
    """A model's proposal to invoke a tool."""

    name: str | None = None
    arguments: dict[str, Any] | None = None
    id: str | None = Field(None, description="Provider call id, used to pair the response")


class FunctionResponse(BaseModel):
    """
    A tool result sent back to the model, keyed by the function name.

    ``id`` and ``arguments`` echo the originating call for wire formats that
    pair each result with the call that produced it.
    """

    name: str
    response: dict[str, Any]
    id: str | None = None
    arguments: dict[str, Any] = Field(default_factory=dict)


class Part(BaseModel):
    """One piece of turn content; exactly one field is expected to be set."""

    text: str | None = None
    function_call: FunctionCall | None = None
    function_response: FunctionResponse | None = None

    @classmethod
    def from_text(cls, text: str) -> Part:
        return cls(text=text)

    @classmethod
    def from_function_response(cls, call: FunctionCall, response: dict[str, Any]) -> Part:
        return cls(
            function_response=FunctionResponse(
                name=call.name or "",
                response=response,
                id=call.id,
                arguments=call.arguments or {},
            )
        )


class Content(BaseModel):
    role: Literal["user", "model"] = "user"
    parts: list[Part] = Field(default_factory=list)

    @classmethod
    def from_parts(cls, *parts: Part, role: Literal["user", "model"] = "user") -> Content:
        return cls(role=role, parts=list(parts))


class Candidate(BaseModel):
    content: Content | None = None


class TokenUsage(BaseModel):
    """Token counts for one or more model calls."""

    prompt_tokens: int = 0
    completion_tokens: int = 0

    @computed_field
    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens

    def __add__(self, other: TokenUsage) -> TokenUsage:
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
        )


class ModelResponse(BaseModel):
    """What one model call returned."""

    candidates: list[Candidate] = Field(default_factory=list)
    model: str = ""
    usage: TokenUsage = Field(default_factory=TokenUsage)

    @property
    def text(self) -> str:
        """Concatenated text parts of the first candidate ("" when there are none)."""
        if not self.candidates:
            return ""
        content = self.candidates[0].content
        if content is None:
            return ""
        return "".join(part.text for part in content.parts if part.text)


# ---------------------------------------------------------------------------
# Request outcome
# ---------------------------------------------------------------------------


class ToolCall(BaseModel):
    """Record of the tool call a request attempted."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    status: Literal["executed", "unresolved", "failed"]
    result: str | None = Field(None, description="JSON payload returned by the tool")
    error: str | None = None


class ConversationTurn(BaseModel):
    """One exchange with the model."""

    phase: Literal[1, 2]
    prompt: str
    config: GenerationConfig
    text: str


class AgentResponse(BaseModel):
    """Final answer for a user request plus how it was produced."""

    text: str
    model: str = ""
    tool_call: ToolCall | None = None
    turns: list[ConversationTurn] = Field(default_factory=list)
    usage: TokenUsage = Field(default_factory=TokenUsage)
