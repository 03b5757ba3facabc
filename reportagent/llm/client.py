"""
Model client boundary.

ModelClient is the only place the orchestrator waits on the network. The
LiteLLM implementation translates our provider-neutral content/config types
into LiteLLM's OpenAI-style request and maps the reply back into a
ModelResponse (candidates -> content -> parts).

Request mapping:
    system_directive        -> leading {"role": "system"} message
    text parts              -> one {"role": "user"} message
    function_response part  -> assistant tool_calls message + {"role": "tool"} message
    max_output_tokens       -> max_tokens
    candidate_count         -> n
    thinking_budget > 0     -> thinking={"type": "enabled", "budget_tokens": N}
    thinking_budget == 0    -> thinking={"type": "disabled"} (plus budget_tokens=0 on Gemini)
    tools                   -> OpenAI function tools (omitted when None)

``drop_params=True`` lets LiteLLM strip knobs a provider does not support
(safety settings outside Gemini, for instance) instead of failing the call.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from litellm import acompletion

from reportagent.llm.models import (
    Candidate,
    Content,
    FunctionCall,
    GenerationConfig,
    ModelResponse,
    ModelUnavailableError,
    Part,
    TokenUsage,
)

logger = logging.getLogger(__name__)

# Gemini 2.x thinks by default unless thinkingBudget is explicitly 0
GEMINI_PREFIXES = ("gemini/", "vertex_ai/", "vertex_ai_beta/")


class ModelClient(ABC):
    """Abstract capability: send one turn to a model and get its response."""

    @abstractmethod
    async def generate(
        self,
        model_id: str,
        content: str | Content,
        config: GenerationConfig,
    ) -> ModelResponse:
        """
        Run one model turn.

        Raises:
            ModelUnavailableError: On transport, auth or quota failure
        """


class LiteLLMModelClient(ModelClient):
    """
    ModelClient backed by ``litellm.acompletion``.

    Args:
        api_key: Provider API key. An empty key raises ModelUnavailableError
                 on the first call.
    """

    def __init__(self, api_key: str):
        self._api_key = api_key

    async def generate(
        self,
        model_id: str,
        content: str | Content,
        config: GenerationConfig,
    ) -> ModelResponse:
        if not self._api_key:
            raise ModelUnavailableError(
                "API key not configured. Set LLM__API_KEY in your environment."
            )

        call_kwargs = self._build_request(model_id, content, config)
        try:
            response = await acompletion(**call_kwargs)
        except Exception as e:
            raise ModelUnavailableError(f"LLM API call failed: {e}", cause=e) from e

        return self._parse_response(response)

    def _build_request(
        self,
        model_id: str,
        content: str | Content,
        config: GenerationConfig,
    ) -> dict[str, Any]:
        call_kwargs: dict[str, Any] = {
            "model": model_id,
            "messages": self._build_messages(content, config),
            "max_tokens": config.max_output_tokens,
            "n": config.candidate_count,
            "thinking": _thinking_param(model_id, config.thinking_budget),
            "api_key": self._api_key,
            "drop_params": True,
        }
        if config.safety_settings:
            call_kwargs["safety_settings"] = [s.model_dump() for s in config.safety_settings]
        if config.temperature is not None:
            call_kwargs["temperature"] = config.temperature
        # Omit rather than send an empty list
        if config.tools:
            call_kwargs["tools"] = [
                {
                    "type": "function",
                    "function": {
                        "name": tool.name,
                        "description": tool.description,
                        "parameters": tool.to_json_schema(),
                    },
                }
                for tool in config.tools
            ]
        return call_kwargs

    @staticmethod
    def _build_messages(content: str | Content, config: GenerationConfig) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = []
        if config.system_directive:
            messages.append({"role": "system", "content": config.system_directive})

        if isinstance(content, str):
            messages.append({"role": "user", "content": content})
            return messages

        role = "user" if content.role == "user" else "assistant"
        texts = [part.text for part in content.parts if part.text]
        if texts:
            messages.append({"role": role, "content": "\n\n".join(texts)})

        for index, part in enumerate(content.parts):
            fn_response = part.function_response
            if fn_response is None:
                continue
            call_id = fn_response.id or f"call_{fn_response.name}_{index}"
            messages.append({
                "role": "assistant",
                "content": None,
                "tool_calls": [
                    {
                        "id": call_id,
                        "type": "function",
                        "function": {
                            "name": fn_response.name,
                            "arguments": json.dumps(fn_response.arguments, ensure_ascii=False),
                        },
                    }
                ],
            })
            messages.append({
                "role": "tool",
                "tool_call_id": call_id,
                "name": fn_response.name,
                "content": json.dumps(fn_response.response, ensure_ascii=False),
            })

        return messages

    @staticmethod
    def _parse_response(response: Any) -> ModelResponse:
        candidates = []
        for choice in getattr(response, "choices", None) or []:
            message = getattr(choice, "message", None)
            if message is None:
                candidates.append(Candidate(content=None))
                continue

            parts: list[Part] = []
            if message.content:
                parts.append(Part(text=message.content))
            for tool_call in getattr(message, "tool_calls", None) or []:
                parts.append(Part(function_call=_parse_tool_call(tool_call)))
            candidates.append(Candidate(content=Content(role="model", parts=parts)))

        usage = getattr(response, "usage", None)
        return ModelResponse(
            candidates=candidates,
            model=getattr(response, "model", None) or "",
            usage=TokenUsage(
                prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
            ),
        )


def _parse_tool_call(tool_call: Any) -> FunctionCall:
    function = tool_call.function
    raw_arguments = function.arguments
    arguments: dict[str, Any] | None
    if isinstance(raw_arguments, dict):
        arguments = raw_arguments
    elif not raw_arguments:
        arguments = None
    else:
        try:
            decoded = json.loads(raw_arguments)
        except (TypeError, json.JSONDecodeError):
            logger.warning(f"Undecodable arguments for tool call {function.name!r}: {raw_arguments!r}")
            decoded = None
        arguments = decoded if isinstance(decoded, dict) else None

    return FunctionCall(name=function.name or None, arguments=arguments, id=tool_call.id)


def _thinking_param(model_id: str, budget: int) -> dict[str, Any]:
    if budget > 0:
        return {"type": "enabled", "budget_tokens": budget}
    if model_id.startswith(GEMINI_PREFIXES):
        return {"type": "disabled", "budget_tokens": 0}
    return {"type": "disabled"}
