"""
Tool-calling orchestrator: the core request loop.

One user request is at most two model turns:

    prompt -> ModelConfigBuilder.build_default(registry.descriptors())
           -> ModelClient.generate()                       (turn 1)
           -> no function call?      return turn-1 text
           -> ToolRegistry.resolve(name)
                unknown name?        return turn-1 text
           -> Tool.execute(arguments)
                failed?              return turn-1 text
           -> Tool.result_prompt() + tuned config (Tool.system_directive())
           -> ModelClient.generate(text part + function response part)  (turn 2)
           -> return turn-2 text

Design decisions:
- Exactly one round of tool use. The model cannot chain tools.
- Soft failures (no call, nameless call, unknown tool, tool error) degrade to
  the answer already in hand. The AgentResponse.tool_call record still
  tells the caller what happened.
- Only model failures (ModelUnavailableError, tagged with the turn that
  failed) leave this module. They are not retried here.
- The orchestrator holds no per-request state; the registry and config builder
  are read-only, so one instance serves concurrent requests. The two model
  calls are the only awaits besides the tool itself, so a cancelled request
  never starts a tool after turn 1 was abandoned.
"""

from __future__ import annotations

import logging

from reportagent.llm.client import ModelClient
from reportagent.llm.config_builder import ModelConfigBuilder
from reportagent.llm.models import (
    AgentResponse,
    Content,
    ConversationTurn,
    FunctionCall,
    GenerationConfig,
    LLMError,
    ModelResponse,
    ModelUnavailableError,
    Part,
    ToolCall,
)
from reportagent.tools.base import SerializationError
from reportagent.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def find_function_call(response: ModelResponse | None) -> FunctionCall | None:
    """
    First function-call proposal in the response, or None.

    Walks first candidate -> content -> parts and stops at the first missing
    level; among the parts, the first one carrying a proposal wins.
    """
    if response is None or not response.candidates:
        return None
    content = response.candidates[0].content
    if content is None or not content.parts:
        return None
    for part in content.parts:
        if part.function_call is not None:
            return part.function_call
    return None


class ToolCallingOrchestrator:
    """
    Runs the propose -> execute -> finalize exchange for one prompt at a time.

    Args:
        client: Model client used for both turns
        registry: Tools offered to the model on turn 1
        config_builder: Builds the turn-1 config and the tuned turn-2 config
        model_id: Model identifier passed to the client on every call
    """

    def __init__(
        self,
        client: ModelClient,
        registry: ToolRegistry,
        config_builder: ModelConfigBuilder,
        model_id: str,
    ):
        self._client = client
        self._registry = registry
        self._config_builder = config_builder
        self._model_id = model_id

    async def generate_response(self, prompt: str) -> AgentResponse:
        """
        Answer a prompt, using at most one tool.

        Args:
            prompt: The user's request (must be non-empty after stripping whitespace)

        Returns:
            AgentResponse with the final text, the tool call record (if the
            model proposed one), the turns taken and summed token usage

        Raises:
            ValueError: If prompt is empty or whitespace-only
            ModelUnavailableError: If either model call fails
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt cannot be empty")

        config = self._config_builder.build_default(self._registry.descriptors())
        first = await self._call_model(1, prompt, config)
        turns = [ConversationTurn(phase=1, prompt=prompt, config=config, text=first.text)]

        call = find_function_call(first)
        if call is None:
            return self._answer(first, turns)

        if not call.name:
            logger.info("Function call without a name; answering directly")
            return self._answer(first, turns)

        arguments = dict(call.arguments or {})
        tool = self._registry.resolve(call.name)
        if tool is None:
            logger.warning(f"Model proposed unknown tool {call.name!r}; answering directly")
            return self._answer(
                first,
                turns,
                ToolCall(name=call.name, arguments=arguments, status="unresolved"),
            )

        try:
            payload = await tool.execute(arguments)
            if not isinstance(payload, str):
                raise SerializationError(
                    f"Tool returned {type(payload).__name__}, expected a JSON string",
                    tool_name=call.name,
                    arguments=arguments,
                )
            result_prompt = tool.result_prompt(prompt)
            directive = tool.system_directive()
        except Exception as e:
            logger.warning(f"Tool {call.name!r} failed with arguments {arguments}: {e}")
            return self._answer(
                first,
                turns,
                ToolCall(name=call.name, arguments=arguments, status="failed", error=str(e)),
            )

        tool_call = ToolCall(name=call.name, arguments=arguments, status="executed", result=payload)
        tuned_config = self._config_builder.tuned_with(config, directive)
        content = Content.from_parts(
            Part.from_text(result_prompt),
            Part.from_function_response(
                call.model_copy(update={"arguments": arguments}),
                {"result": payload},
            ),
        )

        second = await self._call_model(2, content, tuned_config)
        turns.append(
            ConversationTurn(phase=2, prompt=result_prompt, config=tuned_config, text=second.text)
        )
        return AgentResponse(
            text=second.text,
            model=second.model or first.model,
            tool_call=tool_call,
            turns=turns,
            usage=first.usage + second.usage,
        )

    async def _call_model(
        self,
        phase: int,
        content: str | Content,
        config: GenerationConfig,
    ) -> ModelResponse:
        logger.debug(f"Turn {phase}: calling {self._model_id}")
        try:
            return await self._client.generate(self._model_id, content, config)
        except ModelUnavailableError as e:
            e.phase = phase
            logger.error(f"Model call failed during turn {phase}: {e}")
            raise
        except LLMError as e:
            logger.error(f"Model call failed during turn {phase}: {e}")
            raise ModelUnavailableError(str(e), cause=e.cause or e, phase=phase) from e
        except Exception as e:
            logger.error(f"Model call failed during turn {phase}: {e}")
            raise ModelUnavailableError(f"LLM API call failed: {e}", cause=e, phase=phase) from e

    @staticmethod
    def _answer(
        response: ModelResponse,
        turns: list[ConversationTurn],
        tool_call: ToolCall | None = None,
    ) -> AgentResponse:
        return AgentResponse(
            text=response.text,
            model=response.model,
            tool_call=tool_call,
            turns=turns,
            usage=response.usage,
        )
