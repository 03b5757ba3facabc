"""
LLM Orchestration Layer.

Runs the two-phase tool-calling exchange with the model:

    ToolCallingOrchestrator.generate_response(prompt)
        turn 1: prompt + registered tool declarations
        optional: one tool execution chosen by the model
        turn 2: tool-specific prompt + tool result, tuned system directive
                                ↓
                          AgentResponse

Key pieces:
- ModelConfigBuilder: default per-call generation config and tuned copies
- ModelClient / LiteLLMModelClient: the model boundary (via LiteLLM)
- ToolCallingOrchestrator: the state machine tying it together
"""

from reportagent.llm.client import LiteLLMModelClient, ModelClient
from reportagent.llm.config_builder import DEFAULT_SAFETY_SETTINGS, ModelConfigBuilder
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
    SafetySetting,
    TokenUsage,
    ToolCall,
)
from reportagent.llm.orchestrator import ToolCallingOrchestrator, find_function_call

__all__ = [
    "AgentResponse",
    "Content",
    "ConversationTurn",
    "DEFAULT_SAFETY_SETTINGS",
    "FunctionCall",
    "GenerationConfig",
    "LiteLLMModelClient",
    "LLMError",
    "ModelClient",
    "ModelConfigBuilder",
    "ModelResponse",
    "ModelUnavailableError",
    "Part",
    "SafetySetting",
    "TokenUsage",
    "ToolCall",
    "ToolCallingOrchestrator",
    "find_function_call",
]
