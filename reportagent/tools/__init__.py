"""
Tool Integration Layer.

Defines the contract every model-invocable tool implements, the registry that
resolves tool names proposed by the model, and the built-in tools.
"""

from reportagent.tools.base import (
    SerializationError,
    Tool,
    ToolDescriptor,
    ToolExecutionError,
    ToolParameter,
)
from reportagent.tools.cleaning_report import GET_CLEANING_REPORT, CleaningReportTool
from reportagent.tools.registry import ConfigurationError, ToolRegistry, UnresolvedToolError

__all__ = [
    "Tool",
    "ToolDescriptor",
    "ToolParameter",
    "ToolExecutionError",
    "SerializationError",
    "ToolRegistry",
    "ConfigurationError",
    "UnresolvedToolError",
    "CleaningReportTool",
    "GET_CLEANING_REPORT",
]
