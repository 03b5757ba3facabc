"""
Base classes for model-invocable tools.

A tool is a named, typed operation the model may ask us to run. Each tool
declares itself through a ToolDescriptor (name, description, parameter schema),
executes with plain keyword-style arguments, and supplies the two hooks used to
steer the second model turn: a result-introduction prompt and a system directive.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ParameterType = Literal["string", "number", "integer", "boolean", "object", "array"]


class ToolExecutionError(Exception):
    """
    A tool could not produce a result.

    Raised for bad arguments (e.g. a malformed date) or a downstream failure.
    The orchestrator catches it and degrades to the first-turn answer.
    """

    def __init__(
        self,
        message: str,
        tool_name: str | None = None,
        arguments: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.tool_name = tool_name
        self.arguments = dict(arguments or {})
        self.cause = cause


class SerializationError(ToolExecutionError):
    """A tool result could not be rendered to the JSON payload sent back to the model."""


class ToolParameter(BaseModel):
    """One argument accepted by a tool."""

    name: str = Field(min_length=1, description="Argument name as the model must send it")
    type: ParameterType = Field(description="JSON schema type of the argument")
    description: str = Field(default="", description="Human-readable hint for the model")
    required: bool = Field(default=False, description="Whether the model must supply it")

    model_config = ConfigDict(frozen=True)


class ToolDescriptor(BaseModel):
    """
    Model-facing declaration of a tool.

    Immutable once built. The name is the stable identifier the model uses in
    its function-call proposals and must be unique within a ToolRegistry.

    Example:
        >>> ToolDescriptor(
        ...     name="get_cleaning_report",
        ...     description="Fetch cleaning records for a date range.",
        ...     parameters=(
        ...         ToolParameter(name="startDate", type="string", required=True),
        ...     ),
        ... ).to_json_schema()
        {'type': 'object', 'properties': {'startDate': {'type': 'string'}}, 'required': ['startDate']}
    """

    name: str = Field(min_length=1, description="Unique tool name")
    description: str = Field(default="", description="What the tool does, for the model")
    parameters: tuple[ToolParameter, ...] = Field(default=(), description="Accepted arguments")

    model_config = ConfigDict(frozen=True)

    def to_json_schema(self) -> dict[str, Any]:
        """Render the parameters as a JSON-schema object."""
        properties: dict[str, Any] = {}
        for param in self.parameters:
            prop: dict[str, Any] = {"type": param.type}
            if param.description:
                prop["description"] = param.description
            properties[param.name] = prop

        schema: dict[str, Any] = {"type": "object", "properties": properties}
        required = [p.name for p in self.parameters if p.required]
        if required:
            schema["required"] = required
        return schema


class Tool(ABC):
    """
    Abstract base class for tools the model can invoke.

    Subclasses are registered once at startup in a ToolRegistry and are shared
    by every in-flight request, so they must not keep per-request state.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identifier; must equal ``self.descriptor().name``."""

    @abstractmethod
    def descriptor(self) -> ToolDescriptor:
        """Declare name, description and parameter schema for the model."""

    @abstractmethod
    async def execute(self, arguments: Mapping[str, Any]) -> str:
        """
        Run the tool.

        Args:
            arguments: Arguments from the model's function-call proposal

        Returns:
            JSON-serialized result, passed verbatim to the second model turn

        Raises:
            ToolExecutionError: If argument extraction or the underlying
                operation fails
        """

    @abstractmethod
    def result_prompt(self, original_prompt: str) -> str:
        """Build the second-turn prompt that frames this tool's result."""

    @abstractmethod
    def system_directive(self) -> str:
        """Role-priming instruction used only for the second model turn."""
