"""
Central name-keyed lookup of registered tools.

Tools are registered once at process start; after that the registry is only
read, so a single instance is safely shared across concurrent requests.
"""

import logging

from reportagent.tools.base import Tool, ToolDescriptor

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Startup-time wiring mistake, e.g. two tools registered under one name."""


class UnresolvedToolError(LookupError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"No tool registered under name {name!r}")
        self.name = name


class ToolRegistry:
    """
    Holds Tool instances indexed by name, in registration order.

    Example::

        registry = ToolRegistry([CleaningReportTool(service)])
        registry.descriptors()             # handed to the model on turn 1
        registry.resolve("get_cleaning_report")
    """

    def __init__(self, tools: list[Tool] | None = None):
        self._tools: dict[str, Tool] = {}
        self._descriptors: list[ToolDescriptor] = []
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """
        Add a tool.

        Raises:
            ConfigurationError: If the name is already taken, or the tool's
                name disagrees with its own descriptor. The registry is left
                unchanged.
        """
        descriptor = tool.descriptor()
        if descriptor.name != tool.name:
            raise ConfigurationError(
                f"Tool {tool.name!r} declares a descriptor named {descriptor.name!r}"
            )
        if tool.name in self._tools:
            logger.error(f"Duplicate tool registration for {tool.name!r}")
            raise ConfigurationError(f"Tool {tool.name!r} is already registered")

        self._tools[tool.name] = tool
        self._descriptors.append(descriptor)
        logger.debug(f"Registered tool {tool.name!r}")

    def resolve(self, name: str) -> Tool | None:
        """Look up a tool; None means the name is unknown (e.g. hallucinated)."""
        return self._tools.get(name)

    def require(self, name: str) -> Tool:
        """Look up a tool that must exist."""
        tool = self._tools.get(name)
        if tool is None:
            raise UnresolvedToolError(name)
        return tool

    def descriptors(self) -> list[ToolDescriptor]:
        """All descriptors in registration order."""
        return list(self._descriptors)

    def names(self) -> list[str]:
        return [d.name for d in self._descriptors]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
