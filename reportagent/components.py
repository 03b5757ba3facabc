"""
Agent component factory.

Centralises the construction of the data source, tools, registry and
orchestrator from settings, so CLI commands and tests wire things the same way.
"""

from __future__ import annotations

from reportagent.config.settings import Settings
from reportagent.llm.client import LiteLLMModelClient, ModelClient
from reportagent.llm.config_builder import ModelConfigBuilder
from reportagent.llm.orchestrator import ToolCallingOrchestrator
from reportagent.reports.service import CleaningReportService
from reportagent.reports.source import CleaningDataSource, JsonFileCleaningDataSource
from reportagent.tools.cleaning_report import CleaningReportTool
from reportagent.tools.registry import ToolRegistry


class AgentComponents:
    """
    Factory for building agent components from settings.

    Example::

        factory = AgentComponents(settings)
        orchestrator = factory.create_orchestrator()
        response = await orchestrator.generate_response("show last week's cleaning report")
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def create_data_source(self) -> CleaningDataSource:
        """Create the JSON-file record source from settings."""
        return JsonFileCleaningDataSource(self.settings.data.cleaning_data_path)

    def create_report_service(self, source: CleaningDataSource | None = None) -> CleaningReportService:
        """Create a CleaningReportService over ``source`` (default: settings' data file)."""
        return CleaningReportService(
            source=source or self.create_data_source(),
            window_days=self.settings.data.default_window_days,
        )

    def create_registry(self, service: CleaningReportService | None = None) -> ToolRegistry:
        """Register every built-in tool. Raises ConfigurationError on name clashes."""
        return ToolRegistry([
            CleaningReportTool(service or self.create_report_service()),
        ])

    def create_config_builder(self) -> ModelConfigBuilder:
        return ModelConfigBuilder(
            settings=self.settings.generation,
            temperature=self.settings.llm.temperature,
        )

    def create_client(self) -> ModelClient:
        return LiteLLMModelClient(api_key=self.settings.llm.api_key)

    def create_orchestrator(
        self,
        client: ModelClient | None = None,
        registry: ToolRegistry | None = None,
    ) -> ToolCallingOrchestrator:
        """Create a ToolCallingOrchestrator, building any dependency not supplied."""
        if registry is None:
            registry = self.create_registry()
        return ToolCallingOrchestrator(
            client=client or self.create_client(),
            registry=registry,
            config_builder=self.create_config_builder(),
            model_id=self.settings.llm.model,
        )
