"""
Generation config construction.

Every request starts from the same default config (fixed safety thresholds,
output cap, one candidate, thinking disabled, the registered tools). When a
tool fires, the second turn uses a copy tuned with that tool's system
directive; the original is never touched.
"""

from collections.abc import Sequence

from reportagent.config.settings import GenerationSettings
from reportagent.llm.models import GenerationConfig, SafetySetting
from reportagent.tools.base import ToolDescriptor

DEFAULT_SAFETY_SETTINGS: tuple[SafetySetting, ...] = (
    SafetySetting(category="HARM_CATEGORY_HATE_SPEECH", threshold="BLOCK_ONLY_HIGH"),
    SafetySetting(category="HARM_CATEGORY_DANGEROUS_CONTENT", threshold="BLOCK_LOW_AND_ABOVE"),
)


class ModelConfigBuilder:
    """
    Builds GenerationConfigs from settings.

    Holds no per-request state, so one instance is shared by all requests.

    Args:
        settings: Generation limits; defaults are used when omitted
        temperature: Optional sampling temperature forwarded to every call
        safety_settings: Override the default safety thresholds
    """

    def __init__(
        self,
        settings: GenerationSettings | None = None,
        temperature: float | None = None,
        safety_settings: Sequence[SafetySetting] = DEFAULT_SAFETY_SETTINGS,
    ):
        self._settings = settings or GenerationSettings()
        self._temperature = temperature
        self._safety_settings = tuple(safety_settings)

    def build_default(self, tools: Sequence[ToolDescriptor] = ()) -> GenerationConfig:
        """
        Build the first-turn config.

        An empty tool list leaves ``tools`` as None instead of an empty tuple;
        some backends treat "no tools field" and "empty tools" differently.
        """
        return GenerationConfig(
            safety_settings=self._safety_settings,
            max_output_tokens=self._settings.max_output_tokens,
            candidate_count=self._settings.candidate_count,
            thinking_budget=self._settings.thinking_budget,
            temperature=self._temperature,
            tools=tuple(tools) if tools else None,
            system_directive=self._settings.default_system_directive,
        )

    @staticmethod
    def tuned_with(base: GenerationConfig, directive: str) -> GenerationConfig:
        """Copy of ``base`` with only the system directive replaced."""
        return base.model_copy(update={"system_directive": directive})
