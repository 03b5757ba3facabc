"""
Unit tests for ModelConfigBuilder.
"""

import pytest
from pydantic import ValidationError

from reportagent.config.settings import GenerationSettings
from reportagent.llm.config_builder import DEFAULT_SAFETY_SETTINGS, ModelConfigBuilder
from reportagent.llm.models import SafetySetting
from reportagent.tools.base import ToolDescriptor


@pytest.fixture
def descriptors():
    return [ToolDescriptor(name="get_cleaning_report"), ToolDescriptor(name="other_tool")]


@pytest.fixture
def builder():
    return ModelConfigBuilder(GenerationSettings())


class TestBuildDefault:

    def test_fixed_generation_limits(self, builder, descriptors):
        config = builder.build_default(descriptors)
        assert config.max_output_tokens == 1024
        assert config.candidate_count == 1
        assert config.thinking_budget == 0

    def test_safety_thresholds(self, builder, descriptors):
        config = builder.build_default(descriptors)
        assert config.safety_settings == (
            SafetySetting(category="HARM_CATEGORY_HATE_SPEECH", threshold="BLOCK_ONLY_HIGH"),
            SafetySetting(category="HARM_CATEGORY_DANGEROUS_CONTENT", threshold="BLOCK_LOW_AND_ABOVE"),
        )
        assert config.safety_settings == DEFAULT_SAFETY_SETTINGS

    def test_attaches_tools_in_order(self, builder, descriptors):
        config = builder.build_default(descriptors)
        assert [t.name for t in config.tools] == ["get_cleaning_report", "other_tool"]

    def test_empty_tools_omitted(self, builder):
        assert builder.build_default([]).tools is None
        assert builder.build_default().tools is None

    def test_no_directive_by_default(self, builder):
        assert builder.build_default().system_directive is None

    def test_settings_override_defaults(self):
        settings = GenerationSettings(
            max_output_tokens=256,
            thinking_budget=512,
            default_system_directive="Be brief.",
        )
        config = ModelConfigBuilder(settings, temperature=0.2).build_default()
        assert config.max_output_tokens == 256
        assert config.thinking_budget == 512
        assert config.system_directive == "Be brief."
        assert config.temperature == 0.2

    def test_config_is_frozen(self, builder):
        config = builder.build_default()
        with pytest.raises(ValidationError):
            config.system_directive = "mutated"


class TestTunedWith:

    def test_replaces_only_directive(self, builder, descriptors):
        base = builder.build_default(descriptors)
        tuned = builder.tuned_with(base, "You are a data analyst.")

        assert tuned.system_directive == "You are a data analyst."
        assert tuned.model_dump(exclude={"system_directive"}) == base.model_dump(
            exclude={"system_directive"}
        )

    def test_base_is_not_mutated(self, builder, descriptors):
        base = builder.build_default(descriptors)
        before = base.model_dump()

        tuned = builder.tuned_with(base, "You are a data analyst.")

        assert tuned is not base
        assert base.system_directive is None
        assert base.model_dump() == before
        assert tuned.system_directive != base.system_directive

    def test_directive_replaced_not_merged(self):
        builder = ModelConfigBuilder(GenerationSettings(default_system_directive="First directive."))
        base = builder.build_default()
        tuned = builder.tuned_with(base, "Second directive.")
        assert tuned.system_directive == "Second directive."
        assert "First" not in tuned.system_directive
