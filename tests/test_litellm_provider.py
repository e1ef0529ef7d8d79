"""Tests for LiteLLM provider and model mapping."""

import pytest
from unittest.mock import patch, MagicMock

from providers import get_provider
from providers.litellm_provider import DEFAULT_MODEL, LiteLLMProvider, to_litellm_model
from providers.base import LLMResponse


class TestToLiteLLMModel:
    """Test to_litellm_model mapping."""

    def test_none_uses_default(self):
        assert to_litellm_model(None) == DEFAULT_MODEL

    def test_friendly_name_is_case_insensitive(self):
        assert to_litellm_model("Claude-Sonnet-4") == "anthropic/claude-sonnet-4-20250514"

    def test_haiku_aliases(self):
        assert "haiku" in to_litellm_model("claude-haiku").lower()
        assert to_litellm_model("claude-3-5-haiku-latest") == "anthropic/claude-3-5-haiku-20241022"

    def test_dated_openai_model_kept(self):
        assert to_litellm_model("gpt-4o-2024-08-06") == "gpt-4o-2024-08-06"

    def test_longest_alias_wins(self):
        assert to_litellm_model("gpt-4o-mini") == "gpt-4o-mini"

    def test_gemini_gets_prefix(self):
        assert to_litellm_model("gemini-2.5-pro") == "gemini/gemini-2.5-pro"

    def test_qualified_name_passes_through(self):
        assert to_litellm_model("openrouter/meta-llama/llama-3") == "openrouter/meta-llama/llama-3"

    def test_unknown_name_passes_through(self):
        assert to_litellm_model("my-local-model") == "my-local-model"


class TestLiteLLMProvider:
    """Test LiteLLMProvider with mocked litellm."""

    @pytest.fixture
    def mock_completion_response(self):
        resp = MagicMock()
        resp.choices = [MagicMock()]
        resp.choices[0].message.content = '{"activities": []}'
        resp.usage = MagicMock(prompt_tokens=10, completion_tokens=5)
        resp._hidden_params = {"response_cost": 0.001}
        resp.model = "gpt-4o-mini"
        return resp

    def test_complete_returns_llm_response(self, mock_completion_response):
        with patch("litellm.completion", return_value=mock_completion_response):
            provider = LiteLLMProvider(default_model="gpt-4o-mini")
            result = provider.complete("You are a scheduler.", "Build a schedule", max_tokens=100)
        assert isinstance(result, LLMResponse)
        assert result.content == '{"activities": []}'
        assert result.input_tokens == 10
        assert result.output_tokens == 5
        assert result.total_tokens == 15
        assert result.cost == 0.001
        assert result.model == "gpt-4o-mini"
        assert result.provider == "litellm"

    def test_temperature_and_timeout_forwarded(self, mock_completion_response):
        with patch("litellm.completion", return_value=mock_completion_response) as mock_completion:
            provider = LiteLLMProvider(default_model="gpt-4o-mini")
            provider.complete("Sys", "User", model="Claude-Sonnet-4", temperature=0.2, timeout=30)
        call_kw = mock_completion.call_args[1]
        assert call_kw["model"] == "anthropic/claude-sonnet-4-20250514"
        assert call_kw["temperature"] == 0.2
        assert call_kw["timeout"] == 30
        assert call_kw["messages"][0] == {"role": "system", "content": "Sys"}

    def test_unset_options_omitted(self, mock_completion_response):
        with patch("litellm.completion", return_value=mock_completion_response) as mock_completion:
            LiteLLMProvider(default_model="gpt-4o-mini").complete("Sys", "User")
        call_kw = mock_completion.call_args[1]
        assert "temperature" not in call_kw
        assert "timeout" not in call_kw
        assert call_kw["model"] == "gpt-4o-mini"

    def test_complete_passes_metadata(self, mock_completion_response):
        with patch("litellm.completion", return_value=mock_completion_response) as mock_completion:
            provider = LiteLLMProvider(default_model="gpt-4o-mini", metadata={"request_id": "abc123"})
            provider.complete("Sys", "User")
        call_kw = mock_completion.call_args[1]
        assert call_kw.get("metadata") == {"request_id": "abc123"}

    def test_missing_usage_counts_as_zero(self, mock_completion_response):
        mock_completion_response.usage = None
        mock_completion_response._hidden_params = {}
        with patch("litellm.completion", return_value=mock_completion_response):
            result = LiteLLMProvider(default_model="gpt-4o-mini").complete("Sys", "User")
        assert result.input_tokens == 0
        assert result.output_tokens == 0
        assert result.cost == 0.0

    def test_set_metadata(self):
        provider = LiteLLMProvider(default_model="gpt-4o-mini")
        provider.set_metadata({"request_id": "abc123"})
        provider.set_metadata({"task": "create"})
        assert provider._metadata == {"request_id": "abc123", "task": "create"}

    def test_name_and_default_model(self):
        provider = LiteLLMProvider(default_model="gemini/gemini-2.0-flash")
        assert provider.name == "litellm"
        assert provider.default_model == "gemini/gemini-2.0-flash"
        assert provider.is_available() is True

    def test_factory_resolves_alias(self):
        assert get_provider("claude-opus").default_model == "anthropic/claude-opus-4-20250514"
