"""Configuration settings for the Schedule-Forge pipeline."""

from dotenv import load_dotenv

load_dotenv()

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Dict, Optional


class Settings(BaseSettings):
    """Global settings for Schedule-Forge.

    Settings can be overridden via environment variables with SCHEDULE_FORGE_ prefix.
    Example: SCHEDULE_FORGE_GENERATION_TIMEOUT_SECONDS=300
    """

    # Model config
    default_model: str = Field(
        default="anthropic/claude-sonnet-4-20250514",
        description="Default model for schedule generation"
    )
    generation_temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for the single generation call"
    )
    generation_max_output_tokens: int = Field(
        default=8000,
        description="Maximum tokens the generator may return"
    )
    generation_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Hard wall-clock limit for the generation call; fallback schedule after this"
    )

    # Triage tuning. The thresholds are empirical, not derived.
    triage_chunk_size_chars: int = Field(
        default=2000,
        gt=0,
        description="Window size for fixed-size chunking when no headings are found"
    )
    triage_min_section_chars: int = Field(
        default=100,
        ge=0,
        description="Sections shorter than this (after strip) are discarded as noise"
    )
    triage_auto_select_threshold: int = Field(
        default=20,
        ge=0,
        le=100,
        description="Sections scoring above this are auto-selected (standard mode)"
    )
    triage_high_relevance_threshold: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Sections scoring above this are high relevance (quick mode)"
    )
    triage_max_keywords: int = Field(
        default=10,
        description="Number of frequent words kept per section"
    )
    document_read_workers: int = Field(
        default=4,
        ge=1,
        description="Thread pool size for parallel document reads"
    )
    documents_dir: str = Field(
        default=".",
        description="Root directory for the local content store"
    )

    # Normalization
    default_activity_duration_days: int = Field(
        default=5,
        ge=0,
        description="Duration used when the model gives none or a non-numeric one"
    )
    lookahead_window_days: int = Field(
        default=21,
        gt=0,
        description="Horizon of the deterministic lookahead filter"
    )

    # Token pricing (per 1M tokens)
    baseline_input_cost_per_million: float = Field(
        default=3.00,
        description="Price used for triage budgets when the model is not in MODEL_INPUT_PRICES"
    )
    input_token_cost_per_million: float = Field(
        default=3.00,
        description="Cost per 1M input tokens for the generation call"
    )
    output_token_cost_per_million: float = Field(
        default=15.00,
        description="Cost per 1M output tokens for the generation call"
    )

    log_level: str = Field(
        default="INFO",
        description="Minimum log level for the console sink"
    )

    model_config = {
        "env_prefix": "SCHEDULE_FORGE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",  # ignore extra env vars (e.g. OPENAI_API_KEY) not in schema
    }

    def calculate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Calculate cost in USD for given token usage."""
        input_cost = (input_tokens / 1_000_000) * self.input_token_cost_per_million
        output_cost = (output_tokens / 1_000_000) * self.output_token_cost_per_million
        return input_cost + output_cost

    def estimate_input_cost(self, tokens: int, model: Optional[str] = None) -> float:
        """Estimate the input cost of sending `tokens` to `model`."""
        price = lookup_input_price(model or self.default_model, self.baseline_input_cost_per_million)
        return (tokens / 1_000_000) * price


# Input price per 1M tokens, keyed by lowercase model id without provider prefix.
MODEL_INPUT_PRICES: Dict[str, float] = {
    "claude-sonnet-4": 3.00,
    "claude-3-haiku": 0.25,
    "claude-3-5-haiku": 0.80,
    "claude-3-opus": 15.00,
    "gpt-4o-mini": 0.15,
    "gpt-4o": 5.00,
    "gpt-4-turbo": 10.00,
    "gpt-3.5-turbo": 1.00,
    "gemini-2.5-pro": 1.25,
    "gemini-2.0-flash": 0.10,
}


def lookup_input_price(model: str, default: float) -> float:
    """Return the per-million input price for a model id, or `default` if unknown.

    Matches "anthropic/claude-sonnet-4-20250514" and "Claude-Sonnet-4" alike:
    the provider prefix is dropped and the longest known prefix wins.
    """
    key = model.lower().split("/")[-1]
    for known in sorted(MODEL_INPUT_PRICES, key=len, reverse=True):
        if key == known or key.startswith(known + "-"):
            return MODEL_INPUT_PRICES[known]
    return default


# Create singleton instance
settings = Settings()
