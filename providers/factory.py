"""Factory for creating LLM providers."""

from typing import Optional

from config import settings

from .base import LLMProvider
from .litellm_provider import LiteLLMProvider


def get_provider(model: Optional[str] = None, metadata: Optional[dict] = None) -> LLMProvider:
    """Get an LLM provider instance.

    Args:
        model: Model name or friendly alias; defaults to settings.default_model
        metadata: Optional metadata forwarded with every call

    Returns:
        LLMProvider instance

    Examples:
        get_provider()                   # settings.default_model
        get_provider("Claude-Sonnet-4")  # anthropic/claude-sonnet-4-20250514
        get_provider("gpt-4o")
    """
    return LiteLLMProvider(default_model=model or settings.default_model, metadata=metadata)
