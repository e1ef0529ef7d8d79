"""LLM provider abstraction; litellm handles the vendor differences."""

from .base import LLMProvider, LLMResponse
from .factory import get_provider
from .litellm_provider import LiteLLMProvider, MODEL_ALIASES, to_litellm_model

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LiteLLMProvider",
    "MODEL_ALIASES",
    "get_provider",
    "to_litellm_model",
]
