"""LiteLLM-backed provider. Single implementation for all generator calls."""

from typing import Optional

from loguru import logger

from .base import LLMProvider, LLMResponse


# LiteLLM model strings: provider/model-name (OpenAI can omit prefix)
DEFAULT_MODEL = "anthropic/claude-sonnet-4-20250514"

# Friendly names (lowercased) -> LiteLLM model string.
# Matching is exact or on a "-"/"." suffix, longest alias first.
MODEL_ALIASES = {
    "claude-sonnet-4": "anthropic/claude-sonnet-4-20250514",
    "claude-sonnet": "anthropic/claude-sonnet-4-20250514",
    "claude-opus-4": "anthropic/claude-opus-4-20250514",
    "claude-opus": "anthropic/claude-opus-4-20250514",
    "claude-haiku": "anthropic/claude-3-5-haiku-20241022",
    "claude-3-5-haiku": "anthropic/claude-3-5-haiku-20241022",
    "gpt-4o": "gpt-4o",
    "gpt-4o-mini": "gpt-4o-mini",
    "gpt-4-turbo": "gpt-4-turbo",
    "gpt-3.5-turbo": "gpt-3.5-turbo",
    "gemini-2.0-flash": "gemini/gemini-2.0-flash",
    "gemini-2.5-flash": "gemini/gemini-2.5-flash",
    "gemini-2.5-pro": "gemini/gemini-2.5-pro",
    "deepseek-chat": "deepseek/deepseek-chat",
}


def to_litellm_model(model: Optional[str]) -> str:
    """Map a friendly or already-qualified model name to a LiteLLM model string.

    Qualified names (containing "/") and unknown names pass through unchanged.
    """
    if not model:
        return DEFAULT_MODEL
    if "/" in model:
        return model
    model_lower = model.lower()
    # Prefer longest alias match first (e.g. gpt-4o-mini before gpt-4o)
    for alias in sorted(MODEL_ALIASES, key=len, reverse=True):
        if model_lower == alias or model_lower.startswith(alias + "-") or model_lower.startswith(alias + "."):
            # A dated suffix is kept when the alias maps to itself
            target = MODEL_ALIASES[alias]
            return model_lower if target == alias else target
    return model


class LiteLLMProvider(LLMProvider):
    """Single provider that delegates to litellm.completion()."""

    def __init__(self, default_model: str = DEFAULT_MODEL, metadata: Optional[dict] = None):
        """Initialize with the LiteLLM model string to use by default.

        Args:
            default_model: LiteLLM model string or friendly alias.
            metadata: Optional dict passed to litellm (e.g. request id) for cost logging.
        """
        self._default_model = to_litellm_model(default_model)
        self._metadata = metadata or {}

    @property
    def name(self) -> str:
        return "litellm"

    @property
    def default_model(self) -> str:
        return self._default_model

    def set_metadata(self, metadata: dict) -> None:
        self._metadata = {**self._metadata, **metadata}

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 4096,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> LLMResponse:
        import litellm

        resolved_model = to_litellm_model(model) if model else self._default_model
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ]
        kwargs = {
            "model": resolved_model,
            "messages": messages,
            "max_tokens": max_tokens,
            "metadata": {**self._metadata},
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        if timeout is not None:
            kwargs["timeout"] = timeout

        logger.debug(f"litellm.completion model={resolved_model} max_tokens={max_tokens}")
        response = litellm.completion(**kwargs)

        content = response.choices[0].message.content or ""
        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "prompt_tokens", 0) or 0
        output_tokens = getattr(usage, "completion_tokens", 0) or 0
        hidden = getattr(response, "_hidden_params", None) or {}
        cost = float(hidden.get("response_cost", 0) or 0)
        model_id = getattr(response, "model", None) or resolved_model

        return LLMResponse(
            content=content,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model=model_id,
            provider=self.name,
            cost=cost,
        )

    def is_available(self) -> bool:
        """LiteLLM reads API keys from env; we consider it available if the model is set."""
        return bool(self._default_model)
