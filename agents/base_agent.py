"""Base agent class that generator-backed agents inherit from.

Every agent:
- Holds one fixed system prompt
- Calls the LLM exactly once per request, raced against a hard timeout
- Returns a tagged result instead of raising on invocation failure
- Tracks token usage for cost reporting
"""

import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from typing import Optional

from loguru import logger
from pydantic import BaseModel

from config import settings
from contracts import Err, FailureKind, Ok, PipelineFailure, Result
from providers import LLMProvider, LLMResponse, get_provider


class TokenUsage(BaseModel):
    """Track token usage for cost calculation."""
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_cost(self) -> float:
        """Calculate cost based on current token pricing."""
        return settings.calculate_cost(self.input_tokens, self.output_tokens)


class BaseAgent(ABC):
    """Base class for Schedule-Forge agents.

    There are no automatic retries: a failed or timed-out call is reported
    as ``Err(MODEL_INVOCATION_FAILURE)`` and the caller decides what to
    substitute.
    """

    def __init__(
        self,
        role: str,
        system_prompt: str,
        provider: Optional[LLMProvider] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        """Initialize the agent.

        Args:
            role: Agent role, used in logs and provider metadata
            system_prompt: The agent's fixed system instruction
            provider: LLM provider; defaults to a LiteLLM provider for `model`
            model: Model name or alias (e.g. 'Claude-Sonnet-4', 'gpt-4o')
            timeout_seconds: Wall-clock limit for one call; defaults to settings
        """
        self.role = role
        self.system_prompt = system_prompt
        self.llm_provider: LLMProvider = provider or get_provider(model)
        self.model = model or self.llm_provider.default_model
        self.timeout_seconds = (
            settings.generation_timeout_seconds if timeout_seconds is None else timeout_seconds
        )
        if hasattr(self.llm_provider, "set_metadata"):
            self.llm_provider.set_metadata({"agent": self.role})

        self.total_usage = TokenUsage()

    def invoke(self, user_message: str, max_tokens: Optional[int] = None) -> Result[LLMResponse]:
        """Call the generator once, racing it against the timeout.

        The call runs on a daemon worker thread. Whichever finishes first
        wins; a result that arrives after the timeout is discarded, and a call
        still pending at interpreter exit does not hold the process open.

        Returns:
            Ok(LLMResponse) on success, Err(MODEL_INVOCATION_FAILURE) on
            provider error or timeout.
        """
        future: Future = Future()

        def call() -> None:
            try:
                future.set_result(self.llm_provider.complete(
                    system_prompt=self.system_prompt,
                    user_message=user_message,
                    model=self.model,
                    max_tokens=max_tokens or settings.generation_max_output_tokens,
                    temperature=settings.generation_temperature,
                    timeout=self.timeout_seconds,
                ))
            except Exception as e:
                future.set_exception(e)

        threading.Thread(target=call, name=f"{self.role}-call", daemon=True).start()
        try:
            response = future.result(timeout=self.timeout_seconds)
        except FutureTimeoutError:
            message = f"{self.role} call timed out after {self.timeout_seconds:g} seconds"
            logger.warning(message)
            return Err(PipelineFailure(FailureKind.MODEL_INVOCATION_FAILURE, message, detail="timeout"))
        except Exception as e:
            message = f"{self.role} call failed: {e}"
            logger.warning(message)
            return Err(PipelineFailure(FailureKind.MODEL_INVOCATION_FAILURE, message, detail=type(e).__name__))

        self.total_usage.input_tokens += response.input_tokens
        self.total_usage.output_tokens += response.output_tokens
        logger.info(
            f"{self.role} call complete: model={response.model} "
            f"in={response.input_tokens:,} out={response.output_tokens:,}"
        )
        return Ok(response)

    @abstractmethod
    def get_task_description(self) -> str:
        """Return a description of what this agent does.

        Used for logging and debugging.
        """
        pass
