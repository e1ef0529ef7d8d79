"""Generator interface: what the pipeline needs from a text-generation backend."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class LLMResponse:
    """Aggregated text of one generator call plus its usage."""
    content: str
    input_tokens: int
    output_tokens: int
    model: str
    provider: str
    cost: float = 0.0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMProvider(ABC):
    """A backend that turns a system instruction and one user message into text.

    Implementations may raise on any transport or API error; BaseAgent turns
    that into an Err result, so providers do no retrying or fallback of their own.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Model string used when a call does not name one."""
        pass

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 4096,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> LLMResponse:
        """Make one chat-completion call.

        Args:
            system_prompt: Fixed role and output-shape instruction
            user_message: Task prompt with documents and prior activities
            model: Model string; the provider's default when None
            max_tokens: Output ceiling
            temperature: Sampling temperature, provider default when None
            timeout: Request timeout in seconds, passed through to the client
        """
        pass

    def is_available(self) -> bool:
        """Whether the provider is configured well enough to attempt a call."""
        return True
