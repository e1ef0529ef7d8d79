"""Shared fixtures: in-process LLM providers so no test reaches the network."""

import threading
from typing import List, Optional

import pytest

from providers.base import LLMProvider, LLMResponse


class StubProvider(LLMProvider):
    """Returns canned content, or raises `error`, and records every call."""

    def __init__(self, content: str = "", error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: List[dict] = []

    @property
    def name(self) -> str:
        return "stub"

    @property
    def default_model(self) -> str:
        return "stub-model"

    def complete(self, system_prompt, user_message, model=None, max_tokens=4096, temperature=None, timeout=None):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_message": user_message,
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "timeout": timeout,
        })
        if self.error is not None:
            raise self.error
        return LLMResponse(
            content=self.content,
            input_tokens=100,
            output_tokens=50,
            model=model or self.default_model,
            provider=self.name,
        )


class BlockingProvider(StubProvider):
    """Blocks until `release` is set, to exercise the timeout race."""

    def __init__(self, content: str = ""):
        super().__init__(content)
        self.release = threading.Event()

    def complete(self, *args, **kwargs):
        self.release.wait(timeout=5)
        return super().complete(*args, **kwargs)


@pytest.fixture
def stub_provider():
    """Factory for StubProvider instances."""
    return StubProvider


@pytest.fixture
def blocking_provider():
    provider = BlockingProvider('{"activities": []}')
    yield provider
    provider.release.set()
