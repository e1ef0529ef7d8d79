"""Orchestrator module: per-request generation control."""

from .fallback import FALLBACK_SUMMARY, fallback_output
from .generation_orchestrator import GenerationOrchestrator, GenerationOutcome
from .request_state import GenerationStage, GenerationState

__all__ = [
    "FALLBACK_SUMMARY",
    "fallback_output",
    "GenerationOrchestrator",
    "GenerationOutcome",
    "GenerationStage",
    "GenerationState",
]
