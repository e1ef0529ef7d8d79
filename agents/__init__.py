"""Agent implementations for Schedule-Forge.

Each agent owns one system prompt and makes a single generator call per request.
"""

from .base_agent import BaseAgent, TokenUsage
from .scheduler_agent import (
    SchedulerAgent,
    activities_snapshot,
    format_document_block,
    format_document_excerpt,
)
from .impact_agent import ImpactAgent, IMPACT_KEYS

__all__ = [
    # Base
    "BaseAgent",
    "TokenUsage",
    # Scheduler
    "SchedulerAgent",
    "activities_snapshot",
    "format_document_block",
    "format_document_excerpt",
    # Impacts
    "ImpactAgent",
    "IMPACT_KEYS",
]
