"""Pydantic contracts for the Schedule-Forge pipeline.

All stage-to-stage handoffs are typed through these contracts.
"""

from .document_contracts import (
    SectionCategory,
    ProcessingMode,
    Document,
    Section,
    KeyInformation,
    ProcessingOptions,
    ProcessingBudget,
    DocumentAnalysis,
)

from .schedule_contracts import (
    ActivityStatus,
    TaskType,
    Activity,
    ExtractedInfo,
    DocumentInsights,
    ScheduleResult,
    ScheduleRequest,
    SuggestedUpdate,
    ScheduleImpactReport,
    critical_path_ids,
)

from .outcomes import (
    FailureKind,
    PipelineFailure,
    Ok,
    Err,
    Result,
)

__all__ = [
    # Documents
    "SectionCategory",
    "ProcessingMode",
    "Document",
    "Section",
    "KeyInformation",
    "ProcessingOptions",
    "ProcessingBudget",
    "DocumentAnalysis",
    # Schedule
    "ActivityStatus",
    "TaskType",
    "Activity",
    "ExtractedInfo",
    "DocumentInsights",
    "ScheduleResult",
    "ScheduleRequest",
    "SuggestedUpdate",
    "ScheduleImpactReport",
    "critical_path_ids",
    # Outcomes
    "FailureKind",
    "PipelineFailure",
    "Ok",
    "Err",
    "Result",
]
