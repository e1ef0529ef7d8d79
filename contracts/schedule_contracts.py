"""Schedule contracts: the canonical activity network and the produced result.

Serialized form uses camelCase aliases (activityId, durationDays, ...) because
the result is consumed by exporters and the UI; Python code uses the
snake_case attribute names.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator

from .document_contracts import DocumentAnalysis, ProcessingOptions


class ActivityStatus(str, Enum):
    """Progress state of an activity."""
    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


class TaskType(str, Enum):
    """Kind of generation request."""
    CREATE = "create"
    UPDATE = "update"
    LOOKAHEAD = "lookahead"
    ANALYZE = "analyze"


class Activity(BaseModel):
    """Canonical scheduling activity.

    Instances are immutable: an update is a fresh replacement list that the
    caller reconciles against prior state.
    """
    activity_id: str = Field(..., alias="activityId", min_length=1)
    name: str
    duration_days: int = Field(..., alias="durationDays", ge=0)
    start_date: date = Field(..., alias="startDate")
    finish_date: date = Field(..., alias="finishDate")
    predecessors: List[str] = Field(default_factory=list)
    successors: List[str] = Field(default_factory=list)
    status: ActivityStatus = ActivityStatus.NOT_STARTED
    percent_complete: float = Field(0.0, alias="percentComplete", ge=0, le=100)
    total_float_days: int = Field(0, alias="totalFloatDays")
    free_float_days: int = Field(0, alias="freeFloatDays")
    is_critical: bool = Field(False, alias="isCritical")
    wbs: str = ""
    resources: List[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "frozen": True}

    @model_validator(mode='after')
    def enforce_schedule_invariants(self) -> 'Activity':
        """Keep finish >= start and criticality tied to zero total float."""
        if self.finish_date < self.start_date:
            object.__setattr__(self, 'finish_date', self.start_date + timedelta(days=self.duration_days))
        critical = self.total_float_days == 0
        if self.is_critical != critical:
            object.__setattr__(self, 'is_critical', critical)
        return self


def critical_path_ids(activities: List[Activity]) -> List[str]:
    """Ordered ids of all critical activities."""
    return [a.activity_id for a in activities if a.is_critical]


class ExtractedInfo(BaseModel):
    """Key facts merged across all triaged documents."""
    contract_duration: Optional[str] = Field(None, alias="contractDuration")
    project_type: Optional[str] = Field(None, alias="projectType")
    key_dates: List[str] = Field(default_factory=list, alias="keyDates")
    milestones: List[str] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class DocumentInsights(BaseModel):
    """What the triage stage contributed to a generation request."""
    extracted_info: ExtractedInfo = Field(default_factory=ExtractedInfo, alias="extractedInfo")
    tokens_used: int = Field(0, alias="tokensUsed", ge=0)
    sections_processed: int = Field(0, alias="sectionsProcessed", ge=0)

    model_config = {"populate_by_name": True}


class ScheduleResult(BaseModel):
    """Produced contract handed to exporters and the UI.

    Never null: absence of data is an empty activity list plus a
    diagnostic summary.
    """
    activities: List[Activity] = Field(default_factory=list)
    summary: str
    critical_path: List[str] = Field(default_factory=list, alias="criticalPath")
    recommendations: List[str] = Field(default_factory=list)
    document_insights: Optional[DocumentInsights] = Field(None, alias="documentInsights")

    model_config = {"populate_by_name": True}

    @model_validator(mode='after')
    def sync_critical_path(self) -> 'ScheduleResult':
        """Critical path is always derived from the activities, never trusted."""
        object.__setattr__(self, 'critical_path', critical_path_ids(self.activities))
        return self

    def to_payload(self) -> dict:
        """Serialize to the camelCase JSON-compatible dict consumers expect."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ScheduleRequest(BaseModel):
    """One generation request. Self-contained; shares no state with other requests."""
    type: TaskType = TaskType.CREATE
    project_description: str = ""
    user_request: str = ""
    current_activities: List[Activity] = Field(default_factory=list)
    start_date: Optional[date] = None
    constraints: List[str] = Field(default_factory=list)
    uploaded_files: List[str] = Field(default_factory=list)
    document_analyses: List[DocumentAnalysis] = Field(
        default_factory=list,
        description="Pre-analyzed documents; when given, uploaded_files are not re-triaged",
    )
    processing: ProcessingOptions = Field(default_factory=ProcessingOptions)
    model: Optional[str] = None


class SuggestedUpdate(BaseModel):
    """One field change proposed by schedule impact analysis."""
    activity_id: str = Field(..., alias="activityId")
    field: str
    new_value: Optional[Any] = Field(None, alias="newValue")
    reason: str = ""

    model_config = {"populate_by_name": True}


class ScheduleImpactReport(BaseModel):
    """Activities affected by a meeting discussion and the suggested edits."""
    impacted_activities: List[str] = Field(default_factory=list, alias="impactedActivities")
    suggested_updates: List[SuggestedUpdate] = Field(default_factory=list, alias="suggestedUpdates")

    model_config = {"populate_by_name": True}
