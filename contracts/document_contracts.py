"""Document triage contracts.

Documents, sections and key information exist only for the duration of one
triage call; nothing here is persisted.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from enum import Enum


class SectionCategory(str, Enum):
    """Coarse label assigned to a section by keyword majority vote."""
    PROJECT_DETAILS = "project_details"
    SCHEDULE = "schedule"
    SPECIFICATIONS = "specifications"
    CONSTRAINTS = "constraints"
    DATES = "dates"
    SCOPE = "scope"
    OTHER = "other"


class ProcessingMode(str, Enum):
    """How much of a triaged document is sent to the generator."""
    QUICK = "quick"
    STANDARD = "standard"
    DEEP = "deep"
    CUSTOM = "custom"


class Document(BaseModel):
    """Raw document text as read from the content store."""
    name: str
    path: str
    raw_text: str
    total_size_chars: int = Field(..., ge=0)


class Section(BaseModel):
    """A scored, labeled slice of a document."""
    id: str
    title: str
    content: str
    relevance_score: int = Field(..., ge=0, le=100)
    category: SectionCategory = SectionCategory.OTHER
    token_estimate: int = Field(..., ge=0)
    keywords: List[str] = Field(default_factory=list)
    is_selected: bool = False

    model_config = {"frozen": True}


class KeyInformation(BaseModel):
    """Best-effort facts pulled from the whole document text."""
    contract_duration: Optional[str] = None
    project_type: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    milestones: List[str] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)


class ProcessingOptions(BaseModel):
    """Caller's choice of which sections to send and how much."""
    mode: ProcessingMode = ProcessingMode.STANDARD
    selected_section_ids: Optional[List[str]] = Field(
        default=None,
        description="Section ids to include; only used in custom mode",
    )
    max_tokens: Optional[int] = Field(
        default=None,
        gt=0,
        description="Word-level ceiling applied after concatenation",
    )


class ProcessingBudget(BaseModel):
    """Token and cost estimate for one processing mode."""
    mode: ProcessingMode
    tokens: int = Field(..., ge=0)
    cost_usd: float = Field(..., ge=0)
    section_count: int = Field(..., ge=0)
    description: str


class DocumentAnalysis(BaseModel):
    """Triage result for one document."""
    file_name: str
    file_path: str
    total_size: int = Field(0, ge=0)
    total_tokens: int = Field(0, ge=0)
    sections: List[Section] = Field(default_factory=list)
    key_information: KeyInformation = Field(default_factory=KeyInformation)
    budgets: Dict[ProcessingMode, ProcessingBudget] = Field(default_factory=dict)
    failure_note: Optional[str] = Field(
        default=None,
        description="Set when the document could not be read; sections are then empty",
    )

    @property
    def failed(self) -> bool:
        return self.failure_note is not None

    def get_section(self, section_id: str) -> Optional[Section]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None
