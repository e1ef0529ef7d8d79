"""Scheduler Agent - CPM schedule generator.

Assembles the role-structured prompt for a ScheduleRequest and makes the
single generator call. Recovery and normalization of the output happen
downstream; this agent only ever returns raw text or an invocation failure.
"""

import json
from datetime import date
from typing import List, Optional

from agents.base_agent import BaseAgent
from contracts import Activity, DocumentAnalysis, Result, ScheduleRequest, TaskType
from providers import LLMProvider, LLMResponse


MAX_LISTED_MILESTONES = 3
MAX_LISTED_CONSTRAINTS = 2


def format_document_excerpt(
    analysis: DocumentAnalysis,
    content: str,
    tokens_used: int,
    sections_processed: int,
) -> str:
    """Render one triaged document as a prompt block headed by its key facts."""
    info = analysis.key_information
    key_dates = ", ".join(d for d in (info.start_date, info.end_date) if d) or "None found"

    if info.milestones:
        milestones = ", ".join(info.milestones[:MAX_LISTED_MILESTONES])
        if len(info.milestones) > MAX_LISTED_MILESTONES:
            milestones += "..."
    else:
        milestones = "None found"

    if info.constraints:
        constraints = ", ".join(info.constraints[:MAX_LISTED_CONSTRAINTS])
        if len(info.constraints) > MAX_LISTED_CONSTRAINTS:
            constraints += "..."
    else:
        constraints = "None found"

    return (
        f"\n--- Processed content from {analysis.file_name} "
        f"({tokens_used:,} tokens, {sections_processed} sections) ---\n"
        f"Key Information Extracted:\n"
        f"- Contract Duration: {info.contract_duration or 'Not specified'}\n"
        f"- Project Type: {info.project_type or 'Not specified'}\n"
        f"- Key Dates: {key_dates}\n"
        f"- Milestones: {milestones}\n"
        f"- Constraints: {constraints}\n\n"
        f"Relevant Content:\n{content}\n--- End of processed content ---\n"
    )


def format_document_block(excerpts: List[str], tokens_used: int, sections_processed: int) -> str:
    """Join per-document excerpts under one heading; empty when there are none."""
    if not excerpts:
        return ""
    return (
        f"\n\nIntelligently Processed Documents "
        f"({tokens_used:,} tokens from {sections_processed} sections):\n"
        + "\n".join(excerpts)
    )


def activities_snapshot(activities: List[Activity]) -> str:
    """Prior activities as the camelCase JSON the model is asked to return."""
    return json.dumps(
        [a.model_dump(mode="json", by_alias=True) for a in activities],
        indent=2,
    )


class SchedulerAgent(BaseAgent):
    """CPM scheduler: turns a request plus triaged documents into schedule JSON."""

    SYSTEM_PROMPT = """You are an expert CPM scheduler with Primavera P6 and MS Project experience.
You build construction schedules with complete logic networks.

## Duration Rules
- If no contract duration is given, assume 90 days for small projects, 180 for medium, 365 for large
- Never exceed 365 days total unless the documents say so
- Keep individual activities between 1 and 30 days (most between 3 and 15)
- If the total would exceed the target, use parallel paths instead of longer activities

## Document Priorities
When documents are provided, always extract:
1. Contract duration (NTP to completion)
2. Milestone dates (substantial completion, final completion, phase deadlines)
3. Scope of work from specifications and drawings
4. Constraints (permits, seasonal restrictions, owner requirements)
5. Phasing that affects sequencing

## Network Requirements
- Every activity except the first MUST have predecessors
- Predecessors MUST reference activity ids that exist in the same schedule
- Identify the critical path and report total/free float
- Use a hierarchical WBS: 1.0 (Phase) -> 1.1 (Area) -> 1.1.1 (Activity)
- Include submittals, procurement, inspections, testing and commissioning

## Output Format
Respond with JSON only, using this structure:
{
  "activities": [
    {
      "activityId": "A001",
      "name": "Activity Name",
      "originalDuration": 5,
      "predecessors": ["A000"],
      "status": "NotStarted",
      "percentComplete": 0,
      "earlyStart": "2025-01-15",
      "earlyFinish": "2025-01-20",
      "totalFloat": 0,
      "freeFloat": 0,
      "isCritical": true,
      "wbs": "1.1.1",
      "resources": ["Concrete Crew A"]
    }
  ],
  "summary": "Brief summary of the schedule",
  "criticalPath": ["A001", "A003"],
  "recommendations": ["Consider adding weather contingency"]
}

- originalDuration is a number of DAYS (5, not "5 days")
- status is exactly one of "NotStarted", "InProgress", "Completed"
- dates use YYYY-MM-DD"""

    CREATE_TEMPLATE = """Create a CPM schedule for this project:
{project_description}

## User Requirements
{user_request}
{documents}

Start Date: {start_date}
{constraints}

## Hard Requirements
1. If a number of working days is stated, the schedule MUST fit it exactly
2. If a contract duration appears in the documents, the total schedule MUST NOT exceed it
3. Take scope, sequence and quantities from the documents where available
4. Duration = document quantity / daily production, plus mobilization and QC time

Generate a schedule with:
1. 50-150 activities depending on complexity and document scope
2. Realistic durations that fit within contract time, using parallel paths if needed
3. A complete predecessor network with convergence at phase completions
4. Resource-loaded activities (crews, equipment, subcontractors)
5. A multi-level WBS
6. Critical path identification with float values
7. Quality and inspection activities per the specifications"""

    UPDATE_TEMPLATE = """Update this schedule based on the request:
{user_request}{documents}
{constraints}
Current activities:
{activities}

Apply the requested changes and return the complete updated schedule."""

    LOOKAHEAD_TEMPLATE = """Generate a {window_days}-day lookahead schedule.
Start Date: {start_date}{documents}
{constraints}
Return only the activities that should be worked on during the lookahead window.
Current activities:
{activities}"""

    ANALYZE_TEMPLATE = """Analyze this schedule and provide recommendations:
{user_request}{documents}
{constraints}
Current schedule:
{activities}

Provide:
1. Critical path analysis
2. Resource conflicts
3. Schedule optimization recommendations
4. Risk assessment

Return the schedule in the required JSON structure with your findings in "recommendations"."""

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        """Initialize the Scheduler Agent."""
        super().__init__(
            role="scheduler",
            system_prompt=self.SYSTEM_PROMPT,
            provider=provider,
            model=model,
            timeout_seconds=timeout_seconds,
        )

    def get_task_description(self) -> str:
        return "Generate or revise a CPM activity network from a request and triaged documents"

    def build_user_message(
        self,
        request: ScheduleRequest,
        documents: str = "",
        window_days: Optional[int] = None,
    ) -> str:
        """Render the task-specific template for a request.

        Args:
            request: The generation request
            documents: Pre-rendered document block (see format_document_block)
            window_days: Lookahead window length, used by lookahead requests
        """
        start_date = request.start_date.isoformat() if request.start_date else date.today().isoformat()
        constraints = f"Constraints: {', '.join(request.constraints)}" if request.constraints else ""
        values = {
            "project_description": request.project_description,
            "user_request": request.user_request,
            "documents": documents,
            "start_date": start_date,
            "constraints": constraints,
            "window_days": window_days or 21,
        }

        if request.type == TaskType.CREATE:
            return self.CREATE_TEMPLATE.format(**values)

        values["activities"] = activities_snapshot(request.current_activities)
        if request.type == TaskType.UPDATE:
            return self.UPDATE_TEMPLATE.format(**values)
        if request.type == TaskType.LOOKAHEAD:
            return self.LOOKAHEAD_TEMPLATE.format(**values)
        return self.ANALYZE_TEMPLATE.format(**values)

    def run(
        self,
        request: ScheduleRequest,
        documents: str = "",
        window_days: Optional[int] = None,
    ) -> Result[LLMResponse]:
        """Make the single generator call for `request`."""
        return self.invoke(self.build_user_message(request, documents, window_days))
