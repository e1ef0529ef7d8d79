"""Impact Agent - schedule impacts from meeting discussions.

Reads meeting notes against the current activities and suggests field
updates. Any failure (invocation, unparseable output, invalid shape)
yields an empty report.
"""

from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from agents.base_agent import BaseAgent
from contracts import Activity, ScheduleImpactReport
from errors import ScheduleForgeError
from providers import LLMProvider
from recovery.extraction import extract_payload


IMPACT_KEYS = ("impactedActivities", "suggestedUpdates")


class ImpactAgent(BaseAgent):
    """Construction schedule analyst for meeting notes."""

    SYSTEM_PROMPT = (
        "You are a construction schedule analyst. "
        "Identify schedule impacts from meeting discussions. Respond with JSON only."
    )

    PROMPT_TEMPLATE = """Analyze these meeting notes and identify schedule impacts:

Meeting Notes:
{meeting_notes}

Current Schedule Activities:
{activity_lines}

Identify:
1. Which activities are mentioned or impacted
2. What updates should be made (status changes, date changes, etc.)
3. Reason for each update

Return as JSON:
{{
  "impactedActivities": ["A001", "A002"],
  "suggestedUpdates": [
    {{
      "activityId": "A001",
      "field": "status",
      "newValue": "InProgress",
      "reason": "Meeting notes indicate work has started"
    }}
  ]
}}"""

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        super().__init__(
            role="impact",
            system_prompt=self.SYSTEM_PROMPT,
            provider=provider,
            model=model,
            timeout_seconds=timeout_seconds,
        )

    def get_task_description(self) -> str:
        return "Identify activities impacted by meeting notes and suggest updates"

    def build_user_message(self, meeting_notes: str, activities: List[Activity]) -> str:
        activity_lines = "\n".join(
            f"{a.activity_id}: {a.name} ({a.status.value})" for a in activities
        )
        return self.PROMPT_TEMPLATE.format(
            meeting_notes=meeting_notes,
            activity_lines=activity_lines or "(no activities)",
        )

    def analyze(self, meeting_notes: str, activities: List[Activity]) -> ScheduleImpactReport:
        """Return impacted ids and suggested updates; references to unknown ids are dropped."""
        try:
            response = self.invoke(self.build_user_message(meeting_notes, activities)).unwrap()
            extraction = extract_payload(response.content, keys=IMPACT_KEYS, line_scan=False).unwrap()
            report = ScheduleImpactReport.model_validate(extraction.payload)
        except ValidationError as e:
            logger.warning(f"Impact analysis returned an invalid shape: {e.error_count()} errors")
            return ScheduleImpactReport()
        except ScheduleForgeError as e:
            logger.warning(f"Impact analysis unavailable: {e}")
            return ScheduleImpactReport()

        known = {a.activity_id for a in activities}
        impacted = [i for i in dict.fromkeys(report.impacted_activities) if i in known]
        updates = [u for u in report.suggested_updates if u.activity_id in known]
        dropped = len(report.suggested_updates) - len(updates)
        if dropped:
            logger.info(f"Dropped {dropped} suggested updates for unknown activities")
        return ScheduleImpactReport(impacted_activities=impacted, suggested_updates=updates)
