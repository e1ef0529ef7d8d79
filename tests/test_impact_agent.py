"""Tests for meeting-notes impact analysis."""

import json
from datetime import date

import pytest

from agents import ImpactAgent
from contracts import Activity, ActivityStatus


@pytest.fixture
def activities():
    return [
        Activity(
            activity_id=activity_id,
            name=name,
            duration_days=5,
            start_date=date(2025, 3, 1),
            finish_date=date(2025, 3, 6),
            status=status,
        )
        for activity_id, name, status in [
            ("A001", "Site Preparation", ActivityStatus.COMPLETED),
            ("A002", "Foundation Work", ActivityStatus.NOT_STARTED),
        ]
    ]


class TestImpactAgent:
    """Test ImpactAgent.analyze."""

    def test_prompt_lists_activities(self, stub_provider, activities):
        agent = ImpactAgent(provider=stub_provider())
        message = agent.build_user_message("Foundation pour moved", activities)
        assert "A001: Site Preparation (Completed)" in message
        assert "A002: Foundation Work (NotStarted)" in message
        assert "Foundation pour moved" in message

    def test_unknown_ids_are_dropped(self, stub_provider, activities):
        output = {
            "impactedActivities": ["A002", "A999", "A002"],
            "suggestedUpdates": [
                {"activityId": "A002", "field": "status", "newValue": "InProgress", "reason": "Pour started"},
                {"activityId": "A999", "field": "status", "newValue": "Completed", "reason": "?"},
            ],
        }
        agent = ImpactAgent(provider=stub_provider(json.dumps(output)))

        report = agent.analyze("The foundation pour started Monday", activities)

        assert report.impacted_activities == ["A002"]
        assert len(report.suggested_updates) == 1
        update = report.suggested_updates[0]
        assert update.activity_id == "A002"
        assert update.new_value == "InProgress"

    def test_fenced_output(self, stub_provider, activities):
        content = 'Here you go:\n```json\n{"impactedActivities": ["A001"], "suggestedUpdates": []}\n```'
        report = ImpactAgent(provider=stub_provider(content)).analyze("notes", activities)
        assert report.impacted_activities == ["A001"]

    def test_provider_error_gives_empty_report(self, stub_provider, activities):
        agent = ImpactAgent(provider=stub_provider(error=RuntimeError("rate limited")))
        report = agent.analyze("notes", activities)
        assert report.impacted_activities == []
        assert report.suggested_updates == []

    def test_unparseable_output_gives_empty_report(self, stub_provider, activities):
        report = ImpactAgent(provider=stub_provider("No impacts found.")).analyze("notes", activities)
        assert report.impacted_activities == []

    def test_invalid_shape_gives_empty_report(self, stub_provider, activities):
        content = '{"impactedActivities": "A001", "suggestedUpdates": [{"field": "status"}]}'
        report = ImpactAgent(provider=stub_provider(content)).analyze("notes", activities)
        assert report.impacted_activities == []
        assert report.suggested_updates == []
