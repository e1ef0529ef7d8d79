"""Tests for the scheduler agent: prompt assembly and the single guarded call."""

import threading
import time
from datetime import date

from config import settings
from contracts import (
    Activity,
    DocumentAnalysis,
    Err,
    FailureKind,
    KeyInformation,
    Ok,
    ScheduleRequest,
    TaskType,
)
from agents import SchedulerAgent, activities_snapshot, format_document_block, format_document_excerpt


def make_activity(activity_id="A001"):
    return Activity(
        activity_id=activity_id,
        name="Site Preparation",
        duration_days=5,
        start_date=date(2025, 3, 1),
        finish_date=date(2025, 3, 6),
    )


class TestPromptAssembly:
    """Test the task-specific templates."""

    def test_create_prompt(self, stub_provider):
        agent = SchedulerAgent(provider=stub_provider())
        request = ScheduleRequest(
            project_description="Three-storey office building",
            user_request="Fit in 120 working days",
            start_date=date(2025, 3, 1),
            constraints=["No weekend work", "Crane until June"],
        )

        message = agent.build_user_message(request, documents="\n\nDOCS")

        assert "Three-storey office building" in message
        assert "Fit in 120 working days" in message
        assert "Start Date: 2025-03-01" in message
        assert "Constraints: No weekend work, Crane until June" in message
        assert "DOCS" in message

    def test_create_prompt_without_constraints(self, stub_provider):
        agent = SchedulerAgent(provider=stub_provider())
        message = agent.build_user_message(ScheduleRequest(start_date=date(2025, 3, 1)))
        assert "Constraints:" not in message

    def test_update_prompt_carries_current_activities(self, stub_provider):
        agent = SchedulerAgent(provider=stub_provider())
        request = ScheduleRequest(
            type=TaskType.UPDATE,
            user_request="Add two days of rain delay",
            current_activities=[make_activity()],
        )

        message = agent.build_user_message(request)

        assert message.startswith("Update this schedule")
        assert '"activityId": "A001"' in message
        assert "Add two days of rain delay" in message

    def test_lookahead_prompt(self, stub_provider):
        agent = SchedulerAgent(provider=stub_provider())
        request = ScheduleRequest(type=TaskType.LOOKAHEAD, start_date=date(2025, 3, 1))
        message = agent.build_user_message(request, window_days=14)
        assert message.startswith("Generate a 14-day lookahead schedule.")
        assert "Start Date: 2025-03-01" in message

    def test_analyze_prompt(self, stub_provider):
        agent = SchedulerAgent(provider=stub_provider())
        message = agent.build_user_message(ScheduleRequest(type=TaskType.ANALYZE, current_activities=[make_activity()]))
        assert message.startswith("Analyze this schedule")
        assert "Risk assessment" in message

    def test_activities_snapshot_is_camel_case(self):
        snapshot = activities_snapshot([make_activity()])
        assert '"durationDays": 5' in snapshot
        assert '"startDate": "2025-03-01"' in snapshot


class TestDocumentFormatting:
    """Test document excerpt rendering."""

    def test_excerpt_lists_key_facts(self):
        analysis = DocumentAnalysis(
            file_name="scope.txt",
            file_path="docs/scope.txt",
            key_information=KeyInformation(
                contract_duration="120 days",
                start_date="03/01/2025",
                milestones=["M1", "M2", "M3", "M4"],
                constraints=["Noise restriction"],
            ),
        )

        excerpt = format_document_excerpt(analysis, "Relevant body", tokens_used=1500, sections_processed=4)

        assert "--- Processed content from scope.txt (1,500 tokens, 4 sections) ---" in excerpt
        assert "- Contract Duration: 120 days" in excerpt
        assert "- Project Type: Not specified" in excerpt
        assert "- Key Dates: 03/01/2025" in excerpt
        assert "- Milestones: M1, M2, M3..." in excerpt
        assert "- Constraints: Noise restriction\n" in excerpt
        assert "Relevant Content:\nRelevant body" in excerpt

    def test_excerpt_without_facts(self):
        analysis = DocumentAnalysis(file_name="a.txt", file_path="a.txt")
        excerpt = format_document_excerpt(analysis, "", tokens_used=0, sections_processed=0)
        assert "- Key Dates: None found" in excerpt
        assert "- Milestones: None found" in excerpt

    def test_block(self):
        assert format_document_block([], 0, 0) == ""
        block = format_document_block(["one", "two"], 2000, 5)
        assert "Intelligently Processed Documents (2,000 tokens from 5 sections):" in block
        assert block.endswith("one\ntwo")


class TestGeneratorCall:
    """Test the single guarded call."""

    def test_run_uses_system_prompt_and_settings(self, stub_provider):
        provider = stub_provider('{"activities": []}')
        agent = SchedulerAgent(provider=provider, model="gpt-4o", timeout_seconds=30)

        outcome = agent.run(ScheduleRequest(project_description="Warehouse"))

        assert isinstance(outcome, Ok)
        assert outcome.value.content == '{"activities": []}'
        call = provider.calls[0]
        assert call["system_prompt"] == SchedulerAgent.SYSTEM_PROMPT
        assert call["model"] == "gpt-4o"
        assert call["temperature"] == settings.generation_temperature
        assert call["max_tokens"] == settings.generation_max_output_tokens
        assert call["timeout"] == 30

    def test_usage_is_tracked(self, stub_provider):
        agent = SchedulerAgent(provider=stub_provider("{}"))
        agent.run(ScheduleRequest())
        agent.run(ScheduleRequest())
        assert agent.total_usage.input_tokens == 200
        assert agent.total_usage.output_tokens == 100
        assert agent.total_usage.total_cost > 0

    def test_provider_error_is_err(self, stub_provider):
        agent = SchedulerAgent(provider=stub_provider(error=ConnectionError("network down")))

        outcome = agent.run(ScheduleRequest())

        assert isinstance(outcome, Err)
        assert outcome.kind == FailureKind.MODEL_INVOCATION_FAILURE
        assert outcome.failure.detail == "ConnectionError"
        assert "network down" in outcome.failure.message

    def test_timeout_is_err(self, blocking_provider):
        agent = SchedulerAgent(provider=blocking_provider, timeout_seconds=0.05)

        outcome = agent.run(ScheduleRequest())

        assert isinstance(outcome, Err)
        assert outcome.failure.detail == "timeout"
        assert "timed out" in outcome.failure.message
        assert agent.total_usage.input_tokens == 0

    def test_late_call_does_not_hold_the_process_open(self, blocking_provider):
        agent = SchedulerAgent(provider=blocking_provider, timeout_seconds=0.05)

        began = time.perf_counter()
        outcome = agent.run(ScheduleRequest())

        assert time.perf_counter() - began < 2
        assert isinstance(outcome, Err)
        workers = [t for t in threading.enumerate() if t.name == "scheduler-call" and t.is_alive()]
        assert workers
        assert all(t.daemon for t in workers)

    def test_task_description(self, stub_provider):
        assert "CPM" in SchedulerAgent(provider=stub_provider()).get_task_description()
