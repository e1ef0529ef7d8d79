"""Tests for activity normalization."""

import pytest
from datetime import date

from contracts import ActivityStatus
from recovery import coerce_duration, normalize_activities, normalize_payload, positional_id


START = date(2025, 3, 1)


def normalize(records):
    activities, _ = normalize_activities(records, START)
    return activities


class TestDurations:
    """Test duration coercion."""

    @pytest.mark.parametrize("raw", ["5", 5, None, "five", -3, 0, "0", True, "10 days"])
    def test_defaults_to_five(self, raw):
        assert coerce_duration(raw)[0] == 5

    def test_numeric_values(self):
        assert coerce_duration("12") == (12, False)
        assert coerce_duration(7.9) == (7, False)
        assert coerce_duration(0) == (5, True)

    def test_duration_synonyms(self):
        activities = normalize([
            {"name": "a", "durationDays": 2},
            {"name": "b", "originalDuration": "4"},
            {"name": "c", "duration": 6},
        ])
        assert [a.duration_days for a in activities] == [2, 4, 6]

    @pytest.mark.parametrize("raw", [float("inf"), float("-inf"), float("nan"), "Infinity", 1e400])
    def test_non_finite_defaults(self, raw):
        assert coerce_duration(raw) == (5, True)

    def test_huge_duration_keeps_start_as_finish(self):
        activity = normalize([{"name": "a", "duration": 5000000}])[0]
        assert activity.duration_days == 5000000
        assert activity.finish_date == START

    def test_finish_past_calendar_end(self):
        activity = normalize([{"name": "a", "duration": 5, "startDate": "9999-12-30"}])[0]
        assert activity.start_date == date(9999, 12, 30)
        assert activity.finish_date == date(9999, 12, 30)


class TestFieldMapping:
    """Test synonym handling and derived fields."""

    def test_name_and_date_synonyms(self):
        activity = normalize([{"activityName": "Dig", "originalDuration": "4", "earlyStart": "2025-03-10"}])[0]
        assert activity.name == "Dig"
        assert activity.start_date == date(2025, 3, 10)
        assert activity.finish_date == date(2025, 3, 14)

    def test_missing_name(self):
        assert normalize([{"duration": 1}])[0].name == "Unnamed Activity"

    def test_explicit_finish_kept_when_not_before_start(self):
        activity = normalize([{"name": "a", "duration": 2, "startDate": "2025-03-01", "finishDate": "2025-03-10"}])[0]
        assert activity.finish_date == date(2025, 3, 10)

    def test_finish_before_start_is_derived(self):
        activity = normalize([{"name": "a", "duration": 2, "startDate": "2025-03-05", "finishDate": "2025-03-01"}])[0]
        assert activity.finish_date == date(2025, 3, 7)

    def test_unparseable_start_uses_request_start(self):
        activity = normalize([{"name": "a", "duration": 3, "earlyStart": 0, "startDate": "soon"}])[0]
        assert activity.start_date == START
        assert activity.finish_date == date(2025, 3, 4)

    @pytest.mark.parametrize("raw, expected", [
        ("In Progress", ActivityStatus.IN_PROGRESS),
        ("not_started", ActivityStatus.NOT_STARTED),
        ("Completed", ActivityStatus.COMPLETED),
        ("Done", ActivityStatus.COMPLETED),
        ("weird", ActivityStatus.NOT_STARTED),
        (None, ActivityStatus.NOT_STARTED),
    ])
    def test_status_synonyms(self, raw, expected):
        assert normalize([{"name": "a", "status": raw}])[0].status == expected

    def test_percent_complete_clamped(self):
        assert normalize([{"name": "a", "percentComplete": 150}])[0].percent_complete == 100
        assert normalize([{"name": "a", "percentComplete": "n/a"}])[0].percent_complete == 0
        assert normalize([{"name": "a", "percentComplete": float("nan")}])[0].percent_complete == 0

    def test_float_synonyms_drive_criticality(self):
        activities = normalize([
            {"activityId": "A001", "totalFloat": 0, "isCritical": False},
            {"activityId": "A002", "totalFloat": 4, "isCritical": True},
            {"activityId": "A003", "totalFloatDays": "2", "freeFloat": 1},
        ])
        assert [a.is_critical for a in activities] == [True, False, False]
        assert activities[2].free_float_days == 1

    def test_wbs_default(self):
        activities = normalize([{"name": "a"}, {"name": "b", "wbs": "2.4.1"}, {"name": "c"}])
        assert [a.wbs for a in activities] == ["1.1", "2.4.1", "1.3"]

    def test_resources(self):
        assert normalize([{"name": "a", "resources": "Crane"}])[0].resources == ["Crane"]
        assert normalize([{"name": "a", "resources": 3}])[0].resources == []


class TestIds:
    """Test id assignment."""

    def test_positional_ids_avoid_explicit(self):
        activities = normalize([{"name": "x"}, {"activityId": "A000", "name": "y"}, {"name": "z"}])
        assert [a.activity_id for a in activities] == ["A001", "A000", "A002"]

    def test_duplicates_reassigned(self):
        activities, report = normalize_activities([{"activityId": "A001"}, {"activityId": "A001"}], START)
        assert [a.activity_id for a in activities] == ["A001", "A002"]
        assert report.reassigned_ids == 1

    def test_positional_id_helper(self):
        assert positional_id(0, set()) == "A000"
        assert positional_id(3, {"A003", "A004"}) == "A005"


class TestReferences:
    """Test predecessor integrity."""

    def test_dangling_and_self_references_dropped(self):
        activities, report = normalize_activities([
            {"activityId": "A001"},
            {"activityId": "A002", "predecessors": ["A001", "A999", "A002"]},
        ], START)
        assert activities[1].predecessors == ["A001"]
        assert report.dropped_references == 2

    def test_predecessor_dicts_and_non_lists(self):
        activities = normalize([
            {"activityId": "A001", "predecessors": "A002"},
            {"activityId": "A002", "predecessors": [{"activityId": "A001", "type": "FS"}]},
        ])
        assert activities[0].predecessors == []
        assert activities[1].predecessors == ["A001"]

    def test_successors_are_coerced_only(self):
        activity = normalize([{"activityId": "A001", "successors": [{"id": "A050"}, 7]}])[0]
        assert activity.successors == ["A050", "7"]


class TestNormalizePayload:
    """Test building a ScheduleResult from a recovered object."""

    def test_critical_path_equals_zero_float_ids(self):
        result, _ = normalize_payload({
            "activities": [
                {"activityId": "A001", "totalFloat": 0},
                {"activityId": "A002", "totalFloat": 3},
                {"activityId": "A003", "totalFloat": 0},
            ],
            "criticalPath": ["A999"],
        }, START)
        zero_float = {a.activity_id for a in result.activities if a.total_float_days == 0}
        assert set(result.critical_path) == zero_float == {"A001", "A003"}

    def test_schedule_key_and_defaults(self):
        result, _ = normalize_payload({"schedule": [{"name": "a"}], "recommendations": "Add float"}, START)
        assert len(result.activities) == 1
        assert result.summary == "Schedule generated with 1 activities"
        assert result.recommendations == ["Add float"]

    def test_non_list_activities(self):
        result, _ = normalize_payload({"activities": "none"}, START)
        assert result.activities == []

    def test_renormalization_is_idempotent(self):
        first, _ = normalize_payload({
            "activities": [
                {"activityId": "A001", "activityName": "Mobilize", "duration": "3", "status": "In Progress"},
                {"name": "Excavate", "originalDuration": 7, "predecessors": ["A001", "A999"], "totalFloat": 2},
                {"activityId": "A001", "name": "Duplicate", "percentComplete": 250},
            ],
        }, START)

        again, report = normalize_activities(first.activities, START)
        assert again == first.activities
        assert report.dropped_references == 0

        from_payload, _ = normalize_activities(first.to_payload()["activities"], START)
        assert from_payload == first.activities
