"""Unit tests for snapshot mapping, category statuses, issues and feature gates."""

from datetime import date, timedelta

import pytest

from app.core.readiness.errors import ComputationInvariantError
from app.core.readiness.features import (
    ASSIGNMENTS,
    LOCATION_TRACKING,
    NOTIFICATIONS,
    PROJECT_OPERATIONS,
    SUPERVISOR_CHECKOUT,
    TIME_TRACKING,
    derive_feature_availability,
    is_feature_available,
)
from app.core.readiness.issues import derive_blocking_issues, derive_todo_items
from app.core.readiness.snapshot import ConfigurationSnapshot, build_snapshot
from app.core.readiness.statuses import (
    assignments_status,
    build_assignment_progress,
    roll_up,
)
from app.core.readiness.types import (
    AssignmentProgress,
    AssignmentsStatus,
    CategoryStatuses,
    LocationsStatus,
    OverallStatus,
    ReadinessCounts,
    RolesStatus,
    TalentStatus,
    TeamStatus,
)
from tests.fixtures_readiness import NOW, PROJECT_ID, PROJECT_START, project_row


def _snapshot(**kwargs) -> ConfigurationSnapshot:
    defaults = {
        "project_id": PROJECT_ID,
        "taken_at": NOW,
        "as_of": NOW.date(),
        "start_date": PROJECT_START,
        "end_date": PROJECT_START + timedelta(days=4),
        "project_days": 5,
    }
    defaults.update(kwargs)
    return ConfigurationSnapshot(**defaults)


def _results(**kwargs):
    results = {
        "project": project_row(days=5),
        "locations": [],
        "role_templates": [],
        "team_assignments": [],
        "talent": [],
        "talent_groups": [],
        "talent_daily": [],
        "group_daily": [],
        "finalizations": None,
    }
    results.update(kwargs)
    return results


class TestBuildSnapshot:
    def test_duration_is_inclusive(self):
        snapshot = build_snapshot(PROJECT_ID, _results(), taken_at=NOW)

        assert snapshot.project_days == 5
        assert snapshot.as_of == date(2026, 11, 1)

    def test_inverted_dates_give_zero_days(self):
        project = project_row()
        project["start_date"], project["end_date"] = project["end_date"], project["start_date"]

        snapshot = build_snapshot(PROJECT_ID, _results(project=project), taken_at=NOW)

        assert snapshot.project_days == 0

    def test_role_breakdown(self):
        team = [
            {"role": "supervisor"},
            {"role": "coordinator"},
            {"role": "talent_escort"},
            {"role": "escort"},
            {"role": None},
        ]

        snapshot = build_snapshot(PROJECT_ID, _results(team_assignments=team), taken_at=NOW)

        assert snapshot.staff_assigned_count == 5
        assert snapshot.supervisor_count == 1
        assert snapshot.coordinator_count == 1
        assert snapshot.escort_count == 2

    def test_daily_assignments_counted_as_distinct_pairs_in_window(self):
        day = PROJECT_START.isoformat()
        talent_daily = [
            {"talent_id": "t1", "assignment_date": day, "escort_id": "e1"},
            {"talent_id": "t1", "assignment_date": day, "escort_id": "e2"},
            {"talent_id": "t2", "assignment_date": day, "escort_id": None},
            {"talent_id": "t2", "assignment_date": "2026-12-25", "escort_id": "e1"},
        ]
        group_daily = [{"group_id": "g1", "assignment_date": day, "escort_id": "e3"}]

        snapshot = build_snapshot(
            PROJECT_ID,
            _results(
                talent=[{"talent_id": "t1"}, {"talent_id": "t2"}],
                talent_groups=[{"id": "g1"}],
                talent_daily=talent_daily,
                group_daily=group_daily,
            ),
            taken_at=NOW,
        )

        assert snapshot.talent_count == 3
        assert snapshot.completed_daily_assignments == 2
        assert snapshot.escorted_by_day == {PROJECT_START: 2}

    def test_group_on_roster_counted_once(self):
        snapshot = build_snapshot(
            PROJECT_ID,
            _results(
                talent=[{"talent_id": "t1"}, {"talent_id": "g1"}],
                talent_groups=[{"id": "g1"}],
                group_daily=[
                    {"group_id": "g1", "assignment_date": PROJECT_START.isoformat(), "escort_id": "e1"}
                ],
            ),
            taken_at=NOW,
        )

        assert snapshot.talent_count == 2
        assert snapshot.total_possible_daily_assignments == 10
        assert snapshot.completed_daily_assignments == 1

    def test_links_for_entities_off_the_roster_ignored(self):
        day = PROJECT_START.isoformat()
        snapshot = build_snapshot(
            PROJECT_ID,
            _results(
                talent=[{"talent_id": "t1"}],
                talent_daily=[
                    {"talent_id": "t1", "assignment_date": day, "escort_id": "e1"},
                    {"talent_id": "removed-talent", "assignment_date": day, "escort_id": "e1"},
                ],
                group_daily=[{"group_id": "removed-group", "assignment_date": day, "escort_id": "e2"}],
            ),
            taken_at=NOW,
        )

        assert snapshot.completed_daily_assignments == 1
        assert snapshot.escorted_by_day == {PROJECT_START: 1}

    def test_default_rows_are_not_custom(self):
        snapshot = build_snapshot(
            PROJECT_ID,
            _results(
                locations=[{"is_default": True}],
                role_templates=[{"is_default": True}, {"is_default": False}],
                finalizations={"roles_finalized": True},
            ),
            taken_at=NOW,
        )

        assert snapshot.has_only_default_locations
        assert not snapshot.has_only_default_roles
        assert snapshot.roles_finalized
        assert not snapshot.locations_finalized


class TestSnapshotInvariants:
    def test_negative_count_rejected(self):
        with pytest.raises(ComputationInvariantError):
            _snapshot(talent_count=-1)

    def test_completed_above_possible_rejected(self):
        with pytest.raises(ComputationInvariantError):
            _snapshot(talent_count=1, completed_daily_assignments=6)

    def test_role_breakdown_above_staff_rejected(self):
        with pytest.raises(ComputationInvariantError):
            _snapshot(staff_assigned_count=1, supervisor_count=1, escort_count=1)


class TestCategoryStatuses:
    @pytest.mark.parametrize(
        "completed,finalized,expected",
        [
            (0, False, AssignmentsStatus.NONE),
            (0, True, AssignmentsStatus.NONE),
            (7, True, AssignmentsStatus.PARTIAL),
            (10, False, AssignmentsStatus.CURRENT),
            (10, True, AssignmentsStatus.COMPLETE),
        ],
    )
    def test_assignments_status(self, completed, finalized, expected):
        snapshot = _snapshot(
            talent_count=2, completed_daily_assignments=completed, assignments_finalized=finalized
        )

        assert assignments_status(snapshot) == expected

    def test_roll_up_operational_with_defaults(self):
        statuses = CategoryStatuses(team_status=TeamStatus.PARTIAL, talent_status=TalentStatus.PARTIAL)

        assert roll_up(statuses) == OverallStatus.OPERATIONAL

    def test_roll_up_needs_team_and_talent(self):
        statuses = CategoryStatuses(
            locations_status=LocationsStatus.FINALIZED,
            roles_status=RolesStatus.FINALIZED,
            team_status=TeamStatus.FINALIZED,
        )

        assert roll_up(statuses) == OverallStatus.GETTING_STARTED

    def test_roll_up_rejects_foreign_enum(self):
        statuses = CategoryStatuses.model_construct(
            locations_status=TeamStatus.NONE,
            roles_status=RolesStatus.DEFAULT_ONLY,
            team_status=TeamStatus.NONE,
            talent_status=TalentStatus.NONE,
            assignments_status=AssignmentsStatus.NONE,
        )

        with pytest.raises(ComputationInvariantError):
            roll_up(statuses)


class TestAssignmentProgress:
    def test_gaps_cover_lookahead_days_in_window(self):
        snapshot = _snapshot(
            talent_count=3,
            completed_daily_assignments=2,
            escorted_by_day={PROJECT_START: 2},
        )

        progress = build_assignment_progress(snapshot, lookahead=3)

        assert [(g.days_from_now, g.missing_assignments) for g in progress.upcoming_gaps] == [
            (1, 1),
            (2, 3),
            (3, 3),
        ]
        assert progress.urgent_issues == 1

    def test_rate_never_rounds_up_to_full(self):
        snapshot = _snapshot(
            talent_count=200, project_days=1, end_date=PROJECT_START, completed_daily_assignments=199
        )

        progress = build_assignment_progress(snapshot)

        assert progress.assignment_rate == 99


class TestIssuesAndTodos:
    def test_partial_assignments_issue_names_open_slots(self):
        statuses = CategoryStatuses(
            team_status=TeamStatus.PARTIAL,
            talent_status=TalentStatus.PARTIAL,
            assignments_status=AssignmentsStatus.PARTIAL,
        )
        progress = AssignmentProgress(total_possible=15, completed=10)

        issues = derive_blocking_issues(statuses, progress)

        assert issues[0] == "5 of 15 daily escort assignments still open"

    def test_composition_gaps_are_todos_not_blockers(self):
        statuses = CategoryStatuses(team_status=TeamStatus.PARTIAL, talent_status=TalentStatus.PARTIAL)
        counts = ReadinessCounts(staff_assigned=1, coordinator_count=1, talent_count=2)

        todos = derive_todo_items(statuses, counts, AssignmentProgress())
        issues = derive_blocking_issues(statuses, AssignmentProgress())

        ids = [item.id for item in todos]
        assert "assign-escorts" in ids
        assert "assign-supervisor" in ids
        assert not any("escort" in issue.lower() and "talent" in issue.lower() for issue in issues)

    def test_todos_ordered_by_priority(self):
        todos = derive_todo_items(CategoryStatuses(), ReadinessCounts(), AssignmentProgress())

        priorities = [item.priority for item in todos]
        rank = {"critical": 0, "important": 1, "optional": 2}
        assert priorities == sorted(priorities, key=rank.__getitem__)


class TestFeatures:
    def test_nothing_unlocked_for_empty_project(self):
        features = derive_feature_availability(
            CategoryStatuses(), OverallStatus.GETTING_STARTED, ReadinessCounts()
        )

        assert not any(feature.available for feature in features.values())
        assert features[TIME_TRACKING].action_route == "/roles-team"

    def test_operational_project_features(self):
        statuses = CategoryStatuses(team_status=TeamStatus.PARTIAL, talent_status=TalentStatus.PARTIAL)
        counts = ReadinessCounts(staff_assigned=2, supervisor_count=1, escort_count=1, talent_count=3)

        features = derive_feature_availability(statuses, OverallStatus.OPERATIONAL, counts)

        assert features[TIME_TRACKING].available
        assert features[ASSIGNMENTS].available
        assert features[PROJECT_OPERATIONS].available
        assert features[SUPERVISOR_CHECKOUT].available
        assert features[NOTIFICATIONS].available
        assert not features[LOCATION_TRACKING].available
        assert features[LOCATION_TRACKING].action_route == "/info"

    def test_missing_record_unlocks_nothing(self):
        assert is_feature_available(None, TIME_TRACKING) is False
