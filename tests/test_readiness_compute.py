"""Tests for compute_readiness against in-memory configuration sources."""

import threading
from datetime import timedelta

import pytest

from app.core.readiness import compute_readiness
from app.core.readiness.errors import (
    ComputationInvariantError,
    NotFoundError,
    ReadinessTimeoutError,
    TransientReadError,
)
from app.core.readiness.features import ALL_FEATURES
from app.core.readiness.issues import NO_ESCORT_ASSIGNMENTS, NO_STAFF, NO_TALENT
from app.core.readiness.statuses import is_maximal
from app.core.readiness.types import (
    AssignmentsStatus,
    LocationsStatus,
    OverallStatus,
    RolesStatus,
    TalentStatus,
    TeamStatus,
    status_rank,
)
from tests.fixtures_readiness import (
    NOW,
    OTHER_PROJECT_ID,
    PROJECT_ID,
    PROJECT_START,
    FakeSources,
    production_ready_sources,
    project_row,
    scenario_sources,
)


def _compute(sources, clock, **kwargs):
    return compute_readiness(PROJECT_ID, sources, timeout=5.0, clock=clock, **kwargs)


class TestEmptyProject:
    def test_brand_new_project_is_getting_started(self, clock):
        record = _compute(FakeSources(project=project_row()), clock)

        assert record.overall_status == OverallStatus.GETTING_STARTED
        assert record.locations_status == LocationsStatus.DEFAULT_ONLY
        assert record.roles_status == RolesStatus.DEFAULT_ONLY
        assert record.team_status == TeamStatus.NONE
        assert record.talent_status == TalentStatus.NONE
        assert record.assignments_status == AssignmentsStatus.NONE
        assert record.blocking_issues
        assert record.available_features == []

    def test_staffing_issue_comes_first(self, clock):
        record = _compute(FakeSources(project=project_row()), clock)

        assert record.blocking_issues[0] == NO_STAFF
        assert record.blocking_issues.index(NO_TALENT) < record.blocking_issues.index(
            "Using default locations only"
        )

    def test_zero_talent_has_no_assignments_and_no_ratio_error(self, clock):
        sources = FakeSources(project=project_row(days=5))
        sources.add_staff("supervisor")

        record = _compute(sources, clock)

        assert record.assignment_progress.total_possible == 0
        assert record.assignment_progress.assignment_rate == 0
        assert record.assignments_status == AssignmentsStatus.NONE

    def test_project_without_dates_has_no_possible_assignments(self, clock):
        project = project_row()
        project["start_date"] = None
        sources = FakeSources(project=project)
        sources.add_talent(2)

        record = _compute(sources, clock)

        assert record.assignment_progress.project_days == 0
        assert record.assignments_status == AssignmentsStatus.NONE


class TestScenario:
    def test_partial_setup_is_operational(self, sources, clock):
        record = _compute(sources, clock)

        assert record.locations_status == LocationsStatus.DEFAULT_ONLY
        assert record.roles_status == RolesStatus.DEFAULT_ONLY
        assert record.team_status == TeamStatus.PARTIAL
        assert record.talent_status == TalentStatus.PARTIAL
        assert record.assignments_status == AssignmentsStatus.NONE
        assert record.overall_status == OverallStatus.OPERATIONAL
        assert record.assignment_progress.total_possible == 15
        assert record.assignment_progress.completed == 0
        assert NO_ESCORT_ASSIGNMENTS in record.blocking_issues

    def test_partial_setup_counts(self, sources, clock):
        record = _compute(sources, clock)

        assert record.counts.staff_assigned == 2
        assert record.counts.supervisor_count == 1
        assert record.counts.escort_count == 1
        assert record.counts.talent_count == 3
        assert record.project_status == "prep"

    def test_everything_finalized_is_production_ready(self, clock):
        record = _compute(production_ready_sources(), clock)

        assert record.overall_status == OverallStatus.PRODUCTION_READY
        assert record.blocking_issues == []
        assert record.assignments_status == AssignmentsStatus.COMPLETE
        assert record.assignment_progress.assignment_rate == 100
        assert record.available_features == sorted(ALL_FEATURES)

    def test_filled_but_not_closed_out_is_current(self, clock):
        sources = production_ready_sources()
        sources.finalizations["assignments_finalized"] = False

        record = _compute(sources, clock)

        assert record.assignments_status == AssignmentsStatus.CURRENT
        assert record.overall_status == OverallStatus.OPERATIONAL
        assert record.blocking_issues == ["Daily escort assignments not closed out"]

    def test_finalize_flag_without_full_coverage_stays_partial(self, clock):
        sources = production_ready_sources()
        sources.talent_daily = sources.talent_daily[:-1]

        record = _compute(sources, clock)

        assert record.assignments_status == AssignmentsStatus.PARTIAL
        assert record.assignment_progress.completed == 14
        assert record.assignment_progress.assignment_rate == 93
        assert "1 of 15 daily escort assignments still open" in record.blocking_issues

    def test_group_escorted_every_day_reaches_production_ready(self, clock):
        sources = production_ready_sources()
        sources.talent.append({"talent_id": "group-1"})
        sources.groups = [{"id": "group-1"}]
        sources.group_daily = [
            {
                "group_id": "group-1",
                "assignment_date": (PROJECT_START + timedelta(days=offset)).isoformat(),
                "escort_id": "escort-2",
            }
            for offset in range(5)
        ]

        record = _compute(sources, clock)

        assert record.counts.talent_count == 4
        assert record.assignment_progress.total_possible == 20
        assert record.overall_status == OverallStatus.PRODUCTION_READY

    def test_leftover_link_for_removed_talent_does_not_fail(self, clock):
        sources = production_ready_sources()
        sources.talent_daily.append({
            "talent_id": "removed-talent",
            "assignment_date": PROJECT_START.isoformat(),
            "escort_id": "escort-1",
        })
        sources.talent_daily = [row for row in sources.talent_daily if row["talent_id"] != "talent-0"]

        record = _compute(sources, clock)

        assert record.assignment_progress.completed == 10
        assert record.assignments_status == AssignmentsStatus.PARTIAL

    def test_groups_count_as_talent_entities(self, clock):
        sources = scenario_sources()
        sources.groups = [{"id": "group-1"}]

        record = _compute(sources, clock)

        assert record.counts.talent_count == 4
        assert record.assignment_progress.total_possible == 20


class TestAggregatorProperties:
    def test_idempotent_over_unchanged_sources(self, sources, clock):
        first = _compute(sources, clock)
        second = _compute(sources, clock)

        assert first.model_dump(exclude={"snapshot_taken_at", "last_updated"}) == second.model_dump(
            exclude={"snapshot_taken_at", "last_updated"}
        )

    def test_adding_rows_never_downgrades(self, clock):
        sources = FakeSources(project=project_row())
        order = {
            OverallStatus.GETTING_STARTED: 0,
            OverallStatus.OPERATIONAL: 1,
            OverallStatus.PRODUCTION_READY: 2,
        }
        previous = _compute(sources, clock)

        steps = [
            lambda: sources.add_talent(2),
            lambda: sources.add_staff("talent_escort"),
            lambda: sources.locations.append({"id": "loc-stage", "is_default": False}),
            lambda: sources.role_templates.append({"id": "role-custom", "is_default": False}),
            lambda: sources.escort_everyone(),
        ]
        for step in steps:
            step()
            current = _compute(sources, clock)
            assert order[current.overall_status] >= order[previous.overall_status]
            for name in ("locations_status", "roles_status", "team_status", "talent_status"):
                before, after = getattr(previous, name), getattr(current, name)
                assert status_rank(after) >= status_rank(before)
            previous = current

    def test_blocking_issues_empty_only_when_all_maximal(self, clock):
        for sources in (FakeSources(project=project_row()), scenario_sources(), production_ready_sources()):
            record = _compute(sources, clock)
            all_maximal = all(is_maximal(status) for status in record.statuses.model_dump().values())
            assert (record.blocking_issues == []) == all_maximal
            assert (record.overall_status == OverallStatus.PRODUCTION_READY) == all_maximal

    def test_timestamps_come_from_clock(self, sources, clock):
        record = _compute(sources, clock)

        assert record.snapshot_taken_at == NOW
        assert record.last_updated > record.snapshot_taken_at
        assert record.last_updated - record.snapshot_taken_at < timedelta(minutes=1)


class TestReadFailures:
    def test_unknown_project_raises_not_found(self, sources, clock):
        with pytest.raises(NotFoundError):
            compute_readiness(OTHER_PROJECT_ID, sources, timeout=5.0, clock=clock)

    def test_failed_read_raises_instead_of_zero_counts(self, sources, clock):
        sources.failures["talent"] = ConnectionError("connection reset")

        with pytest.raises(TransientReadError) as exc_info:
            _compute(sources, clock)

        assert exc_info.value.source == "talent"

    def test_slow_read_times_out(self, sources, clock):
        release = threading.Event()
        original = sources.list_talent_groups

        def slow(project_id):
            release.wait(5)
            return original(project_id)

        sources.list_talent_groups = slow
        try:
            with pytest.raises(ReadinessTimeoutError) as exc_info:
                compute_readiness(PROJECT_ID, sources, timeout=0.2, clock=clock)
        finally:
            release.set()

        assert "talent_groups" in exc_info.value.pending
        assert isinstance(exc_info.value, TransientReadError)

    def test_malformed_date_is_invariant_error(self, clock):
        project = project_row()
        project["end_date"] = "not-a-date"

        with pytest.raises(ComputationInvariantError):
            _compute(FakeSources(project=project), clock)
