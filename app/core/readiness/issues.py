"""Blocking issues and todo items derived from readiness state.

Blocking issues are plain strings in priority order: staffing, then talent
(including daily escort coverage), then configuration, then finalization.
They are empty exactly when every category is at its maximal status.

Todo items are the richer, UI-facing action list. They also cover team
composition (escorts, supervisor) and near-term escort gaps, which never
block production readiness on their own.
"""

from app.core.readiness.types import (
    AssignmentProgress,
    AssignmentsStatus,
    CategoryStatuses,
    LocationsStatus,
    ReadinessCounts,
    RolesStatus,
    TalentStatus,
    TeamStatus,
    TodoItem,
)

NO_STAFF = "No staff assigned to this project"
NO_TALENT = "No talent on the roster"
NO_ESCORT_ASSIGNMENTS = "No escort assignments yet"
DEFAULT_LOCATIONS = "Using default locations only"
DEFAULT_ROLES = "Using default roles only"


def derive_blocking_issues(
    statuses: CategoryStatuses, progress: AssignmentProgress
) -> list[str]:
    staffing: list[str] = []
    talent: list[str] = []
    configuration: list[str] = []
    finalization: list[str] = []

    if statuses.team_status == TeamStatus.NONE:
        staffing.append(NO_STAFF)

    if statuses.talent_status == TalentStatus.NONE:
        talent.append(NO_TALENT)
    if statuses.assignments_status == AssignmentsStatus.NONE:
        talent.append(NO_ESCORT_ASSIGNMENTS)
    elif statuses.assignments_status == AssignmentsStatus.PARTIAL:
        open_slots = progress.total_possible - progress.completed
        if 0 < open_slots < progress.total_possible:
            talent.append(
                f"{open_slots} of {progress.total_possible} daily escort assignments still open"
            )
        else:
            talent.append("Daily escort assignments incomplete")

    if statuses.locations_status == LocationsStatus.DEFAULT_ONLY:
        configuration.append(DEFAULT_LOCATIONS)
    if statuses.roles_status == RolesStatus.DEFAULT_ONLY:
        configuration.append(DEFAULT_ROLES)

    if statuses.locations_status == LocationsStatus.CONFIGURED:
        finalization.append("Locations not finalized")
    if statuses.roles_status == RolesStatus.CONFIGURED:
        finalization.append("Roles not finalized")
    if statuses.team_status == TeamStatus.PARTIAL:
        finalization.append("Team not finalized")
    if statuses.talent_status == TalentStatus.PARTIAL:
        finalization.append("Talent roster not finalized")
    if statuses.assignments_status == AssignmentsStatus.CURRENT:
        finalization.append("Daily escort assignments not closed out")

    return staffing + talent + configuration + finalization


def derive_todo_items(
    statuses: CategoryStatuses,
    counts: ReadinessCounts,
    progress: AssignmentProgress,
) -> list[TodoItem]:
    items: list[TodoItem] = []

    # Critical - blocks core functionality
    if statuses.team_status == TeamStatus.NONE:
        items.append(TodoItem(
            id="assign-team", area="team", priority="critical",
            title="Assign team members",
            description="No staff assigned to this project",
            action_route="/roles-team",
        ))
    if statuses.talent_status == TalentStatus.NONE:
        items.append(TodoItem(
            id="add-talent", area="talent", priority="critical",
            title="Add talent to roster",
            description="No talent assigned to this project",
            action_route="/talent-roster",
        ))
    if counts.escort_count == 0 and statuses.talent_status != TalentStatus.NONE:
        items.append(TodoItem(
            id="assign-escorts", area="team", priority="critical",
            title="Assign talent escorts",
            description="Talent needs escorts on the team",
            action_route="/roles-team",
        ))
    if progress.urgent_issues > 0:
        noun = "assignment" if progress.urgent_issues == 1 else "assignments"
        items.append(TodoItem(
            id="urgent-assignments", area="assignments", priority="critical",
            title="Complete urgent assignments",
            description=f"{progress.urgent_issues} {noun} needed for tomorrow",
            action_route="/assignments",
        ))

    # Important - should be addressed soon
    if statuses.roles_status == RolesStatus.DEFAULT_ONLY:
        items.append(TodoItem(
            id="configure-roles", area="roles", priority="important",
            title="Configure custom roles",
            description="Using default roles only",
            action_route="/roles-team",
        ))
    if statuses.locations_status == LocationsStatus.DEFAULT_ONLY:
        items.append(TodoItem(
            id="configure-locations", area="locations", priority="important",
            title="Add custom locations",
            description="Using default locations only",
            action_route="/info",
        ))
    later_gaps = [gap for gap in progress.upcoming_gaps if gap.days_from_now > 1]
    if later_gaps:
        gap = later_gaps[0]
        items.append(TodoItem(
            id="upcoming-assignments", area="assignments", priority="important",
            title="Complete upcoming assignments",
            description=f"{gap.missing_assignments} assignments needed in {gap.days_from_now} days",
            action_route="/assignments",
        ))
    if counts.supervisor_count == 0 and counts.staff_assigned > 0:
        items.append(TodoItem(
            id="assign-supervisor", area="team", priority="important",
            title="Assign a supervisor",
            description="No supervisor assigned for team oversight",
            action_route="/roles-team",
        ))

    # Optional - finalize what is already configured
    if statuses.roles_status == RolesStatus.CONFIGURED:
        items.append(TodoItem(
            id="finalize-roles", area="roles", priority="optional",
            title="Finalize role configuration",
            description="Mark roles as complete when ready",
            action_route="/roles-team",
        ))
    if statuses.locations_status == LocationsStatus.CONFIGURED:
        items.append(TodoItem(
            id="finalize-locations", area="locations", priority="optional",
            title="Finalize location setup",
            description="Mark locations as complete when ready",
            action_route="/info",
        ))
    if statuses.team_status == TeamStatus.PARTIAL:
        items.append(TodoItem(
            id="finalize-team", area="team", priority="optional",
            title="Finalize team assignments",
            description="Mark team setup as complete when ready",
            action_route="/roles-team",
        ))
    if statuses.talent_status == TalentStatus.PARTIAL:
        items.append(TodoItem(
            id="finalize-talent", area="talent", priority="optional",
            title="Finalize talent roster",
            description="Mark talent roster as complete when ready",
            action_route="/talent-roster",
        ))
    if statuses.assignments_status == AssignmentsStatus.PARTIAL:
        items.append(TodoItem(
            id="complete-assignments", area="assignments", priority="optional",
            title="Complete remaining assignments",
            description=f"{progress.assignment_rate}% of assignments completed",
            action_route="/assignments",
        ))
    elif statuses.assignments_status == AssignmentsStatus.CURRENT:
        items.append(TodoItem(
            id="finalize-assignments", area="assignments", priority="optional",
            title="Close out assignments",
            description="Every day is covered; mark assignments as complete",
            action_route="/assignments",
        ))

    return items
