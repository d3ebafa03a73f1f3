"""Supabase-backed reader for every readiness configuration source."""

from typing import Any
from uuid import UUID

from supabase import Client

from app.db import daily_assignments, project_locations, projects, readiness_finalizations
from app.db import role_templates, talent_roster, team_assignments


class SupabaseConfigurationSources:
    """Reads configuration sources through one injected Supabase client."""

    def __init__(self, supabase: Client):
        self._supabase = supabase

    def get_project(self, project_id: UUID) -> dict[str, Any] | None:
        return projects.get_project(self._supabase, project_id)

    def list_locations(self, project_id: UUID) -> list[dict[str, Any]]:
        return project_locations.list_project_locations(self._supabase, project_id)

    def list_role_templates(self, project_id: UUID) -> list[dict[str, Any]]:
        return role_templates.list_role_templates(self._supabase, project_id)

    def list_team_assignments(self, project_id: UUID) -> list[dict[str, Any]]:
        return team_assignments.list_team_assignments(self._supabase, project_id)

    def list_talent(self, project_id: UUID) -> list[dict[str, Any]]:
        return talent_roster.list_talent_assignments(self._supabase, project_id)

    def list_talent_groups(self, project_id: UUID) -> list[dict[str, Any]]:
        return talent_roster.list_talent_groups(self._supabase, project_id)

    def list_talent_daily_assignments(self, project_id: UUID) -> list[dict[str, Any]]:
        return daily_assignments.list_talent_daily_assignments(self._supabase, project_id)

    def list_group_daily_assignments(self, project_id: UUID) -> list[dict[str, Any]]:
        return daily_assignments.list_group_daily_assignments(self._supabase, project_id)

    def get_finalizations(self, project_id: UUID) -> dict[str, Any] | None:
        return readiness_finalizations.get_finalizations(self._supabase, project_id)
