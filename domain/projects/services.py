"""Project lookups and the summary view-model built from both engines."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from core.clients.supabase import SupabaseClient
from core.config import get_settings
from domain.costs.models import CostBreakdown, Project, SimulatorEstimate
from domain.costs.services import aggregate, breakdown_table, compare_timelines
from domain.scoring.models import SCORE_DIMENSIONS
from domain.scoring.services import (
    get_dimension_justification,
    get_rating_description,
    score_project,
)


class ProjectNotFoundError(LookupError):
    def __init__(self, project_id: int) -> None:
        super().__init__(f"Project {project_id} not found")
        self.project_id = project_id


class ProjectRepository:
    """Read-only access to stored projects and their cost breakdown rows."""

    def __init__(self, client: Optional[SupabaseClient] = None) -> None:
        settings = get_settings()
        self._client = client or SupabaseClient()
        self._projects_table = settings.projects_table
        self._breakdowns_table = settings.cost_breakdowns_table

    async def get_project(self, project_id: int) -> Project:
        rows = await self._client.fetch_rows(
            f"{self._projects_table}?id=eq.{project_id}&limit=1"
        )
        if not rows:
            raise ProjectNotFoundError(project_id)
        return Project.from_row(rows[0])

    async def get_cost_breakdowns(self, project_id: int) -> List[CostBreakdown]:
        rows = await self._client.fetch_rows(
            f"{self._breakdowns_table}?project_id=eq.{project_id}&order=category.asc"
        )
        print(f"   ✅ Loaded {len(rows)} cost breakdown rows for project {project_id}")
        return [CostBreakdown.from_row(row) for row in rows]

    async def get_project_with_breakdowns(
        self, project_id: int
    ) -> Tuple[Project, List[CostBreakdown]]:
        project = await self.get_project(project_id)
        breakdowns = await self.get_cost_breakdowns(project_id)
        return project, breakdowns


def build_project_summary(
    project: Project,
    breakdowns: Iterable[Any] = (),
    estimate: Optional[SimulatorEstimate] = None,
) -> Dict[str, Any]:
    """Scores, cost comparison, breakdown table and timeline for one project.

    Every cost figure in the summary comes from a single ``aggregate`` call so
    the comparison cards, breakdown table and savings banner always agree.
    """

    rows = list(breakdowns)
    scores = score_project(project)
    totals = aggregate(project, rows, estimate)
    timeline = compare_timelines(project)

    dimension_scores = scores.dimensions()
    justifications = {
        dimension: get_dimension_justification(
            dimension,
            dimension_scores[dimension],
            total_units=project.total_units,
            savings_percent=totals.cost_savings_percent,
            time_savings_months=timeline.time_savings_months,
        )
        for dimension in SCORE_DIMENSIONS
    }
    ratings = {
        dimension: get_rating_description(dimension_scores[dimension])
        for dimension in SCORE_DIMENSIONS
    }

    return {
        "projectId": project.id,
        "name": project.name,
        "scores": scores.to_dict(),
        "ratings": ratings,
        "overallRating": get_rating_description(scores.overall),
        "justifications": justifications,
        "costTotals": totals.to_dict(),
        "showSavings": totals.shows_savings,
        "breakdown": [line.to_dict() for line in breakdown_table(rows)],
        "timeline": timeline.to_dict(),
    }


__all__ = ["ProjectNotFoundError", "ProjectRepository", "build_project_summary"]
