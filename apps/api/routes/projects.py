"""Project scoring and cost comparison routes."""
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from domain.costs.services import aggregate
from domain.projects.services import (
    ProjectNotFoundError,
    ProjectRepository,
    build_project_summary,
)
from domain.scoring.services import score_project

router = APIRouter(prefix="/api/projects", tags=["projects"])


class ScoreResponse(BaseModel):
    overall: float
    individual: Dict[str, float]
    projectClass: str


class CostTotalsResponse(BaseModel):
    modularTotal: float
    siteBuiltTotal: float
    savings: float
    costDifference: float
    costSavingsPercent: float
    modularCostPerSf: Optional[float]
    siteBuiltCostPerSf: Optional[float]
    modularCostPerUnit: Optional[float]
    siteBuiltCostPerUnit: Optional[float]
    perSfAvailable: bool
    perUnitAvailable: bool
    totalSqFt: int
    totalUnits: int
    source: str


def get_repository() -> ProjectRepository:
    return ProjectRepository()


async def _load(repository: ProjectRepository, project_id: int, *, with_breakdowns: bool):
    try:
        if with_breakdowns:
            return await repository.get_project_with_breakdowns(project_id)
        return await repository.get_project(project_id), []
    except ProjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Project not found") from exc
    except RuntimeError as exc:
        print(f"   ❌ Database error: {exc}")
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@router.get("/{project_id}/scores", response_model=ScoreResponse)
async def get_project_scores(
    project_id: int, repository: ProjectRepository = Depends(get_repository)
) -> ScoreResponse:
    project, _ = await _load(repository, project_id, with_breakdowns=False)
    vector = score_project(project)
    return ScoreResponse(**vector.to_dict())


@router.get("/{project_id}/cost-totals", response_model=CostTotalsResponse)
async def get_project_cost_totals(
    project_id: int, repository: ProjectRepository = Depends(get_repository)
) -> CostTotalsResponse:
    project, breakdowns = await _load(repository, project_id, with_breakdowns=True)
    return CostTotalsResponse(**aggregate(project, breakdowns).to_dict())


@router.get("/{project_id}/summary")
async def get_project_summary(
    project_id: int, repository: ProjectRepository = Depends(get_repository)
) -> dict:
    project, breakdowns = await _load(repository, project_id, with_breakdowns=True)
    return build_project_summary(project, breakdowns)
