"""Cost simulator API routes."""
from fastapi import APIRouter, Depends, HTTPException

from core.clients.estimator import CostEstimatorClient
from domain.costs.simulator import SimulatorParams, summarize_estimate

router = APIRouter(prefix="/api/simulator", tags=["simulator"])


def get_estimator() -> CostEstimatorClient:
    return CostEstimatorClient()


@router.post("/calculate")
async def calculate_costs(
    params: SimulatorParams,
    estimator: CostEstimatorClient = Depends(get_estimator),
) -> dict:
    try:
        estimate = await estimator.estimate(params)
    except RuntimeError as exc:
        print(f"   ❌ Cost estimator error: {exc}")
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return summarize_estimate(params, estimate)
