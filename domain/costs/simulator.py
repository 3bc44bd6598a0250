"""Cost simulator request model and the static fallback estimator."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict

from pydantic import BaseModel, Field

from .models import Project, SimulatorBreakdown, SimulatorEstimate
from .services import aggregate

SIMULATED_PROJECT_NAME = "Simulated Project"

BASELINE_TOTAL = Decimal("10800000")
BASELINE_FLOORS = Decimal("3")
BASELINE_UNITS = Decimal("24")
PREVAILING_WAGE_MULTIPLIER = Decimal("1.15")
SITE_BUILT_PREMIUM = Decimal("1.012")
ESTIMATED_SAVINGS_SHARE = Decimal("0.012")
ESTIMATED_SAVINGS_PERCENT = Decimal("1.2")
SIMULATOR_UNIT_SQUARE_FEET = Decimal("800")

BREAKDOWN_SHARES = {
    "site_preparation": Decimal("0.045"),
    "foundation": Decimal("0.072"),
    "modular_units": Decimal("0.574"),
    "site_assembly": Decimal("0.085"),
    "mep_connections": Decimal("0.102"),
    "finish_work": Decimal("0.077"),
    "soft_costs": Decimal("0.045"),
}


class SimulatorParams(BaseModel):
    oneBedUnits: int = Field(ge=0, le=20)
    twoBedUnits: int = Field(ge=0, le=20)
    threeBedUnits: int = Field(ge=0, le=15)
    floors: int = Field(ge=2, le=4)
    buildingType: str
    parkingType: str
    location: str
    prevailingWage: bool
    siteConditions: str

    @property
    def total_units(self) -> int:
        return self.oneBedUnits + self.twoBedUnits + self.threeBedUnits


def _round_dollars(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def estimate_static(params: SimulatorParams) -> SimulatorEstimate:
    """Scale the reference 3-floor, 24-unit building to the requested configuration."""

    total_units = Decimal(params.total_units)
    wage_multiplier = PREVAILING_WAGE_MULTIPLIER if params.prevailingWage else Decimal("1")
    adjusted_total = (
        BASELINE_TOTAL
        * (Decimal(params.floors) / BASELINE_FLOORS)
        * (total_units / BASELINE_UNITS)
        * wage_multiplier
    )

    if total_units > 0:
        cost_per_sf = _round_dollars(adjusted_total / (total_units * SIMULATOR_UNIT_SQUARE_FEET))
        cost_per_unit = _round_dollars(adjusted_total / total_units)
    else:
        cost_per_sf = Decimal("0")
        cost_per_unit = Decimal("0")

    breakdown = SimulatorBreakdown(
        **{key: _round_dollars(adjusted_total * share) for key, share in BREAKDOWN_SHARES.items()}
    )
    return SimulatorEstimate(
        total_cost=_round_dollars(adjusted_total),
        cost_per_sf=cost_per_sf,
        cost_per_unit=cost_per_unit,
        modular_total=_round_dollars(adjusted_total),
        site_built_total=_round_dollars(adjusted_total * SITE_BUILT_PREMIUM),
        savings=_round_dollars(adjusted_total * ESTIMATED_SAVINGS_SHARE),
        savings_percent=ESTIMATED_SAVINGS_PERCENT,
        breakdown=breakdown,
    )


def project_from_params(params: SimulatorParams) -> Project:
    return Project(
        id=0,
        name=SIMULATED_PROJECT_NAME,
        one_bed_units=params.oneBedUnits,
        two_bed_units=params.twoBedUnits,
        three_bed_units=params.threeBedUnits,
        target_floors=params.floors,
    )


def summarize_estimate(params: SimulatorParams, estimate: SimulatorEstimate) -> Dict[str, Any]:
    """Simulator response with every derived figure recomputed by :func:`aggregate`.

    Only the estimate's modular and site-built totals and its category
    breakdown are taken as given. Savings, savings percent and the per-unit and
    per-square-foot figures come from the aggregated totals.
    """

    totals = aggregate(project_from_params(params), [], estimate)
    cost_totals = totals.to_dict()
    result = estimate.to_dict()
    result.update(
        modularTotal=cost_totals["modularTotal"],
        siteBuiltTotal=cost_totals["siteBuiltTotal"],
        savings=cost_totals["savings"],
        savingsPercent=cost_totals["costSavingsPercent"],
        costPerUnit=cost_totals["modularCostPerUnit"],
        costPerSF=cost_totals["modularCostPerSf"],
        costTotals=cost_totals,
    )
    return result


__all__ = [
    "BREAKDOWN_SHARES",
    "SimulatorParams",
    "estimate_static",
    "project_from_params",
    "summarize_estimate",
]
