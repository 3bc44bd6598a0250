"""Domain models for modular vs. site-built cost comparison."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional

DEFAULT_MODULAR_TIMELINE_MONTHS = Decimal("9")
DEFAULT_SITE_BUILT_TIMELINE_MONTHS = Decimal("13")
AVERAGE_UNIT_SQUARE_FEET = 720

CURRENCY_QUANTUM = Decimal("0.01")
PERCENT_QUANTUM = Decimal("0.1")
ZERO = Decimal("0")


class ZeroDenominatorError(ZeroDivisionError):
    """Raised when a per-unit or per-square-foot figure has no denominator.

    Callers should treat this as an incomplete project configuration and show
    totals only.
    """

    def __init__(self, denominator: str) -> None:
        super().__init__(f"Cannot compute cost per {denominator}: {denominator} total is zero")
        self.denominator = denominator


def cost_per(total: Decimal, denominator: int, name: str) -> Decimal:
    """Divide a total by a unit count or area, refusing a zero denominator."""

    if denominator <= 0:
        raise ZeroDenominatorError(name)
    return (total / Decimal(denominator)).quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


class CostSource(Enum):
    BREAKDOWN = "breakdown"
    ESTIMATE = "estimate"
    NONE = "none"


def _coerce_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    if isinstance(value, int):
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _coerce_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        number = Decimal(str(value))
    except ArithmeticError:
        return None
    if not number.is_finite():
        return None
    return number


def _pick(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return None


@dataclass
class Project:
    """Fields of a stored project that the engines read."""

    id: int
    name: str
    studio_units: int = 0
    one_bed_units: int = 0
    two_bed_units: int = 0
    three_bed_units: int = 0
    target_floors: int = 1
    site_built_timeline_months: Optional[Decimal] = None
    modular_timeline_months: Optional[Decimal] = None
    building_dimensions: Optional[str] = None
    total_building_area: Optional[int] = None
    stored_scores: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_units(self) -> int:
        return (
            max(self.studio_units, 0)
            + max(self.one_bed_units, 0)
            + max(self.two_bed_units, 0)
            + max(self.three_bed_units, 0)
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Project":
        """Build a project from a database row (snake_case) or API payload (camelCase)."""

        stored_scores = {
            column: row[column]
            for column in (
                "zoning_score",
                "massing_score",
                "sustainability_score",
                "cost_score",
                "logistics_score",
                "build_time_score",
            )
            if row.get(column) is not None
        }
        for camel, column in (
            ("zoningScore", "zoning_score"),
            ("massingScore", "massing_score"),
            ("sustainabilityScore", "sustainability_score"),
            ("costScore", "cost_score"),
            ("logisticsScore", "logistics_score"),
            ("buildTimeScore", "build_time_score"),
        ):
            if row.get(camel) is not None and column not in stored_scores:
                stored_scores[column] = row[camel]

        total_area = _coerce_int(_pick(row, "total_building_area", "totalBuildingArea"), 0)
        return cls(
            id=_coerce_int(row.get("id"), 0),
            name=str(row.get("name") or ""),
            studio_units=_coerce_int(_pick(row, "studio_units", "studioUnits")),
            one_bed_units=_coerce_int(_pick(row, "one_bed_units", "oneBedUnits")),
            two_bed_units=_coerce_int(_pick(row, "two_bed_units", "twoBedUnits")),
            three_bed_units=_coerce_int(_pick(row, "three_bed_units", "threeBedUnits")),
            target_floors=_coerce_int(_pick(row, "target_floors", "targetFloors"), 1),
            site_built_timeline_months=_coerce_decimal(
                _pick(row, "site_built_timeline_months", "siteBuiltTimelineMonths")
            ),
            modular_timeline_months=_coerce_decimal(
                _pick(row, "modular_timeline_months", "modularTimelineMonths")
            ),
            building_dimensions=_pick(row, "building_dimensions", "buildingDimensions"),
            total_building_area=total_area or None,
            stored_scores=stored_scores,
        )


@dataclass(frozen=True)
class CostBreakdown:
    """One cost-category row; amounts are kept as stored (decimal strings)."""

    category: str
    site_built_cost: Any = None
    raap_gc_cost: Any = None
    raap_fab_cost: Any = None
    raap_total_cost: Any = None
    id: Optional[Any] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CostBreakdown":
        return cls(
            id=row.get("id"),
            category=str(row.get("category") or ""),
            site_built_cost=_pick(row, "site_built_cost", "siteBuiltCost"),
            raap_gc_cost=_pick(row, "raap_gc_cost", "raapGcCost"),
            raap_fab_cost=_pick(row, "raap_fab_cost", "raapFabCost"),
            raap_total_cost=_pick(row, "raap_total_cost", "raapTotalCost"),
        )


@dataclass(frozen=True)
class SimulatorBreakdown:
    site_preparation: Decimal = ZERO
    foundation: Decimal = ZERO
    modular_units: Decimal = ZERO
    site_assembly: Decimal = ZERO
    mep_connections: Decimal = ZERO
    finish_work: Decimal = ZERO
    soft_costs: Decimal = ZERO

    def to_dict(self) -> Dict[str, float]:
        return {
            "sitePreparation": float(self.site_preparation),
            "foundation": float(self.foundation),
            "modularUnits": float(self.modular_units),
            "siteAssembly": float(self.site_assembly),
            "mepConnections": float(self.mep_connections),
            "finishWork": float(self.finish_work),
            "softCosts": float(self.soft_costs),
        }


@dataclass(frozen=True)
class SimulatorEstimate:
    """Cost estimate returned by the remote cost-estimation service."""

    total_cost: Decimal
    cost_per_sf: Decimal
    cost_per_unit: Decimal
    modular_total: Decimal
    site_built_total: Decimal
    savings: Decimal
    savings_percent: Decimal
    breakdown: SimulatorBreakdown = field(default_factory=SimulatorBreakdown)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SimulatorEstimate":
        def amount(key: str) -> Decimal:
            return _coerce_decimal(payload.get(key)) or ZERO

        raw_breakdown = payload.get("breakdown") or {}
        breakdown = SimulatorBreakdown(
            site_preparation=_coerce_decimal(raw_breakdown.get("sitePreparation")) or ZERO,
            foundation=_coerce_decimal(raw_breakdown.get("foundation")) or ZERO,
            modular_units=_coerce_decimal(raw_breakdown.get("modularUnits")) or ZERO,
            site_assembly=_coerce_decimal(raw_breakdown.get("siteAssembly")) or ZERO,
            mep_connections=_coerce_decimal(raw_breakdown.get("mepConnections")) or ZERO,
            finish_work=_coerce_decimal(raw_breakdown.get("finishWork")) or ZERO,
            soft_costs=_coerce_decimal(raw_breakdown.get("softCosts")) or ZERO,
        )
        return cls(
            total_cost=amount("totalCost"),
            cost_per_sf=amount("costPerSF"),
            cost_per_unit=amount("costPerUnit"),
            modular_total=amount("modularTotal"),
            site_built_total=amount("siteBuiltTotal"),
            savings=amount("savings"),
            savings_percent=amount("savingsPercent"),
            breakdown=breakdown,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCost": float(self.total_cost),
            "costPerSF": float(self.cost_per_sf),
            "costPerUnit": float(self.cost_per_unit),
            "modularTotal": float(self.modular_total),
            "siteBuiltTotal": float(self.site_built_total),
            "savings": float(self.savings),
            "savingsPercent": float(self.savings_percent),
            "breakdown": self.breakdown.to_dict(),
        }


@dataclass(frozen=True)
class CostTotals:
    """Canonical cost comparison for one project.

    Per-square-foot and per-unit figures are derived on access and raise
    :class:`ZeroDenominatorError` when the project has no area or no units.
    """

    modular_total: Decimal
    site_built_total: Decimal
    savings: Decimal
    cost_difference: Decimal
    cost_savings_percent: Decimal
    total_square_feet: int
    total_units: int
    source: CostSource

    @property
    def modular_cost_per_sf(self) -> Decimal:
        return cost_per(self.modular_total, self.total_square_feet, "square foot")

    @property
    def site_built_cost_per_sf(self) -> Decimal:
        return cost_per(self.site_built_total, self.total_square_feet, "square foot")

    @property
    def modular_cost_per_unit(self) -> Decimal:
        return cost_per(self.modular_total, self.total_units, "unit")

    @property
    def site_built_cost_per_unit(self) -> Decimal:
        return cost_per(self.site_built_total, self.total_units, "unit")

    @property
    def per_sf_available(self) -> bool:
        return self.total_square_feet > 0

    @property
    def per_unit_available(self) -> bool:
        return self.total_units > 0

    @property
    def shows_savings(self) -> bool:
        return self.savings > 0

    def to_dict(self) -> Dict[str, Any]:
        """Display form; unavailable per-sf / per-unit figures become ``None``."""

        def optional(getter) -> Optional[float]:
            try:
                return float(getter())
            except ZeroDenominatorError:
                return None

        return {
            "modularTotal": float(self.modular_total),
            "siteBuiltTotal": float(self.site_built_total),
            "savings": float(self.savings),
            "costDifference": float(self.cost_difference),
            "costSavingsPercent": float(self.cost_savings_percent),
            "modularCostPerSf": optional(lambda: self.modular_cost_per_sf),
            "siteBuiltCostPerSf": optional(lambda: self.site_built_cost_per_sf),
            "modularCostPerUnit": optional(lambda: self.modular_cost_per_unit),
            "siteBuiltCostPerUnit": optional(lambda: self.site_built_cost_per_unit),
            "perSfAvailable": self.per_sf_available,
            "perUnitAvailable": self.per_unit_available,
            "totalSqFt": self.total_square_feet,
            "totalUnits": self.total_units,
            "source": self.source.value,
        }


@dataclass(frozen=True)
class BreakdownLine:
    category: str
    site_built_cost: Decimal
    raap_gc_cost: Decimal
    raap_fab_cost: Decimal
    raap_total_cost: Decimal

    @property
    def savings(self) -> Decimal:
        return self.site_built_cost - self.raap_total_cost

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "siteBuiltCost": float(self.site_built_cost),
            "raapGcCost": float(self.raap_gc_cost),
            "raapFabCost": float(self.raap_fab_cost),
            "raapTotalCost": float(self.raap_total_cost),
            "savings": float(self.savings),
        }


@dataclass(frozen=True)
class TimelineComparison:
    modular_months: Decimal
    site_built_months: Decimal
    time_savings_months: Decimal
    modular_design_months: int
    modular_fabrication_months: int
    modular_site_work_months: int
    site_built_design_months: int
    site_built_construction_months: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modularTimelineMonths": float(self.modular_months),
            "siteBuiltTimelineMonths": float(self.site_built_months),
            "timeSavingsMonths": float(self.time_savings_months),
            "modularConstruction": {
                "designPhaseMonths": self.modular_design_months,
                "fabricationMonths": self.modular_fabrication_months,
                "siteWorkMonths": self.modular_site_work_months,
            },
            "siteBuiltConstruction": {
                "designPhaseMonths": self.site_built_design_months,
                "constructionMonths": self.site_built_construction_months,
            },
        }


__all__ = [
    "AVERAGE_UNIT_SQUARE_FEET",
    "BreakdownLine",
    "CURRENCY_QUANTUM",
    "CostBreakdown",
    "CostSource",
    "CostTotals",
    "DEFAULT_MODULAR_TIMELINE_MONTHS",
    "DEFAULT_SITE_BUILT_TIMELINE_MONTHS",
    "PERCENT_QUANTUM",
    "Project",
    "SimulatorBreakdown",
    "SimulatorEstimate",
    "TimelineComparison",
    "ZeroDenominatorError",
    "cost_per",
]
