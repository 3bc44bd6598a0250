"""Cost aggregation: the single source of cost totals for every view of a project.

Totals come from MasterFormat breakdown rows when the project has any; without
rows the caller-supplied simulator estimate is passed through as the
authoritative total. Money is handled as :class:`~decimal.Decimal` throughout
and only converted to floats by ``to_dict`` at the display boundary.
"""
from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional, Sequence

from .models import (
    AVERAGE_UNIT_SQUARE_FEET,
    CURRENCY_QUANTUM,
    DEFAULT_MODULAR_TIMELINE_MONTHS,
    DEFAULT_SITE_BUILT_TIMELINE_MONTHS,
    PERCENT_QUANTUM,
    ZERO,
    BreakdownLine,
    CostBreakdown,
    CostSource,
    CostTotals,
    Project,
    SimulatorEstimate,
    TimelineComparison,
    cost_per,
)

MASTERFORMAT_LEAF_PATTERN = re.compile(r"^\d{2}\s")
BUILDING_DIMENSIONS_PATTERN = re.compile(r"(\d+)'?\s*[xX×]\s*(\d+)'")
_AMOUNT_STRIP_PATTERN = re.compile(r"[$,\s()]")
_AMOUNT_INVALID_PATTERN = re.compile(r"[^\d.\-]")


def parse_amount(value: Any) -> Decimal:
    """Parse a stored currency amount leniently.

    Accepts plain decimals and display formats (``$1,234.50``, ``(1,234)``).
    Missing, non-numeric and negative amounts all count as zero.
    """

    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(repr(value))
    else:
        text = str(value)
        if "(" in text and ")" in text:
            return ZERO
        cleaned = _AMOUNT_INVALID_PATTERN.sub("", _AMOUNT_STRIP_PATTERN.sub("", text))
        if not cleaned:
            return ZERO
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            return ZERO

    if not amount.is_finite() or amount < 0:
        return ZERO
    return amount


def quantize_currency(amount: Decimal) -> Decimal:
    return amount.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def quantize_percent(percent: Decimal) -> Decimal:
    return percent.quantize(PERCENT_QUANTUM, rounding=ROUND_HALF_UP)


def is_leaf_category(category: Optional[str]) -> bool:
    return bool(category and MASTERFORMAT_LEAF_PATTERN.match(category))


def select_counted_rows(breakdowns: Sequence[CostBreakdown]) -> List[CostBreakdown]:
    """Drop roll-up summary rows when the list also carries coded leaf rows."""

    leaves = [row for row in breakdowns if is_leaf_category(row.category)]
    if leaves:
        return leaves
    return list(breakdowns)


def parse_building_dimensions(dimensions: Optional[str]) -> int:
    if not dimensions:
        return 0
    match = BUILDING_DIMENSIONS_PATTERN.search(dimensions)
    if not match:
        return 0
    return int(match.group(1)) * int(match.group(2))


def calculate_gross_square_feet(project: Project) -> int:
    if project.total_building_area and project.total_building_area > 0:
        return int(project.total_building_area)
    footprint = parse_building_dimensions(project.building_dimensions)
    if footprint > 0:
        return footprint
    return project.total_units * AVERAGE_UNIT_SQUARE_FEET


def calculate_savings_percent(savings: Decimal, site_built_total: Decimal) -> Decimal:
    if site_built_total <= 0:
        return quantize_percent(ZERO)
    return quantize_percent(savings / site_built_total * 100)


def _coerce_breakdowns(breakdowns: Optional[Iterable[Any]]) -> List[CostBreakdown]:
    rows: List[CostBreakdown] = []
    for row in breakdowns or ():
        if isinstance(row, CostBreakdown):
            rows.append(row)
        else:
            rows.append(CostBreakdown.from_row(row))
    return rows


def aggregate(
    project: Project,
    breakdowns: Optional[Iterable[Any]] = None,
    estimate: Optional[SimulatorEstimate] = None,
) -> CostTotals:
    """Compute the canonical cost comparison for ``project``.

    Breakdown rows, when present, always win over ``estimate``. The estimate's
    modular and site-built totals are used verbatim only when there are no rows.
    Savings are clamped at zero; ``cost_difference`` keeps the signed value.
    """

    rows = _coerce_breakdowns(breakdowns)
    total_units = project.total_units
    total_square_feet = calculate_gross_square_feet(project)

    if rows:
        counted = select_counted_rows(rows)
        modular_total = sum((parse_amount(row.raap_total_cost) for row in counted), ZERO)
        site_built_total = sum((parse_amount(row.site_built_cost) for row in counted), ZERO)
        source = CostSource.BREAKDOWN
    elif estimate is not None:
        modular_total = parse_amount(estimate.modular_total)
        site_built_total = parse_amount(estimate.site_built_total)
        source = CostSource.ESTIMATE
    else:
        modular_total = ZERO
        site_built_total = ZERO
        source = CostSource.NONE

    modular_total = quantize_currency(modular_total)
    site_built_total = quantize_currency(site_built_total)
    cost_difference = site_built_total - modular_total
    savings = cost_difference if cost_difference > 0 else quantize_currency(ZERO)

    return CostTotals(
        modular_total=modular_total,
        site_built_total=site_built_total,
        savings=savings,
        cost_difference=cost_difference,
        cost_savings_percent=calculate_savings_percent(savings, site_built_total),
        total_square_feet=total_square_feet,
        total_units=total_units,
        source=source,
    )


def breakdown_table(breakdowns: Optional[Iterable[Any]]) -> List[BreakdownLine]:
    """Rows for the breakdown table, parsed exactly as :func:`aggregate` parses them."""

    return [
        BreakdownLine(
            category=row.category,
            site_built_cost=quantize_currency(parse_amount(row.site_built_cost)),
            raap_gc_cost=quantize_currency(parse_amount(row.raap_gc_cost)),
            raap_fab_cost=quantize_currency(parse_amount(row.raap_fab_cost)),
            raap_total_cost=quantize_currency(parse_amount(row.raap_total_cost)),
        )
        for row in select_counted_rows(_coerce_breakdowns(breakdowns))
    ]


def _positive_months(value: Optional[Decimal], default: Decimal) -> Decimal:
    if value is None or value <= 0:
        return default
    return value


def _whole_months(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compare_timelines(project: Project) -> TimelineComparison:
    modular = _positive_months(project.modular_timeline_months, DEFAULT_MODULAR_TIMELINE_MONTHS)
    site_built = _positive_months(
        project.site_built_timeline_months, DEFAULT_SITE_BUILT_TIMELINE_MONTHS
    )
    return TimelineComparison(
        modular_months=modular,
        site_built_months=site_built,
        time_savings_months=site_built - modular,
        modular_design_months=_whole_months(modular * Decimal("0.3")),
        modular_fabrication_months=_whole_months(modular * Decimal("0.4")),
        modular_site_work_months=_whole_months(modular * Decimal("0.3")),
        site_built_design_months=_whole_months(site_built * Decimal("0.25")),
        site_built_construction_months=_whole_months(site_built * Decimal("0.75")),
    )


__all__ = [
    "aggregate",
    "breakdown_table",
    "calculate_gross_square_feet",
    "calculate_savings_percent",
    "compare_timelines",
    "cost_per",
    "is_leaf_category",
    "parse_amount",
    "parse_building_dimensions",
    "quantize_currency",
    "select_counted_rows",
]
