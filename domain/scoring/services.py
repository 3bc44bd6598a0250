"""Score engine for modular feasibility assessments.

Two policies produce a :class:`ScoreVector`:

- Sample projects (curated showcase projects, matched by exact name) use their
  stored per-dimension scores, falling back to ``4.0`` for any dimension that is
  missing, malformed or outside ``[0.0, 5.0]``.
- Generated projects draw all six dimensions from a mulberry32 sequence seeded
  by the project id, mapped into ``[4.4, 5.0)``.

The overall score is the fixed-weight sum of the six dimensions rounded to one
decimal place under both policies.
"""
from __future__ import annotations

import math
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

from domain.costs.models import Project

from .models import (
    DIMENSION_WEIGHTS,
    GENERATED_SCORE_FLOOR,
    GENERATED_SCORE_SPAN,
    MAX_STORED_SCORE,
    MIN_STORED_SCORE,
    SAMPLE_DEFAULT_SCORE,
    SAMPLE_PROJECT_NAMES,
    SCORE_DIMENSIONS,
    SCORE_QUANTUM,
    STORED_SCORE_FIELDS,
    ProjectClass,
    ScoreVector,
)
from .prng import Mulberry32


def is_sample_project(project_name: Optional[str]) -> bool:
    return project_name in SAMPLE_PROJECT_NAMES


def classify_project(project_name: Optional[str]) -> ProjectClass:
    if is_sample_project(project_name):
        return ProjectClass.SAMPLE
    return ProjectClass.GENERATED


def draw_to_score(draw: float) -> Decimal:
    """Map a draw in [0, 1) onto a one-decimal score in [4.4, 5.0).

    Truncation keeps the upper bound open; rounding half-up would let draws
    above 0.9833 report 5.0.
    """

    raw = Decimal(repr(draw)) * GENERATED_SCORE_SPAN + GENERATED_SCORE_FLOOR
    # ROUND_DOWN, not nearest: see "Generated score rounding" in DESIGN.md.
    return raw.quantize(SCORE_QUANTUM, rounding=ROUND_DOWN)


def generate_deterministic_score(project_id: int) -> Decimal:
    """Headline score for a newly created project: the first draw of its sequence."""

    return draw_to_score(Mulberry32.for_project(project_id).next_float())


def generate_dimension_scores(project_id: int) -> Dict[str, Decimal]:
    rng = Mulberry32.for_project(project_id)
    return {dimension: draw_to_score(rng.next_float()) for dimension in SCORE_DIMENSIONS}


def parse_stored_score(value: Any) -> Decimal:
    """Parse one stored score, substituting the sample default when unusable."""

    if value is None or isinstance(value, bool):
        return SAMPLE_DEFAULT_SCORE
    if isinstance(value, float) and not math.isfinite(value):
        return SAMPLE_DEFAULT_SCORE
    try:
        score = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return SAMPLE_DEFAULT_SCORE
    if not score.is_finite() or score < MIN_STORED_SCORE or score > MAX_STORED_SCORE:
        return SAMPLE_DEFAULT_SCORE
    return score


def resolve_stored_scores(stored_scores: Optional[Mapping[str, Any]]) -> Dict[str, Decimal]:
    """Read curated scores keyed by dimension name or by stored column name."""

    stored_scores = stored_scores or {}
    resolved: Dict[str, Decimal] = {}
    for dimension in SCORE_DIMENSIONS:
        value = stored_scores.get(dimension)
        if value is None:
            value = stored_scores.get(STORED_SCORE_FIELDS[dimension])
        resolved[dimension] = parse_stored_score(value)
    return resolved


def calculate_overall_score(dimension_scores: Mapping[str, Decimal]) -> Decimal:
    total = sum(
        (Decimal(dimension_scores[dimension]) * weight for dimension, weight in DIMENSION_WEIGHTS.items()),
        Decimal("0"),
    )
    return total.quantize(SCORE_QUANTUM, rounding=ROUND_HALF_UP)


def score(
    project_id: int,
    project_class: ProjectClass,
    stored_scores: Optional[Mapping[str, Any]] = None,
) -> ScoreVector:
    if project_class is ProjectClass.SAMPLE:
        dimension_scores = resolve_stored_scores(stored_scores)
    else:
        dimension_scores = generate_dimension_scores(project_id)

    return ScoreVector(
        overall=calculate_overall_score(dimension_scores),
        project_class=project_class,
        **dimension_scores,
    )


def calculate_project_scores(
    project_id: int,
    project_name: Optional[str],
    stored_scores: Optional[Mapping[str, Any]] = None,
) -> ScoreVector:
    return score(project_id, classify_project(project_name), stored_scores)


def score_project(project: Project) -> ScoreVector:
    """Classify a stored project by name and score it under the matching policy."""

    return score(project.id, classify_project(project.name), project.stored_scores)


def get_rating_description(score_value: Decimal) -> str:
    value = float(score_value)
    if value >= 4.5:
        return "Excellent"
    if value >= 4.0:
        return "Good"
    if value >= 3.5:
        return "Moderate"
    return "Challenging"


def _band(score_value: Decimal) -> int:
    value = float(score_value)
    if value >= 4.5:
        return 0
    if value >= 4.0:
        return 1
    if value >= 3.5:
        return 2
    return 3


def _format_number(value: Any) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:g}"


def get_dimension_justification(
    dimension: str,
    score_value: Decimal,
    *,
    total_units: int = 0,
    savings_percent: Optional[Decimal] = None,
    time_savings_months: Optional[Decimal] = None,
) -> str:
    """Short explanation of a dimension score, chosen by score band."""

    band = _band(score_value)
    percent = f"{float(savings_percent or 0):.1f}"
    months = _format_number(time_savings_months or 0)

    if dimension == "zoning":
        return (
            "Excellent zoning compatibility with streamlined approval process and favorable regulations.",
            "Good zoning fit with minor concessions required for optimal project configuration.",
            "Moderate zoning compatibility with some restrictions and waiver requirements.",
            "Challenging zoning situation requiring significant variances and concessions.",
        )[band]
    if dimension == "massing":
        return (
            f"Excellent modular efficiency with {total_units} units configured for optimal factory construction.",
            "Good modular fit achieving target unit count with efficient repetitive layouts.",
            "Moderate modular compatibility with some design adaptations needed.",
            "Challenging massing configuration requiring significant modular design modifications.",
        )[band]
    if dimension == "cost":
        return (
            f"Strong cost advantages with {percent}% savings over site-built construction.",
            f"Cost competitive with {percent}% savings through modular efficiencies.",
            "Moderate cost benefits with minimal savings over traditional construction.",
            "Cost neutral or slightly higher than site-built construction.",
        )[band]
    if dimension == "sustainability":
        return (
            "Excellent sustainability alignment with Net Zero Energy and PHIUS certification potential.",
            "Good sustainability benefits through modular construction waste reduction and efficiency.",
            "Moderate sustainability improvements over traditional construction methods.",
            "Limited sustainability advantages with modular construction approach.",
        )[band]
    if dimension == "logistics":
        return (
            "Excellent logistics with optimal factory proximity, highway access, and staging capabilities.",
            "Good logistics setup with reasonable transportation routes and adequate staging space.",
            "Moderate logistics challenges with some transportation or staging constraints.",
            "Significant logistics obstacles requiring careful planning and coordination.",
        )[band]
    if dimension == "buildTime":
        return (
            f"Excellent time savings of {months} months through parallel construction and factory efficiency.",
            f"Good time advantages with {months} months savings over traditional construction timeline.",
            f"Moderate time benefits with {months} months reduction in project schedule.",
            "Minimal time advantages over site-built construction methods.",
        )[band]
    raise ValueError(f"Unknown score dimension: {dimension}")


__all__ = [
    "calculate_overall_score",
    "calculate_project_scores",
    "classify_project",
    "draw_to_score",
    "generate_deterministic_score",
    "generate_dimension_scores",
    "get_dimension_justification",
    "get_rating_description",
    "is_sample_project",
    "parse_stored_score",
    "resolve_stored_scores",
    "score",
    "score_project",
]
