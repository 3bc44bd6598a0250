"""Domain models for modular feasibility scoring."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, Tuple

# Draw order is part of the scoring contract: generated scores depend on it.
SCORE_DIMENSIONS: Tuple[str, ...] = (
    "zoning",
    "massing",
    "sustainability",
    "cost",
    "logistics",
    "buildTime",
)

DIMENSION_WEIGHTS: Dict[str, Decimal] = {
    "zoning": Decimal("0.20"),
    "massing": Decimal("0.15"),
    "sustainability": Decimal("0.20"),
    "cost": Decimal("0.20"),
    "logistics": Decimal("0.15"),
    "buildTime": Decimal("0.10"),
}

# Stored column names for curated per-dimension scores.
STORED_SCORE_FIELDS: Dict[str, str] = {
    "zoning": "zoning_score",
    "massing": "massing_score",
    "sustainability": "sustainability_score",
    "cost": "cost_score",
    "logistics": "logistics_score",
    "buildTime": "build_time_score",
}

SAMPLE_PROJECT_NAMES: FrozenSet[str] = frozenset(
    {
        "Serenity Village",
        "Mountain View Apartments",
        "University Housing Complex",
        "Workforce Commons",
    }
)

# TODO: confirm with the product owners whether 4.0 is policy or a placeholder
# for curated projects that were never scored.
SAMPLE_DEFAULT_SCORE = Decimal("4.0")
MIN_STORED_SCORE = Decimal("0.0")
MAX_STORED_SCORE = Decimal("5.0")

GENERATED_SCORE_FLOOR = Decimal("4.4")
GENERATED_SCORE_SPAN = Decimal("0.6")

SCORE_QUANTUM = Decimal("0.1")


class ProjectClass(Enum):
    SAMPLE = "sample"
    GENERATED = "generated"


@dataclass(frozen=True)
class ScoreVector:
    """Six dimension scores plus the weighted overall score."""

    zoning: Decimal
    massing: Decimal
    sustainability: Decimal
    cost: Decimal
    logistics: Decimal
    buildTime: Decimal
    overall: Decimal
    project_class: ProjectClass

    def dimensions(self) -> Dict[str, Decimal]:
        return {dimension: getattr(self, dimension) for dimension in SCORE_DIMENSIONS}

    def to_dict(self) -> Dict[str, object]:
        return {
            "overall": float(self.overall),
            "individual": {key: float(value) for key, value in self.dimensions().items()},
            "projectClass": self.project_class.value,
        }


__all__ = [
    "DIMENSION_WEIGHTS",
    "GENERATED_SCORE_FLOOR",
    "GENERATED_SCORE_SPAN",
    "MAX_STORED_SCORE",
    "MIN_STORED_SCORE",
    "ProjectClass",
    "SAMPLE_DEFAULT_SCORE",
    "SAMPLE_PROJECT_NAMES",
    "SCORE_DIMENSIONS",
    "SCORE_QUANTUM",
    "STORED_SCORE_FIELDS",
    "ScoreVector",
]
