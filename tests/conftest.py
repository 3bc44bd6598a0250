"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from core.config import get_settings  # noqa: E402


# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test"
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test without external credentials or estimator configured."""
    for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "COST_ESTIMATOR_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(Path(__file__).resolve().parent)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# Shared Fixtures - Project Rows
# ============================================================================


@pytest.fixture
def serenity_row():
    """Curated sample project row as stored in the database."""
    return {
        "id": 1,
        "name": "Serenity Village",
        "target_floors": 3,
        "studio_units": 0,
        "one_bed_units": 6,
        "two_bed_units": 12,
        "three_bed_units": 6,
        "building_dimensions": "146' X 66'",
        "zoning_score": "4.0",
        "massing_score": "5.0",
        "sustainability_score": "5.0",
        "cost_score": "4.0",
        "logistics_score": "5.0",
        "build_time_score": "4.0",
        "modular_timeline_months": "9",
        "site_built_timeline_months": "13",
    }


@pytest.fixture
def generated_row():
    """User-created project row with no curated scores."""
    return {
        "id": 42,
        "name": "Maple Street Apartments",
        "target_floors": 4,
        "studio_units": 2,
        "one_bed_units": 10,
        "two_bed_units": 8,
        "three_bed_units": 4,
        "site_built_timeline_months": None,
    }


@pytest.fixture
def empty_unit_row():
    """Project with no units and no area information."""
    return {
        "id": 7,
        "name": "Empty Lot",
        "target_floors": 2,
        "studio_units": 0,
        "one_bed_units": 0,
        "two_bed_units": 0,
        "three_bed_units": 0,
    }


# ============================================================================
# Shared Fixtures - Cost Breakdown Rows
# ============================================================================


@pytest.fixture
def breakdown_rows():
    """Three MasterFormat rows totalling 600 modular / 750 site-built."""
    return [
        {
            "id": "cb-1",
            "category": "03 Concrete",
            "site_built_cost": "150",
            "raap_gc_cost": "60",
            "raap_fab_cost": "40",
            "raap_total_cost": "100",
        },
        {
            "id": "cb-2",
            "category": "05 Metal",
            "site_built_cost": "250",
            "raap_gc_cost": "120",
            "raap_fab_cost": "80",
            "raap_total_cost": "200",
        },
        {
            "id": "cb-3",
            "category": "06 Wood & Plastics",
            "site_built_cost": "350",
            "raap_gc_cost": "100",
            "raap_fab_cost": "200",
            "raap_total_cost": "300",
        },
    ]
