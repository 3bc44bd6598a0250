"""API endpoint tests with a stubbed project repository."""

import httpx
import pytest
from fastapi.testclient import TestClient

from apps.api import create_app
from apps.api.routes.projects import get_repository
from apps.api.routes.simulator import get_estimator
from core.clients.estimator import CostEstimatorClient
from core.clients.supabase import SupabaseClient
from domain.costs.models import CostBreakdown, Project
from domain.projects.services import ProjectNotFoundError, ProjectRepository

SIMULATOR_REQUEST = {
    "oneBedUnits": 8,
    "twoBedUnits": 12,
    "threeBedUnits": 4,
    "floors": 3,
    "buildingType": "stacked",
    "parkingType": "surface",
    "location": "vallejo",
    "prevailingWage": True,
    "siteConditions": "standard",
}


def refuse_connection(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


class FakeRepository:
    """In-memory stand-in for the Supabase-backed repository."""

    def __init__(self, rows, breakdowns=None, error=None):
        self._projects = {row["id"]: Project.from_row(row) for row in rows}
        self._breakdowns = breakdowns or {}
        self._error = error

    async def get_project(self, project_id):
        if self._error:
            raise self._error
        if project_id not in self._projects:
            raise ProjectNotFoundError(project_id)
        return self._projects[project_id]

    async def get_cost_breakdowns(self, project_id):
        return [CostBreakdown.from_row(row) for row in self._breakdowns.get(project_id, [])]

    async def get_project_with_breakdowns(self, project_id):
        project = await self.get_project(project_id)
        return project, await self.get_cost_breakdowns(project_id)


@pytest.fixture
def make_client():
    def factory(repository):
        app = create_app()
        app.dependency_overrides[get_repository] = lambda: repository
        return TestClient(app)

    return factory


@pytest.fixture
def make_simulator_client():
    def factory(estimator):
        app = create_app()
        app.dependency_overrides[get_estimator] = lambda: estimator
        return TestClient(app)

    return factory


@pytest.fixture
def client(make_client, serenity_row, generated_row, empty_unit_row, breakdown_rows):
    repository = FakeRepository(
        [serenity_row, generated_row, empty_unit_row],
        breakdowns={42: breakdown_rows, 7: breakdown_rows},
    )
    return make_client(repository)


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestScoresEndpoint:
    def test_sample_project_scores(self, client):
        response = client.get("/api/projects/1/scores")
        assert response.status_code == 200
        data = response.json()
        assert data["overall"] == 4.5
        assert data["projectClass"] == "sample"
        assert data["individual"]["massing"] == 5.0

    def test_generated_scores_stable_across_requests(self, client):
        first = client.get("/api/projects/42/scores").json()
        second = client.get("/api/projects/42/scores").json()
        assert first == second
        assert first["projectClass"] == "generated"
        assert all(4.4 <= value < 5.0 for value in first["individual"].values())

    def test_unknown_project_is_404(self, client):
        response = client.get("/api/projects/999/scores")
        assert response.status_code == 404

    def test_non_numeric_id_rejected(self, client):
        response = client.get("/api/projects/abc/scores")
        assert response.status_code == 422

    def test_persistence_failure_is_502(self, make_client, serenity_row):
        repository = FakeRepository([serenity_row], error=RuntimeError("Supabase credentials not configured"))
        response = make_client(repository).get("/api/projects/1/scores")
        assert response.status_code == 502
        assert "credentials" in response.json()["detail"]

    def test_unreachable_database_is_502(self, make_client):
        supabase = SupabaseClient(
            url="https://db.test", key="anon-key", transport=httpx.MockTransport(refuse_connection)
        )
        response = make_client(ProjectRepository(supabase)).get("/api/projects/1/scores")
        assert response.status_code == 502
        assert "connection refused" in response.json()["detail"]


class TestCostTotalsEndpoint:
    def test_totals_from_breakdown(self, client):
        response = client.get("/api/projects/42/cost-totals")
        assert response.status_code == 200
        data = response.json()
        assert data["modularTotal"] == 600.0
        assert data["siteBuiltTotal"] == 750.0
        assert data["savings"] == 150.0
        assert data["costSavingsPercent"] == 20.0
        assert data["totalUnits"] == 24
        assert data["modularCostPerUnit"] == 25.0
        assert data["source"] == "breakdown"

    def test_zero_units_withholds_per_unit(self, client):
        data = client.get("/api/projects/7/cost-totals").json()
        assert data["modularTotal"] == 600.0
        assert data["modularCostPerUnit"] is None
        assert data["modularCostPerSf"] is None
        assert data["perUnitAvailable"] is False

    def test_no_breakdown_rows(self, client):
        data = client.get("/api/projects/1/cost-totals").json()
        assert data["source"] == "none"
        assert data["modularTotal"] == 0.0


class TestSummaryEndpoint:
    def test_summary_surfaces_agree(self, client):
        data = client.get("/api/projects/42/summary").json()
        totals = data["costTotals"]
        assert sum(row["raapTotalCost"] for row in data["breakdown"]) == totals["modularTotal"]
        assert sum(row["siteBuiltCost"] for row in data["breakdown"]) == totals["siteBuiltTotal"]
        assert data["showSavings"] is True
        assert data["timeline"]["siteBuiltTimelineMonths"] == 13.0
        assert set(data["justifications"]) == set(data["scores"]["individual"])


class TestSimulatorEndpoint:
    def test_calculate(self, client):
        response = client.post("/api/simulator/calculate", json=SIMULATOR_REQUEST)
        assert response.status_code == 200
        data = response.json()
        assert data["modularTotal"] == 12420000.0
        assert data["siteBuiltTotal"] == 12569040.0
        assert data["savings"] == 149040.0
        assert data["savingsPercent"] == 1.2
        assert data["costPerUnit"] == 517500.0
        assert data["breakdown"]["modularUnits"] == 7129080.0
        assert data["costTotals"]["source"] == "estimate"

    def test_remote_savings_recomputed_from_totals(self, make_simulator_client):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "totalCost": 1000,
                    "modularTotal": 1000,
                    "siteBuiltTotal": 1250,
                    "savings": 9999,
                    "savingsPercent": 77,
                },
            )

        estimator = CostEstimatorClient(
            url="https://estimator.test/calculate", transport=httpx.MockTransport(handler)
        )
        data = make_simulator_client(estimator).post(
            "/api/simulator/calculate", json=SIMULATOR_REQUEST
        ).json()
        assert data["savings"] == 250.0
        assert data["savingsPercent"] == 20.0
        assert data["costTotals"]["savings"] == 250.0

    def test_unreachable_estimator_is_502(self, make_simulator_client):
        estimator = CostEstimatorClient(
            url="https://estimator.test/calculate",
            transport=httpx.MockTransport(refuse_connection),
        )
        response = make_simulator_client(estimator).post(
            "/api/simulator/calculate", json=SIMULATOR_REQUEST
        )
        assert response.status_code == 502
        assert "connection refused" in response.json()["detail"]

    def test_invalid_parameters(self, client):
        response = client.post("/api/simulator/calculate", json={"floors": 9})
        assert response.status_code == 422
