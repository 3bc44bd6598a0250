"""Client for the remote cost-estimation service."""
from typing import Optional

import httpx

from core.config import get_settings
from domain.costs.models import SimulatorEstimate
from domain.costs.simulator import SimulatorParams, estimate_static


class CostEstimatorClient:
    """Posts simulator parameters to the estimator, or estimates locally when unconfigured."""

    def __init__(
        self,
        *,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self._url = url or settings.estimator_url
        self._timeout = timeout if timeout is not None else settings.estimator_timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._url)

    async def estimate(self, params: SimulatorParams) -> SimulatorEstimate:
        if not self.is_configured:
            print("Using static results for cost calculation")
            return estimate_static(params)

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(str(self._url), json=params.model_dump())
        except httpx.HTTPError as exc:
            print(f"Error reaching cost estimator: {exc}")
            raise RuntimeError(f"Cost estimator request failed: {exc}") from exc

        if response.status_code == 200:
            return SimulatorEstimate.from_payload(response.json())
        print(f"Error calling cost estimator: {response.status_code}")
        raise RuntimeError(
            f"Cost estimator error {response.status_code}: {response.text[:200]}"
        )
