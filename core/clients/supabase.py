"""Supabase client helpers."""
from typing import Any, Dict, List, Optional

import httpx

from core.config import get_settings


class SupabaseClient:
    """Lightweight async client for Supabase REST endpoints."""

    def __init__(
        self,
        *,
        url: Optional[str] = None,
        key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self._url = url or settings.supabase_url
        self._key = key or settings.supabase_key
        self._timeout = timeout if timeout is not None else settings.supabase_timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._url and self._key)

    async def fetch(self, endpoint: str) -> Any:
        if not self.is_configured:
            raise RuntimeError("Supabase credentials not configured")

        headers: Dict[str, str] = {
            "apikey": str(self._key),
            "Authorization": f"Bearer {self._key}",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(f"{self._url}/rest/v1/{endpoint}", headers=headers)
        except httpx.HTTPError as exc:
            print(f"Error reaching Supabase for {endpoint}: {exc}")
            raise RuntimeError(f"Supabase request failed: {exc}") from exc

        if response.status_code == 200:
            return response.json()
        print(f"Error querying Supabase for {endpoint}: {response.status_code}")
        raise RuntimeError(f"Supabase error {response.status_code}: {response.text[:200]}")

    async def fetch_rows(self, endpoint: str) -> List[Dict[str, Any]]:
        payload = await self.fetch(endpoint)
        if payload is None:
            return []
        if isinstance(payload, dict):
            return [payload]
        return list(payload)
