"""
Record Service Client
=====================
Async client for the hosted record service's REST facade.

The client is created once and handed to every entity adapter; nothing
reaches for a shared instance on its own.

Usage:
    from campuscore.services.records_client import RecordsClient

    async with RecordsClient.from_settings() as client:
        rows = await client.fetch_records("student3", {"fields": ["Name"], "where": []})
"""

import time
from typing import Any, Dict, List, Optional

import httpx

from campuscore.core.config import settings
from campuscore.core.exceptions import (
    ConfigurationError,
    EnvelopeError,
    RecordNotFoundError,
    RecordTimeoutError,
    TransportError,
)
from campuscore.core.logging_config import logger


class RecordsClient:
    """Thin async wrapper over the record service endpoints"""

    def __init__(
        self,
        base_url: str,
        project_id: str,
        public_key: str = "",
        timeout: Optional[httpx.Timeout] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.project_id = project_id
        self.public_key = public_key
        self.timeout = timeout or httpx.Timeout(
            settings.RECORDS_REQUEST_TIMEOUT,
            connect=settings.RECORDS_CONNECT_TIMEOUT,
        )
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self.timeout)

    @classmethod
    def from_settings(cls, http_client: Optional[httpx.AsyncClient] = None) -> "RecordsClient":
        if not settings.RECORDS_API_URL:
            raise ConfigurationError("RECORDS_API_URL")
        if not settings.RECORDS_PROJECT_ID:
            raise ConfigurationError("RECORDS_PROJECT_ID")
        return cls(
            base_url=settings.RECORDS_API_URL,
            project_id=settings.RECORDS_PROJECT_ID,
            public_key=settings.RECORDS_PUBLIC_KEY,
            http_client=http_client,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "X-Project-Id": self.project_id,
        }
        if self.public_key:
            headers["Authorization"] = f"Bearer {self.public_key}"
        return headers

    async def _request(
        self,
        method: str,
        table: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        url = f"{self.base_url}/tables/{table}{path}"
        started = time.perf_counter()
        try:
            response = await self._client.request(
                method, url, json=payload, headers=self._headers(), timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Record service timeout: {method} {table}{path}: {e}")
            raise RecordTimeoutError(self.timeout.read) from e
        except httpx.RequestError as e:
            logger.warning(f"Record service unreachable: {method} {table}{path}: {e}")
            raise TransportError(f"Record service unreachable: {e}") from e

        logger.log_request(
            method, table, response.status_code,
            (time.perf_counter() - started) * 1000,
        )

        if response.status_code >= 500:
            raise TransportError(
                f"Record service error {response.status_code}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise EnvelopeError(f"Record service returned non-JSON body ({response.status_code})") from e

    def _envelope(self, response: httpx.Response) -> Dict[str, Any]:
        """Write endpoints answer with an envelope even on 4xx"""
        body = self._json(response)
        if not isinstance(body, dict):
            raise EnvelopeError()
        if response.is_error and "success" not in body:
            body = {"success": False, "message": body.get("message") or response.reason_phrase}
        return body

    # ==================== Reads ====================

    async def fetch_records(self, table: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        response = await self._request("POST", table, "/fetch", params)
        if response.is_error:
            raise TransportError(
                f"Fetch from '{table}' failed with {response.status_code}",
                status_code=response.status_code,
            )
        body = self._json(response)
        data = body.get("data") if isinstance(body, dict) else body
        if data is None:
            return []
        if not isinstance(data, list):
            raise EnvelopeError(f"Expected a list of records from '{table}'")
        return data

    async def get_record_by_id(self, table: str, record_id: Any) -> Optional[Dict[str, Any]]:
        response = await self._request("GET", table, f"/records/{record_id}")
        if response.status_code == 404:
            return None
        if response.is_error:
            raise TransportError(
                f"Get from '{table}' failed with {response.status_code}",
                status_code=response.status_code,
            )
        body = self._json(response)
        return body.get("data") if isinstance(body, dict) else None

    # ==================== Writes ====================

    async def create_record(self, table: str, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request("POST", table, "/records", params)
        return self._envelope(response)

    async def update_record(self, table: str, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request("PUT", table, "/records", params)
        if response.status_code == 404:
            record_id = (params.get("records") or [{}])[0].get("Id")
            raise RecordNotFoundError(table, record_id)
        return self._envelope(response)

    async def delete_record(self, table: str, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request("DELETE", table, "/records", params)
        if response.status_code == 404:
            record_ids = params.get("RecordIds") or [None]
            raise RecordNotFoundError(table, record_ids[0])
        return self._envelope(response)
