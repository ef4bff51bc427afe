"""Realtime Database REST client for the Members and Transactions collections"""

from typing import Any, Dict

import httpx

from perpus_portal.config import settings
from perpus_portal.domain.exceptions import TransportError
from perpus_portal.infrastructure.observability.metrics import store_latency_histogram, store_request_counter


class RealtimeStoreClient:
    """
    Client for the hosted key-value store.

    Paths are slash-separated (``Members/-Nabc``) and map to
    ``{base_url}/{path}.json``. Three operations are used:
    - get:    read the value at a path (None when absent)
    - push:   append a child with a store-generated key
    - update: merge fields into the value at a path
    """

    def __init__(
        self,
        base_url: str | None = None,
        auth_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.store_base_url).rstrip("/")
        self.auth_token = auth_token if auth_token is not None else settings.store_auth_token
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.strip('/')}.json"

    async def get(self, path: str) -> Any:
        return await self._request("get", "GET", path)

    async def push(self, path: str, value: Dict[str, Any]) -> str:
        """Append value under path and return the new key"""
        payload = await self._request("push", "POST", path, value)
        try:
            return payload["name"]
        except (KeyError, TypeError) as e:
            raise TransportError(f"Invalid push response from store: {payload!r}") from e

    async def update(self, path: str, values: Dict[str, Any]) -> None:
        await self._request("update", "PATCH", path, values)

    async def _request(self, operation: str, method: str, path: str, body: Dict[str, Any] | None = None) -> Any:
        """
        Send one request to the store.

        Raises:
            TransportError: On timeout, HTTP errors, network failures, or invalid JSON
        """
        params = {"auth": self.auth_token} if self.auth_token else None
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with store_latency_histogram.labels(operation=operation).time():
                    response = await client.request(method, self._url(path), params=params, json=body)
                response.raise_for_status()
                payload = response.json()

            except httpx.TimeoutException as e:
                store_request_counter.labels(operation=operation, outcome="error").inc()
                raise TransportError(f"Store timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                store_request_counter.labels(operation=operation, outcome="error").inc()
                raise TransportError(f"Store error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                store_request_counter.labels(operation=operation, outcome="error").inc()
                raise TransportError(f"Store unreachable: {e}") from e
            except ValueError as e:
                store_request_counter.labels(operation=operation, outcome="error").inc()
                raise TransportError(f"Invalid JSON from store: {e}") from e

        store_request_counter.labels(operation=operation, outcome="ok").inc()
        return payload
