"""Async JSON client for the remote store with error mapping and retries."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import httpx

from txn_engine.config.settings import Settings
from txn_engine.core.exceptions import (
    NetworkError,
    ServerError,
    UnknownError,
    error_from_status,
)

logger = logging.getLogger(__name__)


class ApiClient:
    """httpx.AsyncClient wrapper speaking the remote store's JSON API.

    Features:
    - Bearer authentication with an opaque token
    - HTTP status -> AppError taxonomy mapping
    - Retries with exponential backoff for idempotent GETs only
    """

    MAX_BACKOFF_SECONDS = 30.0

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_delay: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self._retry_attempts = max(retry_attempts, 0)
        self._retry_delay = retry_delay

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> ApiClient:
        if not settings.api_base_url:
            raise ValueError("api_base_url is not configured")
        return cls(
            base_url=settings.api_base_url,
            token=settings.api_token,
            timeout=settings.request_timeout_seconds,
            retry_attempts=settings.retry_attempts,
            retry_delay=settings.retry_delay_seconds,
            transport=transport,
        )

    async def get(self, path: str, resource: str, identifier: str = "") -> Any:
        """Send a GET request, retrying network and server faults.

        Raises:
            AppError subclass once retries are exhausted, or immediately
            for 4xx responses.
        """
        attempt = 0
        while True:
            try:
                return await self._send("GET", path, resource, identifier)
            except (NetworkError, ServerError) as exc:
                if attempt >= self._retry_attempts:
                    raise
                wait_time = min(self._retry_delay * 2 ** attempt, self.MAX_BACKOFF_SECONDS)
                attempt += 1
                logger.warning(
                    "GET %s failed (attempt %d/%d): %s - retrying in %.1fs",
                    path,
                    attempt,
                    self._retry_attempts + 1,
                    exc.message,
                    wait_time,
                )
                await asyncio.sleep(wait_time)

    async def post(self, path: str, payload: dict[str, Any], resource: str) -> Any:
        """Send a POST request with a JSON body (never retried)."""
        return await self._send("POST", path, resource, json=payload)

    async def delete(self, path: str, resource: str, identifier: str) -> None:
        """Send a DELETE request (never retried)."""
        await self._send("DELETE", path, resource, identifier)

    async def _send(
        self,
        method: str,
        path: str,
        resource: str,
        identifier: str = "",
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TimeoutException as exc:
            raise NetworkError("Request timed out. Please try again.", details=str(exc)) from exc
        except httpx.TransportError as exc:
            raise NetworkError(details=str(exc)) from exc

        if response.is_error:
            raise error_from_status(
                response.status_code,
                resource,
                identifier,
                details=_safe_json(response),
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise UnknownError(f"Malformed JSON from {method} {path}") from exc

    async def aclose(self) -> None:
        """Close the underlying client."""
        await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None
