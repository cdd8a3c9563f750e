from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

import requests

from ...config import API_BASE_URL, REQUEST_TIMEOUT_SECONDS
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

CONFLICT_CODES = {"ALREADY_SAVED", "WORD_ALREADY_SAVED", "ALREADY_EXISTS"}


class RemoteError(Exception):
    """Failure talking to the remote dictionary service.

    ``status_code`` is None when no response was received at all.
    """

    def __init__(self, message: str, *, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409 or (self.code or "").upper() in CONFLICT_CODES

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_transient(self) -> bool:
        if self.status_code is None:
            return True
        return self.status_code == 429 or self.status_code >= 500


def _error_from_response(response: requests.Response) -> RemoteError:
    message = "An error occurred"
    code = None
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = str(payload.get("error") or payload.get("message") or payload.get("detail") or message)
        code = payload.get("code")
    return RemoteError(message, status_code=response.status_code, code=code)


class ApiClient:
    def __init__(
        self,
        base_url: str = API_BASE_URL,
        *,
        token_provider: Callable[[], str | None] | None = None,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        retry: RetryPolicy | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.session = session or requests.Session()
        self.timeout = timeout
        self.retry = retry or RetryPolicy()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _send(self, method: str, path: str, *, json: Any = None, params: dict | None = None) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise RemoteError(f"Request to {path} failed: {exc}") from exc

        if response.status_code >= 400:
            error = _error_from_response(response)
            if error.is_auth_error:
                logger.warning("Authentication error: token may be invalid or expired")
            raise error
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError("Invalid JSON in response", status_code=response.status_code) from exc

    async def request(self, method: str, path: str, *, json: Any = None, params: dict | None = None) -> Any:
        async def attempt() -> Any:
            return await asyncio.to_thread(self._send, method, path, json=json, params=params)

        return await self.retry.run(
            attempt,
            should_retry=lambda exc: isinstance(exc, RemoteError) and exc.is_transient,
        )

    async def get(self, path: str, *, params: dict | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, payload: Any = None) -> Any:
        return await self.request("POST", path, json=payload)

    async def patch(self, path: str, payload: Any = None) -> Any:
        return await self.request("PATCH", path, json=payload)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
