from __future__ import annotations

import logging
from collections.abc import Callable
from time import perf_counter
from typing import Any

import httpx

from loyalty_admin.clients.loyalty_sdk.config import SDKConfig
from loyalty_admin.clients.loyalty_sdk.errors import (
    GENERIC_NETWORK_MESSAGE,
    GENERIC_TIMEOUT_MESSAGE,
    ApiError,
    AuthError,
    NetworkError,
    TimeoutError,
)
from loyalty_admin.clients.loyalty_sdk.token_store import TokenStore

logger = logging.getLogger(__name__)

AuthErrorHandler = Callable[[AuthError], None]


class HttpClient:
    """Gateway to the loyalty API.

    Attaches the stored bearer token, maps failures to ``ApiError`` subclasses
    and never retries. A 401 clears the stored token and notifies the
    registered auth-error handler once before the error is raised.
    """

    def __init__(
        self,
        config: SDKConfig | None = None,
        token_store: TokenStore | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config or SDKConfig.from_env()
        self.token_store = token_store or TokenStore(self.config.token_path)
        self._client = client or httpx.Client(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            verify=self.config.verify_ssl,
        )
        self._auth_error_handler: AuthErrorHandler | None = None

    def register_auth_error_handler(self, handler: AuthErrorHandler | None) -> None:
        self._auth_error_handler = handler

    def close(self) -> None:
        self._client.close()

    def request(
        self,
        method: str,
        path: str,
        json_body: dict[str, Any] | list[Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        files: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)
        token = self.token_store.get_token()
        if token:
            request_headers["Authorization"] = f"Bearer {token}"

        normalized_method = method.upper()
        normalized_path = path if path.startswith("/") else f"/{path}"
        started = perf_counter()
        try:
            response = self._client.request(
                method=normalized_method,
                url=normalized_path,
                json=json_body,
                params=params,
                headers=request_headers,
                files=files,
            )
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", normalized_method, normalized_path)
            raise TimeoutError(code="TIMEOUT_ERROR", message=GENERIC_TIMEOUT_MESSAGE, details=str(exc)) from exc
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", normalized_method, normalized_path, type(exc).__name__)
            raise NetworkError(code="NETWORK_ERROR", message=GENERIC_NETWORK_MESSAGE, details=str(exc)) from exc

        elapsed_ms = int((perf_counter() - started) * 1000)
        logger.debug("%s %s -> %s (%sms)", normalized_method, normalized_path, response.status_code, elapsed_ms)

        if response.status_code >= 400:
            error = ApiError.from_http_response(response)
            if isinstance(error, AuthError):
                self._handle_unauthorized(error)
            raise error

        return self._safe_json(response)

    def upload(self, path: str, field: str, filename: str, content: bytes, content_type: str) -> dict[str, Any]:
        return self.request("POST", path, files={field: (filename, content, content_type)})

    def _handle_unauthorized(self, error: AuthError) -> None:
        self.token_store.clear()
        if self._auth_error_handler:
            self._auth_error_handler(error)

    @staticmethod
    def _safe_json(response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {"items": payload}
