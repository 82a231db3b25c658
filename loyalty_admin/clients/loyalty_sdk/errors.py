from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

GENERIC_HTTP_MESSAGE = "Request to the loyalty API failed"
GENERIC_NETWORK_MESSAGE = "Network error while calling the loyalty API. Check your connection and try again."
GENERIC_TIMEOUT_MESSAGE = "The loyalty API took too long to respond. Try again."


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: dict[str, Any] | list[Any] | str | None = None
    trace_id: str | None = None
    status_code: int | None = None
    server_message: str | None = None

    def __str__(self) -> str:
        status = f"[{self.status_code}] " if self.status_code else ""
        return f"{status}{self.code}: {self.message}"

    def user_message(self, fallback: str) -> str:
        """Server-provided text when the API sent one, otherwise ``fallback``."""
        return self.server_message or fallback

    @classmethod
    def from_http_response(cls, response: httpx.Response) -> "ApiError":
        trace_id = response.headers.get("X-Trace-ID") or response.headers.get("X-Trace-Id")
        try:
            payload = response.json()
        except ValueError:
            payload = None

        error_type = error_type_for_status(response.status_code)
        if not isinstance(payload, dict):
            return error_type(
                code="HTTP_ERROR",
                message=GENERIC_HTTP_MESSAGE,
                details=payload,
                trace_id=trace_id,
                status_code=response.status_code,
            )

        server_message = payload.get("message") or payload.get("error")
        return error_type(
            code=str(payload.get("code") or _default_code(response.status_code)),
            message=str(server_message or GENERIC_HTTP_MESSAGE),
            details=payload.get("details") or payload.get("errors"),
            trace_id=payload.get("trace_id") or trace_id,
            status_code=response.status_code,
            server_message=str(server_message) if server_message else None,
        )


class AuthError(ApiError):
    """Missing, expired or rejected bearer token."""


class PermissionDeniedError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ServerValidationError(ApiError):
    """400/422 rejected by the API."""


class ConflictError(ApiError):
    pass


class ServerError(ApiError):
    """5xx server-side failures."""


class NetworkError(ApiError):
    """No HTTP response was received."""


class TimeoutError(NetworkError):  # noqa: A001
    pass


@dataclass
class ClientValidationError(ApiError):
    """Local pre-submit failure; never reaches the gateway."""

    field_errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_field_errors(cls, field_errors: dict[str, str]) -> "ClientValidationError":
        first = next(iter(field_errors.values()), "Invalid form")
        return cls(
            code="VALIDATION_ERROR",
            message=first,
            details=dict(field_errors),
            field_errors=dict(field_errors),
        )


def error_type_for_status(status_code: int) -> type[ApiError]:
    if status_code == 401:
        return AuthError
    if status_code == 403:
        return PermissionDeniedError
    if status_code == 404:
        return NotFoundError
    if status_code in {400, 422}:
        return ServerValidationError
    if status_code == 409:
        return ConflictError
    if status_code >= 500:
        return ServerError
    return ApiError


def _default_code(status_code: int) -> str:
    return {
        400: "VALIDATION_ERROR",
        401: "UNAUTHORIZED",
        403: "PERMISSION_DENIED",
        404: "NOT_FOUND",
        409: "CONFLICT",
        422: "VALIDATION_ERROR",
    }.get(status_code, "INTERNAL_ERROR" if status_code >= 500 else "HTTP_ERROR")


def auth_required_error() -> AuthError:
    return AuthError(code="AUTH_REQUIRED", message="Sign in to continue.", status_code=None)
