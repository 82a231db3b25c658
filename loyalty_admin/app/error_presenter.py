from __future__ import annotations

from typing import Any

from loyalty_admin.clients.loyalty_sdk.errors import (
    ApiError,
    AuthError,
    ClientValidationError,
    ConflictError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    ServerError,
    ServerValidationError,
)


def build_error_payload(error: Exception) -> dict[str, Any]:
    if isinstance(error, ApiError):
        category = _classify_api_error(error)
        payload = {
            "category": category,
            "code": error.code,
            "message": error.message,
            "trace_id": error.trace_id,
            "status_code": error.status_code,
            "action": _suggest_action(category),
        }
        if isinstance(error, ClientValidationError):
            payload["field_errors"] = dict(error.field_errors)
        return payload
    return {
        "category": "internal",
        "code": "INTERNAL_ERROR",
        "message": str(error),
        "trace_id": None,
        "status_code": None,
        "action": "Contact support",
    }


def format_error_banner(payload: dict[str, Any]) -> str:
    trace_id = payload.get("trace_id") or "n/a"
    return (
        "[ERROR] "
        f"code={payload.get('code')} "
        f"message={payload.get('message')} "
        f"trace_id={trace_id} "
        f"category={payload.get('category')} "
        f"action={payload.get('action')}"
    )


def _classify_api_error(error: ApiError) -> str:
    if isinstance(error, NetworkError):
        return "network"
    if isinstance(error, ClientValidationError):
        return "validation"
    if isinstance(error, AuthError):
        return "auth"
    if isinstance(error, PermissionDeniedError):
        return "permission"
    if isinstance(error, NotFoundError):
        return "not_found"
    if isinstance(error, ConflictError):
        return "conflict"
    if isinstance(error, ServerValidationError):
        return "validation"
    if isinstance(error, ServerError):
        return "server"
    return "api"


def _suggest_action(category: str) -> str:
    if category in {"network", "server", "conflict"}:
        return "Retry"
    if category == "auth":
        return "Sign in again"
    if category == "validation":
        return "Fix the highlighted fields"
    if category in {"permission", "not_found"}:
        return "Return to the dashboard"
    return "Contact support"
