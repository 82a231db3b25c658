from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from loyalty_admin.clients.loyalty_sdk.errors import ApiError
from loyalty_admin.clients.loyalty_sdk.models import LoginResponse, VerifyResponse
from loyalty_admin.clients.loyalty_sdk.modules.base import BaseClient

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


class AuthClient(BaseClient):
    def login(self, email: str, password: str) -> LoginResponse:
        payload = {"email": email, "password": password}
        data = self._request("POST", "/api/auth/login", json_body=payload)
        return _parse(LoginResponse, data)

    def verify(self) -> VerifyResponse:
        data = self._request("GET", "/api/auth/verify")
        return _parse(VerifyResponse, data)


def _parse(model: type[ResponseModel], data: dict[str, Any]) -> ResponseModel:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ApiError(
            code="INVALID_RESPONSE",
            message="The loyalty API returned an unexpected auth payload.",
            details=str(exc),
        ) from exc
