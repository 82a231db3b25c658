from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loyalty_admin.clients.loyalty_sdk.http_client import HttpClient


@dataclass
class BaseClient:
    http: HttpClient

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        return self.http.request(method, path, **kwargs)


def build_query_params(**kwargs: Any) -> dict[str, Any]:
    params: dict[str, Any] = {}
    for key, value in kwargs.items():
        if value in (None, ""):
            continue
        params[key] = str(value).lower() if isinstance(value, bool) else value
    return params
