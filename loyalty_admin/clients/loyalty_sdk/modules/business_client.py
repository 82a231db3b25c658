from __future__ import annotations

from typing import Any

from loyalty_admin.clients.loyalty_sdk.modules.base import BaseClient


class BusinessClient(BaseClient):
    def get_info(self) -> dict[str, Any]:
        return self._request("GET", "/api/business/info")

    def update_info(self, business: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", "/api/business/info", json_body=business)

    def upload_logo(self, filename: str, content: bytes, content_type: str = "image/png") -> dict[str, Any]:
        return self.http.upload("/api/business/logo", "logo", filename, content, content_type)

    def delete_logo(self) -> dict[str, Any]:
        return self._request("DELETE", "/api/business/logo")
