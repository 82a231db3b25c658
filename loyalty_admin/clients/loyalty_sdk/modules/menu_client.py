from __future__ import annotations

from typing import Any

from loyalty_admin.clients.loyalty_sdk.modules.base import BaseClient, build_query_params


class MenuClient(BaseClient):
    def list_items(self, include_inactive: bool = True, category: str | None = None) -> dict[str, Any]:
        params = build_query_params(includeInactive=include_inactive, category=category)
        return self._request("GET", "/api/menu/items", params=params)

    def categories(self) -> dict[str, Any]:
        return self._request("GET", "/api/menu/categories")

    def create_item(self, item: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/menu/items", json_body=item)

    def update_item(self, item_id: str | int, item: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/api/menu/items/{item_id}", json_body=item)

    def delete_item(self, item_id: str | int) -> dict[str, Any]:
        return self._request("DELETE", f"/api/menu/items/{item_id}")

    def stats(self, **filters: Any) -> dict[str, Any]:
        return self._request("GET", "/api/menu/stats", params=build_query_params(**filters))
