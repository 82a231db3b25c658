from __future__ import annotations

from typing import Any

from loyalty_admin.clients.loyalty_sdk.modules.base import BaseClient, build_query_params


class UsersClient(BaseClient):
    def list_users(
        self,
        page: int | None = None,
        limit: int | None = None,
        search: str | None = None,
        status: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> dict[str, Any]:
        params = build_query_params(
            page=page,
            limit=limit,
            search=search,
            status=status,
            sortBy=sort_by,
            sortOrder=sort_order,
        )
        return self._request("GET", "/api/admin/users", params=params)

    def get_user(self, user_id: str | int) -> dict[str, Any]:
        return self._request("GET", f"/api/admin/users/{user_id}")

    def update_user(self, user_id: str | int, user: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/api/admin/users/{user_id}", json_body=user)

    def update_status(self, user_id: str | int, is_active: bool) -> dict[str, Any]:
        return self._request("PUT", f"/api/admin/users/{user_id}/status", json_body={"isActive": is_active})

    def delete_user(self, user_id: str | int) -> dict[str, Any]:
        return self._request("DELETE", f"/api/admin/users/{user_id}")
