from __future__ import annotations

from typing import Any

from loyalty_admin.clients.loyalty_sdk.modules.base import BaseClient, build_query_params


class PointsClient(BaseClient):
    def list_transactions(
        self,
        page: int | None = None,
        limit: int | None = None,
        search: str | None = None,
        type: str | None = None,  # noqa: A002
        user_id: str | int | None = None,
    ) -> dict[str, Any]:
        params = build_query_params(page=page, limit=limit, search=search, type=type, userId=user_id)
        return self._request("GET", "/api/admin/points/transactions", params=params)

    def award(self, award: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/admin/points/award", json_body=award)

    def adjust(self, adjustment: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/admin/points/adjust", json_body=adjustment)

    def bulk_award(self, user_ids: list[str | int], points: int, description: str, type: str = "award") -> dict[str, Any]:  # noqa: A002
        body = {"userIds": list(user_ids), "points": points, "description": description, "type": type}
        return self._request("POST", "/api/admin/points/bulk-award", json_body=body)

    def user_history(self, user_id: str | int, page: int | None = None, limit: int | None = None) -> dict[str, Any]:
        params = build_query_params(page=page, limit=limit)
        return self._request("GET", f"/api/admin/points/user/{user_id}/history", params=params)

    def stats(self) -> dict[str, Any]:
        return self._request("GET", "/api/admin/points/stats")
