from __future__ import annotations

from typing import Any

from loyalty_admin.clients.loyalty_sdk.modules.base import BaseClient


class PointTiersClient(BaseClient):
    def list_tiers(self) -> dict[str, Any]:
        return self._request("GET", "/api/point-tiers")

    def upsert_tier(self, tier: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/point-tiers", json_body=tier)

    def delete_tier(self, tier_level: int) -> dict[str, Any]:
        return self._request("DELETE", f"/api/point-tiers/{tier_level}")

    def stats(self) -> dict[str, Any]:
        return self._request("GET", "/api/point-tiers/stats")

    def award_points(self, user_id: str | int, points: int, description: str) -> dict[str, Any]:
        body = {"userId": user_id, "points": points, "description": description}
        return self._request("POST", "/api/point-tiers/award-points", json_body=body)

    def user_progress(self, user_id: str | int) -> dict[str, Any]:
        return self._request("GET", f"/api/point-tiers/user/{user_id}")

    def recalculate_all(self) -> dict[str, Any]:
        return self._request("POST", "/api/point-tiers/recalculate")
