from __future__ import annotations

from typing import Any

from loyalty_admin.clients.loyalty_sdk.modules.base import BaseClient


class RankingsClient(BaseClient):
    def list_rankings(self) -> dict[str, Any]:
        return self._request("GET", "/api/rankings")

    def get_ranking(self, ranking_id: str | int) -> dict[str, Any]:
        return self._request("GET", f"/api/rankings/{ranking_id}")

    def create_ranking(self, ranking: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/rankings", json_body=ranking)

    def update_ranking(self, ranking_id: str | int, ranking: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/api/rankings/{ranking_id}", json_body=ranking)

    def delete_ranking(self, ranking_id: str | int) -> dict[str, Any]:
        return self._request("DELETE", f"/api/rankings/{ranking_id}")

    def reorder_rankings(self, rankings: list[dict[str, Any]]) -> dict[str, Any]:
        return self._request("POST", "/api/rankings/reorder", json_body={"rankings": rankings})
