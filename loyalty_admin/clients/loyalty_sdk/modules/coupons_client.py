from __future__ import annotations

from typing import Any

from loyalty_admin.clients.loyalty_sdk.modules.base import BaseClient, build_query_params


class CouponsClient(BaseClient):
    def list_coupons(
        self,
        page: int | None = None,
        limit: int | None = None,
        search: str | None = None,
        is_active: str | bool | None = None,
        discount_type: str | None = None,
        include_expired: bool | None = None,
    ) -> dict[str, Any]:
        params = build_query_params(
            page=page,
            limit=limit,
            search=search,
            isActive=is_active,
            discountType=discount_type,
            includeExpired=include_expired,
        )
        return self._request("GET", "/api/coupons", params=params)

    def get_coupon(self, coupon_id: str | int) -> dict[str, Any]:
        return self._request("GET", f"/api/coupons/{coupon_id}")

    def create_coupon(self, coupon: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/coupons", json_body=coupon)

    def update_coupon(self, coupon_id: str | int, coupon: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/api/coupons/{coupon_id}", json_body=coupon)

    def delete_coupon(self, coupon_id: str | int) -> dict[str, Any]:
        return self._request("DELETE", f"/api/coupons/{coupon_id}")

    def toggle_status(self, coupon_id: str | int) -> dict[str, Any]:
        return self._request("PATCH", f"/api/coupons/{coupon_id}/toggle")

    def analytics(self, coupon_id: str | int) -> dict[str, Any]:
        return self._request("GET", f"/api/coupons/{coupon_id}/analytics")

    def bulk_update(self, coupon_ids: list[str | int], action: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        body: dict[str, Any] = {"couponIds": list(coupon_ids), "action": action}
        if data is not None:
            body["data"] = data
        return self._request("PUT", "/api/coupons/bulk", json_body=body)
