from loyalty_admin.clients.loyalty_sdk.modules.business_client import BusinessClient
from loyalty_admin.clients.loyalty_sdk.modules.coupons_client import CouponsClient
from loyalty_admin.clients.loyalty_sdk.modules.menu_client import MenuClient
from loyalty_admin.clients.loyalty_sdk.modules.point_tiers_client import PointTiersClient
from loyalty_admin.clients.loyalty_sdk.modules.points_client import PointsClient


def test_read_only_endpoints_hit_expected_paths(fake_api) -> None:
    for path in (
        "/api/coupons/5/analytics",
        "/api/menu/categories",
        "/api/menu/stats",
        "/api/point-tiers/stats",
        "/api/point-tiers/user/9",
        "/api/admin/points/stats",
        "/api/admin/points/user/9/history",
    ):
        fake_api.add("GET", path, (200, {"success": True}))
    http = fake_api.http(token="tok-1")

    CouponsClient(http=http).analytics(5)
    MenuClient(http=http).categories()
    MenuClient(http=http).stats(category="coffee", isAvailable=False)
    PointTiersClient(http=http).stats()
    PointTiersClient(http=http).user_progress(9)
    PointsClient(http=http).stats()
    PointsClient(http=http).user_history(9, page=2, limit=10)

    assert [call.path for call in fake_api.calls] == [
        "/api/coupons/5/analytics",
        "/api/menu/categories",
        "/api/menu/stats",
        "/api/point-tiers/stats",
        "/api/point-tiers/user/9",
        "/api/admin/points/stats",
        "/api/admin/points/user/9/history",
    ]
    assert fake_api.calls_to("GET", "/api/menu/stats")[0].params == {"category": "coffee", "isAvailable": "false"}
    assert fake_api.calls_to("GET", "/api/admin/points/user/9/history")[0].params == {"page": "2", "limit": "10"}


def test_write_endpoints_send_expected_bodies(fake_api) -> None:
    fake_api.add("POST", "/api/admin/points/bulk-award", (200, {"success": True}))
    fake_api.add("POST", "/api/point-tiers/award-points", (200, {"success": True}))
    fake_api.add("GET", "/api/menu/items", (200, {"success": True, "menuItems": []}))
    fake_api.add("DELETE", "/api/business/logo", (200, {"success": True}))
    http = fake_api.http(token="tok-1")

    PointsClient(http=http).bulk_award([1, 2], 25, "Launch bonus")
    PointTiersClient(http=http).award_points(4, 10, "Birthday")
    MenuClient(http=http).list_items(category="tea")
    BusinessClient(http=http).delete_logo()

    assert fake_api.calls_to("POST", "/api/admin/points/bulk-award")[0].body == {
        "userIds": [1, 2],
        "points": 25,
        "description": "Launch bonus",
        "type": "award",
    }
    assert fake_api.calls_to("POST", "/api/point-tiers/award-points")[0].body == {
        "userId": 4,
        "points": 10,
        "description": "Birthday",
    }
    assert fake_api.calls_to("GET", "/api/menu/items")[0].params == {"includeInactive": "true", "category": "tea"}
    assert len(fake_api.calls_to("DELETE", "/api/business/logo")) == 1
