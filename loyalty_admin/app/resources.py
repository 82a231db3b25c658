from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import Any

from loyalty_admin.app.application.resource import ResourceEndpoints
from loyalty_admin.app.domain.models.query_state import QueryState
from loyalty_admin.app.ui.forms import HEX_COLOR_REGEX, FieldSpec, FormSpec
from loyalty_admin.app.ui.listing_view import apply_local_query, sort_rows
from loyalty_admin.clients.loyalty_sdk.http_client import HttpClient
from loyalty_admin.clients.loyalty_sdk.models import Page
from loyalty_admin.clients.loyalty_sdk.modules.business_client import BusinessClient
from loyalty_admin.clients.loyalty_sdk.modules.coupons_client import CouponsClient
from loyalty_admin.clients.loyalty_sdk.modules.menu_client import MenuClient
from loyalty_admin.clients.loyalty_sdk.modules.point_tiers_client import PointTiersClient
from loyalty_admin.clients.loyalty_sdk.modules.points_client import PointsClient
from loyalty_admin.clients.loyalty_sdk.modules.rankings_client import RankingsClient
from loyalty_admin.clients.loyalty_sdk.modules.theme_client import ThemeClient
from loyalty_admin.clients.loyalty_sdk.modules.users_client import UsersClient
from loyalty_admin.clients.loyalty_sdk.normalizers import normalize_listing

DEFAULT_COLOR = "#9CAF88"

COUPON_FORM = FormSpec(
    fields=(
        FieldSpec("title", required=True, max_length=100),
        FieldSpec("description", default=""),
        FieldSpec("code", required=True, max_length=50),
        FieldSpec("discountType", default="percentage", choices=("percentage", "fixed")),
        FieldSpec("discountValue", kind="float", default=0),
        FieldSpec("minimumPurchase", kind="float", default=0),
        FieldSpec("expirationDate", default="", nullable=True),
        FieldSpec("usageLimit", kind="int", default=0, nullable=True),
        FieldSpec("targetRankingLevel", kind="int", default=None, nullable=True),
    ),
    read_only=("id", "businessId", "createdAt", "updatedAt", "usedCount"),
)

USER_FORM = FormSpec(
    fields=(
        FieldSpec("firstName", required=True),
        FieldSpec("lastName", required=True),
        FieldSpec("email", required=True, email=True),
        FieldSpec("phoneNumber", default="", nullable=True),
        FieldSpec("isActive", kind="bool", default=True),
    ),
    read_only=("id", "createdAt", "updatedAt", "lastLogin", "totalPoints", "businesses"),
)

MENU_ITEM_FORM = FormSpec(
    fields=(
        FieldSpec("name", required=True, max_length=100),
        FieldSpec("description", default=""),
        FieldSpec("category", required=True),
        FieldSpec("price", kind="float", default=0),
        FieldSpec("pointsEarned", kind="int", default=0),
        FieldSpec("imageUrl", default="", nullable=True),
        FieldSpec("isAvailable", kind="bool", default=True),
        FieldSpec("sortOrder", kind="int", default=0),
    ),
)

RANKING_FORM = FormSpec(
    fields=(
        FieldSpec("level", kind="int", default=1),
        FieldSpec("title", required=True),
        FieldSpec("pointsRequired", kind="int", default=0),
        FieldSpec("color", default=DEFAULT_COLOR, pattern=HEX_COLOR_REGEX),
        FieldSpec(
            "benefits",
            kind="json",
            default={"discountPercentage": 0, "specialOffers": [], "prioritySupport": False, "freeShipping": False},
        ),
    ),
)

POINT_TIER_FORM = FormSpec(
    fields=(
        FieldSpec("tierLevel", kind="int", default=1),
        FieldSpec("name", required=True),
        FieldSpec("pointsRequired", kind="int", default=0),
        FieldSpec("description", default=""),
        FieldSpec("rewards", kind="json", default=[]),
        FieldSpec("color", default=DEFAULT_COLOR, pattern=HEX_COLOR_REGEX),
    ),
)

TRANSACTION_FORM = FormSpec(
    fields=(
        FieldSpec("userId", required=True, label="User"),
        FieldSpec("points", kind="int", default=0),
        FieldSpec("description", required=True),
        FieldSpec("expiresInDays", kind="int", default=365),
    ),
)

THEME_PRESET_FORM = FormSpec(
    fields=(
        FieldSpec("name", required=True, max_length=50),
        FieldSpec("colors", kind="json", required=True, default={}),
    ),
)

THEME_COLORS_FORM = FormSpec(
    fields=tuple(
        FieldSpec(name, required=name in {"primary", "secondary", "accent", "background", "text"}, pattern=HEX_COLOR_REGEX)
        for name in (
            "primary",
            "secondary",
            "accent",
            "background",
            "text",
            "lightGray",
            "darkGray",
            "success",
            "warning",
            "error",
            "info",
        )
    ),
)

BUSINESS_FORM = FormSpec(
    fields=(
        FieldSpec("name", required=True, max_length=100),
        FieldSpec("description", default=""),
        FieldSpec("contactEmail", default="", email=True),
        FieldSpec("contactPhone", default=""),
        FieldSpec("address", default=""),
        FieldSpec("category", default=""),
        FieldSpec("website", default=""),
        FieldSpec("features", kind="json", default=[]),
        FieldSpec("socialMedia", kind="json", default={"instagram": "", "facebook": "", "twitter": ""}),
    ),
    read_only=("id", "createdAt", "updatedAt", "logoUrl", "totalMembers", "memberSince"),
)


def _sorted_within_page(page: Page, query: QueryState) -> Page:
    if not query.sort_by:
        return page
    return replace(page, items=sort_rows(page.items, query.sort_by, query.sort_order))


def _local_listing(
    fetch: Callable[[], dict[str, Any]],
    rows_key: str,
    search_fields: tuple[str, ...],
) -> Callable[[QueryState, int], Page]:
    def list_page(query: QueryState, page_size: int) -> Page:
        rows = normalize_listing(fetch(), rows_key=rows_key).items
        return apply_local_query(rows, query, page_size=page_size, search_fields=search_fields)

    return list_page


def coupons_resource(http: HttpClient) -> ResourceEndpoints:
    client = CouponsClient(http=http)

    def list_page(query: QueryState, page_size: int) -> Page:
        payload = client.list_coupons(
            page=query.page,
            limit=page_size,
            search=query.search,
            is_active=query.filters.get("isActive"),
            discount_type=query.filters.get("discountType"),
            include_expired=query.filters.get("includeExpired"),
        )
        page = normalize_listing(payload, rows_key="coupons", page=query.page, page_size=page_size)
        return _sorted_within_page(page, query)

    return ResourceEndpoints(
        name="coupons",
        label="Coupon",
        plural="coupons",
        list_page=list_page,
        fetch_one=client.get_coupon,
        create=client.create_coupon,
        update=client.update_coupon,
        delete=client.delete_coupon,
        toggle_status=lambda coupon: client.toggle_status(coupon["id"]),
        bulk_update=lambda ids, payload: client.bulk_update(ids, payload["action"], payload.get("data")),
        form=COUPON_FORM,
        entity_key="coupon",
    )


def users_resource(http: HttpClient) -> ResourceEndpoints:
    client = UsersClient(http=http)

    def list_page(query: QueryState, page_size: int) -> Page:
        payload = client.list_users(
            page=query.page,
            limit=page_size,
            search=query.search,
            status=query.filters.get("status"),
            sort_by=query.sort_by,
            sort_order=query.sort_order.value if query.sort_by else None,
        )
        return normalize_listing(payload, rows_key="users", page=query.page, page_size=page_size)

    return ResourceEndpoints(
        name="users",
        label="User",
        plural="users",
        list_page=list_page,
        fetch_one=client.get_user,
        update=client.update_user,
        delete=client.delete_user,
        toggle_status=lambda user: client.update_status(user["id"], not user.get("isActive", True)),
        form=USER_FORM,
        entity_key="user",
    )


def transactions_resource(http: HttpClient) -> ResourceEndpoints:
    client = PointsClient(http=http)

    def list_page(query: QueryState, page_size: int) -> Page:
        payload = client.list_transactions(
            page=query.page,
            limit=page_size,
            search=query.search,
            type=query.filters.get("type"),
            user_id=query.filters.get("userId"),
        )
        page = normalize_listing(payload, rows_key="transactions", page=query.page, page_size=page_size)
        return _sorted_within_page(page, query)

    return ResourceEndpoints(
        name="transactions",
        label="Points transaction",
        plural="transactions",
        list_page=list_page,
        create=client.award,
        actions={"adjust": client.adjust, "bulk_award": client.bulk_award},
        form=TRANSACTION_FORM,
        entity_key="transaction",
    )


def menu_items_resource(http: HttpClient) -> ResourceEndpoints:
    client = MenuClient(http=http)
    return ResourceEndpoints(
        name="menu",
        label="Menu item",
        plural="menu items",
        list_page=_local_listing(
            lambda: client.list_items(include_inactive=True),
            "menuItems",
            ("name", "description", "category"),
        ),
        create=client.create_item,
        update=client.update_item,
        delete=client.delete_item,
        toggle_status=lambda item: client.update_item(item["id"], {"isAvailable": not item.get("isAvailable", True)}),
        form=MENU_ITEM_FORM,
        status_field="isAvailable",
        entity_key="menuItem",
    )


def rankings_resource(http: HttpClient) -> ResourceEndpoints:
    client = RankingsClient(http=http)
    return ResourceEndpoints(
        name="rankings",
        label="Ranking",
        plural="rankings",
        list_page=_local_listing(client.list_rankings, "rankings", ("title",)),
        fetch_one=client.get_ranking,
        create=client.create_ranking,
        update=client.update_ranking,
        delete=client.delete_ranking,
        actions={"reorder": client.reorder_rankings},
        form=RANKING_FORM,
        entity_key="ranking",
    )


def point_tiers_resource(http: HttpClient) -> ResourceEndpoints:
    client = PointTiersClient(http=http)
    return ResourceEndpoints(
        name="point-tiers",
        label="Point tier",
        plural="point tiers",
        list_page=_local_listing(client.list_tiers, "tiers", ("name", "description")),
        create=client.upsert_tier,
        update=lambda tier_level, tier: client.upsert_tier({**tier, "tierLevel": tier_level}),
        delete=client.delete_tier,
        actions={"recalculate": client.recalculate_all, "award_points": client.award_points},
        form=POINT_TIER_FORM,
        id_field="tierLevel",
        entity_key="tier",
    )


def theme_presets_resource(http: HttpClient) -> ResourceEndpoints:
    client = ThemeClient(http=http)
    return ResourceEndpoints(
        name="theme-presets",
        label="Theme preset",
        plural="theme presets",
        list_page=_local_listing(client.list_presets, "customThemes", ("name",)),
        create=lambda preset: client.create_preset(preset["name"], preset["colors"]),
        delete=client.delete_preset,
        actions={"apply": client.apply_preset},
        form=THEME_PRESET_FORM,
        entity_key="theme",
    )


def theme_colors_resource(http: HttpClient) -> ResourceEndpoints:
    client = ThemeClient(http=http)
    return ResourceEndpoints(
        name="theme",
        label="Theme",
        plural="themes",
        fetch_one=lambda _unused: client.get_colors(),
        update=lambda _unused, colors: client.update_colors(colors),
        form=THEME_COLORS_FORM,
        entity_key="colors",
    )


def business_resource(http: HttpClient) -> ResourceEndpoints:
    client = BusinessClient(http=http)
    return ResourceEndpoints(
        name="business",
        label="Business information",
        plural="businesses",
        fetch_one=lambda _unused: client.get_info(),
        update=lambda _unused, business: client.update_info(business),
        actions={"upload_logo": client.upload_logo, "delete_logo": client.delete_logo},
        form=BUSINESS_FORM,
        entity_key="business",
    )


RESOURCE_FACTORIES: dict[str, Callable[[HttpClient], ResourceEndpoints]] = {
    "coupons": coupons_resource,
    "users": users_resource,
    "transactions": transactions_resource,
    "menu": menu_items_resource,
    "rankings": rankings_resource,
    "point-tiers": point_tiers_resource,
    "theme-presets": theme_presets_resource,
    "theme": theme_colors_resource,
    "business": business_resource,
}

LIST_RESOURCES = tuple(name for name in RESOURCE_FACTORIES if name not in {"theme", "business"})


def build_resource(name: str, http: HttpClient) -> ResourceEndpoints:
    try:
        factory = RESOURCE_FACTORIES[name]
    except KeyError as exc:
        raise ValueError(f"Unknown resource {name!r}. Choose one of: {', '.join(RESOURCE_FACTORIES)}") from exc
    return factory(http)
