import pytest

from loyalty_admin.app.application.form_controller import FormEditController
from loyalty_admin.app.application.list_controller import EntityListController
from loyalty_admin.app.application.notifications import Notification, NotificationChannel, NotificationKind
from loyalty_admin.app.resources import business_resource, menu_items_resource, point_tiers_resource, users_resource
from loyalty_admin.app.session_store import SessionStore
from loyalty_admin.clients.loyalty_sdk.errors import ClientValidationError, ServerValidationError

MENU_ITEMS = {"success": True, "menuItems": [{"id": 3, "name": "Latte", "category": "coffee", "price": 4.5}]}


def menu_controllers(signed_in):
    endpoints = menu_items_resource(signed_in.http)
    items = EntityListController(endpoints, signed_in.session, signed_in.notifications)
    form = FormEditController(endpoints, signed_in.session, signed_in.notifications, list_controller=items)
    return items, form


def test_create_submits_draft_fields_once_and_closes_draft(signed_in) -> None:
    api = signed_in.api
    api.add("GET", "/api/menu/items", (200, MENU_ITEMS))
    api.add("POST", "/api/menu/items", (201, {"success": True, "menuItem": {"id": 9, "name": "Mocha"}}))
    _, form = menu_controllers(signed_in)

    draft = form.open()
    assert draft.is_edit is False
    form.set_field("name", "Mocha")
    form.set_field("category", "coffee")
    form.set_field("price", "5.25")
    form.set_field("pointsEarned", "abc")
    result = form.submit()

    assert result.ok
    assert result.value == {"id": 9, "name": "Mocha"}
    assert form.draft is None
    creates = api.calls_to("POST", "/api/menu/items")
    assert len(creates) == 1
    assert creates[0].body == {
        "name": "Mocha",
        "description": "",
        "category": "coffee",
        "price": 5.25,
        "pointsEarned": 0,
        "imageUrl": None,
        "isAvailable": True,
        "sortOrder": 0,
    }
    assert len(api.calls_to("GET", "/api/menu/items")) == 1
    assert signed_in.notifications.current == Notification(NotificationKind.SUCCESS, "Menu item created successfully")


def test_missing_required_field_never_calls_gateway(signed_in) -> None:
    _, form = menu_controllers(signed_in)
    form.open()
    form.set_field("name", "Mocha")

    result = form.submit()

    assert isinstance(result.error, ClientValidationError)
    assert result.error.field_errors == {"category": "Category is required."}
    assert form.is_open
    assert form.draft.field_errors == {"category": "Category is required."}
    assert len(signed_in.api.calls) == 1
    assert signed_in.notifications.current is None


def test_edit_mode_updates_existing_entity(signed_in) -> None:
    api = signed_in.api
    api.add("GET", "/api/admin/users", (200, {"users": [], "pagination": {"currentPage": 1, "totalPages": 1, "totalUsers": 0}}))
    api.add("PUT", "/api/admin/users/12", (200, {"success": True, "message": "User updated successfully"}))
    endpoints = users_resource(signed_in.http)
    users = EntityListController(endpoints, signed_in.session, signed_in.notifications)
    form = FormEditController(endpoints, signed_in.session, signed_in.notifications, list_controller=users)

    draft = form.open({"id": 12, "firstName": "Ana", "lastName": "Diaz", "email": "ana@cafe.test", "createdAt": "x"})
    form.set_field("lastName", "Díaz")
    result = form.submit()

    assert draft.is_edit is True
    assert result.ok
    body = api.calls_to("PUT", "/api/admin/users/12")[0].body
    assert body["lastName"] == "Díaz"
    assert "id" not in body and "createdAt" not in body
    assert signed_in.notifications.current.text == "User updated successfully"
    assert len(api.calls_to("GET", "/api/admin/users")) == 1


def test_server_rejection_keeps_draft_and_maps_field_errors(signed_in) -> None:
    api = signed_in.api
    api.add(
        "POST",
        "/api/menu/items",
        (400, {"success": False, "message": "Validation failed", "errors": [{"field": "name", "message": "Name taken"}]}),
    )
    _, form = menu_controllers(signed_in)
    form.open({"name": "Latte", "category": "coffee"})

    result = form.submit()

    assert isinstance(result.error, ServerValidationError)
    assert form.is_open
    assert form.draft.field_errors == {"name": "Name taken"}
    assert signed_in.notifications.current == Notification(NotificationKind.ERROR, "Validation failed")
    assert api.calls_to("GET", "/api/menu/items") == []


def test_reopen_replaces_draft_and_cancel_discards(signed_in) -> None:
    _, form = menu_controllers(signed_in)
    first = form.open()
    form.set_field("name", "Draft one")

    second = form.open({"id": 3, "name": "Latte", "category": "coffee"})
    assert form.draft is second
    assert first is not second
    assert second.values["name"] == "Latte"

    form.cancel()
    assert form.draft is None
    with pytest.raises(RuntimeError):
        form.submit()


def test_point_tier_update_upserts_by_tier_level(signed_in) -> None:
    api = signed_in.api
    api.add("POST", "/api/point-tiers", (200, {"success": True, "tier": {"tierLevel": 2, "name": "Gold"}}))
    form = FormEditController(point_tiers_resource(signed_in.http), signed_in.session, signed_in.notifications)

    form.open({"tierLevel": 2, "name": "Silver", "pointsRequired": 500})
    form.set_field("name", "Gold")
    result = form.submit()

    assert result.value == {"tierLevel": 2, "name": "Gold"}
    body = api.calls_to("POST", "/api/point-tiers")[0].body
    assert body["tierLevel"] == 2
    assert body["name"] == "Gold"
    assert signed_in.notifications.current.text == "Point tier updated successfully"


def test_singleton_business_profile_load_update_and_logo(signed_in) -> None:
    api = signed_in.api
    api.add("GET", "/api/business/info", (200, {"success": True, "business": {"id": 1, "name": "Cafe", "logoUrl": None}}))
    api.add("PUT", "/api/business/info", (200, {"success": True}))
    api.add("DELETE", "/api/business/logo", (200, {"success": True, "message": "Logo deleted"}))
    form = FormEditController(business_resource(signed_in.http), signed_in.session, signed_in.notifications, singleton=True)

    loaded = form.load()
    form.set_field("name", "Cafe Central")
    saved = form.submit()
    logo = form.run_action("delete_logo")

    assert loaded.ok
    assert saved.ok
    body = api.calls_to("PUT", "/api/business/info")[0].body
    assert body["name"] == "Cafe Central"
    assert "logoUrl" not in body
    assert logo.message == "Logo deleted"
    assert len(api.calls_to("GET", "/api/business/info")) == 2
    assert form.draft.values["name"] == "Cafe"


def test_submit_requires_authenticated_session(fake_api) -> None:
    http = fake_api.http()
    form = FormEditController(menu_items_resource(http), SessionStore(http), NotificationChannel())
    form.open({"name": "Latte", "category": "coffee"})

    result = form.submit()

    assert result.error.code == "AUTH_REQUIRED"
    assert form.is_open
    assert fake_api.calls == []
