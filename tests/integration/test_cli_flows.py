import json

import pytest

from loyalty_admin.app.application.notifications import NotificationChannel
from loyalty_admin.app.main import AdminRuntime, main
from loyalty_admin.app.session_store import SessionStore
from loyalty_admin.clients.loyalty_sdk.config import SDKConfig
from loyalty_admin.clients.loyalty_sdk.token_store import TokenStore


@pytest.fixture
def runtime_factory(fake_api, tmp_path):
    token_path = tmp_path / "session.json"

    def build() -> AdminRuntime:
        config = SDKConfig(base_url="http://loyalty.test", token_path=str(token_path), page_size=2)
        http = fake_api.http(token_store=TokenStore(token_path))
        return AdminRuntime(config=config, http=http, session=SessionStore(http), notifications=NotificationChannel())

    return build


def run(capsys, argv, runtime):
    exit_code = main(argv, runtime=runtime)
    return exit_code, json.loads(capsys.readouterr().out)


def test_login_then_list_in_a_fresh_process(fake_api, admin, runtime_factory, capsys) -> None:
    fake_api.add("POST", "/api/auth/login", (200, {"success": True, "token": "tok-9", "admin": admin}))
    fake_api.add("GET", "/api/auth/verify", (200, {"success": True, "admin": admin}))
    fake_api.add(
        "GET",
        "/api/coupons",
        (
            200,
            {
                "success": True,
                "coupons": [{"id": 3, "title": "Spring"}, {"id": 4, "title": "Summer"}],
                "pagination": {"currentPage": 2, "totalPages": 3, "totalItems": 6, "itemsPerPage": 2},
            },
        ),
    )

    code, output = run(capsys, ["login", "--email", "owner@cafe.test", "--password", "secret"], runtime_factory())
    assert code == 0
    assert output["admin"]["email"] == "owner@cafe.test"

    code, output = run(
        capsys,
        ["list", "coupons", "--page", "2", "--search", "s", "--filter", "isActive=true"],
        runtime_factory(),
    )

    assert code == 0
    assert [row["id"] for row in output["items"]] == [3, 4]
    assert output["pagination"] == {"currentPage": 2, "totalPages": 3, "totalItems": 6, "itemsPerPage": 2}
    listing = fake_api.calls_to("GET", "/api/coupons")[0]
    assert listing.params == {"page": "2", "limit": "2", "search": "s", "isActive": "true"}
    assert listing.headers["Authorization"] == "Bearer tok-9"


def test_commands_without_a_session_report_auth_required(fake_api, runtime_factory, capsys) -> None:
    code, output = run(capsys, ["whoami"], runtime_factory())

    assert code == 1
    assert output["error"]["code"] == "AUTH_REQUIRED"
    assert output["error"]["category"] == "auth"
    assert output["error"]["action"] == "Sign in again"
    assert fake_api.calls == []


def test_failed_login_exits_non_zero(fake_api, runtime_factory, capsys) -> None:
    fake_api.add("POST", "/api/auth/login", (401, {"success": False, "message": "Invalid credentials"}))

    code, output = run(capsys, ["login", "--email", "owner@cafe.test", "--password", "bad"], runtime_factory())

    assert code == 1
    assert output["error"]["message"] == "Invalid credentials"


def test_delete_and_logout(fake_api, admin, runtime_factory, capsys) -> None:
    fake_api.add("POST", "/api/auth/login", (200, {"success": True, "token": "tok-9", "admin": admin}))
    fake_api.add("GET", "/api/auth/verify", (200, {"success": True, "admin": admin}))
    fake_api.add("DELETE", "/api/rankings/2", (200, {"success": True, "message": "Ranking deleted"}))
    fake_api.add("GET", "/api/rankings", (200, {"success": True, "rankings": [{"id": 1, "title": "Bronze"}]}))
    run(capsys, ["login", "--email", "owner@cafe.test", "--password", "secret"], runtime_factory())

    code, output = run(capsys, ["delete", "rankings", "2"], runtime_factory())
    assert code == 0
    assert output == {"message": "Ranking deleted"}
    assert len(fake_api.calls_to("GET", "/api/rankings")) == 1

    code, output = run(capsys, ["logout"], runtime_factory())
    assert code == 0
    assert output == {"status": "signed_out"}

    code, output = run(capsys, ["whoami"], runtime_factory())
    assert code == 1
    assert output["error"]["code"] == "AUTH_REQUIRED"


def test_malformed_filter_is_a_validation_error(fake_api, admin, runtime_factory, capsys) -> None:
    fake_api.add("POST", "/api/auth/login", (200, {"success": True, "token": "tok-9", "admin": admin}))
    fake_api.add("GET", "/api/auth/verify", (200, {"success": True, "admin": admin}))
    run(capsys, ["login", "--email", "owner@cafe.test", "--password", "secret"], runtime_factory())

    code, output = run(capsys, ["list", "users", "--filter", "status"], runtime_factory())

    assert code == 1
    assert output["error"]["category"] == "validation"
    assert "filter" in output["error"]["field_errors"]
    assert fake_api.calls_to("GET", "/api/admin/users") == []


def signed_in_runtime(fake_api, admin, runtime_factory, capsys) -> None:
    fake_api.add("POST", "/api/auth/login", (200, {"success": True, "token": "tok-9", "admin": admin}))
    fake_api.add("GET", "/api/auth/verify", (200, {"success": True, "admin": admin}))
    run(capsys, ["login", "--email", "owner@cafe.test", "--password", "secret"], runtime_factory())


def test_toggle_finds_unavailable_menu_item_beyond_first_page(fake_api, admin, runtime_factory, capsys) -> None:
    signed_in_runtime(fake_api, admin, runtime_factory, capsys)
    items = [{"id": index, "name": f"Item {index}", "isAvailable": index != 5} for index in range(1, 6)]
    fake_api.add("GET", "/api/menu/items", (200, {"success": True, "menuItems": items}))
    fake_api.add("PUT", "/api/menu/items/5", (200, {"success": True}))

    code, output = run(capsys, ["toggle", "menu", "5"], runtime_factory())

    assert code == 0
    assert output == {"message": "Menu item activated successfully"}
    assert fake_api.calls_to("PUT", "/api/menu/items/5")[0].body == {"isAvailable": True}


def test_toggle_unknown_row_reports_not_found_without_writing(fake_api, admin, runtime_factory, capsys) -> None:
    signed_in_runtime(fake_api, admin, runtime_factory, capsys)
    items = [{"id": index, "name": f"Item {index}", "isAvailable": True} for index in range(1, 4)]
    fake_api.add("GET", "/api/menu/items", (200, {"success": True, "menuItems": items}))

    code, output = run(capsys, ["toggle", "menu", "99"], runtime_factory())

    assert code == 1
    assert output["error"]["code"] == "NOT_FOUND"
    assert output["error"]["category"] == "not_found"
    assert [call for call in fake_api.calls if call.method == "PUT"] == []


def test_text_format_renders_table_and_error_banner(fake_api, admin, runtime_factory, capsys) -> None:
    signed_in_runtime(fake_api, admin, runtime_factory, capsys)
    fake_api.add(
        "GET",
        "/api/admin/users",
        (
            200,
            {
                "users": [{"id": 1, "email": "ana@cafe.test", "password": "hash", "phoneNumber": None}],
                "pagination": {"currentPage": 1, "totalPages": 1, "totalUsers": 1},
            },
        ),
    )

    assert main(["--format", "text", "list", "users"], runtime=runtime_factory()) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "id | email | password | phoneNumber",
        "1 | ana@cafe.test | — | —",
        "page 1/1 (1 items)",
    ]

    runtime_factory().session.logout()
    assert main(["--format", "text", "whoami"], runtime=runtime_factory()) == 1
    banner = capsys.readouterr().out.strip()
    assert banner.startswith("[ERROR] code=AUTH_REQUIRED")
    assert "action=Sign in again" in banner
