from __future__ import annotations

import argparse
import getpass
import json
from dataclasses import dataclass
from typing import Any

import httpx

from loyalty_admin.app.application.list_controller import EntityListController
from loyalty_admin.app.application.notifications import NotificationChannel
from loyalty_admin.app.application.results import ControllerResult, Mutation
from loyalty_admin.app.domain.models.query_state import QueryState
from loyalty_admin.app.error_presenter import build_error_payload, format_error_banner
from loyalty_admin.app.resources import LIST_RESOURCES, build_resource
from loyalty_admin.app.session_store import SessionStore
from loyalty_admin.app.ui.listing_view import sanitize_row
from loyalty_admin.clients.loyalty_sdk.config import SDKConfig
from loyalty_admin.clients.loyalty_sdk.errors import ApiError, ClientValidationError, NotFoundError, auth_required_error
from loyalty_admin.clients.loyalty_sdk.http_client import HttpClient
from loyalty_admin.clients.loyalty_sdk.token_store import TokenStore


@dataclass
class AdminRuntime:
    config: SDKConfig
    http: HttpClient
    session: SessionStore
    notifications: NotificationChannel

    def list_controller(self, resource: str, query: QueryState | None = None) -> EntityListController:
        return EntityListController(
            build_resource(resource, self.http),
            self.session,
            self.notifications,
            page_size=self.config.page_size,
            query=query,
        )


def build_runtime(env_file: str | None = ".env", client: httpx.Client | None = None) -> AdminRuntime:
    config = SDKConfig.from_env(env_file)
    http = HttpClient(config=config, token_store=TokenStore(config.token_path), client=client)
    return AdminRuntime(config=config, http=http, session=SessionStore(http), notifications=NotificationChannel())


def cmd_login(runtime: AdminRuntime, args: argparse.Namespace) -> dict[str, Any]:
    password = args.password if args.password is not None else getpass.getpass("Password: ")
    if not runtime.session.login(args.email, password):
        raise runtime.session.last_error or auth_required_error()
    identity = runtime.session.identity
    return {"admin": identity.model_dump() if identity else None}


def cmd_logout(runtime: AdminRuntime, args: argparse.Namespace) -> dict[str, Any]:
    runtime.session.logout()
    return {"status": "signed_out"}


def cmd_whoami(runtime: AdminRuntime, args: argparse.Namespace) -> dict[str, Any]:
    _require_session(runtime)
    identity = runtime.session.identity
    return {"admin": identity.model_dump() if identity else None}


def cmd_list(runtime: AdminRuntime, args: argparse.Namespace) -> dict[str, Any]:
    _require_session(runtime)
    changes: dict[str, Any] = {"search": args.search or "", "filters": _parse_filters(args.filter)}
    if args.sort_by:
        changes["sort_by"] = args.sort_by
        changes["sort_order"] = args.sort_order
    query = QueryState().merge(**changes).merge(page=args.page)
    controller = runtime.list_controller(args.resource, query)
    page = _unwrap(controller.reload())
    return {
        "items": page.items,
        "pagination": {
            "currentPage": page.current_page,
            "totalPages": page.total_pages,
            "totalItems": page.total_items,
            "itemsPerPage": page.items_per_page,
        },
    }


def cmd_delete(runtime: AdminRuntime, args: argparse.Namespace) -> dict[str, Any]:
    _require_session(runtime)
    controller = runtime.list_controller(args.resource)
    result = _unwrap_result(controller.mutate(Mutation.delete(args.id)))
    return {"message": result.message}


def cmd_toggle(runtime: AdminRuntime, args: argparse.Namespace) -> dict[str, Any]:
    _require_session(runtime)
    controller = runtime.list_controller(args.resource)
    entity = _find_entity(controller, args.id)
    result = _unwrap_result(controller.mutate(Mutation.toggle_status(entity, controller.endpoints.id_field)))
    return {"message": result.message}


def _require_session(runtime: AdminRuntime) -> None:
    if not runtime.session.initialize():
        raise auth_required_error()


def _find_entity(controller: EntityListController, entity_id: str) -> dict[str, Any]:
    endpoints = controller.endpoints
    if endpoints.fetch_one is not None:
        entity = endpoints.extract_entity(endpoints.fetch_one(entity_id))
        if isinstance(entity, dict):
            return entity
    page = _unwrap(controller.reload())
    while True:
        for row in page.items:
            if str(row.get(endpoints.id_field)) == str(entity_id):
                return row
        if not page.has_next:
            break
        previous = page.current_page
        page = _unwrap(controller.next_page())
        if page.current_page <= previous:
            break
    raise NotFoundError(
        code="NOT_FOUND",
        message=f"{endpoints.label} {entity_id} not found",
        status_code=404,
    )


def _parse_filters(raw_filters: list[str] | None) -> dict[str, str]:
    filters: dict[str, str] = {}
    for item in raw_filters or []:
        key, separator, value = item.partition("=")
        if not separator or not key.strip():
            raise ClientValidationError.from_field_errors({"filter": f"Expected key=value, got {item!r}"})
        filters[key.strip()] = value.strip()
    return filters


def _unwrap(result: ControllerResult[Any]) -> Any:
    return _unwrap_result(result).value


def _unwrap_result(result: ControllerResult[Any]) -> ControllerResult[Any]:
    if not result.ok and result.error is not None:
        raise result.error
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="loyalty-admin", description="Loyalty program admin console")
    parser.add_argument("--env-file", default=".env")
    parser.add_argument("--format", choices=("json", "text"), default="json")
    subparsers = parser.add_subparsers(dest="command", required=True)

    login_parser = subparsers.add_parser("login")
    login_parser.add_argument("--email", required=True)
    login_parser.add_argument("--password", default=None)
    login_parser.set_defaults(func=cmd_login)

    logout_parser = subparsers.add_parser("logout")
    logout_parser.set_defaults(func=cmd_logout)

    whoami_parser = subparsers.add_parser("whoami")
    whoami_parser.set_defaults(func=cmd_whoami)

    list_parser = subparsers.add_parser("list")
    list_parser.add_argument("resource", choices=LIST_RESOURCES)
    list_parser.add_argument("--search", default="")
    list_parser.add_argument("--page", type=int, default=1)
    list_parser.add_argument("--filter", action="append", metavar="KEY=VALUE")
    list_parser.add_argument("--sort-by", default=None)
    list_parser.add_argument("--sort-order", choices=("asc", "desc"), default="desc")
    list_parser.set_defaults(func=cmd_list)

    delete_parser = subparsers.add_parser("delete")
    delete_parser.add_argument("resource", choices=LIST_RESOURCES)
    delete_parser.add_argument("id")
    delete_parser.set_defaults(func=cmd_delete)

    toggle_parser = subparsers.add_parser("toggle")
    toggle_parser.add_argument("resource", choices=LIST_RESOURCES)
    toggle_parser.add_argument("id")
    toggle_parser.set_defaults(func=cmd_toggle)
    return parser


def _render_text(output: dict[str, Any]) -> str:
    if "items" in output:
        rows = output["items"]
        headers = list(dict.fromkeys(key for row in rows for key in row))
        lines = [" | ".join(headers)] if headers else []
        lines.extend(" | ".join(sanitize_row(row, headers).values()) for row in rows)
        pagination = output["pagination"]
        lines.append(
            f"page {pagination['currentPage']}/{pagination['totalPages']} ({pagination['totalItems']} items)"
        )
        return "\n".join(lines)
    if output.get("admin"):
        admin = output["admin"]
        return f"{admin.get('email')} (id={admin.get('id')})"
    return str(output.get("message") or output.get("status") or "")


def main(argv: list[str] | None = None, runtime: AdminRuntime | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        active_runtime = runtime or build_runtime(args.env_file)
        output = args.func(active_runtime, args)
    except (ApiError, ValueError) as exc:
        payload = build_error_payload(exc)
        if args.format == "text":
            print(format_error_banner(payload))
        else:
            print(json.dumps({"error": payload}, indent=2, default=str))
        return 1
    if args.format == "text":
        print(_render_text(output))
    else:
        print(json.dumps(output, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
