from __future__ import annotations

import threading
from collections.abc import Callable
from time import perf_counter
from typing import Any

from loyalty_admin.app.application.notifications import NotificationChannel
from loyalty_admin.app.application.resource import ResourceEndpoints
from loyalty_admin.app.application.results import ControllerResult, Mutation, MutationKind
from loyalty_admin.app.domain.models.query_state import QueryState
from loyalty_admin.app.infrastructure.logging.logger import get_logger, log_action
from loyalty_admin.app.session_store import SessionStore
from loyalty_admin.clients.loyalty_sdk.errors import ApiError, AuthError
from loyalty_admin.clients.loyalty_sdk.models import Page

logger = get_logger("loyalty_admin.list")

_BULK_VERBS = {"activate": "activated", "deactivate": "deactivated", "delete": "deleted"}


class EntityListController:
    """Keeps one entity list in step with the server.

    Every write is followed by a full reload; the visible ``Page`` is only
    ever replaced wholesale. Reloads carry a sequence number and any response
    older than the newest applied one, or issued for a query that has since
    changed, is discarded.
    """

    def __init__(
        self,
        endpoints: ResourceEndpoints,
        session: SessionStore,
        notifications: NotificationChannel,
        *,
        page_size: int = 20,
        query: QueryState | None = None,
    ) -> None:
        if endpoints.list_page is None:
            raise ValueError(f"{endpoints.name} has no list endpoint")
        self.endpoints = endpoints
        self.session = session
        self.notifications = notifications
        self.page_size = max(1, page_size)
        self._query = query or QueryState()
        self._page = Page.empty(self.page_size)
        self._last_error: ApiError | None = None
        self._seq = 0
        self._applied_seq = 0
        self._pending = 0
        self._busy_rows: set[Any] = set()
        self._disposed = False
        self._lock = threading.Lock()

    @property
    def page(self) -> Page:
        return self._page

    @property
    def query(self) -> QueryState:
        return self._query

    @property
    def loading(self) -> bool:
        return self._pending > 0

    @property
    def last_error(self) -> ApiError | None:
        return self._last_error

    def is_busy(self, row_id: Any) -> bool:
        return row_id in self._busy_rows

    def dispose(self) -> None:
        with self._lock:
            self._disposed = True

    def set_query(self, **changes: Any) -> ControllerResult[Page]:
        with self._lock:
            self._query = self._query.merge(**changes)
        return self.reload()

    def go_to_page(self, page: int) -> ControllerResult[Page]:
        return self.set_query(page=page)

    def next_page(self) -> ControllerResult[Page]:
        if not self._page.has_next:
            return ControllerResult.success(self._page)
        return self.go_to_page(self._page.current_page + 1)

    def prev_page(self) -> ControllerResult[Page]:
        if not self._page.has_prev:
            return ControllerResult.success(self._page)
        return self.go_to_page(self._page.current_page - 1)

    def reload(self) -> ControllerResult[Page]:
        return self._reload(correct_page=True)

    def mutate(self, mutation: Mutation) -> ControllerResult[dict[str, Any]]:
        call, row_ids, success_text, failure_text = self._plan(mutation)
        return self._run_write(mutation.kind.value, call, row_ids, success_text, failure_text)

    def run_action(
        self,
        name: str,
        *args: Any,
        row_id: Any = None,
        success_text: str | None = None,
        **kwargs: Any,
    ) -> ControllerResult[dict[str, Any]]:
        """Call one of the resource's extra write endpoints, then reload like ``mutate``."""
        action = self.endpoints.actions.get(name)
        if action is None:
            raise ValueError(f"{self.endpoints.name} has no action {name!r}")
        readable = name.replace("_", " ")
        return self._run_write(
            name,
            lambda: action(*args, **kwargs),
            (row_id,) if row_id is not None else (),
            success_text or f"{readable.capitalize()} completed successfully",
            f"Failed to {readable}",
        )

    def _reload(self, correct_page: bool) -> ControllerResult[Page]:
        try:
            self.session.require_authenticated()
        except AuthError as error:
            self._last_error = error
            return ControllerResult.failure(error)

        with self._lock:
            if self._disposed:
                return ControllerResult.discarded(self._page)
            self._seq += 1
            seq = self._seq
            self._pending += 1
            query = self._query

        started = perf_counter()
        try:
            page = self.endpoints.list_page(query, self.page_size)
        except ApiError as error:
            with self._lock:
                self._pending -= 1
                stale = self._is_stale(seq, query)
                if not stale:
                    self._last_error = error
            if stale:
                return ControllerResult.discarded(self._page)
            text = error.user_message(f"Failed to load {self.endpoints.plural}")
            self.notifications.error(text)
            self._log("reload", "error", started, code=error.code, page=query.page)
            return ControllerResult.failure(error, text)

        with self._lock:
            self._pending -= 1
            stale = self._is_stale(seq, query)
            past_last_page = correct_page and page.is_empty and query.page > 1 and query.page > page.total_pages
            if not stale and past_last_page:
                self._query = query.merge(page=page.total_pages)
            elif not stale:
                self._applied_seq = seq
                self._page = page
                self._last_error = None

        if stale:
            return ControllerResult.discarded(page)
        if past_last_page:
            return self._reload(correct_page=False)
        self._log("reload", "success", started, page=page.current_page, items=len(page.items))
        return ControllerResult.success(page)

    def _is_stale(self, seq: int, query: QueryState) -> bool:
        return self._disposed or seq < self._applied_seq or query != self._query

    def _run_write(
        self,
        action: str,
        call: Callable[[], dict[str, Any]],
        row_ids: tuple[Any, ...],
        success_text: str,
        failure_text: str,
    ) -> ControllerResult[dict[str, Any]]:
        try:
            self.session.require_authenticated()
        except AuthError as error:
            self._last_error = error
            return ControllerResult.failure(error)

        with self._lock:
            self._busy_rows.update(row_ids)
        started = perf_counter()
        try:
            response = call()
        except ApiError as error:
            text = error.user_message(failure_text)
            self.notifications.error(text)
            self._log(action, "error", started, code=error.code, ids=list(row_ids))
            return ControllerResult.failure(error, text)
        finally:
            with self._lock:
                self._busy_rows.difference_update(row_ids)

        server_message = response.get("message") if isinstance(response, dict) else None
        text = server_message or success_text
        self.notifications.success(text)
        self._log(action, "success", started, ids=list(row_ids))
        self.reload()
        return ControllerResult.success(response, text)

    def _plan(self, mutation: Mutation) -> tuple[Callable[[], dict[str, Any]], tuple[Any, ...], str, str]:
        endpoints = self.endpoints
        label = endpoints.label
        lower = label.lower()
        kind = mutation.kind

        if kind == MutationKind.CREATE:
            create = self._require(endpoints.create, kind)
            return (
                lambda: create(dict(mutation.payload)),
                (),
                f"{label} created successfully",
                f"Failed to create {lower}",
            )
        if kind == MutationKind.UPDATE:
            update = self._require(endpoints.update, kind)
            return (
                lambda: update(mutation.entity_id, dict(mutation.payload)),
                (mutation.entity_id,),
                f"{label} updated successfully",
                f"Failed to update {lower}",
            )
        if kind == MutationKind.DELETE:
            delete = self._require(endpoints.delete, kind)
            return (
                lambda: delete(mutation.entity_id),
                (mutation.entity_id,),
                f"{label} deleted successfully",
                f"Failed to delete {lower}",
            )
        if kind == MutationKind.TOGGLE_STATUS:
            toggle = self._require(endpoints.toggle_status, kind)
            entity = dict(mutation.entity or {endpoints.id_field: mutation.entity_id})
            verb = "deactivated" if entity.get(endpoints.status_field, True) else "activated"
            return (
                lambda: toggle(entity),
                (mutation.entity_id,),
                f"{label} {verb} successfully",
                f"Failed to update {lower} status",
            )

        bulk_update = self._require(endpoints.bulk_update, kind)
        ids = list(mutation.entity_ids)
        verb = _BULK_VERBS.get(str(mutation.payload.get("action", "")), "updated")
        return (
            lambda: bulk_update(ids, dict(mutation.payload)),
            tuple(ids),
            f"{len(ids)} {endpoints.plural} {verb} successfully",
            f"Failed to update {endpoints.plural}",
        )

    def _require(self, call: Callable[..., dict[str, Any]] | None, kind: MutationKind) -> Callable[..., dict[str, Any]]:
        if call is None:
            raise ValueError(f"{self.endpoints.name} does not support {kind.value}")
        return call

    def _log(self, action: str, outcome: str, started: float, **extra: object) -> None:
        identity = self.session.identity
        log_action(
            logger,
            module=self.endpoints.name,
            action=action,
            outcome=outcome,
            admin_id=identity.id if identity else None,
            duration_ms=int((perf_counter() - started) * 1000),
            **extra,
        )
