from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any

from loyalty_admin.app.application.list_controller import EntityListController
from loyalty_admin.app.application.notifications import NotificationChannel
from loyalty_admin.app.application.resource import ResourceEndpoints
from loyalty_admin.app.application.results import ControllerResult
from loyalty_admin.app.infrastructure.logging.logger import get_logger, log_action
from loyalty_admin.app.session_store import SessionStore
from loyalty_admin.app.ui.forms import FormSpec, map_api_validation_errors, validate_draft
from loyalty_admin.clients.loyalty_sdk.errors import ApiError, AuthError, ClientValidationError, ServerValidationError

logger = get_logger("loyalty_admin.form")


@dataclass
class Draft:
    values: dict[str, Any]
    entity_id: Any = None
    field_errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_edit(self) -> bool:
        return self.entity_id is not None


class FormEditController:
    """Holds at most one open ``Draft`` for an entity type and submits it."""

    def __init__(
        self,
        endpoints: ResourceEndpoints,
        session: SessionStore,
        notifications: NotificationChannel,
        *,
        list_controller: EntityListController | None = None,
        singleton: bool = False,
    ) -> None:
        if endpoints.form is None:
            raise ValueError(f"{endpoints.name} has no form definition")
        self.endpoints = endpoints
        self.session = session
        self.notifications = notifications
        self.list_controller = list_controller
        self.singleton = singleton
        self._draft: Draft | None = None
        self._submitting = False
        self._lock = threading.Lock()

    @property
    def form(self) -> FormSpec:
        return self.endpoints.form  # type: ignore[return-value]

    @property
    def draft(self) -> Draft | None:
        return self._draft

    @property
    def is_open(self) -> bool:
        return self._draft is not None

    @property
    def submitting(self) -> bool:
        return self._submitting

    def open(self, existing: dict[str, Any] | None = None) -> Draft:
        if existing is None:
            values = self.form.empty_template()
            entity_id = None
        else:
            values = {**self.form.empty_template(), **copy.deepcopy(existing)}
            entity_id = existing.get(self.endpoints.id_field)
        draft = Draft(values=values, entity_id=entity_id)
        with self._lock:
            self._draft = draft
        return draft

    def load(self, entity_id: Any = None) -> ControllerResult[Draft]:
        """Fetch the current server copy and open it as the Draft."""
        fetch_one = self.endpoints.fetch_one
        if fetch_one is None:
            raise ValueError(f"{self.endpoints.name} cannot be fetched individually")
        try:
            self.session.require_authenticated()
            response = fetch_one(entity_id)
        except AuthError as error:
            return ControllerResult.failure(error)
        except ApiError as error:
            text = error.user_message(f"Failed to load {self.endpoints.label.lower()}")
            self.notifications.error(text)
            return ControllerResult.failure(error, text)

        entity = self.endpoints.extract_entity(response) or {}
        return ControllerResult.success(self.open(entity))

    def set_field(self, name: str, value: Any) -> None:
        draft = self._draft
        if draft is None:
            raise RuntimeError("No draft is open")
        draft.values[name] = value
        draft.field_errors.pop(name, None)

    def cancel(self) -> None:
        with self._lock:
            self._draft = None

    def submit(self) -> ControllerResult[Any]:
        draft = self._draft
        if draft is None:
            raise RuntimeError("No draft is open")

        result = validate_draft(self.form, draft.values)
        if not result.is_valid:
            draft.field_errors = dict(result.field_errors)
            error = ClientValidationError.from_field_errors(result.field_errors)
            return ControllerResult.failure(error)

        try:
            self.session.require_authenticated()
        except AuthError as error:
            return ControllerResult.failure(error)

        label = self.endpoints.label
        editing = draft.is_edit or self.singleton
        verb = "updated" if editing else "created"
        started = perf_counter()
        self._submitting = True
        try:
            if editing:
                update = self.endpoints.update
                if update is None:
                    raise ValueError(f"{self.endpoints.name} does not support update")
                response = update(draft.entity_id, result.values)
            else:
                create = self.endpoints.create
                if create is None:
                    raise ValueError(f"{self.endpoints.name} does not support create")
                response = create(result.values)
        except ApiError as error:
            if isinstance(error, ServerValidationError):
                draft.field_errors = map_api_validation_errors(error.details)
            text = error.user_message(f"Failed to {'update' if editing else 'create'} {label.lower()}")
            self.notifications.error(text)
            self._log("update" if editing else "create", "error", started, code=error.code)
            return ControllerResult.failure(error, text)
        finally:
            self._submitting = False

        with self._lock:
            if self._draft is draft:
                self._draft = None
        server_message = response.get("message") if isinstance(response, dict) else None
        text = server_message or f"{label} {verb} successfully"
        self.notifications.success(text)
        self._log("update" if editing else "create", "success", started)
        if self.list_controller is not None:
            self.list_controller.reload()
        return ControllerResult.success(self.endpoints.extract_entity(response), text)

    def run_action(self, name: str, *args: Any, success_text: str | None = None, **kwargs: Any) -> ControllerResult[Any]:
        """Call an extra write endpoint of a singleton resource, then re-load it."""
        action = self.endpoints.actions.get(name)
        if action is None:
            raise ValueError(f"{self.endpoints.name} has no action {name!r}")
        readable = name.replace("_", " ")
        started = perf_counter()
        try:
            self.session.require_authenticated()
            response = action(*args, **kwargs)
        except AuthError as error:
            return ControllerResult.failure(error)
        except ApiError as error:
            text = error.user_message(f"Failed to {readable}")
            self.notifications.error(text)
            self._log(name, "error", started, code=error.code)
            return ControllerResult.failure(error, text)

        server_message = response.get("message") if isinstance(response, dict) else None
        text = server_message or success_text or f"{readable.capitalize()} completed successfully"
        self.notifications.success(text)
        self._log(name, "success", started)
        if self.singleton and self.endpoints.fetch_one is not None:
            self.load()
        return ControllerResult.success(response, text)

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
