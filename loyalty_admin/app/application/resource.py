from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from loyalty_admin.app.domain.models.query_state import QueryState
from loyalty_admin.app.ui.forms import FormSpec
from loyalty_admin.clients.loyalty_sdk.models import Page

ListPage = Callable[[QueryState, int], Page]
Payload = dict[str, Any]


@dataclass(frozen=True)
class ResourceEndpoints:
    """Caller-supplied gateway calls for one entity type.

    Controllers stay generic: they only know these callables, the labels used
    in notifications and where the entity sits inside a mutation response.
    """

    name: str
    label: str
    plural: str
    list_page: ListPage | None = None
    fetch_one: Callable[[Any], Payload] | None = None
    create: Callable[[Payload], Payload] | None = None
    update: Callable[[Any, Payload], Payload] | None = None
    delete: Callable[[Any], Payload] | None = None
    toggle_status: Callable[[Payload], Payload] | None = None
    bulk_update: Callable[[list[Any], Payload], Payload] | None = None
    actions: dict[str, Callable[..., Payload]] = field(default_factory=dict)
    form: FormSpec | None = None
    id_field: str = "id"
    status_field: str = "isActive"
    entity_key: str | None = None

    def extract_entity(self, response: Payload) -> Any:
        if self.entity_key and isinstance(response, dict) and self.entity_key in response:
            return response[self.entity_key]
        return response
