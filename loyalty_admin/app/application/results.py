from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from loyalty_admin.clients.loyalty_sdk.errors import ApiError

T = TypeVar("T")


@dataclass(frozen=True)
class ControllerResult(Generic[T]):
    ok: bool
    value: T | None = None
    error: ApiError | None = None
    message: str = ""
    stale: bool = False

    @classmethod
    def success(cls, value: T | None = None, message: str = "") -> "ControllerResult[T]":
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, error: ApiError, message: str = "") -> "ControllerResult[T]":
        return cls(ok=False, error=error, message=message or error.message)

    @classmethod
    def discarded(cls, value: T | None = None) -> "ControllerResult[T]":
        return cls(ok=True, value=value, message="superseded by a newer request", stale=True)


class MutationKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    TOGGLE_STATUS = "toggle_status"
    BULK_UPDATE = "bulk_update"


@dataclass(frozen=True)
class Mutation:
    kind: MutationKind
    entity_id: Any = None
    payload: dict[str, Any] = field(default_factory=dict)
    entity: dict[str, Any] | None = None
    entity_ids: tuple[Any, ...] = ()

    @classmethod
    def create(cls, payload: dict[str, Any]) -> "Mutation":
        return cls(MutationKind.CREATE, payload=dict(payload))

    @classmethod
    def update(cls, entity_id: Any, payload: dict[str, Any]) -> "Mutation":
        return cls(MutationKind.UPDATE, entity_id=entity_id, payload=dict(payload))

    @classmethod
    def delete(cls, entity_id: Any) -> "Mutation":
        return cls(MutationKind.DELETE, entity_id=entity_id)

    @classmethod
    def toggle_status(cls, entity: dict[str, Any], id_field: str = "id") -> "Mutation":
        return cls(MutationKind.TOGGLE_STATUS, entity_id=entity.get(id_field), entity=dict(entity))

    @classmethod
    def bulk_update(cls, entity_ids: list[Any], payload: dict[str, Any]) -> "Mutation":
        return cls(MutationKind.BULK_UPDATE, payload=dict(payload), entity_ids=tuple(entity_ids))
