from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict


class AdminProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | int
    email: str
    firstName: str | None = None
    lastName: str | None = None
    isActive: bool = True
    lastLogin: str | None = None

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.firstName, self.lastName) if part)
        return name or self.email


class LoginResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool = False
    token: str | None = None
    admin: AdminProfile | None = None
    message: str | None = None


class VerifyResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool = False
    admin: AdminProfile | None = None


@dataclass(frozen=True)
class Page:
    """One server snapshot of a collection. Never patched in place."""

    items: list[dict[str, Any]] = field(default_factory=list)
    current_page: int = 1
    total_pages: int = 1
    total_items: int = 0
    items_per_page: int = 20

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1

    @property
    def is_empty(self) -> bool:
        return not self.items

    def ids(self, id_field: str = "id") -> list[Any]:
        return [row.get(id_field) for row in self.items]

    @classmethod
    def empty(cls, items_per_page: int = 20) -> "Page":
        return cls(items=[], current_page=1, total_pages=1, total_items=0, items_per_page=max(1, items_per_page))
