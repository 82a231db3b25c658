from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


QUERY_FIELDS = ("search", "filters", "sort_by", "sort_order", "page")


@dataclass(frozen=True)
class QueryState:
    search: str = ""
    filters: dict[str, Any] = field(default_factory=dict)
    sort_by: str | None = None
    sort_order: SortOrder = SortOrder.DESC
    page: int = 1

    def merge(self, **changes: Any) -> "QueryState":
        """Return a new state with ``changes`` applied.

        ``page`` falls back to 1 whenever anything other than ``page`` changes.
        """
        unknown = set(changes) - set(QUERY_FIELDS)
        if unknown:
            raise ValueError(f"Unknown query fields: {', '.join(sorted(unknown))}")

        if "filters" in changes:
            merged_filters = dict(self.filters)
            merged_filters.update(changes["filters"] or {})
            changes["filters"] = {key: value for key, value in merged_filters.items() if value not in (None, "")}
        if "sort_order" in changes:
            changes["sort_order"] = SortOrder(str(getattr(changes["sort_order"], "value", changes["sort_order"])).lower())
        if "search" in changes:
            changes["search"] = (changes["search"] or "").strip()

        only_page = set(changes) == {"page"}
        if not only_page:
            changes["page"] = 1
        changes["page"] = max(1, int(changes.get("page", self.page)))
        return replace(self, **changes)
