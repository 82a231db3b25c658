from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from loyalty_admin.app.domain.models.query_state import QueryState, SortOrder
from loyalty_admin.clients.loyalty_sdk.models import Page

EMPTY_VALUE = "—"
SENSITIVE_KEYS = {"token", "password", "authorization"}


def sort_rows(rows: list[dict[str, Any]], sort_by: str | None, sort_order: SortOrder = SortOrder.ASC) -> list[dict[str, Any]]:
    if not sort_by:
        return list(rows)

    def _sort_key(row: dict[str, Any]) -> tuple[int, int, float, str]:
        raw = row.get(sort_by)
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return (0, 0, float(raw), "")
        value = normalize_value(raw)
        return (1 if value == EMPTY_VALUE else 0, 1, 0.0, value.lower())

    return sorted(rows, key=_sort_key, reverse=SortOrder(sort_order) == SortOrder.DESC)


def apply_local_query(
    rows: list[dict[str, Any]],
    query: QueryState,
    *,
    page_size: int,
    search_fields: tuple[str, ...] = (),
) -> Page:
    """Search, filter, sort and slice an unpaginated collection into a ``Page``."""
    needle = query.search.lower()
    selected = [
        row
        for row in rows
        if _matches_filters(row, query.filters)
        and (not needle or any(needle in normalize_value(row.get(name)).lower() for name in search_fields))
    ]
    ordered = sort_rows(selected, query.sort_by, query.sort_order)

    per_page = max(1, page_size)
    total_pages = max(1, math.ceil(len(ordered) / per_page))
    current_page = min(query.page, total_pages)
    start = (current_page - 1) * per_page
    return Page(
        items=ordered[start : start + per_page],
        current_page=current_page,
        total_pages=total_pages,
        total_items=len(ordered),
        items_per_page=per_page,
    )


def normalize_value(value: Any) -> str:
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, str):
        clean = value.strip()
        return clean or EMPTY_VALUE
    if isinstance(value, bool):
        return "ACTIVE" if value else "INACTIVE"
    if isinstance(value, datetime):
        return value.astimezone().strftime("%Y-%m-%d %H:%M:%S %z")
    return str(value)


def sanitize_row(row: dict[str, Any], headers: list[str]) -> dict[str, str]:
    sanitized: dict[str, str] = {}
    for header in headers:
        if any(token in header.lower() for token in SENSITIVE_KEYS):
            sanitized[header] = EMPTY_VALUE
            continue
        sanitized[header] = normalize_value(row.get(header))
    return sanitized


def _matches_filters(row: dict[str, Any], filters: dict[str, Any]) -> bool:
    for key, expected in filters.items():
        actual = row.get(key)
        if isinstance(actual, bool) and isinstance(expected, str):
            if expected.strip().lower() not in {"true", "false"}:
                return False
            if actual != (expected.strip().lower() == "true"):
                return False
        elif str(actual) != str(expected):
            return False
    return True
