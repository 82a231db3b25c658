from __future__ import annotations

import math
from typing import Any

from loyalty_admin.clients.loyalty_sdk.models import Page

_ROW_KEYS = ("items", "data", "rows")
_TOTAL_KEYS = ("totalItems", "totalRecords", "totalUsers", "totalTransactions", "total")


def normalize_listing(
    payload: Any,
    *,
    rows_key: str | None = None,
    page: int = 1,
    page_size: int = 20,
) -> Page:
    """Build a ``Page`` from any of the list payload shapes the API returns."""
    safe_page = max(1, _to_int(page) or 1)
    safe_page_size = max(1, _to_int(page_size) or 20)

    rows = _extract_rows(payload, rows_key)
    pagination = _extract_pagination(payload)

    if not isinstance(pagination, dict):
        total = len(rows)
        return Page(
            items=rows,
            current_page=1,
            total_pages=1,
            total_items=total,
            items_per_page=max(safe_page_size, total, 1),
        )

    current_page = _to_int(pagination.get("currentPage")) or safe_page
    items_per_page = _to_int(pagination.get("itemsPerPage")) or _to_int(pagination.get("limit")) or safe_page_size
    items_per_page = max(1, items_per_page, len(rows))

    total_items: int | None = None
    for key in _TOTAL_KEYS:
        total_items = _to_int(pagination.get(key))
        if total_items is not None:
            break
    if total_items is None:
        total_items = (current_page - 1) * items_per_page + len(rows)

    total_pages = _to_int(pagination.get("totalPages"))
    if total_pages is None:
        total_pages = math.ceil(total_items / items_per_page) if total_items else 1
    total_pages = max(1, total_pages)

    return Page(
        items=rows,
        current_page=min(max(1, current_page), total_pages),
        total_pages=total_pages,
        total_items=max(0, total_items),
        items_per_page=items_per_page,
    )


def _extract_rows(payload: Any, rows_key: str | None) -> list[dict[str, Any]]:
    if isinstance(payload, list):
        return [row for row in payload if isinstance(row, dict)]
    if not isinstance(payload, dict):
        return []

    keys = (rows_key, *_ROW_KEYS) if rows_key else _ROW_KEYS
    for key in keys:
        value = payload.get(key)
        if isinstance(value, list):
            return [row for row in value if isinstance(row, dict)]
        if isinstance(value, dict) and rows_key and key == "data":
            nested = value.get(rows_key)
            if isinstance(nested, list):
                return [row for row in nested if isinstance(row, dict)]
    return []


def _to_int(value: Any) -> int | None:
    try:
        if value is None or value == "" or isinstance(value, bool):
            return None
        return int(value)
    except (TypeError, ValueError):
        return None


def _extract_pagination(payload: Any) -> dict[str, Any] | None:
    if not isinstance(payload, dict):
        return None
    pagination = payload.get("pagination")
    if isinstance(pagination, dict):
        return pagination
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("pagination"), dict):
        return data["pagination"]
    return None
