from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from typing import Any

from loyalty_admin.clients.loyalty_sdk.config import parse_bool

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
HEX_COLOR_REGEX = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")
READ_ONLY_FIELDS = ("id", "businessId", "createdAt", "updatedAt")


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: str = "text"
    required: bool = False
    default: Any = None
    label: str | None = None
    max_length: int | None = None
    choices: tuple[Any, ...] | None = None
    pattern: re.Pattern[str] | None = None
    email: bool = False
    nullable: bool = False

    @property
    def display_label(self) -> str:
        if self.label:
            return self.label
        spaced = re.sub(r"(?<!^)(?=[A-Z])", " ", self.name)
        return spaced[:1].upper() + spaced[1:].lower()


@dataclass(frozen=True)
class FormSpec:
    fields: tuple[FieldSpec, ...]
    read_only: tuple[str, ...] = READ_ONLY_FIELDS

    def empty_template(self) -> dict[str, Any]:
        return {spec.name: copy.deepcopy(spec.default) for spec in self.fields}

    def field(self, name: str) -> FieldSpec | None:
        return next((spec for spec in self.fields if spec.name == name), None)


@dataclass
class FormResult:
    values: dict[str, Any]
    field_errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return len(self.field_errors) == 0


def coerce_number(value: Any, kind: str = "int") -> int | float:
    """Parse a numeric form value, falling back to 0 when it does not parse."""
    if isinstance(value, bool):
        return int(value)
    try:
        if kind == "int":
            return int(float(str(value).strip()))
        return float(str(value).strip())
    except (TypeError, ValueError):
        return 0


def validate_draft(spec: FormSpec, values: dict[str, Any]) -> FormResult:
    cleaned = {key: value for key, value in values.items() if key not in spec.read_only}
    field_errors: dict[str, str] = {}

    for field_spec in spec.fields:
        raw = values.get(field_spec.name, field_spec.default)
        label = field_spec.display_label

        if field_spec.kind in {"int", "float"}:
            if raw in (None, "") and field_spec.nullable:
                cleaned[field_spec.name] = None
                continue
            number = coerce_number(raw, field_spec.kind)
            if field_spec.nullable and number == 0:
                cleaned[field_spec.name] = None
                continue
            cleaned[field_spec.name] = number
            if field_spec.choices and number not in field_spec.choices:
                field_errors[field_spec.name] = f"{label} has an unsupported value."
            continue

        if field_spec.kind == "bool":
            cleaned[field_spec.name] = parse_bool(raw, default=bool(field_spec.default))
            continue

        if field_spec.kind != "text":
            if field_spec.required and raw in (None, "", [], {}):
                field_errors[field_spec.name] = f"{label} is required."
            cleaned[field_spec.name] = raw
            continue

        text = "" if raw is None else str(raw).strip()
        if not text:
            if field_spec.required:
                field_errors[field_spec.name] = f"{label} is required."
            cleaned[field_spec.name] = None if field_spec.nullable else text
            continue
        if field_spec.max_length and len(text) > field_spec.max_length:
            field_errors[field_spec.name] = f"{label} cannot exceed {field_spec.max_length} characters."
        elif field_spec.email and not EMAIL_REGEX.match(text):
            field_errors[field_spec.name] = f"{label} must be a valid email address."
        elif field_spec.pattern is not None and not field_spec.pattern.match(text):
            field_errors[field_spec.name] = f"{label} has an invalid format."
        elif field_spec.choices and text not in field_spec.choices:
            field_errors[field_spec.name] = f"{label} must be one of: {', '.join(map(str, field_spec.choices))}."
        cleaned[field_spec.name] = text

    return FormResult(values=cleaned, field_errors=field_errors)


def map_api_validation_errors(error_details: Any) -> dict[str, str]:
    if not error_details:
        return {}

    mapped: dict[str, str] = {}
    if isinstance(error_details, dict):
        if isinstance(error_details.get("errors"), dict):
            for key, value in error_details["errors"].items():
                mapped[str(key)] = str(value)
        for key, value in error_details.items():
            if key == "errors":
                continue
            if isinstance(value, str):
                mapped[str(key)] = value
            elif isinstance(value, list) and value and isinstance(value[0], str):
                mapped[str(key)] = value[0]
    elif isinstance(error_details, list):
        for item in error_details:
            if not isinstance(item, dict):
                continue
            field_name = item.get("field") or item.get("path") or item.get("param")
            message = item.get("message") or item.get("msg")
            if field_name and message:
                mapped[str(field_name)] = str(message)
    return mapped
