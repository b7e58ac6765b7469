from __future__ import annotations

import re

from quotewizard.domain.entities.step_definition import FieldDescriptor, ValidatorKind

EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")
PHONE_RE = re.compile(r"^[0-9+()\s-]{6,}$")
POSTCODE_RE = re.compile(r"^[0-9A-Za-z\s-]{3,10}$")


def validate_field(field: FieldDescriptor, value: str | None) -> str:
    """Return an error message for the field value, or "" when it is acceptable."""
    trimmed = (value or "").strip()
    kind = field.validator

    if kind == ValidatorKind.email:
        if not trimmed:
            return "Enter your email address." if field.required else ""
        if not EMAIL_RE.match(trimmed):
            return "Enter a valid email address."
        return ""

    if kind == ValidatorKind.phone:
        if not trimmed:
            return "Enter your phone number." if field.required else ""
        if not PHONE_RE.match(trimmed):
            return "Enter a valid phone number."
        return ""

    if kind == ValidatorKind.state:
        if not trimmed and field.required:
            return "Select your state."
        return ""

    if kind == ValidatorKind.postcode:
        if not trimmed:
            return "Enter your postcode." if field.required else ""
        if not POSTCODE_RE.match(trimmed):
            return "Enter a valid postcode."
        return ""

    if not trimmed and field.required:
        return "This field is required."
    return ""


def validate_fields(fields: tuple[FieldDescriptor, ...] | list[FieldDescriptor], values: dict[str, str]) -> dict[str, str]:
    errors: dict[str, str] = {}
    for field in fields:
        error = validate_field(field, values.get(field.id))
        if error:
            errors[field.id] = error
    return errors


def is_form_complete(fields: tuple[FieldDescriptor, ...] | list[FieldDescriptor], values: dict[str, str]) -> bool:
    return all(not field.required or validate_field(field, values.get(field.id)) == "" for field in fields)
