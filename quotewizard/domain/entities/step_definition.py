from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from quotewizard.domain.entities.visibility_rule import VisibilityRule


class SelectionMode(str, Enum):
    single = "single"
    multi = "multi"
    form = "form"
    none = "none"


class ValidatorKind(str, Enum):
    text = "text"
    email = "email"
    phone = "phone"
    state = "state"
    postcode = "postcode"
    none = "none"


@dataclass(frozen=True)
class FieldDescriptor:
    id: str
    label: str = ""
    required: bool = False
    validator: ValidatorKind = ValidatorKind.none


@dataclass(frozen=True)
class StepDefinition:
    id: str
    title: str = ""
    selection_mode: SelectionMode = SelectionMode.single
    required: bool = False
    visibility_rule: VisibilityRule = None
    fields: tuple[FieldDescriptor, ...] = ()
