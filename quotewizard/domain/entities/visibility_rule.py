from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Requirement:
    step_id: str
    equals: str | None = None


@dataclass(frozen=True)
class Requires:
    requirement: Requirement


@dataclass(frozen=True)
class AnyOf:
    requirements: tuple[Requirement, ...]


@dataclass(frozen=True)
class AllOf:
    requirements: tuple[Requirement, ...]


@dataclass(frozen=True)
class MalformedRule:
    """A rule shape that could not be understood. Evaluates as visible."""

    raw: Any


VisibilityRule = Union[Requires, AnyOf, AllOf, MalformedRule, None]
