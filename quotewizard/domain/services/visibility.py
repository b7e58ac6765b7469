from __future__ import annotations

import logging
from typing import Any, Callable

from quotewizard.domain.entities.visibility_rule import (
    AllOf,
    AnyOf,
    MalformedRule,
    Requirement,
    Requires,
    VisibilityRule,
)

logger = logging.getLogger(__name__)


def parse_visibility_rule(raw: Any) -> VisibilityRule:
    """
    Parse an authored `visibleWhen` block.

    Shapes that cannot be understood become MalformedRule, which always
    evaluates as visible so an authoring mistake never locks a step.
    """
    if raw is None:
        return None
    if not isinstance(raw, dict):
        return _malformed(raw)

    if "requires" in raw:
        requirement = _parse_requirement(raw["requires"])
        if requirement is None:
            return _malformed(raw)
        return Requires(requirement)

    for key, rule_type in (("anyOf", AnyOf), ("allOf", AllOf)):
        if key in raw:
            items = raw[key]
            if not isinstance(items, list):
                return _malformed(raw)
            requirements = [_parse_requirement(item) for item in items]
            if any(r is None for r in requirements):
                return _malformed(raw)
            return rule_type(tuple(requirements))

    return _malformed(raw)


def _parse_requirement(raw: Any) -> Requirement | None:
    if not isinstance(raw, dict):
        return None
    step_id = raw.get("stepId") or raw.get("step_id")
    if not step_id or not isinstance(step_id, str):
        return None
    equals = raw.get("equals")
    return Requirement(step_id=step_id, equals=str(equals) if equals is not None else None)


def _malformed(raw: Any) -> MalformedRule:
    logger.warning("Malformed visibility rule treated as always visible", extra={"reason": repr(raw)})
    return MalformedRule(raw)


def requirement_holds(requirement: Requirement, selected_ids: Callable[[str], list[str]]) -> bool:
    ids = selected_ids(requirement.step_id)
    if not ids:
        return False
    if requirement.equals is None:
        return True
    return requirement.equals in ids


def is_visible(rule: VisibilityRule, selected_ids: Callable[[str], list[str]]) -> bool:
    if rule is None:
        return True
    if isinstance(rule, Requires):
        return requirement_holds(rule.requirement, selected_ids)
    if isinstance(rule, AnyOf):
        return any(requirement_holds(r, selected_ids) for r in rule.requirements)
    if isinstance(rule, AllOf):
        return all(requirement_holds(r, selected_ids) for r in rule.requirements)
    # MalformedRule and anything unexpected: fail open
    return True
