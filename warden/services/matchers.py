"""
Pure predicates used by the evaluator. None of them raise; a pattern they do
not understand simply fails to match (or falls back to literal comparison for
subjects).
"""
from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional, Union

from ..models import RequesterAttributes
from .patterns import (
    Pattern,
    PatternKind,
    SubjectKind,
    SubjectPattern,
    parse_action,
    parse_resource,
    parse_subject,
)


def match_subject(pattern: Union[SubjectPattern, str], attrs: RequesterAttributes) -> bool:
    p = parse_subject(pattern) if isinstance(pattern, str) else pattern

    if p.kind is SubjectKind.ANY:
        return True
    if p.kind is SubjectKind.ROLE:
        return p.value in attrs.roles
    if p.kind is SubjectKind.USER:
        return p.value == attrs.id or p.value == attrs.username
    if p.kind is SubjectKind.DEPARTMENT:
        return p.value in attrs.departments
    if p.kind is SubjectKind.STATUS:
        return p.value == attrs.status
    if p.kind is SubjectKind.EMAIL:
        if attrs.email is None:
            return False
        if attrs.email == p.value:
            return True
        return "*" in p.value and attrs.email.endswith(p.value.replace("*", ""))
    return p.raw == attrs.id or p.raw == attrs.username


def match_resource(pattern: Union[Pattern, str], resource: str) -> bool:
    p = parse_resource(pattern) if isinstance(pattern, str) else pattern

    if p.raw == resource:
        return True
    if p.kind is PatternKind.WILDCARD:
        return True
    if p.kind is PatternKind.PREFIX_WILDCARD:
        return resource == p.prefix or resource.startswith(f"{p.prefix}:")
    if p.kind is PatternKind.SUFFIX_WILDCARD:
        return resource.endswith(p.suffix)
    if p.kind is PatternKind.MIDDLE_WILDCARD:
        return resource.startswith(f"{p.prefix}:") and resource.endswith(f":{p.suffix}")
    return False


def match_action(pattern: Union[Pattern, str], action: str) -> bool:
    p = parse_action(pattern) if isinstance(pattern, str) else pattern

    if p.kind is PatternKind.WILDCARD:
        return True
    if p.kind is PatternKind.COMMA_LIST:
        return action in p.options
    return p.raw == action


def _check_time(spec: Any, now: datetime) -> bool:
    if not isinstance(spec, Mapping):
        return True
    current = now.strftime("%H:%M")
    after = spec.get("after")
    before = spec.get("before")
    if after and current < str(after):
        return False
    if before and current > str(before):
        return False
    return True


# condition key -> check; unknown keys pass
_CONDITION_CHECKS = {
    "time": lambda spec, attrs, now: _check_time(spec, now),
}


def evaluate_conditions(
    conditions: Optional[Mapping[str, Any]],
    attrs: RequesterAttributes,
    now: Optional[datetime] = None,
) -> bool:
    """
    Every known condition present must pass.

    {"time": {"after": "09:00", "before": "18:00"}} compares wall-clock HH:MM,
    both bounds inclusive.
    """
    if not conditions:
        return True
    if not isinstance(conditions, Mapping):
        return True
    now = now or datetime.now()
    for key, spec in conditions.items():
        check = _CONDITION_CHECKS.get(key)
        if check is not None and not check(spec, attrs, now):
            return False
    return True
