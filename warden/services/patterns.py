"""
Parsed forms of the policy pattern strings.

Policies carry their subject/resource/action patterns as plain strings. They are
parsed once, when the policy cache loads, into the tagged variants below so the
matchers never split strings on the evaluation path.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from ..models import Policy


class PatternKind(str, Enum):
    EXACT = "exact"
    WILDCARD = "wildcard"
    PREFIX_WILDCARD = "prefix_wildcard"    # "user:*"
    SUFFIX_WILDCARD = "suffix_wildcard"    # "*:settings"
    MIDDLE_WILDCARD = "middle_wildcard"    # "user:*:settings"
    COMMA_LIST = "comma_list"              # "read,write"


@dataclass(frozen=True)
class Pattern:
    kind: PatternKind
    raw: str
    prefix: str = ""
    suffix: str = ""
    options: Tuple[str, ...] = ()


class SubjectKind(str, Enum):
    ANY = "*"
    ROLE = "role"
    USER = "user"
    DEPARTMENT = "department"
    STATUS = "status"
    EMAIL = "email"
    LITERAL = "literal"


@dataclass(frozen=True)
class SubjectPattern:
    kind: SubjectKind
    raw: str
    value: str = ""


_TYPED_SUBJECTS = {
    SubjectKind.ROLE.value: SubjectKind.ROLE,
    SubjectKind.USER.value: SubjectKind.USER,
    SubjectKind.DEPARTMENT.value: SubjectKind.DEPARTMENT,
    SubjectKind.STATUS.value: SubjectKind.STATUS,
    SubjectKind.EMAIL.value: SubjectKind.EMAIL,
}


def parse_subject(pattern: str) -> SubjectPattern:
    if pattern == "*":
        return SubjectPattern(SubjectKind.ANY, pattern)

    type_, sep, value = pattern.partition(":")
    kind = _TYPED_SUBJECTS.get(type_) if sep else None
    if kind is None:
        # unknown or untyped: compared as a literal id/username
        return SubjectPattern(SubjectKind.LITERAL, pattern, pattern)
    return SubjectPattern(kind, pattern, value)


def parse_resource(pattern: str) -> Pattern:
    if pattern == "*":
        return Pattern(PatternKind.WILDCARD, pattern)
    if pattern.endswith(":*"):
        return Pattern(PatternKind.PREFIX_WILDCARD, pattern, prefix=pattern[:-2])
    if pattern.startswith("*:"):
        return Pattern(PatternKind.SUFFIX_WILDCARD, pattern, suffix=pattern[2:])
    if ":*:" in pattern:
        parts = pattern.split(":*:")
        if len(parts) == 2:
            return Pattern(PatternKind.MIDDLE_WILDCARD, pattern, prefix=parts[0], suffix=parts[1])
    return Pattern(PatternKind.EXACT, pattern)


def parse_action(pattern: str) -> Pattern:
    if pattern == "*":
        return Pattern(PatternKind.WILDCARD, pattern)
    if "," in pattern:
        return Pattern(PatternKind.COMMA_LIST, pattern, options=tuple(a.strip() for a in pattern.split(",")))
    return Pattern(PatternKind.EXACT, pattern)


@dataclass(frozen=True)
class CompiledPolicy:
    policy: Policy
    subject: SubjectPattern
    resource: Pattern
    action: Pattern

    def describe(self) -> str:
        return f"subject:{self.subject.raw}, resource:{self.resource.raw}, action:{self.action.raw}"


def compile_policy(policy: Policy) -> CompiledPolicy:
    return CompiledPolicy(
        policy=policy,
        subject=parse_subject(policy.subject),
        resource=parse_resource(policy.resource),
        action=parse_action(policy.action),
    )
