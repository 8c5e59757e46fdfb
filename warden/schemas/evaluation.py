from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from ..models.policy import Policy


class EvaluationCode(str, Enum):
    POLICY_MATCHED = "policy_matched"
    INACTIVE_REQUESTER = "inactive_requester"
    NO_MATCHING_POLICY = "no_matching_policy"
    # nothing matched, but at least one policy was skipped on its conditions
    CONDITIONS_NOT_MET = "conditions_not_met"


class EvaluationResult(BaseModel):
    allowed: bool
    reason: str
    code: EvaluationCode
    matched_policy: Optional[Policy] = None
    skipped_policies: List[str] = []


class PermissionRequest(BaseModel):
    resource: str
    action: str

    @property
    def key(self) -> str:
        return f"{self.resource}:{self.action}"


class MatchedPolicySummary(BaseModel):
    id: str
    name: str
    effect: str
    subject: str
    priority: int


class TestedUser(BaseModel):
    id: str
    username: str
    roles: List[str] = []


class PermissionTestResult(BaseModel):
    allowed: bool
    user: TestedUser
    resource: str
    action: str
    matched_policies: List[MatchedPolicySummary] = []
    reason: str
    evaluation_time_ms: float
