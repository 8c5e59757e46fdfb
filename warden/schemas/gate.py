from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from .evaluation import EvaluationResult


class GateState(str, Enum):
    START = "start"
    ABAC_EVALUATE = "abac_evaluate"
    RBAC_EVALUATE = "rbac_evaluate"
    ALLOWED = "allowed"
    DENIED_FINAL = "denied_final"


class DenialDetails(BaseModel):
    """
    Explanation attached to a final denial.

    reason: "inactive_requester" | "denied_by_policy" | "condition_failed" | "no_matching_policy"
    """
    message: str
    resource: str
    action: str
    reason: str
    matched_policies: List[str] = []
    suggestion: str


class AuthorizationDecision(BaseModel):
    allowed: bool
    granted_by: Optional[str] = None  # "abac" | "rbac"
    abac_only: bool
    path: List[GateState]
    abac_result: EvaluationResult
    denial: Optional[DenialDetails] = None
