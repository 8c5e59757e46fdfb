from .policy import PolicyCreate, PolicyUpdate
from .evaluation import (
    EvaluationCode,
    EvaluationResult,
    PermissionRequest,
    PermissionTestResult,
)
from .gate import AuthorizationDecision, DenialDetails, GateState
from .coverage import AuditReport, CoverageReport, GapsReport, VerificationReport

__all__ = [
    "PolicyCreate",
    "PolicyUpdate",
    "EvaluationCode",
    "EvaluationResult",
    "PermissionRequest",
    "PermissionTestResult",
    "AuthorizationDecision",
    "DenialDetails",
    "GateState",
    "AuditReport",
    "CoverageReport",
    "GapsReport",
    "VerificationReport",
]
