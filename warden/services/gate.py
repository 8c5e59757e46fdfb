from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..models import RequesterAttributes
from ..schemas.evaluation import EvaluationCode, EvaluationResult
from ..schemas.gate import AuthorizationDecision, DenialDetails, GateState
from ..settings import settings
from .evaluator import PolicyEvaluator
from .rbac import RbacFallback

log = logging.getLogger("warden.gate")

_DENIAL_REASONS = {
    EvaluationCode.INACTIVE_REQUESTER: "inactive_requester",
    EvaluationCode.POLICY_MATCHED: "denied_by_policy",
    EvaluationCode.CONDITIONS_NOT_MET: "condition_failed",
    EvaluationCode.NO_MATCHING_POLICY: "no_matching_policy",
}


def explain_denial(result: EvaluationResult, resource: str, action: str) -> DenialDetails:
    matched = [result.matched_policy.name] if result.matched_policy else []
    return DenialDetails(
        message=f"You do not have permission to {action} on {resource}",
        resource=resource,
        action=action,
        reason=_DENIAL_REASONS[result.code],
        matched_policies=matched,
        suggestion=f"Contact administrator to get '{resource}:{action}' permission",
    )


class AuthorizationGate:
    """
    START -> ABAC_EVALUATE -> ALLOWED
                           -> DENIED -> DENIED_FINAL              (abac_only)
                                     -> RBAC_EVALUATE -> ALLOWED
                                                      -> DENIED_FINAL
    """
    def __init__(
        self,
        evaluator: PolicyEvaluator,
        rbac: Optional[RbacFallback] = None,
        *,
        abac_only: Optional[bool] = None,
    ):
        self.evaluator = evaluator
        self.rbac = rbac
        self.abac_only = settings.USE_ABAC_ONLY if abac_only is None else abac_only

    async def check(self, user: Any, resource: str, action: str) -> AuthorizationDecision:
        attrs = RequesterAttributes.from_any(user)
        path: List[GateState] = [GateState.START, GateState.ABAC_EVALUATE]

        abac = await self.evaluator.evaluate_with_details(attrs, resource, action)
        if abac.allowed:
            path.append(GateState.ALLOWED)
            log.debug(
                "permission granted via %s user=%s resource=%s action=%s",
                "ABAC only" if self.abac_only else "ABAC",
                attrs.display_name,
                resource,
                action,
            )
            return AuthorizationDecision(
                allowed=True, granted_by="abac", abac_only=self.abac_only, path=path, abac_result=abac
            )

        if not self.abac_only and self.rbac is not None and attrs.id is None:
            log.debug(
                "RBAC fallback skipped: requester has no id username=%s resource=%s action=%s",
                attrs.username,
                resource,
                action,
            )
        elif not self.abac_only and self.rbac is not None:
            path.append(GateState.RBAC_EVALUATE)
            if await self.rbac.check_rbac_permission(attrs.id, resource, action):
                path.append(GateState.ALLOWED)
                log.debug("permission granted via RBAC user=%s resource=%s action=%s", attrs.display_name, resource, action)
                return AuthorizationDecision(
                    allowed=True, granted_by="rbac", abac_only=self.abac_only, path=path, abac_result=abac
                )

        path.append(GateState.DENIED_FINAL)
        denial = explain_denial(abac, resource, action)
        log.warning(
            "permission denied%s user=%s resource=%s action=%s reason=%s",
            " (ABAC only mode)" if self.abac_only else "",
            attrs.display_name,
            resource,
            action,
            denial.reason,
        )
        return AuthorizationDecision(
            allowed=False, abac_only=self.abac_only, path=path, abac_result=abac, denial=denial
        )
