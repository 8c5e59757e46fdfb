"""
FastAPI dependencies that put the authorization gate in front of a route.

The host application authenticates the request and leaves the user on
`request.state.user`; the gate is looked up on `app.state.authorization_gate`
(see bootstrap.attach).

    @router.get("/policies", dependencies=[Depends(require_permission("policy", "read"))])
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, Request

from .schemas.gate import AuthorizationDecision
from .services.gate import AuthorizationGate

log = logging.getLogger("warden.dependencies")


def get_gate(request: Request) -> AuthorizationGate:
    gate = getattr(request.app.state, "authorization_gate", None)
    if gate is None:
        raise RuntimeError("authorization gate is not attached to the app")
    return gate


def current_user(request: Request) -> Any:
    user = getattr(request.state, "user", None)
    if user is None:
        log.warning("permission denied: no authenticated user path=%s", request.url.path)
        raise HTTPException(status_code=401, detail="Authentication required")
    return user


def require_permission(resource: str, action: str):
    """
    Dependency factory: the current user must pass the gate for (resource, action).
    """
    async def _require_permission(request: Request) -> AuthorizationDecision:
        user = current_user(request)
        decision = await get_gate(request).check(user, resource, action)
        if not decision.allowed:
            raise HTTPException(status_code=403, detail=decision.denial.model_dump())
        request.state.authorization = decision
        return decision

    return _require_permission
