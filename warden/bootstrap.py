from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorDatabase

from .dal import PermissionDAL, PolicyDAL, RoleDAL, UserDAL
from .dal.interfaces import PermissionStore, PolicyRepository, RoleStore, UserStore
from .services import (
    AuthorizationGate,
    CoverageAnalyzer,
    MigrationVerifier,
    PermissionTester,
    PolicyAdmin,
    PolicyCache,
    PolicyEvaluator,
    RbacFallback,
)
from .settings import settings

log = logging.getLogger("warden")


@dataclass
class Components:
    cache: PolicyCache
    evaluator: PolicyEvaluator
    rbac: RbacFallback
    gate: AuthorizationGate
    policy_admin: PolicyAdmin
    coverage: CoverageAnalyzer
    tester: PermissionTester
    verifier: MigrationVerifier


def build_components(
    *,
    policy_store: PolicyRepository,
    role_store: RoleStore,
    permission_store: PermissionStore,
    user_store: UserStore,
    abac_only: Optional[bool] = None,
    cache_ttl_seconds: Optional[float] = None,
) -> Components:
    ttl = settings.POLICY_CACHE_TTL_SECONDS if cache_ttl_seconds is None else cache_ttl_seconds
    cache = PolicyCache(policy_store, ttl_seconds=ttl)
    evaluator = PolicyEvaluator(cache)
    rbac = RbacFallback(role_store)

    return Components(
        cache=cache,
        evaluator=evaluator,
        rbac=rbac,
        gate=AuthorizationGate(evaluator, rbac, abac_only=abac_only),
        policy_admin=PolicyAdmin(repository=policy_store, cache=cache),
        coverage=CoverageAnalyzer(
            policy_store=policy_store,
            permission_store=permission_store,
            role_store=role_store,
        ),
        tester=PermissionTester(evaluator=evaluator, user_store=user_store),
        verifier=MigrationVerifier(
            evaluator=evaluator,
            rbac=rbac,
            user_store=user_store,
            permission_store=permission_store,
        ),
    )


async def build_mongo_components(db: AsyncIOMotorDatabase, **kwargs) -> Components:
    policy_dal = PolicyDAL(db)
    role_dal = RoleDAL(db)
    permission_dal = PermissionDAL(db)
    user_dal = UserDAL(db)

    # indexes
    await policy_dal.ensure_indexes()
    await role_dal.ensure_indexes()
    await permission_dal.ensure_indexes()
    await user_dal.ensure_indexes()

    return build_components(
        policy_store=policy_dal,
        role_store=role_dal,
        permission_store=permission_dal,
        user_store=user_dal,
        **kwargs,
    )


def attach(app: FastAPI, components: Components) -> None:
    """Expose the components on app.state for the request dependencies."""
    app.state.policy_cache = components.cache
    app.state.policy_evaluator = components.evaluator
    app.state.authorization_gate = components.gate
    app.state.policy_admin = components.policy_admin
    app.state.coverage_analyzer = components.coverage
    app.state.permission_tester = components.tester
    log.info("warden attached abac_only=%s cache_ttl_s=%s", components.gate.abac_only, components.cache.ttl_seconds)
