import pytest
from fastapi import Depends, FastAPI, Request
from httpx import ASGITransport, AsyncClient

from warden.bootstrap import attach, build_components
from warden.dal import InMemoryPermissionStore, InMemoryPolicyStore, InMemoryRoleStore, InMemoryUserStore
from warden.dependencies import require_permission
from warden.models import Role

pytestmark = pytest.mark.anyio


def _app(*, abac_only: bool) -> FastAPI:
    policies = InMemoryPolicyStore()
    roles = InMemoryRoleStore(
        roles=[Role(id="r1", name="legacy", permission_names=["report:read"])],
        assignments={"u-2": ["legacy"]},
    )
    components = build_components(
        policy_store=policies,
        role_store=roles,
        permission_store=InMemoryPermissionStore(),
        user_store=InMemoryUserStore(),
        abac_only=abac_only,
    )

    app = FastAPI()
    attach(app, components)

    @app.middleware("http")
    async def fake_auth(request: Request, call_next):
        uid = request.headers.get("x-user")
        if uid:
            request.state.user = {"id": uid, "username": uid, "status": "active", "roles": request.headers.get("x-roles", "").split(",")}
        return await call_next(request)

    @app.post("/seed")
    async def seed(request: Request):
        await request.app.state.policy_admin.create(
            {"name": "Admins", "subject": "role:admin", "resource": "*", "action": "*", "priority": 100}
        )
        return {"ok": True}

    @app.get("/reports", dependencies=[Depends(require_permission("report", "read"))])
    async def reports():
        return {"items": []}

    return app


async def _client(app):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


async def test_missing_user_is_401():
    async with await _client(_app(abac_only=False)) as ac:
        res = await ac.get("/reports")
        assert res.status_code == 401


async def test_abac_policy_grants_access():
    async with await _client(_app(abac_only=True)) as ac:
        await ac.post("/seed")
        res = await ac.get("/reports", headers={"x-user": "u-1", "x-roles": "admin"})
        assert res.status_code == 200


async def test_rbac_fallback_only_outside_abac_only_mode():
    async with await _client(_app(abac_only=False)) as ac:
        res = await ac.get("/reports", headers={"x-user": "u-2", "x-roles": "legacy"})
        assert res.status_code == 200

    async with await _client(_app(abac_only=True)) as ac:
        res = await ac.get("/reports", headers={"x-user": "u-2", "x-roles": "legacy"})
        assert res.status_code == 403
        detail = res.json()["detail"]
        assert detail["reason"] == "no_matching_policy"
        assert detail["suggestion"] == "Contact administrator to get 'report:read' permission"
