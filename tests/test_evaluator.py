from datetime import datetime

import pytest

from warden.errors import InvalidRequesterError
from warden.models import RequesterAttributes, UserRecord, UserStatus
from warden.schemas import EvaluationCode, PermissionRequest
from warden.services import PolicyEvaluator

pytestmark = pytest.mark.anyio


@pytest.fixture
def deny_delete_allow_admin(store, make_policy):
    store._put(make_policy(name="Deny delete", action="delete", effect="deny", priority=200))
    store._put(make_policy(name="Admin all", subject="role:admin", priority=100))


async def test_higher_priority_deny_wins(evaluator, admin, deny_delete_allow_admin):
    assert await evaluator.evaluate(admin, "user", "delete") is False
    assert await evaluator.evaluate(admin, "user", "create") is True


async def test_priority_wins_regardless_of_insertion_order(evaluator, store, admin, make_policy):
    store._put(make_policy(name="low allow", priority=1, effect="allow"))
    store._put(make_policy(name="high deny", priority=50, effect="deny"))

    result = await evaluator.evaluate_with_details(admin, "file", "read")

    assert result.allowed is False
    assert result.matched_policy.name == "high deny"


async def test_only_disabled_policies_always_deny(evaluator, store, admin, make_policy):
    store._put(make_policy(enabled=False, priority=999))
    store._put(make_policy(subject="role:admin", enabled=False))

    result = await evaluator.evaluate_with_details(admin, "user", "read")

    assert result.allowed is False
    assert result.code is EvaluationCode.NO_MATCHING_POLICY


@pytest.mark.parametrize("status", [UserStatus.DISABLED, UserStatus.PENDING, "banned"])
async def test_inactive_requester_is_denied_before_policies(evaluator, store, make_policy, status):
    store._put(make_policy(priority=1000))
    user = RequesterAttributes(id="u-9", username="zed", status=status, roles={"admin"})

    result = await evaluator.evaluate_with_details(user, "user", "read")

    assert result.allowed is False
    assert result.code is EvaluationCode.INACTIVE_REQUESTER
    assert result.matched_policy is None
    assert "not active" in result.reason
    assert store.fetches == 0


async def test_no_match_reason(evaluator, store, viewer, make_policy):
    store._put(make_policy(subject="role:admin"))

    result = await evaluator.evaluate_with_details(viewer, "policy", "update")

    assert result.allowed is False
    assert result.code is EvaluationCode.NO_MATCHING_POLICY
    assert result.reason == "No matching policy found for user bob to update on policy"


async def test_match_reason_names_policy_and_patterns(evaluator, store, admin, make_policy):
    store._put(make_policy(name="Admin users", subject="role:admin", resource="user:*", action="read,write"))

    result = await evaluator.evaluate_with_details(admin, "user:profile", "write")

    assert result.allowed is True
    assert result.code is EvaluationCode.POLICY_MATCHED
    assert result.reason.startswith('Policy "Admin users" allows write on user:profile')
    assert "subject:role:admin" in result.reason
    assert "resource:user:*" in result.reason


async def test_role_match_is_case_sensitive(evaluator, store, admin, make_policy):
    store._put(make_policy(subject="role:Admin"))

    assert await evaluator.evaluate(admin, "user", "read") is False


async def test_failed_conditions_fall_through_to_lower_priority(cache, store, admin, make_policy):
    store._put(
        make_policy(name="office deny", effect="deny", priority=100, conditions={"time": {"after": "09:00", "before": "18:00"}})
    )
    store._put(make_policy(name="fallback allow", priority=1))
    night = PolicyEvaluator(cache, now=lambda: datetime(2026, 1, 1, 23, 30))

    result = await night.evaluate_with_details(admin, "report", "read")

    assert result.allowed is True
    assert result.matched_policy.name == "fallback allow"
    assert result.skipped_policies == ["office deny"]


async def test_conditions_not_met_code_when_nothing_else_matches(cache, store, admin, make_policy):
    store._put(make_policy(name="office hours", conditions={"time": {"after": "09:00", "before": "18:00"}}))
    early = PolicyEvaluator(cache, now=lambda: datetime(2026, 1, 1, 6, 0))

    result = await early.evaluate_with_details(admin, "report", "read")

    assert result.allowed is False
    assert result.code is EvaluationCode.CONDITIONS_NOT_MET
    assert "office hours" in result.reason


async def test_bulk_fetches_policies_once(evaluator, store, admin, deny_delete_allow_admin):
    requests = [
        ("user", "read"),
        PermissionRequest(resource="user", action="delete"),
        {"resource": "role", "action": "create"},
        ("policy", "update"),
    ]

    results = await evaluator.evaluate_bulk(admin, requests)

    assert results == {
        "user:read": True,
        "user:delete": False,
        "role:create": True,
        "policy:update": True,
    }
    assert store.fetches == 1


async def test_bulk_for_inactive_requester_denies_everything(evaluator, store):
    user = RequesterAttributes(id="u-3", username="pat", status="pending")

    results = await evaluator.evaluate_bulk(user, [("user", "read"), ("role", "read")])

    assert results == {"user:read": False, "role:read": False}


async def test_invalidate_cache_refetches(evaluator, store, admin):
    await evaluator.evaluate(admin, "user", "read")
    evaluator.invalidate_cache()
    await evaluator.evaluate(admin, "user", "read")

    assert store.fetches == 2


async def test_accepts_mappings_and_user_records(evaluator, store, make_policy):
    store._put(make_policy(subject="role:editor"))

    as_dict = {"id": "u-5", "username": "eve", "status": "active", "roles": [{"name": "editor"}]}
    as_record = UserRecord(id="u-6", username="fay", role_names=["editor"])

    assert await evaluator.evaluate(as_dict, "doc", "read") is True
    assert await evaluator.evaluate(as_record, "doc", "read") is True


async def test_requester_without_identity_fails_fast(evaluator):
    with pytest.raises(InvalidRequesterError):
        await evaluator.evaluate({"status": "active", "roles": ["admin"]}, "user", "read")
