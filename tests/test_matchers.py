from datetime import datetime

import pytest

from warden.models import RequesterAttributes
from warden.services.matchers import evaluate_conditions, match_action, match_resource, match_subject


@pytest.fixture
def attrs():
    return RequesterAttributes(
        id="u-42",
        username="carol",
        email="carol@example.com",
        status="active",
        roles={"admin", "editor"},
        departments={"finance"},
    )


class TestMatchSubject:
    def test_wildcard(self, attrs):
        assert match_subject("*", attrs)

    def test_role(self, attrs):
        assert match_subject("role:admin", attrs)
        assert not match_subject("role:viewer", attrs)

    def test_role_is_case_sensitive(self, attrs):
        assert not match_subject("role:Admin", attrs)

    def test_user_by_id_or_username(self, attrs):
        assert match_subject("user:u-42", attrs)
        assert match_subject("user:carol", attrs)
        assert not match_subject("user:dave", attrs)

    def test_department(self, attrs):
        assert match_subject("department:finance", attrs)
        assert not match_subject("department:sales", attrs)

    def test_status(self, attrs):
        assert match_subject("status:active", attrs)
        assert not match_subject("status:pending", attrs)

    def test_email_exact_and_suffix(self, attrs):
        assert match_subject("email:carol@example.com", attrs)
        assert match_subject("email:*@example.com", attrs)
        assert not match_subject("email:*@other.org", attrs)

    def test_email_without_star_is_exact_only(self, attrs):
        assert not match_subject("email:example.com", attrs)

    def test_email_missing_on_requester(self):
        nobody = RequesterAttributes(id="x", username="x")
        assert not match_subject("email:*@example.com", nobody)

    def test_literal_fallback(self, attrs):
        assert match_subject("carol", attrs)
        assert match_subject("u-42", attrs)
        assert not match_subject("group:finance", attrs)


class TestMatchResource:
    def test_exact_and_wildcard(self):
        assert match_resource("user", "user")
        assert not match_resource("user", "role")
        assert match_resource("*", "anything:at:all")

    @pytest.mark.parametrize("resource", ["user", "user:profile", "user:settings"])
    def test_prefix_wildcard_matches(self, resource):
        assert match_resource("user:*", resource)

    @pytest.mark.parametrize("resource", ["role", "users", "username:x"])
    def test_prefix_wildcard_rejects(self, resource):
        assert not match_resource("user:*", resource)

    def test_suffix_wildcard(self):
        assert match_resource("*:settings", "user:settings")
        assert not match_resource("*:settings", "user:profile")

    def test_middle_wildcard(self):
        assert match_resource("user:*:read", "user:42:read")
        assert not match_resource("user:*:read", "user:42:write")
        assert not match_resource("user:*:read", "role:42:read")

    def test_unparseable_pattern_only_matches_itself(self):
        assert not match_resource("a:*:b:*:c", "a:1:b:2:c")
        assert match_resource("a:*:b:*:c", "a:*:b:*:c")


class TestMatchAction:
    def test_wildcard(self):
        assert match_action("*", "delete")

    def test_comma_list(self):
        assert match_action("read,write", "read")
        assert match_action("read, write", "write")
        assert not match_action("read,write", "delete")

    def test_exact(self):
        assert match_action("read", "read")
        assert not match_action("read", "reader")


class TestEvaluateConditions:
    def test_absent_conditions_pass(self, attrs):
        assert evaluate_conditions(None, attrs)
        assert evaluate_conditions({}, attrs)

    def test_time_window(self, attrs):
        office = {"time": {"after": "09:00", "before": "18:00"}}
        assert evaluate_conditions(office, attrs, datetime(2026, 3, 2, 9, 0))
        assert evaluate_conditions(office, attrs, datetime(2026, 3, 2, 18, 0))
        assert not evaluate_conditions(office, attrs, datetime(2026, 3, 2, 8, 59))
        assert not evaluate_conditions(office, attrs, datetime(2026, 3, 2, 18, 1))

    def test_single_bound(self, attrs):
        assert not evaluate_conditions({"time": {"after": "22:00"}}, attrs, datetime(2026, 3, 2, 7, 5))
        assert evaluate_conditions({"time": {"before": "10:00"}}, attrs, datetime(2026, 3, 2, 7, 5))

    def test_unknown_keys_are_ignored(self, attrs):
        assert evaluate_conditions({"ip": {"in": ["10.0.0.0/8"]}}, attrs, datetime(2026, 3, 2, 7, 5))

    def test_malformed_time_block_passes(self, attrs):
        assert evaluate_conditions({"time": "whenever"}, attrs, datetime(2026, 3, 2, 7, 5))
