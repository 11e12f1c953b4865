"""
Tests for permission models in tenantboard/shared/permissions/models.py
"""

from tenantboard.shared.permissions.models import (
    Action,
    Grant,
    Resource,
    parse_grant,
    parse_grant_string,
)


class TestPermissionEnums:
    """Test Resource and Action enumeration values."""

    def test_action_values(self):
        assert {action.value for action in Action} == {
            "read",
            "write",
            "delete",
            "manage",
        }

    def test_widgets_live_under_analytics(self):
        assert Resource.ANALYTICS.value == "analytics"


class TestParseGrant:
    def test_known_values(self):
        assert parse_grant("analytics", "read") == Grant(Resource.ANALYTICS, Action.READ)

    def test_normalizes_case_and_whitespace(self):
        assert parse_grant(" Analytics ", "WRITE") == Grant(
            Resource.ANALYTICS, Action.WRITE
        )

    def test_unknown_values_return_none(self):
        assert parse_grant("analytics", "export") is None
        assert parse_grant("dashboards", "read") is None

    def test_grant_string(self):
        assert parse_grant_string("contacts:delete") == Grant(
            Resource.CONTACTS, Action.DELETE
        )
        assert str(Grant(Resource.CONTACTS, Action.DELETE)) == "contacts:delete"

    def test_grant_string_without_separator(self):
        assert parse_grant_string("analytics") is None

    def test_duplicate_grants_collapse(self):
        grants = {
            parse_grant("analytics", "read"),
            parse_grant("ANALYTICS", "read"),
            parse_grant_string("analytics:read"),
        }
        assert grants == {Grant(Resource.ANALYTICS, Action.READ)}
