"""
Tests for the role permission guard.
"""

import pytest

from authoring.exceptions import AuthorizationError
from authoring.schemas.request import Intent, RequestingUser
from authoring.services.role_guard import RolePermissionGuard, UserRole


def user(role: str) -> RequestingUser:
    return RequestingUser(id="user-001", role=role, organization_id="org-001")


class TestRolePermissionGuard:
    """Tests for RolePermissionGuard."""

    @pytest.fixture
    def guard(self):
        return RolePermissionGuard()

    @pytest.mark.parametrize("intent", [i.value for i in Intent])
    def test_compliance_officer_may_invoke_every_intent(self, guard, intent):
        guard.authorize(user("compliance_officer"), intent)

    def test_care_manager_cannot_validate_compliance(self, guard):
        assert guard.is_allowed("care_manager", "suggest_clause")
        assert not guard.is_allowed("care_manager", "validate_compliance")

    @pytest.mark.parametrize("role", ["care_staff", "viewer", "unknown_role"])
    def test_non_authoring_roles_are_denied(self, guard, role):
        with pytest.raises(AuthorizationError) as exc_info:
            guard.authorize(user(role), "suggest_clause")
        assert exc_info.value.role == role
        assert exc_info.value.intent == "suggest_clause"

    @pytest.mark.parametrize("intent", ["write_policy", ""])
    def test_unknown_intent_is_left_to_validation(self, guard, intent):
        guard.authorize(user("viewer"), intent)
        assert not guard.is_allowed("admin", intent)

    def test_role_is_normalized(self, guard):
        assert guard.is_allowed(" Compliance_Officer ", "review_policy")

    def test_accepts_enum_values(self, guard):
        assert guard.is_allowed(UserRole.ADMIN, Intent.MAP_POLICY)

    def test_custom_permission_matrix(self):
        guard = RolePermissionGuard({Intent.SUGGEST_CLAUSE: frozenset({UserRole.SENIOR_CARER})})
        guard.authorize(user("senior_carer"), "suggest_clause")
        with pytest.raises(AuthorizationError):
            guard.authorize(user("admin"), "suggest_clause")
