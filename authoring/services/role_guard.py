"""
Role Guard Service.

Role-based permission check for suggestion intents. This is the first
guardrail: a denial aborts the pipeline before any retrieval or logging of
prompt content.
"""

from enum import Enum
from typing import Dict, FrozenSet, Mapping, Optional

from authoring.exceptions import AuthorizationError
from authoring.schemas.request import Intent, RequestingUser


class UserRole(str, Enum):
    """Roles known to the assistant."""
    ADMIN = "admin"
    COMPLIANCE_OFFICER = "compliance_officer"
    CARE_MANAGER = "care_manager"
    SENIOR_CARER = "senior_carer"
    CARE_STAFF = "care_staff"
    VIEWER = "viewer"


_AUTHORING_ROLES = frozenset({
    UserRole.ADMIN.value,
    UserRole.COMPLIANCE_OFFICER.value,
    UserRole.CARE_MANAGER.value,
})

DEFAULT_PERMISSIONS: Dict[str, FrozenSet[str]] = {
    Intent.SUGGEST_CLAUSE.value: _AUTHORING_ROLES,
    Intent.MAP_POLICY.value: _AUTHORING_ROLES,
    Intent.REVIEW_POLICY.value: _AUTHORING_ROLES,
    Intent.SUGGEST_IMPROVEMENT.value: _AUTHORING_ROLES,
    Intent.VALIDATE_COMPLIANCE.value: frozenset({
        UserRole.ADMIN.value,
        UserRole.COMPLIANCE_OFFICER.value,
    }),
}


KNOWN_INTENTS = frozenset(i.value for i in Intent)


class RolePermissionGuard:
    """
    Permission-matrix role guard.

    Unknown roles are denied. Intents outside the Intent set carry no
    permission entry and are left to request validation.
    """

    def __init__(self, permissions: Optional[Mapping[str, FrozenSet[str]]] = None):
        """
        Initialize the guard.

        Args:
            permissions: intent -> allowed roles (defaults to DEFAULT_PERMISSIONS)
        """
        source = permissions if permissions is not None else DEFAULT_PERMISSIONS
        self.permissions = {
            self._key(intent): frozenset(self._key(role) for role in roles)
            for intent, roles in source.items()
        }

    @staticmethod
    def _key(value) -> str:
        return value.value if isinstance(value, Enum) else str(value)

    def is_allowed(self, role: str, intent: str) -> bool:
        """True if the role may invoke the intent."""
        allowed = self.permissions.get(self._key(intent), frozenset())
        return self._key(role).strip().lower() in allowed

    def authorize(self, user: RequestingUser, intent: str) -> None:
        """
        Check the user's role against the intent.

        Raises:
            AuthorizationError: If the role lacks permission
        """
        if self._key(intent) not in KNOWN_INTENTS:
            return
        if not self.is_allowed(user.role, intent):
            raise AuthorizationError(user.id, user.role, self._key(intent))
