"""
Error taxonomy for the suggestion pipeline.

Caller-input errors (authorization, validation, decision misuse) propagate.
Guardrail outcomes are never exceptions; they become fallback responses.
"""

from typing import Iterable, Optional


class PolicyAssistantError(Exception):
    """Base class for all assistant errors."""


class AuthorizationError(PolicyAssistantError):
    """User role lacks permission for the requested intent."""

    def __init__(self, user_id: str, role: str, intent: str):
        self.user_id = user_id
        self.role = role
        self.intent = intent
        super().__init__(f"Role '{role}' is not permitted to invoke '{intent}'")


class RequestValidationError(PolicyAssistantError, ValueError):
    """Malformed or incomplete suggestion request."""

    def __init__(self, message: str, invalid_values: Optional[Iterable[str]] = None):
        self.invalid_values = list(invalid_values or [])
        super().__init__(message)


class RetrievalTimeoutError(PolicyAssistantError, TimeoutError):
    """Knowledge store fan-out exceeded its deadline."""

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Knowledge retrieval exceeded {timeout_seconds}s deadline")


class SuggestionNotFoundError(PolicyAssistantError, LookupError):
    """No audit record exists for the suggestion id."""

    def __init__(self, suggestion_id):
        self.suggestion_id = suggestion_id
        super().__init__(f"Suggestion log {suggestion_id} not found")


class DecisionUnauthorizedError(PolicyAssistantError):
    """Only the original requester may record a decision."""

    def __init__(self, suggestion_id, user_id: str):
        self.suggestion_id = suggestion_id
        self.user_id = user_id
        super().__init__(f"User {user_id} cannot modify suggestion {suggestion_id}")


class DecisionConflictError(PolicyAssistantError):
    """A decision has already been recorded for the suggestion."""

    def __init__(self, suggestion_id, existing_decision: Optional[str] = None):
        self.suggestion_id = suggestion_id
        self.existing_decision = existing_decision
        detail = f" ({existing_decision})" if existing_decision else ""
        super().__init__(f"Decision already recorded for suggestion {suggestion_id}{detail}")


class ImmutableRecordError(PolicyAssistantError):
    """Attempted change to a write-once audit record."""


class AuditWriteError(PolicyAssistantError):
    """The canonical audit record could not be written."""
