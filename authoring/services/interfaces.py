"""
Collaborator interfaces consumed by the suggestion pipeline.

Reference implementations live alongside (knowledge_store, role_guard,
audit_sink, transparency) and in evals.validators for content safety.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol
from uuid import UUID

from authoring.schemas.documents import KnowledgeDocument, KnowledgeFilter
from authoring.schemas.log import DecisionUpdate, HistoryFilters, SuggestionLogRecord
from authoring.schemas.request import RequestingUser
from authoring.schemas.suggestion import SafetyValidation


class KnowledgeStore(Protocol):
    """Read-only structured knowledge store with three collections."""

    async def query_templates(self, criteria: KnowledgeFilter) -> List[KnowledgeDocument]:
        ...

    async def query_standards(self, criteria: KnowledgeFilter) -> List[KnowledgeDocument]:
        ...

    async def query_rules(self, criteria: KnowledgeFilter) -> List[KnowledgeDocument]:
        ...


class RoleGuard(Protocol):
    """Yes/no decision on whether a user may invoke an intent."""

    def authorize(self, user: RequestingUser, intent: str) -> None:
        """Raise AuthorizationError when the user's role lacks the intent."""
        ...


class SafetyValidator(Protocol):
    """External content-safety check over synthesized content."""

    async def validate(self, content: Dict[str, Any], context: Dict[str, Any]) -> SafetyValidation:
        ...


class AuditSink(Protocol):
    """
    Append-only store of suggestion log records.

    `update_decision` is the only mutation and touches the decision region
    only; it must succeed at most once per suggestion id.
    """

    def append(self, record: SuggestionLogRecord) -> None:
        ...

    def update_decision(self, suggestion_id: UUID, decision: DecisionUpdate) -> SuggestionLogRecord:
        ...

    def get(self, suggestion_id: UUID) -> Optional[SuggestionLogRecord]:
        ...

    def list_for_user(
        self,
        user_id: str,
        filters: Optional[HistoryFilters] = None,
    ) -> List[SuggestionLogRecord]:
        ...

    def list_for_organization(
        self,
        organization_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[SuggestionLogRecord]:
        ...


class TransparencyLogger(Protocol):
    """Decision-explainability side channel (fire-and-forget)."""

    def log_decision(self, event: Dict[str, Any]) -> None:
        ...
