"""
Suggestion log models.

SuggestionLog is the canonical audit record of one pipeline run. It is
written once and never modified or deleted.

The user's accept/modify/reject decision lives in SuggestionDecision, keyed by
the suggestion id. At most one decision row can exist per suggestion, so the
primary key is the write-once guard.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, String, Text, Uuid, event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from authoring.database import Base
from authoring.domain.scoring import as_utc
from authoring.exceptions import ImmutableRecordError
from authoring.schemas.documents import SourceReference, VerificationStatus
from authoring.schemas.log import (
    DecisionRecord,
    SuggestionLogRecord,
    SuggestionStatus,
    UserDecision,
)
from authoring.schemas.request import Intent

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SuggestionLog(Base):
    """
    SuggestionLog: Immutable record of one suggestion request.

    CRITICAL: Suggestion logs are IMMUTABLE.
    - No UPDATE or DELETE after creation (enforced by mapper events)
    - The decision region is stored separately in SuggestionDecision
    """
    __tablename__ = "suggestion_logs"

    id = Column(Uuid, primary_key=True)

    # Requester
    user_id = Column(String(255), nullable=False)
    organization_id = Column(String(255), nullable=False)

    # Request
    intent = Column(String(50), nullable=False)
    jurisdictions = Column(JSONType, nullable=False)
    prompt = Column(JSONType, nullable=False)  # Full request dump

    # Outcome
    response = Column(JSONType, nullable=True)  # Full response dump
    source_references = Column(JSONType, nullable=False, default=list)
    status = Column(String(20), nullable=False)
    error_message = Column(Text, nullable=True)
    regulatory_context = Column(JSONType, nullable=False, default=dict)
    verification_status = Column(String(20), nullable=False)
    pipeline_states = Column(JSONType, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # Read-only view of the decision row
    decision = relationship(
        "SuggestionDecision",
        uselist=False,
        viewonly=True,
        lazy="joined",
    )

    __table_args__ = (
        Index("idx_suggestion_logs_user", "user_id", "created_at"),
        Index("idx_suggestion_logs_org", "organization_id", "created_at"),
    )

    @classmethod
    def from_record(cls, record: SuggestionLogRecord) -> "SuggestionLog":
        """Build a row from an audit record (decision region excluded)."""
        return cls(
            id=record.id,
            user_id=record.user_id,
            organization_id=record.organization_id,
            intent=record.intent.value,
            jurisdictions=list(record.jurisdictions),
            prompt=record.prompt,
            response=record.response,
            source_references=[ref.model_dump(mode="json") for ref in record.source_references],
            status=record.status.value,
            error_message=record.error_message,
            regulatory_context=record.regulatory_context,
            verification_status=record.verification_status.value,
            pipeline_states=list(record.pipeline_states),
            created_at=record.created_at,
        )

    def to_record(self) -> SuggestionLogRecord:
        """Convert to the immutable audit record model."""
        return SuggestionLogRecord(
            id=self.id,
            user_id=self.user_id,
            organization_id=self.organization_id,
            intent=Intent(self.intent),
            jurisdictions=list(self.jurisdictions),
            prompt=self.prompt,
            response=self.response,
            source_references=[SourceReference(**ref) for ref in self.source_references or []],
            status=SuggestionStatus(self.status),
            error_message=self.error_message,
            regulatory_context=self.regulatory_context or {},
            verification_status=VerificationStatus(self.verification_status),
            pipeline_states=list(self.pipeline_states or []),
            created_at=as_utc(self.created_at),
            decision=self.decision.to_record() if self.decision else DecisionRecord(),
        )

    def __repr__(self):
        return f"<SuggestionLog(id={self.id}, user_id='{self.user_id}', intent='{self.intent}', status='{self.status}')>"


class SuggestionDecision(Base):
    """
    SuggestionDecision: The requester's decision on a suggestion.

    Primary key is the suggestion id, so a second insert for the same
    suggestion fails. Rows are never updated or deleted.
    """
    __tablename__ = "suggestion_decisions"

    suggestion_id = Column(Uuid, ForeignKey("suggestion_logs.id"), primary_key=True)
    override_decision = Column(String(20), nullable=False)
    modified_content = Column(JSONType, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    decided_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def to_record(self) -> DecisionRecord:
        return DecisionRecord(
            override_decision=UserDecision(self.override_decision),
            modified_content=self.modified_content,
            rejection_reason=self.rejection_reason,
            decision_timestamp=as_utc(self.decided_at),
        )

    def __repr__(self):
        return f"<SuggestionDecision(suggestion_id={self.suggestion_id}, decision='{self.override_decision}')>"


# ===== Immutability guards =====

@event.listens_for(SuggestionLog, "before_update")
def _block_log_update(mapper, connection, target):
    raise ImmutableRecordError(f"Suggestion log {target.id} is immutable")


@event.listens_for(SuggestionLog, "before_delete")
def _block_log_delete(mapper, connection, target):
    raise ImmutableRecordError(f"Suggestion log {target.id} cannot be deleted")


@event.listens_for(SuggestionDecision, "before_update")
def _block_decision_update(mapper, connection, target):
    raise ImmutableRecordError(f"Decision for suggestion {target.suggestion_id} is already recorded")


@event.listens_for(SuggestionDecision, "before_delete")
def _block_decision_delete(mapper, connection, target):
    raise ImmutableRecordError(f"Decision for suggestion {target.suggestion_id} cannot be deleted")
