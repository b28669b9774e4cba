"""
Audit log schemas.

SuggestionLogRecord is write-once. The only part that may change after
creation is the decision region, which is a separate sub-record and can
only be replaced through the audit sink's decision-update operation.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from authoring.schemas.documents import SourceReference, VerificationStatus
from authoring.schemas.request import Intent


class SuggestionStatus(str, Enum):
    """Terminal status of a pipeline run."""
    SUCCESS = "success"
    FALLBACK = "fallback"
    ERROR = "error"


class UserDecision(str, Enum):
    """What the requester did with the suggestion."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    MODIFIED = "modified"
    REJECTED = "rejected"


class DecisionRecord(BaseModel):
    """The single mutable region of a suggestion log."""

    model_config = ConfigDict(frozen=True)

    override_decision: UserDecision = UserDecision.PENDING
    modified_content: Optional[Any] = None
    rejection_reason: Optional[str] = None
    decision_timestamp: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.override_decision == UserDecision.PENDING


class DecisionUpdate(BaseModel):
    """
    Payload for the decision-update operation.

    Carries decision fields only, so an update cannot reach any other part
    of the record.
    """

    model_config = ConfigDict(frozen=True)

    override_decision: UserDecision
    modified_content: Optional[Any] = None
    rejection_reason: Optional[str] = None
    decision_timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def validate_terminal_decision(self):
        """A recorded decision cannot be 'pending'."""
        if self.override_decision == UserDecision.PENDING:
            raise ValueError("Decision must be accepted, modified or rejected")
        return self

    def to_record(self) -> DecisionRecord:
        return DecisionRecord(
            override_decision=self.override_decision,
            modified_content=self.modified_content,
            rejection_reason=self.rejection_reason,
            decision_timestamp=self.decision_timestamp,
        )


class SuggestionLogRecord(BaseModel):
    """
    Immutable audit row, one per suggestion id.

    CRITICAL: every field except `decision` is fixed at creation.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    user_id: str
    organization_id: str
    intent: Intent
    jurisdictions: List[str]
    prompt: Dict[str, Any]
    response: Optional[Dict[str, Any]] = None
    source_references: List[SourceReference] = Field(default_factory=list)
    status: SuggestionStatus
    error_message: Optional[str] = None
    regulatory_context: Dict[str, Any] = Field(default_factory=dict)
    verification_status: VerificationStatus = VerificationStatus.PENDING
    pipeline_states: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    decision: DecisionRecord = Field(default_factory=DecisionRecord)

    def with_decision(self, decision: DecisionRecord) -> "SuggestionLogRecord":
        """Copy of this record carrying the given decision region."""
        return self.model_copy(update={"decision": decision})

    def immutable_fields(self) -> Dict[str, Any]:
        """Everything outside the decision region, for integrity checks."""
        return self.model_dump(exclude={"decision"})


class HistoryFilters(BaseModel):
    """Optional filters for suggestion history."""

    intent: Optional[Intent] = None
    jurisdiction: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[SuggestionStatus] = None


class TimeRange(BaseModel):
    """Inclusive reporting window."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def validate_order(self):
        if self.end < self.start:
            raise ValueError("Time range end must not precede start")
        return self
