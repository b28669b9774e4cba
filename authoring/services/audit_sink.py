"""
Audit Sink Service.

Append-only storage for suggestion log records.

CRITICAL: Suggestion logs are IMMUTABLE.
- append() writes a record exactly once
- update_decision() is the only mutation and touches the decision region only
- A decision can be recorded once per suggestion (compare-and-swap on pending)
"""

import threading
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from authoring.database import SessionLocal
from authoring.domain.scoring import as_utc
from authoring.exceptions import DecisionConflictError, ImmutableRecordError, SuggestionNotFoundError
from authoring.models import SuggestionDecision, SuggestionLog
from authoring.schemas.log import DecisionUpdate, HistoryFilters, SuggestionLogRecord


def matches_history_filters(record: SuggestionLogRecord, filters: Optional[HistoryFilters]) -> bool:
    """Check a record against optional history filters."""
    if filters is None:
        return True
    if filters.intent is not None and record.intent != filters.intent:
        return False
    if filters.status is not None and record.status != filters.status:
        return False
    if filters.jurisdiction is not None and filters.jurisdiction not in record.jurisdictions:
        return False
    created_at = as_utc(record.created_at)
    if filters.start_date is not None and created_at < as_utc(filters.start_date):
        return False
    if filters.end_date is not None and created_at > as_utc(filters.end_date):
        return False
    return True


def in_window(
    record: SuggestionLogRecord,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> bool:
    """True if the record was created within [start, end]."""
    created_at = as_utc(record.created_at)
    if start is not None and created_at < as_utc(start):
        return False
    if end is not None and created_at > as_utc(end):
        return False
    return True


def newest_first(records: Iterable[SuggestionLogRecord]) -> List[SuggestionLogRecord]:
    return sorted(records, key=lambda r: (as_utc(r.created_at), str(r.id)), reverse=True)


class InMemoryAuditSink:
    """
    Process-local audit sink.

    Records are frozen pydantic models. The decision slot is replaced under a
    lock only while it is still pending.
    """

    def __init__(self):
        self._records: Dict[UUID, SuggestionLogRecord] = {}
        self._lock = threading.Lock()

    def append(self, record: SuggestionLogRecord) -> None:
        """
        Append a new record.

        Raises:
            ImmutableRecordError: If a record with this id already exists
        """
        with self._lock:
            if record.id in self._records:
                raise ImmutableRecordError(f"Suggestion log {record.id} already exists")
            self._records[record.id] = record

    def update_decision(self, suggestion_id: UUID, decision: DecisionUpdate) -> SuggestionLogRecord:
        """
        Record the decision for a suggestion, once.

        Raises:
            SuggestionNotFoundError: If no record exists
            DecisionConflictError: If a decision was already recorded
        """
        with self._lock:
            record = self._records.get(suggestion_id)
            if record is None:
                raise SuggestionNotFoundError(suggestion_id)
            if not record.decision.is_pending:
                raise DecisionConflictError(suggestion_id, record.decision.override_decision.value)

            updated = record.with_decision(decision.to_record())
            self._records[suggestion_id] = updated
            return updated

    def get(self, suggestion_id: UUID) -> Optional[SuggestionLogRecord]:
        return self._records.get(suggestion_id)

    def list_for_user(
        self,
        user_id: str,
        filters: Optional[HistoryFilters] = None,
    ) -> List[SuggestionLogRecord]:
        with self._lock:
            records = list(self._records.values())
        return newest_first(
            r for r in records if r.user_id == user_id and matches_history_filters(r, filters)
        )

    def list_for_organization(
        self,
        organization_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[SuggestionLogRecord]:
        with self._lock:
            records = list(self._records.values())
        return newest_first(
            r for r in records if r.organization_id == organization_id and in_window(r, start, end)
        )


class SqlAuditSink:
    """
    SQLAlchemy-backed audit sink.

    Logs live in suggestion_logs; decisions in suggestion_decisions keyed by
    suggestion id. A second decision insert violates the primary key and is
    reported as a conflict.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        """
        Initialize the sink.

        Args:
            session_factory: Session factory (defaults to authoring.database.SessionLocal)
        """
        self.session_factory = session_factory

    def append(self, record: SuggestionLogRecord) -> None:
        """
        Insert a new log row.

        Raises:
            ImmutableRecordError: If a row with this id already exists
        """
        with self.session_factory() as session:
            session.add(SuggestionLog.from_record(record))
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                raise ImmutableRecordError(f"Suggestion log {record.id} already exists")

    def update_decision(self, suggestion_id: UUID, decision: DecisionUpdate) -> SuggestionLogRecord:
        """
        Insert the decision row for a suggestion.

        Raises:
            SuggestionNotFoundError: If no log row exists
            DecisionConflictError: If a decision row already exists
        """
        with self.session_factory() as session:
            log = session.get(SuggestionLog, suggestion_id)
            if log is None:
                raise SuggestionNotFoundError(suggestion_id)
            if log.decision is not None:
                raise DecisionConflictError(suggestion_id, log.decision.override_decision)

            session.add(SuggestionDecision(
                suggestion_id=suggestion_id,
                override_decision=decision.override_decision.value,
                modified_content=decision.modified_content,
                rejection_reason=decision.rejection_reason,
                decided_at=decision.decision_timestamp,
            ))
            try:
                session.commit()
            except IntegrityError:
                # Lost the race to a concurrent decision
                session.rollback()
                raise DecisionConflictError(suggestion_id)

            session.refresh(log)
            return log.to_record()

    def get(self, suggestion_id: UUID) -> Optional[SuggestionLogRecord]:
        with self.session_factory() as session:
            log = session.get(SuggestionLog, suggestion_id)
            return log.to_record() if log else None

    def list_for_user(
        self,
        user_id: str,
        filters: Optional[HistoryFilters] = None,
    ) -> List[SuggestionLogRecord]:
        with self.session_factory() as session:
            query = session.query(SuggestionLog).filter(SuggestionLog.user_id == user_id)
            if filters is not None:
                if filters.intent is not None:
                    query = query.filter(SuggestionLog.intent == filters.intent.value)
                if filters.status is not None:
                    query = query.filter(SuggestionLog.status == filters.status.value)
            records = [log.to_record() for log in query.all()]

        # Jurisdiction (JSON list) and date filters are applied on the records
        return newest_first(r for r in records if matches_history_filters(r, filters))

    def list_for_organization(
        self,
        organization_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[SuggestionLogRecord]:
        with self.session_factory() as session:
            logs = (
                session.query(SuggestionLog)
                .filter(SuggestionLog.organization_id == organization_id)
                .all()
            )
            records = [log.to_record() for log in logs]

        return newest_first(r for r in records if in_window(r, start, end))
