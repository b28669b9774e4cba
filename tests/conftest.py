"""
Shared pytest fixtures for the Policy Authoring Assistant tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from authoring.config import GuardrailThresholds
from authoring.database import init_db
from authoring.schemas.documents import (
    KnowledgeDocument,
    RetrievedDocument,
    SourceType,
    VerificationStatus,
)
from authoring.schemas.request import RequestingUser, SuggestionRequest
from authoring.schemas.suggestion import SafetyValidation
from authoring.services.audit_sink import InMemoryAuditSink
from authoring.services.role_guard import RolePermissionGuard
from authoring.services.suggestion_orchestrator import SuggestionOrchestrator
from authoring.services.synthesizer import ClauseSynthesizer
from authoring.services.transparency import StructuredTransparencyLogger


FIXED_NOW = datetime(2026, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# COLLABORATOR STUBS
# ============================================================================

class StubRetriever:
    """Retriever returning a preset document list (or raising)."""

    def __init__(self, documents=None, error: Optional[Exception] = None):
        self.documents = list(documents or [])
        self.error = error
        self.queries = []

    async def retrieve(self, query):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.documents)


class StubSafetyValidator:
    """Safety validator returning a fixed verdict."""

    def __init__(self, safe: bool = True, confidence: float = 0.95, error: Optional[Exception] = None):
        self.safe = safe
        self.confidence = confidence
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def validate(self, content, context):
        self.calls.append({"content": content, "context": context})
        if self.error is not None:
            raise self.error
        return SafetyValidation(safe=self.safe, confidence=self.confidence)


class RecordingTransparencyLogger(StructuredTransparencyLogger):
    """Structured transparency logger that also keeps what it reported."""

    def __init__(self):
        self.events: List[Dict[str, Any]] = []

    def log_decision(self, event):
        super().log_decision(event)
        self.events.append(dict(event))


class FailingTransparencyLogger:
    """Transparency logger that always fails."""

    def __init__(self):
        self.attempts = 0

    def log_decision(self, event):
        self.attempts += 1
        raise ConnectionError("transparency service unavailable")


class FailingAuditSink(InMemoryAuditSink):
    """Audit sink whose append always fails."""

    def append(self, record):
        raise ConnectionError("audit database unavailable")


# ============================================================================
# DOCUMENT FIXTURES
# ============================================================================

@pytest.fixture
def fixed_now() -> datetime:
    """Reference time for recency checks."""
    return FIXED_NOW


@pytest.fixture
def make_document():
    """Factory for scored retrieved documents."""

    def _make(
        doc_id: str,
        relevance: float = 0.9,
        source_type: SourceType = SourceType.POLICY_TEMPLATE,
        status: VerificationStatus = VerificationStatus.VERIFIED,
        age_days: int = 10,
        content: str = (
            "Medication errors are recorded and reported to the manager. "
            "Staff complete medication training to ensure safe administration."
        ),
        title: Optional[str] = None,
        standard_codes: Optional[List[str]] = None,
        jurisdictions: Optional[List[str]] = None,
    ) -> RetrievedDocument:
        return RetrievedDocument(
            source_type=source_type,
            id=doc_id,
            title=title or f"Document {doc_id}",
            content=content,
            version="1.0",
            section="General",
            jurisdictions=jurisdictions or ["England"],
            standard_codes=standard_codes or [],
            relevance_score=relevance,
            verification_status=status,
            last_updated=FIXED_NOW - timedelta(days=age_days),
        )

    return _make


@pytest.fixture
def make_knowledge_document():
    """Factory for knowledge store records."""

    def _make(
        doc_id: str,
        title: str = "Medication Policy",
        content: str = "Medication errors are recorded and reported.",
        jurisdictions: Optional[List[str]] = None,
        standard_codes: Optional[List[str]] = None,
        is_deprecated: bool = False,
        verified: bool = True,
    ) -> KnowledgeDocument:
        return KnowledgeDocument(
            id=doc_id,
            title=title,
            content=content,
            jurisdictions=jurisdictions or ["England"],
            standard_codes=standard_codes or [],
            is_deprecated=is_deprecated,
            verified=verified,
            last_updated=FIXED_NOW - timedelta(days=30),
        )

    return _make


# ============================================================================
# REQUEST FIXTURES
# ============================================================================

@pytest.fixture
def compliance_officer() -> RequestingUser:
    return RequestingUser(id="user-001", role="compliance_officer", organization_id="org-001")


@pytest.fixture
def care_staff() -> RequestingUser:
    return RequestingUser(id="user-002", role="care_staff", organization_id="org-001")


@pytest.fixture
def clause_request() -> SuggestionRequest:
    """A valid suggest_clause request for England."""
    return SuggestionRequest(
        intent="suggest_clause",
        template_id="tmpl-medication-management",
        jurisdictions=["England"],
        context="Medication administration errors must be recorded and reported",
        user_role="compliance_officer",
        user_id="user-001",
    )


# ============================================================================
# ORCHESTRATOR FIXTURES
# ============================================================================

@pytest.fixture
def thresholds() -> GuardrailThresholds:
    return GuardrailThresholds()


@pytest.fixture
def build_orchestrator(thresholds):
    """Factory for an orchestrator wired to stubs."""

    def _build(
        documents=None,
        retriever=None,
        safety_validator=None,
        audit_sink=None,
        transparency_logger=None,
    ) -> SuggestionOrchestrator:
        return SuggestionOrchestrator(
            knowledge_store=None,
            role_guard=RolePermissionGuard(),
            audit_sink=audit_sink if audit_sink is not None else InMemoryAuditSink(),
            safety_validator=safety_validator or StubSafetyValidator(),
            transparency_logger=transparency_logger or RecordingTransparencyLogger(),
            thresholds=thresholds,
            retriever=retriever or StubRetriever(documents),
            synthesizer=ClauseSynthesizer(now=lambda: FIXED_NOW),
        )

    return _build


@pytest.fixture
def stub_retriever():
    return StubRetriever


@pytest.fixture
def stub_safety_validator():
    return StubSafetyValidator


@pytest.fixture
def failing_transparency_logger():
    return FailingTransparencyLogger()


@pytest.fixture
def failing_audit_sink():
    return FailingAuditSink()


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture
def session_factory():
    """Session factory on a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def file_session_factory(tmp_path):
    """Session factory on a SQLite file, one connection per thread."""
    engine = create_engine(f"sqlite:///{tmp_path / 'audit.db'}")
    init_db(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()
