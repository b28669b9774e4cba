"""
Knowledge and retrieval schemas.

KnowledgeDocument is what the knowledge store holds. RetrievedDocument is the
scored, per-request view the pipeline works with; it is never persisted.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceType(str, Enum):
    """Knowledge collection a document came from."""
    POLICY_TEMPLATE = "policy_template"
    COMPLIANCE_STANDARD = "compliance_standard"
    JURISDICTIONAL_RULE = "jurisdictional_rule"
    BEST_PRACTICE = "best_practice"


class VerificationStatus(str, Enum):
    """Verification state of a source document."""
    VERIFIED = "verified"
    PENDING = "pending"
    DEPRECATED = "deprecated"


class KnowledgeDocument(BaseModel):
    """A record in one of the knowledge store collections."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str
    version: str = "1.0"
    section: Optional[str] = None
    jurisdictions: List[str] = Field(default_factory=list)
    standard_codes: List[str] = Field(default_factory=list)
    is_deprecated: bool = False
    verified: bool = True
    last_updated: datetime
    metadata: Dict[str, Any] = Field(default_factory=dict)


class KnowledgeFilter(BaseModel):
    """Filter criteria passed to each knowledge store collection query."""

    model_config = ConfigDict(frozen=True)

    keywords: List[str] = Field(default_factory=list)
    jurisdictions: List[str] = Field(default_factory=list)
    standards: List[str] = Field(default_factory=list)
    include_deprecated: bool = False


class RetrievalQuery(BaseModel):
    """Parameters for one VerifiedRetriever call."""

    model_config = ConfigDict(frozen=True)

    keywords: List[str] = Field(default_factory=list)
    jurisdictions: List[str] = Field(default_factory=list)
    standards: List[str] = Field(default_factory=list)
    min_relevance_score: float = Field(default=0.7, ge=0.0, le=1.0)
    max_results: int = Field(default=10, ge=1)
    include_deprecated: bool = False

    def to_filter(self) -> KnowledgeFilter:
        """Criteria shared by the three collection queries."""
        return KnowledgeFilter(
            keywords=self.keywords,
            jurisdictions=self.jurisdictions,
            standards=self.standards,
            include_deprecated=self.include_deprecated,
        )


class RetrievedDocument(BaseModel):
    """A scored knowledge document retrieved for a single request."""

    model_config = ConfigDict(frozen=True)

    source_type: SourceType
    id: str
    title: str
    content: str
    version: str
    section: Optional[str] = None
    jurisdictions: List[str] = Field(default_factory=list)
    standard_codes: List[str] = Field(default_factory=list)
    relevance_score: float = Field(..., ge=0.0, le=1.0)
    verification_status: VerificationStatus
    last_updated: datetime
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_knowledge(
        cls,
        document: KnowledgeDocument,
        source_type: SourceType,
        relevance_score: float,
    ) -> "RetrievedDocument":
        """Wrap a store record with its source type and relevance score."""
        if document.is_deprecated:
            status = VerificationStatus.DEPRECATED
        elif document.verified:
            status = VerificationStatus.VERIFIED
        else:
            status = VerificationStatus.PENDING

        return cls(
            source_type=source_type,
            id=document.id,
            title=document.title,
            content=document.content,
            version=document.version,
            section=document.section,
            jurisdictions=list(document.jurisdictions),
            standard_codes=list(document.standard_codes),
            relevance_score=relevance_score,
            verification_status=status,
            last_updated=document.last_updated,
            metadata=dict(document.metadata),
        )


class SourceReference(BaseModel):
    """Citation for a document used in a suggestion."""

    model_config = ConfigDict(frozen=True)

    type: SourceType
    id: str
    title: str
    version: str
    section: Optional[str] = None
    relevance_score: float
    verification_status: VerificationStatus

    @classmethod
    def from_document(cls, document: RetrievedDocument) -> "SourceReference":
        return cls(
            type=document.source_type,
            id=document.id,
            title=document.title,
            version=document.version,
            section=document.section,
            relevance_score=document.relevance_score,
            verification_status=document.verification_status,
        )
