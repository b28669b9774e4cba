"""
Suggestion schemas - synthesis output, safety results, fallbacks, responses.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from authoring.schemas.documents import SourceReference
from authoring.schemas.request import Jurisdiction


class SynthesisMethod(str, Enum):
    """How a suggestion was assembled from retrieved text."""
    SINGLE_SOURCE = "single_source"
    MULTI_SOURCE_MERGE = "multi_source_merge"
    TEMPLATE_ASSEMBLY = "template_assembly"


class SynthesizedSuggestion(BaseModel):
    """Intermediate synthesis result, held for one request only."""

    content: Dict[str, Any]
    confidence: float = Field(..., ge=0.0, le=1.0)
    document_ids: List[str] = Field(default_factory=list)
    synthesis_method: SynthesisMethod
    warnings: List[str] = Field(default_factory=list)


class SafetyValidation(BaseModel):
    """Verdict from the content safety validator."""

    safe: bool
    confidence: float = Field(..., ge=0.0, le=1.0)
    issues: List[str] = Field(default_factory=list)


class FallbackReason(str, Enum):
    """Why the pipeline returned a fallback instead of a suggestion."""
    INSUFFICIENT_SOURCES = "insufficient_sources"
    LOW_CONFIDENCE = "low_confidence"
    SAFETY_VALIDATION_FAILED = "safety_validation_failed"
    SYSTEM_ERROR = "system_error"


class FallbackResponse(BaseModel):
    """Safe, non-authoritative guidance returned when a guardrail trips."""

    reason: FallbackReason
    message: str
    suggested_actions: List[str] = Field(default_factory=list)
    escalation_required: bool = False
    contact_compliance_officer: bool = True


class ResponseMetadata(BaseModel):
    """Generation metadata attached to every response."""

    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    processing_time_ms: float = 0.0
    retrieved_documents: int = 0
    jurisdiction_context: List[Jurisdiction] = Field(default_factory=list)


class SuggestionResponse(BaseModel):
    """
    What the caller receives.

    Fallback responses never carry a suggestion or source references and
    are always flagged for human review.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    suggestion: Optional[Dict[str, Any]] = None
    source_references: List[SourceReference] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    requires_human_review: bool = True
    fallback_used: bool = False
    fallback_message: Optional[str] = None
    fallback_reason: Optional[FallbackReason] = None
    suggested_actions: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
