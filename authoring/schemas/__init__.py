"""
Pydantic schemas for the suggestion pipeline.
"""

from authoring.schemas.request import (
    Jurisdiction,
    REGULATORS,
    Intent,
    OutputFormat,
    RequestingUser,
    SuggestionRequest,
    RoutedRequest,
)
from authoring.schemas.documents import (
    SourceType,
    VerificationStatus,
    KnowledgeDocument,
    KnowledgeFilter,
    RetrievalQuery,
    RetrievedDocument,
    SourceReference,
)
from authoring.schemas.suggestion import (
    SynthesisMethod,
    SynthesizedSuggestion,
    SafetyValidation,
    FallbackReason,
    FallbackResponse,
    ResponseMetadata,
    SuggestionResponse,
)
from authoring.schemas.log import (
    SuggestionStatus,
    UserDecision,
    DecisionRecord,
    DecisionUpdate,
    SuggestionLogRecord,
    HistoryFilters,
    TimeRange,
)

__all__ = [
    # Request
    "Jurisdiction",
    "REGULATORS",
    "Intent",
    "OutputFormat",
    "RequestingUser",
    "SuggestionRequest",
    "RoutedRequest",
    # Documents
    "SourceType",
    "VerificationStatus",
    "KnowledgeDocument",
    "KnowledgeFilter",
    "RetrievalQuery",
    "RetrievedDocument",
    "SourceReference",
    # Suggestion
    "SynthesisMethod",
    "SynthesizedSuggestion",
    "SafetyValidation",
    "FallbackReason",
    "FallbackResponse",
    "ResponseMetadata",
    "SuggestionResponse",
    # Log
    "SuggestionStatus",
    "UserDecision",
    "DecisionRecord",
    "DecisionUpdate",
    "SuggestionLogRecord",
    "HistoryFilters",
    "TimeRange",
]
