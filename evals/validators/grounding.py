"""
Grounding Validator - Ensures suggestions are built only from retrieved sources.

CRITICAL: Every document a suggestion claims to use must be one of the
documents retrieved for that request, and a suggestion must cite at least
one source. Content that points at anything else was not assembled from
verified material.
"""

from typing import Any, Iterable, List

from pydantic import BaseModel, Field


class UngroundedSuggestionError(BaseModel):
    """Error for a suggestion that cites no source documents."""

    error_type: str = "ungrounded_suggestion"
    message: str = "Suggestion does not reference any source document"


class InvalidSourceRefError(BaseModel):
    """Error for a source reference that was not retrieved for this request."""

    document_id: str
    error_type: str = "invalid_source_ref"
    message: str = Field(default="")

    def __init__(self, **data):
        super().__init__(**data)
        if not self.message:
            self.message = f"Document '{self.document_id}' was not among the retrieved sources"


class GroundingResult(BaseModel):
    """Result of grounding validation."""

    passed: bool
    total_refs: int = 0
    valid_refs: int = 0
    errors: List[Any] = Field(default_factory=list)

    @property
    def validity_rate(self) -> float:
        """Percentage of source references that are valid."""
        if self.total_refs == 0:
            return 0.0
        return (self.valid_refs / self.total_refs) * 100


class GroundingValidator:
    """
    Validates that a suggestion is grounded in its retrieved documents.

    Rules:
    1. A suggestion MUST reference at least one document
    2. Every referenced document MUST be in the retrieved set
    3. Document ids must exactly match (case-sensitive)
    """

    def validate(
        self,
        document_ids: Iterable[str],
        retrieved_ids: Iterable[str],
    ) -> GroundingResult:
        """
        Validate the suggestion's source references.

        Args:
            document_ids: Ids the suggestion claims to use
            retrieved_ids: Ids actually retrieved for the request

        Returns:
            GroundingResult with validation status and errors
        """
        result = GroundingResult(passed=True)
        available = set(retrieved_ids)

        # Check 1: At least one source
        document_ids = list(document_ids)
        if not document_ids:
            result.errors.append(UngroundedSuggestionError())
            result.passed = False
            return result

        # Check 2: Every source was retrieved
        for document_id in document_ids:
            result.total_refs += 1
            if document_id in available:
                result.valid_refs += 1
            else:
                result.errors.append(InvalidSourceRefError(document_id=document_id))
                result.passed = False

        return result
