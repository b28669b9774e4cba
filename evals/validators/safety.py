"""
Content Safety Validator - Gate for synthesized suggestions.

Combines grounding and hallucination checks into a single verdict with a
confidence score, as consumed by the suggestion pipeline's safety guard.

Confidence starts at 1.0 and drops per issue:
- grounding failure: -0.5
- each forbidden pattern: -0.2
"""

from typing import Any, Dict, Optional

from authoring.schemas.suggestion import SafetyValidation

from .grounding import GroundingValidator
from .hallucination import HallucinationDetector

GROUNDING_PENALTY = 0.5
PATTERN_PENALTY = 0.2


class ContentSafetyValidator:
    """
    Deterministic content safety validator.

    Expects the pipeline's safety context to carry `document_ids` (sources
    the suggestion claims) and `retrieved_document_ids` (what was retrieved).
    """

    def __init__(
        self,
        grounding: Optional[GroundingValidator] = None,
        detector: Optional[HallucinationDetector] = None,
    ):
        self.grounding = grounding or GroundingValidator()
        self.detector = detector or HallucinationDetector()

    async def validate(self, content: Dict[str, Any], context: Dict[str, Any]) -> SafetyValidation:
        """
        Validate suggestion content.

        Args:
            content: Synthesized suggestion content
            context: Safety context from the pipeline

        Returns:
            SafetyValidation(safe, confidence, issues)
        """
        grounding = self.grounding.validate(
            context.get("document_ids", []),
            context.get("retrieved_document_ids", []),
        )
        hallucinations = self.detector.detect(content)

        issues = [error.message for error in grounding.errors]
        issues.extend(error.message for error in hallucinations.errors)

        confidence = 1.0
        if not grounding.passed:
            confidence -= GROUNDING_PENALTY
        confidence -= PATTERN_PENALTY * len(hallucinations.errors)

        return SafetyValidation(
            safe=grounding.passed and hallucinations.passed,
            confidence=round(max(0.0, confidence), 4),
            issues=issues,
        )
