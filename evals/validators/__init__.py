"""
Eval Validators - Validation rules for synthesized suggestions.

Validators:
- GroundingValidator: Ensures suggestions reference only retrieved documents
- HallucinationDetector: Detects placeholders, guarantees, legal-advice claims
  and invented statistics
- ContentSafetyValidator: Combines both into the pipeline's safety verdict
"""

from .grounding import GroundingValidator, GroundingResult
from .hallucination import HallucinationDetector, HallucinationResult
from .safety import ContentSafetyValidator

__all__ = [
    "GroundingValidator",
    "GroundingResult",
    "HallucinationDetector",
    "HallucinationResult",
    "ContentSafetyValidator",
]
