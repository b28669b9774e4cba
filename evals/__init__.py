"""
Evals Module - Safety evaluation for assembled policy suggestions.

Ensures suggestions are grounded in retrieved, verified sources and free of
forbidden content before they leave the pipeline.

Validators:
- GroundingValidator: Every referenced document must have been retrieved
- HallucinationDetector: No placeholders, guarantees, legal advice or invented statistics
- ContentSafetyValidator: Combined verdict used by the safety guardrail
"""

from .validators.grounding import GroundingValidator, GroundingResult
from .validators.hallucination import HallucinationDetector, HallucinationResult
from .validators.safety import ContentSafetyValidator

__all__ = [
    "GroundingValidator",
    "GroundingResult",
    "HallucinationDetector",
    "HallucinationResult",
    "ContentSafetyValidator",
]
