"""
Hallucination Detector - Detects forbidden patterns in assembled suggestions.

Suggestions are copied from verified documents, so anything below indicates
either a defective source document or content that did not come from one.

Checks for:
1. Unfilled template placeholders
2. Absolute compliance guarantees
3. Claims to be legal advice
4. Invented statistics
"""

import re
from typing import Any, Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field


class HallucinationError(BaseModel):
    """A detected forbidden pattern."""

    error_type: str
    text: str
    location: Optional[str] = None
    pattern_matched: Optional[str] = None
    message: str


class HallucinationResult(BaseModel):
    """Result of hallucination detection."""

    passed: bool
    total_segments: int = 0
    clean_segments: int = 0
    errors: List[HallucinationError] = Field(default_factory=list)

    @property
    def hallucination_rate(self) -> float:
        """Percentage of text segments with detected issues."""
        if self.total_segments == 0:
            return 0.0
        return ((self.total_segments - self.clean_segments) / self.total_segments) * 100


def iter_text(content: Any, path: str = "") -> Iterator[Tuple[str, str]]:
    """Yield (location, text) for every string inside nested content."""
    if isinstance(content, str):
        yield path or "$", content
    elif isinstance(content, dict):
        for key, value in content.items():
            yield from iter_text(value, f"{path}.{key}" if path else str(key))
    elif isinstance(content, (list, tuple)):
        for index, value in enumerate(content):
            yield from iter_text(value, f"{path}[{index}]")


class HallucinationDetector:
    """
    Detects forbidden patterns in suggestion content.

    Forbidden patterns include:
    - Placeholders ("{{ name }}", "[insert date]", "TBC")
    - Guarantees ("guarantees compliance", "100% compliant")
    - Legal advice ("this constitutes legal advice")
    - Invented statistics ("studies show", "87% of care homes")
    """

    # Unfilled template placeholders (FORBIDDEN)
    PLACEHOLDER_PATTERNS = [
        r"\{\{[^}]*\}\}",
        r"\[\s*(insert|enter|add)\b[^\]]*\]",
        r"\[\s*(organisation|organization|provider|home)\s+name\s*\]",
        r"\b(TBC|TBD)\b",
        r"\bX{3,}\b",
    ]

    # Absolute compliance guarantees (FORBIDDEN)
    GUARANTEE_PATTERNS = [
        r"\bguarantee(s|d)?\s+(full\s+)?compliance\b",
        r"\b100\s*%\s+compliant\b",
        r"\bfully\s+compliant\s+with\s+all\b",
        r"\bwill\s+(always\s+)?pass\s+(any|every|all)\s+inspections?\b",
        r"\bno\s+risk\s+of\s+(enforcement|non-?compliance)\b",
    ]

    # Claims to be legal advice (FORBIDDEN)
    LEGAL_ADVICE_PATTERNS = [
        r"\b(this|it)\s+(constitutes|is)\s+legal\s+advice\b",
        r"\blegally\s+binding\s+advice\b",
        r"\bno\s+need\s+to\s+(consult|seek)\b",
        r"\bas\s+your\s+(lawyer|solicitor|legal\s+adviser)\b",
    ]

    # Statistics not traceable to a source (FORBIDDEN)
    STATISTIC_PATTERNS = [
        r"\b(studies|research)\s+(show|shows|prove|proves)\b",
        r"\b\d{1,3}(\.\d+)?\s*%\s+of\s+(care\s+homes|providers|services|residents|inspections)\b",
        r"\b(most|many)\s+experts\s+agree\b",
    ]

    def __init__(self, custom_forbidden_patterns: Optional[List[str]] = None):
        """
        Initialize the detector.

        Args:
            custom_forbidden_patterns: Additional regex patterns to check
        """
        self.custom_patterns = custom_forbidden_patterns or []

        # Compile all patterns
        self.compiled_patterns = {
            "placeholder": [re.compile(p, re.IGNORECASE) for p in self.PLACEHOLDER_PATTERNS],
            "guarantee": [re.compile(p, re.IGNORECASE) for p in self.GUARANTEE_PATTERNS],
            "legal_advice": [re.compile(p, re.IGNORECASE) for p in self.LEGAL_ADVICE_PATTERNS],
            "invented_statistic": [re.compile(p, re.IGNORECASE) for p in self.STATISTIC_PATTERNS],
            "custom": [re.compile(p, re.IGNORECASE) for p in self.custom_patterns],
        }

    def detect(self, content: Any) -> HallucinationResult:
        """
        Detect forbidden patterns across all text in suggestion content.

        Args:
            content: Suggestion content (nested dicts/lists of strings)

        Returns:
            HallucinationResult with detected issues
        """
        result = HallucinationResult(passed=True)

        for location, text in iter_text(content):
            result.total_segments += 1
            errors = self.detect_in_text(text, location)
            if errors:
                result.errors.extend(errors)
                result.passed = False
            else:
                result.clean_segments += 1

        return result

    def detect_in_text(self, text: str, location: Optional[str] = None) -> List[HallucinationError]:
        """
        Detect forbidden patterns in a single string.

        Args:
            text: Text to check
            location: Where the text sits in the content (for messages)

        Returns:
            List of detected issues, at most one per pattern type
        """
        errors = []

        for pattern_type, patterns in self.compiled_patterns.items():
            for pattern in patterns:
                if match := pattern.search(text):
                    errors.append(HallucinationError(
                        error_type=pattern_type,
                        text=text[:100],
                        location=location,
                        pattern_matched=match.group(),
                        message=f"Forbidden pattern ({pattern_type}): '{match.group()}'"
                    ))
                    break  # One match per pattern type is enough

        return errors

    def is_clean(self, text: str) -> bool:
        """
        Quick check if text contains any forbidden patterns.

        Args:
            text: Text to check

        Returns:
            True if no forbidden patterns found
        """
        for patterns in self.compiled_patterns.values():
            for pattern in patterns:
                if pattern.search(text):
                    return False
        return True
