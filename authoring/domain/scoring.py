"""
Relevance and confidence scoring.

CRITICAL: These functions must be deterministic and keep their weights.
Retrieval ordering and guardrail outcomes are reproduced from them in tests
and audits.

Relevance is a keyword heuristic, not semantic search. It can be swapped for
embedding similarity later as long as it still returns a value in [0, 1].
"""

import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from authoring.schemas.documents import RetrievedDocument, VerificationStatus

# Relevance weights
KEYWORD_MATCH_WEIGHT = 0.6
FREQUENCY_BONUS_CAP = 0.4
FREQUENCY_DENSITY_FACTOR = 4.0
NO_KEYWORD_RELEVANCE = 0.8

# Confidence weights
RELEVANCE_WEIGHT = 0.4
SOURCE_COUNT_WEIGHT = 0.3
VERIFICATION_WEIGHT = 0.2
RECENCY_WEIGHT = 0.1
SOURCE_COUNT_SATURATION = 5

RECENCY_WINDOW = timedelta(days=365)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def relevance_score(keywords: Sequence[str], title: str, content: str) -> float:
    """
    Score a document's relevance to the query keywords.

    score = (matched keywords / keywords) * 0.6
          + min(0.4, 4 * keyword occurrences / word count)

    Documents scored without keywords default to 0.8.

    Args:
        keywords: Query keywords (lowercase)
        title: Document title
        content: Document body

    Returns:
        Relevance score in [0, 1]
    """
    if not keywords:
        return NO_KEYWORD_RELEVANCE

    text = f"{title} {content}".lower()
    word_count = max(len(text.split()), 1)

    matched = sum(1 for keyword in keywords if keyword in text)
    occurrences = sum(len(re.findall(re.escape(keyword), text)) for keyword in keywords)

    keyword_score = (matched / len(keywords)) * KEYWORD_MATCH_WEIGHT
    frequency_bonus = min(FREQUENCY_BONUS_CAP, FREQUENCY_DENSITY_FACTOR * occurrences / word_count)

    return clamp(keyword_score + frequency_bonus)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_recent(last_updated: datetime, now: Optional[datetime] = None) -> bool:
    """True when the document was updated within the last 365 days."""
    now = as_utc(now or datetime.now(timezone.utc))
    return now - as_utc(last_updated) <= RECENCY_WINDOW


def confidence_score(
    documents: Sequence[RetrievedDocument],
    now: Optional[datetime] = None,
) -> float:
    """
    Composite confidence for a synthesized suggestion.

    confidence = avg relevance * 0.4
               + min(n / 5, 1) * 0.3
               + (verified / n) * 0.2
               + (updated within a year / n) * 0.1

    Args:
        documents: Documents the suggestion was built from
        now: Reference time for recency (defaults to current UTC time)

    Returns:
        Confidence in [0, 1]; 0 for no documents
    """
    count = len(documents)
    if count == 0:
        return 0.0

    average_relevance = sum(d.relevance_score for d in documents) / count
    verified = sum(1 for d in documents if d.verification_status == VerificationStatus.VERIFIED)
    recent = sum(1 for d in documents if is_recent(d.last_updated, now))

    confidence = (
        average_relevance * RELEVANCE_WEIGHT
        + min(count / SOURCE_COUNT_SATURATION, 1.0) * SOURCE_COUNT_WEIGHT
        + (verified / count) * VERIFICATION_WEIGHT
        + (recent / count) * RECENCY_WEIGHT
    )
    return clamp(confidence)


def relevance_band(score: float) -> str:
    """High above 0.8, Medium above 0.6, else Low."""
    if score > 0.8:
        return "High"
    if score > 0.6:
        return "Medium"
    return "Low"


def stale_documents(
    documents: Sequence[RetrievedDocument],
    now: Optional[datetime] = None,
) -> List[RetrievedDocument]:
    """Documents not updated within the recency window."""
    return [d for d in documents if not is_recent(d.last_updated, now)]
