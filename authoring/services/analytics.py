"""
Usage analytics over suggestion logs.

Counts, outcome rates and breakdowns for one organization over a time
range. Rates are percentages of all suggestions in the range.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional

from pydantic import BaseModel, Field

from authoring.schemas.log import SuggestionLogRecord, SuggestionStatus, TimeRange, UserDecision


class UsageAnalytics(BaseModel):
    """Aggregate usage metrics for an organization."""

    organization_id: str
    time_range: TimeRange
    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Overall counts
    total_suggestions: int = 0
    successful_suggestions: int = 0
    fallback_count: int = 0
    error_count: int = 0

    # User decisions
    accepted_count: int = 0
    modified_count: int = 0
    rejected_count: int = 0
    pending_count: int = 0

    # Rates (percent of total_suggestions)
    success_rate: float = 0.0
    acceptance_rate: float = 0.0
    modification_rate: float = 0.0
    rejection_rate: float = 0.0

    # Average confidence of successful suggestions
    average_confidence: float = 0.0

    # Breakdowns
    intent_breakdown: Dict[str, int] = Field(default_factory=dict)
    jurisdiction_breakdown: Dict[str, int] = Field(default_factory=dict)


def _percent(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(count / total * 100, 2)


def _response_confidence(record: SuggestionLogRecord) -> Optional[float]:
    if not record.response:
        return None
    return record.response.get("confidence")


def compute_usage_analytics(
    organization_id: str,
    time_range: TimeRange,
    records: Iterable[SuggestionLogRecord],
) -> UsageAnalytics:
    """
    Aggregate suggestion logs into usage analytics.

    Args:
        organization_id: Organization the records belong to
        time_range: Reporting window (records are assumed already filtered)
        records: Suggestion log records

    Returns:
        UsageAnalytics with counts, rates and breakdowns
    """
    records = list(records)
    total = len(records)

    statuses = Counter(r.status for r in records)
    decisions = Counter(r.decision.override_decision for r in records)

    successful = [r for r in records if r.status == SuggestionStatus.SUCCESS]
    confidences = [c for c in (_response_confidence(r) for r in successful) if c is not None]
    average_confidence = round(sum(confidences) / len(confidences), 2) if confidences else 0.0

    intent_breakdown: Dict[str, int] = Counter(r.intent.value for r in records)
    jurisdiction_breakdown: Dict[str, int] = Counter(
        j for r in records for j in r.jurisdictions
    )

    return UsageAnalytics(
        organization_id=organization_id,
        time_range=time_range,
        total_suggestions=total,
        successful_suggestions=statuses[SuggestionStatus.SUCCESS],
        fallback_count=statuses[SuggestionStatus.FALLBACK],
        error_count=statuses[SuggestionStatus.ERROR],
        accepted_count=decisions[UserDecision.ACCEPTED],
        modified_count=decisions[UserDecision.MODIFIED],
        rejected_count=decisions[UserDecision.REJECTED],
        pending_count=decisions[UserDecision.PENDING],
        success_rate=_percent(statuses[SuggestionStatus.SUCCESS], total),
        acceptance_rate=_percent(decisions[UserDecision.ACCEPTED], total),
        modification_rate=_percent(decisions[UserDecision.MODIFIED], total),
        rejection_rate=_percent(decisions[UserDecision.REJECTED], total),
        average_confidence=average_confidence,
        intent_breakdown=dict(intent_breakdown),
        jurisdiction_breakdown=dict(jurisdiction_breakdown),
    )
