"""
Tests for relevance and confidence scoring.

CRITICAL: These weights drive retrieval order and guardrail outcomes.
"""

from datetime import datetime, timedelta

import pytest

from authoring.domain.scoring import (
    NO_KEYWORD_RELEVANCE,
    confidence_score,
    is_recent,
    relevance_band,
    relevance_score,
    stale_documents,
)
from authoring.schemas.documents import VerificationStatus


class TestRelevanceScore:
    """Tests for the keyword relevance heuristic."""

    def test_full_match_with_dense_keywords(self):
        score = relevance_score(["medication"], "Medication Policy", "medication errors")
        assert score == pytest.approx(1.0)

    def test_no_match(self):
        assert relevance_score(["infection"], "Complaints", "written response within three days") == 0.0

    def test_partial_match(self):
        """Half the keywords matched, one occurrence in 100 words."""
        content = "medication" + " word" * 98
        score = relevance_score(["medication", "infection"], "Policy", content)
        assert score == pytest.approx(0.5 * 0.6 + 4 * 1 / 100)

    def test_frequency_bonus_is_capped(self):
        content = "errors " * 50
        score = relevance_score(["errors"], "Errors", content)
        assert score == pytest.approx(1.0)

    def test_no_keywords_defaults(self):
        assert relevance_score([], "Any", "thing") == NO_KEYWORD_RELEVANCE

    def test_matching_is_case_insensitive(self):
        lower = relevance_score(["medication"], "MEDICATION", "MEDICATION ERRORS")
        assert lower == pytest.approx(1.0)

    def test_score_in_unit_interval(self):
        score = relevance_score(["a" * 4] * 10, "aaaa " * 10, "aaaa " * 10)
        assert 0.0 <= score <= 1.0


class TestConfidenceScore:
    """Tests for the composite confidence formula."""

    def test_saturated_confidence(self, make_document, fixed_now):
        documents = [make_document(f"doc-{i}", relevance=1.0) for i in range(5)]
        assert confidence_score(documents, now=fixed_now) == pytest.approx(1.0)

    def test_weighted_components(self, make_document, fixed_now):
        documents = [
            make_document("doc-1", relevance=0.95),
            make_document("doc-2", relevance=0.9),
            make_document("doc-3", relevance=0.85),
        ]
        # 0.9 * 0.4 + 3/5 * 0.3 + 1.0 * 0.2 + 1.0 * 0.1
        assert confidence_score(documents, now=fixed_now) == pytest.approx(0.84)

    def test_unverified_and_stale_sources(self, make_document, fixed_now):
        documents = [
            make_document("doc-1", relevance=0.7, status=VerificationStatus.PENDING, age_days=400),
            make_document("doc-2", relevance=0.7, status=VerificationStatus.DEPRECATED, age_days=400),
        ]
        # 0.7 * 0.4 + 2/5 * 0.3
        assert confidence_score(documents, now=fixed_now) == pytest.approx(0.40)

    def test_source_count_saturates(self, make_document, fixed_now):
        five = [make_document(f"doc-{i}", relevance=0.8) for i in range(5)]
        eight = [make_document(f"doc-{i}", relevance=0.8) for i in range(8)]
        assert confidence_score(five, now=fixed_now) == pytest.approx(
            confidence_score(eight, now=fixed_now)
        )

    def test_no_documents(self, fixed_now):
        assert confidence_score([], now=fixed_now) == 0.0


class TestRecency:
    """Tests for recency helpers."""

    def test_within_a_year_is_recent(self, fixed_now):
        assert is_recent(fixed_now - timedelta(days=365), now=fixed_now)
        assert not is_recent(fixed_now - timedelta(days=366), now=fixed_now)

    def test_naive_datetimes_are_utc(self, fixed_now):
        naive = datetime(2026, 5, 1)
        assert is_recent(naive, now=fixed_now)

    def test_stale_documents(self, make_document, fixed_now):
        fresh = make_document("fresh", age_days=30)
        stale = make_document("stale", age_days=500)
        assert stale_documents([fresh, stale], now=fixed_now) == [stale]


class TestRelevanceBand:
    """Tests for High/Medium/Low banding."""

    @pytest.mark.parametrize("score,band", [
        (0.95, "High"),
        (0.81, "High"),
        (0.8, "Medium"),
        (0.61, "Medium"),
        (0.6, "Low"),
        (0.1, "Low"),
    ])
    def test_bands(self, score, band):
        assert relevance_band(score) == band
