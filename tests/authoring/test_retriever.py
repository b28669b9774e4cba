"""
Tests for the verified retriever.

CRITICAL: Retrieval must be deterministic and fail as a whole.
"""

import asyncio

import pytest

from authoring.exceptions import RetrievalTimeoutError
from authoring.schemas.documents import RetrievalQuery, SourceType, VerificationStatus
from authoring.services.knowledge_store import InMemoryKnowledgeStore
from authoring.services.retriever import VerifiedRetriever


class SlowStore(InMemoryKnowledgeStore):
    """Store whose rules collection never answers in time."""

    async def query_rules(self, criteria):
        await asyncio.sleep(5)
        return []


class BrokenStore(InMemoryKnowledgeStore):
    """Store whose standards collection is unavailable."""

    async def query_standards(self, criteria):
        raise ConnectionError("standards collection unavailable")


@pytest.fixture
def documents(make_knowledge_document):
    return {
        "templates": [
            make_knowledge_document(
                "tmpl-dense", title="Medication errors", content="medication errors recorded",
            ),
            make_knowledge_document(
                "tmpl-sparse", title="Guidance", content="medication errors " + "word " * 38,
            ),
            make_knowledge_document(
                "tmpl-scotland", title="Medication errors", content="medication errors",
                jurisdictions=["Scotland"],
            ),
            make_knowledge_document(
                "tmpl-old", title="Medication errors", content="medication errors",
                is_deprecated=True,
            ),
        ],
        "standards": [
            make_knowledge_document(
                "std-dense", title="Medication errors", content="medication errors reported",
                standard_codes=["CQC-REG12"],
            ),
        ],
        "rules": [
            make_knowledge_document(
                "rule-dense", title="Medication errors", content="medication errors notified",
                verified=False,
            ),
            make_knowledge_document(
                "rule-weak", title="Note", content="medication " + "word " * 50,
            ),
        ],
    }


@pytest.fixture
def store(documents):
    return InMemoryKnowledgeStore(**documents)


def query(**overrides):
    data = {"keywords": ["medication", "errors"], "jurisdictions": ["England"]}
    data.update(overrides)
    return RetrievalQuery(**data)


class TestVerifiedRetriever:
    """Tests for VerifiedRetriever.retrieve."""

    def test_orders_by_score_then_source_order(self, store):
        results = asyncio.run(VerifiedRetriever(store).retrieve(query()))
        assert [d.id for d in results] == ["tmpl-dense", "std-dense", "rule-dense", "tmpl-sparse"]

    def test_scores_and_source_types(self, store):
        results = asyncio.run(VerifiedRetriever(store).retrieve(query()))
        by_id = {d.id: d for d in results}
        assert by_id["tmpl-dense"].relevance_score == pytest.approx(1.0)
        assert by_id["tmpl-sparse"].relevance_score == pytest.approx(0.6 + 8 / 41)
        assert by_id["std-dense"].source_type == SourceType.COMPLIANCE_STANDARD
        assert by_id["rule-dense"].source_type == SourceType.JURISDICTIONAL_RULE

    def test_relevance_floor(self, store):
        results = asyncio.run(VerifiedRetriever(store).retrieve(query()))
        assert "rule-weak" not in [d.id for d in results]
        assert all(d.relevance_score >= 0.7 for d in results)

        strict = asyncio.run(VerifiedRetriever(store).retrieve(query(min_relevance_score=0.9)))
        assert "tmpl-sparse" not in [d.id for d in strict]

    def test_truncates_to_max_results(self, store):
        results = asyncio.run(VerifiedRetriever(store).retrieve(query(max_results=2)))
        assert [d.id for d in results] == ["tmpl-dense", "std-dense"]

    def test_jurisdiction_filter(self, store):
        results = asyncio.run(VerifiedRetriever(store).retrieve(query()))
        assert "tmpl-scotland" not in [d.id for d in results]

    def test_deprecated_excluded_by_default(self, store):
        results = asyncio.run(VerifiedRetriever(store).retrieve(query()))
        assert "tmpl-old" not in [d.id for d in results]

    def test_deprecated_included_on_request(self, store):
        results = asyncio.run(VerifiedRetriever(store).retrieve(query(include_deprecated=True)))
        by_id = {d.id: d for d in results}
        assert by_id["tmpl-old"].verification_status == VerificationStatus.DEPRECATED

    def test_verification_status(self, store):
        results = asyncio.run(VerifiedRetriever(store).retrieve(query()))
        by_id = {d.id: d for d in results}
        assert by_id["tmpl-dense"].verification_status == VerificationStatus.VERIFIED
        assert by_id["rule-dense"].verification_status == VerificationStatus.PENDING

    def test_standards_filter_applies_to_standards_only(self, store):
        results = asyncio.run(VerifiedRetriever(store).retrieve(query(standards=["NICE-SC1"])))
        ids = [d.id for d in results]
        assert "std-dense" not in ids
        assert "tmpl-dense" in ids

    def test_deterministic(self, store):
        """CRITICAL: Same query, same store, same ordered result."""
        retriever = VerifiedRetriever(store)
        first = asyncio.run(retriever.retrieve(query()))
        second = asyncio.run(retriever.retrieve(query()))
        assert [(d.id, d.relevance_score) for d in first] == [(d.id, d.relevance_score) for d in second]

    def test_empty_store(self):
        results = asyncio.run(VerifiedRetriever(InMemoryKnowledgeStore()).retrieve(query()))
        assert results == []

    def test_timeout(self, documents):
        retriever = VerifiedRetriever(SlowStore(**documents), timeout_seconds=0.05)
        with pytest.raises(RetrievalTimeoutError) as exc_info:
            asyncio.run(retriever.retrieve(query()))
        assert exc_info.value.timeout_seconds == 0.05

    def test_store_failure_propagates(self, documents):
        """A failing collection fails the whole retrieval, no partial results."""
        retriever = VerifiedRetriever(BrokenStore(**documents))
        with pytest.raises(ConnectionError):
            asyncio.run(retriever.retrieve(query()))
