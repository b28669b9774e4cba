"""
Tests for the clause synthesizer.

CRITICAL: All suggestion text must be copied from a retrieved document or
be a fixed template string.
"""

import pytest

from authoring.domain.extraction import split_sentences
from authoring.schemas.documents import SourceType, VerificationStatus
from authoring.schemas.request import Intent, Jurisdiction, OutputFormat, RoutedRequest
from authoring.schemas.suggestion import SynthesisMethod
from authoring.services.synthesizer import (
    WARNING_DEPRECATED,
    WARNING_FEW_SOURCES,
    WARNING_LOW_CONFIDENCE,
    WARNING_NO_STANDARDS,
    WARNING_STALE,
    ClauseSynthesizer,
)

CONTEXT = "Medication administration errors must be recorded and reported"

STANDARD_TEXT = (
    "Providers must manage medication errors.\n"
    "1. Medication errors are recorded.\n"
    "2. Medication errors are reported.\n"
    "3. Learning is shared."
)


def routed(intent=Intent.SUGGEST_CLAUSE, output_format=OutputFormat.STRUCTURED_CLAUSE, **extra):
    return RoutedRequest(
        intent=intent,
        output_format=output_format,
        jurisdictions=[Jurisdiction.ENGLAND],
        context=CONTEXT,
        **extra,
    )


@pytest.fixture
def synthesizer(fixed_now):
    return ClauseSynthesizer(now=lambda: fixed_now)


class TestStructuredClause:
    """Tests for the structured_clause strategy."""

    @pytest.fixture
    def documents(self, make_document):
        return [
            make_document("std-1", relevance=0.85, source_type=SourceType.COMPLIANCE_STANDARD),
            make_document("tmpl-1", relevance=0.95),
            make_document("rule-1", relevance=0.75, source_type=SourceType.JURISDICTIONAL_RULE),
            make_document("tmpl-2", relevance=0.9),
        ]

    def test_primary_is_most_relevant(self, synthesizer, documents):
        result = synthesizer.synthesize(documents, routed(template_id="tmpl-1"))
        assert result.content["primary_source"]["id"] == "tmpl-1"
        assert [s["id"] for s in result.content["supporting_references"]] == ["tmpl-2", "std-1"]
        assert result.document_ids == ["tmpl-1", "tmpl-2", "std-1"]

    def test_template_assembly_method(self, synthesizer, documents):
        result = synthesizer.synthesize(documents, routed(template_id="tmpl-1"))
        assert result.synthesis_method == SynthesisMethod.TEMPLATE_ASSEMBLY

    def test_single_source_method(self, synthesizer, make_document):
        documents = [
            make_document("std-1", relevance=0.95, source_type=SourceType.COMPLIANCE_STANDARD),
            make_document("tmpl-1", relevance=0.8),
        ]
        result = synthesizer.synthesize(documents, routed(template_id="tmpl-1"))
        assert result.synthesis_method == SynthesisMethod.SINGLE_SOURCE

    def test_clause_text_is_verbatim(self, synthesizer, documents):
        result = synthesizer.synthesize(documents, routed(template_id="tmpl-1"))
        clause = result.content["clause"]
        source = documents[1].content
        for sentence in split_sentences(clause["text"]):
            assert sentence in source
        assert clause["rationale"] == "Staff complete medication training to ensure safe administration."
        assert clause["title"] == "Document tmpl-1"

    def test_rationale_falls_back_to_template_string(self, synthesizer, make_document):
        documents = [
            make_document("tmpl-1", content="Medication errors are recorded."),
            make_document("tmpl-2", content="Medication errors are reported."),
        ]
        result = synthesizer.synthesize(documents, routed(template_id="tmpl-1"))
        assert result.content["clause"]["rationale"] == "Based on Document tmpl-1 (version 1.0)."

    def test_request_fields_carried(self, synthesizer, documents):
        result = synthesizer.synthesize(documents, routed(template_id="tmpl-1"))
        assert result.content["template_id"] == "tmpl-1"
        assert result.content["jurisdictions"] == ["England"]

    def test_confidence_uses_all_documents(self, synthesizer, documents):
        result = synthesizer.synthesize(documents, routed(template_id="tmpl-1"))
        # avg relevance 0.8625 over four verified, recent documents
        assert result.confidence == pytest.approx(0.8625 * 0.4 + 0.8 * 0.3 + 0.2 + 0.1)

    def test_empty_documents_rejected(self, synthesizer):
        with pytest.raises(ValueError):
            synthesizer.synthesize([], routed(template_id="tmpl-1"))


class TestWarnings:
    """Tests for quality warnings."""

    def test_clean_sources_have_no_warnings(self, synthesizer, make_document):
        documents = [make_document("a", relevance=0.95), make_document("b", relevance=0.9)]
        assert synthesizer.synthesize(documents, routed(template_id="a")).warnings == []

    def test_single_source(self, synthesizer, make_document):
        result = synthesizer.synthesize([make_document("a")], routed(template_id="a"))
        assert WARNING_FEW_SOURCES in result.warnings

    def test_deprecated_source(self, synthesizer, make_document):
        documents = [
            make_document("a"),
            make_document("b", status=VerificationStatus.DEPRECATED),
        ]
        result = synthesizer.synthesize(documents, routed(template_id="a"))
        assert WARNING_DEPRECATED in result.warnings

    def test_stale_source(self, synthesizer, make_document):
        documents = [make_document("a"), make_document("b", age_days=400)]
        result = synthesizer.synthesize(documents, routed(template_id="a"))
        assert WARNING_STALE in result.warnings

    def test_low_confidence(self, synthesizer, make_document):
        documents = [
            make_document("a", relevance=0.7, status=VerificationStatus.PENDING, age_days=400),
            make_document("b", relevance=0.7, status=VerificationStatus.PENDING, age_days=400),
        ]
        result = synthesizer.synthesize(documents, routed(template_id="a"))
        assert result.warnings[0] == WARNING_LOW_CONFIDENCE

    def test_low_confidence_threshold_is_configurable(self, fixed_now, make_document):
        documents = [make_document("a", relevance=0.95), make_document("b", relevance=0.9)]
        synthesizer = ClauseSynthesizer(low_confidence_warning=0.99, now=lambda: fixed_now)
        result = synthesizer.synthesize(documents, routed(template_id="a"))
        assert WARNING_LOW_CONFIDENCE in result.warnings


class TestMappingTable:
    """Tests for the mapping_table strategy."""

    @pytest.fixture
    def documents(self, make_document):
        return [
            make_document("tmpl-1", relevance=0.95),
            make_document(
                "std-cqc", relevance=0.9, source_type=SourceType.COMPLIANCE_STANDARD,
                content=STANDARD_TEXT, standard_codes=["CQC-REG12"],
            ),
            make_document(
                "std-nice", relevance=0.8, source_type=SourceType.COMPLIANCE_STANDARD,
                content="- Errors are reviewed.\n- Staff are supported.", standard_codes=["NICE-SC1"],
            ),
        ]

    def mapping_request(self, standards):
        return routed(
            intent=Intent.MAP_POLICY,
            output_format=OutputFormat.MAPPING_TABLE,
            policy_id="pol-1",
            standards=standards,
        )

    def test_rows_from_standards_only(self, synthesizer, documents):
        result = synthesizer.synthesize(documents, self.mapping_request(["CQC-REG12"]))
        rows = result.content["rows"]
        assert [r["standard_id"] for r in rows] == ["std-cqc", "std-nice"]
        assert rows[0]["clauses"] == [
            "Medication errors are recorded.",
            "Medication errors are reported.",
            "Learning is shared.",
        ]
        assert rows[1]["clauses"] == ["Errors are reviewed.", "Staff are supported."]
        assert result.document_ids == ["std-cqc", "std-nice"]
        assert result.synthesis_method == SynthesisMethod.MULTI_SOURCE_MERGE

    def test_coverage_and_gaps(self, synthesizer, documents):
        result = synthesizer.synthesize(documents, self.mapping_request(["cqc-reg12", "CIW-REG58"]))
        assert result.content["coverage"] == 0.5
        assert result.content["gaps"] == ["CIW-REG58"]
        assert result.content["requested_standards"] == ["cqc-reg12", "CIW-REG58"]
        assert result.content["policy_id"] == "pol-1"

    def test_full_coverage(self, synthesizer, documents):
        result = synthesizer.synthesize(documents, self.mapping_request(["CQC-REG12", "NICE-SC1"]))
        assert result.content["coverage"] == 1.0
        assert result.content["gaps"] == []

    def test_no_standards_retrieved(self, synthesizer, make_document):
        documents = [make_document("tmpl-1"), make_document("tmpl-2")]
        result = synthesizer.synthesize(documents, self.mapping_request(["CQC-REG12"]))
        assert result.content["rows"] == []
        assert result.content["coverage"] == 0.0
        assert result.document_ids == []
        assert WARNING_NO_STANDARDS in result.warnings


class TestReviewReport:
    """Tests for the review_report strategy."""

    @pytest.fixture
    def documents(self, make_document):
        return [
            make_document("d-1", relevance=0.95),
            make_document("d-2", relevance=0.75, source_type=SourceType.COMPLIANCE_STANDARD),
            make_document("d-3", relevance=0.85, source_type=SourceType.JURISDICTIONAL_RULE),
            make_document("d-4", relevance=0.72),
        ]

    def review_request(self, standards=None):
        return routed(
            intent=Intent.REVIEW_POLICY,
            output_format=OutputFormat.REVIEW_REPORT,
            policy_id="pol-1",
            standards=standards or [],
        )

    def test_findings_cover_every_document(self, synthesizer, documents):
        result = synthesizer.synthesize(documents, self.review_request())
        findings = result.content["findings"]
        assert [f["source_id"] for f in findings] == ["d-1", "d-3", "d-2", "d-4"]
        assert [f["severity"] for f in findings] == ["High", "High", "Medium", "Medium"]
        assert findings[1]["source_type"] == "jurisdictional_rule"
        assert result.document_ids == ["d-1", "d-3", "d-2", "d-4"]

    def test_top_three_recommendations(self, synthesizer, documents):
        result = synthesizer.synthesize(documents, self.review_request())
        recommendations = result.content["recommendations"]
        assert [r["rank"] for r in recommendations] == [1, 2, 3]
        assert recommendations[0]["recommendation"] == "Review policy against Document d-1"

    def test_compliant_without_requested_standards(self, synthesizer, documents):
        result = synthesizer.synthesize(documents, self.review_request())
        assert result.content["compliance_status"] == "Compliant"

    def test_partial_when_standards_missing(self, synthesizer, documents):
        result = synthesizer.synthesize(documents, self.review_request(["CQC-REG12", "NICE-SC1"]))
        assert result.content["compliance_status"] == "Partial"


class TestImprovementList:
    """Tests for the improvement_list strategy."""

    def test_top_five_by_priority(self, synthesizer, make_document):
        documents = [make_document(f"d-{i}", relevance=0.7 + i * 0.04) for i in range(7)]
        request = routed(intent=Intent.SUGGEST_IMPROVEMENT, output_format=OutputFormat.IMPROVEMENT_LIST)
        result = synthesizer.synthesize(documents, request)

        improvements = result.content["improvements"]
        assert [i["priority"] for i in improvements] == [1, 2, 3, 4, 5]
        assert [i["source_id"] for i in improvements] == ["d-6", "d-5", "d-4", "d-3", "d-2"]
        assert improvements[0]["estimated_impact"] == "High"
        assert result.document_ids == ["d-6", "d-5", "d-4", "d-3", "d-2"]
