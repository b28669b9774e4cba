"""
Clause Synthesizer Service.

Assembles a suggestion from retrieved documents, one strategy per output
format. All text in the output is either copied from a retrieved document
(keyword-anchored sentences, list items) or a fixed template string.

CRITICAL: No text is generated. If a strategy cannot find source text it
falls back to a verbatim prefix of the document, never to invented wording.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from authoring.config import settings
from authoring.domain.extraction import excerpt, list_items, rationale_sentences
from authoring.domain.keywords import extract_keywords
from authoring.domain.scoring import confidence_score, relevance_band, stale_documents
from authoring.schemas.documents import RetrievedDocument, SourceType, VerificationStatus
from authoring.schemas.request import OutputFormat, RoutedRequest
from authoring.schemas.suggestion import SynthesisMethod, SynthesizedSuggestion

SUPPORTING_REFERENCE_LIMIT = 2
RECOMMENDATION_LIMIT = 3
IMPROVEMENT_LIMIT = 5

WARNING_LOW_CONFIDENCE = "Low confidence score - human review strongly recommended"
WARNING_FEW_SOURCES = "Limited source documents - verify against additional sources"
WARNING_DEPRECATED = "Some sources are deprecated - verify current standards"
WARNING_STALE = "Some sources are over 1 year old - verify currency"
WARNING_NO_STANDARDS = "No compliance standards retrieved - mapping table is empty"


class ClauseSynthesizer:
    """
    Deterministic, template-bound suggestion assembly.

    Strategies:
    - structured_clause: one primary source, up to two supporting references
    - mapping_table: list items from each compliance standard, with coverage
    - review_report: every document as a finding, top three as recommendations
    - improvement_list: top five documents as prioritized suggestions
    """

    def __init__(
        self,
        low_confidence_warning: Optional[float] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the synthesizer.

        Args:
            low_confidence_warning: Confidence below which a warning is added
                (defaults to settings.low_confidence_warning)
            now: Clock for recency checks (defaults to current UTC time)
        """
        self.low_confidence_warning = (
            low_confidence_warning
            if low_confidence_warning is not None
            else settings.low_confidence_warning
        )
        self._now = now
        self._strategies = {
            OutputFormat.STRUCTURED_CLAUSE: self._structured_clause,
            OutputFormat.MAPPING_TABLE: self._mapping_table,
            OutputFormat.REVIEW_REPORT: self._review_report,
            OutputFormat.IMPROVEMENT_LIST: self._improvement_list,
        }

    def synthesize(
        self,
        documents: Sequence[RetrievedDocument],
        routed: RoutedRequest,
    ) -> SynthesizedSuggestion:
        """
        Build a suggestion for the request's output format.

        Args:
            documents: Retrieved documents, best first
            routed: Validated request with its output format

        Returns:
            SynthesizedSuggestion with content, confidence and warnings

        Raises:
            ValueError: If documents is empty (the source guard runs first)
        """
        if not documents:
            raise ValueError("Cannot synthesize a suggestion without source documents")

        # Best first, regardless of caller ordering
        ranked = sorted(documents, key=lambda d: -d.relevance_score)
        keywords = extract_keywords(routed.context)

        content, method, used_ids, extra_warnings = self._strategies[routed.output_format](
            ranked, routed, keywords
        )

        now = self._now() if self._now else None
        confidence = confidence_score(ranked, now=now)
        warnings = self._warnings(ranked, confidence, now) + extra_warnings

        return SynthesizedSuggestion(
            content=content,
            confidence=confidence,
            document_ids=used_ids,
            synthesis_method=method,
            warnings=warnings,
        )

    # ===== Strategies =====

    def _structured_clause(self, documents, routed, keywords):
        primary = documents[0]
        supporting = documents[1:1 + SUPPORTING_REFERENCE_LIMIT]

        rationale = rationale_sentences(primary.content)
        content = {
            "clause": {
                "title": primary.title,
                "text": excerpt(primary.content, keywords),
                "rationale": (
                    " ".join(rationale)
                    if rationale
                    else f"Based on {primary.title} (version {primary.version})."
                ),
            },
            "template_id": routed.template_id,
            "primary_source": self._source_summary(primary),
            "supporting_references": [self._source_summary(d) for d in supporting],
            "jurisdictions": [j.value for j in routed.jurisdictions],
        }

        method = (
            SynthesisMethod.TEMPLATE_ASSEMBLY
            if primary.source_type == SourceType.POLICY_TEMPLATE
            else SynthesisMethod.SINGLE_SOURCE
        )
        used_ids = [primary.id] + [d.id for d in supporting]
        return content, method, used_ids, []

    def _mapping_table(self, documents, routed, keywords):
        standards_docs = [d for d in documents if d.source_type == SourceType.COMPLIANCE_STANDARD]

        rows = []
        for document in standards_docs:
            rows.append({
                "standard_id": document.id,
                "title": document.title,
                "standard_codes": list(document.standard_codes),
                "version": document.version,
                "clauses": list_items(document.content),
                "relevance_score": round(document.relevance_score, 4),
            })

        # Coverage of the requested standards by retrieved standard codes
        retrieved_codes = {code.upper() for d in standards_docs for code in d.standard_codes}
        requested = routed.standards
        matched = [s for s in requested if s.upper() in retrieved_codes]
        gaps = [s for s in requested if s.upper() not in retrieved_codes]
        coverage = round(len(matched) / len(requested), 4) if requested else 0.0

        content = {
            "policy_id": routed.policy_id,
            "requested_standards": list(requested),
            "rows": rows,
            "coverage": coverage,
            "gaps": gaps,
        }

        extra = [] if standards_docs else [WARNING_NO_STANDARDS]
        return content, SynthesisMethod.MULTI_SOURCE_MERGE, [d.id for d in standards_docs], extra

    def _review_report(self, documents, routed, keywords):
        findings = []
        for document in documents:
            findings.append({
                "source_id": document.id,
                "title": document.title,
                "source_type": document.source_type.value,
                "severity": relevance_band(document.relevance_score),
                "excerpt": excerpt(document.content, keywords),
                "relevance_score": round(document.relevance_score, 4),
            })

        recommendations = []
        for rank, document in enumerate(documents[:RECOMMENDATION_LIMIT], start=1):
            recommendations.append({
                "rank": rank,
                "source_id": document.id,
                "title": document.title,
                "recommendation": f"Review policy against {document.title}",
            })

        standards_found = sum(
            1 for d in documents if d.source_type == SourceType.COMPLIANCE_STANDARD
        )
        status = "Compliant" if standards_found >= len(routed.standards) else "Partial"

        content = {
            "policy_id": routed.policy_id,
            "findings": findings,
            "recommendations": recommendations,
            "compliance_status": status,
        }
        return content, SynthesisMethod.MULTI_SOURCE_MERGE, [d.id for d in documents], []

    def _improvement_list(self, documents, routed, keywords):
        top = documents[:IMPROVEMENT_LIMIT]

        improvements = []
        for priority, document in enumerate(top, start=1):
            improvements.append({
                "priority": priority,
                "source_id": document.id,
                "title": document.title,
                "suggestion": excerpt(document.content, keywords),
                "estimated_impact": relevance_band(document.relevance_score),
            })

        content = {
            "policy_id": routed.policy_id,
            "improvements": improvements,
        }
        return content, SynthesisMethod.MULTI_SOURCE_MERGE, [d.id for d in top], []

    # ===== Helpers =====

    def _warnings(
        self,
        documents: Sequence[RetrievedDocument],
        confidence: float,
        now: Optional[datetime],
    ) -> List[str]:
        """Quality warnings shared by every strategy."""
        warnings = []
        if confidence < self.low_confidence_warning:
            warnings.append(WARNING_LOW_CONFIDENCE)
        if len(documents) < 2:
            warnings.append(WARNING_FEW_SOURCES)
        if any(d.verification_status == VerificationStatus.DEPRECATED for d in documents):
            warnings.append(WARNING_DEPRECATED)
        if stale_documents(documents, now):
            warnings.append(WARNING_STALE)
        return warnings

    @staticmethod
    def _source_summary(document: RetrievedDocument) -> Dict[str, Any]:
        return {
            "id": document.id,
            "title": document.title,
            "type": document.source_type.value,
            "version": document.version,
            "section": document.section,
            "relevance_score": round(document.relevance_score, 4),
        }
