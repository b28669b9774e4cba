"""
In-memory knowledge store.

Holds the three verified collections (policy templates, compliance
standards, jurisdictional rules) and applies the same filters a database
query would: active, jurisdiction intersection, standards intersection,
and full-text match over title and content.
"""

from typing import Iterable, List, Optional

from authoring.schemas.documents import KnowledgeDocument, KnowledgeFilter


def matches_filter(
    document: KnowledgeDocument,
    criteria: KnowledgeFilter,
    apply_standards: bool = False,
) -> bool:
    """
    Check a document against filter criteria.

    Args:
        document: Candidate document
        criteria: Filter criteria
        apply_standards: Whether the standards filter applies to this collection

    Returns:
        True if the document passes every applicable filter
    """
    # Active / non-deprecated
    if document.is_deprecated and not criteria.include_deprecated:
        return False

    # Jurisdiction intersection
    if criteria.jurisdictions and not set(document.jurisdictions) & set(criteria.jurisdictions):
        return False

    # Standards intersection (standards collection only)
    if apply_standards and criteria.standards:
        wanted = {s.upper() for s in criteria.standards}
        if not wanted & {code.upper() for code in document.standard_codes}:
            return False

    # Text relevance: any keyword in title + content
    if criteria.keywords:
        text = f"{document.title} {document.content}".lower()
        if not any(keyword in text for keyword in criteria.keywords):
            return False

    return True


class InMemoryKnowledgeStore:
    """
    Read-only knowledge store backed by lists of KnowledgeDocument.

    Query order is the insertion order, so results are reproducible.
    """

    def __init__(
        self,
        templates: Optional[Iterable[KnowledgeDocument]] = None,
        standards: Optional[Iterable[KnowledgeDocument]] = None,
        rules: Optional[Iterable[KnowledgeDocument]] = None,
    ):
        self._templates = tuple(templates or ())
        self._standards = tuple(standards or ())
        self._rules = tuple(rules or ())

    @classmethod
    def from_pack(cls, pack) -> "InMemoryKnowledgeStore":
        """
        Build a store from a knowledge pack module.

        The pack must expose POLICY_TEMPLATES, COMPLIANCE_STANDARDS and
        JURISDICTIONAL_RULES as lists of KnowledgeDocument.
        """
        return cls(
            templates=pack.POLICY_TEMPLATES,
            standards=pack.COMPLIANCE_STANDARDS,
            rules=pack.JURISDICTIONAL_RULES,
        )

    async def query_templates(self, criteria: KnowledgeFilter) -> List[KnowledgeDocument]:
        return [d for d in self._templates if matches_filter(d, criteria)]

    async def query_standards(self, criteria: KnowledgeFilter) -> List[KnowledgeDocument]:
        return [d for d in self._standards if matches_filter(d, criteria, apply_standards=True)]

    async def query_rules(self, criteria: KnowledgeFilter) -> List[KnowledgeDocument]:
        return [d for d in self._rules if matches_filter(d, criteria)]
