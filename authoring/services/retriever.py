"""
Verified Retriever Service.

Queries the three verified knowledge collections concurrently, scores every
hit for relevance, then merges, filters, sorts and truncates.

CRITICAL: Retrieval must be deterministic. The same query against an
unchanged store returns the same documents in the same order.
"""

import asyncio
import time
from typing import List, Optional, Sequence, Tuple

from authoring.config import settings
from authoring.domain.scoring import relevance_score
from authoring.exceptions import RetrievalTimeoutError
from authoring.logging import get_logger
from authoring.schemas.documents import (
    KnowledgeDocument,
    RetrievalQuery,
    RetrievedDocument,
    SourceType,
)
from authoring.services.interfaces import KnowledgeStore

logger = get_logger(__name__)

# Merge order, also the tie-break order for equal scores
SOURCE_ORDER = (
    SourceType.POLICY_TEMPLATE,
    SourceType.COMPLIANCE_STANDARD,
    SourceType.JURISDICTIONAL_RULE,
)


class VerifiedRetriever:
    """
    Multi-source retriever over the verified knowledge store.

    The three collection queries are the only fan-out point in the pipeline.
    They run concurrently under one deadline; if any query fails or the
    deadline passes, retrieval fails as a whole. Partial coverage would
    silently bias the ranking.
    """

    def __init__(
        self,
        store: KnowledgeStore,
        timeout_seconds: Optional[float] = None,
    ):
        """
        Initialize the retriever.

        Args:
            store: Knowledge store to query
            timeout_seconds: Deadline for the joint fan-out
                (defaults to settings.retrieval_timeout_seconds)
        """
        self.store = store
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.retrieval_timeout_seconds
        )

    async def retrieve(self, query: RetrievalQuery) -> List[RetrievedDocument]:
        """
        Retrieve, score and rank verified documents.

        Args:
            query: Keywords, filters, relevance floor and result limit

        Returns:
            Documents at or above the relevance floor, best first,
            at most query.max_results long

        Raises:
            RetrievalTimeoutError: If the fan-out exceeds the deadline
            Exception: Any knowledge store failure is propagated
        """
        start = time.monotonic()
        batches = await self._fan_out(query)

        # Score every hit, keeping merge position for stable tie-breaks
        scored: List[Tuple[int, RetrievedDocument]] = []
        for source_type, documents in zip(SOURCE_ORDER, batches):
            for document in documents:
                scored.append((len(scored), self._score(document, source_type, query.keywords)))

        candidates = len(scored)
        relevant = [
            (position, doc) for position, doc in scored
            if doc.relevance_score >= query.min_relevance_score
        ]
        relevant.sort(key=lambda item: (-item[1].relevance_score, item[0]))
        results = [doc for _, doc in relevant[:query.max_results]]

        logger.retrieval_completed(
            candidates=candidates,
            returned=len(results),
            keywords=list(query.keywords),
            duration_ms=(time.monotonic() - start) * 1000
        )
        return results

    async def _fan_out(self, query: RetrievalQuery) -> Sequence[List[KnowledgeDocument]]:
        """Issue the three collection queries concurrently and join them."""
        criteria = query.to_filter()
        try:
            return await asyncio.wait_for(
                asyncio.gather(
                    self.store.query_templates(criteria),
                    self.store.query_standards(criteria),
                    self.store.query_rules(criteria),
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.retrieval_failed(
                error=f"deadline of {self.timeout_seconds}s exceeded",
                timed_out=True
            )
            raise RetrievalTimeoutError(self.timeout_seconds)
        except Exception as e:
            logger.retrieval_failed(error=str(e))
            raise

    def _score(
        self,
        document: KnowledgeDocument,
        source_type: SourceType,
        keywords: Sequence[str],
    ) -> RetrievedDocument:
        """Attach source type and relevance score to a store record."""
        score = relevance_score(keywords, document.title, document.content)
        return RetrievedDocument.from_knowledge(document, source_type, score)
