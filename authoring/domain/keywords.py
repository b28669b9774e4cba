"""
Keyword extraction for retrieval.

Deterministic: identical context always yields the identical keyword list in
the same order, which keeps retrieval reproducible.
"""

import re
from typing import List

MAX_KEYWORDS = 10
MIN_KEYWORD_LENGTH = 4

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "about", "above", "after", "again", "also", "been", "before", "being",
    "below", "between", "both", "could", "does", "doing", "during", "each",
    "from", "further", "have", "having", "here", "into", "just", "more",
    "most", "must", "need", "needs", "only", "other", "over", "please",
    "same", "should", "some", "such", "than", "that", "their", "them",
    "then", "there", "these", "they", "this", "those", "through", "under",
    "until", "very", "want", "were", "what", "when", "where", "which",
    "while", "will", "with", "would", "your", "ours", "ourselves",
})

_PUNCTUATION = re.compile(r"[^\w\s]")


def extract_keywords(context: str, limit: int = MAX_KEYWORDS) -> List[str]:
    """
    Extract retrieval keywords from free-text context.

    Lowercases, strips punctuation, splits on whitespace, drops stop-words
    and tokens of 3 characters or fewer, then keeps the first `limit` tokens
    in their original order. Duplicates are kept.

    Args:
        context: Free-text authoring context
        limit: Maximum number of keywords to return

    Returns:
        Ordered keyword list

    Example:
        >>> extract_keywords("Staff must record all medication errors!")
        ['staff', 'record', 'medication', 'errors']
    """
    if not context:
        return []

    tokens = _PUNCTUATION.sub("", context.lower()).split()
    keywords = [
        token for token in tokens
        if len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS
    ]
    return keywords[:limit]
