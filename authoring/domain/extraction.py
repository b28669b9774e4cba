"""
Text extraction from retrieved documents.

Everything returned here is a verbatim slice of the source text. Nothing is
paraphrased or generated.
"""

import re
from typing import List, Sequence

EXCERPT_FALLBACK_CHARS = 200
ANCHOR_KEYWORD_LIMIT = 5
MAX_LIST_ITEMS = 5

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")

# Numbered ("1." / "2)"), bulleted ("*", "•") or dashed ("-") list items
_LIST_ITEM = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s+(.+?)\s*$", re.MULTILINE)

RATIONALE_MARKERS = (
    "to ensure",
    "in order to",
    "because",
    "so that",
    "required by",
)


def split_sentences(text: str) -> List[str]:
    """Split text into trimmed, non-empty sentences."""
    if not text:
        return []
    return [s.strip() for s in _SENTENCE_BOUNDARY.split(text.strip()) if s.strip()]


def keyword_sentences(text: str, keywords: Sequence[str]) -> List[str]:
    """
    Sentences containing any of the first five keywords.

    Args:
        text: Source document text
        keywords: Context keywords (only the first five are used as anchors)

    Returns:
        Matching sentences in document order
    """
    anchors = [k.lower() for k in keywords[:ANCHOR_KEYWORD_LIMIT]]
    if not anchors:
        return []
    return [
        sentence for sentence in split_sentences(text)
        if any(anchor in sentence.lower() for anchor in anchors)
    ]


def excerpt(text: str, keywords: Sequence[str]) -> str:
    """
    Keyword-anchored excerpt of a document.

    Falls back to the first 200 characters when no sentence matches.
    """
    matches = keyword_sentences(text, keywords)
    if matches:
        return " ".join(matches)
    return text[:EXCERPT_FALLBACK_CHARS].strip()


def rationale_sentences(text: str) -> List[str]:
    """Sentences that state why a requirement exists."""
    return [
        sentence for sentence in split_sentences(text)
        if any(marker in sentence.lower() for marker in RATIONALE_MARKERS)
    ]


def list_items(text: str, limit: int = MAX_LIST_ITEMS) -> List[str]:
    """
    Itemized clauses from numbered, bulleted or dashed lists.

    Args:
        text: Source document text
        limit: Maximum items to return

    Returns:
        Item texts without their list markers, in document order
    """
    if not text:
        return []
    return [match.group(1) for match in _LIST_ITEM.finditer(text)][:limit]
