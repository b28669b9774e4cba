"""
Tests for keyword extraction.
"""

from authoring.domain.keywords import MAX_KEYWORDS, extract_keywords


class TestExtractKeywords:
    """Tests for extract_keywords."""

    def test_drops_stop_words_and_short_tokens(self):
        keywords = extract_keywords("Medication administration errors must be recorded and reported")
        assert keywords == ["medication", "administration", "errors", "recorded", "reported"]

    def test_strips_punctuation_and_lowercases(self):
        keywords = extract_keywords("Staff must record ALL medication errors!")
        assert keywords == ["staff", "record", "medication", "errors"]

    def test_keeps_duplicates_in_order(self):
        keywords = extract_keywords("errors, errors and more errors")
        assert keywords == ["errors", "errors", "errors"]

    def test_limits_to_first_ten(self):
        context = " ".join(f"keyword{i}" for i in range(15))
        keywords = extract_keywords(context)
        assert len(keywords) == MAX_KEYWORDS
        assert keywords[0] == "keyword0"
        assert keywords[-1] == "keyword9"

    def test_four_letter_tokens_are_kept(self):
        assert extract_keywords("care home plan") == ["care", "home", "plan"]

    def test_empty_context(self):
        assert extract_keywords("") == []
        assert extract_keywords("the and a to") == []

    def test_deterministic(self):
        """Identical context yields the identical keyword list."""
        context = "Safeguarding concerns are raised with the safeguarding lead"
        assert extract_keywords(context) == extract_keywords(context)
