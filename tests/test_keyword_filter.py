"""Tests for keyword filtering."""

from investor_daily.keyword_filter import AI_KEYWORDS, filter_candidates, matches_keywords
from investor_daily.rss_client import FeedItem


def make_item(title: str, source_name: str = "Daily Gazette", link: str = None) -> FeedItem:
    """Helper to create test feed items."""
    return FeedItem(
        title=title,
        link=link or f"https://example.com/{abs(hash(title))}",
        published_at=None,
        source_name=source_name,
    )


class TestMatchesKeywords:
    """Tests for matches_keywords function."""

    def test_case_insensitive_substring(self):
        """Test that matching ignores case on both sides."""
        assert matches_keywords("new llm release")
        assert matches_keywords("DEEP LEARNING at scale")

    def test_substring_matches_inside_words(self):
        """Test literal substring semantics for longer keywords."""
        assert matches_keywords("Multi-LLM routing")
        assert matches_keywords("Chatbots everywhere")
        assert matches_keywords("Neuralink update")

    def test_short_keyword_needs_whole_word(self):
        """Test that 'AI' does not match inside ordinary words."""
        assert not matches_keywords("He said nothing")
        assert not matches_keywords("Daily Gazette")
        assert matches_keywords("AI-powered search")
        assert matches_keywords("Why ai matters")

    def test_compound_company_name_matches(self):
        """Test that 'OpenAI' counts even though 'AI' is not a separate word."""
        assert matches_keywords("OpenAI ships a new model")

    def test_no_match(self):
        """Test text without any keyword."""
        assert not matches_keywords("Local bakery wins prize")

    def test_empty_text(self):
        """Test that empty text never matches."""
        assert not matches_keywords("")
        assert not matches_keywords(None)

    def test_custom_keywords(self):
        """Test matching against a custom keyword set."""
        assert matches_keywords("Quantum chips", ["quantum"])
        assert not matches_keywords("Quantum chips", ["robot"])


class TestFilterCandidates:
    """Tests for filter_candidates function."""

    def test_llm_title_passes(self):
        """Test that an LLM headline from TechCrunch passes."""
        item = make_item("New LLM breakthrough announced", "TechCrunch")
        assert filter_candidates([item]) == [item]

    def test_unrelated_item_excluded(self):
        """Test that an unrelated headline is excluded."""
        item = make_item("Local bakery wins award", "Daily Gazette")
        assert filter_candidates([item]) == []

    def test_source_name_match_passes(self):
        """Test that a matching source name alone is enough."""
        item = make_item("Quarterly roundup", "VentureBeat AI")
        assert filter_candidates([item]) == [item]

    def test_filter_preserves_order(self):
        """Test that kept items stay in input order."""
        items = [
            make_item("Chatbot wars heat up"),
            make_item("Local bakery wins award"),
            make_item("Neural nets for weather"),
        ]
        result = filter_candidates(items)
        assert [i.title for i in result] == ["Chatbot wars heat up", "Neural nets for weather"]

    def test_filter_is_idempotent(self):
        """Test that filtering an already filtered list changes nothing."""
        items = [
            make_item("GPT-5 rumors"),
            make_item("Local bakery wins award"),
            make_item("Weekly digest", "Machine Learning Weekly"),
            make_item("Sports results"),
        ]
        once = filter_candidates(items)
        assert filter_candidates(once) == once

    def test_default_keywords(self):
        """Test the default keyword set covers the core AI terms."""
        lowered = {k.lower() for k in AI_KEYWORDS}
        assert {"ai", "llm", "machine learning", "large language model"} <= lowered
