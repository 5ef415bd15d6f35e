"""Tests for article content extraction."""

from unittest.mock import MagicMock, patch

import requests

from investor_daily.article_extractor import (
    Article,
    build_article,
    collect_free_articles,
    extract_article_text,
    fetch_article_text,
    first_n_words,
)
from investor_daily.paywall import Accessibility
from investor_daily.rss_client import FeedItem


def make_item(slug: str, title: str = None) -> FeedItem:
    """Helper to create test feed items."""
    return FeedItem(
        title=title or f"AI story {slug}",
        link=f"https://example.com/{slug}" if slug else "",
        published_at=None,
        source_name="Test Source",
    )


def make_response(html: str) -> MagicMock:
    response = MagicMock()
    response.text = html
    response.raise_for_status = MagicMock()
    return response


class TestFirstNWords:
    """Tests for first_n_words function."""

    def test_truncates_to_n_words(self):
        """Test that only the first n words are kept."""
        text = " ".join(f"w{i}" for i in range(250))
        result = first_n_words(text, 100)
        assert len(result.split()) == 100
        assert result.startswith("w0 w1")
        assert result.endswith("w99")

    def test_collapses_whitespace(self):
        """Test that words are rejoined with single spaces."""
        assert first_n_words("  one\n\ttwo   three ", 100) == "one two three"

    def test_short_text_unchanged(self):
        """Test that shorter text is returned whole."""
        assert first_n_words("just four words here", 100) == "just four words here"

    def test_empty(self):
        """Test empty input."""
        assert first_n_words("", 100) == ""


class TestExtractArticleText:
    """Tests for extract_article_text function."""

    def test_prefers_paragraphs_inside_article(self):
        """Test that only <article> paragraphs are used when present."""
        html = """
        <html><body>
            <p>Sidebar promo paragraph.</p>
            <article>
                <p>First real paragraph.</p>
                <p>Second real paragraph.</p>
            </article>
        </body></html>
        """

        result = extract_article_text(html)

        assert result == "First real paragraph. Second real paragraph."
        assert "Sidebar" not in result

    def test_falls_back_to_all_paragraphs(self):
        """Test fallback to every <p> when there is no <article> tag."""
        html = """
        <html><body>
            <p>Alpha paragraph text.</p>
            <div><p>Beta paragraph text.</p></div>
            <p>Gamma paragraph text.</p>
        </body></html>
        """

        result = extract_article_text(html)

        assert result == "Alpha paragraph text. Beta paragraph text. Gamma paragraph text."

    def test_article_without_paragraphs_falls_back(self):
        """Test fallback when the <article> container has no <p> inside."""
        html = "<html><body><article>Teaser only</article><p>Body paragraph.</p></body></html>"
        assert extract_article_text(html) == "Body paragraph."

    def test_collapses_internal_whitespace(self):
        """Test that newlines and runs of spaces collapse to single spaces."""
        html = "<article><p>Line one\n\n   continues   here.</p></article>"
        assert extract_article_text(html) == "Line one continues here."

    def test_no_paragraphs(self):
        """Test a page without any paragraphs."""
        assert extract_article_text("<html><body><div>Nothing</div></body></html>") == ""


class TestFetchArticleText:
    """Tests for fetch_article_text function."""

    def test_fetch_success(self):
        """Test successful fetch and extraction."""
        with patch("investor_daily.article_extractor.requests.get") as mock_get:
            mock_get.return_value = make_response("<article><p>Fetched body.</p></article>")
            result = fetch_article_text("https://example.com/a", timeout=12)

        assert result == "Fetched body."
        assert mock_get.call_args.kwargs["timeout"] == 12

    def test_fetch_error_returns_empty(self):
        """Test that request errors yield an empty string."""
        with patch("investor_daily.article_extractor.requests.get") as mock_get:
            mock_get.side_effect = requests.RequestException("Connection failed")
            assert fetch_article_text("https://example.com/a") == ""

    def test_http_error_returns_empty(self):
        """Test that non-2xx responses yield an empty string."""
        with patch("investor_daily.article_extractor.requests.get") as mock_get:
            response = make_response("<p>Error page</p>")
            response.raise_for_status.side_effect = requests.HTTPError("404")
            mock_get.return_value = response
            assert fetch_article_text("https://example.com/a") == ""


class TestBuildArticle:
    """Tests for build_article function."""

    def test_excerpt_is_capped_at_100_words(self):
        """Test that the excerpt never exceeds 100 words."""
        text = " ".join(["token"] * 400)
        article = build_article(make_item("long"), text)

        assert isinstance(article, Article)
        assert article.full_text == text
        assert len(article.excerpt.split()) == 100

    def test_copies_item_fields(self):
        """Test that feed metadata is carried over."""
        item = make_item("x", "Title X")
        article = build_article(item, "Body")

        assert article.title == "Title X"
        assert article.link == item.link
        assert article.source_name == "Test Source"
        assert article.excerpt == "Body"


class TestCollectFreeArticles:
    """Tests for collect_free_articles function."""

    def test_skips_paywalled_and_keeps_free(self):
        """Test that only free candidates become articles."""
        items = [make_item("free-1"), make_item("gated"), make_item("free-2")]

        def classify(url, rate_limiter=None):
            return Accessibility.PAYWALLED if "gated" in url else Accessibility.FREE

        with patch("investor_daily.article_extractor.check_accessibility", side_effect=classify), \
             patch("investor_daily.article_extractor.fetch_article_text", return_value="Body text"):
            articles = collect_free_articles(items, max_articles=10)

        assert [a.link for a in articles] == [
            "https://example.com/free-1",
            "https://example.com/free-2",
        ]

    def test_deduplicates_links_and_skips_empty(self):
        """Test that repeated and empty links are skipped."""
        items = [make_item("a"), make_item("a", "Same link, other title"), make_item("")]

        with patch("investor_daily.article_extractor.check_accessibility",
                   return_value=Accessibility.FREE) as mock_check, \
             patch("investor_daily.article_extractor.fetch_article_text", return_value="Body"):
            articles = collect_free_articles(items)

        assert len(articles) == 1
        assert mock_check.call_count == 1

    def test_stops_at_max_articles(self):
        """Test that no more than max_articles are collected."""
        items = [make_item(str(i)) for i in range(15)]

        with patch("investor_daily.article_extractor.check_accessibility",
                   return_value=Accessibility.FREE) as mock_check, \
             patch("investor_daily.article_extractor.fetch_article_text", return_value="Body"):
            articles = collect_free_articles(items, max_articles=10)

        assert len(articles) == 10
        assert mock_check.call_count == 10

    def test_empty_text_still_produces_article(self):
        """Test that extraction failure means 'no excerpt', not a dropped article."""
        with patch("investor_daily.article_extractor.check_accessibility",
                   return_value=Accessibility.FREE), \
             patch("investor_daily.article_extractor.fetch_article_text", return_value=""):
            articles = collect_free_articles([make_item("empty")])

        assert len(articles) == 1
        assert articles[0].excerpt == ""

    def test_rate_limiter_passed_to_check(self):
        """Test that the limiter is handed to every paywall check."""
        limiter = MagicMock()

        with patch("investor_daily.article_extractor.check_accessibility",
                   return_value=Accessibility.FREE) as mock_check, \
             patch("investor_daily.article_extractor.fetch_article_text", return_value="Body"):
            collect_free_articles([make_item("a")], rate_limiter=limiter)

        assert mock_check.call_args.kwargs["rate_limiter"] is limiter

    def test_relaxed_check_fills_from_paywalled(self):
        """Test that the relaxed pass tops up from unchecked candidates."""
        items = [make_item("free"), make_item("gated-1"), make_item("gated-2")]

        def classify(url, rate_limiter=None):
            return Accessibility.PAYWALLED if "gated" in url else Accessibility.FREE

        with patch("investor_daily.article_extractor.check_accessibility", side_effect=classify), \
             patch("investor_daily.article_extractor.fetch_article_text", return_value="Body"):
            articles = collect_free_articles(items, max_articles=2, relax_paywall_check=True)

        assert [a.link for a in articles] == [
            "https://example.com/free",
            "https://example.com/gated-1",
        ]

    def test_paywalled_excluded_by_default(self):
        """Test that without relaxation paywalled items never appear."""
        items = [make_item("gated-1"), make_item("gated-2")]

        with patch("investor_daily.article_extractor.check_accessibility",
                   return_value=Accessibility.PAYWALLED), \
             patch("investor_daily.article_extractor.fetch_article_text") as mock_fetch:
            articles = collect_free_articles(items)

        assert articles == []
        mock_fetch.assert_not_called()
