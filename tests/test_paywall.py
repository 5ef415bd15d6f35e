"""Tests for paywall detection."""

from unittest.mock import MagicMock, patch

import requests

from investor_daily.paywall import (
    PAYWALL_PHRASES,
    Accessibility,
    check_accessibility,
    classify_html,
)


FREE_HTML = """
<html><body>
    <article>
        <p>Nvidia reported strong demand for its data center chips this quarter.</p>
        <p>Analysts expect the AI build-out to continue into next year.</p>
    </article>
</body></html>
"""


def make_response(text: str) -> MagicMock:
    response = MagicMock()
    response.text = text
    response.raise_for_status = MagicMock()
    return response


class TestClassifyHtml:
    """Tests for classify_html function."""

    def test_plain_article_is_free(self):
        """Test that an ordinary article page is free."""
        assert classify_html(FREE_HTML) is Accessibility.FREE

    def test_phrase_marks_paywalled(self):
        """Test detection of a paywall phrase in the body text."""
        html = "<html><body><p>To continue reading, please log in.</p></body></html>"
        assert classify_html(html) is Accessibility.PAYWALLED

    def test_phrase_match_is_case_insensitive(self):
        """Test that phrases match regardless of case."""
        html = "<html><body><div>SUBSCRIPTION REQUIRED</div></body></html>"
        assert classify_html(html) is Accessibility.PAYWALLED

    def test_phrase_beyond_scan_limit_ignored(self):
        """Test that only the first 4000 characters are inspected."""
        filler = "word " * 1000  # 5000 characters
        html = f"<html><body><p>{filler}</p><p>become a member</p></body></html>"
        assert classify_html(html) is Accessibility.FREE

    def test_script_text_not_counted(self):
        """Test that script content is not treated as visible text."""
        html = "<html><body><script>var msg = 'please subscribe';</script><p>Open story.</p></body></html>"
        assert classify_html(html) is Accessibility.FREE

    def test_paywall_class_selector(self):
        """Test that any class containing 'paywall' is detected."""
        html = '<html><body><div class="article-paywall-gate">Story</div></body></html>'
        assert classify_html(html) is Accessibility.PAYWALLED

    def test_paywall_id_selector(self):
        """Test that any id containing 'paywall' is detected."""
        html = '<html><body><section id="hard-paywall">Story</section></body></html>'
        assert classify_html(html) is Accessibility.PAYWALLED

    def test_metered_content_selector(self):
        """Test the meteredContent class probe."""
        html = '<html><body><div class="meteredContent">Story text</div></body></html>'
        assert classify_html(html) is Accessibility.PAYWALLED

    def test_phrases_are_lowercase(self):
        """Test that phrase list entries are already lowercased."""
        assert all(phrase == phrase.lower() for phrase in PAYWALL_PHRASES)


class TestCheckAccessibility:
    """Tests for check_accessibility function."""

    def test_free_page(self):
        """Test that a fetched free page is classified FREE."""
        with patch("investor_daily.paywall.requests.get") as mock_get:
            mock_get.return_value = make_response(FREE_HTML)
            result = check_accessibility("https://example.com/story", timeout=10)

        assert result is Accessibility.FREE
        assert mock_get.call_args.kwargs["timeout"] == 10
        assert "AI-Investor-Daily" in mock_get.call_args.kwargs["headers"]["User-Agent"]

    def test_fetch_error_fails_closed(self):
        """Test that a network error is treated as paywalled."""
        with patch("investor_daily.paywall.requests.get") as mock_get:
            mock_get.side_effect = requests.ConnectionError("Connection failed")
            result = check_accessibility("https://example.com/story")

        assert result is Accessibility.PAYWALLED

    def test_timeout_fails_closed(self):
        """Test that a timeout is treated as paywalled."""
        with patch("investor_daily.paywall.requests.get") as mock_get:
            mock_get.side_effect = requests.Timeout("timed out")
            result = check_accessibility("https://example.com/story")

        assert result is Accessibility.PAYWALLED

    def test_http_error_fails_closed(self):
        """Test that a non-2xx status is treated as paywalled."""
        with patch("investor_daily.paywall.requests.get") as mock_get:
            response = make_response(FREE_HTML)
            response.raise_for_status.side_effect = requests.HTTPError("403 Forbidden")
            mock_get.return_value = response
            result = check_accessibility("https://example.com/story")

        assert result is Accessibility.PAYWALLED

    def test_unexpected_error_fails_closed(self):
        """Test that any other exception is treated as paywalled."""
        with patch("investor_daily.paywall.requests.get") as mock_get:
            mock_get.side_effect = RuntimeError("boom")
            result = check_accessibility("https://example.com/story")

        assert result is Accessibility.PAYWALLED

    def test_rate_limiter_consulted(self):
        """Test that the limiter is waited on before fetching."""
        limiter = MagicMock()
        with patch("investor_daily.paywall.requests.get") as mock_get:
            mock_get.return_value = make_response(FREE_HTML)
            check_accessibility("https://example.com/story", rate_limiter=limiter)

        limiter.wait.assert_called_once()
