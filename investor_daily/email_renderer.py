"""
Email rendering.

Turns an EmailPayload into a complete, self-contained HTML document.
Output depends only on the payload, so the same payload always renders
to the same bytes.
"""

from html import escape
from typing import Optional

from .pipeline import ArticleExcerpt, EmailPayload
from .selection import Pick


BRAND_COLOR = "#355E3B"


EMAIL_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>AI Investor Daily</title>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
            line-height: 1.6;
            color: #1a1a1a;
            max-width: 600px;
            margin: 0 auto;
            padding: 20px;
            background-color: #f5f5f5;
        }}
        .container {{
            background-color: #ffffff;
            border-radius: 8px;
            padding: 30px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }}
        .header {{
            border-bottom: 3px solid {brand_color};
            padding-bottom: 15px;
            margin-bottom: 25px;
        }}
        .header h1 {{
            margin: 0;
            color: {brand_color};
            font-size: 24px;
            font-weight: 700;
        }}
        .header .date {{
            color: #666;
            font-size: 14px;
            margin-top: 5px;
        }}
        .section h2 {{
            font-size: 18px;
            color: {brand_color};
            margin: 25px 0 15px 0;
        }}
        .pick, .article {{
            margin-bottom: 20px;
            padding-bottom: 15px;
            border-bottom: 1px solid #eee;
        }}
        .pick:last-child, .article:last-child {{
            border-bottom: none;
        }}
        .pick-name {{
            font-size: 16px;
            font-weight: 600;
            margin: 0 0 6px 0;
        }}
        .headline {{
            font-size: 16px;
            font-weight: 600;
            margin: 0 0 6px 0;
        }}
        .headline a, .pick-name a {{
            color: #1a1a1a;
            text-decoration: none;
        }}
        .meta {{
            font-size: 12px;
            color: #888;
            margin-bottom: 8px;
        }}
        .rationale, .excerpt {{
            font-size: 14px;
            color: #444;
        }}
        .disclaimer {{
            font-size: 12px;
            color: #888;
            font-style: italic;
        }}
        .section-empty {{
            color: #888;
            font-style: italic;
            font-size: 14px;
        }}
        .footer {{
            margin-top: 30px;
            padding-top: 20px;
            border-top: 1px solid #eee;
            font-size: 12px;
            color: #888;
            text-align: center;
        }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>AI Investor Daily</h1>
            <div class="date">{formatted_date} &bull; Quick, curated AI investing picks &amp; news</div>
        </div>

        <div class="section">
            <h2>{pick_count} Top AI Investment Picks</h2>
            {picks_html}
            <p class="disclaimer">Disclaimer: Informational only, not investment advice.</p>
        </div>

        <div class="section">
            <h2>Free Articles: AI Companies to Watch</h2>
            {articles_html}
        </div>

        <div class="footer">
            You received this email because you subscribed to AI Investor Daily.<br>
            <a href="{unsubscribe_url}">Unsubscribe</a>
        </div>
    </div>
</body>
</html>
"""

PICK_TEMPLATE = """
<div class="pick">
    <p class="pick-name">{rank}. <a href="{link}">{name}</a> ({symbol})</p>
    <div class="rationale">{rationale}</div>
    <div class="meta">Market cap: {market_cap} &bull; <a href="{link}">View snapshot</a></div>
</div>
"""

ARTICLE_TEMPLATE = """
<div class="article">
    <h3 class="headline"><a href="{link}">{title}</a></h3>
    <div class="meta">{source}</div>
    <div class="excerpt">{excerpt}</div>
</div>
"""

# Merge tag, filled in by the mail provider at send time
UNSUBSCRIBE_URL = "{{unsubscribe_url}}"


def format_market_cap(value: Optional[float]) -> str:
    """Format a market cap as 1.23T / 4.56B / 7.89M, or N/A."""
    if not value:
        return "N/A"
    if value >= 1e12:
        return f"{value / 1e12:.2f}T"
    if value >= 1e9:
        return f"{value / 1e9:.2f}B"
    if value >= 1e6:
        return f"{value / 1e6:.2f}M"
    return f"{value:.0f}"


def _render_pick(rank: int, pick: Pick) -> str:
    return PICK_TEMPLATE.format(
        rank=rank,
        link=escape(pick.link),
        name=escape(pick.display_name),
        symbol=escape(pick.symbol),
        rationale=escape(pick.rationale),
        market_cap=format_market_cap(pick.market_cap),
    )


def _render_article(article: ArticleExcerpt) -> str:
    excerpt = article.excerpt or "Excerpt not available."
    return ARTICLE_TEMPLATE.format(
        link=escape(article.link),
        title=escape(article.title),
        source=escape(article.source_name),
        excerpt=escape(excerpt),
    )


def build_email_html(payload: EmailPayload) -> str:
    """
    Build the HTML email for one issue.

    Args:
        payload: Issue date, picks and article excerpts.

    Returns:
        Complete HTML email string.
    """
    formatted_date = payload.issue_date.strftime("%A, %B %d, %Y")

    picks_html = "\n".join(
        _render_pick(rank, pick) for rank, pick in enumerate(payload.picks, start=1)
    )

    if payload.articles:
        articles_html = "\n".join(_render_article(a) for a in payload.articles)
    else:
        articles_html = '<p class="section-empty">No free articles today.</p>'

    return EMAIL_TEMPLATE.format(
        brand_color=BRAND_COLOR,
        formatted_date=formatted_date,
        pick_count=len(payload.picks),
        picks_html=picks_html,
        articles_html=articles_html,
        unsubscribe_url=UNSUBSCRIBE_URL,
    )
