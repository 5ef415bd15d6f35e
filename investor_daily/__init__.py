"""
AI Investor Daily

A daily batch job that curates free AI news articles, pulls the companies
they mention, maps them to stock tickers and renders five investment picks
plus article excerpts into a static HTML email.
"""

__version__ = "1.0.0"
