"""Playwright runner: proxy-fallback product scraping and site audits over HTTP."""

__version__ = "0.3.0"
