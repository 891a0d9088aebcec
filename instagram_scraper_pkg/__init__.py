"""Scraper package providing modular components for the Instagram scraper.

Each module owns one concern (cookies, login, navigation, selectors,
extraction, rendering) so the fragile, site-specific parts can change
without touching the request flow.
"""
