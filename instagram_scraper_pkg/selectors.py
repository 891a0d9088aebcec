"""Selector set for Instagram profile markup.

Instagram ships obfuscated class names that change without notice. Every
selector the scraper depends on lives here so a markup change is a one-file
edit; the workflows only see `ProfileMarkup`.
"""
from typing import List
from bs4 import BeautifulSoup

AVATAR_MARKER = "._aagu"
ENGAGEMENT_ITEM = "li.x972fbf"
STAT_SPAN = "header span.x5n08af"
BIO_SPAN = "header span._ap3a"
AVATAR_IMG = "img[alt*='profile picture']"


class ProfileMarkup:
    """Query a static snapshot of a rendered profile page."""

    def __init__(self, html: str):
        self.soup = BeautifulSoup(html or "", "html.parser")

    def _texts(self, selector: str) -> List[str]:
        return [el.get_text().strip() for el in self.soup.select(selector)]

    def engagement_texts(self) -> List[str]:
        """Texts of the engagement list items, in document order."""
        return self._texts(ENGAGEMENT_ITEM)

    def stat_texts(self) -> List[str]:
        """Texts of the header stat spans (posts, followers, following)."""
        return self._texts(STAT_SPAN)

    def bio(self) -> str:
        el = self.soup.select_one(BIO_SPAN)
        return el.get_text().strip() if el else ""

    def avatar_url(self) -> str:
        el = self.soup.select_one(AVATAR_IMG)
        return (el.get("src") or "") if el else ""
