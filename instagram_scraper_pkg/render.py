"""Stateless render operations: screenshot, PDF and a content digest.

These never touch the cookie store; each call opens its own browser session
and closes it before returning.
"""
from typing import Tuple, Union
from urllib.parse import urlsplit
from playwright.async_api import Page

from .browser import BrowserProvider
from .errors import InvalidInput, RenderFailed
from .models import RenderRequest
from .navigation import goto_idle
from .scraper_logging import get_logger

logger = get_logger(__name__)

ACTIONS = ("screenshot", "pdf", "content")

CONTENT_DIGEST_JS = """
() => ({
  title: document.title,
  heading: document.querySelector('h1')?.textContent || 'No heading',
  description: document.querySelector('meta[name="description"]')?.content || 'No description',
  paragraphs: document.querySelectorAll('p').length,
  links: document.querySelectorAll('a').length,
})
"""


def normalize_url(url: str) -> str:
    """Validate a target URL, adding `https://` when no scheme is given.

    Raises `InvalidInput` for empty input, non-http(s) schemes or a missing
    host.
    """
    url = (url or "").strip()
    if not url:
        raise InvalidInput("URL is required")
    if "://" not in url:
        url = f"https://{url}"
    parts = urlsplit(url)
    if parts.scheme.lower() not in ("http", "https"):
        raise InvalidInput(f"Unsupported URL scheme: {parts.scheme}")
    if not parts.netloc:
        raise InvalidInput(f"URL has no host: {url}")
    return url


async def take_screenshot(page: Page, full_page: bool = False) -> bytes:
    return await page.screenshot(type="png", full_page=full_page)


async def render_pdf(page: Page) -> bytes:
    return await page.pdf(format="A4", print_background=True)


async def content_digest(page: Page) -> dict:
    return await page.evaluate(CONTENT_DIGEST_JS)


async def render_url(provider: BrowserProvider, req: RenderRequest) -> Tuple[str, Union[bytes, dict]]:
    """Run one render action and return (media_type, payload).

    Input is validated before a browser is started.
    """
    url = normalize_url(req.url)
    if req.action not in ACTIONS:
        raise InvalidInput(f"Action must be: {', '.join(ACTIONS)}")

    session = None
    try:
        session = await provider.open()
        logger.info("Navigating to %s for %s", url, req.action)
        ok, err = await goto_idle(session.page, url)
        if not ok:
            raise RenderFailed(f"Navigation to {url} timed out: {err}")

        if req.action == "screenshot":
            return "image/png", await take_screenshot(session.page, req.full_page)
        if req.action == "pdf":
            return "application/pdf", await render_pdf(session.page)
        return "application/json", await content_digest(session.page)
    finally:
        if session is not None:
            await session.close()
