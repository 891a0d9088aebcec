from contextlib import asynccontextmanager

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from instagram_scraper_pkg import models
from instagram_scraper_pkg.browser import BrowserSession
from instagram_scraper_pkg.config import LOGIN_URL, SITE_URL


class FakeContext:
    def __init__(self, cookies=None):
        self.added = []
        self.browser_cookies = list(cookies or [])
        self.closed = False

    async def add_cookies(self, cookies):
        self.added.extend(cookies)

    async def cookies(self):
        return list(self.browser_cookies)

    async def close(self):
        self.closed = True


class FakeLocator:
    def __init__(self, matches):
        self.matches = matches

    async def count(self):
        return self.matches


class FakePage:
    """Records the calls the workflows make and replays scripted results.

    `present` lists selectors that exist on every page, `redirects` maps a
    requested URL to where the browser ends up, `timeouts` lists URLs whose
    navigation times out, and `after_submit_url` is where the login submit
    lands.
    """

    def __init__(
        self,
        context=None,
        present=(),
        redirects=None,
        timeouts=(),
        after_submit_url=SITE_URL,
        html="<html><body></body></html>",
        hover_fails=False,
        submit_times_out=False,
    ):
        self.context = context or FakeContext()
        self.url = "about:blank"
        self.present = set(present)
        self.redirects = redirects or {}
        self.timeouts = set(timeouts)
        self.after_submit_url = after_submit_url
        self.html = html
        self.hover_fails = hover_fails
        self.submit_times_out = submit_times_out
        self.calls = []
        self.closed = False

    async def goto(self, url, timeout=None, wait_until=None):
        self.calls.append(("goto", url, wait_until, timeout))
        if url in self.timeouts:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")
        self.url = self.redirects.get(url, url)

    def locator(self, selector):
        return FakeLocator(1 if selector in self.present else 0)

    async def wait_for_selector(self, selector, state=None, timeout=None):
        self.calls.append(("wait_for_selector", selector, state, timeout))
        if selector not in self.present:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")
        return object()

    async def fill(self, selector, value):
        self.calls.append(("fill", selector, value))

    async def click(self, selector):
        self.calls.append(("click", selector))
        self.url = self.after_submit_url

    @asynccontextmanager
    async def expect_navigation(self, wait_until=None, timeout=None):
        self.calls.append(("expect_navigation", wait_until, timeout))
        yield
        if self.submit_times_out:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for navigation")

    async def hover(self, selector):
        self.calls.append(("hover", selector))
        if self.hover_fails:
            raise PlaywrightError("Element is not attached to the DOM")

    async def content(self):
        return self.html

    async def screenshot(self, type=None, full_page=False, path=None):
        self.calls.append(("screenshot", type, full_page))
        return b"\x89PNG fake"

    async def pdf(self, format=None, print_background=False):
        self.calls.append(("pdf", format, print_background))
        return b"%PDF-1.4 fake"

    async def evaluate(self, script):
        return {"title": "Example", "heading": "Hi", "description": "No description", "paragraphs": 2, "links": 1}

    async def close(self):
        self.closed = True

    def call_names(self):
        return [c[0] for c in self.calls]


class FakeProvider:
    """Hands out BrowserSessions wrapping a prepared FakePage."""

    name = "fake"

    def __init__(self, page=None, error=None):
        self.page = page or FakePage()
        self.error = error
        self.opened = 0
        self.sessions = []

    async def open(self, headless=None, proxy=None):
        self.opened += 1
        if self.error is not None:
            raise self.error
        session = BrowserSession(owns_browser=False)
        session.context = self.page.context
        session.page = self.page
        self.sessions.append(session)
        return session


def login_wall_page(**kwargs):
    """A page where the landing URL redirects to the login form."""
    kwargs.setdefault("present", {"body", "input[name='username']"})
    return FakePage(redirects={SITE_URL: LOGIN_URL}, **kwargs)


@pytest.fixture(autouse=True)
def no_env_credentials(monkeypatch):
    monkeypatch.setattr(models, "INSTAGRAM_USERNAME", "")
    monkeypatch.setattr(models, "INSTAGRAM_PASSWORD", "")
