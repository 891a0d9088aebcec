from typing import Tuple
from playwright.async_api import Page
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .config import NAV_TIMEOUT_MS


async def goto_idle(page: Page, url: str, timeout_ms: int = NAV_TIMEOUT_MS) -> Tuple[bool, str]:
    """Navigate and wait until the network has been idle for a moment.

    Returns (success, error_message). Only a timeout is reported this way;
    any other browser fault propagates. There is no retry: a failed
    navigation is the caller's decision.
    """
    try:
        await page.goto(url, timeout=timeout_ms, wait_until="networkidle")
        return True, ""
    except PlaywrightTimeoutError as e:
        return False, str(e)


async def wait_for_marker(page: Page, selector: str, timeout_ms: int, state: str = "visible") -> bool:
    """Return True when `selector` reaches `state` within the bound."""
    try:
        await page.wait_for_selector(selector, state=state, timeout=timeout_ms)
        return True
    except PlaywrightTimeoutError:
        return False


async def hover_best_effort(page: Page, selector: str) -> bool:
    """Hover an element to reveal lazy content; failures are not fatal."""
    try:
        await page.hover(selector)
        return True
    except PlaywrightError:
        return False
