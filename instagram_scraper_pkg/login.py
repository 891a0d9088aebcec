"""Authentication workflow: reuse cached cookies, log in only when needed.

States: try the cached session on the landing page; if the login wall shows
up, submit the login form once and keep the resulting cookies. Timeouts are
reported as a failed outcome and never retried here.
"""
from typing import List, Optional
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .config import LOGIN_FIELD_TIMEOUT_MS, LOGIN_URL, LOGIN_URL_PATTERN, NAV_TIMEOUT_MS, SITE_URL
from .cookies_auth import CookieStore, apply_cookies, check_login_required, read_cookies
from .models import AuthOutcome, Credentials
from .navigation import goto_idle
from .scraper_logging import add_debug, get_logger

logger = get_logger(__name__)

USERNAME_INPUT = "input[name='username']"
PASSWORD_INPUT = "input[name='password']"
SUBMIT_BUTTON = "button[type='submit']"

CREDENTIALS_NOT_CONFIGURED = "credentials not configured"
INVALID_CREDENTIALS = "invalid credentials"


async def authenticate(
    page: Page,
    credentials: Optional[Credentials],
    store: CookieStore,
    debug_msgs: Optional[List[str]] = None,
) -> AuthOutcome:
    """Make `page` authenticated, preferring the store's cookies.

    Cookies are injected before the first navigation. Only a fresh login
    writes to `store`.
    """
    debug = debug_msgs if debug_msgs is not None else []

    injected = await apply_cookies(page.context, store.get_cached())
    add_debug(debug, f"COOKIES_INJECTED:{injected}")

    ok, err = await goto_idle(page, SITE_URL)
    if not ok:
        logger.warning("Landing page timed out: %s", err)
        return AuthOutcome.failed(f"timed out loading {SITE_URL}")

    needs_login, login_debug = await check_login_required(page)
    debug.extend(login_debug)
    if not needs_login:
        logger.info("Cached session accepted")
        add_debug(debug, "AUTH:cached")
        return AuthOutcome.via_cache()

    if credentials is None:
        add_debug(debug, "AUTH:no_credentials")
        return AuthOutcome.failed(CREDENTIALS_NOT_CONFIGURED)

    return await _login(page, credentials, store, debug)


async def _login(page: Page, credentials: Credentials, store: CookieStore, debug: List[str]) -> AuthOutcome:
    logger.info("Session not authenticated, logging in")
    if LOGIN_URL_PATTERN not in page.url:
        ok, err = await goto_idle(page, LOGIN_URL)
        if not ok:
            logger.warning("Login page timed out: %s", err)
            return AuthOutcome.failed(f"timed out loading {LOGIN_URL}")

    try:
        await page.wait_for_selector(USERNAME_INPUT, state="visible", timeout=LOGIN_FIELD_TIMEOUT_MS)
        await page.fill(USERNAME_INPUT, credentials.username)
        await page.fill(PASSWORD_INPUT, credentials.password)
        # the click starts the navigation, so both are awaited together
        async with page.expect_navigation(wait_until="networkidle", timeout=NAV_TIMEOUT_MS):
            await page.click(SUBMIT_BUTTON)
    except PlaywrightTimeoutError as e:
        logger.warning("Login timed out: %s", e)
        add_debug(debug, "AUTH:login_timeout")
        return AuthOutcome.failed("login timed out")

    if LOGIN_URL_PATTERN in page.url:
        add_debug(debug, "AUTH:rejected")
        return AuthOutcome.failed(INVALID_CREDENTIALS)

    cookies = await read_cookies(page.context)
    store.set_cached(cookies)
    logger.info("Logged in, cached %d cookies", len(cookies))
    add_debug(debug, "AUTH:fresh_login")
    return AuthOutcome.via_fresh_login(cookies)
