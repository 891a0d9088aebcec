import json
import os
import re
from typing import Iterable, List, Optional, Tuple
from playwright.async_api import BrowserContext, Page
from playwright.async_api import Error as PlaywrightError
from pydantic import ValidationError

from .config import COOKIE_SEED_PATHS, LOGIN_URL_PATTERN, SITE_DOMAIN
from .models import SessionCookie
from .scraper_logging import get_logger

logger = get_logger(__name__)

LOGIN_FORM_SELECTOR = "input[name='username']"
MAX_COOKIE_EXPIRES = 253402300799


def is_site_domain(domain: str) -> bool:
    host = domain.lstrip(".").lower()
    return host == SITE_DOMAIN or host.endswith("." + SITE_DOMAIN)


def valid_expiry(expires: float) -> bool:
    """Playwright only accepts -1 (session) or a unix time in seconds up to year 9999."""
    return expires == -1 or 0 <= expires <= MAX_COOKIE_EXPIRES


def sanitize_cookies(raw: Iterable[dict]) -> List[SessionCookie]:
    """Normalize exported or browser-read cookies for Instagram domains only.

    - Removes whitespace from values
    - Normalizes domain to start with `.`
    - Maps extension exports (`expirationDate`, `session`) to `expires`
    - Normalizes `sameSite` values
    - Drops entries missing name/value, for other sites, or with an expiry
      Playwright rejects (e.g. millisecond timestamps)
    """
    clean: List[SessionCookie] = []
    for c in raw:
        if not isinstance(c, dict):
            continue
        c = dict(c)
        if isinstance(c.get("value"), str):
            c["value"] = re.sub(r"\s+", "", c["value"])
        if not c.get("name") or not c.get("value"):
            continue

        domain = c.get("domain", "")
        if domain and not domain.startswith("."):
            domain = "." + domain
        if not is_site_domain(domain):
            continue
        c["domain"] = domain

        if "expirationDate" in c and "expires" not in c:
            c["expires"] = c.pop("expirationDate")
        if c.get("session") or c.get("expires") is None:
            c["expires"] = -1

        ss = str(c.get("sameSite", "lax")).lower()
        if ss in ["no_restriction", "none"]:
            c["sameSite"] = "None"
        elif ss in ["lax", "strict"]:
            c["sameSite"] = ss.capitalize()
        else:
            c["sameSite"] = "Lax"

        try:
            cookie = SessionCookie.model_validate(c)
        except ValidationError:
            continue
        if not valid_expiry(cookie.expires):
            continue
        clean.append(cookie)
    return clean


class CookieStore:
    """In-memory cache of the authenticated cookie set.

    Lives for one running process: it is seeded lazily from the first
    existing file in `seed_paths` and replaced after every fresh login.
    Nothing is ever written back to disk, so a restart starts from the seed
    again. Concurrent requests may overwrite each other's set; the last
    writer wins and a stale read only costs an extra login.
    """

    def __init__(self, seed_paths: Optional[List[str]] = None):
        self.seed_paths = list(COOKIE_SEED_PATHS if seed_paths is None else seed_paths)
        self._cookies: Optional[List[SessionCookie]] = None
        self._seed_loaded = False

    def load_seed(self) -> Optional[List[SessionCookie]]:
        """Read the first existing seed file; None when absent or unreadable."""
        path = next((p for p in self.seed_paths if os.path.exists(p)), None)
        if path is None:
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable cookie seed %s: %s", path, e)
            return None
        if not isinstance(raw, list):
            logger.warning("Ignoring cookie seed %s: expected a JSON list", path)
            return None
        cookies = sanitize_cookies(raw)
        logger.info("Loaded %d seed cookies from %s", len(cookies), path)
        return cookies or None

    def get_cached(self) -> Optional[List[SessionCookie]]:
        if not self._seed_loaded:
            self._seed_loaded = True
            self._cookies = self.load_seed()
        return list(self._cookies) if self._cookies else None

    def set_cached(self, cookies: List[SessionCookie]) -> None:
        self._seed_loaded = True
        self._cookies = list(cookies)


async def apply_cookies(context: BrowserContext, cookies: Optional[List[SessionCookie]]) -> int:
    """Inject cookies into the context and return how many were applied.

    A rejected set is logged and reported as 0 so the caller falls back to
    a fresh login.
    """
    if not cookies:
        return 0
    try:
        await context.add_cookies([c.to_playwright() for c in cookies])
    except PlaywrightError as e:
        logger.warning("Browser rejected %d cached cookies: %s", len(cookies), e)
        return 0
    return len(cookies)


async def read_cookies(context: BrowserContext) -> List[SessionCookie]:
    return sanitize_cookies(await context.cookies())


async def check_login_required(page: Page) -> Tuple[bool, List[str]]:
    """Detect that the current page is the login wall.

    The URL pattern is authoritative; a visible login form on the landing
    page (logged-out home) counts as well.
    """
    debug: List[str] = []
    if LOGIN_URL_PATTERN in page.url:
        debug.append(f"LoginURL:{page.url}")
        return True, debug
    try:
        if await page.locator(LOGIN_FORM_SELECTOR).count() > 0:
            debug.append("LoginForm")
            return True, debug
    except PlaywrightError as e:
        debug.append(f"LoginCheckErr:{str(e)[:30]}")
    return False, debug
