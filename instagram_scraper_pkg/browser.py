import abc
from typing import Optional
import httpx
from playwright.async_api import Browser, BrowserContext, Page, Playwright
from playwright.async_api import async_playwright

from .config import BROWSER_MODE, CDP_URL, HEADLESS, SLOW_MO_MS, VIEWPORT, random_user_agent
from .scraper_logging import get_logger

logger = get_logger(__name__)

LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-first-run",
    "--no-zygote",
    "--disable-extensions",
    "--hide-scrollbars",
    "--mute-audio",
]

STEALTH_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
window.chrome = { runtime: {} };
"""


class BrowserSession:
    """The browser, context and page used by exactly one request.

    `close()` tears everything down and may be called any number of times,
    including on a session whose launch failed halfway.
    """

    def __init__(self, playwright: Optional[Playwright] = None, owns_browser: bool = True):
        self.playwright = playwright
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self.owns_browser = owns_browser
        self.closed = False

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        # Remote browsers are shared, so only our own context is closed there
        targets = [self.page, self.context]
        if self.owns_browser:
            targets.append(self.browser)
        for target in targets:
            if target is None:
                continue
            try:
                await target.close()
            except Exception as e:
                logger.debug("Ignoring close error: %s", e)
        if self.playwright is not None:
            try:
                await self.playwright.stop()
            except Exception as e:
                logger.debug("Ignoring playwright stop error: %s", e)


async def new_context(browser: Browser, user_agent: Optional[str] = None) -> BrowserContext:
    """Create a context with a realistic desktop fingerprint."""
    context = await browser.new_context(
        user_agent=user_agent or random_user_agent(),
        viewport=VIEWPORT,
        locale="en-US",
        has_touch=False,
        is_mobile=False,
        ignore_https_errors=True,
        extra_http_headers={"Accept-Language": "en-US,en;q=0.9"},
    )
    await context.add_init_script(STEALTH_SCRIPT)
    return context


class BrowserProvider(abc.ABC):
    """Source of browser sessions, chosen once at process start."""

    name = "base"
    owns_browser = True

    @abc.abstractmethod
    async def _connect(self, playwright: Playwright, headless: bool, proxy: Optional[str]) -> Browser:
        ...

    async def open(self, headless: Optional[bool] = None, proxy: Optional[str] = None) -> BrowserSession:
        session = BrowserSession(await async_playwright().start(), owns_browser=self.owns_browser)
        try:
            session.browser = await self._connect(
                session.playwright, HEADLESS if headless is None else headless, proxy
            )
            session.context = await new_context(session.browser)
            session.page = await session.context.new_page()
        except BaseException:
            await session.close()
            raise
        return session


class LocalBrowserProvider(BrowserProvider):
    """Launch a Chromium process next to the server."""

    name = "local"

    async def _connect(self, playwright: Playwright, headless: bool, proxy: Optional[str]) -> Browser:
        logger.info("Launching Chromium (headless=%s)", headless)
        return await playwright.chromium.launch(
            headless=headless,
            proxy={"server": proxy} if proxy else None,
            slow_mo=SLOW_MO_MS if SLOW_MO_MS > 0 else None,
            args=LAUNCH_ARGS,
        )


class RemoteBrowserProvider(BrowserProvider):
    """Attach to a managed Chrome over the DevTools protocol.

    Per-request proxy and headless settings belong to whoever runs the
    remote browser and are ignored here.
    """

    name = "remote"
    owns_browser = False

    def __init__(self, cdp_url: str = CDP_URL):
        self.cdp_url = cdp_url

    async def _connect(self, playwright: Playwright, headless: bool, proxy: Optional[str]) -> Browser:
        endpoint = await resolve_ws_endpoint(self.cdp_url)
        logger.info("Connecting over CDP: %s", endpoint)
        return await playwright.chromium.connect_over_cdp(endpoint)


async def resolve_ws_endpoint(cdp_url: str) -> str:
    """Turn an http DevTools address into its WebSocket debugger URL.

    Some hosts (docker aliases, proxies) reject the HTTP upgrade Playwright
    attempts, so the WebSocket URL is fetched from `/json/version` first.
    Falls back to `cdp_url` when the lookup fails.
    """
    if not cdp_url.startswith(("http://", "https://")):
        return cdp_url
    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(cdp_url.rstrip("/") + "/json/version", timeout=10.0)
            if response.status_code == 200:
                return response.json().get("webSocketDebuggerUrl") or cdp_url
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Failed to fetch WebSocket URL: %s, trying direct connect", e)
    return cdp_url


def get_browser_provider(mode: str = BROWSER_MODE, cdp_url: str = CDP_URL) -> BrowserProvider:
    if mode == "remote":
        return RemoteBrowserProvider(cdp_url)
    if mode == "local":
        return LocalBrowserProvider()
    raise ValueError(f"Unknown browser mode: {mode!r} (expected 'local' or 'remote')")
