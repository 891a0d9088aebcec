#!/usr/bin/env python3
"""
Instagram Profile Scraper - CLI Standalone Version

Logs in (or reuses cached cookies), opens a profile and prints the scraped
fields as JSON. Supports a locally launched Chromium or a remote Chrome
reached over CDP.

Usage:
    python scraper.py <PROFILE_URL_OR_HANDLE> [OPTIONS]

Example:
    python scraper.py https://www.instagram.com/nasa/ --debug
    python scraper.py nasa --username me --password secret
    python scraper.py nasa --browser-mode remote --cdp-url http://localhost:9222
"""

import argparse
import asyncio
import json
import re
import sys
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlsplit, urlunsplit

from instagram_scraper_pkg.browser import BrowserProvider, BrowserSession, get_browser_provider
from instagram_scraper_pkg.config import BROWSER_MODE, CDP_URL, SITE_DOMAIN, SITE_URL
from instagram_scraper_pkg.cookies_auth import CookieStore, is_site_domain
from instagram_scraper_pkg.errors import AuthenticationFailed, InvalidInput, ScraperError
from instagram_scraper_pkg.extraction import extract_profile
from instagram_scraper_pkg.login import authenticate
from instagram_scraper_pkg.models import Credentials, InstagramRequest
from instagram_scraper_pkg.render import normalize_url
from instagram_scraper_pkg.response import build_error, build_response
from instagram_scraper_pkg.scraper_logging import add_debug, get_logger, save_debug_files

logger = get_logger("scraper")

HANDLE_RE = re.compile(r"^[A-Za-z0-9._]{1,30}$")


def normalize_profile_url(profile: Optional[str]) -> str:
    """Accept a profile URL or a bare handle (`nasa`, `@nasa`).

    Handles become `https://www.instagram.com/<handle>/`. URLs get an
    `https://` prefix when the scheme is missing, must point at an
    Instagram host and name a profile in their first path segment; scheme
    and host are lowercased.
    """
    profile = (profile or "").strip()
    if not profile:
        raise InvalidInput("Profile URL is required in request body")
    handle = profile.lstrip("@").rstrip("/")
    if "/" not in handle and SITE_DOMAIN not in handle.lower():
        if not HANDLE_RE.match(handle):
            raise InvalidInput(f"Not an Instagram profile URL or handle: {profile}")
        return f"{SITE_URL}{handle}/"

    parts = urlsplit(normalize_url(profile))
    if not is_site_domain(parts.hostname or ""):
        raise InvalidInput(f"Not an Instagram profile URL: {profile}")
    if not parts.path.lstrip("/").split("/")[0]:
        raise InvalidInput(f"Profile URL has no profile name: {profile}")
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), parts.path, parts.query, parts.fragment))


def request_credentials(data: InstagramRequest) -> Optional[Credentials]:
    """Credentials from the request, else from the environment, else None."""
    if bool(data.username) != bool(data.password):
        raise InvalidInput("Please provide both username and password in request body")
    return Credentials.resolve(data.username, data.password)


async def scrape_instagram(
    data: InstagramRequest,
    store: CookieStore,
    provider: BrowserProvider,
) -> Tuple[int, Dict]:
    """
    Scrape one Instagram profile.

    Args:
        data: request payload (profile, optional credentials, options)
        store: process-wide cookie cache, read and refreshed by the login step
        provider: source of the browser session for this request

    Returns:
        (HTTP status code, response body)
    """
    debug_msg: List[str] = []
    debug_files = None
    profile_url = data.profile
    session: Optional[BrowserSession] = None

    try:
        profile_url = normalize_profile_url(data.profile)
        credentials = request_credentials(data)

        session = await provider.open(headless=data.headless, proxy=data.proxy)
        add_debug(debug_msg, f"BROWSER:{provider.name}")

        outcome = await authenticate(session.page, credentials, store, debug_msg)
        if not outcome.authenticated:
            raise AuthenticationFailed(outcome.reason)

        record = await extract_profile(session.page, profile_url, debug_msg)
        if data.debug:
            debug_files = await save_debug_files(session.page, "profile")

        logger.info("Scraping complete: %s (private=%s)", record.username, record.is_private)
        return 200, build_response(data, profile_url, record, debug_msg, debug_files)

    except ScraperError as e:
        logger.warning("%s: %s", e.error, e.message)
        if data.debug and session is not None and session.page is not None:
            debug_files = await save_debug_files(session.page, "failure")
        return e.status_code, build_error(data, profile_url, e.error, e.message, debug_msg, debug_files)

    except Exception as e:
        logger.exception("Instagram scraping error")
        return 500, build_error(data, profile_url, ScraperError.error, str(e), debug_msg)

    finally:
        if session is not None:
            await session.close()


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Scrape public fields of an Instagram profile",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s https://www.instagram.com/nasa/
  %(prog)s nasa --debug
  %(prog)s nasa --username me --password secret
  %(prog)s nasa --browser-mode remote --cdp-url http://localhost:9222
        """
    )

    parser.add_argument(
        "profile",
        help="Instagram profile URL or handle (e.g., https://www.instagram.com/nasa/ or nasa)"
    )
    parser.add_argument("--username", help="Instagram login (default: INSTAGRAM_USERNAME)")
    parser.add_argument("--password", help="Instagram password (default: INSTAGRAM_PASSWORD)")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Include debug tags and save screenshot/HTML snapshots"
    )
    parser.add_argument(
        "--headless",
        type=lambda x: x.lower() in ("true", "1", "yes"),
        default=None,
        help="Run browser in headless mode (default: SCRAPER_HEADLESS or true)"
    )
    parser.add_argument(
        "--browser-mode",
        choices=["local", "remote"],
        default=BROWSER_MODE,
        help=f"Launch Chromium locally or attach over CDP (default: {BROWSER_MODE})"
    )
    parser.add_argument(
        "--cdp-url",
        default=CDP_URL,
        help=f"CDP endpoint for --browser-mode remote (default: {CDP_URL})"
    )
    parser.add_argument(
        "--proxy",
        help="Proxy URL to use for requests (e.g., http://proxy.example.com:8080)"
    )
    parser.add_argument(
        "--cookies",
        help="Path to a seed cookies.json file. If not specified, uses default locations"
    )
    parser.add_argument(
        "--output",
        "-o",
        help="Output file path (JSON format). If not specified, prints to stdout"
    )

    args = parser.parse_args()

    request_data = InstagramRequest(
        profile=args.profile,
        username=args.username,
        password=args.password,
        debug=args.debug,
        headless=args.headless,
        proxy=args.proxy,
    )
    store = CookieStore([args.cookies] if args.cookies else None)
    provider = get_browser_provider(args.browser_mode, args.cdp_url)

    try:
        status, result = asyncio.run(scrape_instagram(request_data, store, provider))

        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(result, f, indent=2)
            print(f"Results saved to: {args.output}")
        else:
            print(json.dumps(result, indent=2))

        sys.exit(0 if status == 200 else 1)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
