#!/usr/bin/env python3
"""
Helper script to create the seed cookie file for the Instagram scraper.
Opens a visible browser window for you to log in to Instagram (including any
2FA or checkpoint steps the API cannot handle), then writes the session
cookies to cookies.json. The scraper only reads this file; it never writes it.
"""

import argparse
import asyncio
import json
from playwright.async_api import async_playwright

from instagram_scraper_pkg.config import LOGIN_URL, LOGIN_URL_PATTERN, VIEWPORT
from instagram_scraper_pkg.cookies_auth import read_cookies


def looks_logged_in(url: str) -> bool:
    return "instagram.com" in url and not any(
        k in url for k in [LOGIN_URL_PATTERN, "/challenge", "/two_factor", "/accounts/suspended"]
    )


async def main(output: str, max_wait: int) -> None:
    print("Opening browser for Instagram login...")
    print("   Please log in to Instagram in the browser window.")
    print("   The script will auto-detect when you're logged in.\n")

    p = await async_playwright().start()
    browser = await p.chromium.launch(
        headless=False,
        args=["--disable-blink-features=AutomationControlled", "--no-sandbox"],
    )
    context = await browser.new_context(viewport=VIEWPORT, locale="en-US")
    page = await context.new_page()
    await page.goto(LOGIN_URL)

    logged_in = False
    for i in range(max_wait // 2):
        await asyncio.sleep(2)
        if looks_logged_in(page.url):
            # Let the post-login redirects settle before reading cookies
            await asyncio.sleep(3)
            if looks_logged_in(page.url):
                print(f"\nLogin detected! (URL: {page.url[:60]})")
                logged_in = True
                break
        if i % 15 == 0 and i > 0:
            print(f"   Still waiting... ({i * 2}s elapsed)")

    cookies = await read_cookies(context)
    await browser.close()
    await p.stop()

    if not logged_in:
        print("Timed out waiting for login; nothing written.")
        return

    with open(output, "w", encoding="utf-8") as f:
        json.dump([c.to_playwright() for c in cookies], f, indent=2)

    has_session = any(c.name == "sessionid" for c in cookies)
    print(f"Saved {output} ({len(cookies)} cookies)")
    print(f"   sessionid cookie: {'found' if has_session else 'NOT found'}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Save Instagram session cookies as a seed file")
    parser.add_argument("--output", "-o", default="cookies.json", help="Where to write cookies (default: cookies.json)")
    parser.add_argument("--max-wait", type=int, default=300, help="Seconds to wait for login (default: 300)")
    args = parser.parse_args()
    asyncio.run(main(args.output, args.max_wait))
