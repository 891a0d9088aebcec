import os
import random
from pathlib import Path


SITE_URL = "https://www.instagram.com/"
LOGIN_URL = "https://www.instagram.com/accounts/login/"
LOGIN_URL_PATTERN = "/accounts/login"
SITE_DOMAIN = "instagram.com"
PROFILE_DOMAIN_MARKER = "instagram.com/"
CDN_PREFIX = "https://scontent"

INSTAGRAM_USERNAME = os.environ.get("INSTAGRAM_USERNAME", "")
INSTAGRAM_PASSWORD = os.environ.get("INSTAGRAM_PASSWORD", "")

COOKIES_FILE = os.environ.get("INSTAGRAM_COOKIES_PATH", "")
COOKIE_SEED_PATHS = [
    p
    for p in [
        COOKIES_FILE,
        "cookies.json",
        str(Path.home() / ".instagram_scraper" / "cookies.json"),
    ]
    if p
]

# "remote" connects to a managed Chrome over CDP instead of launching one
BROWSER_MODE = os.environ.get(
    "SCRAPER_BROWSER_MODE", "remote" if os.environ.get("VERCEL_ENV") else "local"
).lower()
CDP_URL = os.environ.get("SCRAPER_CDP_URL", "http://127.0.0.1:9222")
HEADLESS = os.environ.get("SCRAPER_HEADLESS", "true").lower() not in ["0", "false", "no"]
SLOW_MO_MS = int(os.environ.get("SCRAPER_SLOW_MO_MS", "0"))

NAV_TIMEOUT_MS = 30000
BODY_TIMEOUT_MS = 10000
AVATAR_TIMEOUT_MS = 3000
LOGIN_FIELD_TIMEOUT_MS = 10000

VIEWPORT = {"width": 1280, "height": 800}


def user_agents():
    """Return a curated pool of desktop Chrome user agents."""
    return [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    ]


def random_user_agent():
    """Pick a random user agent from the pool.

    Callers that need reproducibility in tests can seed `random` themselves.
    """
    return random.choice(user_agents())
