from typing import List, Optional
from playwright.async_api import Page

from .config import AVATAR_TIMEOUT_MS, BODY_TIMEOUT_MS, CDN_PREFIX, PROFILE_DOMAIN_MARKER
from .errors import ExtractionFailed
from .models import NOT_AVAILABLE, ProfileRecord
from .navigation import goto_idle, hover_best_effort, wait_for_marker
from .scraper_logging import add_debug, get_logger
from .selectors import AVATAR_MARKER, ProfileMarkup

logger = get_logger(__name__)


def username_from_url(profile_url: str) -> str:
    """Return the path segment right after `instagram.com/`.

    Query strings and fragments are ignored; a URL without the marker
    yields an empty username.
    """
    _, marker, rest = profile_url.partition(PROFILE_DOMAIN_MARKER)
    if not marker:
        return ""
    return rest.split("?")[0].split("#")[0].split("/")[0]


def numeric_ratio(username: str) -> float:
    """Share of ASCII digits in `username`; 0.0 for an empty username."""
    if not username:
        return 0.0
    return sum("0" <= ch <= "9" for ch in username) / len(username)


def has_custom_avatar(profile_picture: str) -> bool:
    return bool(profile_picture) and profile_picture.startswith(CDN_PREFIX)


def _first_or_sentinel(values: List[str], index: int) -> str:
    if index < len(values) and values[index]:
        return values[index]
    return NOT_AVAILABLE


def parse_profile_html(html: str, profile_url: str, is_private: bool) -> ProfileRecord:
    """Build a `ProfileRecord` from one markup snapshot.

    Missing elements fall back to sentinels. The stat triple is all or
    nothing: fewer than three spans leaves posts/followers/following at N/A.
    """
    markup = ProfileMarkup(html)

    engagement = markup.engagement_texts()
    stats = markup.stat_texts()
    if len(stats) >= 3:
        posts, followers, following = stats[:3]
    else:
        posts = followers = following = NOT_AVAILABLE

    avatar = markup.avatar_url()
    username = username_from_url(profile_url)

    return ProfileRecord(
        username=username,
        numeric_ratio=numeric_ratio(username),
        has_profile_picture=has_custom_avatar(avatar),
        profile_picture=avatar,
        is_private=is_private,
        bio=markup.bio(),
        likes=_first_or_sentinel(engagement, 0),
        comments=_first_or_sentinel(engagement, 1),
        posts=posts,
        followers=followers,
        following=following,
    )


async def extract_profile(page: Page, profile_url: str, debug_msgs: Optional[List[str]] = None) -> ProfileRecord:
    """Open a profile with an authenticated page and read its fields.

    Raises `ExtractionFailed` when the page cannot be loaded or has no
    body. A missing avatar marker means a private account, which is a
    valid (reduced) result.
    """
    debug = debug_msgs if debug_msgs is not None else []

    logger.info("Opening profile %s", profile_url)
    ok, err = await goto_idle(page, profile_url)
    if not ok:
        raise ExtractionFailed(f"Navigation to {profile_url} timed out: {err}")

    if not await wait_for_marker(page, "body", BODY_TIMEOUT_MS, state="attached"):
        raise ExtractionFailed("Profile page has no document body")

    is_private = not await wait_for_marker(page, AVATAR_MARKER, AVATAR_TIMEOUT_MS)
    if is_private:
        logger.info("Account is private or profile image not found")
        add_debug(debug, "PRIVATE_ACCOUNT")
    elif not await hover_best_effort(page, AVATAR_MARKER):
        add_debug(debug, "HOVER_FAILED")

    html = await page.content()
    add_debug(debug, f"SNAPSHOT:{len(html)}")
    return parse_profile_html(html, profile_url, is_private)
