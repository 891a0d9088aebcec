import pytest

from instagram_scraper_pkg import models
from instagram_scraper_pkg.config import SITE_URL
from instagram_scraper_pkg.cookies_auth import CookieStore
from instagram_scraper_pkg.errors import InvalidInput
from instagram_scraper_pkg.models import InstagramRequest, SessionCookie
from scraper import normalize_profile_url, request_credentials, scrape_instagram
from tests.conftest import FakePage, FakeProvider, login_wall_page


@pytest.mark.parametrize(
    "profile,expected",
    [
        ("nasa", "https://www.instagram.com/nasa/"),
        ("@nasa", "https://www.instagram.com/nasa/"),
        ("instagram.com/nasa", "https://instagram.com/nasa"),
        ("https://instagram.com/nasa", "https://instagram.com/nasa"),
        ("https://www.instagram.com/nasa/?hl=en", "https://www.instagram.com/nasa/?hl=en"),
        ("https://Instagram.com/nasa", "https://instagram.com/nasa"),
        ("HTTPS://WWW.INSTAGRAM.COM/NASA/", "https://www.instagram.com/NASA/"),
        ("nasa/", "https://www.instagram.com/nasa/"),
    ],
)
def test_normalize_profile_url(profile, expected):
    assert normalize_profile_url(profile) == expected


@pytest.mark.parametrize(
    "profile",
    [
        None,
        "",
        "   ",
        "https://example.com/nasa",
        "bad handle!",
        "https://www.instagram.com",
        "https://notinstagram.com/nasa",
        "https://evil.example/?next=instagram.com/nasa",
        "https://instagram.com.evil.example/nasa",
    ],
)
def test_normalize_profile_url_rejects(profile):
    with pytest.raises(InvalidInput):
        normalize_profile_url(profile)


def test_request_credentials_prefers_request(monkeypatch):
    monkeypatch.setattr(models, "INSTAGRAM_USERNAME", "env_user")
    monkeypatch.setattr(models, "INSTAGRAM_PASSWORD", "env_pass")
    creds = request_credentials(InstagramRequest(profile="nasa", username="me", password="pw"))
    assert (creds.username, creds.password) == ("me", "pw")


def test_request_credentials_falls_back_to_env(monkeypatch):
    monkeypatch.setattr(models, "INSTAGRAM_USERNAME", "env_user")
    monkeypatch.setattr(models, "INSTAGRAM_PASSWORD", "env_pass")
    creds = request_credentials(InstagramRequest(profile="nasa"))
    assert creds.username == "env_user"


def test_request_credentials_absent():
    assert request_credentials(InstagramRequest(profile="nasa")) is None


def test_partial_credentials_rejected():
    with pytest.raises(InvalidInput):
        request_credentials(InstagramRequest(profile="nasa", username="me"))


def cached_store():
    store = CookieStore([])
    store.set_cached([SessionCookie(name="sessionid", value="ok", domain=".instagram.com")])
    return store


async def test_private_profile_end_to_end():
    provider = FakeProvider(FakePage(present={"body"}))
    status, body = await scrape_instagram(
        InstagramRequest(profile="https://instagram.com/nasa"), cached_store(), provider
    )

    assert status == 200
    assert body["success"] is True
    assert body["url"] == "https://instagram.com/nasa"
    data = body["data"]
    assert data["username"] == "nasa"
    assert data["privateAcc"] is True
    assert data["nplu"] == 0.0
    assert (data["posts"], data["followers"], data["following"]) == ("N/A", "N/A", "N/A")
    assert "debug" not in body
    assert provider.sessions[0].closed


async def test_debug_tags_returned_when_requested(monkeypatch):
    import scraper

    async def no_files(page, prefix="debug"):
        return None

    monkeypatch.setattr(scraper, "save_debug_files", no_files)
    provider = FakeProvider(FakePage(present={"body"}))
    status, body = await scrape_instagram(InstagramRequest(profile="nasa", debug=True), cached_store(), provider)

    assert status == 200
    assert "BROWSER:fake" in body["debug"]
    assert "AUTH:cached" in body["debug"]


async def test_invalid_input_never_opens_browser():
    provider = FakeProvider()
    status, body = await scrape_instagram(InstagramRequest(), cached_store(), provider)
    assert status == 400
    assert body["success"] is False
    assert provider.opened == 0


async def test_auth_failure_is_401_and_tears_down():
    provider = FakeProvider(login_wall_page())
    status, body = await scrape_instagram(InstagramRequest(profile="nasa"), CookieStore([]), provider)

    assert status == 401
    assert body["error"] == "Login failed"
    assert body["message"] == "credentials not configured"
    assert provider.sessions[0].closed


async def test_extraction_failure_is_502():
    provider = FakeProvider(FakePage(present=set()))
    status, body = await scrape_instagram(InstagramRequest(profile="nasa"), cached_store(), provider)
    assert status == 502
    assert provider.sessions[0].closed


async def test_unclassified_fault_is_500_with_message_only():
    provider = FakeProvider(error=RuntimeError("browser crashed"))
    status, body = await scrape_instagram(InstagramRequest(profile="nasa"), cached_store(), provider)

    assert status == 500
    assert body == {
        "success": False,
        "url": "https://www.instagram.com/nasa/",
        "error": "Failed to scrape Instagram profile",
        "message": "browser crashed",
    }


async def test_fresh_login_refreshes_shared_store():
    page = login_wall_page()
    page.context.browser_cookies = [{"name": "sessionid", "value": "fresh", "domain": ".instagram.com"}]
    store = CookieStore([])

    status, body = await scrape_instagram(
        InstagramRequest(profile="nasa", username="me", password="pw"), store, FakeProvider(page)
    )

    assert status == 200
    assert [c.value for c in store.get_cached()] == ["fresh"]
    assert page.url == SITE_URL + "nasa/"


async def test_mixed_case_host_keeps_username():
    provider = FakeProvider(FakePage(present={"body"}))
    status, body = await scrape_instagram(
        InstagramRequest(profile="https://Instagram.com/nasa"), cached_store(), provider
    )
    assert status == 200
    assert body["url"] == "https://instagram.com/nasa"
    assert body["data"]["username"] == "nasa"


async def test_foreign_host_is_rejected_before_launch():
    provider = FakeProvider(FakePage(present={"body"}))
    status, body = await scrape_instagram(
        InstagramRequest(profile="https://notinstagram.com/nasa"), cached_store(), provider
    )
    assert status == 400
    assert provider.opened == 0
