from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .config import INSTAGRAM_PASSWORD, INSTAGRAM_USERNAME


NOT_AVAILABLE = "N/A"


class InstagramRequest(BaseModel):
    """Incoming request payload for the profile scraper.

    Field names mirror the original public contract (`profile`, `username`,
    `password`) so existing callers keep working.
    """
    profile: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    debug: bool = False
    headless: Optional[bool] = None
    proxy: Optional[str] = None


class RenderRequest(BaseModel):
    url: Optional[str] = None
    action: str = "screenshot"
    full_page: bool = False


class Credentials(BaseModel):
    username: str
    password: str

    @classmethod
    def resolve(cls, username: Optional[str], password: Optional[str]) -> Optional["Credentials"]:
        """Prefer request-supplied credentials, then the environment.

        Returns None when neither source has a complete pair.
        """
        if username and password:
            return cls(username=username, password=password)
        if INSTAGRAM_USERNAME and INSTAGRAM_PASSWORD:
            return cls(username=INSTAGRAM_USERNAME, password=INSTAGRAM_PASSWORD)
        return None


class SessionCookie(BaseModel):
    """One browser cookie in the shape Playwright reads and writes.

    `expires` is a unix timestamp, or -1 for a session cookie.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    value: str
    domain: str
    path: str = "/"
    expires: float = -1
    http_only: bool = Field(False, alias="httpOnly")
    secure: bool = False
    same_site: str = Field("Lax", alias="sameSite")

    @property
    def is_session(self) -> bool:
        return self.expires < 0

    def to_playwright(self) -> dict:
        return self.model_dump(by_alias=True)


class AuthStatus(str, Enum):
    CACHED = "authenticated_via_cache"
    FRESH_LOGIN = "authenticated_via_fresh_login"
    FAILED = "authentication_failed"


class AuthOutcome(BaseModel):
    """Result of one authentication attempt, consumed by the request flow."""
    status: AuthStatus
    cookies: List[SessionCookie] = []
    reason: str = ""

    @classmethod
    def via_cache(cls) -> "AuthOutcome":
        return cls(status=AuthStatus.CACHED)

    @classmethod
    def via_fresh_login(cls, cookies: List[SessionCookie]) -> "AuthOutcome":
        return cls(status=AuthStatus.FRESH_LOGIN, cookies=cookies)

    @classmethod
    def failed(cls, reason: str) -> "AuthOutcome":
        return cls(status=AuthStatus.FAILED, reason=reason)

    @property
    def authenticated(self) -> bool:
        return self.status != AuthStatus.FAILED


class ProfileRecord(BaseModel):
    """Fields scraped from one profile page.

    Serialized with the legacy keys (`nplu`, `privateAcc`, `desc`, ...) that
    API clients already consume.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    username: str
    numeric_ratio: float = Field(alias="nplu")
    has_profile_picture: bool = Field(alias="hasProfilePicture")
    profile_picture: str = Field("", alias="profilePicture")
    is_private: bool = Field(alias="privateAcc")
    bio: str = Field("", alias="desc")
    likes: str = NOT_AVAILABLE
    comments: str = NOT_AVAILABLE
    posts: str = NOT_AVAILABLE
    followers: str = NOT_AVAILABLE
    following: str = NOT_AVAILABLE
