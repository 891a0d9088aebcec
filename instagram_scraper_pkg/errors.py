class ScraperError(Exception):
    """Base class for classified request failures.

    `status_code` is the HTTP status the API surfaces for this class and
    `error` the short label clients switch on.
    """

    status_code = 500
    error = "Failed to scrape Instagram profile"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(ScraperError):
    """Missing or malformed request input; raised before any navigation."""

    status_code = 400
    error = "Invalid input"


class AuthenticationFailed(ScraperError):
    """Login could not be established (bad or missing credentials, timeout)."""

    status_code = 401
    error = "Login failed"


class ExtractionFailed(ScraperError):
    """The profile page could not be loaded far enough to read it."""

    status_code = 502
    error = "Profile extraction failed"


class RenderFailed(ScraperError):
    """The page to screenshot, print or digest did not load in time."""

    status_code = 502
    error = "Failed to process request"
