import logging

import httpx

from .exceptions import ConfigurationError
from .models import SessionCredentials

logger = logging.getLogger(__name__)

COOKIE_AT_MAIN = "at-main"
COOKIE_UBID_MAIN = "ubid-main"


def build_cookie_jar(credentials: SessionCredentials, origin: str) -> httpx.Cookies:
    """
    Seed a cookie jar with the two IMDb session cookies, scoped to ``origin``'s host.

    The jar is never refreshed; expired tokens surface later as an
    AuthorizationError on the first request.
    """
    try:
        url = httpx.URL(origin)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ConfigurationError(f"failure parsing {origin!r} as url: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"failure parsing {origin!r} as url: expected an absolute http(s) url")

    if not credentials.session_token or not credentials.secondary_token:
        raise ConfigurationError(
            f"both {COOKIE_AT_MAIN} and {COOKIE_UBID_MAIN} cookie values are required"
        )

    try:
        jar = httpx.Cookies()
        jar.set(COOKIE_AT_MAIN, credentials.session_token, domain=url.host, path="/")
        jar.set(COOKIE_UBID_MAIN, credentials.secondary_token, domain=url.host, path="/")
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"failure creating cookie jar: {exc}") from exc

    logger.debug(f"Cookie jar ready for {url.host}")
    return jar
