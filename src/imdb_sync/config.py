"""
Configuration for the IMDb scraping client.

Values are read from environment variables at import time; invalid values
fall back to defaults with a warning.
"""
import os
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _get_float_env(key: str, default: float, min_val: float = 0) -> float:
    """
    Safely parse float from environment variable with validation.

    Args:
        key: Environment variable name
        default: Default value if not set or invalid
        min_val: Minimum allowed value

    Returns:
        Validated float value
    """
    try:
        val = float(os.environ.get(key, default))
        if val < min_val:
            logger.warning(f"{key}={val} is below minimum {min_val}, using {min_val}")
            return min_val
        return val
    except ValueError:
        logger.warning(f"Invalid {key}='{os.environ.get(key)}', using default {default}")
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    """Parse a boolean flag such as 1/0, true/false, yes/no."""
    raw = os.environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    logger.warning(f"Invalid {key}='{raw}', using default {default}")
    return default


# Site
IMDB_BASE_URL = os.environ.get("IMDB_BASE_URL", "https://www.imdb.com")
USER_ID_AUTO_DETECT = "auto-detect"  # Sentinel: scrape the user id from the profile page

# HTTP
HTTP_TIMEOUT = _get_float_env("IMDB_HTTP_TIMEOUT", 30.0, min_val=1.0)
HTTP_HTTP2 = _get_bool_env("IMDB_HTTP2", False)
USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"

# Credentials
IMDB_COOKIE_AT_MAIN = os.environ.get("IMDB_COOKIE_AT_MAIN", "")
IMDB_COOKIE_UBID_MAIN = os.environ.get("IMDB_COOKIE_UBID_MAIN", "")
IMDB_USER_ID = os.environ.get("IMDB_USER_ID", USER_ID_AUTO_DETECT)


@dataclass(frozen=True)
class ImdbConfig:
    cookie_at_main: str
    cookie_ubid_main: str
    user_id: str = USER_ID_AUTO_DETECT
    base_url: str = IMDB_BASE_URL
    timeout: float = HTTP_TIMEOUT
    http2: bool = HTTP_HTTP2

    @classmethod
    def from_env(cls) -> "ImdbConfig":
        return cls(
            cookie_at_main=IMDB_COOKIE_AT_MAIN,
            cookie_ubid_main=IMDB_COOKIE_UBID_MAIN,
            user_id=IMDB_USER_ID,
            base_url=IMDB_BASE_URL,
            timeout=HTTP_TIMEOUT,
            http2=HTTP_HTTP2,
        )

    def __repr__(self) -> str:
        return (
            f"ImdbConfig(user_id={self.user_id!r}, base_url={self.base_url!r}, "
            f"timeout={self.timeout}, http2={self.http2})"
        )
