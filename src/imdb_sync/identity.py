import logging

from .config import USER_ID_AUTO_DETECT
from .exceptions import ScrapeError
from .fetcher import ResourceFetcher
from .markup import extract_attribute
from .models import ClientIdentity

logger = logging.getLogger(__name__)

PATH_PROFILE = "/profile"
PATH_WATCHLIST = "/watchlist"


def resolve_user_id(fetcher: ResourceFetcher) -> str:
    """Scrape the opaque user id (``ur...``) from the profile page."""
    tree = fetcher.get_html(PATH_PROFILE)
    try:
        return extract_attribute(tree, "user_id")
    except ScrapeError as exc:
        raise ScrapeError(f"failure scraping imdb profile: user id not found: {exc}") from exc


def resolve_watchlist_id(fetcher: ResourceFetcher) -> str:
    """Scrape the watchlist's list id (``ls...``) from the watchlist page."""
    tree = fetcher.get_html(PATH_WATCHLIST)
    try:
        return extract_attribute(tree, "watchlist_id")
    except ScrapeError as exc:
        raise ScrapeError(f"failure scraping imdb watchlist: watchlist id not found: {exc}") from exc


def needs_user_id_lookup(user_id: str | None) -> bool:
    return not user_id or not user_id.strip() or user_id.strip() == USER_ID_AUTO_DETECT


def hydrate(fetcher: ResourceFetcher, user_id: str | None = None) -> ClientIdentity:
    """
    Resolve the identifiers every later call depends on.

    The user id is scraped only when missing or set to the auto-detect
    sentinel; the watchlist id is always scraped.
    """
    if needs_user_id_lookup(user_id):
        user_id = resolve_user_id(fetcher)
        logger.info(f"Detected imdb user id {user_id}")
    else:
        user_id = user_id.strip()
    watchlist_id = resolve_watchlist_id(fetcher)
    logger.info(f"Detected imdb watchlist id {watchlist_id}")
    return ClientIdentity(user_id=user_id, watchlist_id=watchlist_id)
