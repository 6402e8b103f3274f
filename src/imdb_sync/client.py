import logging

import httpx
from tqdm import tqdm

from .config import ImdbConfig
from .exceptions import ConfigurationError, ResourceNotFoundError
from .exports import ExportMode, format_slug, parse_export, parse_list_name
from .fetcher import ResourceFetcher
from .identity import hydrate
from .markup import extract_attributes
from .models import CatalogItem, ClientIdentity, CollectionPair, NamedCollection, SessionCredentials
from .session import build_cookie_jar

logger = logging.getLogger(__name__)

PATH_LIST_EXPORT = "/list/{list_id}/export"
PATH_LISTS = "/user/{user_id}/lists"
PATH_RATINGS_EXPORT = "/user/{user_id}/ratings/export"

RESOURCE_LIST = "list"
RESOURCE_WATCHLIST = "watchlist"
RESOURCE_RATING = "rating"


class ImdbClient:
    """
    Read-only client for a user's IMDb watchlist, ratings and lists.

    Build it with :meth:`connect`, which resolves the user and watchlist ids
    before returning, so an instance always carries a complete identity.
    """

    def __init__(self, fetcher: ResourceFetcher, identity: ClientIdentity):
        self.fetcher = fetcher
        self.identity = identity

    @classmethod
    def connect(cls, config: ImdbConfig, transport: httpx.BaseTransport | None = None) -> "ImdbClient":
        """
        Create the cookie session and hydrate the client identity.

        Raises:
            ConfigurationError: Bad base url or missing cookies (before any request).
            ScrapeError: The user id or watchlist id could not be scraped.
            AuthorizationError: The cookies were rejected.
        """
        credentials = SessionCredentials(config.cookie_at_main, config.cookie_ubid_main)
        cookies = build_cookie_jar(credentials, config.base_url)
        fetcher = ResourceFetcher(
            config.base_url,
            cookies,
            timeout=config.timeout,
            http2=config.http2,
            transport=transport,
        )
        try:
            identity = hydrate(fetcher, config.user_id)
        except Exception:
            fetcher.close()
            raise
        return cls(fetcher, identity)

    @property
    def user_id(self) -> str:
        return self.identity.user_id

    @property
    def watchlist_id(self) -> str:
        return self.identity.watchlist_id

    def _get_list_export(self, list_id: str, resource_type: str) -> tuple[str, list[CatalogItem]]:
        if not list_id:
            raise ConfigurationError(f"an imdb {resource_type} id is required")
        with self.fetcher.request("GET", PATH_LIST_EXPORT.format(list_id=list_id)) as res:
            if res.status_code == 404:
                raise ResourceNotFoundError(resource_type, list_id)
            res.read()
            name = parse_list_name(res.headers.get("Content-Disposition"))
            items = parse_export(res.text, ExportMode.LIST)
        return name, items

    def list_items_get(self, list_id: str) -> NamedCollection:
        """
        Fetch one list export by id.

        Raises:
            ResourceNotFoundError: The list does not exist (carries the list id).
        """
        name, items = self._get_list_export(list_id, RESOURCE_LIST)
        logger.debug(f"Fetched list {list_id} ({name}) with {len(items)} items")
        return NamedCollection(list_id=list_id, name=name, items=tuple(items))

    def watchlist_get(self) -> NamedCollection:
        """Fetch the watchlist, which IMDb exports like any other list."""
        _, items = self._get_list_export(self.watchlist_id, RESOURCE_WATCHLIST)
        logger.debug(f"Fetched watchlist {self.watchlist_id} with {len(items)} items")
        return NamedCollection(list_id=self.watchlist_id, name=self.watchlist_id, items=tuple(items))

    def ratings_get(self) -> list[CatalogItem]:
        """Fetch every rating the user has given."""
        path = PATH_RATINGS_EXPORT.format(user_id=self.user_id)
        with self.fetcher.request("GET", path) as res:
            if res.status_code == 404:
                raise ResourceNotFoundError(RESOURCE_RATING)
            res.read()
            ratings = parse_export(res.text, ExportMode.RATING)
        logger.debug(f"Fetched {len(ratings)} ratings")
        return ratings

    def list_ids_scrape(self) -> list[str]:
        """Scrape the ids of every list the user owns."""
        tree = self.fetcher.get_html(PATH_LISTS.format(user_id=self.user_id))
        list_ids = extract_attributes(tree, "user_list")
        if not list_ids:
            logger.info("found no imdb lists")
        return list_ids

    def lists_scrape(self, progress: bool = False) -> list[CollectionPair]:
        """
        Discover every list the user owns and fetch each export.

        Lists that disappear between discovery and export (404) are skipped.
        The order of the result is not meaningful.
        """
        pairs = []
        list_ids = self.list_ids_scrape()
        for list_id in tqdm(list_ids, desc="Lists", disable=not progress):
            try:
                collection = self.list_items_get(list_id)
            except ResourceNotFoundError:
                logger.info(f"imdb list {list_id} no longer exists, skipping")
                continue
            pairs.append(CollectionPair(collection=collection, target_slug=format_slug(collection.name)))
        logger.info(f"Fetched {len(pairs)} of {len(list_ids)} imdb lists")
        return pairs

    def close(self):
        self.fetcher.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
