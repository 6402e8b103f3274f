from datetime import date

import httpx
import pytest
from selectolax.parser import HTMLParser

from imdb_sync import markup
from imdb_sync.client import ImdbClient
from imdb_sync.exceptions import (
    AuthorizationError,
    ConfigurationError,
    MalformedExportError,
    ResourceNotFoundError,
    ScrapeError,
)
from imdb_sync.identity import needs_user_id_lookup

from conftest import RATING_EXPORT_HEADER, export_response, list_export


def test_connect_hydrates_identity(fake_imdb, imdb_config):
    with ImdbClient.connect(imdb_config, transport=fake_imdb.transport) as client:
        assert client.identity.user_id == "ur12345"
        assert client.identity.watchlist_id == "ls99999"

    assert fake_imdb.paths() == ["/profile", "/watchlist"]


def test_connect_skips_user_lookup_for_concrete_id(fake_imdb, imdb_config):
    from dataclasses import replace

    config = replace(imdb_config, user_id="ur777")

    with ImdbClient.connect(config, transport=fake_imdb.transport) as client:
        assert client.user_id == "ur777"
        assert client.watchlist_id == "ls99999"

    assert fake_imdb.paths() == ["/watchlist"]


@pytest.mark.parametrize("user_id", ["", "  ", None, "auto-detect"])
def test_user_id_lookup_sentinels(user_id):
    assert needs_user_id_lookup(user_id) is True


def test_user_id_lookup_not_needed_for_real_id():
    assert needs_user_id_lookup("ur12345") is False


def test_connect_fails_when_user_id_missing(fake_imdb, imdb_config):
    fake_imdb.routes["/profile"] = httpx.Response(200, text="<html><body>no id here</body></html>")

    with pytest.raises(ScrapeError, match="user id not found"):
        ImdbClient.connect(imdb_config, transport=fake_imdb.transport)


def test_connect_fails_when_watchlist_id_missing(fake_imdb, imdb_config):
    fake_imdb.routes["/watchlist"] = httpx.Response(200, text="<html><meta property='og:title' content='x'></html>")

    with pytest.raises(ScrapeError, match="watchlist id not found"):
        ImdbClient.connect(imdb_config, transport=fake_imdb.transport)


def test_connect_with_stale_cookies_raises_authorization_error(fake_imdb, imdb_config):
    fake_imdb.routes["/profile"] = httpx.Response(403)

    with pytest.raises(AuthorizationError):
        ImdbClient.connect(imdb_config, transport=fake_imdb.transport)


def test_connect_rejects_bad_base_url_before_any_request(fake_imdb, imdb_config):
    from dataclasses import replace

    with pytest.raises(ConfigurationError):
        ImdbClient.connect(replace(imdb_config, base_url="not a url"), transport=fake_imdb.transport)

    assert fake_imdb.requests == []


@pytest.fixture
def client(fake_imdb, imdb_config):
    imdb_client = ImdbClient.connect(imdb_config, transport=fake_imdb.transport)
    yield imdb_client
    imdb_client.close()


def test_list_items_get_parses_export_and_name(client, fake_imdb):
    fake_imdb.routes["/list/ls1/export"] = export_response(
        list_export(("tt0133093", "movie"), ("tt0944947", "tvSeries")),
        "Sci-Fi Favourites.csv",
    )

    collection = client.list_items_get("ls1")

    assert collection.list_id == "ls1"
    assert collection.name == "Sci-Fi Favourites"
    assert [i.external_id for i in collection.items] == ["tt0133093", "tt0944947"]


def test_list_items_get_404_carries_list_id(client):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        client.list_items_get("ls404")

    assert exc_info.value.resource_type == "list"
    assert exc_info.value.resource_id == "ls404"


def test_list_items_get_without_content_disposition_is_malformed(client, fake_imdb):
    fake_imdb.routes["/list/ls1/export"] = export_response(list_export(("tt1", "movie")), None)

    with pytest.raises(MalformedExportError):
        client.list_items_get("ls1")


def test_watchlist_uses_list_export_path(client, fake_imdb):
    fake_imdb.routes["/list/ls99999/export"] = export_response(
        list_export(("tt0111161", "movie")), "WATCHLIST.csv"
    )

    watchlist = client.watchlist_get()

    assert watchlist.list_id == "ls99999"
    assert [i.external_id for i in watchlist.items] == ["tt0111161"]
    assert fake_imdb.paths()[-1] == "/list/ls99999/export"


def test_watchlist_404_is_watchlist_not_found(client):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        client.watchlist_get()

    assert exc_info.value.resource_type == "watchlist"
    assert exc_info.value.resource_id == "ls99999"


def test_ratings_get(client, fake_imdb):
    fake_imdb.routes["/user/ur12345/ratings/export"] = export_response(
        RATING_EXPORT_HEADER
        + "tt0111161,9,2020-05-01,The Shawshank Redemption,u,movie\n"
        + "tt0903747,10,2021-06-02,Breaking Bad,u,tvSeries\n",
        "ratings.csv",
    )

    ratings = client.ratings_get()

    assert [(r.external_id, r.rating, r.rated_on) for r in ratings] == [
        ("tt0111161", 9, date(2020, 5, 1)),
        ("tt0903747", 10, date(2021, 6, 2)),
    ]


def test_ratings_get_404(client):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        client.ratings_get()

    assert exc_info.value.resource_type == "rating"
    assert exc_info.value.resource_id is None


def test_ratings_get_403(client, fake_imdb):
    fake_imdb.routes["/user/ur12345/ratings/export"] = httpx.Response(403)

    with pytest.raises(AuthorizationError):
        client.ratings_get()


LISTS_HTML = """
<html><body>
  <div class="user-list" id="ls1"><a>Sci-Fi Favourites</a></div>
  <div class="user-list" id="ls2"><a>Deleted meanwhile</a></div>
  <div class="user-list" id="ls3"><a>Best of 2020</a></div>
  <div class="user-list"><a>No id</a></div>
</body></html>
"""


def test_lists_scrape_materializes_and_skips_deleted(client, fake_imdb):
    fake_imdb.routes["/user/ur12345/lists"] = httpx.Response(200, text=LISTS_HTML)
    fake_imdb.routes["/list/ls1/export"] = export_response(
        list_export(("tt0133093", "movie")), "Sci-Fi Favourites!.csv"
    )
    fake_imdb.routes["/list/ls3/export"] = export_response(
        list_export(("tt0000003", "short"), ("tt0000004", "movie")), "Best of 2020.csv"
    )

    pairs = client.lists_scrape()

    by_id = {pair.collection.list_id: pair for pair in pairs}
    assert set(by_id) == {"ls1", "ls3"}
    assert by_id["ls1"].target_slug == "sci-fi-favourites"
    assert by_id["ls3"].target_slug == "best-of-2020"
    assert len(by_id["ls3"].collection.items) == 2
    assert "/list/ls2/export" in fake_imdb.paths()


def test_lists_scrape_empty(client, fake_imdb):
    fake_imdb.routes["/user/ur12345/lists"] = httpx.Response(200, text="<html><body></body></html>")

    assert client.lists_scrape() == []


def test_lists_scrape_propagates_authorization_error(client, fake_imdb):
    fake_imdb.routes["/user/ur12345/lists"] = httpx.Response(200, text=LISTS_HTML)
    fake_imdb.routes["/list/ls1/export"] = httpx.Response(403)

    with pytest.raises(AuthorizationError):
        client.lists_scrape()


def test_lists_scrape_malformed_export_aborts(client, fake_imdb):
    fake_imdb.routes["/user/ur12345/lists"] = httpx.Response(200, text=LISTS_HTML)
    fake_imdb.routes["/list/ls1/export"] = export_response(list_export(("tt1", "movie")), None)

    with pytest.raises(MalformedExportError):
        client.lists_scrape()


def test_markup_extract_attribute_and_attributes():
    tree = HTMLParser(LISTS_HTML)

    assert markup.extract_attributes(tree, "user_list") == ["ls1", "ls2", "ls3"]
    with pytest.raises(ScrapeError):
        markup.extract_attribute(tree, "user_id")
