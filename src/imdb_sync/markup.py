"""
CSS selectors for the IMDb pages the client scrapes.

Every selector lives in SELECTORS so markup changes on the site only need
edits here.
"""
from selectolax.parser import HTMLParser

from .exceptions import ScrapeError

# key -> (css selector, attribute to read)
SELECTORS: dict[str, tuple[str, str]] = {
    "user_id": (".user-profile.userId", "data-userid"),
    "watchlist_id": ("meta[property='pageId']", "content"),
    "user_list": (".user-list", "id"),
}


def extract_attribute(tree: HTMLParser, key: str) -> str:
    """
    Read the attribute configured for ``key`` from the first matching element.

    Raises:
        ScrapeError: If no element matches or the attribute is missing/empty.
    """
    selector, attribute = SELECTORS[key]
    node = tree.css_first(selector)
    if node is None:
        raise ScrapeError(f"no element matches {selector!r}")
    value = node.attributes.get(attribute)
    if not value:
        raise ScrapeError(f"{selector!r} has no {attribute!r} attribute")
    return value


def extract_attributes(tree: HTMLParser, key: str) -> list[str]:
    """Read the attribute configured for ``key`` from every matching element, skipping blanks."""
    selector, attribute = SELECTORS[key]
    values = []
    for node in tree.css(selector):
        value = node.attributes.get(attribute)
        if value:
            values.append(value)
    return values
