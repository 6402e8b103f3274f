"""
Parsing of IMDb CSV exports.

Two schemas exist: list exports (also used for the watchlist) and the
ratings export. Any malformed row aborts the whole export with
MalformedExportError so callers never see a partial collection.
"""
import csv
import io
import logging
import re
from datetime import date, datetime
from email.message import Message
from enum import Enum

from .exceptions import MalformedExportError
from .models import CatalogItem

logger = logging.getLogger(__name__)

RATING_DATE_FORMAT = "%Y-%m-%d"
RATING_MIN = 1
RATING_MAX = 10

# Long description fields must not trip the csv module's 128 KiB default
CSV_FIELD_SIZE_LIMIT = 2**31 - 1

# Column indexes in the export CSVs
LIST_COL_ID = 1
LIST_COL_TITLE_TYPE = 7
RATING_COL_ID = 0
RATING_COL_RATING = 1
RATING_COL_DATE = 2
RATING_COL_TITLE_TYPE = 5

_SLUG_DISALLOWED = re.compile(r"[^-a-z0-9]+")
_RATING_PATTERN = re.compile(r"[0-9]{1,2}")
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class ExportMode(Enum):
    LIST = "list"
    RATING = "rating"


def _read_rows(text: str) -> list[list[str]]:
    # The csv module tolerates stray quotes and ragged rows by default
    if csv.field_size_limit() < CSV_FIELD_SIZE_LIMIT:
        csv.field_size_limit(CSV_FIELD_SIZE_LIMIT)
    try:
        return list(csv.reader(io.StringIO(text, newline="")))
    except csv.Error as exc:
        raise MalformedExportError(f"error reading imdb export: {exc}") from exc


def _field(row: list[str], index: int, row_number: int) -> str:
    try:
        return row[index]
    except IndexError:
        raise MalformedExportError(
            f"export row {row_number} has {len(row)} fields, expected at least {index + 1}"
        ) from None


def _parse_list_row(row: list[str], row_number: int) -> CatalogItem:
    return CatalogItem(
        external_id=_field(row, LIST_COL_ID, row_number),
        title_type=_field(row, LIST_COL_TITLE_TYPE, row_number),
    )


def _parse_rating_row(row: list[str], row_number: int) -> CatalogItem:
    raw_rating = _field(row, RATING_COL_RATING, row_number)
    try:
        rating = parse_rating_value(raw_rating)
    except ValueError:
        raise MalformedExportError(f"error parsing imdb rating value {raw_rating!r} on row {row_number}") from None

    raw_date = _field(row, RATING_COL_DATE, row_number)
    try:
        rated_on = parse_rating_date(raw_date)
    except ValueError:
        raise MalformedExportError(f"error parsing imdb rating date {raw_date!r} on row {row_number}") from None

    return CatalogItem(
        external_id=_field(row, RATING_COL_ID, row_number),
        title_type=_field(row, RATING_COL_TITLE_TYPE, row_number),
        rating=rating,
        rated_on=rated_on,
    )


def parse_rating_value(value: str) -> int:
    """Parse a plain 1-10 rating; signs, spaces and underscores are rejected."""
    if not _RATING_PATTERN.fullmatch(value):
        raise ValueError(f"invalid rating {value!r}")
    rating = int(value)
    if not RATING_MIN <= rating <= RATING_MAX:
        raise ValueError(f"rating {rating} outside [{RATING_MIN}-{RATING_MAX}]")
    return rating


def parse_rating_date(value: str) -> date:
    # strptime alone would accept unpadded forms like 2020-5-1
    if not _DATE_PATTERN.fullmatch(value):
        raise ValueError(f"invalid date {value!r}")
    return datetime.strptime(value, RATING_DATE_FORMAT).date()


def parse_export(text: str, mode: ExportMode) -> list[CatalogItem]:
    """
    Decode an export body into catalog items.

    Blank lines are ignored; the first remaining row is the header and is skipped.

    Raises:
        MalformedExportError: On unreadable CSV, missing columns, or a bad rating/date.
    """
    if mode is ExportMode.LIST:
        parse_row = _parse_list_row
    elif mode is ExportMode.RATING:
        parse_row = _parse_rating_row
    else:
        raise ValueError(f"unknown export mode {mode!r}")

    rows = [row for row in _read_rows(text) if row]
    items = [parse_row(row, number) for number, row in enumerate(rows[1:], start=2)]
    logger.debug(f"Parsed {len(items)} {mode.value} rows")
    return items


def parse_list_name(content_disposition: str | None) -> str:
    """
    Extract the list name from an export's Content-Disposition header.

    ``attachment; filename="My List.csv"`` -> ``My List``.

    Raises:
        MalformedExportError: If the header is missing or has no filename.
    """
    if not content_disposition:
        raise MalformedExportError("error reading header Content-Disposition from imdb response")
    msg = Message()
    msg["Content-Disposition"] = content_disposition
    filename = msg.get_filename()
    if not filename:
        raise MalformedExportError(
            f"error parsing filename from Content-Disposition header {content_disposition!r}"
        )
    return filename.split(".")[0]


def format_slug(name: str) -> str:
    """
    Turn a list name into a slug: lowercase, words joined by hyphens,
    anything outside ``[a-z0-9-]`` removed.

    >>> format_slug("Sci-Fi Favourites!")
    'sci-fi-favourites'
    """
    formatted = "-".join(name.split()).lower()
    return _SLUG_DISALLOWED.sub("", formatted)
