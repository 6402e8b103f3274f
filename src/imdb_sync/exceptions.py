"""Error taxonomy for the IMDb scraping client."""


class ImdbError(Exception):
    """Base exception for every failure raised by imdb_sync."""
    pass


class ConfigurationError(ImdbError):
    """Malformed origin URL, missing credentials or unusable cookie store."""
    pass


class HttpStatusError(ImdbError):
    """A response came back with a status code the client refuses to handle."""

    def __init__(self, method: str, url: str, status_code: int, details: str):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.details = details
        super().__init__(f"{method} {url} returned {status_code}: {details}")


class AuthorizationError(HttpStatusError):
    """HTTP 403: the session cookies are stale or invalid."""

    def __init__(self, method: str, url: str, status_code: int = 403):
        super().__init__(
            method,
            url,
            status_code,
            "imdb authorization failure - update the imdb cookie values",
        )


class UnexpectedStatusError(HttpStatusError):
    """Any status other than 200, 403 or 404."""

    def __init__(self, method: str, url: str, status_code: int):
        super().__init__(method, url, status_code, f"unexpected status code {status_code}")


class ResourceNotFoundError(ImdbError):
    """HTTP 404 for a list, the watchlist or the ratings export."""

    def __init__(self, resource_type: str, resource_id: str | None = None):
        self.resource_type = resource_type
        self.resource_id = resource_id
        if resource_id:
            message = f"imdb {resource_type} {resource_id} not found"
        else:
            message = f"imdb {resource_type} not found"
        super().__init__(message)


class ScrapeError(ImdbError):
    """An expected HTML element or attribute was missing from a page."""
    pass


class TransportError(ImdbError):
    """The request could not be built or sent."""

    def __init__(self, method: str, url: str, cause: Exception):
        self.method = method
        self.url = url
        self.cause = cause
        super().__init__(f"failure sending http request {method} {url}: {cause}")


class MalformedExportError(ImdbError):
    """A CSV export (or its headers) did not have the expected shape."""
    pass
