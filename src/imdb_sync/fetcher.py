import logging
from contextlib import contextmanager
from typing import Any, Iterator

import httpx
from selectolax.parser import HTMLParser

from .config import HTTP_TIMEOUT, HTTP_HTTP2, USER_AGENT
from .exceptions import AuthorizationError, TransportError, UnexpectedStatusError

logger = logging.getLogger(__name__)


class ResourceFetcher:
    """
    Authenticated HTTP access to the site.

    Each request is a single attempt: there is no retry, backoff or rate
    limiting. Responses are classified by status code:

    - 200 and 404 are handed back to the caller (404 means different things
      to different callers)
    - 403 raises AuthorizationError
    - anything else raises UnexpectedStatusError
    """

    def __init__(
        self,
        base_url: str,
        cookies: httpx.Cookies,
        timeout: float = HTTP_TIMEOUT,
        http2: bool = HTTP_HTTP2,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            headers={
                "User-Agent": USER_AGENT,
                "Accept-Language": "en-US,en;q=0.9",
            },
            follow_redirects=True,
            timeout=timeout,
            http2=http2,
            cookies=cookies,
            transport=transport,
        )

    @contextmanager
    def request(self, method: str, path: str, body: Any | None = None) -> Iterator[httpx.Response]:
        """
        Send one request and yield the classified response.

        The response body is streamed and released when the ``with`` block
        exits, on success and error paths alike. Read it inside the block.

        Raises:
            AuthorizationError: On HTTP 403.
            UnexpectedStatusError: On any status other than 200/403/404.
            TransportError: If the request cannot be built or sent, or the body cannot be read.
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")
        try:
            with self.client.stream(method, url, json=body) as res:
                if res.status_code == 403:
                    raise AuthorizationError(method, str(res.request.url))
                if res.status_code not in (200, 404):
                    raise UnexpectedStatusError(method, str(res.request.url), res.status_code)
                if res.status_code == 404:
                    logger.info(f"{method} {url} returned 404")
                yield res
        except (httpx.RequestError, httpx.InvalidURL, httpx.StreamError) as exc:
            raise TransportError(method, url, exc) from exc

    def get_html(self, path: str) -> HTMLParser:
        """GET ``path`` and parse the body as HTML, whatever the 200/404 outcome."""
        with self.request("GET", path) as res:
            res.read()
            return HTMLParser(res.text)

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
