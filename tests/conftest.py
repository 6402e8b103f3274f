import importlib
import sys
from pathlib import Path

import httpx
import pytest

# Ensure the package under test is importable without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

BASE_URL = "https://www.imdb.com"

PROFILE_HTML = """
<html><body>
  <div class="user-profile userId" data-userid="ur12345"><h1>alice</h1></div>
</body></html>
"""

WATCHLIST_HTML = """
<html><head>
  <meta property="pageId" content="ls99999" />
</head><body></body></html>
"""

LIST_EXPORT_HEADER = "Position,Const,Created,Modified,Description,Title,URL,Title Type,IMDb Rating\n"
RATING_EXPORT_HEADER = "Const,Your Rating,Date Rated,Title,URL,Title Type\n"


def list_export(*rows: tuple[str, str]) -> str:
    """Build a list export body from (const, title_type) pairs."""
    lines = [LIST_EXPORT_HEADER]
    for position, (const, title_type) in enumerate(rows, start=1):
        lines.append(
            f"{position},{const},2020-01-01,2020-01-02,,Title {position},"
            f"https://www.imdb.com/title/{const}/,{title_type},7.5\n"
        )
    return "".join(lines)


def export_response(body: str, filename: str | None) -> httpx.Response:
    headers = {"Content-Type": "text/csv"}
    if filename is not None:
        headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return httpx.Response(200, text=body, headers=headers)


class FakeImdb:
    """
    Route table for httpx.MockTransport.

    Paths not registered answer 404. Every request is recorded.
    """

    def __init__(self):
        self.routes: dict[str, httpx.Response] = {
            "/profile": httpx.Response(200, text=PROFILE_HTML),
            "/watchlist": httpx.Response(200, text=WATCHLIST_HTML),
        }
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get(request.url.path)
        if response is None:
            return httpx.Response(404, text="<html>not found</html>")
        return httpx.Response(
            response.status_code,
            headers=response.headers,
            content=response.content,
        )

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fake_imdb():
    return FakeImdb()


@pytest.fixture
def imdb_config():
    from imdb_sync.config import ImdbConfig

    return ImdbConfig(
        cookie_at_main="at-token",
        cookie_ubid_main="ubid-token",
        user_id="auto-detect",
        base_url=BASE_URL,
        timeout=5.0,
        http2=False,
    )


@pytest.fixture
def fresh_config(monkeypatch):
    """
    Reload config so environment overrides are picked up.
    """
    import imdb_sync.config as config

    yield lambda: importlib.reload(config)
    monkeypatch.undo()
    importlib.reload(config)
