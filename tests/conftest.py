from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from typing import Dict, Optional

import pytest
import pytest_asyncio
from aiohttp import web

from site_census.config import CrawlerConfig

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def html_page(title: Optional[str] = None, links: Iterable[str] = (), status: int = 200) -> Handler:
    """Build an aiohttp handler serving a tiny HTML page."""
    head = f"<title>{title}</title>" if title is not None else ""
    anchors = "".join(f'<a href="{href}">{href}</a>' for href in links)
    body = f"<html><head>{head}</head><body>{anchors}</body></html>"

    async def handler(_request: web.Request) -> web.Response:
        return web.Response(text=body, status=status, content_type="text/html")

    return handler


@pytest.fixture()
def page():
    """Factory fixture: ``page(title, links, status)`` -> aiohttp handler."""
    return html_page


@pytest_asyncio.fixture
async def serve(unused_tcp_port: int) -> AsyncIterator[Callable[[Dict[str, Handler]], Awaitable[str]]]:
    """Start an aiohttp app from a ``{path: handler}`` mapping, yield its base URL."""
    runners = []

    async def _serve(routes: Dict[str, Handler]) -> str:
        app = web.Application()
        for path, handler in routes.items():
            app.router.add_get(path, handler)
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", unused_tcp_port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{unused_tcp_port}"

    yield _serve

    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def make_config():
    """Return a CrawlerConfig factory with fast, test-friendly defaults."""

    def _make(domain_root: str = "http://example.com", **overrides) -> CrawlerConfig:
        params = {
            "domain_root": domain_root,
            "max_requests_per_second": 50.0,
            "timeout": 2.0,
            "retry_times": 0,
            "user_agent": "TestAgent/1.0",
        }
        params.update(overrides)
        return CrawlerConfig(**params)

    return _make
