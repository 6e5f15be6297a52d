# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from typing import Union

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from sitemap_scout.config import CrawlConfig

#: a route is either a ready handler or a (status, body, content_type) triple;
#: "{base}" inside a static body is replaced with the server origin
Route = Union[Callable[[web.Request], Awaitable[web.StreamResponse]], tuple]
ServeSite = Callable[[Mapping[str, Route]], Awaitable[str]]


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


def _static(status: int, body: str, content_type: str):
    async def handler(request: web.Request):
        text = body.replace("{base}", str(request.url.origin()))
        return web.Response(status=status, text=text, content_type=content_type)

    return handler


@pytest_asyncio.fixture
async def serve_site() -> AsyncIterator[ServeSite]:
    """Start a local aiohttp site from a ``path -> route`` mapping, return its base URL."""
    servers: list[TestServer] = []

    async def _serve(routes: Mapping[str, Route]) -> str:
        app = web.Application()
        for path, route in routes.items():
            handler = _static(*route) if isinstance(route, tuple) else route
            app.router.add_get(path, handler)
        server = TestServer(app, host="127.0.0.1")
        await server.start_server()
        servers.append(server)
        return f"http://127.0.0.1:{server.port}"

    yield _serve

    for server in servers:
        await server.close()


@pytest.fixture()
def make_config() -> Callable[..., CrawlConfig]:
    """Return a factory for a fast CrawlConfig pointed at *index_url*."""

    def _make(index_url: str, **overrides) -> CrawlConfig:
        values = dict(
            index_url=index_url,
            batch_size=5,
            batch_delay=0.0,
            timeout=2.0,
            user_agent="TestAgent/1.0",
        )
        values.update(overrides)
        return CrawlConfig(**values)

    return _make
