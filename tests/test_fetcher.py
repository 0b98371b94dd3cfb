# File: tests/test_fetcher.py
"""Fetcher against a local aiohttp server."""
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web

from blog_scout.config import CrawlerConfig
from blog_scout.crawler.fetcher import Fetcher, open_session
from blog_scout.errors import FailureKind, FetchError

EUC_KR_PAGE = "<html><body><p>옛날 블로그 글</p></body></html>".encode("euc-kr")


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def blog_server(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()

    async def handle_post(_):
        return web.Response(body=EUC_KR_PAGE, content_type="text/html")

    async def handle_missing(_):
        return web.Response(status=404, text="not found")

    async def handle_error(_):
        return web.Response(status=503, text="busy")

    async def handle_redirect(_):
        raise web.HTTPFound("/post")

    async def handle_slow(_):
        await asyncio.sleep(3)
        return web.Response(text="late")

    app.router.add_get("/post", handle_post)
    app.router.add_get("/missing", handle_missing)
    app.router.add_get("/error", handle_error)
    app.router.add_get("/redirect", handle_redirect)
    app.router.add_get("/slow", handle_slow)

    async for url in _serve_app(app, unused_tcp_port):
        yield url


def _config(**overrides) -> CrawlerConfig:
    return CrawlerConfig(timeout=1.0, request_delay=0, **overrides)


@pytest.mark.asyncio()
async def test_returns_raw_bytes(blog_server: str):
    async with open_session(_config()) as session:
        page = await Fetcher(session).fetch(f"{blog_server}/post")
    assert page.status == 200
    assert page.content == EUC_KR_PAGE


@pytest.mark.asyncio()
async def test_falls_through_failed_candidates(blog_server: str):
    candidates = [f"{blog_server}/missing", f"{blog_server}/error", f"{blog_server}/post"]
    async with open_session(_config()) as session:
        page = await Fetcher(session).fetch_first(candidates)
    assert page.url == f"{blog_server}/post"


@pytest.mark.asyncio()
async def test_follows_redirects(blog_server: str):
    async with open_session(_config()) as session:
        page = await Fetcher(session).fetch_first([f"{blog_server}/redirect"])
    assert page.url == f"{blog_server}/redirect"
    assert page.final_url.endswith("/post")
    assert page.content == EUC_KR_PAGE


@pytest.mark.asyncio()
async def test_all_candidates_failed(blog_server: str, unused_tcp_port_factory):
    dead = f"http://localhost:{unused_tcp_port_factory()}/post"
    candidates = [f"{blog_server}/missing", f"{blog_server}/slow", dead]
    async with open_session(_config()) as session:
        with pytest.raises(FetchError) as info:
            await Fetcher(session).fetch_first(candidates)
    assert str(info.value) == "all URL attempts failed"
    assert info.value.attempted == candidates
    assert info.value.kind is FailureKind.NETWORK


@pytest.mark.asyncio()
async def test_no_candidates():
    async with open_session(_config()) as session:
        with pytest.raises(FetchError):
            await Fetcher(session).fetch_first([])


@pytest.mark.asyncio()
async def test_sends_browser_headers(unused_tcp_port: int):
    seen = {}

    async def handle(request):
        seen.update(request.headers)
        return web.Response(text="ok")

    app = web.Application()
    app.router.add_get("/", handle)
    async for base in _serve_app(app, unused_tcp_port):
        async with open_session(_config(user_agent="TestAgent/1.0")) as session:
            await Fetcher(session).fetch(f"{base}/")

    assert seen["User-Agent"] == "TestAgent/1.0"
    assert seen["Accept-Language"].startswith("ko-KR")
    assert "text/html" in seen["Accept"]
