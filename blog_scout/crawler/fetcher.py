# blog_scout/crawler/fetcher.py
"""
Fetcher module: tries the candidate URLs of a post until one answers 2xx.
"""
from __future__ import annotations

import asyncio
from typing import Dict, List, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from blog_scout.config import CrawlerConfig
from blog_scout.crawler.models import FetchedPage
from blog_scout.errors import FetchError
from blog_scout.logger import logger

__all__ = ("Fetcher", "browser_headers", "open_session")

ALL_ATTEMPTS_FAILED = "all URL attempts failed"


def browser_headers(config: CrawlerConfig) -> Dict[str, str]:
    """Headers of a desktop browser with a Korean locale."""
    return {
        "User-Agent": config.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
        "Accept-Language": config.accept_language,
        "DNT": "1",
        "Upgrade-Insecure-Requests": "1",
    }


def open_session(config: CrawlerConfig) -> ClientSession:
    """Session shared by one crawl run; the timeout bounds every single request."""
    return ClientSession(
        timeout=ClientTimeout(total=config.timeout),
        headers=browser_headers(config),
        raise_for_status=False,
    )


class Fetcher:
    """Sequentially tries URL variants; no in-place retry or backoff."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> FetchedPage:
        """
        Fetch a single URL, following redirects.

        Raises FetchError on a transport error, a timeout or a non-2xx status.
        The body is returned undecoded.
        """
        try:
            async with self.session.get(url, allow_redirects=True) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(f"HTTP {resp.status}: {url}", [url])
                content = await resp.read()
                return FetchedPage(url=url, final_url=str(resp.url), status=resp.status, content=content)
        except asyncio.TimeoutError as exc:
            raise FetchError(f"timeout: {url}", [url]) from exc
        except ClientError as exc:
            raise FetchError(f"{type(exc).__name__}: {url}", [url]) from exc

    async def fetch_first(self, candidates: Sequence[str]) -> FetchedPage:
        """Returns the first candidate that succeeds, in order."""
        attempted: List[str] = []
        for index, url in enumerate(candidates, start=1):
            attempted.append(url)
            logger.debug("[%d/%d] GET %s", index, len(candidates), url)
            try:
                page = await self.fetch(url)
            except FetchError as exc:
                logger.warning("[%d/%d] %s", index, len(candidates), exc)
                continue
            logger.debug("Fetched %d bytes from %s", len(page.content), page.final_url)
            return page
        raise FetchError(ALL_ATTEMPTS_FAILED, attempted)
