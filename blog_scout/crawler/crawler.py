from __future__ import annotations

import asyncio
import time
from typing import AsyncIterator, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from aiohttp import ClientSession

from blog_scout.config import CrawlerConfig
from blog_scout.crawler.encoding import decode_html
from blog_scout.crawler.fetcher import Fetcher, open_session
from blog_scout.crawler.models import (
    CrawlProgress,
    CrawlStatus,
    CrawlTarget,
    ExtractedContent,
    FetchedPage,
)
from blog_scout.crawler.platforms import detect_platform
from blog_scout.errors import CrawlError, FailureKind, InvalidTargetError
from blog_scout.logger import logger
from blog_scout.parser.html_parser import extract_content
from blog_scout.quality import QualityClassifier

__all__ = ("BlogCrawler", "ProgressCallback", "start_crawl")

ProgressCallback = Callable[[CrawlProgress], None]


class PageFetcher(Protocol):
    async def fetch_first(self, candidates: Sequence[str]) -> FetchedPage: ...


class BlogCrawler:
    """Crawls ranked blog posts until enough of them pass the quality gate.

    Sequential by default, one target after another with ``request_delay``
    between them. With ``concurrency > 1`` a bounded worker pool is used
    instead; see :meth:`_crawl_concurrent`.
    """

    def __init__(
        self,
        config: Optional[CrawlerConfig] = None,
        progress_callback: Optional[ProgressCallback] = None,
        *,
        fetcher: Optional[PageFetcher] = None,
    ) -> None:
        self.config = config or CrawlerConfig()
        self.progress_callback = progress_callback
        self.classifier = QualityClassifier(self.config.quality)
        self.fetcher: Optional[PageFetcher] = fetcher
        self.session: Optional[ClientSession] = None
        self._rate_lock = asyncio.Lock()
        self._last_request_ts = 0.0

    async def __aenter__(self) -> BlogCrawler:
        if self.fetcher is None:
            self.session = open_session(self.config)
            self.fetcher = Fetcher(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
            self.session = None
            self.fetcher = None

    # -- single target ---------------------------------------------------------

    async def crawl_one(self, target: CrawlTarget) -> ExtractedContent:
        """Fetch, extract and classify one target. Never raises for per-target faults."""
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized, use 'async with BlogCrawler(...)'")
        url = (target.url or "").strip()
        try:
            if not url:
                raise InvalidTargetError("URL is empty or malformed")
            platform = detect_platform(url)
            if platform is None:
                raise InvalidTargetError("only Naver Blog and Tistory URLs are supported")
            candidates = platform.candidate_urls(url)
            if not candidates:
                raise InvalidTargetError("URL is empty or malformed")
            logger.debug("%s candidates for %s: %s", platform.name, url, candidates)

            page = await self.fetcher.fetch_first(candidates)
            html, encoding = decode_html(page.content, page.url)
            logger.debug("Decoded %s as %s (%d chars)", page.url, encoding, len(html))
            content = extract_content(html, url, target.title, platform)
        except CrawlError as exc:
            logger.warning("Crawl failed (%s) %s: %s", exc.kind.value, url, exc)
            return ExtractedContent.failed(url, target.title, str(exc), exc.kind)
        except Exception as exc:
            logger.exception("Unexpected error while crawling %s", url)
            return ExtractedContent.failed(
                url, target.title, str(exc) or type(exc).__name__, FailureKind.EXTRACTION
            )
        return self.classifier.apply(content)

    # -- sequential ------------------------------------------------------------

    async def iter_crawl(
        self,
        targets: Sequence[CrawlTarget],
        target_success_count: Optional[int] = None,
    ) -> AsyncIterator[ExtractedContent]:
        """Lazily yields one record per attempted target, in order.

        Stops by itself as soon as ``target_success_count`` records were
        accepted. The delay is slept before each attempt but the first, so no
        time is wasted once the target is met or the list is exhausted.
        """
        target = self._resolve_target(target_success_count)
        successes = 0
        for index, item in enumerate(targets):
            if successes >= target:
                return
            if index and self.config.request_delay:
                await asyncio.sleep(self.config.request_delay)

            self._notify(CrawlProgress(min(successes + 1, target), target, item.url, CrawlStatus.CRAWLING))
            logger.info("[%d/%d] Crawling %s (accepted %d/%d)", index + 1, len(targets), item.url, successes, target)
            content = await self.crawl_one(item)
            if content.success:
                successes += 1
                logger.info(
                    "[%d/%d] Accepted: %d chars, %d images (accepted %d/%d)",
                    index + 1, len(targets), content.content_length, content.image_count, successes, target,
                )
                self._notify(CrawlProgress(successes, target, item.url, CrawlStatus.SUCCESS))
            else:
                logger.info("[%d/%d] Skipped: %s", index + 1, len(targets), content.error)
                self._notify(CrawlProgress(min(successes + 1, target), target, item.url, CrawlStatus.FAILED))
            yield content

    async def crawl(
        self,
        targets: Sequence[CrawlTarget],
        target_success_count: Optional[int] = None,
    ) -> List[ExtractedContent]:
        """Every attempt in input order, successes and failures interleaved."""
        target = self._resolve_target(target_success_count)
        if target == 0:
            return []
        logger.info("Crawl started: %d accepted posts wanted out of %d targets", target, len(targets))
        start = time.monotonic()
        if self.config.concurrency > 1:
            results = await self._crawl_concurrent(targets, target)
        else:
            results = [content async for content in self.iter_crawl(targets, target)]

        accepted = sum(1 for r in results if r.success)
        logger.info(
            "Crawl finished: %d/%d accepted in %d attempts (%.2f s)",
            accepted, target, len(results), time.monotonic() - start,
        )
        if accepted < target:
            logger.warning("Target not reached: only %d of %d posts accepted", accepted, target)
        return results

    # -- concurrent ------------------------------------------------------------

    async def _crawl_concurrent(self, targets: Sequence[CrawlTarget], target: int) -> List[ExtractedContent]:
        """Bounded worker pool with a supervisor.

        Finished attempts are kept by index. Once the contiguous prefix of
        finished attempts holds ``target`` acceptances the remaining work is
        cancelled and anything past that prefix is discarded, so the result
        matches what the sequential loop would have returned for the same
        outcomes.
        """
        queue: asyncio.Queue[Tuple[int, CrawlTarget]] = asyncio.Queue()
        for pair in enumerate(targets):
            queue.put_nowait(pair)
        done: Dict[int, ExtractedContent] = {}
        satisfied = asyncio.Event()
        cut: List[int] = []

        async def worker() -> None:
            while True:
                index, item = await queue.get()
                try:
                    await self._wait_for_rate_limit()
                    accepted = sum(1 for r in done.values() if r.success)
                    self._notify(CrawlProgress(min(accepted + 1, target), target, item.url, CrawlStatus.CRAWLING))
                    content = await self.crawl_one(item)
                    done[index] = content
                    accepted = sum(1 for r in done.values() if r.success)
                    if content.success:
                        self._notify(CrawlProgress(min(accepted, target), target, item.url, CrawlStatus.SUCCESS))
                    else:
                        self._notify(CrawlProgress(min(accepted + 1, target), target, item.url, CrawlStatus.FAILED))
                    end = self._prefix_cut(done, target)
                    if end is not None and not satisfied.is_set():
                        cut.append(end)
                        satisfied.set()
                finally:
                    queue.task_done()

        workers = [asyncio.create_task(worker()) for _ in range(min(self.config.concurrency, len(targets)) or 1)]
        joined = asyncio.create_task(queue.join())
        stopper = asyncio.create_task(satisfied.wait())
        try:
            await asyncio.wait({joined, stopper}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (*workers, joined, stopper):
                task.cancel()
            await asyncio.gather(*workers, joined, stopper, return_exceptions=True)

        if cut:
            return [done[i] for i in range(cut[0] + 1)]
        return [done[i] for i in sorted(done)]

    @staticmethod
    def _prefix_cut(done: Dict[int, ExtractedContent], target: int) -> Optional[int]:
        successes = 0
        index = 0
        while index in done:
            if done[index].success:
                successes += 1
                if successes >= target:
                    return index
            index += 1
        return None

    async def _wait_for_rate_limit(self) -> None:
        interval = self.config.request_delay
        async with self._rate_lock:
            now = time.monotonic()
            wait = interval - (now - self._last_request_ts)
            if self._last_request_ts and wait > 0:
                await asyncio.sleep(wait)
            self._last_request_ts = time.monotonic()

    # -- helpers ---------------------------------------------------------------

    def _resolve_target(self, target_success_count: Optional[int]) -> int:
        if target_success_count is None:
            return self.config.target_success_count
        if target_success_count < 0:
            raise ValueError(f"target_success_count must be >= 0, got {target_success_count}")
        return target_success_count

    def _notify(self, progress: CrawlProgress) -> None:
        if self.progress_callback is None:
            return
        try:
            self.progress_callback(progress)
        except Exception:
            logger.exception("Progress callback failed for %s", progress.url)


async def start_crawl(
    config: CrawlerConfig,
    targets: Sequence[CrawlTarget],
    progress_callback: Optional[ProgressCallback] = None,
) -> List[ExtractedContent]:
    """Opens a crawler, runs it over *targets* and returns every attempt."""
    async with BlogCrawler(config, progress_callback) as crawler:
        return await crawler.crawl(targets)
