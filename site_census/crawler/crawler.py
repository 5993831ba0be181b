from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import List, Optional, Protocol, Set

from aiohttp import ClientSession, ClientTimeout

from site_census.config import CrawlerConfig
from site_census.crawler.fetcher import Fetcher
from site_census.crawler.link_extractor import extract_candidates, normalize_url
from site_census.crawler.models import CrawlResult, FetchResult, HttpError, Ok, TransportError
from site_census.crawler.rate_limiter import RateLimiter
from site_census.crawler.store import PageStore

__all__ = ("AsyncCrawler", "PageFetcher")


class PageFetcher(Protocol):
    """Anything that turns a URL into a FetchResult.

    The crawler does not throttle on its own: implementations must pass every
    request through the crawler's shared ``RateLimiter`` (``AsyncCrawler.limiter``),
    as the built-in :class:`Fetcher` does.
    """

    async def fetch(self, url: str) -> FetchResult: ...


class AsyncCrawler:
    """Single-domain crawler: FIFO work queue, dedup through a PageStore, global rate limit."""

    def __init__(
        self,
        config: CrawlerConfig,
        fetcher: Optional[PageFetcher] = None,
        store: Optional[PageStore] = None,
    ) -> None:
        self.config = config
        self.store = store if store is not None else PageStore()
        self.limiter = RateLimiter(config.max_requests_per_second)
        self.fetcher = fetcher
        self.session: Optional[ClientSession] = None
        self.skipped: List[str] = []
        self.logger = logging.getLogger("SiteCensus.crawler")
        self._seen: Set[str] = set()
        self._in_flight = 0
        self._slots = asyncio.Condition()

    async def __aenter__(self) -> AsyncCrawler:
        if self.fetcher is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
            self.fetcher = Fetcher(self.session, self.config, self.limiter)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlResult:
        if self.fetcher is None:
            raise RuntimeError("Crawler not started; use 'async with AsyncCrawler(...)'")
        started_at = datetime.now()
        start = time.monotonic()
        self.logger.info("Crawling through %s ...", self.config.domain_root)

        queue: asyncio.Queue[str] = asyncio.Queue()
        self._enqueue(queue, normalize_url(self.config.seed_url))
        workers = [
            asyncio.create_task(self._worker(queue)) for _ in range(self.config.concurrency)
        ]
        drained = asyncio.ensure_future(queue.join())
        done, _ = await asyncio.wait({drained}, timeout=self.config.crawl_timeout)
        timed_out = drained not in done
        if timed_out:
            drained.cancel()
            self.logger.warning(
                "Crawl timeout of %.1f s reached; exporting %d page(s) gathered so far",
                self.config.crawl_timeout,
                len(self.store),
            )
        for w in workers:
            w.cancel()
        await asyncio.gather(*workers, return_exceptions=True)

        duration = time.monotonic() - start
        result = CrawlResult(
            records=self.store.all_records(),
            started_at=started_at,
            duration=duration,
            skipped=list(self.skipped),
            timed_out=timed_out,
        )
        self.logger.info(
            "Finished: %d page(s), %d skipped in %.2f s (%.2f req/s)",
            len(result.records),
            len(result.skipped),
            duration,
            result.pages_per_second,
        )
        return result

    def _enqueue(self, queue: asyncio.Queue[str], url: str) -> None:
        if url in self._seen or self.store.exists(url):
            return
        self._seen.add(url)
        queue.put_nowait(url)

    async def _worker(self, queue: asyncio.Queue[str]) -> None:
        while True:
            url = await queue.get()
            try:
                await self._visit(queue, url)
            except asyncio.CancelledError:
                raise
            except Exception:
                self.logger.exception("Unexpected error while crawling %s", url)
                self.skipped.append(url)
            finally:
                queue.task_done()

    async def _claim_slot(self) -> bool:
        """Reserve a page slot under ``max_pages``; False once the cap is filled.

        While in-flight fetches could still fill the cap the caller waits, since
        a fetch that ends in a transport error frees its slot again.
        """
        limit = self.config.max_pages
        if limit is None:
            return True
        async with self._slots:
            await self._slots.wait_for(
                lambda: len(self.store) >= limit or len(self.store) + self._in_flight < limit
            )
            if len(self.store) >= limit:
                return False
            self._in_flight += 1
            return True

    async def _release_slot(self) -> None:
        if self.config.max_pages is None:
            return
        async with self._slots:
            self._in_flight -= 1
            self._slots.notify_all()

    async def _visit(self, queue: asyncio.Queue[str], url: str) -> None:
        if self.store.exists(url):
            return
        if not await self._claim_slot():
            self.logger.debug("Page limit reached, dropping %s", url)
            return
        try:
            result = await self.fetcher.fetch(url)  # type: ignore[union-attr]
            self._record(queue, url, result)
        finally:
            await self._release_slot()

    def _record(self, queue: asyncio.Queue[str], url: str, result: FetchResult) -> None:
        if isinstance(result, Ok):
            self.store.add(url, result.title, result.status_code)
            self.logger.info("... %s [%d] %r", url, result.status_code, result.title)
            for link in sorted(extract_candidates(url, result.body, self.config.domain_root)):
                self._enqueue(queue, link)
        elif isinstance(result, HttpError):
            self.store.add(url, "", result.status_code)
            self.logger.info("... %s [%d]", url, result.status_code)
        elif isinstance(result, TransportError):
            self.skipped.append(url)
            self.logger.warning("Skipping %s: %s", url, result.cause)
