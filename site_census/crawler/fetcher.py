"""
Fetcher module: one HTTP GET per page, classified into Ok / HttpError / TransportError.
"""
from __future__ import annotations

import asyncio
import logging
import random
import re

from aiohttp import ClientError, ClientSession

from site_census.config import CrawlerConfig
from site_census.crawler.models import FetchResult, HttpError, Ok, TransportError
from site_census.crawler.rate_limiter import RateLimiter

_TITLE_RE = re.compile(r"<title(?:\s[^>]*)?>(.*?)</title>", re.IGNORECASE | re.DOTALL)


def extract_title(body: str) -> str:
    """First ``<title>`` text in *body*, or ``""`` when there is none."""
    match = _TITLE_RE.search(body)
    return match.group(1).strip() if match else ""


class Fetcher:
    """Fetches pages through the shared rate limiter, retrying connection failures."""

    def __init__(
        self,
        session: ClientSession,
        config: CrawlerConfig,
        limiter: RateLimiter,
    ) -> None:
        self.session = session
        self.config = config
        self.limiter = limiter
        self.logger = logging.getLogger("SiteCensus.fetcher")

    async def fetch(self, url: str) -> FetchResult:
        """
        GET *url* once per attempt. Redirects are not followed: a 3xx is
        reported as an HttpError carrying that status.

        Only connection-level failures are retried; an HTTP status is a
        final answer.
        """
        attempts = 0
        while True:
            await self.limiter.throttle()
            try:
                async with self.session.get(url, allow_redirects=False) as resp:
                    if resp.status != 200:
                        return HttpError(resp.status)
                    body = await resp.text(errors="replace")
                    return Ok(title=extract_title(body), body=body)
            except (ClientError, asyncio.TimeoutError) as exc:
                attempts += 1
                cause = str(exc) or type(exc).__name__
                if attempts > self.config.retry_times:
                    return TransportError(cause)
                # exponential backoff, cap at 30s
                backoff = min(30.0, 2 ** (attempts - 1) * 0.5 + random.random() * 0.1)
                self.logger.debug(
                    "Retry %d/%d for %s after %.2f s (%s)",
                    attempts,
                    self.config.retry_times,
                    url,
                    backoff,
                    cause,
                )
                await asyncio.sleep(backoff)
