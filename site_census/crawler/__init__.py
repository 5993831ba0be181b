"""Crawl engine: store, fetcher, link extraction, rate limiting and orchestration."""
from site_census.crawler.crawler import AsyncCrawler
from site_census.crawler.models import CrawlResult, HttpError, Ok, PageRecord, TransportError
from site_census.crawler.store import PageStore

__all__ = [
    "AsyncCrawler",
    "CrawlResult",
    "HttpError",
    "Ok",
    "PageRecord",
    "PageStore",
    "TransportError",
]
