"""
Data models for the SiteCensus crawler.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Union


@dataclass(frozen=True, slots=True)
class PageRecord:
    """One crawled page: normalized URL, title and HTTP status code."""

    url: str
    title: str
    status_code: int


@dataclass(frozen=True, slots=True)
class Ok:
    """HTTP 200 response; ``body`` is kept for link extraction."""

    title: str
    body: str = field(repr=False)
    status_code: int = 200


@dataclass(frozen=True, slots=True)
class HttpError:
    """Any non-200 response. Recorded as data, never aborts the crawl."""

    status_code: int


@dataclass(frozen=True, slots=True)
class TransportError:
    """Connection-level failure (DNS, refused, TLS, timeout). The page is skipped."""

    cause: str


FetchResult = Union[Ok, HttpError, TransportError]


@dataclass(slots=True)
class CrawlResult:
    """Outcome of a whole crawl run."""

    records: List[PageRecord]
    started_at: datetime
    duration: float = 0.0
    skipped: List[str] = field(default_factory=list)
    timed_out: bool = False

    def status_counts(self) -> Dict[int, int]:
        return dict(sorted(Counter(r.status_code for r in self.records).items()))

    @property
    def pages_per_second(self) -> float:
        fetched = len(self.records) + len(self.skipped)
        return fetched / self.duration if self.duration else 0.0
