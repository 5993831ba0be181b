"""
Visited set and result accumulator for a crawl.
"""
from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from site_census.crawler.link_extractor import normalize_url
from site_census.crawler.models import PageRecord


class PageStore:
    """Insertion-ordered mapping of normalized URL -> PageRecord.

    The first ``add`` for a URL wins; later ones are ignored, since a page
    is usually rediscovered through several inbound links.
    """

    def __init__(self) -> None:
        self._records: Dict[str, PageRecord] = {}

    def exists(self, url: str) -> bool:
        return normalize_url(url) in self._records

    def add(self, url: str, title: str, status_code: int) -> bool:
        """Record a page. Returns False if the URL was already recorded."""
        key = normalize_url(url)
        if key in self._records:
            return False
        self._records[key] = PageRecord(url=key, title=title, status_code=status_code)
        return True

    def record_for(self, url: str) -> Optional[PageRecord]:
        return self._records.get(normalize_url(url))

    def all_records(self) -> List[PageRecord]:
        return list(self._records.values())

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self.exists(url)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PageRecord]:
        return iter(self._records.values())
