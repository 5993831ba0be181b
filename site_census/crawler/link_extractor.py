"""
Link extraction and URL normalization utilities for SiteCensus.
"""
from __future__ import annotations

import logging
from typing import List, Set
from urllib.parse import urldefrag, urlsplit, urlunsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

logger = logging.getLogger("SiteCensus.links")


def parse_links(html: str) -> List[str]:
    """Return every anchor ``href`` value in document order (duplicates kept)."""
    soup = BeautifulSoup(html, "html.parser")
    hrefs: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if isinstance(href_val, str):
            hrefs.append(href_val)
    return hrefs


def normalize_url(url: str) -> str:
    """
    Canonical form used for dedup: fragment dropped, trailing slashes
    stripped from the path. ``https://x.com/`` becomes ``https://x.com``.
    """
    url, _ = urldefrag(url.strip())
    parts = urlsplit(url)
    path = parts.path.rstrip("/")
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))


def in_domain(url: str, domain_root: str) -> bool:
    """True if *url* is the domain root itself or lives underneath it."""
    root = domain_root.rstrip("/")
    if url == root:
        return True
    return url.startswith((root + "/", root + "?"))


def absolutize(href: str, domain_root: str) -> str:
    """Prefix root-relative and protocol-relative hrefs with the domain root."""
    root = domain_root.rstrip("/")
    if href.startswith("//"):
        return f"{urlsplit(root).scheme}:{href}"
    if href.startswith("/"):
        return root + href
    return href


def extract_candidates(base_url: str, html: str, domain_root: str) -> Set[str]:
    """
    Turn the anchors of one fetched page into crawlable URL candidates.

    Ignores empty hrefs, links outside *domain_root* and anything with a
    fragment marker. Relative hrefs that are not root-relative are treated
    as external, as are ``mailto:`` and ``javascript:`` links.
    """
    candidates: Set[str] = set()
    for raw in parse_links(html):
        href = raw.strip()
        if not href or "#" in href:
            continue
        absolute = absolutize(href, domain_root)
        if not in_domain(absolute, domain_root):
            continue
        candidates.add(normalize_url(absolute))
    logger.debug("%s: %d candidate(s)", base_url, len(candidates))
    return candidates


__all__ = ["parse_links", "normalize_url", "in_domain", "absolutize", "extract_candidates"]
