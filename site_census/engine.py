"""site_census.engine: orchestration layer that runs a crawl and exports its records."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from site_census.config import CrawlerConfig
from site_census.crawler.crawler import AsyncCrawler
from site_census.crawler.models import CrawlResult
from site_census.logger import logger
from site_census.report import default_output_path, export_records

__all__ = ["start_crawl", "export_result"]


async def start_crawl(cfg: CrawlerConfig) -> CrawlResult:
    """
    Run the crawler inside its session context and return the CrawlResult.

    Parameters
    ----------
    cfg : CrawlerConfig
        Crawl configuration.
    """
    async with AsyncCrawler(cfg) as crawler:
        return await crawler.crawl()


def export_result(
    result: CrawlResult,
    cfg: CrawlerConfig,
    output: Union[str, Path, None] = None,
    fmt: Optional[str] = None,
) -> Optional[Path]:
    """Export the records of a finished crawl; returns None when nothing was recorded."""
    if not result.records:
        logger.warning("No pages recorded, nothing to export")
        return None
    fmt = fmt or cfg.output_format
    path = Path(output) if output else default_output_path(result.started_at, fmt, cfg.output_dir)
    saved = export_records(result.records, path, fmt, retries=cfg.export_retries)
    logger.info("Exported %d record(s) to %s", len(result.records), saved)
    return saved

