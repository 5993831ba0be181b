"""site_census.report: export sinks (CSV, JSON, HTML) and retrying export used by the CLI and engine."""

from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Sequence, Union

from site_census.crawler.models import PageRecord
from site_census.errors import ExportError
from site_census.logger import logger
from site_census.report.csv_report import render_csv
from site_census.report.html_report import render_html
from site_census.report.json_report import render_json

Renderer = Callable[[Sequence[PageRecord], Path], Path]

RENDERERS: Dict[str, Renderer] = {
    "csv": render_csv,
    "json": render_json,
    "html": render_html,
}


def default_output_path(started_at: datetime, fmt: str, directory: Union[str, Path] = ".") -> Path:
    """``<directory>/<YYYYmmdd-HHMMSS>.<fmt>``, named after the crawl start time."""
    return Path(directory) / f"{started_at.strftime('%Y%m%d-%H%M%S')}.{fmt}"


def export_records(
    records: Sequence[PageRecord],
    path: Union[str, Path],
    fmt: str = "csv",
    retries: int = 2,
    delay: float = 0.5,
) -> Path:
    """Write *records* with the renderer for *fmt*, retrying on OSError.

    Raises ExportError once ``retries`` extra attempts have failed.
    """
    try:
        renderer = RENDERERS[fmt]
    except KeyError:
        raise ExportError(f"Unknown export format: {fmt}", path) from None

    target = Path(path)
    attempt = 0
    while True:
        try:
            return renderer(records, target)
        except OSError as exc:
            attempt += 1
            if attempt > retries:
                logger.error("Export to %s failed after %d attempt(s): %s", target, attempt, exc)
                raise ExportError(f"Could not write {target}: {exc}", target) from exc
            logger.warning("Export to %s failed (%s), retrying %d/%d", target, exc, attempt, retries)
            time.sleep(delay * attempt)


__all__ = [
    "RENDERERS",
    "default_output_path",
    "export_records",
    "render_csv",
    "render_html",
    "render_json",
]
