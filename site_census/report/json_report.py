# site_census/report/json_report.py

"""
JSON export for SiteCensus.
"""
import json
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from site_census.crawler.models import PageRecord


def render_json(records: Sequence[PageRecord], output_path: Path | str) -> Path:
    """
    Save *records* as a JSON list of ``{url, title, status_code}`` objects.

    Example:
    ```python
    from site_census.report.json_report import render_json
    report_path = render_json(result.records, 'reports/crawl.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = [asdict(r) for r in records]

    with output.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
