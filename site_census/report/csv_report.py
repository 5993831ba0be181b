# site_census/report/csv_report.py

"""
CSV export for SiteCensus: one row per page, ``url,title,status_code``.

Fields are quoted by the :mod:`csv` module, so titles containing commas,
quotes or newlines survive a round trip through ``csv.reader``.
"""
import csv
from pathlib import Path
from typing import Sequence

from site_census.crawler.models import PageRecord

FIELDS = ("url", "title", "status_code")


def render_csv(records: Sequence[PageRecord], output_path: Path | str) -> Path:
    """
    Write *records* to *output_path* as CSV with a header row.

    :param records: PageRecords in crawl order
    :param output_path: target CSV file (parent directories are created)
    :return: Path of the written file
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(FIELDS)
        for record in records:
            writer.writerow((record.url, record.title, record.status_code))

    return output
