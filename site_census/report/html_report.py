"""site_census.report.html_report: HTML table report rendered with Jinja2."""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Any, Sequence, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from site_census.crawler.models import PageRecord

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def render_html(
    records: Sequence[PageRecord],
    output_path: Union[Path, str],
    template_dir: Union[Path, str] = TEMPLATE_DIR,
) -> Path:
    """Render the crawl table from a template and save it.

    Args:
        records: PageRecords in crawl order.
        output_path: path of the resulting HTML file.
        template_dir: directory holding ``report.html.j2``; defaults to the
            template shipped with the package.

    Returns:
        Path of the saved HTML file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "records": list(records),
        "status_counts": dict(sorted(Counter(r.status_code for r in records).items())),
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
