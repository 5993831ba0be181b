"""Tests for the click CLI using click.testing.CliRunner.
Cover the ``crawl`` and ``config`` commands, ``--version`` and exit codes.
"""
import csv
import json
from datetime import datetime

import pytest
from click.testing import CliRunner

import site_census.cli as cli_module
from site_census.cli import EXIT_CONFIG_ERROR, EXIT_EXPORT_ERROR, cli
from site_census.crawler.models import CrawlResult, PageRecord
from site_census.errors import ExportError
from site_census.logger import configure

RECORDS = [
    PageRecord("https://example.com", "Example, Inc.", 200),
    PageRecord("https://example.com/missing", "", 404),
]


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every CLI test in an empty directory so no default config is found."""
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    # the CLI points the log handler at CliRunner's stream; reattach to the real stdout
    configure()


@pytest.fixture(autouse=True)
def patch_start_crawl(monkeypatch):
    """Replace the crawl with a canned result; remembers the config it got."""
    seen = {}

    async def fake_crawl(cfg):
        seen["config"] = cfg
        return CrawlResult(
            records=list(RECORDS),
            started_at=datetime(2024, 3, 1, 12, 0, 0),
            duration=0.8,
            skipped=["https://example.com/down"],
        )

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    return seen


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SiteCensus" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "census.json"
    cfg_file.write_text(
        json.dumps({"domain_root": "https://example.com", "max_requests_per_second": 2.0}),
        encoding="utf-8",
    )
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "--rate", "3", "config"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["domain_root"] == "https://example.com"
    assert data["max_requests_per_second"] == 3.0


def test_missing_domain_is_config_error():
    result = CliRunner().invoke(cli, ["crawl"])
    assert result.exit_code == EXIT_CONFIG_ERROR
    assert "Configuration error" in result.output


def test_crawl_writes_csv(tmp_path, patch_start_crawl):
    out = tmp_path / "pages.csv"
    result = CliRunner().invoke(cli, ["--domain", "https://example.com", "crawl", "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert "Pages recorded: 2" in result.output
    assert "HTTP 404: 1" in result.output
    assert "https://example.com/down" in result.output
    with out.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[1] == ["https://example.com", "Example, Inc.", "200"]
    assert patch_start_crawl["config"].domain_root == "https://example.com"


def test_crawl_default_filename_from_start_time(tmp_path):
    result = CliRunner().invoke(cli, ["-d", "https://example.com", "crawl", "--format", "json"])

    assert result.exit_code == 0, result.output
    saved = tmp_path / "20240301-120000.json"
    assert saved.exists()
    assert json.loads(saved.read_text(encoding="utf-8"))[1]["status_code"] == 404


def test_crawl_options_reach_config(patch_start_crawl, tmp_path):
    result = CliRunner().invoke(
        cli,
        [
            "-d", "https://example.com",
            "-r", "2",
            "crawl",
            "--crawl-timeout", "30",
            "--max-pages", "10",
            "--concurrency", "2",
            "-o", str(tmp_path / "x.csv"),
        ],
    )
    assert result.exit_code == 0, result.output
    cfg = patch_start_crawl["config"]
    assert (cfg.crawl_timeout, cfg.max_pages, cfg.concurrency) == (30.0, 10, 2)
    assert cfg.max_requests_per_second == 2.0


def test_invalid_crawl_option_is_config_error():
    result = CliRunner().invoke(cli, ["-d", "https://example.com", "crawl", "--concurrency", "0"])
    assert result.exit_code == EXIT_CONFIG_ERROR


def test_export_failure_exit_code(monkeypatch):
    def failing_export(result, cfg, output, fmt):
        raise ExportError("disk full")

    monkeypatch.setattr(cli_module, "export_result", failing_export)
    result = CliRunner().invoke(cli, ["-d", "https://example.com", "crawl"])
    assert result.exit_code == EXIT_EXPORT_ERROR
    assert "Export failed" in result.output


def test_empty_crawl_exports_nothing(monkeypatch, tmp_path):
    async def empty_crawl(cfg):
        return CrawlResult(records=[], started_at=datetime(2024, 3, 1), skipped=[cfg.seed_url])

    monkeypatch.setattr(cli_module, "start_crawl", empty_crawl)
    result = CliRunner().invoke(cli, ["-d", "https://example.com", "crawl"])

    assert result.exit_code == 0
    assert "Nothing to export." in result.output
    assert list(tmp_path.iterdir()) == []


def test_crawl_failure_exit_code(monkeypatch):
    async def boom(cfg):
        raise RuntimeError("loop exploded")

    monkeypatch.setattr(cli_module, "start_crawl", boom)
    result = CliRunner().invoke(cli, ["-d", "https://example.com", "crawl"])
    assert result.exit_code == 1
    assert "Crawl failed" in result.output


def test_export_runs_once_after_crawl_finishes(monkeypatch, tmp_path):
    events = []

    async def crawl_then_log(cfg):
        events.append("crawl")
        return CrawlResult(records=list(RECORDS), started_at=datetime(2024, 3, 1, 12, 0, 0))

    def record_export(result, cfg, output, fmt):
        events.append(("export", list(result.records), fmt))
        return tmp_path / "out.csv"

    monkeypatch.setattr(cli_module, "start_crawl", crawl_then_log)
    monkeypatch.setattr(cli_module, "export_result", record_export)
    result = CliRunner().invoke(cli, ["-d", "https://example.com", "crawl", "-f", "csv"])

    assert result.exit_code == 0, result.output
    assert events == ["crawl", ("export", RECORDS, "csv")]
