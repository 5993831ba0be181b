#!/usr/bin/env python3
"""
Command-line entry point for the SiteCensus crawler.

Commands:
  crawl     Crawl the domain and export url/title/status for every page
  config    Show the effective configuration

Global options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --domain URL        Domain root to crawl (overrides domain_root)
  --rate FLOAT        Max requests per second (overrides max_requests_per_second)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only if omitted)
  --log-format FORMAT Logging format string

crawl options:
  --output PATH       Export file (default: <output_dir>/<timestamp>.<format>)
  --format FMT        csv, json or html
  --crawl-timeout SEC Stop fetching after SEC seconds and export what was found
  --max-pages INT     Stop after INT recorded pages
  --concurrency INT   Number of fetch workers

Example:
  site_census --domain https://example.com crawl --output pages.csv
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from site_census import __version__
from site_census.config import load_config
from site_census.engine import export_result, start_crawl
from site_census.errors import ConfigError, ExportError
from site_census.logger import configure

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

EXIT_CRAWL_ERROR = 1
EXIT_CONFIG_ERROR = 3
EXIT_EXPORT_ERROR = 4


def print_error(message: str, code: int = EXIT_CRAWL_ERROR):
    click.secho(message, fg="red", err=True)
    sys.exit(code)


def print_summary(result) -> None:
    click.echo(f"Pages recorded: {len(result.records)}")
    for code, count in result.status_counts().items():
        click.echo(f"  HTTP {code}: {count}")
    if result.skipped:
        click.echo(f"Skipped (connection errors): {len(result.skipped)}")
        for url in result.skipped:
            click.echo(f"  {url}")
    if result.timed_out:
        click.echo("Crawl timed out; results are partial.")
    click.echo(f"Duration: {result.duration:.2f} s ({result.pages_per_second:.2f} req/s)")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "--version", "-v", message="SiteCensus, version %(version)s")
@click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML or JSON config file.",
)
@click.option("--domain", "-d", "domain", default=None, help="Domain root, e.g. https://example.com")
@click.option("--rate", "-r", "rate", type=float, default=None, help="Max requests per second.")
@click.option(
    "--log-level", "log_level",
    default="INFO", show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Logging level",
)
@click.option(
    "--log-file", "log_file",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Log file path (stdout if omitted)",
)
@click.option(
    "--log-format", "log_format",
    default="%(asctime)s %(levelname)s %(message)s",
    show_default=True,
    help="Logging format string",
)
@click.pass_context
def cli(ctx, config_path, domain, rate, log_level, log_file, log_format):
    """SiteCensus command group."""
    configure(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path, domain_root=domain, max_requests_per_second=rate)
    except ConfigError as e:
        print_error(f"Configuration error: {e}", EXIT_CONFIG_ERROR)
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


@cli.command("crawl", context_settings=CONTEXT_SETTINGS)
@click.option(
    "--output", "-o", "output",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Export file path",
)
@click.option(
    "--format", "-f", "fmt",
    default=None,
    type=click.Choice(["csv", "json", "html"]),
    help="Export format (default: from config, csv)",
)
@click.option("--crawl-timeout", "crawl_timeout", type=float, default=None, help="Overall crawl timeout (seconds)")
@click.option("--max-pages", "max_pages", type=int, default=None, help="Stop after this many pages")
@click.option("--concurrency", "concurrency", type=int, default=None, help="Number of fetch workers")
@click.pass_context
def crawl(ctx, output, fmt, crawl_timeout, max_pages, concurrency):
    """Crawl the domain and export the page table."""
    cfg = ctx.obj["config"]
    overrides = {
        "crawl_timeout": crawl_timeout,
        "max_pages": max_pages,
        "concurrency": concurrency,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        try:
            cfg = load_config(None, **{**cfg.model_dump(), **overrides})
        except ConfigError as e:
            print_error(f"Configuration error: {e}", EXIT_CONFIG_ERROR)

    click.echo(f"Crawling {cfg.domain_root} at <= {cfg.max_requests_per_second:g} req/s")
    try:
        result = asyncio.run(start_crawl(cfg))
    except Exception as e:
        print_error(f"Crawl failed: {e}")

    print_summary(result)

    try:
        saved = export_result(result, cfg, output, fmt)
    except ExportError as e:
        print_error(f"Export failed: {e}", EXIT_EXPORT_ERROR)

    if saved is None:
        click.echo("Nothing to export.")
    else:
        click.echo(f"Report: {saved}")


@cli.command("config", context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the effective configuration as JSON."""
    cfg = ctx.obj["config"]
    click.echo(json.dumps(cfg.model_dump(mode="json"), indent=2, ensure_ascii=False))


def main():
    cli(prog_name="site_census")


if __name__ == "__main__":
    main()
