"""
Loading and validation of the SiteCensus crawl configuration.
Pydantic describes the schema; YAML and JSON files are both accepted.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal, Optional, Union
from urllib.parse import urlsplit, urlunsplit

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from site_census.errors import ConfigError

OutputFormat = Literal["csv", "json", "html"]


class CrawlerConfig(BaseModel):
    """Configuration for a single crawl run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    domain_root: str = Field(..., description="Scheme and host to crawl, e.g. https://example.com.")
    seed_path: str = Field("/", description="Path of the first page to fetch.")
    max_requests_per_second: float = Field(2.5, gt=0, description="Global request-rate ceiling.")
    timeout: float = Field(10.0, gt=0, description="Per-request timeout (seconds).")
    crawl_timeout: Optional[float] = Field(None, gt=0, description="Overall crawl deadline (seconds).")
    max_pages: Optional[int] = Field(None, ge=1, description="Stop after this many recorded pages.")
    concurrency: int = Field(1, ge=1, description="Number of fetch workers.")
    retry_times: int = Field(2, ge=0, description="Retries on connection-level failures.")
    user_agent: str = Field("SiteCensusBot/1.0", min_length=1, description="User-Agent header.")
    output_dir: Path = Field(Path("."), description="Directory for timestamped exports.")
    output_format: OutputFormat = Field("csv", description="Export format.")
    export_retries: int = Field(2, ge=0, description="Retries when writing the export fails.")

    @field_validator("domain_root", mode="before")
    def _check_domain_root(cls, v: Any) -> Any:
        if not isinstance(v, str):
            return v
        parts = urlsplit(v.strip())
        if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
            raise ValueError("domain_root must be an absolute http(s) URL")
        if parts.path.strip("/") or parts.query or parts.fragment:
            raise ValueError("domain_root must not contain a path, query or fragment")
        return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), "", "", ""))

    @field_validator("seed_path")
    def _check_seed_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("seed_path must start with '/'")
        return v

    @property
    def seed_url(self) -> str:
        return self.domain_root + self.seed_path


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Read a YAML or JSON config file into a plain mapping (no validation)."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise ConfigError(f"Config file not found: {path_obj}")

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ConfigError(f"Unsupported config format: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlerConfig:
    """
    Build a validated CrawlerConfig from a YAML/JSON file and keyword overrides.

    ``None`` overrides are ignored so CLI options that were not given do not
    clobber file values. With ``path=None`` the default file is used when it
    exists; otherwise the overrides alone must supply ``domain_root``.
    """
    data: dict[str, Any] = {}
    if path is not None:
        data = read_config_file(path)
    elif _DEFAULT_CFG.is_file():
        data = read_config_file(_DEFAULT_CFG)

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return CrawlerConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


__all__ = ["CrawlerConfig", "OutputFormat", "load_config", "read_config_file"]
