"""
Loading and validation of docs_explorer configuration.
Pydantic describes the schema; YAML and JSON files are both accepted.

Every field may be given in snake_case or camelCase (``max_pages`` or
``maxPages``), so configs written for the JavaScript-era tooling keep working.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

DEFAULT_USER_AGENT = "FactoryDocsAggregator/1.0 (Educational Project)"

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    r"/api/",  # API endpoints
    r"(?i)\.(jpg|png|gif|svg|css|js)$",  # static assets
    r"\?",  # query strings
)

_MODEL_CONFIG = ConfigDict(
    extra="forbid",
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


def _check_http(value: str) -> str:
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"expected an http(s) URL, got {value!r}")
    return value


def _check_patterns(patterns: List[str]) -> List[str]:
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"invalid exclude pattern {pattern!r}: {exc}") from exc
    return patterns


class CrawlerConfig(BaseModel):
    """Options for a single crawl run."""
    model_config = _MODEL_CONFIG

    start_url: str = Field(..., description="Seed URL; the crawl starts here.")
    base_url: str = Field(..., description="Only links starting with this prefix are followed.")
    output_dir: Path = Field(Path("data/factory-docs"), description="Where results are written.")
    rate_limit: int = Field(1000, ge=0, description="Pause between requests (milliseconds).")
    max_pages: int = Field(500, ge=1, description="Hard cap on extracted pages.")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    exclude_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS),
        description="Regular expressions; matching URLs are never enqueued.",
    )
    timeout: float = Field(30.0, gt=0, description="Timeout for one request (seconds).")
    title_suffixes: List[str] = Field(
        default_factory=lambda: [" | Factory Documentation"],
        description="Site suffixes stripped from <title> text.",
    )

    @field_validator("start_url", "base_url")
    @classmethod
    def _http_only(cls, v: str) -> str:
        return _check_http(v)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("exclude_patterns")
    @classmethod
    def _valid_patterns(cls, v: List[str]) -> List[str]:
        return _check_patterns(v)

    def compiled_patterns(self) -> List[re.Pattern[str]]:
        return [re.compile(p) for p in self.exclude_patterns]


class SourceConfig(BaseModel):
    """One documentation site the aggregator knows how to crawl."""
    model_config = _MODEL_CONFIG

    name: str = Field(..., min_length=1)
    start_url: str
    base_url: str
    title_suffixes: List[str] = Field(default_factory=list)
    max_pages: Optional[int] = Field(None, ge=1)

    @field_validator("start_url", "base_url")
    @classmethod
    def _http_only(cls, v: str) -> str:
        return _check_http(v)


class CrawlDefaults(BaseModel):
    """Crawl options shared by every source unless a source overrides them."""
    model_config = _MODEL_CONFIG

    rate_limit: int = Field(1000, ge=0)
    max_pages: int = Field(500, ge=1)
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1)
    timeout: float = Field(30.0, gt=0)
    exclude_patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))

    @field_validator("exclude_patterns")
    @classmethod
    def _valid_patterns(cls, v: List[str]) -> List[str]:
        return _check_patterns(v)


class ServerConfig(BaseModel):
    """Search / AI-answer HTTP API settings."""
    model_config = _MODEL_CONFIG

    host: str = "127.0.0.1"
    port: int = Field(8080, ge=1, le=65535)
    cache_ttl: float = Field(3600.0, ge=0, description="Seconds a loaded corpus stays fresh.")
    max_results: int = Field(20, ge=1)
    min_score: float = Field(0.1, ge=0)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    llm_timeout: float = Field(60.0, gt=0)
    claude_model: str = "claude-3-sonnet-20240229"
    gemini_model: str = "gemini-pro"


def _default_sources() -> Dict[str, SourceConfig]:
    return {
        "factory": SourceConfig(
            name="Factory AI Documentation",
            start_url="https://docs.factory.ai/welcome",
            base_url="https://docs.factory.ai",
            title_suffixes=[" | Factory Documentation"],
        ),
        "github": SourceConfig(
            name="GitHub Documentation",
            start_url="https://docs.github.com/en",
            base_url="https://docs.github.com",
            title_suffixes=[" - GitHub Docs"],
        ),
        "vercel": SourceConfig(
            name="Vercel Documentation",
            start_url="https://vercel.com/docs",
            base_url="https://vercel.com/docs",
            title_suffixes=[" | Vercel Docs"],
        ),
        "resend": SourceConfig(
            name="Resend Documentation",
            start_url="https://resend.com/docs/introduction",
            base_url="https://resend.com/docs",
            title_suffixes=[" - Resend"],
        ),
    }


class AppConfig(BaseModel):
    """Top-level configuration: sources, crawl defaults and the API server."""
    model_config = _MODEL_CONFIG

    data_dir: Path = Field(Path("data"), description="Root folder of the scraped corpus.")
    sources: Dict[str, SourceConfig] = Field(default_factory=_default_sources)
    crawler: CrawlDefaults = Field(default_factory=CrawlDefaults)
    server: ServerConfig = Field(default_factory=ServerConfig)

    def source_dir(self, key: str) -> Path:
        return self.data_dir / f"{key}-docs"

    def crawler_config_for(self, key: str, **overrides: Any) -> CrawlerConfig:
        """Build the :class:`CrawlerConfig` for source *key*.

        ``None`` values in *overrides* are ignored, so CLI options that were
        not given fall through to the configured defaults.
        """
        source = self.sources[key]
        data: Dict[str, Any] = self.crawler.model_dump()
        data.update(
            start_url=source.start_url,
            base_url=source.base_url,
            title_suffixes=list(source.title_suffixes),
            output_dir=self.source_dir(key),
        )
        if source.max_pages is not None:
            data["max_pages"] = source.max_pages
        data.update({k: v for k, v in overrides.items() if v is not None})
        return CrawlerConfig(**data)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> AppConfig:
    """
    Read a YAML or JSON file and return a validated :class:`AppConfig`.
    Raises FileNotFoundError when the file (or the default one) is missing.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return AppConfig(**data)


__all__ = [
    "AppConfig",
    "CrawlDefaults",
    "CrawlerConfig",
    "ServerConfig",
    "SourceConfig",
    "ValidationError",
    "load_config",
    "DEFAULT_EXCLUDE_PATTERNS",
    "DEFAULT_USER_AGENT",
]
