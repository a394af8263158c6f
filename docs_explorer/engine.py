# File: docs_explorer/engine.py
"""docs_explorer.engine: runs crawls for one or more documentation sources and records scrape stats."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from docs_explorer.config import AppConfig
from docs_explorer.crawler.crawler import DocsCrawler
from docs_explorer.crawler.models import CrawlResult
from docs_explorer.logger import get_logger
from docs_explorer.report.html_report import render_html
from docs_explorer.report.json_report import save_results

__all__ = ["ScrapeStats", "SourceStats", "resolve_sources", "run_source", "run_sources", "write_stats"]

logger = get_logger("engine")


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(slots=True)
class SourceStats:
    """Outcome of scraping one source."""

    name: str
    start_time: int = field(default_factory=_now_ms)
    pages_scraped: int = 0
    status: str = "running"
    end_time: Optional[int] = None
    error: Optional[str] = None

    @property
    def duration(self) -> Optional[int]:
        return None if self.end_time is None else self.end_time - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
            "pagesScraped": self.pages_scraped,
            "status": self.status,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(slots=True)
class ScrapeStats:
    """Totals for one invocation of the scrape driver."""

    start_time: int = field(default_factory=_now_ms)
    end_time: Optional[int] = None
    total_pages: int = 0
    sources: Dict[str, SourceStats] = field(default_factory=dict)
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def duration(self) -> Optional[int]:
        return None if self.end_time is None else self.end_time - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
            "totalPages": self.total_pages,
            "sources": {key: s.to_dict() for key, s in self.sources.items()},
            "errors": list(self.errors),
        }


def resolve_sources(config: AppConfig, requested: Union[str, Iterable[str]]) -> List[str]:
    """Expand ``"all"`` / comma-separated keys; unknown keys are warned about and dropped."""
    if isinstance(requested, str):
        requested = requested.split(",")
    keys = [k.strip().lower() for k in requested if k.strip()]
    if "all" in keys:
        return list(config.sources)

    known: List[str] = []
    for key in keys:
        if key not in config.sources:
            logger.warning("Unknown source: %s - skipping", key)
        elif key not in known:
            known.append(key)
    return known


async def run_source(
    config: AppConfig,
    key: str,
    *,
    max_pages: Optional[int] = None,
    rate_limit: Optional[int] = None,
    html: bool = False,
) -> CrawlResult:
    """Crawl source *key* and persist it under ``<data_dir>/<key>-docs``."""
    crawler_cfg = config.crawler_config_for(key, max_pages=max_pages, rate_limit=rate_limit)
    async with DocsCrawler(crawler_cfg, config.sources[key].name) as crawler:
        result = await crawler.crawl()

    save_results(result, crawler_cfg.output_dir, key)
    if html:
        render_html(result, None, crawler_cfg.output_dir / "index.html")
    return result


async def run_sources(
    config: AppConfig,
    requested: Union[str, Iterable[str]],
    *,
    max_pages: Optional[int] = None,
    rate_limit: Optional[int] = None,
    html: bool = False,
) -> ScrapeStats:
    """Scrape each requested source in turn; a failing source does not stop the others."""
    stats = ScrapeStats()
    for key in resolve_sources(config, requested):
        source = SourceStats(name=config.sources[key].name)
        stats.sources[key] = source
        logger.info("Scraping %s...", source.name)
        try:
            result = await run_source(config, key, max_pages=max_pages, rate_limit=rate_limit, html=html)
        except Exception as exc:
            source.status = "error"
            source.error = str(exc)
            stats.errors.append({"source": key, "message": str(exc)})
            logger.error("Error scraping %s: %s", source.name, exc)
        else:
            source.pages_scraped = result.metadata.total_pages
            source.status = "completed"
            stats.total_pages += source.pages_scraped
            logger.info("Scraped %s: %d pages", source.name, source.pages_scraped)
        finally:
            source.end_time = _now_ms()

    stats.end_time = _now_ms()
    return stats


def write_stats(stats: ScrapeStats, data_dir: Union[str, Path]) -> Path:
    """Save *stats* as ``<data_dir>/scrape-stats.json``."""
    path = Path(data_dir)
    path.mkdir(parents=True, exist_ok=True)
    target = path / "scrape-stats.json"
    target.write_text(json.dumps(stats.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    return target
