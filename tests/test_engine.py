# File: tests/test_engine.py
import json

import pytest

from docs_explorer.config import AppConfig, SourceConfig
from docs_explorer.engine import ScrapeStats, SourceStats, resolve_sources, run_sources, write_stats

SITE = {
    "/": '<html><head><title>Home | Local Docs</title></head><body><main>'
         '<p>Start</p><a href="/guides/one">One</a></main></body></html>',
    "/guides/one": "<html><body><main><h1>One</h1><p>Guide</p></main></body></html>",
}


def test_resolve_sources():
    config = AppConfig()
    assert resolve_sources(config, "all") == ["factory", "github", "vercel", "resend"]
    assert resolve_sources(config, "github, Factory,nope,github") == ["github", "factory"]
    assert resolve_sources(config, ["vercel"]) == ["vercel"]
    assert resolve_sources(config, "nope") == []


@pytest.mark.asyncio()
async def test_run_sources_persists_corpus(serve_site, local_source_config):
    base, _ = await serve_site(SITE)
    config = local_source_config(base)

    stats = await run_sources(config, "local", html=True)

    assert stats.total_pages == 2
    assert stats.errors == []
    local = stats.sources["local"]
    assert local.status == "completed"
    assert local.pages_scraped == 2
    assert local.name == "Local Docs"
    assert local.duration is not None and local.duration >= 0

    out = config.data_dir / "local-docs"
    doc = json.loads((out / "local-docs.json").read_text(encoding="utf-8"))
    assert doc["metadata"]["source"] == "Local Docs"
    assert doc["metadata"]["totalPages"] == 2
    assert doc["pages"][base]["title"] == "Home"
    assert (out / "pages" / "index.json").is_file()
    assert (out / "pages" / "guides_one.json").is_file()
    assert (out / "navigation.json").is_file()
    assert (out / "index.html").is_file()


@pytest.mark.asyncio()
async def test_run_sources_max_pages_override(serve_site, local_source_config):
    base, log = await serve_site(SITE)
    config = local_source_config(base)

    stats = await run_sources(config, "local", max_pages=1)

    assert stats.total_pages == 1
    assert sum(log.hits.values()) == 1
    assert not (config.data_dir / "local-docs" / "index.html").exists()


@pytest.mark.asyncio()
async def test_failing_source_does_not_stop_others(serve_site, tmp_path):
    base, _ = await serve_site(SITE)
    config = AppConfig(
        data_dir=tmp_path / "data",
        sources={
            "broken": SourceConfig(name="Broken Docs", start_url=f"{base}/missing", base_url=base),
            "local": SourceConfig(name="Local Docs", start_url=f"{base}/", base_url=base),
        },
        crawler={"rate_limit": 0, "timeout": 5.0},
    )

    stats = await run_sources(config, "all")

    assert stats.sources["broken"].status == "error"
    assert "missing" in stats.sources["broken"].error
    assert stats.sources["local"].status == "completed"
    assert stats.total_pages == 2
    assert stats.errors == [{"source": "broken", "message": stats.sources["broken"].error}]
    assert not (tmp_path / "data" / "broken-docs" / "broken-docs.json").exists()


@pytest.mark.asyncio()
async def test_unknown_sources_are_skipped(tmp_path):
    stats = await run_sources(AppConfig(data_dir=tmp_path), "nope")
    assert stats.sources == {}
    assert stats.total_pages == 0
    assert stats.end_time is not None


def test_write_stats(tmp_path):
    stats = ScrapeStats(start_time=1000, end_time=4500, total_pages=7)
    stats.sources["factory"] = SourceStats(
        name="Factory AI Documentation", start_time=1000, end_time=4000, pages_scraped=7, status="completed"
    )
    stats.errors.append({"source": "github", "message": "boom"})

    path = write_stats(stats, tmp_path / "data")

    assert path == tmp_path / "data" / "scrape-stats.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["duration"] == 3500
    assert data["totalPages"] == 7
    assert data["sources"]["factory"] == {
        "name": "Factory AI Documentation",
        "startTime": 1000,
        "endTime": 4000,
        "duration": 3000,
        "pagesScraped": 7,
        "status": "completed",
    }
    assert data["errors"] == [{"source": "github", "message": "boom"}]
