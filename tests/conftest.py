# File: tests/conftest.py
import json
from collections import Counter
from pathlib import Path
from types import SimpleNamespace
from typing import Callable, Dict, Tuple, Union
from urllib.parse import urlparse

import pytest
import pytest_asyncio
from aiohttp import web

from docs_explorer.config import AppConfig, CrawlerConfig, SourceConfig

PageSpec = Union[str, int, Tuple[int, str]]


@pytest_asyncio.fixture
async def serve_site(unused_tcp_port_factory):
    """
    Start a local documentation site.

    ``await serve_site({"/": "<html>…", "/gone": 500})`` returns ``(base_url, log)``;
    string values are served as HTML, integers as bare status codes,
    ``(302, "/target")`` tuples as redirects, unknown paths as 404. ``log.hits`` counts requests per path, ``log.agents`` keeps
    the User-Agent of every request.
    """
    runners = []

    async def _serve(pages: Dict[str, PageSpec]):
        log = SimpleNamespace(hits=Counter(), agents=[])

        async def handler(request: web.Request) -> web.Response:
            log.hits[request.path] += 1
            log.agents.append(request.headers.get("User-Agent"))
            body = pages.get(request.path)
            if body is None:
                return web.Response(status=404)
            if isinstance(body, int):
                return web.Response(status=body)
            if isinstance(body, tuple):
                status, location = body
                return web.Response(status=status, headers={"Location": location})
            return web.Response(text=body, content_type="text/html")

        app = web.Application()
        app.router.add_get("/{tail:.*}", handler)
        runner = web.AppRunner(app)
        await runner.setup()
        port = unused_tcp_port_factory()
        await web.TCPSite(runner, "127.0.0.1", port).start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}", log

    yield _serve

    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def make_crawler_config(tmp_path) -> Callable[..., CrawlerConfig]:
    """Build a fast CrawlerConfig for a local site."""

    def _make(base: str, start_path: str = "/", **overrides) -> CrawlerConfig:
        data = dict(
            start_url=f"{base}{start_path}",
            base_url=base,
            output_dir=tmp_path / "out",
            rate_limit=0,
            timeout=5.0,
            user_agent="TestAgent/1.0",
        )
        data.update(overrides)
        return CrawlerConfig(**data)

    return _make


def page_dict(url: str, title: str, content: str, **extra) -> dict:
    data = {
        "url": url,
        "title": title,
        "content": content,
        "headings": [],
        "links": [],
        "parent": None,
        "depth": 0,
        "path": urlparse(url).path,
        "type": "general",
        "lastUpdated": None,
        "category": "general",
    }
    data.update(extra)
    return data


@pytest.fixture()
def corpus_dir(tmp_path) -> Path:
    """Write a small scraped corpus for the ``factory`` and ``github`` sources."""
    data_dir = tmp_path / "data"
    factory_pages = {
        "https://docs.factory.ai/guides/bridge": page_dict(
            "https://docs.factory.ai/guides/bridge",
            "Installing Bridge",
            "<p>To install bridge run the installer. Bridge connects your machine.</p>",
            type="guide",
            category="guides",
        ),
        "https://docs.factory.ai/reference/cli": page_dict(
            "https://docs.factory.ai/reference/cli",
            "CLI Reference",
            "<p>Flags for the command. You can install bridge with --bridge.</p>",
            type="reference",
            category="reference",
        ),
        "https://docs.factory.ai/api/tokens": page_dict(
            "https://docs.factory.ai/api/tokens",
            "Tokens API",
            "<p>Create and revoke tokens. Errors return 401.</p>",
            type="api",
            category="api",
        ),
        "https://docs.factory.ai/empty": page_dict(
            "https://docs.factory.ai/empty", "Install Bridge Placeholder", ""
        ),
    }
    github_pages = {
        "https://docs.github.com/en/actions": page_dict(
            "https://docs.github.com/en/actions",
            "About GitHub Actions",
            "<p>Overview of workflows. Troubleshoot a failing bridge job.</p>",
            category="en",
        ),
    }
    for key, name, pages in (
        ("factory", "Factory AI Documentation", factory_pages),
        ("github", "GitHub Documentation", github_pages),
    ):
        target = data_dir / f"{key}-docs"
        target.mkdir(parents=True)
        doc = {
            "pages": pages,
            "navigation": {},
            "metadata": {
                "scrapedAt": "2024-05-01T10:00:00.000Z",
                "totalPages": len(pages),
                "source": name,
                "baseUrl": "https://example",
            },
        }
        (target / f"{key}-docs.json").write_text(json.dumps(doc), encoding="utf-8")
    return data_dir


@pytest.fixture()
def app_config(corpus_dir) -> AppConfig:
    return AppConfig(data_dir=corpus_dir)


@pytest.fixture()
def local_source_config(tmp_path) -> Callable[[str], AppConfig]:
    """AppConfig with a single ``local`` source pointing at a test site."""

    def _make(base: str, start_path: str = "/") -> AppConfig:
        return AppConfig(
            data_dir=tmp_path / "data",
            sources={
                "local": SourceConfig(
                    name="Local Docs",
                    start_url=f"{base}{start_path}",
                    base_url=base,
                    title_suffixes=[" | Local Docs"],
                )
            },
            crawler={"rate_limit": 0, "timeout": 5.0, "user_agent": "TestAgent/1.0"},
        )

    return _make
