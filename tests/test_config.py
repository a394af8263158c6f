# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from docs_explorer.config import AppConfig, CrawlerConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("data_dir: corpus\ncrawler: {rate_limit: 250}", ".yaml", None),
        (json.dumps({"dataDir": "corpus", "crawler": {"rateLimit": 250}}), ".json", None),
        ("crawler: {rate_limit: -1}", ".yaml", ValidationError),
        ("crawler: {exclude_patterns: ['(']}", ".yaml", ValidationError),
        ("unknown_key: 1", ".yaml", ValidationError),
        ("::invalid yaml", ".yaml", TypeError),
        ("[1, 2", ".yaml", ValueError),
        ("{broken", ".json", ValueError),
        ("data_dir: x", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, AppConfig)
        assert cfg.data_dir == Path("corpus")
        assert cfg.crawler.rate_limit == 250
        assert set(cfg.sources) == {"factory", "github", "vercel", "resend"}


def test_load_config_default_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        load_config(None)


def test_load_config_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("server: {port: 9000}", encoding="utf-8")
    assert load_config(None).server.port == 9000


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_shipped_default_config_is_valid():
    cfg = load_config(Path(__file__).resolve().parent.parent / "configs" / "default.yaml")
    assert cfg.crawler.max_pages == 500
    assert cfg.sources["factory"].base_url == "https://docs.factory.ai"
    assert cfg.server.port == 8080


def test_crawler_config_defaults():
    cfg = CrawlerConfig(start_url="https://docs.factory.ai/welcome", base_url="https://docs.factory.ai/")
    assert cfg.base_url == "https://docs.factory.ai"
    assert cfg.rate_limit == 1000
    assert cfg.max_pages == 500
    assert cfg.timeout == 30.0
    assert cfg.user_agent.startswith("FactoryDocsAggregator/1.0")
    assert [p.pattern for p in cfg.compiled_patterns()] == list(cfg.exclude_patterns)


@pytest.mark.parametrize(
    "overrides",
    [
        {"start_url": "ftp://docs.factory.ai"},
        {"max_pages": 0},
        {"rate_limit": -5},
        {"user_agent": ""},
        {"timeout": 0},
    ],
)
def test_crawler_config_rejects(overrides):
    data = {"start_url": "https://docs.factory.ai/welcome", "base_url": "https://docs.factory.ai"}
    data.update(overrides)
    with pytest.raises(ValidationError):
        CrawlerConfig(**data)


def test_crawler_config_is_frozen():
    cfg = CrawlerConfig(start_url="https://a.example/", base_url="https://a.example")
    with pytest.raises(ValidationError):
        cfg.max_pages = 3


def test_crawler_config_for_source(tmp_path):
    app = AppConfig(data_dir=tmp_path, crawler={"rateLimit": 10, "maxPages": 50})
    cfg = app.crawler_config_for("github", max_pages=None, rate_limit=0)

    assert cfg.start_url == "https://docs.github.com/en"
    assert cfg.base_url == "https://docs.github.com"
    assert cfg.title_suffixes == [" - GitHub Docs"]
    assert cfg.output_dir == tmp_path / "github-docs"
    assert cfg.max_pages == 50
    assert cfg.rate_limit == 0


def test_source_max_pages_overrides_default(tmp_path):
    app = AppConfig(
        data_dir=tmp_path,
        sources={"small": {"name": "Small", "startUrl": "https://s.example/", "baseUrl": "https://s.example", "maxPages": 5}},
    )
    assert app.crawler_config_for("small").max_pages == 5
    assert app.crawler_config_for("small", max_pages=7).max_pages == 7
