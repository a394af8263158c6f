# File: tests/test_html_parser.py
"""Tests for page extraction: title, content, headings, links, dates, type and category."""
from bs4 import BeautifulSoup

from docs_explorer.crawler.models import Heading
from docs_explorer.parser.html_parser import (
    UNTITLED,
    classify_page,
    extract_content,
    extract_last_updated,
    extract_page,
)

BASE = "https://docs.factory.ai"

DOC_PAGE = """
<html>
<head><title>Install | Factory Documentation</title><style>.x{}</style></head>
<body>
  <header><a href="/welcome">Home</a></header>
  <nav class="top"><ul><li><a href="/guides/install">Install</a></li></ul></nav>
  <aside class="sidebar"><a href="/reference/cli">CLI</a></aside>
  <main>
    <h1 id="install">Install the CLI</h1>
    <!-- build: 1234 -->
    <p>Download the <a href="../reference/cli#flags">binary</a>.</p>
    <script>track()</script>
    <h2 id="linux">Linux</h2>
    <h3>macOS</h3>
    <a href="https://github.com/factory-ai/cli">GitHub</a>
    <a href="mailto:help@factory.ai">Mail</a>
    <a href="/reference/cli#flags">again</a>
    <a href="">empty</a>
    <span class="last-updated">Last updated March 5, 2024</span>
  </main>
  <footer>Footer text</footer>
</body>
</html>
"""


def test_extract_full_page():
    page = extract_page(DOC_PAGE, f"{BASE}/guides/install", BASE)

    assert page.title == "Install the CLI"
    assert page.type == "guide"
    assert page.category == "guides"
    assert page.last_updated == "2024-03-05T00:00:00.000Z"
    assert page.headings == (
        Heading(1, "Install the CLI", "install"),
        Heading(2, "Linux", "linux"),
        Heading(3, "macOS", ""),
    )
    assert page.links == (
        f"{BASE}/welcome",
        f"{BASE}/guides/install",
        f"{BASE}/reference/cli",
        f"{BASE}/reference/cli#flags",
    )


def test_content_is_cleaned():
    page = extract_page(DOC_PAGE, f"{BASE}/guides/install", BASE)

    assert page.content.startswith("<h1")
    assert "Download the" in page.content
    for unwanted in ("track()", "build: 1234", "Footer text", "sidebar", "<nav", "<header"):
        assert unwanted not in page.content


def test_extraction_does_not_mutate_parse_tree():
    soup = BeautifulSoup(DOC_PAGE, "html.parser")
    before = str(soup)
    extract_content(soup)
    assert str(soup) == before


def test_title_falls_back_to_title_tag_without_suffix():
    html = "<html><head><title>Setup | Factory Documentation</title></head><body><p>x</p></body></html>"
    assert extract_page(html, f"{BASE}/setup", BASE).title == "Setup"


def test_title_uses_custom_suffixes():
    html = "<title>Actions - GitHub Docs</title>"
    page = extract_page(html, "https://docs.github.com/en/actions", "https://docs.github.com", [" - GitHub Docs"])
    assert page.title == "Actions"


def test_title_empty_h1_is_skipped_and_default_applies():
    assert extract_page("<h1>   </h1><p>body</p>", f"{BASE}/x", BASE).title == UNTITLED


def test_path_type_wins_over_content_heuristic():
    html = "<h1>Install</h1><p>step by step guide</p>"
    page = extract_page(html, f"{BASE}/guides/install", BASE)
    assert page.type == "guide"
    assert page.category == "guides"
    assert page.title == "Install"


def test_final_url_only_affects_link_resolution():
    html = '<h1>Intro</h1><a href="setup">Setup</a><a href="/reference/cli">CLI</a>'
    page = extract_page(html, f"{BASE}/welcome", BASE, final_url=f"{BASE}/guides/intro")
    assert page.type == "general"
    assert page.category == "welcome"
    assert page.links == (f"{BASE}/guides/setup", f"{BASE}/reference/cli")


def test_path_type_priority():
    soup = BeautifulSoup("<p></p>", "html.parser")
    assert classify_page("/api/guides", soup) == "api"
    assert classify_page("/guides/reference", soup) == "guide"
    assert classify_page("/reference/tutorials", soup) == "reference"
    assert classify_page("/tutorials/x", soup) == "tutorial"
    assert classify_page("/changelog", soup) == "changelog"
    assert classify_page("/onboarding/start", soup) == "onboarding"


def test_content_heuristics():
    assert classify_page("/x", BeautifulSoup("<p>The API Reference for tokens</p>", "html.parser")) == "api"
    assert classify_page("/x", BeautifulSoup("<p>How to deploy</p>", "html.parser")) == "tutorial"
    assert classify_page("/x", BeautifulSoup("<p>Hello</p>", "html.parser")) == "general"


def test_category_from_breadcrumb_on_root_path():
    html = '<div class="breadcrumb"><a>Docs</a> &gt; <a>Welcome</a></div><h1>Welcome</h1>'
    assert extract_page(html, f"{BASE}/", BASE).category == "docs"


def test_category_defaults_to_general():
    assert extract_page("<h1>Hi</h1>", BASE, BASE).category == "general"


def test_last_updated_variants():
    def parse(html):
        return extract_last_updated(BeautifulSoup(html, "html.parser"))

    assert parse('<time>04/07/2023</time>') == "2023-04-07T00:00:00.000Z"
    assert parse('<div class="updated-date">Updated Jan 9, 2022</div>') == "2022-01-09T00:00:00.000Z"
    assert parse('<div class="modified-date">yesterday</div>') == "yesterday"
    assert parse('<div class="last-updated">Foo 12, 2024</div>') == "Foo 12, 2024"
    assert parse("<p>nothing here</p>") is None


def test_malformed_html_degrades_to_defaults():
    page = extract_page("<<<>>><div><p><a href='http://[::1'>x</a>", f"{BASE}/", BASE)
    assert page.title == UNTITLED
    assert page.links == ()
    assert page.last_updated is None
    assert page.type == "general"


def test_empty_document():
    page = extract_page("", f"{BASE}/guides/empty", BASE)
    assert page.title == UNTITLED
    assert page.content == ""
    assert page.headings == ()
    assert page.links == ()
