"""Page extraction for documentation sites.

:func:`extract_page` turns raw HTML plus its URL into an :class:`ExtractedPage`:

* title     : first ``<h1>``, else ``<title>`` minus the site suffix.
* content   : cleaned inner HTML of the main content container.
* headings  : every ``h1`` to ``h6`` in document order.
* links     : absolute links under the configured base URL, deduplicated.
* type      : api / guide / reference / tutorial / changelog / onboarding / general.
* last_updated, category.

The document is parsed once. Every extractor reads that tree without changing
it; content cleaning works on a private copy. Title, date and breadcrumb
handling are heuristics tuned for the conventional markers listed below, not
general-purpose parsers.

Extraction never raises for bad markup: a failing extractor is logged and its
field falls back to the documented default.
"""
from __future__ import annotations

import copy
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, TypeVar
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Comment
from bs4.element import Tag

from docs_explorer.crawler.models import Heading
from docs_explorer.crawler.urls import url_to_path
from docs_explorer.logger import get_logger

__all__: Sequence[str] = (
    "ExtractedPage",
    "extract_page",
    "extract_title",
    "extract_content",
    "extract_headings",
    "extract_links",
    "extract_last_updated",
    "classify_page",
    "extract_category",
)

logger = get_logger("parser")

UNTITLED = "Untitled Page"
DEFAULT_TITLE_SUFFIXES: tuple[str, ...] = (" | Factory Documentation",)

_NON_CONTENT = "nav, header, footer, script, style, .sidebar, .navigation"
_CONTENT_CONTAINERS = ("main", "article", ".content", ".documentation", ".doc-content")
_LAST_UPDATED = ".last-updated, .updated-date, .modified-date, time"
_BREADCRUMB = ".breadcrumb, .breadcrumbs, nav ol, nav ul"

_DATE_RE = re.compile(r"(\d{1,2}/\d{1,2}/\d{4})|(\w+ \d{1,2}, \d{4})")
_DATE_FORMATS = ("%m/%d/%Y", "%B %d, %Y", "%b %d, %Y")

# checked in this order; first hit wins
_PATH_TYPES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("api", ("api",)),
    ("guide", ("guide", "guides")),
    ("reference", ("reference",)),
    ("tutorial", ("tutorial", "tutorials")),
    ("changelog", ("changelog",)),
    ("onboarding", ("onboarding",)),
)

T = TypeVar("T")


@dataclass(slots=True)
class ExtractedPage:
    """Fields derived from one HTML document; depth/parent/path are added by the crawler."""

    title: str
    content: str
    headings: tuple[Heading, ...]
    links: tuple[str, ...]
    type: str
    last_updated: Optional[str]
    category: str


# ---------------------------------------------------------------------------
# Field extractors
# ---------------------------------------------------------------------------


def extract_title(soup: BeautifulSoup, title_suffixes: Sequence[str] = DEFAULT_TITLE_SUFFIXES) -> str:
    h1 = soup.find("h1")
    if h1 is not None:
        text = h1.get_text().strip()
        if text:
            return text

    title_tag = soup.find("title")
    if title_tag is not None:
        text = title_tag.get_text().strip()
        for suffix in title_suffixes:
            if suffix and suffix in text:
                text = text.replace(suffix, "", 1).strip()
                break
        if text:
            return text

    return UNTITLED


def extract_content(soup: BeautifulSoup) -> str:
    """Inner HTML of the main content area with chrome, scripts and comments removed."""
    working = copy.copy(soup)
    for element in working.select(_NON_CONTENT):
        element.extract()

    container: Optional[Tag] = None
    for selector in _CONTENT_CONTAINERS:
        candidate = working.select_one(selector)
        if candidate is not None and candidate.decode_contents().strip():
            container = candidate
            break
    if container is None:
        container = working.body or working

    for element in container.find_all(["script", "style"]):
        element.extract()
    for comment in container.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    return container.decode_contents().strip()


def extract_headings(soup: BeautifulSoup) -> tuple[Heading, ...]:
    headings: list[Heading] = []
    for tag in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"]):
        anchor = tag.get("id")
        headings.append(
            Heading(
                level=int(tag.name[1]),
                text=tag.get_text().strip(),
                id=anchor if isinstance(anchor, str) else "",
            )
        )
    return tuple(headings)


def extract_links(soup: BeautifulSoup, page_url: str, base_url: str) -> tuple[str, ...]:
    """Absolute hrefs that start with *base_url*, first occurrence order, no duplicates."""
    found: dict[str, None] = {}
    for tag in soup.find_all("a", href=True):
        href = tag.get("href")
        if not isinstance(href, str) or not href.strip():
            continue
        try:
            absolute = urljoin(page_url, href.strip())
        except ValueError:
            continue
        if absolute.startswith(base_url):
            found.setdefault(absolute, None)
    return tuple(found)


def _parse_date(text: str) -> Optional[str]:
    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.strftime("%Y-%m-%dT00:00:00.000Z")
    return None


def extract_last_updated(soup: BeautifulSoup) -> Optional[str]:
    marker = soup.select_one(_LAST_UPDATED)
    if marker is None:
        return None
    text = marker.get_text().strip()
    if not text:
        return None
    match = _DATE_RE.search(text)
    if match:
        iso = _parse_date(match.group(0))
        if iso is not None:
            return iso
    return text


def classify_page(path: str, soup: BeautifulSoup) -> str:
    for page_type, needles in _PATH_TYPES:
        if any(needle in path for needle in needles):
            return page_type

    body = soup.body or soup
    text = body.get_text().lower()
    if "api reference" in text:
        return "api"
    if "step by step" in text or "how to" in text:
        return "tutorial"
    return "general"


def extract_category(path: str, soup: BeautifulSoup) -> str:
    segments = [part for part in path.split("/") if part]
    if segments:
        return segments[0]

    crumb = soup.select_one(_BREADCRUMB)
    if crumb is not None:
        parts = [p.strip() for p in re.split(r"[>\\/]", crumb.get_text(">")) if p.strip()]
        if parts:
            return parts[0].lower()
    return "general"


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def _safely(name: str, url: str, default: T, func: Callable[..., T], *args) -> T:
    try:
        return func(*args)
    except Exception as exc:
        logger.debug("Extraction of %s failed for %s: %s", name, url, exc)
        return default


def extract_page(
    html: str,
    url: str,
    base_url: str,
    title_suffixes: Sequence[str] = DEFAULT_TITLE_SUFFIXES,
    final_url: Optional[str] = None,
) -> ExtractedPage:
    """Parse *html* fetched from *url*; links are limited to *base_url*.

    Path-derived fields (type, category) come from *url*. Relative links are
    resolved against *final_url* when the request was redirected there.
    """
    try:
        soup = BeautifulSoup(html or "", "html.parser")
    except Exception as exc:
        logger.warning("Could not parse %s: %s", url, exc)
        soup = BeautifulSoup("", "html.parser")

    path = url_to_path(url)
    return ExtractedPage(
        title=_safely("title", url, UNTITLED, extract_title, soup, title_suffixes),
        content=_safely("content", url, "", extract_content, soup),
        headings=_safely("headings", url, (), extract_headings, soup),
        links=_safely("links", url, (), extract_links, soup, final_url or url, base_url),
        type=_safely("type", url, "general", classify_page, path, soup),
        last_updated=_safely("last_updated", url, None, extract_last_updated, soup),
        category=_safely("category", url, "general", extract_category, path, soup),
    )
