# docs_explorer/crawler/urls.py
"""
URL canonicalisation and scope checks for the documentation crawler.
"""
from __future__ import annotations

import re
from typing import Collection, Iterable, Union
from urllib.parse import urlparse

PatternT = Union[str, "re.Pattern[str]"]

__all__ = ("normalize_url", "url_to_path", "url_to_filename", "in_scope")


def _parse_absolute(url: str):
    try:
        parsed = urlparse(url)
    except (TypeError, ValueError):
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return parsed


def normalize_url(url: str) -> str:
    """
    Return ``scheme://host[:port]/path`` with one trailing slash removed.

    Query strings and fragments are dropped. Input that is not an absolute
    URL is returned unchanged.
    """
    parsed = _parse_absolute(url)
    if parsed is None:
        return url
    path = parsed.path[:-1] if parsed.path.endswith("/") else parsed.path
    return f"{parsed.scheme}://{parsed.netloc}{path}"


def url_to_path(url: str) -> str:
    """Path component of *url*, or *url* itself when it cannot be parsed."""
    parsed = _parse_absolute(url)
    return url if parsed is None else parsed.path


def url_to_filename(url: str) -> str:
    """Flatten the URL path into a filesystem-safe name (``guide/setup`` -> ``guide_setup``)."""
    parsed = _parse_absolute(url)
    if parsed is None:
        return "unknown"
    name = parsed.path.strip("/")
    return (name or "index").replace("/", "_")


def in_scope(
    url: str,
    base_url: str,
    exclude_patterns: Iterable[PatternT],
    visited: Collection[str],
) -> bool:
    """True when *url* may be enqueued: http(s), under *base_url*, unseen, not excluded."""
    if not url.startswith("http"):
        return False
    if not url.startswith(base_url):
        return False
    if url in visited:
        return False
    return not any(re.search(pattern, url) for pattern in exclude_patterns)
