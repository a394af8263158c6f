# docs_explorer/crawler/models.py
"""
Data models for the documentation crawler.

The JSON shape produced by the ``to_dict`` helpers is the on-disk contract
read by the search API, hence the camelCase keys.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union


def utc_timestamp() -> str:
    """Current UTC time as ``2024-01-31T12:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CrawlState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(slots=True)
class PageData:
    """Raw fetch result: final URL and decoded body."""

    url: str
    content: Union[str, bytes]
    status: int = 200


@dataclass(frozen=True, slots=True)
class CrawlTask:
    """Frontier entry; ``url`` is canonical."""

    url: str
    depth: int
    parent: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    text: str
    id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level, "text": self.text, "id": self.id}


@dataclass(frozen=True, slots=True)
class PageRecord:
    """One successfully fetched and parsed documentation page."""

    url: str
    title: str
    content: str
    headings: tuple[Heading, ...]
    links: tuple[str, ...]
    parent: Optional[str]
    depth: int
    path: str
    type: str
    last_updated: Optional[str]
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "content": self.content,
            "headings": [h.to_dict() for h in self.headings],
            "links": list(self.links),
            "parent": self.parent,
            "depth": self.depth,
            "path": self.path,
            "type": self.type,
            "lastUpdated": self.last_updated,
            "category": self.category,
        }


@dataclass(slots=True)
class NavigationItem:
    title: str
    url: str
    path: str
    type: str
    children: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "path": self.path,
            "type": self.type,
            "children": [dict(child) for child in self.children],
        }


@dataclass(slots=True)
class NavigationNode:
    title: str
    items: List[NavigationItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "items": [item.to_dict() for item in self.items]}


@dataclass(slots=True)
class CrawlMetadata:
    source: str
    base_url: str
    scraped_at: str = field(default_factory=utc_timestamp)
    total_pages: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scrapedAt": self.scraped_at,
            "totalPages": self.total_pages,
            "source": self.source,
            "baseUrl": self.base_url,
        }


@dataclass(slots=True)
class CrawlResult:
    """Everything one crawl run produced."""

    metadata: CrawlMetadata
    pages: Dict[str, PageRecord] = field(default_factory=dict)
    navigation: Dict[str, NavigationNode] = field(default_factory=dict)

    def navigation_dict(self) -> Dict[str, Any]:
        return {key: node.to_dict() for key, node in self.navigation.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pages": {url: page.to_dict() for url, page in self.pages.items()},
            "navigation": self.navigation_dict(),
            "metadata": self.metadata.to_dict(),
        }


__all__ = [
    "CrawlMetadata",
    "CrawlResult",
    "CrawlState",
    "CrawlTask",
    "Heading",
    "NavigationItem",
    "NavigationNode",
    "PageData",
    "PageRecord",
    "utc_timestamp",
]
