# File: docs_explorer/navigation.py
"""docs_explorer.navigation: category-grouped navigation tree built from crawled pages."""

from __future__ import annotations

from typing import Dict, List, Mapping

from docs_explorer.crawler.models import NavigationItem, NavigationNode, PageRecord

__all__ = ["build_navigation", "find_children"]


def find_children(pages: Mapping[str, PageRecord], parent_url: str) -> List[Dict[str, str]]:
    """Pages whose ``parent`` is *parent_url*, in crawl order."""
    return [
        {"title": page.title, "url": url, "path": page.path, "type": page.type}
        for url, page in pages.items()
        if page.parent == parent_url
    ]


def build_navigation(pages: Mapping[str, PageRecord]) -> Dict[str, NavigationNode]:
    """Group *pages* by category, shallow pages first, each with its direct children.

    A page linked from several parents is not deduplicated across the tree.
    """
    by_category: Dict[str, List[PageRecord]] = {}
    for page in pages.values():
        by_category.setdefault(page.category, []).append(page)

    navigation: Dict[str, NavigationNode] = {}
    for category, group in by_category.items():
        node = NavigationNode(title=category[:1].upper() + category[1:])
        for page in sorted(group, key=lambda p: (p.depth, p.path)):
            node.items.append(
                NavigationItem(
                    title=page.title,
                    url=page.url,
                    path=page.path,
                    type=page.type,
                    children=find_children(pages, page.url),
                )
            )
        navigation[category] = node
    return navigation
