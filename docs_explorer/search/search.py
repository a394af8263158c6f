# docs_explorer/search/search.py
"""
Lexical search over the scraped corpora.

Scoring, per query term longer than two characters:

* +0.5 if the term occurs in the page title,
* +0.2 if it occurs in the content (plus a highlight around the first hit),
* +0.3 once if all terms occur in the content as one phrase.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from docs_explorer.search.cache import DocCache

__all__ = (
    "SEARCH_TYPES",
    "SearchResult",
    "calculate_relevance",
    "is_concept",
    "is_howto",
    "is_troubleshooting",
    "matches_type",
    "search_documentation",
    "tokenize",
)

SEARCH_TYPES = ("all", "howto", "api", "troubleshooting", "concept")

HIGHLIGHT_CONTEXT = 50

HOWTO_PATTERNS = (
    "how to", "step by step", "tutorial", "guide", "walkthrough",
    "getting started", "quickstart", "setup", "install",
)
TROUBLESHOOTING_PATTERNS = (
    "troubleshoot", "debug", "error", "issue", "problem", "fix",
    "resolve", "solution", "trouble", "fail", "exception",
)
CONCEPT_PATTERNS = (
    "concept", "overview", "introduction", "understand", "about",
    "what is", "how does", "explanation", "architecture",
)


@dataclass(slots=True)
class SearchResult:
    page: Dict[str, Any]
    relevance_score: float
    highlights: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "relevanceScore": self.relevance_score,
            "highlights": list(self.highlights),
        }


def tokenize(query: str) -> List[str]:
    return [term for term in query.lower().split() if len(term) > 2]


def _mentions(page: Mapping[str, Any], patterns: Iterable[str]) -> bool:
    title = str(page.get("title") or "").lower()
    content = str(page.get("content") or "").lower()
    return any(p in title or p in content for p in patterns)


def is_howto(page: Mapping[str, Any]) -> bool:
    if page.get("type") in ("guide", "tutorial"):
        return True
    return _mentions(page, HOWTO_PATTERNS)


def is_troubleshooting(page: Mapping[str, Any]) -> bool:
    return _mentions(page, TROUBLESHOOTING_PATTERNS)


def is_concept(page: Mapping[str, Any]) -> bool:
    if page.get("type") == "reference":
        return True
    return _mentions(page, CONCEPT_PATTERNS)


def matches_type(page: Mapping[str, Any], search_type: str) -> bool:
    if search_type == "howto":
        return is_howto(page)
    if search_type == "api":
        return page.get("type") == "api"
    if search_type == "troubleshooting":
        return is_troubleshooting(page)
    if search_type == "concept":
        return is_concept(page)
    return True


def calculate_relevance(page: Mapping[str, Any], terms: Sequence[str]) -> tuple[float, List[Dict[str, Any]]]:
    """Score *page* against *terms*; returns ``(score, highlights)``."""
    if not terms:
        return 0.0, []

    raw_content = str(page.get("content") or "")
    content = raw_content.lower()
    title = str(page.get("title") or "").lower()

    score = 0.0
    highlights: List[Dict[str, Any]] = []

    for term in terms:
        if term in title:
            score += 0.5

    for term in terms:
        index = content.find(term)
        if index != -1:
            score += 0.2
            start = max(0, index - HIGHLIGHT_CONTEXT)
            end = min(len(content), index + len(term) + HIGHLIGHT_CONTEXT)
            highlights.append({"text": raw_content[start:end].strip(), "position": index})

    if " ".join(terms) in content:
        score += 0.3

    return round(score, 6), highlights


def search_documentation(
    query: str,
    search_type: str = "all",
    sources: Sequence[str] = ("factory",),
    *,
    cache: DocCache,
    limit: int = 20,
    min_score: float = 0.1,
) -> List[SearchResult]:
    """Rank pages from *sources* for *query*; at most *limit* results above *min_score*."""
    if not query:
        return []
    terms = tokenize(query)

    results: List[SearchResult] = []
    for source in sources:
        docs = cache.load(source)
        if not docs or not docs.get("pages"):
            continue

        for url, page in docs["pages"].items():
            if not page.get("content"):
                continue
            if search_type != "all" and not matches_type(page, search_type):
                continue

            score, highlights = calculate_relevance(page, terms)
            if score > min_score:
                results.append(
                    SearchResult(
                        page={
                            "id": url,
                            "url": url,
                            "title": page.get("title"),
                            "content": page.get("content"),
                            "path": page.get("path"),
                            "type": page.get("type"),
                            "category": page.get("category"),
                            "source": source,
                            "lastUpdated": page.get("lastUpdated"),
                        },
                        relevance_score=score,
                        highlights=highlights,
                    )
                )

    results.sort(key=lambda r: r.relevance_score, reverse=True)
    return results[:limit]
