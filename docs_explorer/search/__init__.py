"""Search layer: cached corpora, lexical ranking and LLM answers."""

from docs_explorer.search.cache import DocCache
from docs_explorer.search.search import SearchResult, search_documentation

__all__ = ["DocCache", "SearchResult", "search_documentation"]
