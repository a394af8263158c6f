# docs_explorer/errors.py
"""
Exception hierarchy shared by the crawler, the search layer and the CLI.
"""
from __future__ import annotations


class DocsExplorerError(Exception):
    """Base class for all package errors."""


class CrawlError(DocsExplorerError):
    """A crawl run could not complete."""


class CrawlInitError(CrawlError):
    """The output location could not be prepared before crawling."""


class SeedUnreachableError(CrawlError):
    """The start URL produced no page, so there is nothing to crawl."""


class LLMError(DocsExplorerError):
    """The upstream language model rejected or failed the request."""


class UnknownProviderError(LLMError):
    """Requested LLM provider is not supported."""


__all__ = [
    "DocsExplorerError",
    "CrawlError",
    "CrawlInitError",
    "SeedUnreachableError",
    "LLMError",
    "UnknownProviderError",
]
