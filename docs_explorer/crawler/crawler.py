# docs_explorer/crawler/crawler.py
"""
Breadth-first crawl loop.

One page at a time from a FIFO frontier, a fixed pause after every request,
and a page record per fetched URL keyed by its canonical form.
"""
from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Deque, Dict, Optional, Set

from aiohttp import ClientSession, ClientTimeout

from docs_explorer.config import CrawlerConfig
from docs_explorer.crawler.fetcher import Fetcher
from docs_explorer.crawler.models import (
    CrawlMetadata,
    CrawlResult,
    CrawlState,
    CrawlTask,
    PageRecord,
)
from docs_explorer.crawler.urls import in_scope, normalize_url, url_to_path
from docs_explorer.errors import CrawlInitError, SeedUnreachableError
from docs_explorer.logger import get_logger
from docs_explorer.navigation import build_navigation
from docs_explorer.parser.html_parser import extract_page

__all__ = ("DocsCrawler",)


class DocsCrawler:
    """Breadth-first documentation crawler.

    One task, one request in flight, a fixed pause after every request. The
    frontier, visited set and results are rebuilt on each :meth:`crawl` call.
    """

    def __init__(self, config: CrawlerConfig, source_name: str = "Factory AI Documentation") -> None:
        self.config = config
        self.source_name = source_name
        self.state = CrawlState.IDLE
        self.session: Optional[ClientSession] = None
        self.fetcher: Optional[Fetcher] = None
        self.logger = get_logger("crawler")
        self._patterns = config.compiled_patterns()
        self.frontier: Deque[CrawlTask] = deque()
        self.visited: Set[str] = set()
        self.queued: Set[str] = set()

    async def __aenter__(self) -> DocsCrawler:
        timeout = ClientTimeout(total=self.config.timeout)
        self.session = ClientSession(
            timeout=timeout,
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        self.fetcher = Fetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlResult:
        if self.fetcher is None:
            raise RuntimeError("Session not initialized; use 'async with DocsCrawler(...)'")
        self.state = CrawlState.RUNNING
        try:
            self._initialize()
        except CrawlInitError:
            self.state = CrawlState.FAILED
            raise

        result = CrawlResult(metadata=CrawlMetadata(source=self.source_name, base_url=self.config.base_url))
        seed = normalize_url(self.config.start_url)
        self.frontier = deque([CrawlTask(seed, 0, None)])
        self.visited = set()
        self.queued = {seed}
        page_count = 0

        self.logger.info("Starting scrape from %s", self.config.start_url)
        start = time.monotonic()

        while self.frontier and page_count < self.config.max_pages:
            task = self.frontier.popleft()
            if task.url in self.visited:
                continue
            self.visited.add(task.url)

            self.logger.info("Scraping (%d/%d): %s", page_count + 1, self.config.max_pages, task.url)
            record = await self._process(task)
            if record is not None:
                result.pages[record.url] = record
                page_count += 1
            elif task.parent is None and not result.pages:
                self.state = CrawlState.FAILED
                raise SeedUnreachableError(f"Start URL produced no page: {task.url}")

            await asyncio.sleep(self.config.rate_limit / 1000)

        result.metadata.total_pages = page_count
        result.navigation = build_navigation(result.pages)
        self.state = CrawlState.COMPLETED

        duration = time.monotonic() - start
        self.logger.info("Scraping completed. Processed %d pages in %.2f s.", page_count, duration)
        if self.frontier:
            self.logger.info("Page budget reached; %d URLs left in the frontier", len(self.frontier))
        return result

    async def _process(self, task: CrawlTask) -> Optional[PageRecord]:
        """Fetch and extract one page, enqueueing the in-scope links it discovers."""
        if self.fetcher is None:
            raise RuntimeError("Session not initialized; use 'async with DocsCrawler(...)'")
        page = await self.fetcher.fetch(task.url)
        if page is None:
            return None

        extracted = extract_page(
            page.content if isinstance(page.content, str) else page.content.decode("utf-8", "replace"),
            task.url,
            self.config.base_url,
            self.config.title_suffixes,
            final_url=page.url,
        )

        links: Dict[str, None] = {}
        for link in extracted.links:
            if not in_scope(link, self.config.base_url, self._patterns, ()):
                continue
            canonical = normalize_url(link)
            links.setdefault(canonical, None)
            if canonical not in self.visited and canonical not in self.queued:
                self.queued.add(canonical)
                self.frontier.append(CrawlTask(canonical, task.depth + 1, task.url))

        return PageRecord(
            url=task.url,
            title=extracted.title,
            content=extracted.content,
            headings=extracted.headings,
            links=tuple(links),
            parent=task.parent,
            depth=task.depth,
            path=url_to_path(task.url),
            type=extracted.type,
            last_updated=extracted.last_updated,
            category=extracted.category,
        )

    def _initialize(self) -> None:
        try:
            self.config.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self.logger.error("Cannot create output directory %s: %s", self.config.output_dir, exc)
            raise CrawlInitError(f"Cannot create output directory {self.config.output_dir}: {exc}") from exc
        self.logger.info("Output directory: %s", self.config.output_dir)
