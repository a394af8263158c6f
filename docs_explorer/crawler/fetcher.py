# docs_explorer/crawler/fetcher.py
"""
Fetcher module: one HTTP GET per call, with the configured User-Agent and timeout.

Failures are soft: the caller gets ``None`` and a warning is logged. There is
no retry; a failed page is simply absent from the crawl result.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession

from docs_explorer.config import CrawlerConfig
from docs_explorer.crawler.models import PageData
from docs_explorer.logger import get_logger

logger = get_logger("fetcher")


class Fetcher:
    """Fetches pages through a shared :class:`aiohttp.ClientSession`."""

    def __init__(self, session: ClientSession, config: CrawlerConfig) -> None:
        self.session = session
        self.config = config
        self.attempts: list[str] = []

    async def fetch(self, url: str) -> PageData | None:
        """
        GET *url*.

        Returns PageData on a 2xx response, or None on network error,
        timeout or any other status.
        """
        self.attempts.append(url)
        try:
            async with self.session.get(
                url,
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            ) as resp:
                if not 200 <= resp.status < 300:
                    logger.warning("Failed to fetch %s: %s %s", url, resp.status, resp.reason)
                    return None
                text = await resp.text(errors="replace")
                return PageData(str(resp.url), text, resp.status)
        except asyncio.TimeoutError:
            logger.warning("Failed to fetch %s: timed out after %.1f s", url, self.config.timeout)
        except ClientError as exc:
            logger.warning("Failed to fetch %s: %s", url, exc)
        return None
