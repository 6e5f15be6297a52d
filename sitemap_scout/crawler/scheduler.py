# sitemap_scout/crawler/scheduler.py
"""
Batch scheduler: drains one group in fixed-size waves.

Each wave starts one fetch task per URL, waits for all of them (and their
registry commits) to finish, then pauses ``batch_delay`` seconds before the
next wave. Only fetches of the same wave ever overlap.
"""
from __future__ import annotations

import asyncio
import time
from typing import List, Protocol, Sequence

from sitemap_scout.crawler.models import PageFindings, SitemapGroup
from sitemap_scout.crawler.registry import PageRegistry
from sitemap_scout.logger import logger


class Fetcher(Protocol):
    async def fetch(self, url: str) -> PageFindings: ...


def make_batches(urls: Sequence[str], size: int) -> List[List[str]]:
    """Split *urls* into consecutive chunks of at most *size* items."""
    if size < 1:
        raise ValueError("batch size must be >= 1")
    return [list(urls[i : i + size]) for i in range(0, len(urls), size)]


class CrawlScheduler:
    """Runs a group's fetches in paced, barrier-separated batches."""

    def __init__(self, fetcher: Fetcher, batch_size: int = 5, batch_delay: float = 0.2) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if batch_delay < 0:
            raise ValueError("batch_delay must be >= 0")
        self.fetcher = fetcher
        self.batch_size = batch_size
        self.batch_delay = batch_delay

    async def crawl_group(self, group: SitemapGroup) -> None:
        registry = group.pages
        batches = make_batches(registry.urls(), self.batch_size)
        logger.info("Crawling %s: %d pages in %d batches", group.name, len(registry), len(batches))
        start = time.monotonic()

        for number, batch in enumerate(batches, start=1):
            await asyncio.gather(*(self._fetch_and_commit(registry, url) for url in batch))
            logger.info("%s: batch %d/%d done", group.name, number, len(batches))
            if number < len(batches) and self.batch_delay:
                await asyncio.sleep(self.batch_delay)

        logger.info("Finished %s in %.2f s", group.name, time.monotonic() - start)

    async def _fetch_and_commit(self, registry: PageRegistry, url: str) -> None:
        record = registry[url]
        findings = await self.fetcher.fetch(record.loc)
        registry.commit(url, findings)


__all__ = ["CrawlScheduler", "make_batches"]
