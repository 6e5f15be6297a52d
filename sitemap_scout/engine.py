# File: sitemap_scout/engine.py
"""sitemap_scout.engine: Загрузка sitemap index и последовательный обход групп."""

from __future__ import annotations

from typing import List, Optional

from aiohttp import ClientSession, ClientTimeout

from sitemap_scout.config import CrawlConfig
from sitemap_scout.crawler.fetcher import PageFetcher
from sitemap_scout.crawler.models import SitemapGroup
from sitemap_scout.crawler.scheduler import CrawlScheduler
from sitemap_scout.crawler.sitemap_loader import SitemapLoader, SitemapLoadError
from sitemap_scout.logger import logger
from sitemap_scout.utils import origin_of

__all__ = ["CrawlOrchestrator", "start_scan"]


class CrawlOrchestrator:
    """Фасад для CLI и тестов: загрузка групп из sitemap и их обход по одной."""

    def __init__(self, config: CrawlConfig, session: Optional[ClientSession] = None) -> None:
        """Инициализирует оркестратор; внешняя сессия не закрывается по завершении."""
        self.config = config
        self._session = session

    def _new_session(self) -> ClientSession:
        return ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )

    async def run(self, index_url: Optional[str] = None) -> List[SitemapGroup]:
        """Запускает полный обход и возвращает группы, где у каждой страницы финальный статус.

        Недоступный sitemap index логируется и пробрасывается как :class:`SitemapLoadError`.
        """
        index_url = index_url or self.config.index
        if self._session is not None:
            return await self._run(self._session, index_url)
        async with self._new_session() as session:
            return await self._run(session, index_url)

    async def _run(self, session: ClientSession, index_url: str) -> List[SitemapGroup]:
        logger.info("Starting crawl of %s", index_url)
        try:
            groups = await SitemapLoader(session, self.config).load_groups(index_url)
        except SitemapLoadError as exc:
            logger.error("Crawl aborted: %s", exc)
            raise

        fetcher = PageFetcher(session, origin_of(index_url), timeout=self.config.timeout)
        scheduler = CrawlScheduler(fetcher, self.config.batch_size, self.config.batch_delay)
        for group in groups:
            await scheduler.crawl_group(group)
            left = group.pages.pending()
            if left:
                raise RuntimeError(f"Group {group.name}: {len(left)} pages left pending after crawl")

        logger.info(
            "Crawl finished: %d groups, %d pages",
            len(groups),
            sum(len(g.pages) for g in groups),
        )
        return groups


async def start_scan(cfg: CrawlConfig) -> List[SitemapGroup]:
    """Запускает обход по конфигу и возвращает заполненные группы."""
    return await CrawlOrchestrator(cfg).run()
