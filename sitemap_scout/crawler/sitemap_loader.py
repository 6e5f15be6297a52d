# sitemap_scout/crawler/sitemap_loader.py
"""
Sitemap loader: sitemap index -> ordered list of :class:`SitemapGroup`.

Failure on the index is fatal (:class:`SitemapLoadError`); failure on a child
sitemap only drops that group.
"""
from __future__ import annotations

import asyncio
from typing import List

from aiohttp import ClientError, ClientSession

from sitemap_scout.config import CrawlConfig
from sitemap_scout.crawler.fetcher import describe_error
from sitemap_scout.crawler.models import SitemapGroup
from sitemap_scout.crawler.registry import PageRegistry
from sitemap_scout.logger import logger
from sitemap_scout.parser.sitemap_parser import SitemapDocument, SitemapParseError, parse_sitemap_document
from sitemap_scout.utils import (
    is_reserved_url,
    origin_of,
    remove_duplicates,
    same_origin,
    sitemap_short_name,
)


class SitemapLoadError(RuntimeError):
    """The sitemap index could not be fetched or parsed; nothing can be crawled."""


class SitemapLoader:
    """Builds one pending :class:`PageRegistry` per child sitemap."""

    def __init__(self, session: ClientSession, config: CrawlConfig) -> None:
        self.session = session
        self.config = config

    async def load_groups(self, index_url: str) -> List[SitemapGroup]:
        origin = origin_of(index_url)
        try:
            index = await self._fetch_document(index_url)
        except (ClientError, asyncio.TimeoutError, SitemapParseError) as exc:
            raise SitemapLoadError(f"Sitemap index {index_url} unavailable: {describe_error(exc)}") from exc

        if not index.is_index:
            logger.info("%s is a plain urlset, using it as the only group", index_url)
            groups = [self._build_group(index_url, index.locs, origin)]
        else:
            children = []
            for child_url in index.locs:
                if same_origin(child_url, origin):
                    children.append(child_url)
                else:
                    logger.warning("Skipping sitemap %s: outside of %s", child_url, origin)
            children = remove_duplicates(children)
            logger.info("Sitemap index %s lists %d child sitemaps", index_url, len(children))
            groups = []
            for child_url in children:
                group = await self._load_child(child_url, origin)
                if group is not None:
                    groups.append(group)

        groups.sort(key=lambda g: (g.name, g.source_url))
        return groups

    async def _load_child(self, url: str, origin: str) -> SitemapGroup | None:
        try:
            document = await self._fetch_document(url)
        except (ClientError, asyncio.TimeoutError, SitemapParseError) as exc:
            logger.warning("Skipping sitemap %s: %s", url, describe_error(exc))
            return None
        if document.is_index:
            logger.warning("Skipping sitemap %s: nested sitemap index is not supported", url)
            return None
        return self._build_group(url, document.locs, origin)

    async def _fetch_document(self, url: str) -> SitemapDocument:
        async with self.session.get(url, raise_for_status=True) as resp:
            body = await resp.read()
        return parse_sitemap_document(body)

    def _build_group(self, url: str, locs: List[str], origin: str) -> SitemapGroup:
        registry = PageRegistry()
        skipped = 0
        for loc in locs:
            if not same_origin(loc, origin) or is_reserved_url(loc, self.config.excluded_segments):
                skipped += 1
                continue
            registry.register(loc)
        logger.info(
            "Sitemap %s: %d pages registered, %d skipped", url, len(registry), skipped
        )
        return SitemapGroup(source_url=url, name=sitemap_short_name(url), pages=registry)


__all__ = ["SitemapLoader", "SitemapLoadError"]
