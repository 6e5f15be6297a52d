# sitemap_scout/crawler/fetcher.py
"""
Fetcher module: one GET per page, analysed into :class:`PageFindings`.

The fetcher reads no shared state, so any number of ``fetch`` calls may run
concurrently on the same session. Every failure is returned as data.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from sitemap_scout.crawler.models import OutboundLink, PageFindings, PageStatus
from sitemap_scout.logger import logger
from sitemap_scout.parser.html_parser import ParsedPage, parse_html
from sitemap_scout.utils import same_origin


def _is_html(content_type: str) -> bool:
    mime = content_type.split(";", 1)[0].strip().lower()
    return not mime or "html" in mime


def describe_error(exc: BaseException, timeout: Optional[float] = None) -> str:
    """Human-readable status for a transport failure."""
    if isinstance(exc, asyncio.TimeoutError):
        return f"Timeout after {timeout}s" if timeout else "Timeout"
    text = str(exc).strip()
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


class PageFetcher:
    """Fetches a page and classifies its outbound links against the crawl origin."""

    def __init__(self, session: ClientSession, origin: str, timeout: Optional[float] = None) -> None:
        self.session = session
        self.origin = origin
        self.timeout = timeout

    async def fetch(self, url: str) -> PageFindings:
        """
        GET *url* once, without retry.

        Returns ``ERROR`` findings with a description on transport failure, ``ERROR``
        with the numeric status on a non-2xx answer, and ``OK`` findings otherwise.
        """
        options = {"timeout": ClientTimeout(total=self.timeout)} if self.timeout else {}
        try:
            async with self.session.get(url, raise_for_status=False, **options) as resp:
                status = resp.status
                if not 200 <= status < 300:
                    logger.debug("HTTP %s for %s", status, url)
                    return PageFindings.failed(url, status)
                final_url = str(resp.url)
                body = await resp.read() if _is_html(resp.headers.get("Content-Type", "")) else None
        except (ClientError, asyncio.TimeoutError) as exc:
            description = describe_error(exc, self.timeout)
            logger.debug("Fetch failed for %s: %s", url, description)
            return PageFindings.failed(url, description)

        findings = PageFindings(url=url, status=PageStatus.OK, status_code=status)
        if body is not None:
            self._analyse(findings, body, final_url)
        return findings

    def _analyse(self, findings: PageFindings, body: bytes, page_url: str) -> None:
        try:
            parsed: ParsedPage = parse_html(body, page_url)
        except Exception as exc:  # malformed markup must not fail the page
            logger.warning("HTML parse failed for %s: %s", findings.url, exc)
            return
        findings.title = parsed.title
        findings.meta_description = parsed.meta_description
        findings.canonical = parsed.canonical
        findings.word_count = parsed.word_count
        findings.links = [OutboundLink(link, same_origin(link, self.origin)) for link in parsed.links]


__all__ = ["PageFetcher", "describe_error"]
