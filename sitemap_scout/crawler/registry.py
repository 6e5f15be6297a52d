# sitemap_scout/crawler/registry.py
"""
Per-group link-usage graph.

Keys are normalised URLs (see :func:`sitemap_scout.utils.normalize_url`) in
sitemap order. Own-page fields of a record are written once by the page's own
commit; cross-page counters go through :meth:`PageRecord.add_reference`, which
holds that record's lock, so commits may run from concurrent tasks or threads.
"""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List

from sitemap_scout.crawler.models import PageFindings, PageRecord
from sitemap_scout.logger import logger
from sitemap_scout.utils import normalize_url


class PageRegistry:
    """Mapping of normalised URL -> :class:`PageRecord` for one sitemap group."""

    def __init__(self, urls: Iterable[str] = ()) -> None:
        self._records: Dict[str, PageRecord] = {}
        for url in urls:
            self.register(url)

    def register(self, url: str) -> PageRecord:
        """Add *url* as a pending record. A URL already known returns its record."""
        key = normalize_url(url)
        record = self._records.get(key)
        if record is None:
            loc = url.strip().split("#", 1)[0]
            record = PageRecord(url=key, loc=loc)
            self._records[key] = record
        return record

    def __getitem__(self, url: str) -> PageRecord:
        return self._records[normalize_url(url)]

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and normalize_url(url) in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def urls(self) -> List[str]:
        return list(self._records)

    def records(self) -> List[PageRecord]:
        return list(self._records.values())

    def pending(self) -> List[PageRecord]:
        return [r for r in self._records.values() if r.is_pending]

    def commit(self, url: str, findings: PageFindings) -> None:
        """Merge one page's findings.

        1. The page's own fields are written to its record.
        2. Every internal link whose target is a key of this registry credits
           that target with one reference from *url*. Links to unregistered
           URLs and links back to the page itself credit nothing.
        """
        source = self[url]
        source.apply_findings(findings)

        credited = 0
        for link in findings.internal_links:
            target = self._records.get(normalize_url(link.url))
            if target is None or target is source:
                continue
            target.add_reference(source.url)
            credited += 1
        logger.debug(
            "Committed %s: %s (%s), %d/%d internal links credited",
            source.url,
            findings.status.value,
            findings.status_code,
            credited,
            findings.internal_link_count,
        )


__all__ = ["PageRegistry"]
