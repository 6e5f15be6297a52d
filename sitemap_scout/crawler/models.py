# sitemap_scout/crawler/models.py
"""
Data models for the SitemapScout crawler.

A :class:`PageRecord` is created ``PENDING`` when its URL is read from a
sitemap, switches to ``OK`` or ``ERROR`` exactly once when its own fetch
completes, and keeps collecting references from other pages of the same
group for the rest of the run.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Union

if TYPE_CHECKING:
    from sitemap_scout.crawler.registry import PageRegistry

StatusCode = Union[int, str, None]


class PageStatus(str, Enum):
    PENDING = "Pending"
    OK = "OK"
    ERROR = "Error"


@dataclass(frozen=True, slots=True)
class OutboundLink:
    """Normalised anchor target found on a page."""

    url: str
    internal: bool


@dataclass(slots=True)
class PageFindings:
    """What a single fetch learned about one page. Never touches the registry."""

    url: str
    status: PageStatus
    status_code: StatusCode
    title: str = ""
    meta_description: str = ""
    canonical: str = ""
    word_count: int = 0
    links: List[OutboundLink] = field(default_factory=list)

    @classmethod
    def failed(cls, url: str, status_code: StatusCode) -> PageFindings:
        return cls(url=url, status=PageStatus.ERROR, status_code=status_code)

    @property
    def internal_links(self) -> List[OutboundLink]:
        return [link for link in self.links if link.internal]

    @property
    def internal_link_count(self) -> int:
        return len(self.internal_links)

    @property
    def external_link_count(self) -> int:
        return len(self.links) - self.internal_link_count


@dataclass(slots=True)
class PageRecord:
    """Crawl result and link-usage counters for one sitemap URL."""

    url: str
    loc: str = ""
    status: PageStatus = PageStatus.PENDING
    status_code: StatusCode = None
    title: str = ""
    meta_description: str = ""
    canonical: str = ""
    word_count: int = 0
    internal_link_count: int = 0
    external_link_count: int = 0
    used_count: int = 0
    used_by_pages: Dict[str, int] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.loc:
            self.loc = self.url

    @property
    def is_pending(self) -> bool:
        return self.status is PageStatus.PENDING

    def apply_findings(self, findings: PageFindings) -> None:
        """Write this page's own fields. Allowed once per record."""
        if not self.is_pending:
            raise RuntimeError(f"Page {self.url} already finished with status {self.status.value}")
        self.status_code = findings.status_code
        self.title = findings.title
        self.meta_description = findings.meta_description
        self.canonical = findings.canonical
        self.word_count = findings.word_count
        self.internal_link_count = findings.internal_link_count
        self.external_link_count = findings.external_link_count
        # status last: a non-pending record always has its fields in place
        self.status = findings.status

    def add_reference(self, referrer: str) -> None:
        """Credit one anchor on *referrer* pointing at this page."""
        with self._lock:
            self.used_count += 1
            self.used_by_pages[referrer] = self.used_by_pages.get(referrer, 0) + 1

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            used_count = self.used_count
            used_by_pages = dict(self.used_by_pages)
        return {
            "url": self.url,
            "loc": self.loc,
            "status": self.status.value,
            "status_code": self.status_code,
            "title": self.title,
            "meta_description": self.meta_description,
            "canonical": self.canonical,
            "word_count": self.word_count,
            "internal_link_count": self.internal_link_count,
            "external_link_count": self.external_link_count,
            "used_count": used_count,
            "used_by_pages": used_by_pages,
        }


@dataclass(slots=True)
class SitemapGroup:
    """Pages declared by one child sitemap, keyed by normalised URL."""

    source_url: str
    name: str
    pages: PageRegistry

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sitemap": self.source_url,
            "name": self.name,
            "pages": [record.to_dict() for record in self.pages.records()],
        }


__all__ = [
    "PageStatus",
    "OutboundLink",
    "PageFindings",
    "PageRecord",
    "SitemapGroup",
    "StatusCode",
]

