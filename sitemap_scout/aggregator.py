# File: sitemap_scout/aggregator.py
"""sitemap_scout.aggregator: Сводка по результатам обхода для слоя отчётов."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Sequence, TypedDict

from sitemap_scout.crawler.models import PageStatus, SitemapGroup


class GroupSummary(TypedDict):
    """Сводка по одному sitemap."""

    sitemap: str
    name: str
    total_pages: int
    used_pages: int
    orphaned_pages: List[str]
    broken_pages: List[str]
    under_linked_pages: List[str]


@dataclass(slots=True)
class ScanReport:
    """Результат обхода: сводки по группам, итоговые счётчики и полные записи страниц."""

    summaries: List[GroupSummary] = field(default_factory=list)
    totals: Dict[str, int] = field(default_factory=dict)
    groups: List[Dict[str, Any]] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление ScanReport."""
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)


def summarize_group(group: SitemapGroup, under_linked_threshold: int = 2) -> GroupSummary:
    """Считает orphaned (никто не ссылается), broken (ERROR) и under-linked страницы группы."""
    records = group.pages.records()
    return {
        "sitemap": group.source_url,
        "name": group.name,
        "total_pages": len(records),
        "used_pages": sum(1 for r in records if r.used_count > 0),
        "orphaned_pages": [r.url for r in records if r.used_count == 0],
        "broken_pages": [r.url for r in records if r.status is PageStatus.ERROR],
        "under_linked_pages": [
            r.url for r in records if 0 < r.used_count < under_linked_threshold
        ],
    }


def aggregate_results(groups: Sequence[SitemapGroup], under_linked_threshold: int = 2) -> ScanReport:
    """Собирает все части отчёта в ScanReport."""
    report = ScanReport()
    report.summaries = [summarize_group(g, under_linked_threshold) for g in groups]
    report.groups = [g.to_dict() for g in groups]
    report.totals = {
        "groups": len(report.summaries),
        "pages": sum(s["total_pages"] for s in report.summaries),
        "used": sum(s["used_pages"] for s in report.summaries),
        "orphaned": sum(len(s["orphaned_pages"]) for s in report.summaries),
        "broken": sum(len(s["broken_pages"]) for s in report.summaries),
        "under_linked": sum(len(s["under_linked_pages"]) for s in report.summaries),
    }
    return report


__all__ = ["GroupSummary", "ScanReport", "aggregate_results", "summarize_group"]
