# File: tests/test_registry.py
"""Тесты для PageRegistry: ключи, фиксация результатов и конкурентные счётчики."""
from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from sitemap_scout.crawler.models import OutboundLink, PageFindings, PageRecord, PageStatus
from sitemap_scout.crawler.registry import PageRegistry

BASE = "https://a.com"


def ok(url: str, *targets: str, external: tuple[str, ...] = ()) -> PageFindings:
    links = [OutboundLink(t, True) for t in targets] + [OutboundLink(e, False) for e in external]
    return PageFindings(url=url, status=PageStatus.OK, status_code=200, links=links)


def assert_counters_consistent(registry: PageRegistry) -> None:
    for record in registry.records():
        assert record.used_count == sum(record.used_by_pages.values())


def test_register_normalises_and_deduplicates():
    registry = PageRegistry([f"{BASE}/a/", f"{BASE}/a", f"{BASE}/a#top", f"{BASE}/b"])
    assert registry.urls() == [f"{BASE}/a", f"{BASE}/b"]
    assert registry[f"{BASE}/a/"].loc == f"{BASE}/a/"
    assert f"{BASE}/b/" in registry
    assert f"{BASE}/c" not in registry
    assert all(r.status is PageStatus.PENDING for r in registry.records())


def test_mixed_case_host_shares_key_with_resolved_links():
    registry = PageRegistry([f"{BASE}/a", "HTTPS://A.com/b/"])
    assert registry.urls() == [f"{BASE}/a", f"{BASE}/b"]
    assert registry[f"{BASE}/b"].loc == "HTTPS://A.com/b/"
    registry.commit(f"{BASE}/a", ok(f"{BASE}/a", f"{BASE}/b"))
    assert registry[f"{BASE}/b"].used_by_pages == {f"{BASE}/a": 1}
    assert [r.url for r in registry.pending()] == [f"{BASE}/b"]


def test_commit_writes_own_fields_and_credits_targets():
    registry = PageRegistry([f"{BASE}/a", f"{BASE}/b", f"{BASE}/c"])
    findings = ok(f"{BASE}/a", f"{BASE}/b/", f"{BASE}/c", f"{BASE}/c#x", external=("https://x.com",))
    findings.title = "A"
    registry.commit(f"{BASE}/a", findings)

    a, b, c = (registry[f"{BASE}/{p}"] for p in "abc")
    assert a.status is PageStatus.OK
    assert a.status_code == 200
    assert a.title == "A"
    assert a.internal_link_count == 3
    assert a.external_link_count == 1
    assert a.used_count == 0
    assert b.used_by_pages == {f"{BASE}/a": 1}
    assert c.used_count == 2
    assert c.used_by_pages == {f"{BASE}/a": 2}
    assert b.is_pending and c.is_pending
    assert_counters_consistent(registry)


def test_dangling_and_self_links_credit_nothing():
    registry = PageRegistry([f"{BASE}/a", f"{BASE}/b"])
    registry.commit(f"{BASE}/a", ok(f"{BASE}/a", f"{BASE}/a/", f"{BASE}/not-in-sitemap"))
    a = registry[f"{BASE}/a"]
    assert a.internal_link_count == 2
    assert a.used_count == 0
    assert registry[f"{BASE}/b"].used_count == 0
    assert f"{BASE}/not-in-sitemap" not in registry


def test_external_link_to_registered_url_is_not_credited():
    registry = PageRegistry([f"{BASE}/a", f"{BASE}/b"])
    registry.commit(f"{BASE}/a", ok(f"{BASE}/a", external=(f"{BASE}/b",)))
    assert registry[f"{BASE}/b"].used_count == 0


def test_error_page_still_receives_credit():
    registry = PageRegistry([f"{BASE}/a", f"{BASE}/d"])
    registry.commit(f"{BASE}/d", PageFindings.failed(f"{BASE}/d", 404))
    registry.commit(f"{BASE}/a", ok(f"{BASE}/a", f"{BASE}/d"))
    d = registry[f"{BASE}/d"]
    assert d.status is PageStatus.ERROR
    assert d.status_code == 404
    assert d.used_count == 1


def test_record_finishes_only_once():
    registry = PageRegistry([f"{BASE}/a"])
    registry.commit(f"{BASE}/a", ok(f"{BASE}/a"))
    with pytest.raises(RuntimeError):
        registry.commit(f"{BASE}/a", ok(f"{BASE}/a"))


def test_commit_unknown_url_raises():
    with pytest.raises(KeyError):
        PageRegistry([f"{BASE}/a"]).commit(f"{BASE}/zzz", ok(f"{BASE}/zzz"))


def test_two_simultaneous_commits_on_one_target_both_count():
    registry = PageRegistry([f"{BASE}/a", f"{BASE}/b", f"{BASE}/target"])
    start = threading.Barrier(2)

    def commit(source: str) -> None:
        start.wait()
        registry.commit(source, ok(source, f"{BASE}/target"))

    with ThreadPoolExecutor(max_workers=2) as pool:
        list(pool.map(commit, [f"{BASE}/a", f"{BASE}/b"]))

    target = registry[f"{BASE}/target"]
    assert target.used_count == 2
    assert target.used_by_pages == {f"{BASE}/a": 1, f"{BASE}/b": 1}


@pytest.mark.slow()
def test_add_reference_has_no_lost_updates_under_thread_contention():
    record = PageRecord(url=f"{BASE}/hot")
    referrers = [f"{BASE}/r{i}" for i in range(8)]
    per_thread = 2000

    def hammer(referrer: str) -> None:
        for _ in range(per_thread):
            record.add_reference(referrer)

    with ThreadPoolExecutor(max_workers=len(referrers)) as pool:
        list(pool.map(hammer, referrers))

    assert record.used_count == per_thread * len(referrers)
    assert record.used_by_pages == {r: per_thread for r in referrers}
