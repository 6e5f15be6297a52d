# File: tests/helpers.py
"""Builders for the HTML pages and sitemap documents served in tests."""
import gzip


def html_page(*hrefs: str, title: str = "", body: str = "") -> str:
    """Small HTML document with one anchor per *href*."""
    anchors = "".join(f'<a href="{href}">link</a>' for href in hrefs)
    return f"<html><head><title>{title}</title></head><body>{body}{anchors}</body></html>"


def urlset(*locs: str) -> str:
    entries = "".join(f"<url><loc>{loc}</loc></url>" for loc in locs)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{entries}</urlset>'
    )


def sitemap_index(*locs: str) -> str:
    entries = "".join(f"<sitemap><loc>{loc}</loc></sitemap>" for loc in locs)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{entries}</sitemapindex>'
    )


def corrupt_gzip(xml: str) -> bytes:
    """Valid gzip header followed by a deflate stream with an invalid block type."""
    data = bytearray(gzip.compress(xml.encode("utf-8")))
    data[10] = 0xFF
    return bytes(data)
