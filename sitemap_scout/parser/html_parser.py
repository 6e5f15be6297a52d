# === FILE: sitemap_scout/parser/html_parser.py ===
"""HTML analysis for SitemapScout.

:func:`parse_html` turns server-delivered markup into a :class:`ParsedPage`
holding what the link-usage audit needs:

* title — document ``<title>`` text or ``""`` if absent.
* meta_description — ``<meta name="description">`` content.
* canonical — ``<link rel="canonical">`` href.
* word_count — whitespace-delimited tokens of the visible body text
  (head, script, style, noscript and template content excluded).
* links — every ``<a href>`` target, absolute and normalised, one entry per
  anchor (duplicates are kept, each anchor is a separate reference).

JavaScript is never executed; only static markup is looked at.
"""
from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from sitemap_scout.utils import is_http_url, normalize_url

__all__: Sequence[str] = ("ParsedPage", "parse_html")

_SKIPPED_SCHEMES = ("mailto:", "javascript:", "tel:", "data:")
_INVISIBLE_TAGS = ["head", "title", "script", "style", "noscript", "template"]
_DESCRIPTION_RE = re.compile(r"^description$", re.IGNORECASE)


@dataclass(slots=True)
class ParsedPage:
    """Lightweight representation of an analysed HTML page."""

    url: str
    title: str = ""
    meta_description: str = ""
    canonical: str = ""
    word_count: int = 0
    links: list[str] = field(default_factory=list)


def _attr(tag: object, name: str) -> str:
    if not isinstance(tag, Tag):
        return ""
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value.strip() if isinstance(value, str) else ""


def _base_url(soup: BeautifulSoup, page_url: str) -> str:
    href = _attr(soup.find("base", href=True), "href")
    return urljoin(page_url, href) if href else page_url


def _extract_links(soup: BeautifulSoup, base_url: str) -> list[str]:
    links: list[str] = []
    for tag in soup.find_all("a", href=True):
        raw = _attr(tag, "href")
        if not raw or raw.lower().startswith(_SKIPPED_SCHEMES):
            continue
        absolute = urljoin(base_url, raw)
        if is_http_url(absolute):
            links.append(normalize_url(absolute))
    return links


def parse_html(html: Union[str, bytes], url: str) -> ParsedPage:
    """Parse *html* fetched from *url*.

    Bytes are handed to BeautifulSoup untouched so it can sniff the encoding.
    Relative links resolve against ``<base href>`` when present, else *url*.
    """
    soup = BeautifulSoup(html, "html.parser")

    title_tag = soup.find("title")
    title = " ".join(title_tag.get_text(" ").split()) if isinstance(title_tag, Tag) else ""
    description = _attr(soup.find("meta", attrs={"name": _DESCRIPTION_RE}), "content")
    canonical = _attr(soup.find("link", rel="canonical"), "href")

    links = _extract_links(soup, _base_url(soup, url))

    for element in soup(_INVISIBLE_TAGS):
        element.extract()
    body = soup.body if soup.body is not None else soup
    word_count = len(body.get_text(" ").split())

    return ParsedPage(
        url=url,
        title=title,
        meta_description=description,
        canonical=canonical,
        word_count=word_count,
        links=links,
    )
