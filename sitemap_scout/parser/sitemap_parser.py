# File: sitemap_scout/parser/sitemap_parser.py
"""sitemap_scout.parser.sitemap_parser: Модуль для парсинга sitemap.xml / sitemap index и извлечения URL."""

from __future__ import annotations

import gzip
import zlib
from dataclasses import dataclass, field
from typing import List, Union

from lxml import etree

__all__ = ("SitemapDocument", "SitemapParseError", "parse_sitemap_document")

SITEMAP_INDEX = "sitemapindex"
URLSET = "urlset"

_GZIP_MAGIC = b"\x1f\x8b"


class SitemapParseError(ValueError):
    """XML sitemap не удалось разобрать или корневой элемент неизвестен."""


@dataclass(slots=True)
class SitemapDocument:
    """Разобранный sitemap: тип корня (``sitemapindex``/``urlset``) и URL из <loc>."""

    kind: str
    locs: List[str] = field(default_factory=list)

    @property
    def is_index(self) -> bool:
        return self.kind == SITEMAP_INDEX


def _to_bytes(content: Union[str, bytes]) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    if content[:2] == _GZIP_MAGIC:
        try:
            return gzip.decompress(content)
        except (OSError, EOFError, zlib.error) as exc:
            raise SitemapParseError(f"Повреждённый gzip sitemap: {exc}") from exc
    return content


def parse_sitemap_document(content: Union[str, bytes]) -> SitemapDocument:
    """Разбирает sitemap index или urlset и возвращает :class:`SitemapDocument`.

    Args:
        content: строка или байты с содержимым sitemap (gzip распаковывается автоматически).

    Returns:
        SitemapDocument с URL в порядке документа.

    Raises:
        SitemapParseError: если XML некорректен или корень не ``sitemapindex``/``urlset``.
    """
    parser = etree.XMLParser(ns_clean=True, recover=False, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(_to_bytes(content), parser=parser)
    except etree.XMLSyntaxError as exc:
        raise SitemapParseError(f"Некорректный XML sitemap: {exc}") from exc
    if root is None:
        raise SitemapParseError("Пустой sitemap")

    kind = etree.QName(root).localname
    if kind == SITEMAP_INDEX:
        locs = root.findall("{*}sitemap/{*}loc")
    elif kind == URLSET:
        locs = root.findall("{*}url/{*}loc")
    else:
        raise SitemapParseError(f"Неизвестный корневой элемент sitemap: <{kind}>")
    return SitemapDocument(kind=kind, locs=[loc.text.strip() for loc in locs if loc.text and loc.text.strip()])

