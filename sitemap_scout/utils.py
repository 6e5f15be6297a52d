# File: sitemap_scout/utils.py
"""sitemap_scout.utils: Утилитарные функции для нормализации URL, проверки origin и фильтрации ассетов."""

from __future__ import annotations

import posixpath
from typing import Collection, List, Sequence
from urllib.parse import unquote, urlsplit, urlunsplit

from sitemap_scout.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "origin_of",
    "same_origin",
    "is_http_url",
    "is_reserved_url",
    "sitemap_short_name",
    "remove_duplicates",
)


def normalize_url(url: str) -> str:
    """Канонизирует URL для сравнения: приводит scheme и host к нижнему регистру,
    убирает фрагмент и завершающий слеш пути; query не трогает.

    Функция тотальная и идемпотентна: ``normalize_url(normalize_url(x)) == normalize_url(x)``.
    """
    parts = urlsplit(url.strip())
    path = parts.path.rstrip("/")
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))


def origin_of(url: str) -> str:
    """Возвращает origin (``scheme://host[:port]``) в нижнем регистре."""
    parts = urlsplit(url)
    return f"{parts.scheme.lower()}://{parts.netloc.lower()}"


def same_origin(url: str, origin: str) -> bool:
    """Проверяет, что URL принадлежит origin корня обхода."""
    return origin_of(url) == origin.lower().rstrip("/")


def is_http_url(url: str) -> bool:
    """True для абсолютных http(s) URL с хостом."""
    parts = urlsplit(url)
    return parts.scheme.lower() in ("http", "https") and bool(parts.netloc)


def is_reserved_url(url: str, reserved_segments: Collection[str]) -> bool:
    """Проверяет, содержит ли путь URL зарезервированный сегмент (uploads, wp-content и т.п.)."""
    if not reserved_segments:
        return False
    reserved = {segment.strip("/").lower() for segment in reserved_segments}
    segments = [s.lower() for s in unquote(urlsplit(url).path).split("/") if s]
    hit = any(s in reserved for s in segments)
    if hit:
        logger.debug("Reserved asset URL skipped: %s", url)
    return hit


def sitemap_short_name(url: str) -> str:
    """Короткое имя sitemap: stem имени файла (``/page-sitemap.xml`` → ``page-sitemap``)."""
    name = posixpath.basename(urlsplit(url).path.rstrip("/"))
    for suffix in (".gz", ".xml"):
        if name.lower().endswith(suffix):
            name = name[: -len(suffix)]
    return name or urlsplit(url).netloc


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
