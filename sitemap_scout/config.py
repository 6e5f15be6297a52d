# === FILE: sitemap_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации обхода SitemapScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
)

DEFAULT_EXCLUDED_SEGMENTS: tuple[str, ...] = ("wp-content", "wp-includes", "uploads")


class CrawlConfig(BaseModel):
    """Конфигурация для одного запуска обхода sitemap."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    index_url: HttpUrl = Field(..., description="URL sitemap index (или одиночного sitemap).")
    batch_size: int = Field(5, ge=1, description="Число страниц, загружаемых одновременно в одной волне.")
    batch_delay: float = Field(0.2, ge=0, description="Пауза между волнами (секунд).")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("SitemapScoutBot/1.0", min_length=1, description="Заголовок User-Agent.")
    excluded_segments: tuple[str, ...] = Field(
        DEFAULT_EXCLUDED_SEGMENTS,
        description="Сегменты пути, по которым URL считается ассетом и не обходится.",
    )
    under_linked_threshold: int = Field(
        2, ge=1, description="Страница с 0 < used_count < порога считается слабо связанной."
    )

    @field_validator("excluded_segments", mode="before")
    def _split_segments(cls, v: Any) -> Any:
        if isinstance(v, str):
            return tuple(s.strip() for s in v.split(",") if s.strip())
        return v

    @property
    def index(self) -> str:
        """URL индекса в виде строки."""
        return str(self.index_url)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return CrawlConfig(**data)


__all__ = ["CrawlConfig", "load_config", "DEFAULT_EXCLUDED_SEGMENTS"]
