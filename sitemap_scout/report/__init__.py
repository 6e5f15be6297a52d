# File: sitemap_scout/report/__init__.py
"""sitemap_scout.report: Сериализация результатов обхода для внешнего слоя отчётов."""

from sitemap_scout.report.json_report import render_json

__all__ = ["render_json"]
