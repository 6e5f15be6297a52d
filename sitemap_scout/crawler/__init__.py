"""sitemap_scout.crawler: загрузка sitemap, обход страниц и граф использования ссылок."""
