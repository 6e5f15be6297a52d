"""sitemap_scout.parser: разбор XML sitemap и HTML страниц."""
