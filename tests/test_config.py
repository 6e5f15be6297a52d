# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from sitemap_scout.config import DEFAULT_EXCLUDED_SEGMENTS, CrawlConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,expect_exc",
    [
        ("index_url: http://example.com/sitemap_index.xml", None),
        (json.dumps({"index_url": "http://example.com/sitemap_index.xml"}), None),
        ("{}", ValidationError),
        ("not: a: mapping", ValueError),
        ("::invalid yaml", TypeError),
        ("index_url: http://example.com/sitemap.xml\nbatch_size: 0", ValidationError),
        ("index_url: http://example.com/sitemap.xml\nunknown: 1", ValidationError),
    ],
)
def test_load_config_variants(tmp_path, content, expect_exc):
    suffix = ".yaml" if not content.strip().startswith("{") else ".json"
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, CrawlConfig)
        assert cfg.index == "http://example.com/sitemap_index.xml"
        assert cfg.batch_size == 5
        assert cfg.batch_delay == 0.2
        assert cfg.excluded_segments == DEFAULT_EXCLUDED_SEGMENTS


def test_load_config_default_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        load_config(None)


def test_load_config_default_present(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text(
        "index_url: https://example.com/wp-sitemap.xml\nbatch_size: 3\n", encoding="utf-8"
    )
    cfg = load_config(None)
    assert cfg.batch_size == 3


def test_unsupported_suffix(tmp_path):
    cfg_path = write_file(tmp_path, "index_url = 'x'", ".toml")
    with pytest.raises(ValueError):
        load_config(cfg_path)


def test_excluded_segments_from_comma_string():
    cfg = CrawlConfig(index_url="https://example.com/sitemap.xml", excluded_segments="media, assets")
    assert cfg.excluded_segments == ("media", "assets")


def test_config_is_frozen():
    cfg = CrawlConfig(index_url="https://example.com/sitemap.xml")
    with pytest.raises(ValidationError):
        cfg.batch_size = 10
