import json
import os
import sys

import pytest
import requests

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from mesofetcher import catalog
from mesofetcher.catalog import get_all_monster_stats, parse_catalog
from mesofetcher.errors import CatalogUnavailable


class DummyResponse:
    def __init__(self, json_data, status_code=200):
        self._json_data = json_data
        self.status_code = status_code

    def json(self):
        return self._json_data

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


def test_load_from_file(catalog_file):
    stats = get_all_monster_stats(catalog_file)
    assert set(stats) == {100100, 100101, 100120, 130100, 8800000}
    assert stats[8800000].level == 110
    assert stats[8800000].is_boss is True
    assert stats[100100].is_boss is False


def test_parse_list_shape():
    stats = parse_catalog([
        {"id": 100100, "level": 2, "boss": 0},
        {"monster_id": 8800000, "level": 110, "is_boss": True},
    ])
    assert stats[100100].is_boss is False
    assert stats[8800000].is_boss is True


def test_boss_flag_defaults_to_false():
    stats = parse_catalog({"100100": {"level": 2}})
    assert stats[100100].is_boss is False


def test_load_from_url(monkeypatch):
    seen = {}

    def fake_get(url, timeout):
        seen["url"] = url
        seen["timeout"] = timeout
        return DummyResponse({"100100": {"level": 2, "boss": False}})

    monkeypatch.setattr(catalog.requests, "get", fake_get)
    stats = get_all_monster_stats("https://example.org/mobs.json")
    assert seen == {"url": "https://example.org/mobs.json", "timeout": 30}
    assert stats[100100].level == 2


def test_http_error_is_catalog_unavailable(monkeypatch):
    monkeypatch.setattr(
        catalog.requests, "get", lambda url, timeout: DummyResponse({}, status_code=503)
    )
    with pytest.raises(CatalogUnavailable):
        get_all_monster_stats("https://example.org/mobs.json")


def test_missing_file_is_catalog_unavailable(tmp_path):
    with pytest.raises(CatalogUnavailable):
        get_all_monster_stats(tmp_path / "absent.json")


def test_bad_json_is_catalog_unavailable(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogUnavailable):
        get_all_monster_stats(path)


def test_negative_level_is_catalog_unavailable(tmp_path):
    path = tmp_path / "negative.json"
    path.write_text(json.dumps({"100100": {"level": -1}}), encoding="utf-8")
    with pytest.raises(CatalogUnavailable):
        get_all_monster_stats(path)


@pytest.mark.parametrize("flag, expected", [
    ("false", False), ("true", True), (0, False), (1, True), ("0", False), ("1", True),
])
def test_boss_flag_parsing(flag, expected):
    stats = parse_catalog({"100100": {"level": 2, "boss": flag}})
    assert stats[100100].is_boss is expected


def test_unparseable_boss_flag_is_catalog_unavailable(tmp_path):
    path = tmp_path / "bad_flag.json"
    path.write_text(json.dumps({"100100": {"level": 2, "boss": "sometimes"}}), encoding="utf-8")
    with pytest.raises(CatalogUnavailable):
        get_all_monster_stats(path)
