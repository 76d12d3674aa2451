# src/mesofetcher/catalog.py

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import requests
from pydantic import ValidationError

from .errors import CatalogUnavailable
from .schemas import MonsterStats

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _read_source(source: Union[str, Path]) -> Any:
    source = str(source)
    if _is_url(source):
        resp = requests.get(source, timeout=FETCH_TIMEOUT)
        resp.raise_for_status()
        return resp.json()
    with open(source, "r", encoding="utf-8") as f:
        return json.load(f)


def parse_catalog(raw: Any) -> Dict[int, MonsterStats]:
    """
    Turn a raw catalog document into monster_id -> MonsterStats.

    Two shapes are accepted:
      - an object keyed by monster id: {"100100": {"level": 2, "boss": false}}
      - a list of entries carrying "id" or "monster_id"
    The boss flag may be spelled "boss" or "is_boss".
    """
    if isinstance(raw, dict):
        entries = [dict(meta, monster_id=int(key)) for key, meta in raw.items()]
    elif isinstance(raw, list):
        entries = [dict(meta) for meta in raw]
    else:
        raise ValueError(f"Unsupported catalog document type: {type(raw).__name__}")

    stats: Dict[int, MonsterStats] = {}
    for entry in entries:
        if "monster_id" not in entry and "id" in entry:
            entry["monster_id"] = entry.pop("id")
        if "is_boss" not in entry and "boss" in entry:
            entry["is_boss"] = entry.pop("boss")
        mob = MonsterStats(**entry)
        stats[mob.monster_id] = mob
    return stats


def get_all_monster_stats(source: Union[str, Path]) -> Dict[int, MonsterStats]:
    """Load every monster's level and boss flag from the catalog source."""
    try:
        raw = _read_source(source)
        stats = parse_catalog(raw)
    except (OSError, ValueError, TypeError, requests.RequestException, ValidationError) as exc:
        raise CatalogUnavailable(f"Cannot load monster stats from {source}: {exc}") from exc

    logger.info(f"Loaded {len(stats)} monster stats from {source}")
    return stats
