# tests/conftest.py

import json
import os
import sys

import pytest
import sqlalchemy as sa

# Ensure the 'src' directory is on sys.path to import our modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from mesofetcher.schemas import FetcherConfig
from mesofetcher.store import drop_data, metadata

# dropperid -> list of itemids recorded for it
DROP_ROWS = {
    100100: [4000019, 2000000, 2000001, 2010000],           # 4 items, no meso  -> candidate
    100101: [4000000, 2000000, 2000001, 2010000, 0],        # has meso          -> skipped
    100120: [4000016, 2000000, 2000002, 2010009, 4031161],  # 5 items, no meso  -> candidate
    130100: [4000003, 2000000, 2000001],                    # only 3 items      -> skipped
    8800000: [1002357, 1002390, 1002430, 2000005],          # boss, no meso     -> candidate
    9999999: [2000000, 2000001, 2000002, 2000003],          # not in catalog    -> filtered
}

CATALOG = {
    "100100": {"level": 2, "boss": False},
    "100101": {"level": 4, "boss": False},
    "100120": {"level": 10, "boss": False},
    "130100": {"level": 6, "boss": False},
    "8800000": {"level": 110, "boss": True},
}


def insert_drops(engine, rows):
    with engine.begin() as conn:
        for dropper_id, item_ids in rows.items():
            for item_id in item_ids:
                conn.execute(
                    drop_data.insert().values(
                        dropperid=dropper_id,
                        itemid=item_id,
                        minimum_quantity=1,
                        maximum_quantity=1,
                        questid=0,
                        chance=10000,
                    )
                )


@pytest.fixture
def store_engine(tmp_path):
    engine = sa.create_engine(f"sqlite:///{tmp_path / 'drops.db'}")
    metadata.create_all(engine)
    insert_drops(engine, DROP_ROWS)
    yield engine
    engine.dispose()


@pytest.fixture
def make_store(tmp_path):
    """Factory for extra SQLite stores holding the given drop rows."""
    engines = []

    def _make(name, rows):
        engine = sa.create_engine(f"sqlite:///{tmp_path / name}")
        metadata.create_all(engine)
        insert_drops(engine, rows)
        engines.append(engine)
        return engine

    yield _make
    for engine in engines:
        engine.dispose()


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "monster_stats.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path, catalog_file):
    return FetcherConfig(
        catalog_source=str(catalog_file),
        output_file=tmp_path / "out" / "meso_drop_data.sql",
        db_url=f"sqlite:///{tmp_path / 'drops.db'}",
    )
