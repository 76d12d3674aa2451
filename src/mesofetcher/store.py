# src/mesofetcher/store.py

import logging
import os
from typing import Iterable, List, Mapping, Optional

import sqlalchemy as sa
from sqlalchemy import Column, Integer, MetaData, Table
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .errors import StoreQueryFailed
from .schemas import MesoRange

logger = logging.getLogger(__name__)

metadata = MetaData()

# Only the columns the audit reads or the generated script writes
drop_data = Table(
    "drop_data", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("dropperid", Integer, nullable=False, index=True),
    Column("itemid", Integer, nullable=False, default=0),
    Column("minimum_quantity", Integer, nullable=False, default=1),
    Column("maximum_quantity", Integer, nullable=False, default=1),
    Column("questid", Integer, nullable=False, default=0),
    Column("chance", Integer, nullable=False, default=0),
)


def create_store_engine(db_url: Optional[str] = None) -> Engine:
    """
    Build the engine for the drop store. Falls back to the DB_URL
    environment variable when no URL is given.
    """
    db_url = db_url or os.environ.get("DB_URL")
    if not db_url:
        raise StoreQueryFailed("No database URL given and DB_URL is not set")
    try:
        return sa.create_engine(db_url)
    except (SQLAlchemyError, ImportError, ValueError) as exc:
        raise StoreQueryFailed(f"Cannot create engine for {db_url}: {exc}") from exc


def missing_meso_query(min_items: int, meso_item_id: int) -> sa.Select:
    """
    Droppers with at least `min_items` rows and no row for the meso item.
    """
    meso_droppers = (
        sa.select(drop_data.c.dropperid)
        .where(drop_data.c.itemid == meso_item_id)
        .distinct()
    )
    return (
        sa.select(drop_data.c.dropperid)
        .where(drop_data.c.dropperid.not_in(meso_droppers))
        .group_by(drop_data.c.dropperid)
        .having(sa.func.count() >= min_items)
        .order_by(drop_data.c.dropperid)
    )


def find_missing_meso_droppers(engine: Engine, min_items: int, meso_item_id: int) -> List[int]:
    stmt = missing_meso_query(min_items, meso_item_id)
    try:
        with engine.connect() as conn:
            dropper_ids = [int(dropper_id) for dropper_id in conn.execute(stmt).scalars()]
    except SQLAlchemyError as exc:
        raise StoreQueryFailed(f"Missing meso query failed: {exc}") from exc

    logger.info(
        f"{len(dropper_ids)} droppers with >= {min_items} items lack item {meso_item_id}"
    )
    return dropper_ids


def filter_known_droppers(
    dropper_ids: Iterable[int], ranges: Mapping[int, MesoRange]
) -> List[int]:
    """
    Keep only droppers the stat catalog knows about, preserving order.
    Unknown ids are skipped; they are logged but are not an error.
    """
    known: List[int] = []
    unknown: List[int] = []
    for dropper_id in dropper_ids:
        if dropper_id in ranges:
            known.append(dropper_id)
        else:
            unknown.append(dropper_id)

    if unknown:
        logger.warning(f"Skipped {len(unknown)} droppers missing from the stat catalog")
        logger.debug(f"Skipped dropper ids: {unknown}")
    return known
