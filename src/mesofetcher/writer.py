# src/mesofetcher/writer.py

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Mapping, Sequence, Union

from .schemas import FetcherConfig, MesoRange

logger = logging.getLogger(__name__)

INSERT_HEADER_SQL = (
    "INSERT IGNORE INTO drop_data (dropperid, itemid, minimum_quantity, "
    "maximum_quantity, questid, chance) VALUES"
)
DELETE_EXCLUDED_SQL = (
    "DELETE FROM drop_data WHERE dropperid BETWEEN {low} AND {high} AND itemid = {item_id};"
)


def _header_lines(min_items: int) -> List[str]:
    return [
        "# SQL file autogenerated by mesofetcher.",
        "# Meso ranges take into account mob stats such as level and boss status.",
        f"# Only mobs with {min_items} or more items and no meso entry on the source DB are presented here.",
        "",
    ]


def _row(dropper_id: int, meso: MesoRange, config: FetcherConfig, terminator: str) -> str:
    return (
        f"({dropper_id}, {config.meso_item_id}, {meso.minimum}, {meso.maximum}, "
        f"0, {config.drop_chance}){terminator}"
    )


def render_script(
    candidates: Sequence[int],
    ranges: Mapping[int, MesoRange],
    config: FetcherConfig,
) -> str:
    """
    Render the proposal script for the given droppers.

    Rows keep the order of `candidates`; every row but the last ends in a
    comma and the last one closes the INSERT with a semicolon. Unless mesos
    are permitted on the excluded zone, a DELETE for that id range follows.
    Droppers without a computed range are left out.
    """
    rows = [(dropper_id, ranges[dropper_id]) for dropper_id in candidates if dropper_id in ranges]
    if not rows:
        raise ValueError("Cannot render a meso script without candidates")

    lines = _header_lines(config.min_items)
    lines.append(INSERT_HEADER_SQL)

    last = len(rows) - 1
    for i, (dropper_id, meso) in enumerate(rows):
        lines.append(_row(dropper_id, meso, config, ";" if i == last else ","))

    if not config.permit_mesos_on_excluded_bosses:
        low, high = config.excluded_zone
        lines.append("")
        lines.append(DELETE_EXCLUDED_SQL.format(low=low, high=high, item_id=config.meso_item_id))

    return "\n".join(lines) + "\n"


def write_script(
    path: Union[str, Path],
    candidates: Sequence[int],
    ranges: Mapping[int, MesoRange],
    config: FetcherConfig,
) -> Path:
    """
    Render and write the script to `path`.

    The text goes to a temporary file beside the target which replaces it
    only once fully written, so a failed run never leaves a partial script.
    """
    path = Path(path)
    script = render_script(candidates, ranges, config)

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(script)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    rendered = sum(1 for dropper_id in candidates if dropper_id in ranges)
    logger.info(f"Wrote {rendered} meso rows to {path}")
    return path
