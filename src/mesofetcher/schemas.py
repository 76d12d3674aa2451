# src/mesofetcher/schemas.py

from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Relative to the working directory the tool is run from
DEFAULT_OUTPUT_FILE    = Path("output") / "meso_drop_data.sql"
DEFAULT_CATALOG_SOURCE = str(Path("data") / "monster_stats.json")


class MonsterStats(BaseModel):
    monster_id: int = Field(..., description="Monster (dropper) id, e.g. 100100")
    level: int = Field(..., ge=0, description="Monster level")
    is_boss: bool = Field(False, description="Whether the monster is flagged as a boss")


class MesoRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    minimum: int = Field(..., ge=0, description="Minimum meso quantity")
    maximum: int = Field(..., ge=0, description="Maximum meso quantity")


class FetcherConfig(BaseModel):
    permit_mesos_on_excluded_bosses: bool = Field(
        False,
        description="Skip the DELETE statement for the excluded zone (dojo bosses)."
    )
    meso_item_id: int = Field(
        0,
        description="Reserved item id that marks a meso (currency) drop."
    )
    min_items: int = Field(
        4,
        ge=1,
        description="Minimum number of drop rows a monster needs to be considered."
    )
    drop_chance: int = Field(
        400000,
        ge=0,
        description="Chance weight written on every generated meso row."
    )
    excluded_zone: Tuple[int, int] = Field(
        (9300184, 9300215),
        description="Inclusive (low, high) dropper id range that must never drop mesos."
    )
    output_file: Path = Field(
        DEFAULT_OUTPUT_FILE,
        description="Where the generated SQL script is written."
    )
    catalog_source: str = Field(
        DEFAULT_CATALOG_SOURCE,
        description="Monster stat catalog: JSON file path or http(s) URL."
    )
    db_url: Optional[str] = Field(
        None,
        description="SQLAlchemy URL of the store holding drop_data."
    )

    @field_validator("excluded_zone")
    @classmethod
    def _check_zone(cls, zone: Tuple[int, int]) -> Tuple[int, int]:
        low, high = zone
        if low > high:
            raise ValueError(f"excluded_zone low bound {low} exceeds high bound {high}")
        return zone


class RunOutcome(str, Enum):
    WRITTEN    = "written"
    UP_TO_DATE = "up_to_date"


class RunState(str, Enum):
    LOADING_STATS        = "LoadingStats"
    COMPUTING_RANGES     = "ComputingRanges"
    DETECTING_CANDIDATES = "DetectingCandidates"
    NOTHING_TO_DO        = "NothingToDo"
    RENDERING_SCRIPT     = "RenderingScript"
    DONE                 = "Done"
    FAILED               = "Failed"


class RunResult(BaseModel):
    outcome: RunOutcome = Field(..., description="Whether a script was produced.")
    state: RunState = Field(..., description="Terminal state of the run.")
    output_file: Optional[Path] = Field(
        None,
        description="Path of the written script; None when already up to date."
    )
    candidates: List[int] = Field(
        default_factory=list,
        description="Dropper ids that received a meso row, in script order."
    )
    elapsed_ms: int = Field(0, description="Wall time of the run in milliseconds.")
