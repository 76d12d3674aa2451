# src/mesofetcher/ranges.py

import math
from typing import Dict, Mapping

from .schemas import MesoRange, MonsterStats

# Levels at or above this use the high-level curve
HIGH_LEVEL_THRESHOLD = 90

# (coefficient, exponent) pairs for min/max of each curve
LOW_LEVEL_CURVE = {
    "min": (30.32032228, 0.03281144930),
    "max": (44.45878459, 0.03289611686),
}
HIGH_LEVEL_CURVE = {
    "min": (72.70814714, 0.02284640619),
    "max": (133.8194881, 0.02059225059),
}

BOSS_MIN_MULT = 3
BOSS_MAX_MULT = 10


def _curve_value(coeff: float, exponent: float, level: int) -> int:
    # int() truncates toward zero; never round here
    return int(coeff * math.exp(exponent * level))


def compute_range(level: int, is_boss: bool) -> MesoRange:
    """
    Meso drop range for a monster of the given level.

    Below level 90 the low-level curve is used, from 90 upwards the high-level
    one. Bosses get their minimum tripled and maximum multiplied by ten after
    truncation.
    """
    curve = LOW_LEVEL_CURVE if level < HIGH_LEVEL_THRESHOLD else HIGH_LEVEL_CURVE
    minimum = _curve_value(*curve["min"], level)
    maximum = _curve_value(*curve["max"], level)

    if is_boss:
        minimum *= BOSS_MIN_MULT
        maximum *= BOSS_MAX_MULT

    return MesoRange(minimum=minimum, maximum=maximum)


def compute_all_ranges(stats: Mapping[int, MonsterStats]) -> Dict[int, MesoRange]:
    """Return monster_id -> MesoRange for every monster in the catalog."""
    return {
        monster_id: compute_range(mob.level, mob.is_boss)
        for monster_id, mob in stats.items()
    }
