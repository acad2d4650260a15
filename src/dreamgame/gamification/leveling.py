"""Level curve and computation.

Each level costs 20% more than the previous one:

    xp_to_reach_level(n) = floor(1000 * 1.2 ** (n - 1))    for n >= 2

A user is at level L when cumulative_xp(L) <= xp < cumulative_xp(L + 1).
These values MUST match the client's progress bar.
"""

from __future__ import annotations

import math
from functools import lru_cache

MAX_LEVEL = 99
BASE_XP = 1000
LEVEL_MULTIPLIER = 1.2


@lru_cache(maxsize=None)
def xp_to_reach_level(level: int) -> int:
    """XP needed to go from ``level - 1`` to ``level``."""
    if level <= 1:
        return 0
    return math.floor(BASE_XP * LEVEL_MULTIPLIER ** (level - 1))


@lru_cache(maxsize=None)
def cumulative_xp(level: int) -> int:
    """Total XP needed to reach ``level`` from zero.

    Defined up to ``MAX_LEVEL + 1`` so the cap has an upper bound.
    """
    level = min(level, MAX_LEVEL + 1)
    return sum(xp_to_reach_level(i) for i in range(1, level + 1))


def level_for_xp(total_xp: int) -> int:
    """Highest level whose cumulative requirement is covered by ``total_xp``."""
    total_xp = max(total_xp, 0)
    level = 1
    while level < MAX_LEVEL and cumulative_xp(level + 1) <= total_xp:
        level += 1
    return level


def level_progress(total_xp: int) -> dict:
    """Compute level info from total XP.

    Returns the current level, the XP earned inside it, the size of the
    level and the progress percentage towards the next one.
    """
    total_xp = max(total_xp, 0)
    level = level_for_xp(total_xp)
    floor_xp = cumulative_xp(level)
    current_level_xp = total_xp - floor_xp

    # At max level there is nothing left to earn
    if level >= MAX_LEVEL:
        return {
            "current_level": level,
            "current_level_xp": current_level_xp,
            "next_level_xp": 0,
            "progress": 100.0,
        }

    next_level_xp = cumulative_xp(level + 1) - floor_xp
    progress = min(current_level_xp / next_level_xp * 100, 100.0)
    return {
        "current_level": level,
        "current_level_xp": current_level_xp,
        "next_level_xp": next_level_xp,
        "progress": round(progress, 2),
    }


def level_table() -> list[dict]:
    """All levels with their incremental and cumulative XP requirements."""
    return [
        {
            "level": level,
            "xp_required": xp_to_reach_level(level),
            "cumulative": cumulative_xp(level),
        }
        for level in range(1, MAX_LEVEL + 1)
    ]
