"""Random item rewards for boss battles.

Rarity is drawn from cumulative thresholds:

    common      r <= 0.60   (60%)
    rare        r <= 0.85   (25%)
    epic        r <= 0.95   (10%)
    legendary   r <= 1.00   (5%)
"""

from __future__ import annotations

import random

from dreamgame.gamification.item_catalog import items_of_rarity

RARITY_THRESHOLDS: list[tuple[str, float]] = [
    ("common", 0.60),
    ("rare", 0.85),
    ("epic", 0.95),
    ("legendary", 1.00),
]


def roll_rarity(r: float) -> str:
    """Map a uniform draw in [0, 1) to a rarity tier."""
    for rarity, bound in RARITY_THRESHOLDS:
        if r <= bound:
            return rarity
    return RARITY_THRESHOLDS[-1][0]


def roll_item(rng: random.Random | None = None) -> dict:
    """Roll a rarity, then pick uniformly among the catalog items of that rarity.

    Returns a reward payload: ``{"type": "item", name, description, rarity, category}``.
    """
    rng = rng or random.Random()
    rarity = roll_rarity(rng.random())
    item = rng.choice(items_of_rarity(rarity))
    return {"type": "item", **item}
