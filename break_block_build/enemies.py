"""
Mini-Boss Archetype
====================
Scavenge-phase mini-boss: a slow descending brick that drifts toward the
player and drops a stat bundle when broken.
"""

from dataclasses import dataclass
import math
import random

from .components import ItemType


MINI_BOSS_SIZE = 80.0
MINI_BOSS_HP = 50.0
MINI_BOSS_DESCENT = 50.0
MINI_BOSS_TRACK_SPEED = 30.0
MINI_BOSS_SCORE = 500
MINI_BOSS_DROPS = (ItemType.ATK, ItemType.SPD, ItemType.DEF)


@dataclass(eq=False)
class MiniBoss:
    """Rectangle positioned by its top-left corner."""
    x: float
    y: float
    width: float = MINI_BOSS_SIZE
    height: float = MINI_BOSS_SIZE
    hp: float = MINI_BOSS_HP
    max_hp: float = MINI_BOSS_HP
    vy: float = MINI_BOSS_DESCENT
    active: bool = True


def create_mini_boss(rng: random.Random, width: float) -> MiniBoss:
    """Spawn above the top edge at a random column."""
    x = rng.random() * max(0.0, width - MINI_BOSS_SIZE)
    return MiniBoss(x=x, y=-100.0)


def update_mini_boss(mini: MiniBoss, dt: float, target_x: float) -> None:
    """Descend and drift horizontally toward the target."""
    mini.y += mini.vy * dt
    dx = target_x - (mini.x + mini.width / 2)
    if dx != 0:
        mini.x += math.copysign(MINI_BOSS_TRACK_SPEED * dt, dx)
