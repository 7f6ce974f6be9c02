"""
Entity Records
===============
Plain dataclasses and closed enums. No behaviour beyond derived geometry;
updates live in systems.py, player.py and boss.py.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
# COLOURS (ANSI 256)
# =============================================================================

NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196
NEON_ORANGE = 208
NEON_PINK = 199
GOLD = 220

GRAY_LIGHT = 252
GRAY_MED = 245
GRAY_DARK = 238

WHITE = 255


# =============================================================================
# ENUMS
# =============================================================================

class Phase(Enum):
    """Run phase."""
    SCAVENGE = 'scavenge'
    BOSS = 'boss'


class Outcome(Enum):
    """Terminal state of a run."""
    WIN = 'win'
    LOSE = 'lose'


class BlockType(Enum):
    """Block variants: (label, hp multiplier, fixed hp, base score, colour)."""
    NORMAL = ('normal', 1, None, 100, GRAY_LIGHT)
    HARD = ('hard', 3, None, 100, NEON_PINK)
    RESOURCE = ('resource', 1, None, 100, NEON_GREEN)
    GOLDEN = ('golden', 1, 3, 1000, GOLD)

    def __init__(self, label, hp_multiplier, fixed_hp, base_score, color):
        self.label = label
        self.hp_multiplier = hp_multiplier
        self.fixed_hp = fixed_hp
        self.base_score = base_score
        self.color = color


class ItemType(Enum):
    """Power-up variants: (label, pickup text, colour)."""
    ATK = ('atk', '+ATK', NEON_PINK)
    SPD = ('spd', '+SPD', NEON_CYAN)
    DEF = ('def', '+DEF', NEON_YELLOW)
    HP = ('hp', '+HP', NEON_GREEN)
    BEAM = ('beam', 'BEAM UNLOCKED!', NEON_CYAN)
    SWORD = ('sword', 'SWORD EQUIPPED!', NEON_ORANGE)
    MAGNET = ('magnet', 'MAGNET ACTIVE!', NEON_MAGENTA)
    INVINCIBLE = ('invincible', 'INVINCIBLE!', WHITE)

    def __init__(self, label, pickup_text, color):
        self.label = label
        self.pickup_text = pickup_text
        self.color = color


class ProjectileType(Enum):
    """
    Projectile variants: (label, width, height, hostile, piercing, damage).

    For player projectiles `damage` is dealt per hit to blocks and the boss.
    For hostile projectiles it is the default damage to the player when the
    projectile carries no explicit override.
    """
    BEAM = ('beam', 20, 40, False, True, 0.5)
    BULLET = ('bullet', 10, 10, False, False, 1.0)
    BOSS_BULLET = ('boss_bullet', 10, 10, True, False, 5.0)
    HOMING_MISSILE = ('homing_missile', 12, 12, True, False, 5.0)
    BOSS_BEAM = ('boss_beam', 24, 40, True, False, 20.0)
    BOOMERANG = ('boomerang', 18, 18, True, False, 5.0)
    DEATH_RAY = ('death_ray', 30, 60, True, False, 20.0)

    def __init__(self, label, width, height, hostile, piercing, damage):
        self.label = label
        self.width = width
        self.height = height
        self.hostile = hostile
        self.piercing = piercing
        self.damage = damage

    @property
    def radius(self) -> float:
        return max(self.width, self.height) / 2


# =============================================================================
# ENTITY RECORDS
# =============================================================================

BASE_BLOCK_HP = 10


@dataclass(eq=False)
class Block:
    """Axis-aligned breakable block. Position is the top-left corner."""
    x: float
    y: float
    width: float
    height: float
    block_type: BlockType = BlockType.NORMAL
    hp: float = 0.0
    max_hp: float = 0.0
    active: bool = True

    def __post_init__(self):
        if self.hp <= 0:
            if self.block_type.fixed_hp is not None:
                self.hp = float(self.block_type.fixed_hp)
            else:
                self.hp = float(BASE_BLOCK_HP * self.block_type.hp_multiplier)
        self.max_hp = self.hp

    @property
    def center(self):
        return self.x + self.width / 2, self.y + self.height / 2


@dataclass(eq=False)
class Item:
    """Falling power-up. Position is the centre."""
    x: float
    y: float
    item_type: ItemType
    radius: float = 15.0
    active: bool = True
    pulse: float = 0.0


@dataclass(eq=False)
class Projectile:
    """Moving projectile. Position is the centre."""
    x: float
    y: float
    vx: float
    vy: float
    projectile_type: ProjectileType
    damage: Optional[float] = None  # Explicit override of the type default
    active: bool = True
    age: float = 0.0
    ttl: Optional[float] = None  # Seconds; None lives until off-screen
    return_delay: float = 0.0  # Boomerang only
    returning: bool = False

    @property
    def radius(self) -> float:
        return self.projectile_type.radius

    @property
    def width(self) -> float:
        return self.projectile_type.width

    @property
    def height(self) -> float:
        return self.projectile_type.height

    @property
    def hostile(self) -> bool:
        return self.projectile_type.hostile

    @property
    def effective_damage(self) -> float:
        if self.damage is not None:
            return self.damage
        return self.projectile_type.damage


@dataclass(eq=False)
class FloatingText:
    """Cosmetic score/status popup that drifts upward and expires."""
    x: float
    y: float
    text: str
    color: int = WHITE
    life: float = 1.0
    vy: float = -50.0
    active: bool = True
