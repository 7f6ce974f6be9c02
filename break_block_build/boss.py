"""
Boss
=====
Phase-based boss AI.

Phases are looked up in PHASE_TABLE by number; each entry fixes the
movement pattern, sword-shield size, main attack cooldown and which attack
patterns are live. Every attack pattern is its own variant with its own
timers, so each can be exercised in isolation:

    direct    aimed bullet at the target's current position
    missile   burst of homing missile pairs
    beam      arms when the target is beneath, charges, then fires
    barrage   wide fan of bullets            (phase >= 2)
    boomerang outward throw that curves back  (phase >= 3)

Fired projectiles go into a bounded outbound queue that the Game drains
once per frame with poll_projectiles().
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, Dict, List, Tuple
import logging
import math

from .components import Projectile, ProjectileType
from .physics import Circle

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

BOSS_SIZE = 100.0
BOSS_MAX_HP = 1000.0
QUEUE_LIMIT = 64

TRACK_SPEED = 100.0
TRACK_DEADZONE = 10.0
HOVER_BASE_Y = 50.0
HOVER_AMPLITUDE = 20.0
ORBIT_RADIUS = 250.0
ORBIT_ANGULAR_SPEED = 1.2
ORBIT_FOLLOW_SPEED = 300.0
ZIGZAG_SPEED = 280.0
ZIGZAG_BASE_Y = 90.0
ZIGZAG_AMPLITUDE = 60.0

SHIELD_RADIUS = 90.0
SHIELD_SPIN = 2.0
SHIELD_TIP_RADIUS = 15.0

BULLET_SPEED = 400.0
MISSILE_SPEED = 150.0
MISSILE_DROP = 50.0
MISSILE_TTL = 6.0
BEAM_SPEED = 600.0
BEAM_SEGMENTS = 5
BEAM_SEGMENT_SPACING = 40.0
BEAM_DAMAGE = 20.0
BARRAGE_COUNT = 11
BARRAGE_SPREAD = math.radians(120)
BARRAGE_SPEED = 250.0
BOOMERANG_SPEED = 320.0
BOOMERANG_RETURN_DELAY = 0.9
BOOMERANG_TTL = 5.0


class Movement(Enum):
    TRACK = auto()
    ORBIT = auto()
    ZIGZAG = auto()


@dataclass(frozen=True)
class PhaseSpec:
    """Everything that changes when the boss enters a phase."""
    phase: int
    hp_fraction: float  # Entered once hp / max_hp drops to this or below
    sword_count: int
    attack_cooldown: float
    missile_burst: int
    movement: Movement
    patterns: Tuple[str, ...]


PHASE_TABLE: Dict[int, PhaseSpec] = {
    1: PhaseSpec(1, 1.00, 0, 2.0, 3, Movement.TRACK,
                 ('direct', 'missile', 'beam')),
    2: PhaseSpec(2, 0.66, 2, 1.5, 3, Movement.ORBIT,
                 ('direct', 'missile', 'beam', 'barrage')),
    3: PhaseSpec(3, 0.33, 4, 1.0, 5, Movement.ZIGZAG,
                 ('direct', 'missile', 'beam', 'barrage', 'boomerang')),
}


# =============================================================================
# ATTACK PATTERNS
# =============================================================================

@dataclass
class AttackPattern:
    """Base variant: a cooldown timer plus whatever state the attack needs."""
    kind: ClassVar[str] = 'base'
    cooldown: float = 1.0
    timer: float = 0.0

    def update(self, boss: 'Boss', dt: float, tx: float, ty: float) -> List[Projectile]:
        raise NotImplementedError


@dataclass
class DirectFire(AttackPattern):
    """Single bullet aimed where the target is at the moment of firing."""
    kind: ClassVar[str] = 'direct'

    def update(self, boss, dt, tx, ty):
        self.timer += dt
        if self.timer < boss.spec.attack_cooldown:
            return []
        self.timer = 0.0

        cx, cy = boss.center
        dx, dy = tx - cx, ty - cy
        distance = math.hypot(dx, dy)
        if distance < 1e-6:
            dx, dy, distance = 0.0, 1.0, 1.0
        return [Projectile(
            cx, cy,
            dx / distance * BULLET_SPEED, dy / distance * BULLET_SPEED,
            ProjectileType.BOSS_BULLET,
        )]


@dataclass
class MissileBurst(AttackPattern):
    """Every cooldown, fire `spec.missile_burst` volleys of two homing missiles."""
    kind: ClassVar[str] = 'missile'
    cooldown: float = 5.0
    burst_delay: float = 0.5
    firing: bool = False
    burst_count: int = 0
    burst_timer: float = 0.0

    def update(self, boss, dt, tx, ty):
        self.timer += dt
        if not self.firing and self.timer > self.cooldown:
            self.firing = True
            self.timer = 0.0
            self.burst_count = 0
            self.burst_timer = 0.0

        if not self.firing:
            return []

        self.burst_timer -= dt
        if self.burst_timer > 0:
            return []

        self.burst_count += 1
        self.burst_timer = self.burst_delay
        if self.burst_count >= boss.spec.missile_burst:
            self.firing = False

        mid_y = boss.y + boss.height / 2
        return [
            Projectile(boss.x, mid_y, -MISSILE_SPEED, MISSILE_DROP,
                       ProjectileType.HOMING_MISSILE, ttl=MISSILE_TTL),
            Projectile(boss.x + boss.width, mid_y, MISSILE_SPEED, MISSILE_DROP,
                       ProjectileType.HOMING_MISSILE, ttl=MISSILE_TTL),
        ]


@dataclass
class BeamAttack(AttackPattern):
    """Arms only with the target beneath the boss, charges, then fires a column."""
    kind: ClassVar[str] = 'beam'
    cooldown: float = 6.0
    charge_duration: float = 1.0
    charging: bool = False
    charge_timer: float = 0.0

    def update(self, boss, dt, tx, ty):
        if not self.charging:
            self.timer += dt
            if self.timer >= self.cooldown and boss.target_beneath(tx, ty):
                self.charging = True
                self.charge_timer = 0.0
                logger.debug('Boss beam armed at x=%.0f', tx)
            return []

        self.charge_timer += dt
        if self.charge_timer < self.charge_duration:
            return []

        self.charging = False
        self.charge_timer = 0.0
        self.timer = 0.0
        cx = boss.x + boss.width / 2
        bottom = boss.y + boss.height
        return [
            Projectile(cx, bottom + i * BEAM_SEGMENT_SPACING, 0.0, BEAM_SPEED,
                       ProjectileType.BOSS_BEAM, damage=BEAM_DAMAGE)
            for i in range(BEAM_SEGMENTS)
        ]

    @property
    def progress(self) -> float:
        if not self.charging:
            return 0.0
        return min(1.0, self.charge_timer / self.charge_duration)


@dataclass
class Barrage(AttackPattern):
    """Fan of bullets spread evenly around straight down."""
    kind: ClassVar[str] = 'barrage'
    cooldown: float = 4.0

    def update(self, boss, dt, tx, ty):
        self.timer += dt
        if self.timer < self.cooldown:
            return []
        self.timer = 0.0

        cx, cy = boss.center
        start = math.pi / 2 - BARRAGE_SPREAD / 2
        step = BARRAGE_SPREAD / (BARRAGE_COUNT - 1)
        shots = []
        for i in range(BARRAGE_COUNT):
            angle = start + step * i
            shots.append(Projectile(
                cx, cy,
                math.cos(angle) * BARRAGE_SPEED, math.sin(angle) * BARRAGE_SPEED,
                ProjectileType.BOSS_BULLET,
            ))
        return shots


@dataclass
class BoomerangThrow(AttackPattern):
    """Two boomerangs thrown sideways; they fall while outbound, then return."""
    kind: ClassVar[str] = 'boomerang'
    cooldown: float = 5.0

    def update(self, boss, dt, tx, ty):
        self.timer += dt
        if self.timer < self.cooldown:
            return []
        self.timer = 0.0

        cx, cy = boss.center
        return [
            Projectile(cx, cy, direction * BOOMERANG_SPEED, 0.0,
                       ProjectileType.BOOMERANG, ttl=BOOMERANG_TTL,
                       return_delay=BOOMERANG_RETURN_DELAY)
            for direction in (-1, 1)
        ]


def create_attack_patterns() -> Dict[str, AttackPattern]:
    patterns = (DirectFire(), MissileBurst(), BeamAttack(), Barrage(), BoomerangThrow())
    return {p.kind: p for p in patterns}


# =============================================================================
# BOSS
# =============================================================================

class Boss:
    """
    The end-of-run boss. Rectangle positioned by its top-left corner.

    Phase only ever increases; entering a phase applies that phase's
    sword count, cooldown and movement from PHASE_TABLE.
    """

    # Ultimate charge is queryable by renderers but has no attack behind it.
    ultimate_enabled = False

    def __init__(self, x: float, y: float, max_hp: float = BOSS_MAX_HP):
        self.x = x
        self.y = y
        self.width = BOSS_SIZE
        self.height = BOSS_SIZE
        self.hp = max_hp
        self.max_hp = max_hp
        self.active = True

        self.phase = 1
        self.timer = 0.0
        self.sword_count = 0
        self.sword_angle = 0.0
        self.orbit_angle = -math.pi / 2
        self.zigzag_dir = 1.0

        self.patterns = create_attack_patterns()
        self._queue = deque(maxlen=QUEUE_LIMIT)

    @property
    def spec(self) -> PhaseSpec:
        return PHASE_TABLE[self.phase]

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    @property
    def hp_ratio(self) -> float:
        return max(0.0, self.hp / self.max_hp)

    @property
    def defeated(self) -> bool:
        return self.hp <= 0

    # -------------------------------------------------------------------------
    # Damage & phases
    # -------------------------------------------------------------------------

    def take_damage(self, amount: float) -> None:
        self.hp -= amount
        self.update_phase()

    def update_phase(self) -> bool:
        """Advance to the deepest phase whose hp threshold has been crossed."""
        ratio = self.hp_ratio
        target = self.phase
        for number, spec in PHASE_TABLE.items():
            if number > target and ratio <= spec.hp_fraction:
                target = number
        if target == self.phase:
            return False

        for number in range(self.phase + 1, target + 1):
            self._enter_phase(number)
        return True

    def _enter_phase(self, number: int) -> None:
        self.phase = number
        spec = PHASE_TABLE[number]
        self.sword_count = max(self.sword_count, spec.sword_count)
        logger.info(
            'Boss entered phase %d (hp %.0f/%.0f, swords %d)',
            number, max(0.0, self.hp), self.max_hp, self.sword_count
        )

    # -------------------------------------------------------------------------
    # Frame update
    # -------------------------------------------------------------------------

    def update(self, dt: float, target_x: float, target_y: float,
               width: float, height: float) -> None:
        """Move, spin the shield, and tick every live attack pattern."""
        self.timer += dt
        self.update_phase()

        movement = self.spec.movement
        if movement is Movement.TRACK:
            self._move_track(dt, target_x)
        elif movement is Movement.ORBIT:
            self._move_orbit(dt, target_x, target_y)
        else:
            self._move_zigzag(dt, width)

        self.x = max(0.0, min(width - self.width, self.x))
        self.y = max(0.0, min(height - self.height, self.y))

        if self.sword_count > 0:
            self.sword_angle += dt * SHIELD_SPIN

        for kind in self.spec.patterns:
            fired = self.patterns[kind].update(self, dt, target_x, target_y)
            self._queue.extend(fired)

    def _move_track(self, dt: float, target_x: float) -> None:
        dx = target_x - (self.x + self.width / 2)
        if abs(dx) > TRACK_DEADZONE:
            self.x += math.copysign(TRACK_SPEED * dt, dx)
        self.y = HOVER_BASE_Y + math.sin(self.timer * 2) * HOVER_AMPLITUDE

    def _move_orbit(self, dt: float, target_x: float, target_y: float) -> None:
        self.orbit_angle += ORBIT_ANGULAR_SPEED * dt
        goal_x = target_x + math.cos(self.orbit_angle) * ORBIT_RADIUS
        goal_y = target_y + math.sin(self.orbit_angle) * ORBIT_RADIUS
        cx, cy = self.center
        dx, dy = goal_x - cx, goal_y - cy
        distance = math.hypot(dx, dy)
        if distance > 0:
            step = min(distance, ORBIT_FOLLOW_SPEED * dt)
            self.x += dx / distance * step
            self.y += dy / distance * step

    def _move_zigzag(self, dt: float, width: float) -> None:
        self.x += self.zigzag_dir * ZIGZAG_SPEED * dt
        if self.x <= 0:
            self.x = 0.0
            self.zigzag_dir = 1.0
        elif self.x >= width - self.width:
            self.x = width - self.width
            self.zigzag_dir = -1.0
        self.y = ZIGZAG_BASE_Y + math.sin(self.timer * 4) * ZIGZAG_AMPLITUDE

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def target_beneath(self, tx: float, ty: float) -> bool:
        """True when the target sits below the boss inside its horizontal span."""
        return self.x <= tx <= self.x + self.width and ty > self.y + self.height

    def poll_projectiles(self) -> List[Projectile]:
        """Drain the outbound queue. Each projectile is delivered at most once."""
        fired = list(self._queue)
        self._queue.clear()
        return fired

    @property
    def queued(self) -> int:
        return len(self._queue)

    def sword_positions(self) -> List[Circle]:
        cx, cy = self.center
        tips = []
        for i in range(self.sword_count):
            angle = self.sword_angle + (math.pi * 2 / self.sword_count) * i
            tips.append(Circle(
                cx + math.cos(angle) * SHIELD_RADIUS,
                cy + math.sin(angle) * SHIELD_RADIUS,
                SHIELD_TIP_RADIUS,
            ))
        return tips

    def is_charging_beam(self) -> bool:
        return self.patterns['beam'].charging

    def beam_charge_progress(self) -> float:
        return self.patterns['beam'].progress

    def is_charging_ultimate(self) -> bool:
        return False
