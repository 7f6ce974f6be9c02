"""
Player Module
==============
Player record, stat curves, and the move / charge / dash / beam state machine.
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import math

from .components import ItemType
from .controls import InputState
from .physics import Circle


# =============================================================================
# CONSTANTS
# =============================================================================

BASE_SPEED = 400.0
BASE_ATK = 5.0
BASE_DEF = 1.0
SPEED_GROWTH = 1.10
ATK_GROWTH = 1.30
DEF_GROWTH = 1.20
HP_GAIN_BASE = 20.0
HP_GAIN_GROWTH = 1.5
BREAK_ON_CONTACT_ATK = 5  # atk_count at which touching a block damages it

CHARGE_RATE = 5.0  # Power per second held
MAX_CHARGE = 20.0
DASH_DURATION = 0.5
DASH_BASE_SPEED = 500.0
DASH_SPEED_PER_CHARGE = 50.0
BEAM_MOVE_FACTOR = 0.5

SHAKE_WINDOW = 0.2
SHAKE_MAGNITUDE = 0.8
SHAKE_REVERSALS = 3  # Must exceed this count

SWORD_SPIN = 5.0  # rad/s
MAGNET_DURATION = 10.0
MAGNET_RANGE = 200.0
INVINCIBLE_DURATION = 5.0
BEAM_FIRE_INTERVAL = 0.05


def _charge_color(ratio: float) -> Tuple[int, int, int]:
    """RGB that slides from the base cyan toward red as charge builds."""
    ratio = max(0.0, min(1.0, ratio))
    return int(255 * ratio), int(240 * (1 - ratio)), 255


BASE_RGB = (0, 240, 255)


@dataclass(eq=False)
class Player:
    """The player entity. Position is the centre of a circle."""
    x: float
    y: float
    radius: float = 20.0
    hp: float = 100.0

    # Upgrade counters (never decrease within a run)
    atk_count: int = 0
    spd_count: int = 0
    def_count: int = 0
    hp_count: int = 0

    # Flags
    has_beam: bool = False
    has_magnet: bool = False
    invincible: bool = False
    is_charging: bool = False
    is_attacking: bool = False
    is_shaking: bool = False

    # Charge / dash
    charge_power: float = 0.0
    attack_timer: float = 0.0
    charge_direction: Tuple[float, float] = (0.0, -1.0)
    rgb: Tuple[int, int, int] = BASE_RGB

    # Timed effects
    invincible_timer: float = 0.0
    magnet_timer: float = 0.0
    magnet_range: float = MAGNET_RANGE
    weapon_timer: float = 0.0

    # Sword orbit
    sword_count: int = 0
    sword_angle: float = 0.0
    sword_radius: float = 70.0
    sword_size: float = 20.0

    # Shake detection
    last_x: float = field(default=0.0)
    shake_count: int = 0
    shake_timer: float = 0.0

    def __post_init__(self):
        self.last_x = self.x

    # -------------------------------------------------------------------------
    # Derived stats
    # -------------------------------------------------------------------------

    @property
    def speed(self) -> float:
        s = BASE_SPEED * SPEED_GROWTH ** self.spd_count
        if self.invincible:
            s *= 2
        return s

    @property
    def atk(self) -> float:
        return BASE_ATK * ATK_GROWTH ** self.atk_count

    @property
    def defense(self) -> float:
        return BASE_DEF * DEF_GROWTH ** self.def_count

    @property
    def can_break_on_contact(self) -> bool:
        return self.atk_count >= BREAK_ON_CONTACT_ATK

    @property
    def is_dashing(self) -> bool:
        """Dash-attacking (only possible while the beam is locked)."""
        return self.is_attacking and not self.has_beam

    @property
    def is_firing_beam(self) -> bool:
        return self.is_attacking and self.has_beam

    # -------------------------------------------------------------------------
    # Upgrades
    # -------------------------------------------------------------------------

    def upgrade(self, item_type: ItemType) -> float:
        """Apply a power-up. Returns hp gained (non-zero only for HP)."""
        if item_type is ItemType.ATK:
            self.atk_count += 1
        elif item_type is ItemType.SPD:
            self.spd_count += 1
        elif item_type is ItemType.DEF:
            self.def_count += 1
        elif item_type is ItemType.HP:
            self.hp_count += 1
            gain = HP_GAIN_BASE * HP_GAIN_GROWTH ** self.hp_count
            self.hp += gain
            return gain
        elif item_type is ItemType.BEAM:
            self.has_beam = True
            self.is_charging = False
            self.charge_power = 0.0
        elif item_type is ItemType.SWORD:
            self.sword_count += 1
        elif item_type is ItemType.MAGNET:
            self.has_magnet = True
            self.magnet_timer = MAGNET_DURATION
        elif item_type is ItemType.INVINCIBLE:
            self.grant_invincibility()
        return 0.0

    def grant_invincibility(self, duration: float = INVINCIBLE_DURATION) -> None:
        self.invincible = True
        self.invincible_timer = duration

    # -------------------------------------------------------------------------
    # Frame update
    # -------------------------------------------------------------------------

    def update(self, dt: float, controls: InputState, width: float, height: float) -> None:
        """Advance timers, run the attack state machine, move and clamp."""
        self._tick_effects(dt)

        if self.has_beam:
            self._update_beam_mode(dt, controls)
        else:
            self._update_charge_mode(dt, controls)

        if self.sword_count > 0:
            self.sword_angle += dt * SWORD_SPIN

        self.x = max(self.radius, min(width - self.radius, self.x))
        self.y = max(self.radius, min(height - self.radius, self.y))

    def _tick_effects(self, dt: float) -> None:
        if self.has_magnet:
            self.magnet_timer -= dt
            if self.magnet_timer <= 0:
                self.has_magnet = False
                self.magnet_timer = 0.0

        if self.invincible:
            self.invincible_timer -= dt
            if self.invincible_timer <= 0:
                self.invincible = False
                self.invincible_timer = 0.0

    def _update_beam_mode(self, dt: float, controls: InputState) -> None:
        self.is_charging = False
        self.is_shaking = False
        self.is_attacking = controls.action
        speed = self.speed * BEAM_MOVE_FACTOR if self.is_attacking else self.speed
        self.x += controls.move_x * speed * dt
        self.y += controls.move_y * speed * dt

    def _update_charge_mode(self, dt: float, controls: InputState) -> None:
        if controls.action:
            self.is_charging = True
            self.charge_power = min(MAX_CHARGE, self.charge_power + dt * CHARGE_RATE)
            self.rgb = _charge_color(self.charge_power / MAX_CHARGE)
        elif self.is_charging:
            self._release_charge(controls)

        if not self.is_charging and not self.invincible:
            self.rgb = BASE_RGB

        if self.is_attacking:
            self.attack_timer -= dt
            if self.attack_timer <= 0:
                self.is_attacking = False
                self.attack_timer = 0.0
                self.charge_power = 0.0
            else:
                dash_speed = DASH_BASE_SPEED + self.charge_power * DASH_SPEED_PER_CHARGE
                self.x += self.charge_direction[0] * dash_speed * dt
                self.y += self.charge_direction[1] * dash_speed * dt
        elif not self.is_charging:
            self._detect_shake(dt, controls)
            self.x += controls.move_x * self.speed * dt
            self.y += controls.move_y * self.speed * dt

    def _release_charge(self, controls: InputState) -> None:
        """Lock in the dash direction (default up) and start the dash."""
        mx, my = controls.move_x, controls.move_y
        magnitude = math.hypot(mx, my)
        if magnitude > 0:
            self.charge_direction = (mx / magnitude, my / magnitude)
        else:
            self.charge_direction = (0.0, -1.0)

        self.is_charging = False
        self.is_attacking = True
        self.attack_timer = DASH_DURATION
        self.charge_power = max(1.0, self.charge_power)

    def _detect_shake(self, dt: float, controls: InputState) -> None:
        """Count hard horizontal reversals inside a short rolling window."""
        self.shake_timer += dt
        if self.shake_timer > SHAKE_WINDOW:
            self.shake_count = 0
            self.shake_timer = 0.0

        moved = self.x - self.last_x
        if (abs(controls.move_x) > SHAKE_MAGNITUDE and moved != 0 and
                math.copysign(1, controls.move_x) != math.copysign(1, moved)):
            self.shake_count += 1
            self.shake_timer = 0.0
        self.last_x = self.x

        self.is_shaking = self.shake_count > SHAKE_REVERSALS

    # -------------------------------------------------------------------------
    # Weapons
    # -------------------------------------------------------------------------

    def beam_ready(self, dt: float) -> bool:
        """Advance the beam cadence timer; True when a beam shot is due."""
        self.weapon_timer += dt
        if self.weapon_timer > BEAM_FIRE_INTERVAL:
            self.weapon_timer = 0.0
            return True
        return False

    def sword_positions(self) -> List[Circle]:
        """Current sword tips, evenly spaced around the orbit."""
        tips = []
        for i in range(self.sword_count):
            angle = self.sword_angle + (math.pi * 2 / self.sword_count) * i
            tips.append(Circle(
                self.x + math.cos(angle) * self.sword_radius,
                self.y + math.sin(angle) * self.sword_radius,
                self.sword_size,
            ))
        return tips
