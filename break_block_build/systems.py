"""
Entity Systems
===============
Self-contained per-entity update functions. Each one advances a single
record by `dt` seconds and touches nothing else; cross-entity effects
belong to combat.py.
"""

from typing import Iterable, Optional, Tuple
import math

from .components import Block, Item, Projectile, ProjectileType, FloatingText


# =============================================================================
# CONSTANTS
# =============================================================================

ITEM_PULSE_RATE = 5.0
MAGNET_PULL_SPEED = 300.0

HOMING_TURN_RATE = 2.5  # rad/s
BOOMERANG_GRAVITY = 220.0  # px/s^2, outbound leg only
BOOMERANG_RETURN_ACCEL = 1.8  # Speed multiplier per second on the way back
BOOMERANG_MAX_SPEED = 700.0

OFFSCREEN_MARGIN = 100.0


# =============================================================================
# BLOCKS & ITEMS
# =============================================================================

def update_block(block: Block, dt: float, scroll_speed: float) -> None:
    """Scroll a block down the screen."""
    block.y += scroll_speed * dt


def update_item(item: Item, dt: float, scroll_speed: float) -> None:
    """Scroll an item and advance its pulse animation."""
    item.y += scroll_speed * dt
    item.pulse += dt * ITEM_PULSE_RATE


def magnet_pull(item: Item, dt: float, target_x: float, target_y: float,
                magnet_range: float) -> bool:
    """Pull an item toward the target if within range. Returns True if pulled."""
    dx = target_x - item.x
    dy = target_y - item.y
    distance = math.hypot(dx, dy)
    if distance <= 0 or distance >= magnet_range:
        return False
    step = min(distance, MAGNET_PULL_SPEED * dt)
    item.x += dx / distance * step
    item.y += dy / distance * step
    return True


# =============================================================================
# PROJECTILES
# =============================================================================

def _wrap_angle(angle: float) -> float:
    """Normalize to [-pi, pi]."""
    while angle > math.pi:
        angle -= 2 * math.pi
    while angle < -math.pi:
        angle += 2 * math.pi
    return angle


def steer_toward(proj: Projectile, dt: float, target_x: float, target_y: float,
                 turn_rate: float = HOMING_TURN_RATE) -> float:
    """
    Rotate velocity toward the target by at most `turn_rate * dt` radians.

    Speed is preserved. Returns the signed angle actually turned.
    """
    speed = math.hypot(proj.vx, proj.vy)
    dx = target_x - proj.x
    dy = target_y - proj.y
    if speed < 1e-6 or (dx == 0 and dy == 0):
        return 0.0

    current = math.atan2(proj.vy, proj.vx)
    diff = _wrap_angle(math.atan2(dy, dx) - current)

    max_turn = turn_rate * dt
    if abs(diff) > max_turn:
        diff = max_turn if diff > 0 else -max_turn

    heading = current + diff
    proj.vx = math.cos(heading) * speed
    proj.vy = math.sin(heading) * speed
    return diff


def _update_boomerang(proj: Projectile, dt: float) -> None:
    if not proj.returning:
        proj.vy += BOOMERANG_GRAVITY * dt
        if proj.age >= proj.return_delay:
            proj.returning = True
            proj.vx = -proj.vx
            proj.vy = -proj.vy
        return

    factor = BOOMERANG_RETURN_ACCEL ** dt
    proj.vx *= factor
    proj.vy *= factor
    speed = math.hypot(proj.vx, proj.vy)
    if speed > BOOMERANG_MAX_SPEED:
        scale = BOOMERANG_MAX_SPEED / speed
        proj.vx *= scale
        proj.vy *= scale


def update_projectile(proj: Projectile, dt: float,
                      target: Optional[Tuple[float, float]] = None) -> None:
    """
    Move a projectile. Homing missiles steer toward `target`; boomerangs
    curve outward under gravity, then turn back and accelerate.
    """
    proj.age += dt

    if proj.projectile_type is ProjectileType.HOMING_MISSILE and target is not None:
        steer_toward(proj, dt, target[0], target[1])
    elif proj.projectile_type is ProjectileType.BOOMERANG:
        _update_boomerang(proj, dt)

    proj.x += proj.vx * dt
    proj.y += proj.vy * dt

    if proj.ttl is not None and proj.age >= proj.ttl:
        proj.active = False


def in_play_bounds(x: float, y: float, width: float, height: float,
                   margin: float = OFFSCREEN_MARGIN) -> bool:
    return -margin < x < width + margin and -margin < y < height + margin


# =============================================================================
# FLOATING TEXT
# =============================================================================

def update_floating_text(text: FloatingText, dt: float) -> None:
    """Drift upward; deactivate when the lifetime runs out."""
    text.life -= dt
    text.y += text.vy * dt
    if text.life <= 0:
        text.active = False


def floating_text_system(texts: Iterable[FloatingText], dt: float) -> None:
    for text in texts:
        update_floating_text(text, dt)
