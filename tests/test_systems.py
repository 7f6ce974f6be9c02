import math

import pytest

from break_block_build.components import (
    Block, FloatingText, Item, ItemType, Projectile, ProjectileType,
)
from break_block_build.systems import (
    BOOMERANG_MAX_SPEED, HOMING_TURN_RATE, in_play_bounds, magnet_pull,
    steer_toward, update_block, update_floating_text, update_item, update_projectile,
)


def heading(proj):
    return math.atan2(proj.vy, proj.vx)


def missile(vx=100.0, vy=0.0):
    return Projectile(0.0, 0.0, vx, vy, ProjectileType.HOMING_MISSILE)


# ---------------------------------------------------------------------------
# Homing
# ---------------------------------------------------------------------------

def test_turn_is_clamped_to_rate():
    proj = missile()
    turned = steer_toward(proj, 0.1, 0.0, 100.0)
    assert turned == pytest.approx(HOMING_TURN_RATE * 0.1)
    assert heading(proj) == pytest.approx(0.25)
    assert math.hypot(proj.vx, proj.vy) == pytest.approx(100.0)


def test_small_correction_does_not_overshoot():
    proj = missile()
    target_angle = 0.1
    steer_toward(proj, 0.1, 100 * math.cos(target_angle), 100 * math.sin(target_angle))
    assert heading(proj) == pytest.approx(target_angle)


def test_turns_the_short_way_round():
    proj = missile(vx=-100.0, vy=1.0)  # Heading just under pi
    steer_toward(proj, 0.1, -100.0, -10.0)  # Target just past -pi
    assert proj.vy < 1.0
    assert proj.vx < 0


def test_homing_never_exceeds_turn_rate_over_many_frames():
    proj = missile()
    dt = 1 / 60
    for _ in range(120):
        before = heading(proj)
        update_projectile(proj, dt, target=(-200.0, 50.0))
        delta = math.atan2(math.sin(heading(proj) - before), math.cos(heading(proj) - before))
        assert abs(delta) <= HOMING_TURN_RATE * dt + 1e-9


def test_non_homing_projectile_ignores_target():
    proj = Projectile(0.0, 0.0, 100.0, 0.0, ProjectileType.BOSS_BULLET)
    update_projectile(proj, 0.1, target=(0.0, 100.0))
    assert (proj.vx, proj.vy) == (100.0, 0.0)
    assert proj.x == pytest.approx(10.0)


# ---------------------------------------------------------------------------
# Boomerang & lifetime
# ---------------------------------------------------------------------------

def boomerang():
    return Projectile(0.0, 0.0, 320.0, 0.0, ProjectileType.BOOMERANG,
                      ttl=5.0, return_delay=0.9)


def test_boomerang_falls_then_returns():
    proj = boomerang()
    update_projectile(proj, 0.1)
    assert proj.vy > 0
    assert not proj.returning

    for _ in range(10):
        update_projectile(proj, 0.1)
    assert proj.returning
    assert proj.vx < 0


def test_boomerang_return_speeds_up_1_8x_per_second():
    proj = Projectile(0.0, 0.0, -100.0, 0.0, ProjectileType.BOOMERANG,
                      returning=True)
    for _ in range(10):
        update_projectile(proj, 0.1)
    assert proj.vx == pytest.approx(-180.0)
    assert proj.vy == 0.0


def test_boomerang_speed_capped():
    proj = boomerang()
    proj.ttl = None
    for _ in range(60):
        update_projectile(proj, 0.1)
    assert math.hypot(proj.vx, proj.vy) <= BOOMERANG_MAX_SPEED + 1e-6


def test_ttl_expires_projectile():
    proj = Projectile(0.0, 0.0, 0.0, 0.0, ProjectileType.HOMING_MISSILE, ttl=0.5)
    update_projectile(proj, 0.25)
    assert proj.active
    update_projectile(proj, 0.25)
    assert not proj.active


def test_in_play_bounds_margin():
    assert in_play_bounds(-99, 0, 800, 600)
    assert not in_play_bounds(-100, 0, 800, 600)
    assert not in_play_bounds(0, 700, 800, 600)


# ---------------------------------------------------------------------------
# Blocks, items, text
# ---------------------------------------------------------------------------

def test_blocks_and_items_scroll():
    block = Block(0, 0, 80, 80)
    item = Item(0, 0, ItemType.HP)
    update_block(block, 0.5, 100.0)
    update_item(item, 0.5, 100.0)
    assert block.y == 50.0
    assert item.y == 50.0
    assert item.pulse > 0


def test_magnet_pulls_within_range_only():
    near = Item(100.0, 0.0, ItemType.ATK)
    far = Item(300.0, 0.0, ItemType.ATK)
    assert magnet_pull(near, 0.1, 0.0, 0.0, 200.0)
    assert near.x == pytest.approx(70.0)
    assert not magnet_pull(far, 0.1, 0.0, 0.0, 200.0)
    assert far.x == 300.0


def test_floating_text_drifts_and_expires():
    text = FloatingText(0.0, 100.0, '+100')
    update_floating_text(text, 0.6)
    assert text.active
    update_floating_text(text, 0.6)
    assert not text.active
    assert text.y == pytest.approx(40.0)
