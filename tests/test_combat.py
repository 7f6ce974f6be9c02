import pytest

from break_block_build.boss import Boss
from break_block_build.combat import (
    BLOCK_DESTROYED, BOSS_HIT, ITEM_COLLECTED, MINI_BOSS_DESTROYED, PLAYER_HIT,
    PROJECTILE_BLOCKED, PROJECTILE_INTERCEPTED,
    boss_projectile_system, item_pickup_system, mini_boss_system,
    player_block_system, player_boss_system, player_sword_system,
    projectile_block_system, projectile_boss_system, resolve_player_block,
)
from break_block_build.components import Block, BlockType, Item, ItemType, Projectile, ProjectileType
from break_block_build.enemies import MiniBoss
from break_block_build.player import Player
from break_block_build.pool import EntityPool


def pool_of(*entities):
    pool = EntityPool(50)
    pool.extend(entities)
    return pool


def player_at(x=400.0, y=300.0):
    return Player(x, y)


def block_on(player, block_type=BlockType.NORMAL):
    return Block(player.x - 40, player.y - 40, 80, 80, block_type)


# ---------------------------------------------------------------------------
# Player vs blocks
# ---------------------------------------------------------------------------

def test_uncharged_dash_breaks_normal_block_in_two_hits():
    player = player_at()
    player.is_attacking = True
    player.charge_power = 0.0
    block = block_on(player)

    assert resolve_player_block(player, block) == []
    assert block.hp == 5
    assert block.active
    assert player.y == 310.0
    assert not player.is_attacking

    player.is_attacking = True
    events = resolve_player_block(player, block)
    assert [e['type'] for e in events] == [BLOCK_DESTROYED]
    assert events[0]['source'] == 'dash'
    assert not block.active


def test_dash_drains_charge():
    player = player_at()
    player.is_attacking = True
    player.charge_power = 4.0
    block = block_on(player, BlockType.HARD)
    resolve_player_block(player, block)
    assert block.hp == pytest.approx(30 - 9)
    assert player.charge_power == 1.0


def test_dash_into_surviving_block_ends_dash():
    player = player_at()
    player.is_attacking = True
    player.attack_timer = 0.4
    player.charge_power = 1.0
    block = block_on(player, BlockType.HARD)

    assert resolve_player_block(player, block) == []
    assert block.hp == pytest.approx(24.0)
    assert not player.is_dashing
    assert player.attack_timer == 0.0

    resolve_player_block(player, block)
    assert block.hp == pytest.approx(24.0)
    assert player.y == 315.0


def test_blocked_without_attack():
    player = player_at()
    block = block_on(player)
    assert resolve_player_block(player, block) == []
    assert block.hp == 10
    assert player.y == 305.0


def test_invincible_contact_breaks():
    player = player_at()
    player.grant_invincibility()
    block = block_on(player)
    block.hp = 5
    events = resolve_player_block(player, block)
    assert events[0]['source'] == 'contact'


def test_high_atk_breaks_on_contact():
    player = player_at()
    player.atk_count = 5
    block = block_on(player)
    assert resolve_player_block(player, block)
    assert not block.active


def test_shaking_chips_block():
    player = player_at()
    player.is_shaking = True
    block = block_on(player)
    assert resolve_player_block(player, block) == []
    assert block.hp == 5
    assert player.y == 302.0


def test_destroyed_block_takes_no_further_collisions():
    player = player_at()
    player.grant_invincibility()
    block = block_on(player, BlockType.GOLDEN)
    blocks = pool_of(block)
    beam = Projectile(player.x, player.y, 0, -800, ProjectileType.BEAM)

    assert len(player_block_system(player, blocks)) == 1
    assert projectile_block_system(pool_of(beam), blocks) == []
    assert player_block_system(player, blocks) == []
    assert blocks.prune() == 1
    assert len(blocks) == 0


# ---------------------------------------------------------------------------
# Projectiles
# ---------------------------------------------------------------------------

def test_bullet_consumed_beam_pierces():
    block = Block(0, 0, 80, 80, BlockType.HARD)
    bullet = Projectile(40, 40, 0, -100, ProjectileType.BULLET)
    beam = Projectile(40, 40, 0, -800, ProjectileType.BEAM)

    projectile_block_system(pool_of(bullet, beam), pool_of(block))

    assert not bullet.active
    assert beam.active
    assert block.hp == pytest.approx(30 - 1 - 0.5)


def test_hostile_projectiles_ignore_blocks():
    block = Block(0, 0, 80, 80)
    shot = Projectile(40, 40, 0, 100, ProjectileType.BOSS_BULLET)
    projectile_block_system(pool_of(shot), pool_of(block))
    assert shot.active
    assert block.hp == 10


def test_hostile_projectile_hits_player():
    player = player_at()
    shot = Projectile(player.x, player.y, 0, 100, ProjectileType.BOSS_BULLET)
    events = boss_projectile_system(pool_of(shot), player)
    assert events[0]['type'] == PLAYER_HIT
    assert player.hp == 95
    assert not shot.active


def test_invincible_player_still_absorbs_projectile():
    player = player_at()
    player.grant_invincibility()
    shot = Projectile(player.x, player.y, 0, 100, ProjectileType.BOSS_BEAM, damage=20)
    assert boss_projectile_system(pool_of(shot), player) == []
    assert player.hp == 100
    assert not shot.active


def test_boss_shield_blocks_before_body():
    boss = Boss(350.0, 50.0)
    boss.sword_count = 4
    shielded = Projectile(400, 190, 0, -100, ProjectileType.BULLET)
    direct = Projectile(400, 100, 0, -100, ProjectileType.BULLET)

    events = projectile_boss_system(pool_of(shielded, direct), boss)

    assert [e['type'] for e in events] == [PROJECTILE_BLOCKED, BOSS_HIT]
    assert not shielded.active
    assert not direct.active
    assert boss.hp == 999


# ---------------------------------------------------------------------------
# Player vs bosses
# ---------------------------------------------------------------------------

def test_dash_damages_boss():
    boss = Boss(350.0, 50.0)
    player = player_at(400.0, 100.0)
    player.is_attacking = True
    events = player_boss_system(player, boss)
    assert events[0]['type'] == BOSS_HIT
    assert boss.hp == 995


def test_boss_contact_hurts_player():
    boss = Boss(350.0, 50.0)
    player = player_at(400.0, 100.0)
    events = player_boss_system(player, boss)
    assert events[0]['type'] == PLAYER_HIT
    assert player.hp == 99
    assert boss.hp == 1000


def test_mini_boss_needs_dash_or_invincibility():
    player = player_at()
    mini = MiniBoss(player.x - 40, player.y - 40)
    minis = pool_of(mini)

    assert mini_boss_system(player, minis) == []
    assert mini.hp == 50

    player.is_attacking = True
    for _ in range(9):
        mini_boss_system(player, minis)
    assert mini.active
    events = mini_boss_system(player, minis)
    assert [e['type'] for e in events] == [MINI_BOSS_DESTROYED]
    assert not mini.active


# ---------------------------------------------------------------------------
# Swords & pickups
# ---------------------------------------------------------------------------

def sword_player():
    player = player_at()
    player.sword_count = 1  # Single tip at (470, 300)
    return player


def test_sword_breaks_block_outright():
    player = sword_player()
    block = Block(450, 280, 80, 80, BlockType.HARD)
    events = player_sword_system(player, pool_of(block), pool_of())
    assert events[0]['source'] == 'sword'
    assert not block.active


def test_sword_intercepts_hostile_projectile():
    player = sword_player()
    shot = Projectile(470, 300, 0, 100, ProjectileType.HOMING_MISSILE)
    friendly = Projectile(470, 300, 0, -100, ProjectileType.BULLET)
    events = player_sword_system(player, pool_of(), pool_of(shot, friendly))
    assert [e['type'] for e in events] == [PROJECTILE_INTERCEPTED]
    assert not shot.active
    assert friendly.active


def test_sword_chips_boss_body():
    player = sword_player()
    boss = Boss(430.0, 250.0)
    events = player_sword_system(player, pool_of(), pool_of(), boss)
    assert events[0]['type'] == BOSS_HIT
    assert boss.hp == pytest.approx(1000 - 2.5)


def test_no_swords_no_events():
    player = player_at()
    block = block_on(player)
    assert player_sword_system(player, pool_of(block), pool_of()) == []
    assert block.active


def test_item_pickup_applies_upgrade():
    player = player_at()
    item = Item(player.x + 10, player.y, ItemType.HP)
    far = Item(0, 0, ItemType.ATK)
    events = item_pickup_system(player, pool_of(item, far))
    assert [e['type'] for e in events] == [ITEM_COLLECTED]
    assert events[0]['hp_gain'] == pytest.approx(30)
    assert not item.active
    assert far.active
    assert player.hp_count == 1
