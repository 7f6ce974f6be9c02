"""
Combat Systems
===============
Cross-entity collision and damage resolution, run once per frame after
every entity has moved.

Systems mutate only the entities they touch (hp, active flags, pushback)
and return a list of event dicts. Scoring, combo, drops and popups are
applied by the Game from those events.
"""

from typing import List, Optional

from .boss import Boss
from .components import Block
from .physics import Circle, box_overlap, circle_overlap
from .player import Player
from .pool import EntityPool


# =============================================================================
# CONSTANTS
# =============================================================================

DASH_CHARGE_DRAIN = 3.0
CONTACT_PUSHBACK = 2.0  # Contact-break hit that left the block standing
DASH_PUSHBACK = 10.0
BLOCKED_PUSHBACK = 5.0
BOSS_CONTACT_DAMAGE = 1.0
SWORD_BOSS_FACTOR = 0.5

# Event types
BLOCK_DESTROYED = 'block_destroyed'
BOSS_HIT = 'boss_hit'
PLAYER_HIT = 'player_hit'
PROJECTILE_INTERCEPTED = 'projectile_intercepted'
PROJECTILE_BLOCKED = 'projectile_blocked'
MINI_BOSS_DESTROYED = 'mini_boss_destroyed'
ITEM_COLLECTED = 'item_collected'


def damage_block(block: Block, amount: float) -> bool:
    """Apply damage; a block at or below zero hp is deactivated at once."""
    block.hp -= amount
    if block.hp <= 0:
        block.active = False
        return True
    return False


def _block_event(block: Block, source: str) -> dict:
    cx, cy = block.center
    return {
        'type': BLOCK_DESTROYED,
        'block_type': block.block_type,
        'x': cx, 'y': cy,
        'source': source,
    }


# =============================================================================
# PLAYER vs BLOCKS
# =============================================================================

def resolve_player_block(player: Player, block: Block) -> List[dict]:
    """Resolve one player/block contact."""
    contact_break = (
        player.invincible or
        (player.is_shaking and not player.is_charging and not player.is_attacking) or
        player.can_break_on_contact
    )
    if contact_break:
        if damage_block(block, player.atk):
            return [_block_event(block, 'contact')]
        player.y += CONTACT_PUSHBACK
        return []

    if player.is_dashing:
        destroyed = damage_block(block, player.atk + player.charge_power)
        player.charge_power = max(0.0, player.charge_power - DASH_CHARGE_DRAIN)
        if destroyed:
            return [_block_event(block, 'dash')]
        player.is_attacking = False
        player.attack_timer = 0.0
        player.y += DASH_PUSHBACK
        return []

    player.y += BLOCKED_PUSHBACK
    return []


def player_block_system(player: Player, blocks: EntityPool) -> List[dict]:
    events = []
    for block in blocks.active():
        if box_overlap(player, block):
            events.extend(resolve_player_block(player, block))
    return events


# =============================================================================
# PROJECTILES
# =============================================================================

def projectile_block_system(projectiles: EntityPool, blocks: EntityPool) -> List[dict]:
    """Player projectiles against blocks. Piercing beams tick and persist."""
    events = []
    for proj in projectiles.active():
        if proj.hostile:
            continue
        for block in blocks.active():
            if not box_overlap(proj, block):
                continue
            if damage_block(block, proj.effective_damage):
                events.append(_block_event(block, 'projectile'))
            if not proj.projectile_type.piercing:
                proj.active = False
                break
    return events


def projectile_boss_system(projectiles: EntityPool, boss: Boss) -> List[dict]:
    """Player projectiles against the boss; its sword shield blocks them first."""
    events = []
    shield = boss.sword_positions()
    for proj in projectiles.active():
        if proj.hostile:
            continue

        blocker = next((tip for tip in shield if circle_overlap(tip, proj)), None)
        if blocker is not None:
            proj.active = False
            events.append({'type': PROJECTILE_BLOCKED, 'x': blocker.x, 'y': blocker.y})
            continue

        if box_overlap(proj, boss):
            damage = proj.effective_damage
            boss.take_damage(damage)
            events.append(_boss_hit_event(boss, damage, 'projectile'))
            if not proj.projectile_type.piercing:
                proj.active = False
    return events


def boss_projectile_system(projectiles: EntityPool, player: Player) -> List[dict]:
    """Hostile projectiles against the player. They are always consumed on contact."""
    events = []
    for proj in projectiles.active():
        if not proj.hostile or not circle_overlap(player, proj):
            continue
        if not player.invincible:
            damage = proj.effective_damage
            player.hp -= damage
            events.append({
                'type': PLAYER_HIT, 'damage': damage,
                'source': proj.projectile_type.label,
            })
        proj.active = False
    return events


# =============================================================================
# PLAYER vs BOSSES
# =============================================================================

def _boss_hit_event(boss: Boss, damage: float, source: str) -> dict:
    return {
        'type': BOSS_HIT, 'damage': damage, 'source': source,
        'x': boss.x + boss.width / 2, 'y': boss.y,
    }


def player_boss_system(player: Player, boss: Boss) -> List[dict]:
    """Body contact: a dash hurts the boss, otherwise the boss hurts the player."""
    if not box_overlap(player, boss):
        return []
    if player.is_dashing:
        damage = player.atk
        boss.take_damage(damage)
        return [_boss_hit_event(boss, damage, 'dash')]
    if not player.invincible:
        player.hp -= BOSS_CONTACT_DAMAGE
        return [{'type': PLAYER_HIT, 'damage': BOSS_CONTACT_DAMAGE, 'source': 'boss'}]
    return []


def mini_boss_system(player: Player, minis: EntityPool) -> List[dict]:
    """Dash or invincible contact chips a mini-boss; otherwise nothing happens."""
    events = []
    if not (player.is_dashing or player.invincible):
        return events
    for mini in minis.active():
        if not box_overlap(player, mini):
            continue
        mini.hp -= player.atk
        if mini.hp <= 0:
            mini.active = False
            events.append({
                'type': MINI_BOSS_DESTROYED,
                'x': mini.x, 'y': mini.y,
            })
    return events


# =============================================================================
# SWORD ORBIT
# =============================================================================

def player_sword_system(player: Player, blocks: EntityPool, projectiles: EntityPool,
                        boss: Optional[Boss] = None) -> List[dict]:
    """
    Each orbiting sword tip breaks blocks outright, intercepts hostile
    projectiles, and chips the boss body every tick it overlaps.
    """
    events = []
    if player.sword_count <= 0:
        return events

    boss_body = None
    if boss is not None and boss.active:
        cx, cy = boss.center
        boss_body = Circle(cx, cy, boss.width / 2)

    for tip in player.sword_positions():
        for block in blocks.active():
            if box_overlap(tip, block):
                damage_block(block, block.hp)
                events.append(_block_event(block, 'sword'))

        for proj in projectiles.active():
            if proj.hostile and circle_overlap(tip, proj):
                proj.active = False
                events.append({
                    'type': PROJECTILE_INTERCEPTED, 'x': proj.x, 'y': proj.y,
                })

        if boss_body is not None and circle_overlap(tip, boss_body):
            damage = player.atk * SWORD_BOSS_FACTOR
            boss.take_damage(damage)
            events.append(_boss_hit_event(boss, damage, 'sword'))

    return events


# =============================================================================
# PICKUPS
# =============================================================================

def item_pickup_system(player: Player, items: EntityPool) -> List[dict]:
    """Collect every item the player touches and apply its upgrade."""
    events = []
    for item in items.active():
        if not circle_overlap(player, item):
            continue
        item.active = False
        hp_gain = player.upgrade(item.item_type)
        events.append({
            'type': ITEM_COLLECTED, 'item_type': item.item_type,
            'hp_gain': hp_gain, 'x': item.x, 'y': item.y,
        })
    return events
