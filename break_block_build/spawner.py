"""
Block Spawner and Drop Tables
==============================
Block rows with random gaps, golden blocks, and the item-drop roll for each
block type.
"""

import random
from typing import List, Optional

from .components import Block, BlockType, Item, ItemType


# =============================================================================
# SPAWN TABLE
# =============================================================================

MAX_LIVE_BLOCKS = 40
BLOCK_SIZE_FACTOR = 4  # Block edge = player radius * factor
BONUS_DROP_OFFSET = 20.0

RARE_ITEMS = (
    ItemType.ATK, ItemType.SPD, ItemType.DEF,
    ItemType.BEAM, ItemType.SWORD, ItemType.MAGNET,
)

# Cumulative thresholds: first entry whose bound exceeds the roll wins
RESOURCE_DROPS = (
    (0.15, ItemType.ATK),
    (0.30, ItemType.SPD),
    (0.45, ItemType.DEF),
    (0.70, ItemType.BEAM),
    (1.00, ItemType.MAGNET),
)


def block_size(player_radius: float) -> float:
    return player_radius * BLOCK_SIZE_FACTOR


def roll_block_type(rng: random.Random) -> BlockType:
    if rng.random() > 0.8:
        return BlockType.HARD
    if rng.random() > 0.8:
        return BlockType.RESOURCE
    return BlockType.NORMAL


def spawn_block_row(rng: random.Random, width: float, size: float,
                    live_blocks: int) -> List[Block]:
    """
    Build one row of blocks just above the top edge, leaving one or two gaps.

    Returns an empty list when the live-block limit is reached or the
    viewport is narrower than a single block.
    """
    if live_blocks > MAX_LIVE_BLOCKS:
        return []

    cols = int(width // size)
    if cols <= 0:
        return []
    start_x = (width - cols * size) / 2

    gap1 = rng.randrange(cols)
    if cols == 1 and rng.random() > 0.5:
        gap1 = -1

    gap2 = -1
    if rng.random() > 0.5 and cols > 2:
        gap2 = rng.randrange(cols)

    row = []
    for i in range(cols):
        if i in (gap1, gap2):
            continue
        row.append(Block(start_x + i * size, -size, size, size, roll_block_type(rng)))
    return row


def spawn_golden_block(rng: random.Random, width: float, size: float) -> Block:
    x = rng.random() * max(0.0, width - size)
    return Block(x, -size, size, size, BlockType.GOLDEN)


# =============================================================================
# DROP TABLES
# =============================================================================

def roll_drop(rng: random.Random, block_type: BlockType) -> Optional[ItemType]:
    """Pick the item type a destroyed block drops, or None for no drop."""
    if block_type is BlockType.GOLDEN:
        return rng.choice(RARE_ITEMS)

    roll = rng.random()
    if block_type is BlockType.RESOURCE:
        for bound, item_type in RESOURCE_DROPS:
            if roll < bound:
                return item_type
        return RESOURCE_DROPS[-1][1]

    if block_type is BlockType.HARD:
        return ItemType.SWORD if roll > 0.7 else ItemType.ATK

    if roll > 0.95:
        return ItemType.INVINCIBLE
    if roll > 0.90:
        return ItemType.BEAM
    if roll > 0.7:
        return ItemType.HP
    return None


def spawn_drops(rng: random.Random, x: float, y: float, block_type: BlockType,
                bonus_time: bool) -> List[Item]:
    """
    Items dropped by a block destroyed at (x, y).

    Bonus time doubles the drop: golden blocks roll a second rare item,
    other blocks duplicate theirs.
    """
    item_type = roll_drop(rng, block_type)
    if item_type is None:
        return []

    drops = [Item(x, y, item_type)]
    if bonus_time:
        if block_type is BlockType.GOLDEN:
            second = rng.choice(RARE_ITEMS)
        else:
            second = item_type
        drops.append(Item(x + BONUS_DROP_OFFSET, y, second))
    return drops
