"""
Game Orchestrator
==================
Owns every entity pool and the run state, and advances the simulation one
frame at a time:

    player -> entity self-updates -> boss + queue drain -> beam fire
    -> collision resolution -> outcome check -> pruning -> event timers

Nothing outside `update` mutates simulation state. Renderers read a
FrameSnapshot of copies.
"""

from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple
import copy
import logging
import math
import random

from .boss import Boss
from .combat import (
    BLOCK_DESTROYED, BOSS_HIT, ITEM_COLLECTED, MINI_BOSS_DESTROYED,
    PROJECTILE_BLOCKED, PROJECTILE_INTERCEPTED,
    boss_projectile_system, item_pickup_system, mini_boss_system,
    player_block_system, player_boss_system, player_sword_system,
    projectile_block_system, projectile_boss_system,
)
from .components import (
    Block, FloatingText, Item, Outcome, Phase, Projectile, ProjectileType,
    GOLD, NEON_CYAN, NEON_MAGENTA, NEON_ORANGE, NEON_PINK, NEON_RED, NEON_YELLOW,
)
from .config import GameConfig
from .controls import InputState
from .enemies import (
    MiniBoss, MINI_BOSS_DROPS, MINI_BOSS_SCORE, create_mini_boss, update_mini_boss,
)
from .events import (
    EVENT_BONUS_START, EVENT_BOSS_PHASE, EVENT_GOLDEN_BLOCK, EVENT_MINI_BOSS,
    EVENT_SPAWN_ROW, EventState, create_event_state, update_events,
)
from .physics import Circle
from .player import Player
from .pool import EntityPool
from .spawner import block_size, spawn_block_row, spawn_drops, spawn_golden_block
from .systems import (
    floating_text_system, in_play_bounds, magnet_pull, update_block, update_item,
    update_projectile,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

MAX_BLOCKS = 40
MAX_ITEMS = 30
MAX_PROJECTILES = 50
MAX_FLOATING_TEXTS = 20
MAX_MINI_BOSSES = 4

PLAYER_START_OFFSET = 100.0  # Distance above the bottom edge
OFFSCREEN_MARGIN = 100.0
ITEM_PICKUP_SCORE = 50
INTERCEPT_SCORE = 50
BOSS_SCORE_PER_DAMAGE = 10
COMBO_SCORE_STEP = 10

BEAM_OFFSET_Y = 20.0
BEAM_VELOCITY = -800.0
MINI_BOSS_DROP_SPREAD = 50.0


# =============================================================================
# SNAPSHOTS
# =============================================================================

@dataclass(frozen=True)
class HudState:
    """Counters for the HUD."""
    score: int
    time_left: int
    hp: int
    atk_count: int
    spd_count: int
    def_count: int


@dataclass(frozen=True)
class BossView:
    """Read-only view of the boss for rendering."""
    x: float
    y: float
    width: float
    height: float
    hp: float
    max_hp: float
    phase: int
    swords: Tuple[Circle, ...]
    beam_charging: bool
    beam_progress: float


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything a renderer needs for one frame. Entities are copies."""
    phase: Phase
    player: Player
    blocks: Tuple[Block, ...]
    items: Tuple[Item, ...]
    projectiles: Tuple[Projectile, ...]
    floating_texts: Tuple[FloatingText, ...]
    mini_bosses: Tuple[MiniBoss, ...]
    player_swords: Tuple[Circle, ...]
    boss: Optional[BossView]
    combo: int
    bonus_active: bool
    hud: HudState
    outcome: Optional[Outcome]


@dataclass(frozen=True)
class RunResult:
    """End-of-run report."""
    score: int
    outcome: Outcome
    max_combo: int
    elapsed: float


# =============================================================================
# GAME
# =============================================================================

class Game:
    """Central game state container and frame driver."""

    def __init__(self, config: Optional[GameConfig] = None,
                 rng: Optional[random.Random] = None,
                 on_finish: Optional[Callable[[RunResult], None]] = None):
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.on_finish = on_finish
        self.reset()

    def reset(self) -> None:
        """Start a fresh run."""
        cfg = self.config
        self.player = Player(cfg.width / 2, cfg.height - PLAYER_START_OFFSET)
        self.blocks: EntityPool[Block] = EntityPool(MAX_BLOCKS)
        self.items: EntityPool[Item] = EntityPool(MAX_ITEMS)
        self.projectiles: EntityPool[Projectile] = EntityPool(MAX_PROJECTILES)
        self.floating_texts: EntityPool[FloatingText] = EntityPool(MAX_FLOATING_TEXTS)
        self.mini_bosses: EntityPool[MiniBoss] = EntityPool(MAX_MINI_BOSSES)
        self.boss: Optional[Boss] = None

        self.phase = Phase.SCAVENGE
        self.score = 0
        self.elapsed = 0.0
        self.schedule: EventState = create_event_state(self.rng, cfg.scavenge_duration)
        self.outcome: Optional[Outcome] = None
        self.running = True
        self.paused = False

        self._spawn_block_row()

    def resize(self, width: float, height: float) -> None:
        self.config = replace(self.config, width=width, height=height)

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def update(self, dt: float, controls: Optional[InputState] = None) -> None:
        """Advance the simulation by one frame of `dt` seconds."""
        if not self.running:
            return
        dt = max(0.0, min(dt, self.config.max_frame_dt))
        controls = controls or InputState()
        width, height = self.config.width, self.config.height
        self.elapsed += dt

        self.player.update(dt, controls, width, height)
        self._update_entities(dt)

        if self.phase is Phase.BOSS and self.boss is not None:
            self.boss.update(dt, self.player.x, self.player.y, width, height)
            self.projectiles.extend(self.boss.poll_projectiles())

        if self.player.is_firing_beam and self.player.beam_ready(dt):
            self._fire_beam()

        self._apply_events(self._resolve_collisions())
        self._check_outcome()
        self._prune()

        if self.running and self.phase is Phase.SCAVENGE:
            self._handle_schedule(update_events(self.schedule, dt, self.rng))

    def _update_entities(self, dt: float) -> None:
        scroll = self.schedule.scroll_speed
        player = self.player

        for block in self.blocks.active():
            update_block(block, dt, scroll)

        for item in self.items.active():
            update_item(item, dt, scroll)
            if player.has_magnet:
                magnet_pull(item, dt, player.x, player.y, player.magnet_range)

        target = (player.x, player.y)
        for proj in self.projectiles.active():
            update_projectile(proj, dt, target if proj.hostile else None)

        for mini in self.mini_bosses.active():
            update_mini_boss(mini, dt, player.x)

        floating_text_system(self.floating_texts.active(), dt)

    def _fire_beam(self) -> None:
        self.projectiles.add(Projectile(
            self.player.x, self.player.y - BEAM_OFFSET_Y,
            0.0, BEAM_VELOCITY, ProjectileType.BEAM,
        ))

    # -------------------------------------------------------------------------
    # Collisions
    # -------------------------------------------------------------------------

    def _resolve_collisions(self) -> List[dict]:
        player = self.player
        events = []
        events += player_block_system(player, self.blocks)
        events += mini_boss_system(player, self.mini_bosses)
        events += item_pickup_system(player, self.items)
        events += projectile_block_system(self.projectiles, self.blocks)

        boss = self.boss if self.phase is Phase.BOSS else None
        if boss is not None:
            events += projectile_boss_system(self.projectiles, boss)
            events += player_boss_system(player, boss)
            events += boss_projectile_system(self.projectiles, player)

        events += player_sword_system(player, self.blocks, self.projectiles, boss)
        return events

    def _apply_events(self, events: List[dict]) -> None:
        for event in events:
            kind = event['type']
            if kind == BLOCK_DESTROYED:
                self._on_block_destroyed(event)
            elif kind == BOSS_HIT:
                points = math.floor(event['damage'] * BOSS_SCORE_PER_DAMAGE)
                self.score += points
                if event['source'] != 'sword':
                    color = NEON_CYAN if event['source'] == 'projectile' else NEON_PINK
                    self.spawn_text(event['x'], event['y'], f'+{points}', color)
            elif kind == ITEM_COLLECTED:
                self._on_item_collected(event)
            elif kind == PROJECTILE_INTERCEPTED:
                self.score += INTERCEPT_SCORE
                self.spawn_text(event['x'], event['y'], f'BLOCK! +{INTERCEPT_SCORE}', NEON_ORANGE)
            elif kind == PROJECTILE_BLOCKED:
                self.spawn_text(event['x'], event['y'], 'BLOCKED!', NEON_RED)
            elif kind == MINI_BOSS_DESTROYED:
                self._on_mini_boss_destroyed(event)

    def _on_block_destroyed(self, event: dict) -> None:
        combo = self.schedule.register_break()
        bonus = combo * COMBO_SCORE_STEP
        self.score += event['block_type'].base_score + bonus
        x, y = event['x'], event['y']
        self.items.extend(
            spawn_drops(self.rng, x, y, event['block_type'], self.schedule.bonus_active)
        )
        if event['source'] == 'sword':
            self.spawn_text(x, y, 'SLASH!', NEON_ORANGE)
        elif combo > 1:
            self.spawn_text(x, y, f'x{combo} COMBO! +{bonus}', NEON_YELLOW)

    def _on_item_collected(self, event: dict) -> None:
        item_type = event['item_type']
        self.score += ITEM_PICKUP_SCORE
        text = item_type.pickup_text
        if event['hp_gain'] > 0:
            text = f"+{event['hp_gain']:.0f} HP"
        self.spawn_text(event['x'], event['y'], text, item_type.color)
        logger.debug('Picked up %s', item_type.label)

    def _on_mini_boss_destroyed(self, event: dict) -> None:
        self.score += MINI_BOSS_SCORE
        x, y = event['x'], event['y']
        self.spawn_text(x, y, f'+{MINI_BOSS_SCORE} MINI-BOSS!', NEON_MAGENTA)
        for item_type in MINI_BOSS_DROPS:
            self.items.add(Item(x + self.rng.random() * MINI_BOSS_DROP_SPREAD, y, item_type))
        logger.info('Mini-boss destroyed at %.1fs remaining', self.schedule.time_left)

    # -------------------------------------------------------------------------
    # Outcome
    # -------------------------------------------------------------------------

    def _check_outcome(self) -> None:
        if self.boss is not None and self.boss.defeated:
            self._finish(Outcome.WIN)
        elif self.player.hp <= 0:
            self._finish(Outcome.LOSE)
        elif self.player.y > self.config.height - self.player.radius:
            self._finish(Outcome.LOSE)

    def _finish(self, outcome: Outcome) -> None:
        """Latch the terminal state. Only the first call has any effect."""
        if self.outcome is not None:
            return
        self.outcome = outcome
        self.running = False
        result = self.result
        logger.info(
            'Run over: %s, score %d, max combo %d, %.1fs',
            outcome.value, result.score, result.max_combo, result.elapsed
        )
        if self.on_finish is not None:
            self.on_finish(result)

    @property
    def result(self) -> Optional[RunResult]:
        if self.outcome is None:
            return None
        return RunResult(self.score, self.outcome, self.schedule.max_combo, self.elapsed)

    # -------------------------------------------------------------------------
    # Pruning & scheduling
    # -------------------------------------------------------------------------

    def _prune(self) -> None:
        width, height = self.config.width, self.config.height
        bottom = height + OFFSCREEN_MARGIN
        self.blocks.prune(lambda b: b.y < bottom)
        self.items.prune(lambda i: i.y < bottom)
        self.mini_bosses.prune(lambda m: m.y < bottom)
        self.projectiles.prune(lambda p: in_play_bounds(p.x, p.y, width, height))
        self.floating_texts.prune()

    def _handle_schedule(self, fired: List[str]) -> None:
        width = self.config.width
        for event in fired:
            if event == EVENT_SPAWN_ROW:
                self._spawn_block_row()
            elif event == EVENT_GOLDEN_BLOCK:
                block = spawn_golden_block(self.rng, width, block_size(self.player.radius))
                self.blocks.add(block)
                self.spawn_text(block.x, block.y, 'GOLDEN BLOCK!', GOLD)
                logger.debug('Golden block spawned at x=%.0f', block.x)
            elif event == EVENT_MINI_BOSS:
                self.mini_bosses.add(create_mini_boss(self.rng, width))
                self.spawn_text(width / 2, 100, 'MINI-BOSS APPEARS!', NEON_MAGENTA)
                logger.info('Mini-boss spawned at %.1fs remaining', self.schedule.time_left)
            elif event == EVENT_BONUS_START:
                self.spawn_text(width / 2, 100, 'BONUS TIME! x2 ITEMS!', NEON_YELLOW)
            elif event == EVENT_BOSS_PHASE:
                self.start_boss_phase()

    def _spawn_block_row(self) -> None:
        if self.phase is not Phase.SCAVENGE:
            return
        row = spawn_block_row(
            self.rng, self.config.width,
            block_size(self.player.radius), len(self.blocks)
        )
        self.blocks.extend(row)

    def start_boss_phase(self) -> None:
        """Clear the field and bring in the boss."""
        if self.phase is Phase.BOSS:
            return
        self.phase = Phase.BOSS
        self.blocks.clear()
        self.items.clear()
        self.mini_bosses.clear()
        self.boss = Boss(self.config.width / 2 - 50, 50)
        logger.info('Boss phase started with score %d', self.score)

    def spawn_text(self, x: float, y: float, text: str, color: int) -> None:
        self.floating_texts.add(FloatingText(x, y, text, color))

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def hud(self) -> HudState:
        p = self.player
        return HudState(
            score=self.score,
            time_left=math.ceil(max(0.0, self.schedule.time_left)),
            hp=max(0, math.floor(p.hp)),
            atk_count=p.atk_count,
            spd_count=p.spd_count,
            def_count=p.def_count,
        )

    def snapshot(self) -> FrameSnapshot:
        boss_view = None
        if self.boss is not None:
            b = self.boss
            boss_view = BossView(
                b.x, b.y, b.width, b.height, b.hp, b.max_hp, b.phase,
                tuple(b.sword_positions()), b.is_charging_beam(), b.beam_charge_progress(),
            )
        return FrameSnapshot(
            phase=self.phase,
            player=copy.copy(self.player),
            blocks=tuple(copy.copy(e) for e in self.blocks.active()),
            items=tuple(copy.copy(e) for e in self.items.active()),
            projectiles=tuple(copy.copy(e) for e in self.projectiles.active()),
            floating_texts=tuple(copy.copy(e) for e in self.floating_texts.active()),
            mini_bosses=tuple(copy.copy(e) for e in self.mini_bosses.active()),
            player_swords=tuple(self.player.sword_positions()),
            boss=boss_view,
            combo=self.schedule.combo,
            bonus_active=self.schedule.bonus_active,
            hud=self.hud,
            outcome=self.outcome,
        )
