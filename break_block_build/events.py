"""
Scavenge Event Scheduler
=========================
Independent timers that run only during the scavenge phase. Each timer
re-arms itself when it fires; `update_events` reports what fired this
frame so the Game can spawn entities and announce them.
"""

from dataclasses import dataclass, field
from typing import List
import logging
import random

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

COMBO_WINDOW = 2.0

BASE_SCROLL_SPEED = 70.0
SCROLL_ACCEL = 2.0  # px/s gained per elapsed second
BASE_SPAWN_INTERVAL = 1.0
SPAWN_INTERVAL_DECAY = 0.01
MIN_SPAWN_INTERVAL = 0.5

BONUS_INTERVAL_RANGE = (15.0, 25.0)
BONUS_DURATION = 5.0
GOLDEN_INTERVAL_RANGE = (8.0, 12.0)
MINI_BOSS_THRESHOLDS = (30.0, 15.0)  # Remaining scavenge seconds

# Event names reported by update_events
EVENT_SPAWN_ROW = 'spawn_row'
EVENT_COMBO_RESET = 'combo_reset'
EVENT_BONUS_START = 'bonus_start'
EVENT_BONUS_END = 'bonus_end'
EVENT_GOLDEN_BLOCK = 'golden_block'
EVENT_MINI_BOSS = 'mini_boss'
EVENT_BOSS_PHASE = 'boss_phase'


def _uniform(rng: random.Random, bounds) -> float:
    low, high = bounds
    return low + rng.random() * (high - low)


@dataclass
class EventState:
    """Run clock, combo and every scavenge-phase timer."""
    duration: float = 60.0
    time_left: float = 60.0

    combo: int = 0
    combo_timer: float = 0.0
    max_combo: int = 0

    scroll_speed: float = BASE_SCROLL_SPEED
    spawn_interval: float = BASE_SPAWN_INTERVAL
    spawn_timer: float = 0.0

    bonus_active: bool = False
    bonus_timer: float = 0.0
    next_bonus: float = 20.0

    golden_timer: float = 0.0
    golden_interval: float = 10.0

    mini_boss_spawned: List[bool] = field(
        default_factory=lambda: [False] * len(MINI_BOSS_THRESHOLDS)
    )

    @property
    def elapsed(self) -> float:
        return self.duration - self.time_left

    def register_break(self) -> int:
        """A block was destroyed: extend the combo. Returns the new combo."""
        self.combo += 1
        self.combo_timer = 0.0
        self.max_combo = max(self.max_combo, self.combo)
        return self.combo


def create_event_state(rng: random.Random, duration: float) -> EventState:
    return EventState(
        duration=duration,
        time_left=duration,
        next_bonus=_uniform(rng, BONUS_INTERVAL_RANGE),
        golden_interval=_uniform(rng, GOLDEN_INTERVAL_RANGE),
    )


def update_events(state: EventState, dt: float, rng: random.Random) -> List[str]:
    """Advance every scavenge timer by dt and return the events that fired."""
    fired = []

    # Combo decay
    if state.combo > 0:
        state.combo_timer += dt
        if state.combo_timer > COMBO_WINDOW:
            state.combo = 0
            state.combo_timer = 0.0
            fired.append(EVENT_COMBO_RESET)

    # Progressive difficulty
    elapsed = state.elapsed
    state.scroll_speed = BASE_SCROLL_SPEED + elapsed * SCROLL_ACCEL
    state.spawn_interval = max(
        MIN_SPAWN_INTERVAL, BASE_SPAWN_INTERVAL - elapsed * SPAWN_INTERVAL_DECAY
    )

    # Block rows
    state.spawn_timer += dt
    if state.spawn_timer > state.spawn_interval:
        state.spawn_timer = 0.0
        fired.append(EVENT_SPAWN_ROW)

    # Bonus time window
    state.bonus_timer += dt
    if state.bonus_active:
        if state.bonus_timer >= BONUS_DURATION:
            state.bonus_active = False
            state.bonus_timer = 0.0
            state.next_bonus = _uniform(rng, BONUS_INTERVAL_RANGE)
            fired.append(EVENT_BONUS_END)
            logger.info('Bonus time ended; next in %.1fs', state.next_bonus)
    elif state.bonus_timer >= state.next_bonus:
        state.bonus_active = True
        state.bonus_timer = 0.0
        fired.append(EVENT_BONUS_START)
        logger.info('Bonus time started at %.1fs remaining', state.time_left)

    # Golden block
    state.golden_timer += dt
    if state.golden_timer >= state.golden_interval:
        state.golden_timer = 0.0
        state.golden_interval = _uniform(rng, GOLDEN_INTERVAL_RANGE)
        fired.append(EVENT_GOLDEN_BLOCK)

    # Mini-bosses (one-shot each)
    for i, threshold in enumerate(MINI_BOSS_THRESHOLDS):
        if not state.mini_boss_spawned[i] and state.time_left <= threshold:
            state.mini_boss_spawned[i] = True
            fired.append(EVENT_MINI_BOSS)

    # Scavenge countdown
    state.time_left -= dt
    if state.time_left <= 0:
        state.time_left = 0.0
        fired.append(EVENT_BOSS_PHASE)

    return fired
