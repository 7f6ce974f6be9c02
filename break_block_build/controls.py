"""
Input Contract
===============
The simulation consumes an `InputState` per frame: a movement vector of
magnitude <= 1 and an "action held" flag. `InputHandler` builds one from
blessed keystrokes.
"""

from dataclasses import dataclass
from typing import Dict
import math


@dataclass(frozen=True)
class InputState:
    """Per-frame input snapshot handed to the Player."""
    move_x: float = 0.0
    move_y: float = 0.0
    action: bool = False

    @classmethod
    def from_vector(cls, dx: float, dy: float, action: bool = False) -> 'InputState':
        """Build a state, scaling the vector down to unit length if longer."""
        length = math.hypot(dx, dy)
        if length > 1.0:
            dx /= length
            dy /= length
        return cls(dx, dy, action)


MOVE_KEYS = {
    'w': (0, -1), 's': (0, 1), 'a': (-1, 0), 'd': (1, 0),
    'KEY_UP': (0, -1), 'KEY_DOWN': (0, 1),
    'KEY_LEFT': (-1, 0), 'KEY_RIGHT': (1, 0),
}
ACTION_KEY = ' '


class InputHandler:
    """
    Handles player input with key hold detection.

    Terminals deliver key repeats but no key-up events, so every press
    refreshes a hold timer and the key counts as held until the timer
    runs out.
    """

    def __init__(self, hold_duration: float = 0.2, action_hold_duration: float = 0.5):
        self.keys_held: Dict[str, float] = {}  # key -> seconds remaining
        self.hold_duration = hold_duration
        # Outlasts the auto-repeat delay so a held SPACE keeps charging
        self.action_hold_duration = action_hold_duration

        # Actions triggered this frame (consumed on read)
        self._quit_triggered = False
        self._pause_triggered = False
        self._restart_triggered = False

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        if key is None or not key:
            return

        key_str = key.lower() if not key.is_sequence else ''
        name = key.name or ''

        if key_str == 'q' or name == 'KEY_ESCAPE':
            self._quit_triggered = True
        elif key_str == 'p':
            self._pause_triggered = True
        elif key_str == 'r':
            self._restart_triggered = True
        elif key_str == ACTION_KEY:
            self.keys_held[ACTION_KEY] = self.action_hold_duration
        elif key_str in MOVE_KEYS:
            self.keys_held[key_str] = self.hold_duration
        elif name in MOVE_KEYS:
            self.keys_held[name] = self.hold_duration

    def update(self, dt: float) -> None:
        """Decay key hold timers (call once per frame)."""
        expired = []
        for key, remaining in self.keys_held.items():
            self.keys_held[key] = remaining - dt
            if self.keys_held[key] <= 0:
                expired.append(key)
        for key in expired:
            del self.keys_held[key]

    def get_movement_vector(self) -> tuple:
        """Get current movement direction based on held keys."""
        dx, dy = 0.0, 0.0
        for key in self.keys_held:
            if key in MOVE_KEYS:
                kx, ky = MOVE_KEYS[key]
                dx += kx
                dy += ky
        dx = max(-1.0, min(1.0, dx))
        dy = max(-1.0, min(1.0, dy))

        # Normalize diagonal movement
        if dx != 0 and dy != 0:
            length = math.sqrt(dx * dx + dy * dy)
            dx /= length
            dy /= length

        return dx, dy

    @property
    def action_held(self) -> bool:
        return ACTION_KEY in self.keys_held

    def snapshot(self) -> InputState:
        dx, dy = self.get_movement_vector()
        return InputState.from_vector(dx, dy, self.action_held)

    def consume_quit(self) -> bool:
        """Check and consume quit trigger."""
        triggered = self._quit_triggered
        self._quit_triggered = False
        return triggered

    def consume_pause(self) -> bool:
        """Check and consume pause toggle trigger."""
        triggered = self._pause_triggered
        self._pause_triggered = False
        return triggered

    def consume_restart(self) -> bool:
        """Check and consume restart trigger."""
        triggered = self._restart_triggered
        self._restart_triggered = False
        return triggered
