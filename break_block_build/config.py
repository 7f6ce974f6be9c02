"""
Game Configuration
===================
Viewport bounds and run tuning, injected into the Game instead of being
read from the terminal or the clock at arbitrary points.
"""

from dataclasses import dataclass
from typing import Optional
import logging


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_WIDTH = 800.0
DEFAULT_HEIGHT = 600.0
MAX_FRAME_DT = 0.1  # Tab-switch / terminal stall clamp
SCAVENGE_DURATION = 60.0

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


@dataclass(frozen=True)
class GameConfig:
    """Viewport bounds and top-level run settings."""
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    max_frame_dt: float = MAX_FRAME_DT
    scavenge_duration: float = SCAVENGE_DURATION
    seed: Optional[int] = None

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f'viewport must be positive, got {self.width}x{self.height}'
            )
        if self.max_frame_dt <= 0:
            raise ValueError(f'max_frame_dt must be positive, got {self.max_frame_dt}')
        if self.scavenge_duration <= 0:
            raise ValueError(
                f'scavenge_duration must be positive, got {self.scavenge_duration}'
            )


def setup_logging(level: str = 'INFO', log_file: Optional[str] = None) -> None:
    """
    Configure root logging for a play session.

    The terminal belongs to the renderer while playing, so records go to a
    file. Without a file, a NullHandler keeps stray records off the screen.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = logging.NullHandler()
    root.addHandler(handler)
