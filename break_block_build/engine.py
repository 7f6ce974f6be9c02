"""
Rendering Engine
=================
Double-buffered terminal renderer. World coordinates (pixels) are mapped
onto character cells; the bottom three rows are reserved for the HUD.
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import math
import random

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")

from .components import (
    Block, BlockType, FloatingText, Item, Projectile, ProjectileType,
    GOLD, GRAY_DARK, GRAY_LIGHT, GRAY_MED, NEON_CYAN, NEON_GREEN, NEON_MAGENTA,
    NEON_ORANGE, NEON_PINK, NEON_RED, NEON_YELLOW, WHITE,
)
from .enemies import MiniBoss
from .game import BossView, FrameSnapshot, HudState
from .physics import Circle
from .player import Player


GRAY_DARKER = 235
HUD_ROWS = 3

PROJECTILE_GLYPHS = {
    ProjectileType.BEAM: ('|', NEON_CYAN),
    ProjectileType.BULLET: ('*', NEON_CYAN),
    ProjectileType.BOSS_BULLET: ('o', NEON_RED),
    ProjectileType.HOMING_MISSILE: ('v', NEON_ORANGE),
    ProjectileType.BOSS_BEAM: ('#', NEON_MAGENTA),
    ProjectileType.BOOMERANG: ('%', NEON_YELLOW),
    ProjectileType.DEATH_RAY: ('#', NEON_RED),
}

# Block fill by remaining hp fraction
DAMAGE_SHADES = ((0.66, '█'), (0.33, '▓'), (0.0, '▒'))


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7
    bg_color: int = -1  # -1 = transparent/default

    def matches(self, other: 'Cell') -> bool:
        return (
            self.char == other.char and
            self.fg_color == other.fg_color and
            self.bg_color == other.bg_color
        )

    def reset(self):
        self.char = ' '
        self.fg_color = 7
        self.bg_color = -1


class DoubleBuffer:
    """
    Writes go to a back buffer; present() emits only the cells that differ
    from the front buffer, then swaps them.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()
        self._normal = term.normal

    def _init_buffers(self):
        self.front = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        self.back = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height
        self._init_buffers()

    def clear_back(self):
        for row in self.back:
            for cell in row:
                cell.reset()

    def put(self, x: int, y: int, char: str, fg_color: int = 7, bg_color: int = -1):
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color
            cell.bg_color = bg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7, bg_color: int = -1):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color, bg_color)

    def present(self) -> str:
        """Swap buffers and return the escape sequence for changed cells."""
        output_parts = []
        normal = self._normal

        for y in range(self.height):
            for x in range(self.width):
                back_cell = self.back[y][x]
                if back_cell.matches(self.front[y][x]):
                    continue
                output_parts.append(self.term.move_xy(x, y))
                output_parts.append(normal)
                if back_cell.bg_color >= 0:
                    output_parts.append(self.term.on_color(back_cell.bg_color))
                output_parts.append(self.term.color(back_cell.fg_color))
                output_parts.append(back_cell.char or ' ')

        self.front, self.back = self.back, self.front
        return ''.join(output_parts)


@dataclass
class GameRenderer:
    """
    Draws one FrameSnapshot per frame.

    world_width/world_height are the simulation viewport in pixels; they
    are scaled onto the terminal cells above the HUD rows. A drop in player
    hp between frames triggers a short screen shake.
    """
    term: Terminal
    world_width: float
    world_height: float
    buffer: DoubleBuffer = field(init=False)

    shake_x: int = 0
    shake_y: int = 0
    shake_frames: int = 0
    shake_intensity: int = 1
    last_hp: int = -1

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def game_height(self) -> int:
        """Rows available to the playfield."""
        return self.buffer.height - HUD_ROWS

    @property
    def scale(self) -> Tuple[float, float]:
        """Pixels per cell along x and y."""
        return self.world_width / self.width, self.world_height / self.game_height

    def resize(self, width: int, height: int, world_width: float, world_height: float):
        self.buffer.resize(width, height)
        self.world_width = world_width
        self.world_height = world_height

    # -------------------------------------------------------------------------
    # Coordinate mapping
    # -------------------------------------------------------------------------

    def to_cell(self, x: float, y: float) -> Tuple[int, int]:
        sx, sy = self.scale
        return int(math.floor(x / sx)) + self.shake_x, int(math.floor(y / sy)) + self.shake_y

    def rect_cells(self, x: float, y: float, w: float, h: float) -> Tuple[int, int, int, int]:
        """Cell-space (col, row, cols, rows) covering a pixel rectangle, at least 1x1."""
        sx, sy = self.scale
        col, row = self.to_cell(x, y)
        cols = max(1, int(math.ceil((x + w) / sx)) - int(math.floor(x / sx)))
        rows = max(1, int(math.ceil((y + h) / sy)) - int(math.floor(y / sy)))
        return col, row, cols, rows

    def put(self, col: int, row: int, char: str, fg_color: int = 7):
        """Playfield write; anything that would land on the HUD is clipped."""
        if row < self.game_height:
            self.buffer.put(col, row, char, fg_color)

    def put_string(self, col: int, row: int, text: str, fg_color: int = 7):
        if row < self.game_height:
            self.buffer.put_string(col, row, text, fg_color)

    def fill_rect(self, x: float, y: float, w: float, h: float, char: str, color: int):
        col, row, cols, rows = self.rect_cells(x, y, w, h)
        for j in range(rows):
            for i in range(cols):
                self.put(col + i, row + j, char, color)

    # -------------------------------------------------------------------------
    # Frame lifecycle
    # -------------------------------------------------------------------------

    def trigger_shake(self, intensity: int = 1, frames: int = 4):
        self.shake_intensity = intensity
        self.shake_frames = max(self.shake_frames, frames)

    def _update_shake(self):
        if self.shake_frames > 0:
            self.shake_x = random.randint(-self.shake_intensity, self.shake_intensity)
            self.shake_y = random.randint(-self.shake_intensity, self.shake_intensity)
            self.shake_frames -= 1
        else:
            self.shake_x = 0
            self.shake_y = 0

    def clear(self):
        """Begin a new frame."""
        self.buffer.clear_back()
        self._update_shake()

    def present(self) -> str:
        """Finish the frame; returns the terminal output for changed cells."""
        return self.buffer.present()

    def draw_frame(self, snapshot: FrameSnapshot):
        """Draw every entity in a snapshot plus the HUD, in back-to-front order."""
        if 0 <= snapshot.hud.hp < self.last_hp:
            self.trigger_shake()
        self.last_hp = snapshot.hud.hp

        self.clear()
        for block in snapshot.blocks:
            self.draw_block(block)
        for item in snapshot.items:
            self.draw_item(item)
        for mini in snapshot.mini_bosses:
            self.draw_mini_boss(mini)
        if snapshot.boss is not None:
            self.draw_boss(snapshot.boss)
        for proj in snapshot.projectiles:
            self.draw_projectile(proj)
        self.draw_player(snapshot.player, snapshot.player_swords)
        for text in snapshot.floating_texts:
            self.draw_floating_text(text)
        self.draw_hud(snapshot)

    # -------------------------------------------------------------------------
    # Entity drawing
    # -------------------------------------------------------------------------

    def draw_block(self, block: Block):
        ratio = block.hp / block.max_hp if block.max_hp > 0 else 0.0
        char = next(c for bound, c in DAMAGE_SHADES if ratio > bound or bound == 0.0)
        self.fill_rect(block.x, block.y, block.width, block.height, char,
                       block.block_type.color)
        if block.block_type is BlockType.GOLDEN:
            col, row = self.to_cell(*block.center)
            self.put(col, row, '$', WHITE)

    def draw_item(self, item: Item):
        col, row = self.to_cell(item.x, item.y)
        # Pulse between the item's colour and white
        color = item.item_type.color if math.sin(item.pulse) >= 0 else WHITE
        self.put_string(col - 1, row, f'[{item.item_type.label[0]}]', color)

    def draw_projectile(self, proj: Projectile):
        char, color = PROJECTILE_GLYPHS.get(proj.projectile_type, ('*', WHITE))
        if proj.projectile_type is ProjectileType.HOMING_MISSILE:
            char = _heading_glyph(proj.vx, proj.vy)
        col, row = self.to_cell(proj.x, proj.y)
        self.put(col, row, char, color)

    def draw_floating_text(self, text: FloatingText):
        col, row = self.to_cell(text.x, text.y)
        color = text.color if text.life > 0.3 else GRAY_MED
        self.put_string(col - len(text.text) // 2, row, text.text, color)

    def draw_mini_boss(self, mini: MiniBoss):
        self.fill_rect(mini.x, mini.y, mini.width, mini.height, '▓', NEON_MAGENTA)
        col, row = self.to_cell(mini.x, mini.y)
        hp_text = f'{max(0, math.ceil(mini.hp))}'
        self.put_string(col, row, hp_text, WHITE)

    def draw_boss(self, boss: BossView):
        color = (NEON_RED, NEON_ORANGE, NEON_MAGENTA)[min(boss.phase, 3) - 1]
        self.fill_rect(boss.x, boss.y, boss.width, boss.height, '█', color)

        col, row, cols, _rows = self.rect_cells(boss.x, boss.y, boss.width, boss.height)
        label = f'P{boss.phase}'
        self.put_string(col + max(0, (cols - len(label)) // 2), row, label, WHITE)

        if boss.beam_charging:
            bar_width = max(3, cols)
            filled = int(boss.beam_progress * bar_width)
            bar = '!' * filled + '.' * (bar_width - filled)
            _, bottom = self.to_cell(boss.x, boss.y + boss.height)
            self.put_string(col, bottom, bar, NEON_YELLOW)

        for tip in boss.swords:
            self._draw_circle(tip, '+', NEON_RED)

    def draw_player(self, player: Player, swords=()):
        r, g, b = player.rgb
        color = self.term.rgb_downconvert(r, g, b)
        if player.invincible:
            color = random.choice((NEON_YELLOW, NEON_PINK, NEON_GREEN, WHITE))
        self._draw_circle(Circle(player.x, player.y, player.radius), '█', color)

        col, row = self.to_cell(player.x, player.y)
        glyph = '@'
        if player.is_dashing:
            glyph = '!'
        elif player.is_charging:
            glyph = str(min(9, int(player.charge_power // 2)))
        self.put(col, row, glyph, WHITE)

        for tip in swords:
            self._draw_circle(tip, '/', GRAY_LIGHT)

    def _draw_circle(self, circle: Circle, char: str, color: int):
        """Fill the cells whose centres fall inside the circle."""
        sx, sy = self.scale
        col, row, cols, rows = self.rect_cells(
            circle.x - circle.radius, circle.y - circle.radius,
            circle.radius * 2, circle.radius * 2
        )
        for j in range(rows):
            for i in range(cols):
                cx = (col - self.shake_x + i + 0.5) * sx
                cy = (row - self.shake_y + j + 0.5) * sy
                if math.hypot(cx - circle.x, cy - circle.y) <= circle.radius:
                    self.put(col + i, row + j, char, color)
        if cols * rows > 0 and circle.radius < max(sx, sy):
            c, r = self.to_cell(circle.x, circle.y)
            self.put(c, r, char, color)

    # -------------------------------------------------------------------------
    # HUD
    # -------------------------------------------------------------------------

    def draw_hud(self, snapshot: FrameSnapshot):
        """Render the HUD in the bottom rows."""
        hud: HudState = snapshot.hud
        ui_y = self.game_height
        width = self.width

        self.buffer.put_string(0, ui_y, '=' * width, GRAY_DARK)
        self.buffer.put_string(2, ui_y, ' BREAK BLOCK BUILD ', NEON_CYAN)

        if snapshot.boss is None:
            status = f' TIME:{hud.time_left:>3} '
        else:
            status = f' BOSS PHASE {snapshot.boss.phase} '
        self.buffer.put_string(width - len(status) - 1, ui_y, status, NEON_YELLOW)

        row1 = ui_y + 1
        hp_color = NEON_GREEN if hud.hp > 30 else NEON_RED
        self.buffer.put_string(2, row1, f'SCORE:{hud.score:<8}', WHITE)
        self.buffer.put_string(18, row1, f'HP:{hud.hp:<5}', hp_color)
        stats = f'ATK:{hud.atk_count} SPD:{hud.spd_count} DEF:{hud.def_count}'
        self.buffer.put_string(28, row1, stats, GRAY_LIGHT)

        if snapshot.combo > 1:
            combo = f'x{snapshot.combo} COMBO'
            self.buffer.put_string(width - len(combo) - 2, row1, combo, NEON_YELLOW)
        if snapshot.bonus_active:
            self.buffer.put_string(width - 30, row1, 'BONUS x2', GOLD)

        row2 = ui_y + 2
        if snapshot.boss is not None:
            boss = snapshot.boss
            bar_width = max(10, min(40, width - 40))
            filled = max(0, int(boss.hp / boss.max_hp * bar_width))
            bar = '|' * filled + '.' * (bar_width - filled)
            self.buffer.put_string(2, row2, 'BOSS:', GRAY_MED)
            self.buffer.put_string(8, row2, f'[{bar}]', NEON_RED)
        else:
            controls = 'WASD:Move  SPACE:Charge/Fire  P:Pause  Q:Quit'
            self.buffer.put_string(2, row2, controls, GRAY_DARKER)


    def draw_banner(self, lines, color: int = WHITE, y: int = None):
        """Centre a block of text lines over the playfield."""
        if y is None:
            y = self.game_height // 2 - len(lines) // 2
        for i, line in enumerate(lines):
            x = self.width // 2 - len(line) // 2
            self.buffer.put_string(max(0, x), y + i, line, color)


def _heading_glyph(vx: float, vy: float) -> str:
    """Arrow-ish glyph for a velocity vector."""
    if abs(vx) > abs(vy):
        return '>' if vx > 0 else '<'
    return 'v' if vy >= 0 else '^'
