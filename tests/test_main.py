from break_block_build.components import Outcome
from break_block_build.controls import InputHandler
from break_block_build.main import FRAME_TIME, parse_args, run_loop, viewport_for
from conftest import FakeKey


class ScriptedTerminal:
    """Feeds keys in batches; an empty key ends the current batch."""
    width = 80
    height = 24

    def __init__(self, keys):
        self.keys = list(keys)

    def inkey(self, timeout=0):
        if self.keys:
            return self.keys.pop(0)
        return FakeKey('')


class ResizingTerminal(ScriptedTerminal):
    """Takes the next size from `sizes` each time a key batch ends."""
    home = ''
    clear = ''

    def __init__(self, keys, sizes):
        super().__init__(keys)
        self.sizes = list(sizes)

    def inkey(self, timeout=0):
        key = super().inkey(timeout)
        if not key and self.sizes:
            self.width, self.height = self.sizes.pop(0)
        return key


class RecordingRenderer:
    def __init__(self):
        self.frames = 0
        self.banners = []
        self.sizes = []

    def resize(self, width, height, world_width, world_height):
        self.sizes.append((width, height))

    def draw_frame(self, snapshot):
        self.frames += 1

    def draw_banner(self, lines, color=None, y=None):
        self.banners.extend(lines)

    def present(self):
        return ''

    @property
    def game_height(self):
        return 21


def fake_clock():
    ticks = iter(range(10000))
    return lambda: next(ticks) * FRAME_TIME


def run(game, keys):
    renderer = RecordingRenderer()
    result = run_loop(game, renderer, InputHandler(), ScriptedTerminal(keys),
                      clock=fake_clock(), sleep=lambda seconds: None)
    return result, renderer


def test_quit_stops_loop_without_result(game):
    result, renderer = run(game, [FakeKey('q')])
    assert result is None
    assert renderer.frames == 0


def test_frames_advance_game(game):
    result, renderer = run(game, [FakeKey(''), FakeKey(''), FakeKey('q')])
    assert result is None
    assert renderer.frames == 2
    assert game.elapsed > 0


def test_pause_freezes_simulation(game):
    _, renderer = run(game, [FakeKey('p'), FakeKey(''), FakeKey('q')])
    assert game.paused
    assert game.elapsed == 0
    assert '[ PAUSED ]' in renderer.banners


def test_result_screen_after_game_over(game):
    game.player.hp = 0
    result, renderer = run(game, [FakeKey(''), FakeKey('q')])
    assert result.outcome is Outcome.LOSE
    assert any('FINAL SCORE' in line for line in renderer.banners)


def test_restart_key_resets_run(game):
    game.player.hp = 0
    run(game, [FakeKey(''), FakeKey('r'), FakeKey(''), FakeKey('q')])
    assert game.outcome is None
    assert game.running



def test_shrunken_terminal_holds_the_run(game, capsys):
    renderer = RecordingRenderer()
    term = ResizingTerminal([FakeKey('')] * 3 + [FakeKey('q')],
                            [(40, 3), (40, 3), (100, 30)])
    run_loop(game, renderer, InputHandler(), term,
             clock=fake_clock(), sleep=lambda seconds: None)

    assert 'Terminal too small: 40x3' in capsys.readouterr().out
    assert renderer.sizes == [(100, 30)]
    assert renderer.frames == 1
    assert (game.config.width, game.config.height) == (1000, 540)


def test_viewport_scales_terminal_cells():
    assert viewport_for(80, 24) == (800, 420)


def test_cli_arguments():
    args = parse_args(['--seed', '7', '--duration', '30', '--log-level', 'DEBUG'])
    assert args.seed == 7
    assert args.duration == 30.0
    assert args.log_level == 'DEBUG'
    assert args.log_file is None
