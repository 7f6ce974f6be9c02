from break_block_build.engine import GameRenderer


class FakeTerminal:
    """Just enough of blessed.Terminal for the renderer."""
    width = 80
    height = 24
    normal = ''

    def move_xy(self, x, y):
        return ''

    def color(self, value):
        return ''

    def on_color(self, value):
        return ''

    def rgb_downconvert(self, r, g, b):
        return 51


def make_renderer():
    return GameRenderer(FakeTerminal(), 800.0, 420.0)


def test_world_to_cell_mapping():
    renderer = make_renderer()
    assert renderer.scale == (10.0, 20.0)
    assert renderer.to_cell(405.0, 219.0) == (40, 10)
    assert renderer.rect_cells(0.0, 0.0, 80.0, 80.0) == (0, 0, 8, 4)


def test_frame_draws_hud_and_only_redraws_changes(game):
    renderer = make_renderer()
    snapshot = game.snapshot()

    renderer.draw_frame(snapshot)
    assert 'BREAK BLOCK BUILD' in renderer.present()

    renderer.draw_frame(snapshot)
    assert renderer.present() == ''


def test_boss_phase_frame_renders(game):
    renderer = make_renderer()
    game.start_boss_phase()
    game.update(0.1)
    renderer.draw_frame(game.snapshot())
    output = renderer.present()
    assert 'P1' in output
    assert 'BOSS:' in output


def test_playfield_writes_clipped_above_hud():
    renderer = make_renderer()
    renderer.clear()
    renderer.put(0, renderer.game_height, 'X')
    assert renderer.buffer.back[renderer.game_height][0].char == ' '
