import random

from break_block_build.enemies import create_mini_boss, update_mini_boss


def test_spawns_above_screen_inside_width():
    mini = create_mini_boss(random.Random(2), 800.0)
    assert mini.y == -100.0
    assert 0 <= mini.x <= 720.0
    assert mini.hp == 50


def test_descends_and_tracks_target():
    mini = create_mini_boss(random.Random(2), 800.0)
    mini.x = 100.0
    update_mini_boss(mini, 1.0, target_x=600.0)
    assert mini.y == -50.0
    assert mini.x == 130.0

    update_mini_boss(mini, 1.0, target_x=0.0)
    assert mini.x == 100.0
