import pytest

from break_block_build.components import Block, Item, ItemType, Projectile, ProjectileType
from break_block_build.physics import Circle, box_overlap, circle_overlap, shape_box, shape_circle


def test_boxes_touching_edges_do_not_overlap():
    a = Block(0, 0, 10, 10)
    b = Block(10, 0, 10, 10)
    assert not box_overlap(a, b)


def test_boxes_overlap():
    assert box_overlap(Block(0, 0, 10, 10), Block(5, 5, 10, 10))


def test_circles_at_exact_radius_sum_do_not_overlap():
    assert not circle_overlap(Circle(0, 0, 5), Circle(10, 0, 5))
    assert circle_overlap(Circle(0, 0, 5), Circle(9, 0, 5))


def test_circle_tested_as_box_uses_bounding_square():
    block = Block(0, 0, 10, 10)
    assert not box_overlap(Circle(15, 5, 5), block)
    assert box_overlap(Circle(14, 5, 5), block)


def test_box_tested_as_circle_uses_centre_and_half_longest_side():
    assert shape_circle(Block(0, 0, 20, 40)) == (10, 20, 20)


def test_projectile_and_item_are_circles():
    proj = Projectile(0, 0, 0, 0, ProjectileType.BULLET)
    item = Item(14, 0, ItemType.ATK)
    assert shape_circle(proj) == (0, 0, 5)
    assert circle_overlap(proj, item)


def test_projectile_box_uses_its_footprint():
    beam = Projectile(100, 100, 0, -800, ProjectileType.BEAM)  # 20x40
    assert shape_box(beam) == (90, 80, 20, 40)
    assert not box_overlap(beam, Block(112, 90, 10, 10))
    assert box_overlap(beam, Block(100, 115, 10, 10))


def test_shapeless_object_raises():
    with pytest.raises(TypeError):
        shape_circle(object())
