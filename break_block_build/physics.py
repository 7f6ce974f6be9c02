"""
Collision Predicates
=====================
Pure geometric tests between entities that expose either a box shape
(`x, y, width, height`, top-left) or a circle shape (`x, y, radius`, centre).
"""

from dataclasses import dataclass
from typing import Tuple
import math


@dataclass
class Circle:
    """Ad-hoc circle for shapes that are not entities (sword tips, boss body)."""
    x: float
    y: float
    radius: float


def _is_circle(entity) -> bool:
    return hasattr(entity, 'radius')


def _is_box(entity) -> bool:
    return hasattr(entity, 'width') and hasattr(entity, 'height')


def shape_box(entity) -> Tuple[float, float, float, float]:
    """
    Return (left, top, width, height).

    Centre-anchored entities that also carry a footprint (projectiles) are
    boxed by that footprint. Plain circles yield their bounding square.
    """
    if _is_circle(entity):
        if _is_box(entity):
            w, h = entity.width, entity.height
            return entity.x - w / 2, entity.y - h / 2, w, h
        r = entity.radius
        return entity.x - r, entity.y - r, r * 2, r * 2
    return entity.x, entity.y, entity.width, entity.height


def shape_circle(entity) -> Tuple[float, float, float]:
    """Return (cx, cy, radius). Boxes yield a circle on their centre."""
    if _is_circle(entity):
        return entity.x, entity.y, entity.radius
    if not _is_box(entity):
        raise TypeError(f'{type(entity).__name__} exposes no box or circle shape')
    return (
        entity.x + entity.width / 2,
        entity.y + entity.height / 2,
        max(entity.width, entity.height) / 2,
    )


def box_overlap(a, b) -> bool:
    """Separating-axis test on two axis-aligned rectangles (touching is no overlap)."""
    ax, ay, aw, ah = shape_box(a)
    bx, by, bw, bh = shape_box(b)
    return (
        ax < bx + bw and
        ax + aw > bx and
        ay < by + bh and
        ay + ah > by
    )


def circle_overlap(a, b) -> bool:
    """True iff centre distance is strictly less than the sum of radii."""
    ax, ay, ar = shape_circle(a)
    bx, by, br = shape_circle(b)
    return math.hypot(ax - bx, ay - by) < ar + br
