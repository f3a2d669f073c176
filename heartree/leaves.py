"""Leaves of the heart-shaped crown.

Placement is rejection sampling against the implicit heart curve

    (x^2 + y^2 - 1)^3 - x^2 * y^3 <= 0

Each leaf draws uniform candidates inside a square box and keeps the first
one that lands inside the curve. A leaf that misses `max_attempts` times is
dropped, so a small acceptance region yields fewer leaves than requested.
"""
import math
import random
from typing import List, Mapping, Sequence

import skia

from engine.animation import ease_out_back, progress
from engine.assets import build_sprite_cache
from engine.physics import Vec2
from engine.sprite import Sprite
from lib import tlog

LEAF_DURATION = 0.7
LEAF_BASE_SIZE = 30.0
CLOSED_ROTATION = math.radians(-90)
SPRITE_SIZE = 64
SPRITE_DENSITY = 2.0


def in_heart(x: float, y: float) -> bool:
    return (x * x + y * y - 1) ** 3 - x * x * y ** 3 <= 0


def candidate_in_heart(rx: float, ry: float, scale: float) -> bool:
    """Test a box offset (screen axes, y down) against the curve."""
    nx = rx / scale
    ny = -ry / scale + 0.3
    return in_heart(nx * 1.1, ny)


def random_offset(rng: random.Random, box: float) -> Vec2:
    return Vec2((rng.random() - 0.5) * box, (rng.random() - 0.5) * box)


def sample_heart_points(
    rng: random.Random,
    count: int,
    center: Vec2,
    box: float = 950.0,
    scale: float = 300.0,
    max_attempts: int = 200,
) -> List[Vec2]:
    points = []
    for _ in range(count):
        for _ in range(max_attempts):
            off = random_offset(rng, box)
            if candidate_in_heart(off.x, off.y, scale):
                points.append(center + off)
                break

    dropped = count - len(points)
    if dropped:
        tlog.debug(f"Leaves: {dropped}/{count} placements exhausted their retries")
    return points


class Leaf:
    def __init__(self, pos: Vec2, color: int, start_time: float, rng: random.Random,
                 duration: float = LEAF_DURATION):
        self.pos = pos
        self.color = color
        self.start_time = start_time
        self.duration = duration

        self.size = (28 + (rng.random() - 0.5) * 14) / LEAF_BASE_SIZE
        self.start_rotation = CLOSED_ROTATION
        self.target_rotation = math.radians(rng.random() * 60 - 30)

        self.scale = 0.0
        self.opacity = 0.0
        self.rotation = self.start_rotation
        self.sprite: Sprite | None = None

    def advance(self, time: float):
        if time < self.start_time:
            return
        t = progress(time, self.start_time, self.duration)
        self.scale = ease_out_back(t) * self.size
        self.opacity = min(t * 3, 1.0)
        self.rotation = self.start_rotation + (self.target_rotation - self.start_rotation) * min(t * 1.5, 1.0)

    def render(self, canvas: skia.Canvas, sprites: Mapping[int, skia.Image]):
        if self.scale <= 0:
            return
        # One sprite per leaf, bound to the cached image on first draw
        if self.sprite is None:
            self.sprite = Sprite(sprites[self.color], density=SPRITE_DENSITY)
        self.sprite.rotation = self.rotation
        self.sprite.scale.x = self.sprite.scale.y = self.scale
        self.sprite.alpha = self.opacity
        self.sprite.render(canvas, self.pos)


def generate_leaves(
    rng: random.Random,
    center: Vec2,
    palette: Sequence[int],
    count: int = 750,
    box: float = 950.0,
    scale: float = 300.0,
    max_attempts: int = 200,
    window_start: float = 1.2,
    window_span: float = 3.8,
) -> List[Leaf]:
    if not palette or count <= 0:
        return []
    leaves = []
    for pos in sample_heart_points(rng, count, center, box, scale, max_attempts):
        color = palette[rng.randrange(len(palette))]
        start = window_start + rng.random() * window_span
        leaves.append(Leaf(pos, color, start, rng))
    tlog.info(f"Leaves: Placed {len(leaves)} of {count}")
    return leaves


def paint_leaf(canvas: skia.Canvas, color: int):
    """Leaf shape at base size, pointing down from the sprite center."""
    canvas.translate(SPRITE_SIZE * SPRITE_DENSITY / 2, SPRITE_SIZE * SPRITE_DENSITY / 2)
    canvas.scale(SPRITE_DENSITY, SPRITE_DENSITY)

    path = skia.Path()
    path.moveTo(0, -10)
    path.cubicTo(-15, -25, -35, -5, 0, 15)
    path.cubicTo(35, -5, 15, -25, 0, -10)
    path.close()

    paint = skia.Paint(
        Color=color,
        AntiAlias=True,
        Style=skia.Paint.kFill_Style,
        ImageFilter=skia.ImageFilters.DropShadow(2, 2, 2.5, 2.5, skia.Color(0, 0, 0, 77)),
    )
    canvas.drawPath(path, paint)


def build_leaf_sprites(palette: Sequence[int]) -> Mapping[int, skia.Image]:
    return build_sprite_cache(palette, int(SPRITE_SIZE * SPRITE_DENSITY), paint_leaf)


def leaf_center(top: Vec2, lift: float = 200.0) -> Vec2:
    return Vec2(top.x, top.y - lift)


def acceptance_rate(rng: random.Random, trials: int, box: float = 950.0, scale: float = 300.0) -> float:
    if trials <= 0:
        return 0.0
    hits = 0
    for _ in range(trials):
        off = random_offset(rng, box)
        hits += candidate_in_heart(off.x, off.y, scale)
    return hits / trials
