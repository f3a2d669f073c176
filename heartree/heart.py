from typing import Callable, Optional

import skia

from engine.physics import RigidBody, Vec2
from lib import tlog


def heart_path(size: float) -> skia.Path:
    """Heart glyph `size` wide with its bottom tip at the origin."""
    w, h = size, size
    path = skia.Path()
    path.moveTo(0, -h * 0.7)
    path.cubicTo(0, -h, -w / 2, -h, -w / 2, -h * 0.7)
    path.cubicTo(-w / 2, -h * 0.4, 0, -h * 0.2, 0, 0)
    path.cubicTo(0, -h * 0.2, w / 2, -h * 0.4, w / 2, -h * 0.7)
    path.cubicTo(w / 2, -h, 0, -h, 0, -h * 0.7)
    path.close()
    return path


def draw_heart(canvas: skia.Canvas, pos: Vec2, size: float, color: int, alpha: float = 1.0):
    path = heart_path(size)
    canvas.save()
    canvas.translate(pos.x, pos.y)

    glow = skia.Paint(
        Color=color,
        AntiAlias=True,
        MaskFilter=skia.MaskFilter.MakeBlur(skia.kNormal_BlurStyle, size * 0.25),
    )
    glow.setAlphaf(alpha * 0.6)
    canvas.drawPath(path, glow)

    fill = skia.Paint(Color=color, AntiAlias=True, Style=skia.Paint.kFill_Style)
    fill.setAlphaf(alpha)
    canvas.drawPath(path, fill)
    canvas.restore()


class FallingBody:
    """Heart dropped from the click point. Fires `on_impact` once on landing."""

    def __init__(
        self,
        pos: Vec2,
        ground_y: float,
        gravity: float = 800.0,
        size: float = 40.0,
        on_impact: Optional[Callable[[Vec2], None]] = None,
    ):
        self.body = RigidBody(position=pos.copy())
        self.ground_y = ground_y
        self.gravity = gravity
        self.size = size
        self.on_impact = on_impact
        self.finished = False
        self.impacts = 0

    @property
    def position(self) -> Vec2:
        return self.body.position

    def advance(self, dt: float):
        if self.finished:
            return

        self.body.apply_force(Vec2(0, self.gravity * self.body.mass))
        self.body.update(dt)

        if self.body.position.y >= self.ground_y:
            self.body.position.y = self.ground_y
            self.body.velocity = Vec2(0, 0)
            self.finished = True
            self.impacts += 1
            tlog.info(f"FallingBody: Impact at ({self.body.position.x:.1f}, {self.ground_y:.1f})")
            if self.on_impact:
                self.on_impact(self.body.position.copy())

    def render(self, canvas: skia.Canvas, color: int):
        if self.finished:
            return
        draw_heart(canvas, self.body.position, self.size, color)
