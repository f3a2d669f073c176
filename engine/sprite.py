import math

import skia

from engine.physics import Vec2


class Sprite:
    """Pre-rendered image drawn through the canvas transform stack.

    `density` is how many image pixels map to one scene pixel, so sprites can
    be rasterized at a higher resolution than they are drawn.
    """

    def __init__(self, image: skia.Image, density: float = 1.0):
        self.image = image
        self.density = density
        self.anchor = Vec2(0.5, 0.5)  # Normalized anchor point (0.5, 0.5 is center)
        self.scale = Vec2(1.0, 1.0)
        self.rotation = 0.0  # Radians
        self.alpha = 1.0

    def render(self, canvas: skia.Canvas, pos: Vec2):
        if not self.image or self.alpha <= 0:
            return

        canvas.save()
        canvas.translate(pos.x, pos.y)
        canvas.rotate(math.degrees(self.rotation))
        canvas.scale(self.scale.x / self.density, self.scale.y / self.density)

        dx = -self.image.width() * self.anchor.x
        dy = -self.image.height() * self.anchor.y

        paint = skia.Paint(AntiAlias=True)
        paint.setAlphaf(min(1.0, self.alpha))
        canvas.drawImage(self.image, dx, dy, skia.SamplingOptions(skia.FilterMode.kLinear), paint)

        canvas.restore()
