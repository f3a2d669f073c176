from types import MappingProxyType
from typing import Callable, Iterable, Mapping

import skia

from lib import tlog


def render_offscreen(width: int, height: int, painter: Callable[[skia.Canvas], None]) -> skia.Image:
    surface = skia.Surface.MakeRasterN32Premul(width, height)
    canvas = surface.getCanvas()
    canvas.clear(skia.ColorTRANSPARENT)
    painter(canvas)
    return surface.makeImageSnapshot()


def build_sprite_cache(
    keys: Iterable[int], size: int, painter: Callable[[skia.Canvas, int], None]
) -> Mapping[int, skia.Image]:
    """Pre-render one image per key. The returned mapping is read-only."""
    images = {}
    for key in keys:
        if key in images:
            continue
        images[key] = render_offscreen(size, size, lambda c, k=key: painter(c, k))
    tlog.info(f"AssetManager: Pre-rendered {len(images)} sprites at {size}px")
    return MappingProxyType(images)


class AssetManager:
    _instance = None

    def __init__(self):
        self.fonts = {}

    @classmethod
    def get(cls):
        if cls._instance is None:
            cls._instance = AssetManager()
        return cls._instance

    def get_font(self, name: str, size: float, bold: bool = False) -> skia.Font:
        k = f"{name}_{size}_{'b' if bold else 'n'}"
        if k in self.fonts:
            return self.fonts[k]

        style = skia.FontStyle.Bold() if bold else skia.FontStyle.Normal()
        tf = skia.Typeface.MakeFromName(name, style)
        if not tf:
            tlog.warn(f"AssetManager: Font '{name}' unavailable, using default")
            tf = skia.Typeface.MakeDefault()

        font = skia.Font(tf, size)
        font.setEmbolden(bold and not tf.isBold())
        self.fonts[k] = font
        return font
