import math
from dataclasses import dataclass
from typing import List, Sequence

import skia

from engine.assets import AssetManager


@dataclass(frozen=True)
class TextLine:
    text: str
    x: float
    y: float
    start_t: float
    duration: float
    char_interval: float = 0.04
    accent: bool = False

    @property
    def end_t(self) -> float:
        return self.start_t + self.duration

    def visible_chars(self, time: float) -> int:
        if time < self.start_t:
            return 0
        count = math.floor((time - self.start_t) / self.char_interval)
        return max(0, min(count, len(self.text)))

    def visible_text(self, time: float) -> str:
        return self.text[: self.visible_chars(time)]


def layout_lines(
    messages: Sequence[str],
    start_time: float,
    x: float = 280.0,
    y: float = 320.0,
    line_height: float = 75.0,
    paragraph_gap: float = 25.0,
    char_interval: float = 0.04,
    line_gap: float = 0.2,
    accent_marker: str = "",
) -> List[TextLine]:
    """Split messages into timed lines, each starting after the previous ends."""
    lines = []
    t = start_time
    cy = y
    for msg in messages:
        for sub in msg.split("\n"):
            duration = len(sub) * char_interval + 0.3
            lines.append(TextLine(
                text=sub,
                x=x,
                y=cy,
                start_t=t,
                duration=duration,
                char_interval=char_interval,
                accent=bool(accent_marker) and accent_marker in sub,
            ))
            cy += line_height
            t += duration + line_gap
        cy += paragraph_gap
    return lines


class TextTyper:
    HOLD = 5.0

    def __init__(self, lines: List[TextLine], start_time: float, color: int, accent_color: int,
                 family: str = "Outfit"):
        self.lines = lines
        self.start_time = start_time
        self.color = color
        self.accent_color = accent_color
        assets = AssetManager.get()
        self.font = assets.get_font(family, 45)
        self.accent_font = assets.get_font(family, 55, bold=True)

    @property
    def end_time(self) -> float:
        if not self.lines:
            return self.start_time
        return self.lines[-1].end_t + self.HOLD

    def render(self, canvas: skia.Canvas, time: float):
        if time < self.start_time or not self.lines:
            return

        normal = skia.Paint(AntiAlias=True, Color=self.color)
        accent = skia.Paint(AntiAlias=True, Color=self.accent_color)
        for line in self.lines:
            shown = line.visible_text(time)
            if not shown:
                continue
            if line.accent:
                canvas.drawString(shown, line.x, line.y, self.accent_font, accent)
            else:
                canvas.drawString(shown, line.x, line.y, self.font, normal)
