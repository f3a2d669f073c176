from dataclasses import dataclass, field, fields
from typing import List, Optional, Tuple

import skia

from engine.file import FileManager
from lib import tlog

DEFAULT_MESSAGES = [
    "Salam Ibtissam",
    "Joyeux anniversaire pour tes 20 ans",
    "Je t'aime",
    "Qu'Allah t'accorde tout le bonheur du monde\net qu'Il exauce toutes tes du'as",
    "Profite de ta journée et garde le sourire\ncar ton sourire est magnifique",
    "Je t'aime fort fort fort",
]

DEFAULT_LEAF_COLORS = [
    "#EC4899", "#F472B6", "#EF4444", "#FBBF24",
    "#FCD34D", "#F97316", "#FB923C", "#F87171",
]

COLOR_FIELDS = ("trunk_color", "text_color", "accent_color", "heart_color")
STRING_LISTS = ("leaf_colors", "messages")


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def coerce_field(key: str, value, default):
    """Check a JSON value against the type of the field's default.

    Raises TypeError or ValueError when the value cannot stand in for it.
    """
    if key == "resolution":
        if not isinstance(value, (list, tuple)) or len(value) != 2 or not all(_is_number(v) for v in value):
            raise TypeError(f"expected [width, height], got {value!r}")
        w, h = int(value[0]), int(value[1])
        if w <= 0 or h <= 0:
            raise ValueError(f"non-positive resolution {w}x{h}")
        return (w, h)
    if key in STRING_LISTS:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise TypeError(f"expected a list of strings, got {value!r}")
        return list(value)
    if key == "seed":
        if value is None or (isinstance(value, int) and not isinstance(value, bool)):
            return value
        raise TypeError(f"expected an integer or null, got {value!r}")
    if isinstance(default, str):
        if not isinstance(value, str):
            raise TypeError(f"expected a string, got {value!r}")
        return value
    if isinstance(default, int):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"expected an integer, got {value!r}")
        return value
    if isinstance(default, float):
        if not _is_number(value):
            raise TypeError(f"expected a number, got {value!r}")
        return float(value)
    return value


def parse_color(value: str) -> int:
    """'#RRGGBB' or '#RRGGBBAA' to a skia color."""
    s = value.strip().lstrip("#")
    if len(s) not in (6, 8):
        raise ValueError(f"Invalid color '{value}'")
    try:
        r, g, b = int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16)
        a = int(s[6:8], 16) if len(s) == 8 else 255
    except ValueError:
        raise ValueError(f"Invalid color '{value}'") from None
    return skia.Color(r, g, b, a)


@dataclass
class SceneConfig:
    resolution: Tuple[int, int] = (1920, 1080)
    tree_duration: float = 10.0
    swipe_duration: float = 2.0
    swipe_fraction: float = 0.25
    max_dt: float = 0.1

    trunk_color: str = "#FFB6C1"
    leaf_colors: List[str] = field(default_factory=lambda: list(DEFAULT_LEAF_COLORS))
    text_color: str = "#FFFFFF"
    accent_color: str = "#EC4899"
    heart_color: str = "#EC4899"
    accent_marker: str = "fort fort fort"
    messages: List[str] = field(default_factory=lambda: list(DEFAULT_MESSAGES))
    font_family: str = "Outfit"
    prompt: str = "Click anywhere"

    # Falling heart
    gravity: float = 800.0
    ground_offset: float = 20.0
    heart_size: float = 40.0

    # Tree
    trunk_height: float = 440.0
    trunk_duration: float = 1.8
    branch_duration: float = 0.8
    branch_depth: int = 0

    # Leaves
    leaf_count: int = 750
    leaf_box: float = 950.0
    leaf_scale: float = 300.0
    leaf_attempts: int = 200
    leaf_window_start: float = 1.2
    leaf_window_span: float = 3.8
    crown_lift: float = 200.0

    # Ambient particles
    particle_start: float = 1.0
    particle_chance: float = 0.15

    # Text
    char_interval: float = 0.04
    line_gap: float = 0.2

    seed: Optional[int] = None

    @property
    def width(self) -> int:
        return self.resolution[0]

    @property
    def height(self) -> int:
        return self.resolution[1]

    @property
    def ground_y(self) -> float:
        return self.height - self.ground_offset

    @property
    def text_start(self) -> float:
        return self.tree_duration + self.swipe_duration

    def color(self, name: str) -> int:
        return parse_color(getattr(self, name))

    def palette(self) -> List[int]:
        out = []
        for c in self.leaf_colors:
            try:
                out.append(parse_color(c))
            except ValueError as e:
                tlog.warn(f"Config: Dropping leaf color: {e}")
        return out

    @classmethod
    def from_dict(cls, data: dict) -> "SceneConfig":
        cfg = cls()
        known = {f.name for f in fields(cls)}
        for key, value in data.items():
            if key not in known:
                tlog.warn(f"Config: Ignoring unknown key '{key}'")
                continue
            try:
                value = coerce_field(key, value, getattr(cfg, key))
                if key in COLOR_FIELDS:
                    parse_color(value)
            except (TypeError, ValueError) as e:
                tlog.warn(f"Config: {key} -> {e}, keeping default")
                continue
            setattr(cfg, key, value)
        return cfg


def load_config(path: str | None = None) -> SceneConfig:
    files = FileManager.get()
    if not path or not files.exists(path):
        if path:
            tlog.info(f"Config: '{path}' not found, using defaults")
        return SceneConfig()

    data = files.load_json(path)
    if not isinstance(data, dict):
        tlog.err(f"Config: '{path}' is not a JSON object, using defaults")
        return SceneConfig()

    tlog.info(f"Config: Loaded '{path}'")
    return SceneConfig.from_dict(data)
