import math
import random
from enum import Enum, auto
from typing import Callable, List, Optional

import skia

from engine.assets import AssetManager
from engine.component import Component, Event, EventType
from engine.effects import CameraSwipe
from engine.particles import ParticleSystem, SpawnArea
from engine.physics import Vec2
from heartree.config import SceneConfig
from heartree.heart import FallingBody, draw_heart
from heartree.leaves import Leaf, build_leaf_sprites, generate_leaves, leaf_center
from heartree.text import TextTyper, layout_lines
from heartree.tree import BranchTree, Trunk, build_tree
from lib import tlog


class Phase(Enum):
    WAITING = auto()
    FALLING = auto()
    GROWING = auto()


class PhaseController:
    """WAITING -> FALLING on start, FALLING -> GROWING on impact.

    `time` is local to the current phase and resets on every transition.
    """

    def __init__(self, on_change: Optional[Callable[[Phase, Vec2], None]] = None):
        self.phase = Phase.WAITING
        self.time = 0.0
        self.impact_count = 0
        self.on_change = on_change

    def _enter(self, phase: Phase, pos: Vec2):
        tlog.info(f"Phase: {self.phase.name} -> {phase.name} at ({pos.x:.1f}, {pos.y:.1f})")
        self.phase = phase
        self.time = 0.0
        if self.on_change:
            self.on_change(phase, pos)

    def start(self, pos: Vec2) -> bool:
        if self.phase != Phase.WAITING:
            return False
        self._enter(Phase.FALLING, pos)
        return True

    def impact(self, pos: Vec2) -> bool:
        if self.phase != Phase.FALLING:
            return False
        self.impact_count += 1
        self._enter(Phase.GROWING, pos)
        return True

    def advance(self, dt: float):
        if self.phase != Phase.WAITING:
            self.time += dt


class HeartTreeScene(Component):
    def __init__(self, config: SceneConfig | None = None):
        super().__init__("HeartTree")
        self.cfg = config or SceneConfig()
        self.rng = random.Random(self.cfg.seed)
        self.controller = PhaseController(on_change=self._on_phase)

        self.view_w, self.view_h = self.cfg.width, self.cfg.height
        self.view_scale = 1.0
        self.view_offset = Vec2(0, 0)

        self.trunk_color = self.cfg.color("trunk_color")
        self.heart_color = self.cfg.color("heart_color")
        self.palette = self.cfg.palette()
        self.sprites = {}

        self.heart: FallingBody | None = None
        self.trunk: Trunk | None = None
        self.tree: BranchTree | None = None
        self.leaves: List[Leaf] = []
        self.particles = ParticleSystem(self.rng, self.cfg.particle_chance)
        self.particle_area: SpawnArea | None = None
        self.swipe = CameraSwipe(
            self.cfg.tree_duration, self.cfg.swipe_duration, self.cfg.width * self.cfg.swipe_fraction
        )
        self.text = TextTyper(
            layout_lines(
                self.cfg.messages,
                self.cfg.text_start,
                x=self.cfg.width * 0.25 - 200,
                char_interval=self.cfg.char_interval,
                line_gap=self.cfg.line_gap,
                accent_marker=self.cfg.accent_marker,
            ),
            self.cfg.text_start,
            self.cfg.color("text_color"),
            self.cfg.color("accent_color"),
            self.cfg.font_family,
        )
        self.prompt_font = AssetManager.get().get_font(self.cfg.font_family, 28)
        self.idle_time = 0.0

    @property
    def phase(self) -> Phase:
        return self.controller.phase

    @property
    def time(self) -> float:
        return self.controller.time

    def on_init(self, canvas):
        with tlog.Span("scene_setup"):
            self.sprites = build_leaf_sprites(self.palette)
            tlog.info(f"Scene: {len(self.text.lines)} text lines, narrative ends at {self.text.end_time:.1f}s")

    # -- input -------------------------------------------------------------

    def to_scene(self, x: float, y: float) -> Vec2:
        return Vec2((x - self.view_offset.x) / self.view_scale, (y - self.view_offset.y) / self.view_scale)

    def on_event(self, event: Event) -> bool:
        if event.type == EventType.RESIZE:
            self.resize(event.width, event.height)
            return False
        if event.type == EventType.MOUSE_PRESS and self.phase == Phase.WAITING:
            return self.trigger(self.to_scene(event.x, event.y))
        return False

    def resize(self, width: int, height: int):
        if width <= 0 or height <= 0:
            return
        self.view_w, self.view_h = width, height
        self.view_scale = min(width / self.cfg.width, height / self.cfg.height)
        self.view_offset = Vec2(
            (width - self.cfg.width * self.view_scale) / 2,
            (height - self.cfg.height * self.view_scale) / 2,
        )

    def trigger(self, pos: Vec2) -> bool:
        spawn = Vec2(
            min(max(pos.x, 0.0), self.cfg.width),
            min(pos.y, self.cfg.ground_y - self.cfg.heart_size),
        )
        return self.controller.start(spawn)

    def _on_phase(self, phase: Phase, pos: Vec2):
        if phase == Phase.FALLING:
            self.heart = FallingBody(
                pos, self.cfg.ground_y, self.cfg.gravity, self.cfg.heart_size, on_impact=self.controller.impact
            )
        elif phase == Phase.GROWING:
            self._plant(pos)

    def _plant(self, root: Vec2):
        with tlog.Span("plant_tree"):
            cfg = self.cfg
            self.trunk = Trunk(root.x, root.y, cfg.trunk_height, cfg.trunk_duration)
            self.tree = build_tree(self.trunk, cfg.branch_duration, cfg.branch_depth, self.rng)
            self.leaves = generate_leaves(
                self.rng,
                leaf_center(self.trunk.top, cfg.crown_lift),
                self.palette,
                count=cfg.leaf_count,
                box=cfg.leaf_box,
                scale=cfg.leaf_scale,
                max_attempts=cfg.leaf_attempts,
                window_start=cfg.leaf_window_start,
                window_span=cfg.leaf_window_span,
            )
            self.particles.clear()
            self.particle_area = SpawnArea(Vec2(root.x, cfg.height / 2), 450, 400)

    # -- simulation --------------------------------------------------------

    def on_update(self, dt: float):
        dt = min(max(dt, 0.0), self.cfg.max_dt)
        if self.phase == Phase.WAITING:
            self.idle_time += dt
        self.controller.advance(dt)

        if self.phase == Phase.FALLING and self.heart:
            self.heart.advance(dt)

        if self.phase == Phase.GROWING:
            t = self.time
            self.trunk.update(t)
            self.tree.advance(t)
            for leaf in self.leaves:
                leaf.advance(t)
            self.particles.update(dt, self.particle_area if t > self.cfg.particle_start else None)

    # -- rendering ---------------------------------------------------------

    def on_render_ui(self, canvas: skia.Canvas):
        canvas.save()
        canvas.translate(self.view_offset.x, self.view_offset.y)
        canvas.scale(self.view_scale, self.view_scale)
        canvas.clipRect(skia.Rect.MakeWH(self.cfg.width, self.cfg.height))
        canvas.drawColor(skia.ColorBLACK)

        if self.phase == Phase.WAITING:
            self._render_prompt(canvas)
        elif self.phase == Phase.FALLING:
            self.heart.render(canvas, self.heart_color)
        else:
            self._render_growing(canvas)

        canvas.restore()

    def _render_prompt(self, canvas: skia.Canvas):
        pulse = 1.0 + 0.08 * math.sin(self.idle_time * 4.0)
        center = Vec2(self.cfg.width / 2, self.cfg.height / 2)
        draw_heart(canvas, center, self.cfg.heart_size * 1.5 * pulse, self.heart_color)
        if self.cfg.prompt:
            w = self.prompt_font.measureText(self.cfg.prompt)
            paint = skia.Paint(AntiAlias=True, Color=skia.Color(200, 200, 200))
            canvas.drawString(self.cfg.prompt, center.x - w / 2, center.y + 60, self.prompt_font, paint)

    def _render_growing(self, canvas: skia.Canvas):
        t = self.time

        canvas.save()
        canvas.translate(self.swipe.offset(t), 0)
        self.trunk.render(canvas, self.trunk_color)
        self.tree.render(canvas, self.trunk_color)
        for leaf in self.leaves:
            leaf.render(canvas, self.sprites)
        self.particles.render(canvas)
        canvas.restore()

        # Text overlay stays put while the tree swipes
        self.text.render(canvas, t)
