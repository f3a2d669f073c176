import math
import random
from dataclasses import dataclass, field

import skia

from engine.physics import Vec2

# Velocities were tuned as pixels per 60 Hz frame
FRAME_RATE = 60.0
GOLD = skia.Color(255, 215, 0)


@dataclass
class AmbientParticle:
    pos: Vec2
    vel: Vec2
    decay: float
    sz: float = 3.0
    col: int = GOLD
    jitter: float = 0.05 * FRAME_RATE
    life: float = 1.0
    rng: random.Random = field(default_factory=random.Random, repr=False)
    ticks: int = 0

    def __post_init__(self):
        self.initial_life = self.life

    @property
    def alive(self) -> bool:
        return self.life > 0

    def advance(self, dt: float):
        self.pos = self.pos + self.vel * dt
        self.vel.x += (self.rng.random() - 0.5) * self.jitter
        # Fixed decrement per tick, not scaled by dt
        self.ticks += 1
        self.life = self.initial_life - self.decay * self.ticks

    def ticks_to_live(self) -> int:
        return math.ceil(self.initial_life / self.decay)


@dataclass
class SpawnArea:
    center: Vec2
    half_w: float
    half_h: float


class ParticleSystem:
    def __init__(self, rng: random.Random | None = None, spawn_chance: float = 0.15):
        self.rng = rng or random.Random()
        self.spawn_chance = spawn_chance
        self.particles: list[AmbientParticle] = []

    def emit(self, pos: Vec2) -> AmbientParticle:
        r = self.rng
        pt = AmbientParticle(
            pos=pos.copy(),
            vel=Vec2((r.random() - 0.5) * 0.5 * FRAME_RATE, -(r.random() * 0.8 + 0.2) * FRAME_RATE),
            decay=0.003 + r.random() * 0.005,
            sz=2 + r.random() * 3,
            rng=r,
        )
        self.particles.append(pt)
        return pt

    def update(self, dt: float, area: SpawnArea | None = None):
        if area is not None and self.rng.random() < self.spawn_chance:
            self.emit(Vec2(
                area.center.x + (self.rng.random() - 0.5) * 2 * area.half_w,
                area.center.y + (self.rng.random() - 0.5) * 2 * area.half_h,
            ))

        for pt in self.particles[:]:
            pt.advance(dt)
            if not pt.alive:
                self.particles.remove(pt)

    def clear(self):
        self.particles.clear()

    def render(self, canvas: skia.Canvas):
        for pt in self.particles:
            col = skia.Color4f.FromColor(pt.col)
            col.fA = pt.life * 0.6
            pa = skia.Paint(
                Color4f=col,
                Style=skia.Paint.kFill_Style,
                AntiAlias=True,
                MaskFilter=skia.MaskFilter.MakeBlur(skia.kNormal_BlurStyle, pt.sz * 0.8),
            )
            canvas.drawCircle(pt.pos.x, pt.pos.y, pt.sz, pa)
            core = skia.Paint(Color4f=col, Style=skia.Paint.kFill_Style, AntiAlias=True)
            canvas.drawCircle(pt.pos.x, pt.pos.y, pt.sz * 0.6, core)
