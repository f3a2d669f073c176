import math
import random
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

import skia

from engine.animation import ease_in_out_quad, ease_out_quad, progress
from engine.physics import Vec2
from lib import tlog

SPAWN_THRESHOLD = 0.6


class Trunk:
    def __init__(self, x: float, y: float, height: float = 440.0, duration: float = 1.8,
                 base_width: float = 65.0, top_width: float = 30.0):
        self.x = x
        self.y = y
        self.target_height = height
        self.duration = duration
        self.base_width = base_width
        self.top_width = top_width
        self.progress = 0.0
        self.current_height = 0.0

    @property
    def top(self) -> Vec2:
        # Fully grown top, so anchored branches never move
        return Vec2(self.x, self.y - self.target_height)

    def update(self, time: float):
        if time < 0:
            return
        self.progress = ease_out_quad(progress(time, 0.0, self.duration))
        self.current_height = self.target_height * self.progress

    def render(self, canvas: skia.Canvas, color: int):
        if self.current_height <= 0:
            return

        top_w = self.base_width + (self.top_width - self.base_width) * self.progress
        path = skia.Path()
        path.moveTo(self.x - self.base_width / 2, self.y)
        path.lineTo(self.x + self.base_width / 2, self.y)
        path.lineTo(self.x + top_w / 2, self.y - self.current_height)
        path.lineTo(self.x - top_w / 2, self.y - self.current_height)
        path.close()

        canvas.drawPath(path, skia.Paint(Color=color, AntiAlias=True, Style=skia.Paint.kFill_Style))

        shade = skia.GradientShader.MakeLinear(
            [skia.Point(self.x - 30, self.y), skia.Point(self.x + 30, self.y)],
            [skia.Color(0, 0, 0, 26), skia.ColorTRANSPARENT, skia.Color(0, 0, 0, 26)],
            [0.0, 0.5, 1.0],
        )
        canvas.drawPath(path, skia.Paint(Shader=shade, AntiAlias=True))


@dataclass(frozen=True)
class BranchSpec:
    angle: float
    length: float
    width: float
    start_time: float
    seed: Optional[int] = None


@dataclass
class BranchNode:
    start: Vec2
    angle: float
    length: float
    width: float
    start_time: float
    duration: float
    depth: int = 0
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    seed: Optional[int] = None
    spawned: bool = False
    current_length: float = 0.0

    @property
    def target_end(self) -> Vec2:
        return self.start + Vec2.from_angle(self.angle, self.length)

    @property
    def end(self) -> Vec2:
        return self.start + Vec2.from_angle(self.angle, self.current_length)


def grow_children(node: BranchNode, seed: Optional[int]) -> List[BranchSpec]:
    """Children for a branch that crossed the spawn threshold.

    Pure in (node parameters, seed): the same seed always yields the same
    children. Start times are offset from the parent's own start.
    """
    rng = random.Random(seed)
    start = node.start_time + node.duration * SPAWN_THRESHOLD
    specs = []
    for side in (-1, 1):
        specs.append(BranchSpec(
            angle=node.angle + side * rng.uniform(0.3, 0.7),
            length=node.length * rng.uniform(0.6, 0.8),
            width=max(1.0, node.width * rng.uniform(0.55, 0.7)),
            start_time=start + rng.uniform(0.0, 0.15),
            seed=rng.getrandbits(32),
        ))
    return specs


class BranchTree:
    """Arena of branch nodes. Parents always precede their children."""

    def __init__(self, duration: float = 0.8, max_depth: int = 0, curve=ease_in_out_quad):
        self.nodes: List[BranchNode] = []
        self.roots: List[int] = []
        self.duration = duration
        self.max_depth = max_depth
        self.curve = curve

    def __len__(self):
        return len(self.nodes)

    def add_root(self, start: Vec2, angle: float, length: float, width: float,
                 start_time: float, seed: Optional[int] = None) -> int:
        self.nodes.append(BranchNode(start.copy(), angle, length, width, start_time, self.duration, seed=seed))
        idx = len(self.nodes) - 1
        self.roots.append(idx)
        return idx

    def add_child(self, parent: int, angle_offset: float, length: float, width: float,
                  delay: float = 0.0, seed: Optional[int] = None) -> int:
        p = self.nodes[parent]
        return self._attach(parent, BranchSpec(p.angle + angle_offset, length, width,
                                               p.start_time + max(delay, 0.0), seed))

    def _attach(self, parent: int, spec: BranchSpec) -> int:
        p = self.nodes[parent]
        node = BranchNode(
            start=p.target_end,
            angle=spec.angle,
            length=spec.length,
            width=spec.width,
            start_time=max(spec.start_time, p.start_time),
            duration=self.duration,
            depth=p.depth + 1,
            parent=parent,
            seed=spec.seed,
        )
        self.nodes.append(node)
        idx = len(self.nodes) - 1
        p.children.append(idx)
        return idx

    def advance(self, time: float):
        # Children appended during this pass are visited in the same pass
        i = 0
        while i < len(self.nodes):
            node = self.nodes[i]
            if time < node.start_time:
                node.current_length = 0.0
            else:
                t = progress(time, node.start_time, node.duration)
                node.current_length = node.length * self.curve(t)
                if t > SPAWN_THRESHOLD:
                    self._maybe_spawn(i)
            i += 1

    def _maybe_spawn(self, idx: int):
        node = self.nodes[idx]
        if node.spawned or node.depth >= self.max_depth:
            return
        node.spawned = True
        specs = grow_children(node, node.seed)
        for spec in specs:
            self._attach(idx, spec)
        tlog.debug(f"BranchTree: node {idx} spawned {len(specs)} children at depth {node.depth + 1}")

    def iter_depth_first(self, idx: Optional[int] = None) -> Iterator[int]:
        stack = list(reversed(self.roots)) if idx is None else [idx]
        while stack:
            i = stack.pop()
            yield i
            stack.extend(reversed(self.nodes[i].children))

    def render(self, canvas: skia.Canvas, color: int):
        paint = skia.Paint(Color=color, AntiAlias=True, Style=skia.Paint.kStroke_Style)
        paint.setStrokeCap(skia.Paint.kRound_Cap)
        for i in self.iter_depth_first():
            node = self.nodes[i]
            if node.current_length <= 0:
                continue
            end = node.end
            paint.setStrokeWidth(node.width)
            canvas.drawLine(node.start.x, node.start.y, end.x, end.y, paint)


def build_tree(trunk: Trunk, duration: float = 0.8, max_depth: int = 0,
               rng: Optional[random.Random] = None) -> BranchTree:
    """The three crown branches growing out of the trunk top."""
    rng = rng or random.Random()
    tree = BranchTree(duration=duration, max_depth=max_depth)
    top = trunk.top
    up = -math.pi / 2
    tree.add_root(top, up - 0.6, 144, 24, 0.5, seed=rng.getrandbits(32))
    tree.add_root(top, up + 0.6, 144, 24, 0.5, seed=rng.getrandbits(32))
    tree.add_root(top, up, 108, 24, 0.6, seed=rng.getrandbits(32))
    return tree
