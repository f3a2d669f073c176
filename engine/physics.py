import math
from dataclasses import dataclass, field


@dataclass
class Vec2:
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> "Vec2":
        return self.__mul__(scalar)

    def copy(self) -> "Vec2":
        return Vec2(self.x, self.y)

    @staticmethod
    def from_angle(angle: float, length: float = 1.0) -> "Vec2":
        return Vec2(math.cos(angle) * length, math.sin(angle) * length)


@dataclass
class RigidBody:
    position: Vec2 = field(default_factory=Vec2)
    velocity: Vec2 = field(default_factory=Vec2)
    acceleration: Vec2 = field(default_factory=Vec2)
    mass: float = 1.0

    def apply_force(self, force: Vec2):
        self.acceleration = self.acceleration + force * (1.0 / self.mass)

    def update(self, dt: float):
        # Semi-implicit Euler: velocity first, then position with the new velocity
        self.velocity = self.velocity + self.acceleration * dt
        self.position = self.position + self.velocity * dt

        self.acceleration = Vec2(0, 0)
