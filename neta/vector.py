"""Small 2D vector and rectangle types."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """An immutable 2D vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def __mul__(self, other: float | Vec2) -> Vec2:
        if isinstance(other, Vec2):
            return Vec2(self.x * other.x, self.y * other.y)
        return Vec2(self.x * other, self.y * other)

    __rmul__ = __mul__

    def __truediv__(self, other: float | Vec2) -> Vec2:
        if isinstance(other, Vec2):
            return Vec2(self.x / other.x, self.y / other.y)
        return Vec2(self.x / other, self.y / other)

    def __iter__(self):
        yield self.x
        yield self.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> Vec2:
        """Unit vector in the same direction; NaN components for a zero vector."""
        length = self.length()
        if length == 0.0:
            return Vec2(math.nan, math.nan)
        return Vec2(self.x / length, self.y / length)

    def perp(self) -> Vec2:
        """The vector rotated by 90 degrees counter-clockwise."""
        return Vec2(-self.y, self.x)

    def perp_dot(self, other: Vec2) -> float:
        return self.x * other.y - self.y * other.x

    def dot(self, other: Vec2) -> float:
        return self.x * other.x + self.y * other.y

    def rotated(self, angle: float) -> Vec2:
        """The vector rotated counter-clockwise by ``angle`` radians."""
        c, s = math.cos(angle), math.sin(angle)
        return Vec2(c * self.x - s * self.y, s * self.x + c * self.y)

    def angle_to(self, other: Vec2) -> float:
        """Signed angle in radians from this vector to ``other``."""
        return math.atan2(self.perp_dot(other), self.dot(other))


Vec2.ZERO = Vec2(0.0, 0.0)  # type: ignore[attr-defined]


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its minimum and maximum corners."""

    min: Vec2
    max: Vec2

    @classmethod
    def from_corners(cls, a: Vec2, b: Vec2) -> Rect:
        return cls(Vec2(min(a.x, b.x), min(a.y, b.y)), Vec2(max(a.x, b.x), max(a.y, b.y)))

    @classmethod
    def from_center_size(cls, center: Vec2, size: Vec2) -> Rect:
        half = size / 2.0
        return cls(center - half, center + half)

    def intersect(self, other: Rect) -> Rect:
        return Rect(
            Vec2(max(self.min.x, other.min.x), max(self.min.y, other.min.y)),
            Vec2(min(self.max.x, other.max.x), min(self.max.y, other.max.y)),
        )

    def is_empty(self) -> bool:
        return self.min.x >= self.max.x or self.min.y >= self.max.y

    def center(self) -> Vec2:
        return (self.min + self.max) / 2.0

    def size(self) -> Vec2:
        return self.max - self.min