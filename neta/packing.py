"""Polygon packing by Minkowski sums (no-fit polygons)."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from itertools import accumulate

from neta.vector import Vec2


class EdgeVectors(Sequence):
    """A polygon represented by its edge vectors in counter-clockwise order."""

    def __init__(self, edges: Iterable[Vec2]):
        self._edges = list(edges)

    def __len__(self) -> int:
        return len(self._edges)

    def __getitem__(self, index):
        return self._edges[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EdgeVectors):
            return self._edges == other._edges
        return NotImplemented

    def __repr__(self) -> str:
        return f"EdgeVectors({self._edges!r})"

    @classmethod
    def with_rect_size_rotation(cls, size: Vec2, rotation: float) -> EdgeVectors:
        # Ordered so that the first point is the bottom-left most.
        return cls(
            v.rotated(rotation)
            for v in (
                Vec2(size.x, 0.0),
                Vec2(0.0, size.y),
                Vec2(-size.x, 0.0),
                Vec2(0.0, -size.y),
            )
        )

    @classmethod
    def from_vertices(cls, vertices: Sequence[Vec2]) -> EdgeVectors:
        """Build from a closed list of at least three vertices."""
        if len(vertices) < 3:
            raise ValueError("a polygon needs at least three vertices")
        return cls(b - a for a, b in zip(vertices, [*vertices[1:], vertices[0]]))

    def local_vertices(self) -> Iterator[Vec2]:
        """Vertices reached by walking the edges from (0, 0)."""
        return accumulate(self._edges, lambda acc, e: acc + e, initial=Vec2()).__iter__().__class__(
            list(accumulate(self._edges, lambda acc, e: acc + e, initial=Vec2()))[1:]
        )

    def divide(self, n: int) -> EdgeVectors:
        """Split each edge into ``n`` equal segments."""
        return EdgeVectors(part for edge in self._edges for part in [edge / n] * n)


def _first_index(vertices: Iterable[Vec2]) -> int:
    best_index, best_key = None, None
    for index, v in enumerate(vertices):
        if math.isnan(v.x) or math.isnan(v.y):
            raise ValueError("NaN element in EdgeVectors")
        key = (v.y, v.x)
        if best_key is None or key < best_key:
            best_index, best_key = index, key
    if best_index is None:
        raise ValueError("empty EdgeVectors")
    return best_index


def minkowski_sum(a: EdgeVectors, b: EdgeVectors) -> EdgeVectors:
    """Minkowski sum of two convex polygons."""
    i = _first_index(a.local_vertices())
    j = _first_index(b.local_vertices())
    i_inc = j_inc = 0
    result: list[Vec2] = []
    cur = a[i] + b[j]

    while i_inc < len(a) or j_inc < len(b):
        cross = a[i].perp_dot(b[j])
        result.append(cur)
        if cross >= 0.0 and i_inc < len(a):
            i = (i + 1) % len(a)
            i_inc += 1
            cur = cur + a[i]
        if cross <= 0.0 and j_inc < len(b):
            j = (j + 1) % len(b)
            j_inc += 1
            cur = cur + b[j]

    return EdgeVectors.from_vertices(result)


def calculate_centroid(vertices: Sequence[Vec2]) -> Vec2:
    """Mean of the vertices."""
    total = Vec2()
    for v in vertices:
        total = total + v
    return total / len(vertices)


@dataclass
class ShapePosition:
    """A polygon placed in world space, centred on ``translation``."""

    translation: Vec2
    edges: EdgeVectors = field(default_factory=lambda: EdgeVectors([]))

    def vertices(self) -> list[Vec2]:
        local = list(self.edges.local_vertices())
        centroid = calculate_centroid(local)
        return [v + self.translation - centroid for v in local]

    def offset(self, width: float) -> None:
        """Grow the polygon outward by ``width``."""
        vertices = self.vertices()
        count = len(self.edges)
        new_vertices = [
            v
            + (-self.edges[i].perp().normalize() - self.edges[(i + 1) % count].perp().normalize())
            * width
            for i, v in enumerate(vertices)
        ]
        self.edges = EdgeVectors.from_vertices(new_vertices)
        self.translation = self.translation - (
            calculate_centroid(new_vertices) - calculate_centroid(vertices)
        )

    def is_overlapping(self, other: ShapePosition) -> bool:
        """Separating-axis test; touching shapes count as overlapping."""
        normals = [e.perp() for e in self.edges] + [e.perp() for e in other.edges]
        for normal in normals:
            proj_a = [v.dot(normal) for v in self.vertices()]
            proj_b = [v.dot(normal) for v in other.vertices()]
            if max(proj_a) < min(proj_b) or max(proj_b) < min(proj_a):
                return False
        return True

    def copy(self) -> ShapePosition:
        return ShapePosition(self.translation, EdgeVectors(self.edges))


def fill(
    placed_shapes: Iterable[ShapePosition],
    shape_to_place: ShapePosition,
    offset: float,
    div: int | None,
) -> ShapePosition:
    """Place ``shape_to_place`` next to the placed shapes, nearest its own translation."""
    placed_list = list(placed_shapes)
    target = shape_to_place.translation
    grown = []
    for placed in placed_list:
        shape = placed.copy()
        shape.offset(offset)
        grown.append(shape)

    def distance(v: Vec2) -> float:
        d = (v - target).length()
        if math.isnan(d):
            raise ValueError("NaN")
        return d

    candidates: list[ShapePosition] = []
    for placed in placed_list:
        nfp = minkowski_sum(placed.edges, shape_to_place.edges)
        nfp_shape = ShapePosition(placed.translation, nfp.divide(div if div is not None else 1))
        nfp_shape.offset(offset)
        for vertex in sorted(nfp_shape.vertices(), key=distance):
            translated = ShapePosition(vertex, EdgeVectors(shape_to_place.edges))
            if not any(translated.is_overlapping(g) for g in grown):
                candidates.append(translated)

    if not candidates:
        raise ValueError("no free position found")
    candidates.sort(key=lambda c: distance(c.translation))
    return candidates[0]