"""Control handles for resizing and rotating a selected frame."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from neta.vector import Vec2

log = logging.getLogger(__name__)

CORNER_HANDLE_RADIUS = 6.0
ROTATION_HANDLE_EXTENSION = 30.0
HANDLE_WIDTH = 2.0


class Pivot(Enum):
    """A point on the border of a frame, relative to its centre."""

    BOTTOM_LEFT = (-0.5, -0.5)
    BOTTOM_CENTER = (0.0, -0.5)
    BOTTOM_RIGHT = (0.5, -0.5)
    CENTER_LEFT = (-0.5, 0.0)
    CENTER_RIGHT = (0.5, 0.0)
    TOP_LEFT = (-0.5, 0.5)
    TOP_CENTER = (0.0, 0.5)
    TOP_RIGHT = (0.5, 0.5)

    def as_vec(self) -> Vec2:
        return Vec2(*self.value)


_CORNER_SIGNS = {
    Pivot.TOP_LEFT: Vec2(-1.0, 1.0),
    Pivot.TOP_RIGHT: Vec2(1.0, 1.0),
    Pivot.BOTTOM_LEFT: Vec2(-1.0, -1.0),
    Pivot.BOTTOM_RIGHT: Vec2(1.0, -1.0),
}


class CursorIcon(Enum):
    """System cursor shapes used by the handles."""

    DEFAULT = "default"
    E_RESIZE = "e-resize"
    NE_RESIZE = "ne-resize"
    N_RESIZE = "n-resize"
    NW_RESIZE = "nw-resize"
    W_RESIZE = "w-resize"
    SW_RESIZE = "sw-resize"
    S_RESIZE = "s-resize"
    SE_RESIZE = "se-resize"
    GRAB = "grab"
    GRABBING = "grabbing"


_SECTOR_CURSORS = {
    0: CursorIcon.E_RESIZE,
    15: CursorIcon.E_RESIZE,
    1: CursorIcon.NE_RESIZE,
    2: CursorIcon.NE_RESIZE,
    3: CursorIcon.N_RESIZE,
    4: CursorIcon.N_RESIZE,
    5: CursorIcon.NW_RESIZE,
    6: CursorIcon.NW_RESIZE,
    7: CursorIcon.W_RESIZE,
    8: CursorIcon.W_RESIZE,
    9: CursorIcon.SW_RESIZE,
    10: CursorIcon.SW_RESIZE,
    11: CursorIcon.S_RESIZE,
    12: CursorIcon.S_RESIZE,
    13: CursorIcon.SE_RESIZE,
    14: CursorIcon.SE_RESIZE,
}


def cursor_for_direction(delta: Vec2) -> CursorIcon:
    """Resize cursor for a viewport offset from the frame centre to the pointer."""
    angle = delta.normalize().angle_to(Vec2(1.0, 0.0))
    value = (angle + math.pi) / (math.pi / 8.0)
    # Rounds half away from zero; a NaN direction lands in sector 0.
    sector = 0 if math.isnan(value) else int(math.floor(value + 0.5))
    return _SECTOR_CURSORS.get(sector % 16, CursorIcon.DEFAULT)


@dataclass
class ControlHandle:
    """Resize corners and a rotation knob attached to one frame.

    Handle positions are in the frame's local space: centred on the frame,
    rotated with it, but not scaled.
    """

    sprite: Any
    corners: tuple[Pivot, ...] = field(
        default=(Pivot.TOP_LEFT, Pivot.TOP_RIGHT, Pivot.BOTTOM_LEFT, Pivot.BOTTOM_RIGHT)
    )
    rotation_pivot: Pivot = Pivot.TOP_CENTER
    radius: float = CORNER_HANDLE_RADIUS

    def corner_positions(self, size: Vec2) -> dict[Pivot, Vec2]:
        """Local position of each corner handle for a frame of ``size``."""
        return {pivot: size * pivot.as_vec() for pivot in self.corners}

    def rotation_handle_position(self, size: Vec2) -> Vec2:
        """Local position of the rotation knob, pushed out past the border."""
        v = self.rotation_pivot.as_vec()
        return size * v + v.normalize() * ROTATION_HANDLE_EXTENSION

    def drag_corner(self, frame: Any, pivot: Pivot, delta: Vec2) -> None:
        """Resize ``frame`` by a world ``delta`` with the opposite corner fixed.

        ``frame`` needs a ``transform`` and a ``size`` (None when unsized).
        """
        transform = frame.transform
        transform.translation = transform.translation + delta / 2.0

        sign = _CORNER_SIGNS.get(pivot)
        if sign is None:
            return

        rotated_delta = delta.rotated(-transform.rotation) * sign
        if frame.size is None:
            log.error("Sprite is missing custom size")
            return
        frame.size = frame.size + rotated_delta

    def rotate_to(self, frame: Any, cursor_world: Vec2) -> None:
        """Turn ``frame`` so its rotation knob points at ``cursor_world``."""
        transform = frame.transform
        diff = cursor_world - transform.translation
        if diff.length() == 0.0:
            return
        transform.rotation = self.rotation_pivot.as_vec().normalize().angle_to(diff.normalize())

    def hit(self, position: Vec2, size: Vec2) -> Pivot | None:
        """The handle under a local ``position``, or None.

        Corner handles are tried first; the rotation knob is reported as
        ``rotation_pivot``.
        """
        for pivot, centre in self.corner_positions(size).items():
            if (position - centre).length() < self.radius:
                return pivot
        if (position - self.rotation_handle_position(size)).length() < self.radius:
            return self.rotation_pivot
        return None