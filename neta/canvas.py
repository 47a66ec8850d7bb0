"""The canvas: image frames, selection, camera navigation and organising."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from neta.camera import Camera, CameraTranslator, Location, Transform
from neta.handle import ControlHandle
from neta.packing import EdgeVectors, ShapePosition, fill
from neta.picking import PickableSprite, PickingMode, SpritePickingSettings, pick_sprites
from neta.vector import Rect, Vec2

ZOOM_FACTOR = 1.1
ORGANIZE_GAP = 10.0
ORGANIZE_DIVISIONS = 4
PRIMARY_TARGET = "primary"
MAIN_LAYER = frozenset({0})
CONTROL_LAYER = frozenset({1})


@dataclass(eq=False)
class ImageFrame:
    """An image placed on the canvas, sized in world units."""

    image: Any
    transform: Transform = field(default_factory=Transform)
    size: Vec2 | None = None
    hovered: bool = False
    selected: bool = False


@dataclass
class SelectionDrag:
    """State of a rectangular selection drag, in viewport coordinates."""

    start: Vec2 | None = None
    end: Vec2 | None = None

    def is_dragging(self) -> bool:
        return self.start is not None or self.end is not None


def _image_size(image: Any) -> Vec2:
    get_size = getattr(image, "get_size", None)
    if callable(get_size):
        width, height = get_size()
    else:
        width, height = getattr(image, "size", image)
    return Vec2(float(width), float(height))


def _frame_rect(frame: ImageFrame) -> Rect:
    size = frame.size if frame.size is not None else Vec2()
    return Rect.from_center_size(frame.transform.translation, size * frame.transform.scale)


class Canvas:
    """Frames on a canvas seen through a main camera, with a control camera overlay."""

    def __init__(self, viewport_size: Vec2 | None = None) -> None:
        self.main_camera = Camera(
            viewport_size=viewport_size, target=PRIMARY_TARGET, render_layers=MAIN_LAYER
        )
        self.control_camera = Camera(
            viewport_size=viewport_size,
            target=PRIMARY_TARGET,
            order=1,
            render_layers=CONTROL_LAYER,
        )
        self.translator = CameraTranslator(self.main_camera, self.control_camera)
        self.frames: list[ImageFrame] = []
        self.selection = SelectionDrag()
        self.control_handle: ControlHandle | None = None
        self.picking = SpritePickingSettings(require_markers=False, mode=PickingMode.BOUNDING_BOX)
        self._index = 0

    def add_frame(self, image: Any, position: Vec2 | None = None) -> ImageFrame:
        """Place ``image`` at a world ``position``, above every earlier frame."""
        translation = position if position is not None else Vec2()
        frame = ImageFrame(
            image=image,
            transform=Transform(translation=translation, z=self._index / 65536.0),
            size=_image_size(image),
        )
        self._index += 1
        self.frames.append(frame)
        return frame

    def remove_frames(self, frames: Iterable[ImageFrame]) -> None:
        doomed = set(frames)
        self.frames = [f for f in self.frames if f not in doomed]
        if self.control_handle is not None and self.control_handle.sprite in doomed:
            self.control_handle = None

    def zoom(self, scroll_y: float) -> None:
        """Scale the main camera up for a positive scroll, down otherwise."""
        transform = self.main_camera.transform
        if scroll_y > 0.0:
            transform.scale = transform.scale * ZOOM_FACTOR
        else:
            transform.scale = transform.scale / ZOOM_FACTOR

    def pan(self, delta: Vec2) -> None:
        """Move the view with the pointer by a viewport ``delta``."""
        world = self.main_camera.viewport_delta_to_world(delta)
        if world is None:
            return
        transform = self.main_camera.transform
        transform.translation = transform.translation - world

    def frame_at(self, position: Vec2) -> ImageFrame | None:
        """The top-most frame under a viewport ``position``."""
        sprites = [
            PickableSprite(
                entity=frame,
                transform=frame.transform,
                size=frame.size if frame.size is not None else Vec2(),
                render_layers=MAIN_LAYER,
            )
            for frame in self.frames
        ]
        hits = pick_sprites(
            sprites, [self.main_camera], Location(PRIMARY_TARGET, position), self.picking
        )
        return hits[0][0] if hits else None

    def hover(self, frame: ImageFrame) -> None:
        if self.selection.is_dragging():
            return
        frame.hovered = True

    def unhover(self, frame: ImageFrame) -> None:
        frame.hovered = False

    def click_frame(self, frame: ImageFrame, ctrl: bool = False) -> None:
        """Toggle ``frame`` with ``ctrl``; otherwise select it alone and attach a handle."""
        if ctrl:
            frame.selected = not frame.selected
            return
        for other in self.frames:
            if other is not frame:
                other.selected = False
        frame.selected = True
        self.control_handle = ControlHandle(frame)

    def click_background(self, ctrl: bool = False) -> None:
        """Drop the control handle and, without ``ctrl``, the selection."""
        self.control_handle = None
        if ctrl:
            return
        for frame in self.frames:
            frame.selected = False

    def drag_frame(self, frame: ImageFrame, delta: Vec2) -> None:
        """Move ``frame`` by a viewport ``delta``."""
        world = self.main_camera.viewport_delta_to_world(delta)
        if world is None:
            return
        frame.transform.translation = frame.transform.translation + world

    def start_selection(self, position: Vec2) -> None:
        self.selection.start = position

    def update_selection(self, position: Vec2) -> None:
        if self.selection.start is None:
            return
        self.selection.end = position

    def end_selection(self, ctrl: bool = False) -> list[ImageFrame]:
        """Finish the drag and select every frame the rectangle touches."""
        start, end = self.selection.start, self.selection.end
        self.selection.start = self.selection.end = None
        if start is None or end is None:
            return []

        if not ctrl:
            for frame in self.frames:
                frame.selected = False

        rect = Rect.from_corners(
            self.control_camera.viewport_to_world(start),
            self.control_camera.viewport_to_world(end),
        )
        rect = self.translator.map_rect_to_main(rect)

        chosen = [f for f in self.frames if not rect.intersect(_frame_rect(f)).is_empty()]
        for frame in chosen:
            frame.selected = True
        return chosen

    def organize(self, frames: Iterable[ImageFrame] | None = None) -> None:
        """Pack ``frames`` (all frames when None) so that none overlap."""
        organize_canvas(list(self.frames if frames is None else frames))


def organize_canvas(frames: Iterable[ImageFrame]) -> None:
    """Pack frames around the last one so that none overlap.

    The last frame stays in place; each other frame moves to the free
    position nearest where it was.
    """
    targets = list(frames)
    if not targets:
        return

    shapes = [
        (
            frame,
            ShapePosition(
                frame.transform.translation,
                EdgeVectors.with_rect_size_rotation(
                    frame.size if frame.size is not None else Vec2(),
                    frame.transform.rotation,
                ),
            ),
        )
        for frame in targets
    ]

    placed = [shapes.pop()]
    for frame, shape in shapes:
        new_shape = fill((s for _, s in placed), shape, ORGANIZE_GAP, ORGANIZE_DIVISIONS)
        placed.append((frame, new_shape))

    for frame, shape in placed:
        frame.transform.translation = shape.translation