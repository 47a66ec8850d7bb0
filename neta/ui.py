"""The context menu that adds, removes and organises image frames."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import pygame

from neta.canvas import Canvas, ImageFrame
from neta.vector import Rect, Vec2

log = logging.getLogger(__name__)

MENU_PADDING = 10.0
BUTTON_WIDTH = 150.0
BUTTON_HEIGHT = 35.0

ADD = "Add"
REMOVE = "Remove"
ORGANIZE = "Organize"

# Each item with the context it is shown in; None means always.
_ITEMS = (
    (ADD, "canvas"),
    (REMOVE, "frame"),
    (ORGANIZE, None),
)


def run_once_at(n: int) -> Callable[[], bool]:
    """A condition that is true only on its ``n``-th call, counting from 0."""
    count = 0

    def condition() -> bool:
        nonlocal count
        if count > n:
            return False
        previous = count
        count += 1
        return previous == n

    return condition


def pick_files_dialog() -> list[str] | None:
    """Ask the user for image files; None when the dialog is cancelled."""
    import tkinter
    from tkinter import filedialog

    root = tkinter.Tk()
    root.withdraw()
    try:
        files = filedialog.askopenfilenames(parent=root)
    finally:
        root.destroy()
    return list(files) or None


def load_image_file(path: str | os.PathLike) -> pygame.Surface:
    """Load an image from disk, raising OSError when it cannot be read."""
    try:
        surface = pygame.image.load(os.fspath(path))
    except (pygame.error, FileNotFoundError) as exc:
        raise OSError(f"cannot load image {path}: {exc}") from exc
    if pygame.display.get_surface() is not None:
        surface = surface.convert_alpha()
    return surface


@dataclass
class ContextMenu:
    """A pop-up menu whose items depend on whether frames were targeted."""

    pick_files: Callable[[], Sequence[str] | None] = pick_files_dialog
    load_image: Callable[[str], Any] = load_image_file
    visible: bool = False
    position: Vec2 = Vec2()
    target_frames: list[ImageFrame] = field(default_factory=list)
    on_canvas: bool = True

    def open(self, position: Vec2, canvas: Canvas) -> None:
        """Show the menu at a viewport ``position`` for the current canvas state.

        Hovered or selected frames become the targets; with none of them the
        menu targets every frame and offers to add new ones.
        """
        targets = [f for f in canvas.frames if f.hovered or f.selected]
        self.on_canvas = not targets
        self.target_frames = list(canvas.frames) if self.on_canvas else targets
        self.position = position
        self.visible = True

    def close(self) -> None:
        self.visible = False

    def items(self) -> list[str]:
        """Labels shown in the current context, top to bottom."""
        context = "canvas" if self.on_canvas else "frame"
        return [label for label, shown in _ITEMS if shown is None or shown == context]

    def bounds(self) -> Rect:
        """The menu's area in viewport coordinates."""
        size = Vec2(
            2 * MENU_PADDING + BUTTON_WIDTH,
            2 * MENU_PADDING + BUTTON_HEIGHT * len(self.items()),
        )
        return Rect(self.position, self.position + size)

    def item_rects(self) -> list[tuple[str, Rect]]:
        """Each visible item with its button area in viewport coordinates."""
        origin = self.position + Vec2(MENU_PADDING, MENU_PADDING)
        button = Vec2(BUTTON_WIDTH, BUTTON_HEIGHT)
        rects = []
        for row, label in enumerate(self.items()):
            top_left = origin + Vec2(0.0, BUTTON_HEIGHT * row)
            rects.append((label, Rect(top_left, top_left + button)))
        return rects

    def covers(self, position: Vec2) -> bool:
        """Whether the shown menu lies under a viewport ``position``."""
        return self.visible and _inside(self.bounds(), position)

    def item_at(self, position: Vec2) -> str | None:
        """The label of the shown item under a viewport ``position``."""
        if not self.visible:
            return None
        for label, rect in self.item_rects():
            if _inside(rect, position):
                return label
        return None

    def activate(self, label: str, canvas: Canvas) -> None:
        """Run the action of an item and hide the menu."""
        if label not in self.items():
            raise ValueError(f"{label!r} is not in the menu")
        self.close()
        if label == ADD:
            self._add(canvas)
        elif label == REMOVE:
            canvas.remove_frames(self.target_frames)
        else:
            canvas.organize(self.target_frames)

    def _add(self, canvas: Canvas) -> None:
        files = self.pick_files()
        log.info("files: %s", files)
        if not files:
            return
        for path in files:
            try:
                image = self.load_image(path)
            except OSError as exc:
                log.warning("%s", exc)
                continue
            canvas.add_frame(image)


def _inside(rect: Rect, position: Vec2) -> bool:
    return rect.min.x <= position.x < rect.max.x and rect.min.y <= position.y < rect.max.y