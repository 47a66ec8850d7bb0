"""The desktop application: a window showing the canvas and its menu."""

from __future__ import annotations

import argparse
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

import pygame

from neta.canvas import Canvas, ImageFrame
from neta.handle import HANDLE_WIDTH, ControlHandle, Pivot
from neta.camera import Transform
from neta.ui import ContextMenu, load_image_file
from neta.vector import Rect, Vec2

log = logging.getLogger(__name__)

BACKGROUND = (40, 40, 46)
PLACEHOLDER = (90, 90, 90)
WHITE = (255, 255, 255)
LIGHT_GRAY = (211, 211, 211)
SELECTED = (0, 255, 0)
SELECTION_RECT = (128, 128, 255)
MENU_BACKGROUND = (60, 60, 72)
BUTTON = (96, 96, 118)
BUTTON_PRESSED = (72, 72, 90)
TEXT = (230, 230, 230)

_OUTLINE = (Pivot.TOP_LEFT, Pivot.TOP_RIGHT, Pivot.BOTTOM_RIGHT, Pivot.BOTTOM_LEFT)


class _PressKind(Enum):
    MENU = auto()
    CORNER = auto()
    ROTATE = auto()
    FRAME = auto()
    BACKGROUND = auto()
    PAN = auto()
    SECONDARY = auto()


@dataclass
class _Press:
    button: int
    position: Vec2
    kind: _PressKind
    frame: ImageFrame | None = None
    pivot: Pivot | None = None
    label: str | None = None
    moved: bool = False


class App:
    """Routes window events to the canvas and the context menu, and draws them."""

    def __init__(
        self,
        size: tuple[int, int] = (1280, 720),
        canvas: Canvas | None = None,
        menu: ContextMenu | None = None,
        load_image: Callable[[str], Any] = load_image_file,
    ) -> None:
        self.size = size
        self.canvas = canvas or Canvas(Vec2(float(size[0]), float(size[1])))
        self.load_image = load_image
        self.menu = menu or ContextMenu(load_image=load_image)
        self.running = True
        self.ctrl = False
        self.cursor = Vec2()
        self._press: _Press | None = None
        self._hovered: ImageFrame | None = None
        self._handlers = {
            pygame.QUIT: self._on_quit,
            pygame.MOUSEBUTTONDOWN: self._on_button_down,
            pygame.MOUSEBUTTONUP: self._on_button_up,
            pygame.MOUSEMOTION: self._on_motion,
            pygame.MOUSEWHEEL: self._on_wheel,
            pygame.KEYDOWN: self._on_key,
            pygame.KEYUP: self._on_key,
            pygame.DROPFILE: self._on_drop,
            pygame.VIDEORESIZE: self._on_resize,
        }

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Apply one window event; returns whether the application keeps running."""
        handler = self._handlers.get(event.type)
        if handler is not None:
            handler(event)
        return self.running

    def run(self) -> None:
        """Open the window and redraw whenever events arrive until it is closed."""
        pygame.init()
        try:
            screen = pygame.display.set_mode(self.size, pygame.RESIZABLE)
            pygame.display.set_caption("neta")
            font = pygame.font.Font(None, 20)
            self._draw(screen, font)
            pygame.display.flip()
            while self.running:
                for event in [pygame.event.wait(), *pygame.event.get()]:
                    self.handle_event(event)
                if self.running:
                    self._draw(pygame.display.get_surface(), font)
                    pygame.display.flip()
        finally:
            pygame.quit()

    # Event handling

    def _on_quit(self, event: pygame.event.Event) -> None:
        self.running = False

    def _on_key(self, event: pygame.event.Event) -> None:
        if event.key in (pygame.K_LCTRL, pygame.K_RCTRL):
            self.ctrl = event.type == pygame.KEYDOWN

    def _on_wheel(self, event: pygame.event.Event) -> None:
        self.canvas.zoom(event.y)

    def _on_resize(self, event: pygame.event.Event) -> None:
        size = Vec2(float(event.w), float(event.h))
        self.size = (event.w, event.h)
        self.canvas.main_camera.viewport_size = size
        self.canvas.control_camera.viewport_size = size

    def _on_drop(self, event: pygame.event.Event) -> None:
        try:
            image = self.load_image(event.file)
        except OSError as exc:
            log.warning("%s", exc)
            return
        position = self.canvas.control_camera.viewport_to_world(self.cursor)
        self.canvas.add_frame(image, position)

    def _on_button_down(self, event: pygame.event.Event) -> None:
        position = Vec2(*event.pos)
        self.cursor = position
        if event.button == 1:
            self._press = self._primary_press(position)
        elif event.button == 2:
            self._press = _Press(2, position, _PressKind.PAN)
        elif event.button == 3:
            self._press = _Press(3, position, _PressKind.SECONDARY)

    def _primary_press(self, position: Vec2) -> _Press:
        if self.menu.covers(position):
            return _Press(1, position, _PressKind.MENU, label=self.menu.item_at(position))
        handle = self.canvas.control_handle
        pivot = self._handle_at(position)
        if handle is not None and pivot is not None:
            kind = _PressKind.CORNER if pivot in handle.corners else _PressKind.ROTATE
            return _Press(1, position, kind, frame=handle.sprite, pivot=pivot)
        frame = self.canvas.frame_at(position)
        if frame is not None:
            return _Press(1, position, _PressKind.FRAME, frame=frame)
        return _Press(1, position, _PressKind.BACKGROUND)

    def _on_motion(self, event: pygame.event.Event) -> None:
        position = Vec2(*event.pos)
        self.cursor = position
        rel = Vec2(*getattr(event, "rel", (0, 0)))
        buttons = getattr(event, "buttons", (0, 0, 0))
        press = self._press
        if press is None:
            self._update_hover(position)
            return
        press.moved = True
        canvas = self.canvas
        if press.kind is _PressKind.FRAME:
            canvas.drag_frame(press.frame, rel)
        elif press.kind is _PressKind.CORNER:
            delta = canvas.main_camera.viewport_delta_to_world(rel)
            if delta is not None:
                canvas.control_handle.drag_corner(press.frame, press.pivot, delta)
        elif press.kind is _PressKind.ROTATE:
            cursor_world = canvas.main_camera.viewport_to_world(position)
            canvas.control_handle.rotate_to(press.frame, cursor_world)
        elif press.kind is _PressKind.BACKGROUND:
            if canvas.selection.start is None:
                canvas.start_selection(press.position)
            canvas.update_selection(position)
        elif press.kind is _PressKind.PAN:
            if not (buttons[0] or buttons[2]):
                canvas.pan(rel)
        if press.kind not in (_PressKind.CORNER, _PressKind.ROTATE):
            self._update_hover(position)

    def _on_button_up(self, event: pygame.event.Event) -> None:
        position = Vec2(*event.pos)
        self.cursor = position
        press, self._press = self._press, None
        if press is None or press.button != event.button:
            return
        if press.kind is _PressKind.SECONDARY:
            self.menu.open(position, self.canvas)
            return
        if press.kind is _PressKind.MENU:
            label = self.menu.item_at(position)
            if label is not None and label == press.label:
                self.menu.activate(label, self.canvas)
            else:
                self.menu.close()
            return
        self.menu.close()
        if press.kind is _PressKind.FRAME:
            if self.canvas.frame_at(position) is press.frame:
                self.canvas.click_frame(press.frame, self.ctrl)
        elif press.kind is _PressKind.BACKGROUND:
            self.canvas.click_background(self.ctrl)
            if press.moved:
                self.canvas.end_selection(self.ctrl)

    def _update_hover(self, position: Vec2) -> None:
        frame = self.canvas.frame_at(position)
        if frame is self._hovered:
            return
        if self._hovered is not None:
            self.canvas.unhover(self._hovered)
        self._hovered = None
        if frame is not None:
            self.canvas.hover(frame)
            if frame.hovered:
                self._hovered = frame

    def _handle_placement(self, handle: ControlHandle) -> tuple[Transform, Vec2] | None:
        """The handle's unscaled placement in control space and the frame's size there."""
        frame = handle.sprite
        if frame.size is None:
            return None
        control = self.canvas.translator.to_control(frame.transform)
        placed = Transform(translation=control.translation, rotation=control.rotation)
        return placed, frame.size * control.scale

    def _handle_at(self, position: Vec2) -> Pivot | None:
        handle = self.canvas.control_handle
        if handle is None:
            return None
        placement = self._handle_placement(handle)
        if placement is None:
            return None
        placed, size = placement
        world = self.canvas.control_camera.viewport_to_world(position)
        return handle.hit(placed.inverse_transform_point(world), size)

    # Drawing

    def _draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        screen.fill(BACKGROUND)
        canvas = self.canvas
        for frame in sorted(canvas.frames, key=lambda f: f.transform.z):
            self._draw_frame(screen, frame)
        if canvas.control_handle is None:
            for frame in canvas.frames:
                if frame.selected or frame.hovered:
                    color = SELECTED if frame.selected else WHITE
                    pygame.draw.polygon(screen, color, self._frame_outline(frame), 2)
        else:
            self._draw_handle(screen, canvas.control_handle)
        self._draw_selection(screen)
        self._draw_menu(screen, font)

    def _frame_outline(self, frame: ImageFrame) -> list[tuple[float, float]]:
        size = frame.size if frame.size is not None else Vec2()
        main = self.canvas.main_camera
        points = []
        for pivot in _OUTLINE:
            p = main.world_to_viewport(frame.transform.transform_point(size * pivot.as_vec()))
            points.append((p.x, p.y))
        return points

    def _draw_frame(self, screen: pygame.Surface, frame: ImageFrame) -> None:
        main = self.canvas.main_camera
        size = frame.size if frame.size is not None else Vec2()
        size = size * frame.transform.scale / main.transform.scale
        width, height = round(abs(size.x)), round(abs(size.y))
        if width <= 0 or height <= 0:
            return
        if not isinstance(frame.image, pygame.Surface):
            pygame.draw.polygon(screen, PLACEHOLDER, self._frame_outline(frame))
            return
        try:
            picture = pygame.transform.smoothscale(frame.image, (width, height))
        except ValueError:
            picture = pygame.transform.scale(frame.image, (width, height))
        angle = math.degrees(frame.transform.rotation - main.transform.rotation)
        picture = pygame.transform.rotate(picture, angle)
        centre = main.world_to_viewport(frame.transform.translation)
        screen.blit(picture, picture.get_rect(center=(centre.x, centre.y)))

    def _draw_handle(self, screen: pygame.Surface, handle: ControlHandle) -> None:
        placement = self._handle_placement(handle)
        if placement is None:
            return
        placed, size = placement
        camera = self.canvas.control_camera

        def to_screen(local: Vec2) -> tuple[float, float]:
            p = camera.world_to_viewport(placed.transform_point(local))
            return p.x, p.y

        outline = [to_screen(size * pivot.as_vec()) for pivot in _OUTLINE]
        pygame.draw.polygon(screen, WHITE, outline, int(HANDLE_WIDTH))
        knob = handle.rotation_handle_position(size)
        pygame.draw.line(
            screen, WHITE, to_screen(size * handle.rotation_pivot.as_vec()), to_screen(knob)
        )
        for local in [*handle.corner_positions(size).values(), knob]:
            centre = to_screen(local)
            pygame.draw.circle(screen, WHITE, centre, handle.radius)
            pygame.draw.circle(screen, LIGHT_GRAY, centre, handle.radius + 0.5, 1)

    def _draw_selection(self, screen: pygame.Surface) -> None:
        start, end = self.canvas.selection.start, self.canvas.selection.end
        if start is None or end is None:
            return
        rect = Rect.from_corners(start, end)
        size = rect.size()
        pygame.draw.rect(
            screen, SELECTION_RECT, pygame.Rect(rect.min.x, rect.min.y, size.x, size.y), 1
        )

    def _draw_menu(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        if not self.menu.visible:
            return
        bounds = self.menu.bounds()
        size = bounds.size()
        pygame.draw.rect(
            screen,
            MENU_BACKGROUND,
            pygame.Rect(bounds.min.x, bounds.min.y, size.x, size.y),
            border_radius=8,
        )
        press = self._press
        for label, rect in self.menu.item_rects():
            pressed = (
                press is not None and press.kind is _PressKind.MENU and press.label == label
            )
            button = pygame.Rect(rect.min.x, rect.min.y, rect.size().x, rect.size().y)
            pygame.draw.rect(
                screen, BUTTON_PRESSED if pressed else BUTTON, button.inflate(-4, -4),
                border_radius=6,
            )
            text = font.render(label, True, TEXT)
            screen.blit(text, text.get_rect(center=button.center))


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value} is not a positive size")
    return number


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="neta", description="Arrange reference images on an endless canvas."
    )
    parser.add_argument("--width", type=_positive_int, default=1280, help="window width")
    parser.add_argument("--height", type=_positive_int, default=720, help="window height")
    args = parser.parse_args(argv)
    App(size=(args.width, args.height)).run()
    return 0