"""2D orthographic cameras and conversions between viewport and world space."""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field

from neta.vector import Rect, Vec2


class CameraError(Exception):
    """Raised when a camera cannot perform a conversion."""


@dataclass
class Transform:
    """A 2D placement: translation, depth, counter-clockwise rotation and scale."""

    translation: Vec2 = Vec2()
    z: float = 0.0
    rotation: float = 0.0
    scale: Vec2 = Vec2(1.0, 1.0)

    def transform_point(self, point: Vec2) -> Vec2:
        """Map a local point into the parent space."""
        return (point * self.scale).rotated(self.rotation) + self.translation

    def inverse_transform_point(self, point: Vec2) -> Vec2:
        """Map a parent-space point into local space."""
        return (point - self.translation).rotated(-self.rotation) / self.scale


@dataclass(frozen=True)
class Location:
    """Where a pointer is: the render target and the position in its viewport."""

    target: Hashable
    position: Vec2


@dataclass
class Camera:
    """An orthographic camera looking down the negative z axis.

    Viewport coordinates start at the top-left corner with y pointing down.
    """

    viewport_size: Vec2 | None = None
    transform: Transform = field(default_factory=Transform)
    target: Hashable = "primary"
    order: int = 0
    is_active: bool = True
    sprite_picking: bool = False
    render_layers: frozenset = frozenset({0})
    near: float = -1000.0
    far: float = 1000.0

    def _size(self) -> Vec2:
        if self.viewport_size is None:
            raise CameraError("camera has no viewport")
        return self.viewport_size

    def world_to_viewport(self, point: Vec2) -> Vec2:
        size = self._size()
        local = self.transform.inverse_transform_point(point)
        return Vec2(local.x + size.x / 2.0, size.y / 2.0 - local.y)

    def viewport_to_world(self, position: Vec2) -> Vec2:
        size = self._size()
        local = Vec2(position.x - size.x / 2.0, size.y / 2.0 - position.y)
        return self.transform.transform_point(local)

    def viewport_delta_to_world(self, delta: Vec2) -> Vec2 | None:
        """World-space movement for a viewport-space movement, or None without a viewport."""
        size = self.viewport_size
        if size is None or size.x == 0.0 or size.y == 0.0:
            return None
        ndc = delta / size
        ndc = Vec2(ndc.x, -ndc.y) * 2.0
        right = (Vec2(size.x / 2.0, 0.0) * self.transform.scale).rotated(self.transform.rotation)
        up = (Vec2(0.0, size.y / 2.0) * self.transform.scale).rotated(self.transform.rotation)
        return right * ndc.x + up * ndc.y


def _in_viewport(camera: Camera, location: Location) -> bool:
    size = camera.viewport_size
    if size is None or camera.target != location.target:
        return False
    pos = location.position
    return 0.0 <= pos.x <= size.x and 0.0 <= pos.y <= size.y


def _map_between(source: Camera, destination: Camera, transform: Transform) -> Transform:
    viewport = source.world_to_viewport(transform.translation)
    translation = destination.viewport_to_world(viewport)
    return Transform(
        translation=translation,
        z=0.0,
        rotation=transform.rotation
        + destination.transform.rotation
        - source.transform.rotation,
        scale=transform.scale * destination.transform.scale / source.transform.scale,
    )


@dataclass
class CameraTranslator:
    """Translate between two cameras that share a window and viewport size."""

    main: Camera
    control: Camera

    def to_control(self, transform: Transform) -> Transform:
        """Place ``transform`` from the main view so it looks the same in the control view.

        The returned transform always has a z of 0.
        """
        return _map_between(self.main, self.control, transform)

    def to_main(self, transform: Transform) -> Transform:
        """The reverse of :meth:`to_control`."""
        return _map_between(self.control, self.main, transform)

    def map_rect_to_main(self, rect: Rect) -> Rect:
        def convert(point: Vec2) -> Vec2:
            return self.main.transform.transform_point(
                self.control.transform.inverse_transform_point(point)
            )

        return Rect(convert(rect.min), convert(rect.max))


def find_camera(cameras: Iterable[Camera], target: Hashable) -> Camera:
    """The first camera rendering to ``target``."""
    for camera in cameras:
        if camera.target == target:
            return camera
    raise CameraError(f"Camera not found for target {target!r}")


def pointer_delta_to_world(
    cameras: Iterable[Camera], location: Location, delta: Vec2
) -> tuple[Vec2, Camera] | None:
    """World delta for a pointer movement and the camera under the pointer."""
    for camera in cameras:
        if _in_viewport(camera, location):
            world = camera.viewport_delta_to_world(delta)
            if world is None:
                return None
            return world, camera
    return None