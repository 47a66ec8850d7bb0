"""Pointer picking for sprites and circular handle areas."""

from __future__ import annotations

import math
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, field
from enum import Enum

from neta.camera import Camera, CameraError, Location, Transform
from neta.vector import Vec2


class PickingMode(Enum):
    """How transparent pixels of a sprite are treated."""

    BOUNDING_BOX = "bounding_box"
    ALPHA_THRESHOLD = "alpha_threshold"


@dataclass
class SpritePickingSettings:
    """Sprite picking configuration; alpha must exceed ``alpha_threshold`` to hit."""

    require_markers: bool = False
    mode: PickingMode = PickingMode.ALPHA_THRESHOLD
    alpha_threshold: float = 0.1


@dataclass
class PickableSprite:
    """A centred rectangular sprite that can be hit by the pointer.

    ``alpha_at(x, y)`` gives the alpha of an image pixel, or None when the
    pixel cannot be interpreted.
    """

    entity: Hashable
    transform: Transform
    size: Vec2
    image_size: Vec2 | None = None
    alpha_at: Callable[[int, int], float | None] | None = None
    visible: bool = True
    should_block_lower: bool = True
    render_layers: frozenset = frozenset({0})


@dataclass
class PickingAreaCircle:
    """An invisible circular hover area.

    ``pickable`` tells whether picking options were given at all; without
    them the area is hoverable and blocks lower hits.
    """

    entity: Hashable
    transform: Transform
    radius: float
    pickable: bool = False
    hoverable: bool = True
    should_block_lower: bool = True
    render_layers: frozenset = frozenset({0})


@dataclass
class HitData:
    """A hit: the camera, depth from its near plane and the world position."""

    camera: Camera
    depth: float
    position: Vec2
    z: float = 0.0
    normal: tuple[float, float, float] = field(default=(0.0, 0.0, 1.0))


def _transform_is_nan(transform: Transform) -> bool:
    values = (
        transform.translation.x,
        transform.translation.y,
        transform.z,
        transform.rotation,
        transform.scale.x,
        transform.scale.y,
    )
    return any(math.isnan(v) for v in values)


def _pixel_space(sprite: PickableSprite, local: Vec2) -> Vec2 | None:
    size = sprite.size
    if size.x == 0.0 or size.y == 0.0:
        return None
    half = size / 2.0
    if not (-half.x <= local.x <= half.x and -half.y <= local.y <= half.y):
        return None
    image = sprite.image_size or Vec2(1.0, 1.0)
    return Vec2(
        (local.x + half.x) / size.x * image.x,
        (half.y - local.y) / size.y * image.y,
    )


def _valid_pixel(sprite: PickableSprite, pixel: Vec2, settings: SpritePickingSettings) -> bool:
    if settings.mode is PickingMode.BOUNDING_BOX:
        return True
    if sprite.alpha_at is None:
        # Plain colour sprites have no image to sample and stay pickable.
        return True
    alpha = sprite.alpha_at(int(pixel.x), int(pixel.y))
    if alpha is None:
        return False
    return alpha > settings.alpha_threshold


def pick_sprites(
    sprites: Iterable[PickableSprite],
    cameras: Iterable[Camera],
    location: Location,
    settings: SpritePickingSettings,
) -> list[tuple[Hashable, HitData]]:
    """Sprites under the pointer, nearest first, stopping at a blocking sprite."""
    candidates = sorted(
        (s for s in sprites if not _transform_is_nan(s.transform) and s.visible),
        key=lambda s: -s.transform.z,
    )
    camera = next(
        (
            c
            for c in cameras
            if c.is_active
            and (not settings.require_markers or c.sprite_picking)
            and c.target == location.target
        ),
        None,
    )
    if camera is None:
        return []
    try:
        cursor = camera.viewport_to_world(location.position)
    except CameraError:
        return []
    if camera.near == camera.far:
        return []

    picks: list[tuple[Hashable, HitData]] = []
    for sprite in candidates:
        if not camera.render_layers & sprite.render_layers:
            continue
        relative_z = sprite.transform.z - camera.transform.z
        if not -camera.far <= relative_z <= -camera.near:
            continue
        local = sprite.transform.inverse_transform_point(cursor)
        pixel = _pixel_space(sprite, local)
        if pixel is None:
            continue
        if not _valid_pixel(sprite, pixel, settings):
            continue
        picks.append(
            (
                sprite.entity,
                HitData(
                    camera=camera,
                    depth=-camera.near - relative_z,
                    position=sprite.transform.transform_point(local),
                    z=sprite.transform.z,
                ),
            )
        )
        if sprite.should_block_lower:
            break
    return picks


def pick_circles(
    areas: Iterable[PickingAreaCircle],
    camera: Camera,
    location: Location,
    require_markers: bool = False,
) -> list[tuple[Hashable, HitData]]:
    """Circular areas under the pointer seen through ``camera``, nearest first."""
    if not camera.is_active or camera.target != location.target:
        return []
    candidates = sorted(
        (
            a
            for a in areas
            if not _transform_is_nan(a.transform)
            and (not require_markers or (a.pickable and a.hoverable))
        ),
        key=lambda a: -a.transform.z,
    )
    try:
        cursor = camera.viewport_to_world(location.position)
    except CameraError:
        return []

    picks: list[tuple[Hashable, HitData]] = []
    for area in candidates:
        if not area.render_layers & camera.render_layers:
            continue
        relative_z = area.transform.z - camera.transform.z
        if not relative_z < -camera.near:
            continue
        local = area.transform.inverse_transform_point(cursor)
        if local.length() < area.radius:
            picks.append(
                (
                    area.entity,
                    HitData(
                        camera=camera,
                        depth=-camera.near - relative_z,
                        position=area.transform.transform_point(local),
                        z=area.transform.z,
                    ),
                )
            )
            if not area.pickable or area.should_block_lower:
                break
    return picks