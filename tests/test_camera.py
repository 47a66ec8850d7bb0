import math

import pytest

from neta.camera import (
    Camera,
    CameraError,
    CameraTranslator,
    Location,
    Transform,
    find_camera,
    pointer_delta_to_world,
)
from neta.vector import Rect, Vec2


def approx(v):
    return pytest.approx(tuple(v))


def make_camera(**kwargs):
    kwargs.setdefault("viewport_size", Vec2(800.0, 600.0))
    return Camera(**kwargs)


def test_transform_round_trip():
    t = Transform(Vec2(3.0, -2.0), 1.0, 0.7, Vec2(2.0, 0.5))
    p = Vec2(4.0, 9.0)
    assert tuple(t.inverse_transform_point(t.transform_point(p))) == approx(p)


def test_identity_transform_keeps_point():
    assert Transform().transform_point(Vec2(1.5, 2.5)) == Vec2(1.5, 2.5)


def test_viewport_center_is_camera_translation():
    camera = make_camera(transform=Transform(Vec2(10.0, 20.0)))
    assert tuple(camera.viewport_to_world(Vec2(400.0, 300.0))) == approx(Vec2(10.0, 20.0))


def test_viewport_world_round_trip_with_rotation_and_scale():
    camera = make_camera(transform=Transform(Vec2(-5.0, 7.0), 0.0, 0.4, Vec2(1.5, 1.5)))
    position = Vec2(123.0, 456.0)
    world = camera.viewport_to_world(position)
    assert tuple(camera.world_to_viewport(world)) == approx(position)


def test_viewport_y_points_down():
    camera = make_camera()
    top = camera.viewport_to_world(Vec2(400.0, 0.0))
    bottom = camera.viewport_to_world(Vec2(400.0, 600.0))
    assert top.y > bottom.y


def test_missing_viewport_raises():
    camera = Camera()
    with pytest.raises(CameraError):
        camera.world_to_viewport(Vec2())
    with pytest.raises(CameraError):
        camera.viewport_to_world(Vec2())


def test_viewport_delta_with_scale():
    camera = make_camera(transform=Transform(scale=Vec2(2.0, 2.0)))
    assert tuple(camera.viewport_delta_to_world(Vec2(10.0, 5.0))) == approx(Vec2(20.0, -10.0))


def test_viewport_delta_matches_point_difference():
    camera = make_camera(transform=Transform(Vec2(3.0, 4.0), 0.0, 0.9, Vec2(1.2, 1.2)))
    a, b = Vec2(100.0, 100.0), Vec2(130.0, 80.0)
    expected = camera.viewport_to_world(b) - camera.viewport_to_world(a)
    assert tuple(camera.viewport_delta_to_world(b - a)) == approx(expected)


def test_viewport_delta_without_viewport_is_none():
    assert Camera().viewport_delta_to_world(Vec2(1.0, 1.0)) is None


def test_translator_identical_cameras():
    translator = CameraTranslator(make_camera(), make_camera())
    t = Transform(Vec2(12.0, -8.0), 5.0, 0.3, Vec2(2.0, 2.0))
    result = translator.to_control(t)
    assert tuple(result.translation) == approx(t.translation)
    assert result.rotation == pytest.approx(t.rotation)
    assert tuple(result.scale) == approx(t.scale)
    assert result.z == 0.0


def test_translator_round_trip():
    main = make_camera(transform=Transform(Vec2(50.0, -30.0), 0.0, 0.2, Vec2(2.0, 2.0)))
    control = make_camera()
    translator = CameraTranslator(main, control)
    t = Transform(Vec2(7.0, 9.0), 0.0, 1.1, Vec2(3.0, 3.0))
    back = translator.to_main(translator.to_control(t))
    assert tuple(back.translation) == approx(t.translation)
    assert back.rotation == pytest.approx(t.rotation)
    assert tuple(back.scale) == approx(t.scale)


def test_to_control_lands_on_same_viewport_position():
    main = make_camera(transform=Transform(Vec2(20.0, 10.0), 0.0, 0.0, Vec2(0.5, 0.5)))
    control = make_camera()
    translator = CameraTranslator(main, control)
    t = Transform(Vec2(30.0, 40.0))
    result = translator.to_control(t)
    assert tuple(control.world_to_viewport(result.translation)) == approx(
        main.world_to_viewport(t.translation)
    )


def test_map_rect_to_main_follows_viewport():
    main = make_camera(transform=Transform(Vec2(5.0, 5.0), 0.0, 0.0, Vec2(2.0, 2.0)))
    control = make_camera()
    translator = CameraTranslator(main, control)
    rect = Rect(Vec2(-10.0, -20.0), Vec2(30.0, 40.0))
    mapped = translator.map_rect_to_main(rect)
    assert tuple(mapped.min) == approx(main.viewport_to_world(control.world_to_viewport(rect.min)))
    assert tuple(mapped.max) == approx(main.viewport_to_world(control.world_to_viewport(rect.max)))


def test_find_camera():
    a = make_camera(target="first")
    b = make_camera(target="second")
    assert find_camera([a, b], "second") is b
    with pytest.raises(CameraError):
        find_camera([a, b], "third")


def test_pointer_delta_picks_camera_under_pointer():
    other = make_camera(target="other")
    main = make_camera(transform=Transform(scale=Vec2(2.0, 2.0)))
    location = Location("primary", Vec2(100.0, 100.0))
    result = pointer_delta_to_world([other, main], location, Vec2(4.0, 0.0))
    assert result is not None
    delta, camera = result
    assert camera is main
    assert tuple(delta) == approx(main.viewport_delta_to_world(Vec2(4.0, 0.0)))


def test_pointer_delta_outside_viewport_is_none():
    camera = make_camera()
    assert pointer_delta_to_world([camera], Location("primary", Vec2(900.0, 10.0)), Vec2(1.0, 1.0)) is None
    assert pointer_delta_to_world([camera], Location("elsewhere", Vec2(10.0, 10.0)), Vec2(1.0, 1.0)) is None


def test_rotated_delta_keeps_scaled_length():
    camera = make_camera(transform=Transform(rotation=math.pi / 3, scale=Vec2(3.0, 3.0)))
    delta = Vec2(6.0, 8.0)
    assert camera.viewport_delta_to_world(delta).length() == pytest.approx(delta.length() * 3.0)