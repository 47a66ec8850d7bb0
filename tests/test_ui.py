import pygame
import pytest

from neta.canvas import Canvas
from neta.ui import (
    ADD,
    BUTTON_HEIGHT,
    MENU_PADDING,
    ORGANIZE,
    REMOVE,
    ContextMenu,
    load_image_file,
    run_once_at,
)
from neta.vector import Rect, Vec2


def _rect(frame):
    return Rect.from_center_size(frame.transform.translation, frame.size)


@pytest.fixture
def canvas():
    return Canvas(Vec2(800.0, 600.0))


def test_run_once_at_zero_fires_first_call_only():
    condition = run_once_at(0)
    assert [condition() for _ in range(4)] == [True, False, False, False]


def test_run_once_at_one_fires_second_call_only():
    condition = run_once_at(1)
    assert [condition() for _ in range(4)] == [False, True, False, False]


def test_open_on_empty_canvas(canvas):
    menu = ContextMenu()
    menu.open(Vec2(30.0, 40.0), canvas)
    assert menu.visible
    assert menu.position == Vec2(30.0, 40.0)
    assert menu.items() == [ADD, ORGANIZE]
    assert menu.target_frames == []


def test_open_without_targets_takes_all_frames(canvas):
    frames = [canvas.add_frame((10, 10)), canvas.add_frame((20, 20))]
    menu = ContextMenu()
    menu.open(Vec2(), canvas)
    assert menu.target_frames == frames
    assert menu.items() == [ADD, ORGANIZE]


def test_open_with_selection_targets_selected(canvas):
    first = canvas.add_frame((10, 10))
    second = canvas.add_frame((20, 20))
    second.selected = True
    menu = ContextMenu()
    menu.open(Vec2(), canvas)
    assert menu.target_frames == [second]
    assert first not in menu.target_frames
    assert menu.items() == [REMOVE, ORGANIZE]


def test_hovered_frame_is_a_target(canvas):
    frame = canvas.add_frame((10, 10))
    canvas.add_frame((20, 20))
    frame.hovered = True
    menu = ContextMenu()
    menu.open(Vec2(), canvas)
    assert menu.target_frames == [frame]


def test_close_hides(canvas):
    menu = ContextMenu()
    menu.open(Vec2(), canvas)
    menu.close()
    assert not menu.visible
    assert menu.item_at(Vec2(MENU_PADDING + 1, MENU_PADDING + 1)) is None


def test_item_layout(canvas):
    menu = ContextMenu()
    menu.open(Vec2(100.0, 200.0), canvas)
    rects = menu.item_rects()
    assert [label for label, _ in rects] == menu.items()
    assert rects[0][1].min == Vec2(100.0 + MENU_PADDING, 200.0 + MENU_PADDING)
    assert rects[1][1].min.y == rects[0][1].max.y
    assert rects[1][1].size().y == BUTTON_HEIGHT
    assert menu.item_at(rects[1][1].center()) == ORGANIZE
    assert menu.item_at(Vec2(0.0, 0.0)) is None
    assert menu.covers(rects[0][1].center())
    assert not menu.covers(Vec2(0.0, 0.0))


def test_activate_remove(canvas):
    keep = canvas.add_frame((10, 10))
    doomed = canvas.add_frame((20, 20))
    doomed.selected = True
    menu = ContextMenu()
    menu.open(Vec2(), canvas)
    menu.activate(REMOVE, canvas)
    assert canvas.frames == [keep]
    assert not menu.visible


def test_activate_add_loads_picked_files(canvas):
    sizes = {"a.png": (30, 20), "b.png": (40, 10)}
    menu = ContextMenu(pick_files=lambda: ["a.png", "b.png"], load_image=sizes.__getitem__)
    menu.open(Vec2(), canvas)
    menu.activate(ADD, canvas)
    assert [f.image for f in canvas.frames] == [(30, 20), (40, 10)]
    assert canvas.frames[0].size == Vec2(30.0, 20.0)
    assert not menu.visible


def test_activate_add_skips_unreadable_files(canvas):
    def loader(path):
        if path == "broken.png":
            raise OSError("cannot load")
        return (5, 5)

    menu = ContextMenu(pick_files=lambda: ["broken.png", "ok.png"], load_image=loader)
    menu.open(Vec2(), canvas)
    menu.activate(ADD, canvas)
    assert [f.image for f in canvas.frames] == [(5, 5)]


def test_activate_add_cancelled(canvas):
    menu = ContextMenu(pick_files=lambda: None, load_image=lambda path: (1, 1))
    menu.open(Vec2(), canvas)
    menu.activate(ADD, canvas)
    assert canvas.frames == []


def test_activate_hidden_item_raises(canvas):
    menu = ContextMenu()
    menu.open(Vec2(), canvas)
    with pytest.raises(ValueError):
        menu.activate(REMOVE, canvas)


def test_activate_organize_separates_frames(canvas):
    frames = [canvas.add_frame((100, 50)) for _ in range(3)]
    menu = ContextMenu()
    menu.open(Vec2(), canvas)
    menu.activate(ORGANIZE, canvas)
    for i, a in enumerate(frames):
        for b in frames[i + 1:]:
            assert _rect(a).intersect(_rect(b)).is_empty()


def test_load_image_file_round_trip(tmp_path):
    path = tmp_path / "picture.png"
    pygame.image.save(pygame.Surface((12, 7)), str(path))
    assert load_image_file(path).get_size() == (12, 7)


def test_load_image_file_missing(tmp_path):
    with pytest.raises(OSError):
        load_image_file(tmp_path / "missing.png")