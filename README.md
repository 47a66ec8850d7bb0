# neta

neta is a board for reference images. It shows images as frames on an
endless canvas. You can pan, zoom, select, move, resize and rotate the frames,
and have neta pack them close together.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running

```
neta
neta --width 1600 --height 900
```

This opens a resizable window with an empty canvas. The default size is
1280×720. `--width` and `--height` must be positive integers.

- **Right click** opens the context menu at the pointer. If no frame is
  hovered or selected, it offers *Add* and *Organize*, and *Organize* then
  works on every frame. If frames are hovered or selected, it offers *Remove*
  and *Organize*, and both work on those frames.
- *Add* opens a file dialog and places each chosen image at the centre of the
  canvas. The dialog uses `tkinter`, which must be available in your Python.
- **Drag and drop** an image file onto the window to place it at the cursor.
  A file that cannot be loaded is skipped and a warning is logged.
- **Left click** a frame to select it on its own. This also shows the frame's
  control handle. **Ctrl + click** selects or deselects a frame and keeps the
  rest of the selection.
- **Left click** on the background hides the control handle and clears the
  selection. Hold **Ctrl** to keep the selection.
- **Left drag** on the background draws a selection rectangle. Every frame the
  rectangle touches is selected. Without **Ctrl**, the old selection is cleared
  first.
- **Left drag** on a frame moves it.
- **Drag a corner handle** to resize the frame; the opposite corner stays
  where it is. **Drag the knob above the top edge** to rotate the frame.
- **Middle drag** pans the view, as long as the left and right buttons are not
  held. The **mouse wheel** zooms in and out by a factor of 1.1 per step.

*Organize* leaves the last of the chosen frames where it is. Each other frame
moves to the free spot nearest to where it was, with a gap of 10 units between
frames.

## Using the library

The modules can also be used without the window:

- `neta.vector`: `Vec2` and `Rect`.
- `neta.packing`: polygons as `EdgeVectors`, `minkowski_sum`, `ShapePosition`
  with a separating-axis overlap test, and `fill`, which places a shape next to
  others without overlap.
- `neta.camera`: `Transform` and an orthographic `Camera` that converts between
  viewport and world space. Also `CameraTranslator`, `find_camera` and
  `pointer_delta_to_world`.
- `neta.picking`: `pick_sprites` and `pick_circles` find what lies under the
  pointer, nearest first.
- `neta.handle`: the `ControlHandle` for resizing and rotating a frame, and
  `cursor_for_direction`.
- `neta.canvas`: `Canvas`, which holds `ImageFrame`s and handles selection,
  dragging, zooming, panning and `organize`.
- `neta.ui`: the `ContextMenu` and the `run_once_at` condition.
- `neta.ecs`: a small `World` of entities whose `Observe` component attaches
  an `Observer` to its owner.
- `neta.debug_gizmo`: timed drawing commands (`debug_gizmo`,
  `execute_gizmo_commands`) that run each frame for 30 seconds.

For example, packing with `fill`:

```python
from neta.vector import Vec2
from neta.packing import EdgeVectors, ShapePosition, fill

placed = [ShapePosition(Vec2(0, 0), EdgeVectors.with_rect_size_rotation(Vec2(4, 4), 0.0))]
new = ShapePosition(Vec2(25, 25), EdgeVectors.with_rect_size_rotation(Vec2(2, 2), 0.0))
result = fill(placed, new, 0.1, 2)
print(result.translation)
```

`fill` returns a new shape with the same edges, moved to the free position
nearest to its own translation. It keeps at least the given offset from every
placed shape. If there is no free position, it raises `ValueError`.

## What it does not do

A board lives only as long as its window. neta cannot save or reopen a
canvas, and it has no undo.