"""Pinhole camera: screen mapping and anti-aliasing sample grid.

The camera sits at the scene's camera position and looks down +z with +y up.
A (sub-)pixel coordinate (sx, sy), where sx grows to the right and sy grows
downward (image row order), maps to the camera-space direction

    x' =  (2 * sx / w - 1) * tan(fov / 2)
    y' = -(2 * sy / h - 1) * tan(fov / 2) * (h / w)
    z' =  1

which is then normalized. The minus sign on y' turns increasing rows into
decreasing camera-space y, so row 0 is the top of the image. The field of
view is horizontal; the vertical extent follows from the aspect ratio.

Anti-aliasing uses a fixed grid of sub-pixel offsets rather than random
jitter, so rendering is deterministic. The offsets are evenly spaced with a
half-step margin and never land on a pixel edge.

Example:
    >>> from spheretracer.camera.pinhole import anti_aliasing_grid
    >>> offsets = anti_aliasing_grid((2, 2))
    >>> offsets.shape
    (4, 2)
    >>> offsets[0].tolist(), offsets[3].tolist()  # doctest: +ELLIPSIS
    ([0.333..., 0.333...], [0.666..., 0.666...])
"""

import math
import numbers

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from spheretracer.core.vector import Ray, make_ray, normalize

# Type alias for 3D vectors
vec3 = tm.vec3

# Default horizontal field of view (radians)
DEFAULT_FOV = math.pi / 4.0

# Default anti-aliasing grid (columns, rows) of sub-pixel samples
DEFAULT_AA_GRID = (4, 4)

# Kernel argument type for the sample offset table
OffsetTable = ti.types.ndarray(dtype=ti.f32, ndim=2)


def grid_shape(grid: int | tuple[int, int]) -> tuple[int, int]:
    """Normalize an anti-aliasing grid size to (columns, rows).

    Args:
        grid: Either a single integer (Python or NumPy) for a square grid or
            a (columns, rows) pair.

    Returns:
        The (columns, rows) pair.

    Raises:
        ValueError: If either dimension is smaller than 1.
    """
    if isinstance(grid, numbers.Integral):
        columns, rows = int(grid), int(grid)
    else:
        columns, rows = (int(n) for n in grid)
    if columns < 1 or rows < 1:
        raise ValueError(f"Anti-aliasing grid must be at least 1x1, got {columns}x{rows}")
    return columns, rows


def anti_aliasing_grid(grid: int | tuple[int, int] = DEFAULT_AA_GRID) -> npt.NDArray[np.float32]:
    """Build the table of sub-pixel sample offsets.

    Sample i sits at (dx * (1 + i % columns), dy * (1 + i // columns)) with
    dx = 1 / (1 + columns) and dy = 1 / (1 + rows). A 1x1 grid samples the
    pixel center.

    Args:
        grid: Grid size, an int for a square grid or (columns, rows).

    Returns:
        float32 array of shape (columns * rows, 2) holding (x, y) offsets
        in [0, 1), in row-major order.
    """
    columns, rows = grid_shape(grid)
    dx = 1.0 / (1.0 + columns)
    dy = 1.0 / (1.0 + rows)

    i = np.arange(columns * rows)
    offsets = np.empty((columns * rows, 2), dtype=np.float32)
    offsets[:, 0] = dx + dx * (i % columns)
    offsets[:, 1] = dy + dy * (i // columns)
    return offsets


@ti.func
def screen_direction(
    sx: ti.f32,
    sy: ti.f32,
    width: ti.i32,
    height: ti.i32,
    tan_half_fov: ti.f32,
) -> vec3:
    """Map a sub-pixel coordinate to a unit camera-space direction.

    Args:
        sx: Horizontal pixel coordinate (0 = left edge).
        sy: Vertical pixel coordinate (0 = top edge).
        width: Image width in pixels.
        height: Image height in pixels.
        tan_half_fov: tan(fov / 2).

    Returns:
        The normalized ray direction.
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    aspect_ratio = h / w
    x = (2.0 * sx / w - 1.0) * tan_half_fov
    y = -(2.0 * sy / h - 1.0) * tan_half_fov * aspect_ratio
    return normalize(vec3(x, y, 1.0))


@ti.func
def camera_ray(
    camera: vec3,
    sx: ti.f32,
    sy: ti.f32,
    width: ti.i32,
    height: ti.i32,
    tan_half_fov: ti.f32,
) -> Ray:
    """Primary ray from the camera position through a sub-pixel coordinate."""
    return make_ray(camera, screen_direction(sx, sy, width, height, tan_half_fov))


def primary_direction(
    sx: float,
    sy: float,
    width: int,
    height: int,
    fov: float = DEFAULT_FOV,
) -> npt.NDArray[np.float64]:
    """Host-side twin of screen_direction(), for inspection and tests."""
    t = math.tan(fov / 2.0)
    d = np.array(
        [
            (2.0 * sx / width - 1.0) * t,
            -(2.0 * sy / height - 1.0) * t * (height / width),
            1.0,
        ]
    )
    return d / np.linalg.norm(d)
