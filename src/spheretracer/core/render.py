"""Image assembly: supersampled primary rays, averaging and output mapping.

render() is the entry point of the renderer. It is a pure function of the
scene and the render configuration: the scene is packed into tables that are
passed to the kernel as arguments, the framebuffer is a NumPy array owned by
the call, and nothing is random. Rendering the same inputs twice gives
identical bytes.

For each pixel the kernel casts one primary ray per anti-aliasing offset,
traces it at full depth and averages the results. The averaged linear image
is then mapped to 8-bit channels on the host (clamp, square-root gamma,
scale by 255, truncate).

Pixels are independent, so the kernel's outer loop runs in parallel. Rows are
rendered in bands so that long renders can report progress between bands.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.core.render import render
    >>> from spheretracer.scene.default import create_default_scene
    >>> framebuffer = render(create_default_scene(), (4, 4), 320, 180)
    >>> framebuffer.shape, framebuffer.dtype
    ((180, 320, 3), dtype('uint8'))
"""

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from spheretracer.camera.pinhole import (
    DEFAULT_AA_GRID,
    DEFAULT_FOV,
    OffsetTable,
    anti_aliasing_grid,
    camera_ray,
    grid_shape,
)
from spheretracer.core.integrator import MAX_DEPTH, trace
from spheretracer.preview.display import to_pixels
from spheretracer.scene.description import Scene
from spheretracer.scene.intersection import (
    LightTable,
    ObjectTable,
    SceneInfo,
    pack_scene,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# Rows rendered per kernel launch by default
DEFAULT_ROWS_PER_BATCH = 64


class FramebufferAllocationError(RuntimeError):
    """The output buffers for an image could not be allocated."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(f"Can't allocate memory for image with dimension {width}x{height}")
        self.width = width
        self.height = height


# =============================================================================
# Rendering Kernel
# =============================================================================


@ti.kernel
def _render_rows(
    radiance: ti.types.ndarray(dtype=ti.f32, ndim=3),
    objects: ObjectTable,
    lights: LightTable,
    num_objects: ti.i32,
    num_lights: ti.i32,
    camera: vec3,
    sky_start: vec3,
    sky_end: vec3,
    offsets: OffsetTable,
    num_samples: ti.i32,
    width: ti.i32,
    height: ti.i32,
    row_start: ti.i32,
    row_count: ti.i32,
    tan_half_fov: ti.f32,
    depth: ti.i32,
):
    """Render rows [row_start, row_start + row_count) into the radiance buffer.

    Each pixel averages num_samples primary rays, one per sub-pixel offset,
    and writes its own (y, x) slot of the buffer.
    """
    info = SceneInfo(
        camera=camera,
        sky_start=sky_start,
        sky_end=sky_end,
        num_objects=num_objects,
        num_lights=num_lights,
    )

    for j, x in ti.ndrange(row_count, width):
        y = row_start + j
        color = vec3(0.0, 0.0, 0.0)

        # Supersampling anti-aliasing
        for s in range(num_samples):
            sx = ti.cast(x, ti.f32) + offsets[s, 0]
            sy = ti.cast(y, ti.f32) + offsets[s, 1]
            ray = camera_ray(info.camera, sx, sy, width, height, tan_half_fov)
            color += trace(objects, lights, info, ray, depth)

        color /= ti.cast(num_samples, ti.f32)

        for c in ti.static(range(3)):
            radiance[y, x, c] = color[c]


# =============================================================================
# Public Rendering API
# =============================================================================


def _validate(
    antialiasing_grid: int | tuple[int, int],
    width: int,
    height: int,
    fov: float,
    depth: int,
    rows_per_batch: int,
) -> None:
    """Reject render configurations that cannot produce an image."""
    grid_shape(antialiasing_grid)
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if not 0.0 < fov < math.pi:
        raise ValueError(f"Field of view must be in (0, pi) radians, got {fov}")
    if depth < 0:
        raise ValueError(f"Reflection depth must be non-negative, got {depth}")
    if rows_per_batch < 1:
        raise ValueError(f"rows_per_batch must be at least 1, got {rows_per_batch}")


def _allocate(width: int, height: int, dtype: npt.DTypeLike) -> np.ndarray:
    """Allocate a (height, width, 3) buffer, failing before any rendering."""
    try:
        return np.zeros((height, width, 3), dtype=dtype)
    except MemoryError as e:
        raise FramebufferAllocationError(width, height) from e


def _render_into(
    radiance: npt.NDArray[np.float32],
    scene: Scene,
    antialiasing_grid: int | tuple[int, int],
    fov: float,
    depth: int,
    rows_per_batch: int,
    callback: ProgressCallback | None,
) -> None:
    """Fill a preallocated radiance buffer band by band."""
    height, width = radiance.shape[:2]
    offsets = anti_aliasing_grid(antialiasing_grid)
    packed = pack_scene(scene)

    logger.info(
        "Rendering %dx%d, %d samples per pixel, depth %d",
        width,
        height,
        len(offsets),
        depth,
    )
    start_time = time.time()

    camera = vec3(*packed.camera)
    sky_start = vec3(*packed.sky_start)
    sky_end = vec3(*packed.sky_end)
    tan_half_fov = math.tan(fov / 2.0)

    row_start = 0
    while row_start < height:
        row_count = min(rows_per_batch, height - row_start)
        _render_rows(
            radiance,
            packed.objects,
            packed.lights,
            packed.num_objects,
            packed.num_lights,
            camera,
            sky_start,
            sky_end,
            offsets,
            len(offsets),
            width,
            height,
            row_start,
            row_count,
            tan_half_fov,
            depth,
        )
        row_start += row_count
        logger.debug("Rendered rows %d/%d", row_start, height)

        if callback is not None:
            callback(row_start, height)

    logger.info("Rendered in %.2fs", time.time() - start_time)


def render_radiance(
    scene: Scene,
    antialiasing_grid: int | tuple[int, int] = DEFAULT_AA_GRID,
    width: int = 1920,
    height: int = 1080,
    *,
    fov: float = DEFAULT_FOV,
    depth: int = MAX_DEPTH,
    rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
    callback: ProgressCallback | None = None,
) -> npt.NDArray[np.float32]:
    """Render a scene to a linear, unclamped radiance image.

    Takes the same arguments as render().

    Returns:
        float32 array of shape (height, width, 3).
    """
    _validate(antialiasing_grid, width, height, fov, depth, rows_per_batch)
    radiance = _allocate(width, height, np.float32)
    _render_into(radiance, scene, antialiasing_grid, fov, depth, rows_per_batch, callback)
    return radiance


def render(
    scene: Scene,
    antialiasing_grid: int | tuple[int, int] = DEFAULT_AA_GRID,
    width: int = 1920,
    height: int = 1080,
    *,
    fov: float = DEFAULT_FOV,
    depth: int = MAX_DEPTH,
    rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
    callback: ProgressCallback | None = None,
) -> npt.NDArray[np.uint8]:
    """Render a scene to an 8-bit framebuffer.

    Taichi must be initialized (ti.init) before calling this.

    Args:
        scene: The scene to render. It is read, never modified.
        antialiasing_grid: Sub-pixel grid, an int for a square grid or
            (columns, rows). 1 disables anti-aliasing (one sample through
            the pixel center).
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Horizontal field of view in radians.
        depth: Reflection budget. 0 shades the primary hit and samples the
            sky in the reflected direction.
        rows_per_batch: Rows rendered per kernel launch.
        callback: Optional function called after each band with
            (rows_done, height).

    Returns:
        uint8 array of shape (height, width, 3), rows top to bottom.

    Raises:
        ValueError: If the configuration is invalid.
        FramebufferAllocationError: If the output buffers cannot be
            allocated. Nothing is rendered in that case.
    """
    _validate(antialiasing_grid, width, height, fov, depth, rows_per_batch)
    framebuffer = _allocate(width, height, np.uint8)
    radiance = _allocate(width, height, np.float32)
    _render_into(radiance, scene, antialiasing_grid, fov, depth, rows_per_batch, callback)
    return to_pixels(radiance, out=framebuffer)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class RenderSettings:
    """Render configuration.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Horizontal field of view in radians.
        aa_grid: Anti-aliasing grid, an int for a square grid or
            (columns, rows).
        depth: Reflection recursion depth.
        rows_per_batch: Rows rendered between progress updates.
    """

    width: int = 1920
    height: int = 1080
    fov: float = DEFAULT_FOV
    aa_grid: int | tuple[int, int] = DEFAULT_AA_GRID
    depth: int = MAX_DEPTH
    rows_per_batch: int = DEFAULT_ROWS_PER_BATCH

    @property
    def samples_per_pixel(self) -> int:
        """Number of primary rays averaged per pixel."""
        columns, rows = grid_shape(self.aa_grid)
        return columns * rows

    def render(
        self,
        scene: Scene,
        callback: ProgressCallback | None = None,
    ) -> npt.NDArray[np.uint8]:
        """Render a scene with these settings. See render()."""
        return render(
            scene,
            self.aa_grid,
            self.width,
            self.height,
            fov=self.fov,
            depth=self.depth,
            rows_per_batch=self.rows_per_batch,
            callback=callback,
        )
