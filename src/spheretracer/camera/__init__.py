"""Camera module for primary ray generation.

Components:
    pinhole: Screen mapping and the fixed anti-aliasing sample grid

Sub-pixel coordinates run left to right and top to bottom; the camera looks
down +z with +y up.
"""

from .pinhole import (
    DEFAULT_AA_GRID,
    DEFAULT_FOV,
    anti_aliasing_grid,
    camera_ray,
    grid_shape,
    primary_direction,
    screen_direction,
)

__all__ = [
    "DEFAULT_AA_GRID",
    "DEFAULT_FOV",
    "anti_aliasing_grid",
    "camera_ray",
    "grid_shape",
    "primary_direction",
    "screen_direction",
]
