"""Tests for the pinhole camera mapping and anti-aliasing grid.

Tests cover:
- Sub-pixel offset tables for square and rectangular grids
- Grid validation
- Screen-to-direction mapping in kernels and on the host
- Orientation: row 0 is the top of the image, column 0 the left
"""

import math

import numpy as np
import pytest
import taichi as ti


class TestAntiAliasingGrid:
    """Tests for anti_aliasing_grid and grid_shape."""

    def test_default_grid_has_sixteen_samples(self):
        """Test the 4x4 default layout."""
        from spheretracer.camera.pinhole import DEFAULT_AA_GRID, anti_aliasing_grid

        offsets = anti_aliasing_grid(DEFAULT_AA_GRID)

        assert offsets.shape == (16, 2)
        assert offsets.dtype == np.float32
        np.testing.assert_allclose(offsets[0], [0.2, 0.2], atol=1e-6)
        np.testing.assert_allclose(offsets[3], [0.8, 0.2], atol=1e-6)
        np.testing.assert_allclose(offsets[4], [0.2, 0.4], atol=1e-6)
        np.testing.assert_allclose(offsets[15], [0.8, 0.8], atol=1e-6)

    def test_single_sample_is_pixel_center(self):
        """Test that a 1x1 grid samples the pixel center."""
        from spheretracer.camera.pinhole import anti_aliasing_grid

        np.testing.assert_allclose(anti_aliasing_grid(1), [[0.5, 0.5]], atol=1e-6)

    def test_rectangular_grid_is_row_major(self):
        """Test (columns, rows) ordering for a non-square grid."""
        from spheretracer.camera.pinhole import anti_aliasing_grid

        offsets = anti_aliasing_grid((2, 3))

        assert offsets.shape == (6, 2)
        expected = [[x / 3.0, y / 4.0] for y in (1, 2, 3) for x in (1, 2)]
        np.testing.assert_allclose(offsets, expected, atol=1e-6)

    @pytest.mark.parametrize("grid", [1, 2, 4, (3, 5), (8, 1)])
    def test_offsets_stay_inside_pixel(self, grid):
        """Test that no sample lands on or outside a pixel edge."""
        from spheretracer.camera.pinhole import anti_aliasing_grid

        offsets = anti_aliasing_grid(grid)

        assert np.all(offsets > 0.0)
        assert np.all(offsets < 1.0)

    @pytest.mark.parametrize("grid", [0, -1, (0, 4), (4, 0), (-2, -2)])
    def test_invalid_grid_raises(self, grid):
        """Test that empty grids are rejected."""
        from spheretracer.camera.pinhole import anti_aliasing_grid, grid_shape

        with pytest.raises(ValueError):
            grid_shape(grid)
        with pytest.raises(ValueError):
            anti_aliasing_grid(grid)

    def test_grid_shape_accepts_int_and_pair(self):
        """Test normalization to (columns, rows)."""
        from spheretracer.camera.pinhole import grid_shape

        assert grid_shape(3) == (3, 3)
        assert grid_shape((2, 5)) == (2, 5)
        assert grid_shape([4, 4]) == (4, 4)

    def test_grid_shape_accepts_numpy_integers(self):
        """Test that NumPy integer scalars count as square grid sizes."""
        from spheretracer.camera.pinhole import grid_shape

        assert grid_shape(np.int64(3)) == (3, 3)
        assert grid_shape(np.int32(1)) == (1, 1)
        assert grid_shape((np.int64(2), np.int64(5))) == (2, 5)


class TestPrimaryDirection:
    """Tests for the host-side screen mapping."""

    def test_image_center_looks_down_z(self):
        """Test that the center of the image maps to +z."""
        from spheretracer.camera.pinhole import primary_direction

        d = primary_direction(320.0, 180.0, 640, 360)

        np.testing.assert_allclose(d, [0.0, 0.0, 1.0], atol=1e-12)

    def test_left_edge_spans_half_fov(self):
        """Test that the horizontal field of view is edge to edge."""
        from spheretracer.camera.pinhole import primary_direction

        fov = math.radians(60.0)
        d = primary_direction(0.0, 50.0, 200, 100, fov)

        assert math.atan2(-d[0], d[2]) == pytest.approx(fov / 2.0)
        assert d[1] == pytest.approx(0.0)

    def test_vertical_extent_follows_aspect_ratio(self):
        """Test that the top edge is at tan(fov / 2) * h / w."""
        from spheretracer.camera.pinhole import primary_direction

        fov = math.pi / 4.0
        d = primary_direction(100.0, 0.0, 200, 100, fov)

        assert d[1] / d[2] == pytest.approx(math.tan(fov / 2.0) * 0.5)

    def test_row_zero_is_top_and_column_zero_is_left(self):
        """Test image orientation."""
        from spheretracer.camera.pinhole import primary_direction

        top_left = primary_direction(0.5, 0.5, 16, 16)
        bottom_right = primary_direction(15.5, 15.5, 16, 16)

        assert top_left[0] < 0.0 and top_left[1] > 0.0
        assert bottom_right[0] > 0.0 and bottom_right[1] < 0.0

    def test_unit_length(self):
        """Test that directions are normalized."""
        from spheretracer.camera.pinhole import primary_direction

        for sx, sy in [(0.0, 0.0), (7.3, 1.1), (31.9, 17.5)]:
            assert np.linalg.norm(primary_direction(sx, sy, 32, 18)) == pytest.approx(1.0)


class TestScreenDirection:
    """Tests for the kernel-side screen mapping."""

    @pytest.mark.parametrize(
        "sx,sy,width,height",
        [
            (0.5, 0.5, 4, 4),
            (2.0, 2.0, 4, 4),
            (13.2, 3.7, 64, 36),
            (1919.9, 1079.9, 1920, 1080),
        ],
    )
    def test_matches_host_mapping(self, sx, sy, width, height):
        """Test screen_direction against primary_direction."""
        from spheretracer.camera.pinhole import DEFAULT_FOV, primary_direction, screen_direction

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(x: ti.f32, y: ti.f32, w: ti.i32, h: ti.i32, t: ti.f32):
            result[None] = screen_direction(x, y, w, h, t)

        test_kernel(sx, sy, width, height, math.tan(DEFAULT_FOV / 2.0))

        np.testing.assert_allclose(
            result[None].to_numpy(),
            primary_direction(sx, sy, width, height, DEFAULT_FOV),
            atol=1e-5,
        )

    def test_camera_ray_starts_at_camera(self):
        """Test that camera_ray pairs the camera position with the screen direction."""
        from spheretracer.camera.pinhole import DEFAULT_FOV, camera_ray, primary_direction, vec3

        origin = ti.field(dtype=ti.math.vec3, shape=())
        direction = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(c: vec3, t: ti.f32):
            ray = camera_ray(c, 3.25, 1.75, 8, 4, t)
            origin[None] = ray.origin
            direction[None] = ray.direction

        test_kernel(vec3(1.0, 2.0, -3.0), math.tan(DEFAULT_FOV / 2.0))

        np.testing.assert_allclose(origin[None].to_numpy(), [1.0, 2.0, -3.0])
        np.testing.assert_allclose(
            direction[None].to_numpy(),
            primary_direction(3.25, 1.75, 8, 4, DEFAULT_FOV),
            atol=1e-5,
        )
