"""Unit tests for the pinhole camera module.

Tests cover:
- Camera configuration and validation
- Primary ray generation (center, corners, row orientation)
- Agreement between the kernel and Python-side direction formulas
"""

import math

import numpy as np
import pytest
import taichi as ti


def _kernel_ray(pixel_i, pixel_j, width, height):
    """Generate a primary ray with get_ray and return (origin, direction)."""
    from whitted.camera.pinhole import get_ray

    origin = ti.Vector.field(3, dtype=ti.f64, shape=())
    direction = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(i: ti.i32, j: ti.i32, w: ti.i32, h: ti.i32):
        ray = get_ray(i, j, w, h)
        origin[None] = ray.origin
        direction[None] = ray.direction

    test_kernel(pixel_i, pixel_j, width, height)
    return np.array(origin[None].to_numpy()), np.array(direction[None].to_numpy())


class TestCameraSetup:
    """Tests for camera configuration."""

    def test_default_camera(self):
        """Test defaults match the 1024x768, 60 degree showcase view."""
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera()
        assert camera.width == 1024
        assert camera.height == 768
        assert camera.fov == pytest.approx(math.pi / 3.0)
        assert camera.aspect_ratio == pytest.approx(4.0 / 3.0)

    def test_setup_stores_state(self):
        """Test setup_camera records the origin and tan(fov / 2)."""
        from whitted.camera.pinhole import (
            PinholeCamera,
            get_camera_info,
            is_camera_configured,
            setup_camera,
        )

        assert not is_camera_configured()
        setup_camera(PinholeCamera(width=8, height=6, fov=math.pi / 2.0))

        info = get_camera_info()
        assert info["origin"] == (0.0, 0.0, 0.0)
        assert info["tan_half_fov"] == pytest.approx(1.0)
        assert info["configured"] is True
        assert is_camera_configured()

    def test_reset_camera(self):
        """Test reset_camera clears the configured flag."""
        from whitted.camera.pinhole import PinholeCamera, is_camera_configured, reset_camera, setup_camera

        setup_camera(PinholeCamera())
        reset_camera()
        assert not is_camera_configured()

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"width": 0}, "positive"),
            ({"height": -2}, "positive"),
            ({"fov": 0.0}, "Field of view"),
            ({"fov": math.pi}, "Field of view"),
        ],
    )
    def test_invalid_camera_raises(self, kwargs, message):
        """Test invalid sizes and fields of view are rejected."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        with pytest.raises(ValueError, match=message):
            setup_camera(PinholeCamera(**kwargs))


class TestRayGeneration:
    """Tests for get_ray and primary_direction."""

    def test_center_pixel_looks_down_negative_z(self):
        """Test the center of an odd-sized image maps to (0, 0, -1)."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(width=3, height=3))
        origin, direction = _kernel_ray(1, 1, 3, 3)
        np.testing.assert_allclose(origin, [0.0, 0.0, 0.0])
        np.testing.assert_allclose(direction, [0.0, 0.0, -1.0], atol=1e-12)

    def test_direction_is_normalized(self):
        """Test generated directions are unit length."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(width=64, height=48))
        for i, j in [(0, 0), (63, 47), (10, 30)]:
            _, direction = _kernel_ray(i, j, 64, 48)
            assert np.linalg.norm(direction) == pytest.approx(1.0)

    def test_top_row_points_up_left_column_points_left(self):
        """Test row 0 is the top of the image and column 0 the left."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(width=64, height=48))
        _, top_left = _kernel_ray(0, 0, 64, 48)
        _, bottom_right = _kernel_ray(63, 47, 64, 48)
        assert top_left[0] < 0.0 and top_left[1] > 0.0
        assert bottom_right[0] > 0.0 and bottom_right[1] < 0.0

    def test_corner_direction_formula(self):
        """Test the top-left pixel against the closed-form direction."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        width, height, fov = 4, 2, math.pi / 2.0
        setup_camera(PinholeCamera(width=width, height=height, fov=fov))
        _, direction = _kernel_ray(0, 0, width, height)

        # tan(45 deg) = 1; x = (2 * 0.5 / 4 - 1) * 2, y = -(2 * 0.5 / 2 - 1)
        expected = np.array([-1.5, 0.5, -1.0])
        expected /= np.linalg.norm(expected)
        np.testing.assert_allclose(direction, expected, atol=1e-12)

    def test_kernel_matches_python_direction(self):
        """Test get_ray and primary_direction agree."""
        from whitted.camera.pinhole import PinholeCamera, primary_direction, setup_camera

        camera = PinholeCamera(width=32, height=24, fov=math.radians(75.0))
        setup_camera(camera)
        for i, j in [(0, 0), (5, 17), (31, 23), (16, 12)]:
            _, direction = _kernel_ray(i, j, camera.width, camera.height)
            np.testing.assert_allclose(direction, primary_direction(i, j, camera), atol=1e-12)

    def test_symmetric_pixels_mirror_in_x(self):
        """Test pixels mirrored about the vertical center mirror their x."""
        from whitted.camera.pinhole import PinholeCamera, primary_direction

        camera = PinholeCamera(width=10, height=10)
        left = primary_direction(2, 4, camera)
        right = primary_direction(7, 4, camera)
        assert left[0] == pytest.approx(-right[0])
        assert left[1] == pytest.approx(right[1])
        assert left[2] == pytest.approx(right[2])
