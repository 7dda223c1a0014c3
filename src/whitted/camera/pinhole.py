"""Pinhole camera model for primary ray generation.

The camera sits at the world origin and looks down -z with +y up. For pixel
(i, j) of a W x H image and vertical field of view fov, the ray through the
pixel center has direction

    x = (2 (i + 0.5) / W - 1) * tan(fov / 2) * W / H
    y = -(2 (j + 0.5) / H - 1) * tan(fov / 2)
    z = -1

normalized. Row j = 0 is the top of the image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.camera.pinhole import PinholeCamera, setup_camera, get_ray
    >>>
    >>> camera = PinholeCamera(width=1024, height=768, fov=math.pi / 3)
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(512, 384, 1024, 768)  # Ray near the image center
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from whitted.core import vector
from whitted.core.ray import Ray, make_ray, normalize, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for the pinhole camera.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in radians (default pi / 3).
    """

    width: int = 1024
    height: int = 768
    fov: float = math.pi / 3.0

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height


def validate_camera(camera: PinholeCamera) -> None:
    """Check camera parameters.

    Raises:
        ValueError: If the image size is not positive or the field of view
            is outside (0, pi).
    """
    if camera.width <= 0 or camera.height <= 0:
        raise ValueError(f"Image size must be positive, got {camera.width}x{camera.height}")
    if not 0.0 < camera.fov < math.pi:
        raise ValueError(f"Field of view must be in (0, pi) radians, got {camera.fov}")


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())
_tan_half_fov = ti.field(dtype=ti.f64, shape=())
_camera_configured = ti.field(dtype=ti.i32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Initialize camera state from configuration.

    Must be called before rendering.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the camera parameters are invalid.
    """
    validate_camera(camera)
    _camera_origin[None] = [0.0, 0.0, 0.0]
    _tan_half_fov[None] = math.tan(camera.fov / 2.0)
    _camera_configured[None] = 1


def reset_camera() -> None:
    """Mark the camera as not configured."""
    _camera_configured[None] = 0


def is_camera_configured() -> bool:
    """Check whether setup_camera() has been called."""
    return bool(_camera_configured[None])


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through the center of a pixel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera origin with a normalized direction.
    """
    w = ti.cast(width, ti.f64)
    h = ti.cast(height, ti.f64)
    scale = _tan_half_fov[None]
    x = (2.0 * (ti.cast(pixel_i, ti.f64) + 0.5) / w - 1.0) * scale * w / h
    y = -(2.0 * (ti.cast(pixel_j, ti.f64) + 0.5) / h - 1.0) * scale
    direction = normalize(vec3(x, y, -1.0))
    return make_ray(_camera_origin[None], direction)


# =============================================================================
# Utility Functions
# =============================================================================


def primary_direction(pixel_i: int, pixel_j: int, camera: PinholeCamera) -> np.ndarray:
    """Python-side primary ray direction for a pixel.

    Same formula as get_ray(); useful for debugging and tests.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        camera: Camera configuration.

    Returns:
        The normalized direction as a float64 array.
    """
    scale = math.tan(camera.fov / 2.0)
    x = (2.0 * (pixel_i + 0.5) / camera.width - 1.0) * scale * camera.aspect_ratio
    y = -(2.0 * (pixel_j + 0.5) / camera.height - 1.0) * scale
    direction = vector.vec(x, y, -1.0)
    vector.normalize(direction)
    return direction


def get_camera_info() -> dict[str, float | tuple[float, float, float]]:
    """Get current camera state for debugging."""
    origin = _camera_origin[None]
    return {
        "origin": (float(origin[0]), float(origin[1]), float(origin[2])),
        "tan_half_fov": float(_tan_half_fov[None]),
        "configured": bool(_camera_configured[None]),
    }
