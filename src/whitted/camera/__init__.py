"""Camera module for primary ray generation.

Components:
    pinhole: Fixed pinhole camera at the origin looking down -z

Ray generation uses pixel coordinates:
    i in [0, W): left to right across the image
    j in [0, H): top to bottom across the image

Exactly one ray is generated through the center of each pixel.
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    get_ray,
    is_camera_configured,
    primary_direction,
    reset_camera,
    setup_camera,
    validate_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "reset_camera",
    "is_camera_configured",
    "validate_camera",
    "get_ray",
    "primary_direction",
    "get_camera_info",
]
