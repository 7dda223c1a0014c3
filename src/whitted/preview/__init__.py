"""Preview module for rendered output.

Components:
    export: Float-to-byte conversion, binary PPM (P6) and PNG writers

Example:
    >>> from whitted.preview import save_image
    >>> from whitted.core.integrator import get_image_numpy
    >>>
    >>> save_image(get_image_numpy(), "image.ppm")
"""

from whitted.preview.export import (
    DEFAULT_MAXVAL,
    encode_ppm,
    image_to_uint8,
    save_image,
    save_png,
    save_ppm,
)

__all__ = [
    "DEFAULT_MAXVAL",
    "image_to_uint8",
    "encode_ppm",
    "save_ppm",
    "save_png",
    "save_image",
]
