"""Image export utilities for rendered images.

This module converts the renderer's floating-point color arrays to bytes
and writes them to disk.

Supported formats:
    - PPM (binary P6, written directly)
    - PNG (8-bit via Pillow)

Conversion from float to byte clamps every channel to [0, 1] first and then
truncates (never rounds): byte = int(maxval * clamp(c, 0, 1)). The shader
does not clamp, so bright highlights above 1.0 saturate here instead of
wrapping around.

Example:
    >>> from whitted.core.integrator import get_image_numpy
    >>> from whitted.preview.export import save_image
    >>>
    >>> image = get_image_numpy()
    >>> save_image(image, "image.ppm")
"""

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

# Default maximum channel value for 8-bit output
DEFAULT_MAXVAL = 255


def _check_image(image: npt.NDArray[np.floating]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")


def image_to_uint8(
    image: npt.NDArray[np.floating],
    maxval: int = DEFAULT_MAXVAL,
) -> npt.NDArray[np.uint8]:
    """Convert a float image to bytes.

    Args:
        image: Image array of shape (H, W, 3), nominally in [0, 1].
        maxval: Maximum channel value (1..255).

    Returns:
        Array of shape (H, W, 3) with dtype uint8, int(maxval * clamp(c, 0, 1))
        per channel. NaN channels become 0.

    Raises:
        ValueError: If the image shape or maxval is invalid.
    """
    _check_image(image)
    if not 1 <= maxval <= 255:
        raise ValueError(f"maxval must be in 1..255, got {maxval}")

    clamped = np.clip(np.nan_to_num(image.astype(np.float64), nan=0.0), 0.0, 1.0)
    # astype truncates toward zero
    return (clamped * maxval).astype(np.uint8)


def encode_ppm(
    image: npt.NDArray[np.floating],
    maxval: int = DEFAULT_MAXVAL,
) -> bytes:
    """Encode an image as binary PPM (P6).

    The header is "P6\\n{W} {H}\\n{maxval}\\n", followed by W * H RGB byte
    triples in row-major order, top row first.

    Args:
        image: Image array of shape (H, W, 3).
        maxval: Maximum channel value (1..255).

    Returns:
        The encoded file contents.
    """
    pixels = image_to_uint8(image, maxval)
    height, width = pixels.shape[:2]
    header = f"P6\n{width} {height}\n{maxval}\n".encode("ascii")
    return header + pixels.tobytes()


def save_ppm(
    image: npt.NDArray[np.floating],
    filepath: str | Path,
    maxval: int = DEFAULT_MAXVAL,
) -> None:
    """Save an image as a binary PPM (P6) file.

    Args:
        image: Image array of shape (H, W, 3).
        filepath: Output file path.
        maxval: Maximum channel value (1..255).
    """
    Path(filepath).write_bytes(encode_ppm(image, maxval))
    logger.info("Wrote %s", filepath)


def save_png(
    image: npt.NDArray[np.floating],
    filepath: str | Path,
) -> None:
    """Save an image as an 8-bit PNG file using Pillow.

    Uses the same clamp-and-truncate conversion as the PPM writer.

    Args:
        image: Image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
    """
    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(filepath)
    logger.info("Wrote %s", filepath)


def save_image(
    image: npt.NDArray[np.floating],
    filepath: str | Path,
) -> None:
    """Save an image, choosing the format from the file extension.

    Args:
        image: Image array of shape (H, W, 3).
        filepath: Output path ending in .ppm or .png.

    Raises:
        ValueError: If the extension is not supported.
    """
    suffix = Path(filepath).suffix.lower()
    if suffix == ".ppm":
        save_ppm(image, filepath)
    elif suffix == ".png":
        save_png(image, filepath)
    else:
        raise ValueError(f"Unsupported image format: {suffix!r} (use .ppm or .png)")
