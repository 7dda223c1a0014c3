"""Recursive Whitted-style shader and rendering kernels.

This module implements the cast-ray algorithm: find the nearest surface,
light it with every unoccluded point light (diffuse + specular), and add
the colors seen along the mirror-reflected and refracted rays, weighted by
the material's albedo:

    color = diffuse_color * diffuse * albedo[0]
          + white * specular * albedo[1]
          + cast_ray(reflected, depth + 1) * albedo[2]
          + cast_ray(refracted, depth + 1) * albedo[3]

cast_ray returns BACKGROUND_COLOR when depth exceeds MAX_DEPTH or when the
ray escapes the scene. Colors are not clamped here; clamping happens when
the image is written.

Taichi functions cannot call themselves, so the call tree is evaluated
without recursion. Every node of the tree is reached by a root-to-leaf path,
and a path is encoded as a bitmask whose bit k selects the reflected (0) or
refracted (1) child at level k. Walking all paths and adding a node's
weighted local term only on the lowest path through it visits each node
exactly once. Subtrees whose albedo weight is zero are skipped.

Key features:
    - Hard shadows (any occluder closer than the light blocks it fully)
    - Secondary ray origins biased along the normal to avoid acne
    - Total internal reflection handled by refract()'s sentinel direction

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.core.integrator import render_image, setup_render_target
    >>> from whitted.scene.showcase import create_showcase_scene
    >>> from whitted.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_showcase_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(camera.width, camera.height)
    >>> render_image()
"""

import logging
import time
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti

from whitted.camera.pinhole import get_ray, is_camera_configured
from whitted.core.ray import dot, length, normalize, offset_origin, reflect, refract, vec3
from whitted.scene.intersection import SceneHitRecord, scene_intersect
from whitted.scene.lights import get_light, num_lights

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Deepest recursion level that is still shaded; deeper rays see the background
MAX_DEPTH = 4

# Number of shaded levels in the call tree (depths 0..MAX_DEPTH)
NUM_LEVELS = MAX_DEPTH + 1

# Color returned for rays that escape the scene or exhaust the depth budget
BACKGROUND_COLOR = vec3(0.2, 0.7, 0.8)

# Specular highlights are white
SPECULAR_COLOR = vec3(1.0, 1.0, 1.0)

# =============================================================================
# Shading
# =============================================================================


@ti.func
def is_shadowed(point: vec3, normal: vec3, light_position: vec3) -> ti.i32:
    """Test whether a light is blocked as seen from a surface point.

    The shadow ray starts from the normal-biased point. Any hit closer than
    the light blocks it completely, whatever the occluder's material.

    Args:
        point: The shaded surface point.
        normal: The surface normal at the point.
        light_position: Position of the light.

    Returns:
        1 if the light is occluded, 0 otherwise.
    """
    light_dir = normalize(light_position - point)
    light_distance = length(light_position - point)
    shadow_origin = offset_origin(point, light_dir, normal)
    shadow_rec = scene_intersect(shadow_origin, light_dir)

    shadowed = 0
    if shadow_rec.hit == 1 and length(shadow_rec.point - shadow_origin) < light_distance:
        shadowed = 1
    return shadowed


@ti.func
def light_intensities(rec: SceneHitRecord, direction: vec3):
    """Accumulate diffuse and specular intensity from all visible lights.

    Args:
        rec: The hit being shaded.
        direction: Direction of the ray that produced the hit.

    Returns:
        A tuple (diffuse, specular) of summed scalar intensities.
    """
    diffuse = 0.0
    specular = 0.0
    for i in range(num_lights[None]):
        light = get_light(i)
        if is_shadowed(rec.point, rec.normal, light.position) == 0:
            light_dir = normalize(light.position - rec.point)

            lambert = dot(light_dir, rec.normal)
            if lambert > 0.0:
                diffuse += light.intensity * lambert

            highlight = dot(reflect(light_dir, rec.normal), direction)
            if highlight > 0.0:
                specular += highlight**rec.material.specular_exponent * light.intensity

    return diffuse, specular


@ti.func
def local_color(rec: SceneHitRecord, direction: vec3) -> vec3:
    """Diffuse and specular terms of a hit, weighted by albedo[0] and albedo[1]."""
    diffuse, specular = light_intensities(rec, direction)
    material = rec.material
    return (
        material.diffuse_color * diffuse * material.albedo[0]
        + SPECULAR_COLOR * specular * material.albedo[1]
    )


@ti.func
def secondary_direction(rec: SceneHitRecord, direction: vec3, refracted: ti.i32) -> vec3:
    """Normalized reflected (refracted == 0) or refracted direction at a hit."""
    new_direction = normalize(reflect(direction, rec.normal))
    if refracted == 1:
        new_direction = normalize(
            refract(direction, rec.normal, rec.material.refractive_index, 1.0)
        )
    return new_direction


@ti.func
def cast_ray(ray_origin: vec3, ray_direction: vec3, depth: ti.i32) -> vec3:
    """Trace a ray and return the color it sees.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized direction of the ray.
        depth: Recursion depth of this ray (0 for primary rays). Must be
            non-negative; callers in Python scope go through trace_ray, which
            rejects negative depths.

    Returns:
        The unclamped RGB color. BACKGROUND_COLOR if depth > MAX_DEPTH or
        the ray misses the scene.
    """
    color = vec3(0.0, 0.0, 0.0)

    # Levels left to shade below this ray; paths using higher bits are redundant
    levels = ti.max(NUM_LEVELS - depth, 0)

    for path in range(1 << NUM_LEVELS):
        if (path >> levels) == 0:
            origin = ray_origin
            direction = ray_direction
            weight = 1.0
            # Active flag for path continuation (no break inside ti.func loops)
            active = 1

            for level in range(NUM_LEVELS + 1):
                if active == 1:
                    first_visit = (path >> level) == 0

                    if depth + level > MAX_DEPTH:
                        if first_visit:
                            color += BACKGROUND_COLOR * weight
                        active = 0
                    else:
                        rec = scene_intersect(origin, direction)
                        if rec.hit == 0:
                            if first_visit:
                                color += BACKGROUND_COLOR * weight
                            active = 0
                        else:
                            if first_visit:
                                color += local_color(rec, direction) * weight

                            refracted = (path >> level) & 1
                            coefficient = rec.material.albedo[2]
                            if refracted == 1:
                                coefficient = rec.material.albedo[3]
                            weight *= coefficient

                            if weight == 0.0:
                                active = 0
                            else:
                                new_direction = secondary_direction(rec, direction, refracted)
                                origin = offset_origin(rec.point, new_direction, rec.normal)
                                direction = new_direction

    return color


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color buffer indexed [i, j] with j = 0 the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f64, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to zero."""
    _color_buffer.fill(0.0)


def release_render_target() -> None:
    """Mark the render target as not set up."""
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def _check_camera_configured() -> None:
    if not is_camera_configured():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")


def get_image() -> "ti.MatrixField":
    """Get the color buffer.

    Note: This returns the full preallocated buffer. Use get_image_dimensions()
    to determine the active region.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _color_buffer


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32):
    """Trace one primary ray per pixel into the color buffer."""
    for i, j in ti.ndrange(width, height):
        ray = get_ray(i, j, width, height)
        _color_buffer[i, j] = cast_ray(ray.origin, ray.direction, 0)


_trace_result = ti.Vector.field(3, dtype=ti.f64, shape=())


@ti.kernel
def _trace_kernel(origin: vec3, direction: vec3, depth: ti.i32):
    # Single serial iteration so the shader's loops are not the parallel ones
    for _ in range(1):
        _trace_result[None] = cast_ray(origin, direction, depth)


@ti.kernel
def _render_pixel_kernel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32):
    for _ in range(1):
        ray = get_ray(pixel_i, pixel_j, width, height)
        _trace_result[None] = cast_ray(ray.origin, ray.direction, 0)


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_ray(
    origin: Sequence[float],
    direction: Sequence[float],
    depth: int = 0,
) -> tuple[float, float, float]:
    """Trace a single ray against the current scene from Python.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Normalized ray direction as (x, y, z).
        depth: Recursion depth to start at (0 for a primary ray).

    Returns:
        Tuple of (R, G, B) color values, unclamped.

    Raises:
        ValueError: If depth is negative.
    """
    if depth < 0:
        raise ValueError(f"depth must be non-negative, got {depth}")
    _trace_kernel(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
        depth,
    )
    color = _trace_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Render a single pixel without touching the color buffer.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values, unclamped.

    Raises:
        RuntimeError: If the render target or camera has not been set up.
    """
    _check_render_target_initialized()
    _check_camera_configured()

    width, height = get_image_dimensions()
    _render_pixel_kernel(pixel_i, pixel_j, width, height)
    color = _trace_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def render_image() -> None:
    """Render every pixel of the render target.

    Raises:
        RuntimeError: If the render target or camera has not been set up.
    """
    _check_render_target_initialized()
    _check_camera_configured()

    width, height = get_image_dimensions()
    logger.info("Rendering %dx%d image", width, height)
    start = time.perf_counter()
    _render_kernel(width, height)
    ti.sync()
    logger.info("Rendered %dx%d image in %.2fs", width, height, time.perf_counter() - start)


def get_image_numpy() -> npt.NDArray[np.float64]:
    """Get the rendered image as a NumPy array.

    Returns:
        Array of shape (height, width, 3), row 0 at the top, values
        unclamped.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _color_buffer.to_numpy()

    # (width, height, 3) -> (height, width, 3)
    image = np.transpose(full_image[:width, :height, :], (1, 0, 2))
    return np.ascontiguousarray(image, dtype=np.float64)
