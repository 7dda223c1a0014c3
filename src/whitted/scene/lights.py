"""Point light storage.

Lights are stored in Taichi fields, in insertion order, and read by the
shader when computing direct illumination. A light has a position and a
scalar intensity; it is white and has no falloff with distance.
"""

from collections.abc import Sequence

import taichi as ti

from whitted.core.ray import vec3


@ti.dataclass
class PointLight:
    """An omnidirectional point light.

    Attributes:
        position: World-space position of the light.
        intensity: Scalar intensity (non-negative).
    """

    position: vec3
    intensity: ti.f64


# Maximum number of lights in the scene
MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f64, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights from the scene."""
    num_lights[None] = 0


def add_light(position: Sequence[float], intensity: float) -> int:
    """Add a point light to the scene.

    Args:
        position: The light position as (x, y, z).
        intensity: The light intensity (must be non-negative).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
        ValueError: If the intensity is negative.
    """
    if intensity < 0.0:
        raise ValueError(f"Light intensity = {intensity} is negative.")

    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = [float(position[0]), float(position[1]), float(position[2])]
    light_intensities[idx] = float(intensity)
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def get_light(light_idx: ti.i32) -> PointLight:
    """Get a light by index."""
    return PointLight(
        position=light_positions[light_idx],
        intensity=light_intensities[light_idx],
    )
