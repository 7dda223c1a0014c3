"""Showcase scene configuration.

This module provides a factory for the classic Whitted demo scene: four
spheres above the checkerboard, each with a different material, lit by
three white point lights.

The scene consists of:
- Ivory sphere on the left
- Glass sphere in front, partly hiding the others
- Red rubber sphere in the middle distance
- Large mirror sphere up and to the right
- Three lights, two behind the camera and one high above the scene

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.scene.showcase import create_showcase_scene
    >>> from whitted.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_showcase_scene()
    >>> setup_camera(camera)
"""

import math

from whitted.camera.pinhole import PinholeCamera
from whitted.scene.manager import SceneManager

# =============================================================================
# Showcase Constants
# =============================================================================

# Output size and field of view of the reference render
SHOWCASE_WIDTH = 1024
SHOWCASE_HEIGHT = 768
SHOWCASE_FOV = math.pi / 3.0

# (center, radius, preset name)
SHOWCASE_SPHERES: tuple[tuple[tuple[float, float, float], float, str], ...] = (
    ((-3.0, 0.0, -16.0), 2.0, "ivory"),
    ((-1.0, -1.5, -12.0), 2.0, "glass"),
    ((1.5, -0.5, -18.0), 3.0, "red_rubber"),
    ((7.0, 5.0, -18.0), 4.0, "mirror"),
)

# (position, intensity)
SHOWCASE_LIGHTS: tuple[tuple[tuple[float, float, float], float], ...] = (
    ((-20.0, 20.0, 20.0), 1.5),
    ((30.0, 50.0, -25.0), 1.8),
    ((30.0, 20.0, 30.0), 1.7),
)


# =============================================================================
# Showcase Factory
# =============================================================================


def create_showcase_scene(
    width: int = SHOWCASE_WIDTH,
    height: int = SHOWCASE_HEIGHT,
    fov: float = SHOWCASE_FOV,
) -> tuple[SceneManager, PinholeCamera]:
    """Create the showcase scene and a matching camera.

    Clears any existing scene data. Each preset material is registered once
    and shared by every sphere using it.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in radians.

    Returns:
        Tuple of (scene, camera). The camera still has to be applied with
        setup_camera().
    """
    scene = SceneManager()

    material_ids: dict[str, int] = {}
    for center, radius, preset in SHOWCASE_SPHERES:
        if preset not in material_ids:
            material_ids[preset] = scene.add_preset_material(preset)
        scene.add_sphere(center, radius, material_ids[preset])

    for position, intensity in SHOWCASE_LIGHTS:
        scene.add_light(position, intensity)

    camera = PinholeCamera(width=width, height=height, fov=fov)
    return scene, camera
