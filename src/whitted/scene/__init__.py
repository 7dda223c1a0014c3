"""Scene module for scene storage and ray-scene queries.

This module handles scene representation and intersection:

Components:
    intersection: Sphere storage and the nearest-hit resolver (spheres plus
        the checkerboard plane), with hit records carrying materials
    lights: Point light storage
    manager: SceneManager coordinating materials, spheres and lights, with
        dict/JSON serialization
    showcase: The four-sphere, three-light demo scene

Scene data lives in preallocated Taichi fields and is read-only while
rendering.
"""

from .intersection import (
    FAR_CUTOFF,
    MAX_SPHERES,
    HitInfo,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_ray,
    scene_intersect,
)
from .lights import MAX_LIGHTS, PointLight, add_light, clear_lights, get_light, get_light_count
from .manager import LightInfo, MaterialInfo, SceneConfig, SceneManager, SphereInfo
from .showcase import SHOWCASE_LIGHTS, SHOWCASE_SPHERES, create_showcase_scene

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "HitInfo",
    "FAR_CUTOFF",
    "MAX_SPHERES",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_ray",
    "scene_intersect",
    # Lights
    "PointLight",
    "MAX_LIGHTS",
    "add_light",
    "clear_lights",
    "get_light",
    "get_light_count",
    # Manager module
    "SceneManager",
    "MaterialInfo",
    "SphereInfo",
    "LightInfo",
    "SceneConfig",
    # Showcase scene
    "SHOWCASE_SPHERES",
    "SHOWCASE_LIGHTS",
    "create_showcase_scene",
]
