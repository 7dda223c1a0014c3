"""Geometry module for shape primitives.

This module provides the two primitive kinds of the scene:

Components:
    sphere: Sphere primitive with closest-approach ray-sphere intersection
    plane: Bounded checkerboard ground plane with procedural coloring

Intersection routines are Taichi functions (@ti.func) and follow the pattern:
    hit, t, ... = intersect_shape(ray_origin, ray_direction, ...)

The scene is small, so no acceleration structure is used; every primitive
is tested for every ray.
"""

from .plane import (
    CHECKER_COLOR_EVEN,
    CHECKER_COLOR_ODD,
    PLANE_EPSILON,
    PLANE_NORMAL,
    PLANE_Y,
    checker_color,
    checker_index,
    intersect_checkerboard,
)
from .sphere import Sphere, make_sphere, ray_intersect, sphere_normal

__all__ = [
    "Sphere",
    "make_sphere",
    "ray_intersect",
    "sphere_normal",
    "PLANE_Y",
    "PLANE_EPSILON",
    "PLANE_NORMAL",
    "CHECKER_COLOR_EVEN",
    "CHECKER_COLOR_ODD",
    "intersect_checkerboard",
    "checker_index",
    "checker_color",
]
