"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and Taichi vector utilities (reflect, refract)
    vector: Python-scope NumPy mirror of the vector algebra
    integrator: Recursive Whitted shader, render target and render kernels

The integrator combines Phong-style direct lighting with hard shadows and
recursively traced reflection and refraction, terminated by a fixed depth
budget or by rays escaping the scene.

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    EPSILON,
    Ray,
    add,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    offset_origin,
    ray_at,
    reflect,
    refract,
    scale,
    sub,
    vec3,
    vec4,
)

# Note: integrator is NOT imported here to avoid circular imports.
# Import directly from whitted.core.integrator when needed.

__all__ = [
    "EPSILON",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "vec4",
    "add",
    "sub",
    "scale",
    "dot",
    "cross",
    "length",
    "length_squared",
    "normalize",
    "reflect",
    "refract",
    "offset_origin",
]
