"""Sphere primitive with geometric ray-sphere intersection.

This module provides a Sphere dataclass and an intersection test based on
the closest-approach construction rather than the quadratic formula:

    L   = center - origin
    tca = L . direction            (distance to the closest approach)
    d2  = L . L - tca^2            (squared distance from center to the ray)
    thc = sqrt(radius^2 - d2)      (half chord length)
    t0  = tca - thc,  t1 = tca + thc

The near root t0 is preferred; if it lies behind the origin (origin inside
the sphere) the far root t1 is used instead; if both are behind, the sphere
is missed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.geometry.sphere import Sphere, ray_intersect
    >>> sphere = Sphere(center=vec3(0, 0, -5), radius=2.0)
    >>> # Use ray_intersect within a Taichi kernel
"""

import taichi as ti

from whitted.core.ray import dot, normalize, vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f64


@ti.func
def ray_intersect(ray_origin: vec3, ray_direction: vec3, sphere: Sphere):
    """Test a ray against a sphere.

    The direction is assumed normalized, so t is a distance.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized direction of the ray.
        sphere: The sphere to test.

    Returns:
        A tuple (hit, t) where hit is 1 if the sphere is intersected in
        front of the origin and t is the distance to that intersection.
        t is only meaningful when hit == 1.
    """
    hit = 0
    t = 0.0

    to_center = sphere.center - ray_origin
    tca = dot(to_center, ray_direction)
    d2 = dot(to_center, to_center) - tca * tca
    radius2 = sphere.radius * sphere.radius

    if d2 <= radius2:
        thc = ti.sqrt(radius2 - d2)
        t = tca - thc
        t1 = tca + thc
        if t < 0.0:
            t = t1
        if t >= 0.0:
            hit = 1

    return hit, t


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of a sphere at a surface point."""
    return normalize(point - sphere.center)


@ti.func
def make_sphere(center: vec3, radius: ti.f64) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
