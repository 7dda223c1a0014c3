"""Bounded checkerboard ground plane.

The ground is the horizontal plane y = PLANE_Y, clipped to the tile region
|x| < PLANE_HALF_WIDTH and PLANE_Z_FAR < z < PLANE_Z_NEAR. It has no stored
material: its diffuse color is chosen procedurally from the hit point, in
2-unit tiles, and the rest of its material is the default pure diffuse one.

Rays nearly parallel to the plane (|direction.y| <= PLANE_EPSILON) are not
tested, which keeps the division by direction.y well conditioned.
"""

import taichi as ti

from whitted.core.ray import vec3

# Plane placement and extent
PLANE_Y = -4.0
PLANE_HALF_WIDTH = 10.0
PLANE_Z_NEAR = -10.0
PLANE_Z_FAR = -30.0

# Minimum |direction.y| for a ray to be tested against the plane
PLANE_EPSILON = 1e-3

# Upward plane normal
PLANE_NORMAL = vec3(0.0, 1.0, 0.0)

# Checker tile colors (even and odd tile parity)
CHECKER_COLOR_EVEN = vec3(0.3, 0.3, 0.3)
CHECKER_COLOR_ODD = vec3(0.3, 0.2, 0.1)

# Shifts x before flooring so tile indices stay positive over the region
_CHECKER_X_OFFSET = 1000.0


@ti.func
def intersect_checkerboard(ray_origin: vec3, ray_direction: vec3):
    """Test a ray against the bounded checkerboard plane.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized direction of the ray.

    Returns:
        A tuple (hit, t, point) where hit is 1 if the ray crosses the plane
        in front of the origin inside the tile region, t is the distance to
        the crossing and point is the crossing point.
    """
    hit = 0
    t = 0.0
    point = vec3(0.0, 0.0, 0.0)

    if ti.abs(ray_direction.y) > PLANE_EPSILON:
        t = -(ray_origin.y - PLANE_Y) / ray_direction.y
        point = ray_origin + ray_direction * t
        if (
            t > 0.0
            and ti.abs(point.x) < PLANE_HALF_WIDTH
            and point.z < PLANE_Z_NEAR
            and point.z > PLANE_Z_FAR
        ):
            hit = 1

    return hit, t, point


@ti.func
def checker_index(point: vec3) -> ti.i32:
    """Tile parity sum floor(0.5 x + 1000) + floor(0.5 z) at a point."""
    ix = ti.cast(ti.floor(0.5 * point.x + _CHECKER_X_OFFSET), ti.i32)
    iz = ti.cast(ti.floor(0.5 * point.z), ti.i32)
    return ix + iz


@ti.func
def checker_color(point: vec3) -> vec3:
    """Procedural diffuse color of the plane at a point.

    Even tile parity gives light gray, odd parity gives brown. The pattern
    repeats every 4 units in x and in z.
    """
    color = CHECKER_COLOR_EVEN
    if (checker_index(point) & 1) == 1:
        color = CHECKER_COLOR_ODD
    return color
