"""Ray data structure and vector utilities for Whitted ray tracing.

This module provides the Ray dataclass and the vector algebra used by the
intersection and shading code. All operations are Taichi functions and run
inside kernels in double precision.

Vector conventions:
    - vec3 is a 3-component f64 vector (points, directions and RGB colors)
    - vec4 is a 4-component f64 vector (material albedo weights)
    - normalize() divides by the length without guarding zero vectors; a zero
      vector produces NaN components which make every later distance test fail

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> origin = vec3(0.0, 0.0, 0.0)
    >>> direction = vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Double precision vector types
vec3 = ti.types.vector(3, ti.f64)
vec4 = ti.types.vector(4, ti.f64)

# Offset applied along the normal to secondary ray origins
EPSILON = 1e-3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Expected to be
            normalized by the caller; this is not enforced.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    """Component-wise sum a + b."""
    return a + b


@ti.func
def sub(a: vec3, b: vec3) -> vec3:
    """Component-wise difference a - b."""
    return a - b


@ti.func
def scale(v: vec3, s: ti.f64) -> vec3:
    """Multiply a vector by a scalar."""
    return v * s


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product of two vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        The dot product a . b.
    """
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the right-handed cross product a x b."""
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def length(v: vec3) -> ti.f64:
    """Compute the Euclidean length (norm) of a vector."""
    return ti.sqrt(dot(v, v))


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Return v scaled to unit length.

    A zero-length input yields NaN components. The NaNs are left to
    propagate: every comparison against them is false, so a ray with a NaN
    direction misses everything.

    Args:
        v: The input vector.

    Returns:
        v / |v|.
    """
    return v / length(v)


# =============================================================================
# Reflection and Refraction
# =============================================================================


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes incident - 2 * (incident . normal) * normal. Reflection about a
    unit normal is an involution: reflecting twice returns the input.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - normal * 2.0 * dot(incident, normal)


@ti.func
def refract(incident: vec3, normal: vec3, eta_t: ti.f64, eta_i: ti.f64) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    The normal is assumed to point to the side the ray arrives from. When the
    ray is actually leaving the medium (cos_i < 0) the normal is flipped and
    the two refractive indices are swapped, so callers can always pass the
    outward normal and (material_index, 1.0).

    On total internal reflection the sentinel direction (1, 0, 0) is
    returned. It is unit length, so normalizing it downstream never produces
    NaNs.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The outward surface normal (should be normalized).
        eta_t: Refractive index on the far side of the surface.
        eta_i: Refractive index on the incident side of the surface.

    Returns:
        The refracted direction (not normalized), or (1, 0, 0) on total
        internal reflection.
    """
    cos_i = -tm.clamp(dot(incident, normal), -1.0, 1.0)
    n = normal
    n_i = eta_i
    n_t = eta_t
    if cos_i < 0.0:
        # Ray is inside the object: swap sides
        cos_i = -cos_i
        n = -normal
        n_i = eta_t
        n_t = eta_i

    eta = n_i / n_t
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)
    result = vec3(1.0, 0.0, 0.0)
    if k >= 0.0:
        result = incident * eta + n * (eta * cos_i - ti.sqrt(k))
    return result


@ti.func
def offset_origin(point: vec3, direction: vec3, normal: vec3) -> vec3:
    """Offset a secondary ray origin to avoid self-intersection.

    Moves the point EPSILON along the normal, onto the side of the surface
    the new ray travels into (below the surface for refraction and for
    reflections computed from the inside).

    Args:
        point: The intersection point.
        direction: The direction of the secondary ray.
        normal: The surface normal at the point.

    Returns:
        The biased origin.
    """
    result = point + normal * EPSILON
    if dot(direction, normal) < 0.0:
        result = point - normal * EPSILON
    return result
