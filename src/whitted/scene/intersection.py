"""Scene-level intersection resolver.

This module stores the scene's spheres in Taichi fields and resolves the
nearest hit of a ray against all spheres and the checkerboard plane, with
the hit surface's material attached.

Resolution rules:
    - Spheres are tested in insertion order; a later sphere replaces the
      current best only when it is strictly closer.
    - The plane is accepted only when strictly closer than the best sphere.
    - A hit is reported only when its distance is below FAR_CUTOFF.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.materials.phong import add_material
    >>> from whitted.scene.intersection import add_sphere, clear_scene, intersect_ray
    >>> clear_scene()
    >>> mat = add_material((0.4, 0.4, 0.3))
    >>> add_sphere((0.0, 0.0, -5.0), 2.0, material_id=mat)
    >>> hit = intersect_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
    >>> hit.point
    (0.0, 0.0, -3.0)
"""

from collections.abc import Sequence
from dataclasses import dataclass

import taichi as ti

from whitted.core.ray import vec3
from whitted.geometry.plane import PLANE_NORMAL, checker_color, intersect_checkerboard
from whitted.geometry.sphere import Sphere, ray_intersect, sphere_normal
from whitted.materials.phong import Material, default_material, get_material, num_materials


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with the hit surface's material.

    Attributes:
        hit: Whether the ray hit anything (1 if hit, 0 if miss).
        t: Distance along the ray to the hit. Only valid if hit == 1.
        point: The hit point. Only valid if hit == 1.
        normal: Unit surface normal at the hit, outward from the sphere or
            (0, 1, 0) for the plane. Only valid if hit == 1.
        material: Material of the hit surface. The default material on a miss.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    material: Material


# Hits at or beyond this distance count as misses
FAR_CUTOFF = 1000.0

# Initial "nothing hit yet" distance
NO_HIT_DISTANCE = 1.0e300

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres from the scene.

    Resets the sphere count to zero. The actual field data is not cleared
    but will be overwritten when new spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(center: Sequence[float], radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere as (x, y, z).
        radius: The radius of the sphere (must be positive).
        material_id: Index of a registered material.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
        ValueError: If the radius is not positive or the material is unknown.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    if material_id < 0 or material_id >= num_materials[None]:
        raise ValueError(f"Invalid material_id: {material_id}")

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [float(center[0]), float(center[1]), float(center[2])]
    sphere_radii[idx] = float(radius)
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material=default_material(),
    )


@ti.func
def scene_intersect(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest surface hit by a ray.

    Tests every sphere, then the checkerboard plane, and attaches the
    material of the winning surface. The plane's material is the default
    material with its diffuse color taken from the checker pattern.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized direction of the ray.

    Returns:
        A SceneHitRecord for the nearest hit closer than FAR_CUTOFF, or a
        miss record.
    """
    result = _make_miss_record()

    spheres_dist = NO_HIT_DISTANCE
    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        hit, t = ray_intersect(ray_origin, ray_direction, sphere)
        if hit == 1 and t < spheres_dist:
            spheres_dist = t
            point = ray_origin + ray_direction * t
            result = SceneHitRecord(
                hit=1,
                t=t,
                point=point,
                normal=sphere_normal(sphere, point),
                material=get_material(sphere_material_ids[i]),
            )

    checkerboard_dist = NO_HIT_DISTANCE
    plane_hit, plane_t, plane_point = intersect_checkerboard(ray_origin, ray_direction)
    if plane_hit == 1 and plane_t < spheres_dist:
        checkerboard_dist = plane_t
        material = default_material()
        material.diffuse_color = checker_color(plane_point)
        result = SceneHitRecord(
            hit=1,
            t=plane_t,
            point=plane_point,
            normal=PLANE_NORMAL,
            material=material,
        )

    if not (ti.min(spheres_dist, checkerboard_dist) < FAR_CUTOFF):
        result = _make_miss_record()

    return result


# =============================================================================
# Python-scope queries
# =============================================================================


@dataclass
class HitInfo:
    """Python-side copy of a SceneHitRecord for a hit.

    Attributes:
        t: Distance along the ray.
        point: Hit point.
        normal: Unit surface normal.
        diffuse_color: Material diffuse color.
        albedo: Material albedo weights.
        specular_exponent: Material specular exponent.
        refractive_index: Material refractive index.
    """

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    diffuse_color: tuple[float, float, float]
    albedo: tuple[float, float, float, float]
    specular_exponent: float
    refractive_index: float


_query_hit = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=ti.f64, shape=())
_query_point = ti.Vector.field(3, dtype=ti.f64, shape=())
_query_normal = ti.Vector.field(3, dtype=ti.f64, shape=())
_query_diffuse = ti.Vector.field(3, dtype=ti.f64, shape=())
_query_albedo = ti.Vector.field(4, dtype=ti.f64, shape=())
_query_specular = ti.field(dtype=ti.f64, shape=())
_query_ior = ti.field(dtype=ti.f64, shape=())


@ti.kernel
def _intersect_kernel(origin: vec3, direction: vec3):
    # Single serial iteration so the sphere loop is not the parallel one
    for _ in range(1):
        rec = scene_intersect(origin, direction)
        _query_hit[None] = rec.hit
        _query_t[None] = rec.t
        _query_point[None] = rec.point
        _query_normal[None] = rec.normal
        _query_diffuse[None] = rec.material.diffuse_color
        _query_albedo[None] = rec.material.albedo
        _query_specular[None] = rec.material.specular_exponent
        _query_ior[None] = rec.material.refractive_index


def _as_tuple(v) -> tuple:
    return tuple(float(c) for c in v.to_numpy())


def intersect_ray(origin: Sequence[float], direction: Sequence[float]) -> HitInfo | None:
    """Resolve the nearest hit of a single ray from Python.

    Useful for tests and debugging; rendering calls scene_intersect directly
    inside kernels.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Normalized ray direction as (x, y, z).

    Returns:
        A HitInfo, or None if the ray misses the scene.
    """
    _intersect_kernel(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
    )
    if _query_hit[None] == 0:
        return None
    return HitInfo(
        t=float(_query_t[None]),
        point=_as_tuple(_query_point[None]),
        normal=_as_tuple(_query_normal[None]),
        diffuse_color=_as_tuple(_query_diffuse[None]),
        albedo=_as_tuple(_query_albedo[None]),
        specular_exponent=float(_query_specular[None]),
        refractive_index=float(_query_ior[None]),
    )
