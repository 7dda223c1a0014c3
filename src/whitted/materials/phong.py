"""Phong-style material model with a four-weight albedo mixture.

Every surface is described by a single material type. The final color of a
hit is a weighted sum of four terms:

    color = diffuse_color * diffuse_intensity * albedo[0]
          + white * specular_intensity * albedo[1]
          + reflect_color * albedo[2]
          + refract_color * albedo[3]

The weights are plain constants. They are not required to sum to one (a
mirror may use a specular weight of 10).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.materials.phong import add_material
    >>> glass = add_material(
    ...     diffuse_color=(0.6, 0.7, 0.8),
    ...     albedo=(0.0, 0.5, 0.1, 0.8),
    ...     specular_exponent=125.0,
    ...     refractive_index=1.5,
    ... )
"""

import math
from collections.abc import Sequence

import taichi as ti

from whitted.core.ray import vec3, vec4


@ti.dataclass
class Material:
    """Optical properties of a surface.

    Attributes:
        diffuse_color: Base RGB color used by the diffuse term.
        albedo: Weights (k_diffuse, k_specular, k_reflect, k_refract).
        specular_exponent: Phong shininess exponent.
        refractive_index: Index of refraction (1.0 for opaque surfaces).
    """

    diffuse_color: vec3
    albedo: vec4
    specular_exponent: ti.f64
    refractive_index: ti.f64


@ti.func
def default_material() -> Material:
    """Pure diffuse black material used before a real hit is resolved."""
    return Material(
        diffuse_color=vec3(0.0, 0.0, 0.0),
        albedo=vec4(1.0, 0.0, 0.0, 0.0),
        specular_exponent=0.0,
        refractive_index=1.0,
    )


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

material_diffuse_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(4, dtype=ti.f64, shape=MAX_MATERIALS)
material_specular_exponents = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_refractive_indices = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def validate_material(
    diffuse_color: Sequence[float],
    albedo: Sequence[float],
    specular_exponent: float,
    refractive_index: float,
) -> None:
    """Check material parameters.

    Raises:
        ValueError: If diffuse_color does not have 3 non-negative components,
            albedo does not have 4 non-negative weights, specular_exponent is
            negative, or refractive_index is not positive. NaN is rejected
            everywhere.
    """
    if len(diffuse_color) != 3:
        raise ValueError(f"diffuse_color must have 3 components, got {len(diffuse_color)}")
    for i, component in enumerate(diffuse_color):
        if math.isnan(component):
            raise ValueError(f"Diffuse color component {i} is NaN.")
        if component < 0.0:
            raise ValueError(f"Diffuse color component {i} = {component} is negative.")

    if len(albedo) != 4:
        raise ValueError(f"albedo must have 4 weights, got {len(albedo)}")
    for i, weight in enumerate(albedo):
        if math.isnan(weight):
            raise ValueError(f"Albedo weight {i} is NaN.")
        if weight < 0.0:
            raise ValueError(f"Albedo weight {i} = {weight} is negative.")

    if math.isnan(specular_exponent):
        raise ValueError("Specular exponent is NaN.")
    if specular_exponent < 0.0:
        raise ValueError(f"Specular exponent = {specular_exponent} is negative.")
    # NaN fails the comparison below and is rejected with it
    if not refractive_index > 0.0:
        raise ValueError(f"Refractive index must be positive, got {refractive_index}")


def add_material(
    diffuse_color: Sequence[float],
    albedo: Sequence[float] = (1.0, 0.0, 0.0, 0.0),
    specular_exponent: float = 0.0,
    refractive_index: float = 1.0,
) -> int:
    """Add a material to the material registry.

    Args:
        diffuse_color: Base RGB color as (R, G, B).
        albedo: Weights (diffuse, specular, reflect, refract).
        specular_exponent: Phong shininess exponent.
        refractive_index: Index of refraction.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any parameter is invalid (see validate_material).
    """
    validate_material(diffuse_color, albedo, specular_exponent, refractive_index)

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_diffuse_colors[idx] = [float(c) for c in diffuse_color]
    material_albedos[idx] = [float(w) for w in albedo]
    material_specular_exponents[idx] = float(specular_exponent)
    material_refractive_indices[idx] = float(refractive_index)
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material(material_idx: ti.i32) -> Material:
    """Get a material by index.

    Args:
        material_idx: The index of the material in the registry.

    Returns:
        The Material stored at that index.
    """
    return Material(
        diffuse_color=material_diffuse_colors[material_idx],
        albedo=material_albedos[material_idx],
        specular_exponent=material_specular_exponents[material_idx],
        refractive_index=material_refractive_indices[material_idx],
    )
