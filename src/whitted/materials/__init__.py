"""Materials module.

This module implements the surface model used by the Whitted shader:

Components:
    phong: Material dataclass (diffuse color, four albedo weights,
        specular exponent, refractive index) and the material registry
    presets: Named materials (ivory, red rubber, mirror, glass)

The shader reads materials by index from Taichi fields; the checkerboard
plane synthesizes its material procedurally during intersection.
"""

from .phong import (
    MAX_MATERIALS,
    Material,
    add_material,
    clear_materials,
    default_material,
    get_material,
    get_material_count,
    validate_material,
)
from .presets import GLASS, IVORY, MIRROR, PRESETS, RED_RUBBER, MaterialPreset, get_preset

__all__ = [
    # Material model
    "Material",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "default_material",
    "get_material",
    "get_material_count",
    "validate_material",
    # Presets
    "MaterialPreset",
    "IVORY",
    "RED_RUBBER",
    "MIRROR",
    "GLASS",
    "PRESETS",
    "get_preset",
]
