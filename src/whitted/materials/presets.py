"""Named material presets.

These are the four materials of the classic showcase scene. Presets are
plain Python values; register one with ``SceneManager.add_preset_material``
or pass its fields to ``add_material``.
"""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class MaterialPreset:
    """Parameters of a named material.

    Attributes:
        diffuse_color: Base RGB color.
        albedo: Weights (diffuse, specular, reflect, refract).
        specular_exponent: Phong shininess exponent.
        refractive_index: Index of refraction.
    """

    diffuse_color: tuple[float, float, float]
    albedo: tuple[float, float, float, float]
    specular_exponent: float
    refractive_index: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        """Return the preset as a dictionary of material parameters."""
        return asdict(self)


IVORY = MaterialPreset(
    diffuse_color=(0.4, 0.4, 0.3),
    albedo=(0.6, 0.3, 0.1, 0.0),
    specular_exponent=50.0,
)

RED_RUBBER = MaterialPreset(
    diffuse_color=(0.3, 0.1, 0.1),
    albedo=(0.9, 0.1, 0.0, 0.0),
    specular_exponent=10.0,
)

MIRROR = MaterialPreset(
    diffuse_color=(1.0, 1.0, 1.0),
    albedo=(0.0, 10.0, 0.8, 0.0),
    specular_exponent=1425.0,
)

GLASS = MaterialPreset(
    diffuse_color=(0.6, 0.7, 0.8),
    albedo=(0.0, 0.5, 0.1, 0.8),
    specular_exponent=125.0,
    refractive_index=1.5,
)

PRESETS: dict[str, MaterialPreset] = {
    "ivory": IVORY,
    "red_rubber": RED_RUBBER,
    "mirror": MIRROR,
    "glass": GLASS,
}


def get_preset(name: str) -> MaterialPreset:
    """Look up a preset by name (case-insensitive).

    Raises:
        ValueError: If no preset has that name.
    """
    key = name.lower()
    if key not in PRESETS:
        raise ValueError(f"Unknown material preset: {name!r} (known: {', '.join(PRESETS)})")
    return PRESETS[key]
