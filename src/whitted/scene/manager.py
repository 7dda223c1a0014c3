"""Scene manager for building scenes from Python or JSON.

This module provides a high-level scene API on top of the field-backed
registries (materials, spheres, lights). The SceneManager keeps a Python-side
record of everything it adds so scenes can be inspected and serialized.

Scene document format (JSON or dict):

    {
        "materials": [
            {"preset": "ivory"},
            {"diffuse_color": [0.6, 0.7, 0.8], "albedo": [0.0, 0.5, 0.1, 0.8],
             "specular_exponent": 125.0, "refractive_index": 1.5}
        ],
        "spheres": [{"center": [-3, 0, -16], "radius": 2, "material_id": 0}],
        "lights": [{"position": [-20, 20, 20], "intensity": 1.5}]
    }

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> ivory = scene.add_preset_material("ivory")
    >>> scene.add_sphere(center=(-3, 0, -16), radius=2, material_id=ivory)
    >>> scene.add_light(position=(-20, 20, 20), intensity=1.5)
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from whitted.materials.phong import (
    MAX_MATERIALS,
    add_material,
    clear_materials,
    get_material_count,
)
from whitted.materials.presets import get_preset
from whitted.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)
from whitted.scene.lights import MAX_LIGHTS, add_light, clear_lights, get_light_count

logger = logging.getLogger(__name__)

_SCENE_KEYS = frozenset({"materials", "spheres", "lights"})
_MATERIAL_KEYS = frozenset(
    {"preset", "diffuse_color", "albedo", "specular_exponent", "refractive_index"}
)
_SPHERE_KEYS = frozenset({"center", "radius", "material_id"})
_LIGHT_KEYS = frozenset({"position", "intensity"})


def _check_keys(kind: str, entry: dict[str, Any], allowed: frozenset[str]) -> None:
    unknown = set(entry) - allowed
    if unknown:
        raise ValueError(f"Unknown {kind} keys: {', '.join(sorted(unknown))}")


def _vec3(values: Sequence[float]) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The material index.
        diffuse_color: Base RGB color.
        albedo: Weights (diffuse, specular, reflect, refract).
        specular_exponent: Phong shininess exponent.
        refractive_index: Index of refraction.
        preset: Name of the preset it was created from, if any.
    """

    material_id: int
    diffuse_color: tuple[float, float, float]
    albedo: tuple[float, float, float, float]
    specular_exponent: float
    refractive_index: float
    preset: str | None = None


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class LightInfo:
    """Information about a point light in the scene."""

    light_index: int
    position: tuple[float, float, float]
    intensity: float


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations.
        spheres: List of sphere configurations.
        lights: List of light configurations.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


class SceneManager:
    """Scene manager coordinating materials, spheres and lights.

    Creating a SceneManager clears the global scene fields, so only one
    scene is active at a time.

    Attributes:
        materials: List of MaterialInfo for all registered materials.
        spheres: List of SphereInfo for all spheres in the scene.
        lights: List of LightInfo for all lights in the scene.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.lights: list[LightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_lights()
        clear_materials()
        self.materials.clear()
        self.spheres.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Clear the entire scene (spheres, lights and materials)."""
        self._clear_all()

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(
        self,
        diffuse_color: Sequence[float],
        albedo: Sequence[float] = (1.0, 0.0, 0.0, 0.0),
        specular_exponent: float = 0.0,
        refractive_index: float = 1.0,
        *,
        preset: str | None = None,
    ) -> int:
        """Add a material to the scene.

        Args:
            diffuse_color: Base RGB color as (R, G, B).
            albedo: Weights (diffuse, specular, reflect, refract).
            specular_exponent: Phong shininess exponent.
            refractive_index: Index of refraction.
            preset: Preset name recorded for serialization.

        Returns:
            The material ID.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any parameter is invalid.
        """
        material_id = add_material(diffuse_color, albedo, specular_exponent, refractive_index)
        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                diffuse_color=_vec3(diffuse_color),
                albedo=(
                    float(albedo[0]),
                    float(albedo[1]),
                    float(albedo[2]),
                    float(albedo[3]),
                ),
                specular_exponent=float(specular_exponent),
                refractive_index=float(refractive_index),
                preset=preset,
            )
        )
        return material_id

    def add_preset_material(self, name: str) -> int:
        """Add a named preset material (ivory, red_rubber, mirror, glass).

        Raises:
            ValueError: If the preset name is unknown.
        """
        preset = get_preset(name)
        return self.add_material(
            preset.diffuse_color,
            preset.albedo,
            preset.specular_exponent,
            preset.refractive_index,
            preset=name.lower(),
        )

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Primitive and Light Management
    # =========================================================================

    def add_sphere(
        self,
        center: Sequence[float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material_id: The material ID to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the radius or material_id is invalid.
        """
        center_tuple = _vec3(center)
        sphere_index = add_sphere(center_tuple, radius, material_id)
        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=center_tuple,
                radius=float(radius),
                material_id=material_id,
            )
        )
        return sphere_index

    def add_light(self, position: Sequence[float], intensity: float) -> int:
        """Add a point light to the scene.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If the intensity is negative.
        """
        position_tuple = _vec3(position)
        light_index = add_light(position_tuple, intensity)
        self.lights.append(
            LightInfo(
                light_index=light_index,
                position=position_tuple,
                intensity=float(intensity),
            )
        )
        return light_index

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()

        for mat in self.materials:
            if mat.preset is not None:
                config.materials.append({"preset": mat.preset})
            else:
                config.materials.append(
                    {
                        "diffuse_color": list(mat.diffuse_color),
                        "albedo": list(mat.albedo),
                        "specular_exponent": mat.specular_exponent,
                        "refractive_index": mat.refractive_index,
                    }
                )

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                }
            )

        for light in self.lights:
            config.lights.append(
                {
                    "position": list(light.position),
                    "intensity": light.intensity,
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        # Materials first: spheres refer to them by index
        for mat_config in config.materials:
            _check_keys("material", mat_config, _MATERIAL_KEYS)
            if "preset" in mat_config:
                self.add_preset_material(mat_config["preset"])
            else:
                if "diffuse_color" not in mat_config:
                    raise ValueError("Material needs either 'preset' or 'diffuse_color'")
                self.add_material(
                    mat_config["diffuse_color"],
                    mat_config.get("albedo", (1.0, 0.0, 0.0, 0.0)),
                    mat_config.get("specular_exponent", 0.0),
                    mat_config.get("refractive_index", 1.0),
                )

        for sphere_config in config.spheres:
            _check_keys("sphere", sphere_config, _SPHERE_KEYS)
            self.add_sphere(
                sphere_config.get("center", (0.0, 0.0, 0.0)),
                sphere_config.get("radius", 1.0),
                sphere_config.get("material_id", 0),
            )

        for light_config in config.lights:
            _check_keys("light", light_config, _LIGHT_KEYS)
            self.add_light(
                light_config.get("position", (0.0, 0.0, 0.0)),
                light_config.get("intensity", 1.0),
            )

        logger.debug(
            "Loaded scene: %d materials, %d spheres, %d lights",
            len(self.materials),
            len(self.spheres),
            len(self.lights),
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "materials": config.materials,
            "spheres": config.spheres,
            "lights": config.lights,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Raises:
            ValueError: If the dictionary has unknown keys or invalid entries.
        """
        _check_keys("scene", data, _SCENE_KEYS)
        config = SceneConfig(
            materials=data.get("materials", []),
            spheres=data.get("spheres", []),
            lights=data.get("lights", []),
        )
        self.from_config(config)

    def save_json(self, filepath: str | Path) -> None:
        """Write the scene as a JSON document."""
        Path(filepath).write_text(json.dumps(self.to_dict(), indent=2))

    def load_json(self, filepath: str | Path) -> None:
        """Load the scene from a JSON document.

        Raises:
            ValueError: If the document is not valid JSON or not a valid scene.
        """
        try:
            data = json.loads(Path(filepath).read_text())
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scene file {filepath}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid scene file {filepath}: top level must be an object")
        self.from_dict(data)
        logger.info("Loaded scene from %s", filepath)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS
