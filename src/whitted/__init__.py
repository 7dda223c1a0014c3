"""Taichi implementation of a recursive Whitted-style ray tracer.

This package renders small scenes of spheres over a checkerboard ground plane,
lit by point lights, with support for:
- Phong-style local lighting (diffuse + specular) with hard shadows
- Recursive mirror reflection and Snell refraction
- A four-weight albedo mixture per material
- Binary PPM and PNG output

Subpackages:
    core: Ray type, vector utilities and the recursive shader
    geometry: Sphere and checkerboard plane intersection
    materials: Material model, registry and named presets
    scene: Scene storage, intersection resolver, lights and scene manager
    camera: Pinhole camera ray generation
    preview: Image export utilities
"""

__version__ = "0.1.0"
