"""Python-scope vector algebra on NumPy arrays.

Mirrors the Taichi functions in ``ray.py`` for code that runs outside
kernels: scene validation, camera setup and tests computing expected values.
Vectors are length-3 float64 arrays.
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

Vector = npt.NDArray[np.float64]


def vec(x: float, y: float, z: float) -> Vector:
    """Create a 3-component float64 vector."""
    return np.array([x, y, z], dtype=np.float64)


def as_vec(values: Sequence[float] | Vector) -> Vector:
    """Convert a 3-sequence to a float64 vector.

    Raises:
        ValueError: If the input does not have exactly three components.
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected 3 components, got shape {arr.shape}")
    return arr.copy()


def dot(a: Vector, b: Vector) -> float:
    """Dot product a . b."""
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def cross(a: Vector, b: Vector) -> Vector:
    """Right-handed cross product a x b."""
    return np.array(
        [
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ],
        dtype=np.float64,
    )


def norm(v: Vector) -> float:
    """Euclidean length of v."""
    return float(np.sqrt(dot(v, v)))


def normalized(v: Vector) -> Vector:
    """Return a new vector equal to v / |v|.

    A zero vector yields NaN components, without warnings.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.asarray(v, dtype=np.float64) / norm(v)


def normalize(v: Vector) -> None:
    """Normalize v in place (same zero-vector behavior as normalized())."""
    with np.errstate(divide="ignore", invalid="ignore"):
        v /= norm(v)


def reflect(incident: Vector, normal: Vector) -> Vector:
    """Reflect incident about normal: i - 2 (i . n) n."""
    return incident - normal * 2.0 * dot(incident, normal)
