"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- Vector utility functions (add, sub, scale, dot, cross, length, normalize)
- Reflection, refraction and secondary ray origin offsets
- NumPy-side vector helpers used outside kernels
"""

import math

import numpy as np
import pytest
import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from whitted.core.ray import Ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert r[0] == pytest.approx(1.0)
        assert r[1] == pytest.approx(2.0)
        assert r[2] == pytest.approx(3.0)

    def test_ray_at_positive_t(self):
        """Test ray_at computes the point t units along the ray."""
        from whitted.core.ray import make_ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 5.0)

        test_kernel()
        r = result[None]
        assert r[0] == pytest.approx(0.0)
        assert r[1] == pytest.approx(0.0)
        assert r[2] == pytest.approx(-5.0)


class TestVectorUtilities:
    """Tests for the Taichi vector functions."""

    def test_add_sub_scale(self):
        """Test component-wise arithmetic."""
        from whitted.core.ray import add, scale, sub, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=3)

        @ti.kernel
        def test_kernel():
            a = vec3(1.0, 2.0, 3.0)
            b = vec3(4.0, -5.0, 0.5)
            result[0] = add(a, b)
            result[1] = sub(a, b)
            result[2] = scale(a, -2.0)

        test_kernel()
        assert tuple(result[0]) == pytest.approx((5.0, -3.0, 3.5))
        assert tuple(result[1]) == pytest.approx((-3.0, 7.0, 2.5))
        assert tuple(result[2]) == pytest.approx((-2.0, -4.0, -6.0))

    def test_dot_product(self):
        """Test dot product of two vectors."""
        from whitted.core.ray import dot, vec3

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, 5.0, 6.0))

        test_kernel()
        assert result[None] == pytest.approx(32.0)

    def test_cross_is_right_handed(self):
        """Test x cross y = z."""
        from whitted.core.ray import cross, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert tuple(result[None]) == pytest.approx((0.0, 0.0, 1.0))

    def test_length_and_length_squared(self):
        """Test Euclidean length of a 3-4-0 vector."""
        from whitted.core.ray import length, length_squared, vec3

        result = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 0.0)
            result[0] = length(v)
            result[1] = length_squared(v)

        test_kernel()
        assert result[0] == pytest.approx(5.0)
        assert result[1] == pytest.approx(25.0)

    def test_normalize_gives_unit_length(self):
        """Test normalize returns a unit vector in the same direction."""
        from whitted.core.ray import normalize, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 3.0, -4.0))

        test_kernel()
        assert tuple(result[None]) == pytest.approx((0.0, 0.6, -0.8))

    def test_normalize_zero_vector_is_nan(self):
        """Test the zero vector normalizes to NaN components inside a kernel."""
        from whitted.core.ray import normalize, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 0.0, 0.0))

        test_kernel()
        assert np.all(np.isnan(result[None].to_numpy()))


class TestReflect:
    """Tests for mirror reflection."""

    def test_reflect_flips_normal_component(self):
        """Test a 45 degree ray bounces off a floor."""
        from whitted.core.ray import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert tuple(result[None]) == pytest.approx((1.0, 1.0, 0.0))

    def test_reflect_is_involution(self):
        """Test reflecting twice about a unit normal returns the input."""
        from whitted.core.ray import normalize, reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            n = normalize(vec3(0.3, 0.8, -0.2))
            v = vec3(0.7, -1.3, 2.1)
            result[None] = reflect(reflect(v, n), n)

        test_kernel()
        assert tuple(result[None]) == pytest.approx((0.7, -1.3, 2.1))


class TestRefract:
    """Tests for Snell refraction."""

    def test_normal_incidence_passes_straight(self):
        """Test a ray along the normal is not bent."""
        from whitted.core.ray import refract, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = refract(vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0), 1.5, 1.0)

        test_kernel()
        assert tuple(result[None]) == pytest.approx((0.0, 0.0, -1.0))

    def test_oblique_entry_obeys_snell(self):
        """Test sin(theta_t) = sin(theta_i) / 1.5 entering glass."""
        from whitted.core.ray import normalize, refract, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(1.0, 0.0, -1.0))
            result[None] = normalize(refract(incident, vec3(0.0, 0.0, 1.0), 1.5, 1.0))

        test_kernel()
        r = result[None]
        assert r[0] == pytest.approx(math.sin(math.pi / 4.0) / 1.5)
        assert r[1] == pytest.approx(0.0)
        # Still travelling into the surface
        assert r[2] < 0.0

    def test_exit_flips_normal_and_swaps_indices(self):
        """Test a ray leaving glass bends away from the normal."""
        from whitted.core.ray import normalize, refract, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            # Outward normal +z, ray travelling outward
            incident = normalize(vec3(0.3, 0.0, 1.0))
            result[None] = normalize(refract(incident, vec3(0.0, 0.0, 1.0), 1.5, 1.0))

        test_kernel()
        r = result[None]
        sin_i = 0.3 / math.sqrt(1.09)
        assert r[0] == pytest.approx(sin_i * 1.5)
        assert r[2] > 0.0

    def test_total_internal_reflection_returns_sentinel(self):
        """Test grazing exit from glass yields the (1, 0, 0) sentinel."""
        from whitted.core.ray import normalize, refract, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(1.0, 0.0, 0.1))
            result[None] = refract(incident, vec3(0.0, 0.0, 1.0), 1.5, 1.0)

        test_kernel()
        assert tuple(result[None]) == (1.0, 0.0, 0.0)


class TestOffsetOrigin:
    """Tests for secondary ray origin biasing."""

    def test_offset_toward_outgoing_side(self):
        """Test the origin moves along the normal for outgoing rays."""
        from whitted.core.ray import EPSILON, offset_origin, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = offset_origin(
                vec3(0.0, 0.0, -3.0), vec3(0.0, 1.0, 1.0), vec3(0.0, 0.0, 1.0)
            )

        test_kernel()
        assert tuple(result[None]) == pytest.approx((0.0, 0.0, -3.0 + EPSILON))

    def test_offset_below_surface_for_inward_rays(self):
        """Test the origin moves against the normal for rays entering the surface."""
        from whitted.core.ray import EPSILON, offset_origin, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = offset_origin(
                vec3(0.0, 0.0, -3.0), vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0)
            )

        test_kernel()
        assert tuple(result[None]) == pytest.approx((0.0, 0.0, -3.0 - EPSILON))


class TestNumpyVector:
    """Tests for the Python-scope vector helpers."""

    def test_as_vec_rejects_wrong_length(self):
        """Test as_vec raises for non-3-component input."""
        from whitted.core.vector import as_vec

        with pytest.raises(ValueError, match="3 components"):
            as_vec((1.0, 2.0))

    def test_as_vec_copies(self):
        """Test as_vec does not alias its input array."""
        from whitted.core.vector import as_vec

        source = np.array([1.0, 2.0, 3.0])
        v = as_vec(source)
        v[0] = 10.0
        assert source[0] == 1.0

    def test_cross_and_dot(self):
        """Test cross product is orthogonal to both inputs."""
        from whitted.core.vector import cross, dot, vec

        a = vec(1.0, 2.0, 3.0)
        b = vec(-2.0, 0.5, 4.0)
        c = cross(a, b)
        assert dot(c, a) == pytest.approx(0.0)
        assert dot(c, b) == pytest.approx(0.0)
        np.testing.assert_allclose(cross(vec(0, 1, 0), vec(0, 0, 1)), [1.0, 0.0, 0.0])

    def test_normalize_in_place(self):
        """Test normalize mutates its argument to unit length."""
        from whitted.core.vector import norm, normalize, vec

        v = vec(2.0, 0.0, 0.0)
        normalize(v)
        np.testing.assert_allclose(v, [1.0, 0.0, 0.0])
        assert norm(v) == pytest.approx(1.0)

    def test_normalized_zero_is_nan(self):
        """Test the zero vector normalizes to NaN without raising."""
        from whitted.core.vector import normalized, vec

        assert np.all(np.isnan(normalized(vec(0.0, 0.0, 0.0))))

    def test_reflect_matches_kernel_formula(self):
        """Test reflection about a unit normal is an involution."""
        from whitted.core.vector import normalized, reflect, vec

        rng = np.random.default_rng(7)
        for _ in range(10):
            v = rng.normal(size=3)
            n = normalized(rng.normal(size=3))
            np.testing.assert_allclose(reflect(reflect(v, n), n), v, atol=1e-12)

        np.testing.assert_allclose(reflect(vec(1, -1, 0), vec(0, 1, 0)), [1.0, 1.0, 0.0])
