"""Unit tests for surface materials.

Tests cover:
- Material dataclass defaults and dict conversion
- Ambient and diffuse shading terms
- Channel-wise colour combination
"""

import pytest
import taichi as ti


class TestMaterial:
    """Tests for the host-side Material."""

    def test_defaults(self):
        from src.beamburst.materials.material import Material

        m = Material(color=(1.0, 0.0, 0.0))
        assert m.ambient == 0.0
        assert m.diffuse == 0.0
        assert m.reflect == 0.0

    def test_to_dict(self):
        from src.beamburst.materials.material import Material

        m = Material(color=(0.9, 1.0, 0.9), ambient=0.01, diffuse=0.99, reflect=0.99)
        assert m.to_dict() == {
            "color": [0.9, 1.0, 0.9],
            "ambient": 0.01,
            "diffuse": 0.99,
            "reflect": 0.99,
        }

    def test_from_dict(self):
        from src.beamburst.materials.material import Material

        m = Material.from_dict({"color": [1, 0.8, 0.6], "ambient": 0.3, "diffuse": 0.7})
        assert m == Material(color=(1.0, 0.8, 0.6), ambient=0.3, diffuse=0.7, reflect=0.0)

    def test_from_dict_missing_color(self):
        from src.beamburst.materials.material import Material

        with pytest.raises(KeyError):
            Material.from_dict({"ambient": 0.3})

    def test_from_dict_bad_color(self):
        from src.beamburst.materials.material import Material

        with pytest.raises(ValueError, match="3 components"):
            Material.from_dict({"color": [1.0, 0.5]})


class TestShadingTerms:
    """Tests for the kernel-side shading helpers."""

    def test_ambient_term(self, vec3_kernel_result):
        from src.beamburst.materials.material import ambient_term, make_surface_material, vec3

        @ti.kernel
        def test_kernel():
            m = make_surface_material(vec3(1.0, 0.8, 0.6), 0.3, 0.7, 0.2)
            vec3_kernel_result[None] = ambient_term(0.5, m)

        test_kernel()
        c = vec3_kernel_result[None]
        assert c[0] == pytest.approx(0.15, abs=1e-6)
        assert c[1] == pytest.approx(0.12, abs=1e-6)
        assert c[2] == pytest.approx(0.09, abs=1e-6)

    def test_diffuse_term(self, vec3_kernel_result):
        from src.beamburst.materials.material import diffuse_term, make_surface_material, vec3

        @ti.kernel
        def test_kernel():
            m = make_surface_material(vec3(1.0, 0.8, 0.6), 0.3, 0.7, 0.2)
            vec3_kernel_result[None] = diffuse_term(1.0, m, 0.5, vec3(1.0, 1.0, 0.0))

        test_kernel()
        c = vec3_kernel_result[None]
        assert c[0] == pytest.approx(0.35, abs=1e-6)
        assert c[1] == pytest.approx(0.28, abs=1e-6)
        assert c[2] == pytest.approx(0.0, abs=1e-6)

    def test_coloured_light_on_complementary_surface(self, vec3_kernel_result):
        """A red light on a green surface contributes nothing."""
        from src.beamburst.materials.material import diffuse_term, make_surface_material, vec3

        @ti.kernel
        def test_kernel():
            m = make_surface_material(vec3(0.0, 1.0, 0.0), 0.0, 1.0, 0.0)
            vec3_kernel_result[None] = diffuse_term(1.0, m, 1.0, vec3(1.0, 0.0, 0.0))

        test_kernel()
        c = vec3_kernel_result[None]
        for k in range(3):
            assert c[k] == 0.0
