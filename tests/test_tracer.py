"""Unit tests for the Whitted tracer.

Tests cover:
- Ambient and diffuse shading at a single hit
- Lights facing away from the surface
- Shadow rays (occluders, self-shadowing, occluders beyond the light)
- Reflection bounces, intensity cutoff and depth limit
- Render target setup and image orientation
"""

import math

import numpy as np
import pytest

WHITE = (1.0, 1.0, 1.0)


def _matte(ambient=0.1, diffuse=0.9, reflect=0.0, color=WHITE):
    from src.beamburst.materials.material import Material

    return Material(color=color, ambient=ambient, diffuse=diffuse, reflect=reflect)


@pytest.fixture
def scene():
    from src.beamburst.scene.manager import Scene

    s = Scene()
    yield s
    s.clear()


class TestMaxDepth:
    """Tests for the maximum reflection depth setting."""

    def test_default_depth(self):
        from src.beamburst.core.tracer import DEFAULT_MAX_DEPTH, get_max_depth

        assert get_max_depth() == DEFAULT_MAX_DEPTH == 10

    def test_set_max_depth(self):
        from src.beamburst.core.tracer import get_max_depth, set_max_depth

        set_max_depth(3)
        assert get_max_depth() == 3

    @pytest.mark.parametrize("depth", [0, -1])
    def test_rejects_depth_below_one(self, depth):
        from src.beamburst.core.tracer import set_max_depth

        with pytest.raises(ValueError, match="max_depth"):
            set_max_depth(depth)


class TestSingleHitShading:
    """Tests for shading at the first surface."""

    def test_empty_scene_is_black(self):
        from src.beamburst.core.tracer import TraceTermination, trace_single_ray

        result = trace_single_ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert result.color == (0.0, 0.0, 0.0)
        assert result.bounces == 0
        assert result.termination == TraceTermination.MISS

    def test_ambient_only_without_lights(self, scene):
        from src.beamburst.core.tracer import TraceTermination, trace_single_ray

        scene.add_sphere((0.0, 0.0, 0.0), 1.0, _matte(color=(1.0, 0.8, 0.6), ambient=0.3))

        result = trace_single_ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert result.color == pytest.approx((0.3, 0.24, 0.18), abs=1e-6)
        assert result.bounces == 1
        assert result.termination == TraceTermination.CUTOFF

    def test_head_on_light(self, scene):
        """Light straight along the normal adds the full diffuse term."""
        from src.beamburst.core.tracer import trace_single_ray

        scene.add_sphere((0.0, 0.0, 0.0), 1.0, _matte())
        scene.add_light((0.0, 0.0, -10.0), WHITE)

        result = trace_single_ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert result.color == pytest.approx((1.0, 1.0, 1.0), abs=1e-4)

    def test_oblique_light_uses_cosine(self, scene):
        from src.beamburst.core.tracer import trace_single_ray

        scene.add_sphere((0.0, 0.0, 0.0), 1.0, _matte())
        scene.add_light((0.0, 10.0, -10.0), WHITE)

        # Hit point is (0, 0, -1); the light is at (0, 10, -9) relative to it
        cos_theta = 9.0 / math.sqrt(181.0)
        expected = 0.1 + 0.9 * cos_theta

        result = trace_single_ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert result.color[0] == pytest.approx(expected, abs=1e-4)

    def test_light_behind_surface_is_ignored(self, scene):
        from src.beamburst.core.tracer import trace_single_ray

        scene.add_sphere((0.0, 0.0, 0.0), 1.0, _matte())
        scene.add_light((0.0, 0.0, 10.0), WHITE)

        result = trace_single_ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert result.color == pytest.approx((0.1, 0.1, 0.1), abs=1e-6)

    def test_light_colour_is_channel_wise(self, scene):
        from src.beamburst.core.tracer import trace_single_ray

        scene.add_sphere((0.0, 0.0, 0.0), 1.0, _matte(ambient=0.0, color=(0.0, 1.0, 1.0)))
        scene.add_light((0.0, 0.0, -10.0), (1.0, 0.5, 0.0))

        result = trace_single_ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert result.color == pytest.approx((0.0, 0.45, 0.0), abs=1e-4)

    def test_lights_accumulate(self, scene):
        from src.beamburst.core.tracer import trace_single_ray

        scene.add_sphere((0.0, 0.0, 0.0), 1.0, _matte(ambient=0.0, diffuse=0.5))
        scene.add_light((0.0, 0.0, -10.0), (1.0, 0.0, 0.0))
        scene.add_light((0.0, 0.0, -20.0), (0.0, 1.0, 0.0))

        result = trace_single_ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert result.color == pytest.approx((0.5, 0.5, 0.0), abs=1e-4)

    def test_direction_is_normalized(self, scene):
        from src.beamburst.core.tracer import trace_single_ray

        scene.add_sphere((0.0, 0.0, 0.0), 1.0, _matte())
        scene.add_light((0.0, 0.0, -10.0), WHITE)

        result = trace_single_ray((0.0, 0.0, -5.0), (0.0, 0.0, 42.0))
        assert result.color == pytest.approx((1.0, 1.0, 1.0), abs=1e-4)


class TestShadows:
    """Tests for shadow rays."""

    def test_surface_does_not_shadow_itself(self, scene):
        from src.beamburst.core.tracer import trace_single_ray

        scene.add_sphere((0.0, 0.0, 0.0), 100.0, _matte())
        scene.add_light((0.0, 0.0, -500.0), WHITE)

        result = trace_single_ray((0.0, 0.0, -1000.0), (0.0, 0.0, 1.0))
        assert result.color[0] == pytest.approx(1.0, abs=1e-4)

    def test_occluder_between_surface_and_light(self, scene):
        from src.beamburst.core.tracer import trace_single_ray

        scene.add_sphere((0.0, 0.0, 0.0), 1.0, _matte())
        scene.add_sphere((0.0, 0.0, -3.0), 0.5, _matte())
        scene.add_light((0.0, 0.0, -10.0), WHITE)

        # Start between the two spheres, looking at the first one
        result = trace_single_ray((0.0, 0.0, -2.0), (0.0, 0.0, 1.0))
        assert result.color == pytest.approx((0.1, 0.1, 0.1), abs=1e-6)

    def test_occluder_beyond_light_still_shadows(self, scene):
        """Shadow rays are not limited to the light distance."""
        from src.beamburst.core.tracer import trace_single_ray

        scene.add_sphere((0.0, 0.0, 0.0), 1.0, _matte())
        scene.add_sphere((0.0, 0.0, -20.0), 1.0, _matte())
        scene.add_light((0.0, 0.0, -10.0), WHITE)

        result = trace_single_ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert result.color == pytest.approx((0.1, 0.1, 0.1), abs=1e-6)


class TestReflection:
    """Tests for mirror bounces and loop termination."""

    def test_reflected_ray_escapes(self, scene):
        from src.beamburst.core.tracer import TraceTermination, trace_single_ray

        scene.add_sphere((0.0, 0.0, 0.0), 1.0, _matte(ambient=0.2, reflect=0.5))

        result = trace_single_ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert result.bounces == 1
        assert result.termination == TraceTermination.MISS
        assert result.color[0] == pytest.approx(0.2, abs=1e-6)

    def test_reflection_scales_second_surface(self, scene):
        from src.beamburst.core.tracer import TraceTermination, trace_single_ray

        # Mirror ahead of the ray, matte sphere behind the ray origin
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, _matte(ambient=0.0, diffuse=0.0, reflect=0.5))
        scene.add_sphere((0.0, 0.0, -10.0), 1.0, _matte(ambient=0.4, diffuse=0.0))

        result = trace_single_ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert result.bounces == 2
        assert result.termination == TraceTermination.CUTOFF
        assert result.color[0] == pytest.approx(0.2, abs=1e-6)

    def test_intensity_cutoff(self, scene):
        from src.beamburst.core.tracer import TraceTermination, trace_single_ray

        mirror = _matte(ambient=0.1, diffuse=0.0, reflect=0.05)
        scene.add_sphere((0.0, 0.0, 10.0), 1.0, mirror)
        scene.add_sphere((0.0, 0.0, -10.0), 1.0, mirror)

        result = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        # 1.0 -> 0.05 continues, 0.05 -> 0.0025 stops
        assert result.bounces == 2
        assert result.termination == TraceTermination.CUTOFF
        assert result.color[0] == pytest.approx(0.1 + 0.05 * 0.1, abs=1e-6)

    @pytest.mark.parametrize("depth", [1, 3, 10])
    def test_facing_mirrors_stop_at_max_depth(self, scene, depth):
        from src.beamburst.core.tracer import TraceTermination, set_max_depth, trace_single_ray

        mirror = _matte(ambient=0.01, diffuse=0.0, reflect=1.0)
        scene.add_sphere((0.0, 0.0, 10.0), 1.0, mirror)
        scene.add_sphere((0.0, 0.0, -10.0), 1.0, mirror)
        set_max_depth(depth)

        result = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert result.bounces == depth
        assert result.termination == TraceTermination.DEPTH
        assert result.color[0] == pytest.approx(0.01 * depth, abs=1e-5)

    def test_demo_mirror_pixel_terminates(self):
        """Every demo pixel ends within the depth limit with a finite colour."""
        from src.beamburst.core.tracer import DEFAULT_MAX_DEPTH, trace_single_ray
        from src.beamburst.scene.demo import create_demo_scene

        create_demo_scene()
        result = trace_single_ray((-87.0, -50.0, -1000.0), (0.0, 0.0, 1.0))

        assert 1 <= result.bounces <= DEFAULT_MAX_DEPTH
        assert all(math.isfinite(c) and c >= 0.0 for c in result.color)


class TestRenderTarget:
    """Tests for render target setup and the full-image kernel."""

    def test_render_before_setup_raises(self):
        from src.beamburst.core.tracer import get_image_numpy, render_image, render_pixel

        with pytest.raises(RuntimeError, match="setup_render_target"):
            render_image()
        with pytest.raises(RuntimeError):
            render_pixel(0, 0)
        with pytest.raises(RuntimeError):
            get_image_numpy()

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5), (4096, 16), (16, 4096)])
    def test_setup_rejects_bad_dimensions(self, size):
        from src.beamburst.core.tracer import setup_render_target

        with pytest.raises(ValueError):
            setup_render_target(*size)

    def test_setup_sets_dimensions(self):
        from src.beamburst.core.tracer import get_image_dimensions, setup_render_target

        setup_render_target(64, 32)
        assert get_image_dimensions() == (64, 32)

    def test_image_orientation(self, scene):
        """Pixel (i, j) with j up lands in row H-1-j, column i."""
        from src.beamburst.camera.orthographic import OrthographicCamera
        from src.beamburst.camera.projection import setup_camera
        from src.beamburst.core.tracer import get_image_numpy, render_image, setup_render_target

        # Pixel (3, 3) of a 4x4 image looks along x = 1, y = 1
        red = _matte(ambient=1.0, diffuse=0.0, color=(1.0, 0.0, 0.0))
        scene.add_sphere((1.0, 1.0, 0.0), 0.4, red)
        setup_camera(OrthographicCamera())
        setup_render_target(4, 4)
        render_image()

        image = get_image_numpy()
        assert image.shape == (4, 4, 3)
        assert image.dtype == np.float32
        np.testing.assert_allclose(image[0, 3], [1.0, 0.0, 0.0], atol=1e-6)

        mask = np.ones((4, 4), dtype=bool)
        mask[0, 3] = False
        assert np.all(image[mask] == 0.0)

    def test_render_pixel_matches_render_image(self, scene):
        from src.beamburst.camera.orthographic import OrthographicCamera
        from src.beamburst.camera.projection import setup_camera
        from src.beamburst.core.tracer import (
            get_image_numpy,
            render_image,
            render_pixel,
            setup_render_target,
        )

        scene.add_sphere((0.0, 0.0, 0.0), 3.0, _matte())
        scene.add_light((5.0, 5.0, -20.0), WHITE)
        setup_camera(OrthographicCamera())
        setup_render_target(8, 8)
        render_image()
        image = get_image_numpy()

        for i, j in [(4, 4), (2, 5), (0, 0)]:
            np.testing.assert_allclose(render_pixel(i, j), image[7 - j, i], atol=1e-6)

    def test_image_is_not_clamped(self, scene):
        from src.beamburst.camera.orthographic import OrthographicCamera
        from src.beamburst.camera.projection import setup_camera
        from src.beamburst.core.tracer import get_image_numpy, render_image, setup_render_target

        scene.add_sphere((0.0, 0.0, 0.0), 10.0, _matte(ambient=1.0, diffuse=1.0))
        scene.add_light((0.0, 0.0, -100.0), WHITE)
        setup_camera(OrthographicCamera())
        setup_render_target(2, 2)
        render_image()

        assert get_image_numpy().max() > 1.5
