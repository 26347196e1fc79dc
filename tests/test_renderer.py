"""Unit tests for the Renderer driver.

Tests cover:
- Settings validation and defaults
- Rendering and saving, including the save-before-render guard
- Byte conversion into an ImageSink and output orientation
"""

import numpy as np
import pytest
from PIL import Image as PILImage


@pytest.fixture
def corner_scene():
    """A 4x4 orthographic setup with one red sphere seen only by pixel (3, 3)."""
    from src.beamburst.camera.orthographic import OrthographicCamera
    from src.beamburst.camera.projection import setup_camera
    from src.beamburst.materials.material import Material
    from src.beamburst.scene.manager import Scene

    scene = Scene()
    scene.add_sphere((1.0, 1.0, 0.0), 0.4, Material(color=(1.0, 0.0, 0.0), ambient=1.0))
    setup_camera(OrthographicCamera())
    yield scene
    scene.clear()


class TestRendererSetup:
    """Tests for Renderer construction."""

    def test_default_settings(self):
        from src.beamburst.core.renderer import Renderer
        from src.beamburst.core.tracer import get_image_dimensions, get_max_depth

        renderer = Renderer()
        assert (renderer.width, renderer.height) == (512, 512)
        assert renderer.settings.max_depth == 10
        assert get_image_dimensions() == (512, 512)
        assert get_max_depth() == 10
        assert not renderer.is_rendered

    def test_custom_settings(self):
        from src.beamburst.core.renderer import Renderer, RenderSettings
        from src.beamburst.core.tracer import get_max_depth

        renderer = Renderer(RenderSettings(width=32, height=16, max_depth=4))
        assert (renderer.width, renderer.height) == (32, 16)
        assert get_max_depth() == 4

    @pytest.mark.parametrize(
        "settings",
        [
            {"width": 0, "height": 16},
            {"width": 16, "height": 5000},
            {"width": 16, "height": 16, "max_depth": 0},
        ],
    )
    def test_invalid_settings(self, settings):
        from src.beamburst.core.renderer import Renderer, RenderSettings

        with pytest.raises(ValueError):
            Renderer(RenderSettings(**settings))

    def test_max_dimensions(self):
        from src.beamburst.core.renderer import Renderer

        assert Renderer.get_max_dimensions() == (2048, 2048)


class TestRendererOutput:
    """Tests for rendering and writing images."""

    def test_save_before_render_raises(self, tmp_path):
        from src.beamburst.core.renderer import Renderer, RenderSettings

        renderer = Renderer(RenderSettings(width=4, height=4))
        with pytest.raises(RuntimeError, match="render"):
            renderer.save(tmp_path / "out.png")
        assert not (tmp_path / "out.png").exists()

    def test_render_and_save(self, corner_scene, tmp_path):
        from src.beamburst.core.renderer import Renderer, RenderSettings

        renderer = Renderer(RenderSettings(width=4, height=4))
        renderer.render()
        assert renderer.is_rendered

        path = renderer.save(tmp_path / "out.png")
        assert path == tmp_path / "out.png"

        with PILImage.open(path) as img:
            assert img.size == (4, 4)
            assert img.mode == "RGBA"
            # Pixel (3, 3), counted from the bottom-left, is the top-right corner
            assert img.getpixel((3, 0)) == (255, 0, 0, 255)
            assert img.getpixel((0, 3)) == (0, 0, 0, 255)

    def test_to_sink_rgb(self, corner_scene):
        from src.beamburst.core.renderer import Renderer, RenderSettings
        from src.beamburst.preview.export import ImageChannels

        renderer = Renderer(RenderSettings(width=4, height=4))
        renderer.render()
        sink = renderer.to_sink(ImageChannels.RGB)

        assert sink.channels == ImageChannels.RGB
        assert sink.get(0, 3) == (255, 0, 0)
        assert int(sink.to_array().sum()) == 255

    def test_get_image_numpy(self, corner_scene):
        from src.beamburst.core.renderer import Renderer, RenderSettings

        renderer = Renderer(RenderSettings(width=4, height=4))
        renderer.render()
        image = renderer.get_image_numpy()

        assert image.shape == (4, 4, 3)
        np.testing.assert_allclose(image[0, 3], [1.0, 0.0, 0.0], atol=1e-6)

    def test_render_pixel(self, corner_scene):
        from src.beamburst.core.renderer import Renderer, RenderSettings

        renderer = Renderer(RenderSettings(width=4, height=4))
        assert renderer.render_pixel(3, 3) == pytest.approx((1.0, 0.0, 0.0), abs=1e-6)
        assert renderer.render_pixel(0, 0) == (0.0, 0.0, 0.0)

    def test_save_failure(self, corner_scene, tmp_path):
        from src.beamburst.core.renderer import Renderer, RenderSettings
        from src.beamburst.preview.export import ImageSaveError

        renderer = Renderer(RenderSettings(width=4, height=4))
        renderer.render()
        with pytest.raises(ImageSaveError):
            renderer.save(tmp_path / "no_such_dir" / "out.png")
