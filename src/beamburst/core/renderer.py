"""Render driver: runs the pixel loop and hands the result to an image sink.

The Renderer class wraps the tracer's module-level render target with a small
object interface:
- configure image size and maximum reflection depth once
- trace every pixel
- convert the float image to bytes and write it into an ImageSink
- save to disk

Pixel (i, j), with (0, 0) at the bottom-left, lands in sink row
``height - 1 - j`` and column ``i``, so the saved image is upright.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.beamburst.camera.projection import setup_camera
    >>> from src.beamburst.core.renderer import Renderer, RenderSettings
    >>> from src.beamburst.scene.demo import create_demo_scene
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>> renderer = Renderer(RenderSettings(width=512, height=512, max_depth=10))
    >>> renderer.render()
    >>> renderer.save("example.png")
"""

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt

from src.beamburst.core.tracer import (
    DEFAULT_MAX_DEPTH,
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    get_image_numpy,
    render_image,
    render_pixel,
    set_max_depth,
    setup_render_target,
)
from src.beamburst.preview.export import ImageChannels, ImageSink, colors_to_rgba8


@dataclass
class RenderSettings:
    """Render configuration.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Maximum number of surfaces shaded per pixel.
    """

    width: int = 512
    height: int = 512
    max_depth: int = DEFAULT_MAX_DEPTH


class Renderer:
    """Single-pass renderer for the active scene and camera.

    The scene and camera are whatever was last set up through
    ``scene.manager.Scene`` and ``camera.projection.setup_camera``.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        """Initialize the render target.

        Args:
            settings: Image size and depth. Defaults to RenderSettings().

        Raises:
            ValueError: If the size exceeds the supported maximum or the depth
                is less than 1.
        """
        self._settings = settings if settings is not None else RenderSettings()
        set_max_depth(self._settings.max_depth)
        setup_render_target(self._settings.width, self._settings.height)
        self._rendered = False

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    @property
    def width(self) -> int:
        return self._settings.width

    @property
    def height(self) -> int:
        return self._settings.height

    @property
    def is_rendered(self) -> bool:
        """Whether render() has run since construction."""
        return self._rendered

    def render(self) -> None:
        """Trace every pixel once."""
        render_image()
        self._rendered = True

    def render_pixel(self, pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
        """Trace a single pixel (0, 0 = bottom-left) without touching the buffer."""
        return render_pixel(pixel_i, pixel_j)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the raw float image, shape (height, width, 3), row 0 at the top."""
        return get_image_numpy()

    def to_sink(self, channels: ImageChannels = ImageChannels.RGBA) -> ImageSink:
        """Convert the rendered image to bytes in a new ImageSink."""
        sink = ImageSink(self.width, self.height, channels)
        sink.blit(colors_to_rgba8(self.get_image_numpy(), channels))
        return sink

    def save(self, filepath: str | Path, channels: ImageChannels = ImageChannels.RGBA) -> Path:
        """Write the rendered image to disk.

        Args:
            filepath: Output path; the extension selects the format.
            channels: RGB or RGBA output.

        Returns:
            The output path.

        Raises:
            RuntimeError: If render() has not been called.
            ImageSaveError: If the file cannot be written or encoded.
        """
        if not self._rendered:
            raise RuntimeError("Nothing rendered yet. Call render() first.")
        path = Path(filepath)
        self.to_sink(channels).save(path)
        return path

    @staticmethod
    def get_max_dimensions() -> tuple[int, int]:
        """Get the maximum supported (width, height)."""
        return MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT
