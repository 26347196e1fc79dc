"""Image sink and colour-to-byte conversion.

The tracer produces floating-point colours. Before they can be stored they are
converted to 8 bits per channel: each channel is scaled by 255, rounded to the
nearest integer (halves away from zero) and clamped to [0, 255]. Non-finite
input never wraps: NaN becomes 0, +inf becomes 255 and -inf becomes 0.

``ImageSink`` is a fixed-size RGB or RGBA byte buffer addressed by
(row, col) that encodes itself with Pillow. Saving is the only operation in
the rendering pipeline that can fail; every failure is reported as
``ImageSaveError``.

Example:
    >>> from src.beamburst.preview.export import ImageSink, color_to_rgba8
    >>> sink = ImageSink(2, 2)
    >>> sink.set(0, 0, color_to_rgba8((1.0, 0.5, 0.0)))
    >>> sink.save("out.png")
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


class ImageSaveError(RuntimeError):
    """Raised when an image cannot be written or encoded."""


class ImageChannels(IntEnum):
    """Number of 8-bit channels per pixel."""

    RGB = 3
    RGBA = 4


def colors_to_rgba8(
    image: npt.ArrayLike,
    channels: ImageChannels = ImageChannels.RGBA,
) -> npt.NDArray[np.uint8]:
    """Convert a float RGB image to 8-bit pixels.

    Args:
        image: Array of shape (..., 3) with linear colour values.
        channels: RGB drops alpha; RGBA appends a fully opaque alpha channel.

    Returns:
        Array of shape (..., channels) with dtype uint8.

    Raises:
        ValueError: If the last axis does not have 3 components.
    """
    colors = np.asarray(image, dtype=np.float64)
    if colors.shape[-1] != 3:
        raise ValueError(f"Expected 3 colour components, got shape {colors.shape}")

    with np.errstate(invalid="ignore", over="ignore"):
        scaled = np.floor(colors * 255.0 + 0.5)
    scaled = np.nan_to_num(scaled, nan=0.0, posinf=255.0, neginf=0.0)
    rgb = np.clip(scaled, 0.0, 255.0).astype(np.uint8)

    if channels == ImageChannels.RGB:
        return rgb

    alpha = np.full(rgb.shape[:-1] + (1,), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=-1)


def color_to_rgba8(color: Sequence[float]) -> tuple[int, int, int, int]:
    """Convert one float RGB colour to an opaque (r, g, b, 255) byte tuple."""
    pixel = colors_to_rgba8(np.asarray(color, dtype=np.float64), ImageChannels.RGBA)
    return (int(pixel[0]), int(pixel[1]), int(pixel[2]), int(pixel[3]))


class ImageSink:
    """Fixed-size 8-bit image buffer with PNG (or other Pillow format) output.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        channels: RGB or RGBA.
    """

    def __init__(
        self,
        width: int,
        height: int,
        channels: ImageChannels | int = ImageChannels.RGBA,
    ) -> None:
        """Create a black (and, for RGBA, fully transparent) image.

        Raises:
            ValueError: If the size is not positive or channels is not 3 or 4.
        """
        if width < 1 or height < 1:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        try:
            self._channels = ImageChannels(channels)
        except ValueError:
            raise ValueError(f"channels must be 3 (RGB) or 4 (RGBA), got {channels}") from None

        self._width = width
        self._height = height
        self._data = np.zeros((height, width, int(self._channels)), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def channels(self) -> ImageChannels:
        return self._channels

    def set(self, row: int, col: int, rgba: Sequence[int]) -> None:
        """Store one pixel.

        Args:
            row: Row index (0 = top).
            col: Column index (0 = left).
            rgba: An (r, g, b, a) byte tuple. The alpha byte is ignored by RGB
                sinks; an (r, g, b) tuple is accepted and treated as opaque.

        Raises:
            IndexError: If (row, col) lies outside the image.
            ValueError: If rgba does not have 3 or 4 components.
        """
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise IndexError(f"Pixel ({row}, {col}) outside {self._height}x{self._width} image")
        if len(rgba) not in (3, 4):
            raise ValueError(f"Expected 3 or 4 channel values, got {len(rgba)}")

        values = list(rgba[:3])
        if self._channels == ImageChannels.RGBA:
            values.append(rgba[3] if len(rgba) == 4 else 255)
        self._data[row, col] = values

    def get(self, row: int, col: int) -> tuple[int, ...]:
        """Read back one pixel as a tuple of channel bytes."""
        return tuple(int(v) for v in self._data[row, col])

    def blit(self, pixels: npt.NDArray[np.uint8]) -> None:
        """Replace the whole image.

        Args:
            pixels: Array of shape (height, width, channels), dtype uint8.

        Raises:
            ValueError: If the shape does not match the sink.
        """
        expected = self._data.shape
        if pixels.shape != expected:
            raise ValueError(f"Pixel array shape {pixels.shape} does not match sink {expected}")
        self._data[...] = pixels

    def to_array(self) -> npt.NDArray[np.uint8]:
        """Return a copy of the pixel buffer, shape (height, width, channels)."""
        return self._data.copy()

    def save(self, filepath: str | Path) -> None:
        """Encode the image and write it to disk.

        The format follows the file extension (e.g. ``.png``).

        Raises:
            ImageSaveError: If the file cannot be opened or the image cannot
                be encoded.
        """
        pil_image = PILImage.fromarray(self._data)
        try:
            pil_image.save(filepath)
        except (OSError, ValueError, KeyError) as e:
            raise ImageSaveError(f"Failed to save image to {filepath}: {e}") from e
