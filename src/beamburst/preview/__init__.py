"""Preview module for output and visualization.

Components:
    export: Image sink (Pillow encoding) and float-to-byte colour conversion
    display: Matplotlib-based preview window

Example:
    >>> from src.beamburst.preview import ImageSink, colors_to_rgba8
    >>> sink = ImageSink(512, 512)
    >>> sink.blit(colors_to_rgba8(image))
    >>> sink.save("output.png")
"""

from src.beamburst.preview.display import prepare_for_display, show_preview
from src.beamburst.preview.export import (
    ImageChannels,
    ImageSaveError,
    ImageSink,
    color_to_rgba8,
    colors_to_rgba8,
)

__all__ = [
    # Display functions
    "show_preview",
    "prepare_for_display",
    # Export functions
    "ImageSink",
    "ImageChannels",
    "ImageSaveError",
    "color_to_rgba8",
    "colors_to_rgba8",
]
