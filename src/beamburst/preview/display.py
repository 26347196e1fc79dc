"""Matplotlib-based preview display for rendered images.

Matplotlib is imported lazily inside ``show_preview`` so that headless
renders never need a display backend.

Example:
    >>> from src.beamburst.core.renderer import Renderer, RenderSettings
    >>> from src.beamburst.preview.display import show_preview
    >>> renderer = Renderer(RenderSettings(width=256, height=256))
    >>> renderer.render()
    >>> show_preview(renderer.get_image_numpy())
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def prepare_for_display(image: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
    """Clamp a raw float image into the displayable [0, 1] range.

    NaN values are shown as black.

    Args:
        image: Raw image array of shape (H, W, 3).

    Returns:
        A float32 copy with every value in [0, 1].
    """
    result = np.nan_to_num(image.astype(np.float32), nan=0.0, posinf=1.0, neginf=0.0)
    return np.clip(result, 0.0, 1.0)


def show_preview(
    image: npt.NDArray[np.float32],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a rendered image in a Matplotlib window.

    Args:
        image: Raw image array of shape (H, W, 3), row 0 at the top.
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = prepare_for_display(image)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = display_image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
