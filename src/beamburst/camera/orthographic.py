"""Orthographic camera: parallel primary rays from a pixel grid.

Every primary ray shares one direction; only the origin moves with the pixel.
Pixel (i, j) of a W x H image starts at

    origin + (i - W // 2) * pixel_size * right + (j - H // 2) * pixel_size * up

so the image centre lies on the camera origin. The default configuration
places the grid on the plane z = -1000 looking down +z with unit pixels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.beamburst.camera.orthographic import OrthographicCamera
    >>> from src.beamburst.camera.projection import setup_camera
    >>> setup_camera(OrthographicCamera())
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from src.beamburst.core.ray import Ray, make_ray

vec3 = tm.vec3


@dataclass
class OrthographicCamera:
    """Configuration for an orthographic camera.

    Attributes:
        origin: World position of the image centre.
        direction: Shared ray direction (normalized during setup).
        right: World direction of increasing pixel i.
        up: World direction of increasing pixel j.
        pixel_size: World-space spacing between adjacent pixels.
    """

    origin: tuple[float, float, float] = (0.0, 0.0, -1000.0)
    direction: tuple[float, float, float] = (0.0, 0.0, 1.0)
    right: tuple[float, float, float] = (1.0, 0.0, 0.0)
    up: tuple[float, float, float] = (0.0, 1.0, 0.0)
    pixel_size: float = 1.0


_ortho_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_ortho_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_ortho_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_ortho_up = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_orthographic_camera(camera: OrthographicCamera) -> None:
    """Write the camera configuration into Taichi fields.

    Raises:
        ValueError: If the direction is zero-length or pixel_size is not positive.
    """
    if not camera.pixel_size > 0.0:
        raise ValueError(f"pixel_size must be positive, got {camera.pixel_size}")

    direction = np.array(camera.direction, dtype=np.float32)
    norm = np.linalg.norm(direction)
    if norm == 0.0:
        raise ValueError("Camera direction must be non-zero")
    direction = direction / norm

    right = np.array(camera.right, dtype=np.float32) * camera.pixel_size
    up = np.array(camera.up, dtype=np.float32) * camera.pixel_size

    _ortho_origin[None] = list(camera.origin)
    _ortho_direction[None] = direction.tolist()
    _ortho_right[None] = right.tolist()
    _ortho_up[None] = up.tolist()


@ti.func
def get_orthographic_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray for pixel (i, j).

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
    """
    # Integer halving: even sizes reach one pixel further on the negative side
    du = ti.cast(pixel_i - width // 2, ti.f32)
    dv = ti.cast(pixel_j - height // 2, ti.f32)
    origin = _ortho_origin[None] + du * _ortho_right[None] + dv * _ortho_up[None]
    return make_ray(origin, _ortho_direction[None])
