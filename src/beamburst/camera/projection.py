"""Active camera selection and primary ray dispatch.

The tracer asks for primary rays through ``get_primary_ray`` without knowing
which projection is in use. ``setup_camera`` configures the chosen camera and
records its mode in a Taichi field that the dispatcher reads inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.beamburst.camera.orthographic import OrthographicCamera
    >>> from src.beamburst.camera.projection import setup_camera, get_camera_mode
    >>> setup_camera(OrthographicCamera())
    >>> get_camera_mode()
    <CameraMode.ORTHOGRAPHIC: 0>
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.beamburst.camera.orthographic import (
    OrthographicCamera,
    get_orthographic_ray,
    setup_orthographic_camera,
)
from src.beamburst.camera.pinhole import PinholeCamera, get_pinhole_ray, setup_pinhole_camera
from src.beamburst.core.ray import Ray, make_ray

vec3 = tm.vec3


class CameraMode(IntEnum):
    """Projection used for primary rays."""

    ORTHOGRAPHIC = 0
    PERSPECTIVE = 1


Camera = OrthographicCamera | PinholeCamera

_camera_mode = ti.field(dtype=ti.i32, shape=())


def setup_camera(camera: Camera) -> None:
    """Configure the active camera.

    Args:
        camera: An OrthographicCamera or PinholeCamera.

    Raises:
        TypeError: If the camera type is not supported.
        ValueError: If the camera parameters are degenerate.
    """
    if isinstance(camera, OrthographicCamera):
        setup_orthographic_camera(camera)
        _camera_mode[None] = int(CameraMode.ORTHOGRAPHIC)
    elif isinstance(camera, PinholeCamera):
        setup_pinhole_camera(camera)
        _camera_mode[None] = int(CameraMode.PERSPECTIVE)
    else:
        raise TypeError(f"Unsupported camera type: {type(camera).__name__}")


def get_camera_mode() -> CameraMode:
    """Get the projection of the active camera."""
    return CameraMode(int(_camera_mode[None]))


@ti.func
def get_primary_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray for pixel (i, j) with the active camera.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
    """
    ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 0.0))
    if _camera_mode[None] == int(CameraMode.ORTHOGRAPHIC):
        ray = get_orthographic_ray(pixel_i, pixel_j, width, height)
    else:
        ray = get_pinhole_ray(pixel_i, pixel_j, width, height)
    return ray
