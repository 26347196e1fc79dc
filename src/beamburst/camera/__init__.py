"""Camera module for primary ray generation.

Components:
    orthographic: Parallel rays from a pixel grid (the default projection)
    pinhole: Perspective rays through pixel centres
    projection: Active camera selection and in-kernel dispatch

Pixel coordinates are integers with (0, 0) at the bottom-left of the image.
"""

from .orthographic import OrthographicCamera, get_orthographic_ray, setup_orthographic_camera
from .pinhole import PinholeCamera, get_pinhole_ray, get_ray, setup_pinhole_camera
from .projection import Camera, CameraMode, get_camera_mode, get_primary_ray, setup_camera

__all__ = [
    "Camera",
    "CameraMode",
    "OrthographicCamera",
    "PinholeCamera",
    "setup_camera",
    "get_camera_mode",
    "get_primary_ray",
    "setup_orthographic_camera",
    "get_orthographic_ray",
    "setup_pinhole_camera",
    "get_pinhole_ray",
    "get_ray",
]
