"""Whitted-style ray tracer: shading loop, render target and kernels.

For every pixel the tracer casts one primary ray and then iterates up to a
maximum depth:

1. Find the closest primitive along the ray. No hit ends the trace.
2. Compute the hit position and surface normal, and nudge the position along
   the normal by EPSILON so the next cast does not re-hit the same surface.
3. Add the ambient term: intensity * ambient * color.
4. For each light facing the surface, cast a shadow ray; if nothing blocks
   it, add intensity * diffuse * dot(n, L) * light_color * color.
5. Scale the intensity by the surface reflectivity. Below INTENSITY_CUTOFF
   the trace ends.
6. Continue with the mirror reflection of the ray about the normal.

The loop is explicit and bounded by a runtime max depth, so the three ways a
trace can end (miss, cutoff, depth exhausted) are all plain loop exits.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.beamburst.core.tracer import setup_render_target, render_image
    >>> from src.beamburst.scene.demo import create_demo_scene
    >>> from src.beamburst.camera.projection import setup_camera
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(512, 512)
    >>> render_image()
"""

from dataclasses import dataclass
from enum import IntEnum

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.beamburst.camera.projection import get_primary_ray
from src.beamburst.core.ray import EPSILON, dot, normalize, reflect
from src.beamburst.materials.material import SurfaceMaterial, ambient_term, diffuse_term
from src.beamburst.scene.intersection import (
    get_light_color,
    get_light_position,
    intersect_scene,
    is_occluded,
    num_lights,
    primitive_material,
    primitive_normal,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Default number of bounces per pixel
DEFAULT_MAX_DEPTH = 10

# Traces stop once the carried intensity falls below this
INTENSITY_CUTOFF = 0.01


class TraceTermination(IntEnum):
    """Why a trace stopped."""

    MISS = 0
    CUTOFF = 1
    DEPTH = 2


@dataclass(frozen=True)
class TraceResult:
    """Outcome of tracing a single ray from Python.

    Attributes:
        color: The accumulated (unclamped) RGB colour.
        bounces: The number of surfaces shaded.
        termination: Why the trace stopped.
    """

    color: tuple[float, float, float]
    bounces: int
    termination: TraceTermination


_max_depth = ti.field(dtype=ti.i32, shape=())


def set_max_depth(max_depth: int) -> None:
    """Set the maximum number of bounces per trace.

    Raises:
        ValueError: If max_depth is less than 1.
    """
    if max_depth < 1:
        raise ValueError(f"max_depth must be at least 1, got {max_depth}")
    _max_depth[None] = max_depth


def get_max_depth() -> int:
    """Get the maximum number of bounces per trace."""
    return int(_max_depth[None])


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Colour buffer indexed [i, j] with (0, 0) at the bottom-left
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer. The buffer is
    preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.

    Args:
        width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    if _max_depth[None] < 1:
        _max_depth[None] = DEFAULT_MAX_DEPTH

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to black."""
    _color_buffer.fill(0.0)


def reset_render_target() -> None:
    """Mark the render target as uninitialized and restore the default depth."""
    _render_target_initialized[None] = 0
    _max_depth[None] = DEFAULT_MAX_DEPTH
    clear_render_target()


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading Loop
# =============================================================================


@ti.func
def _shade_lights(
    hit_position: vec3, normal: vec3, material: SurfaceMaterial, intensity: ti.f32
) -> vec3:
    """Sum the diffuse contributions of every visible, unoccluded light."""
    color = vec3(0.0, 0.0, 0.0)
    for light in range(num_lights[None]):
        light_direction = normalize(get_light_position(light) - hit_position)
        cos_theta = dot(normal, light_direction)
        # Surfaces facing away get neither diffuse light nor a shadow ray
        if cos_theta > 0.0:
            if is_occluded(hit_position, light_direction) == 0:
                color += diffuse_term(intensity, material, cos_theta, get_light_color(light))
    return color


@ti.func
def trace_ray_with_stats(ray_origin: vec3, ray_direction: vec3):
    """Trace a ray through the scene, reporting how the trace ended.

    Args:
        ray_origin: The starting point of the primary ray.
        ray_direction: The unit direction of the primary ray.

    Returns:
        A tuple (color, bounces, termination) where termination is a
        TraceTermination value.
    """
    color = vec3(0.0, 0.0, 0.0)
    intensity = 1.0
    origin = ray_origin
    direction = ray_direction

    bounces = 0
    termination = int(TraceTermination.DEPTH)

    # Active flag for path continuation
    active = 1

    for _ in range(_max_depth[None]):
        if active == 1:
            rec = intersect_scene(origin, direction)

            if rec.hit == 0:
                termination = int(TraceTermination.MISS)
                active = 0
            else:
                bounces += 1
                hit_position = origin + rec.t * direction
                normal = primitive_normal(rec.index, hit_position)
                hit_position += normal * EPSILON

                material = primitive_material(rec.index)

                color += ambient_term(intensity, material)
                color += _shade_lights(hit_position, normal, material, intensity)

                intensity *= material.reflect
                if intensity < INTENSITY_CUTOFF:
                    termination = int(TraceTermination.CUTOFF)
                    active = 0
                else:
                    origin = hit_position
                    direction = normalize(reflect(direction, normal))

    return color, bounces, termination


@ti.func
def trace_ray(ray_origin: vec3, ray_direction: vec3) -> vec3:
    """Trace a ray through the scene and return the accumulated colour."""
    color, bounces, termination = trace_ray_with_stats(ray_origin, ray_direction)
    return color


@ti.func
def trace_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Trace the primary ray of pixel (i, j) from the active camera.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The unclamped RGB colour of the pixel.
    """
    ray = get_primary_ray(pixel_i, pixel_j, width, height)
    return trace_ray(ray.origin, ray.direction)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32):
    """Trace every pixel once. Pixels are independent and run in parallel."""
    for i, j in ti.ndrange(width, height):
        _color_buffer[i, j] = trace_pixel(i, j, width, height)


# Scratch fields for tracing single pixels and arbitrary rays from Python
_probe_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_bounces = ti.field(dtype=ti.i32, shape=())
_probe_termination = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32):
    """Trace a single pixel into _probe_color. Used for testing and debugging."""
    # The single-iteration outer loop keeps the bounce and scene loops serial
    for _ in range(1):
        _probe_color[None] = trace_pixel(pixel_i, pixel_j, width, height)


@ti.kernel
def _trace_probe():
    for _ in range(1):
        color, bounces, termination = trace_ray_with_stats(
            _probe_origin[None], normalize(_probe_direction[None])
        )
        _probe_color[None] = color
        _probe_bounces[None] = bounces
        _probe_termination[None] = termination


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_single_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> TraceResult:
    """Trace one ray through the current scene.

    The direction is normalized before tracing. The camera and render target
    are not involved.

    Args:
        origin: The ray origin.
        direction: The ray direction.

    Returns:
        A TraceResult with the colour, bounce count and termination reason.
    """
    if _max_depth[None] < 1:
        _max_depth[None] = DEFAULT_MAX_DEPTH

    _probe_origin[None] = [origin[0], origin[1], origin[2]]
    _probe_direction[None] = [direction[0], direction[1], direction[2]]
    _trace_probe()

    c = _probe_color[None]
    return TraceResult(
        color=(float(c[0]), float(c[1]), float(c[2])),
        bounces=int(_probe_bounces[None]),
        termination=TraceTermination(int(_probe_termination[None])),
    )


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Trace a single pixel of the render target.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_single_pixel(pixel_i, pixel_j, width, height)
    color = _probe_color[None]

    return (float(color[0]), float(color[1]), float(color[2]))


def render_image() -> None:
    """Trace every pixel of the render target.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_kernel(width, height)


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    Values are the raw tracer output: not clamped, not gamma corrected.
    The array shape is (height, width, 3) with row 0 at the top of the image.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()

    # Extract active region
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3) for standard image format
    image = np.transpose(image, (1, 0, 2))

    # Flip vertically (pixel j = 0 is the bottom row)
    image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.float32)
