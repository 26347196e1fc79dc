"""Core rendering module.

This module contains the fundamental building blocks of the ray tracer:

Components:
    ray: Ray data structure, numeric tolerances and vector algebra
    tracer: The shading/reflection loop, render target and kernels
    renderer: Host-side driver that runs the pixel loop and feeds an image sink

The tracer is a Whitted-style loop: ambient plus shadow-tested diffuse
lighting at every hit, followed by a mirror bounce whose contribution is
attenuated by the surface reflectivity until it drops below a cutoff or the
maximum depth is reached.

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    EPSILON,
    FLOAT_MIN_NORMAL,
    T_INFINITY,
    Ray,
    cross,
    dot,
    is_normal,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    reflect,
    vec3,
)

# Note: tracer and renderer are NOT imported here to avoid circular imports.
# Import directly from src.beamburst.core.tracer or src.beamburst.core.renderer.

__all__ = [
    "Ray",
    "make_ray",
    "ray_at",
    "vec3",
    "dot",
    "cross",
    "length",
    "length_squared",
    "normalize",
    "reflect",
    "is_normal",
    "EPSILON",
    "T_INFINITY",
    "FLOAT_MIN_NORMAL",
]
