"""Geometry module for shape primitives.

This module provides the two primitive types and their intersection routines:

Components:
    sphere: Sphere primitive with ray-sphere intersection
    triangle: Triangle primitive with plane/barycentric intersection

All intersection routines are Taichi functions (@ti.func). They share one
shape:

    record = hit_shape(ray_origin, ray_direction, shape, t_max)

where ``t_max`` is the closest distance found so far. Hits at or beyond
``t_max``, or closer than EPSILON, are rejected, and nothing is mutated.
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_miss, make_sphere, sphere_normal
from .triangle import (
    Triangle,
    hit_triangle,
    make_triangle,
    triangle_centroid,
    triangle_normal,
)

__all__ = [
    "HitRecord",
    "make_miss",
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
    "Triangle",
    "hit_triangle",
    "make_triangle",
    "triangle_centroid",
    "triangle_normal",
]
