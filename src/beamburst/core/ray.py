"""Ray data structure and vector algebra for the ray tracer.

This module provides the Ray dataclass, the numeric tolerances shared by all
intersection routines, and the small set of vector operations the tracer
needs. Elementwise addition, subtraction and multiplication (including scalar
multiplication in either order) come directly from ``taichi.math.vec3``; the
functions below cover the geometric operations.

All operations are pure and total over finite inputs. In particular,
``normalize`` of a zero-length vector returns the zero vector instead of
dividing by zero.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = make_ray(origin, direction)  # inside a Taichi kernel
    >>> point = ray_at(ray, 5.0)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# =============================================================================
# Numeric Tolerances
# =============================================================================

# Single-precision machine epsilon scaled up; rejects hits this close to a
# ray's origin so secondary rays do not re-hit the surface they leave.
EPSILON = float(np.finfo(np.float32).eps) * 250.0

# "No hit yet" distance for a fresh ray (largest finite f32).
T_INFINITY = float(np.finfo(np.float32).max)

# Smallest positive normal f32, used by is_normal().
FLOAT_MIN_NORMAL = float(np.finfo(np.float32).tiny)


@ti.dataclass
class Ray:
    """A ray with an origin, a direction and the closest hit distance so far.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Not normalized on
            construction, but intersection distances are only meaningful
            for unit directions.
        t: Distance to the nearest intersection found so far. Starts at
            T_INFINITY and only ever decreases.
    """

    origin: vec3
    direction: vec3
    t: ti.f32


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray with no intersection recorded yet."""
    return Ray(origin=origin, direction=direction, t=T_INFINITY)


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector."""
    return dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Unlike ``taichi.math.normalize``, a zero-length input yields the zero
    vector rather than NaN components.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the direction of v, or the zero vector.
    """
    n = length(v)
    result = vec3(0.0, 0.0, 0.0)
    if n > 0.0:
        result = v / n
    return result


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident direction about a unit normal.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        incident - 2 * dot(incident, normal) * normal
    """
    return incident - 2.0 * dot(incident, normal) * normal


@ti.func
def is_normal(x: ti.f32) -> ti.i32:
    """Check that x is a finite, non-zero, non-subnormal float.

    NaN fails both comparisons, so it is rejected as well.
    """
    a = ti.abs(x)
    return a >= FLOAT_MIN_NORMAL and a <= T_INFINITY
