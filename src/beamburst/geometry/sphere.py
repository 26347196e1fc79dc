"""Sphere primitive with ray-sphere intersection.

The intersection works from the vector between the ray origin and the sphere
centre, assuming a unit-length ray direction:

    h = center - origin
    m = dot(h, direction)          (distance to the closest approach)
    g = m^2 - dot(h, h) + radius^2 (squared half-chord)

A negative g means the ray misses. Otherwise the two candidate distances are
m - sqrt(g) and m + sqrt(g); the nearer one that lies strictly between
EPSILON and the caller's current best distance wins.

Intersection does not mutate anything: callers fold over primitives and pass
the best distance found so far as ``t_max``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.beamburst.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 10), radius=2.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.beamburst.core.ray import EPSILON, dot, normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Result of a primitive intersection test.

    Attributes:
        hit: 1 if an acceptable intersection was found, 0 otherwise.
        t: Distance along the ray to the intersection. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32


@ti.func
def make_miss() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(hit=0, t=0.0)


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test.
        t_max: The closest distance found so far; only strictly nearer hits
            are accepted.

    Returns:
        A HitRecord with the accepted distance, or a miss.
    """
    h = sphere.center - ray_origin
    m = dot(h, ray_direction)
    g = m * m - dot(h, h) + sphere.radius * sphere.radius

    result = make_miss()

    if g >= 0.0:
        s = ti.sqrt(g)
        t0 = m - s
        t1 = m + s

        if t0 > EPSILON and t0 < t_max:
            result = HitRecord(hit=1, t=t0)
        elif t1 > EPSILON and t1 < t_max:
            # Origin is inside the sphere (or the near root is behind it)
            result = HitRecord(hit=1, t=t1)

    return result


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of the sphere at a surface point."""
    return normalize(point - sphere.center)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere within a Taichi kernel."""
    return Sphere(center=center, radius=radius)
