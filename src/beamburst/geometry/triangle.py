"""Triangle primitive with plane/barycentric ray intersection.

A triangle is defined by three vertices v0, v1, v2. Intersection is a
two-step test:

1. Intersect the ray with the plane through the triangle. With edges
   e1 = v1 - v0, e2 = v2 - v0 and plane normal n = e1 x e2, the plane is
   dot(n, P) + D = 0 where D = -dot(v0, n), and the ray distance is

       time = -(D + dot(n, origin)) / dot(n, direction)

   A denominator that is zero, subnormal or non-finite means the ray runs
   parallel to the plane.

2. Express the plane hit relative to v0 as beta * e1 + gamma * e2 by solving
   the 2x2 normal equations

       | e1.e1  e1.e2 | |beta |   | e1.ep |
       | e1.e2  e2.e2 | |gamma| = | e2.ep |

   and accept when beta, gamma and beta + gamma all lie in [0, 1], i.e. the
   point is inside the triangle or on its boundary.

Degenerate triangles (collinear vertices) fail one of the two normality
checks and never report a hit.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.beamburst.geometry.triangle import Triangle, hit_triangle
    >>> tri = Triangle(
    ...     v0=ti.math.vec3(0, 0, 0),
    ...     v1=ti.math.vec3(1, 0, 0),
    ...     v2=ti.math.vec3(0, 1, 0),
    ... )
    >>> # Use hit_triangle within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.beamburst.core.ray import EPSILON, cross, dot, is_normal, normalize

from .sphere import HitRecord, make_miss

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Triangle:
    """A triangle defined by three vertices.

    The vertex order determines the direction of the plane normal
    (e1 x e2, right-hand rule) and of the shading normal.

    Attributes:
        v0: First vertex (vec3).
        v1: Second vertex (vec3).
        v2: Third vertex (vec3).
    """

    v0: vec3
    v1: vec3
    v2: vec3


@ti.func
def hit_triangle(
    ray_origin: vec3,
    ray_direction: vec3,
    triangle: Triangle,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-triangle intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        triangle: The triangle to test.
        t_max: The closest distance found so far; only strictly nearer hits
            are accepted.

    Returns:
        A HitRecord with the accepted distance, or a miss.
    """
    e1 = triangle.v1 - triangle.v0
    e2 = triangle.v2 - triangle.v0
    n = cross(e1, e2)
    d = -dot(triangle.v0, n)
    denominator = dot(n, ray_direction)

    result = make_miss()

    if is_normal(denominator):
        time = -(d + dot(n, ray_origin)) / denominator

        # Negative distances (ray travelling away) fail the EPSILON bound too
        if time > EPSILON and time < t_max:
            ep = (ray_origin + time * ray_direction) - triangle.v0
            d11 = dot(e1, e1)
            d12 = dot(e1, e2)
            d22 = dot(e2, e2)
            d1p = dot(e1, ep)
            d2p = dot(e2, ep)
            det = d11 * d22 - d12 * d12

            if is_normal(det):
                beta = (d22 * d1p - d12 * d2p) / det
                gamma = (d11 * d2p - d12 * d1p) / det
                bg = beta + gamma
                if (
                    beta >= 0.0
                    and beta <= 1.0
                    and gamma >= 0.0
                    and gamma <= 1.0
                    and bg >= 0.0
                    and bg <= 1.0
                ):
                    result = HitRecord(hit=1, t=time)

    return result


@ti.func
def triangle_normal(triangle: Triangle, point: vec3) -> vec3:
    """Shading normal at a point on the triangle.

    Computed as normalize((point - v0) x (v2 - v0)). The result follows the
    vertex winding and is not flipped toward the incoming ray.
    """
    return normalize(cross(point - triangle.v0, triangle.v2 - triangle.v0))


@ti.func
def triangle_centroid(triangle: Triangle) -> vec3:
    """Average of the three vertices."""
    return (triangle.v0 + triangle.v1 + triangle.v2) / 3.0


@ti.func
def make_triangle(v0: vec3, v1: vec3, v2: vec3) -> Triangle:
    """Create a triangle within a Taichi kernel."""
    return Triangle(v0=v0, v1=v1, v2=v2)
