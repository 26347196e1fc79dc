"""Scene storage and scene-level ray queries.

Primitives of both kinds live in one ordered store, indexed by insertion
order. Each slot carries a kind tag and generic geometry slots whose meaning
depends on the tag:

    kind      v0        v1        v2        radius
    SPHERE    center    unused    unused    radius
    TRIANGLE  vertex 0  vertex 1  vertex 2  unused

plus the primitive's own material. Lights are stored alongside as positions
and colours.

The store is written from Python while the scene is built and only read by
kernels afterwards. There is no acceleration structure: every query scans all
primitives in insertion order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.beamburst.scene.intersection import (
    ...     add_sphere_primitive, add_light, intersect_scene, clear_scene
    ... )
    >>> clear_scene()
    >>> add_sphere_primitive((0, 0, 10), 2.0, (1, 1, 1), 0.1, 0.9, 0.0)
    >>> add_light((0, 10, 0), (1, 1, 1))
    >>> # Use intersect_scene within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.beamburst.core.ray import T_INFINITY
from src.beamburst.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss, sphere_normal
from src.beamburst.geometry.triangle import Triangle, hit_triangle, triangle_normal
from src.beamburst.materials.material import SurfaceMaterial

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class PrimitiveKind(IntEnum):
    """Tag identifying how a primitive slot's geometry is interpreted."""

    SPHERE = 0
    TRIANGLE = 1


@ti.dataclass
class SceneHitRecord:
    """Closest intersection of a ray with the scene.

    Attributes:
        hit: 1 if any primitive was hit, 0 otherwise.
        t: Distance to the closest hit. Only valid if hit == 1.
        index: Index of the hit primitive. -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    index: ti.i32


# Maximum number of primitives and lights supported in the scene
MAX_PRIMITIVES = 1024
MAX_LIGHTS = 64

# Primitive storage: Structure of Arrays layout, one slot per primitive
primitive_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
primitive_v0 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
primitive_v1 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
primitive_v2 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
primitive_radii = ti.field(dtype=ti.f32, shape=MAX_PRIMITIVES)
num_primitives = ti.field(dtype=ti.i32, shape=())

# Per-primitive material
material_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
material_ambient = ti.field(dtype=ti.f32, shape=MAX_PRIMITIVES)
material_diffuse = ti.field(dtype=ti.f32, shape=MAX_PRIMITIVES)
material_reflect = ti.field(dtype=ti.f32, shape=MAX_PRIMITIVES)

# Point lights
light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives and lights from the scene.

    Resets the counts to zero. The field data is overwritten as new
    primitives and lights are added.
    """
    num_primitives[None] = 0
    num_lights[None] = 0


def _store_material(
    idx: int,
    color: tuple[float, float, float],
    ambient: float,
    diffuse: float,
    reflect: float,
) -> None:
    material_colors[idx] = [color[0], color[1], color[2]]
    material_ambient[idx] = ambient
    material_diffuse[idx] = diffuse
    material_reflect[idx] = reflect


def _next_primitive_slot() -> int:
    idx = int(num_primitives[None])
    if idx >= MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
    return idx


def add_sphere_primitive(
    center: tuple[float, float, float],
    radius: float,
    color: tuple[float, float, float],
    ambient: float,
    diffuse: float,
    reflect: float,
) -> int:
    """Add a sphere to the primitive store.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        color: Material base colour.
        ambient: Material ambient coefficient.
        diffuse: Material diffuse coefficient.
        reflect: Material reflectivity coefficient.

    Returns:
        The index of the added primitive.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    idx = _next_primitive_slot()
    primitive_kinds[idx] = int(PrimitiveKind.SPHERE)
    primitive_v0[idx] = [center[0], center[1], center[2]]
    primitive_v1[idx] = [0.0, 0.0, 0.0]
    primitive_v2[idx] = [0.0, 0.0, 0.0]
    primitive_radii[idx] = radius
    _store_material(idx, color, ambient, diffuse, reflect)
    num_primitives[None] = idx + 1
    return idx


def add_triangle_primitive(
    v0: tuple[float, float, float],
    v1: tuple[float, float, float],
    v2: tuple[float, float, float],
    color: tuple[float, float, float],
    ambient: float,
    diffuse: float,
    reflect: float,
) -> int:
    """Add a triangle to the primitive store.

    Args:
        v0: First vertex.
        v1: Second vertex.
        v2: Third vertex.
        color: Material base colour.
        ambient: Material ambient coefficient.
        diffuse: Material diffuse coefficient.
        reflect: Material reflectivity coefficient.

    Returns:
        The index of the added primitive.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    idx = _next_primitive_slot()
    primitive_kinds[idx] = int(PrimitiveKind.TRIANGLE)
    primitive_v0[idx] = [v0[0], v0[1], v0[2]]
    primitive_v1[idx] = [v1[0], v1[1], v1[2]]
    primitive_v2[idx] = [v2[0], v2[1], v2[2]]
    primitive_radii[idx] = 0.0
    _store_material(idx, color, ambient, diffuse, reflect)
    num_primitives[None] = idx + 1
    return idx


def add_light(position: tuple[float, float, float], color: tuple[float, float, float]) -> int:
    """Add a point light.

    Args:
        position: The light position.
        color: The light colour (RGB). No distance falloff is applied.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = int(num_lights[None])
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = [position[0], position[1], position[2]]
    light_colors[idx] = [color[0], color[1], color[2]]
    num_lights[None] = idx + 1
    return idx


def get_primitive_count() -> int:
    """Get the number of primitives in the scene."""
    return int(num_primitives[None])


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


# =============================================================================
# Per-primitive dispatch
# =============================================================================


@ti.func
def _sphere_at(i: ti.i32) -> Sphere:
    return Sphere(center=primitive_v0[i], radius=primitive_radii[i])


@ti.func
def _triangle_at(i: ti.i32) -> Triangle:
    return Triangle(v0=primitive_v0[i], v1=primitive_v1[i], v2=primitive_v2[i])


@ti.func
def hit_primitive(i: ti.i32, ray_origin: vec3, ray_direction: vec3, t_max: ti.f32) -> HitRecord:
    """Intersect a ray with primitive i, dispatching on its kind."""
    rec = make_miss()
    if primitive_kinds[i] == int(PrimitiveKind.SPHERE):
        rec = hit_sphere(ray_origin, ray_direction, _sphere_at(i), t_max)
    else:
        rec = hit_triangle(ray_origin, ray_direction, _triangle_at(i), t_max)
    return rec


@ti.func
def primitive_normal(i: ti.i32, point: vec3) -> vec3:
    """Surface normal of primitive i at a point on its surface."""
    n = vec3(0.0, 0.0, 0.0)
    if primitive_kinds[i] == int(PrimitiveKind.SPHERE):
        n = sphere_normal(_sphere_at(i), point)
    else:
        n = triangle_normal(_triangle_at(i), point)
    return n


@ti.func
def primitive_material(i: ti.i32) -> SurfaceMaterial:
    """Material owned by primitive i."""
    return SurfaceMaterial(
        color=material_colors[i],
        ambient=material_ambient[i],
        diffuse=material_diffuse[i],
        reflect=material_reflect[i],
    )


@ti.func
def get_light_position(i: ti.i32) -> vec3:
    """Position of light i."""
    return light_positions[i]


@ti.func
def get_light_color(i: ti.i32) -> vec3:
    """Colour of light i."""
    return light_colors[i]


# =============================================================================
# Scene queries
# =============================================================================


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the closest primitive hit by a ray.

    Scans all primitives in insertion order, passing the closest distance so
    far to each test so that only strictly nearer hits replace the current
    one.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        A SceneHitRecord for the closest hit, or a miss record.
    """
    closest_t = T_INFINITY
    result = SceneHitRecord(hit=0, t=0.0, index=-1)

    for i in range(num_primitives[None]):
        rec = hit_primitive(i, ray_origin, ray_direction, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = SceneHitRecord(hit=1, t=rec.t, index=i)

    return result


@ti.func
def is_occluded(ray_origin: vec3, ray_direction: vec3) -> ti.i32:
    """Test whether a shadow ray hits anything.

    Any intersection in front of the origin counts, including primitives
    beyond the light itself; occlusion is binary.

    Args:
        ray_origin: The (nudged) surface point.
        ray_direction: The unit direction toward the light.

    Returns:
        1 if any primitive was hit, 0 otherwise.
    """
    occluded = 0
    for i in range(num_primitives[None]):
        if occluded == 0:
            rec = hit_primitive(i, ray_origin, ray_direction, T_INFINITY)
            if rec.hit == 1:
                occluded = 1
    return occluded
