"""Scene module for scene storage and ray-scene queries.

Components:
    intersection: Tagged primitive store in Taichi fields and the closest-hit
        and shadow queries that scan it
    manager: Scene builder owning primitives and lights, with serialization
    demo: The hand-built demo scene

Scene data is organized for kernel access:
    - Structure-of-Arrays layout, one slot per primitive in insertion order
    - A kind tag per slot selecting sphere or triangle intersection
    - Per-primitive material fields next to the geometry
"""

from .demo import DEMO_HEIGHT, DEMO_MAX_DEPTH, DEMO_WIDTH, MATTE, MIRROR, create_demo_scene
from .intersection import (
    MAX_LIGHTS,
    MAX_PRIMITIVES,
    PrimitiveKind,
    SceneHitRecord,
    add_light,
    add_sphere_primitive,
    add_triangle_primitive,
    clear_scene,
    get_light_count,
    get_primitive_count,
    hit_primitive,
    intersect_scene,
    is_occluded,
    primitive_material,
    primitive_normal,
)
from .manager import (
    LightInfo,
    PrimitiveInfo,
    Scene,
    SceneConfig,
    SphereInfo,
    TriangleInfo,
)

__all__ = [
    # Intersection module
    "PrimitiveKind",
    "SceneHitRecord",
    "add_sphere_primitive",
    "add_triangle_primitive",
    "add_light",
    "clear_scene",
    "get_primitive_count",
    "get_light_count",
    "hit_primitive",
    "intersect_scene",
    "is_occluded",
    "primitive_material",
    "primitive_normal",
    "MAX_PRIMITIVES",
    "MAX_LIGHTS",
    # Manager module
    "Scene",
    "SceneConfig",
    "SphereInfo",
    "TriangleInfo",
    "LightInfo",
    "PrimitiveInfo",
    # Demo scene
    "create_demo_scene",
    "MIRROR",
    "MATTE",
    "DEMO_WIDTH",
    "DEMO_HEIGHT",
    "DEMO_MAX_DEPTH",
]
