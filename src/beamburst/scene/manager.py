"""Scene builder that owns primitives and lights.

The Scene class is the host-side owner of everything the tracer renders. It
keeps an ordered record of every primitive (sphere or triangle, each with its
own material) and every light, and mirrors them into the Taichi store in
``scene.intersection`` as they are added.

Primitives and lights are added while the scene is being set up and are never
changed afterwards; the ``primitives`` and ``lights`` properties hand out
read-only tuples in insertion order.

Because the Taichi store is module-level, there is one active scene at a time:
constructing a Scene (or calling ``clear``) resets the store.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.beamburst.materials.material import Material
    >>> from src.beamburst.scene.manager import Scene
    >>> scene = Scene()
    >>> matte = Material(color=(1.0, 0.8, 0.6), ambient=0.3, diffuse=0.7, reflect=0.2)
    >>> scene.add_sphere((0, 100, 0), 100.0, matte)
    >>> scene.add_light((0, 0, 100), (1, 1, 0))
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from src.beamburst.materials.material import Material
from src.beamburst.scene.intersection import (
    MAX_LIGHTS,
    MAX_PRIMITIVES,
    PrimitiveKind,
    add_light,
    add_sphere_primitive,
    add_triangle_primitive,
    clear_scene,
    get_light_count,
    get_primitive_count,
)

Vec3Tuple = tuple[float, float, float]


def _as_vec3(values: Sequence[float], name: str) -> Vec3Tuple:
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


@dataclass(frozen=True)
class SphereInfo:
    """A sphere in the scene.

    Attributes:
        index: The primitive index in the scene store.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material: The material owned by the sphere.
    """

    index: int
    center: Vec3Tuple
    radius: float
    material: Material

    @property
    def kind(self) -> PrimitiveKind:
        return PrimitiveKind.SPHERE


@dataclass(frozen=True)
class TriangleInfo:
    """A triangle in the scene.

    Attributes:
        index: The primitive index in the scene store.
        vertices: The three vertices, in winding order.
        material: The material owned by the triangle.
    """

    index: int
    vertices: tuple[Vec3Tuple, Vec3Tuple, Vec3Tuple]
    material: Material

    @property
    def kind(self) -> PrimitiveKind:
        return PrimitiveKind.TRIANGLE


PrimitiveInfo = SphereInfo | TriangleInfo


@dataclass(frozen=True)
class LightInfo:
    """A point light in the scene.

    Attributes:
        index: The light index in the scene store.
        position: The light position.
        color: The light colour (RGB).
    """

    index: int
    position: Vec3Tuple
    color: Vec3Tuple


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        primitives: List of primitive configurations, in insertion order.
            Each has a ``type`` of "sphere" or "triangle" and an inline
            ``material``.
        lights: List of light configurations.
    """

    primitives: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


class Scene:
    """Owner of all primitives and lights for a render.

    Attributes:
        primitives: Read-only tuple of SphereInfo/TriangleInfo in insertion order.
        lights: Read-only tuple of LightInfo in insertion order.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self._primitives: list[PrimitiveInfo] = []
        self._lights: list[LightInfo] = []
        clear_scene()

    def clear(self) -> None:
        """Remove all primitives and lights, including the Taichi store."""
        clear_scene()
        self._primitives.clear()
        self._lights.clear()

    # =========================================================================
    # Scene Construction
    # =========================================================================

    def add_sphere(
        self,
        center: Sequence[float],
        radius: float,
        material: Material,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere.
            material: The material the sphere owns.

        Returns:
            The primitive index of the added sphere.

        Raises:
            ValueError: If the radius is not positive or center is not 3D.
            RuntimeError: If the maximum number of primitives is exceeded.
        """
        if not radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        center_vec = _as_vec3(center, "center")

        index = add_sphere_primitive(
            center_vec,
            float(radius),
            material.color,
            material.ambient,
            material.diffuse,
            material.reflect,
        )
        self._primitives.append(
            SphereInfo(index=index, center=center_vec, radius=float(radius), material=material)
        )
        return index

    def add_triangle(
        self,
        vertices: Sequence[Sequence[float]],
        material: Material,
    ) -> int:
        """Add a triangle to the scene.

        Degenerate triangles are accepted; they simply never intersect.

        Args:
            vertices: Exactly three (x, y, z) vertices. Their order sets the
                direction of the shading normal.
            material: The material the triangle owns.

        Returns:
            The primitive index of the added triangle.

        Raises:
            ValueError: If there are not exactly three 3D vertices.
            RuntimeError: If the maximum number of primitives is exceeded.
        """
        if len(vertices) != 3:
            raise ValueError(f"Triangle needs exactly 3 vertices, got {len(vertices)}")
        v0 = _as_vec3(vertices[0], "vertex 0")
        v1 = _as_vec3(vertices[1], "vertex 1")
        v2 = _as_vec3(vertices[2], "vertex 2")

        index = add_triangle_primitive(
            v0,
            v1,
            v2,
            material.color,
            material.ambient,
            material.diffuse,
            material.reflect,
        )
        self._primitives.append(TriangleInfo(index=index, vertices=(v0, v1, v2), material=material))
        return index

    def add_light(self, position: Sequence[float], color: Sequence[float]) -> int:
        """Add a point light to the scene.

        Args:
            position: The light position as (x, y, z).
            color: The light colour as (R, G, B).

        Returns:
            The index of the added light.

        Raises:
            ValueError: If position or color is not 3D.
            RuntimeError: If the maximum number of lights is exceeded.
        """
        position_vec = _as_vec3(position, "position")
        color_vec = _as_vec3(color, "color")
        index = add_light(position_vec, color_vec)
        self._lights.append(LightInfo(index=index, position=position_vec, color=color_vec))
        return index

    # =========================================================================
    # Read-only Access
    # =========================================================================

    @property
    def primitives(self) -> tuple[PrimitiveInfo, ...]:
        return tuple(self._primitives)

    @property
    def lights(self) -> tuple[LightInfo, ...]:
        return tuple(self._lights)

    def get_primitive_count(self) -> int:
        """Get the number of primitives in the Taichi store."""
        return get_primitive_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the Taichi store."""
        return get_light_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()

        for prim in self._primitives:
            if isinstance(prim, SphereInfo):
                config.primitives.append(
                    {
                        "type": "sphere",
                        "center": list(prim.center),
                        "radius": prim.radius,
                        "material": prim.material.to_dict(),
                    }
                )
            else:
                config.primitives.append(
                    {
                        "type": "triangle",
                        "vertices": [list(v) for v in prim.vertices],
                        "material": prim.material.to_dict(),
                    }
                )

        for light in self._lights:
            config.lights.append({"position": list(light.position), "color": list(light.color)})

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene first.

        Args:
            config: The scene configuration to load.

        Raises:
            KeyError: If a required key is missing.
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        for prim_config in config.primitives:
            prim_type = prim_config.get("type", "").lower()
            material = Material.from_dict(prim_config["material"])
            if prim_type == "sphere":
                self.add_sphere(prim_config["center"], prim_config["radius"], material)
            elif prim_type == "triangle":
                self.add_triangle(prim_config["vertices"], material)
            else:
                raise ValueError(f"Unknown primitive type: {prim_type}")

        for light_config in config.lights:
            self.add_light(light_config["position"], light_config.get("color", [1.0, 1.0, 1.0]))

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {"primitives": config.primitives, "lights": config.lights}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary with 'primitives' and 'lights' keys."""
        config = SceneConfig(
            primitives=data.get("primitives", []),
            lights=data.get("lights", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_primitives() -> int:
        """Get the maximum number of primitives supported."""
        return MAX_PRIMITIVES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS
