"""Ambient/diffuse/reflect surface material.

Every primitive owns one material made of a base colour and three independent
scalar coefficients:

    ambient:  constant base illumination, applied at every hit
    diffuse:  Lambertian response to each unoccluded point light
    reflect:  fraction of the current intensity carried into the mirror bounce

Colours are conceptually in [0, 1] per channel but are neither clamped nor
normalized here; the coefficients carry no energy-conservation constraint.

The host-side ``Material`` is what scene code builds; ``SurfaceMaterial`` is
the Taichi struct the tracer reads inside kernels.

Example:
    >>> from src.beamburst.materials.material import Material
    >>> matte = Material(color=(1.0, 0.8, 0.6), ambient=0.3, diffuse=0.7, reflect=0.2)
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Material:
    """Surface material as supplied by scene construction code.

    Attributes:
        color: Base colour as (R, G, B).
        ambient: Ambient coefficient.
        diffuse: Diffuse coefficient.
        reflect: Reflectivity coefficient.
    """

    color: tuple[float, float, float]
    ambient: float = 0.0
    diffuse: float = 0.0
    reflect: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Export the material as a JSON-friendly dictionary."""
        return {
            "color": list(self.color),
            "ambient": self.ambient,
            "diffuse": self.diffuse,
            "reflect": self.reflect,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Material":
        """Build a material from a dictionary produced by ``to_dict``.

        Raises:
            KeyError: If ``color`` is missing.
            ValueError: If ``color`` does not have three components.
        """
        color_list = data["color"]
        if len(color_list) != 3:
            raise ValueError(f"Material color must have 3 components, got {len(color_list)}")
        return cls(
            color=(float(color_list[0]), float(color_list[1]), float(color_list[2])),
            ambient=float(data.get("ambient", 0.0)),
            diffuse=float(data.get("diffuse", 0.0)),
            reflect=float(data.get("reflect", 0.0)),
        )


@ti.dataclass
class SurfaceMaterial:
    """Kernel-side material properties.

    Attributes:
        color: Base colour (RGB).
        ambient: Ambient coefficient.
        diffuse: Diffuse coefficient.
        reflect: Reflectivity coefficient.
    """

    color: vec3
    ambient: ti.f32
    diffuse: ti.f32
    reflect: ti.f32


@ti.func
def make_surface_material(
    color: vec3, ambient: ti.f32, diffuse: ti.f32, reflect: ti.f32
) -> SurfaceMaterial:
    """Create a SurfaceMaterial within a Taichi kernel."""
    return SurfaceMaterial(color=color, ambient=ambient, diffuse=diffuse, reflect=reflect)


@ti.func
def ambient_term(intensity: ti.f32, material: SurfaceMaterial) -> vec3:
    """Ambient contribution: intensity * ambient * color."""
    return intensity * material.ambient * material.color


@ti.func
def diffuse_term(
    intensity: ti.f32,
    material: SurfaceMaterial,
    cos_theta: ti.f32,
    light_color: vec3,
) -> vec3:
    """Diffuse contribution of one unoccluded light.

    The light and surface colours are combined channel by channel, so a red
    light on a green surface contributes nothing.

    Args:
        intensity: The current bounce intensity.
        material: The surface material at the hit.
        cos_theta: dot(normal, light_direction), assumed positive.
        light_color: The light's RGB colour.

    Returns:
        intensity * diffuse * cos_theta * light_color * color
    """
    return intensity * material.diffuse * cos_theta * light_color * material.color
