"""Materials module.

Components:
    material: The ambient/diffuse/reflect surface material, with a host-side
        dataclass for scene construction and a Taichi struct for kernels.
"""

from .material import (
    Material,
    SurfaceMaterial,
    ambient_term,
    diffuse_term,
    make_surface_material,
)

__all__ = [
    "Material",
    "SurfaceMaterial",
    "make_surface_material",
    "ambient_term",
    "diffuse_term",
]
