"""BeamBurst: a Taichi-based Whitted-style ray tracer.

This package renders spheres and triangles lit by point lights, tracing one
ray per pixel with hard shadows and mirror reflections, using Taichi kernels
for the per-pixel work.

Subpackages:
    core: Vector algebra, the shading loop and the render driver
    geometry: Sphere and triangle intersection
    materials: Ambient/diffuse/reflect surface material
    scene: Scene storage, scene builder and the demo scene
    camera: Orthographic and pinhole primary ray generation
    preview: Image sink, colour conversion and Matplotlib preview
"""

__version__ = "0.1.0"
