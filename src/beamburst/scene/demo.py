"""Demo scene: two mirror spheres and a matte sphere over a matte floor.

The scene is viewed by the default orthographic camera, looking down +z from
z = -1000 with one world unit per pixel, so a 512x512 render covers
x, y in [-256, 255].

Layout:
- Two mirror spheres (radius 100) side by side below the centre
- One matte sphere (radius 100) above them
- A large matte floor triangle in the z = 0 plane
- Five coloured point lights: red and green to the sides, blue above,
  cyan below and yellow behind the spheres

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.beamburst.scene.demo import create_demo_scene
    >>> from src.beamburst.camera.projection import setup_camera
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
"""

from src.beamburst.camera.orthographic import OrthographicCamera
from src.beamburst.materials.material import Material
from src.beamburst.scene.manager import Scene

# Image size and bounce depth the demo is composed for
DEMO_WIDTH = 512
DEMO_HEIGHT = 512
DEMO_MAX_DEPTH = 10

MIRROR = Material(color=(0.9, 1.0, 0.9), ambient=0.01, diffuse=0.99, reflect=0.99)
MATTE = Material(color=(1.0, 0.8, 0.6), ambient=0.3, diffuse=0.7, reflect=0.2)


def create_demo_scene() -> tuple[Scene, OrthographicCamera]:
    """Create the demo scene and its camera.

    Returns:
        A tuple of (scene, camera). The scene is already written to the
        Taichi store; pass the camera to ``setup_camera`` before rendering.
    """
    scene = Scene()

    scene.add_light((-500.0, 0.0, 100.0), (1.0, 0.0, 0.0))
    scene.add_light((500.0, 0.0, 100.0), (0.0, 1.0, 0.0))
    scene.add_light((0.0, 500.0, -100.0), (0.0, 0.0, 1.0))
    scene.add_light((0.0, -500.0, -100.0), (0.0, 1.0, 1.0))
    scene.add_light((0.0, 0.0, 100.0), (1.0, 1.0, 0.0))

    scene.add_sphere((-87.0, -50.0, 0.0), 100.0, MIRROR)
    scene.add_sphere((87.0, -50.0, 0.0), 100.0, MIRROR)
    scene.add_sphere((0.0, 100.0, 0.0), 100.0, MATTE)
    scene.add_triangle(
        [(-1000.0, -1000.0, 0.0), (1000.0, -1000.0, 0.0), (1000.0, 1000.0, 0.0)],
        MATTE,
    )

    return scene, OrthographicCamera()
