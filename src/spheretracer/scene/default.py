"""Default demo scene: four spheres on a ground sphere under two lights.

The scene consists of:
- Two small mirror-like white spheres, one far back on the left and one on
  the right
- A red diffuse sphere in front
- A blue glossy sphere behind it
- A huge white sphere acting as the ground plane
- A warm light near the scene and a bright distant light up and behind
- A pale blue sky gradient

The camera sits two units above the ground looking down +z.

Example:
    >>> from spheretracer.scene.default import create_default_scene
    >>> scene = create_default_scene()
    >>> len(scene.objects), len(scene.lights)
    (5, 2)
"""

from dataclasses import dataclass

from spheretracer.scene.description import (
    Gradient,
    Light,
    MaterialInfo,
    Scene,
    SceneObject,
    SphereInfo,
)

# Radius of the sphere standing in for the ground; its top is at y = 0
GROUND_RADIUS = 10000.0

CHROME = MaterialInfo(
    diffuse=(0.80, 0.80, 0.80),
    specular=(1.00, 1.00, 1.00),
    reflection=(0.30, 0.30, 0.30),
    smoothness=1024.0,
)
RED_PLASTIC = MaterialInfo(
    diffuse=(0.80, 0.00, 0.00),
    specular=(0.15, 0.15, 0.15),
    reflection=(0.00, 0.00, 0.00),
    smoothness=32.0,
)
BLUE_GLOSS = MaterialInfo(
    diffuse=(0.00, 0.20, 0.80),
    specular=(0.30, 0.30, 0.30),
    reflection=(0.05, 0.05, 0.05),
    smoothness=128.0,
)
GROUND = MaterialInfo(
    diffuse=(1.00, 1.00, 1.00),
    specular=(0.00, 0.00, 0.00),
    reflection=(0.00, 0.00, 0.00),
    smoothness=32.0,
)


@dataclass(frozen=True)
class DefaultSceneParams:
    """Parameters for customizing the default scene.

    Attributes:
        camera: Camera position.
        sky_start: Sky color straight ahead (|direction.y| = 0).
        sky_end: Sky color straight up or down (|direction.y| = 1).
        key_light_intensity: Radiance of the near light.
        fill_light_intensity: Radiance of the distant light.
    """

    camera: tuple[float, float, float] = (0.0, 2.0, 0.0)
    sky_start: tuple[float, float, float] = (0.7, 0.8, 1.0)
    sky_end: tuple[float, float, float] = (0.2, 0.3, 1.0)
    key_light_intensity: tuple[float, float, float] = (0.3, 0.3, 0.2)
    fill_light_intensity: tuple[float, float, float] = (0.6, 0.6, 0.6)


def create_default_scene(params: DefaultSceneParams | None = None) -> Scene:
    """Create the default demo scene.

    Args:
        params: Optional overrides for camera, sky and light intensities.

    Returns:
        An immutable Scene.
    """
    if params is None:
        params = DefaultSceneParams()

    lights = (
        Light(origin=(8.0, 6.0, 0.0), intensity=params.key_light_intensity),
        Light(origin=(-5000.0, 10000.0, -10000.0), intensity=params.fill_light_intensity),
    )

    objects = (
        SceneObject(SphereInfo(center=(-4.5, 0.8, 25.0), radius=0.8), CHROME),
        SceneObject(SphereInfo(center=(2.5, 0.8, 15.0), radius=0.8), CHROME),
        SceneObject(SphereInfo(center=(-1.0, 1.0, 14.0), radius=1.0), RED_PLASTIC),
        SceneObject(SphereInfo(center=(0.0, 1.5, 17.0), radius=1.5), BLUE_GLOSS),
        SceneObject(SphereInfo(center=(0.0, -GROUND_RADIUS, 0.0), radius=GROUND_RADIUS), GROUND),
    )

    return Scene(
        camera=params.camera,
        background=Gradient(start=params.sky_start, end=params.sky_end),
        lights=lights,
        objects=objects,
    )
