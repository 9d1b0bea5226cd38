"""Scene-level intersection testing over packed object tables.

The host-side Scene is packed into two float32 tables that kernels receive as
Taichi ndarrays, one row per object or light:

    objects: center.xyz | radius | diffuse.rgb | specular.rgb | reflection.rgb | smoothness
    lights:  origin.xyz | intensity.rgb

Passing the tables as kernel arguments keeps each render a function of its
inputs: there is no scene state stored in module-level fields, and a new scene
does not force kernel recompilation.

Taichi rejects empty arrays, so an empty object or light list is padded with
one zero row; the real counts are passed alongside.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.scene.default import create_default_scene
    >>> from spheretracer.scene.intersection import nearest_object
    >>> # Looking straight down from the camera hits the ground sphere (row 4)
    >>> nearest_object(create_default_scene(), (0.0, 2.0, 0.0), (0.0, -1.0, 0.0))
"""

import logging
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from spheretracer.core.vector import Ray, make_ray, normalize
from spheretracer.geometry.sphere import Sphere, intersect_sphere
from spheretracer.materials.blinn_phong import Material
from spheretracer.scene.description import Scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# =============================================================================
# Table Layout
# =============================================================================

OBJECT_CENTER = 0
OBJECT_RADIUS = 3
OBJECT_DIFFUSE = 4
OBJECT_SPECULAR = 7
OBJECT_REFLECTION = 10
OBJECT_SMOOTHNESS = 13
OBJECT_COLUMNS = 14

LIGHT_ORIGIN = 0
LIGHT_INTENSITY = 3
LIGHT_COLUMNS = 6

# Kernel argument types for the packed tables
ObjectTable = ti.types.ndarray(dtype=ti.f32, ndim=2)
LightTable = ti.types.ndarray(dtype=ti.f32, ndim=2)


@dataclass(frozen=True)
class PackedScene:
    """A scene laid out as contiguous device-ready tables.

    Attributes:
        objects: float32 array of shape (max(n, 1), OBJECT_COLUMNS).
        lights: float32 array of shape (max(m, 1), LIGHT_COLUMNS).
        num_objects: Number of real object rows.
        num_lights: Number of real light rows.
        camera: Camera position.
        sky_start: Background gradient color at x = 0.
        sky_end: Background gradient color at x = 1.
    """

    objects: npt.NDArray[np.float32]
    lights: npt.NDArray[np.float32]
    num_objects: int
    num_lights: int
    camera: tuple[float, float, float]
    sky_start: tuple[float, float, float]
    sky_end: tuple[float, float, float]


def pack_scene(scene: Scene) -> PackedScene:
    """Pack a Scene into object and light tables.

    Args:
        scene: The scene to pack.

    Returns:
        A PackedScene whose rows follow the scene's object and light order.
    """
    num_objects = len(scene.objects)
    num_lights = len(scene.lights)

    objects = np.zeros((max(num_objects, 1), OBJECT_COLUMNS), dtype=np.float32)
    for i, obj in enumerate(scene.objects):
        mat = obj.material
        objects[i, OBJECT_CENTER : OBJECT_CENTER + 3] = obj.sphere.center
        objects[i, OBJECT_RADIUS] = obj.sphere.radius
        objects[i, OBJECT_DIFFUSE : OBJECT_DIFFUSE + 3] = mat.diffuse
        objects[i, OBJECT_SPECULAR : OBJECT_SPECULAR + 3] = mat.specular
        objects[i, OBJECT_REFLECTION : OBJECT_REFLECTION + 3] = mat.reflection
        objects[i, OBJECT_SMOOTHNESS] = mat.smoothness

    lights = np.zeros((max(num_lights, 1), LIGHT_COLUMNS), dtype=np.float32)
    for i, light in enumerate(scene.lights):
        lights[i, LIGHT_ORIGIN : LIGHT_ORIGIN + 3] = light.origin
        lights[i, LIGHT_INTENSITY : LIGHT_INTENSITY + 3] = light.intensity

    logger.debug("Packed scene: %d objects, %d lights", num_objects, num_lights)

    return PackedScene(
        objects=objects,
        lights=lights,
        num_objects=num_objects,
        num_lights=num_lights,
        camera=scene.camera,
        sky_start=scene.background.start,
        sky_end=scene.background.end,
    )


# =============================================================================
# Device-side Records
# =============================================================================


@ti.dataclass
class SceneIntersection:
    """Nearest intersection of a ray with the whole scene.

    Attributes:
        hit: 1 if any object was hit, 0 otherwise.
        distance: Ray parameter of the nearest hit, +inf on a miss.
        point: The nearest hit point. Only valid if hit == 1.
        index: Row of the object hit in the object table, -1 on a miss.
    """

    hit: ti.i32
    distance: ti.f32
    point: vec3
    index: ti.i32


@ti.dataclass
class SceneInfo:
    """Per-render constants shared by every pixel.

    Attributes:
        camera: Camera position.
        sky_start: Background gradient color at x = 0.
        sky_end: Background gradient color at x = 1.
        num_objects: Number of rows in use in the object table.
        num_lights: Number of rows in use in the light table.
    """

    camera: vec3
    sky_start: vec3
    sky_end: vec3
    num_objects: ti.i32
    num_lights: ti.i32


# =============================================================================
# Table Access
# =============================================================================


@ti.func
def _row_vec3(table: ti.template(), row: ti.i32, column: ti.template()) -> vec3:
    """Read three consecutive columns of a table row as a vec3."""
    return vec3(table[row, column], table[row, column + 1], table[row, column + 2])


@ti.func
def object_sphere(objects: ti.template(), index: ti.i32) -> Sphere:
    """Build the Sphere stored in a row of the object table."""
    return Sphere(
        center=_row_vec3(objects, index, OBJECT_CENTER),
        radius=objects[index, OBJECT_RADIUS],
    )


@ti.func
def object_material(objects: ti.template(), index: ti.i32) -> Material:
    """Build the Material stored in a row of the object table."""
    return Material(
        diffuse=_row_vec3(objects, index, OBJECT_DIFFUSE),
        specular=_row_vec3(objects, index, OBJECT_SPECULAR),
        reflection=_row_vec3(objects, index, OBJECT_REFLECTION),
        smoothness=objects[index, OBJECT_SMOOTHNESS],
    )


@ti.func
def light_origin(lights: ti.template(), index: ti.i32) -> vec3:
    """Position of the light stored in a row of the light table."""
    return _row_vec3(lights, index, LIGHT_ORIGIN)


@ti.func
def light_intensity(lights: ti.template(), index: ti.i32) -> vec3:
    """Radiance of the light stored in a row of the light table."""
    return _row_vec3(lights, index, LIGHT_INTENSITY)


# =============================================================================
# Scene Queries
# =============================================================================


@ti.func
def intersect_scene(
    objects: ti.template(),
    num_objects: ti.i32,
    ray: Ray,
) -> SceneIntersection:
    """Find the nearest object hit by a ray.

    Tests every object in table order and keeps a hit only when it is
    strictly closer than the best so far, so the earliest object wins ties.
    There is no acceleration structure; the cost is linear in the number of
    objects.

    Args:
        objects: The object table.
        num_objects: Number of rows in use.
        ray: The ray to test. Its direction must be unit length.

    Returns:
        A SceneIntersection, with distance +inf and index -1 on a miss.
    """
    nearest_hit = 0
    nearest_t = tm.inf
    nearest_point = vec3(0.0, 0.0, 0.0)
    nearest_index = -1

    for i in range(num_objects):
        rec = intersect_sphere(ray, object_sphere(objects, i))
        if rec.hit == 1 and rec.distance < nearest_t:
            nearest_hit = 1
            nearest_t = rec.distance
            nearest_point = rec.point
            nearest_index = i

    return SceneIntersection(
        hit=nearest_hit,
        distance=nearest_t,
        point=nearest_point,
        index=nearest_index,
    )


@ti.kernel
def _nearest_object_kernel(
    objects: ObjectTable,
    num_objects: ti.i32,
    origin: vec3,
    direction: vec3,
    result: ti.types.ndarray(dtype=ti.f32, ndim=1),
):
    rec = intersect_scene(objects, num_objects, make_ray(origin, normalize(direction)))
    result[0] = ti.cast(rec.hit, ti.f32)
    result[1] = ti.cast(rec.index, ti.f32)
    result[2] = rec.distance


def nearest_object(
    scene: Scene,
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[int, float] | None:
    """Find the object a ray hits first, from Python.

    This launches one kernel and is meant for inspection and tests; the
    renderer calls intersect_scene directly inside its kernel.

    Args:
        scene: The scene to query.
        origin: Ray origin.
        direction: Ray direction (normalized before the query).

    Returns:
        (object_index, distance) of the nearest hit, or None on a miss.
    """
    packed = pack_scene(scene)
    result = np.zeros(3, dtype=np.float32)
    _nearest_object_kernel(
        packed.objects,
        packed.num_objects,
        vec3(*origin),
        vec3(*direction),
        result,
    )
    if result[0] == 0.0:
        return None
    return int(result[1]), float(result[2])
