"""Direct illumination from point lights with hard shadows.

For a shading point, each light is tested for visibility with a shadow ray
and, if visible, contributes its Blinn-Phong term. The point passed in is
expected to be already budged off the surface, so the shadow ray does not
re-hit the surface it starts on.
"""

import taichi as ti
import taichi.math as tm

from spheretracer.core.vector import make_ray, norm, normalize, sub
from spheretracer.materials.blinn_phong import Material, blinn_phong
from spheretracer.scene.intersection import (
    intersect_scene,
    light_intensity,
    light_origin,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def is_light_blocked(
    objects: ti.template(),
    num_objects: ti.i32,
    point: vec3,
    light_pos: vec3,
) -> ti.i32:
    """Test whether any object lies between a point and a light.

    Args:
        objects: The object table.
        num_objects: Number of rows in use.
        point: The (budged) point being shaded.
        light_pos: Position of the light.

    Returns:
        1 if the nearest hit toward the light is strictly closer than the
        light itself, 0 otherwise.
    """
    to_light = sub(light_pos, point)
    light_distance = norm(to_light)
    rec = intersect_scene(objects, num_objects, make_ray(point, normalize(to_light)))
    return rec.hit == 1 and rec.distance < light_distance


@ti.func
def direct_illumination(
    objects: ti.template(),
    lights: ti.template(),
    num_objects: ti.i32,
    num_lights: ti.i32,
    point: vec3,
    normal: vec3,
    view_dir: vec3,
    material: Material,
) -> vec3:
    """Sum the Blinn-Phong contribution of every unshadowed light.

    Args:
        objects: The object table.
        lights: The light table.
        num_objects: Number of object rows in use.
        num_lights: Number of light rows in use.
        point: The budged shading point.
        normal: Outward unit normal at the point.
        view_dir: Unit vector toward the viewer.
        material: Material of the surface.

    Returns:
        The total local illumination (RGB, unclamped).
    """
    illum = vec3(0.0, 0.0, 0.0)
    for i in range(num_lights):
        pos = light_origin(lights, i)
        if not is_light_blocked(objects, num_objects, point, pos):
            light_dir = normalize(sub(pos, point))
            illum += blinn_phong(light_dir, light_intensity(lights, i), view_dir, normal, material)
    return illum
