"""Whitted-style integrator: direct lighting plus recursive mirror reflection.

The radiance leaving a surface toward the viewer is defined recursively:

    L(ray, depth) = background(ray)                     if depth < 0 or miss
    L(ray, depth) = direct(hit) + R * L(reflected, depth - 1)   otherwise

where R is the material's mirror reflectance applied per channel and the
background is a gradient sampled at |direction.y|, a stylized sky rather than
a physical one.

Taichi functions cannot call themselves, so trace() unrolls the recursion
into a loop. Expanding the definition gives

    L = d0 + R0 * (d1 + R1 * (d2 + ... + Rk * background))

so the loop carries the product of reflectances seen so far and adds each
bounce's direct light scaled by it. When the ray escapes, or when the depth
budget is spent, the background in the current direction closes the sum.
At most depth + 1 surfaces are shaded; there is no Russian roulette.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.core.integrator import trace_ray
    >>> from spheretracer.scene.default import create_default_scene
    >>> trace_ray(create_default_scene(), (0.0, 2.0, 0.0), (0.0, 0.0, 1.0), depth=8)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from spheretracer.core.lighting import direct_illumination
from spheretracer.core.vector import Ray, budge, hadamard, lerp, make_ray, normalize, reflect
from spheretracer.geometry.sphere import sphere_normal
from spheretracer.scene.description import Scene
from spheretracer.scene.intersection import (
    LightTable,
    ObjectTable,
    SceneInfo,
    intersect_scene,
    object_material,
    object_sphere,
    pack_scene,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# Default number of reflection bounces after the primary hit
MAX_DEPTH = 8


@ti.func
def background(info: SceneInfo, direction: vec3) -> vec3:
    """Sky color for an escaping ray: the gradient at |direction.y|."""
    return lerp(info.sky_start, info.sky_end, ti.abs(direction.y))


@ti.func
def trace(
    objects: ti.template(),
    lights: ti.template(),
    info: SceneInfo,
    ray: Ray,
    depth: ti.i32,
) -> vec3:
    """Compute the radiance arriving along a ray.

    Args:
        objects: The object table.
        lights: The light table.
        info: Per-render constants (sky gradient, table sizes).
        ray: The ray to follow. Its direction must be unit length.
        depth: Remaining reflection budget. A negative depth returns the
            background immediately.

    Returns:
        Linear RGB radiance, unclamped.
    """
    radiance = vec3(0.0, 0.0, 0.0)
    weight = vec3(1.0, 1.0, 1.0)
    ray_origin = ray.origin
    ray_dir = ray.direction

    # Active flag for path continuation
    active = 1

    for _ in range(depth + 1):
        if active == 1:
            rec = intersect_scene(objects, info.num_objects, make_ray(ray_origin, ray_dir))
            if rec.hit == 0:
                active = 0
            else:
                sphere = object_sphere(objects, rec.index)
                material = object_material(objects, rec.index)

                view = -ray_dir
                normal = sphere_normal(sphere, rec.point)
                point = budge(rec.point, normal)

                illum = direct_illumination(
                    objects,
                    lights,
                    info.num_objects,
                    info.num_lights,
                    point,
                    normal,
                    view,
                    material,
                )
                radiance += hadamard(illum, weight)
                weight = hadamard(weight, material.reflection)

                ray_origin = point
                ray_dir = reflect(view, normal)

    # The escaped ray, or the reflected ray left over once the budget is spent
    radiance += hadamard(background(info, ray_dir), weight)
    return radiance


@ti.kernel
def _trace_single(
    objects: ObjectTable,
    lights: LightTable,
    num_objects: ti.i32,
    num_lights: ti.i32,
    sky_start: vec3,
    sky_end: vec3,
    origin: vec3,
    direction: vec3,
    depth: ti.i32,
) -> vec3:
    info = SceneInfo(
        camera=origin,
        sky_start=sky_start,
        sky_end=sky_end,
        num_objects=num_objects,
        num_lights=num_lights,
    )
    return trace(objects, lights, info, make_ray(origin, normalize(direction)), depth)


def trace_ray(
    scene: Scene,
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = MAX_DEPTH,
) -> tuple[float, float, float]:
    """Trace a single ray through a scene from Python.

    This is a Python-callable function for testing and inspection. For
    rendering, use spheretracer.core.render.render(), which traces all
    pixels in parallel.

    Args:
        scene: The scene to trace against.
        origin: Ray origin.
        direction: Ray direction (normalized before tracing).
        depth: Reflection budget.

    Returns:
        Tuple of (R, G, B) linear radiance.
    """
    packed = pack_scene(scene)
    color = _trace_single(
        packed.objects,
        packed.lights,
        packed.num_objects,
        packed.num_lights,
        vec3(*packed.sky_start),
        vec3(*packed.sky_end),
        vec3(*origin),
        vec3(*direction),
        depth,
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def background_color(scene: Scene, direction: tuple[float, float, float]) -> np.ndarray:
    """Host-side sky color for a direction, matching the kernel's background()."""
    d = np.asarray(direction, dtype=np.float64)
    d = d / np.linalg.norm(d)
    return np.asarray(scene.background.at(abs(float(d[1]))), dtype=np.float64)
