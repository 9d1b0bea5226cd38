"""Sphere primitive with geometric ray-sphere intersection.

This module provides the Sphere and Intersection dataclasses and the
intersection routine from Real-Time Rendering (3rd ed., section 16.6.2).
Instead of solving the quadratic through its discriminant, the test works
with the projection of the origin-to-center vector onto the ray, which lets
it reject the two common miss cases before taking any square root:

1. The sphere lies behind the ray origin and the origin is outside it.
2. The ray line passes further from the center than the radius.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.geometry.sphere import Sphere, intersect_sphere, vec3
    >>> sphere = Sphere(center=vec3(0.0, 0.0, 5.0), radius=1.0)
    >>> # Use intersect_sphere(make_ray(origin, direction), sphere) within a kernel
"""

import taichi as ti
import taichi.math as tm

from spheretracer.core.vector import Ray, dot, normalize, ray_at, sub

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class Intersection:
    """Result of intersecting one ray with one sphere.

    Attributes:
        hit: 1 if the ray meets the sphere, 0 otherwise.
        distance: The ray parameter t of the hit. Only valid if hit == 1.
        point: origin + direction * distance. Only valid if hit == 1.
    """

    hit: ti.i32
    distance: ti.f32
    point: vec3


@ti.func
def intersect_sphere(ray: Ray, sphere: Sphere) -> Intersection:
    """Intersect a ray with a sphere using the geometric method.

    With l the vector from the ray origin to the center, p its projection on
    the (unit) ray direction and m2 the squared distance from the center to
    the ray line, the hit lies at p - q when the origin is outside the sphere
    and at p + q when it is inside, where q = sqrt(r^2 - m2).

    A ray starting inside the sphere always reports the exit point, so a ray
    from the center reports a hit at exactly the radius. Negative distances
    are not filtered out.

    Args:
        ray: The ray to test. Its direction must be unit length.
        sphere: The sphere to test against.

    Returns:
        An Intersection; check its hit field.
    """
    l = sub(sphere.center, ray.origin)
    p = dot(l, ray.direction)
    l2 = dot(l, l)
    r2 = sphere.radius * sphere.radius

    behind = p < 0.0
    outside = l2 > r2

    # Initialize result fields (Taichi requires outer-scope declaration)
    did_hit = 0
    hit_t = tm.inf
    hit_point = vec3(0.0, 0.0, 0.0)

    if not (behind and outside):
        m2 = l2 - p * p
        if m2 <= r2:
            q = ti.sqrt(r2 - m2)
            t = ti.select(outside, p - q, p + q)
            did_hit = 1
            hit_t = t
            hit_point = ray_at(ray, t)

    return Intersection(hit=did_hit, distance=hit_t, point=hit_point)


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of the sphere at a point on its surface."""
    return normalize(sub(point, sphere.center))
