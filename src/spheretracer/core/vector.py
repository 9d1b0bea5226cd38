"""Ray data structure and vector utilities for the Whitted-style ray tracer.

This module provides the Ray dataclass and the small set of vector operations
the renderer is built from. Every operation returns a new value; nothing is
modified in place. All functions are Taichi functions and run inside kernels.

Vectors play three roles: points, directions and linear RGB colors. Colors are
not clamped here; clamping only happens at the final output mapping.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.core.vector import make_ray, ray_at, vec3
    >>>
    >>> @ti.kernel
    ... def point_on_ray() -> vec3:
    ...     ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0))
    ...     return ray_at(ray, 5.0)  # (0, 0, 5)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Distance a shading point is pushed along its normal before casting
# secondary rays from it
BUDGE_EPSILON = 0.01


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Must be unit length;
            nothing downstream renormalizes it.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from an origin and a unit direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point ray.origin + t * ray.direction."""
    return ray.origin + t * ray.direction


# =============================================================================
# Vector Arithmetic
# =============================================================================


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    """Component-wise sum a + b."""
    return a + b


@ti.func
def sub(a: vec3, b: vec3) -> vec3:
    """Component-wise difference a - b."""
    return a - b


@ti.func
def scale(v: vec3, s: ti.f32) -> vec3:
    """Multiply every component of v by the scalar s."""
    return v * s


@ti.func
def divide(v: vec3, s: ti.f32) -> vec3:
    """Divide every component of v by the scalar s."""
    return v / s


@ti.func
def hadamard(a: vec3, b: vec3) -> vec3:
    """Element-wise (Hadamard) product.

    Used to filter one color by another, e.g. a light's radiance by a
    material's per-channel reflectance.
    """
    return vec3(a.x * b.x, a.y * b.y, a.z * b.z)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Dot product a . b."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def norm(v: vec3) -> ti.f32:
    """Euclidean length of v."""
    return ti.sqrt(dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale v to unit length.

    A zero-length input produces NaN/Inf components. Callers are expected to
    pass non-degenerate vectors (distinct points, non-zero directions).
    """
    return divide(v, norm(v))


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Mirror v about the normal n.

    Both vectors point away from the surface: v is the direction back toward
    the viewer, and the result is the outgoing mirror direction
    2 * n * dot(v, n) - v. n must be unit length.
    """
    return scale(n, 2.0 * dot(v, n)) - v


@ti.func
def budge(point: vec3, normal: vec3) -> vec3:
    """Nudge a surface point along its normal by BUDGE_EPSILON.

    Rays cast from the returned point do not immediately re-hit the surface
    they left due to floating-point round-off.
    """
    return add(point, scale(normal, BUDGE_EPSILON))


@ti.func
def lerp(start: vec3, end: vec3, x: ti.f32) -> vec3:
    """Linear interpolation start * (1 - x) + end * x."""
    return add(scale(start, 1.0 - x), scale(end, x))
