"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    vector: Ray data structure and vector utilities
    lighting: Shadow rays and direct illumination from point lights
    integrator: Whitted-style recursive reflection
    render: Supersampled image assembly and the render() entry point

All per-ray work runs in Taichi functions inlined into one rendering kernel.
"""

from .vector import (
    BUDGE_EPSILON,
    Ray,
    add,
    budge,
    divide,
    dot,
    hadamard,
    lerp,
    make_ray,
    norm,
    normalize,
    ray_at,
    reflect,
    scale,
    sub,
    vec3,
)

# Note: integrator and render are NOT imported here to avoid circular imports.
# Import directly from spheretracer.core.integrator or spheretracer.core.render.

__all__ = [
    "Ray",
    "make_ray",
    "ray_at",
    "vec3",
    "add",
    "sub",
    "scale",
    "divide",
    "hadamard",
    "dot",
    "norm",
    "normalize",
    "reflect",
    "budge",
    "lerp",
    "BUDGE_EPSILON",
]
