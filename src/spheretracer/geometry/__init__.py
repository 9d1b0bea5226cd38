"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with geometric ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) called from kernels:
    rec = intersect_sphere(ray, sphere)
"""

from .sphere import Intersection, Sphere, intersect_sphere, sphere_normal

__all__ = [
    "Sphere",
    "Intersection",
    "intersect_sphere",
    "sphere_normal",
]
