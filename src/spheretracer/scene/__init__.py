"""Scene module for scene description and ray-scene queries.

Components:
    description: Immutable host-side scene (spheres, materials, lights, sky)
    intersection: Packing into device tables and nearest-hit queries
    default: The stock demo scene
"""

from .default import DefaultSceneParams, create_default_scene
from .description import (
    Gradient,
    Light,
    MaterialInfo,
    Scene,
    SceneObject,
    SphereInfo,
)
from .intersection import (
    PackedScene,
    SceneInfo,
    SceneIntersection,
    intersect_scene,
    nearest_object,
    pack_scene,
)

__all__ = [
    # Description module
    "Scene",
    "SceneObject",
    "SphereInfo",
    "MaterialInfo",
    "Light",
    "Gradient",
    # Intersection module
    "PackedScene",
    "SceneInfo",
    "SceneIntersection",
    "pack_scene",
    "intersect_scene",
    "nearest_object",
    # Default scene
    "DefaultSceneParams",
    "create_default_scene",
]
