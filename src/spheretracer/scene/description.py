"""Host-side scene description.

A scene is a plain immutable value: camera position, background gradient and
ordered tuples of lights and objects. It is built by the caller, never loaded
from a file, and passed into the renderer, which packs it into device tables
for the duration of one render (see spheretracer.scene.intersection).

Vectors are tuples of three floats. They are used as points (centers, light
positions, camera), directions, and linear RGB colors (reflectances, light
intensities, gradient ends).

Example:
    >>> from spheretracer.scene.description import (
    ...     Gradient, Light, MaterialInfo, Scene, SceneObject, SphereInfo
    ... )
    >>> red = MaterialInfo(
    ...     diffuse=(0.8, 0.0, 0.0),
    ...     specular=(0.15, 0.15, 0.15),
    ...     reflection=(0.0, 0.0, 0.0),
    ...     smoothness=32.0,
    ... )
    >>> scene = Scene(
    ...     camera=(0.0, 0.0, 0.0),
    ...     background=Gradient(start=(0.7, 0.8, 1.0), end=(0.2, 0.3, 1.0)),
    ...     lights=(Light(origin=(0.0, 5.0, 0.0), intensity=(1.0, 1.0, 1.0)),),
    ...     objects=(SceneObject(SphereInfo((0.0, 1.0, 5.0), 1.0), red),),
    ... )
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

Vector3 = tuple[float, float, float]


def _as_vector(value: Iterable[float], name: str) -> Vector3:
    """Convert any 3-element iterable to a tuple of floats."""
    components = tuple(float(c) for c in value)
    if len(components) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(components)}")
    return components  # type: ignore[return-value]


@dataclass(frozen=True)
class SphereInfo:
    """Geometry of a sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (must be positive).
    """

    center: Vector3
    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_vector(self.center, "center"))
        object.__setattr__(self, "radius", float(self.radius))
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")


@dataclass(frozen=True)
class MaterialInfo:
    """Blinn-Phong surface parameters.

    Channel values are per-channel reflectances and are meant to lie in
    [0, 1]; this is not enforced.

    Attributes:
        diffuse: Diffuse reflectance.
        specular: Specular reflectance.
        reflection: Mirror reflectance applied to the reflected radiance.
        smoothness: Phong shininess exponent (must be positive). Higher
            values give a tighter highlight.
    """

    diffuse: Vector3
    specular: Vector3
    reflection: Vector3
    smoothness: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "diffuse", _as_vector(self.diffuse, "diffuse"))
        object.__setattr__(self, "specular", _as_vector(self.specular, "specular"))
        object.__setattr__(self, "reflection", _as_vector(self.reflection, "reflection"))
        object.__setattr__(self, "smoothness", float(self.smoothness))
        if self.smoothness <= 0.0:
            raise ValueError(f"Material smoothness must be positive, got {self.smoothness}")


@dataclass(frozen=True)
class SceneObject:
    """A sphere together with its material."""

    sphere: SphereInfo
    material: MaterialInfo


@dataclass(frozen=True)
class Light:
    """A point light.

    Attributes:
        origin: Position of the light.
        intensity: Per-channel radiance of the light.
    """

    origin: Vector3
    intensity: Vector3

    def __post_init__(self) -> None:
        object.__setattr__(self, "origin", _as_vector(self.origin, "origin"))
        object.__setattr__(self, "intensity", _as_vector(self.intensity, "intensity"))


@dataclass(frozen=True)
class Gradient:
    """Two colors blended linearly to produce the sky color."""

    start: Vector3
    end: Vector3

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", _as_vector(self.start, "start"))
        object.__setattr__(self, "end", _as_vector(self.end, "end"))

    def at(self, x: float) -> Vector3:
        """Return start * (1 - x) + end * x."""
        return tuple(  # type: ignore[return-value]
            s * (1.0 - x) + e * x for s, e in zip(self.start, self.end)
        )


@dataclass(frozen=True)
class Scene:
    """A complete, immutable scene.

    Attributes:
        camera: Camera position. The camera looks down +z; directions are
            derived from the screen mapping.
        background: Sky gradient returned for rays that escape.
        lights: Point lights, in order.
        objects: Objects, in order. Order only matters for ties between
            equally distant hits, where the first object wins.
    """

    camera: Vector3
    background: Gradient
    lights: tuple[Light, ...] = field(default_factory=tuple)
    objects: tuple[SceneObject, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "camera", _as_vector(self.camera, "camera"))
        object.__setattr__(self, "lights", tuple(self.lights))
        object.__setattr__(self, "objects", tuple(self.objects))
