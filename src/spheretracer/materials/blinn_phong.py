"""Blinn-Phong material for local illumination.

The Blinn-Phong model splits the light reflected toward the viewer into a
diffuse part, which depends only on the angle between the surface normal and
the light, and a specular highlight, which uses the half vector between the
light and view directions:

    diffuse  = kd * max(n . l, 0)
    specular = ks * max(n . h, 0) ^ smoothness,   h = normalize(l + v)

The sum is filtered channel by channel by the light's intensity.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretracer.materials.blinn_phong import Material, blinn_phong, vec3
    >>>
    >>> @ti.kernel
    ... def shade() -> vec3:
    ...     mat = Material(
    ...         diffuse=vec3(0.8, 0.0, 0.0),
    ...         specular=vec3(0.2, 0.2, 0.2),
    ...         reflection=vec3(0.0, 0.0, 0.0),
    ...         smoothness=32.0,
    ...     )
    ...     n = vec3(0.0, 1.0, 0.0)
    ...     return blinn_phong(n, vec3(1.0, 1.0, 1.0), n, n, mat)
"""

import taichi as ti
import taichi.math as tm

from spheretracer.core.vector import dot, hadamard, normalize, scale

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class Material:
    """Blinn-Phong material parameters as seen by kernels.

    Attributes:
        diffuse: Diffuse reflectance (RGB).
        specular: Specular reflectance (RGB).
        reflection: Mirror reflectance (RGB).
        smoothness: Shininess exponent of the specular lobe.
    """

    diffuse: vec3
    specular: vec3
    reflection: vec3
    smoothness: ti.f32


@ti.func
def irradiance(direction: vec3, normal: vec3) -> ti.f32:
    """Cosine factor max(n . d, 0) for a unit direction."""
    return ti.max(dot(normal, direction), 0.0)


@ti.func
def diffuse_term(light_dir: vec3, normal: vec3, material: Material) -> vec3:
    """Lambertian part of the Blinn-Phong model."""
    return scale(material.diffuse, irradiance(light_dir, normal))


@ti.func
def specular_term(light_dir: vec3, view_dir: vec3, normal: vec3, material: Material) -> vec3:
    """Highlight part of the Blinn-Phong model, using the half vector."""
    half_vector = normalize(light_dir + view_dir)
    e = irradiance(half_vector, normal)
    return scale(material.specular, e**material.smoothness)


@ti.func
def blinn_phong(
    light_dir: vec3,
    intensity: vec3,
    view_dir: vec3,
    normal: vec3,
    material: Material,
) -> vec3:
    """Radiance reflected toward the viewer from one unoccluded light.

    Args:
        light_dir: Unit vector from the shaded point toward the light.
        intensity: Per-channel radiance of the light.
        view_dir: Unit vector from the shaded point toward the viewer.
        normal: Outward unit surface normal.
        material: Surface material.

    Returns:
        (diffuse + specular) filtered by the light intensity.
    """
    diff = diffuse_term(light_dir, normal, material)
    spec = specular_term(light_dir, view_dir, normal, material)
    return hadamard(diff + spec, intensity)
