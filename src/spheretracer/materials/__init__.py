"""Material models.

Components:
    blinn_phong: Diffuse plus half-vector specular local illumination
"""

from .blinn_phong import (
    Material,
    blinn_phong,
    diffuse_term,
    irradiance,
    specular_term,
)

__all__ = [
    "Material",
    "blinn_phong",
    "diffuse_term",
    "specular_term",
    "irradiance",
]
