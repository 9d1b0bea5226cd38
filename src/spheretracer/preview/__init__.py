"""Preview and export module for rendered images.

Components:
    display: Output mapping (clamp, gamma, quantize) and Matplotlib preview
    export: Image sink interface, plain PPM writer, PNG export via Pillow

Example:
    >>> from spheretracer.core.render import render
    >>> from spheretracer.preview import save_image
    >>> save_image(render(scene, 4, 640, 360), "spheres.png")
"""

from .display import apply_gamma, show_preview, to_pixels
from .export import (
    ImageSink,
    PPMWriter,
    save_image,
    save_png,
    save_ppm,
    write_image,
)

__all__ = [
    "apply_gamma",
    "to_pixels",
    "show_preview",
    "ImageSink",
    "PPMWriter",
    "write_image",
    "save_ppm",
    "save_png",
    "save_image",
]
