"""Whitted-style ray tracer for sphere scenes, built on Taichi.

This package renders a static scene of spheres under point lights with:
- Geometric ray-sphere intersection
- Blinn-Phong local illumination with hard shadows
- Recursive mirror reflection with a fixed depth budget
- Deterministic grid supersampling and square-root gamma output

Subpackages:
    core: Vector utilities, lighting, the integrator and image assembly
    geometry: Sphere primitive and ray-sphere intersection
    materials: Blinn-Phong material model
    scene: Scene description, packing and scene-level intersection
    camera: Screen mapping and anti-aliasing sample grid
    preview: Output mapping, image export and preview display
"""

__version__ = "0.1.0"
