"""Taichi-based Phong sphere ray tracer.

This package renders scenes of opaque spheres lit by point lights using a
Phong local shading model, with support for:
- Pinhole camera primary ray generation
- Closest-hit ray/sphere intersection over a linear scene scan
- Diffuse (Lambert) and specular (Phong) multi-light shading
- Hue-preserving tone mapping and binary PPM output

Subpackages:
    core: Vector utilities, shading integrator, and rendering loop
    geometry: Sphere primitive and intersection algorithm
    materials: Phong material model and material registry
    scene: Scene storage, point lights, scene manager, and preset scenes
    camera: Pinhole camera with primary ray generation
    output: Tone mapping and PPM export
"""

__version__ = "0.1.0"
