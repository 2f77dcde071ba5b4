"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector utilities
    integrator: Per-pixel shading (flat, diffuse, Phong) and the frame kernel
    renderer: High-level Renderer wrapper and one-shot render_scene()

The core module evaluates a local illumination model only: every primary
ray is intersected once against the scene and shaded from the light list,
with no secondary bounces or shadow rays.

All per-pixel work runs in Taichi kernels, parallel over the framebuffer.
"""

from .ray import (
    Ray,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    reflect,
    vec2,
    vec3,
)

# Note: integrator and renderer are NOT imported here; they declare Taichi
# fields at import time and must be imported after ti.init().
#
# For rendering, use:
#   from src.tinyray.core.renderer import Renderer, render_scene

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec2",
    "vec3",
    "dot",
    "length",
    "length_squared",
    "normalize",
    "reflect",
]
