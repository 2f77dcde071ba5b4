"""Geometry module for shape primitives.

This module provides the sphere primitive and its intersection algorithm:

Components:
    sphere: Sphere primitive with geometric ray-sphere intersection

Intersection routines are implemented as Taichi functions (@ti.func) so
they can be called from the per-pixel render kernel.

Ray-object intersection follows the pattern:
    hit = hit_sphere(ray_origin, ray_direction, sphere)  # hit.hit, hit.t
"""

from .sphere import Sphere, SphereHit, hit_sphere, make_sphere, sphere_normal

__all__ = [
    "Sphere",
    "SphereHit",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
]
