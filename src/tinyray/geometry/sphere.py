"""Sphere primitive with geometric ray-sphere intersection.

This module provides a Sphere dataclass and an intersection function based on
the geometric (closest-approach) formulation rather than the algebraic
quadratic. With a unit-length direction D and L = C - O:

    t_ca = L . D            distance to the point of closest approach
    d^2  = L . L - t_ca^2   squared distance from the center to the ray
    h    = sqrt(r^2 - d^2)  half chord length

The candidate roots are t_ca - h and t_ca + h. The near root is returned if
it is non-negative, else the far root (the origin is inside the sphere), else
the sphere lies behind the origin and the ray misses. No epsilon is applied:
primary rays always start at the camera, never on a surface.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinyray.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -5), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (strictly positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class SphereHit:
    """Result of a ray-sphere intersection test.

    Attributes:
        hit: Whether the ray intersected the sphere (1 if hit, 0 if miss).
        t: The non-negative parametric distance along the ray to the nearest
            intersection. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> SphereHit:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (must be unit length).
        sphere: The sphere to test intersection against.

    Returns:
        A SphereHit with the nearest non-negative t, or hit == 0 on a miss.
    """
    to_center = sphere.center - ray_origin
    t_ca = tm.dot(to_center, ray_direction)
    d2 = tm.dot(to_center, to_center) - t_ca * t_ca
    r2 = sphere.radius * sphere.radius

    did_hit = 0
    hit_t = 0.0

    if d2 <= r2:
        half_chord = ti.sqrt(r2 - d2)
        t0 = t_ca - half_chord
        t1 = t_ca + half_chord
        # Origin inside the sphere: fall back to the far root
        if t0 < 0.0:
            t0 = t1
        if t0 >= 0.0:
            did_hit = 1
            hit_t = t0

    return SphereHit(hit=did_hit, t=hit_t)


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Compute the outward unit normal of a sphere at a surface point."""
    return tm.normalize(point - sphere.center)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius.

    This is a convenience function for creating spheres within Taichi kernels.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).

    Returns:
        A new Sphere instance.
    """
    return Sphere(center=center, radius=radius)
