"""Scene-level sphere intersection testing.

This module stores the scene's spheres in Taichi fields and provides the
closest-hit query used by the shading integrator. Every sphere is tested
(a linear scan, no acceleration structure) and the smallest non-negative
distance wins; among equal distances the first sphere added wins.

Hits at or beyond FAR_PLANE are reported as misses so that the background
color is used for them.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinyray.scene.intersection import (
    ...     SceneHitRecord, add_sphere, intersect_scene, clear_scene
    ... )
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, -16), 2.0, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.tinyray.geometry.sphere import Sphere, hit_sphere

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Hits at this distance or farther are reported as misses
FAR_PLANE = 1000.0


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Attributes:
        hit: Whether the ray intersected any sphere before FAR_PLANE
            (1 if hit, 0 if miss).
        t: The distance along the ray to the closest intersection.
            Only valid if hit == 1.
        point: The 3D point where the ray hit the surface.
            Only valid if hit == 1.
        normal: The outward unit surface normal at the hit point.
            Only valid if hit == 1.
        material_id: The material ID of the closest sphere.
            Only valid if hit == 1. -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres from the scene.

    Resets the sphere count to zero. The actual field data is not cleared
    but will be overwritten when new spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If the radius is not strictly positive.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if not radius > 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the closest sphere hit along a ray.

    Iterates through all spheres keeping the smallest hit distance (strict
    comparison, so the first of several equal distances is kept), then
    builds the hit point and unit normal for the winning sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        A SceneHitRecord for the closest intersection, or a miss record if
        nothing was hit closer than FAR_PLANE.
    """
    closest_t = tm.inf
    closest_index = -1

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere)
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            closest_index = i

    result = _make_miss_record()
    if closest_index >= 0 and closest_t < FAR_PLANE:
        point = ray_origin + closest_t * ray_direction
        normal = tm.normalize(point - sphere_centers[closest_index])
        result = SceneHitRecord(
            hit=1,
            t=closest_t,
            point=point,
            normal=normal,
            material_id=sphere_material_ids[closest_index],
        )

    return result
