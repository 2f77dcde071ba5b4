"""Phong material model.

This module implements the classic Phong local reflection model used by the
shading integrator. A material weights two per-light terms:

    diffuse  = max(0, L . N)
    specular = max(0, -reflect(-L, N) . D) ^ specular_exponent

where L is the unit direction from the surface point toward the light, N the
unit surface normal and D the unit direction of the incoming camera ray. The
integrator sums both terms over all lights (scaled by light intensity) and
composes the final color as

    diffuse_color * diffuse_sum * albedo[0] + (1, 1, 1) * specular_sum * albedo[1]

There is no ambient term and no energy-conservation constraint: albedo
weights and the resulting color may exceed 1.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinyray.materials.phong import add_phong_material
    >>> ivory = add_phong_material((0.6, 0.3), (0.4, 0.4, 0.3), 50.0)
"""

import taichi as ti
import taichi.math as tm

from src.tinyray.core.ray import reflect

# Type aliases for vectors
vec3 = tm.vec3
vec2 = tm.vec2


@ti.dataclass
class PhongMaterial:
    """Phong material properties.

    Attributes:
        albedo: Weights (k_d, k_s) of the diffuse and specular contributions.
        diffuse_color: The diffuse surface color (RGB).
        specular_exponent: The Phong shininess; larger values give tighter
            highlights.
    """

    albedo: vec2
    diffuse_color: vec3
    specular_exponent: ti.f32


# Parameters of a default-constructed material: fully diffuse, black, matte
DEFAULT_ALBEDO = (1.0, 0.0)
DEFAULT_DIFFUSE_COLOR = (0.0, 0.0, 0.0)
DEFAULT_SPECULAR_EXPONENT = 0.0


@ti.func
def lambert_term(light_dir: vec3, normal: vec3) -> ti.f32:
    """Evaluate the Lambert cosine term, clamped at zero.

    Args:
        light_dir: Unit direction from the surface point toward the light.
        normal: Unit surface normal.

    Returns:
        max(0, light_dir . normal).
    """
    return ti.max(0.0, tm.dot(light_dir, normal))


@ti.func
def phong_specular_term(
    light_dir: vec3,
    normal: vec3,
    view_dir: vec3,
    specular_exponent: ti.f32,
) -> ti.f32:
    """Evaluate the Phong specular term.

    The light direction is mirrored about the normal and compared against the
    reversed camera ray direction.

    Args:
        light_dir: Unit direction from the surface point toward the light.
        normal: Unit surface normal.
        view_dir: Unit direction of the incoming camera ray (toward the surface).
        specular_exponent: The Phong shininess exponent.

    Returns:
        max(0, -reflect(-light_dir, normal) . view_dir) ^ specular_exponent.
    """
    reflect_dir = reflect(-light_dir, normal)
    cos_alpha = ti.max(0.0, -tm.dot(reflect_dir, view_dir))
    return ti.pow(cos_alpha, specular_exponent)


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Phong materials in the scene
MAX_PHONG_MATERIALS = 256

# Storage for Phong material properties
phong_albedos = ti.Vector.field(2, dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
num_phong_materials = ti.field(dtype=ti.i32, shape=())


def clear_phong_materials() -> None:
    """Clear all Phong materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_phong_materials[None] = 0


def validate_phong_material(
    albedo: tuple[float, float],
    diffuse_color: tuple[float, float, float],
    specular_exponent: float,
) -> None:
    """Check Phong material parameters without storing them.

    Raises:
        ValueError: If any albedo or color component, or the specular
            exponent, is negative.
    """
    for i, component in enumerate(albedo):
        if component < 0.0:
            raise ValueError(f"Albedo component {i} = {component} is negative")
    for i, component in enumerate(diffuse_color):
        if component < 0.0:
            raise ValueError(f"Diffuse color component {i} = {component} is negative")
    if specular_exponent < 0.0:
        raise ValueError(f"Specular exponent must be non-negative, got {specular_exponent}")


def add_phong_material(
    albedo: tuple[float, float] = DEFAULT_ALBEDO,
    diffuse_color: tuple[float, float, float] = DEFAULT_DIFFUSE_COLOR,
    specular_exponent: float = DEFAULT_SPECULAR_EXPONENT,
) -> int:
    """Add a Phong material to the material registry.

    Args:
        albedo: The (k_d, k_s) weights of the diffuse and specular terms.
        diffuse_color: The diffuse color as (R, G, B) tuple.
        specular_exponent: The Phong shininess exponent (non-negative).

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo or color component, or the specular
            exponent, is negative.
    """
    validate_phong_material(albedo, diffuse_color, specular_exponent)

    idx = num_phong_materials[None]
    if idx >= MAX_PHONG_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Phong materials ({MAX_PHONG_MATERIALS}) exceeded"
        )

    phong_albedos[idx] = vec2(albedo[0], albedo[1])
    phong_diffuse_colors[idx] = vec3(diffuse_color[0], diffuse_color[1], diffuse_color[2])
    phong_specular_exponents[idx] = specular_exponent
    num_phong_materials[None] = idx + 1
    return idx


def get_phong_material_count() -> int:
    """Get the number of Phong materials in the registry."""
    return int(num_phong_materials[None])


@ti.func
def get_phong_material(material_idx: ti.i32) -> PhongMaterial:
    """Get a copy of a Phong material by index.

    Args:
        material_idx: The index of the material in the registry.

    Returns:
        The PhongMaterial stored at that index.
    """
    return PhongMaterial(
        albedo=phong_albedos[material_idx],
        diffuse_color=phong_diffuse_colors[material_idx],
        specular_exponent=phong_specular_exponents[material_idx],
    )


@ti.func
def default_phong_material() -> PhongMaterial:
    """Create the default material: albedo (1, 0), black, exponent 0."""
    return PhongMaterial(
        albedo=vec2(DEFAULT_ALBEDO[0], DEFAULT_ALBEDO[1]),
        diffuse_color=vec3(0.0, 0.0, 0.0),
        specular_exponent=DEFAULT_SPECULAR_EXPONENT,
    )
