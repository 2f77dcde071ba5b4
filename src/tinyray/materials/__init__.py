"""Materials module for local reflection models.

Components:
    phong: Phong material (diffuse color, albedo weights, shininess),
        its per-light diffuse/specular terms, and the material registry

The Phong terms are implemented as Taichi functions for use inside the
render kernel. Note that importing this package allocates the registry
fields, so it must happen after ti.init().
"""

from .phong import (
    DEFAULT_ALBEDO,
    DEFAULT_DIFFUSE_COLOR,
    DEFAULT_SPECULAR_EXPONENT,
    MAX_PHONG_MATERIALS,
    PhongMaterial,
    add_phong_material,
    clear_phong_materials,
    default_phong_material,
    get_phong_material,
    get_phong_material_count,
    lambert_term,
    phong_specular_term,
    validate_phong_material,
)

__all__ = [
    "PhongMaterial",
    "DEFAULT_ALBEDO",
    "DEFAULT_DIFFUSE_COLOR",
    "DEFAULT_SPECULAR_EXPONENT",
    "MAX_PHONG_MATERIALS",
    "lambert_term",
    "phong_specular_term",
    "add_phong_material",
    "validate_phong_material",
    "clear_phong_materials",
    "default_phong_material",
    "get_phong_material",
    "get_phong_material_count",
]
