"""Scene module for scene storage, lights, and scene descriptions.

This module handles scene representation and ray-scene queries:

Components:
    intersection: Sphere storage and closest-hit scene intersection
    lights: Point light and background color storage
    manager: Scene description dataclasses and the SceneManager uploader
    presets: Factory functions for the reference scenes

Scene data is organized for the render kernel:
    - Structure-of-Arrays layout for sphere and light data
    - Per-sphere material IDs into the Phong material registry

Importing this package allocates Taichi fields; call ti.init() first.
"""

from .intersection import (
    FAR_PLANE,
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .lights import (
    DEFAULT_BACKGROUND_COLOR,
    MAX_LIGHTS,
    add_light,
    clear_lights,
    get_background_color,
    get_light_count,
    set_background_color,
)
from .manager import LightInfo, Material, Scene, SceneManager, ShadingMode, SphereInfo
from .presets import (
    PRESETS,
    create_diffuse_scene,
    create_empty_scene,
    create_flat_sphere_scene,
    create_shiny_spheres_scene,
    get_preset,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "FAR_PLANE",
    "MAX_SPHERES",
    # Lights module
    "add_light",
    "clear_lights",
    "get_light_count",
    "MAX_LIGHTS",
    "DEFAULT_BACKGROUND_COLOR",
    "set_background_color",
    "get_background_color",
    # Manager module
    "Material",
    "SphereInfo",
    "LightInfo",
    "Scene",
    "SceneManager",
    "ShadingMode",
    # Presets module
    "PRESETS",
    "get_preset",
    "create_empty_scene",
    "create_flat_sphere_scene",
    "create_diffuse_scene",
    "create_shiny_spheres_scene",
]
