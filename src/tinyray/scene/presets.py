"""Preset scenes.

This module provides factory functions for the reference scenes the renderer
is exercised with, from an empty scene up to the full Phong-lit scene of
four spheres and three point lights. Each preset is paired with the shading
mode it is meant to be rendered with.

The scenes are plain ``Scene`` descriptions; upload one with
``SceneManager.load_scene()`` or render it directly with
``render_scene()``.

Example:
    >>> from src.tinyray.scene.presets import create_shiny_spheres_scene
    >>> scene = create_shiny_spheres_scene()
    >>> len(scene.spheres), len(scene.lights)
    (4, 3)
"""

from collections.abc import Callable

from src.tinyray.scene.manager import LightInfo, Material, Scene, ShadingMode, SphereInfo

# =============================================================================
# Materials
# =============================================================================

IVORY = Material(albedo=(0.5, 0.3), diffuse_color=(0.8, 0.2, 0.3), specular_exponent=60.0)
RED_RUBBER = Material(albedo=(0.6, 0.1), diffuse_color=(0.3, 0.6, 0.1), specular_exponent=10.0)
FLAT_IVORY = Material(diffuse_color=(0.4, 0.4, 0.3))

# Background colors used by the different presets
REFERENCE_BACKGROUND = (0.1, 0.4, 0.5)
SKY_BACKGROUND = (0.2, 0.7, 0.8)


def _four_spheres() -> tuple[SphereInfo, ...]:
    return (
        SphereInfo(center=(-8.0, 0.0, -17.0), radius=1.0, material=IVORY),
        SphereInfo(center=(-1.0, -1.5, -12.0), radius=2.0, material=RED_RUBBER),
        SphereInfo(center=(1.5, -1.5, -18.0), radius=3.0, material=RED_RUBBER),
        SphereInfo(center=(7.0, 5.0, -18.0), radius=4.0, material=IVORY),
    )


# =============================================================================
# Scene Factories
# =============================================================================


def create_empty_scene() -> Scene:
    """Create a scene with no spheres; every pixel is background."""
    return Scene(background_color=REFERENCE_BACKGROUND)


def create_flat_sphere_scene() -> Scene:
    """Create a single unlit sphere in front of a sky-blue background.

    Meant for ShadingMode.FLAT, which paints the sphere's diffuse color.
    """
    return Scene(
        spheres=(SphereInfo(center=(-3.0, 0.0, -16.0), radius=2.0, material=FLAT_IVORY),),
        background_color=SKY_BACKGROUND,
    )


def create_diffuse_scene() -> Scene:
    """Create the four-sphere scene lit by a single light.

    Meant for ShadingMode.DIFFUSE.
    """
    return Scene(
        spheres=_four_spheres(),
        lights=(LightInfo(position=(-20.0, 20.0, 20.0), intensity=1.5),),
        background_color=REFERENCE_BACKGROUND,
    )


def create_shiny_spheres_scene() -> Scene:
    """Create the reference scene: four ivory/rubber spheres, three lights.

    Meant for ShadingMode.PHONG. Specular highlights on the ivory spheres
    exceed 1 before tone mapping.
    """
    return Scene(
        spheres=_four_spheres(),
        lights=(
            LightInfo(position=(-20.0, 20.0, 20.0), intensity=1.5),
            LightInfo(position=(20.0, 50.0, -25.0), intensity=2.1),
            LightInfo(position=(30.0, 20.0, 30.0), intensity=1.7),
        ),
        background_color=REFERENCE_BACKGROUND,
    )


PRESETS: dict[str, tuple[Callable[[], Scene], ShadingMode]] = {
    "empty": (create_empty_scene, ShadingMode.PHONG),
    "flat": (create_flat_sphere_scene, ShadingMode.FLAT),
    "diffuse": (create_diffuse_scene, ShadingMode.DIFFUSE),
    "shiny": (create_shiny_spheres_scene, ShadingMode.PHONG),
}


def get_preset(name: str) -> tuple[Scene, ShadingMode]:
    """Build a preset scene by name.

    Args:
        name: One of the keys of PRESETS.

    Returns:
        Tuple of (scene, shading mode).

    Raises:
        ValueError: If the preset name is unknown.
    """
    try:
        factory, mode = PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown scene preset: {name!r} (choose from {', '.join(sorted(PRESETS))})"
        ) from None
    return factory(), mode
