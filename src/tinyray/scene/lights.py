"""Point light and background color storage.

Lights are stored in Taichi fields alongside the scene spheres so the
shading integrator can iterate over them inside the render kernel. A light
is a position and a scalar intensity; intensities may exceed 1. The
background color returned for rays that miss every sphere is kept here too.
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

# Maximum number of point lights supported in the scene
MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights from the scene."""
    num_lights[None] = 0


def add_light(position: vec3, intensity: float) -> int:
    """Add a point light to the scene.

    Args:
        position: The light position in world space.
        intensity: The light intensity (non-negative).

    Returns:
        The index of the added light.

    Raises:
        ValueError: If the intensity is negative.
        RuntimeError: If the maximum number of lights is exceeded.
    """
    if intensity < 0.0:
        raise ValueError(f"Light intensity must be non-negative, got {intensity}")
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = position
    light_intensities[idx] = intensity
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def get_light_position(light_idx: ti.i32) -> vec3:
    return light_positions[light_idx]


@ti.func
def get_light_intensity(light_idx: ti.i32) -> ti.f32:
    return light_intensities[light_idx]


# =============================================================================
# Background Color
# =============================================================================

# Background of the reference scene
DEFAULT_BACKGROUND_COLOR = (0.1, 0.4, 0.5)

_background_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_background_color[None] = list(DEFAULT_BACKGROUND_COLOR)


def set_background_color(color: tuple[float, float, float]) -> None:
    """Set the color returned for rays that hit nothing.

    Args:
        color: The background color as (R, G, B).
    """
    _background_color[None] = [color[0], color[1], color[2]]


def get_background_color() -> tuple[float, float, float]:
    """Get the current background color (as stored, in 32-bit precision)."""
    c = _background_color[None]
    return (float(c[0]), float(c[1]), float(c[2]))


@ti.func
def get_background() -> vec3:
    return _background_color[None]
