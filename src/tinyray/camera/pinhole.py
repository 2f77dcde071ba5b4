"""Pinhole camera model for primary ray generation.

This module implements the fixed-orientation pinhole camera of the renderer:
the camera sits at ``origin`` looking down the -z axis of a right-handed
system, with the image plane at unit distance (z = -1 relative to the
camera). For pixel (i, j) of a width x height image with vertical field of
view ``fov`` the primary ray direction is

    x =  (2 * (i + 0.5) / width  - 1) * tan(fov / 2) * (width / height)
    y = -(2 * (j + 0.5) / height - 1) * tan(fov / 2)
    direction = normalize((x, y, -1))

so pixel (0, 0) is the top-left corner and larger j is lower in the image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinyray.camera.pinhole import PinholeCamera, setup_camera, get_primary_ray
    >>>
    >>> camera = PinholeCamera(width=1024, height=768)
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_primary_ray(512, 384)  # Ray near the image center
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.tinyray.core.ray import Ray, make_ray, vec3

# Reference framebuffer size and field of view
DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 768
DEFAULT_FOV = math.pi / 2.0

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in radians, in (0, pi).
        origin: Camera position in world space (x, y, z).
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    fov: float = DEFAULT_FOV
    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height of the output image."""
        return self.width / self.height


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())
# tan(fov / 2), the half-height of the image plane at unit distance
_half_height = ti.field(dtype=ti.f32, shape=())
_aspect_ratio = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: PinholeCamera) -> None:
    """Initialize camera state from configuration.

    Must be called before rendering.

    Args:
        camera: Camera configuration with image size, FOV and position.

    Raises:
        ValueError: If the image size is not positive or the field of view
            is outside (0, pi).
    """
    if camera.width <= 0 or camera.height <= 0:
        raise ValueError(
            f"Image dimensions must be positive, got {camera.width}x{camera.height}"
        )
    if not 0.0 < camera.fov < math.pi:
        raise ValueError(f"Field of view must be in (0, pi) radians, got {camera.fov}")

    _camera_origin[None] = [camera.origin[0], camera.origin[1], camera.origin[2]]
    _image_width[None] = camera.width
    _image_height[None] = camera.height
    _half_height[None] = math.tan(camera.fov / 2.0)
    _aspect_ratio[None] = camera.aspect_ratio


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_primary_ray(pixel_i: ti.i32, pixel_j: ti.i32) -> Ray:
    """Generate the primary ray through the center of pixel (i, j).

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        A Ray from the camera origin with a unit-length direction.
    """
    width = ti.cast(_image_width[None], ti.f32)
    height = ti.cast(_image_height[None], ti.f32)
    half_height = _half_height[None]

    x = (2.0 * (ti.cast(pixel_i, ti.f32) + 0.5) / width - 1.0) * half_height * _aspect_ratio[None]
    y = -(2.0 * (ti.cast(pixel_j, ti.f32) + 0.5) / height - 1.0) * half_height
    direction = tm.normalize(vec3(x, y, -1.0))

    return make_ray(_camera_origin[None], direction)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera origin (position) in world space."""
    return _camera_origin[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, object]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, width, height, half_height and aspect_ratio.
    """
    origin_vec = _camera_origin[None]
    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "width": int(_image_width[None]),
        "height": int(_image_height[None]),
        "half_height": float(_half_height[None]),
        "aspect_ratio": float(_aspect_ratio[None]),
    }
