"""Local-illumination integrator and frame rendering kernel.

This module implements the per-pixel shading of the ray tracer. Each primary
ray is intersected once against the scene; on a miss the configured
background color is returned, on a hit the surface is shaded from the light
list according to the active shading mode:

    FLAT:    the material's diffuse color, unlit
    DIFFUSE: diffuse_color * sum_l(intensity_l * max(0, L_l . N))
    PHONG:   diffuse_color * diffuse_sum * albedo[0]
             + (1, 1, 1) * specular_sum * albedo[1]

There is no ambient term, no shadow test and no recursion. Colors may
exceed 1; the output stage tone maps them.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinyray.core.integrator import (
    ...     ShadingMode, render_image, setup_render_target, get_framebuffer_numpy
    ... )
    >>> from src.tinyray.camera.pinhole import PinholeCamera, setup_camera
    >>>
    >>> setup_camera(PinholeCamera(width=320, height=240))
    >>> setup_render_target(320, 240)
    >>> render_image(ShadingMode.PHONG)
    >>> image = get_framebuffer_numpy()
"""

import logging
import time

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.tinyray.camera.pinhole import get_primary_ray
from src.tinyray.materials.phong import (
    get_phong_material,
    lambert_term,
    phong_specular_term,
)
from src.tinyray.scene.intersection import SceneHitRecord, intersect_scene
from src.tinyray.scene.lights import (
    get_background,
    get_light_intensity,
    get_light_position,
    num_lights,
)
from src.tinyray.scene.manager import ShadingMode

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Render Target (Framebuffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Framebuffer indexed [i, j] (column, row), row 0 at the top
_framebuffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the framebuffer for a width x height image.

    The buffer is preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT; this
    sets the active region and clears it.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive.
        RuntimeError: If dimensions exceed the maximum supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise RuntimeError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the framebuffer to zero."""
    _framebuffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading
# =============================================================================


@ti.func
def _shade_diffuse(rec: SceneHitRecord) -> vec3:
    """Lambert-only shading: diffuse color scaled by the summed light."""
    material = get_phong_material(rec.material_id)
    diffuse_intensity = 0.0
    for k in range(num_lights[None]):
        light_dir = tm.normalize(get_light_position(k) - rec.point)
        diffuse_intensity += get_light_intensity(k) * lambert_term(light_dir, rec.normal)
    return material.diffuse_color * diffuse_intensity


@ti.func
def _shade_phong(rec: SceneHitRecord, ray_direction: vec3) -> vec3:
    """Full Phong shading accumulated over all lights."""
    material = get_phong_material(rec.material_id)
    diffuse_intensity = 0.0
    specular_intensity = 0.0
    for k in range(num_lights[None]):
        light_dir = tm.normalize(get_light_position(k) - rec.point)
        intensity = get_light_intensity(k)
        diffuse_intensity += intensity * lambert_term(light_dir, rec.normal)
        specular_intensity += intensity * phong_specular_term(
            light_dir, rec.normal, ray_direction, material.specular_exponent
        )
    return (
        material.diffuse_color * diffuse_intensity * material.albedo[0]
        + vec3(1.0, 1.0, 1.0) * specular_intensity * material.albedo[1]
    )


@ti.func
def cast_ray(ray_origin: vec3, ray_direction: vec3, mode: ti.i32) -> vec3:
    """Compute the color seen along a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        mode: The ShadingMode value to shade hits with.

    Returns:
        The (unclamped) RGB color for the ray.
    """
    color = get_background()
    rec = intersect_scene(ray_origin, ray_direction)
    if rec.hit == 1:
        if mode == int(ShadingMode.FLAT):
            color = get_phong_material(rec.material_id).diffuse_color
        elif mode == int(ShadingMode.DIFFUSE):
            color = _shade_diffuse(rec)
        else:
            color = _shade_phong(rec, ray_direction)
    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32, mode: ti.i32):
    """Shade every pixel of the active framebuffer region.

    Pixels are independent, so the outer loop runs in parallel.
    """
    for i, j in ti.ndrange(width, height):
        ray = get_primary_ray(i, j)
        _framebuffer[i, j] = cast_ray(ray.origin, ray.direction, mode)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, mode: ti.i32) -> vec3:
    """Shade one pixel without touching the framebuffer."""
    ray = get_primary_ray(pixel_i, pixel_j)
    return cast_ray(ray.origin, ray.direction, mode)


@ti.kernel
def _cast_single_ray(origin: vec3, direction: vec3, mode: ti.i32) -> vec3:
    return cast_ray(origin, tm.normalize(direction), mode)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_image(mode: ShadingMode = ShadingMode.PHONG) -> None:
    """Render the full image into the framebuffer.

    The camera must have been set up with the same dimensions as the
    render target.

    Args:
        mode: The shading model to use.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    start = time.perf_counter()
    _render_frame(width, height, int(mode))
    ti.sync()
    logger.debug(
        "Rendered %dx%d frame (%s) in %.3fs",
        width,
        height,
        ShadingMode(mode).name,
        time.perf_counter() - start,
    )


def render_pixel(
    pixel_i: int, pixel_j: int, mode: ShadingMode = ShadingMode.PHONG
) -> tuple[float, float, float]:
    """Render a single pixel.

    This is a Python-callable function for testing. For production rendering,
    use render_image() which processes all pixels in parallel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        mode: The shading model to use.

    Returns:
        Tuple of (R, G, B) color values before tone mapping.
    """
    color = _render_single_pixel(pixel_i, pixel_j, int(mode))
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    mode: ShadingMode = ShadingMode.PHONG,
) -> tuple[float, float, float]:
    """Cast an arbitrary ray into the scene and return its color.

    Args:
        origin: Ray origin.
        direction: Ray direction (normalized before casting).
        mode: The shading model to use.

    Returns:
        Tuple of (R, G, B) color values before tone mapping.
    """
    color = _cast_single_ray(vec3(*origin), vec3(*direction), int(mode))
    return (float(color[0]), float(color[1]), float(color[2]))


def get_framebuffer_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    The array shape is (height, width, 3), row-major with the top row first,
    so pixel (i, j) is at ``image[j, i]``. Values are not clamped.

    Returns:
        NumPy array of shape (height, width, 3) with dtype float32.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _framebuffer.to_numpy()
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3)
    image = np.transpose(image, (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.float32)
