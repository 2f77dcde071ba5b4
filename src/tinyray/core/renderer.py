"""High-level renderer.

This module provides a convenient wrapper around the core integrator that
supports:
- Rendering a framebuffer for a given camera and shading mode
- Reading the result back as a linear or tone-mapped NumPy array
- Saving the result as a binary PPM file
- One-shot rendering of a Scene description straight to a file

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinyray.core.renderer import render_scene
    >>> from src.tinyray.scene.presets import create_shiny_spheres_scene
    >>>
    >>> render_scene(create_shiny_spheres_scene(), "out.ppm")
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

import numpy as np
import numpy.typing as npt

from src.tinyray.camera.pinhole import PinholeCamera, setup_camera
from src.tinyray.core.integrator import (
    get_framebuffer_numpy,
    render_image,
    setup_render_target,
)
from src.tinyray.output.ppm import atomic_output, save_ppm, write_ppm
from src.tinyray.output.tonemap import image_to_uint8
from src.tinyray.scene.manager import Scene, SceneManager, ShadingMode

logger = logging.getLogger(__name__)


class Renderer:
    """Renders the currently loaded scene through a pinhole camera.

    The renderer owns the camera configuration and delegates to the global
    integrator buffers (which are Taichi fields), so only one renderer's
    image is held at a time.

    Attributes:
        camera: The camera configuration.
    """

    def __init__(self, camera: PinholeCamera | None = None) -> None:
        """Initialize the renderer.

        Args:
            camera: Camera configuration. Defaults to a 1024x768 camera with
                a 90 degree vertical field of view at the origin.

        Raises:
            ValueError: If the camera configuration is invalid.
            RuntimeError: If the image exceeds the maximum supported size.
        """
        self.camera = camera if camera is not None else PinholeCamera()
        setup_camera(self.camera)
        setup_render_target(self.camera.width, self.camera.height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.camera.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.camera.height

    def render(self, mode: ShadingMode = ShadingMode.PHONG) -> None:
        """Render the loaded scene into the framebuffer.

        Args:
            mode: The shading model to use.
        """
        setup_camera(self.camera)
        setup_render_target(self.camera.width, self.camera.height)
        render_image(mode)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the linear (unclamped) image, shape (height, width, 3)."""
        return get_framebuffer_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the tone-mapped 8-bit image, shape (height, width, 3)."""
        return image_to_uint8(self.get_image_numpy())

    def save_ppm(self, filepath: str | os.PathLike[str]) -> Path:
        """Save the rendered image as a binary PPM file.

        Raises:
            OSError: If the file cannot be written.
        """
        return save_ppm(self.get_image_numpy(), filepath)


def render_scene(
    scene: Scene,
    output_path: str | os.PathLike[str],
    *,
    camera: PinholeCamera | None = None,
    mode: ShadingMode = ShadingMode.PHONG,
) -> Path:
    """Render a scene description to a binary PPM file.

    The output file is opened before rendering starts, so an unwritable
    location fails without doing any work, and it only appears under
    ``output_path`` once completely written.

    Args:
        scene: The scene to render.
        output_path: Output file path.
        camera: Camera configuration (default 1024x768, 90 degree FOV).
        mode: The shading model to use.

    Returns:
        The path written.

    Raises:
        OSError: If the output file cannot be created or written.
        ValueError: If the scene or camera is invalid.
    """
    path = Path(output_path)
    manager = SceneManager()
    manager.load_scene(scene)

    with atomic_output(path) as fp:
        renderer = Renderer(camera)
        start = time.perf_counter()
        renderer.render(mode)
        write_ppm(renderer.get_image_uint8(), fp)

    logger.debug(
        "Rendered %d spheres with %d lights to %s in %.3fs",
        len(scene.spheres),
        len(scene.lights),
        path,
        time.perf_counter() - start,
    )
    return path
