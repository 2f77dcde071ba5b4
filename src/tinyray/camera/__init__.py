"""Camera module for primary ray generation.

Components:
    pinhole: Fixed-orientation pinhole (perspective) camera

The camera maps pixel indices to world-space rays through pixel centers:
    i in [0, width): left to right across image
    j in [0, height): top to bottom across image

Ray generation is a Taichi function so it runs inside the per-pixel
render kernel.
"""

from .pinhole import (
    DEFAULT_FOV,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    PinholeCamera,
    get_camera_info,
    get_camera_origin,
    get_primary_ray,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    "DEFAULT_FOV",
    "setup_camera",
    "get_primary_ray",
    "get_camera_origin",
    "get_camera_info",
]
