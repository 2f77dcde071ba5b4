"""Output module for tone mapping and image export.

Components:
    tonemap: Hue-preserving rescale, clamping and 8-bit quantization
    ppm: Binary PPM (P6) encoding via Pillow and atomic file output

These functions work on NumPy arrays and do not touch Taichi state, so
they can be imported before ti.init().

Example:
    >>> from src.tinyray.output import image_to_uint8, save_ppm
    >>> save_ppm(framebuffer, "out.ppm")
"""

from src.tinyray.output.ppm import (
    atomic_output,
    encode_ppm,
    ppm_header,
    save_ppm,
    write_ppm,
)
from src.tinyray.output.tonemap import (
    clamp_unit,
    image_to_uint8,
    quantize,
    tone_map_rescale,
)

__all__ = [
    # Tone mapping
    "tone_map_rescale",
    "clamp_unit",
    "quantize",
    "image_to_uint8",
    # Export
    "ppm_header",
    "encode_ppm",
    "write_ppm",
    "save_ppm",
    "atomic_output",
]
