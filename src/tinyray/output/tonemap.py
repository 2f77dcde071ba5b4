"""Tone mapping of rendered framebuffers to 8-bit color.

Shaded colors are unbounded above: bright specular highlights and multiple
lights push channels past 1. Before quantizing, each overbright pixel is
divided by its largest channel so the pixel keeps its hue with the brightest
channel at exactly 1. Every channel is then clamped to [0, 1] and quantized
as floor(255 * c).

Pixels whose channels are all <= 1 pass through the rescale unchanged, so
the same pipeline serves flat, diffuse and Phong renders.

Example:
    >>> import numpy as np
    >>> from src.tinyray.output.tonemap import image_to_uint8
    >>> image = np.array([[[2.0, 1.0, 0.5]]], dtype=np.float32)
    >>> image_to_uint8(image)
    array([[[255, 127,  63]]], dtype=uint8)
"""

import numpy as np
import numpy.typing as npt


def _check_rgb_image(image: npt.NDArray[np.floating]) -> None:
    if image.ndim != 3 or image.shape[-1] != 3:
        raise ValueError(f"Expected an (H, W, 3) RGB image, got shape {image.shape}")


def tone_map_rescale(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Rescale overbright pixels by their maximum channel.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Image where every pixel with max channel m > 1 is divided by m.
    """
    image = np.asarray(image, dtype=np.float32)
    _check_rgb_image(image)

    max_channel = image.max(axis=-1, keepdims=True)
    scale = np.where(max_channel > 1.0, max_channel, np.float32(1.0))

    return (image / scale).astype(np.float32)


def clamp_unit(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Clamp every channel to [0, 1]."""
    return np.clip(image, 0.0, 1.0).astype(np.float32)


def quantize(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.uint8]:
    """Quantize a [0, 1] image to bytes as floor(255 * c)."""
    scaled = np.float32(255.0) * np.asarray(image, dtype=np.float32)
    return np.floor(scaled).astype(np.uint8)


def image_to_uint8(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to uint8 for export.

    Applies the full output pipeline:
    1. Hue-preserving rescale of overbright pixels
    2. Clamping to [0, 1]
    3. Quantization to 8 bits

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If the image is not an (H, W, 3) array.
    """
    return quantize(clamp_unit(tone_map_rescale(image)))
