"""Binary PPM (P6) export.

The renderer's only output format is the raw portable pixmap: an ASCII
header ``P6\\n<width> <height>\\n255\\n`` followed by width * height * 3
bytes, row-major from the top row down, each pixel as R, G, B. Encoding is
done by Pillow, whose PPM writer emits exactly this header for RGB images.

Files are written atomically: the bytes go to a temporary file next to the
target which is renamed over the target only once it is complete, so a
failed write never leaves a partial image under the target path.

Example:
    >>> from src.tinyray.output.ppm import save_ppm
    >>> save_ppm(framebuffer, "out.ppm")  # framebuffer: (H, W, 3) float32
"""

from __future__ import annotations

import contextlib
import io
import logging
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.tinyray.output.tonemap import image_to_uint8

logger = logging.getLogger(__name__)


def ppm_header(width: int, height: int) -> bytes:
    """Build the P6 header for a width x height image."""
    return b"P6\n%d %d\n255\n" % (width, height)


def encode_ppm(image: npt.NDArray[np.uint8]) -> bytes:
    """Encode an 8-bit RGB image as binary PPM.

    Args:
        image: Image array of shape (H, W, 3) with dtype uint8.

    Returns:
        The complete file contents: header followed by the pixel payload.

    Raises:
        ValueError: If the image is not an (H, W, 3) uint8 array.
    """
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] != 3:
        raise ValueError(
            f"Expected an (H, W, 3) uint8 image, got shape {image.shape} dtype {image.dtype}"
        )

    buffer = io.BytesIO()
    PILImage.fromarray(np.ascontiguousarray(image)).save(buffer, format="PPM")
    return buffer.getvalue()


def write_ppm(image: npt.NDArray[np.uint8], fp: BinaryIO) -> int:
    """Write an 8-bit RGB image as binary PPM to an open binary file.

    Returns:
        The number of bytes written.
    """
    data = encode_ppm(image)
    fp.write(data)
    return len(data)


@contextlib.contextmanager
def atomic_output(filepath: str | os.PathLike[str]) -> Iterator[BinaryIO]:
    """Open a binary file that replaces ``filepath`` only on success.

    The temporary file is created in the target's directory before the body
    runs, so an unwritable location fails early. If the body raises, the
    temporary file is removed and the target is left untouched.

    Args:
        filepath: The final output path.

    Yields:
        A writable binary file object.

    Raises:
        OSError: If the output cannot be created, written or moved into
            place. The message names the target path.
    """
    path = Path(filepath)
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
    except OSError as e:
        raise OSError(f"Cannot create output file {path}: {e.strerror or e}") from e

    try:
        with os.fdopen(fd, "wb") as fp:
            yield fp
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as e:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise OSError(f"Cannot write output file {path}: {e.strerror or e}") from e
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


def save_ppm(
    image: npt.NDArray[np.float32],
    filepath: str | os.PathLike[str],
) -> Path:
    """Tone map a linear float image and save it as binary PPM.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path.

    Returns:
        The path written.

    Raises:
        OSError: If the file cannot be written.
        ValueError: If the image is not an (H, W, 3) array.
    """
    image_uint8 = image_to_uint8(image)
    path = Path(filepath)
    with atomic_output(path) as fp:
        size = write_ppm(image_uint8, fp)
    logger.debug("Wrote %d bytes to %s", size, path)
    return path
