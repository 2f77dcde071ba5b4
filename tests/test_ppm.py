"""Tests for binary PPM export.

This module tests the output/ppm functionality including:
- The P6 header and payload layout
- Row-major, top-to-bottom pixel order
- Atomic file output and error reporting
"""

import io
import os
import stat

import numpy as np
import pytest
from PIL import Image as PILImage


class TestEncodePPM:
    """Test PPM encoding."""

    def test_header(self):
        """Test the header is P6, dimensions and 255 on separate lines."""
        from src.tinyray.output.ppm import encode_ppm, ppm_header

        image = np.zeros((3, 4, 3), dtype=np.uint8)
        data = encode_ppm(image)

        assert ppm_header(4, 3) == b"P6\n4 3\n255\n"
        assert data.startswith(b"P6\n4 3\n255\n")

    def test_reference_header(self):
        """Test the header of a 1024x768 image is exactly 16 bytes."""
        from src.tinyray.output.ppm import ppm_header

        header = ppm_header(1024, 768)
        assert header == b"P6\n1024 768\n255\n"
        assert len(header) == 16

    def test_payload_size_and_order(self):
        """Test the payload is W*H*3 bytes, row-major from the top row."""
        from src.tinyray.output.ppm import encode_ppm, ppm_header

        rng = np.random.default_rng(1)
        image = rng.integers(0, 256, size=(5, 7, 3), dtype=np.uint8)
        data = encode_ppm(image)

        header = ppm_header(7, 5)
        assert len(data) == len(header) + 7 * 5 * 3
        assert data[len(header):] == image.tobytes()

    def test_readable_by_pillow(self):
        """Test the encoded image decodes back to the same pixels."""
        from src.tinyray.output.ppm import encode_ppm

        image = np.zeros((2, 3, 3), dtype=np.uint8)
        image[0, 0] = (255, 0, 0)
        image[1, 2] = (0, 0, 255)

        decoded = np.array(PILImage.open(io.BytesIO(encode_ppm(image))))
        np.testing.assert_array_equal(decoded, image)

    @pytest.mark.parametrize(
        "image",
        [
            np.zeros((2, 2, 3), dtype=np.float32),
            np.zeros((2, 2), dtype=np.uint8),
            np.zeros((2, 2, 4), dtype=np.uint8),
        ],
    )
    def test_rejects_invalid_arrays(self, image):
        """Test non-(H, W, 3) uint8 arrays raise ValueError."""
        from src.tinyray.output.ppm import encode_ppm

        with pytest.raises(ValueError, match="uint8"):
            encode_ppm(image)

    def test_write_ppm_returns_size(self):
        """Test write_ppm writes to a file object and returns the byte count."""
        from src.tinyray.output.ppm import write_ppm

        image = np.zeros((2, 2, 3), dtype=np.uint8)
        buffer = io.BytesIO()

        size = write_ppm(image, buffer)
        assert size == len(buffer.getvalue()) == len(b"P6\n2 2\n255\n") + 12


class TestSavePPM:
    """Test saving float images to disk."""

    def test_save_ppm(self, tmp_path):
        """Test a float image is tone mapped and saved."""
        from src.tinyray.output.ppm import save_ppm

        image = np.full((3, 4, 3), (0.1, 0.4, 0.5), dtype=np.float32)
        path = save_ppm(image, tmp_path / "out.ppm")

        data = path.read_bytes()
        assert data.startswith(b"P6\n4 3\n255\n")
        assert data[len(b"P6\n4 3\n255\n"):] == bytes([25, 102, 127]) * 12

    def test_saved_file_permissions(self, tmp_path):
        """Test the saved file is readable by everyone."""
        from src.tinyray.output.ppm import save_ppm

        path = save_ppm(np.zeros((1, 1, 3), dtype=np.float32), tmp_path / "out.ppm")
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o644

    def test_overwrites_existing_file(self, tmp_path):
        """Test saving replaces an existing file."""
        from src.tinyray.output.ppm import save_ppm

        target = tmp_path / "out.ppm"
        target.write_bytes(b"old contents")
        save_ppm(np.zeros((1, 1, 3), dtype=np.float32), target)

        assert target.read_bytes() == b"P6\n1 1\n255\n\x00\x00\x00"

    def test_missing_directory_names_path(self, tmp_path):
        """Test an unwritable location raises OSError naming the path."""
        from src.tinyray.output.ppm import save_ppm

        target = tmp_path / "missing" / "out.ppm"
        with pytest.raises(OSError, match="out.ppm"):
            save_ppm(np.zeros((1, 1, 3), dtype=np.float32), target)
        assert not target.exists()


class TestAtomicOutput:
    """Test the atomic output context manager."""

    def test_failure_leaves_no_file(self, tmp_path):
        """Test an error while writing leaves neither target nor temp file."""
        from src.tinyray.output.ppm import atomic_output

        target = tmp_path / "out.ppm"
        with pytest.raises(ValueError):
            with atomic_output(target) as fp:
                fp.write(b"P6\n")
                raise ValueError("render failed")

        assert list(tmp_path.iterdir()) == []

    def test_failure_keeps_existing_target(self, tmp_path):
        """Test an error while writing leaves an existing target untouched."""
        from src.tinyray.output.ppm import atomic_output

        target = tmp_path / "out.ppm"
        target.write_bytes(b"previous image")
        with pytest.raises(RuntimeError):
            with atomic_output(target) as fp:
                fp.write(b"partial")
                raise RuntimeError("render failed")

        assert target.read_bytes() == b"previous image"
        assert list(tmp_path.iterdir()) == [target]

    def test_file_appears_only_on_success(self, tmp_path):
        """Test the target does not exist until the body completes."""
        from src.tinyray.output.ppm import atomic_output

        target = tmp_path / "out.ppm"
        with atomic_output(target) as fp:
            fp.write(b"data")
            assert not target.exists()

        assert target.read_bytes() == b"data"

    def test_write_error_names_path(self, tmp_path):
        """Test OSErrors raised while writing are reported with the target path."""
        from src.tinyray.output.ppm import atomic_output

        target = tmp_path / "out.ppm"
        with pytest.raises(OSError, match="Cannot write output file .*out.ppm"):
            with atomic_output(target):
                raise OSError(28, "No space left on device")

        assert list(tmp_path.iterdir()) == []
