"""Tests for the high-level renderer.

This module tests the Renderer class and render_scene including:
- Initialization and setup
- Linear and 8-bit image readback
- Saving to PPM
- Error handling for unwritable output paths
- The default background in a fresh Taichi runtime

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

import subprocess
import sys
import textwrap
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]


class TestRendererInit:
    """Test Renderer initialization."""

    def test_default_camera(self):
        """Test the default renderer is 1024x768."""
        from src.tinyray.core.renderer import Renderer

        renderer = Renderer()
        assert renderer.width == 1024
        assert renderer.height == 768

    def test_custom_camera(self):
        """Test the renderer takes its size from the camera."""
        from src.tinyray.camera.pinhole import PinholeCamera
        from src.tinyray.core.renderer import Renderer

        renderer = Renderer(PinholeCamera(width=64, height=32))
        assert renderer.width == 64
        assert renderer.height == 32

    def test_invalid_camera(self):
        """Test an invalid camera raises ValueError."""
        from src.tinyray.camera.pinhole import PinholeCamera
        from src.tinyray.core.renderer import Renderer

        with pytest.raises(ValueError):
            Renderer(PinholeCamera(width=0, height=32))


class TestRendererOutput:
    """Test rendering and image readback."""

    def test_get_image_numpy(self):
        """Test the linear image has the camera's shape."""
        from src.tinyray.camera.pinhole import PinholeCamera
        from src.tinyray.core.renderer import Renderer
        from src.tinyray.scene.manager import SceneManager
        from src.tinyray.scene.presets import create_shiny_spheres_scene

        SceneManager().load_scene(create_shiny_spheres_scene())
        renderer = Renderer(PinholeCamera(width=64, height=48))
        renderer.render()
        image = renderer.get_image_numpy()

        assert image.shape == (48, 64, 3)
        assert image.dtype == np.float32
        assert np.all(np.isfinite(image))

    def test_get_image_uint8(self):
        """Test the 8-bit image of an empty scene is the background."""
        from src.tinyray.camera.pinhole import PinholeCamera
        from src.tinyray.core.renderer import Renderer
        from src.tinyray.scene.manager import SceneManager

        SceneManager()
        renderer = Renderer(PinholeCamera(width=8, height=6))
        renderer.render()
        image = renderer.get_image_uint8()

        assert image.shape == (6, 8, 3)
        assert image.dtype == np.uint8
        assert np.all(image == np.array([25, 102, 127], dtype=np.uint8))

    def test_render_mode(self):
        """Test the shading mode argument selects the shading model."""
        from src.tinyray.camera.pinhole import PinholeCamera
        from src.tinyray.core.renderer import Renderer
        from src.tinyray.scene.manager import SceneManager, ShadingMode
        from src.tinyray.scene.presets import create_flat_sphere_scene

        SceneManager().load_scene(create_flat_sphere_scene())
        renderer = Renderer(PinholeCamera(width=64, height=48))

        renderer.render(ShadingMode.FLAT)
        flat = renderer.get_image_numpy()
        renderer.render(ShadingMode.PHONG)
        phong = renderer.get_image_numpy()

        # Without lights, Phong shading turns the sphere black
        assert not np.array_equal(flat, phong)
        assert np.isclose(flat, (0.4, 0.4, 0.3)).all(axis=-1).any()

    def test_save_ppm(self, tmp_path):
        """Test saving the rendered image."""
        from src.tinyray.camera.pinhole import PinholeCamera
        from src.tinyray.core.renderer import Renderer
        from src.tinyray.scene.manager import SceneManager

        SceneManager()
        renderer = Renderer(PinholeCamera(width=8, height=6))
        renderer.render()
        path = renderer.save_ppm(tmp_path / "out.ppm")

        assert path.stat().st_size == len(b"P6\n8 6\n255\n") + 8 * 6 * 3


class TestRenderScene:
    """Test one-shot scene rendering."""

    def test_render_scene_writes_file(self, tmp_path):
        """Test render_scene produces a complete PPM file."""
        from src.tinyray.camera.pinhole import PinholeCamera
        from src.tinyray.core.renderer import render_scene
        from src.tinyray.scene.presets import create_shiny_spheres_scene

        path = render_scene(
            create_shiny_spheres_scene(),
            tmp_path / "out.ppm",
            camera=PinholeCamera(width=32, height=24),
        )

        data = path.read_bytes()
        assert data.startswith(b"P6\n32 24\n255\n")
        assert len(data) == len(b"P6\n32 24\n255\n") + 32 * 24 * 3

    def test_render_scene_unwritable_path(self, tmp_path):
        """Test an unwritable path raises OSError and leaves no file."""
        from src.tinyray.camera.pinhole import PinholeCamera
        from src.tinyray.core.renderer import render_scene
        from src.tinyray.scene.presets import create_empty_scene

        target = tmp_path / "no_such_dir" / "out.ppm"
        with pytest.raises(OSError, match="out.ppm"):
            render_scene(
                create_empty_scene(), target, camera=PinholeCamera(width=8, height=6)
            )
        assert not target.exists()

    def test_render_scene_invalid_scene(self, tmp_path):
        """Test an invalid scene raises ValueError before any file is created."""
        from src.tinyray.camera.pinhole import PinholeCamera
        from src.tinyray.core.renderer import render_scene
        from src.tinyray.scene.manager import Scene, SphereInfo

        scene = Scene(spheres=(SphereInfo(center=(0.0, 0.0, -5.0), radius=-1.0),))
        with pytest.raises(ValueError):
            render_scene(scene, tmp_path / "out.ppm", camera=PinholeCamera(width=8, height=6))
        assert list(tmp_path.iterdir()) == []


class TestFreshRuntime:
    """Test defaults seen by a process that never builds a SceneManager."""

    def test_default_background_without_scene_manager(self):
        """Test rendering straight after import uses the reference background.

        Runs in a separate interpreter so the autouse fixtures of this test
        session cannot set the background first.
        """
        script = textwrap.dedent(
            """
            import taichi as ti

            ti.init(arch=ti.cpu)

            from src.tinyray.camera.pinhole import PinholeCamera
            from src.tinyray.core.renderer import Renderer

            renderer = Renderer(PinholeCamera(width=4, height=3))
            renderer.render()
            print(*renderer.get_image_uint8()[0, 0])
            """
        )
        result = subprocess.run(
            [sys.executable, "-c", script],
            cwd=PROJECT_ROOT,
            capture_output=True,
            text=True,
            timeout=300,
        )

        assert result.returncode == 0, result.stderr
        assert result.stdout.strip().splitlines()[-1] == "25 102 127"
