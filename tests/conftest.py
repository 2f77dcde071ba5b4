"""Pytest configuration for tinyray tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    discard every field allocated by the modules under test.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Reset spheres, lights, materials and background around each test."""
    # Import here so the fields are created after ti.init()
    from src.tinyray.materials.phong import clear_phong_materials
    from src.tinyray.scene.intersection import clear_scene
    from src.tinyray.scene.lights import (
        DEFAULT_BACKGROUND_COLOR,
        clear_lights,
        set_background_color,
    )

    def _clear_all():
        clear_scene()
        clear_lights()
        clear_phong_materials()
        set_background_color(DEFAULT_BACKGROUND_COLOR)

    _clear_all()
    yield
    _clear_all()
