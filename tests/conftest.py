"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene and render state before and after each test."""
    # Import here so Taichi is initialized before any field is declared
    from src.beamburst.core.tracer import reset_render_target
    from src.beamburst.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        reset_render_target()

    _clear_all()

    yield

    _clear_all()


@pytest.fixture
def vec3_kernel_result():
    """Scratch field for reading a vec3 back from a test kernel."""
    return ti.Vector.field(3, dtype=ti.f32, shape=())
