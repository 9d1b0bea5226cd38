"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session, and a few small
scenes reused across test modules.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture
def matte_red():
    """A purely diffuse red material."""
    from spheretracer.scene.description import MaterialInfo

    return MaterialInfo(
        diffuse=(0.8, 0.0, 0.0),
        specular=(0.0, 0.0, 0.0),
        reflection=(0.0, 0.0, 0.0),
        smoothness=32.0,
    )


@pytest.fixture
def mirror():
    """A perfect mirror with no local shading."""
    from spheretracer.scene.description import MaterialInfo

    return MaterialInfo(
        diffuse=(0.0, 0.0, 0.0),
        specular=(0.0, 0.0, 0.0),
        reflection=(1.0, 1.0, 1.0),
        smoothness=1.0,
    )


@pytest.fixture
def sky():
    """A background gradient with distinct ends."""
    from spheretracer.scene.description import Gradient

    return Gradient(start=(0.2, 0.4, 0.6), end=(0.0, 0.0, 1.0))


@pytest.fixture
def single_sphere_scene(matte_red, sky):
    """One unit sphere at (0, 1, 5) lit from (0, 5, 0), camera at the origin."""
    from spheretracer.scene.description import Light, Scene, SceneObject, SphereInfo

    return Scene(
        camera=(0.0, 0.0, 0.0),
        background=sky,
        lights=(Light(origin=(0.0, 5.0, 0.0), intensity=(1.0, 1.0, 1.0)),),
        objects=(SceneObject(SphereInfo(center=(0.0, 1.0, 5.0), radius=1.0), matte_red),),
    )
