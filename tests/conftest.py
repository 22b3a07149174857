"""Pytest configuration and shared fixtures."""

import random
import sys
from pathlib import Path

import pytest

# Add the source root to the path
src_root = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_root))

from core.vector import Vector3  # noqa: E402
from materials.diffuse_light import DiffuseLight  # noqa: E402
from materials.lambertian import Lambertian  # noqa: E402
from materials.metal import Metal  # noqa: E402


@pytest.fixture
def rng():
    """A seeded random stream so statistical tests are repeatable."""
    return random.Random(1234)


@pytest.fixture
def gray():
    return Lambertian(Vector3(0.5, 0.5, 0.5))


@pytest.fixture
def mirror():
    return Metal(Vector3(0.8, 0.6, 0.4), 0.0)


@pytest.fixture
def light():
    return DiffuseLight(Vector3(15, 15, 15))


def approx_vec(v, rel=1e-6, abs=1e-9):
    """Compare a Vector3 component-wise with pytest.approx."""
    return pytest.approx([v.x, v.y, v.z], rel=rel, abs=abs)


def as_list(v):
    return [v.x, v.y, v.z]
