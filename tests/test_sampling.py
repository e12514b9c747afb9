"""
Tests for the angle samplers.
"""

import math

import numpy as np
import pytest

from photon_walk import (
    IsotropicAngleSource,
    SequenceAngleSource,
    UniformAngleSource,
    WalkParams,
    make_source,
)
from photon_walk.sampling import direction_from_angles


def test_uniform_source_ranges():
    """Reference sampler: theta in [0, 2pi), phi in [0, pi)."""
    theta, phi = UniformAngleSource(np.random.default_rng(0)).sample(10_000)

    assert theta.shape == phi.shape == (10_000,)
    assert np.all((theta >= 0.0) & (theta < 2.0 * math.pi))
    assert np.all((phi >= 0.0) & (phi < math.pi))


def test_uniform_source_is_reproducible_with_seed():
    a = UniformAngleSource(np.random.default_rng(123)).sample(50)
    b = UniformAngleSource(np.random.default_rng(123)).sample(50)
    assert np.array_equal(a[0], b[0])
    assert np.array_equal(a[1], b[1])


def test_reference_sampler_is_pole_biased_and_isotropic_is_not():
    """
    With the reference sampler z = cos(theta) follows the arcsine law, so
    |z| > 0.9 happens ~29% of the time; a uniform direction gives 10%.
    """
    n = 200_000
    ref = direction_from_angles(*UniformAngleSource(np.random.default_rng(1)).sample(n))
    iso = direction_from_angles(*IsotropicAngleSource(np.random.default_rng(1)).sample(n))

    ref_polar = np.mean(np.abs(ref[:, 2]) > 0.9)
    iso_polar = np.mean(np.abs(iso[:, 2]) > 0.9)

    assert abs(ref_polar - 0.287) < 0.01
    assert abs(iso_polar - 0.10) < 0.01
    # Isotropic directions have zero mean in every axis.
    assert np.all(np.abs(iso.mean(axis=0)) < 0.01)


def test_direction_from_angles_has_requested_length():
    theta, phi = UniformAngleSource(np.random.default_rng(2)).sample(1000)
    d = direction_from_angles(theta, phi, length=0.5)
    assert d.shape == (1000, 3)
    assert np.allclose(np.linalg.norm(d, axis=1), 0.5)


def test_direction_from_angles_reference_axes():
    assert np.allclose(direction_from_angles(0.0, 0.0), [0.0, 0.0, 1.0])
    assert np.allclose(direction_from_angles(math.pi / 2, 0.0), [1.0, 0.0, 0.0])
    assert np.allclose(direction_from_angles(math.pi / 2, math.pi / 2), [0.0, 1.0, 0.0])


def test_sequence_source_replays_and_wraps():
    src = SequenceAngleSource([(0.1, 0.2), (0.3, 0.4), (0.5, 0.6)])

    theta, phi = src.sample(2)
    assert np.allclose(theta, [0.1, 0.3])
    assert np.allclose(phi, [0.2, 0.4])

    theta, phi = src.sample(3)
    assert np.allclose(theta, [0.5, 0.1, 0.3])
    assert np.allclose(phi, [0.6, 0.2, 0.4])


def test_sequence_source_rejects_empty():
    with pytest.raises(ValueError):
        SequenceAngleSource([])


@pytest.mark.parametrize(
    "isotropic, expected", [(False, UniformAngleSource), (True, IsotropicAngleSource)]
)
def test_make_source_picks_sampler(isotropic, expected):
    src = make_source(WalkParams(isotropic=isotropic), seed=5)
    assert isinstance(src, expected)
