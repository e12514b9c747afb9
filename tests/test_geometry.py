"""
Unit tests for the segment / marker transform helpers.
"""

import numpy as np
import pytest

from photon_walk.geometry import (
    apply_transform,
    rotation_from_arc,
    segment_transform,
    segment_transforms,
    sphere_transform,
)


@pytest.mark.parametrize(
    "dst",
    [
        (1.0, 0.0, 0.0),
        (0.0, 1.0, 0.0),
        (0.0, 0.0, -3.0),
        (-1.0, 0.0, 0.0),
        (0.3, -0.4, 0.87),
    ],
)
def test_rotation_from_arc_is_proper_rotation(dst):
    """Result is orthonormal with det +1 and maps +x onto the target direction."""
    R = rotation_from_arc((1.0, 0.0, 0.0), dst)

    assert np.allclose(R @ R.T, np.eye(3), atol=1e-12)
    assert np.isclose(np.linalg.det(R), 1.0)

    expected = np.asarray(dst) / np.linalg.norm(dst)
    assert np.allclose(R @ np.array([1.0, 0.0, 0.0]), expected, atol=1e-12)


def test_rotation_from_arc_rejects_zero_vector():
    with pytest.raises(ValueError):
        rotation_from_arc((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))


def test_segment_transform_maps_unit_cylinder_axis_onto_segment():
    """Cylinder base (0,0,0) lands on start, tip (1,0,0) lands on end."""
    start = np.array([1.0, 2.0, 3.0])
    end = np.array([-2.0, 6.0, 3.0])
    m = segment_transform(start, end, radius=0.03)

    assert np.allclose(apply_transform(m, [0.0, 0.0, 0.0]), start)
    assert np.allclose(apply_transform(m, [1.0, 0.0, 0.0]), end)


def test_segment_transform_scales_cross_section_by_radius():
    start = np.zeros(3)
    end = np.array([0.0, 0.0, 10.0])
    m = segment_transform(start, end, radius=0.5)

    rim = apply_transform(m, [0.0, 1.0, 0.0])
    # Rim point sits at the segment start, one radius away from the axis.
    assert np.isclose(np.linalg.norm(rim - start), 0.5)
    assert np.isclose(np.dot(rim - start, end - start), 0.0)


def test_segment_transform_antiparallel_direction():
    start = np.array([5.0, 0.0, 0.0])
    end = np.array([2.0, 0.0, 0.0])
    m = segment_transform(start, end)
    assert np.allclose(apply_transform(m, [1.0, 0.0, 0.0]), end)


def test_segment_transform_zero_length_is_finite():
    p = np.array([1.0, 1.0, 1.0])
    m = segment_transform(p, p)
    assert np.all(np.isfinite(m))
    assert np.allclose(apply_transform(m, [1.0, 0.0, 0.0]), p)


def test_segment_transforms_stacks_and_handles_empty():
    segs = np.array(
        [
            [[0.0, 0.0, 0.0], [0.0, 1.0, 0.0]],
            [[0.0, 1.0, 0.0], [0.0, 1.0, 2.0]],
        ]
    )
    out = segment_transforms(segs)
    assert out.shape == (2, 4, 4)
    assert np.allclose(out[1], segment_transform(segs[1, 0], segs[1, 1]))

    assert segment_transforms(np.empty((0, 2, 3))).shape == (0, 4, 4)


def test_sphere_transform_translation_and_scale():
    m = sphere_transform((1.0, -2.0, 3.0), 2.0)
    assert np.allclose(apply_transform(m, [0.0, 0.0, 0.0]), [1.0, -2.0, 3.0])
    assert np.allclose(apply_transform(m, [1.0, 0.0, 0.0]), [3.0, -2.0, 3.0])

    points = apply_transform(m, np.eye(3))
    assert points.shape == (3, 3)
