"""
Vector and transform helpers for drawing walk paths.

Path segments are drawn as instances of a unit cylinder lying along +x
(from x=0 to x=1, radius 1). Markers and the boundary are unit spheres.
All transforms are 4x4 homogeneous matrices acting on column vectors.
"""

from __future__ import annotations

import numpy as np

from .params import DEFAULT_MARKER_SCALE, DEFAULT_SEGMENT_RADIUS

X_AXIS = np.array([1.0, 0.0, 0.0], dtype=np.float64)
EPSILON = 1e-12


def _skew(v: np.ndarray) -> np.ndarray:
    return np.array(
        [
            [0.0, -v[2], v[1]],
            [v[2], 0.0, -v[0]],
            [-v[1], v[0], 0.0],
        ],
        dtype=np.float64,
    )


def _orthogonal_axis(v: np.ndarray) -> np.ndarray:
    """Any unit vector perpendicular to v."""
    helper = X_AXIS if abs(v[0]) < 0.9 else np.array([0.0, 1.0, 0.0])
    axis = np.cross(v, helper)
    return axis / np.linalg.norm(axis)


def rotation_from_arc(src, dst) -> np.ndarray:
    """
    Shortest-arc rotation taking direction src onto direction dst.

    Uses the Rodrigues form R = I + K + K^2 / (1 + c), where K is the skew
    matrix of src x dst and c = src . dst. Antiparallel inputs have no unique
    shortest arc; those rotate by pi about an axis perpendicular to src.
    """
    a = np.asarray(src, dtype=np.float64)
    b = np.asarray(dst, dtype=np.float64)
    na = np.linalg.norm(a)
    nb = np.linalg.norm(b)
    if na < EPSILON or nb < EPSILON:
        raise ValueError("rotation_from_arc needs two non-zero vectors")
    a = a / na
    b = b / nb

    c = float(np.dot(a, b))
    if c > 1.0 - EPSILON:
        return np.eye(3)
    if c < -1.0 + EPSILON:
        axis = _orthogonal_axis(a)
        return 2.0 * np.outer(axis, axis) - np.eye(3)

    K = _skew(np.cross(a, b))
    return np.eye(3) + K + (K @ K) / (1.0 + c)


def segment_transform(start, end, radius: float = DEFAULT_SEGMENT_RADIUS) -> np.ndarray:
    """
    Translation * rotation * scale mapping the unit +x cylinder onto start -> end.

    The scale is diag(length, radius, radius). A zero-length segment keeps the
    identity rotation and collapses along x.
    """
    p0 = np.asarray(start, dtype=np.float64)
    p1 = np.asarray(end, dtype=np.float64)
    d = p1 - p0
    length = float(np.linalg.norm(d))

    rot = rotation_from_arc(X_AXIS, d) if length > EPSILON else np.eye(3)

    m = np.eye(4)
    m[:3, :3] = rot @ np.diag([length, radius, radius])
    m[:3, 3] = p0
    return m


def segment_transforms(segments, radius: float = DEFAULT_SEGMENT_RADIUS) -> np.ndarray:
    """Stack segment_transform over an (N, 2, 3) array; returns (N, 4, 4)."""
    segs = np.asarray(segments, dtype=np.float64).reshape(-1, 2, 3)
    out = np.empty((segs.shape[0], 4, 4), dtype=np.float64)
    for i, (p0, p1) in enumerate(segs):
        out[i] = segment_transform(p0, p1, radius)
    return out


def sphere_transform(center=(0.0, 0.0, 0.0), scale: float = DEFAULT_MARKER_SCALE) -> np.ndarray:
    """Translation * uniform scale for a unit sphere."""
    m = np.diag([scale, scale, scale, 1.0]).astype(np.float64)
    m[:3, 3] = np.asarray(center, dtype=np.float64)
    return m


def apply_transform(m: np.ndarray, points) -> np.ndarray:
    """Apply a 4x4 transform to one point or an (N, 3) array of points."""
    pts = np.atleast_2d(np.asarray(points, dtype=np.float64))
    homo = np.hstack([pts, np.ones((pts.shape[0], 1))])
    out = (m @ homo.T).T[:, :3]
    return out[0] if np.ndim(points) == 1 else out


__all__ = [
    "rotation_from_arc",
    "segment_transform",
    "segment_transforms",
    "sphere_transform",
    "apply_transform",
]
