"""
Quadratic Bezier evaluation, De Casteljau splitting and sampling.

Curves are (start, control, end) tuples of points.
"""

import numpy as np

from slabgeom.geometry.vectors import lerp

T_EPSILON = 0.0001
DEFAULT_SAMPLES = 24


def quad_point(t, start, control, end):
    """Point on a quadratic Bezier at parameter t (clamped to [0, 1])."""
    t = min(max(t, 0.0), 1.0)
    inv = 1 - t
    x = inv * inv * start[0] + 2 * inv * t * control[0] + t * t * end[0]
    y = inv * inv * start[1] + 2 * inv * t * control[1] + t * t * end[1]
    return (x, y)


def quad_split(start, control, end, t):
    """Split a curve at t into (left, right) curves."""
    p01 = lerp(start, control, t)
    p12 = lerp(control, end, t)
    p012 = lerp(p01, p12, t)
    return (start, p01, p012), (p012, p12, end)


def quad_subsegment(start, control, end, t0, t1):
    """
    The part of a curve between two parameters.

    Parameters are clamped and sorted. A range ending at 0 collapses to the
    start point and a range covering [0, 1] returns the curve unchanged.
    """
    low = min(max(min(t0, t1), 0.0), 1.0)
    high = min(max(max(t0, t1), 0.0), 1.0)
    if high <= T_EPSILON:
        return (start, control, start)
    if low <= T_EPSILON and high >= 1 - T_EPSILON:
        return (start, control, end)
    left, _ = quad_split(start, control, end, high)
    if low <= T_EPSILON:
        return left
    _, right = quad_split(left[0], left[1], left[2], low / high)
    return right


def sample_quad(start, control, end, samples=DEFAULT_SAMPLES):
    """Evenly spaced points along a curve as an (samples + 1, 2) array."""
    t = np.linspace(0.0, 1.0, samples + 1)[:, None]
    p0 = np.asarray(start, dtype=float)
    p1 = np.asarray(control, dtype=float)
    p2 = np.asarray(end, dtype=float)
    return (1 - t) ** 2 * p0 + 2 * (1 - t) * t * p1 + t ** 2 * p2


def point_quad_distance(point, start, control, end, samples=DEFAULT_SAMPLES):
    """Approximate distance from a point to a curve using its sampled polyline."""
    pts = sample_quad(start, control, end, samples)
    p = np.asarray(point, dtype=float)
    a = pts[:-1]
    b = pts[1:]
    ab = b - a
    denom = np.einsum("ij,ij->i", ab, ab)
    safe = np.where(denom < T_EPSILON, 1.0, denom)
    t = np.clip(np.einsum("ij,ij->i", p - a, ab) / safe, 0.0, 1.0)
    t = np.where(denom < T_EPSILON, 0.0, t)
    proj = a + ab * t[:, None]
    return float(np.min(np.linalg.norm(proj - p, axis=1)))
