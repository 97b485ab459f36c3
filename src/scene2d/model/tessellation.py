"""
Geometry Tessellation Engine
============================
Pure functions turning angle/radius parameters into point sequences and point
sequences into line or quad topologies. No state, no I/O.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence, Union

import math
import numbers
import numpy as np

from scene2d.config import DEFAULT_ARC_SEGMENTS, TWO_PI
from scene2d.errors import TessellationError

if TYPE_CHECKING:
    import numpy.typing as npt

PointArray = Union["npt.NDArray[np.float64]", Sequence[Sequence[float]]]


def is_full_circle(start_angle: float, end_angle: float) -> bool:
    """An arc whose bounds coincide or span at least a full turn is a circle."""
    return start_angle == end_angle or abs(end_angle - start_angle) >= TWO_PI


def arc_points(
    start_angle: float,
    end_angle: float,
    radius: float,
    segment_count: int = DEFAULT_ARC_SEGMENTS
) -> npt.NDArray[np.float64]:
    """
    Generate points along a circular arc centred at the origin, sweeping
    counterclockwise from `start_angle` to `end_angle`.

    Args:
        start_angle: Start angle in radians, within [-2pi, 2pi].
        end_angle: End angle in radians, within [-2pi, 2pi].
        radius: Circle radius (must be positive).
        segment_count: Number of equal angular divisions of the sweep.

    Returns:
        Array of shape (n, 2). For a full circle (see `is_full_circle`) it holds
        `segment_count` points starting at `start_angle`, the start point is not
        repeated. For a partial arc it holds `segment_count + 1` points, both
        boundary points included.

    Raises:
        TessellationError: If an angle is out of range, the radius is not
            positive or the segment count is not a positive integer.
    """
    if not -TWO_PI <= start_angle <= TWO_PI:
        raise TessellationError(f"angle {start_angle} outside [-2pi, 2pi]", "start_angle")
    if not -TWO_PI <= end_angle <= TWO_PI:
        raise TessellationError(f"angle {end_angle} outside [-2pi, 2pi]", "end_angle")
    if not math.isfinite(radius) or radius <= 0.0:
        raise TessellationError(f"radius must be positive and finite, got {radius}", "radius")
    if isinstance(segment_count, bool) or not isinstance(segment_count, numbers.Integral) or segment_count < 1:
        raise TessellationError(f"must be a positive integer, got {segment_count!r}", "segment_count")

    if is_full_circle(start_angle, end_angle):
        angles = np.linspace(start_angle, start_angle + TWO_PI, segment_count, endpoint=False)
    else:
        # Normalized into (0, 2pi): a negative difference still sweeps counterclockwise
        sweep = math.fmod(end_angle - start_angle, TWO_PI)
        if sweep < 0.0:
            sweep += TWO_PI
        angles = np.linspace(start_angle, start_angle + sweep, segment_count + 1)

    return np.column_stack((radius * np.cos(angles), radius * np.sin(angles)))


def lift_to_3d(points: PointArray) -> npt.NDArray[np.float64]:
    """Place 2D points in the z = 0 plane, returning an (n, 3) array."""
    pts = np.asarray(points, dtype=np.float64)
    if pts.size == 0:
        return np.empty((0, 3), dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise TessellationError(f"expected (n, 2) points, got shape {pts.shape}", "points")
    return np.column_stack((pts, np.zeros(len(pts))))


def points_to_line_strip(points: PointArray) -> npt.NDArray[np.float64]:
    """
    Convert a point sequence into a closed set of line segments.

    For P0 ... Pk-1 the output is P0, P1, P1, P2, ..., Pk-1, P0: every two
    consecutive rows form one segment and the last segment closes the loop.

    Args:
        points: Array of shape (k, d) with k >= 2.

    Returns:
        Array of shape (2k, d).

    Raises:
        TessellationError: If fewer than 2 points are given.
    """
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or len(pts) < 2:
        raise TessellationError(f"at least 2 points required, got {len(pts)}", "points")

    following = np.roll(pts, -1, axis=0)
    return np.stack((pts, following), axis=1).reshape(-1, pts.shape[1])


def quad_strip_between(inner_ring: PointArray, outer_ring: PointArray) -> npt.NDArray[np.float64]:
    """
    Build the quads of an annulus from two rings of equal length.

    Quad i is (inner[i], outer[i], outer[i+1], inner[i+1]), which is
    counterclockwise for rings generated counterclockwise. The last quad wraps
    back to index 0 on both rings.

    Args:
        inner_ring: Array of shape (k, d), k >= 2.
        outer_ring: Array of shape (k, d).

    Returns:
        Array of shape (4k, d); every four consecutive rows form one quad.

    Raises:
        TessellationError: If the rings differ in length or hold fewer than 2 points.
    """
    inner = np.asarray(inner_ring, dtype=np.float64)
    outer = np.asarray(outer_ring, dtype=np.float64)
    if inner.ndim != 2 or len(inner) < 2:
        raise TessellationError(f"at least 2 points required, got {len(inner)}", "inner_ring")
    if outer.shape != inner.shape:
        raise TessellationError(
            f"ring shapes differ: inner {inner.shape}, outer {outer.shape}", "outer_ring"
        )

    return np.stack(
        (inner, outer, np.roll(outer, -1, axis=0), np.roll(inner, -1, axis=0)),
        axis=1
    ).reshape(-1, inner.shape[1])


def signed_area(polygon: PointArray) -> float:
    """Shoelace area of a polygon in the XY plane; positive when counterclockwise."""
    pts = np.asarray(polygon, dtype=np.float64)
    x = pts[:, 0]
    y = pts[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))
