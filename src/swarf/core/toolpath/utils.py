"""Geometry helper utilities shared across toolpath strategies."""

from __future__ import annotations

import math

import numpy as np
from shapely.geometry import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPolygon,
    Polygon,
)
from shapely.ops import unary_union
from shapely.validation import make_valid

from .base import Linear, MotionInstruction, Rapid


class GeometryDegenerate(ValueError):
    """Offset or inset leaves nothing to cut."""


class UnsupportedGeometry(ValueError):
    """The strategy has no toolpath for this geometry variant."""


def depth_passes(depth: float, step_down: float) -> list[float]:
    """Z levels for cutting to *depth* in *step_down* increments.

    ``ceil(depth / step_down)`` levels, most shallow first, each bounded by
    the full depth so the last pass lands exactly on ``-depth``.
    """
    if step_down <= 0:
        raise ValueError("step_down must be positive")
    if depth <= 0:
        raise ValueError("depth must be positive")

    n = math.ceil(depth / step_down - 1e-9)
    return [-min(i * step_down, depth) for i in range(1, n + 1)]


def raster_rows(y_min: float, y_max: float, step_over: float) -> tuple[np.ndarray, float]:
    """Evenly spaced row positions spanning [y_min, y_max].

    The nominal *step_over* is shrunk to ``span / ceil(span / step_over)``
    so the rows divide the span exactly and both edges are cut.

    Returns (rows, actual_step_over).
    """
    if step_over <= 0:
        raise ValueError("step_over must be positive")

    span = y_max - y_min
    if span <= 1e-9:
        return np.array([y_min]), 0.0

    n = math.ceil(span / step_over - 1e-9)
    return np.linspace(y_min, y_max, n + 1), span / n


def spiral_points(
    cx: float,
    cy: float,
    radius: float,
    pitch: float,
    points_per_rev: int = 36,
) -> np.ndarray:
    """Archimedean spiral from (cx, cy) out to *radius*.

    Radius grows linearly with angle, *pitch* per revolution at most.
    Returns an (N, 2) array whose first row is the centre.
    """
    turns = max(1, math.ceil(radius / pitch - 1e-9))
    theta = np.linspace(0.0, 2.0 * math.pi * turns, turns * points_per_rev + 1)
    r = radius * theta / theta[-1]
    return np.column_stack((cx + r * np.cos(theta), cy + r * np.sin(theta)))


def circle_points(cx: float, cy: float, radius: float, points_per_rev: int = 36) -> np.ndarray:
    """One closed lap starting and ending at angle 0."""
    theta = np.linspace(0.0, 2.0 * math.pi, points_per_rev + 1)
    return np.column_stack((cx + radius * np.cos(theta), cy + radius * np.sin(theta)))


def ensure_polygon(geom) -> Polygon | MultiPolygon:
    """Return a valid Polygon or MultiPolygon, or empty Polygon on failure."""
    if geom is None or geom.is_empty:
        return Polygon()
    if not geom.is_valid:
        geom = make_valid(geom)
    if isinstance(geom, (Polygon, MultiPolygon)):
        return geom
    if isinstance(geom, GeometryCollection):
        polys = [g for g in geom.geoms if isinstance(g, (Polygon, MultiPolygon))]
        if polys:
            return unary_union(polys)
    return Polygon()


def iter_polygons(geom: Polygon | MultiPolygon):
    """Yield individual Polygon objects from a possibly Multi geometry."""
    if isinstance(geom, Polygon):
        if not geom.is_empty:
            yield geom
    elif isinstance(geom, MultiPolygon):
        for p in geom.geoms:
            if not p.is_empty:
                yield p


def offset_rings(geom: Polygon | LineString, offset: float) -> list[list[tuple[float, float]]]:
    """Cutter-centreline paths for *geom* offset by *offset*.

    Polygons grow for positive offsets and shrink for negative ones; each
    resulting exterior and interior ring comes back closed.  Open lines are
    shifted sideways (positive = left of travel).

    Raises
    ------
    GeometryDegenerate:
        Nothing is left after offsetting.
    """
    if isinstance(geom, LineString):
        shifted = geom.offset_curve(offset) if offset else geom
        if shifted.is_empty:
            raise GeometryDegenerate("offset path is empty")
        if isinstance(shifted, MultiLineString):
            return [list(ls.coords) for ls in shifted.geoms]
        return [list(shifted.coords)]

    centreline = ensure_polygon(geom.buffer(offset) if offset else geom)
    rings: list[list[tuple[float, float]]] = []
    for poly in iter_polygons(centreline):
        rings.append(list(poly.exterior.coords))
        for interior in poly.interiors:
            rings.append(list(interior.coords))
    if not rings:
        raise GeometryDegenerate(f"offset of {offset:.4f} consumes the geometry")
    return rings


def trace(
    coords: list[tuple[float, float]],
    z: float,
    clearance: float,
    feed: float,
    plunge_feed: float,
) -> list[MotionInstruction]:
    """Rapid over the first point, plunge to *z*, feed along *coords*, retract."""
    if len(coords) < 2:
        return []

    x0, y0 = coords[0]
    out: list[MotionInstruction] = [
        Rapid(z=clearance),
        Rapid(x=x0, y=y0),
        Linear(z=z, feed=plunge_feed),
    ]
    x, y = coords[1]
    out.append(Linear(x=x, y=y, feed=feed))
    for x, y in coords[2:]:
        out.append(Linear(x=x, y=y))
    out.append(Rapid(z=clearance))
    return out
