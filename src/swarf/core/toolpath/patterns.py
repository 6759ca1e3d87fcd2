"""Pattern expansion: where a patterned feature is repeated."""

from __future__ import annotations

import math
from dataclasses import replace

import numpy as np

from ..program import (
    ArcPattern,
    BoltCirclePattern,
    Circle,
    Drill,
    GridPattern,
    LinePattern,
    Path,
    Pattern,
    Pocket,
    Position,
    Rect,
    RegularPolygon,
)


def pattern_positions(pattern: Pattern) -> list[tuple[float, float]]:
    """Ordered XY positions of *pattern*.

    Grids go row by row from the origin; circular patterns go
    counter-clockwise from their start angle.
    """
    if isinstance(pattern, GridPattern):
        ox, oy = pattern.origin.x, pattern.origin.y
        return [
            (ox + c * pattern.spacing_x, oy + r * pattern.spacing_y)
            for r in range(pattern.rows)
            for c in range(pattern.cols)
        ]

    if isinstance(pattern, BoltCirclePattern):
        if pattern.count < 1:
            return []
        radius = pattern.diameter / 2.0
        angles = (math.radians(pattern.start_angle)
                  + np.arange(pattern.count) * 2.0 * math.pi / pattern.count)
        return _on_circle(pattern.center, radius, angles)

    if isinstance(pattern, LinePattern):
        a = math.radians(pattern.angle)
        dx, dy = math.cos(a), math.sin(a)
        return [
            (pattern.origin.x + i * pattern.spacing * dx,
             pattern.origin.y + i * pattern.spacing * dy)
            for i in range(pattern.count)
        ]

    if isinstance(pattern, ArcPattern):
        if pattern.count < 1:
            return []
        if pattern.count == 1:
            angles = np.array([math.radians(pattern.start_angle)])
        else:
            angles = np.radians(np.linspace(pattern.start_angle, pattern.end_angle,
                                            pattern.count))
        return _on_circle(pattern.center, pattern.radius, angles)

    raise TypeError(f"Unknown pattern type: {type(pattern).__name__}")


def _on_circle(center: Position, radius: float, angles: np.ndarray) -> list[tuple[float, float]]:
    xs = center.x + radius * np.cos(angles)
    ys = center.y + radius * np.sin(angles)
    return [(float(x), float(y)) for x, y in zip(xs, ys)]


def translated(op: Drill | Pocket, dx: float, dy: float) -> Drill | Pocket:
    """Copy of *op* shifted by (dx, dy)."""
    if isinstance(op, Drill):
        return replace(op, positions=[Position(p.x + dx, p.y + dy) for p in op.positions])

    g = op.geometry
    if isinstance(g, Rect):
        g = replace(g, x=g.x + dx, y=g.y + dy)
    elif isinstance(g, (Circle, RegularPolygon)):
        g = replace(g, cx=g.cx + dx, cy=g.cy + dy)
    elif isinstance(g, Path):
        g = Path(tuple(Position(p.x + dx, p.y + dy) for p in g.points))
    return replace(op, geometry=g)


def expand(op: Drill | Pocket, pattern: Pattern) -> list[Drill | Pocket]:
    """*op* placed at every position of *pattern*, in pattern order."""
    return [translated(op, x, y) for x, y in pattern_positions(pattern)]
