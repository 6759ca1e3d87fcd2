"""Face milling across a rectangular area."""

from __future__ import annotations

import math

import numpy as np

from .base import Linear, MotionInstruction, Rapid


def face_rows(y_min: float, y_max: float, step_over: float) -> np.ndarray:
    """Row centres covering [y_min, y_max].

    ``ceil(height / step_over)`` rows, each centred in an equal band of
    the area so the outer rows overlap the edges by the same amount.
    """
    height = y_max - y_min
    n = max(1, math.ceil(height / step_over - 1e-9))
    return y_min + (np.arange(n) + 0.5) * height / n


def face(
    bounds: tuple[float, float, float, float],
    depth: float,
    tool_radius: float,
    step_over: float,
    feed: float,
    plunge_feed: float,
    clearance: float,
) -> list[MotionInstruction]:
    """Zigzag across *bounds* (xmin, ymin, xmax, ymax) at ``-depth``.

    Every row runs one tool radius past both X edges.
    """
    x_min, y_min, x_max, y_max = bounds
    left, right = x_min - tool_radius, x_max + tool_radius
    rows = face_rows(y_min, y_max, step_over)

    out: list[MotionInstruction] = [
        Rapid(z=clearance),
        Rapid(x=left, y=float(rows[0])),
        Linear(z=-depth, feed=plunge_feed),
    ]
    for i, y in enumerate(rows):
        x_end = right if i % 2 == 0 else left
        if i == 0:
            out.append(Linear(x=x_end, feed=feed))
        else:
            # Step over off the part, outside the overtravel
            out.append(Linear(y=float(y)))
            out.append(Linear(x=x_end))
    out.append(Rapid(z=clearance))
    return out
