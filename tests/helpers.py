"""Builders shared by the test modules."""

from __future__ import annotations

import numpy as np

from polygon_evolution import Polygon, ReferenceImage


def solid_reference(width: int, height: int, rgba=(255, 255, 255, 255)) -> ReferenceImage:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = rgba
    return ReferenceImage.from_array(pixels)


def square(color, left=0.0, top=0.0, right=1.0, bottom=1.0) -> Polygon:
    """Axis-aligned rectangle polygon with the given RGBA color."""
    return Polygon(list(color) + [left, top, right, top, right, bottom, left, bottom])
