"""Scroll-position visibility weights for arrival rows.

Rectangles share one coordinate space with y growing downward. Two rules
are provided and they are intentionally different:

* ``fade_weight`` fades a row out at both the (inset) top edge and the
  bottom edge of the viewport. It drives ring space and ring opacity.
* ``opacity_weight`` only fades at the inset top edge; rows hanging off
  the bottom stay opaque. It drives row opacity and blur.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

TOP_INSET = 50.0
MISSING_GEOMETRY_WEIGHT = 0.5
MAX_BLUR_RADIUS = 20.0


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_y(self) -> float:
        return self.y + self.height


def fade_weight(viewport: Rect | None, row: Rect | None) -> float:
    """How settled ``row`` is inside ``viewport``, fading at both edges."""
    if viewport is None or row is None:
        logger.debug("Missing geometry (viewport=%s, row=%s)", viewport, row)
        return MISSING_GEOMETRY_WEIGHT

    top = viewport.min_y + TOP_INSET
    bottom = viewport.max_y

    if top > row.max_y:
        return 0.0
    if bottom < row.min_y:
        return 0.0
    if row.min_y < top < row.max_y:
        return (row.max_y - top) / row.height
    if row.min_y < bottom < row.max_y:
        return (bottom - row.min_y) / row.height
    return 1.0


def opacity_weight(viewport: Rect | None, row: Rect | None) -> float:
    """How settled ``row`` is below the viewport's inset top edge."""
    if viewport is None or row is None:
        logger.debug("Missing geometry (viewport=%s, row=%s)", viewport, row)
        return MISSING_GEOMETRY_WEIGHT

    top = viewport.min_y + TOP_INSET

    if top > row.max_y:
        return 0.0
    if row.min_y < top < row.max_y:
        return (row.max_y - top) / row.height
    return 1.0


def blur_radius(weight: float) -> float:
    return (1.0 - weight) * MAX_BLUR_RADIUS


def row_weights(
    viewport: Rect | None,
    rows: Mapping[str, Rect],
    row_ids: Iterable[str],
    rule: Callable[[Rect | None, Rect | None], float] = fade_weight,
) -> dict[str, float]:
    """Apply ``rule`` to each row ID; unmeasured rows get the neutral weight."""
    return {row_id: rule(viewport, rows.get(row_id)) for row_id in row_ids}


def stack_rows(
    row_ids: Iterable[str],
    viewport: Rect,
    row_height: float,
    scroll_offset: float = 0.0,
    padding: float = TOP_INSET,
) -> dict[str, Rect]:
    """Frames for rows stacked top to bottom in a scrolled list."""
    frames = {}
    y = viewport.min_y + padding - scroll_offset
    for row_id in row_ids:
        frames[row_id] = Rect(viewport.x, y, viewport.width, row_height)
        y += row_height
    return frames


__all__ = [
    "MISSING_GEOMETRY_WEIGHT",
    "Rect",
    "TOP_INSET",
    "blur_radius",
    "fade_weight",
    "opacity_weight",
    "row_weights",
    "stack_rows",
]
