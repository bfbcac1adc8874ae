"""Route display metadata keyed by TriMet route ID."""

from __future__ import annotations

import colorsys
from dataclasses import dataclass
import random

RAIL_ROUTE_IDS = frozenset({90, 100, 190, 193, 194, 200, 203, 208, 250})

ICON_RAIL = "tram"
ICON_BUS = "bus"

ROUTE_SYMBOLS = {
    90: "Red",
    100: "Blue",
    190: "Yellow",
    193: "NS",
    194: "A",
    195: "B",
    200: "Green",
    203: "WES",
    290: "Orange",
}

ROUTE_COLORS = {
    90: (255, 102, 102),
    100: (102, 153, 255),
    190: (255, 204, 26),
    193: (153, 204, 51),
    194: (0, 178, 204),
    195: (0, 178, 204),
    200: (26, 230, 51),
    203: (178, 178, 178),
    290: (230, 102, 0),
}

FALLBACK_SATURATION = 0.45
FALLBACK_VALUE = 1.0


def _fallback_color(route_id: int) -> tuple[int, int, int]:
    # Seeded per route so a route keeps its hue across refreshes and runs.
    hue = random.Random(route_id).random()
    red, green, blue = colorsys.hsv_to_rgb(hue, FALLBACK_SATURATION, FALLBACK_VALUE)
    return (round(red * 255), round(green * 255), round(blue * 255))


@dataclass(frozen=True)
class Route:
    """A transit line resolved from its integer route ID."""

    route_id: int

    @property
    def is_rail(self) -> bool:
        return self.route_id in RAIL_ROUTE_IDS

    @property
    def icon_name(self) -> str:
        return ICON_RAIL if self.is_rail else ICON_BUS

    @property
    def symbol(self) -> str:
        return ROUTE_SYMBOLS.get(self.route_id, str(self.route_id))

    @property
    def color(self) -> tuple[int, int, int]:
        """RGB color; unknown routes get a stable pseudo-random hue."""
        known = ROUTE_COLORS.get(self.route_id)
        if known is not None:
            return known
        return _fallback_color(self.route_id)


__all__ = ["ICON_BUS", "ICON_RAIL", "RAIL_ROUTE_IDS", "Route"]
