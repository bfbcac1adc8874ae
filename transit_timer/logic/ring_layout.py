"""Ring geometry for the per-stop countdown dial."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from transit_timer.data.models import Arrival

SECONDS_PER_DEGREE = 10.0
MIN_ANGLE_DEGREES = 1.0
MAX_ANGLE_DEGREES = 360.0

RING_SPACE_PER_WEIGHT = 10.0

DIAL_MARGIN = 40.0
DIAL_RADIUS_FRACTION = 0.46
CENTER_RADIUS_FRACTION = 0.15


@dataclass(frozen=True)
class DialGeometry:
    """Outer dial radius and the radius of the empty hub in its center."""

    dial_radius: float
    center_radius: float

    @classmethod
    def for_width(cls, width: float) -> DialGeometry:
        dial_radius = max(width - DIAL_MARGIN, 0.0) * DIAL_RADIUS_FRACTION
        return cls(dial_radius=dial_radius, center_radius=dial_radius * CENTER_RADIUS_FRACTION)

    @property
    def band_width(self) -> float:
        return self.dial_radius - self.center_radius


@dataclass(frozen=True)
class Ring:
    """Layout of one arrival on the dial."""

    arrival_id: str
    angle: float  # degrees
    radius: float  # center line of the band
    width: float
    color: tuple[int, int, int]
    symbol: str
    opacity: float


def ring_angle(scheduled: datetime, now: datetime) -> float:
    """Sweep in degrees: one degree per ten seconds, clamped to [1, 360]."""
    seconds = (scheduled - now).total_seconds()
    return min(max(seconds / SECONDS_PER_DEGREE, MIN_ANGLE_DEGREES), MAX_ANGLE_DEGREES)


def ring_space(weight: float) -> float:
    return RING_SPACE_PER_WEIGHT * weight


def ring_bands(spaces: Sequence[float], geometry: DialGeometry) -> list[tuple[float, float]]:
    """Return a (radius, width) band per space, outermost first.

    Bands split the dial's band width in proportion to their space. If the
    total space is zero every band is (0, 0).
    """
    total = sum(spaces)
    if total <= 0:
        return [(0.0, 0.0) for _ in spaces]

    bands = []
    cumulative = 0.0
    for space in spaces:
        width = (space / total) * geometry.band_width
        radius = geometry.dial_radius - ((cumulative + 0.5 * space) / total) * geometry.band_width
        bands.append((radius, width))
        cumulative += space
    return bands


def layout_rings(
    arrivals: Sequence[Arrival],
    weights: Mapping[str, float],
    now: datetime,
    geometry: DialGeometry,
) -> list[Ring]:
    """Lay out one ring per arrival for the instant ``now``.

    ``weights`` maps arrival IDs to visibility weights in [0, 1]; arrivals
    without a weight get 0 and take up no space.
    """
    opacities = [weights.get(arrival.arrival_id, 0.0) for arrival in arrivals]
    bands = ring_bands([ring_space(opacity) for opacity in opacities], geometry)

    rings = []
    for arrival, opacity, (radius, width) in zip(arrivals, opacities, bands):
        route = arrival.route
        rings.append(
            Ring(
                arrival_id=arrival.arrival_id,
                angle=ring_angle(arrival.scheduled, now),
                radius=radius,
                width=width,
                color=route.color,
                symbol=route.symbol,
                opacity=opacity,
            )
        )
    return rings


__all__ = [
    "DialGeometry",
    "Ring",
    "layout_rings",
    "ring_angle",
    "ring_bands",
    "ring_space",
]
