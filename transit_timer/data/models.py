"""Data structures for a TriMet arrivals response."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from transit_timer.data.routes import Route


class Direction(str, Enum):
    NORTHBOUND = "Northbound"
    EASTBOUND = "Eastbound"
    SOUTHBOUND = "Southbound"
    WESTBOUND = "Westbound"


class Status(str, Enum):
    SCHEDULED = "scheduled"
    ESTIMATED = "estimated"
    CANCELED = "canceled"


@dataclass(frozen=True)
class VehiclePosition:
    """Live position of the vehicle serving an arrival."""

    latitude: float
    longitude: float
    heading: float | None = None

    @property
    def coordinate(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class Stop:
    """A physical stop (TriMet "location")."""

    stop_id: int
    name: str
    latitude: float
    longitude: float
    direction: Direction

    @property
    def coordinate(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class Arrival:
    """A single predicted or scheduled vehicle visit to a stop."""

    arrival_id: str
    route_id: int
    stop_id: int
    full_sign: str
    scheduled: datetime
    status: Status
    estimated: datetime | None = None
    vehicle_id: str | None = None
    vehicle_position: VehiclePosition | None = None

    @property
    def route(self) -> Route:
        return Route(self.route_id)

    @property
    def display_name(self) -> str:
        """Rider-facing headsign with the agency's route prefix removed.

        Rail signs are cut after the first " to " (case-insensitive); all
        other signs after the first double space. Signs with neither
        marker are returned whole.
        """
        sign = self.full_sign
        to_index = sign.lower().find(" to ")
        space_index = sign.find("  ")

        if self.route.is_rail and to_index >= 0:
            return sign[to_index + len(" to "):]
        if space_index >= 0:
            return sign[space_index + len("  "):]
        return sign


@dataclass(frozen=True)
class Schedule:
    """One successfully decoded arrivals response plus its derived groupings.

    Instances are built once by ``normalize`` and replaced wholesale on the
    next refresh; nothing mutates them afterwards.
    """

    arrivals: tuple[Arrival, ...]
    stops: tuple[Stop, ...]
    query_time: datetime
    arrivals_by_stop: dict[int, tuple[Arrival, ...]] = field(default_factory=dict)
    stops_by_id: dict[int, Stop] = field(default_factory=dict)

    # Holds dicts, so compare by value but never hash.
    __hash__ = None  # type: ignore[assignment]

    def arrivals_for(self, stop_id: int) -> tuple[Arrival, ...]:
        """Visible (estimated) arrivals for a stop, soonest first."""
        return self.arrivals_by_stop.get(stop_id, ())

    def stop(self, stop_id: int) -> Stop | None:
        return self.stops_by_id.get(stop_id)


__all__ = ["Arrival", "Direction", "Schedule", "Status", "Stop", "VehiclePosition"]
