"""Data structures handed to a renderer."""

from __future__ import annotations

from dataclasses import dataclass

from transit_timer.logic.ring_layout import Ring


@dataclass(frozen=True)
class ArrivalRow:
    """Single arrival row in the list under the dial."""

    arrival_id: str
    symbol: str
    icon_name: str
    color: tuple[int, int, int]
    display_name: str
    time_label: str
    opacity: float = 1.0
    blur_radius: float = 0.0


@dataclass(frozen=True)
class StopFrame:
    """Everything needed to draw one stop's page."""

    stop_id: int
    stop_name: str
    rows: list[ArrivalRow]
    rings: list[Ring]


__all__ = ["ArrivalRow", "StopFrame"]
