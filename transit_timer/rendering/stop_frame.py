"""Build per-stop frames from a Schedule, a clock reading and row geometry."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from transit_timer.data.models import Arrival, Schedule
from transit_timer.logic.ring_layout import DialGeometry, layout_rings
from transit_timer.logic.visibility import (
    Rect,
    blur_radius,
    fade_weight,
    opacity_weight,
    row_weights,
)
from transit_timer.rendering.frame_data import ArrivalRow, StopFrame

NOW_THRESHOLD_SECONDS = 60
PLACEHOLDER_STOP_NAME = "--"


def relative_time_label(scheduled: datetime, now: datetime) -> str:
    """Return "Now" within a minute of arrival, else whole minutes like "7m"."""
    seconds = (scheduled - now).total_seconds()
    if seconds <= NOW_THRESHOLD_SECONDS:
        return "Now"
    return f"{int(seconds // 60)}m"


def _arrival_row(arrival: Arrival, label_time: datetime, opacity: float) -> ArrivalRow:
    route = arrival.route
    return ArrivalRow(
        arrival_id=arrival.arrival_id,
        symbol=route.symbol,
        icon_name=route.icon_name,
        color=route.color,
        display_name=arrival.display_name,
        time_label=relative_time_label(arrival.scheduled, label_time),
        opacity=opacity,
        blur_radius=blur_radius(opacity),
    )


def build_stop_frame(
    schedule: Schedule | None,
    stop_id: int,
    now: datetime,
    geometry: DialGeometry,
    viewport: Rect | None = None,
    row_frames: Mapping[str, Rect] | None = None,
    label_time: datetime | None = None,
) -> StopFrame:
    """Compose rows and rings for ``stop_id`` at ``now``.

    ``label_time`` lets the caller refresh the relative-time labels on a
    slower tick than the rings; it defaults to ``now``.
    """
    frames = row_frames or {}
    stop = schedule.stop(stop_id) if schedule else None
    arrivals = schedule.arrivals_for(stop_id) if schedule else ()
    arrival_ids = [arrival.arrival_id for arrival in arrivals]

    # Rings fade at both viewport edges; rows only at the inset top edge.
    ring_weights = row_weights(viewport, frames, arrival_ids, fade_weight)
    list_weights = row_weights(viewport, frames, arrival_ids, opacity_weight)

    label_clock = label_time or now
    rows = [
        _arrival_row(arrival, label_clock, list_weights[arrival.arrival_id])
        for arrival in arrivals
    ]
    return StopFrame(
        stop_id=stop_id,
        stop_name=stop.name if stop else PLACEHOLDER_STOP_NAME,
        rows=rows,
        rings=layout_rings(arrivals, ring_weights, now, geometry),
    )


__all__ = ["build_stop_frame", "relative_time_label"]
