"""Decode TriMet arrivals JSON and normalize it into a Schedule."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
import logging
import math
from typing import Any

from transit_timer.data.models import (
    Arrival,
    Direction,
    Schedule,
    Status,
    Stop,
    VehiclePosition,
)

logger = logging.getLogger(__name__)


class ScheduleDataError(Exception):
    """Raised when an arrivals response is inconsistent or malformed."""


class ScheduleParseError(ScheduleDataError, ValueError):
    """Raised when a record is missing a field or has a field of the wrong type."""


class DuplicateStopIDError(ScheduleDataError):
    """Raised when two stops in one response share a stop ID."""


class DuplicateArrivalIDError(ScheduleDataError):
    """Raised when two arrivals in one response share an arrival ID."""


def _require(record: dict[str, Any], key: str, context: str) -> Any:
    if key not in record or record[key] is None:
        raise ScheduleParseError(f"Missing required field '{key}' in {context}")
    return record[key]


def _as_int(value: Any, key: str, context: str) -> int:
    # bool is an int subclass; a JSON true/false is never a valid ID.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ScheduleParseError(f"Field '{key}' in {context} must be an integer, got {value!r}")
    return value


def _as_float(value: Any, key: str, context: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScheduleParseError(f"Field '{key}' in {context} must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError as exc:
        raise ScheduleParseError(f"Field '{key}' in {context} is out of range") from exc
    if not math.isfinite(number):
        raise ScheduleParseError(f"Field '{key}' in {context} must be finite, got {value!r}")
    return number


def _as_str(value: Any, key: str, context: str) -> str:
    if not isinstance(value, str):
        raise ScheduleParseError(f"Field '{key}' in {context} must be a string, got {value!r}")
    return value


def decode_timestamp(value: Any, key: str = "timestamp", context: str = "response") -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    millis = _as_float(value, key, context)
    try:
        return datetime.fromtimestamp(millis / 1000.0, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise ScheduleParseError(f"Field '{key}' in {context} is not a valid timestamp: {value!r}") from exc


def _as_vehicle_id(value: Any, context: str) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ScheduleParseError(f"Field 'vehicleID' in {context} must be a string, got {value!r}")
    return str(value)


def _decode_position(value: Any, context: str) -> VehiclePosition | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ScheduleParseError(f"Field 'blockPosition' in {context} must be an object")
    heading = value.get("heading")
    return VehiclePosition(
        latitude=_as_float(_require(value, "lat", context), "lat", context),
        longitude=_as_float(_require(value, "lng", context), "lng", context),
        heading=_as_float(heading, "heading", context) if heading is not None else None,
    )


def decode_arrival(record: Any) -> Arrival:
    """Decode one entry of ``resultSet.arrival``."""
    if not isinstance(record, dict):
        raise ScheduleParseError(f"Arrival record must be an object, got {type(record).__name__}")

    arrival_id = _as_str(_require(record, "id", "arrival"), "id", "arrival")
    context = f"arrival {arrival_id}"

    status_raw = _require(record, "status", context)
    try:
        status = Status(status_raw)
    except ValueError as exc:
        raise ScheduleParseError(f"Unknown status {status_raw!r} in {context}") from exc

    estimated = record.get("estimated")

    return Arrival(
        arrival_id=arrival_id,
        route_id=_as_int(_require(record, "route", context), "route", context),
        stop_id=_as_int(_require(record, "locid", context), "locid", context),
        full_sign=_as_str(_require(record, "fullSign", context), "fullSign", context),
        scheduled=decode_timestamp(_require(record, "scheduled", context), "scheduled", context),
        status=status,
        estimated=decode_timestamp(estimated, "estimated", context) if estimated is not None else None,
        vehicle_id=_as_vehicle_id(record.get("vehicleID"), context),
        vehicle_position=_decode_position(record.get("blockPosition"), context),
    )


def decode_stop(record: Any) -> Stop:
    """Decode one entry of ``resultSet.location``."""
    if not isinstance(record, dict):
        raise ScheduleParseError(f"Location record must be an object, got {type(record).__name__}")

    stop_id = _as_int(_require(record, "id", "location"), "id", "location")
    context = f"location {stop_id}"

    direction_raw = _require(record, "dir", context)
    try:
        direction = Direction(direction_raw)
    except ValueError as exc:
        raise ScheduleParseError(f"Unknown direction {direction_raw!r} in {context}") from exc

    return Stop(
        stop_id=stop_id,
        name=_as_str(_require(record, "desc", context), "desc", context),
        latitude=_as_float(_require(record, "lat", context), "lat", context),
        longitude=_as_float(_require(record, "lng", context), "lng", context),
        direction=direction,
    )


def normalize(
    arrivals: Iterable[Arrival],
    stops: Iterable[Stop],
    query_time: datetime,
) -> Schedule:
    """Build a Schedule with its per-stop groupings.

    Only estimated arrivals are grouped; within a stop they are ordered by
    scheduled time, ties keeping input order. Duplicate stop or arrival IDs
    reject the whole response. Arrivals that reference a stop missing from
    ``stops`` are left out of the groupings but kept in ``arrivals``.
    """
    arrival_list = tuple(arrivals)
    stop_list = tuple(stops)

    stops_by_id: dict[int, Stop] = {}
    for stop in stop_list:
        if stop.stop_id in stops_by_id:
            raise DuplicateStopIDError(f"Stop ID {stop.stop_id} appears more than once")
        stops_by_id[stop.stop_id] = stop

    seen_ids: set[str] = set()
    for arrival in arrival_list:
        if arrival.arrival_id in seen_ids:
            raise DuplicateArrivalIDError(f"Arrival ID {arrival.arrival_id!r} appears more than once")
        seen_ids.add(arrival.arrival_id)

    visible = sorted(
        (a for a in arrival_list if a.status == Status.ESTIMATED),
        key=lambda a: a.scheduled,
    )

    grouped: dict[int, list[Arrival]] = {}
    for arrival in visible:
        if arrival.stop_id not in stops_by_id:
            logger.warning(
                "Dropping arrival %s: unknown stop ID %s", arrival.arrival_id, arrival.stop_id
            )
            continue
        grouped.setdefault(arrival.stop_id, []).append(arrival)

    return Schedule(
        arrivals=arrival_list,
        stops=stop_list,
        query_time=query_time,
        arrivals_by_stop={stop_id: tuple(group) for stop_id, group in grouped.items()},
        stops_by_id=stops_by_id,
    )


def parse_schedule(payload: Any) -> Schedule:
    """Decode a full ``/ws/v2/arrivals`` JSON body into a Schedule."""
    if not isinstance(payload, dict):
        raise ScheduleParseError("Response body must be a JSON object")
    result_set = payload.get("resultSet")
    if not isinstance(result_set, dict):
        raise ScheduleParseError("Response is missing the 'resultSet' object")

    raw_arrivals = result_set.get("arrival", [])
    raw_stops = result_set.get("location", [])
    if not isinstance(raw_arrivals, list):
        raise ScheduleParseError("'resultSet.arrival' must be an array")
    if not isinstance(raw_stops, list):
        raise ScheduleParseError("'resultSet.location' must be an array")

    query_time = decode_timestamp(
        _require(result_set, "queryTime", "resultSet"), "queryTime", "resultSet"
    )
    return normalize(
        [decode_arrival(record) for record in raw_arrivals],
        [decode_stop(record) for record in raw_stops],
        query_time,
    )


__all__ = [
    "DuplicateArrivalIDError",
    "DuplicateStopIDError",
    "ScheduleDataError",
    "ScheduleParseError",
    "decode_arrival",
    "decode_stop",
    "decode_timestamp",
    "normalize",
    "parse_schedule",
]
