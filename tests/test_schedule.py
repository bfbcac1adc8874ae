from __future__ import annotations

from datetime import datetime, timezone

import pytest

from transit_timer.data.models import Direction, Schedule, Status
from transit_timer.data.schedule import (
    DuplicateArrivalIDError,
    DuplicateStopIDError,
    ScheduleParseError,
    decode_arrival,
    normalize,
    parse_schedule,
)

QUERY_MS = 1_700_000_000_000


def _arrival(
    arrival_id: str,
    stop_id: int = 1,
    status: str = "estimated",
    offset_seconds: int = 0,
    route: int = 15,
    **extra,
) -> dict:
    record = {
        "id": arrival_id,
        "route": route,
        "fullSign": "15  Main St",
        "locid": stop_id,
        "scheduled": QUERY_MS + offset_seconds * 1000,
        "status": status,
    }
    record.update(extra)
    return record


def _stop(stop_id: int = 1, desc: str = "SW 5th & Oak") -> dict:
    return {"id": stop_id, "desc": desc, "lat": 45.52, "lng": -122.67, "dir": "Northbound"}


def _payload(arrivals: list[dict], stops: list[dict]) -> dict:
    return {"resultSet": {"arrival": arrivals, "location": stops, "queryTime": QUERY_MS}}


def _ids(arrivals) -> list[str]:
    return [arrival.arrival_id for arrival in arrivals]


def test_estimated_arrivals_sorted_and_others_excluded() -> None:
    schedule = parse_schedule(
        _payload(
            [
                _arrival("a", offset_seconds=300),
                _arrival("b", offset_seconds=60),
                _arrival("c", status="scheduled", offset_seconds=30),
            ],
            [_stop(1)],
        )
    )

    assert _ids(schedule.arrivals_by_stop[1]) == ["b", "a"]
    assert _ids(schedule.arrivals) == ["a", "b", "c"]


def test_non_estimated_absent_for_every_stop() -> None:
    schedule = parse_schedule(
        _payload(
            [
                _arrival("x1", stop_id=1, status="canceled", offset_seconds=10),
                _arrival("x2", stop_id=2, status="scheduled", offset_seconds=20),
                _arrival("e1", stop_id=2, offset_seconds=40),
            ],
            [_stop(1), _stop(2)],
        )
    )

    visible = [a for group in schedule.arrivals_by_stop.values() for a in group]
    assert all(arrival.status == Status.ESTIMATED for arrival in visible)
    assert schedule.arrivals_for(1) == ()
    assert _ids(schedule.arrivals_for(2)) == ["e1"]


def test_ties_keep_input_order() -> None:
    schedule = parse_schedule(
        _payload(
            [
                _arrival("late", offset_seconds=500),
                _arrival("first", offset_seconds=100),
                _arrival("second", offset_seconds=100),
            ],
            [_stop(1)],
        )
    )

    group = schedule.arrivals_for(1)
    assert _ids(group) == ["first", "second", "late"]
    assert all(group[i].scheduled <= group[i + 1].scheduled for i in range(len(group) - 1))


def test_duplicate_stop_id_rejected() -> None:
    with pytest.raises(DuplicateStopIDError):
        parse_schedule(_payload([], [_stop(1), _stop(1, desc="Other")]))


def test_duplicate_arrival_id_rejected() -> None:
    with pytest.raises(DuplicateArrivalIDError):
        parse_schedule(_payload([_arrival("a"), _arrival("a", offset_seconds=60)], [_stop(1)]))


def test_unknown_stop_dropped_from_groupings() -> None:
    schedule = parse_schedule(
        _payload([_arrival("a", stop_id=1), _arrival("orphan", stop_id=99)], [_stop(1)])
    )

    assert 99 not in schedule.arrivals_by_stop
    assert _ids(schedule.arrivals) == ["a", "orphan"]
    assert _ids(schedule.arrivals_for(1)) == ["a"]


def test_query_time_and_stop_decoding() -> None:
    schedule = parse_schedule(_payload([], [_stop(7, desc="Pioneer Square")]))

    assert schedule.query_time == datetime.fromtimestamp(QUERY_MS / 1000, tz=timezone.utc)
    stop = schedule.stop(7)
    assert stop is not None
    assert stop.name == "Pioneer Square"
    assert stop.direction == Direction.NORTHBOUND
    assert stop.coordinate == (45.52, -122.67)
    assert schedule.stop(8) is None


def test_decode_arrival_optional_fields() -> None:
    arrival = decode_arrival(
        _arrival(
            "a",
            estimated=QUERY_MS + 90_000,
            vehicleID="3021",
            blockPosition={"lat": 45.5, "lng": -122.6, "heading": 270},
        )
    )

    assert arrival.vehicle_id == "3021"
    assert arrival.estimated == datetime.fromtimestamp((QUERY_MS + 90_000) / 1000, tz=timezone.utc)
    assert arrival.vehicle_position is not None
    assert arrival.vehicle_position.coordinate == (45.5, -122.6)
    assert arrival.vehicle_position.heading == 270.0

    bare = decode_arrival(_arrival("b"))
    assert bare.estimated is None
    assert bare.vehicle_id is None
    assert bare.vehicle_position is None


def test_unknown_status_is_parse_error() -> None:
    with pytest.raises(ScheduleParseError):
        decode_arrival(_arrival("a", status="delayed"))


def test_missing_field_is_parse_error() -> None:
    record = _arrival("a")
    del record["scheduled"]
    with pytest.raises(ScheduleParseError):
        decode_arrival(record)


def test_missing_result_set_is_parse_error() -> None:
    with pytest.raises(ScheduleParseError):
        parse_schedule({"error": "bad appID"})


def test_normalize_leaves_inputs_untouched() -> None:
    arrivals = [decode_arrival(_arrival("a", offset_seconds=60)), decode_arrival(_arrival("b"))]
    snapshot = list(arrivals)
    query_time = datetime.fromtimestamp(QUERY_MS / 1000, tz=timezone.utc)

    first = normalize(arrivals, [], query_time)
    second = normalize(arrivals, [], query_time)

    assert arrivals == snapshot
    assert first == second


@pytest.mark.parametrize("scheduled", [10**20, 10**400, float("nan"), float("inf")])
def test_unrepresentable_timestamp_is_parse_error(scheduled) -> None:
    with pytest.raises(ScheduleParseError):
        parse_schedule(_payload([_arrival("a", scheduled=scheduled)], [_stop(1)]))


def test_out_of_range_query_time_is_parse_error() -> None:
    payload = _payload([], [_stop(1)])
    payload["resultSet"]["queryTime"] = 10**20

    with pytest.raises(ScheduleParseError):
        parse_schedule(payload)


def test_non_finite_coordinate_is_parse_error() -> None:
    stop = _stop(1)
    stop["lat"] = float("nan")

    with pytest.raises(ScheduleParseError):
        parse_schedule(_payload([], [stop]))


def test_vehicle_id_accepts_numbers_and_rejects_objects() -> None:
    assert decode_arrival(_arrival("a", vehicleID=3021)).vehicle_id == "3021"

    with pytest.raises(ScheduleParseError):
        decode_arrival(_arrival("b", vehicleID={"id": 3021}))
    with pytest.raises(ScheduleParseError):
        decode_arrival(_arrival("c", vehicleID=True))


def test_schedule_is_unhashable_but_comparable() -> None:
    schedule = parse_schedule(_payload([_arrival("a")], [_stop(1)]))

    assert Schedule.__hash__ is None
    assert schedule == parse_schedule(_payload([_arrival("a")], [_stop(1)]))
    with pytest.raises(TypeError):
        hash(schedule)
