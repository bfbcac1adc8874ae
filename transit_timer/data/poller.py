"""Threaded poller that periodically refreshes the arrivals Schedule."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
import itertools
import logging
import threading
import time

from transit_timer.data.models import Schedule
from transit_timer.data.schedule import ScheduleDataError, parse_schedule
from transit_timer.data.trimet_client import TriMetClient, TriMetClientError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollResult:
    """Snapshot of the latest applied refresh.

    ``schedule`` is the newest successfully decoded Schedule; a failed
    refresh keeps the previous one and only sets ``error``.
    """

    schedule: Schedule | None
    fetched_at: float
    error: str | None
    request_id: int


class SchedulePoller:
    """Background poller that refreshes arrivals for a fixed list of stops.

    Every fetch takes a request ID from a counter. A response is applied only
    when its request ID is newer than the last applied schedule, so a slow
    response never replaces one from a later request.
    """

    def __init__(
        self,
        client: TriMetClient,
        stop_ids: Sequence[int],
        poll_interval_seconds: float,
        minutes: int = 60,
        arrivals: int = 20,
    ) -> None:
        self._client = client
        self._stop_ids = list(stop_ids)
        self._poll_interval_seconds = poll_interval_seconds
        self._minutes = minutes
        self._arrivals = arrivals
        self._latest: PollResult | None = None
        self._applied_request_id = 0
        self._request_ids = itertools.count(1)
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def stop_ids(self) -> list[int]:
        return list(self._stop_ids)

    def get_latest(self) -> PollResult | None:
        """Return the most recent applied poll result, if any."""
        with self._lock:
            return self._latest

    def get_schedule(self) -> Schedule | None:
        latest = self.get_latest()
        return latest.schedule if latest else None

    def start(self) -> None:
        """Start the background polling thread."""
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Signal the polling thread to stop."""
        self._stop_event.set()

    def refresh(self) -> threading.Thread:
        """Fetch once on a separate thread, e.g. for a manual refresh."""
        thread = threading.Thread(target=self._fetch_once, daemon=True)
        thread.start()
        return thread

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            self._fetch_once()
            self._stop_event.wait(timeout=self._poll_interval_seconds)

    def _begin_request(self) -> int:
        with self._lock:
            return next(self._request_ids)

    def _fetch_once(self) -> PollResult:
        request_id = self._begin_request()
        logger.debug("Refresh %d started for stops %s", request_id, self._stop_ids)
        try:
            payload = self._client.get_arrivals(
                self._stop_ids, minutes=self._minutes, arrivals=self._arrivals
            )
            schedule = parse_schedule(payload)
        except (TriMetClientError, ScheduleDataError) as exc:
            logger.warning("Refresh %d failed, keeping previous schedule: %s", request_id, exc)
            result = PollResult(
                schedule=None,
                fetched_at=time.time(),
                error=str(exc),
                request_id=request_id,
            )
        else:
            result = PollResult(
                schedule=schedule,
                fetched_at=time.time(),
                error=None,
                request_id=request_id,
            )
        applied = self._apply(result)
        return applied if applied is not None else result

    def _apply(self, result: PollResult) -> PollResult | None:
        with self._lock:
            if result.request_id <= self._applied_request_id:
                logger.info(
                    "Discarding stale response %d; response %d already applied",
                    result.request_id,
                    self._applied_request_id,
                )
                return None

            if result.schedule is None:
                previous = self._latest.schedule if self._latest else None
                result = replace(result, schedule=previous)
            else:
                self._applied_request_id = result.request_id
                logger.info(
                    "Refresh %d applied: %d arrivals, %d stops",
                    result.request_id,
                    len(result.schedule.arrivals),
                    len(result.schedule.stops),
                )
            self._latest = result
            return result


__all__ = ["PollResult", "SchedulePoller"]
