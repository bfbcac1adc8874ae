"""Live dial preview: poll TriMet and write one PNG per configured stop."""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
import logging
import time

from transit_timer.config import configure_logging, load_config
from transit_timer.data.poller import SchedulePoller
from transit_timer.data.trimet_client import TriMetClient
from transit_timer.logic.ring_layout import DialGeometry
from transit_timer.logic.visibility import Rect, stack_rows
from transit_timer.rendering import build_stop_frame, compose_dial, frame_path, save_frame

ROW_HEIGHT = 44.0
LIST_HEIGHT = 400.0

logger = logging.getLogger("live_preview")


def _render_all(
    poller: SchedulePoller,
    geometry: DialGeometry,
    width: int,
    now: datetime,
    label_time: datetime,
    scroll_offset: float,
    output_dir: str,
) -> None:
    schedule = poller.get_schedule()
    # No real scroll view here; lay the rows out under the dial.
    viewport = Rect(0.0, float(width), float(width), LIST_HEIGHT)
    for stop_id in poller.stop_ids:
        arrivals = schedule.arrivals_for(stop_id) if schedule else ()
        row_frames = stack_rows(
            [arrival.arrival_id for arrival in arrivals],
            viewport,
            ROW_HEIGHT,
            scroll_offset=scroll_offset,
        )
        frame = build_stop_frame(
            schedule,
            stop_id,
            now,
            geometry,
            viewport=viewport,
            row_frames=row_frames,
            label_time=label_time,
        )
        save_frame(compose_dial(frame, width), frame_path(stop_id, output_dir))


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default="config/config.yaml", help="Path to config YAML")
    parser.add_argument("--output-dir", default="emulator_output", help="Directory for PNG frames")
    parser.add_argument(
        "--scroll-offset",
        type=float,
        default=0.0,
        help="Simulated scroll offset of the arrival list",
    )
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.log)
    if not config.trimet.app_id:
        logger.error("TRIMET_APP_ID is not set")
        return 1

    client = TriMetClient(config.trimet.app_id)
    poller = SchedulePoller(
        client,
        config.trimet.stop_ids,
        poll_interval_seconds=config.trimet.poll_interval_seconds,
        minutes=config.trimet.minutes,
        arrivals=config.trimet.arrivals,
    )
    geometry = DialGeometry.for_width(config.dial.width)
    poller.start()
    logger.info("Previewing stops %s", config.trimet.stop_ids)

    label_time = datetime.now(timezone.utc)
    try:
        while True:
            now = datetime.now(timezone.utc)
            if (now - label_time).total_seconds() >= config.dial.label_interval_seconds:
                label_time = now
            _render_all(
                poller,
                geometry,
                config.dial.width,
                now,
                label_time,
                args.scroll_offset,
                args.output_dir,
            )
            time.sleep(config.dial.render_interval_seconds)
    except KeyboardInterrupt:
        poller.stop()
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
