"""Rendering boundary: frame records, the dial composer and PNG output."""

from transit_timer.rendering.composer import compose_dial
from transit_timer.rendering.emulator import frame_path, save_frame
from transit_timer.rendering.frame_data import ArrivalRow, StopFrame
from transit_timer.rendering.stop_frame import build_stop_frame, relative_time_label

__all__ = [
    "ArrivalRow",
    "StopFrame",
    "build_stop_frame",
    "compose_dial",
    "frame_path",
    "relative_time_label",
    "save_frame",
]
