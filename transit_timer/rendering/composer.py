"""Frame composer that draws one stop's dial with Pillow."""

from __future__ import annotations

import math

from PIL import Image, ImageDraw, ImageFont

from transit_timer.logic.ring_layout import DialGeometry, Ring
from transit_timer.rendering.frame_data import StopFrame

DEFAULT_WIDTH = 390

COLOR_BACKGROUND = (0, 0, 0)
COLOR_DIAL = (255, 255, 255)
COLOR_SYMBOL = (0, 0, 0)
COLOR_TITLE = (255, 255, 255)

STROKE_FRACTION = 0.85
GUTTER_STRENGTH = 0.3
ARC_START_DEGREES = -90.0

TITLE_MARGIN = 10

FONT = ImageFont.load_default()


def _blend(color: tuple[int, int, int], background: tuple[int, int, int], amount: float) -> tuple[int, int, int]:
    amount = min(max(amount, 0.0), 1.0)
    return tuple(round(b + (c - b) * amount) for c, b in zip(color, background))


def _ring_box(center: tuple[int, int], radius: float) -> list[float]:
    cx, cy = center
    return [cx - radius, cy - radius, cx + radius, cy + radius]


def _draw_ring(draw: ImageDraw.ImageDraw, center: tuple[int, int], ring: Ring) -> None:
    stroke = round(ring.width * STROKE_FRACTION)
    if stroke < 1 or ring.radius <= 0 or ring.opacity <= 0:
        return

    # Pillow strokes inward from the bounding box, so pad it by half a stroke.
    box = _ring_box(center, ring.radius + stroke / 2)
    gutter_color = _blend(ring.color, COLOR_DIAL, GUTTER_STRENGTH * ring.opacity)
    arc_color = _blend(ring.color, COLOR_DIAL, ring.opacity)

    draw.ellipse(box, outline=gutter_color, width=stroke)
    if ring.angle >= 360:
        draw.ellipse(box, outline=arc_color, width=stroke)
    else:
        # Sweep counter-clockwise from 12 o'clock.
        draw.arc(box, start=ARC_START_DEGREES - ring.angle, end=ARC_START_DEGREES, fill=arc_color, width=stroke)

    theta = math.radians(ARC_START_DEGREES - ring.angle)
    label_x = center[0] + ring.radius * math.cos(theta)
    label_y = center[1] + ring.radius * math.sin(theta)
    bbox = draw.textbbox((0, 0), ring.symbol, font=FONT)
    text_width = bbox[2] - bbox[0]
    text_height = bbox[3] - bbox[1]
    draw.text(
        (label_x - text_width / 2, label_y - text_height / 2),
        ring.symbol,
        font=FONT,
        fill=_blend(COLOR_SYMBOL, arc_color, ring.opacity),
    )


def compose_dial(frame: StopFrame, width: int = DEFAULT_WIDTH) -> Image.Image:
    """Compose a square RGB image of the stop name and its dial."""
    if width <= 0:
        raise ValueError(f"Width must be positive, got {width}.")

    geometry = DialGeometry.for_width(width)
    image = Image.new("RGB", (width, width), COLOR_BACKGROUND)
    draw = ImageDraw.Draw(image)
    center = (width // 2, width // 2)

    draw.ellipse(_ring_box(center, geometry.dial_radius), fill=COLOR_DIAL)
    for ring in frame.rings:
        _draw_ring(draw, center, ring)

    draw.text((TITLE_MARGIN, TITLE_MARGIN), frame.stop_name, font=FONT, fill=COLOR_TITLE)
    return image


__all__ = ["compose_dial"]
