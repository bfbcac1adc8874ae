"""PNG output for dial frames."""

from __future__ import annotations

from pathlib import Path

from PIL import Image

DEFAULT_OUTPUT_DIR = "emulator_output"


def frame_path(stop_id: int, output_dir: str = DEFAULT_OUTPUT_DIR) -> Path:
    return Path(output_dir) / f"stop_{stop_id}.png"


def save_frame(image: Image.Image, path: str | Path) -> Path:
    """Write a frame as PNG, creating parent directories as needed."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(output_path, format="PNG")
    return output_path


__all__ = ["frame_path", "save_frame"]
