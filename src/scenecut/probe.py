"""Source metadata — frame size and duration of the video being cut.

Stands in for the preview player: the editor needs the input dimensions
(to size the crop window) and the duration (to bound scene times). Only
container metadata is read; no frames are decoded.
"""

from dataclasses import dataclass
from pathlib import Path

import imageio_ffmpeg
from moviepy import VideoFileClip

from .common import format_dimensions


@dataclass(frozen=True)
class SourceInfo:
    width: int
    height: int
    duration: float

    @property
    def dimensions(self) -> str:
        return format_dimensions((self.width, self.height))


def probe_source(path: str | Path) -> SourceInfo:
    """Read width, height and duration from a video file.

    Raises:
        FileNotFoundError: If the file is missing.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Source video not found: {path}")

    with VideoFileClip(str(p), audio=False) as clip:
        width, height = clip.size
        return SourceInfo(width=int(width), height=int(height), duration=float(clip.duration))


def bundled_ffmpeg() -> str:
    """Path to the ffmpeg binary shipped with imageio-ffmpeg."""
    return imageio_ffmpeg.get_ffmpeg_exe()
