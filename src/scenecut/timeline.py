"""Timeline model — clips of scenes cut from one source video.

A Timeline is an ordered list of Clips; each Clip is an ordered list of
Scenes that concatenate into one output file. Scenes carry their source
window (start/end), crop position and optional pan.

Two fields are derived and never set directly:

  - length:     end - start, two decimals.
  - clip_start: where the scene lands in its clip's output, i.e. the
                running sum of the lengths before it. The first scene
                is always at 0.

Every mutating method follows the same pipeline before returning:

  1. Validate the new value (FieldValidationError, nothing mutated).
  2. Mutate.
  3. recalc_clip_starts() for the affected clip.
  4. validate_continuity() across all clips.

So clip_start and scene.warning are never stale when a method returns.
"""

import itertools
import logging
import math
from dataclasses import dataclass, field

from .common import (
    normalize_dimensions,
    parse_dimensions,
    validate_duration,
    validate_filename,
    validate_percentage,
    validate_time,
)
from .continuity import ContinuityWarning, validate_continuity
from .errors import FieldValidationError, OrderingError, StructuralError

logger = logging.getLogger(__name__)


# ── Defaults ───────────────────────────────────────────────────────

DEFAULT_SCENE_LENGTH = 5.0
DEFAULT_H_CROP = 50.0
DEFAULT_INPUT_FILE = "input.mkv"
DEFAULT_IN_DIM = "1280x640"
DEFAULT_OUT_DIM = "720x1280"

PAN_LINEAR = "linear"
PAN_ZOOM = "zoom"
VALID_PAN_METHODS = {PAN_LINEAR, PAN_ZOOM}


# ── Model ──────────────────────────────────────────────────────────


@dataclass
class Scene:
    """One time-bounded segment of the source with its crop settings.

    h_crop_end defaults to h_crop. It is stored even when pan is off so
    toggling pan back on restores the previous end position.
    """

    start: float
    end: float
    h_crop: float = DEFAULT_H_CROP
    pan: bool = False
    h_crop_end: float | None = None
    pan_method: str = PAN_LINEAR
    length: float = field(init=False)
    clip_start: float = field(default=0.0, init=False)
    clip_start_editable: bool = field(default=False, init=False, compare=False)
    warning: ContinuityWarning | None = field(
        default=None, init=False, compare=False, repr=False,
    )
    id: str = field(default="", compare=False)

    def __post_init__(self):
        if self.h_crop_end is None:
            self.h_crop_end = self.h_crop
        self.length = round(max(0.0, self.end - self.start), 2)

    @property
    def crop_at_end(self) -> float:
        """Crop position the scene finishes on (h_crop_end if panning)."""
        return self.h_crop_end if self.pan else self.h_crop


@dataclass
class Clip:
    """A named, ordered run of scenes rendered to one output file."""

    name: str
    scenes: list[Scene] = field(default_factory=list)
    id: str = field(default="", compare=False)

    def __len__(self) -> int:
        return len(self.scenes)


def recalc_clip_starts(clip: Clip) -> None:
    """Recompute clip_start as the running sum of prior scene lengths.

    The first scene is pinned to 0 and marked non-editable.
    """
    cumulative = 0.0
    for idx, scene in enumerate(clip.scenes):
        scene.clip_start = round(cumulative, 2)
        scene.clip_start_editable = idx > 0
        cumulative += scene.length


def check_scene_order(clip: Clip, indices=None) -> None:
    """Raise OrderingError for the first scene whose end is not after start.

    `indices` limits the check to some scenes (default: all of them).
    """
    if indices is None:
        indices = range(len(clip.scenes))
    for i in indices:
        scene = clip.scenes[i]
        if scene.end <= scene.start:
            raise OrderingError(
                f"end time ({scene.end}) must be greater than start time ({scene.start})",
                context=f'Clip "{clip.name}", scene {i + 1}',
            )


@dataclass
class Timeline:
    """The whole project: global settings plus ordered clips.

    Use Timeline.create() for a ready-to-edit project with one seeded
    clip. The bare constructor starts empty so loaders can append clips
    they have already validated.
    """

    input_name: str = DEFAULT_INPUT_FILE
    in_dim: str = DEFAULT_IN_DIM
    out_dim: str = DEFAULT_OUT_DIM
    clips: list[Clip] = field(default_factory=list)
    video_file: str | None = None
    source_duration: float | None = field(default=None, compare=False)
    warnings: list[ContinuityWarning] = field(
        default_factory=list, init=False, compare=False, repr=False,
    )
    _clip_counter: "itertools.count" = field(
        default_factory=lambda: itertools.count(1), init=False, compare=False, repr=False,
    )
    _scene_counter: "itertools.count" = field(
        default_factory=lambda: itertools.count(1), init=False, compare=False, repr=False,
    )

    def __post_init__(self):
        self.in_dim = normalize_dimensions(self.in_dim)
        self.out_dim = normalize_dimensions(self.out_dim)

    @classmethod
    def create(
        cls,
        input_name: str = DEFAULT_INPUT_FILE,
        in_dim: str = DEFAULT_IN_DIM,
        out_dim: str = DEFAULT_OUT_DIM,
        clips: int = 1,
        source_duration: float | None = None,
    ) -> "Timeline":
        """New project with `clips` default clips, each seeded with a scene."""
        timeline = cls(
            input_name=input_name, in_dim=in_dim, out_dim=out_dim,
            source_duration=source_duration,
        )
        for _ in range(max(1, clips)):
            timeline.add_clip()
        return timeline

    # ── Lookup ────────────────────────────────────────────────────

    @property
    def in_size(self) -> tuple[int, int]:
        return parse_dimensions(self.in_dim)

    @property
    def out_size(self) -> tuple[int, int]:
        return parse_dimensions(self.out_dim)

    def clip_by_id(self, clip_id: str) -> Clip:
        for clip in self.clips:
            if clip.id == clip_id:
                return clip
        raise KeyError(f"No clip with id '{clip_id}'")

    def clip_by_name(self, name: str) -> Clip:
        for clip in self.clips:
            if clip.name == name:
                return clip
        raise KeyError(f"No clip named '{name}'")

    def index_of(self, clip: Clip) -> int:
        for i, c in enumerate(self.clips):
            if c is clip:
                return i
        raise KeyError(f"Clip '{clip.name}' is not part of this timeline")

    def previous_end(self, clip: Clip) -> float | None:
        """End of the last scene in the clip before `clip`, if any."""
        idx = self.index_of(clip)
        if idx == 0:
            return None
        prev = self.clips[idx - 1]
        return prev.scenes[-1].end if prev.scenes else None

    def scene_count(self) -> int:
        return sum(len(c.scenes) for c in self.clips)

    # ── Global settings ───────────────────────────────────────────

    def set_input_name(self, name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise FieldValidationError("Input filename is required")
        self.input_name = name.strip()

    def set_dimensions(self, in_dim: str | None = None, out_dim: str | None = None) -> None:
        """Update input and/or output dimensions. Both are validated first."""
        new_in = normalize_dimensions(in_dim) if in_dim is not None else self.in_dim
        new_out = normalize_dimensions(out_dim) if out_dim is not None else self.out_dim
        self.in_dim, self.out_dim = new_in, new_out

    # ── Clips ─────────────────────────────────────────────────────

    def add_clip(self, name: str | None = None) -> Clip:
        """Append a clip and seed it with one scene.

        The seed scene starts where the previous clip's last scene ends,
        so consecutive clips are continuous by default. When the source
        duration is known and that point is its end, the seed starts at 0.
        Nothing is appended if the name is invalid.
        """
        if name is not None:
            name = validate_filename(name, "Clip name")
        start = self._seed_start()

        n = next(self._clip_counter)
        clip = Clip(name=name or f"Clip {n}", id=f"clip-{n}")
        self.clips.append(clip)
        self._append_scene(clip, start, DEFAULT_H_CROP)
        return clip

    def append_clip(self, name: str, scenes: list[Scene]) -> Clip:
        """Append a clip built from already-validated scenes (used by loaders)."""
        n = next(self._clip_counter)
        clip = Clip(name=name, id=f"clip-{n}")
        for scene in scenes:
            scene.id = self._next_scene_id()
            clip.scenes.append(scene)
        self.clips.append(clip)
        self._refresh(clip)
        return clip

    def remove_clip(self, clip: Clip) -> None:
        """Remove a clip. Removing the last one leaves a fresh default clip."""
        idx = self.index_of(clip)
        del self.clips[idx]
        if not self.clips:
            logger.debug("Last clip removed, creating a default clip")
            self.add_clip()
            return
        validate_continuity(self)

    def rename_clip(self, clip: Clip, name: str) -> None:
        clip.name = validate_filename(name, "Clip name")

    # ── Scenes ────────────────────────────────────────────────────

    def add_scene(self, clip: Clip, override_start: float | None = None) -> Scene:
        """Append a scene with defaults inherited from the previous one.

        start:  previous scene's end; for the clip's first scene,
                override_start (or 0).
        length: DEFAULT_SCENE_LENGTH, cut short at the end of the source
                when its duration is known.
        h_crop: previous scene's final crop position, 50 for a first scene.
        """
        prev = clip.scenes[-1] if clip.scenes else None
        if prev is not None:
            start = prev.end
            h_crop = prev.crop_at_end
        else:
            start = 0.0
            if override_start is not None:
                start = validate_time(override_start, "Start time", self.source_duration)
            h_crop = DEFAULT_H_CROP
        return self._append_scene(clip, start, h_crop)

    def add_scene_at(self, clip: Clip, current_time: float) -> Scene:
        """Append a scene starting at the preview's current time."""
        start = validate_time(current_time, "Start time", self.source_duration)
        prev = clip.scenes[-1] if clip.scenes else None
        h_crop = prev.crop_at_end if prev is not None else DEFAULT_H_CROP
        return self._append_scene(clip, start, h_crop)

    def _seed_start(self) -> float:
        """Start for a new clip's first scene: the end of the last clip.

        Falls back to 0 when less than 0.01s of source is left after it.
        """
        last = self.clips[-1] if self.clips else None
        start = last.scenes[-1].end if last is not None and last.scenes else 0.0
        limit = self._time_limit()
        if limit is not None and round(limit - start, 2) < 0.01:
            logger.debug("Source ends at %.2fs, seeding new clip at 0", limit)
            return 0.0
        return start

    def _time_limit(self) -> float | None:
        """Latest two-decimal time inside the source, if its duration is known."""
        if self.source_duration is None:
            return None
        return math.floor(round(self.source_duration * 100, 6)) / 100

    def _append_scene(self, clip: Clip, start: float, h_crop: float) -> Scene:
        end = round(start + DEFAULT_SCENE_LENGTH, 2)
        limit = self._time_limit()
        if limit is not None:
            end = min(end, limit)
        scene = Scene(start=start, end=end, h_crop=h_crop, id=self._next_scene_id())
        clip.scenes.append(scene)
        self._refresh(clip)
        return scene

    def remove_scene(self, clip: Clip, index: int) -> Scene:
        self._scene(clip, index)
        scene = clip.scenes.pop(index)
        self._refresh(clip)
        return scene

    def move_scene(self, clip: Clip, from_index: int, to_index: int) -> None:
        """Move a scene to a new position within the same clip."""
        self._scene(clip, from_index)
        self._scene(clip, to_index)
        if from_index == to_index:
            return
        scene = clip.scenes.pop(from_index)
        clip.scenes.insert(to_index, scene)
        self._refresh(clip)

    # ── Timing edits ──────────────────────────────────────────────

    def update_from_start(self, clip: Clip, index: int, value) -> None:
        """Set start; length follows as end - start (never negative)."""
        scene = self._scene(clip, index)
        start = validate_time(value, "Start time", self.source_duration)
        scene.start = start
        scene.length = round(max(0.0, scene.end - start), 2)
        self._refresh(clip)

    def update_from_end(self, clip: Clip, index: int, value) -> None:
        """Set end; length follows as end - start (never negative)."""
        scene = self._scene(clip, index)
        end = validate_time(value, "End time", self.source_duration)
        scene.end = end
        scene.length = round(max(0.0, end - scene.start), 2)
        self._refresh(clip)

    def update_from_length(self, clip: Clip, index: int, value) -> None:
        """Set length; end follows as start + length."""
        scene = self._scene(clip, index)
        length = validate_duration(value, "Length")
        end = validate_time(scene.start + length, "End time", self.source_duration)
        scene.length = length
        scene.end = end
        self._refresh(clip)

    def edit_clip_start(self, clip: Clip, index: int, value) -> None:
        """Move the boundary before scene `index` by resizing the scene before it.

        The previous scene's length becomes value - its clip_start (at
        least 0) and its end follows. The edited scene keeps its own
        start/end; only its position in the output changes.
        """
        self._scene(clip, index)
        if index == 0:
            raise FieldValidationError(
                "Clip start of the first scene is fixed at 0",
                context=f'Clip "{clip.name}", scene 1',
            )
        new_value = validate_time(value, "Clip start")
        prev = clip.scenes[index - 1]
        new_length = round(max(0.0, new_value - prev.clip_start), 2)
        try:
            new_end = validate_time(prev.start + new_length, "End time", self.source_duration)
        except FieldValidationError as exc:
            raise exc.with_context(f'Clip "{clip.name}", scene {index}')
        prev.length = new_length
        prev.end = new_end
        self._refresh(clip)

    # ── Crop / pan ────────────────────────────────────────────────

    def set_crop(
        self,
        clip: Clip,
        index: int,
        h_crop: float | None = None,
        h_crop_end: float | None = None,
    ) -> None:
        scene = self._scene(clip, index)
        new_crop = validate_percentage(h_crop) if h_crop is not None else scene.h_crop
        new_end = (
            validate_percentage(h_crop_end, "End horizontal crop")
            if h_crop_end is not None else scene.h_crop_end
        )
        scene.h_crop, scene.h_crop_end = new_crop, new_end
        self._refresh(clip)

    def set_pan(self, clip: Clip, index: int, pan: bool, pan_method: str | None = None) -> None:
        scene = self._scene(clip, index)
        if pan_method is not None and pan_method not in VALID_PAN_METHODS:
            raise FieldValidationError(
                f"Invalid pan method '{pan_method}'. Valid: {sorted(VALID_PAN_METHODS)}",
                context=f'Clip "{clip.name}", scene {index + 1}',
            )
        scene.pan = bool(pan)
        if pan_method is not None:
            scene.pan_method = pan_method
        self._refresh(clip)

    # ── Internals ─────────────────────────────────────────────────

    def _scene(self, clip: Clip, index: int) -> Scene:
        if not 0 <= index < len(clip.scenes):
            raise IndexError(
                f'Clip "{clip.name}" has no scene {index + 1} '
                f"({len(clip.scenes)} scenes)"
            )
        return clip.scenes[index]

    def _next_scene_id(self) -> str:
        return f"scene-{next(self._scene_counter)}"

    def _refresh(self, clip: Clip) -> None:
        recalc_clip_starts(clip)
        validate_continuity(self)
        logger.debug(
            "Recomputed %s: %d scenes, %d continuity warnings",
            clip.id, len(clip.scenes), len(self.warnings),
        )


def require_scenes(timeline: Timeline) -> None:
    """Structural check used before saving: >= 1 clip, every clip non-empty."""
    if not timeline.clips:
        raise StructuralError("No clips to save")
    for clip in timeline.clips:
        if not clip.scenes:
            raise StructuralError(f'Clip "{clip.name}" has no scenes')
