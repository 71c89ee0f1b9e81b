"""Project manifest loader/saver — the persisted form of a Timeline.

Project schema (JSON, or YAML for .yaml/.yml files):
  inputName: "input.mkv"         # or "${raw}/input.mkv" in YAML projects
  inDim: "1920x1080"
  outDim: "720x1280"
  videoFile: "preview.mp4"       # optional, file loaded for preview
  paths:                         # optional, ${name} variables
    raw: "/data/recordings"
  clips:
    - name: "Intro"
      scenes:
        - start: 0.0
          end: 5.0
          hCrop: 50.0
          pan: false             # optional, default false
          hCropEnd: 50.0         # optional, default hCrop
          panMethod: linear      # optional, "linear" or "zoom"

Loading and saving are all-or-nothing: the first bad clip or scene
aborts the whole operation and the error names the offending clip and
scene. Nothing is partially applied.
"""

import json
import logging
from pathlib import Path

import yaml

from .common import (
    normalize_dimensions,
    resolve_path_vars,
    validate_percentage,
    validate_time,
)
from .errors import (
    FieldValidationError,
    OrderingError,
    SceneCutError,
    StructuralError,
)
from .timeline import (
    DEFAULT_IN_DIM,
    DEFAULT_INPUT_FILE,
    DEFAULT_OUT_DIM,
    PAN_LINEAR,
    VALID_PAN_METHODS,
    Scene,
    Timeline,
    check_scene_order,
    require_scenes,
)

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


# ── Loading ───────────────────────────────────────────────────────


def _read_document(path: Path):
    text = path.read_text()
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise StructuralError(f"Invalid YAML in project file: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise StructuralError(
            "Invalid JSON format. Please check the project file."
        ) from exc


def load_project(
    project_path: str | Path,
    source_duration: float | None = None,
) -> Timeline:
    """Load, validate, and build a Timeline from a project file.

    Processing pipeline:
      1. Parse JSON or YAML (by file suffix).
      2. Resolve ${path} variables in inputName/videoFile.
      3. Apply defaults for missing inputName/inDim/outDim.
      4. Validate every clip and scene.
      5. Build the Timeline and run the derived-value passes.

    Args:
        project_path: Path to the project file.
        source_duration: Source length in seconds, if known. Scene times
            beyond it are rejected.

    Returns:
        Timeline with clip starts and continuity warnings computed.

    Raises:
        StructuralError: Bad document shape, no clips, empty clip.
        FieldValidationError: Bad dimensions, names or scene fields.
        OrderingError: A scene whose end is not after its start.
        FileNotFoundError: Missing project file.
    """
    raw = _read_document(Path(project_path))
    timeline = project_from_dict(raw, source_duration=source_duration)
    logger.debug(
        "Loaded %s: %d clips, %d scenes, %d continuity warnings",
        project_path, len(timeline.clips), timeline.scene_count(), len(timeline.warnings),
    )
    return timeline


def project_from_dict(raw, source_duration: float | None = None) -> Timeline:
    """Build a Timeline from an already-parsed project description."""
    if not isinstance(raw, dict):
        raise StructuralError("Invalid project file format")

    paths = raw.get("paths") or {}

    input_name = resolve_path_vars(str(raw.get("inputName") or DEFAULT_INPUT_FILE), paths)
    video_file = raw.get("videoFile")
    if video_file is not None:
        video_file = resolve_path_vars(str(video_file), paths)

    try:
        in_dim = normalize_dimensions(raw.get("inDim") or DEFAULT_IN_DIM)
        out_dim = normalize_dimensions(raw.get("outDim") or DEFAULT_OUT_DIM)
    except FieldValidationError as exc:
        raise exc.with_context("Invalid dimensions in project file")

    clips = raw.get("clips")
    if not isinstance(clips, list):
        raise StructuralError("Project file must contain a clips array")
    if not clips:
        raise StructuralError("Project file contains no clips")

    # Validate everything before building, so a failure leaves nothing behind.
    parsed = []
    for i, clip in enumerate(clips):
        parsed.append(_parse_clip(clip, i, source_duration))

    timeline = Timeline(
        input_name=input_name,
        in_dim=in_dim,
        out_dim=out_dim,
        video_file=video_file,
        source_duration=source_duration,
    )
    for name, scenes in parsed:
        timeline.append_clip(name, scenes)
    return timeline


def _parse_clip(clip, index: int, source_duration) -> tuple[str, list[Scene]]:
    """Validate one clip dict and return (name, scenes)."""
    if not isinstance(clip, dict):
        raise StructuralError(f"Clip {index + 1} must be a mapping")

    name = clip.get("name")
    if not isinstance(name, str) or not name.strip():
        raise FieldValidationError(f"Clip {index + 1} has invalid name")

    scenes = clip.get("scenes")
    if not isinstance(scenes, list):
        raise StructuralError(f'Clip "{name}" has invalid scenes data')
    if not scenes:
        raise StructuralError(f'Clip "{name}" has no scenes')

    parsed = []
    for j, scene in enumerate(scenes):
        try:
            parsed.append(_parse_scene(scene, source_duration))
        except SceneCutError as exc:
            raise exc.with_context(f'Scene {j + 1} in clip "{name}"')
    return name, parsed


def _parse_scene(scene, source_duration) -> Scene:
    """Validate one scene dict.

    Required: start, end, hCrop. Optional: pan, hCropEnd, panMethod.
    """
    if not isinstance(scene, dict):
        raise StructuralError("scene must be a mapping")

    for key in ("start", "end", "hCrop"):
        if key not in scene:
            raise FieldValidationError(f"missing required field '{key}'")

    start = validate_time(scene["start"], "Start time", source_duration)
    end = validate_time(scene["end"], "End time", source_duration)
    h_crop = validate_percentage(scene["hCrop"], "Horizontal crop")
    h_crop_end = validate_percentage(
        scene.get("hCropEnd", h_crop), "End horizontal crop",
    )

    pan = scene.get("pan", False)
    if not isinstance(pan, bool):
        raise FieldValidationError(f"pan must be true or false, got {pan!r}")

    pan_method = scene.get("panMethod") or PAN_LINEAR
    if pan_method not in VALID_PAN_METHODS:
        raise FieldValidationError(
            f"invalid panMethod '{pan_method}'. Valid: {sorted(VALID_PAN_METHODS)}"
        )

    if end <= start:
        raise OrderingError(
            f"End time ({end}) must be greater than start time ({start})"
        )

    return Scene(
        start=start, end=end, h_crop=h_crop, pan=pan,
        h_crop_end=h_crop_end, pan_method=pan_method,
    )


# ── Saving ────────────────────────────────────────────────────────


def project_to_dict(timeline: Timeline) -> dict:
    """Serialize a Timeline to the project description.

    Raises:
        StructuralError: No clips, or a clip without scenes.
        OrderingError: A scene whose end is not after its start.
        FieldValidationError: Empty input name.
    """
    if not timeline.input_name.strip():
        raise FieldValidationError("Input filename is required")
    require_scenes(timeline)

    data = {
        "inputName": timeline.input_name,
        "inDim": timeline.in_dim,
        "outDim": timeline.out_dim,
    }
    if timeline.video_file is not None:
        data["videoFile"] = timeline.video_file

    clips = []
    for clip in timeline.clips:
        check_scene_order(clip)
        clips.append({
            "name": clip.name,
            "scenes": [
                {
                    "start": scene.start,
                    "end": scene.end,
                    "hCrop": scene.h_crop,
                    "pan": scene.pan,
                    "hCropEnd": scene.h_crop_end,
                    "panMethod": scene.pan_method,
                }
                for scene in clip.scenes
            ],
        })
    data["clips"] = clips
    return data


def save_project(timeline: Timeline, project_path: str | Path) -> Path:
    """Validate and write the project. Nothing is written on failure."""
    data = project_to_dict(timeline)
    path = Path(project_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in YAML_SUFFIXES:
        text = yaml.safe_dump(data, sort_keys=False)
    else:
        text = json.dumps(data, indent=2) + "\n"
    path.write_text(text)
    return path
