"""FFmpeg command synthesis — trim, crop, pan, scale, concat.

Each scene becomes one video/audio unit in a -filter_complex graph:

    [0:v]trim=start=S:end=E,setpts=PTS-STARTPTS,
         crop=CW:CH:X:0,scale=OW:OH[vK]
    [0:a]atrim=start=S:end=E,asetpts=PTS-STARTPTS[aK]

A clip concatenates its units with concat=n=N:v=1:a=1 into [v][a].
A single scene on its own skips the concat and labels its unit [v][a]
directly. Both cases go through build_command().

The crop x position X is an ffmpeg expression. Static scenes use a
constant offset; panning scenes interpolate between the start and end
offsets over the scene's duration D, using the per-segment timestamp t
(which restarts at 0 after setpts):

    linear: startX + (endX - startX) * (t / D)
    zoom:   startX + (endX - startX) * (1 - cos(PI * t / D)) / 2

The zoom form eases in and out: slow at both ends, fastest mid-scene.
"""

import math
import shlex

from .common import sanitize_filename
from .geometry import crop_offset, crop_window
from .timeline import PAN_LINEAR, Clip, Scene, Timeline, check_scene_order

VIDEO_CODEC = "libx264"
AUDIO_CODEC = "aac"

NO_SCENES_PLACEHOLDER = "Add a scene to generate command..."


# ── Number formatting ─────────────────────────────────────────────


def format_number(value: float) -> str:
    """Shortest decimal form: 1080.0 -> '1080', 607.5 -> '607.5'."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


# ── Crop position ─────────────────────────────────────────────────


def _static_x(crop_w: float, percent: float) -> str:
    return f"(in_w-{format_number(crop_w)})*{format_number(percent / 100)}"


def crop_x_expr(scene: Scene, crop_w: float) -> str:
    """ffmpeg expression for the crop window's x position over the scene."""
    start_x = _static_x(crop_w, scene.h_crop)
    if not scene.pan:
        return start_x

    end_x = _static_x(crop_w, scene.h_crop_end)
    duration = f"{scene.end - scene.start:.2f}"
    if scene.pan_method == PAN_LINEAR:
        return f"{start_x}+({end_x}-({start_x}))*(t/{duration})"
    return f"{start_x}+({end_x}-({start_x}))*(1-cos(PI*t/{duration}))/2"


def evaluate_crop_x(scene: Scene, in_w: int, crop_w: float, t: float) -> float:
    """Numeric value of crop_x_expr() at segment time t.

    Mirrors what ffmpeg computes per frame. Used for previews and for
    checking the interpolation without running ffmpeg.
    """
    start_x = crop_offset(in_w, crop_w, scene.h_crop)
    if not scene.pan:
        return start_x

    end_x = crop_offset(in_w, crop_w, scene.h_crop_end)
    duration = round(scene.end - scene.start, 2)
    if scene.pan_method == PAN_LINEAR:
        progress = t / duration
    else:
        progress = (1 - math.cos(math.pi * t / duration)) / 2
    return start_x + (end_x - start_x) * progress


# ── Filter graph ──────────────────────────────────────────────────


def scene_filters(
    scene: Scene,
    crop: tuple[float, float],
    out_size: tuple[int, int],
    label: str,
) -> tuple[str, str]:
    """Return the (video, audio) filter chains for one scene.

    Output pads are [v<label>] and [a<label>].
    """
    crop_w, crop_h = crop
    out_w, out_h = out_size
    s = format_number(scene.start)
    e = format_number(scene.end)
    x_expr = crop_x_expr(scene, crop_w)

    video = (
        f"[0:v]trim=start={s}:end={e},setpts=PTS-STARTPTS,"
        f"crop={format_number(crop_w)}:{format_number(crop_h)}:{x_expr}:0,"
        f"scale={out_w}:{out_h}[v{label}]"
    )
    audio = f"[0:a]atrim=start={s}:end={e},asetpts=PTS-STARTPTS[a{label}]"
    return video, audio


def build_filter_graph(
    scenes: list[Scene],
    crop: tuple[float, float],
    out_size: tuple[int, int],
    concat: bool = True,
) -> str:
    """Join scene units into one -filter_complex string.

    With concat=True (a whole clip) units are labelled by index and fed
    to a concat filter. With concat=False exactly one scene is expected
    and its unit is labelled [v][a].
    """
    if not concat:
        if len(scenes) != 1:
            raise ValueError(f"Standalone graph needs exactly 1 scene, got {len(scenes)}")
        return "; ".join(scene_filters(scenes[0], crop, out_size, ""))

    parts = []
    pads = ""
    for i, scene in enumerate(scenes):
        parts.extend(scene_filters(scene, crop, out_size, str(i)))
        pads += f"[v{i}][a{i}]"
    parts.append(f"{pads}concat=n={len(scenes)}:v=1:a=1[v][a]")
    return "; ".join(parts)


# ── Commands ──────────────────────────────────────────────────────


def output_name(clip: Clip, scene_index: int | None = None) -> str:
    """'<clip>.mp4' for a clip, '<clip>-<n>.mp4' (1-based) for one scene."""
    base = sanitize_filename(clip.name or "output")
    if scene_index is None:
        return f"{base}.mp4"
    return f"{base}-{scene_index + 1}.mp4"


def build_command(
    timeline: Timeline,
    clip: Clip,
    scene_index: int | None = None,
    ffmpeg: str = "ffmpeg",
) -> list[str] | None:
    """Build the ffmpeg argv for a whole clip or one of its scenes.

    Args:
        timeline: Provides input name and dimensions.
        clip: Clip to render.
        scene_index: 0-based scene to render on its own. None renders
            the whole clip through concat.
        ffmpeg: Executable to put in argv[0].

    Returns:
        argv list, or None when the clip has no scenes yet.

    Raises:
        OrderingError: A scene in the command has end <= start.
        IndexError: scene_index is out of range.
    """
    if not clip.scenes:
        return None

    if scene_index is None:
        indices = range(len(clip.scenes))
    else:
        if not 0 <= scene_index < len(clip.scenes):
            raise IndexError(
                f'Clip "{clip.name}" has no scene {scene_index + 1} '
                f"({len(clip.scenes)} scenes)"
            )
        indices = [scene_index]
    check_scene_order(clip, indices)

    scenes = [clip.scenes[i] for i in indices]
    crop = crop_window(timeline.in_size, timeline.out_size)
    graph = build_filter_graph(
        scenes, crop, timeline.out_size, concat=scene_index is None,
    )

    return [
        ffmpeg,
        "-i", timeline.input_name,
        "-filter_complex", graph,
        "-map", "[v]", "-map", "[a]",
        "-c:v", VIDEO_CODEC,
        "-c:a", AUDIO_CODEC,
        output_name(clip, scene_index),
    ]


def format_command(argv: list[str]) -> str:
    """Render an argv from build_command() as a three-line shell command.

        ffmpeg -i input.mkv -filter_complex \\
        "<graph>" \\
        -map "[v]" -map "[a]" -c:v libx264 -c:a aac out.mp4
    """
    split = argv.index("-filter_complex")
    head = " ".join(shlex.quote(a) for a in argv[:split + 1])
    graph = argv[split + 1]
    tail = " ".join(
        f'"{a}"' if a.startswith("[") else shlex.quote(a)
        for a in argv[split + 2:]
    )
    return f'{head} \\\n"{graph}" \\\n{tail}'


def command_text(
    timeline: Timeline,
    clip: Clip,
    scene_index: int | None = None,
    ffmpeg: str = "ffmpeg",
) -> str:
    """Shell text for a clip or scene, or the placeholder for an empty clip."""
    argv = build_command(timeline, clip, scene_index, ffmpeg=ffmpeg)
    if argv is None:
        return NO_SCENES_PLACEHOLDER
    return format_command(argv)
