"""CLI for validating a project and reviewing its timeline.

Prints every clip's scenes with their derived clip starts, followed by
continuity warnings. Warnings never fail the check; structural, field
and ordering errors do (exit status 1).

Usage:
    scenecut check --project project.json
    scenecut check --project project.json --source talk.mp4
"""

import argparse

from .common import configure_logging, format_time
from .errors import SceneCutError
from .project_manifest import load_project


def _parse_args(args=None):
    parser = argparse.ArgumentParser(
        description="Validate a project file and report continuity gaps.",
    )
    parser.add_argument(
        "--project", required=True,
        help="Path to project file (.json or .yaml)",
    )
    parser.add_argument(
        "--source", default=None,
        help="Source video; bounds scene times by its duration and "
             "compares its size with inDim",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser, parser.parse_args(args)


def _scene_row(i, scene) -> str:
    crop = f"{scene.h_crop:5.1f}%"
    if scene.pan:
        crop += f" -> {scene.h_crop_end:.1f}% ({scene.pan_method})"
    mark = "  !" if scene.warning else ""
    return (
        f"  {i + 1:>3}  {format_time(scene.start)} - {format_time(scene.end)}"
        f"  len {scene.length:7.2f}s  at {scene.clip_start:7.2f}s  crop {crop}{mark}"
    )


def main(args=None):
    parser, parsed = _parse_args(args)
    configure_logging(parsed.verbose)

    try:
        duration = None
        source_dim = None
        if parsed.source:
            from .probe import probe_source

            info = probe_source(parsed.source)
            duration, source_dim = info.duration, info.dimensions

        timeline = load_project(parsed.project, source_duration=duration)
    except (SceneCutError, FileNotFoundError) as exc:
        parser.exit(1, f"error: {exc}\n")

    print(f"Input: {timeline.input_name}  {timeline.in_dim} -> {timeline.out_dim}")
    if source_dim and source_dim != timeline.in_dim:
        print(f"Note: source is {source_dim}, project inDim is {timeline.in_dim}")

    for clip in timeline.clips:
        print(f"\n{clip.name} ({len(clip.scenes)} scenes)")
        for i, scene in enumerate(clip.scenes):
            print(_scene_row(i, scene))

    print(
        f"\nProject valid: {len(timeline.clips)} clips, "
        f"{timeline.scene_count()} scenes, {len(timeline.warnings)} continuity warning(s)"
    )
    for warning in timeline.warnings:
        print(f"  - {warning}")


if __name__ == "__main__":
    main()
