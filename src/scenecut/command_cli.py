"""CLI for printing the ffmpeg command of one clip or one scene.

Usage:
    # Every clip, one after another
    scenecut command --project project.json

    # One clip by name
    scenecut command --project project.json --clip "Intro"

    # One scene of a clip on its own (1-based), output Intro-2.mp4
    scenecut command --project project.json --clip "Intro" --scene 2
"""

import argparse

from .common import configure_logging
from .errors import SceneCutError
from .filtergraph import command_text
from .project_manifest import load_project


def _parse_args(args=None):
    parser = argparse.ArgumentParser(
        description="Print the ffmpeg command for a clip or a single scene.",
    )
    parser.add_argument(
        "--project", required=True,
        help="Path to project file (.json or .yaml)",
    )
    parser.add_argument(
        "--clip", default=None,
        help="Clip name (default: all clips)",
    )
    parser.add_argument(
        "--scene", type=int, default=None,
        help="1-based scene number within --clip, rendered on its own",
    )
    parser.add_argument(
        "--bundled-ffmpeg", action="store_true",
        help="Use imageio-ffmpeg's bundled binary path instead of 'ffmpeg'",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser, parser.parse_args(args)


def main(args=None):
    parser, parsed = _parse_args(args)
    configure_logging(parsed.verbose)

    if parsed.scene is not None and parsed.clip is None:
        parser.error("--scene requires --clip")

    ffmpeg = "ffmpeg"
    if parsed.bundled_ffmpeg:
        from .probe import bundled_ffmpeg

        ffmpeg = bundled_ffmpeg()

    try:
        timeline = load_project(parsed.project)
        if parsed.clip is not None:
            try:
                clips = [timeline.clip_by_name(parsed.clip)]
            except KeyError:
                names = ", ".join(c.name for c in timeline.clips)
                parser.exit(1, f"error: no clip named '{parsed.clip}' (clips: {names})\n")
        else:
            clips = timeline.clips

        scene_index = parsed.scene - 1 if parsed.scene is not None else None
        blocks = []
        for clip in clips:
            text = command_text(timeline, clip, scene_index, ffmpeg=ffmpeg)
            blocks.append(text if len(clips) == 1 else f"# {clip.name}\n{text}")
    except (SceneCutError, IndexError, FileNotFoundError) as exc:
        parser.exit(1, f"error: {exc}\n")

    print("\n\n".join(blocks))


if __name__ == "__main__":
    main()
