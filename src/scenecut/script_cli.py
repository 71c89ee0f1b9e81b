"""CLI for writing every clip's command into one bash script.

Usage:
    scenecut script --project project.json
    scenecut script --project project.yaml --output out/commands.sh --bundled-ffmpeg
"""

import argparse

from .common import configure_logging
from .errors import SceneCutError
from .project_manifest import load_project
from .script import DEFAULT_SCRIPT_NAME, write_script


def _parse_args(args=None):
    parser = argparse.ArgumentParser(
        description="Write all clip commands to an executable bash script.",
    )
    parser.add_argument(
        "--project", required=True,
        help="Path to project file (.json or .yaml)",
    )
    parser.add_argument(
        "--output", default=DEFAULT_SCRIPT_NAME,
        help=f"Script path (default: {DEFAULT_SCRIPT_NAME})",
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

    ffmpeg = "ffmpeg"
    if parsed.bundled_ffmpeg:
        from .probe import bundled_ffmpeg

        ffmpeg = bundled_ffmpeg()

    try:
        timeline = load_project(parsed.project)
        path = write_script(timeline, parsed.output, ffmpeg=ffmpeg)
    except (SceneCutError, FileNotFoundError) as exc:
        parser.exit(1, f"error: {exc}\n")

    n_clips = sum(1 for c in timeline.clips if c.scenes)
    print(f"Wrote {n_clips} clip command(s) to {path}")
    if timeline.warnings:
        print(f"Note: {len(timeline.warnings)} continuity warning(s); run 'scenecut check' for details")


if __name__ == "__main__":
    main()
