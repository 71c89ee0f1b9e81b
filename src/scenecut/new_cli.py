"""CLI for scaffolding a new project file.

Usage:
    scenecut new --output project.json
    scenecut new --output project.json --input talk.mkv --in-dim 1920x1080
    scenecut new --output project.yaml --source talk.mp4 --clips 3
"""

import argparse
from pathlib import Path

from .common import configure_logging
from .errors import SceneCutError
from .project_manifest import save_project
from .timeline import (
    DEFAULT_IN_DIM,
    DEFAULT_INPUT_FILE,
    DEFAULT_OUT_DIM,
    Timeline,
)


def _parse_args(args=None):
    parser = argparse.ArgumentParser(
        description="Create a project file with default clips and scenes.",
    )
    parser.add_argument(
        "--output", required=True,
        help="Project file to write (.json, or .yaml/.yml)",
    )
    parser.add_argument(
        "--input", default=None,
        help=f"Input file name used in commands (default: {DEFAULT_INPUT_FILE}, "
             "or the --source file name)",
    )
    parser.add_argument(
        "--in-dim", default=None,
        help=f"Input dimensions WxH (default: {DEFAULT_IN_DIM}, or probed from --source)",
    )
    parser.add_argument(
        "--out-dim", default=DEFAULT_OUT_DIM,
        help=f"Output dimensions WxH (default: {DEFAULT_OUT_DIM})",
    )
    parser.add_argument(
        "--source", default=None,
        help="Source video to probe for dimensions and duration",
    )
    parser.add_argument(
        "--clips", type=int, default=1,
        help="Number of clips to create (default: 1)",
    )
    parser.add_argument(
        "--force", action="store_true",
        help="Overwrite an existing project file",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser, parser.parse_args(args)


def main(args=None):
    parser, parsed = _parse_args(args)
    configure_logging(parsed.verbose)

    if Path(parsed.output).exists() and not parsed.force:
        parser.error(f"{parsed.output} exists, use --force to overwrite")

    input_name = parsed.input or DEFAULT_INPUT_FILE
    in_dim = parsed.in_dim or DEFAULT_IN_DIM
    duration = None

    try:
        if parsed.source:
            from .probe import probe_source

            info = probe_source(parsed.source)
            print(f"Probed {parsed.source}: {info.dimensions}, {info.duration:.2f}s")
            in_dim = parsed.in_dim or info.dimensions
            input_name = parsed.input or Path(parsed.source).name
            duration = info.duration

        timeline = Timeline.create(
            input_name=input_name,
            in_dim=in_dim,
            out_dim=parsed.out_dim,
            clips=parsed.clips,
            source_duration=duration,
        )
        if parsed.source:
            timeline.video_file = Path(parsed.source).name
        path = save_project(timeline, parsed.output)
    except (SceneCutError, FileNotFoundError) as exc:
        parser.exit(1, f"error: {exc}\n")

    print(f"Created {path}: {len(timeline.clips)} clip(s), {timeline.in_dim} -> {timeline.out_dim}")


if __name__ == "__main__":
    main()
