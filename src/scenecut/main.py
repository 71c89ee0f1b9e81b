"""Subcommand dispatcher for scenecut.

Usage:
    scenecut new      --output project.json [--source talk.mp4]
    scenecut check    --project project.json
    scenecut command  --project project.json --clip Intro [--scene 2]
    scenecut script   --project project.json --output ffmpeg-commands.sh
"""

import argparse
import importlib
import sys

# name -> (module with a main(args), help)
SUBCOMMANDS = {
    "new": ("new_cli", "Create a project file"),
    "check": ("check_cli", "Validate a project and report continuity gaps"),
    "command": ("command_cli", "Print the ffmpeg command for a clip or scene"),
    "script": ("script_cli", "Write all clip commands to a bash script"),
}


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="scenecut",
        description="Plan clips of scenes from one video and generate ffmpeg commands.",
    )
    subparsers = parser.add_subparsers(dest="command")
    for name, (_, help_text) in SUBCOMMANDS.items():
        subparsers.add_parser(name, help=help_text)

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command not in SUBCOMMANDS:
        parser.print_help()
        sys.exit(1)

    # Subcommand modules are imported on demand.
    module_name, _ = SUBCOMMANDS[parsed.command]
    module = importlib.import_module(f".{module_name}", __package__)
    module.main(remaining)


if __name__ == "__main__":
    main()
