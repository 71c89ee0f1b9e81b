"""Script aggregation — every clip's command in one bash script.

Layout:

    #!/bin/bash

    # <clip name>
    <command>

    # <next clip name>
    ...

Clips without scenes are skipped. The script is text only; scenecut
never runs it.
"""

import os
import stat
from pathlib import Path

from .filtergraph import NO_SCENES_PLACEHOLDER, command_text
from .timeline import Timeline

DEFAULT_SCRIPT_NAME = "ffmpeg-commands.sh"


def build_script(timeline: Timeline, ffmpeg: str = "ffmpeg") -> str:
    """Concatenate all clip commands under a shebang, one block per clip."""
    script = "#!/bin/bash\n\n"
    for clip in timeline.clips:
        cmd = command_text(timeline, clip, ffmpeg=ffmpeg)
        if cmd == NO_SCENES_PLACEHOLDER:
            continue
        # A newline in the name would end the comment.
        label = " ".join(clip.name.split())
        script += f"# {label}\n"
        script += cmd + "\n\n"
    return script


def write_script(
    timeline: Timeline,
    output: str | Path = DEFAULT_SCRIPT_NAME,
    ffmpeg: str = "ffmpeg",
) -> Path:
    """Write build_script() output to disk and mark it executable.

    Returns the written path. Parent directories are created.
    """
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(build_script(timeline, ffmpeg=ffmpeg))
    mode = os.stat(path).st_mode
    os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path
