"""Continuity checks across scenes and clip boundaries.

Scenes are expected to abut in source time: each scene starts where the
one before it ended. The first scene of a clip is compared with the last
scene of the previous clip, so a project cut into several clips still
reads as one continuous pass over the source. The very first scene of
the project has nothing before it and is never flagged.

A gap larger than CONTINUITY_EPSILON produces a ContinuityWarning. Gaps
are advisory: they are attached to the scene and returned, but never
stop command generation.
"""

from dataclasses import dataclass

CONTINUITY_EPSILON = 0.05


@dataclass(frozen=True)
class ContinuityWarning:
    """A scene whose start does not match the end before it."""

    clip_id: str
    clip_name: str
    scene_index: int        # 0-based within the clip
    expected: float         # end of the preceding scene
    actual: float           # this scene's start
    gap: float
    across_clips: bool      # preceding scene belongs to the previous clip

    @property
    def message(self) -> str:
        source = "clip" if self.across_clips else "scene"
        return (
            f"Gap from previous {source}: {self.gap:.2f}s "
            f"(expected {self.expected:.2f}s)"
        )

    def __str__(self) -> str:
        return f'Clip "{self.clip_name}", scene {self.scene_index + 1}: {self.message}'


def _check(clip, idx, scene, expected, across_clips, eps):
    gap = abs(scene.start - expected)
    if gap > eps:
        return ContinuityWarning(
            clip_id=clip.id,
            clip_name=clip.name,
            scene_index=idx,
            expected=expected,
            actual=scene.start,
            gap=round(gap, 2),
            across_clips=across_clips,
        )
    return None


def validate_continuity(timeline, eps: float = CONTINUITY_EPSILON) -> list[ContinuityWarning]:
    """Check every scene of every clip and annotate scene.warning.

    Stale warnings are cleared on the way, so the result always reflects
    the current timeline. The list is also stored on timeline.warnings.

    Args:
        timeline: Timeline to check (mutated only in its warning fields).
        eps: Largest gap in seconds that still counts as continuous.

    Returns:
        Warnings in clip/scene order.
    """
    warnings = []
    prev_clip = None

    for clip in timeline.clips:
        for idx, scene in enumerate(clip.scenes):
            warning = None
            if idx > 0:
                prev_end = clip.scenes[idx - 1].end
                warning = _check(clip, idx, scene, prev_end, False, eps)
            elif prev_clip is not None and prev_clip.scenes:
                prev_end = prev_clip.scenes[-1].end
                warning = _check(clip, idx, scene, prev_end, True, eps)

            scene.warning = warning
            if warning is not None:
                warnings.append(warning)
        prev_clip = clip

    timeline.warnings = warnings
    return warnings
