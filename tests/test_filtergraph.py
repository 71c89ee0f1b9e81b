"""Tests for ffmpeg filter graph and command synthesis."""

import pytest

from scenecut.errors import OrderingError
from scenecut.filtergraph import (
    NO_SCENES_PLACEHOLDER,
    build_command,
    build_filter_graph,
    command_text,
    crop_x_expr,
    evaluate_crop_x,
    format_command,
    format_number,
    output_name,
)
from scenecut.project_manifest import project_from_dict
from scenecut.timeline import PAN_ZOOM, Clip, Scene, Timeline

CROP = (607.5, 1080.0)
OUT = (720, 1280)

STATIC_UNIT_V = (
    "[0:v]trim=start=0:end=5,setpts=PTS-STARTPTS,"
    "crop=607.5:1080:(in_w-607.5)*0.5:0,scale=720:1280[v0]"
)
STATIC_UNIT_A = "[0:a]atrim=start=0:end=5,asetpts=PTS-STARTPTS[a0]"
PAN_X = (
    "(in_w-607.5)*0.2+((in_w-607.5)*0.8-((in_w-607.5)*0.2))*(t/4.50)"
)


def _minimal_project():
    """Two clips: Intro (static + linear pan) and Main part (one scene)."""
    return {
        "inputName": "input.mkv",
        "inDim": "1920x1080",
        "outDim": "720x1280",
        "clips": [
            {
                "name": "Intro",
                "scenes": [
                    {"start": 0.0, "end": 5.0, "hCrop": 50.0},
                    {"start": 5.0, "end": 9.5, "hCrop": 20.0,
                     "pan": True, "hCropEnd": 80.0, "panMethod": "linear"},
                ],
            },
            {
                "name": "Main part",
                "scenes": [{"start": 9.5, "end": 12.0, "hCrop": 80.0}],
            },
        ],
    }


@pytest.fixture
def timeline():
    return project_from_dict(_minimal_project())


class TestFormatNumber:
    def test_integral(self):
        assert format_number(1080.0) == "1080"
        assert format_number(0) == "0"

    def test_fractional(self):
        assert format_number(607.5) == "607.5"
        assert format_number(9.25) == "9.25"


class TestCropExpression:
    def test_static(self):
        scene = Scene(start=0, end=5, h_crop=50)
        assert crop_x_expr(scene, 607.5) == "(in_w-607.5)*0.5"

    def test_static_ignores_end_crop_when_not_panning(self):
        scene = Scene(start=0, end=5, h_crop=0, h_crop_end=100)
        assert crop_x_expr(scene, 607.5) == "(in_w-607.5)*0"

    def test_linear_pan(self):
        scene = Scene(start=5, end=9.5, h_crop=20, pan=True, h_crop_end=80)
        assert crop_x_expr(scene, 607.5) == PAN_X

    def test_zoom_pan(self):
        scene = Scene(start=5, end=9.5, h_crop=20, pan=True, h_crop_end=80,
                      pan_method=PAN_ZOOM)
        expr = crop_x_expr(scene, 607.5)
        assert expr == (
            "(in_w-607.5)*0.2+((in_w-607.5)*0.8-((in_w-607.5)*0.2))"
            "*(1-cos(PI*t/4.50))/2"
        )

    def test_no_commas(self):
        # Commas would need escaping inside a filter chain.
        scene = Scene(start=5, end=9.5, h_crop=20, pan=True, h_crop_end=80,
                      pan_method=PAN_ZOOM)
        assert "," not in crop_x_expr(scene, 607.5)


class TestEvaluateCropX:
    def _pan(self, method="linear"):
        return Scene(start=5, end=9.5, h_crop=20, pan=True, h_crop_end=80,
                     pan_method=method)

    def test_static(self):
        scene = Scene(start=0, end=5, h_crop=50)
        assert evaluate_crop_x(scene, 1920, 607.5, 3) == pytest.approx(656.25)

    def test_linear_endpoints_and_midpoint(self):
        scene = self._pan()
        assert evaluate_crop_x(scene, 1920, 607.5, 0) == pytest.approx(262.5)
        assert evaluate_crop_x(scene, 1920, 607.5, 2.25) == pytest.approx(656.25)
        assert evaluate_crop_x(scene, 1920, 607.5, 4.5) == pytest.approx(1050)

    def test_zoom_eases(self):
        linear, zoom = self._pan(), self._pan(PAN_ZOOM)
        assert evaluate_crop_x(zoom, 1920, 607.5, 0) == pytest.approx(262.5)
        assert evaluate_crop_x(zoom, 1920, 607.5, 4.5) == pytest.approx(1050)
        assert evaluate_crop_x(zoom, 1920, 607.5, 2.25) == pytest.approx(656.25)
        assert (evaluate_crop_x(zoom, 1920, 607.5, 1)
                < evaluate_crop_x(linear, 1920, 607.5, 1))
        assert (evaluate_crop_x(zoom, 1920, 607.5, 3.5)
                > evaluate_crop_x(linear, 1920, 607.5, 3.5))


class TestFilterGraph:
    def test_single_scene_concat(self):
        graph = build_filter_graph([Scene(start=0, end=5)], CROP, OUT)
        assert graph == (
            f"{STATIC_UNIT_V}; {STATIC_UNIT_A}; "
            "[v0][a0]concat=n=1:v=1:a=1[v][a]"
        )

    def test_two_scenes(self, timeline):
        graph = build_filter_graph(timeline.clips[0].scenes, CROP, OUT)
        assert graph == (
            f"{STATIC_UNIT_V}; {STATIC_UNIT_A}; "
            "[0:v]trim=start=5:end=9.5,setpts=PTS-STARTPTS,"
            f"crop=607.5:1080:{PAN_X}:0,scale=720:1280[v1]; "
            "[0:a]atrim=start=5:end=9.5,asetpts=PTS-STARTPTS[a1]; "
            "[v0][a0][v1][a1]concat=n=2:v=1:a=1[v][a]"
        )

    def test_standalone_labels_directly(self):
        graph = build_filter_graph([Scene(start=0, end=5)], CROP, OUT, concat=False)
        assert graph == (
            "[0:v]trim=start=0:end=5,setpts=PTS-STARTPTS,"
            "crop=607.5:1080:(in_w-607.5)*0.5:0,scale=720:1280[v]; "
            "[0:a]atrim=start=0:end=5,asetpts=PTS-STARTPTS[a]"
        )
        assert "concat" not in graph

    def test_standalone_needs_one_scene(self):
        with pytest.raises(ValueError, match="exactly 1 scene"):
            build_filter_graph([Scene(0, 1), Scene(1, 2)], CROP, OUT, concat=False)

    def test_concat_pad_count_matches_scenes(self):
        scenes = [Scene(start=i, end=i + 1) for i in range(4)]
        graph = build_filter_graph(scenes, CROP, OUT)
        assert graph.endswith(
            "[v0][a0][v1][a1][v2][a2][v3][a3]concat=n=4:v=1:a=1[v][a]"
        )
        assert graph.count("[0:v]trim") == 4
        assert graph.count("[0:a]atrim") == 4


class TestOutputName:
    def test_clip(self):
        assert output_name(Clip(name="My Clip!")) == "My_Clip_.mp4"

    def test_scene_is_one_based(self):
        assert output_name(Clip(name="My Clip!"), 1) == "My_Clip_-2.mp4"


class TestBuildCommand:
    def test_clip_argv(self, timeline):
        argv = build_command(timeline, timeline.clips[1])
        assert argv[:3] == ["ffmpeg", "-i", "input.mkv"]
        assert argv[3] == "-filter_complex"
        assert argv[4].endswith("[v0][a0]concat=n=1:v=1:a=1[v][a]")
        assert argv[5:] == [
            "-map", "[v]", "-map", "[a]",
            "-c:v", "libx264", "-c:a", "aac",
            "Main_part.mp4",
        ]

    def test_single_scene_argv(self, timeline):
        argv = build_command(timeline, timeline.clips[0], 1)
        assert argv[-1] == "Intro-2.mp4"
        assert "concat" not in argv[4]
        assert "trim=start=5:end=9.5" in argv[4]

    def test_custom_executable(self, timeline):
        argv = build_command(timeline, timeline.clips[0], ffmpeg="/opt/ffmpeg")
        assert argv[0] == "/opt/ffmpeg"

    def test_empty_clip_returns_none(self):
        t = Timeline()
        t.append_clip("Empty", [])
        assert build_command(t, t.clips[0]) is None

    def test_bad_scene_index(self, timeline):
        with pytest.raises(IndexError):
            build_command(timeline, timeline.clips[1], 3)

    def test_ordering_checked(self, timeline):
        clip = timeline.clips[0]
        timeline.update_from_end(clip, 1, 5)
        with pytest.raises(OrderingError, match='Clip "Intro", scene 2'):
            build_command(timeline, clip)

    def test_ordering_checked_only_for_requested_scene(self, timeline):
        clip = timeline.clips[0]
        timeline.update_from_end(clip, 1, 5)
        assert build_command(timeline, clip, 0) is not None

    def test_uses_input_name_and_dimensions(self, timeline):
        timeline.set_input_name("talk.mov")
        timeline.set_dimensions(in_dim="1280x720", out_dim="720x720")
        argv = build_command(timeline, timeline.clips[1])
        assert argv[2] == "talk.mov"
        assert "crop=720:720:" in argv[4]
        assert "scale=720:720" in argv[4]


class TestCommandText:
    def test_three_line_layout(self, timeline):
        text = command_text(timeline, timeline.clips[1])
        lines = text.split("\n")
        assert len(lines) == 3
        assert lines[0] == "ffmpeg -i input.mkv -filter_complex \\"
        assert lines[1].startswith('"[0:v]trim=start=9.5:end=12,')
        assert lines[1].endswith('concat=n=1:v=1:a=1[v][a]" \\')
        assert lines[2] == '-map "[v]" -map "[a]" -c:v libx264 -c:a aac Main_part.mp4'

    def test_quotes_names_with_spaces(self, timeline):
        timeline.set_input_name("my talk.mkv")
        text = command_text(timeline, timeline.clips[0])
        assert text.startswith("ffmpeg -i 'my talk.mkv' -filter_complex \\\n")

    def test_placeholder_for_empty_clip(self):
        t = Timeline()
        t.append_clip("Empty", [])
        assert command_text(t, t.clips[0]) == NO_SCENES_PLACEHOLDER

    def test_format_command_roundtrip_of_argv(self, timeline):
        argv = build_command(timeline, timeline.clips[0])
        text = format_command(argv)
        assert argv[4] in text
