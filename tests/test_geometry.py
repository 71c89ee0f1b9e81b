"""Tests for crop window geometry."""

import pytest

from scenecut.geometry import crop_offset, crop_window


class TestCropWindow:
    def test_landscape_to_portrait(self):
        # ratio = min(1080/1280, 1920/720) = 0.84375
        crop_w, crop_h = crop_window((1920, 1080), (720, 1280))
        assert crop_w == pytest.approx(607.5)
        assert crop_h == pytest.approx(1080)

    def test_same_aspect_uses_full_frame(self):
        assert crop_window((1920, 1080), (1280, 720)) == pytest.approx((1920, 1080))

    def test_portrait_to_landscape_limited_by_width(self):
        crop_w, crop_h = crop_window((1080, 1920), (1280, 720))
        assert crop_w == pytest.approx(1080)
        assert crop_h == pytest.approx(607.5)

    @pytest.mark.parametrize("in_dim,out_dim", [
        ((1280, 640), (720, 1280)),
        ((320, 240), (180, 320)),
        ((3840, 2160), (1080, 1080)),
        ((640, 480), (1920, 1080)),
    ])
    def test_fits_and_keeps_output_aspect(self, in_dim, out_dim):
        crop_w, crop_h = crop_window(in_dim, out_dim)
        assert crop_w <= in_dim[0] + 1e-9
        assert crop_h <= in_dim[1] + 1e-9
        assert crop_w / crop_h == pytest.approx(out_dim[0] / out_dim[1])


class TestCropOffset:
    def test_left_center_right(self):
        assert crop_offset(1920, 607.5, 0) == 0
        assert crop_offset(1920, 607.5, 50) == pytest.approx(656.25)
        assert crop_offset(1920, 607.5, 100) == pytest.approx(1312.5)

    def test_clamped(self):
        assert crop_offset(1920, 607.5, 120) == pytest.approx(1312.5)
        assert crop_offset(1920, 607.5, -5) == 0

    def test_full_width_window_has_no_travel(self):
        assert crop_offset(1920, 1920, 75) == 0
