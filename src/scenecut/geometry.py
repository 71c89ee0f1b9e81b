"""Crop window geometry.

The crop window is the largest rectangle with the output aspect ratio
that fits inside the input frame:

    ratio  = min(in_h / out_h, in_w / out_w)
    crop_w = ratio * out_w
    crop_h = ratio * out_h

It is never larger than the input in either axis, and scaling it to the
output size never distorts. Dimensions are validated upstream
(common.parse_dimensions), so out_w and out_h are always positive.
"""


def crop_window(
    in_dim: tuple[int, int],
    out_dim: tuple[int, int],
) -> tuple[float, float]:
    """Return (crop_w, crop_h) for the given input and output dimensions."""
    in_w, in_h = in_dim
    out_w, out_h = out_dim
    ratio = min(in_h / out_h, in_w / out_w)
    return ratio * out_w, ratio * out_h


def crop_offset(in_w: int, crop_w: float, percent: float) -> float:
    """Pixel x position of the crop window for a 0-100 percentage.

    0% puts the window flush left, 100% flush right. Values outside the
    range are clamped to the frame.
    """
    max_x = max(0.0, in_w - crop_w)
    return max(0.0, min(max_x, max_x * (percent / 100)))
