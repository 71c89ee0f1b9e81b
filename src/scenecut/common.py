"""scenecut.common — shared parsing and field validation.

Contains: dimension parsing, numeric field validators (time, duration,
percentage), filename checks and sanitizing, time formatting, and
${var} path resolution for project files.

Every validator returns the normalized value or raises
FieldValidationError. None of them mutate anything, so callers can
validate first and only then touch the timeline.
"""

import logging
import math
import re

from .errors import FieldValidationError


# ── Limits ─────────────────────────────────────────────────────────

MAX_WIDTH = 7680
MAX_HEIGHT = 4320

# Longest scene the duration validator accepts (one hour).
MAX_SCENE_DURATION = 3600.0

INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')

_DIMENSIONS_PATTERN = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")


# ── Dimensions ─────────────────────────────────────────────────────

def parse_dimensions(value: str) -> tuple[int, int]:
    """Parse a 'WIDTHxHEIGHT' string into (width, height).

    Whitespace around the numbers and an upper-case 'X' are accepted.
    Both sides must be positive and within 7680x4320.

    Raises:
        FieldValidationError: Empty, malformed, zero or oversized value.
    """
    if not isinstance(value, str) or not value.strip():
        raise FieldValidationError("Dimensions are required")

    match = _DIMENSIONS_PATTERN.match(value)
    if not match:
        raise FieldValidationError(
            f"Dimensions must be in format WIDTHxHEIGHT (e.g. 1920x1080), got {value!r}"
        )

    width, height = int(match.group(1)), int(match.group(2))
    if width < 1 or height < 1:
        raise FieldValidationError(
            f"Dimensions must be positive numbers, got {width}x{height}"
        )
    if width > MAX_WIDTH or height > MAX_HEIGHT:
        raise FieldValidationError(
            f"Dimensions too large (maximum {MAX_WIDTH}x{MAX_HEIGHT}), got {width}x{height}"
        )
    return width, height


def format_dimensions(dims: tuple[int, int]) -> str:
    """Render (width, height) back to the canonical 'WxH' string."""
    return f"{dims[0]}x{dims[1]}"


def normalize_dimensions(value: str) -> str:
    """Validate a dimensions string and return it as 'WxH'."""
    return format_dimensions(parse_dimensions(value))


# ── Numeric fields ─────────────────────────────────────────────────

def _to_number(value, field: str) -> float:
    """Coerce a field value to float. Booleans and NaN are rejected."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise FieldValidationError(f"{field} is required")
    if isinstance(value, bool):
        raise FieldValidationError(f"{field} must be a valid number, got {value!r}")
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise FieldValidationError(
            f"{field} must be a valid number, got {value!r}"
        ) from None
    if math.isnan(num) or math.isinf(num):
        raise FieldValidationError(f"{field} must be a finite number, got {value!r}")
    return num


def validate_time(value, field: str = "Time", max_duration: float | None = None) -> float:
    """Validate a timestamp in seconds: >= 0, two decimals.

    If max_duration is given (the source length, when known), the value
    may not exceed it.
    """
    num = _to_number(value, field)
    if num < 0:
        raise FieldValidationError(f"{field} cannot be negative, got {num}")
    num = round(num, 2)
    if max_duration is not None and num > max_duration:
        raise FieldValidationError(
            f"{field} cannot exceed video duration ({max_duration:.2f}s), got {num}"
        )
    return num


def validate_duration(value, field: str = "Length") -> float:
    """Validate a scene length in seconds: 0.01 .. 3600, two decimals."""
    num = _to_number(value, field)
    num = round(num, 2)
    if num < 0.01:
        raise FieldValidationError(f"{field} must be at least 0.01, got {num}")
    if num > MAX_SCENE_DURATION:
        raise FieldValidationError(
            f"{field} too long (max {MAX_SCENE_DURATION:g}s), got {num}"
        )
    return num


def validate_percentage(value, field: str = "Horizontal crop") -> float:
    """Validate a crop percentage: 0 .. 100, one decimal."""
    num = _to_number(value, field)
    if num < 0 or num > 100:
        raise FieldValidationError(f"{field} must be between 0 and 100, got {num}")
    return round(num, 1)


# ── Names ──────────────────────────────────────────────────────────

def validate_filename(value, field: str = "Filename") -> str:
    """Validate a user-facing file or clip name and return it stripped."""
    if not isinstance(value, str) or not value.strip():
        raise FieldValidationError(f"{field} is required")
    if INVALID_FILENAME_CHARS.search(value):
        raise FieldValidationError(
            f"{field} contains invalid characters: {value!r}"
        )
    if len(value) > 255:
        raise FieldValidationError(f"{field} too long (max 255 characters)")
    return value.strip()


def sanitize_filename(name: str) -> str:
    """Replace every character outside [A-Za-z0-9_-] with '_'."""
    return re.sub(r"[^a-zA-Z0-9_-]", "_", name)


# ── Formatting ─────────────────────────────────────────────────────

def format_time(seconds: float) -> str:
    """Format seconds as 'M:SS.mmm' for scene tables."""
    if seconds is None or math.isnan(seconds):
        return "0:00.000"
    mins = int(seconds // 60)
    secs = seconds - mins * 60
    return f"{mins}:{secs:06.3f}"


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise FieldValidationError(f"Unknown path variable: ${{{key}}}")
        return paths[key]
    return re.sub(r"\$\{(\w+)\}", _replace, text)


# ── Logging ────────────────────────────────────────────────────────

def configure_logging(verbose: bool = False) -> None:
    """CLI logging: warnings by default, debug traces with --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
