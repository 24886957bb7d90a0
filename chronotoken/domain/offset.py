"""Timezone offset validation, formatting and the mint-page presets."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict

from chronotoken.constants import (
    MAX_OFFSET_GRANULARITY_MINUTES,
    MAX_OFFSET_MINUTES,
    MIN_OFFSET_MINUTES,
)

from .errors import InvalidOffsetError, OffsetRejection
from .types import TimezoneOffset


def check_granularity(granularity_minutes: int) -> int:
    """Ensure a granularity keeps half- and quarter-hour zones representable."""
    if (
        isinstance(granularity_minutes, bool)
        or not isinstance(granularity_minutes, int)
        or granularity_minutes <= 0
        or MAX_OFFSET_GRANULARITY_MINUTES % granularity_minutes != 0
    ):
        raise ValueError(
            f"Offset granularity must be a positive divisor of "
            f"{MAX_OFFSET_GRANULARITY_MINUTES} minutes, got {granularity_minutes!r}"
        )
    return granularity_minutes


def validate_offset(offset_minutes: object, granularity_minutes: int = 1) -> TimezoneOffset:
    """
    Validate a caller-supplied offset in whole minutes.

    Args:
        offset_minutes: Signed minutes east of UTC
        granularity_minutes: Offsets must be a multiple of this

    Returns:
        The offset as a TimezoneOffset

    Raises:
        InvalidOffsetError: If the value is not an int, is outside
            [-720, 840], or is not aligned to the granularity
    """
    check_granularity(granularity_minutes)

    # bool is an int subclass; floats are never silently truncated
    if isinstance(offset_minutes, bool) or not isinstance(offset_minutes, int):
        raise InvalidOffsetError(
            offset_minutes,
            OffsetRejection.NOT_INTEGER,
            f"expected int minutes, got {type(offset_minutes).__name__}",
        )

    if not MIN_OFFSET_MINUTES <= offset_minutes <= MAX_OFFSET_MINUTES:
        raise InvalidOffsetError(
            offset_minutes,
            OffsetRejection.OUT_OF_RANGE,
            f"must be within [{MIN_OFFSET_MINUTES}, {MAX_OFFSET_MINUTES}]",
        )

    if offset_minutes % granularity_minutes != 0:
        raise InvalidOffsetError(
            offset_minutes,
            OffsetRejection.BAD_GRANULARITY,
            f"must be a multiple of {granularity_minutes} minutes",
        )

    return TimezoneOffset(offset_minutes)


def format_offset(offset_minutes: int) -> str:
    """
    Format an offset as UTC±H[:MM].

    The sign is always present (0 -> "UTC+0") and the minutes component
    is omitted when zero.
    """
    sign = "+" if offset_minutes >= 0 else "-"
    hours, minutes = divmod(abs(offset_minutes), 60)
    if minutes == 0:
        return f"UTC{sign}{hours}"
    return f"UTC{sign}{hours}:{minutes:02d}"


class TimezonePreset(BaseModel):
    """A named offset offered when minting."""
    model_config = ConfigDict(frozen=True)

    label: str
    offset_minutes: int


DEFAULT_PRESETS_PATH = Path(__file__).parent.parent / "data" / "timezones.yaml"


def load_presets(path: Path | None = None) -> tuple[TimezonePreset, ...]:
    """
    Load timezone presets from YAML.

    Args:
        path: Path to a presets file. If None, uses the bundled timezones.yaml.

    Returns:
        Presets in file order (empty if the file does not exist)

    Raises:
        InvalidOffsetError: If a preset's offset is out of range
    """
    if path is None:
        path = DEFAULT_PRESETS_PATH
    if not path.exists():
        return ()

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data or "presets" not in data:
        return ()

    presets = tuple(TimezonePreset.model_validate(p) for p in data["presets"])
    for preset in presets:
        validate_offset(preset.offset_minutes)
    return presets


TIMEZONE_PRESETS: tuple[TimezonePreset, ...] = load_presets()


def find_preset(offset_minutes: int) -> TimezonePreset | None:
    """Get the preset for an offset, if there is one."""
    for preset in TIMEZONE_PRESETS:
        if preset.offset_minutes == offset_minutes:
            return preset
    return None
