from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from chronotoken.constants import SECONDS_PER_DAY, SECONDS_PER_HOUR, SECONDS_PER_MINUTE

from .offset import format_offset


class TimeState(Enum):
    """Discrete visual mode of a token, ordered by the day's clock hours.

    The integer value is the state code the ledger reports.
    """
    NIGHT = 0
    MORNING = 1
    DAY = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


class LocalTimeBreakdown(BaseModel):
    """Local and UTC clock readings for one token at one instant."""
    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(ge=0)
    utc_hour: int = Field(ge=0, le=23)
    utc_minute: int = Field(ge=0, le=59)
    local_hour: int = Field(ge=0, le=23)
    local_minute: int = Field(ge=0, le=59)
    offset_minutes: int
    state: TimeState

    @computed_field
    @property
    def state_name(self) -> str:
        """Display name of the state."""
        return self.state.label

    @computed_field
    @property
    def local_time(self) -> str:
        """Local clock as zero-padded HH:MM."""
        return f"{self.local_hour:02d}:{self.local_minute:02d}"

    @computed_field
    @property
    def utc_time(self) -> str:
        """UTC clock as zero-padded HH:MM."""
        return f"{self.utc_hour:02d}:{self.utc_minute:02d}"

    @computed_field
    @property
    def offset_label(self) -> str:
        return format_offset(self.offset_minutes)

    def as_tuple(self) -> tuple[int, int, int, int, int, int, int, str]:
        """Ledger tuple shape: (timestamp, utcHour, utcMinute, localHour,
        localMinute, offset, stateCode, stateName)."""
        return (
            self.timestamp,
            self.utc_hour,
            self.utc_minute,
            self.local_hour,
            self.local_minute,
            self.offset_minutes,
            self.state.value,
            self.state_name,
        )


def state_for_hour(hour: int) -> TimeState:
    """
    Map a local hour to its state.

    Boundaries are half-open: Morning [6, 12), Day [12, 22),
    Night [22, 24) and [0, 6).
    """
    if not 0 <= hour <= 23:
        raise ValueError(f"Hour out of range: {hour}")
    if 6 <= hour < 12:
        return TimeState.MORNING
    elif 12 <= hour < 22:
        return TimeState.DAY
    else:
        return TimeState.NIGHT


def _second_of_day(seconds: int) -> int:
    # non-negative for negative offsets too
    return seconds % SECONDS_PER_DAY


def classify(utc_seconds: int, offset_minutes: int) -> LocalTimeBreakdown:
    """
    Classify an instant for a token with the given offset.

    Pure integer arithmetic over the 24-hour cycle, no timezone database
    and no DST. The offset is expected to be validated already.

    Args:
        utc_seconds: Seconds since the epoch, UTC
        offset_minutes: Signed minutes east of UTC

    Returns:
        LocalTimeBreakdown for that instant
    """
    if utc_seconds < 0:
        raise ValueError(f"utc_seconds must be non-negative, got {utc_seconds}")

    local_sod = _second_of_day(utc_seconds + offset_minutes * SECONDS_PER_MINUTE)
    utc_sod = _second_of_day(utc_seconds)

    local_hour = local_sod // SECONDS_PER_HOUR
    return LocalTimeBreakdown(
        timestamp=utc_seconds,
        utc_hour=utc_sod // SECONDS_PER_HOUR,
        utc_minute=(utc_sod // SECONDS_PER_MINUTE) % 60,
        local_hour=local_hour,
        local_minute=(local_sod // SECONDS_PER_MINUTE) % 60,
        offset_minutes=offset_minutes,
        state=state_for_hour(local_hour),
    )
