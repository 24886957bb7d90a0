"""
Display snapshots - Read-only views of token state for a presentation layer.

These types are optimized for display, not for domain logic.
They flatten nested structures and compute derived values.
"""

from dataclasses import dataclass

from chronotoken.domain import TimeState, format_offset
from chronotoken.services.inventory import TokenReadResult

UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class StateTheme:
    """How a state is presented."""

    label: str
    emoji: str
    badge: str
    hours: str
    blurb: str


STATE_THEMES: dict[TimeState, StateTheme] = {
    TimeState.NIGHT: StateTheme(
        label="Night",
        emoji="\U0001F319",
        badge="badge-primary",
        hours="22:00 - 06:00",
        blurb="Mystical dark theme with glowing effects",
    ),
    TimeState.MORNING: StateTheme(
        label="Morning",
        emoji="\U0001F305",
        badge="badge-warning",
        hours="06:00 - 12:00",
        blurb="Warm sunrise colors with gentle light",
    ),
    TimeState.DAY: StateTheme(
        label="Day",
        emoji="\u2600\ufe0f",
        badge="badge-accent",
        hours="12:00 - 22:00",
        blurb="Bright sunny theme with vibrant colors",
    ),
}


def theme_for(state: TimeState) -> StateTheme:
    """Get the display theme for a state."""
    # TimeState is closed over three members; a miss is a programming error
    assert state in STATE_THEMES, f"No theme for {state!r}"
    return STATE_THEMES[state]


@dataclass(frozen=True)
class TokenDisplaySnapshot:
    """Flattened token state for a tile or detail view."""

    token_id: int
    available: bool

    # Populated when available
    state: str | None = None
    state_emoji: str | None = None
    state_badge: str | None = None
    owner: str | None = None
    is_owned: bool = False
    timezone: str | None = None
    local_time: str | None = None
    utc_time: str | None = None
    name: str | None = None
    description: str | None = None
    image: str | None = None
    attributes: tuple[tuple[str, str], ...] = ()
    descriptor_stale: bool = False

    # Populated when unavailable
    error: str | None = None

    @classmethod
    def from_read(
        cls,
        result: TokenReadResult,
        viewer: str | None = None,
    ) -> "TokenDisplaySnapshot":
        """Create from an inventory read result."""
        if not result.ok or result.breakdown is None or result.descriptor is None:
            message = result.error.message if result.error else UNAVAILABLE
            return cls.unavailable(result.token_id, message)

        breakdown = result.breakdown
        descriptor = result.descriptor
        theme = theme_for(breakdown.state)
        is_owned = (
            viewer is not None
            and result.owner is not None
            and result.owner.lower() == viewer.lower()
        )

        return cls(
            token_id=result.token_id,
            available=True,
            state=theme.label,
            state_emoji=theme.emoji,
            state_badge=theme.badge,
            owner=result.owner,
            is_owned=is_owned,
            timezone=format_offset(breakdown.offset_minutes),
            local_time=breakdown.local_time,
            utc_time=breakdown.utc_time,
            name=descriptor.name,
            description=descriptor.description,
            image=descriptor.image,
            attributes=tuple((a.trait_type, a.value) for a in descriptor.attributes),
            descriptor_stale=result.state_mismatch,
        )

    @classmethod
    def unavailable(cls, token_id: int, error: str) -> "TokenDisplaySnapshot":
        """Explicit placeholder for a token that could not be read."""
        return cls(token_id=token_id, available=False, error=error)


@dataclass(frozen=True)
class CollectionDisplaySnapshot:
    """Collection overview for display."""

    total_supply: int
    max_supply: int | None
    viewer: str | None
    viewer_balance: int | None
    as_of: int
    tokens: tuple[TokenDisplaySnapshot, ...]

    @property
    def unavailable_count(self) -> int:
        return sum(1 for token in self.tokens if not token.available)

    @property
    def owned(self) -> tuple[TokenDisplaySnapshot, ...]:
        return tuple(token for token in self.tokens if token.is_owned)
