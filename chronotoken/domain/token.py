from pydantic import BaseModel, ConfigDict, Field

from .time import TimeState
from .types import AccountId, TimePoint, TimezoneOffset, TokenId


class TokenRecord(BaseModel):
    """A minted token as the ledger stores it. Never mutated by the core."""
    model_config = ConfigDict(frozen=True)

    token_id: TokenId = Field(ge=1)
    owner: AccountId
    timezone_offset: TimezoneOffset
    minted_at: TimePoint = Field(ge=0)


class TraitAttribute(BaseModel):
    """One (trait_type, value) pair of a descriptor."""
    model_config = ConfigDict(frozen=True)

    trait_type: str
    value: str


class MetadataDescriptor(BaseModel):
    """Decoded token metadata.

    Field order is the wire key order: name, description, image, attributes.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    image: str
    attributes: tuple[TraitAttribute, ...] = Field(default_factory=tuple)

    def attribute(self, trait_type: str) -> str | None:
        """Get the value of a trait, if present."""
        for attr in self.attributes:
            if attr.trait_type == trait_type:
                return attr.value
        return None


STATE_TRAIT = "Time State"
LOCAL_TIME_TRAIT = "Local Time"
UTC_TIME_TRAIT = "UTC Time"
TIMEZONE_TRAIT = "Timezone"


def descriptor_state(descriptor: MetadataDescriptor) -> TimeState | None:
    """Get the state a descriptor claims, or None if it names no known state."""
    value = descriptor.attribute(STATE_TRAIT)
    for state in TimeState:
        if state.label == value:
            return state
    return None
