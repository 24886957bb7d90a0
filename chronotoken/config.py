"""
Runtime configuration for the inventory read path.

Values come from CHRONOTOKEN_* environment variables (a .env file is loaded
first if present), falling back to the defaults below.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from chronotoken.domain import check_granularity

ENV_PREFIX = "CHRONOTOKEN_"


class InventoryConfig(BaseModel):
    """Timeout, retry and fan-out limits for ledger reads."""
    model_config = ConfigDict(frozen=True)

    max_concurrent_reads: int = Field(default=8, ge=1)
    read_timeout_seconds: float = Field(default=5.0, gt=0)
    read_attempts: int = Field(default=3, ge=1)
    retry_base_delay_seconds: float = Field(default=0.2, ge=0)
    retry_max_delay_seconds: float = Field(default=2.0, ge=0)
    offset_granularity_minutes: int = 1

    @field_validator("offset_granularity_minutes")
    @classmethod
    def _granularity_keeps_real_zones(cls, value: int) -> int:
        return check_granularity(value)

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> "InventoryConfig":
        """Build a config from the environment."""
        load_dotenv(dotenv_path)
        overrides = {}
        for name in cls.model_fields:
            raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None:
                overrides[name] = raw
        return cls.model_validate(overrides)
