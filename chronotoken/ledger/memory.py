"""
InMemoryLedger - in-process reference ledger.

Holds token records in a dict and answers every read by running the shared
classifier and codec, exactly as the on-chain encode path does. Used as the
fake store in tests and for local demos.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from chronotoken import codec
from chronotoken.config import InventoryConfig
from chronotoken.constants import MAX_SUPPLY, MINT_PRICE_WEI
from chronotoken.domain import (
    AccountId,
    InvalidOffsetError,
    LocalTimeBreakdown,
    MintRejectedError,
    MintRejection,
    TimePoint,
    TimeState,
    TimezoneOffset,
    TokenId,
    TokenNotFoundError,
    TokenRecord,
    check_granularity,
    classify,
    validate_offset,
)
from chronotoken.logging_config import log_mint

logger = logging.getLogger(__name__)


def system_clock() -> int:
    """Current UTC time in whole seconds."""
    return int(time.time())


class InMemoryLedger:
    """Dict-backed TokenLedger with dense 1-based token ids."""

    def __init__(
        self,
        clock: Callable[[], int] = system_clock,
        max_supply: int = MAX_SUPPLY,
        mint_price: int = MINT_PRICE_WEI,
        offset_granularity_minutes: int = 1,
    ):
        self._clock = clock
        self._max_supply = max_supply
        self._mint_price = mint_price
        self._granularity = check_granularity(offset_granularity_minutes)
        self._tokens: dict[TokenId, TokenRecord] = {}
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: InventoryConfig, clock: Callable[[], int] = system_clock) -> "InMemoryLedger":
        """Ledger whose mint accepts the same offset granularity the inventory reads with."""
        return cls(clock=clock, offset_granularity_minutes=config.offset_granularity_minutes)

    @property
    def max_supply(self) -> int:
        return self._max_supply

    @property
    def mint_price(self) -> int:
        return self._mint_price

    # =========================================================================
    # Reads
    # =========================================================================

    def get_record(self, token_id: TokenId) -> TokenRecord:
        """Get the stored record for a token."""
        record = self._tokens.get(token_id)
        if record is None:
            raise TokenNotFoundError(token_id)
        return record

    async def owner_of(self, token_id: TokenId) -> AccountId:
        return self.get_record(token_id).owner

    async def total_supply(self) -> int:
        return len(self._tokens)

    async def balance_of(self, account: AccountId) -> int:
        return sum(1 for record in self._tokens.values() if record.owner == account)

    async def timezone_offset_of(self, token_id: TokenId) -> int:
        return self.get_record(token_id).timezone_offset

    async def detailed_time_info(self, token_id: TokenId) -> LocalTimeBreakdown:
        record = self.get_record(token_id)
        return classify(self._clock(), record.timezone_offset)

    async def current_state(self, token_id: TokenId) -> TimeState:
        return (await self.detailed_time_info(token_id)).state

    async def descriptor_of(self, token_id: TokenId) -> str:
        breakdown = await self.detailed_time_info(token_id)
        return codec.encode(token_id, breakdown)

    # =========================================================================
    # Writes
    # =========================================================================

    async def mint(self, offset_minutes: int, payment: int, minter: AccountId) -> TokenId:
        """Mint the next token id for `minter`."""
        if payment < self._mint_price:
            log_mint(logger, minter, offset_minutes, rejected="insufficient payment")
            raise MintRejectedError(
                MintRejection.INSUFFICIENT_PAYMENT,
                f"paid {payment}, price is {self._mint_price}",
            )

        try:
            offset = validate_offset(offset_minutes, self._granularity)
        except InvalidOffsetError as e:
            log_mint(logger, minter, offset_minutes, rejected=str(e))
            raise MintRejectedError(MintRejection.INVALID_OFFSET, str(e)) from e

        async with self._lock:
            if len(self._tokens) >= self._max_supply:
                log_mint(logger, minter, offset_minutes, rejected="supply cap reached")
                raise MintRejectedError(
                    MintRejection.SUPPLY_CAP_REACHED,
                    f"max supply is {self._max_supply}",
                )

            token_id = TokenId(len(self._tokens) + 1)
            self._tokens[token_id] = TokenRecord(
                token_id=token_id,
                owner=minter,
                timezone_offset=TimezoneOffset(offset),
                minted_at=TimePoint(self._clock()),
            )

        log_mint(logger, minter, offset, token_id=token_id)
        return token_id

    def transfer(self, token_id: TokenId, new_owner: AccountId) -> None:
        """Change a token's owner. Offset and mint time stay fixed."""
        record = self.get_record(token_id)
        self._tokens[token_id] = record.model_copy(update={"owner": new_owner})
        logger.info(f"TRANSFER | token={token_id} | {record.owner} -> {new_owner}")
