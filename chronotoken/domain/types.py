"""Identifier types shared across the domain."""

from typing import NewType

TokenId = NewType("TokenId", int)
AccountId = NewType("AccountId", str)
TimezoneOffset = NewType("TimezoneOffset", int)

# Seconds since the epoch, UTC
TimePoint = NewType("TimePoint", int)
