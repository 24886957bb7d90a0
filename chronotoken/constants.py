"""Shared constants for chronotoken.

Centralizes values that the ledger and the display layer must agree on.
"""

# Offset bounds in minutes (UTC-12 through UTC+14)
MIN_OFFSET_MINUTES = -720
MAX_OFFSET_MINUTES = 840

# Every real-world zone is a multiple of 15 minutes
MAX_OFFSET_GRANULARITY_MINUTES = 15

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

# Ledger economics
MAX_SUPPLY = 1000
MINT_PRICE_WEI = 10**16  # 0.01 ether

# Descriptor wire format
JSON_URI_PREFIX = "data:application/json;base64,"
SVG_URI_PREFIX = "data:image/svg+xml;base64,"

TOKEN_NAME_PREFIX = "Time Token"
