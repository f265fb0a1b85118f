"""Application-wide constants.

These are fixed values that don't change between environments.
For configurable values, see config.py Settings.
"""

from decimal import Decimal

# ─────────────────────────────────────────────────────────────
# Ledger units (protocol constants)
# ─────────────────────────────────────────────────────────────
LAMPORTS_PER_SOL = 1_000_000_000
SOL_DISPLAY_QUANTUM = Decimal("0.0001")  # 4 decimal places in rendered amounts

# ─────────────────────────────────────────────────────────────
# Program IDs
# ─────────────────────────────────────────────────────────────
SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
SYSTEM_TRANSFER_TYPES = frozenset({"transfer", "transferWithSeed"})
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

# ─────────────────────────────────────────────────────────────
# API URL Defaults (used as defaults in Settings)
# ─────────────────────────────────────────────────────────────
DEFAULT_SOLANA_RPC_URL = "https://api.mainnet-beta.solana.com"

# ─────────────────────────────────────────────────────────────
# Request limits (RPC constraints)
# ─────────────────────────────────────────────────────────────
RPC_MAX_SIGNATURES_PER_CALL = 1000  # getSignaturesForAddress hard limit
BASE58_ADDRESS_PATTERN = r"^[1-9A-HJ-NP-Za-km-z]{32,44}$"

# ─────────────────────────────────────────────────────────────
# Trade metrics
# ─────────────────────────────────────────────────────────────
MAX_HOLD_TIME_SECONDS = 7 * 24 * 3600  # longer gaps are idle periods, not holds
RATIO_DISPLAY_QUANTUM = Decimal("0.1")  # successRate / avgHoldTime rendering

# ─────────────────────────────────────────────────────────────
# Detected pattern tags
# ─────────────────────────────────────────────────────────────
PATTERN_SEED_FUNDED = "Seed Funded"
PATTERN_FRESH_WALLET = "Fresh Wallet"
PATTERN_WASH_TRADING = "Wash Trading"
PATTERN_DELAYED_PROFIT = "Delayed Profit"
PATTERN_HIGH_ACTIVITY = "High Activity"
