"""insidescan: insider-style wallet detection over Solana transaction history."""

__version__ = "0.1.0"
