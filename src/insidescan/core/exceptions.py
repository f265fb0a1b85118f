"""Custom exceptions for insidescan."""


class InsideScanError(Exception):
    """Base exception for all insidescan errors."""

    def __init__(self, message: str, *args: object) -> None:
        self.message = message
        super().__init__(message, *args)


# Ledger errors
class LedgerError(InsideScanError):
    """Base error for the ledger gateway layer."""


class LedgerConnectionError(LedgerError):
    """Transport failure talking to the RPC node."""


class LedgerRpcError(LedgerError):
    """RPC node answered with a JSON-RPC error object."""

    def __init__(self, message: str, code: int | None = None) -> None:
        self.code = code
        super().__init__(message)


# Request errors
class ScanRequestError(InsideScanError):
    """Scan request is malformed or not allowed."""
