"""Core utilities: logging, deadlines, exceptions."""

from insidescan.core.deadline import Deadline
from insidescan.core.exceptions import InsideScanError
from insidescan.core.logging import get_logger, setup_logging

__all__ = [
    "Deadline",
    "InsideScanError",
    "get_logger",
    "setup_logging",
]
