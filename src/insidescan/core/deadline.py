"""Nested time budgets for request, component and per-call work."""

from __future__ import annotations

import time


class Deadline:
    """An absolute point in monotonic time after which work is abandoned.

    Child deadlines never outlive their parent:

        request = Deadline(55)
        discovery = request.child(20)   # min(20s, whatever request has left)
    """

    __slots__ = ("_expires_at",)

    def __init__(self, seconds: float) -> None:
        self._expires_at = time.monotonic() + max(0.0, seconds)

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def child(self, seconds: float) -> Deadline:
        """Deadline for a sub-operation, capped by this one."""
        return Deadline(min(seconds, self.remaining()))

    def __repr__(self) -> str:
        return f"Deadline(remaining={self.remaining():.3f}s)"
