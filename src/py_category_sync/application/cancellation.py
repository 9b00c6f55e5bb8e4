from __future__ import annotations

__all__ = ["CancellationToken"]


class CancellationToken:
    """Cooperative cancellation flag checked between batch items.

    Cancelling never interrupts an in-flight network call; the batch stops
    before issuing the next one.
    """

    __slots__ = ("_cancelled", "_reason")

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation (idempotent; the first reason wins)."""
        if not self._cancelled:
            self._cancelled = True
            self._reason = reason

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"CancellationToken(cancelled={self._cancelled}, reason={self._reason!r})"
