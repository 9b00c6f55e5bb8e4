from __future__ import annotations

from datetime import UTC, datetime, timedelta


class SystemClock:
    def now(self) -> datetime:  # noqa: D401
        return datetime.now(UTC)


class FixedClock:
    """Clock frozen at a given instant; ``advance`` moves it forward."""

    def __init__(self, fixed: datetime) -> None:
        self._fixed = fixed

    def now(self) -> datetime:  # noqa: D401
        return self._fixed

    def advance(self, delta: timedelta) -> datetime:
        self._fixed = self._fixed + delta
        return self._fixed
