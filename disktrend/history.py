"""
disktrend.history
AUTHOR: carter-vin

Bounded, time-ordered snapshot buffer for one volume

Rules:
- timestamps strictly increase; anything at or before the latest is rejected
- retention is measured from the NEWEST snapshot, not the wall clock
- bounded by age (max_age) and count (max_samples), whichever is tighter
"""

from __future__ import annotations

from collections import deque
from datetime import timedelta

from disktrend.errors import OutOfOrderSample
from disktrend.model import Snapshot

DEFAULT_MAX_AGE = timedelta(hours=24)
# 24h at the default 30s poll interval
DEFAULT_MAX_SAMPLES = 2880


class History:
    def __init__(
        self,
        mount_point: str = "",
        *,
        max_age: timedelta = DEFAULT_MAX_AGE,
        max_samples: int = DEFAULT_MAX_SAMPLES,
    ) -> None:
        if max_age <= timedelta(0):
            raise ValueError("max_age must be positive")
        if max_samples < 1:
            raise ValueError("max_samples must be >= 1")

        self.mount_point = mount_point
        self.max_age = max_age
        self.max_samples = max_samples
        self._entries: deque[Snapshot] = deque(maxlen=max_samples)

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, snapshot: Snapshot, *, strict: bool = False) -> bool:
        """
        Append a snapshot and evict entries outside retention

        Returns False (buffer untouched) when the snapshot is not newer than the
        latest entry. With strict=True, raises OutOfOrderSample instead.
        """
        latest = self.latest()
        if latest is not None and snapshot.timestamp <= latest.timestamp:
            if strict:
                raise OutOfOrderSample(
                    self.mount_point,
                    latest.timestamp.isoformat(),
                    snapshot.timestamp.isoformat(),
                )
            return False

        # deque(maxlen) drops from the left when the count bound is hit
        self._entries.append(snapshot)
        self._evict_expired(snapshot)
        return True

    def _evict_expired(self, newest: Snapshot) -> None:
        cutoff = newest.timestamp - self.max_age
        while self._entries and self._entries[0].timestamp < cutoff:
            self._entries.popleft()

    def recent(self) -> tuple[Snapshot, ...]:
        """
        Buffer contents, oldest first (copy; safe to hold)
        """
        return tuple(self._entries)

    def latest(self) -> Snapshot | None:
        if not self._entries:
            return None
        return self._entries[-1]

    def window(self, hours: float) -> tuple[Snapshot, ...]:
        """
        Snapshots within `hours` of the latest entry, oldest first
        """
        latest = self.latest()
        if latest is None:
            return ()
        cutoff = latest.timestamp - timedelta(hours=hours)
        return tuple(s for s in self._entries if s.timestamp >= cutoff)
