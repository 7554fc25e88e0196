"""
disktrend.model
AUTHOR: carter-vin

Data model + deterministic serialization primitives.

Design goals:
- Immutable measurements (Snapshot, VolumeInfo)
- Derived values (Trend, ForecastPoint) never persisted, recomputed on demand
- Explicit structure (no accidental serialization via __dict__)
- Versioned, stable report envelope ("schema_version" = "1")
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import json

# Schema constants
SCHEMA_VERSION = "1"

# |bytes/day| below this is reported as "stable"
STABLE_BYTES_PER_DAY = 1_000_000


def utc_now() -> datetime:
    """
    Current time (aware, UTC)
    """
    return datetime.now(timezone.utc)


def _pct(part: int, total: int) -> float:
    return (part / total) * 100.0


# -----------------------------
# Classifications
# -----------------------------
class VolumeStatus(str, Enum):
    HEALTHY = "healthy"
    CAUTION = "caution"
    WARNING = "warning"
    CRITICAL = "critical"


class TrendDirection(str, Enum):
    FILLING = "filling"
    STABLE = "stable"
    FREEING = "freeing"


class ForecastOutlook(str, Enum):
    """
    How close the volume is to full, from days_until_full
    """

    IMMINENT = "imminent"  # < 7 days
    SOON = "soon"  # < 14 days
    WATCH = "watch"  # < 30 days
    NONE = "none"


# -----------------------------
# Measurements
# -----------------------------
@dataclass(frozen=True)
class Snapshot:
    """
    One volume measurement at a point in time
    - timestamp: aware datetime
    - free_bytes: 0 <= free_bytes <= total_bytes
    - total_bytes: > 0
    """

    timestamp: datetime
    free_bytes: int
    total_bytes: int

    def __post_init__(self) -> None:
        # naive and aware datetimes cannot be compared inside a History
        if self.timestamp.tzinfo is None or self.timestamp.utcoffset() is None:
            raise ValueError("timestamp must be timezone-aware")
        if self.total_bytes <= 0:
            raise ValueError("total_bytes must be > 0")
        if self.free_bytes < 0:
            raise ValueError("free_bytes must be >= 0")
        if self.free_bytes > self.total_bytes:
            raise ValueError("free_bytes must be <= total_bytes")

    @property
    def used_bytes(self) -> int:
        return self.total_bytes - self.free_bytes

    @property
    def free_percent(self) -> float:
        return _pct(self.free_bytes, self.total_bytes)

    @property
    def used_percent(self) -> float:
        return _pct(self.used_bytes, self.total_bytes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "free_bytes": self.free_bytes,
            "total_bytes": self.total_bytes,
        }


@dataclass(frozen=True)
class VolumeInfo:
    """
    One mounted volume as returned by a volume-info source
    """

    name: str
    mount_point: str
    total_bytes: int
    free_bytes: int
    is_removable: bool = False
    is_internal: bool = True

    @property
    def used_bytes(self) -> int:
        return self.total_bytes - self.free_bytes

    @property
    def free_percent(self) -> float:
        return _pct(self.free_bytes, self.total_bytes)

    @property
    def used_percent(self) -> float:
        return _pct(self.used_bytes, self.total_bytes)

    def snapshot(self, at: datetime) -> Snapshot:
        """
        Freeze this reading into a Snapshot (raises ValueError on invalid bytes)
        """
        return Snapshot(timestamp=at, free_bytes=self.free_bytes, total_bytes=self.total_bytes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "mount_point": self.mount_point,
            "total_bytes": self.total_bytes,
            "free_bytes": self.free_bytes,
            "is_removable": self.is_removable,
            "is_internal": self.is_internal,
        }


def volume_sort_key(volume: VolumeInfo) -> tuple[int, int, str]:
    """
    Root first, then internal volumes, then external; by name within a group
    """
    return (
        0 if volume.mount_point == "/" else 1,
        0 if volume.is_internal else 1,
        volume.name,
    )


# -----------------------------
# Derived values
# -----------------------------
@dataclass(frozen=True)
class Trend:
    """
    Rate of change of free space over the selected window
    - bytes_per_day: positive means free space is shrinking
    - period_hours: span between oldest and newest point used
    - data_points: number of snapshots used
    - days_until_full: set only when bytes_per_day > 0
    """

    bytes_per_day: float
    period_hours: float
    data_points: int
    days_until_full: int | None = None

    @property
    def direction(self) -> TrendDirection:
        if self.bytes_per_day > STABLE_BYTES_PER_DAY:
            return TrendDirection.FILLING
        if self.bytes_per_day < -STABLE_BYTES_PER_DAY:
            return TrendDirection.FREEING
        return TrendDirection.STABLE

    @property
    def outlook(self) -> ForecastOutlook:
        days = self.days_until_full
        if days is None:
            return ForecastOutlook.NONE
        if days < 7:
            return ForecastOutlook.IMMINENT
        if days < 14:
            return ForecastOutlook.SOON
        if days < 30:
            return ForecastOutlook.WATCH
        return ForecastOutlook.NONE

    def to_dict(self) -> dict[str, Any]:
        return {
            "bytes_per_day": self.bytes_per_day,
            "period_hours": self.period_hours,
            "data_points": self.data_points,
            "days_until_full": self.days_until_full,
            "direction": self.direction.value,
            "outlook": self.outlook.value,
        }


@dataclass(frozen=True)
class ForecastPoint:
    date: datetime
    projected_free_bytes: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "projected_free_bytes": self.projected_free_bytes,
        }


# -----------------------------
# Report envelope
# -----------------------------
@dataclass(frozen=True)
class VolumeReport:
    """
    Everything a presentation layer needs for one volume
    """

    volume: VolumeInfo
    status: VolumeStatus
    trend: Trend | None
    forecast: list[ForecastPoint]

    def to_dict(self) -> dict[str, Any]:
        return {
            "volume": self.volume.to_dict(),
            "status": self.status.value,
            "free_percent": round(self.volume.free_percent, 2),
            # None == insufficient data
            "trend": self.trend.to_dict() if self.trend is not None else None,
            "forecast": [point.to_dict() for point in self.forecast],
        }


@dataclass(frozen=True)
class MonitorReport:
    """
    Top-level report
    """

    generated_at: datetime
    volumes: list[VolumeReport]
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "generated_at": self.generated_at.isoformat(),
            "volumes": [report.to_dict() for report in self.volumes],
            "meta": {
                "schema_version": SCHEMA_VERSION,
                "version": self.version,
            },
        }


def report_to_json(report: MonitorReport) -> str:
    """
    Serialize a MonitorReport

    Rules:
    - sort_keys=True ensures stable key order
    - separators remove whitespace to avoid formatting drift
    - volume order is preserved (already sorted by volume_sort_key)
    """
    return json.dumps(
        report.to_dict(),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
