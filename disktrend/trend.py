"""
disktrend.trend
AUTHOR: carter-vin

Trend, forecast and status computation over snapshot sequences

- compute_trend: least-squares slope of free bytes vs elapsed days
- iter_forecast: lazy daily projection, capped at FORECAST_MAX_DAYS
- classify_status: current free percent against thresholds
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterator, Sequence

from disktrend.model import ForecastPoint, Snapshot, Trend, VolumeStatus

SECONDS_PER_DAY = 86_400.0
FORECAST_MAX_DAYS = 30

CAUTION_PCT = 20.0
WARNING_PCT = 10.0
CRITICAL_PCT = 5.0


@dataclass(frozen=True)
class StatusThresholds:
    """
    Percent-free boundaries; a volume is in the first band it falls below
    """

    caution_pct: float = CAUTION_PCT
    warning_pct: float = WARNING_PCT
    critical_pct: float = CRITICAL_PCT

    def validate(self) -> None:
        if not 0.0 <= self.critical_pct < self.warning_pct < self.caution_pct <= 100.0:
            raise ValueError(
                "thresholds must satisfy 0 <= critical < warning < caution <= 100 "
                f"(got critical={self.critical_pct}, warning={self.warning_pct}, caution={self.caution_pct})"
            )


DEFAULT_THRESHOLDS = StatusThresholds()


def classify_status(free_percent: float, thresholds: StatusThresholds = DEFAULT_THRESHOLDS) -> VolumeStatus:
    if free_percent < thresholds.critical_pct:
        return VolumeStatus.CRITICAL
    if free_percent < thresholds.warning_pct:
        return VolumeStatus.WARNING
    if free_percent < thresholds.caution_pct:
        return VolumeStatus.CAUTION
    return VolumeStatus.HEALTHY


def _elapsed_days(snapshots: Sequence[Snapshot]) -> list[float]:
    origin = snapshots[0].timestamp
    return [(s.timestamp - origin).total_seconds() / SECONDS_PER_DAY for s in snapshots]


def _shrink_rate(snapshots: Sequence[Snapshot]) -> float | None:
    """
    Bytes/day of free-space decrease (positive == shrinking)

    Two points use the secant; more use ordinary least squares.
    None when the time span is zero.
    """
    days = _elapsed_days(snapshots)
    free = [float(s.free_bytes) for s in snapshots]

    if len(snapshots) == 2:
        span = days[1] - days[0]
        if span <= 0:
            return None
        return (free[0] - free[1]) / span

    n = len(days)
    mean_x = sum(days) / n
    mean_y = sum(free) / n
    sxx = sum((x - mean_x) ** 2 for x in days)
    if sxx == 0:
        return None
    sxy = sum((x - mean_x) * (y - mean_y) for x, y in zip(days, free))
    return -(sxy / sxx)


def days_until_full(free_bytes: int, bytes_per_day: float) -> int | None:
    if bytes_per_day <= 0:
        return None
    return math.floor(free_bytes / bytes_per_day)


def compute_trend(snapshots: Sequence[Snapshot]) -> Trend | None:
    """
    Trend over the given snapshots (oldest first)

    Returns None (insufficient data) for fewer than 2 points.
    """
    if len(snapshots) < 2:
        return None

    rate = _shrink_rate(snapshots)
    if rate is None:
        return None

    first, last = snapshots[0], snapshots[-1]
    period_hours = (last.timestamp - first.timestamp).total_seconds() / 3600.0

    return Trend(
        bytes_per_day=rate,
        period_hours=period_hours,
        data_points=len(snapshots),
        days_until_full=days_until_full(last.free_bytes, rate),
    )


def iter_forecast(
    last: Snapshot,
    bytes_per_day: float,
    *,
    max_days: int = FORECAST_MAX_DAYS,
) -> Iterator[ForecastPoint]:
    """
    Project free space one day at a time from the last snapshot

    - yields the last snapshot itself first, then one point per day
    - stops after the first zero projection or max_days, whichever is first
    - yields nothing when free space is flat or growing
    - projections are clamped at zero
    """
    if bytes_per_day <= 0:
        return

    yield ForecastPoint(date=last.timestamp, projected_free_bytes=last.free_bytes)

    for day in range(1, max_days + 1):
        projected = max(0, round(last.free_bytes - bytes_per_day * day))
        yield ForecastPoint(
            date=last.timestamp + timedelta(days=day),
            projected_free_bytes=projected,
        )
        if projected == 0:
            break
