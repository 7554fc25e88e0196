"""
disktrend.engine
AUTHOR: carter-vin

Trend engine: one History per volume, keyed by mount point

Ownership:
- single writer (Sampler via record) / many readers (status, trend, forecast)
- a lock serializes writes and read copies; History objects never escape
- no timer state: an external driver decides when to sample
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Iterable, Iterator

from disktrend.config import MonitorConfig
from disktrend.history import History
from disktrend.model import (
    ForecastPoint,
    MonitorReport,
    Snapshot,
    Trend,
    VolumeInfo,
    VolumeReport,
    VolumeStatus,
    volume_sort_key,
)
from disktrend.trend import classify_status, compute_trend, iter_forecast


class TrendEngine:
    def __init__(self, config: MonitorConfig | None = None) -> None:
        self.config = config or MonitorConfig()
        self.config.validate()

        self._lock = threading.Lock()
        self._histories: dict[str, History] = {}
        self._volumes: dict[str, VolumeInfo] = {}

    # -----------------------------
    # WRITE SIDE
    # -----------------------------
    def record(self, volume: VolumeInfo, at: datetime) -> bool:
        """
        Store a reading for `volume` taken at `at`

        Returns False if the snapshot is not newer than the latest stored one
        (history untouched). Raises ValueError on invalid byte counts.
        """
        snapshot = volume.snapshot(at)

        with self._lock:
            history = self._histories.get(volume.mount_point)
            if history is None:
                history = History(
                    volume.mount_point,
                    max_age=self.config.retention,
                    max_samples=self.config.max_samples,
                )
                self._histories[volume.mount_point] = history

            accepted = history.append(snapshot)
            if accepted:
                self._volumes[volume.mount_point] = volume
            return accepted

    def forget(self, mount_point: str) -> None:
        """
        Drop a volume and its history (e.g. unmounted)
        """
        with self._lock:
            self._histories.pop(mount_point, None)
            self._volumes.pop(mount_point, None)

    def retain(self, mount_points: Iterable[str]) -> list[str]:
        """
        Forget every known volume not in `mount_points`; returns the dropped ones
        """
        keep = set(mount_points)
        with self._lock:
            dropped = sorted(m for m in self._histories if m not in keep)
            for mount_point in dropped:
                self._histories.pop(mount_point, None)
                self._volumes.pop(mount_point, None)
        return dropped

    # -----------------------------
    # READ SIDE
    # -----------------------------
    def _window_hours(self, window_hours: float | None) -> float:
        return window_hours if window_hours is not None else self.config.window_hours

    def _points(self, mount_point: str, hours: float) -> tuple[Snapshot, ...]:
        # caller holds the lock; the window always ends at the latest snapshot
        history = self._histories.get(mount_point)
        return history.window(hours) if history is not None else ()

    def volumes(self) -> list[VolumeInfo]:
        """
        Latest info for every known volume, root first
        """
        with self._lock:
            volumes = list(self._volumes.values())
        return sorted(volumes, key=volume_sort_key)

    def primary_volume(self) -> VolumeInfo | None:
        with self._lock:
            return self._volumes.get("/")

    def snapshots(self, mount_point: str) -> tuple[Snapshot, ...]:
        with self._lock:
            history = self._histories.get(mount_point)
            return history.recent() if history is not None else ()

    def status(self, mount_point: str) -> VolumeStatus | None:
        """
        Classification of the latest snapshot; None for an unknown volume
        """
        with self._lock:
            history = self._histories.get(mount_point)
            latest = history.latest() if history is not None else None
        if latest is None:
            return None
        return classify_status(latest.free_percent, self.config.thresholds)

    def trend(self, mount_point: str, window_hours: float | None = None) -> Trend | None:
        """
        Trend over the last `window_hours` (config default); None == insufficient data
        """
        hours = self._window_hours(window_hours)
        with self._lock:
            points = self._points(mount_point, hours)
        return compute_trend(points)

    def forecast(self, mount_point: str, window_hours: float | None = None) -> Iterator[ForecastPoint]:
        """
        Fresh lazy forecast from the current trend; empty when undefined
        """
        hours = self._window_hours(window_hours)
        with self._lock:
            points = self._points(mount_point, hours)
        return self._forecast_from(points, compute_trend(points))

    @staticmethod
    def _forecast_from(points: tuple[Snapshot, ...], trend: Trend | None) -> Iterator[ForecastPoint]:
        if trend is None or not points:
            return iter(())
        return iter_forecast(points[-1], trend.bytes_per_day)

    def report(self, generated_at: datetime, *, version: str, window_hours: float | None = None) -> MonitorReport:
        """
        Report for every volume, read under a single lock acquisition
        """
        hours = self._window_hours(window_hours)
        with self._lock:
            readings = [(volume, self._points(volume.mount_point, hours)) for volume in self._volumes.values()]

        reports: list[VolumeReport] = []
        for volume, points in sorted(readings, key=lambda item: volume_sort_key(item[0])):
            if not points:
                continue
            trend = compute_trend(points)
            reports.append(
                VolumeReport(
                    volume=volume,
                    status=classify_status(points[-1].free_percent, self.config.thresholds),
                    trend=trend,
                    forecast=list(self._forecast_from(points, trend)),
                )
            )
        return MonitorReport(generated_at=generated_at, volumes=reports, version=version)
