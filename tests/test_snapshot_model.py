"""
Contract tests for measurement invariants and report schema stability
"""

from datetime import datetime, timezone

import json
import pytest

from disktrend.model import (
    SCHEMA_VERSION,
    ForecastOutlook,
    MonitorReport,
    Snapshot,
    Trend,
    TrendDirection,
    VolumeInfo,
    VolumeReport,
    VolumeStatus,
    report_to_json,
    volume_sort_key,
)

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "free, total",
    [(-1, 100), (101, 100), (0, 0)],
)
def test_snapshot_rejects_invalid_bytes(free: int, total: int) -> None:
    with pytest.raises(ValueError):
        Snapshot(timestamp=T0, free_bytes=free, total_bytes=total)


def test_snapshot_derived_percentages() -> None:
    snap = Snapshot(timestamp=T0, free_bytes=25, total_bytes=100)
    assert snap.used_bytes == 75
    assert snap.free_percent == pytest.approx(25.0)
    assert snap.used_percent == pytest.approx(75.0)


def test_volume_ordering_root_then_internal_then_external() -> None:
    volumes = [
        VolumeInfo("Backup", "/Volumes/Backup", 100, 50, is_removable=True, is_internal=False),
        VolumeInfo("data", "/data", 100, 50),
        VolumeInfo("Archive", "/Volumes/Archive", 100, 50, is_removable=True, is_internal=False),
        VolumeInfo("Macintosh HD", "/", 100, 50),
    ]

    ordered = [v.mount_point for v in sorted(volumes, key=volume_sort_key)]
    assert ordered == ["/", "/data", "/Volumes/Archive", "/Volumes/Backup"]


def test_trend_direction_and_outlook() -> None:
    assert Trend(5_000_000, 24, 2, 3).direction is TrendDirection.FILLING
    assert Trend(-5_000_000, 24, 2).direction is TrendDirection.FREEING
    assert Trend(500_000, 24, 2, 10_000).direction is TrendDirection.STABLE

    assert Trend(1e9, 24, 2, 6).outlook is ForecastOutlook.IMMINENT
    assert Trend(1e9, 24, 2, 13).outlook is ForecastOutlook.SOON
    assert Trend(1e9, 24, 2, 29).outlook is ForecastOutlook.WATCH
    assert Trend(1e9, 24, 2, 30).outlook is ForecastOutlook.NONE
    assert Trend(-1e9, 24, 2).outlook is ForecastOutlook.NONE


def test_report_schema_keys_exist() -> None:
    """
    Envelope and nested keys are stable for downstream parsers
    """
    volume = VolumeInfo("root", "/", 100, 15)
    report = MonitorReport(
        generated_at=T0,
        volumes=[VolumeReport(volume=volume, status=VolumeStatus.CAUTION, trend=None, forecast=[])],
        version="0.1.0",
    )

    payload = json.loads(report_to_json(report))

    assert set(payload.keys()) == {"generated_at", "volumes", "meta"}
    assert payload["meta"]["schema_version"] == SCHEMA_VERSION

    item = payload["volumes"][0]
    assert set(item.keys()) == {"volume", "status", "free_percent", "trend", "forecast"}
    assert item["status"] == "caution"
    assert item["trend"] is None
    assert item["forecast"] == []


def test_snapshot_rejects_naive_timestamp() -> None:
    with pytest.raises(ValueError, match="timezone-aware"):
        Snapshot(timestamp=datetime(2026, 1, 1), free_bytes=1, total_bytes=2)
