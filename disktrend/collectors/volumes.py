"""
disktrend.collectors.volumes
AUTHOR: carter-vin

Volume-info source
- Enumerates mounted volumes via psutil (cross-platform)
- Per-volume read failures skip that volume only
- A failed enumeration raises SourceUnavailable (caller skips the cycle)
"""

from __future__ import annotations

import os
from pathlib import PurePath
from typing import Callable

import psutil

from disktrend.errors import SourceUnavailable
from disktrend.model import VolumeInfo, volume_sort_key

# Any zero-arg callable returning volumes can stand in (tests, other platforms)
VolumeSource = Callable[[], list[VolumeInfo]]

REMOVABLE_PREFIXES = ("/media/", "/run/media/", "/mnt/", "/Volumes/")


def _is_removable(mountpoint: str, opts: str) -> bool:
    if "removable" in opts.split(","):
        return True
    return mountpoint.startswith(REMOVABLE_PREFIXES)


def _volume_name(mountpoint: str, device: str) -> str:
    name = PurePath(mountpoint).name
    if name:
        return name
    return PurePath(device).name or mountpoint


def collect_volumes() -> list[VolumeInfo]:
    """
    Collect capacity for every mounted physical volume, root first
    """
    # added test: simulate a source failure (validation)
    if os.environ.get("DISKTREND_FAIL_SOURCE") == "1":
        raise SourceUnavailable("Simulated volume source failure")

    try:
        partitions = psutil.disk_partitions(all=False)
    except OSError as e:
        raise SourceUnavailable(f"volume enumeration failed: {e}") from e

    seen: set[str] = set()
    result: list[VolumeInfo] = []

    for part in partitions:
        if part.mountpoint in seen:
            continue
        seen.add(part.mountpoint)

        try:
            usage = psutil.disk_usage(part.mountpoint)
        except OSError:
            # unreadable mount (permissions, stale network share)
            continue

        if usage.total <= 0:
            continue

        removable = _is_removable(part.mountpoint, part.opts)
        result.append(
            VolumeInfo(
                name=_volume_name(part.mountpoint, part.device),
                mount_point=part.mountpoint,
                total_bytes=usage.total,
                free_bytes=min(usage.free, usage.total),
                is_removable=removable,
                is_internal=not removable,
            )
        )

    return sorted(result, key=volume_sort_key)
