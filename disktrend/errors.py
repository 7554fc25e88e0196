"""
disktrend.errors
AUTHOR: carter-vin

Error taxonomy

- SourceUnavailable: volume-info source failed for a cycle (skipped, not fatal)
- OutOfOrderSample: snapshot older than the latest stored one
- ConfigError: unreadable or inconsistent configuration

Insufficient data and flat/growing trends are NOT errors; they surface as None
or empty results.
"""

from __future__ import annotations


class DiskTrendError(Exception):
    """Base for all disktrend errors"""


class SourceUnavailable(DiskTrendError):
    pass


class OutOfOrderSample(DiskTrendError):
    def __init__(self, mount_point: str, latest: str, rejected: str) -> None:
        super().__init__(f"{mount_point}: sample at {rejected} is not after latest {latest}")
        self.mount_point = mount_point
        self.latest = latest
        self.rejected = rejected


class ConfigError(DiskTrendError, ValueError):
    pass
