"""disktrend.collectors package exports."""

from disktrend.collectors.base import CollectorOutcome, run_collector
from disktrend.collectors.volumes import VolumeSource, collect_volumes

__all__ = [
    "CollectorOutcome",
    "VolumeSource",
    "collect_volumes",
    "run_collector",
]
