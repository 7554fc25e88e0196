"""
disktrend.sampler
AUTHOR: carter-vin

One poll cycle: volume source -> snapshots -> engine

Failure semantics:
- source failure -> source_unavailable event, engine untouched, no raise
- invalid or out-of-order reading -> sample_rejected event, other volumes still recorded
- volume missing from a successful poll -> volume_dropped event, history forgotten
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from disktrend.collectors.base import run_collector
from disktrend.collectors.volumes import VolumeSource
from disktrend.engine import TrendEngine
from disktrend.logging import emit_event
from disktrend.model import utc_now


@dataclass(frozen=True)
class SampleResult:
    """
    Outcome of one cycle
    - ok: false when the source itself failed
    - recorded / rejected / dropped: mount points
    """

    ok: bool
    recorded: list[str] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)


class Sampler:
    def __init__(
        self,
        engine: TrendEngine,
        source: VolumeSource,
        *,
        version: str,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.engine = engine
        self.source = source
        self.version = version
        self.clock = clock

    def sample(self) -> SampleResult:
        outcome = run_collector("volumes", self.source)
        if not outcome.ok:
            emit_event(
                "source_unavailable",
                version=self.version,
                error_type=outcome.error_type,
                message=outcome.error_message,
            )
            return SampleResult(ok=False)

        volumes = outcome.value or []
        at = self.clock()
        recorded: list[str] = []
        rejected: list[str] = []

        for volume in volumes:
            try:
                accepted = self.engine.record(volume, at)
            except ValueError as e:
                rejected.append(volume.mount_point)
                emit_event(
                    "sample_rejected",
                    version=self.version,
                    mount_point=volume.mount_point,
                    reason="invalid",
                    message=str(e),
                )
                continue

            if accepted:
                recorded.append(volume.mount_point)
            else:
                # clock went backwards or the source repeated a timestamp
                rejected.append(volume.mount_point)
                emit_event(
                    "sample_rejected",
                    version=self.version,
                    mount_point=volume.mount_point,
                    reason="out_of_order",
                    timestamp=at.isoformat(),
                )

        # unmounted since the last poll; invalid readings still count as mounted
        dropped = self.engine.retain(volume.mount_point for volume in volumes)
        for mount_point in dropped:
            emit_event("volume_dropped", version=self.version, mount_point=mount_point)

        emit_event(
            "sample_recorded",
            version=self.version,
            volumes_recorded=len(recorded),
            volumes_rejected=len(rejected),
            volumes_dropped=len(dropped),
        )
        return SampleResult(ok=True, recorded=recorded, rejected=rejected, dropped=dropped)
