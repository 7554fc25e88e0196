"""
disktrend.logging
AUTHOR: carter-vin

Monitor lifecycle + sampling events as JSON lines on stdout

Every line carries event_type, utc_now and version. Sampling events describe
what happened to the volume histories in one cycle:
- sample_recorded: per-cycle counts (recorded / rejected / dropped)
- sample_rejected: one volume reading refused (invalid bytes, out of order)
- source_unavailable: the whole poll failed; histories untouched
- volume_dropped: a volume vanished from the source; its history is gone
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

VALID_EVENT_TYPES = {
    # lifecycle
    "monitor_start",
    "monitor_tick",
    "monitor_shutdown",
    # sampling
    "sample_recorded",
    "sample_rejected",
    "source_unavailable",
    "volume_dropped",
}

MESSAGE_LIMIT = 200


def _clip(value: str, *, limit: int = MESSAGE_LIMIT) -> str:
    # source errors can embed whole mount tables
    if len(value) <= limit:
        return value
    return value[:limit] + f"...[truncated {len(value) - limit} chars]"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def emit_event(event_type: str, *, version: str, **fields: Any) -> None:
    """
    Print one event line

    Raises ValueError for an event_type outside VALID_EVENT_TYPES, so a typo
    never produces an event the run loop's consumers cannot match.
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"invalid event_type: {event_type}")

    message = fields.get("message")
    if isinstance(message, str):
        fields["message"] = _clip(message)

    payload: dict[str, Any] = {
        **fields,
        "event_type": event_type,
        "utc_now": utc_now_iso(),
        "version": version,
    }

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
