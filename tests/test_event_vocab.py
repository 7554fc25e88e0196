"""
Contract test for event vocabulary enforcement.

The logging surface must reject unknown event types to keep aggregation stable.
"""

import json

import pytest

from disktrend.logging import emit_event


def test_emit_event_rejects_invalid_event_type() -> None:
    """
    Unknown event types must raise ValueError.
    """
    with pytest.raises(ValueError, match="invalid event_type"):
        emit_event("not_a_real_event", version="0.1.0")


def test_monitor_tick_contract_fields(capsys) -> None:
    """
    monitor_tick carries stable fields with expected types
    """
    emit_event(
        "monitor_tick",
        version="0.1.0",
        mode="run",
        tick=3,
        source_ok=True,
        volumes_recorded=2,
        tick_elapsed_ms=12,
        sleep_ms=29988,
        overrun=False,
    )

    payload = json.loads(capsys.readouterr().out.strip())

    assert payload["event_type"] == "monitor_tick"
    assert "utc_now" in payload
    assert payload["version"] == "0.1.0"
    assert isinstance(payload["tick"], int)
    assert isinstance(payload["source_ok"], bool)
    assert isinstance(payload["overrun"], bool)


def test_long_messages_are_truncated(capsys) -> None:
    emit_event("source_unavailable", version="0.1.0", message="x" * 500)

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["message"].startswith("x" * 200)
    assert payload["message"].endswith("...[truncated 300 chars]")


def test_reserved_fields_cannot_be_overridden(capsys) -> None:
    emit_event("volume_dropped", version="0.1.0", mount_point="/Volumes/USB", event_type="bogus")

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["event_type"] == "volume_dropped"
    assert payload["mount_point"] == "/Volumes/USB"
