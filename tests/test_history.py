"""
Contract tests for the bounded snapshot history
"""

from datetime import datetime, timedelta, timezone

import pytest

from disktrend.errors import OutOfOrderSample
from disktrend.history import History
from disktrend.model import Snapshot

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
TOTAL = 500 * 10**9


def _snap(minutes: float, free: int = 100 * 10**9) -> Snapshot:
    return Snapshot(timestamp=T0 + timedelta(minutes=minutes), free_bytes=free, total_bytes=TOTAL)


def test_recent_preserves_append_order() -> None:
    """
    Strictly increasing appends come back oldest first
    """
    history = History("/")
    snaps = [_snap(i, free=100 * 10**9 - i) for i in range(10)]
    for snap in snaps:
        assert history.append(snap) is True

    assert history.recent() == tuple(snaps)
    assert history.latest() == snaps[-1]


def test_empty_history_has_no_latest() -> None:
    history = History("/")
    assert history.latest() is None
    assert history.recent() == ()
    assert history.window(24) == ()


def test_count_bound_evicts_oldest() -> None:
    """
    Size never exceeds max_samples; the oldest entries go first
    """
    history = History("/", max_samples=3)
    snaps = [_snap(i) for i in range(5)]
    for snap in snaps:
        history.append(snap)
        assert len(history) <= 3

    assert history.recent() == tuple(snaps[2:])


def test_age_bound_is_relative_to_newest() -> None:
    """
    Entries older than max_age before the newest snapshot are evicted
    """
    history = History("/", max_age=timedelta(hours=1))
    history.append(_snap(0))
    history.append(_snap(30))
    history.append(_snap(61))

    assert [s.timestamp for s in history.recent()] == [
        T0 + timedelta(minutes=30),
        T0 + timedelta(minutes=61),
    ]


@pytest.mark.parametrize("minutes", [5, 3])
def test_out_of_order_append_is_a_noop(minutes: int) -> None:
    """
    Equal or earlier timestamps are rejected without touching the buffer
    """
    history = History("/")
    history.append(_snap(1))
    history.append(_snap(5))
    before = history.recent()

    assert history.append(_snap(minutes, free=1)) is False
    assert history.append(_snap(minutes, free=1)) is False
    assert history.recent() == before


def test_strict_append_raises_out_of_order() -> None:
    history = History("/data")
    history.append(_snap(5))

    with pytest.raises(OutOfOrderSample, match="/data"):
        history.append(_snap(4), strict=True)

    assert len(history) == 1


def test_window_selects_trailing_hours() -> None:
    history = History("/")
    for minutes in (0, 60, 120, 180):
        history.append(_snap(minutes))

    window = history.window(1)
    assert [s.timestamp for s in window] == [T0 + timedelta(minutes=120), T0 + timedelta(minutes=180)]


def test_invalid_bounds_rejected() -> None:
    with pytest.raises(ValueError):
        History("/", max_samples=0)
    with pytest.raises(ValueError):
        History("/", max_age=timedelta(0))
