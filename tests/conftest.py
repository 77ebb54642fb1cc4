"""Shared test fixtures for the MoodLog test suite."""

import pytest
import fakeredis
from datetime import date, datetime, timedelta, timezone

from moodlog.models.entry import DailyEntry


# ── Redis ────────────────────────────────────────────────────────────────

@pytest.fixture
def r():
    """Fresh fakeredis instance per test (decode_responses=True like production)."""
    return fakeredis.FakeRedis(decode_responses=True)


# ── Time Freezing ───────────────────────────────────────────────────────

@pytest.fixture
def reminder_now():
    """22:00 in Tokyo on 2026-02-15 (13:00 UTC)."""
    return datetime(2026, 2, 15, 13, 0, 0, tzinfo=timezone.utc)


# ── Entry Factories ─────────────────────────────────────────────────────

@pytest.fixture
def make_entries():
    """Factory fixture building consecutive daily entries.

    Usage:
        entries = make_entries([0.1, 0.2, 0.3], arousals=0.0, activities=["運動"])

    ``valences`` / ``arousals`` may be a list or a scalar (repeated ``count``
    times). Dates start at ``start`` and advance ``step`` days per entry.
    """
    def _factory(
        valences=0.0,
        arousals=0.0,
        activities=None,
        count=None,
        start="2026-01-01",
        step=1,
    ):
        if isinstance(valences, (list, tuple)):
            count = len(valences)
        elif isinstance(arousals, (list, tuple)):
            count = len(arousals)
        count = count or 7
        vs = list(valences) if isinstance(valences, (list, tuple)) else [valences] * count
        ars = list(arousals) if isinstance(arousals, (list, tuple)) else [arousals] * count

        first = date.fromisoformat(start)
        entries = []
        for i in range(count):
            if activities is None:
                acts = []
            elif activities and isinstance(activities[0], (list, tuple)):
                acts = list(activities[i])
            else:
                acts = list(activities)
            entries.append(DailyEntry(
                date=(first + timedelta(days=i * step)).isoformat(),
                valence=vs[i],
                arousal=ars[i],
                activities=acts,
                entry_id=f"entry-{i}",
            ))
        return entries

    return _factory
