"""History aggregation behind the dashboard's trend chart."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from moodlog.data_pipeline.questionnaire import emotion_label
from moodlog.engine.affect_dynamics import mean
from moodlog.engine.dates import shift_date, today_in_timezone
from moodlog.models.entry import DailyEntry

RANGES: dict[str, int] = {
    "1w": 7,
    "1m": 30,
    "3m": 90,
    "6m": 180,
    "1y": 365,
}
DEFAULT_RANGE = "1w"

# Up to this many days each point is a day ("MM-DD"); beyond it, a month
DAILY_LABEL_MAX_DAYS = 90
RECENT_COUNT = 5


def range_days(range_key: str) -> int:
    """Raises KeyError for unknown range keys."""
    return RANGES[range_key]


def date_range(days: int, today: Optional[str] = None) -> tuple[str, str]:
    """Inclusive ``(start, end)`` window of ``days`` days ending today."""
    end = today or today_in_timezone()
    return shift_date(end, -(days - 1)), end


def filter_by_range(entries: Sequence[DailyEntry], start: str, end: str) -> list[DailyEntry]:
    return sorted((e for e in entries if start <= e.date <= end), key=lambda e: e.date)


def build_chart_series(entries: Sequence[DailyEntry], days: int) -> list[dict[str, Any]]:
    daily = days <= DAILY_LABEL_MAX_DAYS
    return [
        {
            "date": e.date[5:] if daily else e.date[:7],
            "fullDate": e.date,
            "valence": e.valence,
            "arousal": e.arousal,
            "emotion": emotion_label(e.valence, e.arousal),
        }
        for e in sorted(entries, key=lambda e: e.date)
    ]


def recent_entries(entries: Sequence[DailyEntry], count: int = RECENT_COUNT) -> list[DailyEntry]:
    """Newest first."""
    return sorted(entries, key=lambda e: e.date, reverse=True)[:count]


def summarize(entries: Sequence[DailyEntry]) -> dict[str, Any]:
    return {
        "count": len(entries),
        "valence_mean": round(mean([e.valence for e in entries]), 4),
        "arousal_mean": round(mean([e.arousal for e in entries]), 4),
    }


def build_trends(
    entries: Sequence[DailyEntry],
    range_key: str = DEFAULT_RANGE,
    today: Optional[str] = None,
) -> dict[str, Any]:
    """Everything the dashboard needs for one range selection."""
    days = range_days(range_key)
    start, end = date_range(days, today)
    in_range = filter_by_range(entries, start, end)

    return {
        "range": range_key,
        "start_date": start,
        "end_date": end,
        "show_dots": days <= DAILY_LABEL_MAX_DAYS,
        "series": build_chart_series(in_range, days),
        "summary": summarize(in_range),
        "recent": [
            {**e.to_dict(), "emotion": emotion_label(e.valence, e.arousal)}
            for e in recent_entries(in_range)
        ],
    }
