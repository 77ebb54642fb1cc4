"""Activity pattern extraction from free-form daily tags.

Each entry's tag list carries the activity answers of the questionnaire.
Signals are inferred by matching tags against the questionnaire
vocabulary; sleep quality is any numeric tag in [1, 5], whichever
question produced it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Sequence

from moodlog.data_pipeline.questionnaire import (
    EXERCISE_TAG,
    MAIN_ACTIVITY_TAGS,
    NOVELTY_TAGS,
    SOCIAL_CONTACT_TAGS,
    SLEEP_RATING_MAX,
    SLEEP_RATING_MIN,
    parse_sleep_rating,
)
from moodlog.models.entry import DailyEntry

# No behavioural evidence: every ratio sits at the midpoint
NEUTRAL_RATIO: float = 0.5

MAIN_ACTIVITY_COUNT: int = len(MAIN_ACTIVITY_TAGS)


@dataclass(frozen=True)
class ActivityPatterns:
    social_frequency: float      # share of days with social contact
    novelty_rate: float          # share of days trying something new
    sleep_quality: float         # mean 1-5 rating mapped to 0-1
    exercise_frequency: float    # share of days with exercise
    activity_diversity: float    # distinct main activities / 6

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


NEUTRAL_PATTERNS = ActivityPatterns(
    social_frequency=NEUTRAL_RATIO,
    novelty_rate=NEUTRAL_RATIO,
    sleep_quality=NEUTRAL_RATIO,
    exercise_frequency=NEUTRAL_RATIO,
    activity_diversity=NEUTRAL_RATIO,
)


def extract_activity_patterns(entries: Sequence[DailyEntry]) -> ActivityPatterns:
    if not entries:
        return NEUTRAL_PATTERNS

    social_count = 0
    novelty_count = 0
    sleep_sum = 0.0
    sleep_samples = 0
    exercise_count = 0
    seen_activities: set[str] = set()

    for entry in entries:
        tags = set(entry.activities)

        if tags & SOCIAL_CONTACT_TAGS:
            social_count += 1
        if tags & NOVELTY_TAGS:
            novelty_count += 1
        if EXERCISE_TAG in tags:
            exercise_count += 1

        # every occurrence counts, not just distinct values
        for tag in entry.activities:
            rating = parse_sleep_rating(tag)
            if rating is not None:
                sleep_sum += rating
                sleep_samples += 1

        seen_activities |= tags & MAIN_ACTIVITY_TAGS

    n = len(entries)
    if sleep_samples:
        rating_span = SLEEP_RATING_MAX - SLEEP_RATING_MIN
        sleep_quality = (sleep_sum / sleep_samples - SLEEP_RATING_MIN) / rating_span
    else:
        sleep_quality = NEUTRAL_RATIO

    return ActivityPatterns(
        social_frequency=social_count / n,
        novelty_rate=novelty_count / n,
        sleep_quality=sleep_quality,
        exercise_frequency=exercise_count / n,
        activity_diversity=len(seen_activities) / MAIN_ACTIVITY_COUNT,
    )
