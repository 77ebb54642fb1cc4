"""Tests for moodlog.engine.activity_patterns."""

import pytest

from moodlog.engine.activity_patterns import (
    NEUTRAL_PATTERNS,
    NEUTRAL_RATIO,
    ActivityPatterns,
    extract_activity_patterns,
)
from moodlog.models.entry import DailyEntry


def _entries(*tag_lists):
    return [
        DailyEntry(date=f"2026-03-{i + 1:02d}", activities=list(tags))
        for i, tags in enumerate(tag_lists)
    ]


class TestEmptyInput:
    def test_all_ratios_neutral(self):
        patterns = extract_activity_patterns([])
        assert patterns == NEUTRAL_PATTERNS
        assert all(v == 0.5 for v in patterns.to_dict().values())

    def test_neutral_ratio_constant(self):
        assert NEUTRAL_RATIO == 0.5


class TestRatios:
    def test_social_frequency(self):
        patterns = extract_activity_patterns(_entries(
            ["たくさん"], ["少し"], ["ほとんどなし"], ["まったくなし"],
        ))
        assert patterns.social_frequency == pytest.approx(0.5)

    def test_social_counted_once_per_day(self):
        patterns = extract_activity_patterns(_entries(["たくさん", "少し"], []))
        assert patterns.social_frequency == pytest.approx(0.5)

    def test_novelty_rate(self):
        patterns = extract_activity_patterns(_entries(["はい"], ["いいえ"], ["はい"], []))
        assert patterns.novelty_rate == pytest.approx(0.5)

    def test_exercise_frequency(self):
        patterns = extract_activity_patterns(_entries(["運動"], ["運動", "仕事"], ["仕事"]))
        assert patterns.exercise_frequency == pytest.approx(2 / 3)

    def test_activity_diversity_counts_distinct_main_activities(self):
        patterns = extract_activity_patterns(_entries(
            ["仕事", "学習"], ["仕事", "運動"], ["買い物", "しっかり食べた"],
        ))
        assert patterns.activity_diversity == pytest.approx(4 / 6)

    def test_full_diversity(self):
        patterns = extract_activity_patterns(_entries(
            ["仕事", "学習", "運動"], ["家事", "買い物", "睡眠"],
        ))
        assert patterns.activity_diversity == 1.0

    def test_ratios_stay_in_unit_interval(self):
        patterns = extract_activity_patterns(_entries(
            ["たくさん", "はい", "運動", "5", "仕事"],
            ["少し", "はい", "運動", "5", "学習"],
        ))
        for value in patterns.to_dict().values():
            assert 0.0 <= value <= 1.0


class TestSleepQuality:
    def test_no_samples_is_neutral(self):
        patterns = extract_activity_patterns(_entries(["仕事"], ["普通"]))
        assert patterns.sleep_quality == 0.5

    @pytest.mark.parametrize("rating,expected", [
        ("1", 0.0),
        ("2", 0.25),
        ("3", 0.5),
        ("4", 0.75),
        ("5", 1.0),
    ])
    def test_rating_maps_linearly(self, rating, expected):
        patterns = extract_activity_patterns(_entries([rating]))
        assert patterns.sleep_quality == pytest.approx(expected)

    def test_averages_across_entries(self):
        patterns = extract_activity_patterns(_entries(["4"], ["2"], ["仕事"]))
        assert patterns.sleep_quality == pytest.approx(0.5)

    def test_every_numeric_tag_is_a_sample(self):
        # (5 + 5 + 1) / 3 samples
        patterns = extract_activity_patterns(_entries(["5", "5"], ["1"]))
        assert patterns.sleep_quality == pytest.approx((11 / 3 - 1) / 4)

    @pytest.mark.parametrize("tag", ["0", "6", "-3", "", "abc", "NaN", "inf", "三"])
    def test_malformed_or_out_of_range_is_skipped(self, tag):
        patterns = extract_activity_patterns(_entries([tag, "5"]))
        assert patterns.sleep_quality == 1.0

    def test_decimal_rating_inside_range_counts(self):
        patterns = extract_activity_patterns(_entries(["3.0"]))
        assert patterns.sleep_quality == pytest.approx(0.5)


def test_to_dict_keys():
    d = extract_activity_patterns(_entries(["運動"])).to_dict()
    assert set(d) == {
        "social_frequency", "novelty_rate", "sleep_quality",
        "exercise_frequency", "activity_diversity",
    }
    assert isinstance(extract_activity_patterns([]), ActivityPatterns)
