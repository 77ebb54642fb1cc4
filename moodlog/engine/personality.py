"""Big Five personality estimate from daily affect history.

Pipeline:

1. Sort entries by date (on a copy; the caller's list is left as is)
2. Compute Affect Dynamics Parameters over valence / arousal
3. Extract activity-pattern ratios from the tag lists
4. Normalise everything into named features in [0, 1]
5. Weighted sum per trait from ``TRAIT_WEIGHTS``, clamp, scale to 0-100
6. Attach a description per trait and a confidence tier

Heuristic and non-diagnostic. Literature behind the feature choice:

- Kuppens et al. (2007): Neuroticism <-> negative affect mean and variability
- Augustine & Larsen (2012): Extraversion <-> positive affect, arousal
- Segerstrom et al. (2003): Conscientiousness <-> affective stability
- Fleeson (2001): Openness <-> breadth of experience, novel activities

The scorer does not check ``MIN_ENTRIES``; callers gate on
``has_enough_entries`` first.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from moodlog.engine.activity_patterns import ActivityPatterns, extract_activity_patterns
from moodlog.engine.affect_dynamics import AffectDynamics, compute_adp
from moodlog.engine.dates import period_days
from moodlog.models.entry import DailyEntry

logger = logging.getLogger(__name__)

# Fewest entries worth assessing
MIN_ENTRIES: int = 7

# Calibration ceilings. With valence/arousal in [-1, 1] the theoretical
# MSSD maximum is 4.0; 2.0 is the practical ceiling used for scaling.
MAX_SD: float = 1.0
MAX_MSSD: float = 2.0


class ConfidenceLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


HIGH_CONFIDENCE_ENTRIES = 30
HIGH_CONFIDENCE_DAYS = 30
MEDIUM_CONFIDENCE_ENTRIES = 14


# ═══════════════════════════════════════════════════════════════════════════
# Trait definitions
# ═══════════════════════════════════════════════════════════════════════════

TRAIT_KEYS: tuple[str, ...] = (
    "neuroticism",
    "extraversion",
    "conscientiousness",
    "agreeableness",
    "openness",
)

# feature name -> coefficient, each row sums to 1.0
TRAIT_WEIGHTS: dict[str, dict[str, float]] = {
    "neuroticism": {
        "neg_valence": 0.4,
        "valence_variability": 0.3,
        "valence_instability": 0.2,
        "poor_sleep": 0.1,
    },
    "extraversion": {
        "pos_valence": 0.35,
        "high_arousal": 0.25,
        "social_frequency": 0.25,
        "activity_diversity": 0.15,
    },
    "conscientiousness": {
        "valence_stability": 0.3,
        "arousal_stability": 0.25,
        "sleep_quality": 0.25,
        "emotional_balance": 0.2,
    },
    "agreeableness": {
        "pos_valence": 0.4,
        "social_frequency": 0.3,
        "arousal_stability": 0.2,
        "valence_stability": 0.1,
    },
    "openness": {
        "activity_diversity": 0.35,
        "novelty_rate": 0.3,
        "arousal_variability": 0.2,
        "exercise_frequency": 0.15,
    },
}

# Display order of the trait detail list
TRAIT_DISPLAY_ORDER: tuple[str, ...] = (
    "openness",
    "conscientiousness",
    "extraversion",
    "agreeableness",
    "neuroticism",
)

TRAIT_LABELS: dict[str, tuple[str, str]] = {
    "openness": ("開放性", "Openness"),
    "conscientiousness": ("誠実性", "Conscientiousness"),
    "extraversion": ("外向性", "Extraversion"),
    "agreeableness": ("協調性", "Agreeableness"),
    "neuroticism": ("神経症傾向", "Neuroticism"),
}

LOW_SCORE_BELOW = 35
HIGH_SCORE_FROM = 65

# (low, mid, high)
TRAIT_DESCRIPTIONS: dict[str, tuple[str, str, str]] = {
    "neuroticism": (
        "感情的に安定しており、ストレスに対して強い耐性があります。冷静に物事を判断できる傾向があります。",
        "感情の波は一般的な範囲内です。状況に応じて適度にストレスを感じますが、バランスよく対処できています。",
        "感情の変動が大きく、繊細に物事を感じ取る傾向があります。この感受性は創造性や共感力の源でもあります。",
    ),
    "extraversion": (
        "内向的で、一人の時間やじっくりと考えることを好む傾向があります。深い思考や集中力が強みです。",
        "内向と外向のバランスが取れています。社交的な場面も一人の時間も楽しめる柔軟性があります。",
        "外向的で、活動的な生活を送っています。人との交流やエネルギッシュな活動から活力を得ています。",
    ),
    "conscientiousness": (
        "柔軟で自由な生活スタイルを好みます。型にはまらない発想で物事に取り組む傾向があります。",
        "計画性と柔軟性のバランスが取れています。必要に応じて規律正しくも自由にも行動できます。",
        "自己管理能力が高く、規律正しい生活リズムを維持しています。安定した感情パターンがその証拠です。",
    ),
    "agreeableness": (
        "独立心が強く、自分の考えをしっかり持っています。客観的で分析的な視点が強みです。",
        "協調性と自主性のバランスが取れています。状況に応じて他者と協力しつつ、自分の意見も持てます。",
        "他者への共感力が高く、良好な対人関係を築く傾向があります。社交場面でポジティブな感情を維持できます。",
    ),
    "openness": (
        "安定した環境や慣れた方法を好む傾向があります。確実性を重視し、着実に物事を進めます。",
        "新しい体験と安定のバランスが取れています。適度に新しいことに挑戦しつつ、慣れた方法も活用します。",
        "新しい経験や活動に積極的に取り組んでいます。多様な活動への関与が好奇心の強さを示しています。",
    ),
}


# ═══════════════════════════════════════════════════════════════════════════
# Result types
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TraitDetail:
    key: str
    label: str
    label_en: str
    score: int
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "labelEn": self.label_en,
            "score": self.score,
            "description": self.description,
        }


@dataclass(frozen=True)
class PersonalityResult:
    scores: dict[str, int]
    traits: list[TraitDetail]
    confidence: ConfidenceLevel
    entry_count: int
    period_days: int
    signals: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "scores": dict(self.scores),
            "traits": [t.to_dict() for t in self.traits],
            "confidence": self.confidence.value,
            "entryCount": self.entry_count,
            "periodDays": self.period_days,
            "signals": {k: round(v, 4) for k, v in self.signals.items()},
        }


# ═══════════════════════════════════════════════════════════════════════════
# Scoring helpers
# ═══════════════════════════════════════════════════════════════════════════

def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def normalize(value: float) -> float:
    """[-1, 1] -> [0, 1]"""
    return (value + 1) / 2


def to_score(composite: float) -> int:
    """Clamp to [0, 1] and scale to 0-100, halves rounding up."""
    return int(math.floor(clamp01(composite) * 100 + 0.5))


def build_features(adp: AffectDynamics, patterns: ActivityPatterns) -> dict[str, float]:
    """Named trait inputs, each clamped to [0, 1]."""
    features = {
        "neg_valence": 1 - normalize(adp.valence_mean),
        "pos_valence": normalize(adp.valence_mean),
        "high_arousal": normalize(adp.arousal_mean),
        "valence_variability": adp.valence_sd / MAX_SD,
        "valence_instability": adp.valence_mssd / MAX_MSSD,
        "valence_stability": 1 - adp.valence_sd / MAX_SD,
        "arousal_stability": 1 - adp.arousal_sd / MAX_SD,
        "arousal_variability": adp.arousal_sd / MAX_SD,
        "emotional_balance": 1 - abs(adp.valence_mean),
        "poor_sleep": 1 - patterns.sleep_quality,
        "sleep_quality": patterns.sleep_quality,
        "social_frequency": patterns.social_frequency,
        "novelty_rate": patterns.novelty_rate,
        "exercise_frequency": patterns.exercise_frequency,
        "activity_diversity": patterns.activity_diversity,
    }
    return {k: clamp01(v) for k, v in features.items()}


def score_traits(
    features: dict[str, float],
    weights: dict[str, dict[str, float]] = TRAIT_WEIGHTS,
) -> dict[str, int]:
    return {
        trait: to_score(sum(features[name] * coef for name, coef in row.items()))
        for trait, row in weights.items()
    }


def describe_trait(key: str, score: int) -> str:
    low, mid, high = TRAIT_DESCRIPTIONS[key]
    if score < LOW_SCORE_BELOW:
        return low
    if score < HIGH_SCORE_FROM:
        return mid
    return high


def determine_confidence(entry_count: int, days: int) -> ConfidenceLevel:
    if entry_count >= HIGH_CONFIDENCE_ENTRIES and days >= HIGH_CONFIDENCE_DAYS:
        return ConfidenceLevel.HIGH
    if entry_count >= MEDIUM_CONFIDENCE_ENTRIES:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def has_enough_entries(entries: Sequence[DailyEntry]) -> bool:
    return len(entries) >= MIN_ENTRIES


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def assess(entries: Sequence[DailyEntry]) -> PersonalityResult:
    """Estimate Big Five scores from a user's daily entries.

    Entries may be passed in any order.
    """
    ordered = sorted(entries, key=lambda e: e.date)

    adp = compute_adp(ordered)
    patterns = extract_activity_patterns(ordered)
    features = build_features(adp, patterns)
    scores = score_traits(features)

    traits = [
        TraitDetail(
            key=key,
            label=TRAIT_LABELS[key][0],
            label_en=TRAIT_LABELS[key][1],
            score=scores[key],
            description=describe_trait(key, scores[key]),
        )
        for key in TRAIT_DISPLAY_ORDER
    ]

    first = ordered[0].date if ordered else ""
    last = ordered[-1].date if ordered else ""
    days = period_days(first, last)
    confidence = determine_confidence(len(ordered), days)

    logger.debug(
        "Assessed %d entries over %d days (confidence=%s): %s",
        len(ordered), days, confidence.value, scores,
    )

    return PersonalityResult(
        scores={key: scores[key] for key in TRAIT_KEYS},
        traits=traits,
        confidence=confidence,
        entry_count=len(ordered),
        period_days=days,
        signals={**adp.to_dict(), **patterns.to_dict()},
    )
