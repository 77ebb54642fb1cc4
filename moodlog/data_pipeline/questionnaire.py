"""Daily questionnaire: question catalogue, closed tag vocabulary, scoring.

Answers arrive keyed by question id. Slider answers are -100..100,
five-point radio answers are the strings "1".."5". Activity answers are
stored on the entry as plain string tags; the enumerations below are the
only tag values the questionnaire can produce.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from moodlog.models.entry import DailyEntry


# ═══════════════════════════════════════════════════════════════════════════
# Tag vocabulary
# ═══════════════════════════════════════════════════════════════════════════

class MainActivity(str, Enum):
    WORK = "仕事"
    STUDY = "学習"
    EXERCISE = "運動"
    CHORES = "家事"
    SHOPPING = "買い物"
    SLEEP = "睡眠"


class Meal(str, Enum):
    ATE_WELL = "しっかり食べた"
    NORMAL = "普通"
    ATE_LITTLE = "あまり食べなかった"
    DID_NOT_EAT = "食べなかった"


class SleepQuality(str, Enum):
    WORST = "1"
    BAD = "2"
    NORMAL = "3"
    GOOD = "4"
    BEST = "5"


class SocialContact(str, Enum):
    A_LOT = "たくさん"
    A_LITTLE = "少し"
    BARELY = "ほとんどなし"
    NONE = "まったくなし"


class Novelty(str, Enum):
    YES = "はい"
    NO = "いいえ"


SOCIAL_CONTACT_TAGS: frozenset[str] = frozenset({SocialContact.A_LOT.value, SocialContact.A_LITTLE.value})
NOVELTY_TAGS: frozenset[str] = frozenset({Novelty.YES.value})
EXERCISE_TAG: str = MainActivity.EXERCISE.value
MAIN_ACTIVITY_TAGS: frozenset[str] = frozenset(a.value for a in MainActivity)

SLEEP_RATING_MIN = 1
SLEEP_RATING_MAX = 5


def parse_sleep_rating(tag: str) -> Optional[float]:
    """Return the tag as a sleep rating if it is an ASCII number in [1, 5]."""
    try:
        text = tag.strip()
        if not text.isascii():
            return None
        value = float(text)
    except (AttributeError, ValueError):
        return None
    if math.isnan(value) or not SLEEP_RATING_MIN <= value <= SLEEP_RATING_MAX:
        return None
    return value


# ═══════════════════════════════════════════════════════════════════════════
# Question catalogue
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class QuestionOption:
    label: str
    value: str


@dataclass(frozen=True)
class QuizQuestion:
    id: str
    type: str                # slider | radio | checkbox | text
    question: str
    category: str            # valence | arousal | activity | freetext
    min_label: str = ""
    max_label: str = ""
    options: tuple[QuestionOption, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "question": self.question,
            "category": self.category,
        }
        if self.min_label or self.max_label:
            d["minLabel"] = self.min_label
            d["maxLabel"] = self.max_label
        if self.options:
            d["options"] = [{"label": o.label, "value": o.value} for o in self.options]
        return d


def _enum_options(enum_cls: type[Enum], labels: Optional[list[str]] = None) -> tuple[QuestionOption, ...]:
    members = list(enum_cls)
    labels = labels or [m.value for m in members]
    return tuple(QuestionOption(label, m.value) for label, m in zip(labels, members))


_FIVE_POINT = tuple(
    QuestionOption(label, str(i))
    for i, label in enumerate(["まったく", "少し", "ふつう", "かなり", "とても"], start=1)
)

QUIZ_QUESTIONS: tuple[QuizQuestion, ...] = (
    QuizQuestion(
        id="valence-1",
        type="slider",
        question="今日の気分はどちらに近いですか？",
        category="valence",
        min_label="不快",
        max_label="快",
    ),
    QuizQuestion(
        id="valence-2",
        type="radio",
        question="今日、ポジティブな感情を感じましたか？",
        category="valence",
        options=_FIVE_POINT,
    ),
    QuizQuestion(
        id="arousal-1",
        type="slider",
        question="今の気持ちは落ち着いていますか？それとも高ぶっていますか？",
        category="arousal",
        min_label="落ち着いている",
        max_label="高ぶっている",
    ),
    QuizQuestion(
        id="arousal-2",
        type="radio",
        question="今日はどのくらい活動的でしたか？",
        category="arousal",
        options=_FIVE_POINT,
    ),
    QuizQuestion(
        id="activity-1",
        type="checkbox",
        question="今日の主な活動は？（複数選択可）",
        category="activity",
        options=_enum_options(MainActivity),
    ),
    QuizQuestion(
        id="activity-2",
        type="radio",
        question="食事はどうでしたか？",
        category="activity",
        options=_enum_options(Meal),
    ),
    QuizQuestion(
        id="activity-3",
        type="radio",
        question="睡眠の質は？",
        category="activity",
        options=_enum_options(SleepQuality, ["最悪", "悪い", "普通", "良い", "最高"]),
    ),
    QuizQuestion(
        id="activity-4",
        type="radio",
        question="人と交流しましたか？",
        category="activity",
        options=_enum_options(SocialContact),
    ),
    QuizQuestion(
        id="activity-5",
        type="radio",
        question="新しいことに挑戦しましたか？",
        category="activity",
        options=_enum_options(Novelty),
    ),
    QuizQuestion(
        id="freetext-1",
        type="text",
        question="日記",
        category="freetext",
    ),
)

_RADIO_ACTIVITY_IDS = ("activity-2", "activity-3", "activity-4", "activity-5")


# ═══════════════════════════════════════════════════════════════════════════
# Scoring
# ═══════════════════════════════════════════════════════════════════════════

def _slider(answers: dict[str, Any], key: str) -> float:
    """-100..100 slider -> -1.0..1.0 (unanswered = 0)."""
    raw = answers.get(key)
    try:
        return float(raw) / 100 if raw is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def _five_point(answers: dict[str, Any], key: str) -> float:
    """Raw 1..5 radio answer as a float, NaN when missing or non-numeric."""
    try:
        return float(answers.get(key))
    except (TypeError, ValueError):
        return math.nan


def _round2(value: float) -> float:
    """Two decimals, halves rounding up."""
    return math.floor(value * 100 + 0.5) / 100


def calculate_valence_arousal(answers: dict[str, Any]) -> dict[str, Any]:
    """Average the slider and five-point answers for each affect axis.

    Five-point answers map 1..5 onto -1.0..1.0 via ``(v - 3) / 2``.
    """
    slider_valence = _slider(answers, "valence-1")
    v2 = _five_point(answers, "valence-2")
    radio_valence = 0.0 if math.isnan(v2) else (v2 - 3) / 2
    valence = (slider_valence + radio_valence) / 2

    slider_arousal = _slider(answers, "arousal-1")
    a2 = _five_point(answers, "arousal-2")
    radio_arousal = 0.0 if math.isnan(a2) else (a2 - 3) / 2
    arousal = (slider_arousal + radio_arousal) / 2

    return {
        "valence": _round2(valence),
        "arousal": _round2(arousal),
        "valence_answers": [slider_valence, v2],
        "arousal_answers": [slider_arousal, a2],
    }


def emotion_label(valence: float, arousal: float) -> str:
    """Label on Russell's circumplex model of affect."""
    if valence > 0.3 and arousal > 0.3:
        return "興奮・喜び"
    if valence > 0.3 and arousal < -0.3:
        return "穏やか・満足"
    if valence < -0.3 and arousal > 0.3:
        return "怒り・緊張"
    if valence < -0.3 and arousal < -0.3:
        return "悲しみ・倦怠"
    if valence > 0.3:
        return "幸福"
    if valence < -0.3:
        return "不快"
    if arousal > 0.3:
        return "覚醒"
    if arousal < -0.3:
        return "沈静"
    return "ニュートラル"


def collect_activities(answers: dict[str, Any]) -> list[str]:
    """Flatten the activity answers into the entry's tag list."""
    tags: list[str] = []

    main = answers.get("activity-1")
    if isinstance(main, (list, tuple)):
        tags.extend(str(a) for a in main)

    for key in _RADIO_ACTIVITY_IDS:
        value = answers.get(key)
        if isinstance(value, str) and value:
            tags.append(value)

    return tags


def build_entry(answers: dict[str, Any], date: str) -> DailyEntry:
    """Turn one completed questionnaire into a DailyEntry."""
    scores = calculate_valence_arousal(answers)
    free_text = answers.get("freetext-1")
    return DailyEntry(
        date=date,
        valence=scores["valence"],
        arousal=scores["arousal"],
        activities=collect_activities(answers),
        valence_answers=scores["valence_answers"],
        arousal_answers=scores["arousal_answers"],
        free_text=free_text if isinstance(free_text, str) else "",
    )
