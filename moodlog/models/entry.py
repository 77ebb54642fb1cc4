"""Daily entry model.

One questionnaire submission per user per calendar day. The stored
document uses the front end's camelCase keys; ``from_dict`` accepts
either casing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

# stored key -> dataclass field
_CAMEL_FIELDS = {
    "id": "entry_id",
    "valenceAnswers": "valence_answers",
    "arousalAnswers": "arousal_answers",
    "freeText": "free_text",
}


@dataclass
class DailyEntry:
    date: str                       # YYYY-MM-DD
    valence: float = 0.0            # -1.0 (unpleasant) .. 1.0 (pleasant)
    arousal: float = 0.0            # -1.0 (calm) .. 1.0 (activated)
    activities: list = field(default_factory=list)
    entry_id: str = ""
    valence_answers: list = field(default_factory=list)
    arousal_answers: list = field(default_factory=list)
    free_text: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "date": self.date,
            "valence": float(self.valence),
            "arousal": float(self.arousal),
            "valenceAnswers": [_json_number(v) for v in self.valence_answers],
            "arousalAnswers": [_json_number(v) for v in self.arousal_answers],
            "activities": list(self.activities),
            "freeText": self.free_text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DailyEntry:
        data = dict(data)  # copy
        for camel, snake in _CAMEL_FIELDS.items():
            if camel in data and snake not in data:
                data[snake] = data.pop(camel)

        # Missing fields fall back the way the document reader does
        data["date"] = data.get("date") or ""
        for float_field in ("valence", "arousal"):
            raw = data.get(float_field)
            try:
                data[float_field] = float(raw) if raw is not None else 0.0
            except (TypeError, ValueError):
                raise ValueError(f"{float_field} must be numeric, got {raw!r}") from None
        data["activities"] = [str(a) for a in (data.get("activities") or [])]
        data["valence_answers"] = list(data.get("valence_answers") or [])
        data["arousal_answers"] = list(data.get("arousal_answers") or [])
        data["free_text"] = data.get("free_text") or ""
        data["entry_id"] = data.get("entry_id") or ""

        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def _json_number(value):
    """NaN marks an unanswered radio question; JSON has no NaN."""
    if isinstance(value, float) and math.isnan(value):
        return None
    return value
