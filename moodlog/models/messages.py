"""Request bodies accepted by the HTTP bridge.

Schema validation happens here; the engine receives plain DailyEntry
records. Dates must be real calendar days, so a malformed body is
rejected with 422 before it reaches the engine.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from moodlog.config.settings import REMINDER_TIME
from moodlog.engine.dates import parse_date
from moodlog.models.entry import DailyEntry

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def _calendar_date(value: Optional[str]) -> Optional[str]:
    if value is not None:
        parse_date(value)  # ValueError for days like 2026-02-30
    return value


class EntryPayload(BaseModel):
    """One stored daily entry as the front end sends it."""
    date: str = Field(pattern=DATE_PATTERN)
    valence: float = Field(ge=-1.0, le=1.0)
    arousal: float = Field(ge=-1.0, le=1.0)
    activities: list[str] = []
    id: str = ""
    freeText: str = ""

    @field_validator("date")
    @classmethod
    def _valid_date(cls, v):
        return _calendar_date(v)

    def to_entry(self) -> DailyEntry:
        return DailyEntry(
            date=self.date,
            valence=self.valence,
            arousal=self.arousal,
            activities=list(self.activities),
            entry_id=self.id,
            free_text=self.freeText,
        )


class PersonalityRequest(BaseModel):
    entries: list[EntryPayload]


class TrendsRequest(BaseModel):
    entries: list[EntryPayload]
    range: str = "1w"            # 1w | 1m | 3m | 6m | 1y
    today: Optional[str] = Field(default=None, pattern=DATE_PATTERN)  # defaults to today in APP_TIMEZONE

    @field_validator("today")
    @classmethod
    def _valid_today(cls, v):
        return _calendar_date(v)


class QuizScoreRequest(BaseModel):
    answers: dict[str, Any]
    date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)  # defaults to today in APP_TIMEZONE

    @field_validator("date")
    @classmethod
    def _valid_date(cls, v):
        return _calendar_date(v)


class ReminderSettingsRequest(BaseModel):
    """A user's reminder preferences, as stored for the reminder job."""
    notificationEnabled: bool = True
    notificationHour: str = Field(default=REMINDER_TIME, pattern=TIME_PATTERN)  # HH:MM local time
    fcmToken: str = ""


class LoggedDateRequest(BaseModel):
    date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)  # defaults to today in APP_TIMEZONE

    @field_validator("date")
    @classmethod
    def _valid_date(cls, v):
        return _calendar_date(v)
