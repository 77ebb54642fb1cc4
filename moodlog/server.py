"""FastAPI server bridging the mood engine to the web front end.

The front end reads entries from its document store and posts them
here; nothing is persisted server-side.

- Questionnaire: /api/quiz/*
- Personality estimate: /api/personality
- Trend chart data: /api/trends
- Reminder settings and logged days: /api/reminders/* (read by the
  reminder agent)
"""

from __future__ import annotations

import logging

import redis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moodlog.agents.reminder_agent import mark_logged, save_subscriber
from moodlog.config.settings import LOG_LEVEL, REDIS_URL, SERVER_HOST, SERVER_PORT
from moodlog.data_pipeline.questionnaire import (
    QUIZ_QUESTIONS,
    build_entry,
    emotion_label,
)
from moodlog.engine.dates import today_in_timezone
from moodlog.engine.personality import MIN_ENTRIES, assess, has_enough_entries
from moodlog.engine.trends import RANGES, build_trends
from moodlog.models.messages import (
    LoggedDateRequest,
    PersonalityRequest,
    QuizScoreRequest,
    ReminderSettingsRequest,
    TrendsRequest,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="MoodLog", description="Daily mood tracking and personality insight")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_redis() -> redis.Redis:
    return redis.Redis.from_url(REDIS_URL, decode_responses=True)


# ── REST Endpoints ───────────────────────────────────────────────────────

@app.get("/api/health")
async def health():
    r = _get_redis()
    try:
        r.ping()
        redis_ok = True
    except redis.RedisError:
        redis_ok = False

    return {"status": "ok", "redis": redis_ok}


@app.get("/api/quiz/questions")
async def get_questions():
    return {"questions": [q.to_dict() for q in QUIZ_QUESTIONS]}


@app.post("/api/quiz/score")
async def score_quiz(req: QuizScoreRequest):
    """Score a completed questionnaire into an entry ready to store."""
    entry = build_entry(req.answers, req.date or today_in_timezone())
    return {
        "valence": entry.valence,
        "arousal": entry.arousal,
        "activities": entry.activities,
        "emotion": emotion_label(entry.valence, entry.arousal),
        "entry": entry.to_dict(),
    }


@app.post("/api/personality")
async def get_personality(req: PersonalityRequest):
    entries = [e.to_entry() for e in req.entries]
    if not has_enough_entries(entries):
        return {
            "error": "Not enough entries for a personality estimate",
            "entry_count": len(entries),
            "min_entries": MIN_ENTRIES,
            "remaining": MIN_ENTRIES - len(entries),
        }

    return assess(entries).to_dict()


@app.post("/api/trends")
async def get_trends(req: TrendsRequest):
    if req.range not in RANGES:
        return {"error": f"Unknown range '{req.range}'", "ranges": list(RANGES)}

    entries = [e.to_entry() for e in req.entries]
    return build_trends(entries, req.range, req.today)


@app.put("/api/reminders/{user_id}")
async def update_reminder_settings(user_id: str, req: ReminderSettingsRequest):
    r = _get_redis()
    save_subscriber(r, user_id, req.model_dump())
    logger.info("Reminder settings saved for %s (%s)", user_id, req.notificationHour)
    return {"status": "ok", "user_id": user_id}


@app.post("/api/reminders/{user_id}/logged")
async def record_logged_day(user_id: str, req: LoggedDateRequest):
    """Called after an entry is saved so today's reminder is skipped."""
    day = req.date or today_in_timezone()
    r = _get_redis()
    mark_logged(r, user_id, day)
    return {"status": "ok", "user_id": user_id, "date": day}


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=LOG_LEVEL)
    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT)
