"""Application-wide configuration loaded from environment variables."""

import os

from dotenv import load_dotenv

load_dotenv()

# Redis
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")

# Calendar dates ("today", reminder clock) are evaluated in this zone
APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "Asia/Tokyo")

# ── Reminder Configuration ───────────────────────────────────────────────

REMINDER_TIME: str = os.getenv("REMINDER_TIME", "22:00")  # HH:MM in APP_TIMEZONE
REMINDER_CHANNEL: str = os.getenv("REMINDER_CHANNEL", "moodlog:reminders")
REMINDER_TITLE: str = os.getenv("REMINDER_TITLE", "MoodLog")
REMINDER_BODY: str = os.getenv("REMINDER_BODY", "今日の気分を記録しましょう")
REMINDER_URL: str = os.getenv("REMINDER_URL", "/app/quiz")
REMINDER_TTL_SECONDS: int = int(os.getenv("REMINDER_TTL_SECONDS", "86400"))
REMINDER_INTERVAL_SECONDS: int = int(os.getenv("REMINDER_INTERVAL_SECONDS", "60"))

# ── Server Configuration ─────────────────────────────────────────────────

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))
