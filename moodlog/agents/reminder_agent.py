"""Reminder Agent — daily "log your mood" nudges.

Runs once a minute (``run_forever``, or ``python -m
moodlog.agents.reminder_agent``). Every subscriber whose reminder time
equals the current local time, who has a device token, has not been
reminded today and has not logged an entry today gets one reminder.

Reminders are published to Redis (``REMINDER_CHANNEL``) for the push
delivery worker to relay. The date of the last reminder is stored per
user so a second run in the same minute, or a stale subscriber record,
cannot notify twice.

Subscriber settings live in Redis hashes (``reminder:subscriber:{uid}``)
and the days each user has logged in sets (``reminder:logged:{uid}``).
Both are written through the HTTP bridge.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

import redis

from moodlog.config.settings import (
    APP_TIMEZONE,
    LOG_LEVEL,
    REDIS_URL,
    REMINDER_BODY,
    REMINDER_CHANNEL,
    REMINDER_INTERVAL_SECONDS,
    REMINDER_TIME,
    REMINDER_TITLE,
    REMINDER_TTL_SECONDS,
    REMINDER_URL,
)
from moodlog.engine.dates import current_hhmm, today_in_timezone

logger = logging.getLogger(__name__)

SUBSCRIBER_PREFIX = "reminder:subscriber:"
LOGGED_PREFIX = "reminder:logged:"
LAST_NOTIFIED_PREFIX = "reminder:last_notified:"
# Markers only need to outlive the day they were written on
LAST_NOTIFIED_TTL_SECONDS = 2 * 24 * 3600
LOGGED_TTL_SECONDS = 2 * 24 * 3600


def _get_redis() -> redis.Redis:
    return redis.Redis.from_url(REDIS_URL, decode_responses=True)


def _as_bool(value: Any) -> bool:
    # hash fields come back as strings
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class ReminderSubscriber:
    user_id: str
    notification_enabled: bool = False
    notification_time: str = REMINDER_TIME   # HH:MM local time
    device_token: str = ""
    last_notified_date: str = ""             # YYYY-MM-DD

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReminderSubscriber:
        """Build from a stored user document (camelCase or snake_case keys)."""
        user_id = data.get("user_id") or data.get("uid") or ""
        if not user_id:
            raise ValueError("subscriber record has no user id")
        enabled = data.get("notification_enabled", data.get("notificationEnabled", False))
        return cls(
            user_id=str(user_id),
            notification_enabled=_as_bool(enabled),
            notification_time=str(
                data.get("notification_time") or data.get("notificationHour") or REMINDER_TIME
            ),
            device_token=str(data.get("device_token") or data.get("fcmToken") or ""),
            last_notified_date=str(
                data.get("last_notified_date") or data.get("lastNotifiedDate") or ""
            ),
        )


# ── Selection ────────────────────────────────────────────────────────────


def needs_reminder(
    subscriber: ReminderSubscriber,
    logged_today: bool,
    today: str,
    current_time: str,
) -> bool:
    if not subscriber.notification_enabled:
        return False
    if subscriber.notification_time != current_time:
        return False
    if not subscriber.device_token:
        return False
    if subscriber.last_notified_date == today:
        return False
    return not logged_today


def select_recipients(
    subscribers: Iterable[ReminderSubscriber],
    logged_dates: Mapping[str, Iterable[str]],
    today: str,
    current_time: str,
) -> list[ReminderSubscriber]:
    """Subscribers due a reminder.

    ``logged_dates`` maps user id to the dates that user has entries for.
    """
    return [
        s for s in subscribers
        if needs_reminder(s, today in set(logged_dates.get(s.user_id, ())), today, current_time)
    ]


def build_reminder(subscriber: ReminderSubscriber, today: str) -> dict[str, Any]:
    return {
        "user_id": subscriber.user_id,
        "token": subscriber.device_token,
        "date": today,
        "title": REMINDER_TITLE,
        "body": REMINDER_BODY,
        "url": REMINDER_URL,
        "urgency": "high",
        "ttl": REMINDER_TTL_SECONDS,
    }


# ── Dispatch ─────────────────────────────────────────────────────────────


def dispatch_reminders(
    subscribers: Iterable[ReminderSubscriber],
    logged_dates: Mapping[str, Iterable[str]],
    now: Optional[datetime] = None,
    r: redis.Redis | None = None,
) -> list[dict[str, Any]]:
    """Publish today's due reminders and return the payloads sent."""
    r = r or _get_redis()
    today = today_in_timezone(APP_TIMEZONE, now)
    current_time = current_hhmm(APP_TIMEZONE, now)

    sent: list[dict[str, Any]] = []
    for subscriber in select_recipients(subscribers, logged_dates, today, current_time):
        key = f"{LAST_NOTIFIED_PREFIX}{subscriber.user_id}"
        try:
            if r.get(key) == today:
                continue
            payload = build_reminder(subscriber, today)
            r.publish(REMINDER_CHANNEL, json.dumps(payload, ensure_ascii=False))
            r.set(key, today, ex=LAST_NOTIFIED_TTL_SECONDS)
        except redis.RedisError as exc:
            logger.error("Failed to publish reminder for %s: %s", subscriber.user_id, exc)
            continue

        subscriber.last_notified_date = today
        sent.append(payload)
        logger.info("Reminder published for %s (%s %s)", subscriber.user_id, today, current_time)

    return sent


def load_subscribers(records: Iterable[Mapping[str, Any]]) -> list[ReminderSubscriber]:
    """Parse stored user documents, skipping ones that are unusable."""
    subscribers = []
    for record in records:
        try:
            subscribers.append(ReminderSubscriber.from_dict(record))
        except (ValueError, TypeError) as exc:
            logger.warning("Skipping subscriber record: %s", exc)
    return subscribers


# ── Redis Storage ────────────────────────────────────────────────────────


def save_subscriber(r: redis.Redis, user_id: str, settings: Mapping[str, Any]) -> None:
    """Store a user's reminder settings (camelCase keys, as the front end sends them)."""
    mapping = {
        "uid": user_id,
        "notificationEnabled": "1" if _as_bool(settings.get("notificationEnabled", True)) else "0",
        "notificationHour": str(settings.get("notificationHour") or REMINDER_TIME),
        "fcmToken": str(settings.get("fcmToken") or ""),
    }
    r.hset(f"{SUBSCRIBER_PREFIX}{user_id}", mapping=mapping)


def mark_logged(r: redis.Redis, user_id: str, date: str) -> None:
    key = f"{LOGGED_PREFIX}{user_id}"
    r.sadd(key, date)
    r.expire(key, LOGGED_TTL_SECONDS)


def load_subscribers_from_redis(r: redis.Redis) -> list[ReminderSubscriber]:
    records = []
    for key in r.scan_iter(match=f"{SUBSCRIBER_PREFIX}*"):
        record = r.hgetall(key)
        if record:
            records.append(record)
    return load_subscribers(records)


def load_logged_dates(r: redis.Redis, user_ids: Iterable[str]) -> dict[str, set[str]]:
    return {uid: set(r.smembers(f"{LOGGED_PREFIX}{uid}")) for uid in user_ids}


# ── Loop ─────────────────────────────────────────────────────────────────


def run_once(now: Optional[datetime] = None, r: redis.Redis | None = None) -> list[dict[str, Any]]:
    """One tick: load subscribers and logged days from Redis, then dispatch."""
    r = r or _get_redis()
    subscribers = load_subscribers_from_redis(r)
    logged = load_logged_dates(r, [s.user_id for s in subscribers])
    return dispatch_reminders(subscribers, logged, now=now, r=r)


async def run_forever(interval: int = REMINDER_INTERVAL_SECONDS) -> None:
    """Tick at the start of every ``interval`` so no HH:MM slot is skipped."""
    logger.info("Reminder agent started (every %ds, %s)", interval, APP_TIMEZONE)
    while True:
        try:
            sent = run_once()
            if sent:
                logger.info("Dispatched %d reminder(s)", len(sent))
        except redis.RedisError as exc:
            logger.error("Reminder tick failed: %s", exc)
        await asyncio.sleep(interval - time.time() % interval)


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL)
    asyncio.run(run_forever())
