"""Integration tests for FastAPI server endpoints.

Uses httpx.AsyncClient with ASGITransport to test the REST API
without starting a real server. Redis is patched to use fakeredis.
"""

import pytest
import fakeredis
from unittest.mock import patch
from httpx import AsyncClient, ASGITransport


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def patched_app(fake_redis):
    with patch("moodlog.server._get_redis", return_value=fake_redis):
        from moodlog.server import app
        yield app


@pytest.fixture
async def client(patched_app):
    transport = ASGITransport(app=patched_app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def _entries_payload(make_entries, **kwargs):
    return [
        {"date": e.date, "valence": e.valence, "arousal": e.arousal, "activities": e.activities}
        for e in make_entries(**kwargs)
    ]


# ═══════════════════════════════════════════════════════════════════════════
# Health / Quiz
# ═══════════════════════════════════════════════════════════════════════════


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_health_returns_ok(self, client):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "redis": True}


class TestQuizEndpoints:
    @pytest.mark.asyncio
    async def test_score_rejects_invalid_date(self, client):
        resp = await client.post("/api/quiz/score", json={"date": "2026-13-01", "answers": {}})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_questions(self, client):
        resp = await client.get("/api/quiz/questions")
        assert resp.status_code == 200
        questions = resp.json()["questions"]
        assert len(questions) == 10
        assert questions[0]["id"] == "valence-1"

    @pytest.mark.asyncio
    async def test_score(self, client):
        resp = await client.post("/api/quiz/score", json={
            "date": "2026-02-15",
            "answers": {
                "valence-1": 60, "valence-2": "5",
                "arousal-1": 80, "arousal-2": "4",
                "activity-1": ["運動"], "activity-4": "たくさん",
            },
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["valence"] == 0.8
        assert data["arousal"] == 0.65
        assert data["activities"] == ["運動", "たくさん"]
        assert data["emotion"] == "興奮・喜び"
        assert data["entry"]["date"] == "2026-02-15"
        assert data["entry"]["valenceAnswers"] == [0.6, 5.0]


# ═══════════════════════════════════════════════════════════════════════════
# Personality
# ═══════════════════════════════════════════════════════════════════════════


class TestPersonalityEndpoint:
    @pytest.mark.asyncio
    async def test_too_few_entries(self, client, make_entries):
        resp = await client.post("/api/personality", json={
            "entries": _entries_payload(make_entries, valences=0.2, count=5),
        })
        assert resp.status_code == 200
        data = resp.json()
        assert "error" in data
        assert data["min_entries"] == 7
        assert data["remaining"] == 2

    @pytest.mark.asyncio
    async def test_assessment(self, client, make_entries):
        resp = await client.post("/api/personality", json={
            "entries": _entries_payload(make_entries, valences=0.5, arousals=0.5,
                                        activities=["運動"], count=30),
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["confidence"] == "high"
        assert data["entryCount"] == 30
        assert data["periodDays"] == 30
        assert len(data["traits"]) == 5
        assert set(data["scores"]) == {
            "neuroticism", "extraversion", "conscientiousness", "agreeableness", "openness",
        }

    @pytest.mark.asyncio
    async def test_out_of_range_valence_rejected(self, client):
        resp = await client.post("/api/personality", json={
            "entries": [{"date": "2026-02-15", "valence": 1.5, "arousal": 0.0}],
        })
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_bad_date_rejected(self, client):
        resp = await client.post("/api/personality", json={
            "entries": [{"date": "15/02/2026", "valence": 0.1, "arousal": 0.0}],
        })
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_impossible_calendar_date_rejected(self, client):
        dates = ["2026-02-24", "2026-02-25", "2026-02-26", "2026-02-27",
                 "2026-02-28", "2026-02-29", "2026-02-30"]
        resp = await client.post("/api/personality", json={
            "entries": [{"date": d, "valence": 0.1, "arousal": 0.0} for d in dates],
        })
        assert resp.status_code == 422


# ═══════════════════════════════════════════════════════════════════════════
# Trends
# ═══════════════════════════════════════════════════════════════════════════


class TestTrendsEndpoint:
    @pytest.mark.asyncio
    async def test_month(self, client, make_entries):
        resp = await client.post("/api/trends", json={
            "entries": _entries_payload(make_entries, valences=0.4, count=40, start="2026-01-07"),
            "range": "1m",
            "today": "2026-02-15",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["start_date"] == "2026-01-17"
        assert len(data["series"]) == 30
        assert len(data["recent"]) == 5

    @pytest.mark.asyncio
    async def test_unknown_range(self, client):
        resp = await client.post("/api/trends", json={"entries": [], "range": "2w"})
        data = resp.json()
        assert "error" in data
        assert "1w" in data["ranges"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("today", ["yesterday", "2026-02-30", "2026-2-3"])
    async def test_invalid_today_rejected(self, client, today):
        resp = await client.post("/api/trends", json={"entries": [], "range": "1w", "today": today})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_impossible_entry_date_rejected(self, client):
        resp = await client.post("/api/trends", json={
            "entries": [{"date": "2026-04-31", "valence": 0.1, "arousal": 0.0}],
            "today": "2026-05-01",
        })
        assert resp.status_code == 422


# ═══════════════════════════════════════════════════════════════════════════
# Reminders
# ═══════════════════════════════════════════════════════════════════════════


class TestReminderEndpoints:
    @pytest.mark.asyncio
    async def test_settings_stored_for_agent(self, client, fake_redis):
        resp = await client.put("/api/reminders/u1", json={
            "notificationEnabled": True, "notificationHour": "21:30", "fcmToken": "tok",
        })
        assert resp.status_code == 200

        from moodlog.agents.reminder_agent import load_subscribers_from_redis
        subs = load_subscribers_from_redis(fake_redis)
        assert len(subs) == 1
        assert subs[0].user_id == "u1"
        assert subs[0].notification_time == "21:30"
        assert subs[0].notification_enabled is True

    @pytest.mark.asyncio
    async def test_bad_time_rejected(self, client):
        resp = await client.put("/api/reminders/u1", json={"notificationHour": "25:00"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_logged_day_recorded(self, client, fake_redis):
        resp = await client.post("/api/reminders/u1/logged", json={"date": "2026-02-15"})
        assert resp.status_code == 200
        assert resp.json()["date"] == "2026-02-15"
        assert fake_redis.smembers("reminder:logged:u1") == {"2026-02-15"}

    @pytest.mark.asyncio
    async def test_logged_day_rejects_invalid_date(self, client):
        resp = await client.post("/api/reminders/u1/logged", json={"date": "2026-02-30"})
        assert resp.status_code == 422
