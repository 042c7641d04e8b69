"""Tests for the HTTP API."""

from datetime import UTC, date, datetime, time, timedelta

from fastapi.testclient import TestClient

from sleep_score.api.app import create_app
from sleep_score.domain.sleep import SleepSession
from tests.conftest import FailingSleepSessionRepository, night

PERFECT_NIGHT = {
    "start": "2024-05-10T23:30:00+00:00",
    "end": "2024-05-11T07:30:00+00:00",
    "source_label": "Apple Watch",
}


def _recent_day(days_ago: int) -> date:
    return (datetime.now(tz=UTC) - timedelta(days=days_ago)).date()


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_rate_batch_returns_rated_days(container) -> None:
    client = TestClient(create_app(container))
    malformed = {"start": PERFECT_NIGHT["end"], "end": PERFECT_NIGHT["start"]}

    response = client.post("/days", json={"sessions": [PERFECT_NIGHT, malformed]})

    assert response.status_code == 200
    days = response.json()["days"]
    assert len(days) == 1
    assert days[0]["date"] == "2024-05-10"
    assert days[0]["rating"] == "Perfect"
    assert days[0]["duration_hours"] == 8.0
    assert days[0]["session_count"] == 1


def test_rate_batch_reads_naive_timestamps_as_local(container) -> None:
    client = TestClient(create_app(container))
    mixed = {"start": "2024-05-10T23:30:00", "end": "2024-05-11T07:30:00+00:00"}

    response = client.post("/days", json={"sessions": [mixed]})

    assert response.status_code == 200
    days = response.json()["days"]
    assert len(days) == 1
    assert days[0]["date"] == "2024-05-10"
    assert days[0]["duration_hours"] == 8.0
    assert days[0]["rating"] == "Perfect"


def test_rate_batch_empty(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/days", json={"sessions": []})

    assert response.status_code == 200
    assert response.json() == {"days": []}


def test_get_goal_defaults(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/goal")

    assert response.status_code == 200
    assert response.json() == {
        "bedtime_window": {"start": "22:00", "end": "23:00"},
        "wake_window": {"start": "06:00", "end": "08:00"},
        "target_duration_hours": 8.0,
    }


def test_update_goal_requires_token(container, goal_repository) -> None:
    client = TestClient(create_app(container))
    payload = {
        "bedtime_window": {"start": "23:30", "end": "00:30"},
        "wake_window": {"start": "07:00", "end": "09:00"},
        "target_duration_hours": 7.5,
    }

    denied = client.put("/goal", json=payload)
    response = client.put("/goal", json=payload, headers={"X-Api-Token": "api-token"})

    assert denied.status_code == 401
    assert response.status_code == 200
    assert response.json()["bedtime_window"] == {"start": "23:30", "end": "00:30"}
    assert goal_repository.saved[0]["target_duration_hours"] == 7.5
    assert client.get("/goal").json()["target_duration_hours"] == 7.5


def test_update_goal_rejects_non_positive_target(container) -> None:
    client = TestClient(create_app(container))
    payload = {
        "bedtime_window": {"start": "22:00", "end": "23:00"},
        "wake_window": {"start": "06:00", "end": "08:00"},
        "target_duration_hours": 0,
    }

    response = client.put("/goal", json=payload, headers={"X-Api-Token": "api-token"})

    assert response.status_code == 422


def test_list_days_from_repository(container, session_repository) -> None:
    client = TestClient(create_app(container))
    first = _recent_day(3)
    second = _recent_day(2)
    session_repository.sessions = [
        night(first, (23, 30), (7, 30)),
        night(second, (23, 30), (4, 0)),
    ]

    response = client.get("/days")

    assert response.status_code == 200
    days = response.json()["days"]
    assert [d["date"] for d in days] == [second.isoformat(), first.isoformat()]
    assert [d["rating"] for d in days] == ["Not Meet", "Perfect"]


def test_latest_day(container, session_repository) -> None:
    client = TestClient(create_app(container))
    assert client.get("/days/latest").status_code == 404

    day = _recent_day(2)
    session_repository.sessions = [night(day, (23, 30), (7, 30))]

    response = client.get("/days/latest")

    assert response.status_code == 200
    assert response.json()["date"] == day.isoformat()


def test_day_detail(container, session_repository) -> None:
    client = TestClient(create_app(container))
    day = _recent_day(2)
    session_repository.sessions = [
        SleepSession(
            start=datetime.combine(day, time(23, 30), tzinfo=UTC),
            end=datetime.combine(day + timedelta(days=1), time(6, 30), tzinfo=UTC),
        )
    ]

    found = client.get(f"/days/{day.isoformat()}")
    missing = client.get(f"/days/{_recent_day(10).isoformat()}")

    assert found.status_code == 200
    assert found.json()["rating"] == "OK"
    assert missing.status_code == 404


def test_month_stats(container, session_repository) -> None:
    client = TestClient(create_app(container))
    day = _recent_day(2)
    session_repository.sessions = [night(day, (23, 30), (7, 30))]

    response = client.get(f"/days/stats/{day.year}/{day.month}")
    invalid = client.get(f"/days/stats/{day.year}/13")

    assert response.status_code == 200
    assert response.json()["perfect"] == 1
    assert response.json()["total"] == 1
    assert invalid.status_code == 422


def test_repository_failure_is_reported(container) -> None:
    container.sleep_day_service.repository = FailingSleepSessionRepository()
    client = TestClient(create_app(container))

    assert client.get("/days").status_code == 502
    assert client.get("/days/latest").status_code == 502
    assert client.get("/days/2024-05-10").status_code == 502


def test_manual_entry(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/days/manual",
        json={
            "day": "2024-05-10",
            "bedtime": "2024-05-10T22:30:00+00:00",
            "wake_time": "2024-05-11T06:30:00+00:00",
        },
    )
    invalid = client.post(
        "/days/manual",
        json={
            "day": "2024-05-10",
            "bedtime": "2024-05-10T22:30:00+00:00",
            "wake_time": "2024-05-10T21:30:00+00:00",
        },
    )

    assert response.status_code == 200
    assert response.json()["rating"] == "Perfect"
    assert response.json()["source"] == "Manual"
    assert invalid.status_code == 422
