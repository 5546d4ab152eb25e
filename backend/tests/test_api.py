"""
Little Stars - HTTP API Tests
"""
import uuid
from datetime import date

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test the health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"


@pytest.mark.asyncio
async def test_record_attempt(client: AsyncClient, child, sample_attempt):
    response = await client.post(f"/api/v1/progress/{child.id}", json=sample_attempt)
    assert response.status_code == 201
    data = response.json()
    assert data["child_id"] == str(child.id)
    assert data["content_type"] == "letter"
    assert data["attempts"] == 1
    assert data["stars_earned"] == 2
    assert data["best_score"] == 85
    assert data["time_spent_seconds"] == 90


@pytest.mark.asyncio
async def test_record_attempt_unknown_child(client: AsyncClient, sample_attempt):
    response = await client.post(f"/api/v1/progress/{uuid.uuid4()}", json=sample_attempt)
    assert response.status_code == 404
    assert "not found" in response.json()["detail"].lower()


@pytest.mark.asyncio
async def test_record_attempt_rejects_bad_score(client: AsyncClient, child, sample_attempt):
    sample_attempt["score"] = 120
    response = await client.post(f"/api/v1/progress/{child.id}", json=sample_attempt)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_record_attempt_rejects_unknown_content_type(client: AsyncClient, child, sample_attempt):
    sample_attempt["content_type"] = "color"
    response = await client.post(f"/api/v1/progress/{child.id}", json=sample_attempt)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_progress_reads(client: AsyncClient, child, sample_attempt):
    await client.post(f"/api/v1/progress/{child.id}", json=sample_attempt)
    sample_attempt.update(content_type="animal", content_id=4, score=100)
    await client.post(f"/api/v1/progress/{child.id}", json=sample_attempt)

    response = await client.get(f"/api/v1/progress/{child.id}")
    assert response.status_code == 200
    assert len(response.json()) == 2

    response = await client.get(f"/api/v1/progress/{child.id}/content/animal")
    assert response.status_code == 200
    assert [r["content_id"] for r in response.json()] == [4]

    response = await client.get(f"/api/v1/progress/{child.id}/summary")
    assert response.status_code == 200
    summary = response.json()
    assert summary["letters_learned"] == 1
    assert summary["animals_learned"] == 1
    assert summary["total_stars"] == 5
    assert summary["streak"] == 1


@pytest.mark.asyncio
async def test_leaderboard(client: AsyncClient, child, sample_attempt):
    await client.post(f"/api/v1/progress/{child.id}", json=sample_attempt)

    response = await client.get("/api/v1/progress/leaderboard", params={"limit": 5})
    assert response.status_code == 200
    assert response.json() == [{"child_id": str(child.id), "total_stars": 2}]

    response = await client.get("/api/v1/progress/leaderboard", params={"limit": 0})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_profile_endpoints(client: AsyncClient, child, sample_attempt):
    await client.post(f"/api/v1/progress/{child.id}", json=sample_attempt)

    response = await client.get(f"/api/v1/profile/{child.id}")
    assert response.status_code == 200
    profile = response.json()
    assert profile["level"] == 1
    assert profile["level_title"] == "Pemula"
    assert profile["total_stars"] == 2
    assert profile["stars_to_next_level"] == 48
    assert profile["favorite_module"] == "letter"
    assert profile["letters_progress"] == {"completed": 1, "total": 26}
    assert len(profile["recent_activity"]) == 1

    response = await client.get(f"/api/v1/profile/{child.id}/level")
    assert response.status_code == 200
    assert response.json() == {
        "level": 1,
        "title": "Pemula",
        "total_stars": 2,
        "stars_to_next_level": 48,
    }

    today = date.today()
    response = await client.get(
        f"/api/v1/profile/{child.id}/calendar",
        params={"start_date": today.isoformat(), "end_date": today.isoformat()},
    )
    assert response.status_code == 200
    days = response.json()
    assert len(days) == 1
    assert days[0]["date"] == today.isoformat()
    assert days[0]["lessons_completed"] == 1
    assert days[0]["minutes_played"] == 1


@pytest.mark.asyncio
async def test_calendar_rejects_inverted_range(client: AsyncClient, child):
    response = await client.get(
        f"/api/v1/profile/{child.id}/calendar",
        params={"start_date": "2024-12-09", "end_date": "2024-12-01"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_streak_endpoints(client: AsyncClient, child, sample_attempt):
    await client.post(f"/api/v1/progress/{child.id}", json=sample_attempt)
    month = date.today().strftime("%Y-%m")

    response = await client.get(f"/api/v1/profile/{child.id}/streak")
    assert response.status_code == 200
    report = response.json()
    assert report["month"] == month
    assert report["current_streak"] == 1
    assert report["total_active_days"] == 1
    assert report["status"] == "active"
    assert report["badge"] is None

    response = await client.get(
        f"/api/v1/profile/{child.id}/streak/calendar", params={"month": month}
    )
    assert response.status_code == 200
    calendar = response.json()
    assert calendar["stats"]["active_days"] == 1
    assert calendar["calendar"][date.today().isoformat()]["is_active"] is True


@pytest.mark.asyncio
async def test_streak_rejects_bad_month(client: AsyncClient, child):
    response = await client.get(f"/api/v1/profile/{child.id}/streak", params={"month": "2024-13"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_profile_unknown_child(client: AsyncClient):
    response = await client.get(f"/api/v1/profile/{uuid.uuid4()}")
    assert response.status_code == 404
