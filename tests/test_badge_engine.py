from datetime import datetime, timedelta, timezone

from conftest import CITIZEN_ID, user_points
from domain.badges.entities.badge_entity import BADGE_CONFIGS, BadgeType
from domain.badges.services.badge_engine import BadgeEngine


def _report(created_at: datetime, author_id: str = CITIZEN_ID, status: str = "pending") -> dict:
    return {
        "author_id": author_id,
        "title": "Pothole",
        "description": "Deep pothole",
        "location": {"latitude": 10.0, "longitude": 10.0},
        "category": "pothole",
        "priority": "medium",
        "status": status,
        "created_at": created_at,
    }


def _held(badges_repo, user_id: str = CITIZEN_ID) -> list:
    return sorted(doc["badge_type"] for doc in badges_repo.documents if doc["user_id"] == user_id)


async def test_first_report_badge(badge_engine, reports_repo, badges_repo, users_repo, clock):
    await reports_repo.insert_one(_report(clock()))

    granted = await badge_engine.evaluate_after_submission(CITIZEN_ID)

    assert [badge.badge_type for badge in granted] == ["first_report"]
    assert user_points(users_repo) == BADGE_CONFIGS[BadgeType.FIRST_REPORT].points
    user = users_repo.documents[0]
    assert user["badges"] == [granted[0].id]


async def test_evaluating_same_state_twice_grants_once(badge_engine, reports_repo, badges_repo, users_repo, clock):
    await reports_repo.insert_one(_report(clock()))

    await badge_engine.evaluate_after_submission(CITIZEN_ID)
    second = await badge_engine.evaluate_after_submission(CITIZEN_ID)

    assert second == []
    assert _held(badges_repo) == ["first_report"]
    assert user_points(users_repo) == 5


async def test_racing_grants_leave_one_badge(badge_engine, badges_repo, users_repo):
    first = await badge_engine.grant(CITIZEN_ID, BadgeType.PROBLEM_SOLVER)
    second = await badge_engine.grant(CITIZEN_ID, BadgeType.PROBLEM_SOLVER)

    assert first is not None
    assert second is None
    assert _held(badges_repo) == ["problem_solver"]
    assert user_points(users_repo) == 25


async def test_milestones_fire_on_exact_count(badge_engine, reports_repo, badges_repo, clock):
    # six reports without ever evaluating at five: no problem_solver
    for day in range(6):
        await reports_repo.insert_one(_report(clock() - timedelta(days=day + 1)))

    granted = await badge_engine.evaluate_after_submission(CITIZEN_ID)

    assert granted == []
    assert _held(badges_repo) == []


async def test_quick_reporter_on_third_report_today(badge_engine, reports_repo, badges_repo, clock):
    await reports_repo.insert_one(_report(clock() - timedelta(days=3)))
    for minutes in (60, 30, 0):
        await reports_repo.insert_one(_report(clock() - timedelta(minutes=minutes)))

    granted = await badge_engine.evaluate_after_submission(CITIZEN_ID)

    assert [badge.badge_type for badge in granted] == ["quick_reporter"]


async def test_reporting_day_follows_configured_timezone(reports_repo, badges_repo, ledger):
    # 20:00 UTC is 01:30 on the next day in Kolkata; local midnight is 18:30 UTC
    now = datetime(2026, 3, 10, 20, 0, tzinfo=timezone.utc)
    for hour, minute in ((18, 0), (18, 45), (19, 0)):
        await reports_repo.insert_one(_report(now.replace(hour=hour, minute=minute)))

    kolkata = BadgeEngine(reports_repo, badges_repo, ledger, clock=lambda: now, timezone_name="Asia/Kolkata")
    assert await kolkata.evaluate_after_submission(CITIZEN_ID) == []

    utc = BadgeEngine(reports_repo, badges_repo, ledger, clock=lambda: now, timezone_name="UTC")
    granted = await utc.evaluate_after_submission(CITIZEN_ID)
    assert [badge.badge_type for badge in granted] == ["quick_reporter"]


async def test_city_improver_after_fifth_resolution(badge_engine, reports_repo, badges_repo, users_repo, clock):
    for day in range(5):
        await reports_repo.insert_one(_report(clock() - timedelta(days=day + 1), status="resolved"))

    granted = await badge_engine.evaluate_after_resolution(CITIZEN_ID)

    assert [badge.badge_type for badge in granted] == ["city_improver"]
    assert user_points(users_repo) == 40


async def test_other_users_reports_do_not_count(badge_engine, reports_repo, badges_repo, clock):
    await reports_repo.insert_one(_report(clock(), author_id="someone-else"))

    assert await badge_engine.evaluate_after_submission(CITIZEN_ID) == []
