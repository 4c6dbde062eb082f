import pytest

from common.exceptions.base_exception import DuplicateReportException, StorageUnavailableException, ValidationException
from conftest import CITIZEN_ID, POTHOLE_DESCRIPTION, POTHOLE_TITLE, spread_coordinates, user_points
from domain.badges.entities.badge_entity import BADGE_CONFIGS, BadgeType
from domain.gamification.services.points_ledger import REPORT_SUBMITTED_POINTS


async def _submit_pothole(service, latitude=28.6139, longitude=77.2090, **overrides):
    fields = {
        "author_id": CITIZEN_ID,
        "title": POTHOLE_TITLE,
        "description": POTHOLE_DESCRIPTION,
        "latitude": latitude,
        "longitude": longitude,
    }
    fields.update(overrides)
    return await service.submit(**fields)


async def test_submit_classifies_and_awards_points(intake_service, reports_repo, users_repo, broadcaster):
    report = await _submit_pothole(intake_service)

    assert report.category == "pothole"
    assert report.priority == "medium"
    assert report.status == "pending"
    assert report.resolved_at is None
    assert len(reports_repo.documents) == 1
    assert reports_repo.documents[0]["_id"] == report.id

    first_badge = BADGE_CONFIGS[BadgeType.FIRST_REPORT].points
    assert user_points(users_repo) == REPORT_SUBMITTED_POINTS + first_badge

    assert broadcaster.topics() == ["new-report"]
    _, payload = broadcaster.events[0]
    assert payload["report_id"] == report.id
    assert payload["category"] == "pothole"
    assert payload["priority"] == "medium"
    assert payload["location"] == {"latitude": 28.6139, "longitude": 77.2090}


async def test_nearby_report_within_window_is_rejected(intake_service, reports_repo, users_repo, broadcaster, clock):
    first = await _submit_pothole(intake_service)
    points_before = user_points(users_repo)
    clock.advance(minutes=30)

    with pytest.raises(DuplicateReportException) as exc_info:
        await _submit_pothole(intake_service, latitude=28.6140, longitude=77.2091)

    assert exc_info.value.status_code == 409
    assert exc_info.value.error_code == "DUPLICATE_REPORT"
    assert exc_info.value.duplicate["id"] == first.id
    assert len(reports_repo.documents) == 1
    assert user_points(users_repo) == points_before
    assert broadcaster.topics() == ["new-report"]


async def test_duplicate_window_expires(intake_service, reports_repo, clock):
    await _submit_pothole(intake_service)
    clock.advance(hours=25)

    await _submit_pothole(intake_service, latitude=28.6140, longitude=77.2091)

    assert len(reports_repo.documents) == 2


async def test_same_spot_different_category_is_accepted(intake_service, reports_repo):
    await _submit_pothole(intake_service)

    report = await intake_service.submit(
        author_id=CITIZEN_ID,
        title="Overflowing garbage bin",
        description="Trash everywhere",
        latitude=28.6139,
        longitude=77.2090,
    )

    assert report.category == "garbage"
    assert len(reports_repo.documents) == 2


@pytest.mark.parametrize("overrides, error_code", [
    ({"title": "   "}, "TITLE_REQUIRED"),
    ({"description": None}, "DESCRIPTION_REQUIRED"),
    ({"latitude": None}, "LOCATION_REQUIRED"),
    ({"latitude": 95.0}, "LOCATION_INVALID"),
    ({"longitude": -181.0}, "LOCATION_INVALID"),
])
async def test_invalid_submission_writes_nothing(intake_service, reports_repo, users_repo, broadcaster, overrides, error_code):
    with pytest.raises(ValidationException) as exc_info:
        await _submit_pothole(intake_service, **overrides)

    assert exc_info.value.error_code == error_code
    assert exc_info.value.category == "validation"
    assert reports_repo.documents == []
    assert user_points(users_repo) == 0
    assert broadcaster.events == []


async def test_fifth_report_grants_problem_solver(intake_service, badges_repo, users_repo, clock):
    for latitude, longitude in spread_coordinates(5):
        await _submit_pothole(intake_service, latitude=latitude, longitude=longitude)
        clock.advance(days=1)

    held = {doc["badge_type"] for doc in badges_repo.documents}
    assert held == {"first_report", "problem_solver"}
    expected = (
        5 * REPORT_SUBMITTED_POINTS
        + BADGE_CONFIGS[BadgeType.FIRST_REPORT].points
        + BADGE_CONFIGS[BadgeType.PROBLEM_SOLVER].points
    )
    assert user_points(users_repo) == expected


async def test_secondary_failures_do_not_fail_submission(intake_service, reports_repo, users_repo, broadcaster):
    users_repo.fail_on.add("update_with_operators")
    broadcaster.fail = True

    report = await _submit_pothole(intake_service)

    assert report.id is not None
    assert len(reports_repo.documents) == 1
    assert user_points(users_repo) == 0
    assert broadcaster.events == []


async def test_badge_failure_does_not_block_broadcast(intake_service, badges_repo, broadcaster):
    badges_repo.fail_on.add("find")

    await _submit_pothole(intake_service)

    assert broadcaster.topics() == ["new-report"]


async def test_primary_write_failure_surfaces(intake_service, reports_repo, users_repo, broadcaster):
    reports_repo.fail_on.add("insert_one")

    with pytest.raises(StorageUnavailableException):
        await _submit_pothole(intake_service)

    assert user_points(users_repo) == 0
    assert broadcaster.events == []


async def test_duplicate_lookup_failure_surfaces(intake_service, reports_repo):
    reports_repo.fail_on.add("find")

    with pytest.raises(StorageUnavailableException):
        await _submit_pothole(intake_service)

    assert reports_repo.documents == []


async def test_submission_trims_text_and_blank_address(intake_service):
    report = await _submit_pothole(intake_service, title=f"  {POTHOLE_TITLE}  ", address="   ")

    assert report.title == POTHOLE_TITLE
    assert report.address is None


async def test_urgent_wording_raises_priority(intake_service):
    report = await _submit_pothole(intake_service, description="Pothole near the school, a child was hurt")

    assert report.category == "pothole"
    assert report.priority == "high"
