import pytest

from common.exceptions.base_exception import ValidationException
from conftest import CITIZEN_ID, spread_coordinates
from domain.reports.services.query_service import ReportQueryService

REPORTS = [
    ("Large pothole on Main Road", "Deep pothole near the bus stop", "Main Road"),
    ("Streetlight out", "Dark corner since Monday", "Lake View (North)"),
    ("Overflowing garbage bin", "Trash everywhere", None),
]


@pytest.fixture
async def seeded(intake_service, clock):
    for (title, description, address), (latitude, longitude) in zip(REPORTS, spread_coordinates(len(REPORTS))):
        await intake_service.submit(
            author_id=CITIZEN_ID,
            title=title,
            description=description,
            latitude=latitude,
            longitude=longitude,
            address=address,
        )
        clock.advance(minutes=1)


@pytest.fixture
def query_service(reports_repo):
    return ReportQueryService(reports_repo)


async def test_search_matches_any_text_field_case_insensitively(query_service, seeded):
    by_title = await query_service.search_reports("POTHOLE")
    by_description = await query_service.search_reports("trash")
    by_address = await query_service.search_reports("main road")

    assert [item["title"] for item in by_title["items"]] == ["Large pothole on Main Road"]
    assert [item["title"] for item in by_description["items"]] == ["Overflowing garbage bin"]
    assert by_address["meta"]["total"] == 1


async def test_search_treats_input_as_literal_text(query_service, seeded):
    result = await query_service.search_reports("(North)")
    nothing = await query_service.search_reports(".*")

    assert [item["title"] for item in result["items"]] == ["Streetlight out"]
    assert nothing["meta"]["total"] == 0


async def test_search_combines_with_filters(query_service, seeded):
    result = await query_service.search_reports("o", category="garbage")

    assert [item["category"] for item in result["items"]] == ["garbage"]


async def test_search_results_are_newest_first(query_service, seeded):
    result = await query_service.search_reports("e")

    assert [item["title"] for item in result["items"]] == [title for title, _, _ in reversed(REPORTS)]


@pytest.mark.parametrize("text", [None, "", "   "])
async def test_blank_search_is_rejected(query_service, text):
    with pytest.raises(ValidationException) as exc_info:
        await query_service.search_reports(text)

    assert exc_info.value.error_code == "SEARCH_QUERY_REQUIRED"
