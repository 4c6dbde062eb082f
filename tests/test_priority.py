from domain.reports.entities.report_entity import ReportCategory, ReportPriority
from domain.reports.services.priority import assign_priority, has_urgent_keyword


def test_urgent_keyword_forces_high_priority():
    assert assign_priority("Garbage pile", "Right next to the school gate", ReportCategory.GARBAGE) == ReportPriority.HIGH


def test_category_mapping_without_urgent_keyword():
    assert assign_priority("Overflowing bin", "Smells bad", ReportCategory.GARBAGE) == ReportPriority.LOW
    assert assign_priority("Pothole", "Deep one", ReportCategory.POTHOLE) == ReportPriority.MEDIUM
    assert assign_priority("Lamp out", "Dark corner", ReportCategory.STREETLIGHT) == ReportPriority.MEDIUM


def test_high_priority_categories():
    assert assign_priority("Loose wire", "Near the corner", ReportCategory.SAFETY) == ReportPriority.HIGH
    assert assign_priority("Faded sign", "Hard to read", ReportCategory.TRAFFIC) == ReportPriority.HIGH


def test_category_given_as_string():
    assert assign_priority("Leaking", "Slow drip", "water") == ReportPriority.MEDIUM


def test_unknown_category_is_low():
    assert assign_priority("Something", "Odd", "spaceship") == ReportPriority.LOW


def test_multi_word_urgent_keyword():
    assert has_urgent_keyword("smell of gas leak near the market")
    assert not has_urgent_keyword("gas station is closed")
