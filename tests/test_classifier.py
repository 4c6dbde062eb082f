from domain.reports.entities.report_entity import ReportCategory
from domain.reports.services.classifier import classify, score_categories


def test_classify_pothole_report():
    assert classify("Large pothole on Main Road", "Deep pothole causing issues for cyclists") == ReportCategory.POTHOLE


def test_classify_is_case_insensitive():
    assert classify("BROKEN STREET LIGHT", "The LAMP is out and it is DARK") == ReportCategory.STREETLIGHT


def test_classify_picks_highest_score():
    # one pothole keyword ("street") against four streetlight keywords
    assert classify("Broken street light", "The lamp is dark at night") == ReportCategory.STREETLIGHT


def test_classify_tie_goes_to_first_declared_category():
    scores = score_categories("trash near the pipe")
    assert scores[ReportCategory.GARBAGE] == scores[ReportCategory.WATER] == 1
    assert classify("Trash near the pipe", "") == ReportCategory.GARBAGE


def test_classify_falls_back_to_other():
    assert classify("Hello", "Something odd here") == ReportCategory.OTHER


def test_classify_handles_empty_text():
    assert classify("", "") == ReportCategory.OTHER


def test_keyword_counts_once_even_if_repeated():
    scores = score_categories("pothole pothole pothole")
    # "pothole" and its substring "hole" both match, each once
    assert scores[ReportCategory.POTHOLE] == 2


def test_water_report():
    assert classify("Water leak", "Pipe burst, sewage overflow in the lane") == ReportCategory.WATER
