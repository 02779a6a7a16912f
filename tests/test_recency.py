from datetime import date, datetime, timedelta

import pytest

from rentaldocs.compliance.recency import is_within_window, parse_date, subtract_months, window_start

REFERENCE = date(2024, 6, 15)


def test_reference_date_itself_is_within_window():
    assert is_within_window(REFERENCE, REFERENCE) is True


def test_window_start_is_inclusive():
    assert is_within_window(date(2024, 3, 15), REFERENCE) is True


def test_one_day_before_window_start_is_outside():
    assert is_within_window(date(2024, 3, 14), REFERENCE) is False


def test_one_day_after_reference_is_outside():
    assert is_within_window(date(2024, 6, 16), REFERENCE) is False


def test_four_months_old_document_is_stale():
    assert is_within_window(date(2024, 2, 15), REFERENCE) is False


@pytest.mark.parametrize("reference,expected", [
    (date(2024, 5, 31), date(2024, 2, 29)),
    (date(2023, 5, 31), date(2023, 2, 28)),
    (date(2024, 1, 31), date(2023, 10, 31)),
    (date(2024, 12, 31), date(2024, 9, 30)),
])
def test_subtract_months_clamps_to_month_end(reference, expected):
    assert subtract_months(reference, 3) == expected


def test_clamped_window_start_is_accepted():
    assert is_within_window(date(2024, 2, 29), date(2024, 5, 31)) is True
    assert is_within_window(date(2024, 2, 28), date(2024, 5, 31)) is False


@pytest.mark.parametrize("issue", [None, "", "   ", "not a date", "31/31/2024", 12345])
def test_absent_or_unparseable_issue_date_is_never_valid(issue):
    assert is_within_window(issue, REFERENCE) is False


def test_unparseable_reference_date_is_never_valid():
    assert is_within_window(REFERENCE, "yesterday") is False


@pytest.mark.parametrize("value", [
    "2024-04-15",
    "15/04/2024",
    "2024-04-15T09:30:00Z",
    datetime(2024, 4, 15, 9, 30),
])
def test_parse_date_accepts_common_formats(value):
    assert parse_date(value) == date(2024, 4, 15)


def test_string_dates_compare_like_date_objects():
    assert is_within_window("2024-04-01", "2024-06-15") is True
    assert is_within_window("01/01/2024", "15/06/2024") is False


def test_monotone_as_issue_date_moves_later():
    results = []
    day = REFERENCE - timedelta(days=150)
    while day <= REFERENCE + timedelta(days=5):
        results.append(is_within_window(day, REFERENCE))
        day += timedelta(days=1)

    first_valid = results.index(True)
    last_valid = len(results) - 1 - results[::-1].index(True)
    assert not any(results[:first_valid])
    assert all(results[first_valid:last_valid + 1])
    assert not any(results[last_valid + 1:])


def test_wider_window_accepts_everything_a_narrower_one_does():
    for offset in range(0, 200, 7):
        issue = REFERENCE - timedelta(days=offset)
        if is_within_window(issue, REFERENCE, 3):
            assert is_within_window(issue, REFERENCE, 6)


def test_window_start_helper():
    assert window_start("2024-06-15") == date(2024, 3, 15)
    assert window_start(None) is None
