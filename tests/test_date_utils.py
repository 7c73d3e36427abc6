import datetime

import pytest

import date_utils


def test_get_date_string_offsets_from_reference_day():
    ref = datetime.date(2025, 1, 30)
    assert date_utils.get_date_string(0, today=ref) == "2025-01-30"
    assert date_utils.get_date_string(3, today=ref) == "2025-02-02"
    assert date_utils.get_date_string(-30, today=ref) == "2024-12-31"
    assert date_utils.get_current_date_string(today=ref) == "2025-01-30"


def test_get_current_date_string_defaults_to_today():
    assert date_utils.get_current_date_string() == datetime.date.today().strftime("%Y-%m-%d")


def test_date_difference():
    assert date_utils.date_difference("2025-01-10", "2025-01-15") == 5
    assert date_utils.date_difference("2025-01-15", "2025-01-10") == -5
    assert date_utils.date_difference("2024-02-28", "2024-03-01") == 2
    with pytest.raises(ValueError):
        date_utils.date_difference("2025-13-01", "2025-01-01")


@pytest.mark.parametrize("value,expected", [
    ("2025-01-15", True),
    ("2024-02-29", True),
    ("2023-02-29", False),
    ("2025-04-31", False),
    ("1899-12-31", False),
    ("3000-12-31", True),
    ("3001-01-01", False),
    ("2025/01/15", False),
    ("", False),
    (None, False),
])
def test_is_valid_date_string(value, expected):
    assert date_utils.is_valid_date_string(value) is expected


def test_add_days_and_overdue():
    assert date_utils.add_days("2025-01-01", 14) == "2025-01-15"
    assert date_utils.calculate_overdue_days("2025-01-10", "2025-01-15") == 5
    assert date_utils.calculate_overdue_days("2025-01-10", "2025-01-08") == 0
    assert date_utils.calculate_overdue_days("2025-01-10", today=datetime.date(2025, 1, 12)) == 2
