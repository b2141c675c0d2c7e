"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from moneytrack.utils.date_parser import get_date_range, parse_date, parse_month


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    assert parse_date("yesterday") == date.today() - timedelta(days=1)


def test_parse_tomorrow():
    """Test parsing 'tomorrow'."""
    assert parse_date("Tomorrow") == date.today() + timedelta(days=1)


def test_parse_last_month():
    """Test parsing 'last month'."""
    today = date.today()
    expected = (today - relativedelta(months=1)).replace(day=1)
    assert parse_date("last month") == expected


def test_parse_this_month():
    """Test parsing 'this month'."""
    today = date.today()
    assert parse_date("this month") == date(today.year, today.month, 1)


def test_parse_invalid_relative():
    """Test parsing invalid relative date."""
    with pytest.raises(ValueError):
        parse_date("last invalid")


def test_parse_standard_formats():
    """Test parsing various standard date formats."""
    assert parse_date("January 15, 2024") == date(2024, 1, 15)
    assert parse_date("15/01/2024") == date(2024, 1, 15)


def test_parse_day_first():
    """Test slash dates are read day first and ISO dates are unaffected."""
    assert parse_date("05/03/2024") == date(2024, 3, 5)
    assert parse_date("2024-03-05") == date(2024, 3, 5)


def test_parse_year_keywords_not_supported():
    """Test year-relative keywords are not accepted."""
    with pytest.raises(ValueError):
        parse_date("next year")


def test_parse_month_year_month():
    """Test parsing YYYY-MM month references."""
    assert parse_month("2024-03") == date(2024, 3, 1)
    assert parse_month("2024-3") == date(2024, 3, 1)


def test_parse_month_from_date():
    """Test a full date resolves to the first day of its month."""
    assert parse_month("2024-02-29") == date(2024, 2, 1)


def test_parse_month_relative():
    """Test relative month references."""
    assert parse_month("this month") == date.today().replace(day=1)


def test_parse_month_invalid_month():
    """Test month numbers outside 1-12 are rejected."""
    with pytest.raises(ValueError, match="between 1 and 12"):
        parse_month("2024-13")


def test_get_date_range_this_month():
    """Test get_date_range for this-month covers the whole month."""
    today = date.today()
    start, end = get_date_range("this-month")
    assert start == date(today.year, today.month, 1)
    assert end == start + relativedelta(months=1) - timedelta(days=1)


def test_get_date_range_last_month():
    """Test get_date_range for last-month."""
    today = date.today()
    start, end = get_date_range("last-month")
    expected_start = (today - relativedelta(months=1)).replace(day=1)
    expected_end = today.replace(day=1) - timedelta(days=1)
    assert start == expected_start
    assert end == expected_end
    assert end.month == expected_start.month
    assert end.year == expected_start.year


def test_get_date_range_invalid_period():
    """Test get_date_range with invalid period."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("invalid-period")
