from datetime import datetime, timedelta

import pytest

from nodekit.cronexpr import CronExpr, parse_cron_field


def _bits(mask, upper=64):
    return {i for i in range(upper) if (mask >> i) & 1}


def test_star_day_of_month_mask():
    assert parse_cron_field("*", 1, 31) == 0xFFFFFFFE


def test_star_day_of_week_mask():
    assert parse_cron_field("*", 0, 6) == 0x7F


def test_single_value():
    assert _bits(parse_cron_field("5", 0, 59)) == {5}


def test_range():
    assert _bits(parse_cron_field("1-3", 0, 59)) == {1, 2, 3}


def test_step_from_star():
    assert _bits(parse_cron_field("*/15", 0, 59)) == {0, 15, 30, 45}


def test_start_with_step_runs_to_max():
    assert _bits(parse_cron_field("10/20", 0, 59)) == {10, 30, 50}


def test_range_with_step():
    assert _bits(parse_cron_field("1-10/3", 0, 59)) == {1, 4, 7, 10}


def test_list():
    assert _bits(parse_cron_field("1,5,7-8", 0, 59)) == {1, 5, 7, 8}


@pytest.mark.parametrize(
    "field, message",
    [
        ("1/2/3", "too many slashes"),
        ("1-2-3", "too many hyphens"),
        ("*-5", "invalid range"),
        ("a", "invalid range"),
        ("1-b", "invalid range"),
        ("5-1", "invalid range"),
        ("60", "out of range"),
        ("*/0", "invalid increment"),
        ("*/x", "invalid increment"),
    ],
)
def test_bad_fields(field, message):
    with pytest.raises(ValueError, match=message):
        parse_cron_field(field, 0, 59)


def test_below_minimum():
    with pytest.raises(ValueError, match="out of range"):
        parse_cron_field("0", 1, 31)


def test_wrong_field_count():
    with pytest.raises(ValueError, match="expected 5 or 6 fields"):
        CronExpr("* * *")


def test_bad_field_wrapped():
    with pytest.raises(ValueError, match="invalid expr"):
        CronExpr("* * * * 13")


def test_every_second():
    moment = datetime(2024, 3, 10, 8, 15, 20, 500000)
    assert CronExpr("* * * * * *").next(moment) == moment.replace(microsecond=0) + timedelta(seconds=1)


def test_daily_time():
    moment = datetime(2024, 3, 10, 12, 0, 0)
    result = CronExpr("0 30 9 * * *").next(moment)
    assert (result.hour, result.minute, result.second) == (9, 30, 0)
    assert moment < result <= moment + timedelta(days=1)


def test_five_fields_equal_six_with_zero_seconds():
    moment = datetime(2024, 5, 17, 23, 59, 59)
    assert CronExpr("30 9 * * *").next(moment) == CronExpr("0 30 9 * * *").next(moment)


def test_year_wrap():
    moment = datetime(2024, 7, 4, 10, 0, 0)
    result = CronExpr("0 0 0 1 1 *").next(moment)
    assert (result.year, result.month, result.day) == (moment.year + 1, 1, 1)
    assert (result.hour, result.minute, result.second) == (0, 0, 0)


def test_impossible_date_gives_none():
    assert CronExpr("0 0 0 30 2 *").next(datetime(2024, 1, 1)) is None


def test_day_of_month_or_day_of_week():
    moment = datetime(2024, 1, 2, 12, 0, 0)
    result = CronExpr("0 0 0 1 * 1").next(moment)
    assert result > moment
    assert result.day == 1 or result.weekday() == 0
    assert result - moment < timedelta(days=8)


def test_next_is_strictly_later_and_matches():
    expr = CronExpr("*/10 5 * * * *")
    moment = datetime(2024, 2, 28, 23, 5, 55)
    result = expr.next(moment)
    assert result > moment
    assert result.minute == 5
    assert result.second % 10 == 0