from datetime import datetime, time, timedelta

import pytest

from timekeeping.accounting.calculator.standard_calculator import StandardDurationCalculator
from timekeeping.accounting.policy import WorkdayPolicy
from timekeeping.core.exceptions import ValidationError


def test_interval_overlapping_lunch_is_reduced_by_overlap():
    calc = StandardDurationCalculator()

    result = calc.adjust_for_lunch(datetime(2026, 2, 2, 11, 30), datetime(2026, 2, 2, 13, 30))

    assert result.minutes == 60
    assert result.lunch_deducted is True


def test_morning_interval_is_not_reduced():
    calc = StandardDurationCalculator()

    result = calc.adjust_for_lunch(datetime(2026, 2, 2, 9, 0), datetime(2026, 2, 2, 11, 0))

    assert result.minutes == 120
    assert result.lunch_deducted is False


def test_interval_inside_lunch_window_becomes_zero():
    calc = StandardDurationCalculator()

    result = calc.adjust_for_lunch(datetime(2026, 2, 2, 12, 10), datetime(2026, 2, 2, 12, 40))

    assert result.minutes == 0
    assert result.lunch_deducted is True


def test_partial_overlap_at_end_of_lunch():
    calc = StandardDurationCalculator()

    result = calc.adjust_for_lunch(datetime(2026, 2, 2, 12, 45), datetime(2026, 2, 2, 15, 0))

    assert result.minutes == 135 - 15
    assert result.lunch_deducted is True


def test_interval_touching_lunch_boundary_is_not_reduced():
    calc = StandardDurationCalculator()

    result = calc.adjust_for_lunch(datetime(2026, 2, 2, 13, 0), datetime(2026, 2, 2, 16, 0))

    assert result.minutes == 180
    assert result.lunch_deducted is False


def test_overlap_below_half_a_minute_rounds_to_no_deduction():
    calc = StandardDurationCalculator()

    result = calc.adjust_for_lunch(datetime(2026, 2, 2, 10, 0), datetime(2026, 2, 2, 12, 0, 20))

    assert result.minutes == 120
    assert result.lunch_deducted is False


def test_one_minute_overlap_is_charged():
    calc = StandardDurationCalculator()

    result = calc.adjust_for_lunch(datetime(2026, 2, 2, 10, 0), datetime(2026, 2, 2, 12, 1))

    assert result.minutes == 120
    assert result.lunch_deducted is True


def test_overnight_interval_never_deducts_lunch():
    calc = StandardDurationCalculator()

    result = calc.adjust_for_lunch(datetime(2026, 2, 2, 23, 0), datetime(2026, 2, 3, 1, 0))

    assert result.minutes == 120
    assert result.lunch_deducted is False


def test_multi_day_interval_spanning_a_lunch_is_not_split():
    calc = StandardDurationCalculator()

    result = calc.adjust_for_lunch(datetime(2026, 2, 2, 8, 0), datetime(2026, 2, 3, 14, 0))

    assert result.minutes == 30 * 60
    assert result.lunch_deducted is False


@pytest.mark.parametrize(
    "start,end",
    [
        (datetime(2026, 2, 2, 10, 0), datetime(2026, 2, 2, 10, 0)),
        (datetime(2026, 2, 2, 10, 0), datetime(2026, 2, 2, 9, 0)),
    ],
)
def test_degenerate_interval_is_zero(start, end):
    result = StandardDurationCalculator().adjust_for_lunch(start, end)

    assert result.minutes == 0
    assert result.lunch_deducted is False


def test_custom_lunch_window():
    policy = WorkdayPolicy(lunch_start=time(11, 30), lunch_end=time(12, 0))
    calc = StandardDurationCalculator(policy)

    result = calc.adjust_for_lunch(datetime(2026, 2, 2, 11, 0), datetime(2026, 2, 2, 13, 0))

    assert result.minutes == 90
    assert result.lunch_deducted is True


def test_policy_rejects_inverted_lunch_window():
    with pytest.raises(ValidationError):
        WorkdayPolicy(lunch_start=time(13, 0), lunch_end=time(12, 0))


def test_seconds_round_half_up_to_minutes():
    calc = StandardDurationCalculator()
    start = datetime(2026, 2, 2, 8, 0)

    assert calc.adjust_for_lunch(start, start + timedelta(seconds=90)).minutes == 2
    assert calc.adjust_for_lunch(start, start + timedelta(seconds=89)).minutes == 1
