from __future__ import annotations

import math
from datetime import datetime, timedelta

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from timekeeping.accounting.calculator.standard_calculator import StandardDurationCalculator


def test_pause_is_subtracted_from_morning_session():
    breakdown = StandardDurationCalculator().breakdown(
        datetime(2026, 2, 2, 9, 0), datetime(2026, 2, 2, 12, 0), timedelta(minutes=15)
    )

    assert breakdown.gross_minutes == 180
    assert breakdown.paused_minutes == 15
    assert breakdown.billable_minutes == 165
    assert breakdown.lunch_deducted is False


def test_lunch_and_pause_are_both_subtracted():
    breakdown = StandardDurationCalculator().breakdown(
        datetime(2026, 2, 2, 8, 0), datetime(2026, 2, 2, 17, 0), timedelta(minutes=20)
    )

    assert breakdown.lunch_adjusted_minutes == 8 * 60
    assert breakdown.billable_minutes == 8 * 60 - 20
    assert breakdown.lunch_deducted is True


def test_overnight_session_subtracts_only_pause():
    breakdown = StandardDurationCalculator().breakdown(
        datetime(2026, 2, 2, 23, 0), datetime(2026, 2, 3, 1, 0), timedelta(minutes=10)
    )

    assert breakdown.billable_minutes == 110
    assert breakdown.lunch_deducted is False


def test_billable_minutes_never_negative():
    breakdown = StandardDurationCalculator().breakdown(
        datetime(2026, 2, 2, 9, 0), datetime(2026, 2, 2, 9, 30), timedelta(hours=2)
    )

    assert breakdown.billable_minutes == 0


def _expected_minutes(start: datetime, end: datetime, paused: timedelta) -> int:
    # Independent restatement of the rule, in seconds arithmetic.
    def rnd(seconds: float) -> int:
        return math.floor(seconds / 60 + 0.5)

    if end <= start:
        return 0
    gross = rnd((end - start).total_seconds())
    if start.date() == end.date():
        lunch_start = start.replace(hour=12, minute=0, second=0, microsecond=0)
        lunch_end = start.replace(hour=13, minute=0, second=0, microsecond=0)
        overlap = max(0.0, (min(end, lunch_end) - max(start, lunch_start)).total_seconds())
        gross = max(0, gross - rnd(overlap))
    return max(0, gross - rnd(paused.total_seconds()))


_starts = st.datetimes(min_value=datetime(2025, 1, 1), max_value=datetime(2027, 12, 31))
_spans = st.timedeltas(min_value=timedelta(0), max_value=timedelta(hours=30))


@settings(max_examples=200, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(start=_starts, span=_spans, pause_fraction=st.floats(min_value=0, max_value=1))
def test_finalized_minutes_match_independent_recomputation(make_engine, start, span, pause_fraction):
    engine, records, _, clock = make_engine(start)
    end = start + span
    paused = timedelta(seconds=span.total_seconds() * pause_fraction)

    engine.start(7, 1, now=start)
    if paused > timedelta(0):
        engine.pause(7, now=start)
        engine.resume(7, now=start + paused)
    record = engine.stop(7, now=end)

    assert record.end_time == end
    assert record.duration_minutes == _expected_minutes(start, end, paused)
    assert records.by_id[record.record_id].duration_minutes == record.duration_minutes
