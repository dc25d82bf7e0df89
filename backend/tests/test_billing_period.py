"""Tests for BillingPeriodResolver period calculations."""

import uuid
from datetime import UTC, date, datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any

import pytest

from billrun.models.plan import PlanFrequency, PlanInterval
from billrun.models.subscription import SubscriptionStatus
from billrun.services.billing_period import (
    BillingPeriod,
    BillingPeriodResolver,
    _anniversary_period_start,
    _calendar_period_start,
    _day_in_month,
    _month_index,
)
from billrun.services.errors import PeriodResolutionError


@pytest.fixture
def resolver():
    return BillingPeriodResolver()


def _make_subscription(**kwargs: Any) -> Any:
    """Create a lightweight subscription-like object for pure-logic tests."""
    defaults = {
        "id": uuid.uuid4(),
        "anniversary_date": date(2023, 1, 10),
        "status": SubscriptionStatus.ACTIVE.value,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def _make_plan(**kwargs: Any) -> Any:
    defaults = {
        "interval": PlanInterval.MONTHLY.value,
        "frequency": PlanFrequency.BEGINNING_OF_PERIOD.value,
        "pay_in_advance": False,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def _anniversary_plan(interval: str = PlanInterval.MONTHLY.value, **kwargs: Any) -> Any:
    return _make_plan(interval=interval, frequency=PlanFrequency.SUBSCRIPTION_DATE.value, **kwargs)


# ── Helper function tests ──────────────────────────────────────────


class TestDayInMonth:
    def test_basic(self):
        assert _day_in_month(_month_index(date(2025, 3, 1)), 15) == date(2025, 3, 15)

    def test_clamps_to_month_end(self):
        assert _day_in_month(_month_index(date(2025, 2, 1)), 31) == date(2025, 2, 28)

    def test_leap_year(self):
        assert _day_in_month(_month_index(date(2024, 2, 1)), 31) == date(2024, 2, 29)

    def test_year_rollover(self):
        assert _day_in_month(_month_index(date(2025, 12, 1)) + 1, 5) == date(2026, 1, 5)


class TestCalendarPeriodStart:
    def test_weekly_midweek(self):
        # 2025-03-12 is a Wednesday
        result = _calendar_period_start(date(2025, 3, 12), PlanInterval.WEEKLY.value)
        assert result == date(2025, 3, 10)

    def test_monthly(self):
        result = _calendar_period_start(date(2025, 3, 15), PlanInterval.MONTHLY.value)
        assert result == date(2025, 3, 1)

    def test_quarterly(self):
        result = _calendar_period_start(date(2025, 5, 20), PlanInterval.QUARTERLY.value)
        assert result == date(2025, 4, 1)

    def test_yearly(self):
        result = _calendar_period_start(date(2025, 8, 15), PlanInterval.YEARLY.value)
        assert result == date(2025, 1, 1)

    def test_unknown_interval(self):
        with pytest.raises(PeriodResolutionError, match="Unknown interval"):
            _calendar_period_start(date(2025, 1, 1), "biweekly")


class TestAnniversaryPeriodStart:
    def test_on_anniversary_day(self):
        result = _anniversary_period_start(
            date(2025, 3, 15), date(2023, 3, 15), PlanInterval.MONTHLY.value
        )
        assert result == date(2025, 3, 15)

    def test_before_anniversary_day_in_month(self):
        result = _anniversary_period_start(
            date(2025, 3, 10), date(2023, 3, 15), PlanInterval.MONTHLY.value
        )
        assert result == date(2025, 2, 15)

    def test_short_month_clamp(self):
        result = _anniversary_period_start(
            date(2025, 2, 28), date(2024, 1, 31), PlanInterval.MONTHLY.value
        )
        assert result == date(2025, 2, 28)

    def test_quarterly(self):
        result = _anniversary_period_start(
            date(2025, 4, 1), date(2024, 2, 10), PlanInterval.QUARTERLY.value
        )
        assert result == date(2025, 2, 10)

    def test_weekly(self):
        # 2025-03-05 is a Wednesday, 2025-03-20 a Thursday
        result = _anniversary_period_start(
            date(2025, 3, 20), date(2025, 3, 5), PlanInterval.WEEKLY.value
        )
        assert result == date(2025, 3, 19)

    def test_unknown_interval(self):
        with pytest.raises(PeriodResolutionError, match="Unknown interval"):
            _anniversary_period_start(date(2025, 1, 1), date(2024, 1, 1), "daily")


# ── Calendar-aligned periods ───────────────────────────────────────


class TestBeginningOfPeriod:
    def test_monthly_at_start_of_month(self, resolver):
        period = resolver.resolve(
            _make_subscription(), _make_plan(), datetime(2025, 3, 1, tzinfo=UTC)
        )

        assert period.to_date == date(2025, 2, 28)
        assert period.from_date == date(2025, 2, 1)

    def test_monthly_mid_month_truncates(self, resolver):
        period = resolver.resolve(
            _make_subscription(), _make_plan(), datetime(2025, 3, 15, 10, 30, tzinfo=UTC)
        )

        assert period.from_date == date(2025, 2, 1)
        assert period.to_date == date(2025, 2, 28)

    def test_yearly(self, resolver):
        plan = _make_plan(interval=PlanInterval.YEARLY.value)
        period = resolver.resolve(_make_subscription(), plan, datetime(2025, 1, 1, tzinfo=UTC))

        assert period.from_date == date(2024, 1, 1)
        assert period.to_date == date(2024, 12, 31)

    def test_quarterly(self, resolver):
        plan = _make_plan(interval=PlanInterval.QUARTERLY.value)
        period = resolver.resolve(_make_subscription(), plan, datetime(2025, 4, 1, tzinfo=UTC))

        assert period.from_date == date(2025, 1, 1)
        assert period.to_date == date(2025, 3, 31)

    def test_weekly(self, resolver):
        plan = _make_plan(interval=PlanInterval.WEEKLY.value)
        # 2025-03-10 is a Monday
        period = resolver.resolve(_make_subscription(), plan, datetime(2025, 3, 10, tzinfo=UTC))

        assert period.from_date == date(2025, 3, 3)
        assert period.to_date == date(2025, 3, 9)


# ── Anniversary-aligned periods ────────────────────────────────────


class TestSubscriptionDate:
    def test_monthly_on_anniversary(self, resolver):
        sub = _make_subscription(anniversary_date=date(2023, 3, 15))
        period = resolver.resolve(sub, _anniversary_plan(), datetime(2025, 3, 15, tzinfo=UTC))

        assert period.from_date == date(2025, 2, 15)
        assert period.to_date == date(2025, 3, 14)

    def test_monthly_mid_period(self, resolver):
        sub = _make_subscription(anniversary_date=date(2023, 3, 15))
        period = resolver.resolve(sub, _anniversary_plan(), datetime(2025, 3, 10, tzinfo=UTC))

        assert period.from_date == date(2025, 1, 15)
        assert period.to_date == date(2025, 2, 14)

    def test_monthly_end_of_month_anchor_in_february(self, resolver):
        sub = _make_subscription(anniversary_date=date(2024, 1, 31))
        period = resolver.resolve(sub, _anniversary_plan(), datetime(2025, 2, 28, tzinfo=UTC))

        assert period.from_date == date(2025, 1, 31)
        assert period.to_date == date(2025, 2, 27)

    def test_monthly_end_of_month_anchor_after_february(self, resolver):
        sub = _make_subscription(anniversary_date=date(2024, 1, 31))
        period = resolver.resolve(sub, _anniversary_plan(), datetime(2025, 3, 31, tzinfo=UTC))

        assert period.from_date == date(2025, 2, 28)
        assert period.to_date == date(2025, 3, 30)

    def test_yearly(self, resolver):
        sub = _make_subscription(anniversary_date=date(2023, 6, 15))
        plan = _anniversary_plan(PlanInterval.YEARLY.value)
        period = resolver.resolve(sub, plan, datetime(2025, 6, 15, tzinfo=UTC))

        assert period.from_date == date(2024, 6, 15)
        assert period.to_date == date(2025, 6, 14)

    def test_yearly_leap_day_anchor(self, resolver):
        sub = _make_subscription(anniversary_date=date(2024, 2, 29))
        plan = _anniversary_plan(PlanInterval.YEARLY.value)
        period = resolver.resolve(sub, plan, datetime(2025, 2, 28, tzinfo=UTC))

        assert period.from_date == date(2024, 2, 29)
        assert period.to_date == date(2025, 2, 27)

    def test_quarterly(self, resolver):
        sub = _make_subscription(anniversary_date=date(2024, 2, 10))
        plan = _anniversary_plan(PlanInterval.QUARTERLY.value)
        period = resolver.resolve(sub, plan, datetime(2025, 2, 10, tzinfo=UTC))

        assert period.from_date == date(2024, 11, 10)
        assert period.to_date == date(2025, 2, 9)

    def test_weekly(self, resolver):
        sub = _make_subscription(anniversary_date=date(2025, 3, 5))
        plan = _anniversary_plan(PlanInterval.WEEKLY.value)
        period = resolver.resolve(sub, plan, datetime(2025, 3, 20, tzinfo=UTC))

        assert period.from_date == date(2025, 3, 12)
        assert period.to_date == date(2025, 3, 18)


# ── First period, issuance, status ─────────────────────────────────


class TestFirstPeriodClamp:
    def test_monthly_started_three_days_before_period_start(self, resolver):
        billing_at = datetime(2025, 3, 1, tzinfo=UTC)
        sub = _make_subscription(anniversary_date=(billing_at - timedelta(days=3)).date())

        period = resolver.resolve(sub, _make_plan(), billing_at)

        assert period.from_date == date(2025, 2, 26)
        assert period.from_date == sub.anniversary_date
        assert period.to_date == date(2025, 2, 28)

    def test_yearly_first_year(self, resolver):
        sub = _make_subscription(anniversary_date=date(2024, 9, 1))
        plan = _make_plan(interval=PlanInterval.YEARLY.value)

        period = resolver.resolve(sub, plan, datetime(2025, 1, 1, tzinfo=UTC))

        assert period.from_date == date(2024, 9, 1)
        assert period.to_date == date(2024, 12, 31)

    def test_no_clamp_after_first_period(self, resolver):
        sub = _make_subscription(anniversary_date=date(2025, 1, 20))

        period = resolver.resolve(sub, _make_plan(), datetime(2025, 3, 1, tzinfo=UTC))

        assert period.from_date == date(2025, 2, 1)


class TestIssuingDate:
    def test_pay_in_advance_issues_at_period_start(self, resolver):
        plan = _make_plan(pay_in_advance=True)
        period = resolver.resolve(_make_subscription(), plan, datetime(2025, 3, 1, tzinfo=UTC))

        assert period.issuing_date == date(2025, 3, 1)

    def test_pay_in_arrears_issues_at_period_end(self, resolver):
        plan = _make_plan(pay_in_advance=False)
        period = resolver.resolve(_make_subscription(), plan, datetime(2025, 3, 1, tzinfo=UTC))

        assert period.issuing_date == date(2025, 2, 28)
        assert period.issuing_date == period.to_date

    def test_same_period_for_advance_and_arrears(self, resolver):
        billing_at = datetime(2025, 3, 1, tzinfo=UTC)
        advance = resolver.resolve(_make_subscription(), _make_plan(pay_in_advance=True), billing_at)
        arrears = resolver.resolve(_make_subscription(), _make_plan(), billing_at)

        assert (advance.from_date, advance.to_date) == (arrears.from_date, arrears.to_date)


class TestResolveInputs:
    def test_terminated_subscription_resolves_like_active(self, resolver):
        billing_at = datetime(2025, 3, 1, tzinfo=UTC)
        active = resolver.resolve(_make_subscription(), _make_plan(), billing_at)
        terminated = resolver.resolve(
            _make_subscription(status=SubscriptionStatus.TERMINATED.value), _make_plan(), billing_at
        )

        assert terminated == active

    def test_repeated_calls_are_identical(self, resolver):
        sub = _make_subscription()
        plan = _make_plan()
        billing_at = datetime(2025, 3, 1, tzinfo=UTC)

        assert resolver.resolve(sub, plan, billing_at) == resolver.resolve(sub, plan, billing_at)
        assert sub.anniversary_date == date(2023, 1, 10)

    def test_naive_instant_is_utc(self, resolver):
        period = resolver.resolve(_make_subscription(), _make_plan(), datetime(2025, 3, 1))

        assert period == BillingPeriod(
            from_date=date(2025, 2, 1),
            to_date=date(2025, 2, 28),
            issuing_date=date(2025, 2, 28),
        )

    def test_instant_is_converted_to_utc(self, resolver):
        # 01:00 at UTC+2 is still February 28th in UTC
        billing_at = datetime(2025, 3, 1, 1, 0, tzinfo=timezone(timedelta(hours=2)))
        period = resolver.resolve(_make_subscription(), _make_plan(), billing_at)

        assert period.from_date == date(2025, 1, 1)
        assert period.to_date == date(2025, 1, 31)

    def test_plan_with_enum_members(self, resolver):
        plan = _make_plan(
            interval=PlanInterval.MONTHLY, frequency=PlanFrequency.BEGINNING_OF_PERIOD
        )
        sub = _make_subscription(anniversary_date=date(2024, 1, 1))

        period = resolver.resolve(sub, plan, datetime(2024, 3, 1, tzinfo=UTC))

        assert period.from_date == date(2024, 2, 1)
        assert period.to_date == date(2024, 2, 29)

    def test_anniversary_plan_with_enum_members(self, resolver):
        plan = _make_plan(
            interval=PlanInterval.QUARTERLY, frequency=PlanFrequency.SUBSCRIPTION_DATE
        )
        sub = _make_subscription(anniversary_date=date(2024, 2, 10))

        period = resolver.resolve(sub, plan, datetime(2025, 2, 10, tzinfo=UTC))

        assert period.from_date == date(2024, 11, 10)
        assert resolver.is_billing_day(sub, plan, date(2025, 2, 10)) is True

    def test_missing_anniversary_date(self, resolver):
        sub = _make_subscription(anniversary_date=None)
        with pytest.raises(PeriodResolutionError, match="no anniversary date"):
            resolver.resolve(sub, _make_plan(), datetime(2025, 3, 1, tzinfo=UTC))

    def test_unknown_interval(self, resolver):
        with pytest.raises(PeriodResolutionError, match="Unknown interval"):
            resolver.resolve(
                _make_subscription(), _make_plan(interval="daily"), datetime(2025, 3, 1, tzinfo=UTC)
            )

    def test_unknown_frequency(self, resolver):
        with pytest.raises(PeriodResolutionError, match="Unknown frequency"):
            resolver.resolve(
                _make_subscription(),
                _make_plan(frequency="end_of_period"),
                datetime(2025, 3, 1, tzinfo=UTC),
            )


class TestContiguousPeriods:
    def test_anniversary_periods_have_no_gaps_or_overlaps(self, resolver):
        anchor = date(2024, 1, 31)
        sub = _make_subscription(anniversary_date=anchor)
        plan = _anniversary_plan()

        boundaries = [_day_in_month(_month_index(anchor) + k, anchor.day) for k in range(1, 15)]
        periods = [
            resolver.resolve(sub, plan, datetime.combine(b, datetime.min.time(), UTC))
            for b in boundaries
        ]

        assert periods[0].from_date == anchor
        for previous, current in zip(periods, periods[1:], strict=False):
            assert current.from_date == previous.to_date + timedelta(days=1)

    def test_calendar_periods_have_no_gaps_or_overlaps(self, resolver):
        sub = _make_subscription(anniversary_date=date(2024, 5, 17))
        plan = _make_plan()

        periods = [
            resolver.resolve(sub, plan, datetime(2024 + (m // 12), m % 12 + 1, 1, tzinfo=UTC))
            for m in range(5, 20)
        ]

        assert periods[0].from_date == date(2024, 5, 17)
        assert periods[0].to_date == date(2024, 5, 31)
        for previous, current in zip(periods, periods[1:], strict=False):
            assert current.from_date == previous.to_date + timedelta(days=1)


class TestIsBillingDay:
    def test_calendar_month_start(self, resolver):
        sub = _make_subscription(anniversary_date=date(2025, 1, 15))

        assert resolver.is_billing_day(sub, _make_plan(), date(2025, 2, 1)) is True
        assert resolver.is_billing_day(sub, _make_plan(), date(2025, 2, 2)) is False

    def test_before_anniversary(self, resolver):
        sub = _make_subscription(anniversary_date=date(2025, 1, 15))

        assert resolver.is_billing_day(sub, _make_plan(), date(2025, 1, 1)) is False

    def test_anniversary_day_itself_is_not_due(self, resolver):
        sub = _make_subscription(anniversary_date=date(2025, 1, 31))

        assert resolver.is_billing_day(sub, _anniversary_plan(), date(2025, 1, 31)) is False

    def test_anniversary_clamped_day(self, resolver):
        sub = _make_subscription(anniversary_date=date(2025, 1, 31))

        assert resolver.is_billing_day(sub, _anniversary_plan(), date(2025, 2, 28)) is True
        assert resolver.is_billing_day(sub, _anniversary_plan(), date(2025, 2, 27)) is False
