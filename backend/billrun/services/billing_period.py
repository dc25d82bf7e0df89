"""Billing period resolution.

Maps a subscription and a billing instant to the date range being invoiced
and the date the invoice is issued. Every function here is pure.

Caller contract: ``resolve`` is only invoked once a period is due, i.e. the
billing instant falls after the subscription's anniversary date. The resolver
does not guard against earlier instants.
"""

import calendar as cal
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Any

from billrun.models.plan import PlanFrequency, PlanInterval
from billrun.services.errors import PeriodResolutionError

_MONTHS_PER_INTERVAL = {
    PlanInterval.MONTHLY.value: 1,
    PlanInterval.QUARTERLY.value: 3,
    PlanInterval.YEARLY.value: 12,
}


@dataclass(frozen=True)
class BillingPeriod:
    """Inclusive date range billed by one invoice."""

    from_date: date
    to_date: date
    issuing_date: date


def _to_billing_date(instant: datetime | date) -> date:
    """Convert a billing instant to its UTC calendar date."""
    if isinstance(instant, datetime):
        # SQLite strips tz info; naive values are UTC
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        return instant.astimezone(UTC).date()
    return instant


def _month_index(day: date) -> int:
    return day.year * 12 + day.month - 1


def _day_in_month(month_index: int, day: int) -> date:
    """Build a date in the given month, clamping ``day`` to the month's length."""
    year, month = divmod(month_index, 12)
    month += 1
    return date(year, month, min(day, cal.monthrange(year, month)[1]))


def _calendar_period_start(reference: date, interval: str) -> date:
    """Get the start of the calendar period containing the reference date."""
    if interval == PlanInterval.WEEKLY.value:
        # Week starts on Monday
        return reference - timedelta(days=reference.weekday())
    elif interval == PlanInterval.MONTHLY.value:
        return reference.replace(day=1)
    elif interval == PlanInterval.QUARTERLY.value:
        quarter_start_month = ((reference.month - 1) // 3) * 3 + 1
        return reference.replace(month=quarter_start_month, day=1)
    elif interval == PlanInterval.YEARLY.value:
        return reference.replace(month=1, day=1)
    raise PeriodResolutionError(f"Unknown interval: {interval}")


def _anniversary_period_start(reference: date, anchor: date, interval: str) -> date:
    """Get the latest occurrence of the anchor at or before the reference date."""
    if interval == PlanInterval.WEEKLY.value:
        return reference - timedelta(days=(reference - anchor).days % 7)

    step = _MONTHS_PER_INTERVAL.get(interval)
    if step is None:
        raise PeriodResolutionError(f"Unknown interval: {interval}")

    anchor_index = _month_index(anchor)
    elapsed = _month_index(reference) - anchor_index
    offset = elapsed - elapsed % step
    candidate = _day_in_month(anchor_index + offset, anchor.day)
    if candidate > reference:
        candidate = _day_in_month(anchor_index + offset - step, anchor.day)
    return candidate


def _previous_period_start(period_start: date, anchor: date, frequency: str, interval: str) -> date:
    """Step one interval back from a period start, keeping the anchoring rule."""
    if interval == PlanInterval.WEEKLY.value:
        return period_start - timedelta(weeks=1)

    step = _MONTHS_PER_INTERVAL.get(interval)
    if step is None:
        raise PeriodResolutionError(f"Unknown interval: {interval}")

    # Anniversary anchors re-clamp from the anchor day so Jan 31 -> Feb 28 -> Mar 31
    day = anchor.day if frequency == PlanFrequency.SUBSCRIPTION_DATE.value else 1
    return _day_in_month(_month_index(period_start) - step, day)


def _plan_interval(plan: Any) -> str:
    try:
        return PlanInterval(plan.interval).value
    except ValueError as exc:
        raise PeriodResolutionError(f"Unknown interval: {plan.interval}") from exc


def _plan_frequency(plan: Any) -> str:
    try:
        return PlanFrequency(plan.frequency).value
    except ValueError as exc:
        raise PeriodResolutionError(f"Unknown frequency: {plan.frequency}") from exc


class BillingPeriodResolver:
    """Resolve billing periods for subscriptions."""

    def period_start(self, subscription: Any, plan: Any, reference: datetime | date) -> date:
        """Start of the period that begins at or before ``reference``."""
        anchor = self._anniversary_date(subscription)
        reference_date = _to_billing_date(reference)
        interval = _plan_interval(plan)
        frequency = _plan_frequency(plan)

        if frequency == PlanFrequency.BEGINNING_OF_PERIOD.value:
            return _calendar_period_start(reference_date, interval)
        if frequency == PlanFrequency.SUBSCRIPTION_DATE.value:
            return _anniversary_period_start(reference_date, anchor, interval)
        raise PeriodResolutionError(f"Unknown frequency: {frequency}")

    def resolve(self, subscription: Any, plan: Any, billing_instant: datetime) -> BillingPeriod:
        """Resolve the period billed at ``billing_instant``.

        Args:
            subscription: Subscription providing ``anniversary_date``.
            plan: The subscription's plan (interval, frequency, pay_in_advance).
            billing_instant: The instant the invoice is created for.

        Returns:
            The billed period. ``from_date`` never precedes the anniversary
            date, so the first invoice only covers the time since signup.
        """
        anchor = self._anniversary_date(subscription)
        period_end_exclusive = self.period_start(subscription, plan, billing_instant)
        to_date = period_end_exclusive - timedelta(days=1)

        from_date = _previous_period_start(
            period_end_exclusive, anchor, _plan_frequency(plan), _plan_interval(plan)
        )
        if from_date < anchor:
            from_date = anchor

        issuing_date = period_end_exclusive if plan.pay_in_advance else to_date
        return BillingPeriod(from_date=from_date, to_date=to_date, issuing_date=issuing_date)

    def is_billing_day(self, subscription: Any, plan: Any, on_date: date) -> bool:
        """Check whether a period boundary of the subscription falls on ``on_date``."""
        anchor = self._anniversary_date(subscription)
        if on_date <= anchor:
            return False
        return self.period_start(subscription, plan, on_date) == on_date

    def _anniversary_date(self, subscription: Any) -> date:
        anchor = subscription.anniversary_date
        if anchor is None:
            raise PeriodResolutionError(
                f"Subscription {subscription.id} has no anniversary date"
            )
        if isinstance(anchor, datetime):
            return anchor.date()
        return anchor
