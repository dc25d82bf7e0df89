"""Tests for the plan fee generator."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from billrun.models.fee import FeeKind
from billrun.services.fee_generator import PlanFeeGenerator, allocate_taxes, tax_amount_cents


class TestTaxAmountCents:
    def test_whole_amount(self):
        assert tax_amount_cents(1000, Decimal("20")) == 200

    def test_rounds_half_up(self):
        # 25 * 10% = 2.5
        assert tax_amount_cents(25, Decimal("10")) == 3

    def test_fractional_rate(self):
        # 999 * 5.5% = 54.945
        assert tax_amount_cents(999, Decimal("5.5")) == 55

    def test_zero_amount(self):
        assert tax_amount_cents(0, Decimal("20")) == 0


class TestAllocateTaxes:
    def test_one_allocation_per_tax(self, make_tax):
        vat = make_tax("vat", "10")
        local = make_tax("local", "12")

        allocations = allocate_taxes(1000, [vat, local])

        assert [a.tax_id for a in allocations] == [vat.id, local.id]
        assert [a.amount_cents for a in allocations] == [100, 120]
        assert allocations[1].tax_rate == Decimal("12")

    def test_no_taxes(self):
        assert allocate_taxes(1000, []) == []


class TestPlanFeeGenerator:
    def test_single_subscription_fee(self, db_session, make_plan, make_subscription, make_tax):
        plan = make_plan(amount_cents=4900)
        sub = make_subscription(plan)
        make_tax("vat", "20", applied_by_default=True)
        make_tax("optional", "5")

        fees = PlanFeeGenerator(db_session).generate(
            sub, plan, date(2024, 1, 1), date(2024, 1, 31)
        )

        assert len(fees) == 1
        fee = fees[0]
        assert fee.kind == FeeKind.SUBSCRIPTION
        assert fee.subscription_id == sub.id
        assert fee.amount_cents == 4900
        assert fee.description == f"{plan.name} (2024-01-01 - 2024-01-31)"
        assert [a.amount_cents for a in fee.applied_taxes] == [980]

    def test_no_default_taxes(self, db_session):
        plan = SimpleNamespace(amount_cents=None, name="Free")
        sub = SimpleNamespace(id="5b1c6a1e-8c5d-4d7a-9d8a-0f2f4e5b6c7d")

        fees = PlanFeeGenerator(db_session).generate(
            sub, plan, date(2024, 1, 1), date(2024, 1, 31)
        )

        assert fees[0].amount_cents == 0
        assert fees[0].applied_taxes == []
