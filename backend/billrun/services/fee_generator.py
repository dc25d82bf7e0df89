"""Fee generation for a billing period.

Pricing and proration live behind the ``FeeGenerator`` protocol. The
invoice creation flow only relies on each returned fee already carrying its
tax allocations.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol
from uuid import UUID

from sqlalchemy.orm import Session

from billrun.models.fee import FeeKind
from billrun.models.plan import Plan
from billrun.models.subscription import Subscription
from billrun.models.tax import Tax
from billrun.repositories.tax_repository import TaxRepository
from billrun.schemas.fee import FeeAppliedTaxCreate, FeeCreate


class FeeGenerator(Protocol):
    def generate(
        self,
        subscription: Subscription,
        plan: Plan,
        from_date: date,
        to_date: date,
    ) -> list[FeeCreate]: ...


def tax_amount_cents(amount_cents: int, rate: Decimal) -> int:
    """Amount of a percentage tax on a fee, rounded half-up to the cent."""
    amount = Decimal(amount_cents) * Decimal(str(rate)) / Decimal("100")
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def allocate_taxes(amount_cents: int, taxes: list[Tax]) -> list[FeeAppliedTaxCreate]:
    """Build the tax allocations of a fee."""
    return [
        FeeAppliedTaxCreate(
            tax_id=UUID(str(tax.id)),
            tax_rate=Decimal(str(tax.rate)),
            amount_cents=tax_amount_cents(amount_cents, Decimal(str(tax.rate))),
        )
        for tax in taxes
    ]


class PlanFeeGenerator:
    """Bill the plan's flat amount once per period, taxed with default taxes."""

    def __init__(self, db: Session):
        self.db = db
        self.tax_repo = TaxRepository(db)

    def generate(
        self,
        subscription: Subscription,
        plan: Plan,
        from_date: date,
        to_date: date,
    ) -> list[FeeCreate]:
        amount_cents = int(plan.amount_cents or 0)
        taxes = self.tax_repo.get_applied_by_default()
        return [
            FeeCreate(
                subscription_id=UUID(str(subscription.id)),
                kind=FeeKind.SUBSCRIPTION,
                amount_cents=amount_cents,
                description=f"{plan.name} ({from_date.isoformat()} - {to_date.isoformat()})",
                applied_taxes=allocate_taxes(amount_cents, taxes),
            )
        ]
