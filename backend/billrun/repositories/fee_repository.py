"""Fee repository for data access.

Write methods only flush; the invoice creation transaction commits.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from billrun.models.fee import Fee
from billrun.models.fee_applied_tax import FeeAppliedTax
from billrun.schemas.fee import FeeCreate


class FeeRepository:
    """Repository for Fee and FeeAppliedTax models."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_invoice_id(self, invoice_id: UUID) -> list[Fee]:
        """Get all fees for an invoice in creation order."""
        return (
            self.db.query(Fee)
            .filter(Fee.invoice_id == invoice_id)
            .order_by(Fee.position.asc())
            .all()
        )

    def get_applied_taxes_by_invoice_id(self, invoice_id: UUID) -> list[FeeAppliedTax]:
        """Get the tax allocations of every fee on an invoice.

        Ordered by fee creation order, then by allocation order within each fee.
        """
        return (
            self.db.query(FeeAppliedTax)
            .join(Fee, Fee.id == FeeAppliedTax.fee_id)
            .filter(Fee.invoice_id == invoice_id)
            .order_by(Fee.position.asc(), FeeAppliedTax.position.asc())
            .all()
        )

    def create_bulk(self, invoice_id: UUID, fees: list[FeeCreate]) -> list[Fee]:
        """Create fees and their tax allocations for an invoice."""
        created: list[Fee] = []
        for position, data in enumerate(fees):
            taxes_amount = sum(applied.amount_cents for applied in data.applied_taxes)
            taxes_rate = sum((applied.tax_rate for applied in data.applied_taxes), Decimal("0"))
            fee = Fee(
                invoice_id=invoice_id,
                subscription_id=data.subscription_id,
                position=position,
                kind=data.kind.value,
                amount_cents=data.amount_cents,
                taxes_amount_cents=taxes_amount,
                taxes_rate=taxes_rate,
                description=data.description,
            )
            self.db.add(fee)
            self.db.flush()

            for tax_position, applied in enumerate(data.applied_taxes):
                self.db.add(
                    FeeAppliedTax(
                        fee_id=fee.id,
                        tax_id=applied.tax_id,
                        position=tax_position,
                        tax_rate=applied.tax_rate,
                        amount_cents=applied.amount_cents,
                    )
                )
            created.append(fee)

        self.db.flush()
        return created
