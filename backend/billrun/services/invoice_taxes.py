"""Aggregation of fee-level tax allocations into invoice-level tax totals."""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from billrun.models.invoice import Invoice
from billrun.models.invoice_applied_tax import InvoiceAppliedTax
from billrun.repositories.fee_repository import FeeRepository
from billrun.repositories.invoice_repository import InvoiceRepository
from billrun.repositories.tax_repository import TaxRepository
from billrun.services.errors import TaxIntegrityError

_RATE_PRECISION = Decimal("0.01")


@dataclass(frozen=True)
class FeeTaxAllocation:
    """The amount one tax contributes to one fee."""

    fee_id: UUID
    tax_id: UUID
    tax_rate: Decimal
    amount_cents: int


@dataclass(frozen=True)
class TaxSnapshot:
    """Tax fields copied onto the invoice."""

    tax_id: UUID
    code: str
    name: str
    description: str | None
    rate: Decimal


@dataclass(frozen=True)
class InvoiceTaxLine:
    tax: TaxSnapshot
    amount_cents: int


@dataclass
class InvoiceTaxTotals:
    lines: list[InvoiceTaxLine] = field(default_factory=list)
    taxes_amount_cents: int = 0
    taxes_rate: Decimal = Decimal("0")


@dataclass
class InvoiceTaxResult:
    """Result of applying taxes to an invoice."""

    applied_taxes: list[InvoiceAppliedTax]
    taxes_amount_cents: int
    taxes_rate: Decimal


def _quantize_rate(rate: Decimal) -> Decimal:
    return rate.quantize(_RATE_PRECISION, rounding=ROUND_HALF_UP)


def compute_invoice_taxes(
    fee_ids: list[UUID],
    fees_amount_cents: int,
    allocations: list[FeeTaxAllocation],
    taxes: dict[UUID, TaxSnapshot],
) -> InvoiceTaxTotals:
    """Collapse fee tax allocations into one line per tax.

    Args:
        fee_ids: Every fee on the invoice, in creation order.
        fees_amount_cents: Pre-tax total of the invoice.
        allocations: Tax allocations, ordered by fee then by allocation.
        taxes: Snapshots of the taxes referenced by ``allocations``.

    Returns:
        Lines in first-encounter order, the tax total, and the effective rate.

    Raises:
        TaxIntegrityError: An allocation references an unknown tax.
    """
    amounts: dict[UUID, int] = {}
    fee_rates: dict[UUID, Decimal] = {fee_id: Decimal("0") for fee_id in fee_ids}

    for allocation in allocations:
        if allocation.tax_id not in taxes:
            raise TaxIntegrityError(
                f"Fee {allocation.fee_id} references unknown tax {allocation.tax_id}"
            )
        amounts[allocation.tax_id] = amounts.get(allocation.tax_id, 0) + allocation.amount_cents
        fee_rates[allocation.fee_id] = fee_rates.get(allocation.fee_id, Decimal("0")) + Decimal(
            str(allocation.tax_rate)
        )

    lines = [
        InvoiceTaxLine(tax=taxes[tax_id], amount_cents=amount) for tax_id, amount in amounts.items()
    ]
    taxes_amount_cents = sum(line.amount_cents for line in lines)

    if fees_amount_cents != 0:
        taxes_rate = Decimal(taxes_amount_cents) / Decimal(fees_amount_cents) * 100
    elif fee_rates:
        # Nothing was charged: report the plain mean of each fee's nominal rate
        taxes_rate = sum(fee_rates.values(), Decimal("0")) / len(fee_rates)
    else:
        taxes_rate = Decimal("0")

    return InvoiceTaxTotals(
        lines=lines,
        taxes_amount_cents=taxes_amount_cents,
        taxes_rate=_quantize_rate(taxes_rate),
    )


class InvoiceTaxService:
    """Apply aggregated taxes to a persisted invoice.

    Only flushes; the caller owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db
        self.fee_repo = FeeRepository(db)
        self.invoice_repo = InvoiceRepository(db)
        self.tax_repo = TaxRepository(db)

    def apply(self, invoice: Invoice) -> InvoiceTaxResult:
        invoice_id = UUID(str(invoice.id))
        fees = self.fee_repo.get_by_invoice_id(invoice_id)
        fee_allocations = self.fee_repo.get_applied_taxes_by_invoice_id(invoice_id)

        allocations = [
            FeeTaxAllocation(
                fee_id=UUID(str(applied.fee_id)),
                tax_id=UUID(str(applied.tax_id)),
                tax_rate=Decimal(str(applied.tax_rate)),
                amount_cents=int(applied.amount_cents),
            )
            for applied in fee_allocations
        ]
        taxes = self._snapshot_taxes(list(dict.fromkeys(a.tax_id for a in allocations)))

        totals = compute_invoice_taxes(
            fee_ids=[UUID(str(fee.id)) for fee in fees],
            fees_amount_cents=int(invoice.fees_amount_cents or 0),
            allocations=allocations,
            taxes=taxes,
        )

        applied_taxes = self.invoice_repo.replace_applied_taxes(
            invoice_id,
            [self._build_applied_tax(line, str(invoice.currency)) for line in totals.lines],
        )

        invoice.taxes_amount_cents = totals.taxes_amount_cents  # type: ignore[assignment]
        invoice.taxes_rate = totals.taxes_rate  # type: ignore[assignment]
        fees_amount_cents = int(invoice.fees_amount_cents or 0)
        invoice.total_amount_cents = fees_amount_cents + totals.taxes_amount_cents  # type: ignore[assignment]
        self.db.flush()

        return InvoiceTaxResult(
            applied_taxes=applied_taxes,
            taxes_amount_cents=totals.taxes_amount_cents,
            taxes_rate=totals.taxes_rate,
        )

    def _snapshot_taxes(self, tax_ids: list[UUID]) -> dict[UUID, TaxSnapshot]:
        snapshots: dict[UUID, TaxSnapshot] = {}
        for tax_id, tax in self.tax_repo.get_by_ids(tax_ids).items():
            snapshots[UUID(str(tax_id))] = TaxSnapshot(
                tax_id=UUID(str(tax.id)),
                code=str(tax.code),
                name=str(tax.name),
                description=tax.description,  # type: ignore[arg-type]
                rate=Decimal(str(tax.rate)),
            )
        return snapshots

    @staticmethod
    def _build_applied_tax(line: InvoiceTaxLine, currency: str) -> InvoiceAppliedTax:
        return InvoiceAppliedTax(
            tax_id=line.tax.tax_id,
            tax_code=line.tax.code,
            tax_name=line.tax.name,
            tax_description=line.tax.description,
            tax_rate=line.tax.rate,
            amount_cents=line.amount_cents,
            amount_currency=currency,
        )
