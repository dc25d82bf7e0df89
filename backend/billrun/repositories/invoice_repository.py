from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Query, Session

from billrun.core.config import settings
from billrun.models.invoice import Invoice, InvoiceStatus
from billrun.models.invoice_applied_tax import InvoiceAppliedTax
from billrun.models.invoice_number_sequence import InvoiceNumberSequence

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class InvoiceRepository:
    """Repository for Invoice and InvoiceAppliedTax models.

    Write methods only flush; the invoice creation transaction commits.
    """

    def __init__(self, db: Session):
        self.db = db

    def _next_sequence_value(self, name: str) -> int:
        """Increment the named counter row and return its new value.

        The row stays locked until the caller's transaction ends; invoices
        created concurrently on the same day get consecutive values.
        """
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Invoice numbering is not supported on {dialect}")

        stmt = (
            insert(InvoiceNumberSequence)
            .values(name=name, last_value=1)
            .on_conflict_do_update(
                index_elements=[InvoiceNumberSequence.name],
                set_={
                    "last_value": InvoiceNumberSequence.last_value + 1,
                    "updated_at": func.now(),
                },
            )
            .returning(InvoiceNumberSequence.last_value)
        )
        return int(self.db.execute(stmt).scalar_one())

    def _generate_invoice_number(self) -> str:
        """Generate a unique invoice number: PREFIX-YYYYMMDD-NNNN."""
        today = datetime.now(UTC).strftime("%Y%m%d")
        name = f"{settings.INVOICE_NUMBER_PREFIX}-{today}"
        return f"{name}-{self._next_sequence_value(name):04d}"

    def _filtered(
        self,
        subscription_id: UUID | None = None,
        status: InvoiceStatus | None = None,
    ) -> Query[Invoice]:
        query = self.db.query(Invoice)
        if subscription_id:
            query = query.filter(Invoice.subscription_id == subscription_id)
        if status:
            query = query.filter(Invoice.status == status.value)
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        subscription_id: UUID | None = None,
        status: InvoiceStatus | None = None,
    ) -> list[Invoice]:
        query = self._filtered(subscription_id, status)
        return query.order_by(Invoice.created_at.desc()).offset(skip).limit(limit).all()

    def count(
        self,
        subscription_id: UUID | None = None,
        status: InvoiceStatus | None = None,
    ) -> int:
        return self._filtered(subscription_id, status).count()

    def get_by_id(self, invoice_id: UUID) -> Invoice | None:
        return self.db.query(Invoice).filter(Invoice.id == invoice_id).first()

    def get_by_period(
        self, subscription_id: UUID, from_date: date, to_date: date
    ) -> Invoice | None:
        return (
            self.db.query(Invoice)
            .filter(
                Invoice.subscription_id == subscription_id,
                Invoice.from_date == from_date,
                Invoice.to_date == to_date,
            )
            .first()
        )

    def create(
        self,
        subscription_id: UUID,
        from_date: date,
        to_date: date,
        issuing_date: date,
        currency: str,
    ) -> Invoice:
        invoice = Invoice(
            invoice_number=self._generate_invoice_number(),
            subscription_id=subscription_id,
            status=InvoiceStatus.DRAFT.value,
            from_date=from_date,
            to_date=to_date,
            issuing_date=issuing_date,
            currency=currency,
        )
        self.db.add(invoice)
        self.db.flush()
        return invoice

    def finalize(self, invoice: Invoice) -> Invoice:
        invoice.status = InvoiceStatus.FINALIZED.value  # type: ignore[assignment]
        self.db.flush()
        return invoice

    def get_applied_taxes(self, invoice_id: UUID) -> list[InvoiceAppliedTax]:
        return (
            self.db.query(InvoiceAppliedTax)
            .filter(InvoiceAppliedTax.invoice_id == invoice_id)
            .order_by(InvoiceAppliedTax.position.asc())
            .all()
        )

    def replace_applied_taxes(
        self, invoice_id: UUID, applied_taxes: list[InvoiceAppliedTax]
    ) -> list[InvoiceAppliedTax]:
        """Swap the invoice's applied tax rows for the given ones."""
        self.db.query(InvoiceAppliedTax).filter(
            InvoiceAppliedTax.invoice_id == invoice_id
        ).delete(synchronize_session="fetch")
        for position, applied in enumerate(applied_taxes):
            applied.invoice_id = invoice_id
            applied.position = position  # type: ignore[assignment]
            self.db.add(applied)
        self.db.flush()
        return applied_taxes
