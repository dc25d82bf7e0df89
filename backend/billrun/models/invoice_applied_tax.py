"""InvoiceAppliedTax model: per-tax totals of an invoice.

Tax fields are copied from the tax when the row is written, so later edits to
the tax never change an issued invoice.
"""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)

from billrun.core.database import Base
from billrun.models.shared import UUIDType, generate_uuid


class InvoiceAppliedTax(Base):
    __tablename__ = "invoice_applied_taxes"
    __table_args__ = (
        UniqueConstraint("invoice_id", "tax_id", name="uq_invoice_applied_taxes_invoice_tax"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    invoice_id = Column(
        UUIDType, ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    tax_id = Column(
        UUIDType, ForeignKey("taxes.id", ondelete="SET NULL"), nullable=True, index=True
    )
    position = Column(Integer, nullable=False, default=0)

    tax_code = Column(String(255), nullable=False)
    tax_name = Column(String(255), nullable=False)
    tax_description = Column(Text, nullable=True)
    tax_rate = Column(Numeric(5, 2), nullable=False)

    amount_cents = Column(Integer, nullable=False, default=0)
    amount_currency = Column(String(3), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
