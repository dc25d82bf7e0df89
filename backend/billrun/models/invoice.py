import uuid
from enum import Enum

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    func,
)

from billrun.core.database import Base
from billrun.models.shared import UUIDType


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    FINALIZED = "finalized"


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint(
            "subscription_id", "from_date", "to_date", name="uq_invoices_subscription_period"
        ),
    )

    id = Column(UUIDType, primary_key=True, default=lambda: uuid.uuid4())
    invoice_number = Column(String(50), unique=True, index=True, nullable=False)
    subscription_id = Column(
        UUIDType, ForeignKey("subscriptions.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    status = Column(String(20), nullable=False, default=InvoiceStatus.DRAFT.value)

    # Billing period, both bounds inclusive
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=False)
    issuing_date = Column(Date, nullable=False)

    fees_amount_cents = Column(Integer, nullable=False, default=0)
    taxes_amount_cents = Column(Integer, nullable=False, default=0)
    total_amount_cents = Column(Integer, nullable=False, default=0)
    # Effective rate in percent
    taxes_rate = Column(Numeric(5, 2), nullable=False, default=0)

    currency = Column(String(3), nullable=False, default="USD")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
