"""Fee model for tracking invoice line items as first-class entities."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, func

from billrun.core.database import Base
from billrun.models.shared import UUIDType, generate_uuid


class FeeKind(str, Enum):
    """Fee kind enum."""

    SUBSCRIPTION = "subscription"
    CHARGE = "charge"
    ONE_TIME = "one_time"


class Fee(Base):
    """Fee model - first-class invoice line item entity."""

    __tablename__ = "fees"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    invoice_id = Column(
        UUIDType, ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    subscription_id = Column(
        UUIDType, ForeignKey("subscriptions.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    # Creation order within the invoice
    position = Column(Integer, nullable=False, default=0)

    kind = Column(String(20), nullable=False, default=FeeKind.SUBSCRIPTION.value, index=True)

    amount_cents = Column(Integer, nullable=False, default=0)
    taxes_amount_cents = Column(Integer, nullable=False, default=0)
    taxes_rate = Column(Numeric(5, 2), nullable=False, default=0)

    description = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
