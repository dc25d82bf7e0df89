"""FeeAppliedTax model: the amount one tax contributes to one fee."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, UniqueConstraint, func

from billrun.core.database import Base
from billrun.models.shared import UUIDType, generate_uuid


class FeeAppliedTax(Base):
    __tablename__ = "fee_applied_taxes"
    __table_args__ = (UniqueConstraint("fee_id", "tax_id", name="uq_fee_applied_taxes_fee_tax"),)

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    fee_id = Column(
        UUIDType, ForeignKey("fees.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    tax_id = Column(
        UUIDType, ForeignKey("taxes.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)
    tax_rate = Column(Numeric(5, 2), nullable=False)
    amount_cents = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
