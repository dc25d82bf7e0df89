"""InvoiceNumberSequence model: one counter row per invoice number prefix and day."""

from sqlalchemy import Column, DateTime, Integer, String, func

from billrun.core.database import Base


class InvoiceNumberSequence(Base):
    __tablename__ = "invoice_number_sequences"

    # <prefix>-YYYYMMDD
    name = Column(String(50), primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
