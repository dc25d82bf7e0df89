"""Tax model for configurable tax rates."""

from sqlalchemy import Boolean, Column, DateTime, Numeric, String, Text, func

from billrun.core.database import Base
from billrun.models.shared import UUIDType, generate_uuid


class Tax(Base):
    """Tax model. ``rate`` is a percentage, e.g. 20 for 20%."""

    __tablename__ = "taxes"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    code = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    rate = Column(Numeric(5, 2), nullable=False)
    description = Column(Text, nullable=True)
    applied_by_default = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
