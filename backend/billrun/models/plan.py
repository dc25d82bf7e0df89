import uuid
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, func

from billrun.core.database import Base
from billrun.models.shared import UUIDType


class PlanInterval(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class PlanFrequency(str, Enum):
    """Anchoring policy for billing periods."""

    BEGINNING_OF_PERIOD = "beginning_of_period"
    SUBSCRIPTION_DATE = "subscription_date"


class Plan(Base):
    __tablename__ = "plans"

    id = Column(UUIDType, primary_key=True, default=lambda: uuid.uuid4())
    code = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    interval = Column(String(20), nullable=False, default=PlanInterval.MONTHLY.value)
    frequency = Column(
        String(30), nullable=False, default=PlanFrequency.BEGINNING_OF_PERIOD.value
    )
    pay_in_advance = Column(Boolean, nullable=False, default=False)
    amount_cents = Column(Integer, nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
